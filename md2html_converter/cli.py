"""Command-line interface for the Markdown to HTML Converter.

WHY: Users need a single command that turns a Markdown file into one HTML
file they can mail, archive or open offline. The CLI maps flags onto a
ConversionOptions and runs the pipeline.

HOW: Uses argparse to accept the Markdown path, output path, title,
overwrite permission, feature switches and asset override paths. Defaults
for the switches and overrides come from the environment (.env) via
config.py. Status messages go to stderr; errors are printed as
"Error: ..." on stderr with exit status 1.

RULES:
- Positional argument: the Markdown file
- -o/--html-path, -t/--title, -f/--force
- --no-safe, --no-highlight, --no-mathjax, --no-cjk-fonts
- --css-path, --highlight-js-path, --highlight-css-path, --mathjax-js-path
- Exit 0 on success, 1 on any ConversionError, 130 on Ctrl-C
- Status output goes to stderr (not stdout)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from md2html_converter import __version__
from md2html_converter.config import (
    APP_NAME,
    DEFAULT_CSS_PATH,
    DEFAULT_HIGHLIGHT_CSS_PATH,
    DEFAULT_HIGHLIGHT_JS_PATH,
    DEFAULT_MATHJAX_JS_PATH,
    DEFAULT_NO_CJK_FONTS,
    DEFAULT_NO_HIGHLIGHT,
    DEFAULT_NO_MATHJAX,
    DEFAULT_NO_SAFE,
    LOG_LEVEL,
)
from md2html_converter.core.models import AssetSlot, ConversionOptions
from md2html_converter.errors import ConversionError
from md2html_converter.pipeline import convert

_EXAMPLES = """\
examples:
  md2html-converter /path/to/file.md                          # /path/to/file.html, titled "file"
  md2html-converter /path/to/file.md -o /path/to/output.html  # /path/to/output.html, titled "file"
  md2html-converter /path/to/file.md -t 'Hello World!'        # /path/to/file.html, titled "Hello World!"
"""


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _log_level(verbose: bool) -> int:
    """DEBUG with --verbose, else MD2HTML_LOG_LEVEL; unknown names fall back to WARNING."""
    if verbose:
        return logging.DEBUG
    level = logging.getLevelName(LOG_LEVEL)
    return level if isinstance(level, int) else logging.WARNING


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=_log_level(verbose),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without running the pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="md2html-converter",
        description="Convert a Markdown file to a single HTML file with built-in CSS and JS.",
        epilog=_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "markdown_path",
        help="Path of your Markdown file.",
    )
    parser.add_argument(
        "-o", "--html-path",
        default=None,
        help="Path of your HTML file (default: next to the Markdown file, with .html).",
    )
    parser.add_argument(
        "-t", "--title",
        default=None,
        help="Title of your HTML file (default: the Markdown file name without extension).",
    )
    parser.add_argument(
        "-f", "--force",
        action="store_true",
        help="Overwrite the HTML file if it exists.",
    )

    parser.add_argument(
        "--no-safe",
        action="store_true",
        default=DEFAULT_NO_SAFE,
        help="Allow raw HTML and dangerous URLs.",
    )
    parser.add_argument(
        "--no-highlight",
        action="store_true",
        default=DEFAULT_NO_HIGHLIGHT,
        help="Do not bundle the syntax highlighter.",
    )
    parser.add_argument(
        "--no-mathjax",
        action="store_true",
        default=DEFAULT_NO_MATHJAX,
        help="Do not bundle MathJax.",
    )
    parser.add_argument(
        "--no-cjk-fonts",
        action="store_true",
        default=DEFAULT_NO_CJK_FONTS,
        help="Do not bundle the CJK fonts.",
    )

    parser.add_argument(
        "--css-path",
        default=DEFAULT_CSS_PATH,
        help="Path of your custom CSS file.",
    )
    parser.add_argument(
        "--highlight-js-path",
        default=DEFAULT_HIGHLIGHT_JS_PATH,
        help="Path of your custom highlight.js file.",
    )
    parser.add_argument(
        "--highlight-css-path",
        default=DEFAULT_HIGHLIGHT_CSS_PATH,
        help="Path of your custom CSS file for highlighted code blocks.",
    )
    parser.add_argument(
        "--mathjax-js-path",
        default=DEFAULT_MATHJAX_JS_PATH,
        help=(
            "Path of your custom single-file MathJax build. Without it, pages "
            "with math load MathJax from a CDN when viewed; pass a local build "
            "for fully offline output."
        ),
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every step to stderr.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="{} {}".format(APP_NAME, __version__),
    )

    return parser


def options_from_args(args: argparse.Namespace) -> ConversionOptions:
    """Map parsed arguments onto ConversionOptions."""
    override_args = (
        (AssetSlot.BASE_CSS, args.css_path),
        (AssetSlot.HIGHLIGHT_JS, args.highlight_js_path),
        (AssetSlot.HIGHLIGHT_CSS, args.highlight_css_path),
        (AssetSlot.MATHJAX_JS, args.mathjax_js_path),
    )
    overrides = {slot: Path(path) for slot, path in override_args if path}

    return ConversionOptions(
        markdown_path=Path(args.markdown_path),
        html_path=Path(args.html_path) if args.html_path else None,
        title=args.title,
        force=args.force,
        safe=not args.no_safe,
        highlight=not args.no_highlight,
        mathjax=not args.no_mathjax,
        cjk_fonts=not args.no_cjk_fonts,
        overrides=overrides,
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        document = convert(options_from_args(args))
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except ConversionError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    _status("Converted {} -> {}".format(args.markdown_path, document.output_path))


if __name__ == "__main__":
    main()
