"""End-to-end tests for the command-line interface.

WHY: The CLI is the product. These tests run main() with explicit argv
exactly as a user would, and check the file on disk and the exit status.

RULES:
- main() is called in-process; failures surface as SystemExit
- Errors are printed to stderr as "Error: ..."
"""

import logging

import pytest

from md2html_converter import __version__, cli
from md2html_converter.cli import build_parser, main, options_from_args
from md2html_converter.core.models import AssetSlot
from md2html_converter.core.resources import load_embedded


def _run_failing(argv):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    return excinfo.value.code


class TestParser:

    def test_defaults(self):
        args = build_parser().parse_args(["notes.md"])
        options = options_from_args(args)
        assert options.html_path is None
        assert options.title is None
        assert not options.force
        assert options.safe and options.highlight and options.mathjax and options.cjk_fonts

    def test_overrides_map_to_slots(self):
        args = build_parser().parse_args([
            "notes.md", "--css-path", "a.css", "--highlight-js-path", "h.js",
            "--highlight-css-path", "h.css", "--mathjax-js-path", "m.js",
        ])
        overrides = options_from_args(args).overrides
        assert {slot: str(path) for slot, path in overrides.items()} == {
            AssetSlot.BASE_CSS: "a.css",
            AssetSlot.HIGHLIGHT_JS: "h.js",
            AssetSlot.HIGHLIGHT_CSS: "h.css",
            AssetSlot.MATHJAX_JS: "m.js",
        }

    def test_switches(self):
        args = build_parser().parse_args(
            ["notes.md", "--no-safe", "--no-highlight", "--no-mathjax", "--no-cjk-fonts", "-f"]
        )
        options = options_from_args(args)
        assert options.force
        assert not (options.safe or options.highlight or options.mathjax or options.cjk_fonts)

    def test_version(self, capsys):
        assert _run_failing(["--version"]) == 0
        assert __version__ in capsys.readouterr().out

    def test_mathjax_help_mentions_offline_build(self):
        assert "offline" in build_parser().format_help()


class TestLogLevel:

    def test_verbose_is_debug(self):
        assert cli._log_level(True) == logging.DEBUG

    @pytest.mark.parametrize("name, expected", [
        ("INFO", logging.INFO),
        ("ERROR", logging.ERROR),
        ("BASIC_FORMAT", logging.WARNING),
        ("NOPE", logging.WARNING),
    ])
    def test_level_from_environment(self, monkeypatch, name, expected):
        monkeypatch.setattr(cli, "LOG_LEVEL", name)
        assert cli._log_level(False) == expected


class TestConversion:

    def test_default_output(self, write_markdown, capsys):
        source = write_markdown()
        main([str(source)])
        html = source.with_suffix(".html").read_bytes()
        assert b"<title>notes</title>" in html
        assert load_embedded(AssetSlot.BASE_CSS).encode() in html
        assert load_embedded(AssetSlot.HIGHLIGHT_JS).encode() not in html
        assert load_embedded(AssetSlot.MATHJAX_CONFIG_JS).encode() not in html
        assert "Converted" in capsys.readouterr().err

    def test_explicit_output_and_title(self, write_markdown, tmp_path):
        source = write_markdown()
        target = tmp_path / "page.html"
        main([str(source), "-o", str(target), "-t", "Hello & Bye"])
        assert b"<title>Hello &amp; Bye</title>" in target.read_bytes()

    def test_css_override(self, write_markdown, write_file):
        source = write_markdown()
        css = write_file("mine.css", "body{color:red}")
        main([str(source), "--css-path", str(css)])
        html = source.with_suffix(".html").read_bytes()
        assert b"<style>body{color:red}</style>" in html
        assert load_embedded(AssetSlot.BASE_CSS).encode() not in html

    def test_hostile_css_override_stays_in_style(self, write_markdown, write_file):
        source = write_markdown()
        css = write_file("evil.css", "a{}</style><script>alert(1)</script>")
        main([str(source), "--css-path", str(css), "--no-cjk-fonts"])
        html = source.with_suffix(".html").read_bytes()
        assert b"alert(1)" in html
        assert b"<script>alert(1)" not in html

    def test_code_block_bundles_highlighter(self, write_markdown, code_markdown):
        source = write_markdown(code_markdown)
        main([str(source)])
        html = source.with_suffix(".html").read_bytes()
        assert load_embedded(AssetSlot.HIGHLIGHT_JS).encode() in html
        assert load_embedded(AssetSlot.HIGHLIGHT_CODE_JS).encode() in html

    def test_math_bundles_mathjax(self, write_markdown, math_markdown):
        source = write_markdown(math_markdown)
        main([str(source)])
        assert load_embedded(AssetSlot.MATHJAX_CONFIG_JS).encode() in source.with_suffix(".html").read_bytes()

    def test_no_cjk_fonts(self, write_markdown):
        source = write_markdown()
        main([str(source), "--no-cjk-fonts"])
        html = source.with_suffix(".html").read_bytes()
        assert load_embedded(AssetSlot.WEBFONT_JS).encode() not in html
        assert load_embedded(AssetSlot.CJK_FONT_CSS).encode() not in html


class TestFailures:

    def test_existing_output_without_force(self, write_markdown, capsys):
        source = write_markdown()
        main([str(source)])
        target = source.with_suffix(".html")
        before = target.read_bytes()
        source.write_text("# Changed\n", encoding="utf-8")

        assert _run_failing([str(source)]) == 1
        assert target.read_bytes() == before
        assert "Error:" in capsys.readouterr().err

    def test_force_overwrites(self, write_markdown):
        source = write_markdown()
        main([str(source)])
        source.write_text("# Changed\n", encoding="utf-8")
        main([str(source), "--force"])
        assert b"<h1>Changed</h1>" in source.with_suffix(".html").read_bytes()

    def test_unreadable_override(self, write_markdown, tmp_path):
        source = write_markdown()
        assert _run_failing([str(source), "--css-path", str(tmp_path / "missing.css")]) == 1
        assert not source.with_suffix(".html").exists()

    def test_not_markdown(self, write_file, capsys):
        path = write_file("notes.txt", "# Hi\n")
        assert _run_failing([str(path)]) == 1
        assert "not a Markdown file" in capsys.readouterr().err

    def test_missing_input(self, tmp_path):
        assert _run_failing([str(tmp_path / "missing.md")]) == 1
