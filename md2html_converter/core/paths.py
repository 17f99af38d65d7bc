"""Title and path policy: where the output goes and what the page is called.

WHY: The common case is "convert notes.md into notes.html next to it,
titled notes". Users can override both, but must never lose an existing
file by accident.

HOW: resolve_paths() validates the input, derives defaults and checks the
output location before any reading or rendering happens. write_output()
performs the single write at the end of a successful conversion.

RULES:
- Input must exist, must not be a directory, and must end in .md or
  .markdown (case-insensitive) → otherwise InputError
- Default output: {input parent}/{input stem}.html
- Default title: the input file stem
- Existing output that is not a plain file → OutputExistsError (even with force)
- Existing output without force → OutputExistsError
- No filesystem change happens in resolve_paths()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from md2html_converter.config import HTML_EXTENSION, MARKDOWN_EXTENSIONS
from md2html_converter.errors import FileIOError, InputError, OutputExistsError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionPaths:
    markdown_path: Path
    html_path: Path
    title: str


def resolve_paths(
    markdown_path: str | Path,
    html_path: Optional[str | Path] = None,
    title: Optional[str] = None,
    force: bool = False,
) -> ConversionPaths:
    """Validate the input and derive the output path and title.

    Args:
        markdown_path: The Markdown source file.
        html_path: Explicit output path, or None for the sibling .html file.
        title: Explicit title, or None for the input file stem.
        force: Allow replacing an existing output file.

    Returns:
        ConversionPaths with the resolved values.

    Raises:
        InputError: The input is missing, a directory, or not Markdown.
        OutputExistsError: The output exists and may not be replaced.
    """
    source = Path(markdown_path)

    if source.is_dir():
        raise InputError("`{}` is a directory!".format(source.absolute()), source)
    if not source.exists():
        raise InputError("`{}` does not exist.".format(source.absolute()), source)
    if source.suffix.lower() not in MARKDOWN_EXTENSIONS:
        raise InputError("`{}` is not a Markdown file.".format(source.absolute()), source)

    stem = source.stem

    if html_path is not None:
        target = Path(html_path)
    else:
        target = source.parent / "{}{}".format(stem, HTML_EXTENSION)

    if target.exists() or target.is_symlink():
        if not target.is_file():
            raise OutputExistsError(
                "`{}` exists and it is not a file.".format(target.absolute()), target
            )
        if not force:
            raise OutputExistsError(
                "`{}` exists! Use --force to overwrite it.".format(target.absolute()), target
            )
        logger.debug("Output %s exists and will be overwritten", target)

    return ConversionPaths(
        markdown_path=source,
        html_path=target,
        title=title if title is not None else stem,
    )


def write_output(path: Path, data: bytes) -> None:
    """Write the finished document in one call.

    Raises:
        FileIOError: The file cannot be written.
    """
    try:
        path.write_bytes(data)
    except OSError as exc:
        raise FileIOError(
            "Cannot write `{}`: {}".format(path, exc.strerror or exc), path
        ) from exc
