"""Shared test fixtures for the md2html_converter test suite.

WHY: Several test modules need the same small Markdown documents, rendered
fragments and a quick way to lay out input files on disk. Centralizing
them keeps the expected behaviour in one place.

HOW: Plain constants for the sample documents, plus pytest fixtures that
write Markdown or override files into tmp_path and build ConversionOptions.

RULES:
- All file I/O goes through tmp_path (no shared state between tests)
- Sample documents are exposed as fixtures, not imported by test modules
"""

from pathlib import Path

import pytest

from md2html_converter.core.models import ConversionOptions

HEADING_ONLY_MARKDOWN = "# Hi\n"

CODE_MARKDOWN = "# Code\n\n```python\ndef f(x):\n    return  x  +  1\n```\n"

MATH_MARKDOWN = "# Math\n\nEuler: #{{ e^{i\\pi} + 1 = 0 }}#\n"


@pytest.fixture
def write_markdown(tmp_path):
    """Factory: write a Markdown file into tmp_path and return its path."""

    def _write(text: str = HEADING_ONLY_MARKDOWN, name: str = "notes.md") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_file(tmp_path):
    """Factory: write an arbitrary text or bytes file into tmp_path."""

    def _write(name: str, content) -> Path:
        path = tmp_path / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_options(write_markdown):
    """Factory: ConversionOptions for a freshly written Markdown file."""

    def _make(text: str = HEADING_ONLY_MARKDOWN, **kwargs) -> ConversionOptions:
        return ConversionOptions(markdown_path=write_markdown(text), **kwargs)

    return _make


@pytest.fixture
def code_markdown():
    """A document with one fenced Python block."""
    return CODE_MARKDOWN


@pytest.fixture
def math_markdown():
    """A document with one inline formula."""
    return MATH_MARKDOWN
