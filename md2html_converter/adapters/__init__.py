"""Adapter modules for the external libraries the converter builds on.

WHY: The Markdown engine has its own configuration model and output quirks.
Keeping it behind one adapter lets the core treat the rendered fragment as
an opaque, trusted string.

RULES:
- Adapters do no file I/O
- Each adapter lives in its own module under this package
"""

from md2html_converter.adapters.markdown_adapter import render_markdown

__all__ = ["render_markdown"]
