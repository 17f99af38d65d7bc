"""Markdown to HTML Converter: one Markdown file in, one self-contained HTML file out.

WHY: A Markdown document is easiest to share as a single HTML page that
opens anywhere without a network connection. This package renders the
Markdown, decides which optional assets the page needs (syntax
highlighting, math, CJK fonts) and inlines them into one minified document.

HOW: Four-stage pipeline: resolve paths, render (Markdown adapter),
sniff + resolve assets, assemble (core HTMLAssembler). Each stage is
independently testable.

RULES:
- The assembler is the only place HTML text is joined together
- Override files are untrusted and always escaped for their context
- The output file is written once, after assembly has fully succeeded
"""

__version__ = "0.1.0"
