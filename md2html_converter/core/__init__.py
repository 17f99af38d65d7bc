"""Core sniffing, resource resolution, planning and assembly modules.

WHY: The core package holds the parts of the converter with real
invariants (document balance, escaping, asset precedence) so they can be
tested without the Markdown renderer or the CLI.

HOW: models.py defines the data, sniffer.py and resources.py decide what
goes into the page, plan.py orders it, assembler.py joins and minifies it,
paths.py decides where it is written.

RULES:
- No module here renders Markdown or parses command-line arguments
- assembler.py is the only module that produces HTML text
"""
