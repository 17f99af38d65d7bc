"""The conversion pipeline: one Markdown file in, one HTML file out.

WHY: The CLI, tests and any embedding program need the same sequence of
steps with the same guarantees. Keeping it out of cli.py makes it callable
without argparse and testable without subprocesses.

HOW: convert() runs, in order: path policy → read Markdown → render →
sniff → resolve assets for the gated slots → build the emission plan →
assemble → write. Every step blocks on the previous one.

RULES:
- Nothing is written unless every earlier step succeeded
- The output file is written exactly once, with the complete buffer
- Override files are read only for slots that are actually emitted
- Errors propagate as ConversionError subclasses; nothing is retried
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Optional

from md2html_converter.adapters.markdown_adapter import render_markdown
from md2html_converter.core.assembler import assemble
from md2html_converter.core.models import ConversionOptions, Document
from md2html_converter.core.paths import resolve_paths, write_output
from md2html_converter.core.plan import Gates, build_plan, required_slots
from md2html_converter.core.resources import read_text_file, resolve_assets
from md2html_converter.core.sniffer import sniff

logger = logging.getLogger(__name__)


def build_document(
    title: str,
    source: str,
    options: ConversionOptions,
) -> Document:
    """Render and assemble a document in memory (no path checks, no writing).

    Args:
        title: The document title.
        source: The Markdown source text.
        options: Flags and overrides for this conversion.

    Returns:
        Document with the minified HTML; output_path is None.
    """
    fragment = render_markdown(source, safe=options.safe)
    sniffed = sniff(fragment, no_highlight=not options.highlight, no_mathjax=not options.mathjax)
    gates = Gates(
        include_fonts=options.cjk_fonts,
        has_code=sniffed.has_code,
        has_math=sniffed.has_math,
    )
    logger.info(
        "Bundles: fonts=%s code=%s math=%s", gates.include_fonts, gates.has_code, gates.has_math
    )

    slots = required_slots(gates)
    sources = resolve_assets(slots, options.overrides)
    html = assemble(build_plan(title, fragment, gates, sources))

    return Document(
        title=title,
        has_code=gates.has_code,
        has_math=gates.has_math,
        include_fonts=gates.include_fonts,
        slots=slots,
        html=html,
    )


def convert(options: ConversionOptions, on_status: Optional[Callable[[str], None]] = None) -> Document:
    """Convert one Markdown file into one self-contained HTML file.

    Args:
        options: Paths, flags and overrides for this conversion.
        on_status: Optional callback receiving short progress messages.

    Returns:
        The written Document (output_path set).

    Raises:
        InputError, OutputExistsError, FileIOError, EncodingError,
        StructuralError, UnterminatedDocumentError.
    """
    def _report(message: str) -> None:
        logger.info(message)
        if on_status is not None:
            on_status(message)

    paths = resolve_paths(
        options.markdown_path,
        html_path=options.html_path,
        title=options.title,
        force=options.force,
    )
    _report("Reading {}".format(paths.markdown_path))
    source = read_text_file(paths.markdown_path, "Markdown file")

    document = build_document(paths.title, source, options)

    write_output(paths.html_path, document.html)
    document.output_path = paths.html_path
    _report("Saved {} ({:,} bytes)".format(paths.html_path, len(document.html)))
    return document
