"""Adapter: Markdown source text to an HTML fragment via Python-Markdown.

WHY: The converter treats the rendered fragment as trusted HTML, so the
renderer must be configured so that the trust is deserved: in safe mode
raw HTML from the document is shown as text and script-capable link
targets are removed. The extension set (tables, footnotes, task lists,
strikethrough, superscript, autolinks, definition lists, hard line breaks)
is fixed and always on.

HOW: A fresh markdown.Markdown instance is built per call (instances keep
per-document state and are not shareable). Safe mode deregisters the raw
HTML block preprocessor and inline pattern and registers a treeprocessor
that blanks unsafe href/src values. After rendering, the GFM tag filter
neutralizes tags that could take over the page even when raw HTML is
allowed.

RULES:
- Extensions and their settings come from config.RENDERER_EXTENSIONS
- Safe mode: raw HTML is escaped, javascript:/vbscript:/file:/data: links
  are emptied (data:image/png|gif|jpeg|webp stays allowed)
- Tag filter runs in every mode: "<" of title, textarea, style, xmp,
  iframe, noembed, noframes, script, plaintext tags becomes "&lt;"
- Fenced code renders as <pre><code class="language-xxx">...</code></pre>
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as etree

import markdown
from markdown.treeprocessors import Treeprocessor

from md2html_converter.config import (
    FILTERED_TAGS,
    RENDERER_EXTENSION_CONFIGS,
    RENDERER_EXTENSIONS,
    SAFE_DATA_URL_PREFIXES,
    UNSAFE_URL_SCHEMES,
)

logger = logging.getLogger(__name__)

_TAG_FILTER_RE = re.compile(
    r"<(?=/?(?:{})(?=[\s/>]|$))".format("|".join(FILTERED_TAGS)),
    re.IGNORECASE,
)

# Browsers ignore these inside a URL scheme ("java\tscript:" is still javascript:).
_URL_NOISE_RE = re.compile(r"[\x00-\x20]+")

_URL_ATTRIBUTES = ("href", "src")


def is_unsafe_url(url: str) -> bool:
    """True if following the URL could run script or read local files."""
    normalized = _URL_NOISE_RE.sub("", url).lower()
    if not normalized.startswith(UNSAFE_URL_SCHEMES):
        return False
    return not normalized.startswith(SAFE_DATA_URL_PREFIXES)


def filter_tags(fragment: str) -> str:
    """Apply the GFM tag filter to a rendered fragment."""
    return _TAG_FILTER_RE.sub("&lt;", fragment)


class UnsafeLinkTreeprocessor(Treeprocessor):
    """Empty every href/src whose scheme is not safe to follow."""

    def run(self, root: etree.Element) -> None:
        for element in root.iter():
            for attribute in _URL_ATTRIBUTES:
                value = element.get(attribute)
                if value is not None and is_unsafe_url(value):
                    logger.debug("Removed unsafe %s=%r", attribute, value)
                    element.set(attribute, "")


def build_renderer(safe: bool = True) -> markdown.Markdown:
    """Build a configured Markdown instance for one document."""
    md = markdown.Markdown(
        extensions=RENDERER_EXTENSIONS,
        extension_configs=RENDERER_EXTENSION_CONFIGS,
    )
    if safe:
        md.preprocessors.deregister("html_block")
        md.inlinePatterns.deregister("html")
        # Runs after the inline processor (20) so generated links are covered.
        md.treeprocessors.register(UnsafeLinkTreeprocessor(md), "unsafe_links", 5)
    return md


def render_markdown(source: str, safe: bool = True) -> str:
    """Render Markdown source text to an HTML fragment.

    Args:
        source: The Markdown document.
        safe: Escape raw HTML and remove dangerous link targets.

    Returns:
        The HTML fragment, trusted by the assembler.
    """
    fragment = build_renderer(safe=safe).convert(source)
    logger.debug("Rendered %d chars of Markdown into %d chars of HTML", len(source), len(fragment))
    return filter_tags(fragment)
