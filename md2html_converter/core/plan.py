"""Emission plan: the ordered list of instructions that make up one page.

WHY: The page has many optional sections (CJK fonts, highlighting, math),
each gated by a flag. Writing them as nested if/else branches would repeat
the same open-insert-close pattern for every variant. Instead, the gated
assets are a declarative table of (gate, slot) pairs evaluated once, and
the assembler stays purely mechanical.

HOW: HEAD_ASSETS and BODY_ASSETS list, in document order, which slot is
emitted under which gate. required_slots() evaluates the gates; build_plan()
turns the resolved sources, title and fragment into Open/Close/Void/
Trusted/Untrusted instructions.

RULES:
- Head order: base CSS, CJK fonts, highlighting, math
- Body order: article fragment, webfont loader, highlight-apply script
- Embedded assets are Trusted; override assets are Untrusted with the
  escape context of their element (style → STYLE, script → SCRIPT)
- The title is always Untrusted TEXT; the fragment is always Trusted
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Mapping, Tuple

from md2html_converter.config import GENERATOR
from md2html_converter.core.assembler import Close, Instruction, Open, Trusted, Untrusted, Void
from md2html_converter.core.escape import EscapeContext
from md2html_converter.core.models import AssetSlot, AssetSource


class Gate(enum.Enum):
    ALWAYS = "always"
    FONTS = "fonts"
    CODE = "code"
    MATH = "math"


@dataclass(frozen=True)
class Gates:
    """Which optional bundles this document gets."""

    include_fonts: bool
    has_code: bool
    has_math: bool

    def is_open(self, gate: Gate) -> bool:
        if gate is Gate.ALWAYS:
            return True
        if gate is Gate.FONTS:
            return self.include_fonts
        if gate is Gate.CODE:
            return self.has_code
        return self.has_math


HEAD_ASSETS: Tuple[Tuple[Gate, AssetSlot], ...] = (
    (Gate.ALWAYS, AssetSlot.BASE_CSS),
    (Gate.FONTS, AssetSlot.CJK_FONT_CSS),
    (Gate.FONTS, AssetSlot.CJK_MONO_FONT_CSS),
    (Gate.CODE, AssetSlot.HIGHLIGHT_JS),
    (Gate.CODE, AssetSlot.HIGHLIGHT_CSS),
    (Gate.MATH, AssetSlot.MATHJAX_CONFIG_JS),
    (Gate.MATH, AssetSlot.MATHJAX_JS),
)

BODY_ASSETS: Tuple[Tuple[Gate, AssetSlot], ...] = (
    (Gate.FONTS, AssetSlot.WEBFONT_JS),
    (Gate.CODE, AssetSlot.HIGHLIGHT_CODE_JS),
)

_HEAD_META: Tuple[str, ...] = (
    "<meta charset=UTF-8>",
    '<meta name="viewport" content="width=device-width, initial-scale=1, shrink-to-fit=no">',
)

_ESCAPE_CONTEXT = {
    "style": EscapeContext.STYLE,
    "script": EscapeContext.SCRIPT,
}


def required_slots(gates: Gates) -> List[AssetSlot]:
    """Slots to emit for these gates, in document order."""
    return [
        slot
        for gate, slot in HEAD_ASSETS + BODY_ASSETS
        if gates.is_open(gate)
    ]


def _asset_instructions(source: AssetSource) -> List[Instruction]:
    element = source.slot.element
    if source.trusted:
        body: Instruction = Trusted(source.content)
    else:
        body = Untrusted(source.content, _ESCAPE_CONTEXT[element])
    return [Open(element), body, Close(element)]


def build_plan(
    title: str,
    fragment: str,
    gates: Gates,
    sources: Mapping[AssetSlot, AssetSource],
) -> List[Instruction]:
    """Build the complete emission plan for one document.

    Args:
        title: Document title (unescaped).
        fragment: Rendered Markdown HTML (trusted).
        gates: Which optional bundles to include.
        sources: Resolved source for every slot in required_slots(gates).

    Returns:
        Ordered instructions for HTMLAssembler.

    Raises:
        KeyError: A required slot has no resolved source.
    """
    plan: List[Instruction] = [Void("<!DOCTYPE html>"), Open("html"), Open("head")]
    plan.extend(Void(meta) for meta in _HEAD_META)
    plan.append(Void('<meta name="generator" content="{}"/>'.format(GENERATOR)))
    plan.extend([Open("title"), Untrusted(title, EscapeContext.TEXT), Close("title")])

    for gate, slot in HEAD_ASSETS:
        if gates.is_open(gate):
            plan.extend(_asset_instructions(sources[slot]))

    plan.extend([
        Close("head"),
        Open("body"),
        Open("article", 'class="markdown-body"'),
        Trusted(fragment),
        Close("article"),
    ])

    for gate, slot in BODY_ASSETS:
        if gates.is_open(gate):
            plan.extend(_asset_instructions(sources[slot]))

    plan.extend([Close("body"), Close("html")])
    return plan
