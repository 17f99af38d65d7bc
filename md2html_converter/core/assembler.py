"""Incremental HTML assembly: structural validation, escaping and minification.

WHY: The output page is stitched together from pieces of very different
trust: fixed tags written by this package, packaged assets, the rendered
Markdown fragment, and files supplied by the user. One component has to
join them so that the document is balanced, untrusted text can never break
out of its element, and whitespace is minified without touching code,
scripts or styles.

HOW: HTMLAssembler consumes an ordered emission plan of five instruction
kinds. Structural tokens (Open/Close/Void) maintain the open-element
stack. Trusted text is inserted as-is; Untrusted text is escaped for its
context first. Both insertion paths go through the same _emit() core, which
tokenizes just enough HTML to track raw-text elements, strip comments and
collapse whitespace. finish() checks the document is complete and returns
the UTF-8 buffer.

RULES:
- Open pushes, Close pops and must name the innermost open element
- The stack is empty before the first and after the last instruction
- Inside <script>, <style>, <pre> and <code> content is copied byte-for-byte
- Outside them: comments are dropped, whitespace next to block tags is
  dropped, any other whitespace run becomes one space
- Tags found inside trusted text only switch raw-text mode; they are never
  pushed or checked (trusted text is not re-validated)
- A raw-text element left open by trusted text ends at the next
  non-trusted instruction or at finish()
- Untrusted text must be escaped for the innermost open element:
  STYLE inside <style>, SCRIPT inside <script>, TEXT anywhere else
- Errors are raised as StructuralError / UnterminatedDocumentError and
  only ever point at the emission plan, never at trusted content
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from md2html_converter.core.escape import EscapeContext, escape
from md2html_converter.errors import StructuralError, UnterminatedDocumentError

logger = logging.getLogger(__name__)

RAW_TEXT_ELEMENTS = frozenset({"script", "style", "pre", "code"})

# Elements whose neighbouring whitespace is significant when rendered.
INLINE_ELEMENTS = frozenset({
    "a", "abbr", "b", "bdi", "bdo", "cite", "code", "data", "del", "dfn",
    "em", "i", "img", "input", "ins", "kbd", "label", "mark", "q", "s",
    "samp", "small", "span", "strong", "sub", "sup", "time", "u", "var",
})

_TAG_NAME_RE = re.compile(r"<(/?)([A-Za-z][A-Za-z0-9:-]*)")
_WHITESPACE = " \t\n\r\f"
_TEXT_TOKEN_RE = re.compile(r"[ \t\n\r\f]+|[^ \t\n\r\f]+")
_TAG_START_CHARS = frozenset("/!?")


# ---------------------------------------------------------------------------
# Emission instructions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Open:
    """Structural opening tag, e.g. Open("article", 'class="markdown-body"')."""

    name: str
    attributes: str = ""

    @property
    def markup(self) -> str:
        if self.attributes:
            return "<{} {}>".format(self.name, self.attributes)
        return "<{}>".format(self.name)


@dataclass(frozen=True)
class Close:
    """Structural closing tag."""

    name: str

    @property
    def markup(self) -> str:
        return "</{}>".format(self.name)


@dataclass(frozen=True)
class Void:
    """Structural token that opens nothing: doctype, <meta>, <link>."""

    markup: str


@dataclass(frozen=True)
class Trusted:
    """Text inserted without escaping (packaged assets, the rendered fragment)."""

    text: str


@dataclass(frozen=True)
class Untrusted:
    """Text that must be escaped for ``context`` before insertion."""

    text: str
    context: EscapeContext


Instruction = Union[Open, Close, Void, Trusted, Untrusted]

# Which element each escape context belongs in (None = any non-raw element).
_CONTEXT_ELEMENT = {
    EscapeContext.STYLE: "style",
    EscapeContext.SCRIPT: "script",
    EscapeContext.TEXT: None,
}


def _find_tag_end(text: str, start: int) -> int:
    """Index of the ">" closing the tag at ``start``, skipping quoted values; -1 if cut off."""
    quote = None
    for i in range(start + 1, len(text)):
        ch = text[i]
        if quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ">":
            return i
    return -1


def _parse_tag(markup: str) -> Tuple[Optional[str], bool]:
    """Return (lowercase tag name or None for declarations, is_closing)."""
    match = _TAG_NAME_RE.match(markup)
    if not match:
        return None, False
    return match.group(2).lower(), bool(match.group(1))


class HTMLAssembler:
    """Validating, minifying builder for one HTML document.

    WHY: Keeps every invariant of the output page in one place so the plan
    builder can stay purely declarative.

    HOW: Call open()/close()/void() for structure, trusted()/untrusted()
    for content (or feed() with instructions), then finish() once.

    RULES:
    - One assembler per document; it cannot be reused after finish()
    - trusted() and untrusted() share _emit(), so raw-text tracking and
      minification are identical for both
    """

    def __init__(self) -> None:
        self._stack: List[str] = []
        self._out: List[str] = []
        # Raw-text element opened by a tag inside trusted text, and its nesting depth.
        self._raw: Optional[str] = None
        self._raw_depth = 0
        # Incomplete tag or comment left at the end of the last trusted chunk.
        self._carry = ""
        self._pending_space = False
        self._at_boundary = True
        self._finished = False

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def open_elements(self) -> Tuple[str, ...]:
        return tuple(self._stack)

    @property
    def in_raw_text(self) -> bool:
        return self._raw is not None or self._structural_raw()

    # ------------------------------------------------------------------
    # Structural tokens
    # ------------------------------------------------------------------

    def open(self, name: str, attributes: str = "") -> None:
        name = name.lower()
        self._end_trusted_span()
        if self._structural_raw():
            raise StructuralError(
                "Cannot open <{}> inside raw-text element <{}>".format(name, self._stack[-1])
            )
        self._stack.append(name)
        self._tag(Open(name, attributes).markup, name, False, structural=True)

    def close(self, name: str) -> None:
        name = name.lower()
        self._end_trusted_span()
        if not self._stack:
            raise StructuralError("Unexpected </{}>: no element is open".format(name))
        if self._stack[-1] != name:
            raise StructuralError(
                "Mismatched </{}>: innermost open element is <{}>".format(name, self._stack[-1])
            )
        self._stack.pop()
        self._tag(Close(name).markup, name, True, structural=True)

    def void(self, markup: str) -> None:
        if not (markup.startswith("<") and markup.endswith(">")):
            raise StructuralError("Structural token is not a tag: {!r}".format(markup))
        self._end_trusted_span()
        if self._structural_raw():
            raise StructuralError(
                "Cannot insert {} inside raw-text element <{}>".format(markup, self._stack[-1])
            )
        name, closing = _parse_tag(markup)
        self._tag(markup, name, closing, structural=True)

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def trusted(self, text: str) -> None:
        """Insert text that is already well-formed for where it goes."""
        self._check_open()
        self._emit(text)

    def untrusted(self, text: str, context: EscapeContext) -> None:
        """Escape text for ``context`` and insert it.

        Raises:
            StructuralError: The innermost open element does not match the context.
        """
        self._end_trusted_span()
        expected = _CONTEXT_ELEMENT[context]
        current = self._stack[-1] if self._stack else None
        if expected is not None:
            if current != expected:
                raise StructuralError(
                    "{} content must be inside <{}>, not <{}>".format(
                        context.value.capitalize(), expected, current or "(document)"
                    )
                )
        elif current is None or current in RAW_TEXT_ELEMENTS:
            raise StructuralError(
                "Text content must be inside a non-raw element, not <{}>".format(
                    current or "(document)"
                )
            )
        self._emit(escape(text, context))

    def feed(self, instruction: Instruction) -> None:
        if isinstance(instruction, Open):
            self.open(instruction.name, instruction.attributes)
        elif isinstance(instruction, Close):
            self.close(instruction.name)
        elif isinstance(instruction, Void):
            self.void(instruction.markup)
        elif isinstance(instruction, Trusted):
            self.trusted(instruction.text)
        elif isinstance(instruction, Untrusted):
            self.untrusted(instruction.text, instruction.context)
        else:
            raise TypeError("Unknown emission instruction: {!r}".format(instruction))

    def finish(self) -> bytes:
        """Check the document is complete and return it as UTF-8 bytes.

        Raises:
            UnterminatedDocumentError: Structural elements are still open.
        """
        self._end_trusted_span()
        if self._stack:
            raise UnterminatedDocumentError(
                "Document ends with open elements: {}".format(
                    " > ".join("<{}>".format(name) for name in self._stack)
                )
            )
        self._finished = True
        html = "".join(self._out).encode("utf-8")
        logger.debug("Assembled document: %d bytes", len(html))
        return html

    # ------------------------------------------------------------------
    # Shared core
    # ------------------------------------------------------------------

    def _check_open(self) -> None:
        if self._finished:
            raise StructuralError("Assembler already finished")

    def _end_trusted_span(self) -> None:
        """Close out the trusted text that preceded a non-trusted instruction.

        Trusted text is not re-validated, so a fragment may leave a <pre> or
        <code> open or end mid-tag (raw HTML passed through with --no-safe).
        Its raw-text mode ends here; a cut-off tag is copied as-is and a
        cut-off comment is dropped like any other comment.
        """
        self._check_open()
        if self._raw is not None:
            logger.debug("Trusted content left <%s> open; ending its raw-text span", self._raw)
        if self._carry and (self._raw is not None or not self._carry.startswith("<!--")):
            self._out.append(self._carry)
        self._raw = None
        self._raw_depth = 0
        self._carry = ""

    def _structural_raw(self) -> bool:
        return bool(self._stack) and self._stack[-1] in RAW_TEXT_ELEMENTS

    def _emit(self, text: str) -> None:
        if self._structural_raw():
            self._out.append(text)
            return

        text = self._carry + text
        self._carry = ""
        pos = 0
        length = len(text)
        while pos < length:
            if self._raw is not None:
                pos = self._consume_raw(text, pos)
                continue

            lt = text.find("<", pos)
            if lt == -1:
                self._text(text[pos:])
                break
            if lt + 1 < length and not (text[lt + 1].isalpha() or text[lt + 1] in _TAG_START_CHARS):
                # A bare "<" is text, not a tag.
                self._text(text[pos:lt + 1])
                pos = lt + 1
                continue
            if lt > pos:
                self._text(text[pos:lt])

            if text.startswith("<!--", lt):
                end = text.find("-->", lt + 4)
                if end == -1:
                    self._carry = text[lt:]
                    break
                pos = end + 3
                continue

            gt = _find_tag_end(text, lt)
            if gt == -1:
                self._carry = text[lt:]
                break
            markup = text[lt:gt + 1]
            name, closing = _parse_tag(markup)
            self._tag(markup, name, closing, structural=False)
            pos = gt + 1

    def _consume_raw(self, text: str, pos: int) -> int:
        """Copy raw-text content verbatim up to the closing tag of self._raw.

        Returns the index of the closing tag (left for _emit to process) or
        len(text) when the element continues in the next chunk.
        """
        raw = self._raw
        if raw in ("script", "style"):
            close = "</" + raw
            idx = text.lower().find(close, pos)
            if idx == -1:
                # Keep a possible partial "</scr" for the next chunk.
                keep = min(len(close) - 1, len(text) - pos)
                self._out.append(text[pos:len(text) - keep])
                self._carry = text[len(text) - keep:]
                return len(text)
            self._out.append(text[pos:idx])
            self._raw = None
            return idx

        # <pre> and <code> contain markup; track nesting of the same element.
        while True:
            lt = text.find("<", pos)
            if lt == -1:
                self._out.append(text[pos:])
                return len(text)
            self._out.append(text[pos:lt])
            if lt + 1 < len(text) and not (text[lt + 1].isalpha() or text[lt + 1] in _TAG_START_CHARS):
                self._out.append("<")
                pos = lt + 1
                continue
            if text.startswith("<!--", lt):
                end = text.find("-->", lt + 4)
                if end == -1:
                    self._carry = text[lt:]
                    return len(text)
                self._out.append(text[lt:end + 3])
                pos = end + 3
                continue
            gt = _find_tag_end(text, lt)
            if gt == -1:
                self._carry = text[lt:]
                return len(text)
            markup = text[lt:gt + 1]
            name, closing = _parse_tag(markup)
            if name == raw:
                if closing:
                    self._raw_depth -= 1
                    if self._raw_depth == 0:
                        self._raw = None
                        return lt
                elif not markup.endswith("/>"):
                    self._raw_depth += 1
            self._out.append(markup)
            pos = gt + 1

    def _tag(self, markup: str, name: Optional[str], closing: bool, structural: bool) -> None:
        inline = name in INLINE_ELEMENTS
        if self._pending_space and inline and not self._at_boundary:
            self._out.append(" ")
        self._pending_space = False
        self._out.append(markup)
        self._at_boundary = not inline
        if (
            not structural
            and not closing
            and name in RAW_TEXT_ELEMENTS
            and not markup.endswith("/>")
        ):
            self._raw = name
            self._raw_depth = 1

    def _text(self, text: str) -> None:
        for match in _TEXT_TOKEN_RE.finditer(text):
            piece = match.group()
            if piece[0] in _WHITESPACE:
                self._pending_space = True
                continue
            if self._pending_space and not self._at_boundary:
                self._out.append(" ")
            self._out.append(piece)
            self._pending_space = False
            self._at_boundary = False


def assemble(plan: Iterable[Instruction]) -> bytes:
    """Run a complete emission plan through a fresh HTMLAssembler."""
    assembler = HTMLAssembler()
    for instruction in plan:
        assembler.feed(instruction)
    return assembler.finish()
