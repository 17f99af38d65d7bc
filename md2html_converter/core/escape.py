"""Escaping for untrusted text, one function per destination context.

WHY: Override files are read from disk at run time and may contain
anything, including sequences that would end the enclosing <style> or
<script> element early and inject markup. Each destination needs its own
escaping: entity encoding is wrong inside <style>, and CSS escapes are
wrong inside <title>.

HOW: EscapeContext names the three destinations. escape() dispatches to
the matching function. Each function changes only the sequences that could
break out of its context and leaves everything else byte-identical.

RULES:
- TEXT:   & < > become &amp; &lt; &gt; (quotes are untouched)
- STYLE:  every < becomes the CSS escape "\\3C " (no tag can open or close)
- SCRIPT: "</script" (any case) becomes "<\\/script", "<!--" becomes "<\\!--"
- Escaping is applied exactly once, by the assembler, never by callers
"""

from __future__ import annotations

import enum
import html
import re

_SCRIPT_CLOSE_RE = re.compile(r"</(script)", re.IGNORECASE)


class EscapeContext(enum.Enum):
    TEXT = "text"
    STYLE = "style"
    SCRIPT = "script"


def escape_text(text: str) -> str:
    """Entity-encode text for an element body such as <title>."""
    return html.escape(text, quote=False)


def escape_style(css: str) -> str:
    """Neutralize every "<" in a stylesheet.

    "\\3C " is the CSS escape for "<"; the trailing space terminates the
    escape and is consumed by the CSS parser, so strings and selectors
    keep their meaning.
    """
    return css.replace("<", "\\3C ")


def escape_script(script: str) -> str:
    """Neutralize sequences that end or confuse an inline <script> element."""
    script = _SCRIPT_CLOSE_RE.sub(r"<\\/\1", script)
    return script.replace("<!--", "<\\!--")


_ESCAPERS = {
    EscapeContext.TEXT: escape_text,
    EscapeContext.STYLE: escape_style,
    EscapeContext.SCRIPT: escape_script,
}


def escape(text: str, context: EscapeContext) -> str:
    return _ESCAPERS[context](text)
