"""Content sniffing: does the rendered fragment need highlighting or math?

WHY: The highlighter and math bundles are large. A document without code
blocks or formulas should not carry them, so the converter decides per
document which optional bundles to include.

HOW: Plain substring search over the serialized fragment. A closed fenced
or indented code block always renders as "...</code></pre>", and the math
delimiter always starts with "#{{".

RULES:
- has_code = not no_highlight and "</code></pre>" in fragment
- has_math = not no_mathjax and "#{{" in fragment
- This is a heuristic over text, not a parse: "#{{" written inside a code
  block still counts as math, and an escaped "&lt;/code&gt;&lt;/pre&gt;"
  does not count as code. Keep it that way; callers rely on it.
"""

from __future__ import annotations

from dataclasses import dataclass

CODE_MARKER = "</code></pre>"
MATH_MARKER = "#{{"


@dataclass(frozen=True)
class Sniffed:
    has_code: bool
    has_math: bool


def sniff(fragment: str, no_highlight: bool = False, no_mathjax: bool = False) -> Sniffed:
    """Decide which optional bundles the fragment needs.

    Args:
        fragment: The rendered HTML fragment.
        no_highlight: Highlighting disabled by the user.
        no_mathjax: Math rendering disabled by the user.

    Returns:
        Sniffed with has_code and has_math.
    """
    has_code = False if no_highlight else CODE_MARKER in fragment
    has_math = False if no_mathjax else MATH_MARKER in fragment
    return Sniffed(has_code=has_code, has_math=has_math)
