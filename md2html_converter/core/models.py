"""Data model shared by the sniffer, resolver, plan builder and assembler.

WHY: The pipeline passes a handful of small values between stages: which
asset goes in which slot, where that asset came from, and what the final
document contained. Typed dataclasses make those hand-offs explicit and
keep the stages decoupled.

HOW: AssetSlot is a closed enum of every bundled resource. AssetSource
binds one slot to its text for one run. ConversionOptions mirrors the CLI
surface. Document is the result of a conversion.

RULES:
- AssetSlot is a fixed, closed set; adding a slot means adding a resource file
- AssetSource is frozen; a binding never changes after resolution
- Embedded sources have path=None, override sources always have a path
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional


class AssetSlot(enum.Enum):
    """One named, independently resolvable bundled resource.

    The value is the embedded resource file name under
    ``md2html_converter/resources``.
    """

    BASE_CSS = "github-markdown.css"
    CJK_FONT_CSS = "font-cjk.css"
    CJK_MONO_FONT_CSS = "font-cjk-mono.css"
    HIGHLIGHT_JS = "highlight.js"
    HIGHLIGHT_CSS = "highlight-github.css"
    MATHJAX_CONFIG_JS = "mathjax-config.js"
    MATHJAX_JS = "mathjax-loader.js"
    WEBFONT_JS = "webfont.js"
    HIGHLIGHT_CODE_JS = "highlight-code.js"

    @property
    def resource_name(self) -> str:
        return self.value

    @property
    def element(self) -> str:
        """The element the asset is inlined into: ``"style"`` or ``"script"``."""
        return "style" if self.value.endswith(".css") else "script"


class SourceKind(enum.Enum):
    EMBEDDED = "embedded"
    OVERRIDE = "override"


@dataclass(frozen=True)
class AssetSource:
    """The text bound to one AssetSlot for one run.

    Attributes:
        slot: Which resource this is.
        kind: EMBEDDED (packaged, trusted) or OVERRIDE (user file, untrusted).
        content: The asset text.
        path: The override file, or None for embedded assets.
    """

    slot: AssetSlot
    kind: SourceKind
    content: str
    path: Optional[Path] = None

    @property
    def trusted(self) -> bool:
        return self.kind is SourceKind.EMBEDDED


@dataclass
class ConversionOptions:
    """Everything one conversion needs to know, as given on the command line.

    Attributes:
        markdown_path: The Markdown source file.
        html_path: Explicit output path, or None for the sibling .html file.
        title: Explicit document title, or None for the input file stem.
        force: Allow overwriting an existing output file.
        safe: Strip raw HTML and neutralize dangerous link targets.
        highlight: Allow bundling the syntax highlighter.
        mathjax: Allow bundling math rendering.
        cjk_fonts: Bundle the CJK font stylesheets and loader.
        overrides: Override file per slot (only overridable slots).
    """

    markdown_path: Path
    html_path: Optional[Path] = None
    title: Optional[str] = None
    force: bool = False
    safe: bool = True
    highlight: bool = True
    mathjax: bool = True
    cjk_fonts: bool = True
    overrides: Dict[AssetSlot, Path] = field(default_factory=dict)


@dataclass
class Document:
    """The result of one conversion.

    Attributes:
        title: The (unescaped) document title.
        has_code: Highlighting assets were bundled.
        has_math: Math assets were bundled.
        include_fonts: CJK font assets were bundled.
        slots: Emitted asset slots, in document order.
        html: The minified UTF-8 document.
        output_path: Where the document was written, if it was.
    """

    title: str
    has_code: bool
    has_math: bool
    include_fonts: bool
    slots: List[AssetSlot]
    html: bytes
    output_path: Optional[Path] = None
