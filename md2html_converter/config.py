"""Configuration constants, renderer settings, and .env loading.

WHY: Centralizes every configurable value so it is easy to find, update,
and override. The generator string, accepted Markdown extensions and the
renderer extension list are plain data structures, not buried in logic.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level strings, sets and lists. Environment variables provide
the defaults for the CLI flags, so a project can pin e.g. its own
stylesheet once in .env instead of repeating --css-path.

RULES:
- Every MD2HTML_* variable is optional; unset means the built-in default
- Boolean variables accept 1/true/yes/on (case-insensitive)
- Path variables are returned as strings; validation happens at read time
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

from md2html_converter import __version__

# Load .env from the working directory (where the converter is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------

APP_NAME = "Markdown to HTML Converter"

GENERATOR = "{} {}".format(APP_NAME, __version__)
"""Content of the <meta name="generator"> tag in every output file."""

# ---------------------------------------------------------------------------
# Input / output file naming
# ---------------------------------------------------------------------------

MARKDOWN_EXTENSIONS: frozenset[str] = frozenset({".md", ".markdown"})
"""Accepted Markdown file extensions (lowercase, with dot)."""

HTML_EXTENSION = ".html"

# ---------------------------------------------------------------------------
# Renderer settings (Python-Markdown + pymdown-extensions)
# ---------------------------------------------------------------------------

RENDERER_EXTENSIONS: list[str] = [
    "markdown.extensions.tables",
    "markdown.extensions.fenced_code",
    "markdown.extensions.footnotes",
    "markdown.extensions.def_list",
    "markdown.extensions.nl2br",
    "pymdownx.tilde",
    "pymdownx.caret",
    "pymdownx.tasklist",
    "pymdownx.magiclink",
]

RENDERER_EXTENSION_CONFIGS: dict[str, dict] = {
    # ~~strike~~ only; ~sub~ is not part of the supported syntax
    "pymdownx.tilde": {"subscript": False},
    # ^sup^ only; ^^insert^^ is not part of the supported syntax
    "pymdownx.caret": {"insert": False},
    "pymdownx.tasklist": {"custom_checkbox": False},
    "markdown.extensions.fenced_code": {"lang_prefix": "language-"},
}

# Raw-HTML tags that are always neutralized in the rendered fragment (GFM tagfilter).
FILTERED_TAGS: tuple[str, ...] = (
    "title", "textarea", "style", "xmp", "iframe",
    "noembed", "noframes", "script", "plaintext",
)

# URL schemes removed from links and images in safe mode.
UNSAFE_URL_SCHEMES: tuple[str, ...] = ("javascript:", "vbscript:", "file:", "data:")

# data: URLs that stay allowed in safe mode (inline images).
SAFE_DATA_URL_PREFIXES: tuple[str, ...] = (
    "data:image/png", "data:image/gif", "data:image/jpeg", "data:image/webp",
)

# ---------------------------------------------------------------------------
# Environment defaults for the CLI
# ---------------------------------------------------------------------------

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean environment variable.

    RULES:
    - Unset or empty → default
    - 1/true/yes/on (any case) → True, anything else → False
    """
    value = os.getenv(name, "").strip()
    if not value:
        return default
    return value.lower() in _TRUE_VALUES


def env_path(name: str) -> str | None:
    """Read an optional path from the environment (None when unset or empty)."""
    value = os.getenv(name, "").strip()
    return value or None


DEFAULT_NO_SAFE = env_flag("MD2HTML_NO_SAFE")
DEFAULT_NO_HIGHLIGHT = env_flag("MD2HTML_NO_HIGHLIGHT")
DEFAULT_NO_MATHJAX = env_flag("MD2HTML_NO_MATHJAX")
DEFAULT_NO_CJK_FONTS = env_flag("MD2HTML_NO_CJK_FONTS")

DEFAULT_CSS_PATH = env_path("MD2HTML_CSS_PATH")
DEFAULT_HIGHLIGHT_JS_PATH = env_path("MD2HTML_HIGHLIGHT_JS_PATH")
DEFAULT_HIGHLIGHT_CSS_PATH = env_path("MD2HTML_HIGHLIGHT_CSS_PATH")
DEFAULT_MATHJAX_JS_PATH = env_path("MD2HTML_MATHJAX_JS_PATH")

LOG_LEVEL = os.getenv("MD2HTML_LOG_LEVEL", "WARNING").upper()
