"""Resource resolution: packaged default or user override, per asset slot.

WHY: Every bundled stylesheet and script has a sensible default shipped
inside the package, but users may replace some of them (their own CSS, a
newer highlighter, a full offline MathJax build). The resolver decides,
once per run, which text goes into each slot.

HOW: load_embedded() reads a packaged file via importlib.resources and
caches it, so the defaults are read at most once per process and shared
read-only. read_override() reads a user file as strict UTF-8 and maps
failures to the converter's error types. resolve_assets() binds each
requested slot to exactly one AssetSource.

RULES:
- Only OVERRIDABLE_SLOTS accept an override; others are always embedded
- Only the slots the emission plan needs are resolved, so an override for
  a bundle that is not emitted is never read
- OSError → FileIOError, UnicodeDecodeError → EncodingError (with path)
- Embedded text is never modified after loading
"""

from __future__ import annotations

import logging
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional

from md2html_converter.core.models import AssetSlot, AssetSource, SourceKind
from md2html_converter.errors import EncodingError, FileIOError

logger = logging.getLogger(__name__)

_RESOURCE_PACKAGE = "md2html_converter.resources"

OVERRIDABLE_SLOTS: frozenset = frozenset({
    AssetSlot.BASE_CSS,
    AssetSlot.HIGHLIGHT_JS,
    AssetSlot.HIGHLIGHT_CSS,
    AssetSlot.MATHJAX_JS,
})


@lru_cache(maxsize=None)
def load_embedded(slot: AssetSlot) -> str:
    """Return the packaged default text for a slot (read once, then cached)."""
    text = resources.files(_RESOURCE_PACKAGE).joinpath(slot.resource_name).read_text(encoding="utf-8")
    logger.debug("Loaded embedded asset %s (%d chars)", slot.resource_name, len(text))
    return text


def read_text_file(path: str | Path, what: str = "file") -> str:
    """Read a whole file as strict UTF-8.

    Args:
        path: The file to read.
        what: Short description used in error messages ("CSS override", ...).

    Raises:
        FileIOError: The file cannot be opened or read.
        EncodingError: The content is not valid UTF-8.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise FileIOError(
            "Cannot read {} `{}`: {}".format(what, path, exc.strerror or exc), path
        ) from exc
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise EncodingError(
            "Cannot decode {} `{}`: not valid UTF-8 (byte {})".format(what, path, exc.start), path
        ) from exc


def read_override(slot: AssetSlot, path: str | Path) -> AssetSource:
    """Read a user-supplied replacement for a slot."""
    path = Path(path)
    content = read_text_file(path, "{} override".format(slot.resource_name))
    logger.debug("Using override %s for %s", path, slot.name)
    return AssetSource(slot=slot, kind=SourceKind.OVERRIDE, content=content, path=path)


def resolve_assets(
    slots: Iterable[AssetSlot],
    overrides: Optional[Mapping[AssetSlot, Path]] = None,
) -> Dict[AssetSlot, AssetSource]:
    """Bind each requested slot to its override or its embedded default.

    Args:
        slots: The slots the emission plan will emit.
        overrides: Override file per slot; entries for non-overridable
                   slots are rejected.

    Returns:
        A mapping from each requested slot to its AssetSource.

    Raises:
        ValueError: An override was given for a slot that does not accept one.
        FileIOError / EncodingError: An override file could not be read.
    """
    overrides = dict(overrides or {})
    for slot in overrides:
        if slot not in OVERRIDABLE_SLOTS:
            raise ValueError("Asset slot {} cannot be overridden".format(slot.name))

    bound: Dict[AssetSlot, AssetSource] = {}
    for slot in slots:
        if slot in bound:
            continue
        override_path = overrides.get(slot)
        if override_path is not None:
            bound[slot] = read_override(slot, override_path)
        else:
            bound[slot] = AssetSource(
                slot=slot, kind=SourceKind.EMBEDDED, content=load_embedded(slot)
            )
    return bound
