"""Typed exceptions for every way a conversion can fail.

WHY: The CLI must turn any failure into one readable line on stderr and a
nonzero exit status, while tests need to tell a bad input path apart from
an unreadable override file or a malformed emission plan. One small
hierarchy covers all of them.

HOW: ConversionError is the base and carries the offending path (if any).
I/O and path failures are raised at the file seams (paths, resources,
pipeline); assembly failures are raised by the HTMLAssembler.

RULES:
- Every exception raised on purpose by this package derives from ConversionError
- The message always names the offending path when one is involved
- AssemblyError subclasses signal a malformed emission plan (a programming
  defect), never bad user input
"""

from __future__ import annotations

from pathlib import Path


class ConversionError(Exception):
    """Base class for all converter errors.

    Attributes:
        path: The file the error is about, or None.
    """

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class InputError(ConversionError):
    """Raised when the Markdown input path is missing, a directory, or not Markdown.

    RULES:
    - Accepted extensions: .md and .markdown (case-insensitive)
    """


class OutputExistsError(ConversionError):
    """Raised when the output path exists and may not be overwritten.

    WHY: Silently replacing a file the user did not mean to replace loses
    work. Overwriting needs an explicit --force.

    RULES:
    - A directory at the output path is never overwritable, even with force
    - Raised before anything is read, rendered or written
    """


class FileIOError(ConversionError):
    """Raised when reading or writing a file fails at the OS level.

    HOW: Wraps the underlying OSError; the original is kept as __cause__.
    """


class EncodingError(ConversionError):
    """Raised when a file that must be text is not valid UTF-8."""


class AssemblyError(ConversionError):
    """Base class for HTMLAssembler invariant violations.

    WHY: The emission plan is built by this package, so these errors point
    at a bug in the plan rather than at the user's files. They are ordinary
    exceptions so the assembler stays unit-testable on its own.
    """


class StructuralError(AssemblyError):
    """Raised on a mismatched or unexpected structural token.

    RULES:
    - Closing a tag other than the innermost open one
    - Closing anything while the open-element stack is empty
    - Inserting escaped content into an element of the wrong context
    - Opening an element inside a structural <style> or <script>
    """


class UnterminatedDocumentError(AssemblyError):
    """Raised by finish() when structural elements are still open."""
