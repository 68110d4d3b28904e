"""
Exceptions raised while synthesizing a presentation package.
"""
from typing import Optional


class SlideSynthError(Exception):
    """Base class for every error raised by a build."""


class MalformedElement(SlideSynthError):
    """
    A template field is missing, non-finite, out of range or of the wrong type.

    ``index`` is the position of the offending element in ``elements`` or
    ``None`` when the problem sits outside the element list (the background).
    """

    def __init__(self, index: Optional[int], field: str, reason: str = "invalid value"):
        self.index = index
        self.field = field
        self.reason = reason
        where = f"element {index}" if index is not None else "template"
        super().__init__(f"{where}: field '{field}' {reason}")


class UnsupportedElementType(SlideSynthError):
    """An element's type tag names none of the supported variants."""

    def __init__(self, index: Optional[int], element_type):
        self.index = index
        self.element_type = element_type
        super().__init__(f"element {index}: unsupported element type {element_type!r}")


class PackagingFailed(SlideSynthError):
    """Writing or verifying the archive failed; no bytes are returned."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"packaging failed: {reason}")
