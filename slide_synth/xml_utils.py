"""Helpers for writing literal text into XML parts."""
import re
from xml.sax.saxutils import escape

_QUOTE_ENTITIES = {'"': "&quot;", "'": "&apos;"}

# characters outside the XML 1.0 Char production: C0 controls, surrogates, U+FFFE/U+FFFF
_ILLEGAL_XML_CHARS = re.compile("[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def escape_xml(text) -> str:
    """Escape the five reserved XML characters in ``text``."""
    if text is None:
        return ""
    return escape(_ILLEGAL_XML_CHARS.sub("", str(text)), _QUOTE_ENTITIES)


def attr(name: str, value) -> str:
    """Render ``name="value"`` with a leading space, or nothing when value is None."""
    if value is None:
        return ""
    return f' {name}="{escape_xml(value)}"'
