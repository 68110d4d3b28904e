"""
Data models for the slide template.

A template is parsed once from caller input (plain dicts, as decoded from
JSON) into immutable dataclasses. Every field is validated here so the
builders can assume finite numbers and normalised colours.
"""
import math
import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from . import units
from .errors import MalformedElement, UnsupportedElementType

_HEX_COLOR = re.compile(r"^[0-9A-Fa-f]{6}$")
_REQUIRED = object()

# value ranges of the OOXML simple types the fields end up in
MAX_COORDINATE = 27273042316900 / units.EMU_PER_INCH  # ST_Coordinate, inches
MAX_COORDINATE_PT = 27273042316900 / units.EMU_PER_PT
MIN_FONT_SIZE = 1  # ST_TextFontSize 100-400000
MAX_FONT_SIZE = 4000
MAX_CHAR_SPACING = 4000  # ST_TextPoint +-400000
MAX_SPACING_POINTS = 1584  # ST_TextSpacingPoint 0-158400
MAX_SPACING_PERCENT = 13200  # ST_TextSpacingPercent 0-13200000
MAX_LINE_WIDTH = 1584  # ST_LineWidth 0-20116800 EMU
MAX_ROTATION = 35791  # ST_Angle is a 32-bit count of 60000ths of a degree
BOLD_WEIGHT = 700

ALIGNMENTS = {
    "left": "l", "center": "ctr", "centre": "ctr", "right": "r", "justify": "just",
    "l": "l", "ctr": "ctr", "r": "r", "just": "just",
}
VERTICAL_ALIGNMENTS = {
    "top": "t", "middle": "ctr", "center": "ctr", "bottom": "b",
    "t": "t", "ctr": "ctr", "b": "b",
}
LINE_SPACING_TYPES = {"percent": "percent", "points": "points", "pt": "points"}


def _number(data: Mapping, key: str, index: Optional[int], default=_REQUIRED,
            minimum: Optional[float] = None, maximum: Optional[float] = None):
    value = data.get(key)
    if value is None:
        if default is _REQUIRED:
            raise MalformedElement(index, key, "is required")
        return default
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedElement(index, key, f"must be a number, got {value!r}")
    try:
        finite = math.isfinite(value)
    except OverflowError:
        # ints too large for a float
        raise MalformedElement(index, key, "is out of range") from None
    if not finite:
        raise MalformedElement(index, key, f"must be finite, got {value!r}")
    if minimum is not None and value < minimum:
        raise MalformedElement(index, key, f"must be >= {minimum}, got {value!r}")
    if maximum is not None and value > maximum:
        raise MalformedElement(index, key, f"must be <= {maximum}, got {value!r}")
    return float(value)


def _color(data: Mapping, key: str, index: Optional[int], default: Optional[str]) -> Optional[str]:
    value = data.get(key)
    if value is None or value == "":
        return default
    text = str(value).strip().lstrip("#")
    if not _HEX_COLOR.match(text):
        raise MalformedElement(index, key, f"must be a RRGGBB hex colour, got {value!r}")
    return text.upper()


def _choice(data: Mapping, key: str, index: Optional[int], choices: Dict[str, str], default: str) -> str:
    value = data.get(key)
    if value is None:
        return default
    try:
        return choices[str(value).strip().lower()]
    except KeyError:
        raise MalformedElement(index, key, f"must be one of {sorted(set(choices))}, got {value!r}") from None


def _text(data: Mapping, key: str, index: Optional[int], default: Optional[str] = "") -> Optional[str]:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, (dict, list, tuple, set)):
        raise MalformedElement(index, key, "must be a string")
    return str(value)


def _flag(data: Mapping, key: str, index: Optional[int], default: Optional[bool] = False) -> Optional[bool]:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise MalformedElement(index, key, f"must be true or false, got {value!r}")
    return value


@dataclass(frozen=True)
class Background:
    color: str = "FFFFFF"

    @classmethod
    def from_dict(cls, data: Optional[Mapping]) -> "Background":
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise MalformedElement(None, "background", "must be a mapping")
        return cls(color=_color(data, "color", None, "FFFFFF"))


@dataclass(frozen=True)
class Shadow:
    """Outer drop shadow; sizes in points, opacity 0-1."""
    blur: float = 4.0
    offset_y: float = 2.0
    color: str = "000000"
    opacity: float = 0.2

    @classmethod
    def from_dict(cls, data: Mapping, index: Optional[int]) -> "Shadow":
        return cls(
            blur=_number(data, "blur", index, 4.0, minimum=0, maximum=MAX_COORDINATE_PT),
            offset_y=_number(data, "offsetY", index, 2.0, minimum=0, maximum=MAX_COORDINATE_PT),
            color=_color(data, "color", index, "000000"),
            opacity=_number(data, "opacity", index, 0.2, minimum=0, maximum=1),
        )


@dataclass(frozen=True)
class Element:
    """Bounding box shared by every element; lengths in inches, rotation in degrees."""
    x: float
    y: float
    width: float
    height: float
    rotation: Optional[float] = None

    @staticmethod
    def _box(data: Mapping, index: Optional[int]) -> Dict[str, Any]:
        return {
            "x": _number(data, "x", index, minimum=0, maximum=MAX_COORDINATE),
            "y": _number(data, "y", index, minimum=0, maximum=MAX_COORDINATE),
            "width": _number(data, "width", index, minimum=0, maximum=MAX_COORDINATE),
            "height": _number(data, "height", index, minimum=0, maximum=MAX_COORDINATE),
            "rotation": _number(data, "rotation", index, None, minimum=-MAX_ROTATION, maximum=MAX_ROTATION),
        }


@dataclass(frozen=True)
class TextElement(Element):
    text: str = ""
    font_size: float = 12.0
    color: str = "000000"
    font_family: Optional[str] = None  # None: use the configured default
    bold: bool = False
    italic: bool = False
    align: str = "l"
    valign: str = "t"
    line_spacing: Optional[float] = None
    line_spacing_type: str = "points"
    space_before: Optional[float] = None
    space_after: Optional[float] = None
    char_spacing: Optional[float] = None
    placeholder: Optional[str] = None

    @property
    def paragraphs(self):
        return self.text.replace("\r\n", "\n").replace("\r", "\n").split("\n")

    @classmethod
    def from_element(cls, data: Mapping, index: Optional[int] = None) -> "TextElement":
        # 0 means unset, as does a missing size
        font_size = _number(data, "fontSize", index, 12.0, minimum=0, maximum=MAX_FONT_SIZE) or 12.0
        if font_size < MIN_FONT_SIZE:
            raise MalformedElement(index, "fontSize", f"must be >= {MIN_FONT_SIZE}, got {font_size!r}")

        bold = _flag(data, "bold", index, None)
        if bold is None:
            weight = _number(data, "fontWeight", index, 400, minimum=1, maximum=1000)
            bold = weight >= BOLD_WEIGHT

        line_spacing_type = _choice(data, "lineSpacingType", index, LINE_SPACING_TYPES, "points")
        max_line_spacing = MAX_SPACING_PERCENT if line_spacing_type == "percent" else MAX_SPACING_POINTS

        return cls(
            **cls._box(data, index),
            text=_text(data, "text", index),
            font_size=font_size,
            color=_color(data, "color", index, "000000"),
            font_family=_text(data, "fontFamily", index, None) or None,
            bold=bold,
            italic=_flag(data, "italic", index),
            align=_choice(data, "align", index, ALIGNMENTS, "l"),
            valign=_choice(data, "valign", index, VERTICAL_ALIGNMENTS, "t"),
            line_spacing=_number(data, "lineSpacing", index, None, minimum=0, maximum=max_line_spacing),
            line_spacing_type=line_spacing_type,
            space_before=_number(data, "spaceBefore", index, None, minimum=0, maximum=MAX_SPACING_POINTS),
            space_after=_number(data, "spaceAfter", index, None, minimum=0, maximum=MAX_SPACING_POINTS),
            char_spacing=_number(data, "charSpacing", index, None,
                                 minimum=-MAX_CHAR_SPACING, maximum=MAX_CHAR_SPACING),
            placeholder=_text(data, "placeholder", index, None),
        )


@dataclass(frozen=True)
class ShapeElement(Element):
    fill: str = "FFFFFF"
    fill_opacity: float = 1.0
    stroke: Optional[str] = None
    stroke_width: float = 1.0
    border_radius: float = 0.0
    shadow: Optional[Shadow] = None

    @classmethod
    def from_element(cls, data: Mapping, index: Optional[int] = None) -> "ShapeElement":
        shadow = data.get("shadow")
        if shadow is not None and shadow is not False and not isinstance(shadow, Mapping):
            raise MalformedElement(index, "shadow", "must be a mapping")
        return cls(
            **cls._box(data, index),
            fill=_color(data, "fill", index, "FFFFFF"),
            fill_opacity=_number(data, "fillOpacity", index, 1.0, minimum=0, maximum=1),
            stroke=_color(data, "stroke", index, None),
            stroke_width=_number(data, "strokeWidth", index, 1.0, minimum=0, maximum=MAX_LINE_WIDTH),
            border_radius=_number(data, "borderRadius", index, 0.0, minimum=0),
            shadow=Shadow.from_dict(shadow, index) if shadow else None,
        )


@dataclass(frozen=True)
class ImageElement(Element):
    image_id: str = ""
    opacity: float = 1.0

    @classmethod
    def from_element(cls, data: Mapping, index: Optional[int] = None) -> "ImageElement":
        image_id = _text(data, "imageId", index, None)
        if not image_id:
            raise MalformedElement(index, "imageId", "is required")
        return cls(
            **cls._box(data, index),
            image_id=image_id,
            opacity=_number(data, "opacity", index, 1.0, minimum=0, maximum=1),
        )


SlideElement = Union[TextElement, ShapeElement, ImageElement]

ELEMENT_TYPES = {
    "text": TextElement,
    "shape": ShapeElement,
    "image": ImageElement,
}


def element_from_dict(data: Any, index: Optional[int] = None) -> SlideElement:
    """
    Create the element variant named by ``data["type"]``.

    Raises:
        UnsupportedElementType: If the type tag is missing or unknown
        MalformedElement: If a field fails validation
    """
    if not isinstance(data, Mapping):
        raise MalformedElement(index, "element", "must be a mapping")
    tag = data.get("type")
    element_cls = ELEMENT_TYPES.get(str(tag).strip().lower()) if tag is not None else None
    if element_cls is None:
        raise UnsupportedElementType(index, tag)
    return element_cls.from_element(data, index)


@dataclass(frozen=True)
class Template:
    """
    Root input of a build: one background plus elements in back-to-front order.
    """
    background: Background = field(default_factory=Background)
    elements: Tuple[SlideElement, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "Template":
        """
        Create a Template from a decoded JSON mapping.

        Args:
            data: ``{"background": {"color": ...}, "elements": [...]}``

        Returns:
            Template: validated, immutable template
        """
        if isinstance(data, Template):
            return data
        if not isinstance(data, Mapping):
            raise MalformedElement(None, "template", "must be a mapping")
        raw_elements = data.get("elements")
        if raw_elements is None:
            raw_elements = []
        if not isinstance(raw_elements, (list, tuple)):
            raise MalformedElement(None, "elements", "must be a list")
        return cls(
            background=Background.from_dict(data.get("background")),
            elements=tuple(element_from_dict(item, idx) for idx, item in enumerate(raw_elements)),
        )

    def apply_overrides(self, overrides: Optional[Mapping[str, str]]) -> "Template":
        """
        Replace the text of elements whose ``placeholder`` appears in ``overrides``.

        Keys may be given with or without the surrounding braces, so
        ``{"{{title}}": ...}`` and ``{"title": ...}`` both match
        ``placeholder="{{title}}"``.
        """
        if not overrides:
            return self
        elements = []
        for element in self.elements:
            if isinstance(element, TextElement) and element.placeholder:
                key = element.placeholder
                bare = key.strip("{} ")
                if key in overrides:
                    element = replace(element, text=str(overrides[key]))
                elif bare in overrides:
                    element = replace(element, text=str(overrides[bare]))
            elements.append(element)
        return replace(self, elements=tuple(elements))
