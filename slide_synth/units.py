"""
Conversions from template measurements to the integer units OOXML stores.

Lengths end up in EMU (English Metric Units, 914400 per inch). Text sizes
use hundredths of a point and percentages use thousandths of a percent.
"""
import math

EMU_PER_INCH = 914400
EMU_PER_PT = 12700
PX_PER_INCH = 96

# rotation is stored in 60000ths of a degree, alpha/opacity in 1000ths of a percent
ANGLE_PER_DEGREE = 60000
FRACTION_SCALE = 100000


def _scaled(value, factor: float) -> int:
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"Cannot convert non-finite value {value!r}")
    # halves round up, not to even
    return math.floor(value * factor + 0.5)


def inch(value) -> int:
    """Inches to EMU."""
    return _scaled(value, EMU_PER_INCH)


def pt(value) -> int:
    """Points to EMU."""
    return _scaled(value, EMU_PER_PT)


def px(value) -> int:
    """Screen pixels (96 per inch) to EMU."""
    return _scaled(value, EMU_PER_INCH / PX_PER_INCH)


def font_size(value) -> int:
    return _scaled(value, 100)


def line_spacing(value) -> int:
    return _scaled(value, 100)


def char_spacing(value) -> int:
    return _scaled(value, 100)


def percent(value) -> int:
    return _scaled(value, 1000)


def degrees(value) -> int:
    return _scaled(value, ANGLE_PER_DEGREE)


def fraction(value) -> int:
    """A 0-1 ratio (opacity) to the 0-100000 scale used by alpha nodes."""
    return _scaled(value, FRACTION_SCALE)


_CONVERTERS = {
    "inch": inch,
    "pt": pt,
    "px": px,
    "fontSize": font_size,
    "lineSpacing": line_spacing,
    "charSpacing": char_spacing,
    "percent": percent,
}


def convert(value, unit: str) -> int:
    """
    Convert ``value`` expressed in ``unit`` to its OOXML integer form.

    Args:
        value: Finite real number
        unit: One of ``inch``, ``pt``, ``px``, ``fontSize``, ``lineSpacing``,
            ``charSpacing`` or ``percent``

    Raises:
        ValueError: For an unknown unit or a non-finite value
    """
    try:
        converter = _CONVERTERS[unit]
    except KeyError:
        raise ValueError(f"Unknown unit '{unit}'. Available units: {sorted(_CONVERTERS)}") from None
    return converter(value)
