"""
Vector shape XML (``p:sp`` with a preset geometry, fill, outline and shadow).
"""
from . import units
from .models import Element, ShapeElement, Shadow

# roundRect's "adj" guide: 0 is square corners, 50000 turns the short side into a semicircle
MAX_CORNER_ADJUST = 50000

# outerShdw direction, 60000ths of a degree: straight down
SHADOW_DIRECTION = 5400000


def transform_xml(element: Element) -> str:
    """Position/size block (``a:xfrm``) for any element, in EMU."""
    rotation = f' rot="{units.degrees(element.rotation)}"' if element.rotation else ""
    return (
        f'<a:xfrm{rotation}>'
        f'<a:off x="{units.inch(element.x)}" y="{units.inch(element.y)}"/>'
        f'<a:ext cx="{units.inch(element.width)}" cy="{units.inch(element.height)}"/>'
        '</a:xfrm>'
    )


def color_xml(color: str, opacity: float = 1.0) -> str:
    """``a:srgbClr`` with an ``a:alpha`` child only when the colour is translucent."""
    if opacity < 1:
        return f'<a:srgbClr val="{color}"><a:alpha val="{units.fraction(opacity)}"/></a:srgbClr>'
    return f'<a:srgbClr val="{color}"/>'


def corner_adjust(border_radius: float) -> int:
    return max(0, units.percent(min(border_radius, MAX_CORNER_ADJUST / 1000)))


def _geometry_xml(element: ShapeElement) -> str:
    if element.border_radius > 0:
        guide = f'<a:gd name="adj" fmla="val {corner_adjust(element.border_radius)}"/>'
        return f'<a:prstGeom prst="roundRect"><a:avLst>{guide}</a:avLst></a:prstGeom>'
    return '<a:prstGeom prst="rect"><a:avLst/></a:prstGeom>'


def _fill_xml(element: ShapeElement) -> str:
    # zero opacity is an explicit noFill, never a zero-alpha solid fill
    if element.fill_opacity <= 0:
        return '<a:noFill/>'
    return f'<a:solidFill>{color_xml(element.fill, element.fill_opacity)}</a:solidFill>'


def _line_xml(element: ShapeElement) -> str:
    if not element.stroke:
        return ''
    return (
        f'<a:ln w="{units.pt(element.stroke_width)}">'
        f'<a:solidFill>{color_xml(element.stroke)}</a:solidFill>'
        '</a:ln>'
    )


def _shadow_xml(shadow: Shadow) -> str:
    return (
        '<a:effectLst>'
        f'<a:outerShdw blurRad="{units.pt(shadow.blur)}" dist="{units.pt(shadow.offset_y)}" '
        f'dir="{SHADOW_DIRECTION}" algn="bl" rotWithShape="0">'
        f'<a:srgbClr val="{shadow.color}"><a:alpha val="{units.fraction(shadow.opacity)}"/></a:srgbClr>'
        '</a:outerShdw>'
        '</a:effectLst>'
    )


def build_shape(element: ShapeElement, shape_id: int) -> str:
    """
    Emit the ``p:sp`` node for a rectangle or rounded rectangle.

    Args:
        element: Shape element with validated fields
        shape_id: Unique id within the slide's shape tree (>= 2)

    Returns:
        str: XML fragment to place inside ``p:spTree``
    """
    return (
        '<p:sp>'
        f'<p:nvSpPr><p:cNvPr id="{shape_id}" name="Shape {shape_id}"/><p:cNvSpPr/><p:nvPr/></p:nvSpPr>'
        '<p:spPr>'
        f'{transform_xml(element)}'
        f'{_geometry_xml(element)}'
        f'{_fill_xml(element)}'
        f'{_line_xml(element)}'
        f'{_shadow_xml(element.shadow) if element.shadow else ""}'
        '</p:spPr>'
        '</p:sp>'
    )
