#!/usr/bin/env python3
"""
Slide assembler: background plus every element, in order, in one ``p:sld``.
"""
import logging
from functools import singledispatch
from typing import List, Mapping, Optional

from .config import SynthConfig
from .errors import MalformedElement, UnsupportedElementType
from .models import ImageElement, ShapeElement, Template, TextElement
from .picture_builder import build_picture
from .shape_builder import build_shape
from .text_builder import build_text_shape

logger = logging.getLogger(__name__)

# id 1 belongs to the shape tree's own group node
ROOT_GROUP_ID = 1
FIRST_ELEMENT_ID = 2

NAMESPACES = (
    'xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" '
    'xmlns:r="http://schemas.openxmlformats.org/officeDocument/2006/relationships" '
    'xmlns:p="http://schemas.openxmlformats.org/presentationml/2006/main"'
)


@singledispatch
def emit_element(element, shape_id: int, *, index: Optional[int] = None,
                 image_rels: Optional[Mapping[str, str]] = None,
                 config: Optional[SynthConfig] = None) -> str:
    """Emit the XML fragment for one element; one registered builder per variant."""
    raise UnsupportedElementType(index, type(element).__name__)


@emit_element.register
def _(element: TextElement, shape_id: int, *, index=None, image_rels=None, config=None) -> str:
    config = config or SynthConfig()
    return build_text_shape(element, shape_id, font_family=config.font_family, language=config.language)


@emit_element.register
def _(element: ShapeElement, shape_id: int, *, index=None, image_rels=None, config=None) -> str:
    return build_shape(element, shape_id)


@emit_element.register
def _(element: ImageElement, shape_id: int, *, index=None, image_rels=None, config=None) -> str:
    rel_id = (image_rels or {}).get(element.image_id)
    if rel_id is None:
        # no fallback id: rId1 is the slide layout
        raise MalformedElement(index, "imageId", f"no relationship for image '{element.image_id}'")
    return build_picture(element, shape_id, rel_id)


def build_shape_tree(template: Template, image_rels: Optional[Mapping[str, str]] = None,
                     config: Optional[SynthConfig] = None) -> List[str]:
    """
    Emit every element of ``template`` in array order.

    Ids come from one counter shared by all variants, starting at 2; later
    fragments render on top of earlier ones.
    """
    fragments = []
    for index, element in enumerate(template.elements):
        shape_id = FIRST_ELEMENT_ID + index
        fragments.append(emit_element(element, shape_id, index=index,
                                      image_rels=image_rels, config=config))
    return fragments


def build_slide_xml(template: Template, image_rels: Optional[Mapping[str, str]] = None,
                    config: Optional[SynthConfig] = None) -> str:
    """
    Build the complete ``ppt/slides/slide1.xml`` document.

    Args:
        template: Parsed template
        image_rels: ``imageId`` -> relationship id of the embedded image
        config: Build configuration (default font and language)

    Returns:
        str: Slide XML, UTF-8 declared
    """
    fragments = build_shape_tree(template, image_rels, config)
    logger.debug("Assembled slide with %d element(s)", len(fragments))
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        f'<p:sld {NAMESPACES}>'
        '<p:cSld>'
        '<p:bg><p:bgPr>'
        f'<a:solidFill><a:srgbClr val="{template.background.color}"/></a:solidFill>'
        '<a:effectLst/>'
        '</p:bgPr></p:bg>'
        '<p:spTree>'
        f'<p:nvGrpSpPr><p:cNvPr id="{ROOT_GROUP_ID}" name=""/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr>'
        '<p:grpSpPr><a:xfrm><a:off x="0" y="0"/><a:ext cx="0" cy="0"/>'
        '<a:chOff x="0" y="0"/><a:chExt cx="0" cy="0"/></a:xfrm></p:grpSpPr>'
        f'{"".join(fragments)}'
        '</p:spTree>'
        '</p:cSld>'
        '<p:clrMapOvr><a:masterClrMapping/></p:clrMapOvr>'
        '</p:sld>'
    )
