"""Picture XML (``p:pic``) referencing an embedded image part."""
from . import units
from .models import ImageElement
from .shape_builder import transform_xml
from .xml_utils import attr, escape_xml


def build_picture(element: ImageElement, shape_id: int, rel_id: str) -> str:
    """
    Emit the ``p:pic`` node for an image element.

    Args:
        element: Image element with validated fields
        shape_id: Unique id within the slide's shape tree (>= 2)
        rel_id: Relationship id of the image part in the slide's rels

    Returns:
        str: XML fragment to place inside ``p:spTree``
    """
    alpha = f'<a:alphaModFix amt="{units.fraction(element.opacity)}"/>' if element.opacity < 1 else ''
    return (
        '<p:pic>'
        '<p:nvPicPr>'
        f'<p:cNvPr id="{shape_id}" name="Image {shape_id}"{attr("descr", element.image_id)}/>'
        '<p:cNvPicPr><a:picLocks noChangeAspect="1"/></p:cNvPicPr>'
        '<p:nvPr/>'
        '</p:nvPicPr>'
        '<p:blipFill>'
        f'<a:blip r:embed="{escape_xml(rel_id)}">{alpha}</a:blip>'
        '<a:stretch><a:fillRect/></a:stretch>'
        '</p:blipFill>'
        '<p:spPr>'
        f'{transform_xml(element)}'
        '<a:prstGeom prst="rect"><a:avLst/></a:prstGeom>'
        '</p:spPr>'
        '</p:pic>'
    )
