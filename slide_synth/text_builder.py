"""
Text box XML: one ``p:sp`` per text element, one paragraph per line of text.
"""
from typing import List

from . import units
from .models import TextElement
from .shape_builder import color_xml, transform_xml
from .xml_utils import escape_xml


def _paragraph_props_xml(element: TextElement) -> str:
    spacing: List[str] = []
    if element.line_spacing:
        if element.line_spacing_type == "percent":
            spacing.append(f'<a:lnSpc><a:spcPct val="{units.percent(element.line_spacing)}"/></a:lnSpc>')
        else:
            spacing.append(f'<a:lnSpc><a:spcPts val="{units.line_spacing(element.line_spacing)}"/></a:lnSpc>')
    if element.space_before:
        spacing.append(f'<a:spcBef><a:spcPts val="{units.line_spacing(element.space_before)}"/></a:spcBef>')
    if element.space_after:
        spacing.append(f'<a:spcAft><a:spcPts val="{units.line_spacing(element.space_after)}"/></a:spcAft>')
    return f'<a:pPr algn="{element.align}">{"".join(spacing)}<a:buNone/></a:pPr>'


def _run_props_xml(element: TextElement, font_family: str, language: str) -> str:
    attrs = [f'lang="{escape_xml(language)}"', f'sz="{units.font_size(element.font_size)}"']
    if element.bold:
        attrs.append('b="1"')
    if element.italic:
        attrs.append('i="1"')
    if element.char_spacing:
        attrs.append(f'spc="{units.char_spacing(element.char_spacing)}"')
    typeface = escape_xml(element.font_family or font_family)
    # latin, east-asian and complex-script faces all carry the same family
    return (
        f'<a:rPr {" ".join(attrs)} dirty="0">'
        f'<a:solidFill>{color_xml(element.color)}</a:solidFill>'
        f'<a:latin typeface="{typeface}" pitchFamily="34" charset="0"/>'
        f'<a:ea typeface="{typeface}" pitchFamily="34" charset="-122"/>'
        f'<a:cs typeface="{typeface}" pitchFamily="34" charset="-120"/>'
        '</a:rPr>'
    )


def build_text_shape(element: TextElement, shape_id: int, *,
                     font_family: str = "Pretendard", language: str = "ko-KR") -> str:
    """
    Emit the ``p:sp`` text box for a text element.

    Each line of ``element.text`` becomes a paragraph holding a single run;
    every run shares the element's style.

    Args:
        element: Text element with validated fields
        shape_id: Unique id within the slide's shape tree (>= 2)
        font_family: Typeface used when the element names none
        language: Language tag for the runs

    Returns:
        str: XML fragment to place inside ``p:spTree``
    """
    paragraph_props = _paragraph_props_xml(element)
    run_props = _run_props_xml(element, font_family, language)
    paragraphs = "".join(
        f'<a:p>{paragraph_props}<a:r>{run_props}<a:t>{escape_xml(line)}</a:t></a:r></a:p>'
        for line in element.paragraphs
    )
    return (
        '<p:sp>'
        f'<p:nvSpPr><p:cNvPr id="{shape_id}" name="Text {shape_id}"/><p:cNvSpPr txBox="1"/><p:nvPr/></p:nvSpPr>'
        '<p:spPr>'
        f'{transform_xml(element)}'
        '<a:prstGeom prst="rect"><a:avLst/></a:prstGeom>'
        '<a:noFill/>'
        '</p:spPr>'
        '<p:txBody>'
        f'<a:bodyPr wrap="square" rtlCol="0" anchor="{element.valign}"/>'
        '<a:lstStyle/>'
        f'{paragraphs}'
        '</p:txBody>'
        '</p:sp>'
    )
