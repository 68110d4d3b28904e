"""
Fixed parts of a single-slide package.

Every part other than the slide itself comes from a named Jinja2 template in
``slide_synth/templates``. The templates are compiled once, when this module
is imported, and rendered with the same inputs on every build, so the
manifest, the relationship graphs and the parts written always agree.

Part layout::

    [Content_Types].xml
    _rels/.rels
    docProps/core.xml, docProps/app.xml
    ppt/presentation.xml (+ _rels)
    ppt/presProps.xml, ppt/viewProps.xml, ppt/tableStyles.xml
    ppt/slideMasters/slideMaster1.xml (+ _rels)
    ppt/slideLayouts/slideLayout1.xml (+ _rels)
    ppt/theme/theme1.xml
    ppt/slides/slide1.xml (+ _rels)
    ppt/media/image*.*      (one per embedded image)
"""
import posixpath
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from jinja2 import Environment, PackageLoader, StrictUndefined

from .config import SynthConfig

CONTENT_TYPES = "[Content_Types].xml"
ROOT_RELS = "_rels/.rels"
CORE_PROPS = "docProps/core.xml"
APP_PROPS = "docProps/app.xml"
PRESENTATION = "ppt/presentation.xml"
PRES_PROPS = "ppt/presProps.xml"
VIEW_PROPS = "ppt/viewProps.xml"
TABLE_STYLES = "ppt/tableStyles.xml"
SLIDE_MASTER = "ppt/slideMasters/slideMaster1.xml"
SLIDE_LAYOUT = "ppt/slideLayouts/slideLayout1.xml"
THEME = "ppt/theme/theme1.xml"
SLIDE = "ppt/slides/slide1.xml"

_OFFICE_RELS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
REL_OFFICE_DOCUMENT = f"{_OFFICE_RELS}/officeDocument"
REL_CORE_PROPS = "http://schemas.openxmlformats.org/package/2006/relationships/metadata/core-properties"
REL_APP_PROPS = f"{_OFFICE_RELS}/extended-properties"
REL_SLIDE_MASTER = f"{_OFFICE_RELS}/slideMaster"
REL_SLIDE_LAYOUT = f"{_OFFICE_RELS}/slideLayout"
REL_SLIDE = f"{_OFFICE_RELS}/slide"
REL_THEME = f"{_OFFICE_RELS}/theme"
REL_PRES_PROPS = f"{_OFFICE_RELS}/presProps"
REL_VIEW_PROPS = f"{_OFFICE_RELS}/viewProps"
REL_TABLE_STYLES = f"{_OFFICE_RELS}/tableStyles"
REL_IMAGE = f"{_OFFICE_RELS}/image"

_PML = "application/vnd.openxmlformats-officedocument.presentationml"
DEFAULT_CONTENT_TYPES = (
    ("rels", "application/vnd.openxmlformats-package.relationships+xml"),
    ("xml", "application/xml"),
)
PART_CONTENT_TYPES = (
    (PRESENTATION, f"{_PML}.presentation.main+xml"),
    (SLIDE_MASTER, f"{_PML}.slideMaster+xml"),
    (SLIDE_LAYOUT, f"{_PML}.slideLayout+xml"),
    (SLIDE, f"{_PML}.slide+xml"),
    (THEME, "application/vnd.openxmlformats-officedocument.theme+xml"),
    (PRES_PROPS, f"{_PML}.presProps+xml"),
    (VIEW_PROPS, f"{_PML}.viewProps+xml"),
    (TABLE_STYLES, f"{_PML}.tableStyles+xml"),
    (CORE_PROPS, "application/vnd.openxmlformats-package.core-properties+xml"),
    (APP_PROPS, "application/vnd.openxmlformats-officedocument.extended-properties+xml"),
)

# sldMasterId and sldLayoutId share one id space starting at 2^31
SLIDE_MASTER_ID = 2147483648
SLIDE_LAYOUT_ID = 2147483649
SLIDE_ID = 256

_ENV = Environment(
    loader=PackageLoader("slide_synth", "templates"),
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
    undefined=StrictUndefined,
)
TEMPLATES = {
    name: _ENV.get_template(f"{name}.xml.j2")
    for name in (
        "content_types", "relationships", "core", "app", "presentation",
        "pres_props", "view_props", "table_styles", "slide_master", "slide_layout",
    )
}


@dataclass(frozen=True)
class Relationship:
    rel_id: str
    rel_type: str
    target: str


def rels_part_name(part_name: str) -> str:
    """``ppt/slides/slide1.xml`` -> ``ppt/slides/_rels/slide1.xml.rels``; ``""`` is the package root."""
    directory, filename = posixpath.split(part_name)
    return posixpath.join(directory, "_rels", f"{filename}.rels")


def relationships_xml(relationships: Iterable[Relationship]) -> str:
    return TEMPLATES["relationships"].render(relationships=list(relationships))


def content_types_xml(media_defaults: Sequence[Tuple[str, str]] = ()) -> str:
    """
    Render the manifest.

    Args:
        media_defaults: ``(extension, content type)`` for each embedded media kind
    """
    defaults = list(DEFAULT_CONTENT_TYPES) + sorted(set(media_defaults))
    return TEMPLATES["content_types"].render(defaults=defaults, overrides=PART_CONTENT_TYPES)


def root_relationships() -> List[Relationship]:
    return [
        Relationship("rId1", REL_OFFICE_DOCUMENT, PRESENTATION),
        Relationship("rId2", REL_CORE_PROPS, CORE_PROPS),
        Relationship("rId3", REL_APP_PROPS, APP_PROPS),
    ]


def presentation_relationships() -> List[Relationship]:
    return [
        Relationship("rId1", REL_SLIDE_MASTER, "slideMasters/slideMaster1.xml"),
        Relationship("rId2", REL_SLIDE, "slides/slide1.xml"),
        Relationship("rId3", REL_THEME, "theme/theme1.xml"),
        Relationship("rId4", REL_PRES_PROPS, "presProps.xml"),
        Relationship("rId5", REL_VIEW_PROPS, "viewProps.xml"),
        Relationship("rId6", REL_TABLE_STYLES, "tableStyles.xml"),
    ]


def slide_master_relationships() -> List[Relationship]:
    return [
        Relationship("rId1", REL_SLIDE_LAYOUT, "../slideLayouts/slideLayout1.xml"),
        Relationship("rId2", REL_THEME, "../theme/theme1.xml"),
    ]


def slide_layout_relationships() -> List[Relationship]:
    return [Relationship("rId1", REL_SLIDE_MASTER, "../slideMasters/slideMaster1.xml")]


def slide_relationships(image_targets: Sequence[Tuple[str, str]] = ()) -> List[Relationship]:
    """
    Relationships of the slide part.

    Args:
        image_targets: ``(relationship id, target)`` per embedded image,
            targets relative to ``ppt/slides/``
    """
    relationships = [Relationship("rId1", REL_SLIDE_LAYOUT, "../slideLayouts/slideLayout1.xml")]
    relationships.extend(Relationship(rel_id, REL_IMAGE, target) for rel_id, target in image_targets)
    return relationships


def skeleton_parts(config: SynthConfig, media_defaults: Sequence[Tuple[str, str]] = ()) -> Dict[str, str]:
    """
    Render every part that does not depend on the slide's content.

    Returns:
        dict: part name -> XML text, manifest first
    """
    timestamp = config.timestamp.strftime("%Y-%m-%dT%H:%M:%SZ")
    return {
        CONTENT_TYPES: content_types_xml(media_defaults),
        ROOT_RELS: relationships_xml(root_relationships()),
        CORE_PROPS: TEMPLATES["core"].render(title=config.title, creator=config.creator, timestamp=timestamp),
        APP_PROPS: TEMPLATES["app"].render(creator=config.creator, slide_count=1),
        PRESENTATION: TEMPLATES["presentation"].render(
            master_id=SLIDE_MASTER_ID,
            master_rel_id="rId1",
            slide_id=SLIDE_ID,
            slide_rel_id="rId2",
            slide_width=config.slide_width,
            slide_height=config.slide_height,
        ),
        rels_part_name(PRESENTATION): relationships_xml(presentation_relationships()),
        PRES_PROPS: TEMPLATES["pres_props"].render(),
        VIEW_PROPS: TEMPLATES["view_props"].render(),
        TABLE_STYLES: TEMPLATES["table_styles"].render(),
        SLIDE_MASTER: TEMPLATES["slide_master"].render(layout_id=SLIDE_LAYOUT_ID, layout_rel_id="rId1"),
        rels_part_name(SLIDE_MASTER): relationships_xml(slide_master_relationships()),
        SLIDE_LAYOUT: TEMPLATES["slide_layout"].render(),
        rels_part_name(SLIDE_LAYOUT): relationships_xml(slide_layout_relationships()),
        THEME: config.theme_xml,
    }
