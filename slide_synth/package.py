#!/usr/bin/env python3
"""
Archive assembler: verifies the part set and packs it into a ZIP byte stream.
"""
import io
import logging
import posixpath
import zipfile
import zlib
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Sequence, Union

from lxml import etree

from .errors import PackagingFailed
from .skeleton import CONTENT_TYPES

logger = logging.getLogger(__name__)

CT_NS = "http://schemas.openxmlformats.org/package/2006/content-types"
RELS_NS = "http://schemas.openxmlformats.org/package/2006/relationships"

_XML_SUFFIXES = (".xml", ".rels")


@dataclass(frozen=True)
class PackagePart:
    """One entry of the archive; ``name`` has no leading slash."""
    name: str
    data: bytes

    @classmethod
    def from_text(cls, name: str, text: Union[str, bytes]) -> "PackagePart":
        if isinstance(text, str):
            text = text.encode("utf-8")
        return cls(name=name, data=text)

    @property
    def is_xml(self) -> bool:
        return self.name.endswith(_XML_SUFFIXES)


def _parse(part: PackagePart):
    try:
        return etree.fromstring(part.data)
    except etree.XMLSyntaxError as e:
        raise PackagingFailed(f"{part.name} is not well-formed XML: {e}") from e


def _rels_source_dir(rels_name: str) -> str:
    # ppt/slides/_rels/slide1.xml.rels -> ppt/slides ; _rels/.rels -> ""
    return posixpath.dirname(posixpath.dirname(rels_name))


def verify_parts(parts: Sequence[PackagePart]) -> None:
    """
    Check that the part set forms a readable package.

    * every XML part is well-formed
    * every part is declared in ``[Content_Types].xml``, by override or by extension
    * every override names a part that is actually written
    * every internal relationship target resolves to a written part

    Raises:
        PackagingFailed: On the first violation found
    """
    by_name: Dict[str, PackagePart] = {}
    for part in parts:
        if part.name in by_name:
            raise PackagingFailed(f"duplicate part {part.name}")
        by_name[part.name] = part

    if CONTENT_TYPES not in by_name:
        raise PackagingFailed(f"missing {CONTENT_TYPES}")

    trees = {part.name: _parse(part) for part in parts if part.is_xml}

    manifest = trees[CONTENT_TYPES]
    defaults = {el.get("Extension").lower() for el in manifest.iter(f"{{{CT_NS}}}Default")}
    overrides = {el.get("PartName").lstrip("/") for el in manifest.iter(f"{{{CT_NS}}}Override")}

    for name in overrides:
        if name not in by_name:
            raise PackagingFailed(f"content types declare {name} but no such part is written")

    for name in by_name:
        if name == CONTENT_TYPES:
            continue
        # splitext treats "_rels/.rels" as extensionless
        _, dot, extension = posixpath.basename(name).rpartition(".")
        extension = extension.lower() if dot else ""
        if name not in overrides and extension not in defaults:
            raise PackagingFailed(f"part {name} has no content type")

    for name, tree in trees.items():
        if not name.endswith(".rels"):
            continue
        source_dir = _rels_source_dir(name)
        for rel in tree.iter(f"{{{RELS_NS}}}Relationship"):
            if rel.get("TargetMode") == "External":
                continue
            target = posixpath.normpath(posixpath.join(source_dir, rel.get("Target", "")))
            if target not in by_name:
                raise PackagingFailed(f"{name} relationship {rel.get('Id')} targets missing part {target}")


def write_archive(parts: Iterable[PackagePart], *, compression_level: int = 9,
                  timestamp: datetime = datetime(1980, 1, 1)) -> bytes:
    """
    Pack ``parts`` into a deflate-compressed ZIP archive held in memory.

    ``[Content_Types].xml`` is written first and every entry carries
    ``timestamp``, so identical inputs give identical bytes.

    Args:
        parts: Package parts, already verified
        compression_level: Deflate level, 0-9
        timestamp: Modification time stamped on every entry

    Returns:
        bytes: the complete archive

    Raises:
        PackagingFailed: If any entry cannot be written
    """
    ordered: List[PackagePart] = sorted(parts, key=lambda p: p.name != CONTENT_TYPES)
    date_time = timestamp.timetuple()[:6]
    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED,
                             compresslevel=compression_level) as zf:
            for part in ordered:
                info = zipfile.ZipInfo(part.name, date_time=date_time)
                info.compress_type = zipfile.ZIP_DEFLATED
                info.create_system = 3
                info.external_attr = 0o644 << 16
                zf.writestr(info, part.data, compresslevel=compression_level)
                logger.debug("Packed %s (%d bytes)", part.name, len(part.data))
    except (OSError, ValueError, TypeError, zlib.error, zipfile.LargeZipFile) as e:
        logger.error(f"Failed to pack archive: {e}")
        raise PackagingFailed(str(e)) from e
    return buffer.getvalue()


def assemble_package(parts: Sequence[PackagePart], *, compression_level: int = 9,
                     timestamp: datetime = datetime(1980, 1, 1)) -> bytes:
    """Verify ``parts`` and pack them; the only way bytes leave this module."""
    verify_parts(parts)
    return write_archive(parts, compression_level=compression_level, timestamp=timestamp)


