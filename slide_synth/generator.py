#!/usr/bin/env python3
"""
Main synthesizer module that ties together the slide assembler and the package writer.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .config import SynthConfig
from .media import ImageSource, MediaRegistry
from .models import Template
from .package import PackagePart, assemble_package
from .skeleton import SLIDE, relationships_xml, rels_part_name, skeleton_parts, slide_relationships
from .slide import build_slide_xml

logger = logging.getLogger(__name__)

PPTX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"

TemplateInput = Union[Template, Mapping[str, Any]]


class PresentationSynthesizer:
    """
    Builds a single-slide PPTX package from a slide template.

    The synthesizer holds configuration only; every call to :meth:`build`
    starts from scratch, so one instance can serve concurrent callers.
    """

    def __init__(self, *, config: Optional[SynthConfig] = None, debug: bool = False):
        """Create a new :class:`PresentationSynthesizer`.

        Parameters
        ----------
        config
            Canvas size, theme, default font, compression and timestamp.
            Defaults to :class:`SynthConfig` with its defaults.
        debug
            Log a summary of every build at INFO level.
        """
        self.config = config or SynthConfig()
        self.debug = debug

    def build_parts(self, template: TemplateInput,
                    images: Optional[Mapping[str, ImageSource]] = None,
                    overrides: Optional[Mapping[str, str]] = None) -> list:
        """
        Render every part of the package without packing it.

        Args:
            template: Template mapping (as decoded from JSON) or a parsed Template
            images: ``imageId`` -> image bytes or path, for the template's image elements
            overrides: Placeholder -> replacement text for text elements

        Returns:
            list: PackagePart objects, manifest first
        """
        parsed = Template.from_dict(template).apply_overrides(overrides)
        media = MediaRegistry.for_template(parsed, images)

        slide_xml = build_slide_xml(parsed, media.rel_ids, self.config)
        slide_rels = slide_relationships([(item.rel_id, item.rel_target) for item in media.images])

        parts = [
            PackagePart.from_text(name, xml)
            for name, xml in skeleton_parts(self.config, media.content_type_defaults).items()
        ]
        parts.append(PackagePart.from_text(SLIDE, slide_xml))
        parts.append(PackagePart.from_text(rels_part_name(SLIDE), relationships_xml(slide_rels)))
        parts.extend(PackagePart(item.part_name, item.asset.data) for item in media.images)

        if self.debug:
            logger.info(f"Slide elements: {len(parsed.elements)}")
            logger.info(f"Embedded images: {len(media.images)}")
            logger.info(f"Theme: {self.config.theme}")
        return parts

    def build(self, template: TemplateInput,
              images: Optional[Mapping[str, ImageSource]] = None,
              overrides: Optional[Mapping[str, str]] = None) -> bytes:
        """
        Build the presentation and return the archive bytes.

        Raises:
            MalformedElement: If a template field is invalid
            UnsupportedElementType: If an element has an unknown type tag
            PackagingFailed: If the package cannot be verified or written
        """
        parts = self.build_parts(template, images, overrides)
        data = assemble_package(
            parts,
            compression_level=self.config.compression_level,
            timestamp=self.config.timestamp,
        )
        if self.debug:
            logger.info(f"Packed {len(parts)} parts into {len(data)} bytes")
        return data

    def save(self, template: TemplateInput, output_path: Union[str, Path] = "output/presentation.pptx",
             images: Optional[Mapping[str, ImageSource]] = None,
             overrides: Optional[Mapping[str, str]] = None) -> str:
        """
        Build the presentation and write it to ``output_path``.

        The file is only created once the whole package has been built.

        Returns:
            str: Path to the generated PPTX file
        """
        output_path = str(output_path)
        if not output_path.endswith('.pptx'):
            output_path = f"{output_path}.pptx"

        data = self.build(template, images, overrides)

        directory = os.path.dirname(output_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        # write beside the target, then swap it in whole
        fd, tmp_path = tempfile.mkstemp(suffix=".pptx.tmp", dir=directory or ".")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, output_path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

        if self.debug:
            logger.info(f"Generated presentation saved to: {output_path}")
        return output_path


def build_presentation(template: TemplateInput,
                       images: Optional[Mapping[str, ImageSource]] = None,
                       *,
                       overrides: Optional[Mapping[str, str]] = None,
                       config: Optional[SynthConfig] = None) -> bytes:
    """Build a PPTX from ``template``; see :meth:`PresentationSynthesizer.build`."""
    return PresentationSynthesizer(config=config).build(template, images, overrides)
