"""
Image parts embedded in the package.

Image elements refer to their binary by ``imageId``; the caller supplies the
binaries (bytes or a path on disk) keyed by that id. Pillow identifies the
format so the part gets the right extension and content type.
"""
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError

from .errors import MalformedElement
from .models import ImageElement, Template

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, bytearray, str, Path]

# Pillow format name -> (part extension, content type)
IMAGE_FORMATS: Dict[str, Tuple[str, str]] = {
    "PNG": ("png", "image/png"),
    "JPEG": ("jpeg", "image/jpeg"),
    "GIF": ("gif", "image/gif"),
    "BMP": ("bmp", "image/bmp"),
    "TIFF": ("tiff", "image/tiff"),
}

# rId1 of the slide always points at its layout
FIRST_IMAGE_REL = 2


@dataclass(frozen=True)
class ImageAsset:
    image_id: str
    data: bytes
    extension: str
    content_type: str
    size: Tuple[int, int]

    @classmethod
    def load(cls, image_id: str, source: ImageSource) -> "ImageAsset":
        """
        Read and identify one image.

        Raises:
            ValueError: If the source cannot be read or is not a supported image
        """
        if isinstance(source, (str, Path)):
            try:
                data = Path(source).expanduser().read_bytes()
            except OSError as e:
                raise ValueError(f"Could not read image file {source}: {e}") from e
        else:
            data = bytes(source)

        try:
            with Image.open(io.BytesIO(data)) as img:
                fmt = img.format
                size = img.size
        except (UnidentifiedImageError, OSError) as e:
            raise ValueError(f"Unrecognised image data for '{image_id}'") from e

        if fmt not in IMAGE_FORMATS:
            raise ValueError(f"Unsupported image format {fmt} for '{image_id}'. "
                             f"Supported: {sorted(IMAGE_FORMATS)}")
        extension, content_type = IMAGE_FORMATS[fmt]
        return cls(image_id=image_id, data=data, extension=extension,
                   content_type=content_type, size=size)


@dataclass(frozen=True)
class EmbeddedImage:
    asset: ImageAsset
    rel_id: str
    part_name: str

    @property
    def rel_target(self) -> str:
        """Target relative to ``ppt/slides/``."""
        return "../" + self.part_name[len("ppt/"):]


class MediaRegistry:
    """
    Assigns one relationship id and one media part per distinct ``imageId``.

    Ids and part names are handed out in the order images first appear on
    the slide, so the same template always produces the same package.
    """

    def __init__(self, images: Optional[Mapping[str, ImageSource]] = None):
        self._sources = dict(images or {})
        self._embedded: Dict[str, EmbeddedImage] = {}

    @classmethod
    def for_template(cls, template: Template,
                     images: Optional[Mapping[str, ImageSource]] = None) -> "MediaRegistry":
        """Resolve every image element of ``template`` against ``images``."""
        registry = cls(images)
        for index, element in enumerate(template.elements):
            if isinstance(element, ImageElement):
                registry.register(element.image_id, index)
        return registry

    def register(self, image_id: str, index: Optional[int] = None) -> EmbeddedImage:
        if image_id in self._embedded:
            return self._embedded[image_id]
        if image_id not in self._sources:
            raise MalformedElement(index, "imageId", f"no image data supplied for '{image_id}'")
        try:
            asset = ImageAsset.load(image_id, self._sources[image_id])
        except ValueError as e:
            raise MalformedElement(index, "imageId", str(e)) from e

        number = len(self._embedded) + 1
        embedded = EmbeddedImage(
            asset=asset,
            rel_id=f"rId{FIRST_IMAGE_REL + number - 1}",
            part_name=f"ppt/media/image{number}.{asset.extension}",
        )
        self._embedded[image_id] = embedded
        logger.debug("Embedded image %s as %s (%s, %dx%d)", image_id, embedded.part_name,
                     asset.content_type, *asset.size)
        return embedded

    @property
    def images(self) -> List[EmbeddedImage]:
        return list(self._embedded.values())

    @property
    def rel_ids(self) -> Dict[str, str]:
        """``imageId`` -> relationship id, as consumed by the slide assembler."""
        return {image_id: item.rel_id for image_id, item in self._embedded.items()}

    @property
    def content_type_defaults(self) -> List[Tuple[str, str]]:
        """Sorted ``(extension, content type)`` pairs to declare in the manifest."""
        return sorted({(item.asset.extension, item.asset.content_type) for item in self._embedded.values()})
