"""
Build configuration for the presentation synthesizer.
"""
from dataclasses import dataclass, field
from datetime import datetime

from .theme_loader import get_theme_xml

# 13.333" x 7.5" (16:9)
DEFAULT_SLIDE_WIDTH = 12192000
DEFAULT_SLIDE_HEIGHT = 6858000

# Earliest timestamp a ZIP entry can carry
FIXED_TIMESTAMP = datetime(1980, 1, 1, 0, 0, 0)


@dataclass(frozen=True)
class SynthConfig:
    """
    Settings shared by every part of one build.

    Attributes:
        slide_width: Canvas width in EMU
        slide_height: Canvas height in EMU
        theme: Name of a theme shipped in ``slide_synth/themes``
        font_family: Typeface used when a text element names none
        language: Language tag written on every text run
        compression_level: Deflate level, 0-9
        timestamp: Stamped on every archive entry and on the document properties
        title: Document title recorded in ``docProps/core.xml``
        creator: Author recorded in the document properties
    """
    slide_width: int = DEFAULT_SLIDE_WIDTH
    slide_height: int = DEFAULT_SLIDE_HEIGHT
    theme: str = "default"
    font_family: str = "Pretendard"
    language: str = "ko-KR"
    compression_level: int = 9
    timestamp: datetime = field(default=FIXED_TIMESTAMP)
    title: str = "Presentation"
    creator: str = "slide_synth"

    def __post_init__(self):
        if not 0 <= self.compression_level <= 9:
            raise ValueError(f"compression_level must be between 0 and 9, got {self.compression_level}")
        if self.slide_width <= 0 or self.slide_height <= 0:
            raise ValueError("Slide dimensions must be positive")
        if self.timestamp.year < 1980:
            raise ValueError("ZIP archives cannot store timestamps before 1980")
        # unknown themes raise here
        get_theme_xml(self.theme)

    @property
    def theme_xml(self) -> str:
        return get_theme_xml(self.theme)
