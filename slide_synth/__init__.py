"""
Slide Synth Package

Builds Office Open XML presentations (PPTX) directly from a declarative slide template.
"""

from .config import SynthConfig
from .errors import MalformedElement, PackagingFailed, SlideSynthError, UnsupportedElementType
from .generator import PPTX_MEDIA_TYPE, PresentationSynthesizer, build_presentation
from .models import Background, ImageElement, Shadow, ShapeElement, Template, TextElement

__all__ = [
    'PresentationSynthesizer', 'build_presentation', 'PPTX_MEDIA_TYPE', 'SynthConfig',
    'Template', 'Background', 'TextElement', 'ShapeElement', 'ImageElement', 'Shadow',
    'SlideSynthError', 'MalformedElement', 'UnsupportedElementType', 'PackagingFailed',
]
