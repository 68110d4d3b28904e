import io
import sys
from pathlib import Path

import pytest
from lxml import etree
from PIL import Image

# Ensure project root is on sys.path so `import slide_synth` works
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

NS = {
    "a": "http://schemas.openxmlformats.org/drawingml/2006/main",
    "p": "http://schemas.openxmlformats.org/presentationml/2006/main",
    "r": "http://schemas.openxmlformats.org/officeDocument/2006/relationships",
    "ct": "http://schemas.openxmlformats.org/package/2006/content-types",
    "rel": "http://schemas.openxmlformats.org/package/2006/relationships",
}


@pytest.fixture
def ns():
    return NS


@pytest.fixture
def fragment():
    """Parse a builder's XML fragment (which uses the a:/p:/r: prefixes) into an element."""
    def _parse(xml):
        wrapped = (
            f'<root xmlns:a="{NS["a"]}" xmlns:p="{NS["p"]}" xmlns:r="{NS["r"]}">{xml}</root>'
        )
        return etree.fromstring(wrapped.encode("utf-8"))[0]
    return _parse


@pytest.fixture
def png_bytes():
    buf = io.BytesIO()
    Image.new("RGB", (8, 6), "red").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def jpeg_bytes():
    buf = io.BytesIO()
    Image.new("RGB", (8, 6), "blue").save(buf, format="JPEG")
    return buf.getvalue()
