#!/usr/bin/env python3
"""
End-to-end tests: build a package and open it with python-pptx.
"""

import io
import logging
import os
import zipfile

import pytest
from pptx import Presentation
from pptx.util import Emu, Inches
from slide_synth import (
    PPTX_MEDIA_TYPE,
    MalformedElement,
    PresentationSynthesizer,
    SynthConfig,
    UnsupportedElementType,
    build_presentation,
)

HELLO = {
    "background": {"color": "FFFFFF"},
    "elements": [{
        "type": "text", "x": 1, "y": 1, "width": 4, "height": 1,
        "text": "Hello", "fontSize": 24, "color": "000000",
    }],
}


def image_template(*image_ids):
    return {"elements": [
        {"type": "image", "x": 1 + i, "y": 1, "width": 1, "height": 1, "imageId": image_id}
        for i, image_id in enumerate(image_ids)
    ]}


def open_presentation(data):
    return Presentation(io.BytesIO(data))


def test_hello_slide_opens():
    data = build_presentation(HELLO)
    prs = open_presentation(data)

    assert len(prs.slides) == 1
    assert prs.slide_width == Emu(12192000)
    shapes = list(prs.slides[0].shapes)
    assert len(shapes) == 1
    assert shapes[0].text_frame.text == "Hello"
    assert shapes[0].left == Inches(1)
    assert shapes[0].text_frame.paragraphs[0].runs[0].font.size.pt == 24


def test_shapes_keep_order_and_geometry():
    template = {"elements": [
        {"type": "shape", "x": 0, "y": 0, "width": 2, "height": 1, "fill": "FF0000", "borderRadius": 0.1},
        {"type": "text", "x": 0, "y": 0, "width": 2, "height": 1, "text": "on top"},
    ]}
    shapes = list(open_presentation(build_presentation(template)).slides[0].shapes)

    assert [shape.shape_id for shape in shapes] == [2, 3]
    assert shapes[0].width == Inches(2)
    assert shapes[1].text_frame.text == "on top"


def test_image_is_embedded(png_bytes):
    data = build_presentation(image_template("logo"), {"logo": png_bytes})

    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        assert zf.read("ppt/media/image1.png") == png_bytes
        manifest = zf.read("[Content_Types].xml").decode("utf-8")
    assert 'Extension="png" ContentType="image/png"' in manifest

    picture = open_presentation(data).slides[0].shapes[0]
    assert picture.image.content_type == "image/png"
    assert picture.image.blob == png_bytes


def test_repeated_image_id_shares_one_part(png_bytes, jpeg_bytes):
    data = build_presentation(image_template("a", "b", "a"), {"a": png_bytes, "b": jpeg_bytes})

    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        media = sorted(name for name in zf.namelist() if name.startswith("ppt/media/"))
    assert media == ["ppt/media/image1.png", "ppt/media/image2.jpeg"]


def test_image_from_path(tmp_path, jpeg_bytes):
    path = tmp_path / "photo.jpg"
    path.write_bytes(jpeg_bytes)
    picture = open_presentation(build_presentation(image_template("photo"), {"photo": path})).slides[0].shapes[0]
    assert picture.image.content_type == "image/jpeg"


def test_missing_image_names_element():
    template = {"elements": [HELLO["elements"][0], *image_template("ghost")["elements"]]}
    with pytest.raises(MalformedElement) as exc:
        build_presentation(template, {})
    assert exc.value.index == 1
    assert exc.value.field == "imageId"


def test_unreadable_image_is_rejected():
    with pytest.raises(MalformedElement, match="Unrecognised"):
        build_presentation(image_template("junk"), {"junk": b"not an image"})


def test_unknown_element_type_builds_nothing(tmp_path):
    output = tmp_path / "never.pptx"
    with pytest.raises(UnsupportedElementType):
        PresentationSynthesizer().save({"elements": [{"type": "video"}]}, output)
    assert not output.exists()


def test_overrides_replace_placeholder_text():
    template = {"elements": [{
        "type": "text", "x": 1, "y": 1, "width": 4, "height": 1,
        "text": "Title goes here", "placeholder": "{{mainTitle}}",
    }]}
    data = build_presentation(template, overrides={"mainTitle": "Quarterly Review"})
    assert open_presentation(data).slides[0].shapes[0].text_frame.text == "Quarterly Review"


def test_builds_are_byte_identical():
    assert build_presentation(HELLO) == build_presentation(HELLO)


def test_save_adds_extension(tmp_path):
    synthesizer = PresentationSynthesizer()
    path = synthesizer.save(HELLO, tmp_path / "nested" / "deck")

    assert path.endswith("deck.pptx")
    with open(path, "rb") as f:
        assert f.read() == synthesizer.build(HELLO)


def test_dark_theme_and_custom_size():
    config = SynthConfig(theme="dark", slide_width=9144000, slide_height=6858000)
    data = build_presentation(HELLO, config=config)

    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        assert b'name="Dark"' in zf.read("ppt/theme/theme1.xml")
    assert open_presentation(data).slide_width == Emu(9144000)


def test_media_type():
    assert PPTX_MEDIA_TYPE == "application/vnd.openxmlformats-officedocument.presentationml.presentation"


def test_debug_logs_build_summary(caplog):
    with caplog.at_level(logging.INFO, logger="slide_synth.generator"):
        PresentationSynthesizer(debug=True).build(HELLO)
    assert "Slide elements: 1" in caplog.text
    assert "Theme: default" in caplog.text


@pytest.mark.parametrize("raw", ["a\ud800b", "a\ufffeb", "a\uffffb"])
def test_characters_xml_cannot_carry_are_dropped(raw):
    template = {"elements": [dict(HELLO["elements"][0], text=raw)]}
    data = build_presentation(template)
    assert open_presentation(data).slides[0].shapes[0].text_frame.text == "ab"


def test_font_weight_reaches_the_run():
    template = {"elements": [dict(HELLO["elements"][0], fontWeight=800)]}
    run = open_presentation(build_presentation(template)).slides[0].shapes[0].text_frame.paragraphs[0].runs[0]
    assert run.font.bold is True


def test_failed_save_keeps_existing_file(tmp_path, monkeypatch):
    target = tmp_path / "deck.pptx"
    target.write_bytes(b"previous")

    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", fail_replace)
    with pytest.raises(OSError):
        PresentationSynthesizer().save(HELLO, target)

    assert target.read_bytes() == b"previous"
    assert [p.name for p in tmp_path.iterdir()] == ["deck.pptx"]
