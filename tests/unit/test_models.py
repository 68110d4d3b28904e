"""Test template parsing and validation."""

import math

import pytest
from slide_synth.errors import MalformedElement, UnsupportedElementType
from slide_synth.models import (
    ImageElement,
    Shadow,
    ShapeElement,
    Template,
    TextElement,
    element_from_dict,
)

BOX = {"x": 1, "y": 1, "width": 2, "height": 1}


def text(**fields):
    return {"type": "text", **BOX, **fields}


def shape(**fields):
    return {"type": "shape", **BOX, **fields}


def test_text_defaults():
    element = element_from_dict(text(text="Hello"))

    assert isinstance(element, TextElement)
    assert element.text == "Hello"
    assert element.font_size == 12
    assert element.color == "000000"
    assert element.font_family is None
    assert element.align == "l"
    assert element.valign == "t"
    assert element.line_spacing_type == "points"
    assert element.rotation is None


def test_type_tag_is_case_insensitive():
    assert isinstance(element_from_dict(text(type="Text")), TextElement)
    assert isinstance(element_from_dict(shape(type="SHAPE")), ShapeElement)


def test_alignment_names_are_normalised():
    element = element_from_dict(text(align="center", valign="middle"))
    assert (element.align, element.valign) == ("ctr", "ctr")

    element = element_from_dict(text(align="right", valign="bottom"))
    assert (element.align, element.valign) == ("r", "b")

    # raw OOXML tokens are accepted as well
    element = element_from_dict(text(align="r", valign="t"))
    assert (element.align, element.valign) == ("r", "t")


def test_invalid_alignment():
    with pytest.raises(MalformedElement) as exc:
        element_from_dict(text(align="diagonal"), 3)
    assert exc.value.index == 3
    assert exc.value.field == "align"


def test_hex_colours_are_normalised():
    element = element_from_dict(shape(fill="#ff00aa", stroke="abcdef"))
    assert element.fill == "FF00AA"
    assert element.stroke == "ABCDEF"


def test_invalid_colour_names_field():
    with pytest.raises(MalformedElement) as exc:
        element_from_dict(shape(fill="red"), 0)
    assert exc.value.field == "fill"


def test_missing_geometry_identifies_element_and_field():
    data = {"elements": [text(text="ok"), {"type": "shape", "x": 0, "y": 0, "width": 1}]}
    with pytest.raises(MalformedElement) as exc:
        Template.from_dict(data)
    assert exc.value.index == 1
    assert exc.value.field == "height"
    assert "element 1" in str(exc.value)


@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
def test_non_finite_geometry_is_rejected(bad):
    with pytest.raises(MalformedElement) as exc:
        Template.from_dict({"elements": [shape(width=bad)]})
    assert exc.value.index == 0
    assert exc.value.field == "width"


@pytest.mark.parametrize("field,value", [
    ("x", -1),
    ("fontSize", "big"),
    ("fontSize", True),
    ("lineSpacing", math.nan),
])
def test_malformed_text_fields(field, value):
    with pytest.raises(MalformedElement) as exc:
        element_from_dict(text(**{field: value}), 5)
    assert exc.value.field == field
    assert exc.value.index == 5


def test_opacity_range():
    with pytest.raises(MalformedElement):
        element_from_dict(shape(fillOpacity=1.5))
    with pytest.raises(MalformedElement):
        element_from_dict({"type": "image", **BOX, "imageId": "a", "opacity": -0.1})


def test_unknown_type_is_rejected():
    with pytest.raises(UnsupportedElementType) as exc:
        Template.from_dict({"elements": [{"type": "chart", **BOX}]})
    assert exc.value.index == 0
    assert exc.value.element_type == "chart"


def test_missing_type_is_rejected():
    with pytest.raises(UnsupportedElementType):
        element_from_dict(dict(BOX), 0)


def test_shadow_parsing():
    element = element_from_dict(shape(shadow={"blur": 6, "color": "#333333"}))
    assert element.shadow == Shadow(blur=6, offset_y=2, color="333333", opacity=0.2)

    assert element_from_dict(shape()).shadow is None
    assert element_from_dict(shape(shadow=False)).shadow is None

    with pytest.raises(MalformedElement) as exc:
        element_from_dict(shape(shadow=True))
    assert exc.value.field == "shadow"


def test_image_requires_image_id():
    with pytest.raises(MalformedElement) as exc:
        element_from_dict({"type": "image", **BOX}, 2)
    assert exc.value.field == "imageId"

    element = element_from_dict({"type": "image", **BOX, "imageId": "logo", "opacity": 0.5})
    assert isinstance(element, ImageElement)
    assert element.image_id == "logo"
    assert element.opacity == 0.5


def test_template_background_and_order():
    template = Template.from_dict({
        "background": {"color": "00ff00"},
        "elements": [text(text="a"), shape(), text(text="b")],
    })
    assert template.background.color == "00FF00"
    assert [type(e).__name__ for e in template.elements] == ["TextElement", "ShapeElement", "TextElement"]


def test_template_defaults_and_shape_errors():
    template = Template.from_dict({})
    assert template.background.color == "FFFFFF"
    assert template.elements == ()

    with pytest.raises(MalformedElement) as exc:
        Template.from_dict({"background": {"color": "nope"}})
    assert exc.value.index is None
    assert exc.value.field == "color"

    with pytest.raises(MalformedElement) as exc:
        Template.from_dict({"elements": "not a list"})
    assert exc.value.field == "elements"

    with pytest.raises(MalformedElement):
        Template.from_dict(["not", "a", "mapping"])


def test_paragraph_split_normalises_line_endings():
    element = element_from_dict(text(text="one\r\ntwo\rthree\nfour"))
    assert element.paragraphs == ["one", "two", "three", "four"]
    assert element_from_dict(text()).paragraphs == [""]


def test_apply_overrides_replaces_placeholder_text():
    template = Template.from_dict({"elements": [
        text(text="Old title", placeholder="{{mainTitle}}"),
        text(text="Footer"),
        text(text="Old body", placeholder="{{body}}"),
    ]})

    updated = template.apply_overrides({"mainTitle": "New title", "{{body}}": "New body"})

    assert [e.text for e in updated.elements] == ["New title", "Footer", "New body"]
    # the input template is untouched
    assert [e.text for e in template.elements] == ["Old title", "Footer", "Old body"]
    assert template.apply_overrides(None) is template


def test_integer_too_large_for_float():
    with pytest.raises(MalformedElement) as exc:
        Template.from_dict({"elements": [shape(x=10 ** 400)]})
    assert exc.value.index == 0
    assert exc.value.field == "x"


@pytest.mark.parametrize("field,value", [
    ("x", 1e300),
    ("rotation", 1e300),
    ("strokeWidth", 1e300),
])
def test_values_beyond_ooxml_range(field, value):
    with pytest.raises(MalformedElement) as exc:
        element_from_dict(shape(**{field: value}), 0)
    assert exc.value.field == field


def test_zero_font_size_falls_back_to_default():
    assert element_from_dict(text(fontSize=0)).font_size == 12


@pytest.mark.parametrize("field,value", [
    ("fontSize", 0.5),
    ("fontSize", 4001),
    ("charSpacing", 4001),
    ("charSpacing", -4001),
    ("spaceBefore", 2000),
    ("lineSpacing", 2000),
])
def test_text_sizes_outside_schema_range(field, value):
    with pytest.raises(MalformedElement) as exc:
        element_from_dict(text(**{field: value}), 1)
    assert exc.value.field == field


def test_line_spacing_limit_depends_on_type():
    element = element_from_dict(text(lineSpacing=2000, lineSpacingType="percent"))
    assert element.line_spacing == 2000


@pytest.mark.parametrize("field", ["bold", "italic"])
def test_style_flags_must_be_booleans(field):
    with pytest.raises(MalformedElement) as exc:
        element_from_dict(text(**{field: "false"}), 0)
    assert exc.value.field == field


def test_font_weight_sets_bold():
    assert element_from_dict(text(fontWeight=800)).bold is True
    assert element_from_dict(text(fontWeight=700)).bold is True
    assert element_from_dict(text(fontWeight=500)).bold is False
    # an explicit flag wins over the weight
    assert element_from_dict(text(fontWeight=800, bold=False)).bold is False
    assert element_from_dict(text(fontWeight=300, bold=True)).bold is True
