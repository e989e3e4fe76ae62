"""Tests for pydantic models."""

import pytest
from pydantic import ValidationError

from l1printer.models.dpi import (
    DPI_PRESETS,
    calculate_scale_factor,
    get_dpi_preset,
    recommended_font_size,
)
from l1printer.models.job import JOB_STATE_ORDER, JobState, PrintResult
from l1printer.models.printer import ImageDimensions, ImageSplit, PrinterConfig
from l1printer.models.template import (
    CircleElement,
    ElementType,
    GridElement,
    HorizontalAlignment,
    InvalidElement,
    LineElement,
    RectangleElement,
    RenderTemplate,
    StripeDirection,
    StripeElement,
    TextElement,
    UnknownElement,
)


def make_template(*elements, **extra) -> RenderTemplate:
    return RenderTemplate.model_validate({"name": "test", "elements": list(elements), **extra})


class TestRenderTemplate:
    """Tests for template parsing."""

    def test_parses_every_element_type(self):
        """Each type tag selects its element model."""
        template = make_template(
            {"type": "text", "content": "hi", "position": {"x": 1, "y": 2}},
            {"type": "line", "start": {"x": 0, "y": 0}, "end": {"x": 5, "y": 5}},
            {"type": "rectangle", "position": {"x": 0, "y": 0}, "width": 4, "height": 2},
            {"type": "circle", "center": {"x": 3, "y": 3}, "radius": 2},
            {"type": "stripes", "direction": "vertical", "spacing": 4, "width": 2},
            {"type": "grid", "cellWidth": 10, "cellHeight": 5},
        )

        assert [type(e) for e in template.elements] == [
            TextElement,
            LineElement,
            RectangleElement,
            CircleElement,
            StripeElement,
            GridElement,
        ]

    def test_camel_case_keys(self):
        """Template JSON uses camelCase keys."""
        template = make_template(
            {"type": "text", "content": "x", "position": {"x": 0, "y": 0}, "fontSize": 9, "fontFamily": "Mono"},
            {"type": "grid", "cellWidth": 10, "cellHeight": 5, "lineWidth": 2},
            defaultFont={"family": "Norwester Condensed", "size": 16},
        )

        text, grid = template.elements
        assert text.font_size == 9
        assert text.font_family == "Mono"
        assert grid.line_width == 2
        assert template.default_font.family == "Norwester Condensed"
        assert template.default_font.size == 16

    def test_element_defaults(self):
        """Optional element fields fall back to their defaults."""
        template = make_template(
            {"type": "text", "content": "x", "position": {"x": 0, "y": 0}},
            {"type": "line", "start": {"x": 0, "y": 0}, "end": {"x": 1, "y": 1}},
            {"type": "rectangle", "position": {"x": 0, "y": 0}, "width": 1, "height": 1},
            {"type": "stripes", "direction": "horizontal", "spacing": 4, "width": 2},
        )

        text, line, rect, stripes = template.elements
        assert text.align == HorizontalAlignment.LEFT
        assert text.font_size is None
        assert line.width == 1
        assert rect.filled is False
        assert stripes.bounds is None
        assert stripes.direction == StripeDirection.HORIZONTAL

    @pytest.mark.parametrize("key", ["align", "alignment"])
    def test_text_alignment_keys(self, key):
        """Alignment may be given as either key."""
        template = make_template({"type": "text", "content": "x", "position": {"x": 0, "y": 0}, key: "center"})
        assert template.elements[0].align == HorizontalAlignment.CENTER

    def test_unknown_element_type_is_kept(self):
        """Unknown types parse as UnknownElement instead of failing the template."""
        template = make_template(
            {"type": "hologram", "shimmer": 3},
            {"type": "circle", "center": {"x": 3, "y": 3}, "radius": 2},
        )

        unknown = template.elements[0]
        assert isinstance(unknown, UnknownElement)
        assert unknown.type == "hologram"
        assert isinstance(template.elements[1], CircleElement)

    def test_element_without_type_is_unknown(self):
        """An element with no type tag is unknown."""
        template = make_template({"content": "orphan"})
        assert isinstance(template.elements[0], UnknownElement)

    def test_known_type_with_bad_fields_is_invalid(self):
        """A known element with invalid fields parses as InvalidElement."""
        template = make_template({"type": "rectangle", "position": {"x": 0, "y": 0}})

        invalid = template.elements[0]
        assert isinstance(invalid, InvalidElement)
        assert invalid.type == "rectangle"
        assert invalid.data == {"type": "rectangle", "position": {"x": 0, "y": 0}}
        assert "width: Field required" in invalid.error
        assert "height: Field required" in invalid.error

    def test_invalid_element_reused(self):
        """Parsed invalid elements can be passed to a new template."""
        template = make_template({"type": "circle"})
        again = RenderTemplate(name="copy", elements=template.elements)
        assert isinstance(again.elements[0], InvalidElement)

    def test_empty_name_rejected(self):
        """Template names cannot be blank."""
        with pytest.raises(ValidationError):
            RenderTemplate(name="  ", elements=[])

    def test_dimensions_override(self):
        """Per-template dimensions are optional."""
        template = make_template(dimensions={"width": 384})
        assert template.dimensions.width == 384
        assert template.dimensions.height is None

    def test_debug_dict(self):
        """Debug dump numbers elements from 1 and keeps camelCase keys."""
        template = make_template(
            {"type": "grid", "cellWidth": 10, "cellHeight": 5},
            {"type": "hologram"},
            description="grid",
        )

        info = template.to_debug_dict()

        assert info["template"] == "test"
        assert info["description"] == "grid"
        assert info["elements"][0]["index"] == 1
        assert info["elements"][0]["elementType"] == "grid"
        assert info["elements"][0]["cellWidth"] == 10
        assert info["elements"][1]["index"] == 2
        assert info["elements"][1]["elementType"] == "hologram"

    def test_element_type_enum(self):
        """All six drawing primitives are known."""
        assert {str(t) for t in ElementType} == {"text", "line", "rectangle", "circle", "stripes", "grid"}


class TestPrinterConfig:
    """Tests for printer configuration."""

    def test_defaults(self):
        """Defaults match the L1 factory link settings."""
        config = PrinterConfig()
        assert config.port_path == "COM3"
        assert config.baud_rate == 57600
        assert config.packet_size == 122
        assert config.exit_delay == 2000
        assert config.packet_delay == 0
        assert config.firmware_timeout == 5000

    @pytest.mark.parametrize(
        "field,value",
        [
            ("port_path", ""),
            ("baud_rate", 0),
            ("packet_size", 0),
            ("packet_size", -1),
            ("exit_delay", -1),
            ("packet_delay", -5),
            ("firmware_timeout", 0),
        ],
    )
    def test_invalid_values(self, field, value):
        """Out-of-range settings are rejected."""
        with pytest.raises(ValidationError):
            PrinterConfig(**{field: value})

    def test_default_dimensions(self):
        """Default label is 227 columns by 17 modules at 203 DPI."""
        dims = ImageDimensions()
        assert (dims.width, dims.height, dims.dpi) == (227, 17, 203)

    def test_split_is_frozen(self):
        """Splits cannot be modified after creation."""
        split = ImageSplit(data=b"\x00", dimensions=ImageDimensions(width=1, height=1), split_index=0, total_splits=1)
        with pytest.raises(ValidationError):
            split.split_index = 1


class TestJobModels:
    """Tests for print job models."""

    def test_state_order(self):
        """Job states run from idle to completed."""
        assert JOB_STATE_ORDER[0] == JobState.IDLE
        assert JOB_STATE_ORDER[-1] == JobState.COMPLETED
        assert JobState.FAILED not in JOB_STATE_ORDER

    def test_print_result_timestamp(self):
        """Results are stamped on creation."""
        result = PrintResult(template_name="t", firmware_version="1", bytes_sent=10, splits=1, packets=1)
        assert result.finished_at is not None


class TestDPIPresets:
    """Tests for DPI helpers."""

    def test_presets(self):
        """The four standard resolutions are available."""
        assert {p.dpi for p in DPI_PRESETS.values()} == {96, 203, 300, 600}

    def test_get_preset(self):
        """Presets are found by exact resolution."""
        assert get_dpi_preset(300).name == "High Resolution"
        assert get_dpi_preset(250) is None

    def test_scale_factor(self):
        """Scale factor is the resolution ratio."""
        assert calculate_scale_factor(96, 192) == 2
        assert calculate_scale_factor(96, 203) == pytest.approx(2.1146, rel=1e-3)

    def test_recommended_font_size(self):
        """Font sizes scale from screen resolution."""
        assert recommended_font_size(12, 96) == 12
        assert recommended_font_size(12, 203) == 25
