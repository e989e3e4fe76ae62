"""Tests for the image renderer."""

import logging

from l1printer.models.printer import ImageDimensions
from l1printer.models.template import RenderTemplate
from l1printer.printers.transmission import calculate_image_splits
from l1printer.templates.converters import image_to_printer_bytes, packed_dimensions
from l1printer.templates.image_engine import effective_dimensions

SCREEN = ImageDimensions(width=40, height=4, dpi=96)


def make_template(*elements, **extra) -> RenderTemplate:
    return RenderTemplate.model_validate({"name": "test", "elements": list(elements), **extra})


def filled_rect(x, y, width, height) -> dict:
    return {
        "type": "rectangle",
        "position": {"x": x, "y": y},
        "width": width,
        "height": height,
        "filled": True,
    }


class TestEffectiveDimensions:
    """Tests for dimension overrides."""

    def test_no_override(self, base_dimensions):
        """Templates without dimensions use the base ones."""
        assert effective_dimensions(make_template(), base_dimensions) == base_dimensions

    def test_override(self, base_dimensions):
        """Template width and height win over the base."""
        template = make_template(dimensions={"width": 384, "height": 25})
        dims = effective_dimensions(template, base_dimensions)
        assert (dims.width, dims.height, dims.dpi) == (384, 25, 203)

    def test_zero_override_falls_back(self, base_dimensions):
        """Zero values do not override."""
        template = make_template(dimensions={"width": 0, "height": 10})
        dims = effective_dimensions(template, base_dimensions)
        assert (dims.width, dims.height) == (227, 10)


class TestImageRenderer:
    """Tests for ImageRenderer."""

    def test_surface_size(self, renderer, base_dimensions):
        """Surface is width by height * 8 pixels."""
        result = renderer.render(make_template(), None, base_dimensions)
        assert result.image.size == (227, 136)
        assert result.image.mode == "RGBA"

    def test_empty_template_is_white(self, renderer):
        """Nothing is drawn on an empty template."""
        result = renderer.render(make_template(), None, SCREEN)
        assert set(result.image.getdata()) == {(255, 255, 255, 255)}
        assert result.errors == []

    def test_rendering_is_deterministic(self, renderer, base_dimensions):
        """Identical inputs give identical pixels."""
        template = make_template(
            {"type": "text", "content": "${name}", "position": {"x": 5, "y": 30}},
            {"type": "grid", "cellWidth": 10, "cellHeight": 10},
            {"type": "circle", "center": {"x": 50, "y": 30}, "radius": 8},
        )

        first = renderer.render(template, {"name": "Bolt M4"}, base_dimensions)
        second = renderer.render(template, {"name": "Bolt M4"}, base_dimensions)

        assert first.image.tobytes() == second.image.tobytes()

    def test_later_elements_paint_over_earlier(self, renderer):
        """Elements are drawn in order."""
        template = make_template(
            filled_rect(0, 0, 10, 10),
            {"type": "line", "start": {"x": 0, "y": 5}, "end": {"x": 20, "y": 5}},
        )

        result = renderer.render(template, None, SCREEN)

        assert result.image.getpixel((15, 5))[:3] == (0, 0, 0)
        assert result.image.getpixel((5, 5))[:3] == (0, 0, 0)

    def test_unknown_element_is_skipped(self, renderer, caplog):
        """Unknown element types are reported and the rest still render."""
        template = make_template(
            filled_rect(0, 0, 4, 4),
            {"type": "hologram"},
            filled_rect(10, 0, 4, 4),
        )

        with caplog.at_level(logging.ERROR):
            result = renderer.render(template, None, SCREEN)

        assert len(result.errors) == 1
        assert result.errors[0].index == 2
        assert result.errors[0].element_type == "hologram"
        assert "Unknown element type: hologram" in caplog.text
        assert result.image.getpixel((1, 1))[:3] == (0, 0, 0)
        assert result.image.getpixel((11, 1))[:3] == (0, 0, 0)

    def test_unknown_element_leaves_same_pixels(self, renderer):
        """Skipping an unknown element gives the same image as leaving it out."""
        valid = [
            filled_rect(0, 0, 4, 4),
            {"type": "circle", "center": {"x": 20, "y": 10}, "radius": 5},
            {"type": "grid", "cellWidth": 8, "cellHeight": 8},
        ]
        with_unknown = make_template(valid[0], {"type": "hologram"}, *valid[1:])

        expected = renderer.render(make_template(*valid), None, SCREEN)
        result = renderer.render(with_unknown, None, SCREEN)

        assert result.image.tobytes() == expected.image.tobytes()
        assert len(result.errors) == 1

    def test_invalid_element_is_skipped(self, renderer, caplog):
        """An element with missing fields is reported and the next one still drawn."""
        template = make_template(
            {"type": "circle", "center": {"x": 1, "y": 1}},
            filled_rect(10, 0, 4, 4),
        )

        with caplog.at_level(logging.ERROR):
            result = renderer.render(template, None, SCREEN)

        assert len(result.errors) == 1
        assert result.errors[0].index == 1
        assert result.errors[0].element_type == "circle"
        assert "radius" in result.errors[0].message
        assert "Invalid circle element (element 1)" in caplog.text
        assert result.image.getpixel((11, 1))[:3] == (0, 0, 0)

    def test_failing_element_is_skipped(self, renderer):
        """An element that cannot be drawn does not stop the render."""
        template = make_template(
            {"type": "stripes", "direction": "horizontal", "spacing": 0, "width": 1},
            filled_rect(0, 0, 4, 4),
        )

        result = renderer.render(template, None, SCREEN)

        assert [error.index for error in result.errors] == [1]
        assert result.image.getpixel((1, 1))[:3] == (0, 0, 0)

    def test_variables_substituted(self, renderer):
        """Placeholders render like their values."""
        literal = make_template({"type": "text", "content": "42", "position": {"x": 2, "y": 20}})
        templated = make_template({"type": "text", "content": "${qty}", "position": {"x": 2, "y": 20}})

        expected = renderer.render(literal, None, SCREEN)
        result = renderer.render(templated, {"qty": 42}, SCREEN)

        assert result.image.tobytes() == expected.image.tobytes()

    def test_geometry_scales_with_dpi(self, renderer):
        """Template units are scaled to the printer resolution."""
        template = make_template(filled_rect(0, 0, 10, 2))
        dims = ImageDimensions(width=40, height=1, dpi=192)

        result = renderer.render(template, None, dims)

        assert result.image.getpixel((19, 3))[:3] == (0, 0, 0)
        assert result.image.getpixel((20, 3))[:3] == (255, 255, 255)

    def test_canvas_reported(self, renderer, base_dimensions):
        """The result carries the canvas geometry used."""
        template = make_template(defaultFont={"family": "Norwester Condensed", "size": 16})
        result = renderer.render(template, None, base_dimensions)

        assert result.canvas.dpi == 203
        assert result.canvas.font_family == "Norwester Condensed"
        assert result.canvas.adjusted_font_size == 34


class TestEndToEnd:
    """Render, pack and split a wide label."""

    def test_simple_text_label(self, renderer):
        """A text label at 384 x 25 modules packs to 9600 bytes in two splits."""
        template = make_template({"type": "text", "content": "${text}", "position": {"x": 10, "y": 20}})
        dims = ImageDimensions(width=384, height=25, dpi=203)

        result = renderer.render(template, {"text": "Hello World"}, dims)
        data = image_to_printer_bytes(result.image)
        splits = calculate_image_splits(data, packed_dimensions(result.image, result.canvas.dpi))

        assert result.errors == []
        assert len(data) == 9600
        assert any(data)
        assert [split.dimensions.width for split in splits] == [255, 129]

    def test_wide_label(self, renderer, base_dimensions):
        """A 384 x 25 label packs to 9600 bytes sent as 255 + 129 columns."""
        template = make_template(
            {"type": "stripes", "direction": "vertical", "spacing": 8, "width": 2},
            dimensions={"width": 384, "height": 25},
        )

        result = renderer.render(template, None, base_dimensions)
        data = image_to_printer_bytes(result.image)
        dims = packed_dimensions(result.image, result.canvas.dpi)
        splits = calculate_image_splits(data, dims)

        assert result.image.size == (384, 200)
        assert len(data) == 9600
        assert (dims.width, dims.height) == (384, 25)
        assert [split.dimensions.width for split in splits] == [255, 129]
        assert b"".join(split.data for split in splits) == data
