"""Line, rectangle and circle renderers."""

import logging
from typing import Any

from PIL import Image, ImageDraw

from l1printer.logging_setup import VERBOSE
from l1printer.models.template import CircleElement, LineElement, RectangleElement
from l1printer.templates.elements.base import BLACK, BaseElementRenderer, CanvasConfig

logger = logging.getLogger(__name__)


class LineElementRenderer(BaseElementRenderer):
    """Renders a straight segment with a scaled stroke width."""

    def render(
        self,
        draw: ImageDraw.ImageDraw,
        image: Image.Image,
        element: LineElement,
        context: dict[str, Any],
        canvas: CanvasConfig,
    ) -> None:
        start = (canvas.scale(element.start.x), canvas.scale(element.start.y))
        end = (canvas.scale(element.end.x), canvas.scale(element.end.y))
        width = max(canvas.scale(element.width), 1)

        draw.line([start, end], fill=BLACK, width=width)
        logger.log(VERBOSE, f"Rendered line from {start} to {end}")


class RectangleElementRenderer(BaseElementRenderer):
    """Renders a solid or outlined rectangle."""

    def render(
        self,
        draw: ImageDraw.ImageDraw,
        image: Image.Image,
        element: RectangleElement,
        context: dict[str, Any],
        canvas: CanvasConfig,
    ) -> None:
        x = canvas.scale(element.position.x)
        y = canvas.scale(element.position.y)
        width = canvas.scale(element.width)
        height = canvas.scale(element.height)
        if width < 0 or height < 0:
            raise ValueError(f"Rectangle size must be non-negative, got {width}x{height}")

        if element.filled:
            # Covers exactly width x height pixels
            if width and height:
                draw.rectangle([x, y, x + width - 1, y + height - 1], fill=BLACK)
        else:
            draw.rectangle([x, y, x + width, y + height], outline=BLACK, width=1)

        kind = "filled" if element.filled else "outlined"
        logger.log(VERBOSE, f"Rendered {kind} rectangle at ({x}, {y}) {width}x{height}")


class CircleElementRenderer(BaseElementRenderer):
    """Renders a disk or a ring."""

    def render(
        self,
        draw: ImageDraw.ImageDraw,
        image: Image.Image,
        element: CircleElement,
        context: dict[str, Any],
        canvas: CanvasConfig,
    ) -> None:
        cx = canvas.scale(element.center.x)
        cy = canvas.scale(element.center.y)
        radius = canvas.scale(element.radius)
        if radius < 0:
            raise ValueError(f"Circle radius must be non-negative, got {radius}")

        box = [cx - radius, cy - radius, cx + radius, cy + radius]
        if element.filled:
            draw.ellipse(box, fill=BLACK)
        else:
            draw.ellipse(box, outline=BLACK, width=1)

        kind = "filled" if element.filled else "outlined"
        logger.log(VERBOSE, f"Rendered {kind} circle at ({cx}, {cy}) radius {radius}")
