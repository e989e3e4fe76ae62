"""Stripe and grid pattern renderers."""

import logging
from typing import Any

from PIL import Image, ImageDraw

from l1printer.logging_setup import VERBOSE
from l1printer.models.template import GridElement, StripeDirection, StripeElement
from l1printer.templates.elements.base import BLACK, BaseElementRenderer, CanvasConfig

logger = logging.getLogger(__name__)


class StripeElementRenderer(BaseElementRenderer):
    """Renders repeating solid bars clipped to a bounding box.

    A bar starts every ``spacing`` pixels along the stripe axis; the last
    bar is cut off at the far edge of the bounds.
    """

    def render(
        self,
        draw: ImageDraw.ImageDraw,
        image: Image.Image,
        element: StripeElement,
        context: dict[str, Any],
        canvas: CanvasConfig,
    ) -> None:
        bx, by, bw, bh = canvas.scale_bounds(element.bounds)
        spacing = canvas.scale(element.spacing)
        stripe_width = canvas.scale(element.width)
        if spacing <= 0:
            raise ValueError(f"Stripe spacing must be positive, got {spacing}px")
        if bw <= 0 or bh <= 0 or stripe_width <= 0:
            return

        if element.direction == StripeDirection.HORIZONTAL:
            for y in range(by, by + bh, spacing):
                bar = min(stripe_width, by + bh - y)
                draw.rectangle([bx, y, bx + bw - 1, y + bar - 1], fill=BLACK)
        else:
            for x in range(bx, bx + bw, spacing):
                bar = min(stripe_width, bx + bw - x)
                draw.rectangle([x, by, x + bar - 1, by + bh - 1], fill=BLACK)

        logger.log(VERBOSE, f"Rendered {element.direction} stripes with {spacing}px spacing")


class GridElementRenderer(BaseElementRenderer):
    """Renders vertical and horizontal rules at fixed cell intervals.

    Rules are drawn at every multiple of the cell size from the bounds origin
    up to and including the far edge.
    """

    def render(
        self,
        draw: ImageDraw.ImageDraw,
        image: Image.Image,
        element: GridElement,
        context: dict[str, Any],
        canvas: CanvasConfig,
    ) -> None:
        bx, by, bw, bh = canvas.scale_bounds(element.bounds)
        cell_width = canvas.scale(element.cell_width)
        cell_height = canvas.scale(element.cell_height)
        line_width = max(canvas.scale(element.line_width), 1)
        if cell_width <= 0 or cell_height <= 0:
            raise ValueError(f"Grid cell size must be positive, got {cell_width}x{cell_height}px")

        for x in range(bx, bx + bw + 1, cell_width):
            draw.line([(x, by), (x, by + bh)], fill=BLACK, width=line_width)

        for y in range(by, by + bh + 1, cell_height):
            draw.line([(bx, y), (bx + bw, y)], fill=BLACK, width=line_width)

        logger.log(VERBOSE, f"Rendered grid with {cell_width}x{cell_height} cells")
