"""Text element renderer with variable substitution."""

import logging
import re
from typing import Any

from PIL import Image, ImageDraw

from l1printer.logging_setup import VERBOSE
from l1printer.models.template import HorizontalAlignment, TextElement
from l1printer.templates.elements.base import BLACK, BaseElementRenderer, CanvasConfig

logger = logging.getLogger(__name__)

# Position is a point on the text baseline, like an HTML canvas fillText
ANCHORS = {
    HorizontalAlignment.LEFT: "ls",
    HorizontalAlignment.CENTER: "ms",
    HorizontalAlignment.RIGHT: "rs",
}


PLACEHOLDER = re.compile(r"\$\{([^{}]+)\}")


def substitute_variables(content: str, variables: dict[str, Any] | None) -> str:
    """Replace ``${key}`` placeholders with variable values in one pass.

    Placeholders without a matching variable are left untouched, and
    substituted values are not searched for placeholders again.
    """
    if not variables:
        return content

    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        return str(variables[name]) if name in variables else match.group(0)

    return PLACEHOLDER.sub(replace, content)


class TextElementRenderer(BaseElementRenderer):
    """Renders single-line text at a scaled baseline position."""

    def render(
        self,
        draw: ImageDraw.ImageDraw,
        image: Image.Image,
        element: TextElement,
        context: dict[str, Any],
        canvas: CanvasConfig,
    ) -> None:
        """Render text element onto image."""
        text = substitute_variables(element.content, context)
        if not text:
            return

        if element.font_size is not None:
            font_size = canvas.scale(element.font_size)
        else:
            font_size = canvas.adjusted_font_size
        font_family = element.font_family or canvas.font_family
        font = self.font_manager.get_font(font_family, max(font_size, 1))

        x = canvas.scale(element.position.x)
        y = canvas.scale(element.position.y)

        draw.text((x, y), text, font=font, fill=BLACK, anchor=ANCHORS[element.align])
        logger.log(VERBOSE, f'Rendered text: "{text}" at ({x}, {y})')
