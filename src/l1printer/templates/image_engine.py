"""Image-based renderer turning label templates into pixel surfaces."""

import logging
from typing import Any

from PIL import Image, ImageDraw
from pydantic import BaseModel, ConfigDict, Field

from l1printer.models.dpi import STANDARD_DPI
from l1printer.models.printer import DEFAULT_WIDTH, ImageDimensions
from l1printer.models.template import (
    CircleElement,
    DefaultFont,
    GridElement,
    InvalidElement,
    LineElement,
    RectangleElement,
    RenderTemplate,
    StripeElement,
    TextElement,
)
from l1printer.templates.elements import (
    BaseElementRenderer,
    CanvasConfig,
    CircleElementRenderer,
    GridElementRenderer,
    LineElementRenderer,
    RectangleElementRenderer,
    StripeElementRenderer,
    TextElementRenderer,
)
from l1printer.templates.elements.base import WHITE
from l1printer.templates.fonts import FontManager, get_font_manager

logger = logging.getLogger(__name__)

# Pixel rows per height module
HEIGHT_MULTIPLIER = 8


class ElementError(BaseModel):
    """An element that was skipped during rendering."""

    index: int  # 1-based position in the template
    element_type: str
    message: str


class RenderResult(BaseModel):
    """Output of one render: the RGBA surface and its geometry."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    image: Image.Image
    canvas: CanvasConfig
    errors: list[ElementError] = Field(default_factory=list)


def effective_dimensions(template: RenderTemplate, base: ImageDimensions) -> ImageDimensions:
    """Merge a template's dimension override over the base dimensions.

    Template values win only when present and non-zero.
    """
    override = template.dimensions
    if override is None:
        return base
    return ImageDimensions(
        width=override.width or base.width,
        height=override.height or base.height,
        dpi=base.dpi,
    )


def create_canvas_config(dimensions: ImageDimensions, default_font: DefaultFont | None = None) -> CanvasConfig:
    """Derive pixel geometry for a render at the given dimensions."""
    font = default_font or DefaultFont()
    scale_factor = dimensions.dpi / STANDARD_DPI
    return CanvasConfig(
        width=dimensions.width or DEFAULT_WIDTH,
        height=dimensions.height * HEIGHT_MULTIPLIER,
        dpi=dimensions.dpi,
        scale_factor=scale_factor,
        font_size=font.size,
        adjusted_font_size=round(font.size * scale_factor),
        font_family=font.family,
    )


class ImageRenderer:
    """Renders label templates onto white RGBA surfaces using Pillow.

    Elements are drawn in template order, so later elements paint over
    earlier ones. An element that cannot be drawn, including one with an
    unknown type or invalid fields, is logged and skipped; the rest of the
    label still renders.
    """

    def __init__(self, font_manager: FontManager | None = None, custom_font_paths: list[str] | None = None) -> None:
        """Initialize the renderer.

        Args:
            font_manager: Font manager to use; the shared one if omitted.
            custom_font_paths: Extra font search paths when no manager is given.
        """
        self._font_manager = font_manager or get_font_manager(custom_font_paths)
        self._renderers: dict[type, BaseElementRenderer] = {
            TextElement: TextElementRenderer(self._font_manager),
            LineElement: LineElementRenderer(self._font_manager),
            RectangleElement: RectangleElementRenderer(self._font_manager),
            CircleElement: CircleElementRenderer(self._font_manager),
            StripeElement: StripeElementRenderer(self._font_manager),
            GridElement: GridElementRenderer(self._font_manager),
        }

    def render(
        self,
        template: RenderTemplate,
        variables: dict[str, Any] | None,
        dimensions: ImageDimensions,
    ) -> RenderResult:
        """Render a template to an RGBA image.

        Args:
            template: Template to draw.
            variables: Values for ``${name}`` placeholders in text elements.
            dimensions: Base dimensions; the template may override width/height.

        Returns:
            RenderResult with the image, its canvas geometry and skipped elements.
        """
        dims = effective_dimensions(template, dimensions)
        canvas = create_canvas_config(dims, template.default_font)
        logger.debug(
            f"Canvas setup: {canvas.width}x{canvas.height}px at {canvas.dpi} DPI "
            f"(scale: {canvas.scale_factor:.2f})"
        )
        logger.debug(
            f"Font size adjusted from {canvas.font_size}px to {canvas.adjusted_font_size}px for {canvas.dpi} DPI"
        )

        image = Image.new("RGBA", (canvas.width, canvas.height), color=WHITE)
        draw = ImageDraw.Draw(image)
        context = dict(variables or {})
        errors: list[ElementError] = []

        logger.debug(f"Rendering template: {template.name} with {len(template.elements)} elements")
        for index, element in enumerate(template.elements, start=1):
            element_type = str(element.type)
            if isinstance(element, InvalidElement):
                logger.error(f"Invalid {element_type} element (element {index}): {element.error}")
                errors.append(ElementError(index=index, element_type=element_type, message=element.error))
                continue
            renderer = self._renderers.get(type(element))
            if renderer is None:
                logger.error(f"Unknown element type: {element_type} (element {index})")
                errors.append(ElementError(index=index, element_type=element_type, message="Unknown element type"))
                continue
            try:
                renderer.render(draw, image, element, context, canvas)
            except Exception as e:
                logger.error(
                    f"Failed to render element {index} ({element_type}): {e}",
                    exc_info=logger.isEnabledFor(logging.DEBUG),
                )
                errors.append(ElementError(index=index, element_type=element_type, message=str(e)))

        return RenderResult(image=image, canvas=canvas, errors=errors)
