"""Base class for element renderers."""

import math
from abc import ABC, abstractmethod
from typing import Any

from PIL import Image, ImageDraw
from pydantic import BaseModel, ConfigDict

from l1printer.models.template import Bounds
from l1printer.templates.fonts import FontManager

BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)


class CanvasConfig(BaseModel):
    """Pixel geometry of a single render. Never shared between renders."""

    model_config = ConfigDict(frozen=True)

    width: int
    height: int
    dpi: int
    scale_factor: float
    font_size: float  # Template-space default font size
    adjusted_font_size: int
    font_family: str

    def scale(self, value: float) -> int:
        """Convert a template-space length to whole pixels (halves round up)."""
        return math.floor(value * self.scale_factor + 0.5)

    def scale_bounds(self, bounds: Bounds | None) -> tuple[int, int, int, int]:
        """Scale a bounding box to pixels, defaulting to the whole canvas.

        Returns:
            Tuple of (x, y, width, height) in pixels.
        """
        if bounds is None:
            return 0, 0, self.width, self.height
        return (
            self.scale(bounds.x),
            self.scale(bounds.y),
            self.scale(bounds.width),
            self.scale(bounds.height),
        )


class BaseElementRenderer(ABC):
    """Abstract base class for element renderers."""

    def __init__(self, font_manager: FontManager) -> None:
        self.font_manager = font_manager

    @abstractmethod
    def render(
        self,
        draw: ImageDraw.ImageDraw,
        image: Image.Image,
        element: Any,  # Specific element type in subclasses
        context: dict[str, Any],
        canvas: CanvasConfig,
    ) -> None:
        """Draw an element onto the image.

        Args:
            draw: Pillow ImageDraw bound to ``image``.
            image: RGBA surface being rendered.
            element: Element configuration in template units.
            context: Template variables.
            canvas: Pixel geometry of this render.

        Raises:
            ValueError: If the element geometry cannot be drawn.
        """
        pass
