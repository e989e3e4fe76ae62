"""Element renderers for the label renderer."""

from l1printer.templates.elements.base import BaseElementRenderer, CanvasConfig
from l1printer.templates.elements.patterns import GridElementRenderer, StripeElementRenderer
from l1printer.templates.elements.shapes import (
    CircleElementRenderer,
    LineElementRenderer,
    RectangleElementRenderer,
)
from l1printer.templates.elements.text import TextElementRenderer, substitute_variables

__all__ = [
    "BaseElementRenderer",
    "CanvasConfig",
    "CircleElementRenderer",
    "GridElementRenderer",
    "LineElementRenderer",
    "RectangleElementRenderer",
    "StripeElementRenderer",
    "TextElementRenderer",
    "substitute_variables",
]
