"""Pydantic models for l1printer."""

from l1printer.models.job import JobState, PrintResult
from l1printer.models.printer import ImageDimensions, ImageSplit, PrinterConfig, PrinterProtocol
from l1printer.models.template import ElementType, RenderElement, RenderTemplate

__all__ = [
    "ElementType",
    "ImageDimensions",
    "ImageSplit",
    "JobState",
    "PrinterConfig",
    "PrinterProtocol",
    "PrintResult",
    "RenderElement",
    "RenderTemplate",
]
