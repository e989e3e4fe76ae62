"""Template loading and rendering for l1printer."""

from l1printer.templates.engine import InvalidTemplateError, TemplateError, TemplateNotFoundError
from l1printer.templates.image_engine import ImageRenderer, RenderResult
from l1printer.templates.loader import list_templates, load_template, load_template_file, validate_template

__all__ = [
    "ImageRenderer",
    "InvalidTemplateError",
    "RenderResult",
    "TemplateError",
    "TemplateNotFoundError",
    "list_templates",
    "load_template",
    "load_template_file",
    "validate_template",
]
