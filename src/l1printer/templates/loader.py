"""Loading and validating JSON label templates."""

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from l1printer.models.template import RenderTemplate
from l1printer.templates.engine import InvalidTemplateError, TemplateNotFoundError

logger = logging.getLogger(__name__)

# Templates shipped with the package
BUILTIN_TEMPLATES_DIR = Path(__file__).parent / "library"


class TemplateInfo(BaseModel):
    """Listing entry for an available template."""

    name: str
    description: str = ""
    path: Path


def validate_template(data: Any, identifier: str | None = None) -> RenderTemplate:
    """Check a raw object is a template and build the model.

    Args:
        data: Parsed JSON object (or an existing RenderTemplate).
        identifier: Name or path used in error messages.

    Raises:
        InvalidTemplateError: If the object lacks a name or an elements list.
            Elements are not checked here; bad ones are skipped when rendering.
    """
    if isinstance(data, RenderTemplate):
        return data

    label = identifier or "<object>"
    if not isinstance(data, dict):
        raise InvalidTemplateError(label, "Template must be a valid object")
    name = data.get("name")
    if not name or not isinstance(name, str):
        raise InvalidTemplateError(label, "Template must have a name property")
    if not isinstance(data.get("elements"), list):
        raise InvalidTemplateError(identifier or name, "Template must have an elements array")

    try:
        return RenderTemplate.model_validate(data)
    except ValidationError as e:
        raise InvalidTemplateError(identifier or name, str(e)) from e


def load_template_file(path: Path | str) -> RenderTemplate:
    """Load a template from a JSON file path.

    Raises:
        TemplateNotFoundError: If the file does not exist.
        InvalidTemplateError: If the file is not valid JSON or not a template.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise TemplateNotFoundError(str(path)) from e
    except OSError as e:
        raise InvalidTemplateError(str(path), f"Cannot read file: {e}") from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise InvalidTemplateError(str(path), f"Malformed JSON: {e}") from e

    return validate_template(data, str(path))


def _search_dirs(templates_dir: Path | None) -> list[Path]:
    dirs = []
    if templates_dir is not None:
        dirs.append(Path(templates_dir))
    dirs.append(BUILTIN_TEMPLATES_DIR)
    return dirs


def load_template(name: str, templates_dir: Path | None = None) -> RenderTemplate:
    """Load a template by name.

    ``<templates_dir>/<name>.json`` is tried first, then the built-in
    templates.

    Raises:
        TemplateNotFoundError: If no directory has the template.
        InvalidTemplateError: If the file is not a usable template.
    """
    for directory in _search_dirs(templates_dir):
        path = directory / f"{name}.json"
        if path.is_file():
            logger.debug(f"Loading template '{name}' from {path}")
            return load_template_file(path)

    available = [info.name for info in list_templates(templates_dir)]
    raise TemplateNotFoundError(name, available)


def _iter_template_files(directories: Iterable[Path]) -> Iterable[Path]:
    for directory in directories:
        if directory.is_dir():
            yield from sorted(directory.glob("*.json"))


def list_templates(templates_dir: Path | None = None) -> list[TemplateInfo]:
    """List available templates; user templates shadow built-in ones."""
    found: dict[str, TemplateInfo] = {}
    for path in _iter_template_files(_search_dirs(templates_dir)):
        if path.stem in found:
            continue
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            # Log but don't fail on individual template errors
            logger.warning(f"Failed to read template {path}: {e}")
            continue
        description = data.get("description", "") if isinstance(data, dict) else ""
        found[path.stem] = TemplateInfo(name=path.stem, description=description or "", path=path)
    return sorted(found.values(), key=lambda info: info.name)
