"""Debug snapshots of rendered labels.

These are side outputs: a failure to write any of them is logged and never
interrupts rendering or printing.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from PIL import Image, ImageDraw

from l1printer.models.template import RenderTemplate
from l1printer.templates.elements.base import WHITE
from l1printer.templates.fonts import FontManager, get_font_manager
from l1printer.templates.image_engine import RenderResult

logger = logging.getLogger(__name__)

DEBUG_CANVAS_PADDING = 60
DEBUG_FONT_SIZE = 12
DEBUG_LINE_HEIGHT = 15
DEBUG_MARGIN = 5
DEBUG_TEXT_COLOR = (102, 102, 102, 255)


def _timestamp(now: datetime) -> str:
    return now.isoformat().replace(":", "-").replace(".", "-")


def build_debug_metadata(result: RenderResult, template: RenderTemplate, now: datetime) -> list[str]:
    """Human readable lines printed under the debug snapshot."""
    canvas = result.canvas
    return [
        f"Size: {canvas.width}x{canvas.height}px @ {canvas.dpi} DPI",
        f"Font: {canvas.font_family} {canvas.font_size:g}px (scaled: {canvas.adjusted_font_size}px)",
        f"Template: {template.name} ({len(template.elements)} elements, {len(result.errors)} skipped)",
        f"Generated: {now.strftime('%Y-%m-%d %H:%M:%S')}",
    ]


def build_debug_info(
    result: RenderResult,
    template: RenderTemplate,
    variables: dict[str, Any] | None,
    now: datetime,
) -> dict[str, Any]:
    """Contents of the JSON sidecar describing a template render."""
    info = template.to_debug_dict()
    elements = info.pop("elements")
    info.update(
        {
            "timestamp": now.isoformat(),
            "dimensions": {
                "width": result.canvas.width,
                "height": result.canvas.height,
                "scaleFactor": result.canvas.scale_factor,
            },
            "variables": variables or {},
            "elements": elements,
            "skipped": [error.model_dump() for error in result.errors],
        }
    )
    return info


def render_debug_image(
    result: RenderResult,
    metadata: list[str],
    font_manager: FontManager | None = None,
) -> Image.Image:
    """Copy the label onto a taller white canvas with metadata underneath."""
    canvas = result.canvas
    debug_image = Image.new("RGBA", (canvas.width, canvas.height + DEBUG_CANVAS_PADDING), color=WHITE)
    debug_image.paste(result.image, (0, 0))

    font = (font_manager or get_font_manager()).get_font("Arial", DEBUG_FONT_SIZE)
    draw = ImageDraw.Draw(debug_image)
    start_y = canvas.height + DEBUG_LINE_HEIGHT
    for index, text in enumerate(metadata):
        draw.text(
            (DEBUG_MARGIN, start_y + index * DEBUG_LINE_HEIGHT),
            text,
            font=font,
            fill=DEBUG_TEXT_COLOR,
            anchor="ls",
        )
    return debug_image


def save_debug_artifacts(
    result: RenderResult,
    template: RenderTemplate,
    variables: dict[str, Any] | None,
    output_dir: Path,
    font_manager: FontManager | None = None,
) -> list[Path]:
    """Write the printer bitmap, the annotated snapshot and the JSON sidecar.

    Returns:
        Paths of the artifacts that were written.
    """
    now = datetime.now()
    stamp = _timestamp(now)
    written: list[Path] = []

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Failed to create debug output directory {output_dir}: {e}")
        return written

    printer_path = output_dir / f"printer-image-{template.name}-{stamp}.png"
    try:
        result.image.save(printer_path, format="PNG")
        written.append(printer_path)
        logger.debug(f"Printer image saved: {printer_path.name}")
    except (OSError, ValueError) as e:
        logger.error(f"Failed to save printer image: {e}")

    debug_path = output_dir / f"debug-print-{template.name}-{stamp}.png"
    try:
        metadata = build_debug_metadata(result, template, now)
        render_debug_image(result, metadata, font_manager).save(debug_path, format="PNG")
        written.append(debug_path)
        logger.debug(f"Debug image saved: {debug_path.name}")
    except (OSError, ValueError) as e:
        logger.error(f"Failed to save debug image: {e}")

    info_path = output_dir / f"json-render-debug-{template.name}-{stamp}.json"
    try:
        info = build_debug_info(result, template, variables, now)
        info_path.write_text(json.dumps(info, indent=2, default=str))
        written.append(info_path)
        logger.debug(f"Template debug info saved: {info_path.name}")
    except (OSError, ValueError, TypeError) as e:
        logger.error(f"Failed to save template debug info: {e}")

    return written
