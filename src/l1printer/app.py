"""Render and print pipeline for L1 label templates."""

import asyncio
import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from l1printer.config import AppConfig
from l1printer.models.job import JOB_STATE_ORDER, JobState, PrintResult
from l1printer.models.printer import PrinterConfig
from l1printer.models.template import RenderTemplate
from l1printer.printers.base import BasePrinter
from l1printer.printers.l1 import L1Printer
from l1printer.templates.converters import PackedImage, pack_image
from l1printer.templates.debug import save_debug_artifacts
from l1printer.templates.image_engine import ImageRenderer

logger = logging.getLogger(__name__)


class PrintJobError(Exception):
    """A print run failed. ``state`` is where it was when it failed."""

    def __init__(self, message: str, state: JobState) -> None:
        super().__init__(message)
        self.state = state


class LabelPipeline:
    """Renders templates and packs them for the printer.

    Shared by print runs and render-only runs, so both produce exactly the
    same bytes for the same input.
    """

    def __init__(self, config: AppConfig, renderer: ImageRenderer | None = None) -> None:
        self.config = config
        self.renderer = renderer or ImageRenderer()

    def render(self, template: RenderTemplate, variables: dict[str, Any] | None = None) -> PackedImage:
        """Render a template and pack it into printer bytes.

        Debug snapshots are written when debug mode is on.
        """
        logger.info(f"Rendering template: {template.name}")
        if template.description:
            logger.info(template.description)
        if variables:
            logger.info(f"Variables: {json.dumps(variables, default=str)}")

        result = self.renderer.render(template, variables, self.config.dimensions)
        if self.config.debug:
            save_debug_artifacts(result, template, variables, self.config.output_dir)

        packed = pack_image(result)
        logger.debug(f"Generated image data size: {len(packed.data)} bytes")
        logger.info(f"Generated {len(packed.data)} bytes from {len(template.elements)} elements")
        return packed

    def render_only(
        self,
        template: RenderTemplate,
        variables: dict[str, Any] | None = None,
        output: Path | None = None,
    ) -> PackedImage:
        """Render without touching the printer and save the image as PNG.

        Args:
            template: Template to render.
            variables: Template variables.
            output: PNG path; defaults to ``<output_dir>/<template name>.png``.
        """
        logger.info(f"Rendering template: {template.name} (render-only mode)")
        packed = self.render(template, variables)

        path = output or self.config.output_dir / f"{template.name}.png"
        path.parent.mkdir(parents=True, exist_ok=True)
        packed.render.image.save(path, format="PNG")
        logger.info(f"Image saved to {path}")
        return packed


class PrintJob:
    """One print run: connect, handshake, render, send, finish.

    The state only moves forward. Any error moves the job to FAILED and is
    re-raised as PrintJobError; the serial port is closed whatever happens,
    including cancellation.
    """

    def __init__(
        self,
        pipeline: LabelPipeline,
        template: RenderTemplate,
        variables: dict[str, Any] | None = None,
        printer_factory: Callable[[PrinterConfig], BasePrinter] = L1Printer,
    ) -> None:
        self.pipeline = pipeline
        self.template = template
        self.variables = variables
        self.printer = printer_factory(pipeline.config.printer)
        self.state = JobState.IDLE
        self.history: list[JobState] = [JobState.IDLE]

    def _advance(self, state: JobState) -> None:
        if self.state in (JobState.COMPLETED, JobState.FAILED):
            raise RuntimeError(f"Print job already finished ({self.state})")
        if JOB_STATE_ORDER.index(state) <= JOB_STATE_ORDER.index(self.state):
            raise RuntimeError(f"Invalid print job transition {self.state} -> {state}")
        logger.debug(f"Print job: {self.state} -> {state}")
        self.state = state
        self.history.append(state)

    def _fail(self) -> JobState:
        """Move to FAILED and return the state the job failed in."""
        failed_in = self.state
        if self.state not in (JobState.COMPLETED, JobState.FAILED):
            self.state = JobState.FAILED
            self.history.append(JobState.FAILED)
        return failed_in

    async def run(self) -> PrintResult:
        """Run the job to completion.

        Returns:
            The completion record.

        Raises:
            PrintJobError: If any step fails.
            asyncio.CancelledError: If the run is cancelled (port still closed).
        """
        try:
            self._advance(JobState.CONNECTING)
            await self.printer.connect()
            logger.info("Printer connected")

            self._advance(JobState.AWAITING_FIRMWARE)
            firmware_version = await self.printer.get_firmware_version()
            logger.info(f"Printer firmware: {firmware_version}")

            self._advance(JobState.RENDERING)
            packed = self.pipeline.render(self.template, self.variables)

            self._advance(JobState.SENDING)
            sent_before = self.printer.bytes_written
            splits, packets = await self.printer.send_image_data(packed.data, packed.dimensions)

            self._advance(JobState.FINALIZING)
            await self.printer.wait_for_completion()

            self._advance(JobState.COMPLETED)
            logger.info("Print job completed")
            return PrintResult(
                template_name=self.template.name,
                firmware_version=firmware_version,
                bytes_sent=self.printer.bytes_written - sent_before,
                splits=splits,
                packets=packets,
            )
        except asyncio.CancelledError:
            failed_in = self._fail()
            logger.info(f"Print job cancelled while {failed_in}, closing printer connection")
            raise
        except Exception as e:
            failed_in = self._fail()
            logger.error(
                f"Print job failed while {failed_in}: {e}",
                exc_info=logger.isEnabledFor(logging.DEBUG),
            )
            raise PrintJobError(f"Print job failed while {failed_in}: {e}", failed_in) from e
        finally:
            await self.printer.disconnect()
