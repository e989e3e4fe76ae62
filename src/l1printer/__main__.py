"""Command line entry point for l1printer."""

import argparse
import asyncio
import logging
import math
import signal
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from l1printer.app import LabelPipeline, PrintJob, PrintJobError
from l1printer.config import AppConfig, resolve_config
from l1printer.logging_setup import configure_logging
from l1printer.models.template import RenderTemplate
from l1printer.templates import TemplateError, list_templates, load_template, load_template_file

logger = logging.getLogger(__name__)


def parse_value(value: str) -> Any:
    """Turn a variable value into an int or float when it reads as one."""
    try:
        return int(value)
    except ValueError:
        pass
    try:
        number = float(value)
    except ValueError:
        return value
    return number if math.isfinite(number) else value


def parse_variables(items: list[str]) -> dict[str, Any]:
    """Parse repeated ``KEY=VALUE`` arguments.

    Raises:
        ValueError: If an item has no ``=`` or an empty key.
    """
    variables: dict[str, Any] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid variable '{item}'. Use KEY=VALUE")
        variables[key] = parse_value(value)
    return variables


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render a JSON label template and print it on a MakeID L1 printer.",
        prog="l1printer",
    )
    parser.add_argument("template", nargs="?", help="Name of a template to print")
    parser.add_argument(
        "--template",
        "--json",
        dest="template_option",
        metavar="NAME",
        help="Name of a template to print (same as the positional argument)",
    )
    parser.add_argument("--template-file", type=Path, help="Path to a template JSON file")
    parser.add_argument(
        "--var",
        action="append",
        default=[],
        dest="variables",
        metavar="KEY=VALUE",
        help="Template variable (can be specified multiple times)",
    )
    parser.add_argument("--render-only", action="store_true", help="Render to PNG without printing")
    parser.add_argument("-o", "--output", type=Path, help="PNG path for --render-only")
    parser.add_argument("--list-templates", action="store_true", help="List available templates and exit")

    printer = parser.add_argument_group("printer")
    printer.add_argument("--port", "--port-path", dest="port_path", help="Serial port of the printer")
    printer.add_argument("--baud-rate", type=int, help="Serial baud rate")
    printer.add_argument("--packet-size", type=int, help="Bytes per serial write")
    printer.add_argument("--exit-delay", type=int, metavar="MS", help="Wait after the last write")
    printer.add_argument("--packet-delay", type=int, metavar="MS", help="Wait after each packet")
    printer.add_argument("--firmware-timeout", type=int, metavar="MS", help="Wait for the firmware reply")
    printer.add_argument("--dpi", type=int, help="Printer resolution")

    parser.add_argument("--config", type=Path, dest="config_file", help="YAML configuration file")
    parser.add_argument(
        "--debug",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Debug logging and debug image/JSON snapshots",
    )
    parser.add_argument(
        "--verbose",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Per-element and per-packet logging",
    )
    return parser


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "port_path": args.port_path,
        "baud_rate": args.baud_rate,
        "packet_size": args.packet_size,
        "exit_delay": args.exit_delay,
        "packet_delay": args.packet_delay,
        "firmware_timeout": args.firmware_timeout,
        "dpi": args.dpi,
        "debug": args.debug,
        "verbose": args.verbose,
    }


def _print_templates(config: AppConfig) -> None:
    print("Available templates:")
    for info in list_templates(config.templates_dir):
        description = f" - {info.description}" if info.description else ""
        print(f"  {info.name}{description}")


def _resolve_template(args: argparse.Namespace, config: AppConfig) -> RenderTemplate | None:
    if args.template_file:
        return load_template_file(args.template_file)
    name = args.template_option or args.template
    if not name:
        return None
    return load_template(name, config.templates_dir)


async def _run_print_job(job: PrintJob) -> None:
    loop = asyncio.get_running_loop()
    task = asyncio.current_task()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, task.cancel)
        except NotImplementedError:
            # Windows event loops; Ctrl+C still interrupts asyncio.run
            logger.debug(f"Signal handler for {sig.name} not supported on this platform")

    result = await job.run()
    logger.info(
        f"Printed {result.template_name}: {result.bytes_sent} bytes in "
        f"{result.splits} split(s), {result.packets} packet(s)"
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the l1printer CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = resolve_config(overrides=_overrides(args), config_file=args.config_file)
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    configure_logging(debug=config.debug, verbose=config.verbose)

    if args.list_templates:
        _print_templates(config)
        return 0

    try:
        variables = parse_variables(args.variables)
        template = _resolve_template(args, config)
    except (ValueError, TemplateError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if template is None:
        parser.print_usage(sys.stderr)
        print("Error: no template given. Use --list-templates to see what is available.", file=sys.stderr)
        return 1

    pipeline = LabelPipeline(config)

    if args.render_only:
        try:
            pipeline.render_only(template, variables, args.output)
        except (OSError, ValueError) as e:
            logger.error(f"Render failed: {e}", exc_info=logger.isEnabledFor(logging.DEBUG))
            return 1
        return 0

    job = PrintJob(pipeline, template, variables)
    try:
        asyncio.run(_run_print_job(job))
    except PrintJobError:
        # Already logged by the job
        return 1
    except (asyncio.CancelledError, KeyboardInterrupt):
        logger.info("Print cancelled")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
