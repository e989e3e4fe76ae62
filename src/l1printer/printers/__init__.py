"""Printer implementations for l1printer."""

from l1printer.printers.base import BasePrinter, DeviceUnresponsiveError, PrinterError
from l1printer.printers.l1 import L1Printer
from l1printer.printers.protocol import get_printer_protocol
from l1printer.printers.transmission import MAX_PRINTER_WIDTH, calculate_image_splits, iter_packets

__all__ = [
    "BasePrinter",
    "DeviceUnresponsiveError",
    "L1Printer",
    "MAX_PRINTER_WIDTH",
    "PrinterError",
    "calculate_image_splits",
    "get_printer_protocol",
    "iter_packets",
]
