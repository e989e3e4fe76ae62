"""L1 printer command frames."""

from l1printer.models.printer import ImageDimensions, PrinterProtocol

FIRMWARE_REQUEST = bytes([0x10, 0xFF, 0x20, 0xF1])
# Print-mode setup followed by a GS v 0 raster image command
PREFIX_HEADER = bytes([0x10, 0xFF, 0xFE, 0x01, 0x10, 0xFF, 0xFE, 0x40, 0x1D, 0x76, 0x30])
# Feed and end-of-job
POSTFIX = bytes([0x1B, 0x4A, 0x40, 0x10, 0xFF, 0xFE, 0x45])


def get_printer_protocol(dimensions: ImageDimensions) -> PrinterProtocol:
    """Build the command frames for an image of the given dimensions.

    The prefix carries the height (bytes per column) and the width (columns),
    each as a big-endian 16-bit value, so it has to be rebuilt for every split.
    """
    prefix = (
        PREFIX_HEADER
        + dimensions.height.to_bytes(2, "big")
        + dimensions.width.to_bytes(2, "big")
        + b"\x00"
    )
    return PrinterProtocol(firmware_request=FIRMWARE_REQUEST, prefix=prefix, postfix=POSTFIX)
