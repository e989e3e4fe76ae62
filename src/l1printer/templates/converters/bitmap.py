"""Convert Pillow images to the L1 packed bitmap format."""

from PIL import Image
from pydantic import BaseModel, ConfigDict

from l1printer.models.printer import ImageDimensions
from l1printer.templates.image_engine import RenderResult

BITS_PER_BYTE = 8
# Channel value of a white (unprinted) pixel
WHITE_PIXEL_VALUE = 0xFF


def image_to_printer_bytes(image: Image.Image) -> bytes:
    """Pack an image into the printer's column-major 1-bit format.

    Columns are emitted left to right. Each column is read from the bottom
    row upwards and every run of 8 pixels becomes one byte, where bit ``i``
    is the pixel ``i`` rows below the top of the run (so the first pixel
    read, the bottom one, lands in bit 7). A pixel prints (bit set) unless
    its blue channel is pure white.

    If the height is not a multiple of 8, the leftover top rows of each
    column are dropped.

    Args:
        image: Image to convert (any mode Pillow can convert to RGBA).

    Returns:
        ``width * (height // 8)`` bytes, one column after another.
    """
    if image.mode != "RGBA":
        image = image.convert("RGBA")

    width, height = image.size
    blue = image.getchannel("B").tobytes()
    groups = height // BITS_PER_BYTE

    packed = bytearray()
    for x in range(width):
        for group in range(groups):
            # Rows covered by this byte, top of the run first. The device expects
            # the first pixel read (the bottom of the run) in bit 7.
            top = height - (group + 1) * BITS_PER_BYTE
            byte_val = 0
            for bit in range(BITS_PER_BYTE):
                if blue[(top + bit) * width + x] != WHITE_PIXEL_VALUE:
                    byte_val |= 1 << bit
            packed.append(byte_val)

    return bytes(packed)


def packed_dimensions(image: Image.Image, dpi: int) -> ImageDimensions:
    """Dimensions to announce to the printer for a packed image.

    ``height`` is the number of bytes per column.
    """
    width, height = image.size
    return ImageDimensions(width=width, height=height // BITS_PER_BYTE, dpi=dpi)


class PackedImage(BaseModel):
    """A rendered label in printer format, ready to transmit."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: bytes
    dimensions: ImageDimensions
    render: RenderResult


def pack_image(result: RenderResult) -> PackedImage:
    """Pack a render result together with the dimensions to announce for it."""
    return PackedImage(
        data=image_to_printer_bytes(result.image),
        dimensions=packed_dimensions(result.image, result.canvas.dpi),
        render=result,
    )
