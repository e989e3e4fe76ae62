"""Image to printer data converters."""

from l1printer.templates.converters.bitmap import PackedImage, image_to_printer_bytes, pack_image, packed_dimensions

__all__ = [
    "PackedImage",
    "image_to_printer_bytes",
    "pack_image",
    "packed_dimensions",
]
