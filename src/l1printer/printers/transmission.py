"""Splitting packed images and messages to fit the device limits."""

import math
from collections.abc import Iterator

from l1printer.models.printer import ImageDimensions, ImageSplit

# Widest image, in columns, a single print command accepts
MAX_PRINTER_WIDTH = 255


def calculate_image_splits(
    data: bytes,
    dimensions: ImageDimensions,
    max_width: int = MAX_PRINTER_WIDTH,
) -> list[ImageSplit]:
    """Cut a packed image into column ranges of at most ``max_width``.

    The packed data is column-major with ``dimensions.height`` bytes per
    column, so every split is a contiguous slice of it.

    Args:
        data: Packed image bytes.
        dimensions: Packed dimensions (``height`` = bytes per column).
        max_width: Column limit per split.

    Returns:
        Splits in column order; their data concatenates back to ``data``.
    """
    if max_width <= 0:
        raise ValueError(f"max_width must be positive, got {max_width}")

    total_width = dimensions.width
    height = dimensions.height
    total_splits = math.ceil(total_width / max_width)

    splits = []
    for split_index in range(total_splits):
        start_col = split_index * max_width
        split_width = min(max_width, total_width - start_col)
        start = start_col * height
        splits.append(
            ImageSplit(
                data=data[start : start + split_width * height],
                dimensions=ImageDimensions(width=split_width, height=height, dpi=dimensions.dpi),
                split_index=split_index,
                total_splits=total_splits,
            )
        )
    return splits


def count_packets(length: int, packet_size: int) -> int:
    """Number of packets needed for a message of ``length`` bytes."""
    if packet_size <= 0:
        raise ValueError(f"packet_size must be positive, got {packet_size}")
    return math.ceil(length / packet_size)


def iter_packets(message: bytes, packet_size: int) -> Iterator[bytes]:
    """Yield consecutive slices of at most ``packet_size`` bytes."""
    if packet_size <= 0:
        raise ValueError(f"packet_size must be positive, got {packet_size}")
    for offset in range(0, len(message), packet_size):
        yield message[offset : offset + packet_size]
