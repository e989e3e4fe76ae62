"""Printer configuration and wire protocol models."""

from pydantic import BaseModel, ConfigDict, Field

# Base label geometry of the L1: 227 columns by 17 modules of 8 rows
DEFAULT_WIDTH = 0xE3
DEFAULT_HEIGHT = 0x11
DEFAULT_DPI = 203


class PrinterConfig(BaseModel):
    """Serial link and pacing settings for a single printer.

    Delays and timeouts are in milliseconds.
    """

    port_path: str = Field(default="COM3", min_length=1)
    baud_rate: int = Field(default=57600, gt=0)
    packet_size: int = Field(default=122, gt=0)
    exit_delay: int = Field(default=2000, ge=0)
    packet_delay: int = Field(default=0, ge=0)
    firmware_timeout: int = Field(default=5000, gt=0)


class ImageDimensions(BaseModel):
    """Label size in device units.

    ``height`` counts modules: the rendered pixel height is ``height * 8``.
    Once packed, ``height`` is the number of bytes per column.
    """

    width: int = Field(default=DEFAULT_WIDTH, ge=0)
    height: int = Field(default=DEFAULT_HEIGHT, ge=0)
    dpi: int = Field(default=DEFAULT_DPI, gt=0)


class PrinterProtocol(BaseModel):
    """Command frames for one image split."""

    model_config = ConfigDict(frozen=True)

    firmware_request: bytes
    prefix: bytes
    postfix: bytes


class ImageSplit(BaseModel):
    """A contiguous column range of the packed image, at most one command wide."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    dimensions: ImageDimensions
    split_index: int
    total_splits: int
