"""Pytest configuration and fixtures."""

import pytest
from PIL import Image, ImageDraw

from l1printer.models.printer import ImageDimensions, PrinterConfig
from l1printer.templates.elements.base import WHITE
from l1printer.templates.fonts import FontManager
from l1printer.templates.image_engine import ImageRenderer, create_canvas_config

FIRMWARE_REPLY = b"L1 V1.2.0\x00"


class FakeSerial:
    """In-memory stand-in for serial.Serial that records every write."""

    def __init__(self, port=None, baudrate=9600, timeout=None, response=FIRMWARE_REPLY):
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.is_open = True
        self.writes: list[bytes] = []
        self.flushes = 0
        self._inbound = bytearray(response)

    @property
    def in_waiting(self) -> int:
        return len(self._inbound)

    def write(self, data: bytes) -> int:
        self.writes.append(bytes(data))
        return len(data)

    def flush(self) -> None:
        self.flushes += 1

    def read(self, size: int = 1) -> bytes:
        chunk = bytes(self._inbound[:size])
        del self._inbound[:size]
        return chunk

    def close(self) -> None:
        self.is_open = False


@pytest.fixture
def serial_ports(monkeypatch):
    """Replace serial.Serial with FakeSerial; returns the opened ports."""
    opened: list[FakeSerial] = []

    def factory(*args, **kwargs):
        port = FakeSerial(*args, **kwargs)
        opened.append(port)
        return port

    monkeypatch.setattr("l1printer.printers.l1.serial.Serial", factory)
    return opened


@pytest.fixture
def printer_config() -> PrinterConfig:
    """Printer config with no pacing delays."""
    return PrinterConfig(port_path="/dev/ttyTEST", exit_delay=0, packet_delay=0, firmware_timeout=500)


@pytest.fixture
def font_manager() -> FontManager:
    """A private font manager with no custom paths."""
    return FontManager()


@pytest.fixture
def renderer(font_manager) -> ImageRenderer:
    """Image renderer using the test font manager."""
    return ImageRenderer(font_manager=font_manager)


@pytest.fixture
def base_dimensions() -> ImageDimensions:
    """The L1 default label geometry."""
    return ImageDimensions()


def blank_surface(width: int, height_modules: int, dpi: int = 96):
    """White surface plus canvas geometry for drawing single elements.

    At 96 DPI template units map one-to-one onto pixels.
    """
    canvas = create_canvas_config(ImageDimensions(width=width, height=height_modules, dpi=dpi))
    image = Image.new("RGBA", (canvas.width, canvas.height), color=WHITE)
    return image, ImageDraw.Draw(image), canvas


def is_black(image: Image.Image, x: int, y: int) -> bool:
    return image.getpixel((x, y))[:3] == (0, 0, 0)
