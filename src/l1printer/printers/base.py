"""Printer interface used by print jobs."""

from abc import ABC, abstractmethod

from l1printer.models.printer import ImageDimensions, PrinterConfig


class PrinterError(Exception):
    """Exception raised for printer-related errors."""

    pass


class DeviceUnresponsiveError(PrinterError):
    """The printer did not answer within the allowed time."""

    pass


class BasePrinter(ABC):
    """A label printer a print job can drive.

    A job connects, asks for the firmware version, sends one packed image and
    waits for the printer to finish before disconnecting. ``bytes_written``
    counts every byte handed to the device.
    """

    def __init__(self, config: PrinterConfig, name: str | None = None) -> None:
        self.config = config
        self.name = name or config.port_path
        self.bytes_written = 0
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    @abstractmethod
    async def connect(self) -> None:
        """Open the link to the printer.

        Raises:
            PrinterError: If the link cannot be opened.
        """

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the link. Safe to call more than once, or before connecting."""

    @abstractmethod
    async def print_raw(self, data: bytes) -> None:
        """Write raw command bytes.

        Raises:
            PrinterError: If not connected or the write fails.
        """

    @abstractmethod
    async def get_firmware_version(self) -> str:
        """Handshake with the printer and return its firmware version.

        Raises:
            DeviceUnresponsiveError: If the printer does not reply in time.
        """

    @abstractmethod
    async def send_image_data(self, data: bytes, dimensions: ImageDimensions) -> tuple[int, int]:
        """Send a packed image. Returns (splits sent, packets sent)."""

    @abstractmethod
    async def wait_for_completion(self) -> None:
        """Wait until the printer has had time to finish the label."""

    async def __aenter__(self) -> "BasePrinter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()
