"""MakeID L1 thermal printer over a serial link."""

import asyncio
import logging

import serial

from l1printer.models.printer import ImageDimensions, ImageSplit, PrinterConfig
from l1printer.printers.base import BasePrinter, DeviceUnresponsiveError, PrinterError
from l1printer.printers.protocol import FIRMWARE_REQUEST, get_printer_protocol
from l1printer.printers.transmission import calculate_image_splits, count_packets, iter_packets

logger = logging.getLogger(__name__)


class L1Printer(BasePrinter):
    """L1 printer driven through pyserial.

    All writes are sequential and awaited: the link cannot interleave or
    reorder data, so a packet is only sent after the previous one has been
    written and flushed. Blocking pyserial calls run in the default executor.
    """

    def __init__(self, config: PrinterConfig, name: str | None = None) -> None:
        super().__init__(config, name)
        self._serial: serial.Serial | None = None

    async def connect(self) -> None:
        """Open the serial port."""
        if self._connected:
            return

        try:
            self._serial = serial.Serial(
                port=self.config.port_path,
                baudrate=self.config.baud_rate,
                timeout=self.config.firmware_timeout / 1000,
            )
        except (serial.SerialException, ValueError) as e:
            raise PrinterError(f"Failed to open serial port {self.config.port_path}: {e}") from e

        self._connected = True
        logger.debug(f"Serial port {self.config.port_path} opened at {self.config.baud_rate} baud")

    async def disconnect(self) -> None:
        """Close the serial port if it is open."""
        if self._serial:
            if self._serial.is_open:
                self._serial.close()
                logger.debug("Serial port closed")
            self._serial = None
        self._connected = False

    async def print_raw(self, data: bytes) -> None:
        """Write data as a single message."""
        await self._send(data)

    async def get_firmware_version(self) -> str:
        """Ask the printer for its firmware version.

        Raises:
            DeviceUnresponsiveError: If no reply arrives within ``firmware_timeout``.
        """
        logger.debug("Requesting firmware version")
        await self._send(FIRMWARE_REQUEST)

        timeout = self.config.firmware_timeout / 1000
        try:
            response = await asyncio.wait_for(self._recv(), timeout=timeout)
        except TimeoutError:
            response = b""
        if not response:
            raise DeviceUnresponsiveError(
                f"Printer on {self.config.port_path} did not answer the firmware request "
                f"within {self.config.firmware_timeout}ms"
            )
        return response.decode("utf-8", errors="replace").strip("\x00\r\n ")

    async def send_image_data(self, data: bytes, dimensions: ImageDimensions) -> tuple[int, int]:
        """Send a packed image followed by the postfix command.

        Args:
            data: Packed column-major image bytes.
            dimensions: Packed dimensions (``height`` = bytes per column).

        Returns:
            Tuple of (splits sent, packets sent).
        """
        splits = calculate_image_splits(data, dimensions)
        logger.debug(f"Image will be sent in {len(splits)} split(s)")

        packets = 0
        for split in splits:
            packets += await self._send_image_split(split)

        logger.debug("Sending postfix data")
        await self._send(get_printer_protocol(dimensions).postfix)
        logger.info("Image data sent successfully")
        return len(splits), packets

    async def wait_for_completion(self) -> None:
        """Give the printer ``exit_delay`` to finish before the port closes."""
        logger.debug(f"Waiting {self.config.exit_delay}ms before exit")
        await self._delay(self.config.exit_delay)

    async def _send_image_split(self, split: ImageSplit) -> int:
        """Frame one split and send it in packets. Returns the packet count."""
        dims = split.dimensions
        protocol = get_printer_protocol(dims)
        logger.debug(
            f"Sending split {split.split_index + 1}/{split.total_splits} with dimensions: "
            f"{dims.width}x{dims.height} at {dims.dpi} DPI"
        )

        message = protocol.prefix + split.data
        logger.debug(f"Split message size: {len(message)} bytes")
        return await self._send_in_packets(message, split.split_index + 1, split.total_splits)

    async def _send_in_packets(self, message: bytes, split_number: int, total_splits: int) -> int:
        packet_size = self.config.packet_size
        total_packets = count_packets(len(message), packet_size)

        for packet_number, packet in enumerate(iter_packets(message, packet_size), start=1):
            await self._send(packet)
            logger.debug(f"Sending packets for split {split_number}/{total_splits}: {packet_number}/{total_packets}")
            await self._delay(self.config.packet_delay)

        logger.debug(f"Sent {total_packets} packet(s) for split {split_number}/{total_splits}")
        return total_packets

    async def _send(self, data: bytes) -> None:
        """Write data and wait until it has left the buffer."""
        if not self._serial:
            raise PrinterError("Printer not connected")

        loop = asyncio.get_running_loop()
        try:
            written = await loop.run_in_executor(None, self._write_and_flush, data)
        except serial.SerialException as e:
            raise PrinterError(f"Serial write failed: {e}") from e
        if written is not None and written != len(data):
            raise PrinterError(f"Serial write incomplete: {written}/{len(data)} bytes")
        self.bytes_written += len(data)

    def _write_and_flush(self, data: bytes) -> int | None:
        written = self._serial.write(data)
        self._serial.flush()
        return written

    async def _recv(self) -> bytes:
        """Wait for the next chunk of inbound data."""
        if not self._serial:
            raise PrinterError("Printer not connected")

        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._read_chunk)
        except serial.SerialException as e:
            raise PrinterError(f"Serial read failed: {e}") from e

    def _read_chunk(self) -> bytes:
        # First byte blocks up to the port timeout, then take whatever followed it
        first = self._serial.read(1)
        if not first:
            return b""
        return bytes(first) + bytes(self._serial.read(self._serial.in_waiting))

    async def _delay(self, ms: int) -> None:
        if ms > 0:
            await asyncio.sleep(ms / 1000)
