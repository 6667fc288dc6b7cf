"""Serial port binding for the Modbus master, backed by ``pyserial``.

Usage::

    conn = SerialConnection(SerialConfig(port="/dev/ttyUSB0", baudrate=19200))
    conn.open()
    client = ModbusClient(conn)
    client.read_holding_registers(1, 0x0016, 2)
    conn.close()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import serial
from serial.tools import list_ports

from ..config import SerialConfig

logger = logging.getLogger(__name__)


@dataclass
class PortInfo:
    """A serial port found on the host."""

    device: str
    description: str = ""
    hwid: str = ""


def available_ports() -> list[PortInfo]:
    """List the serial ports present on this machine."""
    return [
        PortInfo(device=p.device, description=p.description or "", hwid=p.hwid or "")
        for p in sorted(list_ports.comports(), key=lambda p: p.device)
    ]


class SerialConnection:
    """An RS-232/RS-485 link to one or more Modbus slaves.

    Implements the :class:`~simple_modbus.transport.stream.Transport`
    contract so it can be handed straight to a ``ModbusClient``.
    """

    def __init__(self, config: SerialConfig) -> None:
        self._config = config
        self._port: serial.Serial | None = None

    @property
    def connected(self) -> bool:
        return self._port is not None and self._port.is_open

    @property
    def config(self) -> SerialConfig:
        return self._config

    @property
    def timeout(self) -> float | None:
        return self._config.timeout

    @timeout.setter
    def timeout(self, value: float | None) -> None:
        """Apply ``value`` seconds to both reads and writes."""
        if value is not None and value < 0:
            raise ValueError(f"Timeout must not be negative, got {value}")
        self._config.timeout = value
        if self._port is not None:
            self._port.timeout = value
            self._port.write_timeout = value

    def open(self) -> SerialConfig:
        """Open the configured port.

        Raises:
            ConnectionError: If the port cannot be opened.
        """
        if self.connected:
            return self._config
        if not self._config.port:
            raise ConnectionError("No serial port configured")

        cfg = self._config
        try:
            self._port = serial.Serial(
                port=cfg.port,
                baudrate=cfg.baudrate,
                bytesize=cfg.bytesize,
                parity=cfg.parity,
                stopbits=cfg.stopbits,
                timeout=cfg.timeout,
                write_timeout=cfg.timeout,
            )
        except (serial.SerialException, ValueError) as e:
            raise ConnectionError(
                f"Could not open serial port {cfg.port} "
                f"({cfg.baudrate} baud, parity {cfg.parity}): {e}"
            ) from e

        logger.info("Opened %s at %d baud", cfg.port, cfg.baudrate)
        return self._config

    def close(self) -> None:
        """Close the port; safe to call when already closed."""
        if self._port is None:
            return

        try:
            self._port.close()
        except serial.SerialException as e:
            logger.warning("Error closing %s: %s", self._config.port, e)
        finally:
            self._port = None
            logger.info("Closed %s", self._config.port)

    def _require_port(self) -> serial.Serial:
        if not self.connected:
            raise ConnectionError("Serial port is not open")
        return self._port

    def write(self, data: bytes) -> int | None:
        port = self._require_port()
        # stale bytes from an earlier, abandoned exchange would shift the reply
        port.reset_input_buffer()
        return port.write(data)

    def read(self, size: int = 1) -> bytes:
        return self._require_port().read(size)

    def flush(self) -> None:
        self._require_port().flush()

    def __enter__(self) -> SerialConnection:
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
