"""Modbus RTU master: one request/reply exchange at a time over a Transport.

An exchange either fully succeeds or raises one of the errors in
:mod:`simple_modbus.errors`; nothing is retried. The client is not
reentrant: callers sharing one physical link must serialize their calls.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .config import DEFAULT_UNIT_ID
from .errors import TransportError
from .models.coil import Coil
from .protocol.framing import build_frame, validate_reply
from .protocol.parser import parse_coils, parse_registers
from .protocol.requests import (
    CustomFrame,
    Operation,
    ReadCoils,
    ReadDiscreteInputs,
    ReadHoldingRegisters,
    ReadInputRegisters,
    WriteMultipleCoils,
    WriteMultipleRegisters,
    WriteSingleCoil,
    WriteSingleRegister,
)
from .transport.stream import Transport

logger = logging.getLogger(__name__)


class ModbusClient:
    """Master side of a Modbus RTU link.

    Usage::

        client = ModbusClient(transport)
        words = client.read_holding_registers(1, 0x0016, 2)
        client.write_single_register(15, 0x0000, 0x0001)

    Args:
        transport: Any object satisfying the
            :class:`~simple_modbus.transport.stream.Transport` contract.
        unit_id: Slave addressed when an operation is given ``unit_id=None``.
        no_reply: Start in no-reply mode (see :meth:`set_no_reply_mode`).
    """

    def __init__(
        self,
        transport: Transport,
        unit_id: int = DEFAULT_UNIT_ID,
        no_reply: bool = False,
    ) -> None:
        self._transport = transport
        self._unit_id = unit_id
        self._no_reply = no_reply

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def unit_id(self) -> int:
        return self._unit_id

    @property
    def no_reply(self) -> bool:
        return self._no_reply

    def set_unit_id(self, unit_id: int) -> None:
        """Change the default slave address."""
        if not 0 <= unit_id <= 255:
            raise ValueError(f"Unit id must be 0-255, got {unit_id}")
        self._unit_id = unit_id

    def set_no_reply_mode(self, enabled: bool) -> None:
        """Skip reading the acknowledgment of write operations.

        For slaves that never answer writes. Reads always wait for
        their reply.
        """
        self._no_reply = bool(enabled)

    def set_timeout(self, seconds: float | None) -> None:
        """Set the transport's read/write timeout."""
        if seconds is not None and seconds < 0:
            raise ValueError(f"Timeout must not be negative, got {seconds}")
        self._transport.timeout = seconds

    def _unit(self, unit_id: int | None) -> int:
        return self._unit_id if unit_id is None else unit_id

    # ─── TRANSFER ENGINE ─────────────────────────────────────────────

    def transfer(self, operation: Operation) -> bytes | None:
        """Run one exchange and return the validated reply frame.

        Returns:
            The raw reply, or ``None`` if no reply was read (write in
            no-reply mode, or a custom frame expecting zero bytes).

        Raises:
            InvalidFrame: The operation cannot be encoded. Nothing was sent.
            TransportError: Write, flush or read failed, or the reply
                did not arrive before the transport timed out.
            InvalidResponse: The reply came from another unit or function.
            InvalidData: The reply failed its checksum.
        """
        request, reply = build_frame(operation)

        logger.debug("TX %s", request.hex(" "))
        self._send(request)

        if operation.writes and self._no_reply:
            logger.debug("No-reply mode, not waiting for acknowledgment")
            return None
        if not reply:
            return None

        self._receive(reply)
        logger.debug("RX %s", reply.hex(" "))

        validate_reply(request, reply)
        return bytes(reply)

    def _send(self, request: bytes) -> None:
        try:
            written = self._transport.write(request)
        except OSError as e:
            raise TransportError(f"Write failed: {e}", cause=e) from e
        if written is not None and written != len(request):
            raise TransportError(
                f"Short write: {written} of {len(request)} bytes sent"
            )

        try:
            self._transport.flush()
        except OSError as e:
            raise TransportError(f"Flush failed: {e}", cause=e) from e

    def _receive(self, reply: bytearray) -> None:
        """Fill ``reply`` from the transport or raise."""
        view = memoryview(reply)
        filled = 0
        while filled < len(reply):
            try:
                chunk = self._transport.read(len(reply) - filled)
            except OSError as e:
                raise TransportError(f"Read failed: {e}", cause=e) from e
            if not chunk:
                raise TransportError(
                    f"Timed out after {filled} of {len(reply)} reply bytes"
                    + (f": {reply[:filled].hex(' ')}" if filled else "")
                )
            view[filled : filled + len(chunk)] = chunk
            filled += len(chunk)

    # ─── READS ───────────────────────────────────────────────────────

    def read_coils(
        self, unit_id: int | None, address: int, quantity: int
    ) -> list[Coil]:
        """Read ``quantity`` coils (0x01) starting at ``address``."""
        reply = self.transfer(ReadCoils(self._unit(unit_id), address, quantity))
        return parse_coils(reply, quantity)

    def read_discrete_inputs(
        self, unit_id: int | None, address: int, quantity: int
    ) -> list[Coil]:
        """Read ``quantity`` discrete inputs (0x02) starting at ``address``."""
        reply = self.transfer(ReadDiscreteInputs(self._unit(unit_id), address, quantity))
        return parse_coils(reply, quantity)

    def read_holding_registers(
        self, unit_id: int | None, address: int, quantity: int
    ) -> list[int]:
        """Read ``quantity`` holding registers (0x03) starting at ``address``."""
        reply = self.transfer(
            ReadHoldingRegisters(self._unit(unit_id), address, quantity)
        )
        return parse_registers(reply)

    def read_input_registers(
        self, unit_id: int | None, address: int, quantity: int
    ) -> list[int]:
        """Read ``quantity`` input registers (0x04) starting at ``address``."""
        reply = self.transfer(ReadInputRegisters(self._unit(unit_id), address, quantity))
        return parse_registers(reply)

    # ─── WRITES ──────────────────────────────────────────────────────

    def write_single_coil(self, unit_id: int | None, address: int, value: Coil) -> None:
        self.transfer(WriteSingleCoil(self._unit(unit_id), address, Coil.from_bool(value)))

    def write_multiple_coils(
        self, unit_id: int | None, address: int, values: Sequence[Coil]
    ) -> None:
        self.transfer(WriteMultipleCoils(self._unit(unit_id), address, list(values)))

    def write_single_register(self, unit_id: int | None, address: int, value: int) -> None:
        self.transfer(WriteSingleRegister(self._unit(unit_id), address, value))

    def write_multiple_registers(
        self, unit_id: int | None, address: int, values: Sequence[int]
    ) -> None:
        self.transfer(WriteMultipleRegisters(self._unit(unit_id), address, list(values)))

    # ─── CUSTOM ──────────────────────────────────────────────────────

    def raw(self, request: bytes, expected_reply_length: int) -> bytes:
        """Send a pre-built frame (CRC included) and return the reply as-is.

        The reply is still checked for unit id, function code and CRC.
        """
        reply = self.transfer(CustomFrame(bytes(request), expected_reply_length))
        return reply if reply is not None else b""
