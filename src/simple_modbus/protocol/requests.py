"""Function codes and the operations a master can submit.

Each operation knows how to encode its request body (everything before
the CRC) and how long the slave's reply will be. Field ranges are
checked at encode time so a bad operation fails before any I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Sequence

from ..errors import InvalidFrame
from ..models.coil import Coil
from .codec import pack_coils, unpack_words

# unit id + function code + byte count + CRC
REPLY_ENVELOPE_SIZE = 5
# unit id + function code + address + value + CRC
WRITE_ACK_SIZE = 8


class FunctionCode(IntEnum):
    """Modbus function codes supported by the master."""

    READ_COILS = 0x01
    READ_DISCRETE_INPUTS = 0x02
    READ_HOLDING_REGISTERS = 0x03
    READ_INPUT_REGISTERS = 0x04
    WRITE_SINGLE_COIL = 0x05
    WRITE_SINGLE_REGISTER = 0x06
    WRITE_MULTIPLE_COILS = 0x0F
    WRITE_MULTIPLE_REGISTERS = 0x10


def _u8(name: str, value: int) -> bytes:
    if not 0 <= value <= 0xFF:
        raise InvalidFrame(f"{name} must be 0-255, got {value}")
    return bytes([value])


def _u16(name: str, value: int) -> bytes:
    if not 0 <= value <= 0xFFFF:
        raise InvalidFrame(f"{name} must be 0-65535, got {value}")
    return value.to_bytes(2, "big")


def _header(unit_id: int, function_code: int, address: int) -> bytes:
    return _u8("unit_id", unit_id) + bytes([function_code]) + _u16("address", address)


class Operation:
    """Base class for a single request/reply exchange."""

    function_code: ClassVar[int]
    # write-class operations may skip the reply in no-reply mode
    writes: ClassVar[bool] = False

    def encode(self) -> bytes:
        """Request bytes without the CRC."""
        raise NotImplementedError

    def reply_size(self) -> int:
        """Exact length of the reply frame, CRC included."""
        raise NotImplementedError


@dataclass(frozen=True)
class _ReadOperation(Operation):
    unit_id: int
    start_address: int
    quantity: int

    def encode(self) -> bytes:
        if self.quantity < 1:
            raise InvalidFrame(f"quantity must be at least 1, got {self.quantity}")
        return _header(self.unit_id, self.function_code, self.start_address) + _u16(
            "quantity", self.quantity
        )


@dataclass(frozen=True)
class ReadCoils(_ReadOperation):
    function_code: ClassVar[int] = FunctionCode.READ_COILS

    def reply_size(self) -> int:
        return REPLY_ENVELOPE_SIZE + (self.quantity + 7) // 8


@dataclass(frozen=True)
class ReadDiscreteInputs(_ReadOperation):
    function_code: ClassVar[int] = FunctionCode.READ_DISCRETE_INPUTS

    def reply_size(self) -> int:
        return REPLY_ENVELOPE_SIZE + (self.quantity + 7) // 8


@dataclass(frozen=True)
class ReadHoldingRegisters(_ReadOperation):
    function_code: ClassVar[int] = FunctionCode.READ_HOLDING_REGISTERS

    def reply_size(self) -> int:
        return REPLY_ENVELOPE_SIZE + 2 * self.quantity


@dataclass(frozen=True)
class ReadInputRegisters(_ReadOperation):
    function_code: ClassVar[int] = FunctionCode.READ_INPUT_REGISTERS

    def reply_size(self) -> int:
        return REPLY_ENVELOPE_SIZE + 2 * self.quantity


@dataclass(frozen=True)
class WriteSingleCoil(Operation):
    unit_id: int
    address: int
    value: Coil

    function_code: ClassVar[int] = FunctionCode.WRITE_SINGLE_COIL
    writes: ClassVar[bool] = True

    def encode(self) -> bytes:
        coil = Coil.from_bool(self.value)
        return _header(self.unit_id, self.function_code, self.address) + _u16(
            "value", coil.code
        )

    def reply_size(self) -> int:
        return WRITE_ACK_SIZE


@dataclass(frozen=True)
class WriteSingleRegister(Operation):
    unit_id: int
    address: int
    value: int

    function_code: ClassVar[int] = FunctionCode.WRITE_SINGLE_REGISTER
    writes: ClassVar[bool] = True

    def encode(self) -> bytes:
        return _header(self.unit_id, self.function_code, self.address) + _u16(
            "value", self.value
        )

    def reply_size(self) -> int:
        return WRITE_ACK_SIZE


@dataclass(frozen=True)
class WriteMultipleCoils(Operation):
    unit_id: int
    start_address: int
    values: Sequence[Coil]

    function_code: ClassVar[int] = FunctionCode.WRITE_MULTIPLE_COILS
    writes: ClassVar[bool] = True

    def encode(self) -> bytes:
        if not self.values:
            raise InvalidFrame("Write Multiple Coils needs at least one coil")
        packed = pack_coils(self.values)
        return (
            _header(self.unit_id, self.function_code, self.start_address)
            + _u16("coil count", len(self.values))
            + _u8("byte count", len(packed))
            + packed
        )

    def reply_size(self) -> int:
        return WRITE_ACK_SIZE


@dataclass(frozen=True)
class WriteMultipleRegisters(Operation):
    unit_id: int
    start_address: int
    values: Sequence[int]

    function_code: ClassVar[int] = FunctionCode.WRITE_MULTIPLE_REGISTERS
    writes: ClassVar[bool] = True

    def encode(self) -> bytes:
        if not self.values:
            raise InvalidFrame("Write Multiple Registers needs at least one value")
        words = unpack_words(self.values)
        return (
            _header(self.unit_id, self.function_code, self.start_address)
            + _u16("word count", len(self.values))
            + _u8("byte count", len(words))
            + words
        )

    def reply_size(self) -> int:
        return WRITE_ACK_SIZE


@dataclass(frozen=True)
class CustomFrame(Operation):
    """A caller-built frame for vendor-specific function codes.

    ``raw_request_bytes`` is sent verbatim and must already carry its
    CRC (see :func:`simple_modbus.utils.crc.append_crc`). A reply length
    of 0 means the slave is not expected to answer.
    """

    raw_request_bytes: bytes
    expected_reply_length: int

    def encode(self) -> bytes:
        return bytes(self.raw_request_bytes)

    def reply_size(self) -> int:
        if self.expected_reply_length < 0:
            raise InvalidFrame(
                f"expected_reply_length must not be negative, "
                f"got {self.expected_reply_length}"
            )
        return self.expected_reply_length
