"""Error types raised by the Modbus master.

Every failed exchange surfaces exactly one of these to the caller::

    ModbusError
     +- InvalidFrame       request malformed or oversized, nothing was sent
     +- TransportError     write/read/flush failed or timed out
     +- InvalidResponse    reply unit id or function code does not match
     +- InvalidData        bad length, odd byte count, checksum mismatch
     +- ProtocolException  Modbus exception reply (reserved, see DESIGN.md)
"""

from __future__ import annotations

from enum import Enum, IntEnum


class Reason(Enum):
    """Why a frame was rejected as :class:`InvalidData`."""

    FRAME_TOO_SHORT = "frame too short"
    UNEXPECTED_REPLY_SIZE = "unexpected reply size"
    BYTECOUNT_NOT_EVEN = "byte count not even"
    RECV_BUFFER_EMPTY = "receive buffer empty"
    CHECKSUM_MISMATCH = "checksum mismatch"
    DECODING_ERROR = "decoding error"


class ExceptionCode(IntEnum):
    """Modbus exception codes a slave may return."""

    ILLEGAL_FUNCTION = 0x01
    ILLEGAL_DATA_ADDRESS = 0x02
    ILLEGAL_DATA_VALUE = 0x03
    SLAVE_OR_SERVER_FAILURE = 0x04
    ACKNOWLEDGE = 0x05
    SLAVE_OR_SERVER_BUSY = 0x06
    NEGATIVE_ACKNOWLEDGE = 0x07
    MEMORY_PARITY = 0x08
    NOT_DEFINED = 0x09
    GATEWAY_PATH = 0x0A
    GATEWAY_TARGET = 0x0B


class ModbusError(Exception):
    """Base class for all errors raised by this package."""


class InvalidFrame(ModbusError, ValueError):
    """The request could not be encoded; no bytes were sent."""


class TransportError(ModbusError, IOError):
    """The underlying byte channel failed.

    ``cause`` holds the transport's own exception, or ``None`` for a
    short read or short write.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class InvalidResponse(ModbusError):
    """The reply does not belong to the request (unit id or function code)."""


class InvalidData(ModbusError):
    """The reply is corrupted or malformed."""

    def __init__(self, reason: Reason, detail: str = "") -> None:
        message = f"invalid data: {reason.value}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.reason = reason


class ProtocolException(ModbusError):
    """A Modbus exception reply from the slave."""

    def __init__(self, code: ExceptionCode) -> None:
        super().__init__(f"modbus exception: {code.name} (0x{code.value:02X})")
        self.code = code
