"""RTU frame builder, reply validator and reply extractor.

Request layout::

    +---------+---------------+---------+-------------------+---------+
    | Unit ID | Function code | Address |      Payload      |   CRC   |
    | 1 byte  | 1 byte        | 2 bytes | function specific | 2 bytes |
    +---------+---------------+---------+-------------------+---------+

- Address and payload words are big-endian.
- CRC covers every preceding byte, low byte of the register first.

Read replies carry a one-byte count instead of the address::

    | Unit ID | Function code | Byte count | Data (byte count) | CRC |
"""

from __future__ import annotations

import logging

from ..errors import ExceptionCode, InvalidData, InvalidFrame, InvalidResponse, Reason
from ..utils.crc import append_crc, crc16
from .requests import REPLY_ENVELOPE_SIZE, CustomFrame, Operation

logger = logging.getLogger(__name__)

MAX_FRAME_SIZE = 260  # RTU-over-serial ceiling
MIN_FRAME_SIZE = 3
EXCEPTION_FLAG = 0x80


def build_frame(operation: Operation) -> tuple[bytes, bytearray]:
    """Encode ``operation`` into a request frame and an empty reply buffer.

    Args:
        operation: Any :class:`~simple_modbus.protocol.requests.Operation`.

    Returns:
        ``(request, reply)`` where ``request`` includes the CRC (custom
        frames are taken verbatim) and ``reply`` is a zeroed
        ``bytearray`` of exactly the expected reply length.

    Raises:
        InvalidFrame: If the request is empty, a field is out of range,
            or either frame would exceed :data:`MAX_FRAME_SIZE`.
    """
    body = operation.encode()
    if isinstance(operation, CustomFrame):
        request = body
    else:
        request = append_crc(body)

    if not request:
        raise InvalidFrame("Request frame is empty")
    if len(request) > MAX_FRAME_SIZE:
        raise InvalidFrame(
            f"Request frame is {len(request)} bytes, maximum is {MAX_FRAME_SIZE}"
        )

    reply_size = operation.reply_size()
    if reply_size > MAX_FRAME_SIZE:
        raise InvalidFrame(
            f"Expected reply is {reply_size} bytes, maximum is {MAX_FRAME_SIZE}"
        )
    return request, bytearray(reply_size)


def validate_reply(request: bytes, reply: bytes) -> None:
    """Check that ``reply`` answers ``request`` and is not corrupted.

    Checks run in order and stop at the first failure: minimum length,
    unit id echo, function code echo, CRC.

    Raises:
        InvalidData: Either frame is too short, or the CRC does not match.
        InvalidResponse: Unit id or function code differ from the request.
    """
    if len(request) < MIN_FRAME_SIZE or len(reply) < MIN_FRAME_SIZE:
        raise InvalidData(
            Reason.FRAME_TOO_SHORT,
            f"request {len(request)} bytes, reply {len(reply)} bytes",
        )

    if reply[0] != request[0]:
        raise InvalidResponse(
            f"Reply from unit {reply[0]}, expected unit {request[0]}"
        )

    if reply[1] != request[1]:
        message = f"Reply function code 0x{reply[1]:02X}, expected 0x{request[1]:02X}"
        # Exception replies are reported as mismatches; name the code for the operator.
        if reply[1] == request[1] | EXCEPTION_FLAG and _is_exception_code(reply[2]):
            code = ExceptionCode(reply[2])
            logger.debug("Unit %d answered with exception %s", reply[0], code.name)
            message = f"{message}, slave signalled {code.name}"
        raise InvalidResponse(message)

    expected = crc16(reply[:-2])
    received = int.from_bytes(reply[-2:], "big")
    if received != expected:
        raise InvalidData(
            Reason.CHECKSUM_MISMATCH,
            f"received 0x{received:04X}, computed 0x{expected:04X}",
        )


def extract_payload(reply: bytes) -> bytes:
    """Strip the envelope from a byte-count-prefixed read reply.

    Raises:
        InvalidData: If the reply is too short or its byte count does not
            match the reply length.
    """
    if len(reply) <= REPLY_ENVELOPE_SIZE:
        raise InvalidData(Reason.RECV_BUFFER_EMPTY, f"reply is {len(reply)} bytes")

    declared = reply[2]
    if REPLY_ENVELOPE_SIZE + declared != len(reply):
        raise InvalidData(
            Reason.UNEXPECTED_REPLY_SIZE,
            f"byte count {declared} does not fit a {len(reply)}-byte reply",
        )
    return bytes(reply[3 : 3 + declared])


def _is_exception_code(value: int) -> bool:
    return any(value == code for code in ExceptionCode)
