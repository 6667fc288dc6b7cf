"""Conversions between wire bytes and register words / coil states.

Registers travel big-endian, high byte first. Coils are packed eight
per byte, least-significant bit first: coil ``n`` lives in byte
``n // 8`` at bit ``n % 8``.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from ..errors import InvalidData, InvalidFrame, Reason
from ..models.coil import Coil


def pack_words(data: bytes) -> list[int]:
    """Group ``data`` pairwise into 16-bit big-endian words.

    Raises:
        InvalidData: If ``data`` has an odd length.
    """
    if len(data) % 2:
        raise InvalidData(Reason.BYTECOUNT_NOT_EVEN, f"{len(data)} bytes")
    return [int.from_bytes(data[i : i + 2], "big") for i in range(0, len(data), 2)]


def unpack_words(words: Iterable[int]) -> bytes:
    """Serialize words to bytes, two per word, high byte first."""
    out = bytearray()
    for word in words:
        if not 0 <= word <= 0xFFFF:
            raise InvalidFrame(f"Register value must be 0-65535, got {word}")
        out += word.to_bytes(2, "big")
    return bytes(out)


def pack_coils(coils: Sequence[object]) -> bytes:
    """Pack coil states into ``ceil(len(coils) / 8)`` bytes."""
    out = bytearray((len(coils) + 7) // 8)
    for i, coil in enumerate(coils):
        if coil:
            out[i // 8] |= 1 << (i % 8)
    return bytes(out)


def unpack_coils(data: bytes, count: int) -> list[Coil]:
    """Read ``count`` coil states from packed ``data``.

    Raises:
        InvalidData: If ``data`` holds fewer than ``count`` bits.
    """
    needed = (count + 7) // 8
    if count < 0 or len(data) < needed:
        raise InvalidData(
            Reason.UNEXPECTED_REPLY_SIZE,
            f"{count} coils need {needed} bytes, got {len(data)}",
        )
    return [Coil.from_bool(data[i // 8] >> (i % 8) & 1) for i in range(count)]
