"""Decode validated read replies into typed values."""

from __future__ import annotations

from ..models.coil import Coil
from .codec import pack_words, unpack_coils
from .framing import extract_payload


def parse_registers(reply: bytes) -> list[int]:
    """Return the register words carried by a 0x03 / 0x04 reply."""
    return pack_words(extract_payload(reply))


def parse_coils(reply: bytes, quantity: int) -> list[Coil]:
    """Return ``quantity`` coil states carried by a 0x01 / 0x02 reply.

    The slave pads the last byte with zero bits; only the requested
    number of states is returned.
    """
    return unpack_coils(extract_payload(reply), quantity)
