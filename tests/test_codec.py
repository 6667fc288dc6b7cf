"""Tests for register and coil packing."""

import pytest

from simple_modbus.errors import InvalidData, InvalidFrame, Reason
from simple_modbus.models.coil import Coil
from simple_modbus.protocol.codec import (
    pack_coils,
    pack_words,
    unpack_coils,
    unpack_words,
)


def test_pack_words_big_endian():
    assert pack_words(bytes([0x00, 0x01, 0x12, 0x34, 0xFF, 0xFF])) == [1, 0x1234, 0xFFFF]


def test_pack_words_empty():
    assert pack_words(b"") == []


@pytest.mark.parametrize("length", [1, 3, 7])
def test_pack_words_odd_length(length):
    with pytest.raises(InvalidData) as exc_info:
        pack_words(bytes(length))
    assert exc_info.value.reason is Reason.BYTECOUNT_NOT_EVEN


def test_unpack_words_high_byte_first():
    assert unpack_words([0x1234, 0x0001]) == bytes([0x12, 0x34, 0x00, 0x01])


def test_unpack_words_out_of_range():
    with pytest.raises(InvalidFrame):
        unpack_words([0x10000])


def test_words_roundtrip():
    words = [0, 1, 0x00FF, 0xFF00, 0xABCD, 0xFFFF]
    assert pack_words(unpack_words(words)) == words


def test_pack_coils_lsb_first():
    """Coil 0 is bit 0 of byte 0; coil 8 is bit 0 of byte 1."""
    coils = [Coil.ON] + [Coil.OFF] * 7 + [Coil.ON]
    assert pack_coils(coils) == bytes([0x01, 0x01])


def test_pack_coils_accepts_bools():
    assert pack_coils([True, False, True]) == bytes([0x05])


def test_pack_coils_length():
    assert pack_coils([]) == b""
    assert len(pack_coils([Coil.OFF] * 8)) == 1
    assert len(pack_coils([Coil.OFF] * 9)) == 2


@pytest.mark.parametrize("count", [1, 5, 8, 9, 16, 19])
def test_coils_roundtrip(count):
    coils = [Coil.from_bool(i % 3 == 0) for i in range(count)]
    assert unpack_coils(pack_coils(coils), count) == coils


def test_unpack_coils_ignores_padding():
    """Padding bits past ``count`` are not returned."""
    assert unpack_coils(bytes([0xFF]), 3) == [Coil.ON, Coil.ON, Coil.ON]


def test_unpack_coils_bounds_checked():
    """Asking for more bits than the data holds is an error, not an IndexError."""
    with pytest.raises(InvalidData):
        unpack_coils(bytes([0xFF]), 9)
    with pytest.raises(InvalidData):
        unpack_coils(b"", 1)


def test_unpack_coils_zero():
    assert unpack_coils(b"", 0) == []
