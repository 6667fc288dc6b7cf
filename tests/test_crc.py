"""Tests for Modbus CRC-16 calculation."""

from simple_modbus.utils.crc import append_crc, check_crc, crc16


def test_crc16_empty():
    """CRC of empty data is the initial register, swapped onto itself."""
    assert crc16(b"") == 0xFFFF


def test_crc16_reference_vector():
    """Slave 2, function 0x07: register 0x1241, transmitted 41 12."""
    result = crc16(bytes([0x02, 0x07]))
    assert result == 0x4112, f"Expected 0x4112, got 0x{result:04X}"
    # un-swap to the register value
    assert ((result << 8) | (result >> 8)) & 0xFFFF == 0x1241


def test_crc16_read_holding_registers_reference_frame():
    """Read 3 registers from 0x006B on slave 0x11: 11 03 00 6B 00 03 76 87."""
    body = bytes.fromhex("11 03 00 6B 00 03")
    assert append_crc(body) == bytes.fromhex("11 03 00 6B 00 03 76 87")


def test_crc16_well_known_frame():
    """01 03 00 00 00 0A C5 CD is a common capture of a 10-register read."""
    assert append_crc(bytes.fromhex("01 03 00 00 00 0A")).hex(" ") == "01 03 00 00 00 0a c5 cd"


def test_append_crc_low_byte_first():
    """The register's low byte goes on the wire before its high byte."""
    frame = append_crc(bytes([0x02, 0x07]))
    assert frame[-2] == 0x41  # low byte of 0x1241
    assert frame[-1] == 0x12  # high byte of 0x1241


def test_crc16_deterministic():
    data = b"\x01\x06\x00\x01\x00\x03"
    assert crc16(data) == crc16(data)


def test_crc16_different_inputs():
    assert crc16(b"\x01") != crc16(b"\x02")


def test_check_crc():
    frame = append_crc(b"\x0f\x06\x00\x00\x00\x01")
    assert check_crc(frame)
    corrupted = bytearray(frame)
    corrupted[-1] ^= 0x01
    assert not check_crc(bytes(corrupted))


def test_check_crc_too_short():
    assert not check_crc(b"\x01\x02")
