"""Modbus RTU CRC-16 (polynomial 0xA001, initial value 0xFFFF).

:func:`crc16` returns the register byte-swapped, so writing the result
as a big-endian word puts the low byte of the register on the wire
first, which is the Modbus RTU transmission order::

    >>> hex(crc16(bytes([0x02, 0x07])))   # register value is 0x1241
    '0x4112'
    >>> append_crc(bytes([0x02, 0x07])).hex(" ")
    '02 07 41 12'
"""

from __future__ import annotations

POLYNOMIAL = 0xA001
INITIAL_VALUE = 0xFFFF


def crc16(data: bytes) -> int:
    """Compute the byte-swapped Modbus CRC-16 of ``data``."""
    crc = INITIAL_VALUE
    for byte in data:
        crc ^= byte
        for _ in range(8):
            if crc & 0x0001:
                crc = (crc >> 1) ^ POLYNOMIAL
            else:
                crc >>= 1
    return ((crc << 8) | (crc >> 8)) & 0xFFFF


def append_crc(data: bytes) -> bytes:
    """Return ``data`` followed by its two CRC bytes in wire order."""
    return bytes(data) + crc16(data).to_bytes(2, "big")


def check_crc(frame: bytes) -> bool:
    """True if the last two bytes of ``frame`` are the CRC of the rest."""
    if len(frame) < 3:
        return False
    return int.from_bytes(frame[-2:], "big") == crc16(frame[:-2])
