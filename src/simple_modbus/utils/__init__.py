"""Shared helpers."""

from .crc import crc16, append_crc, check_crc
