"""Serial link and client settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_BAUDRATE = 9600
DEFAULT_TIMEOUT = 5.0  # seconds
DEFAULT_UNIT_ID = 1

PARITIES = ("N", "E", "O", "M", "S")


@dataclass
class SerialConfig:
    """Everything needed to open a port and address a slave on it."""

    port: str = ""
    baudrate: int = DEFAULT_BAUDRATE
    bytesize: int = 8
    parity: str = "N"
    stopbits: float = 1
    timeout: float | None = DEFAULT_TIMEOUT
    unit_id: int = DEFAULT_UNIT_ID

    def __post_init__(self) -> None:
        if self.parity not in PARITIES:
            raise ValueError(f"Parity must be one of {PARITIES}, got {self.parity!r}")
        if not 0 <= self.unit_id <= 255:
            raise ValueError(f"Unit id must be 0-255, got {self.unit_id}")
        if self.timeout is not None and self.timeout < 0:
            raise ValueError(f"Timeout must not be negative, got {self.timeout}")

    @classmethod
    def from_env(cls, prefix: str = "MODBUS_") -> SerialConfig:
        """Build a config from ``<prefix>PORT``, ``<prefix>BAUDRATE``,
        ``<prefix>PARITY``, ``<prefix>TIMEOUT`` and ``<prefix>UNIT_ID``.

        Unset variables keep their defaults.
        """
        env = os.environ
        return cls(
            port=env.get(f"{prefix}PORT", ""),
            baudrate=int(env.get(f"{prefix}BAUDRATE", DEFAULT_BAUDRATE)),
            parity=env.get(f"{prefix}PARITY", "N").upper(),
            timeout=float(env.get(f"{prefix}TIMEOUT", DEFAULT_TIMEOUT)),
            unit_id=int(env.get(f"{prefix}UNIT_ID", DEFAULT_UNIT_ID)),
        )

    def to_dict(self) -> dict:
        return {
            "port": self.port,
            "baudrate": self.baudrate,
            "bytesize": self.bytesize,
            "parity": self.parity,
            "stopbits": self.stopbits,
            "timeout": self.timeout,
            "unit_id": self.unit_id,
        }
