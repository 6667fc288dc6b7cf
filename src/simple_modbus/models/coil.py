"""Single-bit coil / discrete input state."""

from __future__ import annotations

from enum import Enum


class Coil(Enum):
    """Two-state value read from or written to a coil.

    ``~Coil.ON is Coil.OFF`` and ``~Coil.OFF is Coil.ON``.
    """

    ON = True
    OFF = False

    @classmethod
    def from_bool(cls, flag: object) -> Coil:
        return cls.ON if flag else cls.OFF

    @classmethod
    def parse(cls, text: str) -> Coil:
        """Parse ``"On"`` or ``"Off"``."""
        if text == "On":
            return cls.ON
        if text == "Off":
            return cls.OFF
        raise ValueError(f"Coil must be 'On' or 'Off', got {text!r}")

    @property
    def code(self) -> int:
        """Value written by Write Single Coil (0x05)."""
        return 0xFF00 if self is Coil.ON else 0x0000

    def __invert__(self) -> Coil:
        return Coil.OFF if self is Coil.ON else Coil.ON

    def __bool__(self) -> bool:
        return self.value

    def __str__(self) -> str:
        return "On" if self is Coil.ON else "Off"
