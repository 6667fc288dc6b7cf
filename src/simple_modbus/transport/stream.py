"""The byte channel the client talks through."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Transport(Protocol):
    """Blocking duplex byte stream with a configurable timeout.

    ``serial.Serial`` satisfies this as-is. ``read`` may return fewer
    bytes than asked for once ``timeout`` (seconds) elapses; ``write``
    returns the number of bytes written, or ``None`` if it always
    writes everything.
    """

    timeout: float | None

    def write(self, data: bytes) -> int | None:
        ...

    def read(self, size: int = 1) -> bytes:
        ...

    def flush(self) -> None:
        ...
