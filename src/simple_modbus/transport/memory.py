"""In-memory transport for tests and dry runs."""

from __future__ import annotations

from collections import deque
from typing import Iterable


class MemoryTransport:
    """A scripted byte channel.

    Every written frame is recorded in ``written``. Reads are served
    from queued ``replies`` one reply per write, or from the request
    itself when ``echo`` is set. Reading past the end of the pending
    reply returns short, the way a serial port does when its timeout
    expires.
    """

    def __init__(self, replies: Iterable[bytes] = (), echo: bool = False) -> None:
        self.timeout: float | None = None
        self.echo = echo
        self.written: list[bytes] = []
        self.flushes = 0
        self._replies: deque[bytes] = deque(bytes(r) for r in replies)
        self._pending = bytearray()

    def queue_reply(self, reply: bytes) -> None:
        self._replies.append(bytes(reply))

    def write(self, data: bytes) -> int:
        data = bytes(data)
        self.written.append(data)
        if self.echo:
            self._pending = bytearray(data)
        elif self._replies:
            self._pending = bytearray(self._replies.popleft())
        else:
            self._pending = bytearray()
        return len(data)

    def read(self, size: int = 1) -> bytes:
        chunk = bytes(self._pending[:size])
        del self._pending[:size]
        return chunk

    def flush(self) -> None:
        self.flushes += 1
