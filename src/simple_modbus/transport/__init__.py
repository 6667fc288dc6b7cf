"""Byte channels the client can run over."""

from .stream import Transport
from .memory import MemoryTransport
