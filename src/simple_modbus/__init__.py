"""Modbus RTU master: frame encoding, CRC, reply validation and a serial client."""

from .client import ModbusClient
from .config import SerialConfig
from .errors import (
    ModbusError,
    InvalidFrame,
    TransportError,
    InvalidResponse,
    InvalidData,
    ProtocolException,
    ExceptionCode,
    Reason,
)
from .models.coil import Coil
from .transport.memory import MemoryTransport

__version__ = "0.1.0"
