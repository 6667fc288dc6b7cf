"""Protocol layer: operations, RTU framing, reply validation and value codec."""

from .requests import (
    FunctionCode,
    Operation,
    ReadCoils,
    ReadDiscreteInputs,
    ReadHoldingRegisters,
    ReadInputRegisters,
    WriteSingleCoil,
    WriteSingleRegister,
    WriteMultipleCoils,
    WriteMultipleRegisters,
    CustomFrame,
)
from .framing import MAX_FRAME_SIZE, build_frame, validate_reply, extract_payload
from .codec import pack_words, unpack_words, pack_coils, unpack_coils
from .parser import parse_registers, parse_coils
