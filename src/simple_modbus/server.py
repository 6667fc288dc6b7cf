"""MCP server exposing a Modbus RTU master over stdio.

Tools open a serial link, read and write coils and registers on the
slaves behind it, and send raw frames for vendor-specific functions.
Link settings default to the ``MODBUS_*`` environment variables (see
:meth:`simple_modbus.config.SerialConfig.from_env`).
"""

from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .client import ModbusClient
from .config import SerialConfig
from .errors import ModbusError
from .models.coil import Coil
from .protocol.requests import FunctionCode
from .transport.serial_connection import SerialConnection, available_ports

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "simple-modbus",
    instructions="Modbus RTU master: read and write registers and coils over a serial link",
)

# Global connection state
_connection: SerialConnection | None = None
_client: ModbusClient | None = None


def _get_client() -> ModbusClient:
    """Get the active client, raising if not connected."""
    if _client is None or _connection is None or not _connection.connected:
        raise RuntimeError(
            "Not connected to a serial port. Use the 'connect' tool first."
        )
    return _client


def _error(e: Exception) -> dict[str, Any]:
    logger.debug("Exchange failed: %s", e)
    return {"error": str(e), "type": type(e).__name__}


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def list_ports() -> dict[str, Any]:
    """List the serial ports available on this machine."""
    return {
        "ports": [
            {"device": p.device, "description": p.description, "hwid": p.hwid}
            for p in available_ports()
        ]
    }


@mcp.tool()
def connect(
    port: str | None = None,
    baudrate: int | None = None,
    parity: str | None = None,
    timeout: float | None = None,
    unit_id: int | None = None,
) -> dict[str, Any]:
    """Open a serial link to the Modbus bus.

    Arguments left out fall back to the MODBUS_* environment variables,
    then to 9600 baud, no parity, a 5 second timeout and unit 1.

    Args:
        port: Serial device, e.g. /dev/ttyUSB0 or COM3.
        baudrate: Line speed.
        parity: N, E or O.
        timeout: Read/write timeout in seconds.
        unit_id: Default slave address (0-255).
    """
    global _connection, _client
    if _connection is not None and _connection.connected:
        return {
            "connected": True,
            "message": "Already connected",
            **_connection.config.to_dict(),
        }

    try:
        config = SerialConfig.from_env()
        if port is not None:
            config.port = port
        if baudrate is not None:
            config.baudrate = baudrate
        if parity is not None:
            config.parity = parity.upper()
        if timeout is not None:
            config.timeout = timeout
        if unit_id is not None:
            config.unit_id = unit_id
        # re-run field validation after the overrides
        config = SerialConfig(**config.to_dict())
    except ValueError as e:
        return _error(e)

    connection = SerialConnection(config)
    try:
        connection.open()
    except ConnectionError as e:
        return _error(e)

    _connection = connection
    _client = ModbusClient(connection, unit_id=config.unit_id)
    return {"connected": True, **config.to_dict()}


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the serial link."""
    global _connection, _client
    if _connection is not None:
        _connection.close()
    _connection = None
    _client = None
    return {"disconnected": True}


@mcp.tool()
def set_no_reply_mode(enabled: bool) -> dict[str, Any]:
    """Stop waiting for write acknowledgments (for slaves that never answer).

    Args:
        enabled: True to skip reading write replies.
    """
    client = _get_client()
    client.set_no_reply_mode(enabled)
    return {"no_reply": client.no_reply}


@mcp.tool()
def set_timeout(seconds: float) -> dict[str, Any]:
    """Change the serial read/write timeout.

    Args:
        seconds: Timeout in seconds.
    """
    client = _get_client()
    try:
        client.set_timeout(seconds)
    except ValueError as e:
        return _error(e)
    return {"timeout": seconds}


# ─── READ TOOLS ───────────────────────────────────────────────────────

@mcp.tool()
def read_holding_registers(
    address: int, quantity: int = 1, unit_id: int | None = None
) -> dict[str, Any]:
    """Read holding registers (function 0x03).

    Args:
        address: First register address (0-65535).
        quantity: Number of registers.
        unit_id: Slave address; defaults to the one given to connect.
    """
    client = _get_client()
    try:
        values = client.read_holding_registers(unit_id, address, quantity)
    except ModbusError as e:
        return _error(e)
    return {"address": address, "values": values}


@mcp.tool()
def read_input_registers(
    address: int, quantity: int = 1, unit_id: int | None = None
) -> dict[str, Any]:
    """Read input registers (function 0x04).

    Args:
        address: First register address (0-65535).
        quantity: Number of registers.
        unit_id: Slave address; defaults to the one given to connect.
    """
    client = _get_client()
    try:
        values = client.read_input_registers(unit_id, address, quantity)
    except ModbusError as e:
        return _error(e)
    return {"address": address, "values": values}


@mcp.tool()
def read_coils(
    address: int, quantity: int = 1, unit_id: int | None = None
) -> dict[str, Any]:
    """Read coils (function 0x01).

    Args:
        address: First coil address (0-65535).
        quantity: Number of coils.
        unit_id: Slave address; defaults to the one given to connect.
    """
    client = _get_client()
    try:
        coils = client.read_coils(unit_id, address, quantity)
    except ModbusError as e:
        return _error(e)
    return {"address": address, "values": [bool(c) for c in coils]}


@mcp.tool()
def read_discrete_inputs(
    address: int, quantity: int = 1, unit_id: int | None = None
) -> dict[str, Any]:
    """Read discrete inputs (function 0x02).

    Args:
        address: First input address (0-65535).
        quantity: Number of inputs.
        unit_id: Slave address; defaults to the one given to connect.
    """
    client = _get_client()
    try:
        inputs = client.read_discrete_inputs(unit_id, address, quantity)
    except ModbusError as e:
        return _error(e)
    return {"address": address, "values": [bool(c) for c in inputs]}


# ─── WRITE TOOLS ──────────────────────────────────────────────────────

@mcp.tool()
def write_single_register(
    address: int, value: int, unit_id: int | None = None
) -> dict[str, Any]:
    """Write one holding register (function 0x06).

    Args:
        address: Register address (0-65535).
        value: Register value (0-65535).
        unit_id: Slave address; defaults to the one given to connect.
    """
    client = _get_client()
    try:
        client.write_single_register(unit_id, address, value)
    except ModbusError as e:
        return _error(e)
    return {"written": True, "address": address, "value": value}


@mcp.tool()
def write_multiple_registers(
    address: int, values: list[int], unit_id: int | None = None
) -> dict[str, Any]:
    """Write consecutive holding registers (function 0x10).

    Args:
        address: First register address (0-65535).
        values: Register values (0-65535 each), at most 125.
        unit_id: Slave address; defaults to the one given to connect.
    """
    client = _get_client()
    try:
        client.write_multiple_registers(unit_id, address, values)
    except ModbusError as e:
        return _error(e)
    return {"written": True, "address": address, "count": len(values)}


@mcp.tool()
def write_single_coil(
    address: int, value: bool, unit_id: int | None = None
) -> dict[str, Any]:
    """Switch one coil on or off (function 0x05).

    Args:
        address: Coil address (0-65535).
        value: True for on, False for off.
        unit_id: Slave address; defaults to the one given to connect.
    """
    client = _get_client()
    try:
        client.write_single_coil(unit_id, address, Coil.from_bool(value))
    except ModbusError as e:
        return _error(e)
    return {"written": True, "address": address, "value": value}


@mcp.tool()
def write_multiple_coils(
    address: int, values: list[bool], unit_id: int | None = None
) -> dict[str, Any]:
    """Set consecutive coils (function 0x0F).

    Args:
        address: First coil address (0-65535).
        values: Coil states, True for on.
        unit_id: Slave address; defaults to the one given to connect.
    """
    client = _get_client()
    try:
        client.write_multiple_coils(
            unit_id, address, [Coil.from_bool(v) for v in values]
        )
    except ModbusError as e:
        return _error(e)
    return {"written": True, "address": address, "count": len(values)}


@mcp.tool()
def send_raw(request_hex: str, expected_reply_length: int) -> dict[str, Any]:
    """Send a hand-built frame and return the slave's reply.

    The frame is sent as-is, so it must end with its CRC. The reply is
    checked for unit id, function code and CRC but not decoded.

    Args:
        request_hex: Frame bytes as hex, e.g. "01 03 00 00 00 0A C5 CD".
        expected_reply_length: Exact reply length in bytes, CRC included;
            0 if the slave does not answer.
    """
    try:
        request = bytes.fromhex(request_hex)
    except ValueError as e:
        return _error(e)

    client = _get_client()
    try:
        reply = client.raw(request, expected_reply_length)
    except ModbusError as e:
        return _error(e)
    return {"reply_hex": reply.hex(" ")}


# ─── RESOURCES ────────────────────────────────────────────────────────

@mcp.resource("modbus://function-codes")
def function_codes() -> str:
    """Function codes this master can build frames for."""
    return "\n".join(
        f"0x{code.value:02X} {code.name.replace('_', ' ').title()}"
        for code in FunctionCode
    )


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
