"""Tests for the MCP tools, with FastMCP and the serial port mocked."""

from __future__ import annotations

import sys
from unittest.mock import MagicMock, patch

import pytest

from simple_modbus.client import ModbusClient
from simple_modbus.transport.memory import MemoryTransport
from simple_modbus.utils.crc import append_crc


def _get_server_module():
    """Import server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Make the @mcp.tool() decorator a no-op that returns the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_instance.resource.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
        # Remove cached server module so it re-imports with our mock
        sys.modules.pop("simple_modbus.server", None)
        import simple_modbus.server as server_mod

    return server_mod


@pytest.fixture
def server():
    return _get_server_module()


def _attach(server, transport):
    client = ModbusClient(transport)
    return patch.object(server, "_get_client", return_value=client)


def test_tools_require_connection(server):
    with pytest.raises(RuntimeError, match="connect"):
        server.read_holding_registers(0)


def test_read_holding_registers_tool(server):
    reply = append_crc(bytes([0x01, 0x03, 0x04, 0x00, 0x01, 0x00, 0x02]))
    with _attach(server, MemoryTransport([reply])):
        result = server.read_holding_registers(0x0016, 2, unit_id=1)
    assert result == {"address": 0x0016, "values": [1, 2]}


def test_read_coils_tool(server):
    reply = append_crc(bytes([0x01, 0x01, 0x01, 0x05]))
    with _attach(server, MemoryTransport([reply])):
        result = server.read_coils(0, 3, unit_id=1)
    assert result["values"] == [True, False, True]


def test_modbus_error_becomes_error_dict(server):
    with _attach(server, MemoryTransport()):
        result = server.read_input_registers(0, 1, unit_id=1)
    assert result["type"] == "TransportError"
    assert "Timed out" in result["error"]


def test_write_tools(server):
    transport = MemoryTransport(echo=True)
    with _attach(server, transport):
        assert server.write_single_register(0, 1, unit_id=15)["written"]
        assert server.write_single_coil(4, True, unit_id=15)["written"]
    assert transport.written[0] == append_crc(bytes([0x0F, 0x06, 0x00, 0x00, 0x00, 0x01]))
    assert transport.written[1][4:6] == bytes([0xFF, 0x00])


def test_write_multiple_registers_empty(server):
    with _attach(server, MemoryTransport(echo=True)):
        result = server.write_multiple_registers(0, [], unit_id=1)
    assert result["type"] == "InvalidFrame"


def test_send_raw(server):
    request = append_crc(bytes([0x01, 0x41, 0x00, 0x00]))
    with _attach(server, MemoryTransport(echo=True)):
        result = server.send_raw(request.hex(" "), len(request))
    assert result == {"reply_hex": request.hex(" ")}


def test_send_raw_bad_hex(server):
    assert "error" in server.send_raw("zz", 4)


def test_set_no_reply_mode_tool(server):
    transport = MemoryTransport()
    with _attach(server, transport):
        assert server.set_no_reply_mode(True) == {"no_reply": True}


def test_connect_and_disconnect(server, monkeypatch):
    monkeypatch.delenv("MODBUS_PORT", raising=False)
    mock_conn = MagicMock()
    mock_conn.connected = True
    with patch.object(server, "SerialConnection", return_value=mock_conn) as cls:
        result = server.connect(port="/dev/ttyUSB0", baudrate=19200, unit_id=5)
    assert result["connected"] is True
    assert result["baudrate"] == 19200
    config = cls.call_args.args[0]
    assert config.port == "/dev/ttyUSB0"
    assert config.unit_id == 5
    assert server._get_client().unit_id == 5

    assert server.disconnect() == {"disconnected": True}
    mock_conn.close.assert_called_once()
    with pytest.raises(RuntimeError):
        server._get_client()


def test_connect_invalid_parity(server):
    result = server.connect(port="/dev/ttyUSB0", parity="x")
    assert "error" in result


def test_connect_open_failure(server):
    mock_conn = MagicMock()
    mock_conn.open.side_effect = ConnectionError("busy")
    with patch.object(server, "SerialConnection", return_value=mock_conn):
        result = server.connect(port="/dev/ttyUSB0")
    assert result["error"] == "busy"
    assert server._connection is None


def test_function_codes_resource(server):
    text = server.function_codes()
    assert "0x03 Read Holding Registers" in text
    assert "0x10 Write Multiple Registers" in text
