"""Tests for the error taxonomy."""

from simple_modbus.errors import (
    ExceptionCode,
    InvalidData,
    InvalidFrame,
    ModbusError,
    ProtocolException,
    Reason,
    TransportError,
)


def test_builtin_bases():
    """Callers catching ValueError / IOError still see these errors."""
    assert issubclass(InvalidFrame, ValueError)
    assert issubclass(TransportError, IOError)
    assert issubclass(InvalidData, ModbusError)


def test_invalid_data_message():
    err = InvalidData(Reason.CHECKSUM_MISMATCH, "received 0x0000")
    assert err.reason is Reason.CHECKSUM_MISMATCH
    assert str(err) == "invalid data: checksum mismatch (received 0x0000)"


def test_transport_error_cause():
    native = OSError("gone")
    err = TransportError("Read failed", cause=native)
    assert err.cause is native
    assert TransportError("Timed out").cause is None


def test_protocol_exception():
    err = ProtocolException(ExceptionCode.SLAVE_OR_SERVER_BUSY)
    assert err.code == 0x06
    assert "SLAVE_OR_SERVER_BUSY" in str(err)
