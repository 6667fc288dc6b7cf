"""Tests for the Coil value type."""

import pytest

from simple_modbus.models.coil import Coil


def test_invert_is_involution():
    assert ~Coil.ON is Coil.OFF
    assert ~Coil.OFF is Coil.ON
    assert ~~Coil.ON is Coil.ON


def test_from_bool():
    assert Coil.from_bool(True) is Coil.ON
    assert Coil.from_bool(0) is Coil.OFF
    assert Coil.from_bool(Coil.ON) is Coil.ON


def test_truthiness():
    assert Coil.ON
    assert not Coil.OFF


def test_parse():
    assert Coil.parse("On") is Coil.ON
    assert Coil.parse("Off") is Coil.OFF
    assert str(Coil.ON) == "On"


def test_parse_invalid():
    with pytest.raises(ValueError):
        Coil.parse("on")


def test_wire_code():
    assert Coil.ON.code == 0xFF00
    assert Coil.OFF.code == 0x0000
