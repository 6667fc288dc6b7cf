"""Data models for values exchanged with a slave."""

from .coil import Coil
