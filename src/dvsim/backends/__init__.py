"""Simulation backends."""

from dvsim.backends.base import Backend
from dvsim.backends.emu import EmuBackend

__all__ = ["Backend", "EmuBackend"]
