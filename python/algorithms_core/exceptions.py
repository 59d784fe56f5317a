"""Error types raised by the algorithms_core building blocks."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """A component was constructed with parameters that violate its contract."""


class BoundsError(IndexError):
    """An index fell outside the extent of a :class:`MultiArray` dimension."""
