"""
Error types raised by the spatial core.

The core is pure computation, so the taxonomy is deliberately tiny: callers get an
`InvalidArgument` when a parameter breaks a function contract (non-positive cell
size, negative radius, ...). Individual malformed points are not rejected.
"""

from __future__ import annotations


class InvalidArgument(ValueError):
    """A parameter violates the contract of a core operation."""
