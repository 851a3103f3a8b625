"""
Exception types raised by the simulation core.

All of them derive from ValueError so callers that already guard
construction with ``except ValueError`` keep working.
"""


class DegenerateGeometryError(ValueError):
    """Control points cannot produce a valid closed track."""


class InvalidGenomeLengthError(ValueError):
    """A weight vector does not match the brain's layer shapes."""


class EmptyPopulationError(ValueError):
    """Selection needs at least two cars to rank and breed."""
