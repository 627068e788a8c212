"""Errors raised by the terrain and export pipeline."""

from typing import Optional


class TopographyError(Exception):
    """Base class for pipeline errors."""


class ConstructionError(TopographyError, RuntimeError):
    """The seeded random source could not build a permutation table."""


class NonFiniteInputError(TopographyError, ValueError):
    """A coordinate, matrix entry or computed value is NaN or infinite."""

    def __init__(self, message: str, index: Optional[int] = None):
        super().__init__(message)
        self.index = index


class MissingCollaboratorError(TopographyError, RuntimeError):
    """The mesh or camera needed by an operation has not been provided."""
