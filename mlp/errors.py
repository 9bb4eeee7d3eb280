"""
Exceptions raised by the matrix and network modules.

Every error is raised at the call that violates its contract and is never
corrected silently. Each class also derives from the matching built-in
exception, so callers can catch either ``DimensionMismatch`` or plain
``ValueError``.

Classes:
    MLPError: Base class for all errors raised by this package
    InvalidDimension: Non-positive matrix size
    IndexOutOfRange: Element access beyond the matrix bounds
    DimensionMismatch: Operand shapes incompatible for the operation
    InvalidRange: Random range with high <= low
    InvalidArchitecture: Fewer than two layers, or a non-positive layer size
    DatasetError: Malformed rows in a dataset file
"""


class MLPError(Exception):
    """Base class for errors raised by the mlp package."""


class InvalidDimension(MLPError, ValueError):
    """A matrix was constructed with a non-positive row or column count."""


class IndexOutOfRange(MLPError, IndexError):
    """An element index fell outside [0, rows) x [0, cols)."""


class DimensionMismatch(MLPError, ValueError):
    """Operand shapes are incompatible for the requested operation."""


class InvalidRange(MLPError, ValueError):
    """A random range was requested with high <= low."""


class InvalidArchitecture(MLPError, ValueError):
    """A network was requested with fewer than two layers or an empty layer."""


class DatasetError(MLPError, ValueError):
    """A dataset file contained a row that could not be parsed."""
