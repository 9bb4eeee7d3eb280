"""
Dense Matrix Type

This module implements the two-dimensional numeric container the network is
built on. A Matrix has a fixed shape chosen at construction and owns its
storage exclusively: every operation returns a new Matrix, except element
assignment and ``randomize``, which mutate in place.

Storage is a float64 NumPy array, so the arithmetic below maps directly onto
NumPy operations while the shape checks stay explicit and raise the package's
own exceptions.

Classes:
    Matrix: Fixed-shape 2-D matrix of float64 values

Functions:
    as_generator: Turn a seed (or None) into a numpy.random.Generator
"""

import operator
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from mlp.activations import sigmoid
from mlp.errors import DimensionMismatch, IndexOutOfRange, InvalidDimension, InvalidRange

RandomSource = Optional[Union[np.random.Generator, int]]


def as_generator(rng: RandomSource = None) -> np.random.Generator:
    """
    Return a NumPy random generator for ``rng``.

    Args:
        rng: An existing Generator (returned unchanged), an integer seed, or
             None for a fresh, unseeded generator.

    Returns:
        numpy.random.Generator
    """
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def _positive_size(value, name: str) -> int:
    try:
        size = operator.index(value)
    except TypeError:
        raise InvalidDimension(f"{name} must be an integer, got {value!r}") from None
    if size <= 0:
        raise InvalidDimension(f"{name} must be positive, got {size}")
    return size


class Matrix:
    """
    Dense matrix of double-precision values.

    Operators:
        a + b, a - b   element-wise, shapes must be identical
        a @ b          matrix product, a.cols must equal b.rows
        a * s, s * a   scalar multiplication
        a[i, j]        bounds-checked element access

    Attributes:
        rows: Number of rows (fixed)
        cols: Number of columns (fixed)

    Example:
        >>> weights = Matrix(3, 2).randomize(-1.0, 1.0, rng=0)
        >>> inputs = Matrix.column([0.5, 0.25])
        >>> (weights @ inputs).shape
        (3, 1)
    """

    __slots__ = ("_data",)

    # Makes NumPy scalars defer to __rmul__ instead of broadcasting over us.
    __array_ufunc__ = None

    def __init__(self, rows: int, cols: int, fill: float = 0.0):
        """
        Allocate a rows x cols matrix with every element set to ``fill``.

        Args:
            rows: Number of rows, must be positive
            cols: Number of columns, must be positive
            fill: Initial value of every element

        Raises:
            InvalidDimension: If rows or cols is zero, negative or not an integer
        """
        rows = _positive_size(rows, "rows")
        cols = _positive_size(cols, "cols")
        self._data = np.full((rows, cols), fill, dtype=np.float64)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_numpy(cls, array) -> "Matrix":
        """Build a Matrix from a 2-D array-like; the data is copied."""
        data = np.array(array, dtype=np.float64)
        if data.ndim != 2:
            raise InvalidDimension(f"Expected a 2-D array, got {data.ndim} dimension(s)")
        matrix = cls(*data.shape)
        matrix._data[...] = data
        return matrix

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> "Matrix":
        """Build a Matrix from a list of equally long rows."""
        widths = {len(row) for row in rows}
        if len(widths) > 1:
            raise InvalidDimension(f"Rows have differing lengths: {sorted(widths)}")
        return cls.from_numpy(rows)

    @classmethod
    def column(cls, values: Iterable[float]) -> "Matrix":
        """Build an n x 1 column vector."""
        data = np.asarray(list(values), dtype=np.float64)
        return cls.from_numpy(data.reshape(-1, 1))

    # ------------------------------------------------------------------
    # Shape and element access
    # ------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self._data.shape

    def _check_index(self, key) -> Tuple[int, int]:
        try:
            i, j = key
            i, j = operator.index(i), operator.index(j)
        except (TypeError, ValueError):
            raise IndexOutOfRange(f"Matrix index must be a pair of integers, got {key!r}") from None
        if not (0 <= i < self.rows and 0 <= j < self.cols):
            raise IndexOutOfRange(
                f"Index ({i}, {j}) out of range for {self.rows}x{self.cols} matrix"
            )
        return i, j

    def __getitem__(self, key) -> float:
        return float(self._data[self._check_index(key)])

    def __setitem__(self, key, value: float) -> None:
        self._data[self._check_index(key)] = value

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _require_same_shape(self, other: "Matrix", operation: str) -> None:
        if self.shape != other.shape:
            raise DimensionMismatch(
                f"Matrix dimensions don't match for {operation}: "
                f"{self.rows}x{self.cols} vs {other.rows}x{other.cols}"
            )

    def __add__(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        self._require_same_shape(other, "addition")
        return Matrix.from_numpy(self._data + other._data)

    def __sub__(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        self._require_same_shape(other, "subtraction")
        return Matrix.from_numpy(self._data - other._data)

    def __matmul__(self, other: "Matrix") -> "Matrix":
        """
        Matrix product.

        Each output cell (i, j) is the dot product of row i of ``self`` and
        column j of ``other``.

        Raises:
            DimensionMismatch: If self.cols != other.rows
        """
        if not isinstance(other, Matrix):
            return NotImplemented
        if self.cols != other.rows:
            raise DimensionMismatch(
                f"Matrix dimensions don't match for multiplication: "
                f"{self.rows}x{self.cols} @ {other.rows}x{other.cols}"
            )
        return Matrix.from_numpy(self._data @ other._data)

    def __mul__(self, scalar: float) -> "Matrix":
        if isinstance(scalar, Matrix):
            raise TypeError("Use '@' for the matrix product or hadamard() for element-wise products")
        if not isinstance(scalar, (int, float, np.number)):
            return NotImplemented
        return Matrix.from_numpy(self._data * float(scalar))

    __rmul__ = __mul__

    def __neg__(self) -> "Matrix":
        return self * -1.0

    def hadamard(self, other: "Matrix") -> "Matrix":
        """Element-wise product of two matrices of identical shape."""
        self._require_same_shape(other, "element-wise multiplication")
        return Matrix.from_numpy(self._data * other._data)

    def transpose(self) -> "Matrix":
        """Return the cols x rows transpose."""
        return Matrix.from_numpy(self._data.T)

    @property
    def T(self) -> "Matrix":
        """Alias for transpose()."""
        return self.transpose()

    def sum(self) -> float:
        """Sum of all elements."""
        return float(np.sum(self._data))

    def argmax(self) -> int:
        """Row-major index of the largest element (first one on ties)."""
        return int(np.argmax(self._data))

    # ------------------------------------------------------------------
    # Element-wise transforms
    # ------------------------------------------------------------------

    def randomize(self, low: float = 0.0, high: float = 1.0, rng: RandomSource = None) -> "Matrix":
        """
        Fill the matrix in place with independent uniform draws from [low, high).

        Args:
            low: Inclusive lower bound
            high: Exclusive upper bound, must be greater than low
            rng: Generator or seed to draw from. Pass one explicitly for
                 reproducible initialisation.

        Returns:
            self, to allow ``Matrix(r, c).randomize(-1, 1)``

        Raises:
            InvalidRange: If high <= low
        """
        if not high > low:
            raise InvalidRange(f"Random range requires high > low, got [{low}, {high})")
        generator = as_generator(rng)
        self._data[...] = generator.uniform(low, high, size=self.shape)
        return self

    def sigmoid(self) -> "Matrix":
        """Return a new matrix with the logistic sigmoid applied element-wise."""
        return Matrix.from_numpy(sigmoid(self._data))

    def square(self) -> "Matrix":
        """Return a new matrix with every element squared."""
        return Matrix.from_numpy(np.square(self._data))

    # ------------------------------------------------------------------
    # Conversion and comparison
    # ------------------------------------------------------------------

    def copy(self) -> "Matrix":
        return Matrix.from_numpy(self._data)

    def to_numpy(self) -> np.ndarray:
        """Return a copy of the underlying data as a 2-D float64 array."""
        return self._data.copy()

    def tolist(self) -> List[List[float]]:
        return self._data.tolist()

    def allclose(self, other: "Matrix", atol: float = 1e-9) -> bool:
        """True if shapes match and every element is within ``atol``."""
        return self.shape == other.shape and bool(
            np.allclose(self._data, other._data, rtol=0.0, atol=atol)
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None

    def __repr__(self) -> str:
        return f"Matrix(rows={self.rows}, cols={self.cols}, data={self.tolist()!r})"

    def __str__(self) -> str:
        return "\n".join(
            "[ " + ", ".join(f"{value:g}" for value in row) + " ]" for row in self._data
        )
