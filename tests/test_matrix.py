"""
Tests for the dense matrix module.

Tests cover:
- Construction: fill values, invalid dimensions
- Element access: bounds checking
- Arithmetic: addition, subtraction, matrix product, scalar product
- Transforms: transpose, sigmoid, square, randomize
"""

import numpy as np
import pytest

from mlp.errors import DimensionMismatch, IndexOutOfRange, InvalidDimension, InvalidRange
from mlp.matrix import Matrix


def random_matrix(rows, cols, seed):
    return Matrix(rows, cols).randomize(-5.0, 5.0, rng=seed)


class TestConstruction:
    """Test creating matrices."""

    def test_default_fill_is_zero(self):
        """A new matrix should be filled with zeros."""
        matrix = Matrix(2, 3)

        assert matrix.shape == (2, 3)
        assert matrix.tolist() == [[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]]

    def test_custom_fill(self):
        """Every element should equal the fill value."""
        matrix = Matrix(3, 2, fill=1.5)

        for i in range(3):
            for j in range(2):
                assert matrix[i, j] == 1.5

    @pytest.mark.parametrize("rows, cols", [(0, 3), (3, 0), (0, 0), (-1, 2)])
    def test_non_positive_dimensions_rejected(self, rows, cols):
        """Zero or negative sizes should raise InvalidDimension."""
        with pytest.raises(InvalidDimension):
            Matrix(rows, cols)

    def test_non_integer_dimension_rejected(self):
        """Fractional sizes are not valid dimensions."""
        with pytest.raises(InvalidDimension):
            Matrix(2.5, 2)

    def test_invalid_dimension_is_value_error(self):
        """InvalidDimension should be catchable as ValueError."""
        with pytest.raises(ValueError):
            Matrix(0, 1)

    def test_from_rows(self):
        """from_rows should keep row-major order."""
        matrix = Matrix.from_rows([[1, 2, 3], [4, 5, 6]])

        assert matrix.shape == (2, 3)
        assert matrix[1, 0] == 4.0

    def test_from_rows_ragged_rejected(self):
        """Rows of different lengths cannot form a matrix."""
        with pytest.raises(InvalidDimension):
            Matrix.from_rows([[1, 2], [3]])

    def test_column_vector(self):
        """column() should produce an n x 1 matrix."""
        vector = Matrix.column([1.0, 2.0, 3.0])

        assert vector.shape == (3, 1)
        assert vector[2, 0] == 3.0

    def test_copy_does_not_share_storage(self):
        """Modifying a copy must not change the original."""
        original = Matrix(2, 2, fill=1.0)
        duplicate = original.copy()
        duplicate[0, 0] = 9.0

        assert original[0, 0] == 1.0

    def test_to_numpy_returns_copy(self):
        """The exported array must not alias the matrix storage."""
        matrix = Matrix(2, 2)
        exported = matrix.to_numpy()
        exported[0, 0] = 7.0

        assert matrix[0, 0] == 0.0


class TestElementAccess:
    """Test bounds-checked element access."""

    def test_set_then_get(self):
        """A value written to (i, j) should be read back unchanged."""
        matrix = Matrix(2, 3)
        matrix[1, 2] = 4.25

        assert matrix[1, 2] == 4.25
        assert matrix[0, 0] == 0.0

    @pytest.mark.parametrize("index", [(2, 0), (0, 3), (5, 5), (-1, 0), (0, -1)])
    def test_get_out_of_range(self, index):
        """Reading outside the matrix should raise IndexOutOfRange."""
        matrix = Matrix(2, 3)

        with pytest.raises(IndexOutOfRange):
            matrix[index]

    def test_set_out_of_range(self):
        """Writing outside the matrix should raise IndexOutOfRange."""
        matrix = Matrix(2, 3)

        with pytest.raises(IndexOutOfRange):
            matrix[2, 3] = 1.0

    def test_index_error_compatibility(self):
        """IndexOutOfRange should be catchable as IndexError."""
        with pytest.raises(IndexError):
            Matrix(1, 1)[1, 1]


class TestArithmetic:
    """Test matrix arithmetic operators."""

    def test_add_and_subtract_are_pointwise(self):
        """(A +/- B)[i, j] should equal A[i, j] +/- B[i, j] everywhere."""
        a = random_matrix(3, 4, seed=1)
        b = random_matrix(3, 4, seed=2)
        total = a + b
        difference = a - b

        for i in range(3):
            for j in range(4):
                assert total[i, j] == a[i, j] + b[i, j]
                assert difference[i, j] == a[i, j] - b[i, j]

    def test_add_shape_mismatch(self):
        """Adding matrices of different shapes should fail."""
        with pytest.raises(DimensionMismatch):
            Matrix(2, 3) + Matrix(3, 2)

    def test_subtract_shape_mismatch(self):
        """Subtracting matrices of different shapes should fail."""
        with pytest.raises(DimensionMismatch):
            Matrix(2, 3) - Matrix(2, 2)

    def test_matrix_product_values(self):
        """Each output cell should be the dot product of a row and a column."""
        a = Matrix.from_rows([[1, 2, 3], [4, 5, 6]])
        b = Matrix.from_rows([[7, 8], [9, 10], [11, 12]])

        product = a @ b

        assert product.shape == (2, 2)
        assert product == Matrix.from_rows([[58, 64], [139, 154]])

    def test_matrix_product_inner_dimension_mismatch(self):
        """A 2x3 matrix cannot be multiplied by a 4x2 matrix (3 != 4)."""
        with pytest.raises(DimensionMismatch):
            Matrix(2, 3) @ Matrix(4, 2)

    def test_transpose_of_product(self):
        """(AB)^T should equal B^T A^T within floating point tolerance."""
        a = random_matrix(3, 5, seed=3)
        b = random_matrix(5, 2, seed=4)

        left = (a @ b).transpose()
        right = b.transpose() @ a.transpose()

        assert left.allclose(right, atol=1e-12)

    def test_scalar_multiplication_commutes(self):
        """Scalar on the left and on the right should give identical matrices."""
        a = random_matrix(4, 3, seed=5)

        assert a * 2.5 == 2.5 * a
        assert a * np.float64(-0.5) == np.float64(-0.5) * a

    def test_scalar_multiplication_values(self):
        """Every element should be scaled."""
        a = Matrix.from_rows([[1, -2], [3, 0]])

        assert (a * 3).tolist() == [[3.0, -6.0], [9.0, 0.0]]

    def test_star_between_matrices_is_rejected(self):
        """'*' is reserved for scalars; matrices use '@' or hadamard()."""
        with pytest.raises(TypeError):
            Matrix(2, 2) * Matrix(2, 2)

    def test_hadamard(self):
        """hadamard() should multiply element by element."""
        a = Matrix.from_rows([[1, 2], [3, 4]])
        b = Matrix.from_rows([[2, 0], [-1, 0.5]])

        assert a.hadamard(b).tolist() == [[2.0, 0.0], [-3.0, 2.0]]

    def test_hadamard_shape_mismatch(self):
        with pytest.raises(DimensionMismatch):
            Matrix(2, 1).hadamard(Matrix(1, 2))

    def test_sum(self):
        """sum() should add up every element."""
        assert Matrix.from_rows([[1, 2], [3, 4.5]]).sum() == 10.5

    def test_argmax(self):
        """argmax() should return the row-major index of the largest value."""
        vector = Matrix.column([0.1, 0.7, 0.2])

        assert vector.argmax() == 1

    def test_operations_do_not_mutate_operands(self):
        """Arithmetic should return new matrices and leave inputs alone."""
        a = Matrix(2, 2, fill=1.0)
        b = Matrix(2, 2, fill=2.0)
        _ = a + b
        _ = a - b
        _ = a @ b
        _ = a * 3

        assert a == Matrix(2, 2, fill=1.0)
        assert b == Matrix(2, 2, fill=2.0)


class TestTransforms:
    """Test transpose, sigmoid, square and randomize."""

    def test_transpose_shape_and_values(self):
        """Transpose should swap rows and columns."""
        a = Matrix.from_rows([[1, 2, 3], [4, 5, 6]])
        transposed = a.transpose()

        assert transposed.shape == (3, 2)
        for i in range(2):
            for j in range(3):
                assert transposed[j, i] == a[i, j]

    def test_double_transpose_is_identity(self):
        """Transposing twice should give back the original matrix."""
        a = random_matrix(4, 7, seed=6)

        assert a.T.T == a

    def test_sigmoid_of_zero_is_half(self):
        """sigmoid(0) should be exactly 0.5."""
        assert Matrix(1, 1).sigmoid()[0, 0] == 0.5

    def test_sigmoid_output_in_open_interval(self):
        """Sigmoid output should lie strictly between 0 and 1 for finite inputs."""
        values = Matrix.column([-1e308, -1000.0, -40.0, -1.0, 0.0, 1.0, 40.0, 1000.0, 1e308])
        activated = values.sigmoid().to_numpy()

        assert np.all(np.isfinite(activated))
        assert np.all(activated > 0.0)
        assert np.all(activated < 1.0)

    def test_sigmoid_returns_new_matrix(self):
        """sigmoid() should leave the original matrix untouched."""
        a = Matrix(2, 2, fill=3.0)
        _ = a.sigmoid()

        assert a == Matrix(2, 2, fill=3.0)

    def test_sigmoid_known_value(self):
        """sigmoid(1) should match the closed form."""
        assert np.isclose(Matrix(1, 1, fill=1.0).sigmoid()[0, 0], 1.0 / (1.0 + np.e**-1))

    def test_square(self):
        """square() should square each element."""
        a = Matrix.from_rows([[-2, 3], [0.5, 0]])

        assert a.square().tolist() == [[4.0, 9.0], [0.25, 0.0]]

    def test_randomize_range(self):
        """Randomized values should fall in [low, high)."""
        a = Matrix(20, 20).randomize(-1.0, 1.0, rng=0)
        values = a.to_numpy()

        assert np.all(values >= -1.0)
        assert np.all(values < 1.0)
        assert len(np.unique(values)) > 1, "Values should not be constant"

    def test_randomize_is_in_place(self):
        """randomize() should mutate and return the same matrix."""
        a = Matrix(3, 3)
        result = a.randomize(rng=1)

        assert result is a
        assert a != Matrix(3, 3)

    def test_randomize_seeded_is_reproducible(self):
        """The same seed should produce the same values."""
        assert Matrix(4, 4).randomize(rng=42) == Matrix(4, 4).randomize(rng=42)

    @pytest.mark.parametrize("low, high", [(1.0, 1.0), (1.0, 0.0)])
    def test_randomize_invalid_range(self, low, high):
        """high must be strictly greater than low."""
        with pytest.raises(InvalidRange):
            Matrix(2, 2).randomize(low, high)

    def test_str_rendering(self):
        """str() should print one bracketed row per line."""
        a = Matrix.from_rows([[1, 2], [3, 4]])

        assert str(a) == "[ 1, 2 ]\n[ 3, 4 ]"
