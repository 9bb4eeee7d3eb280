"""
Feedforward Neural Network

This module implements a fully connected multi-layer perceptron trained with
stochastic gradient descent on single examples.

Architecture Overview:
    Input column vector (layers[0] x 1)
           |
    [W_0 @ a + b_0] -> sigmoid
           |
    [W_1 @ a + b_1] -> sigmoid      (one per hidden layer)
           |
    [W_last @ a + b_last]           (linear output, unbounded)

Loss:
    Mean squared error. For a linear output layer its gradient with respect to
    the output is simply (output - target), which is what ``train`` uses.

Classes:
    NetworkConfig: Dataclass describing a network to build
    NeuralNetwork: Weights, biases, forward pass and backpropagation

Functions:
    mean_squared_error: Diagnostic loss between two matrices
"""

import logging
import operator
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from mlp.errors import DimensionMismatch, InvalidArchitecture
from mlp.matrix import Matrix, RandomSource, as_generator

logger = logging.getLogger(__name__)


def mean_squared_error(predicted: Matrix, target: Matrix) -> float:
    """
    Compute the mean squared error between two matrices of the same shape.

    Formula:
        MSE = sum((predicted - target)^2) / (rows * cols)

    Raises:
        DimensionMismatch: If the shapes differ
    """
    difference = predicted - target
    return difference.square().sum() / (difference.rows * difference.cols)


@dataclass
class NetworkConfig:
    """
    Configuration for a NeuralNetwork.

    Attributes:
        layer_sizes: Neurons per layer, input first and output last
        learning_rate: Gradient descent step size
        seed: Seed for weight initialisation; None draws fresh entropy

    Typical configuration for 28x28 images and 10 classes:
        NetworkConfig(layer_sizes=(784, 16, 10, 10), learning_rate=0.01)
    """

    layer_sizes: Tuple[int, ...] = (784, 16, 10, 10)
    learning_rate: float = 0.01
    seed: Optional[int] = None


class NeuralNetwork:
    """
    Multi-layer perceptron with sigmoid hidden layers and a linear output.

    For every pair of adjacent layers the network owns one weight matrix of
    shape (next_size x current_size) and one bias column of shape
    (next_size x 1), both initialised uniformly in [-1, 1).

    Training mutates weights and biases in place. Calls to ``train`` must not
    overlap; share a network between threads only behind a lock.

    Example usage:
        network = NeuralNetwork([2, 3, 1], learning_rate=0.1, rng=0)
        x = Matrix.column([1.0, 0.0])
        y = Matrix.column([1.0])
        for _ in range(1000):
            network.train(x, y)
        network.forward(x)  # close to [[1.0]]

    Attributes:
        layer_sizes: Tuple of neurons per layer
        learning_rate: Step size, may be changed between training calls
    """

    def __init__(
        self,
        layer_sizes: Sequence[int],
        learning_rate: float = 0.01,
        rng: RandomSource = None,
    ):
        """
        Build a network and randomise its parameters.

        Args:
            layer_sizes: At least two positive sizes: input, hidden..., output
            learning_rate: Positive gradient descent step size
            rng: numpy Generator or integer seed used for initialisation

        Raises:
            InvalidArchitecture: Fewer than two layers, or a non-positive size
            ValueError: If learning_rate is not positive
        """
        self._layers = self._validate_layers(layer_sizes)
        self.learning_rate = learning_rate

        generator = as_generator(rng)
        self._weights: List[Matrix] = []
        self._biases: List[Matrix] = []

        for current_size, next_size in zip(self._layers[:-1], self._layers[1:]):
            self._weights.append(
                Matrix(next_size, current_size).randomize(-1.0, 1.0, rng=generator)
            )
            self._biases.append(Matrix(next_size, 1).randomize(-1.0, 1.0, rng=generator))

        logger.debug(
            "Created network with layers %s (%d parameters)",
            self._layers,
            self.parameter_count(),
        )

    @classmethod
    def from_config(cls, config: NetworkConfig) -> "NeuralNetwork":
        """Build a network from a NetworkConfig."""
        return cls(config.layer_sizes, config.learning_rate, rng=config.seed)

    @staticmethod
    def _validate_layers(layer_sizes: Sequence[int]) -> Tuple[int, ...]:
        sizes = tuple(layer_sizes)
        if len(sizes) < 2:
            raise InvalidArchitecture(
                f"A network needs at least an input and an output layer, got {len(sizes)} layer(s)"
            )
        validated = []
        for position, size in enumerate(sizes):
            try:
                size = operator.index(size)
            except TypeError:
                raise InvalidArchitecture(
                    f"Layer {position} size must be an integer, got {size!r}"
                ) from None
            if size <= 0:
                raise InvalidArchitecture(f"Layer {position} size must be positive, got {size}")
            validated.append(size)
        return tuple(validated)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def learning_rate(self) -> float:
        return self._learning_rate

    @learning_rate.setter
    def learning_rate(self, value: float) -> None:
        if not value > 0:
            raise ValueError(f"Learning rate must be positive, got {value}")
        self._learning_rate = float(value)

    @property
    def layer_sizes(self) -> Tuple[int, ...]:
        return self._layers

    @property
    def layer_count(self) -> int:
        return len(self._layers)

    def layer_size(self, layer: int) -> int:
        """Number of neurons in ``layer`` (0 is the input layer)."""
        if not 0 <= layer < len(self._layers):
            raise IndexError(f"Layer {layer} out of range [0, {len(self._layers)})")
        return self._layers[layer]

    @property
    def weights(self) -> Tuple[Matrix, ...]:
        """Copies of the weight matrices, input side first."""
        return tuple(weight.copy() for weight in self._weights)

    @property
    def biases(self) -> Tuple[Matrix, ...]:
        """Copies of the bias columns, input side first."""
        return tuple(bias.copy() for bias in self._biases)

    def parameter_count(self) -> int:
        """Total number of trainable values (weights plus biases)."""
        return sum(w.rows * w.cols + b.rows for w, b in zip(self._weights, self._biases))

    def architecture_summary(self) -> str:
        """Return a human readable description of the layers."""
        lines = ["Neural Network Architecture:"]
        lines.extend(
            f"Layer {index}: {size} neurons" for index, size in enumerate(self._layers)
        )
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Forward and backward passes
    # ------------------------------------------------------------------

    def _check_column(self, matrix: Matrix, size: int, role: str) -> None:
        if matrix.shape != (size, 1):
            raise DimensionMismatch(
                f"Expected {role} of shape ({size}, 1), got {matrix.shape}"
            )

    def _forward_activations(self, input_matrix: Matrix) -> List[Matrix]:
        """
        Run the forward pass and keep every layer's output.

        Returns:
            [input, a_1, ..., output], one more than the number of weight
            matrices. Backpropagation needs only these: the sigmoid derivative
            is computed from the activated values.
        """
        last = len(self._weights) - 1
        activations = [input_matrix]

        for index, (weight, bias) in enumerate(zip(self._weights, self._biases)):
            z = weight @ activations[-1] + bias
            activations.append(z.sigmoid() if index < last else z)

        return activations

    def forward(self, input_matrix: Matrix) -> Matrix:
        """
        Propagate a column vector through the network.

        Args:
            input_matrix: Matrix of shape (layers[0], 1)

        Returns:
            Output matrix of shape (layers[-1], 1)

        Raises:
            DimensionMismatch: If the input shape does not match layer 0
        """
        self._check_column(input_matrix, self._layers[0], "input")
        activations = self._forward_activations(input_matrix)
        return activations[-1]

    def predict(self, input_matrix: Matrix) -> int:
        """Return the index of the largest output, i.e. the predicted class."""
        return self.forward(input_matrix).argmax()

    def train(self, input_matrix: Matrix, target: Matrix) -> float:
        """
        Take one gradient descent step on a single (input, target) example.

        Backpropagation, from the output layer back to the first:
            error_out = output - target
            W_i -= lr * error_i @ a_i^T
            b_i -= lr * error_i
            error_{i-1} = (W_i^T @ error_i) * a_i * (1 - a_i)

        The backward error for a layer is computed from the weights as they
        were before this call, so no update is visible to an earlier layer.

        Args:
            input_matrix: Matrix of shape (layers[0], 1)
            target: Matrix of shape (layers[-1], 1)

        Returns:
            Mean squared error of the prediction made before the update

        Raises:
            DimensionMismatch: If input or target has the wrong shape. Nothing
                               is modified in that case.
        """
        self._check_column(input_matrix, self._layers[0], "input")
        self._check_column(target, self._layers[-1], "target")

        activations = self._forward_activations(input_matrix)
        output = activations[-1]
        loss = mean_squared_error(output, target)

        error = output - target
        for layer in reversed(range(len(self._weights))):
            layer_input = activations[layer]

            if layer > 0:
                # layer_input is a sigmoid output; its derivative is s - s^2
                derivative = layer_input - layer_input.square()
                previous_error = (self._weights[layer].T @ error).hadamard(derivative)

            self._weights[layer] = self._weights[layer] - (
                error @ layer_input.T
            ) * self._learning_rate
            self._biases[layer] = self._biases[layer] - error * self._learning_rate

            if layer > 0:
                error = previous_error

        return loss

    def mean_squared_error(self, predicted: Matrix, target: Matrix) -> float:
        """See the module-level ``mean_squared_error``."""
        return mean_squared_error(predicted, target)
