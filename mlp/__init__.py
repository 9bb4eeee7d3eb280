"""
Feedforward Neural Network Trainer from Scratch

This package provides a small multi-layer perceptron, trained one example at
a time with backpropagation and mean-squared-error gradient descent, built on
a dense matrix type backed by NumPy. It is designed to classify labeled image
datasets such as MNIST and Fashion-MNIST stored as CSV.

Modules:
    errors: Exception hierarchy
    activations: Sigmoid activation
    matrix: Dense fixed-shape matrix
    network: Network configuration, forward pass and training step
    dataset: CSV loading, normalisation and one-hot encoding
    training: Epoch loop and accuracy evaluation
"""

from mlp.errors import (
    DatasetError,
    DimensionMismatch,
    IndexOutOfRange,
    InvalidArchitecture,
    InvalidDimension,
    InvalidRange,
    MLPError,
)
from mlp.matrix import Matrix
from mlp.network import NetworkConfig, NeuralNetwork, mean_squared_error

__version__ = "1.0.0"

__all__ = [
    "DatasetError",
    "DimensionMismatch",
    "IndexOutOfRange",
    "InvalidArchitecture",
    "InvalidDimension",
    "InvalidRange",
    "MLPError",
    "Matrix",
    "NetworkConfig",
    "NeuralNetwork",
    "mean_squared_error",
]
