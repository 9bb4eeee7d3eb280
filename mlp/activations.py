"""
Activation Functions for the Feedforward Network

This module implements the logistic sigmoid used by the hidden layers. It
operates on raw NumPy arrays; ``Matrix.sigmoid`` wraps it for the matrix
type, and backpropagation derives its gradient from the activated value as
s * (1 - s).

Functions:
    sigmoid: Logistic function 1 / (1 + e^-x)
"""

import numpy as np

# exp(36) is still finite and 1 / (1 + e^-36) still rounds below 1.0, so
# clamping here keeps every output strictly inside (0, 1).
SIGMOID_CLAMP = 36.0


def sigmoid(x: np.ndarray) -> np.ndarray:
    """
    Compute the logistic sigmoid element-wise.

    Mathematical Formula:
        sigmoid(x) = 1 / (1 + exp(-x))

    Numerical Stability:
        Inputs are clamped to [-36, 36] before exponentiation, so exp() can
        no longer overflow. For |x| > 36 the absolute error stays below about
        2.3e-16 (sigmoid(-100) returns 2.3e-16 rather than 3.7e-44), and
        every output stays strictly inside (0, 1).

    Properties:
        - sigmoid(0) = 0.5 exactly
        - 0 < sigmoid(x) < 1 for every finite x

    Args:
        x: Input array of any shape.

    Returns:
        Array of the same shape with the sigmoid applied element-wise.

    Example:
        >>> sigmoid(np.array([-1.0, 0.0, 1.0]))
        array([0.269, 0.5, 0.731])
    """
    clamped = np.clip(np.asarray(x, dtype=np.float64), -SIGMOID_CLAMP, SIGMOID_CLAMP)
    return 1.0 / (1.0 + np.exp(-clamped))
