"""
Training and Evaluation Helpers

This module provides the loops around ``NeuralNetwork.train``:
- Repeating single-example updates over a dataset for several epochs
- Measuring classification accuracy on held-out examples

Classes:
    TrainingConfig: Hyperparameters for a training run

Functions:
    build_network: Create a network for a given input width and config
    train_epochs: Per-example SGD over a list of examples
    evaluate_accuracy: Fraction of correctly classified examples
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from mlp.matrix import Matrix, RandomSource, as_generator
from mlp.network import NetworkConfig, NeuralNetwork

logger = logging.getLogger(__name__)

Example = Tuple[Matrix, Matrix]
ProgressCallback = Callable[[int, int, int], None]


@dataclass
class TrainingConfig:
    """
    Hyperparameters for a training run.

    Attributes:
        epochs: Passes over the training set
        learning_rate: Gradient descent step size
        hidden_sizes: Neurons in each hidden layer
        num_classes: Output layer width (one neuron per class)
        shuffle: Visit examples in a new random order each epoch
        seed: Seed for weight initialisation and shuffling
        log_every: Log the running loss every this many examples (0 disables)
    """

    epochs: int = 5
    learning_rate: float = 0.01
    hidden_sizes: Tuple[int, ...] = (16, 10)
    num_classes: int = 10
    shuffle: bool = False
    seed: Optional[int] = None
    log_every: int = 1000

    def network_config(self, input_size: int) -> NetworkConfig:
        """Describe the network for inputs of ``input_size`` values."""
        return NetworkConfig(
            layer_sizes=(input_size, *self.hidden_sizes, self.num_classes),
            learning_rate=self.learning_rate,
            seed=self.seed,
        )


def build_network(input_size: int, config: TrainingConfig) -> NeuralNetwork:
    """Create a network whose input layer matches ``input_size``."""
    return NeuralNetwork.from_config(config.network_config(input_size))


def train_epochs(
    network: NeuralNetwork,
    examples: Sequence[Example],
    epochs: int,
    shuffle: bool = False,
    rng: RandomSource = None,
    progress: Optional[ProgressCallback] = None,
    log_every: int = 0,
) -> List[float]:
    """
    Train on every example, one at a time, for a number of epochs.

    Args:
        network: Network to update in place
        examples: (input, target) pairs
        epochs: Number of passes over ``examples``
        shuffle: Randomise the visiting order each epoch
        rng: Generator or seed for shuffling
        progress: Called as progress(epoch, index, total) after each example
        log_every: Log the running mean loss every N examples (0 disables)

    Returns:
        Mean training loss of each epoch

    Raises:
        ValueError: If epochs is negative or examples is empty
    """
    if epochs < 0:
        raise ValueError(f"epochs must be non-negative, got {epochs}")
    if len(examples) == 0:
        raise ValueError("Cannot train on an empty set of examples")

    generator = as_generator(rng)
    total = len(examples)
    epoch_losses = []

    for epoch in range(epochs):
        order = generator.permutation(total) if shuffle else np.arange(total)
        epoch_loss = 0.0
        epoch_start = time.time()

        for step, example_index in enumerate(order):
            input_matrix, target = examples[example_index]
            epoch_loss += network.train(input_matrix, target)

            if progress is not None:
                progress(epoch, step, total)
            if log_every and (step + 1) % log_every == 0:
                logger.debug(
                    "Epoch %d step %d/%d | avg loss %.4f",
                    epoch + 1,
                    step + 1,
                    total,
                    epoch_loss / (step + 1),
                )

        epoch_losses.append(epoch_loss / total)
        logger.info(
            "Epoch %d/%d completed in %.1fs | avg loss %.4f",
            epoch + 1,
            epochs,
            time.time() - epoch_start,
            epoch_losses[-1],
        )

    return epoch_losses


def evaluate_accuracy(network: NeuralNetwork, examples: Sequence[Example]) -> float:
    """
    Classification accuracy of ``network`` on ``examples``.

    An example counts as correct when the largest network output sits at the
    same index as the largest target value.

    Returns:
        Fraction in [0, 1]

    Raises:
        ValueError: If examples is empty
    """
    if len(examples) == 0:
        raise ValueError("Cannot evaluate on an empty set of examples")

    correct = sum(
        1 for input_matrix, target in examples if network.predict(input_matrix) == target.argmax()
    )
    return correct / len(examples)
