#!/usr/bin/env python3
"""
Train and Test a Feedforward Network on an Image CSV Dataset

This script trains the multi-layer perceptron on MNIST-style CSV files
(Fashion-MNIST works unchanged) and reports test accuracy.

Usage:
    python train_mnist.py TRAIN_CSV TEST_CSV [options]

The script will:
1. Load the training and test CSV files
2. Build a network: input -> hidden layers (sigmoid) -> 10 linear outputs
3. Train one example at a time for the requested number of epochs
4. Report the percentage of test images classified correctly

Example:
    python train_mnist.py datasets/fashion-mnist_train.csv \\
        datasets/fashion-mnist_test.csv --epochs 5 --hidden 16 10

Environment:
    LOG_LEVEL: Logging level for the library modules (default INFO)
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from mlp.dataset import LabeledImageDataset, load_csv
from mlp.errors import DatasetError
from mlp.training import TrainingConfig, build_network, evaluate_accuracy, train_epochs


def configure_logging() -> None:
    """Set up logging from the LOG_LEVEL environment variable."""
    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def print_header(title: str) -> None:
    print("=" * 60)
    print(title)
    print("=" * 60)


def positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be zero or more, got {value}")
    return number


def positive_float(value: str) -> float:
    number = float(value)
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    defaults = TrainingConfig()
    parser = argparse.ArgumentParser(description="Train a feedforward network on image CSV data")
    parser.add_argument("train_csv", help="Training set, one 'label,pixels...' row per image")
    parser.add_argument("test_csv", help="Test set in the same format")
    parser.add_argument("--epochs", type=non_negative_int, default=defaults.epochs)
    parser.add_argument("--learning-rate", type=positive_float, default=defaults.learning_rate)
    parser.add_argument(
        "--hidden",
        type=positive_int,
        nargs="*",
        default=list(defaults.hidden_sizes),
        help="Hidden layer sizes (none for a network without hidden layers)",
    )
    parser.add_argument("--num-classes", type=positive_int, default=defaults.num_classes)
    parser.add_argument("--shuffle", action="store_true", help="Shuffle examples every epoch")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible runs")
    parser.add_argument(
        "--limit", type=positive_int, default=None, help="Use only the first N records of each file"
    )
    parser.add_argument(
        "--show-image", type=int, default=None, help="Print training image N as ASCII art"
    )
    return parser.parse_args(argv)


def load_datasets(args: argparse.Namespace):
    print("Loading data...")
    train_data = load_csv(args.train_csv)
    test_data = load_csv(args.test_csv)

    if args.limit is not None:
        train_data = LabeledImageDataset(train_data.records[: args.limit])
        test_data = LabeledImageDataset(test_data.records[: args.limit])

    return train_data, test_data


def check_datasets(
    train_data: LabeledImageDataset, test_data: LabeledImageDataset, num_classes: int
) -> None:
    """Reject datasets the network cannot consume, before any training starts."""
    if len(train_data) == 0 or len(test_data) == 0:
        raise DatasetError("no records found")
    if test_data.pixels_per_image != train_data.pixels_per_image:
        raise DatasetError(
            f"test images have {test_data.pixels_per_image} pixels, "
            f"training images have {train_data.pixels_per_image}"
        )
    for name, dataset in (("training", train_data), ("test", test_data)):
        for index, record in enumerate(dataset):
            if not 0 <= record.label < num_classes:
                raise DatasetError(
                    f"{name} record {index} has label {record.label}, "
                    f"expected [0, {num_classes})"
                )


def main(argv: Optional[List[str]] = None) -> int:
    """Run the full load -> train -> test pipeline. Returns the exit code."""
    args = parse_args(argv)
    configure_logging()

    config = TrainingConfig(
        epochs=args.epochs,
        learning_rate=args.learning_rate,
        hidden_sizes=tuple(args.hidden),
        num_classes=args.num_classes,
        shuffle=args.shuffle,
        seed=args.seed,
    )

    print_header("Feedforward Network Training")

    try:
        train_data, test_data = load_datasets(args)
        check_datasets(train_data, test_data, config.num_classes)
    except (OSError, DatasetError) as exc:
        print(f"Failed to load CSV files: {exc}", file=sys.stderr)
        return 1

    print(train_data.describe(config.num_classes))
    print()

    if args.show_image is not None:
        try:
            print(train_data.render_ascii(args.show_image))
        except IndexError as exc:
            print(f"Error: {exc}", file=sys.stderr)
        print()

    network = build_network(train_data.pixels_per_image, config)
    print(network.architecture_summary())
    print()

    training_examples = train_data.to_examples(config.num_classes)
    test_examples = test_data.to_examples(config.num_classes)

    def report_progress(epoch: int, index: int, total: int) -> None:
        if index + 1 == total or index % 100 == 0:
            percent = round((index + 1) / total * 100.0)
            print(f"\rEpoch {epoch + 1}/{config.epochs} progress: {percent} %", end="", flush=True)
            if index + 1 == total:
                print()

    print("Training start...")
    epoch_losses = train_epochs(
        network,
        training_examples,
        config.epochs,
        shuffle=config.shuffle,
        rng=config.seed,
        progress=report_progress,
        log_every=config.log_every,
    )
    for epoch, loss in enumerate(epoch_losses, start=1):
        print(f"Epoch {epoch} completed. Avg loss: {loss:.4f}")
    print("Training completed...")
    print()

    print("Testing start...")
    accuracy = evaluate_accuracy(network, test_examples)
    print("Testing completed...")
    print(f"Accuracy: {accuracy * 100.0:.2f}%")

    return 0


if __name__ == "__main__":
    sys.exit(main())
