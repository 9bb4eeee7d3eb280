"""
Labeled Image Dataset Loading

This module reads image classification data stored as comma-separated text,
one image per line:

    label,pixel0,pixel1,...,pixelN

This is the layout of the MNIST and Fashion-MNIST CSV exports, where each
pixel is an integer in [0, 255] and the first line is a header.

It also converts records into the column vectors the network consumes:
pixels scaled into [0, 1] and one-hot target vectors.

Classes:
    Record: One labeled image
    LabeledImageDataset: In-memory collection of records

Functions:
    load_csv: Parse a CSV file into a LabeledImageDataset
    normalize_pixels: Pixel values -> (n x 1) Matrix in [0, 1]
    one_hot: Class label -> (num_classes x 1) one-hot Matrix
"""

import csv
import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence, Tuple

import numpy as np

from mlp.errors import DatasetError
from mlp.matrix import Matrix

logger = logging.getLogger(__name__)

MAX_PIXEL_VALUE = 255.0


@dataclass
class Record:
    """
    A single labeled image.

    Attributes:
        label: Class index
        pixels: Flattened pixel intensities, row-major
    """

    label: int
    pixels: np.ndarray


def normalize_pixels(pixels: Sequence[float], scale: float = MAX_PIXEL_VALUE) -> Matrix:
    """
    Scale raw pixel intensities into a column vector with values in [0, 1].

    Args:
        pixels: Flattened pixel values
        scale: Value that maps to 1.0 (255 for 8-bit images)

    Returns:
        Matrix of shape (len(pixels), 1)
    """
    values = np.asarray(pixels, dtype=np.float64) / scale
    return Matrix.from_numpy(values.reshape(-1, 1))


def one_hot(label: int, num_classes: int) -> Matrix:
    """
    Encode a class label as a one-hot column vector.

    Example:
        >>> one_hot(2, 4).tolist()
        [[0.0], [0.0], [1.0], [0.0]]

    Raises:
        ValueError: If label is outside [0, num_classes)
    """
    if not 0 <= label < num_classes:
        raise ValueError(f"Label {label} out of range [0, {num_classes})")
    target = Matrix(num_classes, 1)
    target[label, 0] = 1.0
    return target


class LabeledImageDataset:
    """
    In-memory dataset of labeled, flattened images.

    Usage:
        dataset = load_csv("fashion-mnist_train.csv")
        print(dataset.describe())

        for input_matrix, target in dataset.iter_examples(num_classes=10):
            network.train(input_matrix, target)
    """

    def __init__(self, records: List[Record]):
        self.records = records

    def __len__(self) -> int:
        return len(self.records)

    def __getitem__(self, index: int) -> Record:
        return self.records[index]

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    @property
    def pixels_per_image(self) -> int:
        """Pixel count of the first record, or 0 for an empty dataset."""
        return len(self.records[0].pixels) if self.records else 0

    def label_counts(self, num_classes: int = 10) -> Dict[int, int]:
        """Count records per label in [0, num_classes); other labels are ignored."""
        counts = {label: 0 for label in range(num_classes)}
        for record in self.records:
            if 0 <= record.label < num_classes:
                counts[record.label] += 1
        return counts

    def describe(self, num_classes: int = 10) -> str:
        """Summarise size, image width and label distribution."""
        if not self.records:
            return "No data loaded"

        lines = [
            f"Total records: {len(self)}",
            f"Pixels per image: {self.pixels_per_image}",
            "Label distribution:",
        ]
        for label, count in self.label_counts(num_classes).items():
            lines.append(f"  {label}: {count}")
        return "\n".join(lines)

    def render_ascii(self, index: int, width: int = 28) -> str:
        """
        Draw one image as ASCII art.

        Pixels brighter than 127 become '#', brighter than 64 become '.', and
        anything darker is blank. Each pixel takes two characters so the image
        keeps roughly square proportions in a terminal.

        Raises:
            IndexError: If index is out of range
        """
        if not 0 <= index < len(self.records):
            raise IndexError(f"Index {index} out of range [0, {len(self.records)})")

        record = self.records[index]
        lines = [f"Label: {record.label}"]
        for start in range(0, len(record.pixels), width):
            row = record.pixels[start : start + width]
            lines.append(
                "".join("# " if p > 127 else ". " if p > 64 else "  " for p in row)
            )
        return "\n".join(lines)

    def iter_examples(self, num_classes: int = 10) -> Iterator[Tuple[Matrix, Matrix]]:
        """Yield (normalised input, one-hot target) pairs in record order."""
        for record in self.records:
            yield normalize_pixels(record.pixels), one_hot(record.label, num_classes)

    def to_examples(self, num_classes: int = 10) -> List[Tuple[Matrix, Matrix]]:
        """Materialise ``iter_examples`` into a list."""
        return list(self.iter_examples(num_classes))


def _parse_row(row: List[str], line_number: int) -> Record:
    try:
        values = [int(field) for field in row]
    except ValueError:
        raise DatasetError(f"Line {line_number}: non-integer field in {row[:3]}...") from None
    if len(values) < 2:
        raise DatasetError(f"Line {line_number}: expected a label followed by pixels")
    return Record(label=values[0], pixels=np.array(values[1:], dtype=np.int64))


def load_csv(path: str, has_header: bool = True) -> LabeledImageDataset:
    """
    Load a labeled image dataset from a CSV file.

    Args:
        path: File to read
        has_header: Skip the first line when True

    Returns:
        LabeledImageDataset with one record per non-empty line

    Raises:
        FileNotFoundError: If the file does not exist
        DatasetError: If a row is malformed or rows differ in width
    """
    records: List[Record] = []

    with open(path, "r", encoding="utf-8", newline="") as f:
        reader = csv.reader(f)
        if has_header:
            next(reader, None)

        for row in reader:
            if not row or all(not field.strip() for field in row):
                continue
            record = _parse_row(row, reader.line_num)
            if records and len(record.pixels) != len(records[0].pixels):
                raise DatasetError(
                    f"Line {reader.line_num}: expected {len(records[0].pixels)} pixels, "
                    f"got {len(record.pixels)}"
                )
            records.append(record)

    logger.info("Loaded %d records from %s", len(records), path)
    return LabeledImageDataset(records)
