"""Feature transformer: turns active input features into the first-layer input.

Each position keeps an accumulator holding, for both perspectives, the sum of
the biases and the weight columns of all active features. It is either rebuilt
from scratch or derived from an earlier accumulator by subtracting removed
features and adding new ones. All sums use 16-bit arithmetic that wraps.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import BinaryIO, Iterable

import numpy as np

from fishcore.nnue.architecture import (
    FEATURE_DIMENSIONS,
    FEATURE_HASH_VALUE,
    TRANSFORMED_FEATURE_DIMENSIONS,
)
from fishcore.nnue.common import read_array, write_array
from fishcore.types import COLOR_NB, Color

BIAS_DTYPE = np.int16
WEIGHT_DTYPE = np.int16
OUTPUT_DTYPE = np.uint8

_MASK32 = 0xFFFFFFFF


class AccumulatorState(IntEnum):
    """Whether an accumulator half is up to date; INIT marks a root state."""

    EMPTY = 0
    COMPUTED = 1
    INIT = 2


def _empty_accumulation() -> np.ndarray:
    return np.zeros((COLOR_NB, TRANSFORMED_FEATURE_DIMENSIONS), dtype=BIAS_DTYPE)


def _empty_states() -> list[AccumulatorState]:
    return [AccumulatorState.EMPTY] * COLOR_NB


@dataclass
class Accumulator:
    """Affine transformation of the input features, one row per perspective."""

    accumulation: np.ndarray = field(default_factory=_empty_accumulation)
    state: list[AccumulatorState] = field(default_factory=_empty_states)

    @classmethod
    def empty(cls, half_dimensions: int = TRANSFORMED_FEATURE_DIMENSIONS) -> "Accumulator":
        """A zeroed accumulator of the given width with both halves EMPTY."""
        return cls(np.zeros((COLOR_NB, half_dimensions), dtype=BIAS_DTYPE), _empty_states())

    def is_computed(self, perspective: Color) -> bool:
        return self.state[int(perspective)] == AccumulatorState.COMPUTED


class FeatureTransformer:
    """Biases and weights converting sparse input features to dense outputs."""

    def __init__(
        self,
        half_dimensions: int = TRANSFORMED_FEATURE_DIMENSIONS,
        input_dimensions: int = FEATURE_DIMENSIONS,
    ) -> None:
        if half_dimensions <= 0 or input_dimensions <= 0:
            raise ValueError("dimensions must be positive")
        self.half_dimensions = half_dimensions
        self.input_dimensions = input_dimensions
        self.output_dimensions = half_dimensions * 2
        self.buffer_size = self.output_dimensions * np.dtype(OUTPUT_DTYPE).itemsize
        self.biases = np.zeros(half_dimensions, dtype=BIAS_DTYPE)
        # One row of weights per input feature
        self.weights = np.zeros((input_dimensions, half_dimensions), dtype=WEIGHT_DTYPE)

    def hash_value(self) -> int:
        """Hash value embedded in the evaluation file."""
        return (FEATURE_HASH_VALUE ^ self.output_dimensions) & _MASK32

    def read_parameters(self, stream: BinaryIO) -> None:
        """Read the biases, then the weights, from a little-endian stream."""
        biases = read_array(stream, BIAS_DTYPE, self.half_dimensions)
        weights = read_array(stream, WEIGHT_DTYPE, self.half_dimensions * self.input_dimensions)
        self.biases = biases
        self.weights = weights.reshape(self.input_dimensions, self.half_dimensions)

    def write_parameters(self, stream: BinaryIO) -> None:
        """Write the biases, then the weights, in little-endian order."""
        write_array(stream, self.biases, BIAS_DTYPE)
        write_array(stream, self.weights.ravel(), WEIGHT_DTYPE)

    def _check_width(self, accumulator: Accumulator) -> None:
        if accumulator.accumulation.shape != (COLOR_NB, self.half_dimensions):
            raise ValueError(
                f"accumulator shape {accumulator.accumulation.shape} does not match "
                f"({COLOR_NB}, {self.half_dimensions})"
            )

    def _column_sum(self, indices: Iterable[int]) -> np.ndarray:
        index_array = np.fromiter((int(i) for i in indices), dtype=np.int64)
        if index_array.size and (index_array.min() < 0 or index_array.max() >= self.input_dimensions):
            raise ValueError(f"feature index out of range 0..{self.input_dimensions - 1}")
        return self.weights[index_array].astype(np.int64).sum(axis=0)

    def refresh(self, accumulator: Accumulator, perspective: Color, active: Iterable[int]) -> None:
        """Rebuild one perspective of the accumulator from its active features."""
        self._check_width(accumulator)
        total = self.biases.astype(np.int64) + self._column_sum(active)
        accumulator.accumulation[int(perspective)] = total.astype(BIAS_DTYPE)
        accumulator.state[int(perspective)] = AccumulatorState.COMPUTED

    def update(
        self,
        source: Accumulator,
        target: Accumulator,
        perspective: Color,
        removed: Iterable[int],
        added: Iterable[int],
    ) -> None:
        """Derive target from a computed source by removing and adding features."""
        self._check_width(source)
        self._check_width(target)
        if not source.is_computed(perspective):
            raise ValueError("the source accumulator is not computed for this perspective")
        row = int(perspective)
        total = (
            source.accumulation[row].astype(np.int64)
            - self._column_sum(removed)
            + self._column_sum(added)
        )
        target.accumulation[row] = total.astype(BIAS_DTYPE)
        target.state[row] = AccumulatorState.COMPUTED

    def transform(self, accumulator: Accumulator, side_to_move: Color) -> np.ndarray:
        """Clamp both halves to 0..127, side to move first."""
        self._check_width(accumulator)
        perspectives = (Color(side_to_move), ~Color(side_to_move))
        for perspective in perspectives:
            if not accumulator.is_computed(perspective):
                raise ValueError(f"accumulator is not computed for {perspective.name}")
        halves = [np.clip(accumulator.accumulation[int(p)], 0, 127) for p in perspectives]
        return np.concatenate(halves).astype(OUTPUT_DTYPE)