"""Affine transformation layer: 8-bit weights, 32-bit biases and outputs."""

from __future__ import annotations

from typing import BinaryIO

import numpy as np
from numpy.typing import ArrayLike

from fishcore.nnue.common import (
    CACHE_LINE_SIZE,
    MAX_SIMD_WIDTH,
    ceil_to_multiple,
    read_array,
    write_array,
)
from fishcore.nnue.simple_layers import Layer

_MASK32 = 0xFFFFFFFF

BIAS_DTYPE = np.int32
WEIGHT_DTYPE = np.int8
OUTPUT_DTYPE = np.int32


class AffineTransform:
    """Fully connected layer computing biases + weights . input.

    Weights are stored as one row per output, padded to a multiple of
    MAX_SIMD_WIDTH inputs; the padding is read and written but never used.
    """

    def __init__(self, previous: Layer, output_dimensions: int) -> None:
        if output_dimensions <= 0:
            raise ValueError("output_dimensions must be positive")
        self.previous = previous
        self.input_dimensions = previous.output_dimensions
        self.output_dimensions = output_dimensions
        self.padded_input_dimensions = ceil_to_multiple(self.input_dimensions, MAX_SIMD_WIDTH)
        self.self_buffer_size = ceil_to_multiple(
            output_dimensions * np.dtype(OUTPUT_DTYPE).itemsize, CACHE_LINE_SIZE
        )
        self.buffer_size = previous.buffer_size + self.self_buffer_size
        self.biases = np.zeros(output_dimensions, dtype=BIAS_DTYPE)
        self.weights = np.zeros((output_dimensions, self.padded_input_dimensions), dtype=WEIGHT_DTYPE)

    def hash_value(self) -> int:
        previous_hash = self.previous.hash_value() & _MASK32
        value = (0xCC03DAE4 + self.output_dimensions) & _MASK32
        value ^= previous_hash >> 1
        value ^= (previous_hash << 31) & _MASK32
        return value

    def read_parameters(self, stream: BinaryIO) -> None:
        """Read the previous layers' parameters, then this layer's biases and weights."""
        self.previous.read_parameters(stream)
        biases = read_array(stream, BIAS_DTYPE, self.output_dimensions)
        weights = read_array(stream, WEIGHT_DTYPE, self.output_dimensions * self.padded_input_dimensions)
        self.biases = biases
        self.weights = weights.reshape(self.output_dimensions, self.padded_input_dimensions)

    def write_parameters(self, stream: BinaryIO) -> None:
        """Write the previous layers' parameters, then this layer's biases and weights."""
        self.previous.write_parameters(stream)
        write_array(stream, self.biases, BIAS_DTYPE)
        write_array(stream, self.weights.ravel(), WEIGHT_DTYPE)

    def propagate(self, transformed_features: ArrayLike) -> np.ndarray:
        values = np.asarray(self.previous.propagate(transformed_features))
        if values.shape[0] < self.input_dimensions:
            raise ValueError(
                f"previous layer produced {values.shape[0]} values, need {self.input_dimensions}"
            )
        inputs = values[: self.input_dimensions].astype(np.int64)
        used = self.weights[:, : self.input_dimensions].astype(np.int64)
        sums = used @ inputs + self.biases.astype(np.int64)
        return sums.astype(OUTPUT_DTYPE)