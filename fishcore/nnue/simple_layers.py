"""Parameter-free network layers: the input slice and the clipped ReLU."""

from __future__ import annotations

from typing import BinaryIO, Protocol

import numpy as np
from numpy.typing import ArrayLike

from fishcore.nnue.common import CACHE_LINE_SIZE, MAX_SIMD_WIDTH, WEIGHT_SCALE_BITS, ceil_to_multiple

_MASK32 = 0xFFFFFFFF


class Layer(Protocol):
    """What a layer offers to the layer stacked on top of it."""

    output_dimensions: int
    buffer_size: int

    def hash_value(self) -> int: ...

    def read_parameters(self, stream: BinaryIO) -> None: ...

    def write_parameters(self, stream: BinaryIO) -> None: ...

    def propagate(self, transformed_features: ArrayLike) -> np.ndarray: ...


class InputSlice:
    """Input layer: passes on a window of the transformed features."""

    def __init__(self, output_dimensions: int, offset: int = 0) -> None:
        if offset % MAX_SIMD_WIDTH:
            raise ValueError(f"offset must be a multiple of {MAX_SIMD_WIDTH}")
        self.output_dimensions = output_dimensions
        self.offset = offset
        self.buffer_size = 0

    def hash_value(self) -> int:
        return (0xEC42E90D ^ self.output_dimensions ^ (self.offset << 10)) & _MASK32

    def read_parameters(self, stream: BinaryIO) -> None:
        """The slice has no parameters; only checks that the stream can be read."""
        if not callable(getattr(stream, "read", None)):
            raise TypeError("stream must be readable")

    def write_parameters(self, stream: BinaryIO) -> None:
        """The slice has no parameters; only checks that the stream can be written."""
        if not callable(getattr(stream, "write", None)):
            raise TypeError("stream must be writable")

    def propagate(self, transformed_features: ArrayLike) -> np.ndarray:
        features = np.asarray(transformed_features, dtype=np.uint8)
        end = self.offset + self.output_dimensions
        if features.shape[0] < end:
            raise ValueError(f"need at least {end} input features, got {features.shape[0]}")
        return features[self.offset:end]


class ClippedReLU:
    """Scales 32-bit inputs down and clamps them to the range 0..127."""

    def __init__(self, previous: Layer) -> None:
        self.previous = previous
        self.input_dimensions = previous.output_dimensions
        self.output_dimensions = self.input_dimensions
        self.self_buffer_size = ceil_to_multiple(self.output_dimensions, CACHE_LINE_SIZE)
        self.buffer_size = previous.buffer_size + self.self_buffer_size

    def hash_value(self) -> int:
        return (0x538D24C7 + self.previous.hash_value()) & _MASK32

    def read_parameters(self, stream: BinaryIO) -> None:
        self.previous.read_parameters(stream)

    def write_parameters(self, stream: BinaryIO) -> None:
        self.previous.write_parameters(stream)

    def propagate(self, transformed_features: ArrayLike) -> np.ndarray:
        values = np.asarray(self.previous.propagate(transformed_features), dtype=np.int32)
        shifted = np.right_shift(values[: self.input_dimensions], WEIGHT_SCALE_BITS)
        return np.clip(shifted, 0, 127).astype(np.uint8)