"""Constants and little-endian binary helpers shared by the NNUE code."""

from __future__ import annotations

import struct
from typing import BinaryIO

import numpy as np
from numpy.typing import ArrayLike, DTypeLike

# Version of the evaluation file format
VERSION = 0x7AF32F16

# Constants used in the evaluation value calculation
OUTPUT_SCALE = 16
WEIGHT_SCALE_BITS = 6

# Size of a cache line in bytes; layer buffers are padded to it
CACHE_LINE_SIZE = 64

# Widest vector the layout is padded for, in bytes
MAX_SIMD_WIDTH = 32

_UINT32 = struct.Struct("<I")


class NnueFormatError(ValueError):
    """Raised when network data is truncated, malformed or does not match."""


def ceil_to_multiple(n: int, base: int) -> int:
    """Round n up to a multiple of base."""
    if base <= 0:
        raise ValueError("base must be positive")
    return (n + base - 1) // base * base


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise NnueFormatError(f"unexpected end of data: wanted {size} bytes, got {len(data)}")
    return data


def read_uint32(stream: BinaryIO) -> int:
    """Read one unsigned 32-bit little-endian integer."""
    return _UINT32.unpack(_read_exact(stream, _UINT32.size))[0]


def write_uint32(stream: BinaryIO, value: int) -> None:
    """Write one unsigned 32-bit little-endian integer."""
    if not 0 <= value <= 0xFFFFFFFF:
        raise ValueError(f"{value} does not fit in 32 unsigned bits")
    stream.write(_UINT32.pack(value))


def _little_endian(dtype: DTypeLike) -> np.dtype:
    return np.dtype(dtype).newbyteorder("<")


def read_array(stream: BinaryIO, dtype: DTypeLike, count: int) -> np.ndarray:
    """Read count little-endian integers of the given type into a native array."""
    if count < 0:
        raise ValueError("count must not be negative")
    le = _little_endian(dtype)
    data = _read_exact(stream, le.itemsize * count)
    return np.frombuffer(data, dtype=le, count=count).astype(np.dtype(dtype))


def write_array(stream: BinaryIO, values: ArrayLike, dtype: DTypeLike) -> None:
    """Write values as little-endian integers of the given type."""
    array = np.asarray(values)
    target = np.dtype(dtype)
    if array.size and np.issubdtype(target, np.integer):
        info = np.iinfo(target)
        if array.min() < info.min or array.max() > info.max:
            raise ValueError(f"values do not fit in {target}")
    stream.write(array.astype(_little_endian(target)).tobytes())