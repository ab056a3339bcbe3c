"""NNUE evaluation: network file header, parameter I/O and the forward pass."""

from __future__ import annotations

from typing import BinaryIO, Callable, Protocol

from fishcore.nnue.affine import AffineTransform
from fishcore.nnue.architecture import build_network
from fishcore.nnue.common import (
    OUTPUT_SCALE,
    VERSION,
    NnueFormatError,
    read_uint32,
    write_uint32,
)
from fishcore.nnue.feature_transformer import Accumulator, FeatureTransformer
from fishcore.types import Color

_MASK32 = 0xFFFFFFFF
_TEXT_ENCODING = "utf-8"
_TEXT_ERRORS = "surrogateescape"


class _Component(Protocol):
    def hash_value(self) -> int: ...

    def read_parameters(self, stream: BinaryIO) -> None: ...

    def write_parameters(self, stream: BinaryIO) -> None: ...


def read_header(stream: BinaryIO) -> tuple[int, str]:
    """Read a network header and return (hash value, description).

    Raises NnueFormatError on a version mismatch or truncated data.
    """
    version = read_uint32(stream)
    hash_value = read_uint32(stream)
    size = read_uint32(stream)
    if version != VERSION:
        raise NnueFormatError(f"unsupported network version 0x{version:08X}")
    data = stream.read(size)
    if len(data) != size:
        raise NnueFormatError(f"description truncated: wanted {size} bytes, got {len(data)}")
    return hash_value, data.decode(_TEXT_ENCODING, _TEXT_ERRORS)


def write_header(stream: BinaryIO, hash_value: int, description: str) -> None:
    """Write a network header: version, hash value and the description."""
    data = description.encode(_TEXT_ENCODING, _TEXT_ERRORS)
    write_uint32(stream, VERSION)
    write_uint32(stream, hash_value)
    write_uint32(stream, len(data))
    stream.write(data)


def _read_component(stream: BinaryIO, component: _Component) -> None:
    header = read_uint32(stream)
    if header != component.hash_value():
        raise NnueFormatError(
            f"component hash 0x{header:08X} does not match 0x{component.hash_value():08X}"
        )
    component.read_parameters(stream)


def _write_component(stream: BinaryIO, component: _Component) -> None:
    write_uint32(stream, component.hash_value())
    component.write_parameters(stream)


def _trunc_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return -quotient if value < 0 else quotient


class NnueEvaluator:
    """Holds a feature transformer and a network, and evaluates positions with them."""

    def __init__(
        self,
        feature_transformer_factory: Callable[[], FeatureTransformer] = FeatureTransformer,
        network_factory: Callable[[], AffineTransform] = build_network,
    ) -> None:
        self._feature_transformer_factory = feature_transformer_factory
        self._network_factory = network_factory
        self.file_name = ""
        self.description = ""
        self.initialize()

    def initialize(self) -> None:
        """Replace the parameters with fresh, zeroed ones."""
        self.feature_transformer = self._feature_transformer_factory()
        self.network = self._network_factory()

    @property
    def hash_value(self) -> int:
        """Hash value of the whole evaluation function structure."""
        return (self.feature_transformer.hash_value() ^ self.network.hash_value()) & _MASK32

    def read_parameters(self, stream: BinaryIO) -> None:
        """Read a whole network file; the stream must end right after it.

        The current parameters are kept if reading fails.
        """
        hash_value, description = read_header(stream)
        if hash_value != self.hash_value:
            raise NnueFormatError(
                f"network hash 0x{hash_value:08X} does not match 0x{self.hash_value:08X}"
            )
        feature_transformer = self._feature_transformer_factory()
        network = self._network_factory()
        _read_component(stream, feature_transformer)
        _read_component(stream, network)
        if stream.read(1):
            raise NnueFormatError("unexpected data after the network parameters")
        self.feature_transformer = feature_transformer
        self.network = network
        self.description = description

    def write_parameters(self, stream: BinaryIO) -> None:
        """Write the header, the feature transformer and the network."""
        write_header(stream, self.hash_value, self.description)
        _write_component(stream, self.feature_transformer)
        _write_component(stream, self.network)

    def load_eval(self, name: str, stream: BinaryIO) -> None:
        """Reset the parameters, remember name and load a network from stream."""
        self.initialize()
        self.file_name = name
        self.read_parameters(stream)

    def save_eval(self, stream: BinaryIO) -> None:
        """Write the loaded network; raises ValueError if none was loaded."""
        if not self.file_name:
            raise ValueError("no network has been loaded")
        self.write_parameters(stream)

    def evaluate(self, accumulator: Accumulator, side_to_move: Color) -> int:
        """Evaluate from a computed accumulator, from the side to move's view."""
        transformed = self.feature_transformer.transform(accumulator, side_to_move)
        output = self.network.propagate(transformed)
        return _trunc_div(int(output[0]), OUTPUT_SCALE)