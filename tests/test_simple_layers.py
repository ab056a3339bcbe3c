import io

import numpy as np
import pytest

from fishcore.nnue.common import CACHE_LINE_SIZE
from fishcore.nnue.simple_layers import ClippedReLU, InputSlice


class _StubLayer:
    def __init__(self, outputs, hash_value=0, buffer_size=0):
        self._outputs = np.asarray(outputs, dtype=np.int32)
        self.output_dimensions = len(self._outputs)
        self.buffer_size = buffer_size
        self._hash = hash_value
        self.calls = []

    def hash_value(self):
        return self._hash

    def read_parameters(self, stream):
        self.calls.append(("read", stream.read(2)))

    def write_parameters(self, stream):
        self.calls.append(("write", None))
        stream.write(b"xy")

    def propagate(self, transformed_features):
        return self._outputs


def test_input_slice_bad_offset():
    with pytest.raises(ValueError):
        InputSlice(16, offset=5)


def test_input_slice_hash_pinned_and_distinct():
    assert InputSlice(512).hash_value() == 0xEC42EB0D
    assert InputSlice(512, 32).hash_value() != InputSlice(512).hash_value()


def test_input_slice_propagate_window():
    features = np.arange(96, dtype=np.uint8)
    out = InputSlice(32, offset=32).propagate(features)
    assert out.tolist() == list(range(32, 64))
    assert out.dtype == np.uint8


def test_input_slice_too_short():
    with pytest.raises(ValueError):
        InputSlice(64).propagate(np.zeros(10, dtype=np.uint8))


def test_input_slice_parameters_touch_nothing():
    layer = InputSlice(8)
    src = io.BytesIO(b"abc")
    layer.read_parameters(src)
    assert src.tell() == 0
    dst = io.BytesIO()
    layer.write_parameters(dst)
    assert dst.getvalue() == b""
    assert layer.buffer_size == 0


def test_clipped_relu_values():
    layer = ClippedReLU(_StubLayer([-100, 0, 64, 127 * 64, 10**6, 63]))
    assert layer.propagate(None).tolist() == [0, 0, 1, 127, 127, 0]


def test_clipped_relu_range_and_monotonic():
    inputs = list(range(-20000, 20000, 97))
    out = ClippedReLU(_StubLayer(inputs)).propagate(None).tolist()
    assert all(0 <= v <= 127 for v in out)
    assert out == sorted(out)


def test_clipped_relu_hash_and_sizes():
    layer = ClippedReLU(_StubLayer([0] * 32, hash_value=0, buffer_size=10))
    assert layer.hash_value() == 0x538D24C7
    assert layer.output_dimensions == 32
    assert layer.buffer_size == 10 + CACHE_LINE_SIZE


def test_clipped_relu_hash_wraps_32_bits():
    layer = ClippedReLU(_StubLayer([0], hash_value=0xFFFFFFFF))
    assert 0 <= layer.hash_value() <= 0xFFFFFFFF
    assert layer.hash_value() == 0x538D24C6


def test_clipped_relu_delegates_parameters():
    stub = _StubLayer([0, 0])
    layer = ClippedReLU(stub)
    layer.read_parameters(io.BytesIO(b"ab"))
    out = io.BytesIO()
    layer.write_parameters(out)
    assert stub.calls == [("read", b"ab"), ("write", None)]
    assert out.getvalue() == b"xy"


def test_clipped_relu_over_input_slice():
    stacked = ClippedReLU(ClippedReLU(_StubLayer([64 * 64, -1])))
    assert stacked.propagate(None).tolist() == [0, 0]
    assert stacked.output_dimensions == 2