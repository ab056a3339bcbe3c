"""Network structure of the evaluation function: HalfKP features, 2x256-32-32-1."""

from __future__ import annotations

from fishcore.nnue import half_kp
from fishcore.nnue.affine import AffineTransform
from fishcore.nnue.common import MAX_SIMD_WIDTH
from fishcore.nnue.simple_layers import ClippedReLU, InputSlice

# Input feature set in use
FEATURE_SET_NAME = half_kp.NAME
FEATURE_HASH_VALUE = half_kp.HASH_VALUE
FEATURE_DIMENSIONS = half_kp.DIMENSIONS
MAX_ACTIVE_DIMENSIONS = half_kp.MAX_ACTIVE_DIMENSIONS

# Number of input feature dimensions after conversion, per perspective
TRANSFORMED_FEATURE_DIMENSIONS = 256

HIDDEN_DIMENSIONS = 32

if TRANSFORMED_FEATURE_DIMENSIONS % MAX_SIMD_WIDTH:
    raise RuntimeError("transformed feature dimensions must be a multiple of the SIMD width")


def build_network() -> AffineTransform:
    """Build a fresh network with all parameters zero; its output layer is returned."""
    input_layer = InputSlice(TRANSFORMED_FEATURE_DIMENSIONS * 2)
    hidden1 = ClippedReLU(AffineTransform(input_layer, HIDDEN_DIMENSIONS))
    hidden2 = ClippedReLU(AffineTransform(hidden1, HIDDEN_DIMENSIONS))
    network = AffineTransform(hidden2, 1)
    if network.output_dimensions != 1:
        raise RuntimeError("the network must have exactly one output")
    return network