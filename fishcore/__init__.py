"""Chess engine core: board and move types and NNUE evaluation."""

__version__ = "0.1.0"