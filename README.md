# fishcore

Building blocks for evaluating chess positions with an NNUE network:

- `fishcore.types`: colours, piece types, pieces, castling rights, squares
  and directions as plain integers, the 16-bit move encoding (`make_move`,
  `make`, `from_sq`, `to_sq`, `move_type`, `promotion_type`, ...), value
  constants, `DirtyPiece` (the pieces one move changes) and `Score`, a
  middlegame/endgame pair of 16-bit values.
- `fishcore.nnue.common`: format constants (`VERSION`, `OUTPUT_SCALE`,
  `WEIGHT_SCALE_BITS`), little-endian readers and writers (`read_uint32`,
  `write_uint32`, `read_array`, `write_array`) and `NnueFormatError`.
- `fishcore.nnue.half_kp`: the HalfKP feature set. `active_indices` lists
  the features of a whole position, `changed_indices` the features one move
  removes and adds; `requires_refresh`, `update_cost` and `refresh_cost`
  help decide between an incremental update and a full rebuild.
- `fishcore.nnue.simple_layers`, `fishcore.nnue.affine`: the `InputSlice`,
  `ClippedReLU` and `AffineTransform` layers.
- `fishcore.nnue.architecture`: `build_network()` builds the zeroed
  512-32-32-1 network stack.
- `fishcore.nnue.feature_transformer`: `Accumulator`, `AccumulatorState`
  and `FeatureTransformer`, with `refresh`, `update` and `transform`.
- `fishcore.nnue.evaluator`: `NnueEvaluator`, plus `read_header` and
  `write_header` for the network file header.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install .[test]
```

## Moves and scores

```python
from fishcore.types import MoveType, PieceType, Score, from_sq, make, make_move, promotion_type, to_sq

move = make_move(12, 28)            # e2 -> e4
assert from_sq(move) == 12 and to_sq(move) == 28

promo = make(MoveType.PROMOTION, 52, 60, PieceType.QUEEN)
assert promotion_type(promo) == PieceType.QUEEN

s = Score(10, -20)
print(s + Score(1, 1), s.scaled(3), s.divided(2), s.packed)
```

`Score` raises `OverflowError` when either half leaves the signed 16-bit
range.

## Evaluating with a network

```python
from fishcore.nnue.evaluator import NnueEvaluator
from fishcore.nnue.feature_transformer import Accumulator
from fishcore.nnue.half_kp import active_indices
from fishcore.types import Color, Piece

evaluator = NnueEvaluator()
with open("network.nnue", "rb") as stream:
    evaluator.load_eval("network.nnue", stream)

# Square -> piece for the pieces on the board; kings are skipped.
pieces = {4: Piece.W_KING, 12: Piece.W_PAWN, 52: Piece.B_PAWN, 60: Piece.B_KING}
king_squares = {Color.WHITE: 4, Color.BLACK: 60}

accumulator = Accumulator()
for colour in (Color.WHITE, Color.BLACK):
    indices = active_indices(pieces, king_squares[colour], colour)
    evaluator.feature_transformer.refresh(accumulator, colour, indices)

print(evaluator.evaluate(accumulator, Color.WHITE))
```

After a move, an accumulator can be derived from the previous one instead of
being rebuilt:

```python
from fishcore.nnue.half_kp import changed_indices
from fishcore.types import DirtyPiece

dirty = DirtyPiece([(Piece.W_PAWN, 12, 28)])
after = Accumulator()
for colour in (Color.WHITE, Color.BLACK):
    removed, added = changed_indices(dirty, king_squares[colour], colour)
    evaluator.feature_transformer.update(accumulator, after, colour, removed, added)
print(evaluator.evaluate(after, Color.BLACK))
```

`load_eval` raises `NnueFormatError` when the file's version or hash value
does not match the architecture, when it is truncated, or when data follows
the parameters; on failure the evaluator keeps zeroed parameters.
`save_eval` writes the loaded network back out and raises `ValueError` if
no network was loaded.

## What this package does not do

It holds no board or position representation, generates no moves and
searches nothing. It has no command-line program and does not speak any
engine protocol. The caller supplies the pieces on the board, the king
squares and the pieces each move changes.

## Tests

```
pytest
```