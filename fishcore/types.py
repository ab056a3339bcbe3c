"""Core chess types: colours, pieces, squares, moves, scores and values."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import ClassVar, Iterator

MAX_MOVES = 256
MAX_PLY = 246

_MASK64 = (1 << 64) - 1
_INT16_MIN = -(1 << 15)
_INT16_MAX = (1 << 15) - 1


class Color(IntEnum):
    """Side to move or owner of a piece."""

    WHITE = 0
    BLACK = 1

    def __invert__(self) -> "Color":
        return Color(self ^ 1)


COLOR_NB = 2
WHITE = Color.WHITE
BLACK = Color.BLACK


class PieceType(IntEnum):
    """Kind of piece, without colour."""

    NO_PIECE_TYPE = 0
    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6
    ALL_PIECES = 0


PIECE_TYPE_NB = 8


class Piece(IntEnum):
    """A coloured piece; black pieces are offset by 8."""

    NO_PIECE = 0
    W_PAWN = 1
    W_KNIGHT = 2
    W_BISHOP = 3
    W_ROOK = 4
    W_QUEEN = 5
    W_KING = 6
    B_PAWN = 9
    B_KNIGHT = 10
    B_BISHOP = 11
    B_ROOK = 12
    B_QUEEN = 13
    B_KING = 14


PIECE_NB = 16


class MoveType(IntEnum):
    """Special-move flag stored in bits 14-15 of a move."""

    NORMAL = 0
    PROMOTION = 1 << 14
    EN_PASSANT = 2 << 14
    CASTLING = 3 << 14


class CastlingRights(IntFlag):
    """Castling rights as a set of bit flags."""

    NO_CASTLING = 0
    WHITE_OO = 1
    WHITE_OOO = 2
    BLACK_OO = 4
    BLACK_OOO = 8

    KING_SIDE = 1 | 4
    QUEEN_SIDE = 2 | 8
    WHITE_CASTLING = 1 | 2
    BLACK_CASTLING = 4 | 8
    ANY_CASTLING = 15


CASTLING_RIGHT_NB = 16

# Game phases and evaluation indices
PHASE_ENDGAME = 0
PHASE_MIDGAME = 128
MG = 0
EG = 1
PHASE_NB = 2

# Scale factors
SCALE_FACTOR_DRAW = 0
SCALE_FACTOR_NORMAL = 64
SCALE_FACTOR_MAX = 128
SCALE_FACTOR_NONE = 255

# Transposition-table bounds
BOUND_NONE = 0
BOUND_UPPER = 1
BOUND_LOWER = 2
BOUND_EXACT = BOUND_UPPER | BOUND_LOWER

# Values
VALUE_ZERO = 0
VALUE_DRAW = 0
VALUE_KNOWN_WIN = 10000
VALUE_MATE = 32000
VALUE_INFINITE = 32001
VALUE_NONE = 32002

VALUE_TB_WIN_IN_MAX_PLY = VALUE_MATE - 2 * MAX_PLY
VALUE_TB_LOSS_IN_MAX_PLY = -VALUE_TB_WIN_IN_MAX_PLY
VALUE_MATE_IN_MAX_PLY = VALUE_MATE - MAX_PLY
VALUE_MATED_IN_MAX_PLY = -VALUE_MATE_IN_MAX_PLY

PAWN_VALUE_MG, PAWN_VALUE_EG = 126, 208
KNIGHT_VALUE_MG, KNIGHT_VALUE_EG = 781, 854
BISHOP_VALUE_MG, BISHOP_VALUE_EG = 825, 915
ROOK_VALUE_MG, ROOK_VALUE_EG = 1276, 1380
QUEEN_VALUE_MG, QUEEN_VALUE_EG = 2538, 2682
TEMPO = 28

MIDGAME_LIMIT = 15258
ENDGAME_LIMIT = 3915

_MG_ROW = (0, PAWN_VALUE_MG, KNIGHT_VALUE_MG, BISHOP_VALUE_MG, ROOK_VALUE_MG, QUEEN_VALUE_MG, 0, 0)
_EG_ROW = (0, PAWN_VALUE_EG, KNIGHT_VALUE_EG, BISHOP_VALUE_EG, ROOK_VALUE_EG, QUEEN_VALUE_EG, 0, 0)

# Indexed as PIECE_VALUE[phase][piece]
PIECE_VALUE: tuple[tuple[int, ...], tuple[int, ...]] = (_MG_ROW * 2, _EG_ROW * 2)

# Depths
DEPTH_QS_CHECKS = 0
DEPTH_QS_NO_CHECKS = -1
DEPTH_QS_RECAPTURES = -5
DEPTH_NONE = -6
DEPTH_OFFSET = -7

# Files and ranks
FILE_A, FILE_B, FILE_C, FILE_D, FILE_E, FILE_F, FILE_G, FILE_H = range(8)
FILE_NB = 8
RANK_1, RANK_2, RANK_3, RANK_4, RANK_5, RANK_6, RANK_7, RANK_8 = range(8)
RANK_NB = 8

# Squares are plain integers from 0 (a1) to 63 (h8)
SQ_A1, SQ_B1, SQ_C1, SQ_D1, SQ_E1, SQ_F1, SQ_G1, SQ_H1 = range(8)
SQ_A8, SQ_B8, SQ_C8, SQ_D8, SQ_E8, SQ_F8, SQ_G8, SQ_H8 = range(56, 64)
SQ_NONE = 64
SQUARE_ZERO = 0
SQUARE_NB = 64

# Directions
NORTH = 8
EAST = 1
SOUTH = -NORTH
WEST = -EAST
NORTH_EAST = NORTH + EAST
SOUTH_EAST = SOUTH + EAST
SOUTH_WEST = SOUTH + WEST
NORTH_WEST = NORTH + WEST

# Moves are plain integers; these two never have distinct from/to squares
MOVE_NONE = 0
MOVE_NULL = 65


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def _int16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


@dataclass(frozen=True)
class Score:
    """A middlegame/endgame value pair, each limited to 16 signed bits."""

    mg: int = 0
    eg: int = 0

    def __post_init__(self) -> None:
        for name, value in (("mg", self.mg), ("eg", self.eg)):
            if not _INT16_MIN <= value <= _INT16_MAX:
                raise OverflowError(f"score {name} value {value} does not fit in 16 bits")

    @property
    def packed(self) -> int:
        """The score as one signed 32-bit integer (eg in the high half)."""
        raw = ((self.eg << 16) + self.mg) & 0xFFFFFFFF
        return raw - (1 << 32) if raw & 0x80000000 else raw

    @classmethod
    def from_packed(cls, packed: int) -> "Score":
        """Rebuild a score from its 32-bit packed form."""
        eg = _int16(((packed + 0x8000) & 0xFFFFFFFF) >> 16)
        return cls(_int16(packed), eg)

    def __add__(self, other: "Score") -> "Score":
        if not isinstance(other, Score):
            return NotImplemented
        return Score(self.mg + other.mg, self.eg + other.eg)

    def __sub__(self, other: "Score") -> "Score":
        if not isinstance(other, Score):
            return NotImplemented
        return Score(self.mg - other.mg, self.eg - other.eg)

    def __neg__(self) -> "Score":
        return Score(-self.mg, -self.eg)

    def scaled(self, factor: int | bool) -> "Score":
        """Multiply both halves by an integer; a bool keeps or zeroes the score."""
        if isinstance(factor, bool):
            return self if factor else SCORE_ZERO
        return Score(self.mg * factor, self.eg * factor)

    def divided(self, divisor: int) -> "Score":
        """Divide each half separately, truncating toward zero."""
        return Score(_trunc_div(self.mg, divisor), _trunc_div(self.eg, divisor))

    def __mul__(self, factor: int | bool) -> "Score":
        if not isinstance(factor, int):
            return NotImplemented
        return self.scaled(factor)

    __rmul__ = __mul__


SCORE_ZERO = Score(0, 0)


@dataclass
class DirtyPiece:
    """Pieces changed by one move, as (piece, from square, to square) triples.

    Either square may be SQ_NONE when a piece appears or disappears.
    """

    MAX_CHANGES: ClassVar[int] = 3

    changes: list[tuple[Piece, int, int]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.changes) > self.MAX_CHANGES:
            raise ValueError(f"a move changes at most {self.MAX_CHANGES} pieces")

    @property
    def dirty_num(self) -> int:
        return len(self.changes)

    def __iter__(self) -> Iterator[tuple[Piece, int, int]]:
        return iter(self.changes)


def flip_rank(s: int) -> int:
    """Mirror a square vertically (a1 <-> a8)."""
    return s ^ SQ_A8


def flip_file(s: int) -> int:
    """Mirror a square horizontally (a1 <-> h1)."""
    return s ^ SQ_H1


def swap_piece_color(pc: Piece) -> Piece:
    """Return the same piece type in the other colour."""
    return Piece(pc ^ 8)


def castling_for(c: Color, cr: CastlingRights) -> CastlingRights:
    """Restrict castling rights to those belonging to colour c."""
    own = CastlingRights.WHITE_CASTLING if c == WHITE else CastlingRights.BLACK_CASTLING
    return CastlingRights(own & cr)


def mate_in(ply: int) -> int:
    return VALUE_MATE - ply


def mated_in(ply: int) -> int:
    return -VALUE_MATE + ply


def make_square(f: int, r: int) -> int:
    return (r << 3) + f


def make_piece(c: Color, pt: PieceType) -> Piece:
    return Piece((c << 3) + pt)


def type_of(pc: Piece) -> PieceType:
    return PieceType(pc & 7)


def color_of(pc: Piece) -> Color:
    if pc == Piece.NO_PIECE:
        raise ValueError("an empty square has no colour")
    return Color(pc >> 3)


def is_ok_square(s: int) -> bool:
    return SQ_A1 <= s <= SQ_H8


def file_of(s: int) -> int:
    return s & 7


def rank_of(s: int) -> int:
    return s >> 3


def relative_square(c: Color, s: int) -> int:
    return s ^ (c * 56)


def relative_rank(c: Color, r: int) -> int:
    return r ^ (c * 7)


def relative_rank_of(c: Color, s: int) -> int:
    return relative_rank(c, rank_of(s))


def pawn_push(c: Color) -> int:
    return NORTH if c == WHITE else SOUTH


def from_sq(m: int) -> int:
    return (m >> 6) & 0x3F


def to_sq(m: int) -> int:
    return m & 0x3F


def from_to(m: int) -> int:
    return m & 0xFFF


def move_type(m: int) -> MoveType:
    return MoveType(m & (3 << 14))


def promotion_type(m: int) -> PieceType:
    return PieceType(((m >> 12) & 3) + PieceType.KNIGHT)


def make_move(from_square: int, to_square: int) -> int:
    return (from_square << 6) + to_square


def reverse_move(m: int) -> int:
    return make_move(to_sq(m), from_sq(m))


def make(kind: MoveType, from_square: int, to_square: int, pt: PieceType = PieceType.KNIGHT) -> int:
    """Build a special move (promotion, en passant or castling)."""
    return kind + ((pt - PieceType.KNIGHT) << 12) + (from_square << 6) + to_square


def is_ok_move(m: int) -> bool:
    """False for MOVE_NONE and MOVE_NULL, whose squares coincide."""
    return from_sq(m) != to_sq(m)


def make_key(seed: int) -> int:
    """Derive a 64-bit key with a linear congruential step."""
    return (seed * 6364136223846793005 + 1442695040888963407) & _MASK64