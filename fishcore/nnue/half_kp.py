"""HalfKP input features: own king square combined with every non-king piece."""

from __future__ import annotations

from typing import Mapping

from fishcore.types import (
    PIECE_NB,
    SQUARE_NB,
    SQ_NONE,
    Color,
    DirtyPiece,
    Piece,
    PieceType,
    make_piece,
    type_of,
)

NAME = "HalfKP(Friend)"

# Hash value embedded in the evaluation file
HASH_VALUE = 0x5D69D5B8

# Unique offset for each piece type and colour (W = us, B = them)
PS_NONE = 0
PS_W_PAWN = 1
PS_B_PAWN = 1 * SQUARE_NB + 1
PS_W_KNIGHT = 2 * SQUARE_NB + 1
PS_B_KNIGHT = 3 * SQUARE_NB + 1
PS_W_BISHOP = 4 * SQUARE_NB + 1
PS_B_BISHOP = 5 * SQUARE_NB + 1
PS_W_ROOK = 6 * SQUARE_NB + 1
PS_B_ROOK = 7 * SQUARE_NB + 1
PS_W_QUEEN = 8 * SQUARE_NB + 1
PS_B_QUEEN = 9 * SQUARE_NB + 1
PS_NB = 10 * SQUARE_NB + 1

_OURS = (PS_NONE, PS_W_PAWN, PS_W_KNIGHT, PS_W_BISHOP, PS_W_ROOK, PS_W_QUEEN, PS_NONE, PS_NONE)
_THEIRS = (PS_NONE, PS_B_PAWN, PS_B_KNIGHT, PS_B_BISHOP, PS_B_ROOK, PS_B_QUEEN, PS_NONE, PS_NONE)

# Indexed as PIECE_SQUARE_INDEX[perspective][piece]
PIECE_SQUARE_INDEX: tuple[tuple[int, ...], tuple[int, ...]] = (
    _OURS + _THEIRS,
    _THEIRS + _OURS,
)
assert all(len(row) == PIECE_NB for row in PIECE_SQUARE_INDEX)

# Number of feature dimensions
DIMENSIONS = SQUARE_NB * PS_NB

# Maximum number of simultaneously active features (kings are not included)
MAX_ACTIVE_DIMENSIONS = 30


def orient(perspective: Color, s: int) -> int:
    """Orient a square for the perspective; black sees the board rotated 180 degrees."""
    return s ^ (63 if perspective else 0)


def make_index(perspective: Color, s: int, pc: Piece, ksq: int) -> int:
    """Feature index for piece pc on square s, given the already oriented king square."""
    return orient(perspective, s) + PIECE_SQUARE_INDEX[perspective][pc] + PS_NB * ksq


def active_indices(pieces: Mapping[int, Piece], king_square: int, perspective: Color) -> list[int]:
    """Indices of all active features, in ascending square order.

    pieces maps squares to the pieces on them; kings and empty squares are skipped.
    king_square is the perspective's own king square, not yet oriented.
    """
    ksq = orient(perspective, king_square)
    return [
        make_index(perspective, s, pc, ksq)
        for s, pc in sorted(pieces.items())
        if pc != Piece.NO_PIECE and type_of(pc) != PieceType.KING
    ]


def changed_indices(dirty_piece: DirtyPiece, ksq: int, perspective: Color) -> tuple[list[int], list[int]]:
    """Feature indices removed and added by one move, as (removed, added)."""
    oriented_ksq = orient(perspective, ksq)
    removed: list[int] = []
    added: list[int] = []
    for pc, from_square, to_square in dirty_piece:
        if type_of(pc) == PieceType.KING:
            continue
        if from_square != SQ_NONE:
            removed.append(make_index(perspective, from_square, pc, oriented_ksq))
        if to_square != SQ_NONE:
            added.append(make_index(perspective, to_square, pc, oriented_ksq))
    return removed, added


def update_cost(dirty_piece: DirtyPiece) -> int:
    """Cost of an incremental update for one perspective."""
    return dirty_piece.dirty_num


def refresh_cost(piece_count: int) -> int:
    """Cost of a full refresh: every piece except the two kings."""
    return piece_count - 2


def requires_refresh(dirty_piece: DirtyPiece, perspective: Color) -> bool:
    """True if the move moved the perspective's own king, forcing a full refresh."""
    if not dirty_piece.changes:
        return False
    return dirty_piece.changes[0][0] == make_piece(perspective, PieceType.KING)