import pytest

from fishcore.types import (
    BLACK,
    FILE_A,
    FILE_H,
    MOVE_NONE,
    MOVE_NULL,
    NORTH,
    RANK_1,
    RANK_8,
    SCORE_ZERO,
    SOUTH,
    SQ_A1,
    SQ_A8,
    SQ_C1,
    SQ_G1,
    SQ_G8,
    SQ_H1,
    SQ_H8,
    SQ_NONE,
    VALUE_MATE,
    WHITE,
    CastlingRights,
    Color,
    DirtyPiece,
    MoveType,
    Piece,
    PieceType,
    Score,
    castling_for,
    color_of,
    file_of,
    flip_file,
    flip_rank,
    from_sq,
    from_to,
    is_ok_move,
    is_ok_square,
    make,
    make_key,
    make_move,
    make_piece,
    make_square,
    mate_in,
    mated_in,
    move_type,
    pawn_push,
    promotion_type,
    rank_of,
    relative_rank,
    relative_rank_of,
    relative_square,
    reverse_move,
    swap_piece_color,
    to_sq,
    type_of,
)

ALL_SQUARES = range(64)


def test_color_invert():
    assert ~WHITE == BLACK
    assert ~BLACK == WHITE
    assert color_of(make_piece(~WHITE, PieceType.PAWN)) == BLACK
    assert color_of(make_piece(~BLACK, PieceType.PAWN)) == WHITE


@pytest.mark.parametrize("s", ALL_SQUARES)
def test_flips_are_involutions(s):
    assert flip_rank(flip_rank(s)) == s
    assert flip_file(flip_file(s)) == s
    assert file_of(flip_rank(s)) == file_of(s)
    assert rank_of(flip_file(s)) == rank_of(s)


def test_flip_corners():
    assert flip_rank(SQ_A1) == SQ_A8
    assert flip_file(SQ_A1) == SQ_H1
    assert flip_file(flip_rank(SQ_A1)) == SQ_H8


def test_make_square_round_trip():
    for f in range(8):
        for r in range(8):
            s = make_square(f, r)
            assert file_of(s) == f
            assert rank_of(s) == r
            assert is_ok_square(s)


def test_square_bounds():
    assert make_square(FILE_A, RANK_1) == SQ_A1
    assert make_square(FILE_H, RANK_8) == SQ_H8
    assert not is_ok_square(SQ_NONE)
    assert not is_ok_square(-1)


@pytest.mark.parametrize("color", [WHITE, BLACK])
@pytest.mark.parametrize("pt", [PieceType.PAWN, PieceType.KNIGHT, PieceType.BISHOP,
                                PieceType.ROOK, PieceType.QUEEN, PieceType.KING])
def test_make_piece_round_trip(color, pt):
    pc = make_piece(color, pt)
    assert type_of(pc) == pt
    assert color_of(pc) == color
    swapped = swap_piece_color(pc)
    assert color_of(swapped) == ~color
    assert type_of(swapped) == pt


def test_swap_piece_color_knight():
    assert swap_piece_color(Piece.W_KNIGHT) == Piece.B_KNIGHT


def test_color_of_empty_raises():
    with pytest.raises(ValueError):
        color_of(Piece.NO_PIECE)


def test_castling_for():
    assert castling_for(WHITE, CastlingRights.KING_SIDE) == CastlingRights.WHITE_OO
    assert castling_for(BLACK, CastlingRights.QUEEN_SIDE) == CastlingRights.BLACK_OOO
    assert castling_for(WHITE, CastlingRights.ANY_CASTLING) == CastlingRights.WHITE_CASTLING
    assert castling_for(BLACK, CastlingRights.WHITE_CASTLING) == CastlingRights.NO_CASTLING


def test_mate_values():
    assert mate_in(0) == VALUE_MATE
    assert mated_in(0) == -VALUE_MATE
    for ply in range(10):
        assert mate_in(ply) == -mated_in(ply)


@pytest.mark.parametrize("s", ALL_SQUARES)
def test_relative_square(s):
    assert relative_square(WHITE, s) == s
    assert relative_square(BLACK, relative_square(BLACK, s)) == s
    assert relative_rank_of(BLACK, s) == rank_of(relative_square(BLACK, s))
    assert relative_rank(BLACK, relative_rank(BLACK, rank_of(s))) == rank_of(s)


def test_relative_square_castling_targets():
    assert relative_square(BLACK, SQ_G1) == SQ_G8
    assert relative_square(WHITE, SQ_C1) == SQ_C1
    assert relative_rank(BLACK, RANK_1) == RANK_8


def test_pawn_push():
    assert pawn_push(WHITE) == NORTH
    assert pawn_push(BLACK) == SOUTH


@pytest.mark.parametrize("frm,to", [(0, 63), (12, 28), (63, 0), (52, 36)])
def test_move_round_trip(frm, to):
    m = make_move(frm, to)
    assert from_sq(m) == frm
    assert to_sq(m) == to
    assert from_to(m) == m
    assert move_type(m) == MoveType.NORMAL
    assert is_ok_move(m)
    r = reverse_move(m)
    assert from_sq(r) == to and to_sq(r) == frm


@pytest.mark.parametrize("pt", [PieceType.KNIGHT, PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN])
def test_promotion_round_trip(pt):
    m = make(MoveType.PROMOTION, 52, 60, pt)
    assert move_type(m) == MoveType.PROMOTION
    assert promotion_type(m) == pt
    assert from_sq(m) == 52
    assert to_sq(m) == 60


def test_special_move_types():
    assert move_type(make(MoveType.CASTLING, 4, 7)) == MoveType.CASTLING
    assert move_type(make(MoveType.EN_PASSANT, 36, 43)) == MoveType.EN_PASSANT
    assert promotion_type(make(MoveType.CASTLING, 4, 7)) == PieceType.KNIGHT


def test_null_moves_not_ok():
    assert not is_ok_move(MOVE_NONE)
    assert not is_ok_move(MOVE_NULL)


def test_make_key():
    assert make_key(0) == 1442695040888963407
    for seed in (1, 12345, 2**64 - 1):
        key = make_key(seed)
        assert 0 <= key < 2**64


@pytest.mark.parametrize("mg,eg", [(0, 0), (9, 22), (-17, -6), (-9, 2), (32767, -32768), (-1, 1)])
def test_score_packed_round_trip(mg, eg):
    s = Score(mg, eg)
    assert Score.from_packed(s.packed) == s
    assert -(2**31) <= s.packed < 2**31


def test_score_arithmetic_invariants():
    a = Score(75, 78)
    b = Score(-8, 16)
    assert a + b - b == a
    assert -(-a) == a
    assert a - a == SCORE_ZERO
    assert a.scaled(2) == a + a
    assert 3 * b == b + b + b


def test_score_bool_scaling():
    a = Score(13, 51)
    assert a.scaled(True) == a
    assert a.scaled(False) == SCORE_ZERO


def test_score_division_truncates_toward_zero():
    assert Score(-7, 7).divided(2) == Score(-3, 3)
    assert Score(20, -40).scaled(4).divided(4) == Score(20, -40)


def test_score_overflow_raises():
    with pytest.raises(OverflowError):
        Score(20000, 0).scaled(2)
    with pytest.raises(OverflowError):
        Score(0, 40000)


def test_score_divide_by_zero():
    with pytest.raises(ZeroDivisionError):
        Score(1, 1).divided(0)


def test_dirty_piece():
    dp = DirtyPiece([(Piece.W_PAWN, 12, 28), (Piece.B_KNIGHT, 28, SQ_NONE)])
    assert dp.dirty_num == 2
    assert [pc for pc, _, _ in dp] == [Piece.W_PAWN, Piece.B_KNIGHT]
    assert DirtyPiece().dirty_num == 0


def test_dirty_piece_limit():
    with pytest.raises(ValueError):
        DirtyPiece([(Piece.W_PAWN, 1, 2)] * 4)


def test_color_values():
    assert Color(0) == WHITE
    assert Color(1) == BLACK