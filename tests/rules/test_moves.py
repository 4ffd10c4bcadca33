"""Unit tests for /src/rules/moves.py"""

from typing import Callable
from unittest.mock import patch

import pytest

import src.rules.moves as mv
from src.core.shared_types import Color, MoveKind, PieceType
from src.rules.board import Board
from src.rules.castling import CastlingDirection, castling_directions
from src.rules.moves import (
    CaptureMove,
    CastleMove,
    EnPassantMove,
    NormalMove,
    PromotionMove,
    candidate_bishop_moves,
    candidate_castling_moves,
    candidate_king_moves,
    candidate_knight_moves,
    candidate_pawn_moves,
    candidate_queen_moves,
    candidate_rook_moves,
    captured_piece,
    en_passant_moves,
    en_passant_square,
    is_attacked_along_diagonal,
    is_attacked_along_straight,
    is_attacked_by_king,
    is_attacked_by_knight,
    is_attacked_by_pawn,
    is_square_attacked,
)
from src.rules.pieces import Piece
from src.rules.square import Square

PlaceFn = Callable[..., list[Piece]]


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


def targets(moves: list) -> set[str]:
    return {move.to_square.to_algebraic() for move in moves}


# --- MOVE VALUES / UCI ---
def test_uci_notation(place: PlaceFn) -> None:
    pawn = place("Pe2")[0]
    move = NormalMove(piece=pawn, from_square=sq("e2"), to_square=sq("e4"))
    assert move.to_uci() == "e2e4"
    assert move.kind == MoveKind.NORMAL


@pytest.mark.parametrize(
    "promote_to, uci",
    [
        (PieceType.QUEEN, "e7e8q"),
        (PieceType.ROOK, "e7e8r"),
        (PieceType.BISHOP, "e7e8b"),
        (PieceType.KNIGHT, "e7e8n"),
    ],
)
def test_uci_notation_incl_promotion(place: PlaceFn, promote_to: PieceType, uci: str) -> None:
    pawn = place("Pe7", has_moved=True)[0]
    move = PromotionMove(
        piece=pawn, from_square=sq("e7"), to_square=sq("e8"), promote_to=promote_to
    )
    assert move.to_uci() == uci


def test_label_is_not_part_of_move_equality(place: PlaceFn) -> None:
    pawn = place("Pe2")[0]
    plain = NormalMove(piece=pawn, from_square=sq("e2"), to_square=sq("e4"))
    labelled = NormalMove(piece=pawn, from_square=sq("e2"), to_square=sq("e4"), label="e4")
    assert plain == labelled


def test_captured_piece(place: PlaceFn) -> None:
    white, black = place("Pe5", "pd5", has_moved=True)
    assert captured_piece(NormalMove(piece=white, from_square=sq("e5"), to_square=sq("e6"))) is None
    capture = CaptureMove(piece=white, from_square=sq("e5"), to_square=sq("d6"), captured=black)
    assert captured_piece(capture) == black
    en_passant = EnPassantMove(
        piece=white, from_square=sq("e5"), to_square=sq("d6"), captured=black
    )
    assert captured_piece(en_passant) == black
    assert en_passant.kind == MoveKind.EN_PASSANT


# --- PAWN MOVES ---
def test_pawn_on_starting_square(place: PlaceFn) -> None:
    pawn = place("Pe2")[0]
    board = Board.from_pieces([pawn])
    assert targets(candidate_pawn_moves(pawn, board)) == {"e3", "e4"}


def test_moved_pawn_cannot_double_step(place: PlaceFn) -> None:
    pawn = place("Pe3", has_moved=True)[0]
    board = Board.from_pieces([pawn])
    assert targets(candidate_pawn_moves(pawn, board)) == {"e4"}


def test_black_pawn_moves_down_the_board(place: PlaceFn) -> None:
    pawn = place("pd7")[0]
    board = Board.from_pieces([pawn])
    assert targets(candidate_pawn_moves(pawn, board)) == {"d6", "d5"}


@pytest.mark.parametrize(
    "blocker, expected",
    [
        ("pe3", set()),
        ("Ne3", set()),
        ("pe4", {"e3"}),
    ],
)
def test_pawn_is_blocked(place: PlaceFn, blocker: str, expected: set[str]) -> None:
    """A pawn cannot capture straight ahead, and cannot jump over a piece with its double step"""
    pieces = place("Pe2", blocker)
    board = Board.from_pieces(pieces)
    assert targets(candidate_pawn_moves(pieces[0], board)) == expected


def test_pawn_captures_diagonally(place: PlaceFn) -> None:
    pieces = place("Pe4", "pd5", "Nf5", "pe5", has_moved=True)
    board = Board.from_pieces(pieces)
    moves = candidate_pawn_moves(pieces[0], board)
    assert targets(moves) == {"d5"}
    assert isinstance(moves[0], CaptureMove)


def test_pawn_on_the_edge_captures_one_way(place: PlaceFn) -> None:
    pieces = place("Pa4", "pb5", has_moved=True)
    board = Board.from_pieces(pieces)
    assert targets(candidate_pawn_moves(pieces[0], board)) == {"a5", "b5"}


def test_promotion_expands_into_four_moves(place: PlaceFn) -> None:
    pieces = place("Pe7", "rd8", has_moved=True)
    board = Board.from_pieces(pieces)
    moves = candidate_pawn_moves(pieces[0], board)

    assert all(isinstance(move, PromotionMove) for move in moves)
    pushes = [move for move in moves if move.to_square == sq("e8")]
    captures = [move for move in moves if move.to_square == sq("d8")]
    assert {move.promote_to for move in pushes} == {
        PieceType.QUEEN,
        PieceType.ROOK,
        PieceType.BISHOP,
        PieceType.KNIGHT,
    }
    assert len(captures) == 4
    assert all(move.captured == pieces[1] for move in captures)


# --- PIECE MOVES ---
@pytest.mark.parametrize(
    "square, expected_count",
    [
        ("a1", 2),
        ("b1", 3),
        ("d4", 8),
        ("h8", 2),
        ("g7", 4),
    ],
)
def test_knight_moves_on_empty_board(place: PlaceFn, square: str, expected_count: int) -> None:
    knight = place(f"N{square}")[0]
    board = Board.from_pieces([knight])
    assert len(candidate_knight_moves(knight, board)) == expected_count


def test_knight_jumps_over_pieces(place: PlaceFn) -> None:
    """Surrounded by its own pawns, the knight can still move"""
    pieces = place("Nb1", "Pa2", "Pb2", "Pc2", "Pd2", "Pd1")
    board = Board.from_pieces(pieces)
    assert targets(candidate_knight_moves(pieces[0], board)) == {"a3", "c3"}


def test_sliding_pieces_are_blocked(place: PlaceFn) -> None:
    """Own pieces block, enemy pieces block but can be taken"""
    pieces = place("Rd4", "Pd6", "nf4")
    board = Board.from_pieces(pieces)
    moves = candidate_rook_moves(pieces[0], board)
    assert targets(moves) == {
        "d5",
        "d3",
        "d2",
        "d1",
        "c4",
        "b4",
        "a4",
        "e4",
        "f4",
    }
    capture = next(move for move in moves if move.to_square == sq("f4"))
    assert isinstance(capture, CaptureMove)
    assert capture.captured.id == "bn1"


@pytest.mark.parametrize(
    "piece, fn, expected_count",
    [
        ("Bd4", candidate_bishop_moves, 13),
        ("Rd4", candidate_rook_moves, 14),
        ("Qd4", candidate_queen_moves, 27),
        ("Kd4", candidate_king_moves, 8),
        ("Ka1", candidate_king_moves, 3),
    ],
)
def test_moves_on_empty_board(
    place: PlaceFn, piece: str, fn: Callable, expected_count: int
) -> None:
    placed = place(piece)[0]
    board = Board.from_pieces([placed])
    assert len(fn(placed, board)) == expected_count


def test_queen_combines_rook_and_bishop(place: PlaceFn) -> None:
    """Using mocks: the queen just asks both strategies"""
    queen = place("Qd4")[0]
    board = Board.from_pieces([queen])
    with (
        patch.object(mv, "candidate_bishop_moves", return_value=["diagonal"]) as bishop,
        patch.object(mv, "candidate_rook_moves", return_value=["straight"]) as rook,
    ):
        assert mv.candidate_queen_moves(queen, board) == ["diagonal", "straight"]
    bishop.assert_called_once_with(queen, board)
    rook.assert_called_once_with(queen, board)


# --- ATTACKS ---
@pytest.mark.parametrize(
    "pieces, square, by_color, expected",
    [
        (["Pe4"], "d5", Color.WHITE, True),
        (["Pe4"], "f5", Color.WHITE, True),
        # pawns do not attack straight ahead or backwards
        (["Pe4"], "e5", Color.WHITE, False),
        (["Pe4"], "d3", Color.WHITE, False),
        (["pe5"], "d4", Color.BLACK, True),
        (["pe5"], "d6", Color.BLACK, False),
    ],
)
def test_pawn_attacks(
    place: PlaceFn, pieces: list[str], square: str, by_color: Color, expected: bool
) -> None:
    board = Board.from_pieces(place(*pieces))
    assert is_attacked_by_pawn(sq(square), by_color, board) == expected


def test_knight_and_king_attacks(place: PlaceFn) -> None:
    board = Board.from_pieces(place("Ng1", "kd5"))
    assert is_attacked_by_knight(sq("f3"), Color.WHITE, board)
    assert not is_attacked_by_knight(sq("g3"), Color.WHITE, board)
    assert is_attacked_by_king(sq("e6"), Color.BLACK, board)
    assert not is_attacked_by_king(sq("d7"), Color.BLACK, board)


def test_sliding_attacks_stop_at_first_piece(place: PlaceFn) -> None:
    board = Board.from_pieces(place("Ba1", "Rh1", "pc3", "Qd8"))
    assert is_attacked_along_diagonal(sq("b2"), Color.WHITE, board)
    assert is_attacked_along_diagonal(sq("c3"), Color.WHITE, board)
    # blocked by the pawn on c3
    assert not is_attacked_along_diagonal(sq("d4"), Color.WHITE, board)
    assert is_attacked_along_straight(sq("b1"), Color.WHITE, board)
    assert is_attacked_along_straight(sq("d1"), Color.WHITE, board)
    # queen both ways
    assert is_attacked_along_straight(sq("d3"), Color.WHITE, board)
    assert is_attacked_along_diagonal(sq("h4"), Color.WHITE, board)
    # a rook does not attack diagonally
    assert not is_attacked_along_diagonal(sq("g2"), Color.WHITE, board)


def test_square_attacked_by_color(place: PlaceFn) -> None:
    board = Board.from_pieces(place("Ke1", "ke8", "ra8"))
    assert is_square_attacked(sq("a1"), Color.BLACK, board)
    assert not is_square_attacked(sq("a1"), Color.WHITE, board)
    assert is_square_attacked(sq("d1"), Color.WHITE, board)


# --- CASTLING ---
def castling_directions_available(pieces: list[Piece]) -> set[CastlingDirection]:
    board = Board.from_pieces(pieces)
    kings = [piece for piece in pieces if piece.type == PieceType.KING]
    return {
        move.direction
        for king in kings
        for move in candidate_castling_moves(king, board)
        if isinstance(move, CastleMove)
    }


def test_castling_all_directions(place: PlaceFn) -> None:
    pieces = place("Ke1", "Ra1", "Rh1", "ke8", "ra8", "rh8")
    assert castling_directions_available(pieces) == set(CastlingDirection)


def test_castle_move_carries_the_rook(place: PlaceFn) -> None:
    pieces = place("Ke1", "Rh1")
    board = Board.from_pieces(pieces)
    (move,) = candidate_castling_moves(pieces[0], board)
    assert move.to_square == sq("g1")
    assert move.rook.id == "wr1"
    assert move.rook_from == sq("h1")
    assert move.rook_to == sq("f1")
    assert move.kind == MoveKind.CASTLE


def test_no_castling_after_king_moved(place: PlaceFn) -> None:
    king = place("Ke1", has_moved=True)[0]
    rooks = place("Ra1", "Rh1")
    assert castling_directions_available([king, *rooks]) == set()


def test_no_castling_with_moved_rook(place: PlaceFn) -> None:
    king, rook = place("Ke1", "Ra1")
    moved_rook = Piece("wr2", PieceType.ROOK, Color.WHITE, sq("h1"), has_moved=True)
    assert castling_directions_available([king, rook, moved_rook]) == {
        CastlingDirection.WHITE_QUEEN_SIDE
    }


@pytest.mark.parametrize(
    "blocker, expected",
    [
        # anything in between blocks
        ("Nb1", {CastlingDirection.WHITE_KING_SIDE}),
        ("ng1", {CastlingDirection.WHITE_QUEEN_SIDE}),
        ("Bd1", {CastlingDirection.WHITE_KING_SIDE}),
        # attacked squares do not matter for the geometry (see check.py for those)
        ("rg8", set(castling_directions(Color.WHITE))),
        ("re8", set(castling_directions(Color.WHITE))),
    ],
)
def test_castling_restrictions(
    place: PlaceFn, blocker: str, expected: set[CastlingDirection]
) -> None:
    pieces = place("Ke1", "Ra1", "Rh1", blocker)
    assert castling_directions_available(pieces) == expected


def test_no_castling_without_rook(place: PlaceFn) -> None:
    assert castling_directions_available(place("Ke1", "Bh1")) == set()


# --- EN PASSANT ---
def test_en_passant_square_after_double_step(place: PlaceFn) -> None:
    white_pawn, black_pawn = place("Pe2", "pd7")
    double_step = NormalMove(piece=white_pawn, from_square=sq("e2"), to_square=sq("e4"))
    assert en_passant_square(double_step) == sq("e3")

    black_double_step = NormalMove(piece=black_pawn, from_square=sq("d7"), to_square=sq("d5"))
    assert en_passant_square(black_double_step) == sq("d6")


def test_no_en_passant_square(place: PlaceFn) -> None:
    pawn, knight = place("Pe2", "Ng1")
    assert en_passant_square(None) is None
    assert en_passant_square(NormalMove(piece=pawn, from_square=sq("e2"), to_square=sq("e3"))) is None
    assert en_passant_square(NormalMove(piece=knight, from_square=sq("g1"), to_square=sq("f3"))) is None


def test_en_passant_capture(place: PlaceFn) -> None:
    pieces = place("Pe5", "pd5", has_moved=True)
    board = Board.from_pieces(pieces)
    (move,) = en_passant_moves(pieces[0], sq("d6"), board)
    assert isinstance(move, EnPassantMove)
    assert move.to_square == sq("d6")
    assert move.captured.id == "bp1"


@pytest.mark.parametrize(
    "pawn, target",
    [
        # not next to the target file
        ("Pb5", "d6"),
        # wrong rank
        ("Pe4", "d6"),
        # no target
        ("Pe5", None),
    ],
)
def test_no_en_passant_capture(place: PlaceFn, pawn: str, target: str | None) -> None:
    pieces = place(pawn, "pd5", has_moved=True)
    board = Board.from_pieces(pieces)
    target_square = sq(target) if target is not None else None
    assert en_passant_moves(pieces[0], target_square, board) == []
