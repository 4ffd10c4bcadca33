"""
Display labels for moves (a minimal version of Standard Algebraic Notation, SAN)

ex) "e4", "Nf3", "exd5", "Rad1", "e8=Q", "O-O-O"

The label is computed from the position BEFORE the move. Markers for check (+) and checkmate (#) depend on the
position AFTER the move and are appended separately, see `annotate()`.
"""

from dataclasses import replace

from src.core.shared_types import GameStatus, PieceType
from src.rules.board import Board
from src.rules.moves import (
    MOVEMENT_RULES,
    CastleMove,
    Move,
    PromotionMove,
    is_capture,
)
from src.rules.pieces import PIECE_LETTERS


def move_label(move: Move, board: Board) -> str:
    if isinstance(move, CastleMove):
        return move.direction.label

    piece = move.piece
    notation = piece.letter

    if piece.type == PieceType.PAWN:
        # pawn captures are identified by the file the pawn came from
        if is_capture(move):
            notation += move.from_square.file_name
    else:
        notation += disambiguation(move, board)

    if is_capture(move):
        notation += "x"

    notation += move.to_square.to_algebraic()

    if isinstance(move, PromotionMove):
        notation += "=" + PIECE_LETTERS[move.promote_to]
    return notation


def disambiguation(move: Move, board: Board) -> str:
    """
    If another piece of the same type and color can reach the same square, add the file it came from.
    If the file does not tell them apart, use the rank. If neither does, use the full square.
    """
    rivals = [
        other
        for other in board.pieces(move.piece.color)
        if other.id != move.piece.id
        and other.type == move.piece.type
        and any(
            candidate.to_square == move.to_square
            for candidate in MOVEMENT_RULES[other.type](other, board)
        )
    ]
    if not rivals:
        return ""

    from_square = move.from_square
    if all(other.square.file != from_square.file for other in rivals):
        return from_square.file_name
    if all(other.square.rank != from_square.rank for other in rivals):
        return from_square.rank_name
    return from_square.to_algebraic()


def with_label(move: Move, board: Board) -> Move:
    """Moves are immutable: returns a labelled copy"""
    return replace(move, label=move_label(move, board))


def annotate(label: str, status: GameStatus) -> str:
    """Presentation layer on top of the base label: '+' for check, '#' for checkmate."""
    if status == GameStatus.CHECKMATE:
        return f"{label}#"
    if status == GameStatus.CHECK:
        return f"{label}+"
    return label
