"""
Is a king attacked? And would a move leave it attacked?

All functions here only READ the board they are given. Hypothetical positions are built as separate boards
(see `Board.after()` / `Board.relocated()`), so the live game can never be touched by a simulation.
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from src.core.shared_types import Color
from src.rules.board import Board
from src.rules.castling import CASTLING_RULES
from src.rules.moves import CastleMove, Move, is_square_attacked
from src.rules.square import Square


@dataclass(frozen=True)
class CheckState:
    """Whether the side to move is in check, and which of its pieces is the king under attack."""

    in_check: bool = False
    king_id: Optional[str] = None


def is_king_in_check(board: Board, color: Color) -> bool:
    """
    Is any piece of the opponent attacking the king of `color`?

    NOTE: Without a king there is nothing to attack. This should never happen in a well-formed game, so log it.
    """
    king = board.king(color)
    if king is None:
        logger.warning(f"No {color} king on the board, treating it as not in check")
        return False
    return is_square_attacked(king.square, color.opponent, board)


def would_result_in_check(
    board: Board, from_square: Square, to_square: Square, color: Color
) -> bool:
    """
    Return True if relocating the piece on `from_square` to `to_square` leaves the king of `color` attacked

    plan:
    1. Copy the board
    2. remove whatever stands on the target square, move the piece
    3. determine if king is in check on the new board
    """
    hypothetical = board.relocated(from_square, to_square)
    return is_king_in_check(hypothetical, color)


def move_exposes_king(board: Board, move: Move) -> bool:
    """
    Same question as `would_result_in_check()`, but simulating the full move:
    the pawn taken en passant disappears from its own square, a castling rook moves along.

    Castling asks more: the king may not castle out of check, nor cross or land on an attacked square.
    """
    if isinstance(move, CastleMove) and castling_path_attacked(board, move):
        return True
    hypothetical = board.after(move)
    return is_king_in_check(hypothetical, move.piece.color)


def check_state(board: Board, color: Color) -> CheckState:
    if not is_king_in_check(board, color):
        return CheckState()
    king = board.king(color)
    # for the type checker: a king in check exists
    assert king is not None
    return CheckState(in_check=True, king_id=king.id)


def castling_path_attacked(board: Board, move: CastleMove) -> bool:
    """Is the king's starting square, a square it crosses or the square it lands on attacked?"""
    squares = CASTLING_RULES[move.direction]
    king_squares = [squares.king_from] + squares.king_path()
    opponent_color = move.piece.color.opponent
    return any(is_square_attacked(square, opponent_color, board) for square in king_squares)
