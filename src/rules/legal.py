"""Legal moves: the pseudo-legal moves that do not leave your own king in check."""

from typing import Optional

from loguru import logger

from src.core.shared_types import Color
from src.rules.board import Board
from src.rules.check import move_exposes_king
from src.rules.generator import pseudo_legal_moves
from src.rules.moves import Move
from src.rules.pieces import Piece
from src.rules.square import Square


def legal_moves_for_piece(
    piece: Piece, board: Board, en_passant_target: Optional[Square] = None
) -> list[Move]:
    candidates = pseudo_legal_moves(piece, board, en_passant_target)
    legal_moves = [move for move in candidates if not move_exposes_king(board, move)]
    logger.debug(
        f"{piece.id}: {len(legal_moves)} of {len(candidates)} candidate moves are legal"
    )
    return legal_moves


def legal_moves_for_color(
    color: Color, board: Board, en_passant_target: Optional[Square] = None
) -> list[Move]:
    moves: list[Move] = []
    for piece in board.pieces(color):
        moves.extend(legal_moves_for_piece(piece, board, en_passant_target))
    return moves


def has_legal_move(
    color: Color, board: Board, en_passant_target: Optional[Square] = None
) -> bool:
    """Stops at the first legal move found. Enough to tell checkmate/stalemate apart from a game that goes on."""
    return any(
        legal_moves_for_piece(piece, board, en_passant_target)
        for piece in board.pieces(color)
    )
