"""
Pseudo-legal move generation for a single piece: the movement rules of moves.py plus the special moves
(castling, en passant), with a display label attached to every move.
"""

from typing import Optional

from loguru import logger

from src.core.shared_types import Color, PieceType
from src.rules.board import Board
from src.rules.moves import (
    MOVEMENT_RULES,
    Move,
    candidate_castling_moves,
    en_passant_moves,
)
from src.rules.notation import with_label
from src.rules.pieces import Piece
from src.rules.square import Square


def pseudo_legal_moves(
    piece: Piece, board: Board, en_passant_target: Optional[Square] = None
) -> list[Move]:
    """
    Candidate moves for the piece
    ----

    1. basic movement rules for the piece type (strategy pattern, see MOVEMENT_RULES)
    2. castling moves for the king
    3. en passant capture for a pawn, if the opponent's last move allows one

    These still have to be tested for legality (making sure they do not leave your own king in check.)
    """
    moves = MOVEMENT_RULES[piece.type](piece, board)

    if piece.type == PieceType.KING:
        moves.extend(candidate_castling_moves(piece, board))

    if piece.type == PieceType.PAWN:
        moves.extend(en_passant_moves(piece, en_passant_target, board))

    logger.debug(f"{len(moves)} candidate moves for {piece.id} on {piece.square}")
    return [with_label(move, board) for move in moves]


def pseudo_legal_moves_for_color(
    color: Color, board: Board, en_passant_target: Optional[Square] = None
) -> list[Move]:
    moves: list[Move] = []
    for piece in board.pieces(color):
        moves.extend(pseudo_legal_moves(piece, board, en_passant_target))
    return moves
