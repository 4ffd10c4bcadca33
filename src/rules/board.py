"""The Board answers "what stands where" for a given set of pieces"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Self

from src.core.exceptions import CorruptPositionError
from src.core.shared_types import Color, PieceType
from src.rules.moves import CastleMove, Move, PromotionMove, captured_piece
from src.rules.pieces import Piece
from src.rules.square import Square


@dataclass
class Board:
    """
    Index from square to piece.

    Always built fresh from a piece collection (never incrementally maintained), so it cannot drift from the pieces it describes.
    """

    position: dict[Square, Piece]

    @classmethod
    def from_pieces(cls, pieces: Iterable[Piece]) -> Self:
        position: dict[Square, Piece] = {}
        for piece in pieces:
            if piece.square in position:
                raise CorruptPositionError(
                    f"Two pieces on {piece.square}: {position[piece.square].id} and {piece.id}"
                )
            position[piece.square] = piece
        return cls(position)

    def piece_at(self, square: Square) -> Optional[Piece]:
        return self.position.get(square)

    def is_empty(self, square: Square) -> bool:
        return square not in self.position

    def has_enemy(self, square: Square, color: Color) -> bool:
        piece = self.position.get(square)
        return piece is not None and piece.color != color

    def pieces(self, color: Optional[Color] = None) -> list[Piece]:
        return [
            piece
            for piece in self.position.values()
            if color is None or piece.color == color
        ]

    def piece_by_id(self, piece_id: str) -> Optional[Piece]:
        return next(
            (piece for piece in self.position.values() if piece.id == piece_id), None
        )

    def king(self, color: Color) -> Optional[Piece]:
        return next(
            (
                piece
                for piece in self.position.values()
                if piece.type == PieceType.KING and piece.color == color
            ),
            None,
        )

    # --- HYPOTHETICAL BOARDS ---
    def after(self, move: Move) -> Board:
        """The board as it would look after the move. This board is left untouched."""
        return Board.from_pieces(apply_move(self.pieces(), move))

    def relocated(self, from_square: Square, to_square: Square) -> Board:
        """
        Bare relocation: whatever stands on `to_square` is removed, the piece on `from_square` takes its place.

        NOTE: Pieces are immutable, so copying the index is enough to get an independent board.
        """
        position = dict(self.position)
        moving_piece = position.pop(from_square, None)
        position.pop(to_square, None)
        if moving_piece is not None:
            position[to_square] = moving_piece.moved_to(to_square)
        return Board(position)


def apply_move(pieces: Sequence[Piece], move: Move) -> list[Piece]:
    """
    The piece set after making the move.
    ---

    1. Remove the captured piece (for en passant that is NOT the piece on the target square)
    2. Relocate the moving piece (and the rook when castling)
    3. Apply the promotion

    The order of the remaining pieces is kept.
    """
    taken = captured_piece(move)
    taken_id = taken.id if taken is not None else None

    new_pieces: list[Piece] = []
    for piece in pieces:
        if piece.id == taken_id:
            continue
        if piece.id == move.piece.id:
            piece = piece.moved_to(move.to_square)
            if isinstance(move, PromotionMove):
                piece = piece.promoted_to(move.promote_to)
        elif isinstance(move, CastleMove) and piece.id == move.rook.id:
            piece = piece.moved_to(move.rook_to)
        new_pieces.append(piece)
    return new_pieces
