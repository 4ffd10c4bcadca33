"""Defines the chess pieces and the position snapshots built from them"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional

from src.core.shared_types import Color, PieceType
from src.rules.square import Square

# Letters used in move labels. Pawns have none.
PIECE_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}

# Order in which promotion moves are offered
PROMOTION_OPTIONS: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

ID_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "p",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}


@dataclass(frozen=True)
class Piece:
    """
    A piece on the board.

    Pieces are values: moving or promoting returns a new Piece carrying the same id.
    Snapshots (in moves or in the history) can therefore never change behind your back.
    """

    id: str
    type: PieceType
    color: Color
    square: Square
    has_moved: bool = False

    @property
    def letter(self) -> str:
        return PIECE_LETTERS[self.type]

    def moved_to(self, square: Square) -> Piece:
        return replace(self, square=square, has_moved=True)

    def promoted_to(self, new_type: PieceType) -> Piece:
        return replace(self, type=new_type)


@dataclass(frozen=True)
class Position:
    """Snapshot of the full set of pieces at one point in the game."""

    pieces: tuple[Piece, ...]

    @classmethod
    def from_pieces(cls, pieces: Iterable[Piece]) -> Position:
        return cls(tuple(pieces))

    def piece_by_id(self, piece_id: str) -> Optional[Piece]:
        return next((piece for piece in self.pieces if piece.id == piece_id), None)

    def repetition_key(self) -> frozenset[tuple[PieceType, Color, Square, bool]]:
        """
        What stands where, ignoring piece identity. Used to detect repeated positions.

        NOTE: whether kings and rooks have moved is part of the key: a position where castling is no longer possible is a different position.
        """
        return frozenset(
            (
                piece.type,
                piece.color,
                piece.square,
                piece.has_moved and piece.type in (PieceType.KING, PieceType.ROOK),
            )
            for piece in self.pieces
        )

    def __len__(self) -> int:
        return len(self.pieces)


def starting_pieces() -> list[Piece]:
    """The standard 32 pieces, ids numbered from the a-file onwards (wr1 on a1, wr2 on h1, ...)."""
    pieces: list[Piece] = []
    for color, back_rank, pawn_rank in [
        (Color.WHITE, 0, 1),
        (Color.BLACK, 7, 6),
    ]:
        prefix = color.value[0]
        seen: dict[PieceType, int] = {}
        for file, piece_type in enumerate(BACK_RANK):
            seen[piece_type] = seen.get(piece_type, 0) + 1
            # the king and queen are unique, so they do not get a number
            suffix = "" if piece_type in (PieceType.KING, PieceType.QUEEN) else str(seen[piece_type])
            piece_id = f"{prefix}{ID_LETTERS[piece_type]}{suffix}"
            pieces.append(Piece(piece_id, piece_type, color, Square(file, back_rank)))
        for file in range(len(BACK_RANK)):
            piece_id = f"{prefix}p{file + 1}"
            pieces.append(Piece(piece_id, PieceType.PAWN, color, Square(file, pawn_rank)))
    return pieces
