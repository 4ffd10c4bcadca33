"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from src.core.exceptions import InvalidRequestError

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)
FILE_NAMES = "abcdefgh"[: BOARD_DIMENSIONS[0]]


def is_within_bounds(file: int, rank: int) -> bool:
    return (0 <= file < BOARD_DIMENSIONS[0]) and (0 <= rank < BOARD_DIMENSIONS[1])


@dataclass(frozen=True, order=True)
class Square:
    """
    Zero-based file/rank pair: a1 is (0, 0), h8 is (7, 7).

    A Square is valid by construction. Use `to_square()` (or `Square.offset()`) when the result might fall off the board.
    """

    file: int
    rank: int

    def __post_init__(self) -> None:
        if not is_within_bounds(self.file, self.rank):
            raise ValueError(f"Square out of bounds: file={self.file}, rank={self.rank}")

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,0) - (7,7)"""
        if len(sq) != 2 or sq[0] not in FILE_NAMES or not sq[1].isdigit():
            raise InvalidRequestError(f"Cannot interpret {sq!r} as a square name.")
        file = FILE_NAMES.index(sq[0])
        rank = int(sq[1]) - 1
        if not is_within_bounds(file, rank):
            raise InvalidRequestError(f"Square {sq!r} is not on the board.")
        return cls(file, rank)

    def to_algebraic(self) -> str:
        return f"{FILE_NAMES[self.file]}{self.rank + 1}"

    @property
    def file_name(self) -> str:
        return FILE_NAMES[self.file]

    @property
    def rank_name(self) -> str:
        return str(self.rank + 1)

    def to_indices(self) -> tuple[int, int]:
        return self.file, self.rank

    def offset(self, df: int, dr: int) -> Optional[Square]:
        """The square reached by stepping (df, dr) from here, or None when that leaves the board."""
        return to_square(self.file + df, self.rank + dr)

    def __str__(self) -> str:
        return self.to_algebraic()


def to_square(file: int, rank: int) -> Optional[Square]:
    """None (never a clamped/wrapped square) when either index is off the board."""
    if not is_within_bounds(file, rank):
        return None
    return Square(file, rank)


def to_indices(square: Square) -> tuple[int, int]:
    return square.to_indices()
