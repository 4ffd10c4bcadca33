"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable

import pytest

from src.core.shared_types import Color, PieceType
from src.rules.pieces import Piece
from src.rules.square import Square

LETTER_TO_TYPE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PlaceFn = Callable[..., list[Piece]]


def place_pieces(*placements: str, has_moved: bool = False) -> list[Piece]:
    """
    Build pieces from short descriptions: the piece letter (capital letters for white, small letters for black) + the square.

    ex) place_pieces("Ke1", "Ra1", "ke8") --> white king on e1, white rook on a1, black king on e8.
    Ids are <color><letter><counter>: wk1, wr1, bk1, ...
    """
    counters: dict[str, int] = {}
    pieces: list[Piece] = []
    for placement in placements:
        letter, square_name = placement[0], placement[1:]
        color = Color.WHITE if letter.isupper() else Color.BLACK
        prefix = f"{color.value[0]}{letter.lower()}"
        counters[prefix] = counters.get(prefix, 0) + 1
        pieces.append(
            Piece(
                id=f"{prefix}{counters[prefix]}",
                type=LETTER_TO_TYPE[letter.lower()],
                color=color,
                square=Square.from_algebraic(square_name),
                has_moved=has_moved,
            )
        )
    return pieces


@pytest.fixture
def place() -> PlaceFn:
    return place_pieces


# --- POSITIONS FOR MANUAL TESTING OF END CONDITIONS / CAPTURES ---
@pytest.fixture
def checkmate_position() -> list[Piece]:
    """Black (to move) is mated: queen on h7 protected by the rook on h1."""
    return place_pieces("Ke1", "Qh7", "Rh1", "kh8", has_moved=True)


@pytest.fixture
def stalemate_position() -> list[Piece]:
    """Black (to move) is not in check, but every square around the king is covered."""
    return place_pieces("Kg6", "Qf7", "kh8", has_moved=True)


@pytest.fixture
def capture_position() -> list[Piece]:
    """White to move, with pawn, bishop and knight captures available."""
    return place_pieces(
        "Ke1", "Qd1", "Pe4", "Bc4", "Nd4", "ke8", "pd5", "pf5", "pb5", "rc6", has_moved=True
    )
