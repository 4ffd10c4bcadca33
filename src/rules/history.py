"""Record of the moves played and the positions they led to, navigable with undo/redo."""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.rules.moves import Move
from src.rules.pieces import Position


@dataclass
class GameHistory:
    """
    Ordered moves + the positions reached after each of them.
    ----

    * positions[0] is the starting position (no move leads to it), so there is always one more position than there are moves.
    * cursor points at the position currently on the board: 0 <= cursor <= len(positions) - 1
    * Recording a move while the cursor is not at the end throws away everything after the cursor first (branch on write).
    """

    moves: list[Move] = field(default_factory=list)
    positions: list[Position] = field(default_factory=list)
    cursor: int = 0

    @classmethod
    def starting_from(cls, position: Position) -> Self:
        return cls(moves=[], positions=[position], cursor=0)

    def record(self, move: Move, position: Position) -> None:
        if self.cursor < len(self.moves):
            # branch on write: the redo-able future is discarded
            self.moves = self.moves[: self.cursor]
            self.positions = self.positions[: self.cursor + 1]

        self.moves.append(move)
        self.positions.append(position)
        self.cursor = len(self.moves)

    def undo(self) -> Optional[Position]:
        """Step back one position. Does nothing (returns None) at the starting position."""
        if not self.can_undo:
            return None
        self.cursor -= 1
        return self.positions[self.cursor]

    def redo(self) -> Optional[Position]:
        """Step forward one position. Does nothing (returns None) at the last recorded position."""
        if not self.can_redo:
            return None
        self.cursor += 1
        return self.positions[self.cursor]

    def go_to(self, index: int) -> Optional[Position]:
        """Jump to any recorded position. Returns None (and does not move) for an index outside the history."""
        if not 0 <= index < len(self.positions):
            return None
        self.cursor = index
        return self.positions[index]

    @property
    def can_undo(self) -> bool:
        return self.cursor > 0

    @property
    def can_redo(self) -> bool:
        return self.cursor < len(self.positions) - 1

    @property
    def current_position(self) -> Position:
        return self.positions[self.cursor]

    @property
    def last_move(self) -> Optional[Move]:
        """The move that led to the position at the cursor."""
        return self.moves[self.cursor - 1] if self.cursor > 0 else None

    @property
    def moves_played(self) -> list[Move]:
        """Moves leading up to the cursor (the redo-able ones excluded)."""
        return self.moves[: self.cursor]

    @property
    def positions_played(self) -> list[Position]:
        return self.positions[: self.cursor + 1]

    @property
    def move_number(self) -> int:
        """Full moves: a move by white and the answer by black count as one."""
        return (self.cursor + 1) // 2
