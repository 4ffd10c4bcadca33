"""
Type definitions used across layers
"""

from enum import StrEnum


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class GameStatus(StrEnum):
    IDLE = "idle"
    ACTIVE = "active"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW = "draw"


# A side in check still has to answer it, so both count as "in play"
PLAYING_STATUSES: frozenset[GameStatus] = frozenset(
    {GameStatus.ACTIVE, GameStatus.CHECK}
)


class DrawReason(StrEnum):
    REPETITION = "threefold repetition"
    FIFTY_MOVE_RULE = "fifty-move rule"


class MoveKind(StrEnum):
    NORMAL = "normal"
    CAPTURE = "capture"
    CASTLE = "castle"
    EN_PASSANT = "en-passant"
    PROMOTION = "promotion"


class MoveRejection(StrEnum):
    """Stable reasons for refusing a move attempt. The presentation layer turns these into feedback."""

    GAME_NOT_ACTIVE = "game not active"
    NO_PIECE_AT_SQUARE = "no piece at square"
    NOT_SIDE_TO_MOVES_PIECE = "not side to move's piece"
    ILLEGAL_PIECE_MOVE = "illegal piece move"
    WOULD_LEAVE_KING_IN_CHECK = "would leave king in check"
    PROMOTION_CHOICE_REQUIRED = "promotion choice required"
