"""Requests and Response models"""

from typing import Optional, Self
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.core.config import GameConfig
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import (
    Color,
    DrawReason,
    GameStatus,
    MoveKind,
    MoveRejection,
    PieceType,
)
from src.rules.check import CheckState
from src.rules.moves import Move, PromotionMove, captured_piece
from src.rules.pieces import Piece
from src.rules.square import Square


def validate_square_name(value: str) -> str:
    """Raises InvalidRequestError (a ValueError, so pydantic reports it) for anything that is not 'a1' - 'h8'"""
    Square.from_algebraic(value)
    return value


# --- SHARED MODELS ---
class PieceModel(BaseModel):
    id: str
    type: PieceType
    color: Color
    square: str
    has_moved: bool = False

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return validate_square_name(value)

    @classmethod
    def from_piece(cls, piece: Piece) -> Self:
        return cls(
            id=piece.id,
            type=piece.type,
            color=piece.color,
            square=piece.square.to_algebraic(),
            has_moved=piece.has_moved,
        )

    def to_piece(self) -> Piece:
        return Piece(
            self.id,
            self.type,
            self.color,
            Square.from_algebraic(self.square),
            self.has_moved,
        )


class CheckStateModel(BaseModel):
    in_check: bool
    king_id: Optional[str]

    @classmethod
    def from_check_state(cls, state: CheckState) -> Self:
        return cls(in_check=state.in_check, king_id=state.king_id)


class MoveModel(BaseModel):
    uci: str
    piece_id: str
    from_square: str
    to_square: str
    kind: MoveKind
    label: str
    promote_to: Optional[PieceType] = None
    captured_id: Optional[str] = None

    @classmethod
    def from_move(cls, move: Move) -> Self:
        captured = captured_piece(move)
        return cls(
            uci=move.to_uci(),
            piece_id=move.piece.id,
            from_square=move.from_square.to_algebraic(),
            to_square=move.to_square.to_algebraic(),
            kind=move.kind,
            label=move.label,
            promote_to=move.promote_to if isinstance(move, PromotionMove) else None,
            captured_id=captured.id if captured is not None else None,
        )


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    """Leave out the pieces for the standard starting position."""

    pieces: Optional[list[PieceModel]] = None
    side_to_move: Color = Color.WHITE
    config: GameConfig = Field(default_factory=GameConfig)

    @field_validator("pieces")
    @classmethod
    def validate_pieces(cls, value: Optional[list[PieceModel]]) -> Optional[list[PieceModel]]:
        if value is None:
            return value

        ids = [piece.id for piece in value]
        if len(set(ids)) != len(ids):
            raise InvalidRequestError("Every piece needs a unique id.")

        squares = [piece.square for piece in value]
        if len(set(squares)) != len(squares):
            raise InvalidRequestError("Only one piece can stand on a square.")
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class SelectPieceRequest(BaseModel):
    """A piece_id of None clears the selection."""

    game_id: UUID
    piece_id: Optional[str] = None


class LegalMovesRequest(BaseModel):
    """Without a piece_id, the legal moves of every piece of the side to move are returned."""

    game_id: UUID
    piece_id: Optional[str] = None


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str
    promote_to: Optional[PieceType] = None

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        return validate_square_name(value)


class HistoryRequest(BaseModel):
    """Undo / redo"""

    game_id: UUID


class GoToRequest(BaseModel):
    game_id: UUID
    index: int = Field(ge=0)


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    status: GameStatus
    side_to_move: Color
    check: CheckStateModel
    draw_reason: Optional[DrawReason]
    winner: Optional[Color]
    pieces: list[PieceModel]
    move_history: list[str]
    cursor: int
    can_undo: bool
    can_redo: bool
    selected_piece_id: Optional[str]
    available_moves: list[MoveModel]


class LegalMovesResponse(BaseModel):
    game_id: UUID
    piece_id: Optional[str]
    side_to_move: Color
    legal_moves: list[MoveModel]


class MoveResponse(BaseModel):
    game_id: UUID
    accepted: bool
    kind: Optional[MoveKind]
    reason: Optional[MoveRejection]
    move: Optional[MoveModel]
    game: GameResponse
