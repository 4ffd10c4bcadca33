"""
The Game class is the entrypoint into the rules engine for the service layer (or any other embedding code).
It is responsible for orchestrating all the business logic required to play a turn:
validating a move attempt, executing it, recording it in the history and determining the new status of the game.

One Game instance is one game. There is no shared state between instances.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Self

from loguru import logger

from src.core.config import GameConfig
from src.core.exceptions import CorruptPositionError, GameStateError
from src.core.shared_types import (
    PLAYING_STATUSES,
    Color,
    DrawReason,
    GameStatus,
    MoveKind,
    MoveRejection,
    PieceType,
)
from src.rules.board import Board, apply_move
from src.rules.check import CheckState, check_state, move_exposes_king
from src.rules.generator import pseudo_legal_moves
from src.rules.history import GameHistory
from src.rules.legal import has_legal_move, legal_moves_for_color, legal_moves_for_piece
from src.rules.moves import Move, PromotionMove, en_passant_square, is_capture
from src.rules.notation import annotate
from src.rules.pieces import Piece, Position, starting_pieces
from src.rules.square import Square


@dataclass(frozen=True)
class MoveResult:
    """Outcome of a move attempt. A rejected attempt carries the reason, an accepted one the move that was made."""

    accepted: bool
    move: Optional[Move] = None
    reason: Optional[MoveRejection] = None

    @classmethod
    def ok(cls, move: Move) -> Self:
        return cls(accepted=True, move=move)

    @classmethod
    def failed(cls, reason: MoveRejection) -> Self:
        return cls(accepted=False, reason=reason)

    @property
    def kind(self) -> Optional[MoveKind]:
        return self.move.kind if self.move is not None else None


def classify(
    board: Board, color: Color, en_passant_target: Optional[Square] = None
) -> tuple[CheckState, GameStatus]:
    """
    Status of the game as seen by the side to move (draw rules excluded, they need the history)
    ---

    1. In check without a legal move -> checkmate
    2. In check -> check
    3. No legal move -> stalemate
    4. otherwise -> active
    """
    state = check_state(board, color)
    can_move = has_legal_move(color, board, en_passant_target)
    if state.in_check and not can_move:
        return state, GameStatus.CHECKMATE
    if state.in_check:
        return state, GameStatus.CHECK
    if not can_move:
        return state, GameStatus.STALEMATE
    return state, GameStatus.ACTIVE


@dataclass
class Game:
    # --- ENGINE API CALLED BY SERVICE---

    pieces: list[Piece]
    side_to_move: Color
    history: GameHistory
    starting_side: Color
    config: GameConfig = field(default_factory=GameConfig)
    status: GameStatus = GameStatus.IDLE
    check_state: CheckState = field(default_factory=CheckState)
    draw_reason: Optional[DrawReason] = None
    selected_piece_id: Optional[str] = None
    available_moves: list[Move] = field(default_factory=list)

    @classmethod
    def setup(
        cls,
        pieces: Iterable[Piece],
        side_to_move: Color = Color.WHITE,
        config: Optional[GameConfig] = None,
    ) -> Self:
        """
        Put pieces on the board without starting the game (status: idle).

        Any piece set is accepted as long as it can exist on a board: unique ids, at most one piece per square.
        """
        pieces = list(pieces)
        ids = [piece.id for piece in pieces]
        if len(set(ids)) != len(ids):
            raise CorruptPositionError(f"Piece ids must be unique, got {sorted(ids)}")
        # building the board checks the squares
        Board.from_pieces(pieces)

        return cls(
            pieces=pieces,
            side_to_move=side_to_move,
            history=GameHistory.starting_from(Position.from_pieces(pieces)),
            starting_side=side_to_move,
            config=config or GameConfig(),
        )

    @classmethod
    def new_game(cls, config: Optional[GameConfig] = None) -> Self:
        """The standard starting position, white to move."""
        game = cls.setup(starting_pieces(), Color.WHITE, config)
        game.start()
        return game

    @classmethod
    def from_position(
        cls,
        pieces: Iterable[Piece],
        side_to_move: Color = Color.WHITE,
        config: Optional[GameConfig] = None,
    ) -> Self:
        """Start a game from an arbitrary piece set."""
        game = cls.setup(pieces, side_to_move, config)
        game.start()
        return game

    def start(self) -> None:
        if self.status != GameStatus.IDLE:
            raise GameStateError(f"Game has already started. status: {self.status}")
        self._update_game_status()
        logger.info(f"Game started with {self.side_to_move} to move, status: {self.status}")

    # --- QUERIES ---
    @property
    def board(self) -> Board:
        return Board.from_pieces(self.pieces)

    @property
    def is_playing(self) -> bool:
        return self.status in PLAYING_STATUSES

    @property
    def en_passant_target(self) -> Optional[Square]:
        """Only the move right after a two-square pawn advance can take en passant."""
        return en_passant_square(self.history.last_move)

    @property
    def winner(self) -> Optional[Color]:
        """
        Only defined for checkmate.
        Given we know it is checkmate, the side to move just got mated and the opponent must be the winner
        """
        if self.status != GameStatus.CHECKMATE:
            return None
        return self.side_to_move.opponent

    def legal_moves_for_piece(self, piece_id: str) -> list[Move]:
        """Empty when the game is not in play or the piece does not belong to the side to move."""
        if not self.is_playing:
            return []
        board = self.board
        piece = board.piece_by_id(piece_id)
        if piece is None or piece.color != self.side_to_move:
            return []
        return legal_moves_for_piece(piece, board, self.en_passant_target)

    def legal_moves_for_color(self, color: Color) -> list[Move]:
        """All legal moves of one side in the current position, regardless of the game status."""
        en_passant = self.en_passant_target if color == self.side_to_move else None
        return legal_moves_for_color(color, self.board, en_passant)

    def move_list(self) -> list[str]:
        """Labels of the moves played so far, with '+' / '#' appended for check / checkmate."""
        labels: list[str] = []
        for index, move in enumerate(self.history.moves_played, start=1):
            board = Board.from_pieces(self.history.positions[index].pieces)
            _, status = classify(board, self._side_at(index), en_passant_square(move))
            labels.append(annotate(move.label, status))
        return labels

    # --- COMMANDS ---
    def select_piece(self, piece_id: Optional[str]) -> bool:
        """
        Select a piece of the side to move and fill in its available moves.
        Anything else (no id, unknown piece, opponent's piece, game not in play) clears the selection.
        """
        self._clear_selection()
        if piece_id is None or not self.is_playing:
            return False

        piece = self.board.piece_by_id(piece_id)
        if piece is None or piece.color != self.side_to_move:
            return False

        self.selected_piece_id = piece_id
        self.available_moves = self.legal_moves_for_piece(piece_id)
        return True

    def attempt_move(
        self,
        from_square: Square,
        to_square: Square,
        promote_to: Optional[PieceType] = None,
    ) -> MoveResult:
        """
        Attempt to make a move
        -----

        Validation (a failed attempt changes nothing):
        1. the game must be in play
        2. there must be a piece on the starting square
        3. ... belonging to the side to move
        4. the piece must be able to reach the target square
        5. the move must not leave your own king in check
        6. a pawn reaching the last rank needs a piece to promote into (a queen when auto_queen is on)
           and a piece to promote into is only accepted for such a pawn

        Then:
        7. update the pieces (captures, castling rook, promotion)
        8. switch the side to move
        9. record the move in the history
        10. update game status
        """
        if not self.is_playing:
            return self._reject(MoveRejection.GAME_NOT_ACTIVE, from_square, to_square)

        board = self.board
        piece = board.piece_at(from_square)
        if piece is None:
            return self._reject(MoveRejection.NO_PIECE_AT_SQUARE, from_square, to_square)

        if piece.color != self.side_to_move:
            return self._reject(
                MoveRejection.NOT_SIDE_TO_MOVES_PIECE, from_square, to_square
            )

        candidates = [
            move
            for move in pseudo_legal_moves(piece, board, self.en_passant_target)
            if move.to_square == to_square
        ]
        if not candidates:
            return self._reject(MoveRejection.ILLEGAL_PIECE_MOVE, from_square, to_square)

        legal_moves = [move for move in candidates if not move_exposes_king(board, move)]
        if not legal_moves:
            return self._reject(
                MoveRejection.WOULD_LEAVE_KING_IN_CHECK, from_square, to_square
            )

        promotions = [move for move in legal_moves if isinstance(move, PromotionMove)]
        if promotions:
            wanted = promote_to or (PieceType.QUEEN if self.config.auto_queen else None)
            if wanted is None:
                return self._reject(
                    MoveRejection.PROMOTION_CHOICE_REQUIRED, from_square, to_square
                )
            chosen = next((move for move in promotions if move.promote_to == wanted), None)
            if chosen is None:
                return self._reject(
                    MoveRejection.ILLEGAL_PIECE_MOVE, from_square, to_square
                )
        elif promote_to is not None:
            return self._reject(MoveRejection.ILLEGAL_PIECE_MOVE, from_square, to_square)
        else:
            chosen = legal_moves[0]

        self._execute(chosen)
        return MoveResult.ok(chosen)

    def undo(self) -> Optional[Position]:
        """Take back the last move. Returns the restored position, or None when there is nothing to undo."""
        if self.status == GameStatus.IDLE:
            return None
        position = self.history.undo()
        if position is None:
            return None
        self._restore(position)
        logger.info(f"Undo: back at ply {self.history.cursor}, status: {self.status}")
        return position

    def redo(self) -> Optional[Position]:
        """Replay an undone move. Returns the restored position, or None when there is nothing to redo."""
        if self.status == GameStatus.IDLE:
            return None
        position = self.history.redo()
        if position is None:
            return None
        self._restore(position)
        logger.info(f"Redo: at ply {self.history.cursor}, status: {self.status}")
        return position

    def go_to(self, index: int) -> Optional[Position]:
        """Jump to any recorded position (0 is the starting position)."""
        if self.status == GameStatus.IDLE:
            return None
        position = self.history.go_to(index)
        if position is None:
            return None
        self._restore(position)
        return position

    # -- PRIVATE HELPERS ---
    def _side_at(self, ply: int) -> Color:
        """Side to move after `ply` half-moves from the starting position."""
        return self.starting_side if ply % 2 == 0 else self.starting_side.opponent

    def _reject(
        self, reason: MoveRejection, from_square: Square, to_square: Square
    ) -> MoveResult:
        logger.debug(f"Rejected move {from_square}-{to_square}: {reason}")
        return MoveResult.failed(reason)

    def _clear_selection(self) -> None:
        self.selected_piece_id = None
        self.available_moves = []

    def _execute(self, move: Move) -> None:
        self.pieces = apply_move(self.pieces, move)
        self.side_to_move = self.side_to_move.opponent
        self.history.record(move, Position.from_pieces(self.pieces))
        self._clear_selection()
        self._update_game_status()
        logger.info(f"Played {move.label} ({move.kind}), status: {self.status}")

    def _restore(self, position: Position) -> None:
        """Put a recorded position back on the board. The side to move follows from the number of half-moves played."""
        self.pieces = list(position.pieces)
        self.side_to_move = self._side_at(self.history.cursor)
        self._clear_selection()
        self._update_game_status()

    def _update_game_status(self) -> None:
        """Performs checks to see if the game has ended and changes status accordingly.

        NOTE the side to move has already been switched: this is the position as the next player sees it.
        """
        previous = self.status
        self.check_state, status = classify(
            self.board, self.side_to_move, self.en_passant_target
        )
        self.draw_reason = None
        if status in PLAYING_STATUSES:
            self.draw_reason = self._draw_reason()
            if self.draw_reason is not None:
                status = GameStatus.DRAW

        self.status = status
        if status != previous:
            logger.info(f"Status changed: {previous} -> {status}")

    # --- DRAW RULES ---
    def _draw_reason(self) -> Optional[DrawReason]:
        if not self.config.draw_rules:
            return None
        if self._repetition_count() >= self.config.repetition_limit:
            return DrawReason.REPETITION
        if self._plies_without_progress() >= self.config.fifty_move_plies:
            return DrawReason.FIFTY_MOVE_RULE
        return None

    def _repetition_count(self) -> int:
        """How often the current position occurred (with the same side to move) in the history up to the cursor."""
        cursor = self.history.cursor
        current = self._repetition_key(cursor)
        return sum(
            1
            for ply in range(cursor + 1)
            if ply % 2 == cursor % 2 and self._repetition_key(ply) == current
        )

    def _repetition_key(self, ply: int) -> tuple:
        """Placement and castling rights after a ply, plus the en passant square the ply opened up."""
        move = self.history.moves[ply - 1] if ply > 0 else None
        return self.history.positions[ply].repetition_key(), en_passant_square(move)

    def _plies_without_progress(self) -> int:
        """Half-moves since the last pawn move or capture."""
        count = 0
        for move in reversed(self.history.moves_played):
            if move.piece.type == PieceType.PAWN or is_capture(move):
                break
            count += 1
        return count
