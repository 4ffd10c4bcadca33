"""Orchestration of communication from the presentation layer to the rules engine (and the reverse direction)."""

from uuid import UUID

from loguru import logger

from src.api.models import (
    CheckStateModel,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    GoToRequest,
    HistoryRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveModel,
    MoveRequest,
    MoveResponse,
    PieceModel,
    SelectPieceRequest,
)
from src.core.exceptions import GameNotFoundError
from src.rules.game import Game
from src.rules.pieces import starting_pieces
from src.rules.square import Square
from src.services.repository import GameRepository


class GameService:
    """Orchestration of layers for chess games."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- Presentation layer logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a game from the standard starting position, or from the pieces in the request."""
        pieces = (
            [piece.to_piece() for piece in request.pieces]
            if request.pieces is not None
            else starting_pieces()
        )
        game = Game.from_position(pieces, request.side_to_move, request.config)
        game_id = self.repo.create_game(game)
        logger.info(f"Created game {game_id}")
        return self._create_game_response(game_id, game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        game = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game)

    def select_piece(self, request: SelectPieceRequest) -> GameResponse:
        """Selecting a piece fills in its available moves (clears them for an invalid selection)."""
        game = self._fetch_game(request.game_id)
        game.select_piece(request.piece_id)
        self.repo.update_game(request.game_id, game)
        return self._create_game_response(request.game_id, game)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Legal moves of one piece, or of the whole side to move."""
        game = self._fetch_game(request.game_id)
        if request.piece_id is not None:
            moves = game.legal_moves_for_piece(request.piece_id)
        elif game.is_playing:
            moves = game.legal_moves_for_color(game.side_to_move)
        else:
            moves = []
        return LegalMovesResponse(
            game_id=request.game_id,
            piece_id=request.piece_id,
            side_to_move=game.side_to_move,
            legal_moves=[MoveModel.from_move(move) for move in moves],
        )

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """
        Make a move attempt.

        NOTE: a rejected move is not an error: the response carries the reason.
        """
        game = self._fetch_game(request.game_id)
        result = game.attempt_move(
            Square.from_algebraic(request.from_square),
            Square.from_algebraic(request.to_square),
            request.promote_to,
        )
        if result.accepted:
            self.repo.update_game(request.game_id, game)

        return MoveResponse(
            game_id=request.game_id,
            accepted=result.accepted,
            kind=result.kind,
            reason=result.reason,
            move=MoveModel.from_move(result.move) if result.move is not None else None,
            game=self._create_game_response(request.game_id, game),
        )

    def undo(self, request: HistoryRequest) -> GameResponse:
        game = self._fetch_game(request.game_id)
        if game.undo() is not None:
            self.repo.update_game(request.game_id, game)
        return self._create_game_response(request.game_id, game)

    def redo(self, request: HistoryRequest) -> GameResponse:
        game = self._fetch_game(request.game_id)
        if game.redo() is not None:
            self.repo.update_game(request.game_id, game)
        return self._create_game_response(request.game_id, game)

    def go_to(self, request: GoToRequest) -> GameResponse:
        game = self._fetch_game(request.game_id)
        if game.go_to(request.index) is not None:
            self.repo.update_game(request.game_id, game)
        return self._create_game_response(request.game_id, game)

    def list_games(self) -> list[UUID]:
        return self.repo.list_game_ids()

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self.repo.delete_game(request.game_id) is None:
            raise GameNotFoundError(f"Game with {request.game_id=} not found.")
        logger.info(f"Deleted game {request.game_id}")

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        """Convert the Game into a GameResponse (for game with given ID.)"""
        return GameResponse(
            game_id=game_id,
            status=game.status,
            side_to_move=game.side_to_move,
            check=CheckStateModel.from_check_state(game.check_state),
            draw_reason=game.draw_reason,
            winner=game.winner,
            pieces=[PieceModel.from_piece(piece) for piece in game.pieces],
            move_history=game.move_list(),
            cursor=game.history.cursor,
            can_undo=game.history.can_undo,
            can_redo=game.history.can_redo,
            selected_piece_id=game.selected_piece_id,
            available_moves=[MoveModel.from_move(move) for move in game.available_moves],
        )

    def _fetch_game(self, game_id: UUID) -> Game:
        """Attempt to find the game in the repository and raise error if it fails."""
        game = self.repo.get_game(game_id)
        if game is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")
        return game
