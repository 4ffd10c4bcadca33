"""Rule options a Game is created with."""

from pydantic import BaseModel, ConfigDict, Field


class GameConfig(BaseModel):
    """
    Settings that change how a single game is adjudicated.

    * auto_queen: when a pawn reaches the last rank and no piece was chosen, promote to a queen.
        If disabled, the move attempt is rejected until a piece type is supplied.
    * draw_rules: enable draws by threefold repetition and by the fifty-move rule.
    * repetition_limit: how many times the same position must occur to call a draw.
    * fifty_move_plies: number of half-moves without a pawn move or capture before the game is drawn.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    auto_queen: bool = True
    draw_rules: bool = True
    repetition_limit: int = Field(default=3, ge=2)
    fifty_move_plies: int = Field(default=100, ge=1)
