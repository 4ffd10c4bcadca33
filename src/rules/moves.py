"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the move sets for each piece type.

Everything generated here is pseudo-legal: it follows the movement geometry of the piece, but may still leave
your own king in check. Legality is checked later (see legal.py)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, ClassVar, Optional, Protocol, Union

from src.core.shared_types import Color, MoveKind, PieceType
from src.rules.castling import (
    CASTLING_RULES,
    CastlingDirection,
    castling_directions,
)
from src.rules.pieces import ID_LETTERS, PROMOTION_OPTIONS, Piece
from src.rules.square import BOARD_DIMENSIONS, Square


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece_at(self, square: Square) -> Optional[Piece]: ...
    def is_empty(self, square: Square) -> bool: ...


Vector = tuple[int, int]


# --- MOVES ---
@dataclass(frozen=True, kw_only=True)
class BaseMove:
    """
    Shared part of every move variant.

    `piece` is a snapshot of the moving piece before the move. Executing a move never changes the Move itself.
    The label does not take part in equality: two moves are the same move no matter how they are displayed.
    """

    piece: Piece
    from_square: Square
    to_square: Square
    label: str = field(default="", compare=False)

    kind: ClassVar[MoveKind]

    def to_uci(self) -> str:
        """Convert into UCI notation"""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}"


@dataclass(frozen=True, kw_only=True)
class NormalMove(BaseMove):
    kind: ClassVar[MoveKind] = MoveKind.NORMAL


@dataclass(frozen=True, kw_only=True)
class CaptureMove(BaseMove):
    captured: Piece

    kind: ClassVar[MoveKind] = MoveKind.CAPTURE


@dataclass(frozen=True, kw_only=True)
class CastleMove(BaseMove):
    """The king move. The rook relocation travels along, so executing the move cannot forget it."""

    direction: CastlingDirection
    rook: Piece
    rook_from: Square
    rook_to: Square

    kind: ClassVar[MoveKind] = MoveKind.CASTLE


@dataclass(frozen=True, kw_only=True)
class EnPassantMove(BaseMove):
    """NOTE: the captured pawn does NOT stand on the target square, but next to the pawn that takes it."""

    captured: Piece

    kind: ClassVar[MoveKind] = MoveKind.EN_PASSANT


@dataclass(frozen=True, kw_only=True)
class PromotionMove(BaseMove):
    promote_to: PieceType
    captured: Optional[Piece] = None

    kind: ClassVar[MoveKind] = MoveKind.PROMOTION

    def to_uci(self) -> str:
        """ex. "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)"""
        return f"{super().to_uci()}{ID_LETTERS[self.promote_to]}"


Move = Union[NormalMove, CaptureMove, CastleMove, EnPassantMove, PromotionMove]


def captured_piece(move: Move) -> Optional[Piece]:
    """The piece taken off the board by this move, if any."""
    if isinstance(move, (CaptureMove, EnPassantMove, PromotionMove)):
        return move.captured
    return None


def is_capture(move: Move) -> bool:
    return captured_piece(move) is not None


def step_to(piece: Piece, target: Square, board: Board) -> Optional[Move]:
    """A move onto the target square: normal if it is empty, a capture if the opponent stands there, nothing otherwise."""
    occupant = board.piece_at(target)
    if occupant is None:
        return NormalMove(piece=piece, from_square=piece.square, to_square=target)
    if occupant.color != piece.color:
        return CaptureMove(
            piece=piece, from_square=piece.square, to_square=target, captured=occupant
        )
    return None


# --- MOVEMENT RULES ---
def raycasting_move(piece: Piece, board: Board, directions: list[Vector]) -> list[Move]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.
    """
    moves: list[Move] = []
    for df, dr in directions:
        target_square = piece.square.offset(df, dr)
        while target_square is not None:
            move = step_to(piece, target_square, board)
            if move is not None:
                moves.append(move)
            if not board.is_empty(target_square):
                # only the first occupied square can be reached (and only if it is the opponent's: then it can be captured.)
                break
            target_square = target_square.offset(df, dr)
    return moves


def single_step_move(piece: Piece, board: Board, deltas: list[Vector]) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just can move a single step along a direction"""
    moves: list[Move] = []
    for df, dr in deltas:
        target_square = piece.square.offset(df, dr)
        if target_square is None:
            continue
        move = step_to(piece, target_square, board)
        if move is not None:
            moves.append(move)
    return moves


def pawn_direction(color: Color) -> int:
    """White moves UP the board, black moves DOWN"""
    return 1 if color == Color.WHITE else -1


def promotion_rank(color: Color) -> int:
    return BOARD_DIMENSIONS[1] - 1 if color == Color.WHITE else 0


def candidate_pawn_moves(piece: Piece, board: Board) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward.
    - It can move by two in its first move (when it has not moved yet and both squares are free)
    - takes diagonally

    Reaching the last rank expands a move into one move per promotion option.
    NOTE: En passant is generated separately, it depends on the opponent's last move.
    """
    moves: list[Move] = []
    forward = pawn_direction(piece.color)

    one_step = piece.square.offset(0, forward)
    if one_step is not None and board.is_empty(one_step):
        moves.extend(with_promotions(piece, one_step, captured=None))

        two_steps = one_step.offset(0, forward)
        if not piece.has_moved and two_steps is not None and board.is_empty(two_steps):
            moves.append(
                NormalMove(piece=piece, from_square=piece.square, to_square=two_steps)
            )

    # pawns take diagonally:
    for df in (-1, 1):
        target_square = piece.square.offset(df, forward)
        if target_square is None:
            continue
        occupant = board.piece_at(target_square)
        if occupant is not None and occupant.color != piece.color:
            moves.extend(with_promotions(piece, target_square, captured=occupant))
    return moves


def with_promotions(piece: Piece, target: Square, captured: Optional[Piece]) -> list[Move]:
    """A single pawn move, or four copies of it (one per promotion option) when it reaches the last rank."""
    if target.rank == promotion_rank(piece.color):
        return [
            PromotionMove(
                piece=piece,
                from_square=piece.square,
                to_square=target,
                promote_to=piece_type,
                captured=captured,
            )
            for piece_type in PROMOTION_OPTIONS
        ]
    if captured is not None:
        return [
            CaptureMove(
                piece=piece, from_square=piece.square, to_square=target, captured=captured
            )
        ]
    return [NormalMove(piece=piece, from_square=piece.square, to_square=target)]


KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = [
    (0, 1),
    (0, -1),
    (1, 0),
    (-1, 0),
    (1, 1),
    (1, -1),
    (-1, 1),
    (-1, -1),
]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]


def candidate_knight_moves(piece: Piece, board: Board) -> list[Move]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(piece, board, KNIGHT_DELTAS)


def candidate_bishop_moves(piece: Piece, board: Board) -> list[Move]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(piece, board, DIAGONALS)


def candidate_rook_moves(piece: Piece, board: Board) -> list[Move]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(piece, board, STRAIGHTS)


def candidate_queen_moves(piece: Piece, board: Board) -> list[Move]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return candidate_bishop_moves(piece, board) + candidate_rook_moves(piece, board)


def candidate_king_moves(piece: Piece, board: Board) -> list[Move]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (handled separately).
    """
    return single_step_move(piece, board, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Piece, Board], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    square: Square,
    by_color: Color,
    by_piece_types: tuple[PieceType, ...],
    board: Board,
    directions: list[Vector],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    Where `raycasting_move()` determines
    _"What is the line-of-sight of the piece standing on the specified square?"_

    This function determines:
    _"Is the specified square in the line-of-sight of a piece of the specified color and
    that is allowed to move along the given direction?"_
    """
    for df, dr in directions:
        target_square = square.offset(df, dr)
        while target_square is not None:
            piece_found = board.piece_at(target_square)
            if piece_found is not None:
                # only the first piece found along the ray can attack the square.
                if piece_found.color == by_color and piece_found.type in by_piece_types:
                    return True
                break
            target_square = target_square.offset(df, dr)
    return False


def single_step_attack(
    square: Square,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    deltas: list[Vector],
) -> bool:
    """
    Equivalent of raycasting_attack() for pieces that move a single step along a direction.
    """
    for df, dr in deltas:
        target_square = square.offset(df, dr)
        if target_square is None:
            continue
        piece_found = board.piece_at(target_square)
        if (
            piece_found is not None
            and piece_found.color == by_color
            and piece_found.type == by_piece_type
        ):
            return True
    return False


def is_attacked_by_pawn(square: Square, by_color: Color, board: Board) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric, so to check IF a white pawn could take on your square -->
    Must look one rank DOWN the board. That is, you are asking "Could a white pawn, that moves UP the board, take on the specified square?"
    """
    backwards = -pawn_direction(by_color)
    return single_step_attack(
        square, by_color, PieceType.PAWN, board, [(1, backwards), (-1, backwards)]
    )


def is_attacked_by_knight(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KNIGHT, board, KNIGHT_DELTAS)


def is_attacked_along_diagonal(square: Square, by_color: Color, board: Board) -> bool:
    """Bishops and queens"""
    return raycasting_attack(
        square, by_color, (PieceType.BISHOP, PieceType.QUEEN), board, DIAGONALS
    )


def is_attacked_along_straight(square: Square, by_color: Color, board: Board) -> bool:
    """Rooks and queens"""
    return raycasting_attack(
        square, by_color, (PieceType.ROOK, PieceType.QUEEN), board, STRAIGHTS
    )


def is_attacked_by_king(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KING, board, KING_DELTAS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Square, Color, Board], bool]
ATTACK_RULES: list[IsAttackedFn] = [
    is_attacked_by_pawn,
    is_attacked_by_knight,
    is_attacked_along_diagonal,
    is_attacked_along_straight,
    is_attacked_by_king,
]


def is_square_attacked(square: Square, by_color: Color, board: Board) -> bool:
    """Could any piece of `by_color` capture on the square (if an enemy piece stood there)?"""
    return any(rule(square, by_color, board) for rule in ATTACK_RULES)


# -- CASTLING MOVES ---
def candidate_castling_moves(king: Piece, board: Board) -> list[Move]:
    """
    Castling moves available to the king
    ---

    **the castling move exists if**

    * Neither the king nor the rook has moved yet (both still on their starting squares).
    * Every square in between the king and the rook is empty.

    NOTE: Whether the king starts in, crosses or lands on an attacked square is a legality question,
    answered together with all other moves (see `move_exposes_king()` in check.py).
    """
    if king.type != PieceType.KING or king.has_moved:
        return []

    moves: list[Move] = []
    for direction in castling_directions(king.color):
        squares = CASTLING_RULES[direction]
        if king.square != squares.king_from:
            continue

        rook = board.piece_at(squares.rook_from)
        if (
            rook is None
            or rook.type != PieceType.ROOK
            or rook.color != king.color
            or rook.has_moved
        ):
            continue

        if not all(board.is_empty(square) for square in squares.squares_between()):
            continue

        moves.append(
            CastleMove(
                piece=king,
                from_square=squares.king_from,
                to_square=squares.king_to,
                direction=direction,
                rook=rook,
                rook_from=squares.rook_from,
                rook_to=squares.rook_to,
            )
        )
    return moves


# -- EN PASSANT MOVES ---
def en_passant_square(move: Optional[Move]) -> Optional[Square]:
    """
    The square a pawn passed over with a two-square advance. Only available for the very next move.
    """
    if not isinstance(move, NormalMove) or move.piece.type != PieceType.PAWN:
        return None
    if abs(move.to_square.rank - move.from_square.rank) != 2:
        return None
    return move.from_square.offset(0, pawn_direction(move.piece.color))


def en_passant_moves(pawn: Piece, target: Optional[Square], board: Board) -> list[Move]:
    """
    Given a target en passant square, check whether the pawn stands next to the pawn that just passed it.

    NOTE: The enemy pawn stands on the target's file, in the rank the capturing pawn is on.
    """
    if target is None or pawn.type != PieceType.PAWN:
        return []
    if target.rank != pawn.square.rank + pawn_direction(pawn.color):
        return []
    if abs(target.file - pawn.square.file) != 1:
        return []

    victim = board.piece_at(Square(target.file, pawn.square.rank))
    if (
        victim is None
        or victim.type != PieceType.PAWN
        or victim.color == pawn.color
        or not board.is_empty(target)
    ):
        return []
    return [
        EnPassantMove(
            piece=pawn, from_square=pawn.square, to_square=target, captured=victim
        )
    ]
