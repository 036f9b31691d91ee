"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define candidate move sets for each piece type.


Legality (the flying general rule) is checked later by Game
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from src.core.exceptions import InvalidMoveNotationError
from src.xiangqi.pieces import Color, Piece, PieceType
from src.xiangqi.square import Square, is_valid_square


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Square) -> Optional[Piece]: ...


Vector = tuple[int, int]

ORTHOGONALS: list[Vector] = [(-1, 0), (1, 0), (0, -1), (0, 1)]
DIAGONALS: list[Vector] = [(-1, -1), (-1, 1), (1, -1), (1, 1)]

# (leg, jump): the horse is hobbled if the square one step along the long leg of the L is occupied
HORSE_JUMPS: list[tuple[Vector, Vector]] = [
    ((-1, 0), (-2, -1)),
    ((-1, 0), (-2, 1)),
    ((1, 0), (2, -1)),
    ((1, 0), (2, 1)),
    ((0, -1), (-1, -2)),
    ((0, -1), (1, -2)),
    ((0, 1), (-1, 2)),
    ((0, 1), (1, 2)),
]


def is_valid_ucci(ucci: str) -> bool:
    """4 characters: <file><rank><file><rank>, ex. 'h2e2'"""
    return len(ucci) == 4 and is_valid_square(ucci[:2]) and is_valid_square(ucci[2:])


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square

    @classmethod
    def from_ucci(cls, ucci: str) -> Self:
        """
        Universal Chinese Chess Protocol (UCCI) coordinate notation
        ---

        Files a-i from left to right (red's point of view), ranks 0-9 counted from red's back rank.

        examples:
        * "h2e2": the piece on h2 (row 7, col 7) moves to e2 (row 7, col 4). (The classic central cannon opening)
        * "b0c2": the horse on b0 (row 9, col 1) jumps to c2 (row 7, col 2)
        """
        if not is_valid_ucci(ucci):
            raise InvalidMoveNotationError(f"Cannot interpret {ucci!r} as a move.")
        return cls(Square.from_ucci(ucci[:2]), Square.from_ucci(ucci[2:]))

    def to_ucci(self) -> str:
        return f"{self.from_square.to_ucci()}{self.to_square.to_ucci()}"


# --- MOVEMENT HELPERS ---
def can_land_on(target: Square, color: Color, board: Board) -> bool:
    """Target is on the board and not occupied by one of your own pieces."""
    if not target.is_within_bounds():
        return False
    occupant = board.piece(target)
    return occupant is None or occupant.color != color


def _moving_color(square: Square, board: Board) -> Color:
    piece = board.piece(square)
    # for the typechecker: movement rules are only called for occupied squares
    assert piece is not None
    return piece.color


def raycasting_move(
    square: Square, board: Board, directions: list[Vector]
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    We define move directions and move along them until we hit another piece or
    the edge of the board.
    """
    player_color = _moving_color(square, board)

    moves: list[Move] = []
    for dr, dc in directions:
        target_square = square.offset(dr, dc)
        while target_square.is_within_bounds():
            occupant = board.piece(target_square)
            if occupant is not None:
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if occupant.color != player_color:
                    moves.append(Move(square, target_square))
                break

            moves.append(Move(square, target_square))
            target_square = target_square.offset(dr, dc)
    return moves


def single_step_move(
    square: Square,
    board: Board,
    deltas: list[Vector],
    allowed: Callable[[Square], bool] = lambda _: True,
) -> list[Move]:
    """
    Raycasting is for sliding pieces. This is the equivalent for pieces that just move a single step along a direction.

    `allowed` restricts the target squares further (ex. the palace for the general and advisors)
    """
    player_color = _moving_color(square, board)
    moves: list[Move] = []
    for dr, dc in deltas:
        target_square = square.offset(dr, dc)
        if can_land_on(target_square, player_color, board) and allowed(target_square):
            moves.append(Move(square, target_square))
    return moves


# --- MOVEMENT RULES ---
def candidate_general_moves(square: Square, board: Board) -> list[Move]:
    """The general moves a single step orthogonally and never leaves its palace"""
    color = _moving_color(square, board)
    return single_step_move(
        square, board, ORTHOGONALS, lambda target: target.is_in_palace(color)
    )


def candidate_advisor_moves(square: Square, board: Board) -> list[Move]:
    """Advisors move a single step diagonally and never leave the palace"""
    color = _moving_color(square, board)
    return single_step_move(
        square, board, DIAGONALS, lambda target: target.is_in_palace(color)
    )


def candidate_elephant_moves(square: Square, board: Board) -> list[Move]:
    """
    Elephants move exactly two steps diagonally.
    - They cannot cross the river.
    - They are blocked if the square in between is occupied (the "elephant eye")
    """
    color = _moving_color(square, board)
    moves: list[Move] = []
    for dr, dc in DIAGONALS:
        eye = square.offset(dr, dc)
        target_square = square.offset(2 * dr, 2 * dc)
        if not can_land_on(target_square, color, board):
            continue
        if not target_square.is_on_own_side(color):
            continue
        if board.piece(eye) is not None:
            continue
        moves.append(Move(square, target_square))
    return moves


def candidate_horse_moves(square: Square, board: Board) -> list[Move]:
    """
    One step orthogonally, then one step diagonally outwards (an L-shape like the chess knight).
    The horse cannot jump: an occupied square on the first (orthogonal) step hobbles it in that direction.
    """
    color = _moving_color(square, board)
    moves: list[Move] = []
    for (leg_r, leg_c), (dr, dc) in HORSE_JUMPS:
        target_square = square.offset(dr, dc)
        if not can_land_on(target_square, color, board):
            continue
        if board.piece(square.offset(leg_r, leg_c)) is not None:
            continue
        moves.append(Move(square, target_square))
    return moves


def candidate_chariot_moves(square: Square, board: Board) -> list[Move]:
    """Chariots move either horizontally or vertically (the chess rook)"""
    return raycasting_move(square, board, ORTHOGONALS)


def candidate_cannon_moves(square: Square, board: Board) -> list[Move]:
    """
    Cannons slide like a chariot, but capture differently
    ---

    * Without capturing: move along the line until the first piece found (that square itself is not reachable).
    * Capturing: jump over exactly one piece (the "screen", of either color) and take the first piece behind it, if it is the opponent's.
    """
    player_color = _moving_color(square, board)
    moves: list[Move] = []
    for dr, dc in ORTHOGONALS:
        target_square = square.offset(dr, dc)
        screen_found = False
        while target_square.is_within_bounds():
            occupant = board.piece(target_square)
            if not screen_found:
                if occupant is None:
                    moves.append(Move(square, target_square))
                else:
                    screen_found = True
            elif occupant is not None:
                if occupant.color != player_color:
                    moves.append(Move(square, target_square))
                break
            target_square = target_square.offset(dr, dc)
    return moves


def candidate_soldier_moves(square: Square, board: Board) -> list[Move]:
    """
    A soldier:
    - moves a single step forward. Red moves UP the board (towards row 0), Black moves DOWN.
    - once across the river it may also step sideways
    - never moves backwards
    """
    color = _moving_color(square, board)
    forward = -1 if color == Color.RED else 1
    deltas: list[Vector] = [(forward, 0)]
    if not square.is_on_own_side(color):
        deltas.extend([(0, -1), (0, 1)])
    return single_step_move(square, board, deltas)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.GENERAL: candidate_general_moves,
    PieceType.ADVISOR: candidate_advisor_moves,
    PieceType.ELEPHANT: candidate_elephant_moves,
    PieceType.HORSE: candidate_horse_moves,
    PieceType.CHARIOT: candidate_chariot_moves,
    PieceType.CANNON: candidate_cannon_moves,
    PieceType.SOLDIER: candidate_soldier_moves,
}
