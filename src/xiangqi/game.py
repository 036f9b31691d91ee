"""
The Game class will be the entrypoint into the domain layer for the service layer.
It owns the board, the side to move, and the two history logs (FEN snapshots + moves played),
and is responsible for generating legal moves, applying them, and undoing them.

NOTE: Rules coverage is intentionally partial:
* The only self-check filter is the flying general rule. Leaving your general exposed to capture otherwise is allowed.
* The game is over as soon as a general is missing from the board. There is no checkmate / stalemate / repetition detection.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.exceptions import GameStateError
from src.core.models import GameModel
from src.core.shared_types import Status
from src.xiangqi.board import Board
from src.xiangqi.fen import FENState
from src.xiangqi.moves import Move
from src.xiangqi.pieces import Color, Piece
from src.xiangqi.square import Square

logger = logging.getLogger(__name__)

COLOR_NAMES: dict[str, Color] = {color.name.lower(): color for color in Color}


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board
    state: FENState
    moves: list[Move] = field(default_factory=list)
    history: list[str] = field(default_factory=list)  # list of FEN strings, taken BEFORE each move
    player_color: Color = Color.RED  # the side controlled by the human, the oracle plays the other one

    @classmethod
    def new_game(
        cls, player_color: Color = Color.RED, starting_fen: Optional[str] = None
    ) -> Self:
        """Start a new game (empty history) from the standard starting position or the given FEN."""
        state = (
            FENState.from_fen(starting_fen)
            if starting_fen
            else FENState.starting_position()
        )
        board = Board.from_fen(state.position)
        return cls(board=board, state=state, player_color=player_color)

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""
        if model.player_color not in COLOR_NAMES:
            raise GameStateError(
                f"Invalid player color: {model.player_color!r}. \nPick one from {','.join(COLOR_NAMES)}"
            )

        state = FENState.from_fen(model.current_fen)
        return cls(
            board=Board.from_fen(state.position),
            state=state,
            moves=[Move.from_ucci(ucci) for ucci in model.moves_played],
            history=list(model.history_fen),
            player_color=COLOR_NAMES[model.player_color],
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            current_fen=self.fen(),
            history_fen=list(self.history),
            moves_played=[move.to_ucci() for move in self.moves],
            player_color=self.player_color.name.lower(),
            status=self.status.value,
        )

    # --- POSITION ---
    @property
    def color_to_move(self) -> Color:
        return self.state.color_to_move

    @property
    def ai_color(self) -> Color:
        return self.player_color.opponent()

    @property
    def status(self) -> Status:
        return Status.GAME_OVER if self.is_game_over() else Status.IN_PROGRESS

    @property
    def winner(self) -> Optional[Color]:
        """The side that still has its general. None while the game is in progress."""
        if not self.is_game_over():
            return None
        for color in Color:
            if self.board.has_general(color):
                return color
        return None

    def fen(self) -> str:
        return self.state.to_fen()

    def load(self, fen: str) -> None:
        """Replace the board and side to move with the given FEN. The history logs are left untouched."""
        state = FENState.from_fen(fen)
        self.board = Board.from_fen(state.position)
        self.state = state

    def get(self, row: int, col: int) -> Optional[Piece]:
        """Off-board coordinates return None, just like empty squares."""
        return self.board.get(row, col)

    def is_game_over(self) -> bool:
        """Over as soon as either general has been captured."""
        return not all(self.board.has_general(color) for color in Color)

    # --- MOVE GENERATOR ---
    def legal_moves(self, square: Optional[Square] = None) -> list[Move]:
        """
        List of legal moves for the side to move
        ----

        1. generate candidate moves, using the basic movement rules (the board does this calculation)
        2. remove the moves that leave both generals facing each other on an open file

        With a square given, only the moves of that piece are returned.
        An empty square or an opponent's piece simply has no moves (not an error: this is how invalid selections are ignored).
        """
        candidate_moves = self.board.generate_candidate_moves(
            self.color_to_move, square
        )
        return [
            move for move in candidate_moves if not self._exposes_generals(move)
        ]

    def destinations(self, square: Square) -> list[Square]:
        """Convenience for highlighting: where can the piece on this square go?"""
        return [move.to_square for move in self.legal_moves(square)]

    # --- MOVE APPLICATOR ---
    def move(self, move: Move) -> bool:
        """
        Attempt to make a move
        -----

        1. the origin must hold a piece of the side to move
        2. the destination must be among the legal moves of that piece
        3. update the FEN history (with the FEN before the move) and the list of moves
        4. update the board (any piece on the destination is captured)
        5. flip the side to move

        Illegal moves return False and leave the game untouched.
        """
        piece = self.board.piece(move.from_square)
        if piece is None or piece.color != self.color_to_move:
            logger.debug("Rejected %s: no piece of the side to move on origin", move.to_ucci())
            return False

        if move not in self.legal_moves(move.from_square):
            logger.debug("Rejected %s: not a legal move", move.to_ucci())
            return False

        self._update_fen_history(self.fen())
        self._update_moves(move)
        captured = self.board.move_piece(move)
        self._update_fen_state()
        logger.info(
            "Played %s (captured: %s)",
            move.to_ucci(),
            captured.type.name.lower() if captured else "-",
        )
        return True

    def move_ucci(self, ucci: str) -> bool:
        """Parse (raises InvalidMoveNotationError on malformed text) and attempt the move."""
        return self.move(Move.from_ucci(ucci))

    # --- HISTORY ---
    def undo(self) -> None:
        """Take back the last move (a single ply). Nothing happens if no moves were made yet."""
        if not self.history:
            return
        previous_fen = self.history.pop()
        undone = self.moves.pop()
        self.load(previous_fen)
        logger.info("Undid %s", undone.to_ucci())

    # -- PRIVATE HELPERS ---
    def _exposes_generals(self, move: Move) -> bool:
        """Return True if the generals face each other after the move

        plan:
        1. Copy the board
        2. make the candidate move
        3. check the flying general rule on the new board
        """
        board = self.board.copy()
        board.move_piece(move)
        return board.generals_face_each_other()

    def _update_moves(self, move: Move) -> None:
        self.moves.append(move)

    def _update_fen_history(self, fen: str) -> None:
        """Before making a new move, commit the state prior to the move to the registry of FEN strings."""
        self.history.append(fen)

    def _update_fen_state(self) -> None:
        """Create/update the FEN state to reflect state after move."""
        self.state.position = self.board.to_fen()
        self.state.color_to_move = self.color_to_move.opponent()
