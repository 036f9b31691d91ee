"""
International chess, the second game mode.

The rules come from python-chess. This class only adds what the service layer needs on top of `chess.Board`:
the FEN snapshot log, the human's color, and conversion from/to GameModel.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

import chess

from src.core.exceptions import GameStateError, InvalidFENError, InvalidMoveNotationError
from src.core.models import GameModel
from src.core.shared_types import GameKind, Status

logger = logging.getLogger(__name__)

COLOR_NAMES: dict[str, chess.Color] = {"white": chess.WHITE, "black": chess.BLACK}


def load_board(fen: str) -> chess.Board:
    """Board for the given FEN. A short FEN (placement + side to move) is fine, missing fields get their defaults."""
    try:
        board = chess.Board(fen)
    except ValueError as exc:
        raise InvalidFENError(f"Invalid chess FEN {fen!r}: {exc}") from exc
    if not board.is_valid():
        raise InvalidFENError(f"Impossible chess position: {fen!r}")
    return board


@dataclass
class ChessGame:
    board: chess.Board
    history: list[str] = field(default_factory=list)  # FEN strings, taken BEFORE each move
    player_color: chess.Color = chess.WHITE

    @classmethod
    def new_game(
        cls, player_color: chess.Color = chess.WHITE, starting_fen: Optional[str] = None
    ) -> Self:
        board = load_board(starting_fen) if starting_fen else chess.Board()
        return cls(board=board, player_color=player_color)

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """
        Rebuild the board by replaying the stored moves from the starting position,
        so python-chess knows the move stack (needed for undo, repetition, and SAN history).
        """
        if model.player_color not in COLOR_NAMES:
            raise GameStateError(
                f"Invalid player color: {model.player_color!r}. \nPick one from {','.join(COLOR_NAMES)}"
            )

        starting_fen = model.history_fen[0] if model.history_fen else model.current_fen
        board = load_board(starting_fen)
        try:
            for uci in model.moves_played:
                board.push_uci(uci)
        except ValueError as exc:
            raise GameStateError(f"Stored move log cannot be replayed: {exc}") from exc
        if board.fen() != model.current_fen:
            raise GameStateError("Stored moves do not lead to the stored position.")

        return cls(
            board=board,
            history=list(model.history_fen),
            player_color=COLOR_NAMES[model.player_color],
        )

    def to_model(self) -> GameModel:
        return GameModel(
            current_fen=self.fen(),
            history_fen=list(self.history),
            moves_played=[move.uci() for move in self.board.move_stack],
            player_color=chess.COLOR_NAMES[self.player_color],
            status=self.status.value,
            kind=GameKind.CHESS.value,
        )

    # --- POSITION ---
    @property
    def color_to_move(self) -> chess.Color:
        return self.board.turn

    @property
    def ai_color(self) -> chess.Color:
        return not self.player_color

    @property
    def status(self) -> Status:
        return Status.GAME_OVER if self.is_game_over() else Status.IN_PROGRESS

    @property
    def winner(self) -> Optional[chess.Color]:
        """None while the game is in progress, and for draws."""
        outcome = self.board.outcome()
        return outcome.winner if outcome else None

    def fen(self) -> str:
        return self.board.fen()

    def is_game_over(self) -> bool:
        """Checkmate, stalemate, insufficient material, 75-move rule, fivefold repetition"""
        return self.board.is_game_over()

    def san_history(self) -> list[str]:
        """Moves played so far in SAN (the notation the oracle reads and writes)"""
        board = self.board.root()
        san_moves: list[str] = []
        for move in self.board.move_stack:
            san_moves.append(board.san(move))
            board.push(move)
        return san_moves

    # --- MOVES ---
    def legal_moves(self, square: Optional[str] = None) -> list[chess.Move]:
        """All legal moves of the side to move, or only those starting on the given square (ex. 'e2')."""
        if square is None:
            return list(self.board.legal_moves)
        try:
            from_square = chess.parse_square(square)
        except ValueError as exc:
            raise InvalidMoveNotationError(f"Cannot interpret {square!r} as a square.") from exc
        return [move for move in self.board.legal_moves if move.from_square == from_square]

    def move_uci(self, uci: str) -> bool:
        """
        Attempt a move given in UCI coordinates (ex. 'e2e4').

        A pawn reaching the last rank without a promotion piece becomes a queen.
        Malformed text raises InvalidMoveNotationError, illegal moves return False.
        """
        try:
            move = chess.Move.from_uci(uci)
        except ValueError as exc:
            raise InvalidMoveNotationError(f"Cannot interpret {uci!r} as a move.") from exc

        if move.promotion is None and self._is_promoting_pawn(move):
            move = chess.Move(move.from_square, move.to_square, promotion=chess.QUEEN)
        return self._push(move)

    def move_san(self, san: str) -> bool:
        """Attempt a move given in SAN (ex. 'Nf3'). Malformed text raises, illegal/ambiguous moves return False."""
        try:
            move = self.board.parse_san(san)
        except chess.InvalidMoveError as exc:
            raise InvalidMoveNotationError(f"Cannot interpret {san!r} as a move.") from exc
        except (chess.IllegalMoveError, chess.AmbiguousMoveError):
            logger.debug("Rejected %s: not a legal move", san)
            return False
        return self._push(move)

    def undo(self) -> None:
        """Take back a single ply. Nothing happens if no moves were made yet."""
        if not self.board.move_stack:
            return
        undone = self.board.pop()
        self.history.pop()
        logger.info("Undid %s", undone.uci())

    # -- PRIVATE HELPERS ---
    def _push(self, move: chess.Move) -> bool:
        if not self.board.is_legal(move):
            logger.debug("Rejected %s: not a legal move", move.uci())
            return False
        self.history.append(self.fen())
        self.board.push(move)
        logger.info("Played %s", move.uci())
        return True

    def _is_promoting_pawn(self, move: chess.Move) -> bool:
        if self.board.piece_type_at(move.from_square) != chess.PAWN:
            return False
        return chess.square_rank(move.to_square) in (0, 7)

