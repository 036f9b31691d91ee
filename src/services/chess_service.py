"""Orchestration of communication from API router to the chess game (python-chess), AI oracle, and persistence layers."""

import logging
from uuid import UUID

import chess

from src.api.models import (
    AIMoveRequest,
    CreateGameRequest,
    GameResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    UndoRequest,
)
from src.chess_game.game import COLOR_NAMES, ChessGame
from src.core.exceptions import IllegalMoveError
from src.core.shared_types import Color, GameKind
from src.services.base import GameService

logger = logging.getLogger(__name__)


class ChessService(GameService):
    """
    Chess against the AI oracle.

    The human sends coordinates (from/to squares), the oracle answers in SAN: both get checked by python-chess before anything is stored.
    """

    kind = GameKind.CHESS

    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        new_game = ChessGame.new_game(
            player_color=COLOR_NAMES[request.color.value],
            starting_fen=request.starting_fen,
        )
        return self._create_and_respond(new_game.to_model(), request.color)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        game = self._load(request.game_id)
        self._assert_players_turn(game)
        return LegalMovesResponse(
            game_id=request.game_id,
            color=Color(chess.COLOR_NAMES[game.player_color]),
            legal_moves=[move.uci() for move in game.legal_moves(request.square)],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Pawns reaching the last rank are promoted to a queen."""
        game = self._load(request.game_id)
        self._assert_players_turn(game)

        uci = f"{request.from_square}{request.to_square}"
        if not game.move_uci(uci):
            raise IllegalMoveError(f"Move not allowed: {uci}")
        return self._store_and_respond(request.game_id, game.to_model())

    def request_ai_move(self, request: AIMoveRequest) -> GameResponse:
        """Same flow as for Xiangqi, except that the oracle reads and writes SAN."""
        game = self._load(request.game_id)
        self._assert_in_progress(game.is_game_over(), game.status)
        self._assert_turn(
            chess.COLOR_NAMES[game.color_to_move], chess.COLOR_NAMES[game.ai_color]
        )

        suggestion = self.oracle.suggest_move(
            GameKind.CHESS,
            game.fen(),
            game.san_history(),
            "w" if game.ai_color == chess.WHITE else "b",
        )

        current = ChessGame.from_model(
            self._check_suggestion_is_current(request.game_id, suggestion)
        )
        if not current.move_san(suggestion.move):
            logger.warning("Oracle attempted illegal move %r", suggestion.move)
            raise IllegalMoveError(f"Oracle suggested an illegal move: {suggestion.move}")

        return self._store_and_respond(request.game_id, current.to_model())

    def undo(self, request: UndoRequest) -> GameResponse:
        game = self._load(request.game_id)
        for _ in range(request.plies):
            game.undo()
        return self._store_and_respond(request.game_id, game.to_model())

    # -- Internal helpers --
    def _load(self, game_id: UUID) -> ChessGame:
        return ChessGame.from_model(self._fetch_game(game_id))

    def _assert_players_turn(self, game: ChessGame) -> None:
        self._assert_in_progress(game.is_game_over(), game.status)
        self._assert_turn(
            chess.COLOR_NAMES[game.color_to_move], chess.COLOR_NAMES[game.player_color]
        )
