"""Orchestration of communication from API router to the Xiangqi rules engine, AI oracle, and persistence layers (and the reverse direction)."""

import logging
from uuid import UUID

from src.api.models import (
    AIMoveRequest,
    CreateGameRequest,
    GameResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    UndoRequest,
)
from src.core.exceptions import IllegalMoveError
from src.core.shared_types import Color, GameKind
from src.services.base import GameService
from src.xiangqi.fen import COLOR_TO_CODE
from src.xiangqi.game import Game
from src.xiangqi.moves import Move
from src.xiangqi.pieces import Color as PieceColor
from src.xiangqi.square import Square

logger = logging.getLogger(__name__)


def color_name(color: PieceColor) -> str:
    return color.name.lower()


class XiangqiService(GameService):
    """Orchestration of layers for a Xiangqi game: a human against the AI oracle."""

    kind = GameKind.XIANGQI

    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Player requested a new game, playing with the pieces of the requested color."""
        new_game = Game.new_game(
            player_color=PieceColor[request.color.name],
            starting_fen=request.starting_fen,
        )
        return self._create_and_respond(new_game.to_model(), request.color)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Retrieve the set of legal moves of the human player (for a single piece if a square is given)."""
        game = self._load(request.game_id)
        self._assert_players_turn(game)

        square = Square.from_ucci(request.square) if request.square else None
        return LegalMovesResponse(
            game_id=request.game_id,
            color=Color[game.player_color.name],
            legal_moves=[move.to_ucci() for move in game.legal_moves(square)],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt on behalf of the human player."""
        game = self._load(request.game_id)
        self._assert_players_turn(game)

        move = Move(
            Square.from_ucci(request.from_square), Square.from_ucci(request.to_square)
        )
        if not game.move(move):
            raise IllegalMoveError(f"Move not allowed: {move.to_ucci()}")

        return self._store_and_respond(request.game_id, game.to_model())

    def request_ai_move(self, request: AIMoveRequest) -> GameResponse:
        """
        Let the oracle play its move
        ----

        1. Ask the oracle for a move in the current position (the answer is tagged with the FEN it was asked for)
        2. Re-read the game: if the position moved on in the meantime (ex. an undo), the answer is discarded
        3. Parse + validate the move through the rules engine before it is played

        Nothing gets stored if any step fails.
        """
        game = self._load(request.game_id)
        self._assert_in_progress(game.is_game_over(), game.status)
        self._assert_turn(color_name(game.color_to_move), color_name(game.ai_color))

        suggestion = self.oracle.suggest_move(
            GameKind.XIANGQI,
            game.fen(),
            [move.to_ucci() for move in game.moves],
            COLOR_TO_CODE[game.ai_color],
        )

        current = Game.from_model(
            self._check_suggestion_is_current(request.game_id, suggestion)
        )
        if not current.move_ucci(suggestion.move):
            logger.warning("Oracle attempted illegal move %r", suggestion.move)
            raise IllegalMoveError(f"Oracle suggested an illegal move: {suggestion.move}")

        return self._store_and_respond(request.game_id, current.to_model())

    def undo(self, request: UndoRequest) -> GameResponse:
        """Take back `plies` single moves. Stops early once the history is exhausted."""
        game = self._load(request.game_id)
        for _ in range(request.plies):
            game.undo()
        return self._store_and_respond(request.game_id, game.to_model())

    # -- Internal helpers --
    def _load(self, game_id: UUID) -> Game:
        return Game.from_model(self._fetch_game(game_id))

    def _assert_players_turn(self, game: Game) -> None:
        self._assert_in_progress(game.is_game_over(), game.status)
        self._assert_turn(color_name(game.color_to_move), color_name(game.player_color))
