"""Parts of the service layer every game mode shares: repository access and response building."""

import logging
from abc import ABC, abstractmethod
from uuid import UUID

from src.api.models import (
    AIMoveRequest,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    UndoRequest,
)
from src.core.exceptions import (
    GameStateError,
    NotYourTurnError,
    RepositoryError,
    StaleSuggestionError,
)
from src.core.models import GameModel
from src.core.shared_types import Color, GameKind
from src.db.repository import GameRepository
from src.oracle.client import MoveOracle, OracleSuggestion

logger = logging.getLogger(__name__)


class GameService(ABC):
    """A human against the AI oracle, for one game mode (`kind`)."""

    kind: GameKind

    def __init__(self, repository: GameRepository, oracle: MoveOracle) -> None:
        self.repo = repository
        self.oracle = oracle

    # -- API routes logic ---
    @abstractmethod
    def create_new_game(self, request: CreateGameRequest) -> GameResponse: ...

    @abstractmethod
    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse: ...

    @abstractmethod
    def make_move(self, request: MoveRequest) -> GameResponse: ...

    @abstractmethod
    def request_ai_move(self, request: AIMoveRequest) -> GameResponse: ...

    @abstractmethod
    def undo(self, request: UndoRequest) -> GameResponse: ...

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game_model = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game_model)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        self.repo.delete_game(request.game_id)

    # -- Internal helpers --
    def _create_and_respond(self, created: GameModel, color: Color) -> GameResponse:
        stored_game, game_id = self.repo.create_game(created)
        logger.info("Created %s game %s (player: %s)", self.kind, game_id, color)
        return self._create_game_response(game_id, stored_game)

    def _store_and_respond(self, game_id: UUID, updated: GameModel) -> GameResponse:
        self.repo.update_game(game_id, updated)
        return self._create_game_response(game_id, updated)

    def _check_suggestion_is_current(
        self, game_id: UUID, suggestion: OracleSuggestion
    ) -> GameModel:
        """Re-read the game after the oracle answered. Returns the fresh model if the position is still the one the oracle saw."""
        current = self._fetch_game(game_id)
        if current.current_fen != suggestion.fen:
            logger.warning(
                "Discarding oracle move %r for game %s: position changed",
                suggestion.move,
                game_id,
            )
            raise StaleSuggestionError(
                "The position changed while the oracle was thinking. Request a new move."
            )
        return current

    def _assert_in_progress(self, is_game_over: bool, status: str) -> None:
        if is_game_over:
            raise GameStateError(f"Game is not in progress. status: {status}")

    def _assert_turn(self, to_move: str, expected: str) -> None:
        if to_move != expected:
            raise NotYourTurnError(
                f"It is not {expected}'s turn. Waiting for {to_move} to move first."
            )

    def _create_game_response(self, game_id: UUID, model: GameModel) -> GameResponse:
        """Convert info in GameModel to a GameResponse (for game with given ID.)"""

        # Before the first move gets played, the starting FEN equals the current FEN. Otherwise get it as first recorded FEN in history.
        starting_fen = (
            model.history_fen[0] if len(model.history_fen) > 0 else model.current_fen
        )
        return GameResponse(
            game_id=game_id,
            kind=GameKind(model.kind),
            player_color=Color(model.player_color),
            fen_state=model.current_fen,
            starting_state=starting_fen,
            move_history=model.moves_played,
            status=model.status,
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        if game_model.kind != self.kind:
            raise GameStateError(
                f"Game {game_id} is a {game_model.kind} game, not {self.kind}."
            )
        return game_model
