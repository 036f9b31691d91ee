"""Pick the service for a game mode, or for a stored game (by looking up its kind)."""

from uuid import UUID

from src.core.exceptions import RepositoryError
from src.core.shared_types import GameKind
from src.db.repository import GameRepository
from src.oracle.client import MoveOracle
from src.services.base import GameService
from src.services.chess_service import ChessService
from src.services.xiangqi_service import XiangqiService


class GameServices:
    def __init__(self, repository: GameRepository, oracle: MoveOracle) -> None:
        self.repo = repository
        self._services: dict[GameKind, GameService] = {
            GameKind.XIANGQI: XiangqiService(repository, oracle),
            GameKind.CHESS: ChessService(repository, oracle),
        }

    def for_kind(self, kind: GameKind) -> GameService:
        return self._services[kind]

    def for_game(self, game_id: UUID) -> GameService:
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return self._services[GameKind(game_model.kind)]
