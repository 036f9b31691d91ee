"""
Storage seam for the service layer.

`SQLGameRepository` (sql_repository.py) is the real thing, tests swap in a dict-backed version.
Every method speaks `GameModel`: no ORM objects cross this boundary.
"""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    def get_game(self, game_id: UUID) -> GameModel | None:
        """None if no Xiangqi game is stored under this id."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Persist a freshly started game. The repository picks the id."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Overwrite position, logs and status after a move/undo. None for an unknown id."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Returns the removed game, None for an unknown id."""
        ...
