"""GameRepository backed by a SQLAlchemy session (one row per game in the `games` table)"""

from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import GameModel
from src.db.schema import DBGame


class SQLGameRepository:
    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        row = self._fetch_row(game_id)
        return self._to_model(row) if row is not None else None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        new_id = uuid4()
        row = DBGame(id=new_id)
        self._copy_into(row, game)
        self.db.add(row)
        self._commit(row)
        return self._to_model(row), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        row = self._fetch_row(game_id)
        if row is None:
            return None
        self._copy_into(row, game)
        self._commit(row)
        return self._to_model(row)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        row = self._fetch_row(game_id)
        if row is None:
            return None
        removed = self._to_model(row)
        self.db.delete(row)
        self.db.commit()
        return removed

    # --- helpers ---
    def _fetch_row(self, game_id: UUID) -> DBGame | None:
        return self.db.scalar(select(DBGame).where(DBGame.id == game_id))

    def _commit(self, row: DBGame) -> None:
        self.db.commit()
        self.db.refresh(row)

    @staticmethod
    def _copy_into(row: DBGame, game: GameModel) -> None:
        # JSON columns only notice reassignment, never in-place mutation: always hand over fresh lists
        row.current_fen = game.current_fen
        row.history_fen = list(game.history_fen)
        row.moves_played = list(game.moves_played)
        row.player_color = game.player_color
        row.status = game.status
        row.kind = game.kind

    @staticmethod
    def _to_model(row: DBGame) -> GameModel:
        return GameModel(
            current_fen=row.current_fen,
            history_fen=list(row.history_fen),
            moves_played=list(row.moves_played),
            player_color=row.player_color,
            status=row.status,
            kind=row.kind,
        )
