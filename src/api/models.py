"""Requests and Response models"""

from typing import Optional, Self
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, GameKind
from src.xiangqi.square import is_valid_square

PLAYABLE_COLORS: dict[GameKind, tuple[Color, ...]] = {
    GameKind.XIANGQI: (Color.RED, Color.BLACK),
    GameKind.CHESS: (Color.WHITE, Color.BLACK),
}


def _validate_square_name(value: str) -> str:
    # covers both boards: a0-i9 for Xiangqi, a1-h8 for chess (the game itself rejects squares off its board)
    if not is_valid_square(value):
        raise InvalidRequestError(
            f"Cannot interpret {value!r} as a square name (expected a0 - i9)."
        )
    return value


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    color: Color
    starting_fen: Optional[str] = None
    kind: GameKind = GameKind.XIANGQI

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        parts = value.strip().split()
        if len(parts) not in (2, 6):
            raise InvalidRequestError(
                "FEN string must contain 6 (or 2) space-separated parts."
            )
        return value.strip()

    @model_validator(mode="after")
    def validate_color_for_kind(self) -> Self:
        if self.color not in PLAYABLE_COLORS[self.kind]:
            raise InvalidRequestError(
                f"Cannot play {self.kind} as {self.color}. Pick one from {','.join(PLAYABLE_COLORS[self.kind])}"
            )
        return self


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: Optional[str] = None

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _validate_square_name(value)


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class AIMoveRequest(BaseModel):
    game_id: UUID


class UndoRequest(BaseModel):
    game_id: UUID
    # default: take back the oracle's reply and your own move
    plies: int = Field(default=2, ge=1)


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    kind: GameKind
    player_color: Color
    fen_state: str
    starting_state: str
    move_history: list[str]
    status: str


class LegalMovesResponse(BaseModel):
    game_id: UUID
    color: Color
    legal_moves: list[str]
