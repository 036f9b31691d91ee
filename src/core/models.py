"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass

from src.core.shared_types import GameKind

# Type alias to make GameModel easier to read
PieceColor = str


@dataclass
class GameModel:
    """
    Transport-safe representation of a game used between API, Service, DB, and Game layers.

    `moves_played` holds coordinate notation: UCCI for Xiangqi, UCI for chess (ex. "h2e2", "e2e4").
    """

    current_fen: str
    history_fen: list[str]
    moves_played: list[str]
    player_color: PieceColor
    status: str
    kind: str = GameKind.XIANGQI.value
