"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    GAME_OVER = "game over"


# --- NOTE: src/xiangqi/pieces.py defines its own Color for the domain layer. This version is the transport-safe one (plain strings).


class Color(StrEnum):
    RED = "red"
    BLACK = "black"
    WHITE = "white"  # chess only


class GameKind(StrEnum):
    """Game modes. Xiangqi rules live in src/xiangqi, chess rules come from python-chess."""

    CHESS = "chess"
    XIANGQI = "xiangqi"
