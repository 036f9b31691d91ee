"""Defines the types of Xiangqi pieces"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Self


class PieceType(Enum):
    GENERAL = auto()
    ADVISOR = auto()
    ELEPHANT = auto()
    HORSE = auto()
    CHARIOT = auto()
    CANNON = auto()
    SOLDIER = auto()


class Color(Enum):
    RED = auto()
    BLACK = auto()

    def opponent(self) -> Color:
        return Color.BLACK if self == Color.RED else Color.RED


# NOTE: letters borrowed from chess FEN: b(ishop) = elephant, n = horse, r(ook) = chariot, p(awn) = soldier
FEN_TO_PIECE: dict[str, PieceType] = {
    "k": PieceType.GENERAL,
    "a": PieceType.ADVISOR,
    "b": PieceType.ELEPHANT,
    "n": PieceType.HORSE,
    "r": PieceType.CHARIOT,
    "c": PieceType.CANNON,
    "p": PieceType.SOLDIER,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Color

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # upper case: Red pieces, lower case: Black pieces
        color = Color.RED if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.RED
            else PIECE_TO_FEN[self.type]
        )
