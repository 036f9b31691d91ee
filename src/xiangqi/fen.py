"""
Representation of a single position on the board. The part that can be encoded in a FEN string.
"""

from dataclasses import dataclass
from typing import Self

from src.core.exceptions import InvalidFENError
from src.xiangqi.pieces import FEN_TO_PIECE, Color
from src.xiangqi.square import BOARD_DIMENSIONS

STARTING_FEN = (
    "rnbakabnr/9/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/9/RNBAKABNR w - - 0 1"
)

# Xiangqi has no castling / en passant / move clocks to track. Fields are kept so the string stays compatible with chess-style FEN readers.
PLACEHOLDER_FIELDS = "- - 0 1"

COLOR_CODES: dict[str, Color] = {"w": Color.RED, "b": Color.BLACK}
COLOR_TO_CODE: dict[Color, str] = {value: key for key, value in COLOR_CODES.items()}


def is_valid_fen(fen: str) -> bool:
    """
    Check if given string follows Xiangqi FEN notation.

    Accepts either the full 6 fields, or the board + side to move only.
    The trailing four fields are placeholders and their content is not checked.
    """
    parts = fen.split()
    if len(parts) not in (2, 6):
        return False

    position, color = parts[0], parts[1]
    if not is_valid_position(position):
        return False

    if not is_valid_color_code(color):
        return False
    return True


def is_valid_position(position: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    num_rows, num_cols = BOARD_DIMENSIONS
    rank_fens = position.split("/")
    if len(rank_fens) != num_rows:
        return False

    for rank_fen in rank_fens:
        col_count = 0
        previous_was_digit = False
        for character in rank_fen:
            # make sure every character is valid
            if character.isdigit() and character.isascii():
                # a run of empty cells is a single digit 1-9
                if character == "0" or previous_was_digit:
                    return False
                col_count += int(character)
                previous_was_digit = True
                continue
            previous_was_digit = False
            if character.lower() in FEN_TO_PIECE:
                col_count += 1
            else:
                return False

        # make sure you are creating a correctly sized board
        if col_count != num_cols:
            return False
    return True


def is_valid_color_code(color: str) -> bool:
    """NOTE: 'w' stands for red. Naming borrowed from chess FEN, where white moves first."""
    return color in COLOR_CODES


@dataclass
class FENState:
    """
    Data that can be constructed from a FEN string.
    ----

    <board position string> <active color> - - 0 1

    * The board is described rank by rank, from black's back rank (row 0) down to red's back rank (row 9), separated by slashes.
      Within a rank, letters denote pieces (upper case red, lower case black) and digits a run of empty squares.
    * The active color is "w" (red) or "b" (black)
    * The last four fields are always "- - 0 1"

    ex) The standard starting position has a FEN
    rnbakabnr/9/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/9/RNBAKABNR w - - 0 1
    """

    position: str
    color_to_move: Color

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Parse the FEN into data"""

        # raise an exception if invalid FEN:
        if not is_valid_fen(fen):
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen}")

        position, active_color = fen.split()[:2]
        return cls(position, COLOR_CODES[active_color])

    def to_fen(self) -> str:
        """reverse operation: write a FEN from the given data"""
        return f"{self.position} {COLOR_TO_CODE[self.color_to_move]} {PLACEHOLDER_FIELDS}"

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)
