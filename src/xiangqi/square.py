"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.exceptions import InvalidMoveNotationError
from src.xiangqi.pieces import Color

# Xiangqi board: 10 rows (ranks) x 9 columns (files). Row 0 is black's back rank.
BOARD_DIMENSIONS = (10, 9)
FILE_NAMES = "abcdefghi"

# Palaces share the same 3 files, rows depend on the color
PALACE_COLUMNS = range(3, 6)
PALACE_ROWS: dict[Color, range] = {
    Color.RED: range(7, 10),
    Color.BLACK: range(0, 3),
}

# The river runs between row 4 and row 5
OWN_SIDE_ROWS: dict[Color, range] = {
    Color.RED: range(5, 10),
    Color.BLACK: range(0, 5),
}


def is_valid_square(square: str) -> bool:
    """Valid square should be a file letter a-i + a single rank digit 0-9"""
    if len(square) != 2:
        return False
    file_char, rank_char = square[0], square[1]
    return file_char in FILE_NAMES and rank_char.isdigit() and rank_char.isascii()


@dataclass(frozen=True)
class Square:
    row: int
    col: int

    @classmethod
    def from_ucci(cls, sq: str) -> Square:
        """UCCI notation: 'a0' is the bottom left corner from red's point of view (row 9, col 0), 'i9' the top right (row 0, col 8)"""
        if not is_valid_square(sq):
            raise InvalidMoveNotationError(f"Cannot interpret {sq!r} as a square.")
        col = FILE_NAMES.index(sq[0])
        row = BOARD_DIMENSIONS[0] - 1 - int(sq[1])
        return cls(row, col)

    def to_ucci(self) -> str:
        return f"{FILE_NAMES[self.col]}{BOARD_DIMENSIONS[0] - 1 - self.row}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.col < BOARD_DIMENSIONS[1]
        )

    def is_in_palace(self, color: Color) -> bool:
        return self.row in PALACE_ROWS[color] and self.col in PALACE_COLUMNS

    def is_on_own_side(self, color: Color) -> bool:
        """True if the square has not crossed the river (as seen from the given color)"""
        return self.row in OWN_SIDE_ROWS[color]

    def offset(self, d_row: int, d_col: int) -> Square:
        return Square(self.row + d_row, self.col + d_col)
