"""The Game board implements all rules that effect the `position` (the configuration of pieces on the board)"""

from copy import deepcopy
from dataclasses import dataclass
from typing import Optional, Self

from src.xiangqi.moves import MOVEMENT_RULES, CandidateMovesFn, Move
from src.xiangqi.pieces import Color, Piece, PieceType
from src.xiangqi.square import BOARD_DIMENSIONS, Square


@dataclass
class Board:
    # only occupied squares are stored. A missing key is an empty square.
    position: dict[Square, Piece]

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the first part of a FEN string (the part that denotes the board position).

        ex. standard starting position:
        rnbakabnr/9/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/9/RNBAKABNR
        means:
        * black pieces on row 0: chariot, horse, elephant, advisor, general, advisor, elephant, horse, chariot
        * row 1 is empty
        * black cannons on row 2, in the second and eighth column
        * black soldiers on every other column of row 3
        * rows 4 and 5 are empty (the river runs in between)
        * and the mirror image for red (capital letters) on rows 6 to 9.

        NOTE: no validation here. FENState takes care of that before a board gets constructed.
        """
        position: dict[Square, Piece] = {}
        for row, fen_one_rank in enumerate(fen_str.split("/")):
            col = 0
            for character in fen_one_rank:
                if character.isalpha():
                    position[Square(row, col)] = Piece.from_fen(character)
                    col += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
        return cls(position)

    @classmethod
    def empty(cls) -> Self:
        return cls({})

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(self._rank_to_fen(row) for row in range(BOARD_DIMENSIONS[0]))

    def _rank_to_fen(self, row: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for col in range(BOARD_DIMENSIONS[1]):
            piece = self.get(row, col)

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def piece(self, square: Square) -> Optional[Piece]:
        """Empty squares and squares off the board both return None"""
        return self.position.get(square)

    def get(self, row: int, col: int) -> Optional[Piece]:
        return self.piece(Square(row, col))

    def place_piece(self, piece: Piece, square: Square) -> None:
        self.position[square] = piece

    def remove_piece(self, square: Square) -> None:
        self.position.pop(square, None)

    def locate_pieces(self, piece_type: PieceType, color: Color) -> list[Square]:
        return [
            square
            for square, piece in self.position.items()
            if piece.type == piece_type and piece.color == color
        ]

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square for square, piece in self.position.items() if piece.color == color
        ]

    def locate_general(self, color: Color) -> Optional[Square]:
        generals = self.locate_pieces(PieceType.GENERAL, color)
        return generals[0] if generals else None

    def has_general(self, color: Color) -> bool:
        return self.locate_general(color) is not None

    def generate_candidate_moves(
        self, color: Color, square: Optional[Square] = None
    ) -> list[Move]:
        """
        Before knowing the set of legal moves, we use the movement rules to find candidate moves, which will later be tested for legality
        (making sure the generals do not end up facing each other.)

        If a square is given, only the moves of the piece on that square are generated (nothing if it is not one of yours).
        """
        starting_squares = (
            self.locate_color(color) if square is None else [square]
        )
        candidate_moves: list[Move] = []
        for starting_square in starting_squares:
            piece = self.piece(starting_square)
            if piece is None or piece.color != color:
                continue
            movement_rule: CandidateMovesFn = MOVEMENT_RULES[piece.type]
            candidate_moves.extend(movement_rule(starting_square, self))
        return candidate_moves

    def generals_face_each_other(self) -> bool:
        """
        Flying general rule: both generals on the same column without any piece in between.
        False if one of the generals is missing.
        """
        red_general = self.locate_general(Color.RED)
        black_general = self.locate_general(Color.BLACK)
        if red_general is None or black_general is None:
            return False
        if red_general.col != black_general.col:
            return False

        top, bottom = sorted([red_general.row, black_general.row])
        return all(
            self.get(row, red_general.col) is None for row in range(top + 1, bottom)
        )

    def move_piece(self, move: Move) -> Optional[Piece]:
        """Update the position on the board. Returns the captured piece (if any)."""
        piece_that_moved = self.position.pop(move.from_square)
        captured = self.position.get(move.to_square)
        self.position[move.to_square] = piece_that_moved
        return captured

    def copy(self) -> Self:
        """Scratch copy to try out moves on. Never shares state with the original."""
        return deepcopy(self)
