"""
Click handling for a human player: select one of your pieces, then select where it should go.

Two states:
* AWAITING_SELECTION: nothing selected
* PIECE_SELECTED: one of your pieces is selected, its legal destinations are known (for highlighting)

Meant for a board client (UI) driving a Game directly. The HTTP backend takes complete moves instead
(`POST /games/{id}/moves`), so nothing in the service layer uses it.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from src.xiangqi.game import Game
from src.xiangqi.moves import Move
from src.xiangqi.square import Square


class SelectionState(Enum):
    AWAITING_SELECTION = auto()
    PIECE_SELECTED = auto()


@dataclass
class Selection:
    game: Game
    selected: Optional[Square] = None
    destinations: list[Square] = field(default_factory=list)

    @property
    def state(self) -> SelectionState:
        if self.selected is None:
            return SelectionState.AWAITING_SELECTION
        return SelectionState.PIECE_SELECTED

    def click(self, square: Square) -> Optional[Move]:
        """
        Handle a click on a square. Returns the move if one got played.

        * Clicks are ignored while it is not the human's turn, or when the game is over.
        * Clicking one of your own pieces (re)selects it, as long as it has somewhere to go.
        * Clicking a highlighted destination plays the move.
        * Anything else clears the selection.
        """
        game = self.game
        if game.is_game_over() or game.color_to_move != game.player_color:
            return None

        piece = game.board.piece(square)
        if piece is not None and piece.color == game.player_color:
            destinations = game.destinations(square)
            if destinations:
                self.selected = square
                self.destinations = destinations
            else:
                self.clear()
            return None

        if self.selected is not None and square in self.destinations:
            move = Move(self.selected, square)
            self.clear()
            return move if game.move(move) else None

        self.clear()
        return None

    def clear(self) -> None:
        self.selected = None
        self.destinations = []
