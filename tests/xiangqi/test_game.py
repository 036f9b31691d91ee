"""Unit tests for /src/xiangqi/game.py"""

import pytest

from src.core.exceptions import GameStateError, InvalidFENError, InvalidMoveNotationError
from src.core.models import GameModel
from src.core.shared_types import Status
from src.xiangqi.fen import STARTING_FEN
from src.xiangqi.game import Game
from src.xiangqi.moves import Move
from src.xiangqi.pieces import Color, Piece, PieceType
from src.xiangqi.square import Square

AFTER_CENTRAL_CANNON = (
    "rnbakabnr/9/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C2C4/9/RNBAKABNR b - - 0 1"
)


@pytest.fixture
def game() -> Game:
    return Game.new_game()


# --- SETUP ---
def test_new_game(game: Game) -> None:
    assert game.fen() == STARTING_FEN
    assert game.color_to_move == Color.RED
    assert game.moves == []
    assert game.history == []
    assert game.status == Status.IN_PROGRESS
    assert game.winner is None


def test_new_game_from_short_fen() -> None:
    """Board + side to move is enough, the placeholder fields get added"""
    game = Game.new_game(starting_fen="4k4/9/9/9/9/9/9/9/9/4K4 b")
    assert game.fen() == "4k4/9/9/9/9/9/9/9/9/4K4 b - - 0 1"
    assert game.color_to_move == Color.BLACK


def test_new_game_from_invalid_fen() -> None:
    with pytest.raises(InvalidFENError):
        Game.new_game(starting_fen="4k4/9/9/9/9/9/9/9/9/4K5 w")


def test_ai_plays_the_other_color() -> None:
    game = Game.new_game(player_color=Color.BLACK)
    assert game.player_color == Color.BLACK
    assert game.ai_color == Color.RED


def test_get(game: Game) -> None:
    assert game.get(9, 4) == Piece(PieceType.GENERAL, Color.RED)
    assert game.get(0, 4) == Piece(PieceType.GENERAL, Color.BLACK)
    assert game.get(4, 4) is None
    # off the board behaves like an empty square
    assert game.get(10, 0) is None
    assert game.get(0, -1) is None


# --- LEGAL MOVES ---
def test_opening_move_count(game: Game) -> None:
    """
    Red has 44 moves in the starting position:
    chariots 4, horses 4, elephants 4, advisors 2, general 1, cannons 24, soldiers 5
    """
    assert len(game.legal_moves()) == 44


def test_legal_moves_of_horse(game: Game) -> None:
    assert set(game.destinations(Square(9, 1))) == {Square(7, 0), Square(7, 2)}


def test_legal_moves_of_empty_or_opponent_square(game: Game) -> None:
    """Not an error: there is simply nothing to move"""
    assert game.legal_moves(Square(4, 4)) == []
    assert game.legal_moves(Square(0, 1)) == []


def test_flying_general_pins_piece_in_between() -> None:
    """The chariot on e1 is the only piece between the generals: it may move along the file, not off it"""
    game = Game.new_game(starting_fen="4k4/9/9/9/9/9/9/9/4R4/4K4 w")
    chariot_moves = {move.to_ucci() for move in game.legal_moves(Square(8, 4))}
    assert "e1e5" in chariot_moves
    assert "e1e9" in chariot_moves
    assert "e1d1" not in chariot_moves
    assert "e1a1" not in chariot_moves


def test_general_cannot_step_onto_open_file() -> None:
    game = Game.new_game(starting_fen="3k5/9/9/9/9/9/9/9/9/4K4 w")
    general_moves = {move.to_ucci() for move in game.legal_moves(Square(9, 4))}
    assert general_moves == {"e0e1", "e0f0"}


# --- MOVE ---
def test_move(game: Game) -> None:
    assert game.move(Move.from_ucci("h2e2"))
    assert game.fen() == AFTER_CENTRAL_CANNON
    assert game.color_to_move == Color.BLACK
    assert game.history == [STARTING_FEN]
    assert game.moves == [Move(Square(7, 7), Square(7, 4))]


def test_consecutive_moves(game: Game) -> None:
    assert game.move_ucci("h2e2")
    assert game.move_ucci("h7e7")
    assert game.move_ucci("h0g2")
    assert [move.to_ucci() for move in game.moves] == ["h2e2", "h7e7", "h0g2"]
    assert game.history[0] == STARTING_FEN
    assert game.history[1] == AFTER_CENTRAL_CANNON
    assert len(game.history) == 3
    assert game.color_to_move == Color.BLACK


@pytest.mark.parametrize(
    "ucci",
    [
        "h2g4",  # cannon does not move diagonally
        "h7e7",  # black piece, red to move
        "e4e5",  # nothing on e4
        "a0a5",  # chariot blocked by its own soldier
    ],
)
def test_illegal_move_leaves_game_untouched(game: Game, ucci: str) -> None:
    assert not game.move_ucci(ucci)
    assert game.fen() == STARTING_FEN
    assert game.history == []
    assert game.moves == []


def test_malformed_move(game: Game) -> None:
    with pytest.raises(InvalidMoveNotationError):
        game.move_ucci("cannon to e2")
    assert game.fen() == STARTING_FEN


def test_capture(game: Game) -> None:
    """Cannon takes the horse over the screen on h7"""
    assert game.move_ucci("h2h9")
    assert game.get(0, 7) == Piece(PieceType.CANNON, Color.RED)
    assert game.get(7, 7) is None


def test_capturing_the_general_ends_the_game() -> None:
    game = Game.new_game(starting_fen="4k4/9/9/9/9/9/9/9/9/r2K5 b")
    assert game.status == Status.IN_PROGRESS

    assert game.move_ucci("a0d0")
    assert game.is_game_over()
    assert game.status == Status.GAME_OVER
    assert game.winner == Color.BLACK


# --- UNDO / LOAD ---
def test_undo(game: Game) -> None:
    game.move_ucci("h2e2")
    game.undo()
    assert game.fen() == STARTING_FEN
    assert game.color_to_move == Color.RED
    assert game.history == []
    assert game.moves == []


def test_undo_single_ply(game: Game) -> None:
    game.move_ucci("h2e2")
    game.move_ucci("h7e7")
    game.undo()
    assert game.fen() == AFTER_CENTRAL_CANNON
    assert [move.to_ucci() for move in game.moves] == ["h2e2"]


def test_undo_without_moves(game: Game) -> None:
    game.undo()
    assert game.fen() == STARTING_FEN


def test_undo_restores_captured_general() -> None:
    game = Game.new_game(starting_fen="4k4/9/9/9/9/9/9/9/9/r2K5 b")
    game.move_ucci("a0d0")
    game.undo()
    assert not game.is_game_over()
    assert game.get(9, 3) == Piece(PieceType.GENERAL, Color.RED)


def test_load_keeps_history(game: Game) -> None:
    game.move_ucci("h2e2")
    game.load(STARTING_FEN)
    assert game.fen() == STARTING_FEN
    assert game.history == [STARTING_FEN]
    assert len(game.moves) == 1


def test_load_invalid_fen(game: Game) -> None:
    with pytest.raises(InvalidFENError):
        game.load("not a fen")
    assert game.fen() == STARTING_FEN


# --- TRANSPORT MODEL ---
def test_model_round_trip(game: Game) -> None:
    game.move_ucci("h2e2")
    model = game.to_model()
    assert model == GameModel(
        current_fen=AFTER_CENTRAL_CANNON,
        history_fen=[STARTING_FEN],
        moves_played=["h2e2"],
        player_color="red",
        status="in progress",
    )

    restored = Game.from_model(model)
    assert restored.fen() == game.fen()
    assert restored.moves == game.moves
    assert restored.history == game.history
    assert restored.player_color == Color.RED


def test_from_model_with_unknown_color() -> None:
    model = GameModel(
        current_fen=STARTING_FEN,
        history_fen=[],
        moves_played=[],
        player_color="green",
        status="in progress",
    )
    with pytest.raises(GameStateError):
        Game.from_model(model)
