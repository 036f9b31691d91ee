"""Unit tests for src/services/xiangqi_service.py"""

from uuid import UUID, uuid4

import chess
import pytest

from src.api.models import (
    AIMoveRequest,
    CreateGameRequest,
    DeleteGameRequest,
    GetGameRequest,
    LegalMovesRequest,
    MoveRequest,
    UndoRequest,
)
from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    InvalidFENError,
    InvalidMoveNotationError,
    NotYourTurnError,
    RepositoryError,
    StaleSuggestionError,
)
from src.core.models import GameModel
from src.core.shared_types import Color, GameKind, Status
from src.services.xiangqi_service import XiangqiService
from src.xiangqi.fen import STARTING_FEN
from tests.conftest import FakeOracle, MockRepository

AFTER_CENTRAL_CANNON = (
    "rnbakabnr/9/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C2C4/9/RNBAKABNR b - - 0 1"
)


@pytest.fixture
def service(mock_repository: MockRepository, fake_oracle: FakeOracle) -> XiangqiService:
    return XiangqiService(mock_repository, fake_oracle)


def new_game_id(
    service: XiangqiService, color: Color = Color.RED, starting_fen: str | None = None
) -> UUID:
    response = service.create_new_game(
        CreateGameRequest(color=color, starting_fen=starting_fen)
    )
    return response.game_id


# --- SERVICE - CREATE / GET / DELETE ----
def test_create_a_new_game(
    service: XiangqiService, mock_repository: MockRepository
) -> None:
    """Check that new game is created, persisted in repo, and return has the appropriate information."""
    response = service.create_new_game(CreateGameRequest(color=Color.RED))

    assert response.kind == GameKind.XIANGQI
    assert response.player_color == Color.RED
    assert response.fen_state == STARTING_FEN
    assert response.starting_state == STARTING_FEN
    assert response.move_history == []
    assert response.status == Status.IN_PROGRESS

    stored = mock_repository.get_game(response.game_id)
    assert stored is not None
    assert stored.current_fen == STARTING_FEN
    assert stored.player_color == "red"


def test_create_game_from_fen(service: XiangqiService) -> None:
    response = service.create_new_game(
        CreateGameRequest(color=Color.BLACK, starting_fen="4k4/9/9/9/9/9/9/9/9/4K4 b")
    )
    assert response.fen_state == "4k4/9/9/9/9/9/9/9/9/4K4 b - - 0 1"
    assert response.player_color == Color.BLACK


def test_create_game_from_invalid_fen(
    service: XiangqiService, mock_repository: MockRepository
) -> None:
    """Structurally fine (2 fields), but the board does not add up"""
    with pytest.raises(InvalidFENError):
        service.create_new_game(
            CreateGameRequest(color=Color.RED, starting_fen="4k4/9/9 w")
        )
    assert mock_repository._games == {}


def test_get_game_state(service: XiangqiService) -> None:
    game_id = new_game_id(service)
    response = service.get_game_state(GetGameRequest(game_id=game_id))
    assert response.game_id == game_id
    assert response.fen_state == STARTING_FEN


def test_get_unknown_game(service: XiangqiService) -> None:
    with pytest.raises(RepositoryError):
        service.get_game_state(GetGameRequest(game_id=uuid4()))


def test_delete_game(service: XiangqiService) -> None:
    game_id = new_game_id(service)
    service.delete_game(DeleteGameRequest(game_id=game_id))
    with pytest.raises(RepositoryError):
        service.get_game_state(GetGameRequest(game_id=game_id))


# --- SERVICE - LEGAL MOVES ----
def test_legal_moves(service: XiangqiService) -> None:
    game_id = new_game_id(service)
    response = service.legal_moves(LegalMovesRequest(game_id=game_id))
    assert response.color == Color.RED
    assert len(response.legal_moves) == 44


def test_legal_moves_of_single_piece(service: XiangqiService) -> None:
    game_id = new_game_id(service)
    response = service.legal_moves(LegalMovesRequest(game_id=game_id, square="b0"))
    assert set(response.legal_moves) == {"b0a2", "b0c2"}


def test_legal_moves_on_ai_turn(service: XiangqiService) -> None:
    game_id = new_game_id(service, color=Color.BLACK)
    with pytest.raises(NotYourTurnError):
        service.legal_moves(LegalMovesRequest(game_id=game_id))


# --- SERVICE - MAKE MOVE ----
def test_make_move(service: XiangqiService) -> None:
    game_id = new_game_id(service)
    response = service.make_move(
        MoveRequest(game_id=game_id, from_square="h2", to_square="e2")
    )
    assert response.fen_state == AFTER_CENTRAL_CANNON
    assert response.starting_state == STARTING_FEN
    assert response.move_history == ["h2e2"]


def test_make_illegal_move(
    service: XiangqiService, mock_repository: MockRepository
) -> None:
    game_id = new_game_id(service)
    with pytest.raises(IllegalMoveError):
        service.make_move(MoveRequest(game_id=game_id, from_square="h2", to_square="g4"))

    stored = mock_repository.get_game(game_id)
    assert stored is not None
    assert stored.current_fen == STARTING_FEN
    assert stored.moves_played == []


def test_make_move_twice_in_a_row(service: XiangqiService) -> None:
    game_id = new_game_id(service)
    service.make_move(MoveRequest(game_id=game_id, from_square="h2", to_square="e2"))
    with pytest.raises(NotYourTurnError):
        service.make_move(
            MoveRequest(game_id=game_id, from_square="b0", to_square="c2")
        )


def test_make_move_when_game_is_over(service: XiangqiService) -> None:
    game_id = new_game_id(service, starting_fen="4k4/9/9/9/9/9/9/9/9/R8 w")
    assert service.get_game_state(GetGameRequest(game_id=game_id)).status == Status.GAME_OVER
    with pytest.raises(GameStateError):
        service.make_move(MoveRequest(game_id=game_id, from_square="a0", to_square="a1"))


# --- SERVICE - AI MOVE ----
def test_ai_move(service: XiangqiService, fake_oracle: FakeOracle) -> None:
    game_id = new_game_id(service)
    service.make_move(MoveRequest(game_id=game_id, from_square="h2", to_square="e2"))

    fake_oracle.replies = ["h7e7"]
    response = service.request_ai_move(AIMoveRequest(game_id=game_id))

    assert response.move_history == ["h2e2", "h7e7"]
    assert fake_oracle.calls == [
        (GameKind.XIANGQI, AFTER_CENTRAL_CANNON, ["h2e2"], "b")
    ]


def test_ai_opens_when_player_is_black(
    service: XiangqiService, fake_oracle: FakeOracle
) -> None:
    game_id = new_game_id(service, color=Color.BLACK)
    fake_oracle.replies = ["h2e2"]
    response = service.request_ai_move(AIMoveRequest(game_id=game_id))

    assert response.fen_state == AFTER_CENTRAL_CANNON
    assert fake_oracle.calls == [(GameKind.XIANGQI, STARTING_FEN, [], "w")]


def test_ai_move_on_players_turn(
    service: XiangqiService, fake_oracle: FakeOracle
) -> None:
    game_id = new_game_id(service)
    with pytest.raises(NotYourTurnError):
        service.request_ai_move(AIMoveRequest(game_id=game_id))
    assert fake_oracle.calls == []


def test_ai_suggests_illegal_move(
    service: XiangqiService, fake_oracle: FakeOracle, mock_repository: MockRepository
) -> None:
    """The black chariot on a9 is blocked by its own soldier on a6"""
    game_id = new_game_id(service)
    service.make_move(MoveRequest(game_id=game_id, from_square="h2", to_square="e2"))

    fake_oracle.replies = ["a9a5"]
    with pytest.raises(IllegalMoveError):
        service.request_ai_move(AIMoveRequest(game_id=game_id))

    stored = mock_repository.get_game(game_id)
    assert stored is not None
    assert stored.current_fen == AFTER_CENTRAL_CANNON


def test_ai_reply_is_not_a_move(
    service: XiangqiService, fake_oracle: FakeOracle
) -> None:
    game_id = new_game_id(service)
    service.make_move(MoveRequest(game_id=game_id, from_square="h2", to_square="e2"))

    fake_oracle.replies = ["Cannon"]
    with pytest.raises(InvalidMoveNotationError):
        service.request_ai_move(AIMoveRequest(game_id=game_id))


def test_stale_ai_reply_is_discarded(
    service: XiangqiService, fake_oracle: FakeOracle, mock_repository: MockRepository
) -> None:
    """The player takes back their move while the oracle is thinking"""
    game_id = new_game_id(service)
    service.make_move(MoveRequest(game_id=game_id, from_square="h2", to_square="e2"))

    fake_oracle.replies = ["h7e7"]
    fake_oracle.on_call = lambda: service.undo(UndoRequest(game_id=game_id, plies=1))
    with pytest.raises(StaleSuggestionError):
        service.request_ai_move(AIMoveRequest(game_id=game_id))

    stored = mock_repository.get_game(game_id)
    assert stored is not None
    assert stored.current_fen == STARTING_FEN
    assert stored.moves_played == []


# --- SERVICE - UNDO ----
def test_undo_move_pair(service: XiangqiService, fake_oracle: FakeOracle) -> None:
    game_id = new_game_id(service)
    service.make_move(MoveRequest(game_id=game_id, from_square="h2", to_square="e2"))
    fake_oracle.replies = ["h7e7"]
    service.request_ai_move(AIMoveRequest(game_id=game_id))

    response = service.undo(UndoRequest(game_id=game_id))
    assert response.fen_state == STARTING_FEN
    assert response.move_history == []


def test_undo_more_than_played(service: XiangqiService) -> None:
    game_id = new_game_id(service)
    service.make_move(MoveRequest(game_id=game_id, from_square="h2", to_square="e2"))

    response = service.undo(UndoRequest(game_id=game_id, plies=5))
    assert response.fen_state == STARTING_FEN
    assert response.move_history == []


def test_undo_unknown_game(service: XiangqiService) -> None:
    with pytest.raises(RepositoryError):
        service.undo(UndoRequest(game_id=uuid4()))


def test_chess_game_is_not_loaded_as_xiangqi(
    service: XiangqiService, mock_repository: MockRepository
) -> None:
    _, game_id = mock_repository.create_game(
        GameModel(
            current_fen=chess.STARTING_FEN,
            history_fen=[],
            moves_played=[],
            player_color="white",
            status=Status.IN_PROGRESS.value,
            kind=GameKind.CHESS.value,
        )
    )
    with pytest.raises(GameStateError):
        service.get_game_state(GetGameRequest(game_id=game_id))
