"""
FastAPI application.

Routes are thin: parse the request, call the service, return its response.
GameErrors raised by any layer are translated into HTTP error responses in one place.

NOTE: sync handlers on purpose. FastAPI runs them in a thread pool, which suits the blocking oracle call and SQLAlchemy session.
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator, Generator, Optional
from uuid import UUID

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from src.api.models import (
    AIMoveRequest,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    UndoRequest,
)
from src.core.config import Settings, load_settings
from src.core.exceptions import (
    GameError,
    NotYourTurnError,
    OracleError,
    RepositoryError,
    StaleSuggestionError,
)
from src.db.database import create_session_factory
from src.db.sql_repository import SQLGameRepository
from src.oracle.client import ChatOracle, MoveOracle
from src.services.registry import GameServices

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES: dict[type[GameError], int] = {
    RepositoryError: 404,
    NotYourTurnError: 409,
    StaleSuggestionError: 409,
    OracleError: 502,
}


def status_code_for(exc: GameError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return 400




def create_app(
    settings: Optional[Settings] = None, oracle: Optional[MoveOracle] = None
) -> FastAPI:
    """Wire settings, database, and oracle into the application. Tests pass in their own settings/oracle."""
    settings = settings or load_settings()
    session_factory = create_session_factory(settings.database_url)

    # only an oracle created here gets closed at shutdown. A passed-in one belongs to the caller.
    owned_oracle: Optional[ChatOracle] = None
    if oracle is None:
        oracle = owned_oracle = ChatOracle(settings.oracle)
    move_oracle: MoveOracle = oracle

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        if owned_oracle is not None:
            owned_oracle.close()
            logger.info("Closed oracle HTTP client")

    app = FastAPI(title="Xiangqi vs LLM", lifespan=lifespan)
    app.state.oracle = move_oracle

    def get_services() -> Generator[GameServices, None, None]:
        with session_factory() as db:
            yield GameServices(SQLGameRepository(db), move_oracle)

    Services = Annotated[GameServices, Depends(get_services)]

    @app.exception_handler(GameError)
    def handle_game_error(request: Request, exc: GameError) -> JSONResponse:
        status_code = status_code_for(exc)
        logger.info("%s %s -> %d: %s", request.method, request.url.path, status_code, exc)
        return JSONResponse(
            status_code=status_code,
            content={"error": type(exc).__name__, "detail": str(exc)},
        )

    @app.post("/games", response_model=GameResponse)
    def create_game(request: CreateGameRequest, services: Services) -> GameResponse:
        """`kind` in the body picks the game mode (xiangqi by default)."""
        return services.for_kind(request.kind).create_new_game(request)

    @app.get("/games/{game_id}", response_model=GameResponse)
    def get_game(game_id: UUID, services: Services) -> GameResponse:
        service = services.for_game(game_id)
        return service.get_game_state(GetGameRequest(game_id=game_id))

    @app.delete("/games/{game_id}", status_code=204)
    def delete_game(game_id: UUID, services: Services) -> None:
        service = services.for_game(game_id)
        service.delete_game(DeleteGameRequest(game_id=game_id))

    @app.post("/games/{game_id}/legal-moves", response_model=LegalMovesResponse)
    def legal_moves(
        game_id: UUID, services: Services, square: Optional[str] = None
    ) -> LegalMovesResponse:
        request = LegalMovesRequest(game_id=game_id, square=square)
        return services.for_game(game_id).legal_moves(request)

    @app.post("/games/{game_id}/moves", response_model=GameResponse)
    def make_move(
        game_id: UUID, from_square: str, to_square: str, services: Services
    ) -> GameResponse:
        request = MoveRequest(
            game_id=game_id, from_square=from_square, to_square=to_square
        )
        return services.for_game(game_id).make_move(request)

    @app.post("/games/{game_id}/ai-move", response_model=GameResponse)
    def ai_move(game_id: UUID, services: Services) -> GameResponse:
        service = services.for_game(game_id)
        return service.request_ai_move(AIMoveRequest(game_id=game_id))

    @app.post("/games/{game_id}/undo", response_model=GameResponse)
    def undo(
        game_id: UUID, services: Services, plies: Annotated[int, Query(ge=1)] = 2
    ) -> GameResponse:
        service = services.for_game(game_id)
        return service.undo(UndoRequest(game_id=game_id, plies=plies))

    return app
