"""
FastAPI app: the request dispatcher.

Resolves the requester from the X-Player header, hands the request to the ChessService and turns
GameErrors and request validation failures into JSON error responses carrying the error kind.

Run with: uvicorn src.api.app:create_app --factory
"""

import logging
from typing import Annotated, Optional

from fastapi import FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.api.models import (
    AdminResponse,
    CheckMatchRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MatchResponse,
    MoveData,
    PlayMoveRequest,
    StartMatchRequest,
    UpdateAdminRequest,
)
from src.core.config import load_settings
from src.core.exceptions import (
    GameError,
    IllegalMoveError,
    InvalidRequestError,
    MatchAlreadyExistsError,
    MatchAlreadyFinishedError,
    NoMatchError,
    NotYourTurnError,
    OutOfRangeError,
    UnauthorizedError,
)
from src.core.logging_config import configure_logging
from src.db.database import build_repository
from src.services.admin import AdminConfig
from src.services.chess_service import ChessService

logger = logging.getLogger(__name__)

STATUS_CODES: dict[type[GameError], int] = {
    OutOfRangeError: 400,
    InvalidRequestError: 400,
    UnauthorizedError: 403,
    NoMatchError: 404,
    NotYourTurnError: 409,
    MatchAlreadyFinishedError: 409,
    MatchAlreadyExistsError: 409,
    IllegalMoveError: 422,
}

Player = Annotated[str, Header(alias="X-Player")]


def status_code_for(error: GameError) -> int:
    for error_type, status_code in STATUS_CODES.items():
        if isinstance(error, error_type):
            return status_code
    return 500


def build_service() -> ChessService:
    """Service wired up from the CHESS_* environment variables"""
    settings = load_settings()
    configure_logging(settings.log_level)
    return ChessService(build_repository(settings), AdminConfig(settings.admin))


def create_app(service: Optional[ChessService] = None) -> FastAPI:
    service = service if service is not None else build_service()
    app = FastAPI(title="chess-match-service", version="0.1.0")

    @app.exception_handler(GameError)
    async def handle_game_error(request: Request, exc: GameError) -> JSONResponse:
        status_code = status_code_for(exc)
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.kind, "detail": str(exc)},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed bodies and missing headers are reported with the InvalidRequest kind"""
        return JSONResponse(
            status_code=STATUS_CODES[InvalidRequestError],
            content={"error": InvalidRequestError.kind, "detail": str(exc.errors())},
        )

    @app.post("/matches", response_model=MatchResponse, status_code=201)
    def start_match(request: StartMatchRequest, player: Player) -> MatchResponse:
        return service.start_match(player, request)

    @app.post("/matches/{host}/{opponent}/moves", response_model=MatchResponse)
    def play_move(host: str, opponent: str, move: MoveData, player: Player) -> MatchResponse:
        request = PlayMoveRequest(host=host, opponent=opponent, move=move)
        return service.play_move(player, request)

    @app.get("/matches/{host}/{opponent}", response_model=MatchResponse)
    def check_match(host: str, opponent: str) -> MatchResponse:
        return service.check_match(CheckMatchRequest(host=host, opponent=opponent))

    @app.get(
        "/matches/{host}/{opponent}/legal-moves", response_model=LegalMovesResponse
    )
    def legal_moves(host: str, opponent: str, player: Player) -> LegalMovesResponse:
        request = LegalMovesRequest(host=host, opponent=opponent)
        return service.legal_moves(player, request)

    @app.get("/admin", response_model=AdminResponse)
    def get_admin() -> AdminResponse:
        return service.get_admin()

    @app.put("/admin", response_model=AdminResponse)
    def update_admin(request: UpdateAdminRequest, player: Player) -> AdminResponse:
        return service.update_admin(player, request)

    return app
