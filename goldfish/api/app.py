"""
FastAPI Application - REST API for the game table.

Endpoints:
    POST   /api/v1/games                          Create game session
    GET    /api/v1/games                          List sessions
    GET    /api/v1/games/{id}                     Get game state
    DELETE /api/v1/games/{id}                     End session
    GET    /api/v1/games/{id}/library             View library (top first)
    POST   /api/v1/games/{id}/import-deck         Replace game with a deck list
    PATCH  /api/v1/games/{id}/life                Adjust life
    PATCH  /api/v1/games/{id}/draw                Draw cards
    PATCH  /api/v1/games/{id}/tap                 Toggle tap
    PATCH  /api/v1/games/{id}/move-card           Move card between zones
    PATCH  /api/v1/games/{id}/to-library-top      Put card on top of library
    PATCH  /api/v1/games/{id}/to-library-bottom   Put card on bottom of library
    PATCH  /api/v1/games/{id}/shuffle             Shuffle library
    PATCH  /api/v1/games/{id}/reset               Reset game
    PATCH  /api/v1/games/{id}/counter             Set a counter on a card
    PATCH  /api/v1/games/{id}/next-turn           Advance turn, untap all
    PATCH  /api/v1/games/{id}/end                 Record win/loss/draw

Missing sessions and cards are 404; malformed input is 400.
All responses are JSON with explicit Pydantic schemas.
"""

from typing import Union
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import (
    ALLOWED_ORIGINS,
    GOLDFISH_ENV,
    GOLDFISH_SEED,
    GOLDFISH_STORE_DIR,
    SERVICE_NAME,
)
from ..engine_core.providers import Providers
from ..session import InMemorySessionStore, JsonFileSessionStore, SessionManager
from .service import APIService, status_for
from .schemas import (
    # Request models
    CreateGameRequest,
    LifeRequest,
    DrawRequest,
    TapRequest,
    MoveCardRequest,
    LibraryMoveRequest,
    ImportDeckRequest,
    CounterRequest,
    EndGameRequest,
    # Response models
    ErrorResponse,
    GameStateResponse,
    OperationResponse,
    LibraryResponse,
    SessionListResponse,
    EndSessionResponse,
    HealthResponse,
    # Enums
    ErrorCode,
)

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Malformed input"},
    404: {"model": ErrorResponse, "description": "Session or card not found"},
}


def build_default_service() -> APIService:
    """APIService wired from environment configuration."""
    if GOLDFISH_STORE_DIR:
        store = JsonFileSessionStore(GOLDFISH_STORE_DIR)
        logger.info("Storing sessions in %s", store.directory)
    else:
        store = InMemorySessionStore()
        logger.info("Storing sessions in memory")

    providers = Providers.seeded(int(GOLDFISH_SEED)) if GOLDFISH_SEED else Providers()
    return APIService(session_manager=SessionManager(store=store, providers=providers))


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (built from env if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Goldfish Engine API",
        description="""
Single-player card table - import a deck list, draw, move cards between
zones, tap, shuffle and reset.

## Error Codes

| Code | Status | Description |
|------|--------|-------------|
| `SESSION_NOT_FOUND` | 404 | Session does not exist |
| `CARD_NOT_FOUND_IN_ZONE` | 404 | Card is not in the source zone |
| `CARD_NOT_ON_BATTLEFIELD` | 404 | Tap/counter target not on battlefield |
| `EMPTY_DECK_LIST` | 400 | Deck list is blank |
| `NO_VALID_CARDS` | 400 | Deck list produced no cards |
| `VALIDATION_ERROR` | 400 | Malformed request |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or build_default_service()
    app.state.api_service = api_service

    # =========================================================================
    # Error helpers
    # =========================================================================

    def error_json(error: ErrorResponse) -> JSONResponse:
        """Render an ErrorResponse with its mapped status code."""
        return JSONResponse(
            status_code=status_for(error),
            content=error.model_dump(mode="json"),
        )

    def respond(response):
        if isinstance(response, ErrorResponse):
            return error_json(response)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed bodies are 400 with the standard error shape."""
        return error_json(
            ErrorResponse(
                error="Invalid request body",
                error_code=ErrorCode.VALIDATION_ERROR,
                details={"errors": [
                    {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")}
                    for e in exc.errors()
                ]},
            )
        )

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games",
        response_model=OperationResponse,
        responses={400: ERROR_RESPONSES[400]},
        tags=["Games"],
        summary="Create a new game session",
    )
    def create_game(body: CreateGameRequest) -> Union[OperationResponse, JSONResponse]:
        """
        Create a new game session.

        Send `deck_list` to import a deck, `deck` for explicit cards,
        or neither for a 60-card placeholder deck.
        """
        return respond(api_service.create_game(body))

    @app.get(
        "/api/v1/games",
        response_model=SessionListResponse,
        tags=["Games"],
        summary="List sessions",
    )
    def list_games() -> SessionListResponse:
        sessions = api_service.list_games()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/games/{session_id}",
        response_model=GameStateResponse,
        responses={404: ERROR_RESPONSES[404]},
        tags=["Games"],
        summary="Get game state",
    )
    def get_game(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        return respond(api_service.get_game(session_id))

    @app.delete(
        "/api/v1/games/{session_id}",
        response_model=EndSessionResponse,
        responses={404: ERROR_RESPONSES[404]},
        tags=["Games"],
        summary="End a game session",
    )
    def end_session(session_id: str) -> Union[EndSessionResponse, JSONResponse]:
        """Delete a session from the store."""
        if not api_service.end_session(session_id):
            return error_json(api_service.session_not_found(session_id))
        return EndSessionResponse(success=True, session_id=session_id)

    @app.get(
        "/api/v1/games/{session_id}/library",
        response_model=LibraryResponse,
        responses={404: ERROR_RESPONSES[404]},
        tags=["Games"],
        summary="View library, top first",
    )
    def view_library(session_id: str) -> Union[LibraryResponse, JSONResponse]:
        return respond(api_service.view_library(session_id))

    # =========================================================================
    # Operation Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games/{session_id}/import-deck",
        response_model=OperationResponse,
        responses=ERROR_RESPONSES,
        tags=["Deck"],
        summary="Start a fresh game from a deck list",
    )
    def import_deck(
        session_id: str, body: ImportDeckRequest
    ) -> Union[OperationResponse, JSONResponse]:
        """
        Replace the library with the parsed deck list, empty every other
        zone and restore starting life.

        **Deck list format:**
        ```
        4 Lightning Bolt
        Forest
        2 Island
        ```
        """
        return respond(api_service.import_deck(session_id, body))

    @app.patch(
        "/api/v1/games/{session_id}/life",
        response_model=OperationResponse,
        responses=ERROR_RESPONSES,
        tags=["Game"],
        summary="Adjust life total",
    )
    def adjust_life(
        session_id: str, body: LifeRequest
    ) -> Union[OperationResponse, JSONResponse]:
        return respond(api_service.adjust_life(session_id, body))

    @app.patch(
        "/api/v1/games/{session_id}/draw",
        response_model=OperationResponse,
        responses=ERROR_RESPONSES,
        tags=["Cards"],
        summary="Draw cards",
    )
    def draw(session_id: str, body: DrawRequest) -> Union[OperationResponse, JSONResponse]:
        """Draw up to `count` cards; an empty library draws nothing."""
        return respond(api_service.draw(session_id, body))

    @app.patch(
        "/api/v1/games/{session_id}/tap",
        response_model=OperationResponse,
        responses=ERROR_RESPONSES,
        tags=["Cards"],
        summary="Toggle tap on a battlefield card",
    )
    def toggle_tap(
        session_id: str, body: TapRequest
    ) -> Union[OperationResponse, JSONResponse]:
        return respond(api_service.toggle_tap(session_id, body))

    @app.patch(
        "/api/v1/games/{session_id}/move-card",
        response_model=OperationResponse,
        responses=ERROR_RESPONSES,
        tags=["Cards"],
        summary="Move a card between zones",
    )
    def move_card(
        session_id: str, body: MoveCardRequest
    ) -> Union[OperationResponse, JSONResponse]:
        """
        Move a card. `position` applies only when `to_zone` is battlefield;
        battlefield to battlefield with a position is a reposition.
        """
        return respond(api_service.move_card(session_id, body))

    @app.patch(
        "/api/v1/games/{session_id}/to-library-top",
        response_model=OperationResponse,
        responses=ERROR_RESPONSES,
        tags=["Cards"],
        summary="Put a card on top of the library",
    )
    def to_library_top(
        session_id: str, body: LibraryMoveRequest
    ) -> Union[OperationResponse, JSONResponse]:
        return respond(api_service.to_library_top(session_id, body))

    @app.patch(
        "/api/v1/games/{session_id}/to-library-bottom",
        response_model=OperationResponse,
        responses=ERROR_RESPONSES,
        tags=["Cards"],
        summary="Put a card on the bottom of the library",
    )
    def to_library_bottom(
        session_id: str, body: LibraryMoveRequest
    ) -> Union[OperationResponse, JSONResponse]:
        return respond(api_service.to_library_bottom(session_id, body))

    @app.patch(
        "/api/v1/games/{session_id}/shuffle",
        response_model=OperationResponse,
        responses={404: ERROR_RESPONSES[404]},
        tags=["Deck"],
        summary="Shuffle the library",
    )
    def shuffle(session_id: str) -> Union[OperationResponse, JSONResponse]:
        return respond(api_service.shuffle(session_id))

    @app.patch(
        "/api/v1/games/{session_id}/reset",
        response_model=OperationResponse,
        responses={404: ERROR_RESPONSES[404]},
        tags=["Deck"],
        summary="Shuffle every card back into the library",
    )
    def reset(session_id: str) -> Union[OperationResponse, JSONResponse]:
        return respond(api_service.reset(session_id))

    @app.patch(
        "/api/v1/games/{session_id}/counter",
        response_model=OperationResponse,
        responses=ERROR_RESPONSES,
        tags=["Cards"],
        summary="Set a counter on a battlefield card",
    )
    def set_counter(
        session_id: str, body: CounterRequest
    ) -> Union[OperationResponse, JSONResponse]:
        return respond(api_service.set_counter(session_id, body))

    @app.patch(
        "/api/v1/games/{session_id}/next-turn",
        response_model=OperationResponse,
        responses={404: ERROR_RESPONSES[404]},
        tags=["Game"],
        summary="Advance the turn and untap everything",
    )
    def next_turn(session_id: str) -> Union[OperationResponse, JSONResponse]:
        return respond(api_service.next_turn(session_id))

    @app.patch(
        "/api/v1/games/{session_id}/end",
        response_model=OperationResponse,
        responses=ERROR_RESPONSES,
        tags=["Game"],
        summary="Record the game result",
    )
    def end_game(
        session_id: str, body: EndGameRequest
    ) -> Union[OperationResponse, JSONResponse]:
        return respond(api_service.end_game(session_id, body))

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service=SERVICE_NAME,
            version=__version__,
            environment=GOLDFISH_ENV,
        )

    @app.get("/", tags=["System"])
    def root():
        """Root endpoint with API info."""
        return {
            "name": "Goldfish Engine API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app
