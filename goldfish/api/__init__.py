"""
API Module - REST interface to the engine.

Exposes session operations over HTTP:
1. Create a game (placeholder deck, explicit cards or a deck list)
2. Apply operations (draw, move, tap, shuffle, reset, ...)
3. Read game state and the library

Failures come back as ErrorResponse with a stable error_code.
"""

from .schemas import (
    # Requests
    CreateGameRequest,
    LifeRequest,
    DrawRequest,
    TapRequest,
    MoveCardRequest,
    LibraryMoveRequest,
    ImportDeckRequest,
    CounterRequest,
    EndGameRequest,
    # Responses
    ErrorResponse,
    GameStateResponse,
    OperationResponse,
    LibraryResponse,
    # Shared
    CardInfo,
    PositionInfo,
    ErrorCode,
)
from .service import APIService, status_for
from .app import create_app

__all__ = [
    # Requests
    "CreateGameRequest",
    "LifeRequest",
    "DrawRequest",
    "TapRequest",
    "MoveCardRequest",
    "LibraryMoveRequest",
    "ImportDeckRequest",
    "CounterRequest",
    "EndGameRequest",
    # Responses
    "ErrorResponse",
    "GameStateResponse",
    "OperationResponse",
    "LibraryResponse",
    # Shared
    "CardInfo",
    "PositionInfo",
    "ErrorCode",
    # Service
    "APIService",
    "status_for",
    "create_app",
]
