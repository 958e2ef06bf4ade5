"""
Engine Core - Deterministic game session state and operations.

The engine is the runtime that:
1. Creates a GameSession (placeholder deck or given cards)
2. Parses deck lists into fresh libraries
3. Applies actions via the reducer
4. Enforces card conservation across the five zones

It performs no I/O and never logs. Randomness, ids and time come
from an injected Providers.
"""

from .state import (
    Card,
    GameResult,
    GameSession,
    Position,
    Zone,
    ZoneName,
    ZONE_ORDER,
    session_from_dict,
    session_to_dict,
)
from .action import Action, ActionType, ActionPayload, ActionResult
from .errors import (
    EngineError,
    ValidationError,
    NotFoundError,
    EmptyDeckList,
    NoValidCards,
    CardNotFoundInZone,
    CardNotOnBattlefield,
    SessionNotFound,
)
from .providers import Providers
from .reducer import Reducer, apply_action, view_library
from .setup import create_session, generate_placeholder_deck
from .shuffle import fisher_yates

__all__ = [
    "Card",
    "GameResult",
    "GameSession",
    "Position",
    "Zone",
    "ZoneName",
    "ZONE_ORDER",
    "session_from_dict",
    "session_to_dict",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "EngineError",
    "ValidationError",
    "NotFoundError",
    "EmptyDeckList",
    "NoValidCards",
    "CardNotFoundInZone",
    "CardNotOnBattlefield",
    "SessionNotFound",
    "Providers",
    "Reducer",
    "apply_action",
    "view_library",
    "create_session",
    "generate_placeholder_deck",
    "fisher_yates",
]
