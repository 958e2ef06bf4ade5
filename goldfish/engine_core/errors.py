"""
Engine Errors - Named failures raised by zones, the deck list parser and the reducer.

Two kinds only:
- ValidationError: malformed input (empty deck list, bad position, bad count)
- NotFoundError: a session or card is absent from where the caller said it is

Nothing here is transient. The same inputs always fail the same way,
so callers never retry. The reducer turns these into ActionResult failures.
"""

from __future__ import annotations
from typing import Any


class EngineError(Exception):
    """Base class for every failure the engine reports."""
    error_code = "ENGINE_ERROR"
    error_kind = "engine"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(EngineError):
    """Input was malformed or out of range."""
    error_code = "VALIDATION_ERROR"
    error_kind = "validation"


class NotFoundError(EngineError):
    """A session or card was not where the caller said."""
    error_code = "NOT_FOUND"
    error_kind = "not_found"


class EmptyDeckList(ValidationError):
    error_code = "EMPTY_DECK_LIST"

    def __init__(self):
        super().__init__("Deck list is empty")


class NoValidCards(ValidationError):
    error_code = "NO_VALID_CARDS"

    def __init__(self):
        super().__init__("No valid cards found in deck list")


class UnknownZone(ValidationError):
    error_code = "UNKNOWN_ZONE"

    def __init__(self, zone: str):
        super().__init__(f"Unknown zone: {zone}", details={"zone": zone})


class InvalidPosition(ValidationError):
    error_code = "INVALID_POSITION"

    def __init__(self, x: Any, y: Any):
        super().__init__(
            f"Position ({x}, {y}) is outside the board (0-100)",
            details={"x": x, "y": y},
        )


class InvalidCount(ValidationError):
    error_code = "INVALID_COUNT"


class InvalidCounter(ValidationError):
    error_code = "INVALID_COUNTER"


class InvalidResult(ValidationError):
    error_code = "INVALID_RESULT"


class DuplicateCardId(ValidationError):
    error_code = "DUPLICATE_CARD_ID"

    def __init__(self, card_id: str):
        super().__init__(
            f"Card id {card_id} appears more than once",
            details={"card_id": card_id},
        )


class CardNotFoundInZone(NotFoundError):
    error_code = "CARD_NOT_FOUND_IN_ZONE"

    def __init__(self, card_id: str, zone: str):
        super().__init__(
            f"Card {card_id} not found in {zone}",
            details={"card_id": card_id, "zone": zone},
        )
        self.zone = zone


class CardNotOnBattlefield(NotFoundError):
    error_code = "CARD_NOT_ON_BATTLEFIELD"

    def __init__(self, card_id: str):
        super().__init__(
            f"Card {card_id} not found on battlefield",
            details={"card_id": card_id},
        )


class SessionNotFound(NotFoundError):
    error_code = "SESSION_NOT_FOUND"

    def __init__(self, session_id: str):
        super().__init__(
            f"Session {session_id} not found",
            details={"session_id": session_id},
        )
