"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between a client and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- VALIDATION_ERROR: Request body is malformed or a field is missing
- SESSION_NOT_FOUND: Session does not exist
- EMPTY_DECK_LIST / NO_VALID_CARDS: Deck list could not be imported
- CARD_NOT_ON_BATTLEFIELD: Tap/counter target is not on the battlefield
- CARD_NOT_FOUND_IN_ZONE: Move source zone does not hold the card
- UNKNOWN_ZONE / INVALID_POSITION / INVALID_COUNT / INVALID_COUNTER /
  INVALID_RESULT / DUPLICATE_CARD_ID: Field values out of range
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class ZoneType(str, Enum):
    """Card zones."""
    LIBRARY = "library"
    HAND = "hand"
    BATTLEFIELD = "battlefield"
    GRAVEYARD = "graveyard"
    EXILE = "exile"


class GameResultValue(str, Enum):
    """Game result values."""
    ONGOING = "ongoing"
    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


class ErrorCode(str, Enum):
    """Structured error codes."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    EMPTY_DECK_LIST = "EMPTY_DECK_LIST"
    NO_VALID_CARDS = "NO_VALID_CARDS"
    CARD_NOT_ON_BATTLEFIELD = "CARD_NOT_ON_BATTLEFIELD"
    CARD_NOT_FOUND_IN_ZONE = "CARD_NOT_FOUND_IN_ZONE"
    UNKNOWN_ZONE = "UNKNOWN_ZONE"
    INVALID_POSITION = "INVALID_POSITION"
    INVALID_COUNT = "INVALID_COUNT"
    INVALID_COUNTER = "INVALID_COUNTER"
    INVALID_RESULT = "INVALID_RESULT"
    DUPLICATE_CARD_ID = "DUPLICATE_CARD_ID"


# =============================================================================
# Shared Models
# =============================================================================

class PositionInfo(BaseModel):
    """Battlefield coordinates, percent of board width/height (0-100)."""
    x: float = 0.0
    y: float = 0.0


class CardInfo(BaseModel):
    """Card information for display."""
    card_id: str
    name: str
    image_url: str
    tapped: bool = False
    position: PositionInfo = Field(default_factory=PositionInfo)
    counters: dict[str, int] = Field(default_factory=dict)

    model_config = {"from_attributes": True}


class CardInput(BaseModel):
    """A card supplied by the caller when creating a game."""
    card_id: Optional[str] = Field(None, description="Generated when omitted")
    name: str = Field(..., min_length=1)
    image_url: Optional[str] = Field(None, description="Derived from name when omitted")


class DeckLineInfo(BaseModel):
    """One normalized deck list line."""
    count: int
    name: str


# =============================================================================
# Request Models
# =============================================================================

class CreateGameRequest(BaseModel):
    """Request to create a new game session."""
    deck: Optional[list[CardInput]] = Field(
        None, description="Initial library, top first. Placeholder deck when omitted"
    )
    deck_list: Optional[str] = Field(
        None, description="Deck list text; takes precedence over deck"
    )
    starting_life: int = Field(20, description="Life at start and after reset")
    player_name: str = Field("Player", description="Display name")
    deck_name: Optional[str] = None
    format: str = Field("casual", description="Free-form format label")


class LifeRequest(BaseModel):
    """Signed life change."""
    change: int = Field(..., description="Added to life; negative for damage")


class DrawRequest(BaseModel):
    count: int = Field(1, description="Cards to draw; fewer if the library runs out")


class TapRequest(BaseModel):
    card_id: str


class MoveCardRequest(BaseModel):
    """Move a card between zones."""
    card_id: str
    from_zone: str = Field(..., description="library, hand, battlefield, graveyard, exile")
    to_zone: str = Field(..., description="library, hand, battlefield, graveyard, exile")
    position: Optional[PositionInfo] = Field(
        None, description="Only used when to_zone is battlefield"
    )


class LibraryMoveRequest(BaseModel):
    """Put a card on top or bottom of the library."""
    card_id: str
    from_zone: str


class ImportDeckRequest(BaseModel):
    deck_list: str = Field(..., description="One '[count] name' per line")
    deck_name: Optional[str] = None


class CounterRequest(BaseModel):
    card_id: str
    counter: str = Field(..., description="Counter name, e.g. '+1/+1' or 'loyalty'")
    value: int = Field(..., description="New value; 0 removes the counter")


class EndGameRequest(BaseModel):
    result: GameResultValue


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameStateResponse(BaseModel):
    """Complete game state for display."""
    session_id: str
    life: int
    starting_life: int
    life_in_range: bool = True
    turn: int
    result: GameResultValue
    zones: dict[ZoneType, list[CardInfo]] = Field(default_factory=dict)
    zone_sizes: dict[ZoneType, int] = Field(default_factory=dict)
    player_name: str = "Player"
    deck_name: Optional[str] = None
    format: str = "casual"
    game_number: int = 1
    created_at: float = 0.0
    updated_at: float = 0.0
    started_at: float = 0.0
    ended_at: Optional[float] = None
    duration_minutes: int = 0
    api_version: str = "v1"


class OperationResponse(BaseModel):
    """Response after applying one operation."""
    success: bool = True
    game_state: GameStateResponse
    changes: list[str] = Field(default_factory=list)
    cards: list[CardInfo] = Field(
        default_factory=list, description="Cards surfaced by the operation (drawn cards)"
    )
    deck_lines: list[DeckLineInfo] = Field(
        default_factory=list, description="Normalized deck list after an import"
    )
    api_version: str = "v1"


class LibraryResponse(BaseModel):
    """Library contents, top first."""
    session_id: str
    cards: list[CardInfo]
    count: int


class SessionListResponse(BaseModel):
    """Response listing stored sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    environment: str
