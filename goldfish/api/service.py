"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine actions
2. Runs them through the SessionManager
3. Formats sessions and failures as response models

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Union
import logging

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
    DeckLineInfo,
    PositionInfo,
    # Enums
    ErrorCode,
)
from ..config import API_VERSION
from ..deck_list import card_image_url, summarize_deck_list
from ..engine_core.action import Action, ActionResult
from ..engine_core.errors import EngineError, SessionNotFound
from ..engine_core.state import Card, GameSession, ZONE_ORDER
from ..session import SessionManager

logger = logging.getLogger(__name__)

# Error codes that mean "not there" rather than "malformed"
NOT_FOUND_CODES = frozenset({
    ErrorCode.SESSION_NOT_FOUND,
    ErrorCode.CARD_NOT_ON_BATTLEFIELD,
    ErrorCode.CARD_NOT_FOUND_IN_ZONE,
})

ServiceResponse = Union[OperationResponse, ErrorResponse]


def status_for(error: ErrorResponse) -> int:
    """HTTP status for an error: 404 for missing things, 400 otherwise."""
    return 404 if error.error_code in NOT_FOUND_CODES else 400


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Create a game from a deck list
        response = service.create_game(CreateGameRequest(deck_list="4 Forest"))

        # Draw an opening hand
        response = service.draw(session_id, DrawRequest(count=7))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def create_game(self, request: CreateGameRequest) -> ServiceResponse:
        """
        Create a new game session.
        """
        deck = None
        if request.deck is not None and request.deck_list is None:
            deck = [
                Card(
                    card_id=c.card_id or self.session_manager.providers.new_id(),
                    name=c.name,
                    image_url=c.image_url or card_image_url(c.name),
                )
                for c in request.deck
            ]

        try:
            result = self.session_manager.create_session(
                deck=deck,
                deck_list=request.deck_list,
                starting_life=request.starting_life,
                player_name=request.player_name,
                deck_name=request.deck_name,
                format=request.format,
            )
        except EngineError as e:
            return self._error_from_exception(e)

        if not result.success:
            return self._error_from_result(result)
        return self._operation_response(result, deck_list=request.deck_list)

    def get_game(self, session_id: str) -> Union[GameStateResponse, ErrorResponse]:
        """
        Get current game state.
        """
        session = self.session_manager.get_session(session_id)
        if session is None:
            return self.session_not_found(session_id)
        return self._session_to_response(session)

    def view_library(self, session_id: str) -> Union[LibraryResponse, ErrorResponse]:
        """
        Library contents, top first.
        """
        session = self.session_manager.get_session(session_id)
        if session is None:
            return self.session_not_found(session_id)
        cards = [self._card_to_info(c) for c in session.library.cards]
        return LibraryResponse(session_id=session_id, cards=cards, count=len(cards))

    def list_games(self) -> list[str]:
        """
        List stored session IDs.
        """
        return self.session_manager.list_sessions()

    def end_session(self, session_id: str) -> bool:
        """
        Delete a game session.
        """
        return self.session_manager.end_session(session_id)

    def session_not_found(self, session_id: str) -> ErrorResponse:
        return self._error_from_exception(SessionNotFound(session_id))

    # =========================================================================
    # Operations
    # =========================================================================

    def adjust_life(self, session_id: str, request: LifeRequest) -> ServiceResponse:
        return self._run(session_id, Action.adjust_life(request.change))

    def draw(self, session_id: str, request: DrawRequest) -> ServiceResponse:
        return self._run(session_id, Action.draw(request.count))

    def toggle_tap(self, session_id: str, request: TapRequest) -> ServiceResponse:
        return self._run(session_id, Action.toggle_tap(request.card_id))

    def move_card(self, session_id: str, request: MoveCardRequest) -> ServiceResponse:
        position = None
        if request.position is not None:
            position = (request.position.x, request.position.y)
        return self._run(
            session_id,
            Action.move(request.card_id, request.from_zone, request.to_zone, position),
        )

    def to_library_top(self, session_id: str, request: LibraryMoveRequest) -> ServiceResponse:
        return self._run(session_id, Action.to_library_top(request.card_id, request.from_zone))

    def to_library_bottom(self, session_id: str, request: LibraryMoveRequest) -> ServiceResponse:
        return self._run(
            session_id, Action.to_library_bottom(request.card_id, request.from_zone)
        )

    def shuffle(self, session_id: str) -> ServiceResponse:
        return self._run(session_id, Action.shuffle())

    def reset(self, session_id: str) -> ServiceResponse:
        return self._run(session_id, Action.reset())

    def import_deck(self, session_id: str, request: ImportDeckRequest) -> ServiceResponse:
        return self._run(
            session_id,
            Action.import_deck(request.deck_list, request.deck_name),
            deck_list=request.deck_list,
        )

    def set_counter(self, session_id: str, request: CounterRequest) -> ServiceResponse:
        return self._run(
            session_id, Action.set_counter(request.card_id, request.counter, request.value)
        )

    def next_turn(self, session_id: str) -> ServiceResponse:
        return self._run(session_id, Action.next_turn())

    def end_game(self, session_id: str, request: EndGameRequest) -> ServiceResponse:
        return self._run(session_id, Action.end_game(request.result.value))

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _run(
        self,
        session_id: str,
        action: Action,
        deck_list: str | None = None,
    ) -> ServiceResponse:
        """Apply an action and convert the result."""
        result = self.session_manager.apply(session_id, action)
        if not result.success:
            return self._error_from_result(result)
        return self._operation_response(result, deck_list=deck_list)

    def _operation_response(
        self,
        result: ActionResult,
        deck_list: str | None = None,
    ) -> OperationResponse:
        deck_lines = []
        if deck_list is not None:
            deck_lines = [
                DeckLineInfo(count=line.count, name=line.name)
                for line in summarize_deck_list(deck_list)
            ]
        return OperationResponse(
            success=True,
            game_state=self._session_to_response(result.new_state),
            changes=result.state_changes,
            cards=[self._card_to_info(c) for c in result.cards],
            deck_lines=deck_lines,
            api_version=API_VERSION,
        )

    def _session_to_response(self, session: GameSession) -> GameStateResponse:
        """Convert GameSession to GameStateResponse."""
        zones = {
            name.value: [self._card_to_info(c) for c in session.zone(name).cards]
            for name in ZONE_ORDER
        }
        return GameStateResponse(
            session_id=session.session_id,
            life=session.life,
            starting_life=session.starting_life,
            life_in_range=session.life_in_range,
            turn=session.turn,
            result=session.result.value,
            zones=zones,
            zone_sizes={name: len(cards) for name, cards in zones.items()},
            player_name=session.player_name,
            deck_name=session.deck_name,
            format=session.format,
            game_number=session.game_number,
            created_at=session.created_at,
            updated_at=session.updated_at,
            started_at=session.started_at,
            ended_at=session.ended_at,
            duration_minutes=session.duration_minutes,
            api_version=API_VERSION,
        )

    def _card_to_info(self, card: Card) -> CardInfo:
        return CardInfo(
            card_id=card.card_id,
            name=card.name,
            image_url=card.image_url,
            tapped=card.tapped,
            position=PositionInfo(x=card.position.x, y=card.position.y),
            counters=dict(card.counters),
        )

    def _error_from_result(self, result: ActionResult) -> ErrorResponse:
        return ErrorResponse(
            error=result.error or "Unknown error",
            error_code=self._error_code(result.error_code),
            details=result.details or None,
            api_version=API_VERSION,
        )

    def _error_from_exception(self, error: EngineError) -> ErrorResponse:
        return ErrorResponse(
            error=error.message,
            error_code=self._error_code(error.error_code),
            details=error.details or None,
            api_version=API_VERSION,
        )

    def _error_code(self, code: str | None) -> ErrorCode:
        try:
            return ErrorCode(code)
        except ValueError:
            logger.warning("Unmapped engine error code %r", code)
            return ErrorCode.VALIDATION_ERROR
