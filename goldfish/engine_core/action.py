"""
Action System - Actions, payloads, and results.

Every operation on a session is an Action:
1. Deck actions (import deck, shuffle, reset)
2. Card actions (draw, move, tap, counters)
3. Game actions (life, next turn, end game)

All state changes flow through actions and the reducer.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of actions in the system."""
    # Deck actions
    IMPORT_DECK = "import_deck"
    SHUFFLE_LIBRARY = "shuffle_library"
    RESET_SESSION = "reset_session"

    # Card actions
    DRAW_CARDS = "draw_cards"
    TOGGLE_TAP = "toggle_tap"
    MOVE_CARD = "move_card"
    MOVE_TO_LIBRARY_TOP = "move_to_library_top"
    MOVE_TO_LIBRARY_BOTTOM = "move_to_library_bottom"
    SET_COUNTER = "set_counter"

    # Game actions
    ADJUST_LIFE = "adjust_life"
    NEXT_TURN = "next_turn"
    END_GAME = "end_game"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields.
    This is a generic container; validation happens in the reducer.
    """
    card_id: str | None = None

    # For zone operations
    source_zone: str | None = None
    target_zone: str | None = None
    position: tuple[float, float] | None = None

    # For draw / life / counters
    count: int | None = None
    delta: int | None = None
    counter: str | None = None

    # For import
    deck_list: str | None = None
    deck_name: str | None = None

    # For end game
    result: str | None = None


@dataclass
class Action:
    """
    A complete action to be applied to a session.

    Actions are:
    - Validated before application
    - Applied atomically by the reducer
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def import_deck(cls, deck_list: str, deck_name: str | None = None) -> Action:
        """Factory for deck list import."""
        return cls(
            action_type=ActionType.IMPORT_DECK,
            payload=ActionPayload(deck_list=deck_list, deck_name=deck_name),
        )

    @classmethod
    def adjust_life(cls, delta: int) -> Action:
        return cls(
            action_type=ActionType.ADJUST_LIFE,
            payload=ActionPayload(delta=delta),
        )

    @classmethod
    def draw(cls, count: int = 1) -> Action:
        """Factory for draw action."""
        return cls(
            action_type=ActionType.DRAW_CARDS,
            payload=ActionPayload(count=count),
        )

    @classmethod
    def toggle_tap(cls, card_id: str) -> Action:
        return cls(
            action_type=ActionType.TOGGLE_TAP,
            payload=ActionPayload(card_id=card_id),
        )

    @classmethod
    def move(
        cls,
        card_id: str,
        source_zone: str,
        target_zone: str,
        position: tuple[float, float] | None = None,
    ) -> Action:
        """Factory for a zone-to-zone move. position only applies to the battlefield."""
        return cls(
            action_type=ActionType.MOVE_CARD,
            payload=ActionPayload(
                card_id=card_id,
                source_zone=source_zone,
                target_zone=target_zone,
                position=position,
            ),
        )

    @classmethod
    def to_library_top(cls, card_id: str, source_zone: str) -> Action:
        return cls(
            action_type=ActionType.MOVE_TO_LIBRARY_TOP,
            payload=ActionPayload(card_id=card_id, source_zone=source_zone),
        )

    @classmethod
    def to_library_bottom(cls, card_id: str, source_zone: str) -> Action:
        return cls(
            action_type=ActionType.MOVE_TO_LIBRARY_BOTTOM,
            payload=ActionPayload(card_id=card_id, source_zone=source_zone),
        )

    @classmethod
    def shuffle(cls) -> Action:
        return cls(action_type=ActionType.SHUFFLE_LIBRARY)

    @classmethod
    def reset(cls) -> Action:
        return cls(action_type=ActionType.RESET_SESSION)

    @classmethod
    def set_counter(cls, card_id: str, counter: str, value: int) -> Action:
        """Factory for setting a named counter. value 0 removes the counter."""
        return cls(
            action_type=ActionType.SET_COUNTER,
            payload=ActionPayload(card_id=card_id, counter=counter, count=value),
        )

    @classmethod
    def next_turn(cls) -> Action:
        return cls(action_type=ActionType.NEXT_TURN)

    @classmethod
    def end_game(cls, result: str) -> Action:
        return cls(
            action_type=ActionType.END_GAME,
            payload=ActionPayload(result=result),
        )


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New session (if succeeded)
    - Error message, code and kind (if failed)
    - Cards the action surfaced (drawn cards)
    """
    success: bool
    new_state: Any | None = None  # GameSession
    error: str | None = None
    error_code: str | None = None
    error_kind: str | None = None  # "validation" or "not_found"
    details: dict[str, Any] = field(default_factory=dict)

    # For UI/presentation
    state_changes: list[str] = field(default_factory=list)  # Human-readable changes
    cards: list[Any] = field(default_factory=list)  # Cards surfaced by the action

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        error_kind: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> ActionResult:
        """Create a failure result."""
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            error_kind=error_kind,
            details=details or {},
        )

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
        cards: list[Any] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
            cards=cards or [],
        )
