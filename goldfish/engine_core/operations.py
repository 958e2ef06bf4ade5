"""
Operations - Named entry points for every session operation.

Thin wrappers that build the Action and run it through the reducer,
so callers can write draw_cards(session, 7) instead of assembling
actions by hand. Each returns an ActionResult.
"""

from __future__ import annotations

from .action import Action, ActionResult
from .providers import Providers
from .reducer import apply_action
from .state import GameSession


def import_deck(
    session: GameSession,
    deck_list: str,
    deck_name: str | None = None,
    providers: Providers | None = None,
) -> ActionResult:
    return apply_action(session, Action.import_deck(deck_list, deck_name), providers)


def adjust_life(
    session: GameSession, delta: int, providers: Providers | None = None
) -> ActionResult:
    return apply_action(session, Action.adjust_life(delta), providers)


def draw_cards(
    session: GameSession, count: int = 1, providers: Providers | None = None
) -> ActionResult:
    return apply_action(session, Action.draw(count), providers)


def toggle_tap(
    session: GameSession, card_id: str, providers: Providers | None = None
) -> ActionResult:
    return apply_action(session, Action.toggle_tap(card_id), providers)


def move_card(
    session: GameSession,
    card_id: str,
    from_zone: str,
    to_zone: str,
    position: tuple[float, float] | dict | None = None,
    providers: Providers | None = None,
) -> ActionResult:
    return apply_action(
        session, Action.move(card_id, from_zone, to_zone, position), providers
    )


def move_to_library_top(
    session: GameSession,
    card_id: str,
    from_zone: str,
    providers: Providers | None = None,
) -> ActionResult:
    return apply_action(session, Action.to_library_top(card_id, from_zone), providers)


def move_to_library_bottom(
    session: GameSession,
    card_id: str,
    from_zone: str,
    providers: Providers | None = None,
) -> ActionResult:
    return apply_action(session, Action.to_library_bottom(card_id, from_zone), providers)


def shuffle_library(
    session: GameSession, providers: Providers | None = None
) -> ActionResult:
    return apply_action(session, Action.shuffle(), providers)


def reset_session(
    session: GameSession, providers: Providers | None = None
) -> ActionResult:
    return apply_action(session, Action.reset(), providers)


def set_counter(
    session: GameSession,
    card_id: str,
    counter: str,
    value: int,
    providers: Providers | None = None,
) -> ActionResult:
    return apply_action(session, Action.set_counter(card_id, counter, value), providers)


def next_turn(
    session: GameSession, providers: Providers | None = None
) -> ActionResult:
    return apply_action(session, Action.next_turn(), providers)


def end_game(
    session: GameSession, result: str, providers: Providers | None = None
) -> ActionResult:
    return apply_action(session, Action.end_game(result), providers)
