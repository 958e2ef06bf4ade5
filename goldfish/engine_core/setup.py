"""
Session Setup - Creates a new game session.

This module handles:
- Building the starting library (given deck or a placeholder deck)
- Checking card ids are unique
- Stamping timestamps from the injected clock

The placeholder deck is 60 generic cards so an empty table is
still playable before a deck list is imported.
"""

from __future__ import annotations
from typing import Iterable

from .errors import DuplicateCardId, ValidationError
from .providers import Providers
from .state import (
    Card,
    DEFAULT_STARTING_LIFE,
    GameSession,
    Zone,
    ZoneName,
)

PLACEHOLDER_DECK_SIZE = 60
PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/250x350?text=Card+{number}"


def generate_placeholder_deck(
    providers: Providers,
    size: int = PLACEHOLDER_DECK_SIZE,
) -> list[Card]:
    """Cards named "Card 1" .. "Card <size>" with placeholder images."""
    return [
        Card(
            card_id=providers.new_id(),
            name=f"Card {i + 1}",
            image_url=PLACEHOLDER_IMAGE_URL.format(number=i + 1),
        )
        for i in range(size)
    ]


def create_session(
    deck: Iterable[Card] | None = None,
    providers: Providers | None = None,
    starting_life: int = DEFAULT_STARTING_LIFE,
    player_name: str = "Player",
    deck_name: str | None = None,
    format: str = "casual",
    session_id: str | None = None,
) -> GameSession:
    """
    Create a new game session.

    Args:
        deck: Initial library, top first. Placeholder deck when None.
        providers: Randomness/id/clock sources (fresh Providers() if omitted)
        starting_life: Life total at start and after every reset
        player_name: Display name
        deck_name: Optional deck label
        format: Free-form format label ("casual", "modern", ...)
        session_id: Use this id instead of generating one

    Returns:
        GameSession with only the library populated

    Raises:
        DuplicateCardId: two cards in deck share an id
    """
    providers = providers or Providers()
    if isinstance(starting_life, bool) or not isinstance(starting_life, int):
        raise ValidationError(f"starting_life must be an integer, got {starting_life!r}")

    cards = list(deck) if deck is not None else generate_placeholder_deck(providers)
    seen: set[str] = set()
    for card in cards:
        if card.card_id in seen:
            raise DuplicateCardId(card.card_id)
        seen.add(card.card_id)

    now = providers.now()
    return GameSession(
        session_id=session_id or providers.new_id(),
        life=starting_life,
        starting_life=starting_life,
        turn=1,
        library=Zone(name=ZoneName.LIBRARY, cards=cards),
        player_name=player_name,
        deck_name=deck_name,
        format=format,
        created_at=now,
        updated_at=now,
        started_at=now,
    )
