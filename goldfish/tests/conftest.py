"""
Pytest fixtures for Goldfish tests.
"""

import pytest

from ..engine_core.providers import Providers
from ..engine_core.reducer import Reducer
from ..engine_core.setup import create_session
from ..engine_core.state import Card, GameSession, Position, Zone, ZoneName
from ..session import SessionManager, InMemorySessionStore


SAMPLE_DECK_LIST = "4 Lightning Bolt\nForest\n2 Island"


def make_card(card_id: str, name: str | None = None, **kwargs) -> Card:
    """Card with a predictable id and image."""
    name = name or f"Card {card_id}"
    return Card(card_id=card_id, name=name, image_url=f"https://img/{card_id}", **kwargs)


@pytest.fixture
def providers() -> Providers:
    """Seeded providers so shuffles and ids repeat."""
    return Providers.seeded(1234)


@pytest.fixture
def reducer(providers: Providers) -> Reducer:
    return Reducer(providers=providers)


@pytest.fixture
def sixty_card_session(providers: Providers) -> GameSession:
    """A session whose library is c0 .. c59, top first."""
    deck = [make_card(f"c{i}") for i in range(60)]
    return create_session(deck=deck, providers=providers, session_id="test_game")


@pytest.fixture
def spread_session(providers: Providers) -> GameSession:
    """Cards in every zone, some tapped and positioned on the battlefield."""
    session = create_session(
        deck=[make_card("lib1"), make_card("lib2"), make_card("lib3")],
        providers=providers,
        session_id="spread_game",
    )
    return session._copy_with(
        life=7,
        turn=5,
        hand=Zone(name=ZoneName.HAND, cards=[make_card("hand1"), make_card("hand2")]),
        battlefield=Zone(
            name=ZoneName.BATTLEFIELD,
            cards=[
                make_card("bf1", tapped=True, position=Position(10, 20)),
                make_card("bf2", position=Position(50, 50), counters={"+1/+1": 2}),
            ],
        ),
        graveyard=Zone(name=ZoneName.GRAVEYARD, cards=[make_card("gy1")]),
        exile=Zone(name=ZoneName.EXILE, cards=[make_card("ex1")]),
    )


@pytest.fixture
def manager(providers: Providers) -> SessionManager:
    return SessionManager(store=InMemorySessionStore(), providers=providers)
