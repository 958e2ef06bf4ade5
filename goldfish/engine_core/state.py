"""
Game State - Cards, zones and the session that owns them.

Design principles:
- Immutable-friendly: all mutations return new values
- Serializable: every field round-trips through session_to_dict()
- One owner: a card lives in exactly one zone of one session
- No I/O: timestamps come from the caller (see Providers)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Iterator
from copy import deepcopy
from enum import Enum

from .errors import CardNotFoundInZone, InvalidPosition, UnknownZone


BOARD_MIN = 0.0
BOARD_MAX = 100.0

SOFT_LIFE_MIN = -100
SOFT_LIFE_MAX = 200

DEFAULT_STARTING_LIFE = 20


class ZoneName(str, Enum):
    """The five card containers of a session."""
    LIBRARY = "library"
    HAND = "hand"
    BATTLEFIELD = "battlefield"
    GRAVEYARD = "graveyard"
    EXILE = "exile"

    @classmethod
    def parse(cls, value: str | ZoneName) -> ZoneName:
        """Resolve a zone from its wire name, raising UnknownZone."""
        if isinstance(value, ZoneName):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnknownZone(str(value)) from None


# Reset concatenates zones in this order before shuffling
ZONE_ORDER = (
    ZoneName.LIBRARY,
    ZoneName.HAND,
    ZoneName.BATTLEFIELD,
    ZoneName.GRAVEYARD,
    ZoneName.EXILE,
)


class GameResult(str, Enum):
    ONGOING = "ongoing"
    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


@dataclass(frozen=True)
class Position:
    """Percentage-of-board coordinates. Only meaningful on the battlefield."""
    x: float = 0.0
    y: float = 0.0

    @classmethod
    def validated(cls, x: Any, y: Any) -> Position:
        """Build a position, raising InvalidPosition outside [0, 100]."""
        try:
            fx, fy = float(x), float(y)
        except (TypeError, ValueError):
            raise InvalidPosition(x, y) from None
        if not (BOARD_MIN <= fx <= BOARD_MAX and BOARD_MIN <= fy <= BOARD_MAX):
            raise InvalidPosition(x, y)
        return cls(x=fx, y=fy)

    @classmethod
    def coerce(cls, value: Any) -> Position | None:
        """Accept a Position, an (x, y) pair or an {"x", "y"} mapping. None passes through."""
        if value is None:
            return None
        if isinstance(value, Position):
            return cls.validated(value.x, value.y)
        if isinstance(value, dict):
            return cls.validated(value.get("x"), value.get("y"))
        try:
            x, y = value
        except (TypeError, ValueError):
            raise InvalidPosition(value, None) from None
        return cls.validated(x, y)

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


ORIGIN = Position()


@dataclass
class Card:
    """
    One physical card instance.

    card_id is unique within a session. tapped, position and counters
    only mean something while the card sits on the battlefield.
    """
    card_id: str
    name: str
    image_url: str
    tapped: bool = False
    position: Position = ORIGIN
    counters: dict[str, int] = field(default_factory=dict)

    def __hash__(self):
        return hash(self.card_id)

    def __eq__(self, other):
        if not isinstance(other, Card):
            return False
        return self.card_id == other.card_id

    def same_as(self, other: Card) -> bool:
        """Field-by-field comparison (== only compares identity)."""
        return (
            self.card_id == other.card_id
            and self.name == other.name
            and self.image_url == other.image_url
            and self.tapped == other.tapped
            and self.position == other.position
            and self.counters == other.counters
        )

    def _copy_with(self, **kwargs) -> Card:
        return Card(
            card_id=kwargs.get("card_id", self.card_id),
            name=kwargs.get("name", self.name),
            image_url=kwargs.get("image_url", self.image_url),
            tapped=kwargs.get("tapped", self.tapped),
            position=kwargs.get("position", self.position),
            counters=kwargs.get("counters", dict(self.counters)),
        )

    def with_position(self, position: Position) -> Card:
        return self._copy_with(position=position)

    def with_tapped(self, tapped: bool) -> Card:
        return self._copy_with(tapped=tapped)

    def with_counter(self, counter: str, value: int) -> Card:
        """Return card with counter set; value 0 removes it."""
        counters = dict(self.counters)
        if value:
            counters[counter] = value
        else:
            counters.pop(counter, None)
        return self._copy_with(counters=counters)

    def off_battlefield(self) -> Card:
        """Return card stripped of battlefield-only state."""
        return self._copy_with(tapped=False, position=ORIGIN, counters={})


@dataclass
class Zone:
    """
    An ordered run of cards.

    The library is ordered with its top at index 0. The other zones are
    bags, but they keep insertion order so tests stay deterministic.
    """
    name: ZoneName
    cards: list[Card] = field(default_factory=list)

    @property
    def ordered(self) -> bool:
        return self.name == ZoneName.LIBRARY

    @property
    def count(self) -> int:
        return len(self.cards)

    @property
    def is_empty(self) -> bool:
        return len(self.cards) == 0

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def index_of(self, card_id: str) -> int:
        """Index of card_id, or -1 when absent."""
        for i, card in enumerate(self.cards):
            if card.card_id == card_id:
                return i
        return -1

    def contains(self, card_id: str) -> bool:
        return self.index_of(card_id) >= 0

    def get(self, card_id: str) -> Card | None:
        idx = self.index_of(card_id)
        return self.cards[idx] if idx >= 0 else None

    def add(self, card: Card) -> Zone:
        """Return new zone with card appended at the end."""
        return Zone(name=self.name, cards=self.cards + [card])

    def add_top(self, card: Card) -> Zone:
        """Return new zone with card inserted at index 0."""
        return Zone(name=self.name, cards=[card] + self.cards)

    def extend(self, cards: list[Card]) -> Zone:
        return Zone(name=self.name, cards=self.cards + list(cards))

    def remove(self, card_id: str) -> tuple[Card, Zone]:
        """
        Return (removed card, new zone).

        Relative order of the remaining cards is preserved.
        Raises CardNotFoundInZone when the id is absent.
        """
        idx = self.index_of(card_id)
        if idx < 0:
            raise CardNotFoundInZone(card_id, self.name.value)
        new_cards = self.cards[:idx] + self.cards[idx + 1:]
        return self.cards[idx], Zone(name=self.name, cards=new_cards)

    def replace(self, card: Card) -> Zone:
        """Return new zone with the card of the same id swapped in place."""
        idx = self.index_of(card.card_id)
        if idx < 0:
            raise CardNotFoundInZone(card.card_id, self.name.value)
        new_cards = self.cards.copy()
        new_cards[idx] = card
        return Zone(name=self.name, cards=new_cards)

    def take_top(self, count: int) -> tuple[list[Card], Zone]:
        """Return (up to count cards from the front, remaining zone)."""
        count = max(0, min(count, len(self.cards)))
        return self.cards[:count], Zone(name=self.name, cards=self.cards[count:])

    def map(self, fn) -> Zone:
        return Zone(name=self.name, cards=[fn(c) for c in self.cards])


def _empty_zone(name: ZoneName):
    return lambda: Zone(name=name)


@dataclass
class GameSession:
    """
    Complete state of one game at a point in time.

    This is the canonical value the reducer operates on. Every
    operation produces a new GameSession; nothing mutates in place.
    """
    session_id: str

    # Life and turn
    life: int = DEFAULT_STARTING_LIFE
    starting_life: int = DEFAULT_STARTING_LIFE
    turn: int = 1
    result: GameResult = GameResult.ONGOING

    # Zones
    library: Zone = field(default_factory=_empty_zone(ZoneName.LIBRARY))
    hand: Zone = field(default_factory=_empty_zone(ZoneName.HAND))
    battlefield: Zone = field(default_factory=_empty_zone(ZoneName.BATTLEFIELD))
    graveyard: Zone = field(default_factory=_empty_zone(ZoneName.GRAVEYARD))
    exile: Zone = field(default_factory=_empty_zone(ZoneName.EXILE))

    # Metadata
    player_name: str = "Player"
    deck_name: str | None = None
    format: str = "casual"
    game_number: int = 1

    # Timestamps (seconds since epoch)
    created_at: float = 0.0
    updated_at: float = 0.0
    started_at: float = 0.0
    ended_at: float | None = None

    def zone(self, name: ZoneName | str) -> Zone:
        """Get a zone by name."""
        return getattr(self, ZoneName.parse(name).value)

    @property
    def zones(self) -> dict[ZoneName, Zone]:
        return {name: self.zone(name) for name in ZONE_ORDER}

    def with_zone(self, zone: Zone) -> GameSession:
        """Return new session with one zone replaced."""
        return self._copy_with(**{zone.name.value: zone})

    def all_cards(self) -> list[Card]:
        """Every card, zones concatenated in ZONE_ORDER."""
        cards: list[Card] = []
        for name in ZONE_ORDER:
            cards.extend(self.zone(name).cards)
        return cards

    def card_ids(self) -> list[str]:
        return [c.card_id for c in self.all_cards()]

    @property
    def card_count(self) -> int:
        return sum(z.count for z in self.zones.values())

    def locate(self, card_id: str) -> ZoneName | None:
        """Which zone holds card_id, if any."""
        for name in ZONE_ORDER:
            if self.zone(name).contains(card_id):
                return name
        return None

    @property
    def life_in_range(self) -> bool:
        """Soft bounds check; the engine never clamps life."""
        return SOFT_LIFE_MIN <= self.life <= SOFT_LIFE_MAX

    @property
    def is_over(self) -> bool:
        return self.result != GameResult.ONGOING

    @property
    def duration_minutes(self) -> int:
        """Whole minutes from start to end (or to last update while ongoing)."""
        end = self.ended_at if self.ended_at is not None else self.updated_at
        return max(0, round((end - self.started_at) / 60))

    def _copy_with(self, **kwargs) -> GameSession:
        """Create a copy with some fields replaced."""
        return GameSession(
            session_id=kwargs.get("session_id", self.session_id),
            life=kwargs.get("life", self.life),
            starting_life=kwargs.get("starting_life", self.starting_life),
            turn=kwargs.get("turn", self.turn),
            result=kwargs.get("result", self.result),
            library=kwargs.get("library", self.library),
            hand=kwargs.get("hand", self.hand),
            battlefield=kwargs.get("battlefield", self.battlefield),
            graveyard=kwargs.get("graveyard", self.graveyard),
            exile=kwargs.get("exile", self.exile),
            player_name=kwargs.get("player_name", self.player_name),
            deck_name=kwargs.get("deck_name", self.deck_name),
            format=kwargs.get("format", self.format),
            game_number=kwargs.get("game_number", self.game_number),
            created_at=kwargs.get("created_at", self.created_at),
            updated_at=kwargs.get("updated_at", self.updated_at),
            started_at=kwargs.get("started_at", self.started_at),
            ended_at=kwargs.get("ended_at", self.ended_at),
        )

    def clone(self) -> GameSession:
        """Deep copy the session."""
        return deepcopy(self)


# =============================================================================
# Serialization
# =============================================================================

def card_to_dict(card: Card) -> dict[str, Any]:
    return {
        "id": card.card_id,
        "name": card.name,
        "image_url": card.image_url,
        "tapped": card.tapped,
        "position": card.position.to_dict(),
        "counters": dict(card.counters),
    }


def card_from_dict(data: dict[str, Any]) -> Card:
    position = data.get("position") or {}
    return Card(
        card_id=str(data["id"]),
        name=data["name"],
        image_url=data.get("image_url", ""),
        tapped=bool(data.get("tapped", False)),
        position=Position(
            x=float(position.get("x", 0.0)),
            y=float(position.get("y", 0.0)),
        ),
        counters={str(k): int(v) for k, v in (data.get("counters") or {}).items()},
    )


def session_to_dict(session: GameSession) -> dict[str, Any]:
    """
    Serialize a session to plain JSON-compatible data.

    Zone order and every per-card field round-trip exactly.
    """
    return {
        "session_id": session.session_id,
        "life": session.life,
        "starting_life": session.starting_life,
        "turn": session.turn,
        "result": session.result.value,
        "zones": {
            name.value: [card_to_dict(c) for c in session.zone(name).cards]
            for name in ZONE_ORDER
        },
        "player_name": session.player_name,
        "deck_name": session.deck_name,
        "format": session.format,
        "game_number": session.game_number,
        "created_at": session.created_at,
        "updated_at": session.updated_at,
        "started_at": session.started_at,
        "ended_at": session.ended_at,
    }


def session_from_dict(data: dict[str, Any]) -> GameSession:
    """Inverse of session_to_dict()."""
    zones_data = data.get("zones") or {}
    zones = {
        name.value: Zone(
            name=name,
            cards=[card_from_dict(c) for c in zones_data.get(name.value, [])],
        )
        for name in ZONE_ORDER
    }
    return GameSession(
        session_id=data["session_id"],
        life=int(data.get("life", DEFAULT_STARTING_LIFE)),
        starting_life=int(data.get("starting_life", DEFAULT_STARTING_LIFE)),
        turn=int(data.get("turn", 1)),
        result=GameResult(data.get("result", GameResult.ONGOING.value)),
        player_name=data.get("player_name", "Player"),
        deck_name=data.get("deck_name"),
        format=data.get("format", "casual"),
        game_number=int(data.get("game_number", 1)),
        created_at=float(data.get("created_at", 0.0)),
        updated_at=float(data.get("updated_at", 0.0)),
        started_at=float(data.get("started_at", 0.0)),
        ended_at=data.get("ended_at"),
        **zones,
    )
