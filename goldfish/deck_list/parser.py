"""
Parser for free-text deck lists.

Format:
    [<count>] <card name>

Example:
    4 Lightning Bolt
    Forest
    2 Island

Rules:
- Blank lines are skipped
- A missing count means one copy
- A count of 0 also means one copy (the count defaults to 1 whenever
  it parses to zero)
- Names are trimmed; everything after the count is the name
"""

from __future__ import annotations
from dataclasses import dataclass
from urllib.parse import quote
import re

from ..engine_core.errors import EmptyDeckList, NoValidCards
from ..engine_core.providers import Providers
from ..engine_core.state import Card

# Groups: (count or None, card_name)
DECK_LINE_PATTERN = re.compile(r"^(\d+)?\s*(.+)$", re.ASCII)

IMAGE_URL_TEMPLATE = (
    "https://api.scryfall.com/cards/named?format=image&face=front&fuzzy={name}"
)


@dataclass(frozen=True)
class DeckLine:
    """One parsed line: how many copies of which card."""
    count: int
    name: str


def card_image_url(name: str) -> str:
    """Image lookup URL for a card name (encodeURIComponent-compatible)."""
    return IMAGE_URL_TEMPLATE.format(name=quote(name, safe="-_.!~*'()"))


def parse_deck_lines(text: str) -> list[DeckLine]:
    """
    Parse deck list text into (count, name) lines.

    Raises:
        EmptyDeckList: text is empty or whitespace only
    """
    if not text or not text.strip():
        raise EmptyDeckList()

    lines: list[DeckLine] = []
    for raw in text.strip().splitlines():
        line = raw.strip()
        if not line:
            continue

        match = DECK_LINE_PATTERN.match(line)
        if not match:
            continue

        count_text, name = match.groups()
        name = name.strip()
        if not name:
            continue

        count = int(count_text) if count_text else 0
        lines.append(DeckLine(count=count or 1, name=name))

    return lines


def parse_deck_list(text: str, providers: Providers) -> list[Card]:
    """
    Parse deck list text into freshly minted cards, in list order.

    Each copy gets its own id from providers.new_id().

    Raises:
        EmptyDeckList: text is empty or whitespace only
        NoValidCards: no line produced a card
    """
    cards: list[Card] = []
    for line in parse_deck_lines(text):
        image_url = card_image_url(line.name)
        for _ in range(line.count):
            cards.append(
                Card(
                    card_id=providers.new_id(),
                    name=line.name,
                    image_url=image_url,
                )
            )

    if not cards:
        raise NoValidCards()
    return cards


def summarize_deck_list(text: str) -> list[DeckLine]:
    """
    Collapse repeated names into one line each, first-seen order.

    "Forest\\n2 Forest" becomes [DeckLine(3, "Forest")].
    """
    totals: dict[str, int] = {}
    for line in parse_deck_lines(text):
        totals[line.name] = totals.get(line.name, 0) + line.count
    return [DeckLine(count=count, name=name) for name, count in totals.items()]
