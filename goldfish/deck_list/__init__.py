"""
Deck List - Free-text deck list parsing.

A deck list is one card per line, optionally prefixed by a count:

    4 Lightning Bolt
    Forest
    2 Island
"""

from .parser import (
    DeckLine,
    card_image_url,
    parse_deck_lines,
    parse_deck_list,
    summarize_deck_list,
)

__all__ = [
    "DeckLine",
    "card_image_url",
    "parse_deck_lines",
    "parse_deck_list",
    "summarize_deck_list",
]
