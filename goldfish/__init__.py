"""
Goldfish - Single-player card table engine

A deterministic engine for testing a deck alone ("goldfishing").
The engine keeps one game's five zones and provides:
- Deck list import
- Draw, move, tap, counters
- Fisher-Yates shuffle and full reset
- Card conservation across every operation
"""

__version__ = "0.1.0"
