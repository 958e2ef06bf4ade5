"""
Session Module - Stores and serializes access to game sessions.

A session is one GameSession value kept in a SessionStore:
- Created with a placeholder deck, given cards or a deck list
- Mutated one action at a time under a per-session lock
- Deleted when the caller ends it

The engine never touches the store; the manager does.
"""

from .manager import SessionManager
from .store import SessionStore, InMemorySessionStore, JsonFileSessionStore

__all__ = [
    "SessionManager",
    "SessionStore",
    "InMemorySessionStore",
    "JsonFileSessionStore",
]
