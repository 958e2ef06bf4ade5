"""
Session Manager - Creates, mutates and ends game sessions.

LIFECYCLE:
1. Caller creates a session (placeholder deck, given cards or deck list)
2. Each operation:
   - takes the session's lock
   - loads the session from the store
   - applies one action through the reducer
   - saves the new session if the action succeeded
   - releases the lock
3. Caller ends the session -> deleted from the store

CONCURRENCY RULES:
- At most one in-flight mutation per session
- Different sessions never wait on each other
- The engine itself stays lock-free; locking lives here
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import Any, Iterable, Iterator
import logging
import threading

from ..engine_core.action import Action, ActionResult
from ..engine_core.errors import SessionNotFound
from ..engine_core.providers import Providers
from ..engine_core.reducer import Reducer
from ..engine_core.setup import create_session
from ..engine_core.state import Card, DEFAULT_STARTING_LIFE, GameSession
from .store import InMemorySessionStore, SessionStore

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Manages game sessions on top of a SessionStore.

    Responsibilities:
    - Create sessions and persist them
    - Serialize mutations per session
    - Translate a missing session into a typed failure
    """

    def __init__(
        self,
        store: SessionStore | None = None,
        providers: Providers | None = None,
    ):
        self.store = store or InMemorySessionStore()
        self.providers = providers or Providers()
        self.reducer = Reducer(providers=self.providers)

        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def lock(self, session_id: str) -> Iterator[None]:
        """Hold the per-session lock for the duration of the block."""
        with self._locks_guard:
            session_lock = self._locks.setdefault(session_id, threading.Lock())
        with session_lock:
            yield

    def create_session(
        self,
        deck: Iterable[Card] | None = None,
        deck_list: str | None = None,
        starting_life: int = DEFAULT_STARTING_LIFE,
        player_name: str = "Player",
        deck_name: str | None = None,
        format: str = "casual",
    ) -> ActionResult:
        """
        Create and store a new session.

        With deck_list the library comes from the parsed list; with deck
        it is those cards; with neither it is the placeholder deck.

        Returns:
            ActionResult whose new_state is the stored session
        """
        initial_deck = [] if deck_list is not None else deck
        session = create_session(
            deck=initial_deck,
            providers=self.providers,
            starting_life=starting_life,
            player_name=player_name,
            deck_name=deck_name,
            format=format,
        )

        if deck_list is not None:
            result = self.reducer.apply(session, Action.import_deck(deck_list, deck_name))
            if not result.success:
                logger.info("Rejected new session: %s", result.error)
                return result
            session = result.new_state

        with self.lock(session.session_id):
            self.store.save(session)

        logger.info(
            "Created session %s with %d cards in library",
            session.session_id,
            session.library.count,
        )
        return ActionResult.success_with_state(
            session,
            changes=[f"Created session with {session.library.count} cards"],
        )

    def get_session(self, session_id: str) -> GameSession | None:
        """Get a session by ID."""
        return self.store.load(session_id)

    def require_session(self, session_id: str) -> GameSession:
        """Get a session by ID, raising SessionNotFound."""
        session = self.store.load(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def apply(self, session_id: str, action: Action) -> ActionResult:
        """
        Apply one action to a stored session.

        Load, reduce and save all happen under the session's lock.
        Failed actions leave the stored session untouched. Unknown ids
        never leave a lock behind.
        """
        if self.store.load(session_id) is None:
            return _session_not_found(session_id)

        with self.lock(session_id):
            session = self.store.load(session_id)
            if session is None:
                self._drop_lock(session_id)
                return _session_not_found(session_id)

            result = self.reducer.apply(session, action)
            if result.success:
                self.store.save(result.new_state)
                logger.debug(
                    "Session %s: %s -> %s",
                    session_id,
                    action.action_type.value,
                    "; ".join(result.state_changes),
                )
            else:
                logger.info(
                    "Session %s: %s failed with %s: %s",
                    session_id,
                    action.action_type.value,
                    result.error_code,
                    result.error,
                )
            return result

    def end_session(self, session_id: str) -> bool:
        """
        Delete a session from the store.

        Returns False when it did not exist.
        """
        with self.lock(session_id):
            deleted = self.store.delete(session_id)
        self._drop_lock(session_id)

        if deleted:
            logger.info("Ended session %s", session_id)
        return deleted

    def _drop_lock(self, session_id: str):
        with self._locks_guard:
            self._locks.pop(session_id, None)

    def list_sessions(self) -> list[str]:
        """List IDs of stored sessions."""
        return self.store.list_ids()

    def summary(self, session_id: str) -> dict[str, Any] | None:
        """Zone sizes and scalars for a session, or None."""
        session = self.store.load(session_id)
        if session is None:
            return None
        return {
            "session_id": session.session_id,
            "life": session.life,
            "turn": session.turn,
            "result": session.result.value,
            "zones": {name.value: zone.count for name, zone in session.zones.items()},
        }


def _session_not_found(session_id: str) -> ActionResult:
    error = SessionNotFound(session_id)
    return ActionResult.failure(
        error.message,
        error_code=error.error_code,
        error_kind=error.error_kind,
        details=error.details,
    )
