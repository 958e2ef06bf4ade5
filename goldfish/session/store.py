"""
Session Store - Persistence for game sessions.

The engine has no opinion on storage. A store only has to load and
overwrite whole sessions by id; every save is a full document, since
any operation that touched a zone leaves the whole session dirty.

Two implementations:
- InMemorySessionStore: dict-backed, for tests and single-process use
- JsonFileSessionStore: one <session_id>.json document per session
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
import json
import logging
import re

from ..engine_core.state import GameSession, session_from_dict, session_to_dict

logger = logging.getLogger(__name__)

# Ids become file names, so keep them to a safe alphabet
SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


class SessionStore(ABC):
    """Load/save/delete sessions by id."""

    @abstractmethod
    def load(self, session_id: str) -> GameSession | None:
        """Return the session, or None when it does not exist."""

    @abstractmethod
    def save(self, session: GameSession):
        """Overwrite the stored session."""

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        """Remove the session. Returns False when it did not exist."""

    @abstractmethod
    def list_ids(self) -> list[str]:
        """Ids of every stored session."""


class InMemorySessionStore(SessionStore):
    """
    Dict-backed store.

    Sessions are stored as serialized documents, not live objects, so
    a caller holding a loaded session can never alter the stored copy.
    """

    def __init__(self):
        self._documents: dict[str, dict] = {}

    def load(self, session_id: str) -> GameSession | None:
        document = self._documents.get(session_id)
        if document is None:
            return None
        return session_from_dict(document)

    def save(self, session: GameSession):
        self._documents[session.session_id] = session_to_dict(session)

    def delete(self, session_id: str) -> bool:
        return self._documents.pop(session_id, None) is not None

    def list_ids(self) -> list[str]:
        return list(self._documents.keys())


class JsonFileSessionStore(SessionStore):
    """
    File-based store.

    Usage:
        store = JsonFileSessionStore("~/.goldfish/sessions")
        store.save(session)
        session = store.load(session_id)
    """

    def __init__(self, directory: str | Path | None = None):
        if directory is None:
            directory = Path.home() / ".goldfish" / "sessions"
        self.directory = Path(directory).expanduser()
        self.directory.mkdir(parents=True, exist_ok=True)

    def load(self, session_id: str) -> GameSession | None:
        path = self._path(session_id)
        if path is None or not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
        return session_from_dict(document)

    def save(self, session: GameSession):
        path = self._path(session.session_id)
        if path is None:
            raise ValueError(f"Invalid session id for file storage: {session.session_id!r}")

        # Write then rename so a crash never leaves half a document
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(session_to_dict(session), f, indent=2)
        tmp_path.replace(path)
        logger.debug("Saved session %s to %s", session.session_id, path)

    def delete(self, session_id: str) -> bool:
        path = self._path(session_id)
        if path is None or not path.exists():
            return False
        path.unlink()
        return True

    def list_ids(self) -> list[str]:
        return sorted(f.stem for f in self.directory.glob("*.json"))

    def _path(self, session_id: str) -> Path | None:
        """File path for a session, or None if the id is not file-safe."""
        if not SESSION_ID_PATTERN.match(session_id or ""):
            return None
        return self.directory / f"{session_id}.json"
