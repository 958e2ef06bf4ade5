"""
Tests for session storage and the session manager.

Tests:
- Store round trips (memory and JSON files)
- Manager lifecycle
- Per-session serialization of concurrent updates
"""

import json
import threading

import pytest

from ..engine_core.action import Action
from ..engine_core.state import ZoneName
from ..session import InMemorySessionStore, JsonFileSessionStore, SessionManager
from .conftest import SAMPLE_DECK_LIST


class TestInMemoryStore:
    def test_round_trip(self, spread_session):
        store = InMemorySessionStore()
        store.save(spread_session)

        loaded = store.load("spread_game")
        assert loaded.card_ids() == spread_session.card_ids()
        assert loaded.battlefield.get("bf2").counters == {"+1/+1": 2}
        assert store.list_ids() == ["spread_game"]

    def test_loaded_copy_is_detached(self, spread_session):
        store = InMemorySessionStore()
        store.save(spread_session)

        loaded = store.load("spread_game")
        loaded.hand.cards.clear()
        assert store.load("spread_game").hand.count == 2

    def test_delete(self, spread_session):
        store = InMemorySessionStore()
        store.save(spread_session)

        assert store.delete("spread_game")
        assert not store.delete("spread_game")
        assert store.load("spread_game") is None


class TestJsonFileStore:
    def test_round_trip(self, tmp_path, spread_session):
        store = JsonFileSessionStore(tmp_path)
        store.save(spread_session)

        assert (tmp_path / "spread_game.json").exists()
        loaded = store.load("spread_game")
        for name in ZoneName:
            assert [c.card_id for c in loaded.zone(name)] == [
                c.card_id for c in spread_session.zone(name)
            ]
        assert loaded.battlefield.get("bf1").tapped is True

    def test_document_shape(self, tmp_path, spread_session):
        JsonFileSessionStore(tmp_path).save(spread_session)

        document = json.loads((tmp_path / "spread_game.json").read_text())
        assert set(document["zones"]) == {"library", "hand", "battlefield", "graveyard", "exile"}
        assert document["life"] == 7

    def test_list_and_delete(self, tmp_path, spread_session, sixty_card_session):
        store = JsonFileSessionStore(tmp_path)
        store.save(spread_session)
        store.save(sixty_card_session)

        assert store.list_ids() == ["spread_game", "test_game"]
        assert store.delete("test_game")
        assert store.list_ids() == ["spread_game"]

    @pytest.mark.parametrize("session_id", ["../escape", "a/b", ""])
    def test_unsafe_ids(self, tmp_path, session_id):
        store = JsonFileSessionStore(tmp_path)
        assert store.load(session_id) is None
        assert store.delete(session_id) is False

    def test_save_unsafe_id_raises(self, tmp_path, spread_session):
        store = JsonFileSessionStore(tmp_path)
        with pytest.raises(ValueError):
            store.save(spread_session._copy_with(session_id="../escape"))


class TestSessionManager:
    def test_create_with_deck_list(self, manager):
        result = manager.create_session(deck_list=SAMPLE_DECK_LIST, player_name="Ana")

        assert result.success
        session = manager.get_session(result.new_state.session_id)
        assert session.library.count == 7
        assert session.player_name == "Ana"

    def test_create_placeholder(self, manager):
        result = manager.create_session()
        assert result.new_state.library.count == 60

    def test_create_bad_deck_list_not_stored(self, manager):
        result = manager.create_session(deck_list="")

        assert not result.success
        assert result.error_code == "EMPTY_DECK_LIST"
        assert manager.list_sessions() == []

    def test_apply_persists(self, manager):
        session_id = manager.create_session().new_state.session_id

        result = manager.apply(session_id, Action.draw(7))
        assert result.success
        assert manager.get_session(session_id).hand.count == 7

    def test_failed_apply_does_not_persist(self, manager):
        session_id = manager.create_session().new_state.session_id

        result = manager.apply(session_id, Action.toggle_tap("missing"))
        assert not result.success
        assert manager.get_session(session_id).library.count == 60

    def test_apply_missing_session(self, manager):
        result = manager.apply("missing", Action.draw(1))

        assert not result.success
        assert result.error_code == "SESSION_NOT_FOUND"
        assert result.error_kind == "not_found"

    def test_missing_sessions_leave_no_locks(self, manager):
        for i in range(200):
            assert not manager.apply(f"missing-{i}", Action.shuffle()).success
            manager.end_session(f"gone-{i}")

        assert manager._locks == {}

    def test_ended_session_drops_lock(self, manager):
        session_id = manager.create_session().new_state.session_id
        manager.apply(session_id, Action.draw(1))
        assert session_id in manager._locks

        manager.end_session(session_id)
        assert session_id not in manager._locks

    def test_require_session(self, manager):
        from ..engine_core.errors import SessionNotFound

        with pytest.raises(SessionNotFound):
            manager.require_session("missing")

    def test_end_session(self, manager):
        session_id = manager.create_session().new_state.session_id

        assert manager.end_session(session_id)
        assert manager.get_session(session_id) is None
        assert not manager.end_session(session_id)

    def test_summary(self, manager):
        session_id = manager.create_session(deck_list="3 Forest").new_state.session_id
        manager.apply(session_id, Action.draw(1))

        summary = manager.summary(session_id)
        assert summary["zones"] == {
            "library": 2, "hand": 1, "battlefield": 0, "graveyard": 0, "exile": 0,
        }
        assert manager.summary("missing") is None

    def test_concurrent_updates_serialize(self, manager):
        session_id = manager.create_session().new_state.session_id
        workers, rounds = 8, 25

        def hammer():
            for _ in range(rounds):
                assert manager.apply(session_id, Action.adjust_life(-1)).success

        threads = [threading.Thread(target=hammer) for _ in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert manager.get_session(session_id).life == 20 - workers * rounds

    def test_file_backed_manager(self, tmp_path, providers):
        manager = SessionManager(store=JsonFileSessionStore(tmp_path), providers=providers)
        session_id = manager.create_session(deck_list=SAMPLE_DECK_LIST).new_state.session_id
        manager.apply(session_id, Action.draw(2))

        reopened = SessionManager(store=JsonFileSessionStore(tmp_path))
        session = reopened.get_session(session_id)
        assert [c.name for c in session.hand] == ["Lightning Bolt", "Lightning Bolt"]
