"""
Tests for the reducer (session transitions).

Tests:
- Each operation's effect on zones and scalars
- Draw boundaries
- Move/reposition semantics
- Error codes and kinds
"""

import pytest

from ..engine_core.action import Action, ActionPayload, ActionType
from ..engine_core.reducer import Reducer, apply_action, view_library
from ..engine_core.setup import create_session
from ..engine_core.state import GameResult, Position, ORIGIN, ZoneName
from ..engine_core import operations
from .conftest import SAMPLE_DECK_LIST, make_card


def _ok(result):
    assert result.success, result.error
    return result.new_state


class TestImportDeck:
    """Tests for deck list import."""

    def test_import_scenario(self, spread_session, reducer):
        """Import replaces the library and clears everything else."""
        state = _ok(reducer.apply(spread_session, Action.import_deck(SAMPLE_DECK_LIST)))

        names = [c.name for c in state.library]
        assert names == ["Lightning Bolt"] * 4 + ["Forest"] + ["Island"] * 2
        assert state.life == 20
        for zone in (ZoneName.HAND, ZoneName.BATTLEFIELD, ZoneName.GRAVEYARD, ZoneName.EXILE):
            assert state.zone(zone).is_empty
        assert state.turn == 1

    def test_import_uses_starting_life(self, providers, reducer):
        session = create_session(deck=[], providers=providers, starting_life=40)
        session = session._copy_with(life=3)

        state = _ok(reducer.apply(session, Action.import_deck("Forest")))
        assert state.life == 40

    def test_import_records_deck_name(self, sixty_card_session, reducer):
        state = _ok(reducer.apply(sixty_card_session, Action.import_deck("Forest", "Mono G")))
        assert state.deck_name == "Mono G"

    def test_import_empty_fails(self, sixty_card_session, reducer):
        result = reducer.apply(sixty_card_session, Action.import_deck("   \n  "))

        assert not result.success
        assert result.error_code == "EMPTY_DECK_LIST"
        assert result.error_kind == "validation"

    def test_failed_import_leaves_state(self, sixty_card_session, reducer):
        result = reducer.apply(sixty_card_session, Action.import_deck(""))
        assert not result.success
        assert sixty_card_session.library.count == 60


class TestDrawAction:
    """Tests for draw action."""

    def test_draw_seven_from_sixty(self, sixty_card_session, reducer):
        """Drawing takes the former top cards, in order."""
        result = reducer.apply(sixty_card_session, Action.draw(7))
        state = _ok(result)

        assert state.hand.count == 7
        assert state.library.count == 53
        assert [c.card_id for c in state.hand] == [f"c{i}" for i in range(7)]
        assert [c.card_id for c in result.cards] == [f"c{i}" for i in range(7)]

    def test_draw_defaults_to_one(self, sixty_card_session, reducer):
        state = _ok(reducer.apply(sixty_card_session, Action(ActionType.DRAW_CARDS)))
        assert state.hand.count == 1

    def test_draw_appends_to_hand(self, spread_session, reducer):
        state = _ok(reducer.apply(spread_session, Action.draw(1)))
        assert [c.card_id for c in state.hand] == ["hand1", "hand2", "lib1"]

    def test_draw_more_than_library(self, spread_session, reducer):
        """Drawing past the bottom drains the library without failing."""
        state = _ok(reducer.apply(spread_session, Action.draw(10)))

        assert state.library.is_empty
        assert state.hand.count == 5

    def test_draw_from_empty_library(self, providers, reducer):
        session = create_session(deck=[], providers=providers)
        result = reducer.apply(session, Action.draw(3))

        assert result.success
        assert result.new_state.hand.is_empty
        assert result.cards == []

    def test_draw_zero(self, sixty_card_session, reducer):
        state = _ok(reducer.apply(sixty_card_session, Action.draw(0)))
        assert state.hand.is_empty
        assert state.library.count == 60

    def test_draw_negative_fails(self, sixty_card_session, reducer):
        result = reducer.apply(sixty_card_session, Action.draw(-1))
        assert not result.success
        assert result.error_code == "INVALID_COUNT"

    def test_draw_non_integer_fails(self, sixty_card_session, reducer):
        result = reducer.apply(
            sixty_card_session,
            Action(ActionType.DRAW_CARDS, ActionPayload(count="7")),
        )
        assert not result.success
        assert result.error_kind == "validation"


class TestToggleTap:
    """Tests for tapping."""

    def test_toggle_twice_restores(self, spread_session, reducer):
        once = _ok(reducer.apply(spread_session, Action.toggle_tap("bf2")))
        assert once.battlefield.get("bf2").tapped is True

        twice = _ok(reducer.apply(once, Action.toggle_tap("bf2")))
        assert twice.battlefield.get("bf2").tapped is False

    def test_toggle_keeps_order(self, spread_session, reducer):
        state = _ok(reducer.apply(spread_session, Action.toggle_tap("bf1")))
        assert [c.card_id for c in state.battlefield] == ["bf1", "bf2"]

    def test_toggle_card_in_hand_fails(self, spread_session, reducer):
        result = reducer.apply(spread_session, Action.toggle_tap("hand1"))

        assert not result.success
        assert result.error_code == "CARD_NOT_ON_BATTLEFIELD"
        assert result.error_kind == "not_found"


class TestMoveCard:
    """Tests for moving cards between zones."""

    def test_hand_to_battlefield_to_graveyard(self, spread_session, reducer):
        state = _ok(reducer.apply(
            spread_session, Action.move("hand1", "hand", "battlefield", (50, 50))
        ))
        assert state.battlefield.get("hand1").position == Position(50, 50)

        state = _ok(reducer.apply(state, Action.move("hand1", "battlefield", "graveyard")))

        card = state.graveyard.get("hand1")
        assert card is not None
        assert card.tapped is False
        assert card.position == ORIGIN
        assert not state.hand.contains("hand1")
        assert not state.battlefield.contains("hand1")

    def test_move_appends_to_target(self, spread_session, reducer):
        state = _ok(reducer.apply(spread_session, Action.move("hand2", "hand", "graveyard")))
        assert [c.card_id for c in state.graveyard] == ["gy1", "hand2"]
        assert [c.card_id for c in state.hand] == ["hand1"]

    def test_leaving_battlefield_clears_state(self, spread_session, reducer):
        state = _ok(reducer.apply(spread_session, Action.move("bf2", "battlefield", "exile")))

        card = state.exile.get("bf2")
        assert card.counters == {}
        assert card.position == ORIGIN

    def test_battlefield_reposition(self, spread_session, reducer):
        """Same-zone battlefield move changes only the position."""
        before = spread_session.battlefield
        state = _ok(reducer.apply(
            spread_session, Action.move("bf1", "battlefield", "battlefield", (80, 5))
        ))

        after = state.battlefield
        assert after.count == before.count
        assert [c.card_id for c in after] == [c.card_id for c in before]
        moved = after.get("bf1")
        assert moved.position == Position(80, 5)
        assert moved.tapped is True
        assert after.get("bf2").same_as(before.get("bf2"))

    def test_battlefield_reposition_without_position(self, spread_session, reducer):
        state = _ok(reducer.apply(
            spread_session, Action.move("bf1", "battlefield", "battlefield")
        ))
        assert state.battlefield.get("bf1").position == Position(10, 20)
        assert state.battlefield.count == 2

    def test_move_without_position_to_battlefield(self, spread_session, reducer):
        state = _ok(reducer.apply(spread_session, Action.move("gy1", "graveyard", "battlefield")))
        assert state.battlefield.get("gy1").position == ORIGIN

    def test_position_as_mapping(self, spread_session, reducer):
        state = _ok(reducer.apply(
            spread_session, Action.move("hand1", "hand", "battlefield", {"x": 1, "y": 99})
        ))
        assert state.battlefield.get("hand1").position == Position(1, 99)

    def test_move_from_wrong_zone_fails(self, spread_session, reducer):
        result = reducer.apply(spread_session, Action.move("hand1", "graveyard", "exile"))

        assert not result.success
        assert result.error_code == "CARD_NOT_FOUND_IN_ZONE"
        assert result.details["zone"] == "graveyard"

    def test_unknown_zone_fails(self, spread_session, reducer):
        result = reducer.apply(spread_session, Action.move("hand1", "hand", "sideboard"))
        assert not result.success
        assert result.error_code == "UNKNOWN_ZONE"

    def test_position_off_board_fails(self, spread_session, reducer):
        result = reducer.apply(
            spread_session, Action.move("hand1", "hand", "battlefield", (101, 0))
        )
        assert not result.success
        assert result.error_code == "INVALID_POSITION"

    def test_position_ignored_off_battlefield(self, spread_session, reducer):
        """A stale position on a move to another zone is dropped, not validated."""
        state = _ok(reducer.apply(
            spread_session, Action.move("bf1", "battlefield", "graveyard", (150, 0))
        ))

        card = state.graveyard.get("bf1")
        assert card.position == ORIGIN
        assert card.tapped is False

    def test_missing_card_id_fails(self, spread_session, reducer):
        result = reducer.apply(
            spread_session,
            Action(ActionType.MOVE_CARD, ActionPayload(source_zone="hand", target_zone="exile")),
        )
        assert not result.success
        assert "card_id" in result.error


class TestLibraryPlacement:
    """Tests for top/bottom of library."""

    def test_to_top(self, spread_session, reducer):
        state = _ok(reducer.apply(spread_session, Action.to_library_top("bf1", "battlefield")))

        assert state.library.cards[0].card_id == "bf1"
        assert state.library.cards[0].tapped is False
        assert state.library.cards[0].position == ORIGIN

    def test_to_bottom(self, spread_session, reducer):
        state = _ok(reducer.apply(spread_session, Action.to_library_bottom("hand1", "hand")))
        assert [c.card_id for c in state.library] == ["lib1", "lib2", "lib3", "hand1"]

    def test_library_to_bottom(self, spread_session, reducer):
        state = _ok(reducer.apply(spread_session, Action.to_library_bottom("lib1", "library")))
        assert [c.card_id for c in state.library] == ["lib2", "lib3", "lib1"]

    def test_missing_card_fails(self, spread_session, reducer):
        result = reducer.apply(spread_session, Action.to_library_top("nope", "hand"))
        assert result.error_code == "CARD_NOT_FOUND_IN_ZONE"


class TestShuffleAndReset:
    """Tests for shuffle and reset."""

    def test_shuffle_only_touches_library(self, spread_session, reducer):
        state = _ok(reducer.apply(spread_session, Action.shuffle()))

        assert sorted(c.card_id for c in state.library) == ["lib1", "lib2", "lib3"]
        assert [c.card_id for c in state.hand] == ["hand1", "hand2"]
        assert state.battlefield.get("bf1").tapped is True

    def test_shuffle_is_reproducible(self, sixty_card_session):
        from ..engine_core.providers import Providers

        first = apply_action(sixty_card_session, Action.shuffle(), Providers.seeded(7))
        second = apply_action(sixty_card_session, Action.shuffle(), Providers.seeded(7))
        assert first.new_state.card_ids() == second.new_state.card_ids()

    def test_reset(self, spread_session, reducer):
        state = _ok(reducer.apply(spread_session, Action.reset()))

        assert state.library.count == spread_session.card_count
        for zone in (ZoneName.HAND, ZoneName.BATTLEFIELD, ZoneName.GRAVEYARD, ZoneName.EXILE):
            assert state.zone(zone).is_empty
        assert state.life == state.starting_life
        assert state.turn == 1
        assert state.result == GameResult.ONGOING
        for card in state.library:
            assert card.tapped is False
            assert card.position == ORIGIN
            assert card.counters == {}

    def test_reset_bumps_game_number(self, spread_session, reducer):
        state = _ok(reducer.apply(spread_session, Action.reset()))
        assert state.game_number == spread_session.game_number + 1

    def test_reset_reopens_finished_game(self, spread_session, reducer):
        ended = _ok(reducer.apply(spread_session, Action.end_game("loss")))
        state = _ok(reducer.apply(ended, Action.reset()))

        assert state.result == GameResult.ONGOING
        assert state.ended_at is None


class TestLifeTurnAndResult:
    """Tests for life, turns, counters and end of game."""

    def test_adjust_life(self, sixty_card_session, reducer):
        state = _ok(reducer.apply(sixty_card_session, Action.adjust_life(-3)))
        state = _ok(reducer.apply(state, Action.adjust_life(5)))
        assert state.life == 22

    def test_life_is_not_clamped(self, sixty_card_session, reducer):
        state = _ok(reducer.apply(sixty_card_session, Action.adjust_life(-500)))
        assert state.life == -480
        assert state.life_in_range is False

    def test_next_turn_untaps(self, spread_session, reducer):
        state = _ok(reducer.apply(spread_session, Action.next_turn()))
        assert state.turn == 6
        assert all(not c.tapped for c in state.battlefield)

    def test_set_counter(self, spread_session, reducer):
        state = _ok(reducer.apply(spread_session, Action.set_counter("bf1", "loyalty", 3)))
        assert state.battlefield.get("bf1").counters == {"loyalty": 3}

        state = _ok(reducer.apply(state, Action.set_counter("bf1", "loyalty", 0)))
        assert state.battlefield.get("bf1").counters == {}

    def test_set_counter_negative_fails(self, spread_session, reducer):
        result = reducer.apply(spread_session, Action.set_counter("bf1", "loyalty", -1))
        assert result.error_code == "INVALID_COUNTER"

    def test_set_counter_off_battlefield_fails(self, spread_session, reducer):
        result = reducer.apply(spread_session, Action.set_counter("hand1", "loyalty", 1))
        assert result.error_code == "CARD_NOT_ON_BATTLEFIELD"

    def test_end_game(self, spread_session, reducer):
        state = _ok(reducer.apply(spread_session, Action.end_game("win")))
        assert state.result == GameResult.WIN
        assert state.ended_at is not None
        assert state.is_over

    @pytest.mark.parametrize("result", ["ongoing", "victory"])
    def test_end_game_bad_result(self, spread_session, reducer, result):
        outcome = reducer.apply(spread_session, Action.end_game(result))
        assert outcome.error_code == "INVALID_RESULT"


class TestTimestamps:
    """Every operation stamps updated_at."""

    @pytest.mark.parametrize("action", [
        Action.adjust_life(1),
        Action.draw(1),
        Action.shuffle(),
        Action.reset(),
        Action.next_turn(),
        Action.toggle_tap("bf1"),
        Action.move("hand1", "hand", "exile"),
    ])
    def test_updated_at_advances(self, spread_session, reducer, action):
        state = _ok(reducer.apply(spread_session, action))
        assert state.updated_at > spread_session.updated_at

    def test_input_session_is_untouched(self, spread_session, reducer):
        snapshot = spread_session.clone()
        reducer.apply(spread_session, Action.move("bf1", "battlefield", "hand"))

        assert spread_session.battlefield.get("bf1").tapped is True
        assert spread_session.card_ids() == snapshot.card_ids()


class TestOperations:
    """Named wrappers route through the reducer."""

    def test_operation_wrappers(self, spread_session, providers):
        state = _ok(operations.draw_cards(spread_session, 2, providers=providers))
        state = _ok(operations.move_card(state, "lib1", "hand", "battlefield", (5, 5), providers))
        state = _ok(operations.toggle_tap(state, "lib1", providers))
        state = _ok(operations.move_to_library_top(state, "lib1", "battlefield", providers))
        state = _ok(operations.adjust_life(state, 2, providers))

        assert view_library(state)[0].card_id == "lib1"
        assert state.life == 9

    @pytest.mark.parametrize("action_type", list(ActionType))
    def test_every_action_type_has_handler(self, action_type):
        assert Reducer()._get_handler(action_type) is not None
