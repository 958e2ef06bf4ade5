"""
Reducer - Applies actions to a game session.

The reducer is the single point of state mutation.
All session changes must go through apply_action().

Design principles:
- Pure function: (session, action) -> new session
- Validates before applying
- Returns ActionResult with success/failure
- Card conservation is checked after every action except import
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field

from .state import (
    GameSession,
    GameResult,
    Position,
    Zone,
    ZoneName,
    ZONE_ORDER,
)
from .action import Action, ActionType, ActionResult
from .errors import (
    CardNotOnBattlefield,
    EngineError,
    InvalidCount,
    InvalidCounter,
    InvalidResult,
    ValidationError,
)
from .providers import Providers
from .shuffle import fisher_yates, shuffled


# Payload fields each action cannot do without
REQUIRED_FIELDS: dict[ActionType, tuple[str, ...]] = {
    ActionType.IMPORT_DECK: ("deck_list",),
    ActionType.ADJUST_LIFE: ("delta",),
    ActionType.TOGGLE_TAP: ("card_id",),
    ActionType.MOVE_CARD: ("card_id", "source_zone", "target_zone"),
    ActionType.MOVE_TO_LIBRARY_TOP: ("card_id", "source_zone"),
    ActionType.MOVE_TO_LIBRARY_BOTTOM: ("card_id", "source_zone"),
    ActionType.SET_COUNTER: ("card_id", "counter", "count"),
    ActionType.END_GAME: ("result",),
}


@dataclass
class Reducer:
    """
    Reducer applies actions to game sessions.

    Stateless - all game state is in GameSession.
    Providers supply randomness, ids and timestamps.
    """
    providers: Providers = field(default_factory=Providers)

    def apply(self, state: GameSession, action: Action) -> ActionResult:
        """
        Apply an action to the session.

        Returns ActionResult with new session or a typed failure.
        """
        validation_error = self._validate_action(state, action)
        if validation_error:
            return ActionResult.failure(
                validation_error,
                error_code=ValidationError.error_code,
                error_kind=ValidationError.error_kind,
            )

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code="NO_HANDLER",
                error_kind=ValidationError.error_kind,
            )

        try:
            result = handler(state, action)
        except EngineError as e:
            return ActionResult.failure(
                e.message,
                error_code=e.error_code,
                error_kind=e.error_kind,
                details=e.details,
            )

        if result.success and action.action_type != ActionType.IMPORT_DECK:
            self._check_conservation(state, result.new_state)
        return result

    def _validate_action(self, state: GameSession, action: Action) -> str | None:
        """
        Validate that the action carries what it needs.

        Returns error message if invalid, None if valid.
        """
        payload = action.payload
        for name in REQUIRED_FIELDS.get(action.action_type, ()):
            if getattr(payload, name) is None:
                return f"Missing required field '{name}' for {action.action_type.value}"

        for name in ("count", "delta"):
            value = getattr(payload, name)
            if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                return f"Field '{name}' must be an integer"

        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.IMPORT_DECK: self._handle_import_deck,
            ActionType.SHUFFLE_LIBRARY: self._handle_shuffle,
            ActionType.RESET_SESSION: self._handle_reset,
            ActionType.DRAW_CARDS: self._handle_draw,
            ActionType.TOGGLE_TAP: self._handle_toggle_tap,
            ActionType.MOVE_CARD: self._handle_move,
            ActionType.MOVE_TO_LIBRARY_TOP: self._handle_library_top,
            ActionType.MOVE_TO_LIBRARY_BOTTOM: self._handle_library_bottom,
            ActionType.SET_COUNTER: self._handle_set_counter,
            ActionType.ADJUST_LIFE: self._handle_adjust_life,
            ActionType.NEXT_TURN: self._handle_next_turn,
            ActionType.END_GAME: self._handle_end_game,
        }
        return handlers.get(action_type)

    # =========================================================================
    # Deck actions
    # =========================================================================

    def _handle_import_deck(self, state: GameSession, action: Action) -> ActionResult:
        """Replace the whole game with a fresh one built from a deck list."""
        from ..deck_list.parser import parse_deck_list

        cards = parse_deck_list(action.payload.deck_list, self.providers)

        new_state = state._copy_with(
            library=Zone(name=ZoneName.LIBRARY, cards=cards),
            hand=Zone(name=ZoneName.HAND),
            battlefield=Zone(name=ZoneName.BATTLEFIELD),
            graveyard=Zone(name=ZoneName.GRAVEYARD),
            exile=Zone(name=ZoneName.EXILE),
            life=state.starting_life,
            turn=1,
            result=GameResult.ONGOING,
            deck_name=action.payload.deck_name or state.deck_name,
            ended_at=None,
            updated_at=self.providers.now(),
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Imported {len(cards)} cards into library"],
        )

    def _handle_shuffle(self, state: GameSession, action: Action) -> ActionResult:
        """Shuffle the library only."""
        library = Zone(
            name=ZoneName.LIBRARY,
            cards=shuffled(state.library.cards, self.providers.rng),
        )
        new_state = state._copy_with(library=library, updated_at=self.providers.now())
        return ActionResult.success_with_state(new_state, changes=["Shuffled library"])

    def _handle_reset(self, state: GameSession, action: Action) -> ActionResult:
        """
        Gather every card back into a shuffled library.

        Zones are concatenated library, hand, battlefield, graveyard,
        exile before the shuffle.
        """
        cards = [card.off_battlefield() for card in state.all_cards()]
        fisher_yates(cards, self.providers.rng)

        now = self.providers.now()
        new_state = state._copy_with(
            library=Zone(name=ZoneName.LIBRARY, cards=cards),
            hand=Zone(name=ZoneName.HAND),
            battlefield=Zone(name=ZoneName.BATTLEFIELD),
            graveyard=Zone(name=ZoneName.GRAVEYARD),
            exile=Zone(name=ZoneName.EXILE),
            life=state.starting_life,
            turn=1,
            result=GameResult.ONGOING,
            game_number=state.game_number + 1,
            started_at=now,
            ended_at=None,
            updated_at=now,
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Reset game: {len(cards)} cards shuffled into library"],
        )

    # =========================================================================
    # Card actions
    # =========================================================================

    def _handle_draw(self, state: GameSession, action: Action) -> ActionResult:
        """
        Draw up to count cards from the top of the library.

        Drawing more than the library holds drains it; an empty
        library draws nothing.
        """
        count = 1 if action.payload.count is None else action.payload.count
        if count < 0:
            raise InvalidCount(f"Cannot draw a negative number of cards: {count}")

        drawn, library = state.library.take_top(count)
        new_state = state._copy_with(
            library=library,
            hand=state.hand.extend(drawn),
            updated_at=self.providers.now(),
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Drew {len(drawn)} card(s)"],
            cards=drawn,
        )

    def _handle_toggle_tap(self, state: GameSession, action: Action) -> ActionResult:
        """Flip tapped on a battlefield card."""
        card_id = action.payload.card_id
        card = state.battlefield.get(card_id)
        if card is None:
            raise CardNotOnBattlefield(card_id)

        toggled = card.with_tapped(not card.tapped)
        new_state = state._copy_with(
            battlefield=state.battlefield.replace(toggled),
            updated_at=self.providers.now(),
        )
        verb = "Tapped" if toggled.tapped else "Untapped"
        return ActionResult.success_with_state(new_state, changes=[f"{verb} {card.name}"])

    def _handle_move(self, state: GameSession, action: Action) -> ActionResult:
        """
        Move a card between zones.

        battlefield -> battlefield is a reposition in place: zone length
        and order stay the same. Leaving the battlefield strips tapped,
        position and counters.
        """
        payload = action.payload
        source = ZoneName.parse(payload.source_zone)
        target = ZoneName.parse(payload.target_zone)
        position = None
        if target == ZoneName.BATTLEFIELD:
            position = Position.coerce(payload.position)

        if source == ZoneName.BATTLEFIELD and target == ZoneName.BATTLEFIELD:
            return self._reposition(state, payload.card_id, position)

        card, source_zone = state.zone(source).remove(payload.card_id)
        if position is not None:
            card = card.with_position(position)
        elif target != ZoneName.BATTLEFIELD:
            card = card.off_battlefield()

        new_state = state.with_zone(source_zone)
        new_state = new_state.with_zone(new_state.zone(target).add(card))
        new_state = new_state._copy_with(updated_at=self.providers.now())
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Moved {card.name} from {source.value} to {target.value}"],
        )

    def _reposition(
        self, state: GameSession, card_id: str, position: Position | None
    ) -> ActionResult:
        card, _ = state.battlefield.remove(card_id)
        if position is not None:
            card = card.with_position(position)

        new_state = state._copy_with(
            battlefield=state.battlefield.replace(card),
            updated_at=self.providers.now(),
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Repositioned {card.name} to ({card.position.x}, {card.position.y})"],
        )

    def _handle_library_top(self, state: GameSession, action: Action) -> ActionResult:
        return self._to_library(state, action, top=True)

    def _handle_library_bottom(self, state: GameSession, action: Action) -> ActionResult:
        return self._to_library(state, action, top=False)

    def _to_library(self, state: GameSession, action: Action, top: bool) -> ActionResult:
        """Put a card on top (index 0) or bottom (end) of the library."""
        source = ZoneName.parse(action.payload.source_zone)
        card, source_zone = state.zone(source).remove(action.payload.card_id)
        card = card.off_battlefield()

        new_state = state.with_zone(source_zone)
        library = new_state.library.add_top(card) if top else new_state.library.add(card)
        new_state = new_state._copy_with(library=library, updated_at=self.providers.now())

        where = "top" if top else "bottom"
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Put {card.name} on the {where} of library from {source.value}"],
        )

    def _handle_set_counter(self, state: GameSession, action: Action) -> ActionResult:
        """Set a named counter on a battlefield card. 0 removes it."""
        payload = action.payload
        counter = (payload.counter or "").strip()
        if not counter:
            raise InvalidCounter("Counter name must not be blank")
        if payload.count < 0:
            raise InvalidCounter(
                f"Counter value must be >= 0, got {payload.count}",
                details={"counter": counter, "value": payload.count},
            )

        card = state.battlefield.get(payload.card_id)
        if card is None:
            raise CardNotOnBattlefield(payload.card_id)

        updated = card.with_counter(counter, payload.count)
        new_state = state._copy_with(
            battlefield=state.battlefield.replace(updated),
            updated_at=self.providers.now(),
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Set {counter} on {card.name} to {payload.count}"],
        )

    # =========================================================================
    # Game actions
    # =========================================================================

    def _handle_adjust_life(self, state: GameSession, action: Action) -> ActionResult:
        """Add a signed delta to life. Life is never clamped."""
        delta = action.payload.delta
        new_state = state._copy_with(
            life=state.life + delta,
            updated_at=self.providers.now(),
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Life {state.life} -> {new_state.life}"],
        )

    def _handle_next_turn(self, state: GameSession, action: Action) -> ActionResult:
        """Advance the turn counter and untap everything."""
        new_state = state._copy_with(
            turn=state.turn + 1,
            battlefield=state.battlefield.map(lambda c: c.with_tapped(False)),
            updated_at=self.providers.now(),
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Turn {new_state.turn} started"],
        )

    def _handle_end_game(self, state: GameSession, action: Action) -> ActionResult:
        """Record a final result."""
        raw = str(action.payload.result).strip().lower()
        try:
            result = GameResult(raw)
        except ValueError:
            raise InvalidResult(f"Unknown game result: {action.payload.result}") from None
        if result == GameResult.ONGOING:
            raise InvalidResult("Cannot end a game with result 'ongoing'")

        now = self.providers.now()
        new_state = state._copy_with(result=result, ended_at=now, updated_at=now)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Game ended: {result.value}"],
        )

    # =========================================================================
    # Invariants
    # =========================================================================

    def _check_conservation(self, before: GameSession, after: GameSession):
        """Every card id present before is present exactly once after."""
        if Counter(before.card_ids()) != Counter(after.card_ids()):
            raise RuntimeError(
                f"Card conservation violated: {before.card_count} cards "
                f"before, {after.card_count} after"
            )


def apply_action(
    state: GameSession,
    action: Action,
    providers: Providers | None = None,
) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(providers=providers or Providers())
    return reducer.apply(state, action)


def view_library(state: GameSession) -> list:
    """Library cards top to bottom. Read-only; no action needed."""
    return list(state.library.cards)


def zone_sizes(state: GameSession) -> dict[str, int]:
    return {name.value: state.zone(name).count for name in ZONE_ORDER}
