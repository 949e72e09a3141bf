"""Tests for the application state reducers and the study controller."""

import random

import pytest

from flashdeck.models import FilterMode, SortMode
from flashdeck.schemas import AppState, Deck, StudyCursor
from flashdeck.services import session_service
from flashdeck.services.persistence_service import DeckGateway, MappingBlobStore


@pytest.fixture
def state(five_card_deck: Deck) -> AppState:
    return AppState(deck=five_card_deck)


def visible_ids(state: AppState):
    return [c.id for c in session_service.visible_cards(state)]


class CountingStore(MappingBlobStore):
    """In-memory store that counts writes."""

    def __init__(self):
        super().__init__({})
        self.writes = 0

    def set(self, key, value):
        self.writes += 1
        super().set(key, value)


class TestConfigReducers:
    def test_filter_change_resets_cursor(self, state: AppState) -> None:
        state = state.model_copy(update={"cursor": StudyCursor(index=3, flipped=True)})
        state = session_service.set_filter(state, "known")
        assert state.config.filter == FilterMode.KNOWN
        assert state.cursor == StudyCursor()

    def test_sort_and_query_reset_cursor(self, state: AppState) -> None:
        moved = state.model_copy(update={"cursor": StudyCursor(index=1, flipped=True)})
        assert session_service.set_sort(moved, SortMode.ALPHA).cursor == StudyCursor()
        assert session_service.set_query(moved, "cell").cursor == StudyCursor()

    def test_unknown_filter_token_raises(self, state: AppState) -> None:
        with pytest.raises(ValueError):
            session_service.set_filter(state, "favourites")

    def test_stats_ignore_view_config(self, state: AppState) -> None:
        state = session_service.set_filter(state, FilterMode.KNOWN)
        state = session_service.set_query(state, "zzz")
        assert session_service.visible_cards(state) == []
        assert session_service.stats(state) == {"total": 5, "known": 2, "unknown": 3}


class TestSubmitCard:
    def test_invalid_card_is_refused(self, state: AppState) -> None:
        new_state, errors = session_service.submit_card(state, "Hi", "A")
        assert errors == {"back": "Back must be at least 2 characters."}
        assert new_state is state
        assert len(new_state.deck.cards) == 5

    def test_short_front_is_refused(self, state: AppState) -> None:
        new_state, errors = session_service.submit_card(state, "H", "Answer")
        assert "front" in errors
        assert len(new_state.deck.cards) == 5

    def test_valid_card_is_created_trimmed(self, state: AppState) -> None:
        new_state, errors = session_service.submit_card(state, "  Golgi ", " Packages proteins ", True)
        assert errors == {}
        card = new_state.deck.cards[0]
        assert (card.front, card.back, card.known) == ("Golgi", "Packages proteins", True)

    def test_edit_mode_updates_card_in_place(self, state: AppState) -> None:
        state = session_service.start_edit(state, "c")
        new_state, errors = session_service.submit_card(state, "Nucleus", "Holds the genome", True)
        assert errors == {}
        card = new_state.deck.cards[2]
        assert (card.id, card.back, card.known, card.created_at) == ("c", "Holds the genome", True, 300)
        assert len(new_state.deck.cards) == 5
        assert new_state.editing_id is None

    def test_start_edit_unknown_id_is_ignored(self, state: AppState) -> None:
        assert session_service.start_edit(state, "zzz").editing_id is None

    def test_cancel_edit(self, state: AppState) -> None:
        state = session_service.start_edit(state, "c")
        assert session_service.editing_card(state).id == "c"
        assert session_service.cancel_edit(state).editing_id is None


class TestCardReducers:
    def test_delete_resets_cursor_and_edit(self, state: AppState) -> None:
        state = session_service.start_edit(state, "d")
        state = session_service.next_card(state)
        state = session_service.delete_card(state, "d")
        assert "d" not in visible_ids(state)
        assert state.cursor == StudyCursor()
        assert state.editing_id is None

    def test_delete_unknown_id_is_a_no_op(self, state: AppState) -> None:
        assert session_service.delete_card(state, "zzz") is state

    def test_toggle_known_can_clamp_cursor(self, state: AppState) -> None:
        state = session_service.set_filter(state, "known")
        state = session_service.next_card(state)
        assert state.cursor.index == 1
        # Unmarking the last visible known card shrinks the list to one.
        state = session_service.toggle_known(state, "b")
        assert visible_ids(state) == ["d"]
        assert state.cursor == StudyCursor()

    def test_clear_deck(self, state: AppState) -> None:
        state = session_service.start_edit(state, "a")
        state = session_service.clear_deck(state)
        assert state.deck.cards == []
        assert state.editing_id is None
        assert state.cursor == StudyCursor()


class TestShuffleVisible:
    def test_hidden_card_keeps_its_index(self, card_factory) -> None:
        deck = Deck(cards=[
            card_factory("x", known=False, created_at=1),
            card_factory("hidden", known=True, created_at=2),
            card_factory("y", known=False, created_at=3),
        ])
        state = session_service.set_filter(AppState(deck=deck), "unknown")
        # Shuffle until the order actually changes; only x and y may move.
        rng = random.Random(1)
        for _ in range(20):
            shuffled = session_service.shuffle_visible(state, rng)
            assert shuffled.deck.cards[1].id == "hidden"
            assert {c.id for c in (shuffled.deck.cards[0], shuffled.deck.cards[2])} == {"x", "y"}

    def test_fewer_than_two_visible_is_a_no_op(self, state: AppState) -> None:
        state = session_service.set_query(state, "ribosome")
        assert session_service.shuffle_visible(state, random.Random(0)) is state

    def test_resets_cursor(self, state: AppState) -> None:
        state = session_service.flip_card(session_service.next_card(state))
        state = session_service.shuffle_visible(state, random.Random(3))
        assert state.cursor == StudyCursor()


class TestCursorReducers:
    def test_next_wraps_on_three_visible(self, card_factory) -> None:
        deck = Deck(cards=[card_factory(str(i), created_at=i) for i in range(3)])
        state = AppState(deck=deck, cursor=StudyCursor(index=2, flipped=True))
        state = session_service.next_card(state)
        assert state.cursor == StudyCursor(index=0, flipped=False)

    def test_empty_view_operations_are_no_ops(self, state: AppState) -> None:
        state = session_service.set_query(state, "no such card")
        for reducer in (session_service.next_card, session_service.prev_card,
                        session_service.flip_card, session_service.toggle_known_current):
            assert reducer(state).cursor == StudyCursor()
        assert session_service.toggle_known_current(state).deck == state.deck

    def test_toggle_known_current_keeps_cursor(self, state: AppState) -> None:
        state = session_service.flip_card(session_service.next_card(state))
        current = session_service.visible_cards(state)[1]
        toggled = session_service.toggle_known_current(state)
        assert toggled.cursor == StudyCursor(index=1, flipped=True)
        assert next(c for c in toggled.deck.cards if c.id == current.id).known is not current.known

    def test_study_view_follows_cursor(self, state: AppState) -> None:
        state = session_service.flip_card(state)
        view = session_service.study_view(state)
        assert view["side"] == "Back"
        assert view["text"] == "Builds proteins"
        assert view["position"] == 1

    def test_cursor_stays_in_range_through_mutations(self, state: AppState) -> None:
        steps = [
            (session_service.next_card,), (session_service.next_card,), (session_service.next_card,),
            (session_service.toggle_known_current,), (session_service.set_filter, "unknown"),
            (session_service.prev_card,), (session_service.delete_card, "a"),
            (session_service.set_query, "o"), (session_service.next_card,),
            (session_service.toggle_known_current,), (session_service.set_filter, "known"),
            (session_service.clear_deck,), (session_service.next_card,),
        ]
        for reducer, *args in steps:
            state = reducer(state, *args)
            count = len(session_service.visible_cards(state))
            if count:
                assert 0 <= state.cursor.index < count
            else:
                assert state.cursor.index == 0


class TestStudyController:
    def test_start_without_saved_deck_uses_default_and_does_not_save(self) -> None:
        store = CountingStore()
        controller = session_service.StudyController(DeckGateway(store))
        state = controller.start()
        assert len(state.deck.cards) == 3
        assert store.writes == 0

    def test_start_loads_saved_deck(self, gateway: DeckGateway, five_card_deck: Deck) -> None:
        gateway.save(five_card_deck)
        controller = session_service.StudyController(gateway)
        assert controller.start().deck == five_card_deck

    def test_corrupt_saved_deck_falls_back_to_default(self) -> None:
        store = CountingStore()
        store.mapping["flashdeck-study.v1"] = "{not json"
        controller = session_service.StudyController(DeckGateway(store, key="flashdeck-study.v1"))
        assert len(controller.start().deck.cards) == 3

    def test_start_runs_once(self, gateway: DeckGateway, five_card_deck: Deck) -> None:
        controller = session_service.StudyController(gateway)
        first = controller.start()
        gateway.save(five_card_deck)
        assert controller.start() is first

    def test_canonical_change_saves_whole_deck(self) -> None:
        store = CountingStore()
        gateway = DeckGateway(store)
        controller = session_service.StudyController(gateway)
        controller.start()
        controller.apply(session_service.set_deck_name, "Renamed")
        assert store.writes == 1
        assert gateway.load() == controller.state.deck

    def test_cursor_and_config_changes_do_not_save(self) -> None:
        store = CountingStore()
        controller = session_service.StudyController(DeckGateway(store))
        controller.start()
        controller.apply(session_service.next_card)
        controller.apply(session_service.flip_card)
        controller.apply(session_service.set_sort, "alpha")
        controller.apply(session_service.set_query, "what")
        assert store.writes == 0

    def test_submit_saves_only_valid_cards(self) -> None:
        store = CountingStore()
        controller = session_service.StudyController(DeckGateway(store))
        controller.start()
        assert controller.submit("Hi", "A") == {"back": "Back must be at least 2 characters."}
        assert store.writes == 0
        assert controller.submit("Hi", "Hello") == {}
        assert store.writes == 1
        assert len(controller.state.deck.cards) == 4

    def test_failed_save_is_reported_not_raised(self) -> None:
        class ReadOnlyStore(MappingBlobStore):
            def set(self, key, value):
                raise PermissionError("read-only")

        controller = session_service.StudyController(DeckGateway(ReadOnlyStore({})))
        controller.start()
        controller.apply(session_service.clear_deck)
        assert controller.state.deck.cards == []
        assert controller.last_save_ok is False
