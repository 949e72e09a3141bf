# flashdeck/services/session_service.py
"""
Application state reducers.

Every user action maps to one function taking the current AppState and
returning a new one. After each reducer the study cursor is clamped against
the freshly derived visible list, so it can never point past its end.
"""
import random
from typing import Callable, Dict, List, Optional, Tuple

from flashdeck.core.log_manager import logger
from flashdeck.models import FilterMode, SortMode
from flashdeck.schemas import AppState, Card, Deck, DeckStats, StudyView
from flashdeck.services import deck_service, study_service
from flashdeck.services.form_service import validate_card, clean_card
from flashdeck.services.persistence_service import DeckGateway
from flashdeck.services.view_service import derive, compute_stats

# --- DERIVED VIEWS ---

def visible_cards(state: AppState) -> List[Card]:
    return derive(state.deck.cards, state.config)

def stats(state: AppState) -> DeckStats:
    return compute_stats(state.deck.cards)

def study_view(state: AppState) -> StudyView:
    return study_service.study_view(visible_cards(state), state.cursor)

def editing_card(state: AppState) -> Optional[Card]:
    if state.editing_id is None:
        return None
    return next((c for c in state.deck.cards if c.id == state.editing_id), None)

def _settle(state: AppState, **changes) -> AppState:
    """Applies changes, then re-validates the cursor against the new visible list."""
    new_state = state.model_copy(update=changes)
    cursor = study_service.clamp(new_state.cursor, len(visible_cards(new_state)))
    if cursor != new_state.cursor:
        new_state = new_state.model_copy(update={"cursor": cursor})
    return new_state

# --- DECK / CONFIG REDUCERS ---

def set_deck_name(state: AppState, name: str) -> AppState:
    return _settle(state, deck=deck_service.rename_deck(state.deck, name))

def set_query(state: AppState, query: str) -> AppState:
    config = state.config.model_copy(update={"query": query or ""})
    return _settle(state, config=config, cursor=study_service.RESET)

def set_filter(state: AppState, mode) -> AppState:
    config = state.config.model_copy(update={"filter": FilterMode(mode)})
    return _settle(state, config=config, cursor=study_service.RESET)

def set_sort(state: AppState, mode) -> AppState:
    config = state.config.model_copy(update={"sort": SortMode(mode)})
    return _settle(state, config=config, cursor=study_service.RESET)

# --- CARD REDUCERS ---

def submit_card(state: AppState, front: str, back: str, known: bool = False) -> Tuple[AppState, Dict[str, str]]:
    """
    Creates a card, or updates the one being edited.
    Returns: (new state, errors). On errors the state is returned unchanged.
    """
    errors = validate_card(front, back)
    if errors:
        return state, errors

    front, back = clean_card(front, back)
    if state.editing_id is not None and editing_card(state) is not None:
        deck = deck_service.update_card(state.deck, state.editing_id, front, back, known)
    else:
        deck, card = deck_service.create_card(state.deck, front, back, known)
        logger.info(f"Created card {card.id}")
    return _settle(state, deck=deck, editing_id=None), {}

def start_edit(state: AppState, card_id: str) -> AppState:
    if not any(c.id == card_id for c in state.deck.cards):
        return state
    return state.model_copy(update={"editing_id": card_id})

def cancel_edit(state: AppState) -> AppState:
    return state.model_copy(update={"editing_id": None})

def delete_card(state: AppState, card_id: str) -> AppState:
    deck = deck_service.delete_card(state.deck, card_id)
    if deck is state.deck:
        return state
    editing_id = None if state.editing_id == card_id else state.editing_id
    return _settle(state, deck=deck, editing_id=editing_id, cursor=study_service.RESET)

def toggle_known(state: AppState, card_id: str) -> AppState:
    return _settle(state, deck=deck_service.toggle_known(state.deck, card_id))

def shuffle_visible(state: AppState, rng: Optional[random.Random] = None) -> AppState:
    """
    Shuffles only the visible cards among the positions they hold in the deck.
    Hidden cards keep their index.
    """
    visible = visible_cards(state)
    if len(visible) < 2:
        return state
    ids = [c.id for c in visible]
    (rng or random).shuffle(ids)
    deck = deck_service.reorder(state.deck, ids)
    return _settle(state, deck=deck, cursor=study_service.RESET)

def clear_deck(state: AppState) -> AppState:
    return _settle(state, deck=deck_service.clear(state.deck), editing_id=None, cursor=study_service.RESET)

# --- STUDY CURSOR REDUCERS ---

def next_card(state: AppState) -> AppState:
    return _settle(state, cursor=study_service.next_card(state.cursor, len(visible_cards(state))))

def prev_card(state: AppState) -> AppState:
    return _settle(state, cursor=study_service.prev_card(state.cursor, len(visible_cards(state))))

def flip_card(state: AppState) -> AppState:
    if not visible_cards(state):
        return state
    return _settle(state, cursor=study_service.flip(state.cursor))

def toggle_known_current(state: AppState) -> AppState:
    card = study_service.current_card(visible_cards(state), state.cursor)
    if not card:
        return state
    return toggle_known(state, card.id)

# --- CONTROLLER ---

class StudyController:
    """
    Holds the live AppState of one page and writes the deck back
    after every change to its name or cards.
    """
    def __init__(self, gateway: DeckGateway):
        self.gateway = gateway
        self.state = AppState()
        self.loaded = False
        self.last_save_ok = True

    def start(self) -> AppState:
        """
        Loads the saved deck (or the seed deck) exactly once.
        The loaded data is not written straight back.
        """
        if self.loaded:
            return self.state

        deck = self.gateway.load()
        if deck is None:
            logger.info("Starting with the default deck.")
            deck = deck_service.default_deck()

        self.state = _settle(AppState(), deck=deck)
        self.loaded = True
        return self.state

    def apply(self, reducer: Callable[..., AppState], *args, **kwargs) -> AppState:
        previous: Deck = self.state.deck
        self.state = reducer(self.state, *args, **kwargs)
        self._persist_if_changed(previous)
        return self.state

    def submit(self, front: str, back: str, known: bool = False) -> Dict[str, str]:
        previous: Deck = self.state.deck
        self.state, errors = submit_card(self.state, front, back, known)
        if not errors:
            self._persist_if_changed(previous)
        return errors

    def _persist_if_changed(self, previous: Deck):
        if not self.loaded or self.state.deck == previous:
            return
        self.last_save_ok = self.gateway.save(self.state.deck)
