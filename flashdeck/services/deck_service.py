# flashdeck/services/deck_service.py
import secrets
import time
from typing import List, Tuple, Optional, Iterable

from flashdeck.config import DEFAULT_DECK_NAME
from flashdeck.schemas import Card, Deck

# --- IDENTITY ---

def now_ms() -> int:
    return int(time.time() * 1000)

def new_card_id(timestamp_ms: Optional[int] = None) -> str:
    """
    Opaque card token: creation time plus random hex.
    """
    stamp = timestamp_ms if timestamp_ms is not None else now_ms()
    return f"{stamp}_{secrets.token_hex(6)}"

def default_deck() -> Deck:
    """
    The seed deck shown on first start or when the saved one is unreadable.
    """
    stamp = now_ms()
    seeds = [
        ("What is a higher order function?",
         "A function that takes a function as an argument, returns a function, or both."),
        ("Python builtin used to sort a list into a new list?",
         "sorted()"),
        ("How do you persist data between app restarts?",
         "Serialize the deck to JSON and store it in a durable key-value slot, then reload it on startup."),
    ]
    cards = [
        Card(id=new_card_id(stamp), front=front, back=back, known=False, created_at=stamp)
        for front, back in seeds
    ]
    return Deck(name=DEFAULT_DECK_NAME, cards=cards)

# --- MUTATIONS ---
# Every function returns a new Deck. Unknown ids are ignored.

def _unused_id(deck: Deck, stamp: int) -> str:
    taken = {c.id for c in deck.cards}
    card_id = new_card_id(stamp)
    while card_id in taken:
        card_id = new_card_id(stamp)
    return card_id

def create_card(
    deck: Deck,
    front: str,
    back: str,
    known: bool = False,
    created_at: Optional[int] = None,
    card_id: Optional[str] = None,
) -> Tuple[Deck, Card]:
    """
    Prepends a new card. Fields must already be validated and trimmed.
    Returns: (new deck, created card).
    """
    stamp = created_at if created_at is not None else now_ms()
    if card_id is None or any(c.id == card_id for c in deck.cards):
        card_id = _unused_id(deck, stamp)

    card = Card(id=card_id, front=front, back=back, known=bool(known), created_at=stamp)
    return deck.model_copy(update={"cards": [card, *deck.cards]}), card

def update_card(deck: Deck, card_id: str, front: str, back: str, known: bool) -> Deck:
    """
    Replaces the editable fields in place; id and created_at are kept.
    """
    if not any(c.id == card_id for c in deck.cards):
        return deck
    cards = [
        c.model_copy(update={"front": front, "back": back, "known": bool(known)}) if c.id == card_id else c
        for c in deck.cards
    ]
    return deck.model_copy(update={"cards": cards})

def delete_card(deck: Deck, card_id: str) -> Deck:
    cards = [c for c in deck.cards if c.id != card_id]
    if len(cards) == len(deck.cards):
        return deck
    return deck.model_copy(update={"cards": cards})

def toggle_known(deck: Deck, card_id: str) -> Deck:
    if not any(c.id == card_id for c in deck.cards):
        return deck
    cards = [
        c.model_copy(update={"known": not c.known}) if c.id == card_id else c
        for c in deck.cards
    ]
    return deck.model_copy(update={"cards": cards})

def reorder(deck: Deck, ordered_ids: Iterable[str]) -> Deck:
    """
    Rewrites the order of a subset of cards.

    The slots currently held by the named cards are refilled in the given order;
    every card outside the subset stays at its index.
    Unknown or repeated ids are ignored.
    """
    by_id = {c.id: c for c in deck.cards}

    subset: List[Card] = []
    seen = set()
    for card_id in ordered_ids:
        if card_id in by_id and card_id not in seen:
            seen.add(card_id)
            subset.append(by_id[card_id])

    if len(subset) < 2:
        return deck

    refill = iter(subset)
    cards = [next(refill) if c.id in seen else c for c in deck.cards]
    return deck.model_copy(update={"cards": cards})

def clear(deck: Deck) -> Deck:
    return deck.model_copy(update={"cards": []})

def rename_deck(deck: Deck, name: str) -> Deck:
    return deck.model_copy(update={"name": name})
