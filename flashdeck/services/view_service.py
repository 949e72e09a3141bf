# flashdeck/services/view_service.py
from typing import List, Sequence
from pyuca import Collator

from flashdeck.models import FilterMode, SortMode
from flashdeck.schemas import Card, DeckStats, ViewConfig

# --- FILTERING LOGIC ---

def _passes_filter(card: Card, mode: FilterMode) -> bool:
    if mode == FilterMode.KNOWN:
        return card.known
    if mode == FilterMode.UNKNOWN:
        return not card.known
    return True

def matches_query(card: Card, query: str) -> bool:
    """
    Case-insensitive substring match on front or back.
    An empty (or whitespace-only) query matches everything.
    """
    q = (query or "").strip().lower()
    if not q:
        return True
    return q in (card.front or "").lower() or q in (card.back or "").lower()

# --- ORDERING ---

# Unicode Collation Algorithm (DUCET): accents and case sort next to their base letter.
_collator = Collator()

def collation_key(text: str) -> tuple:
    """Locale-aware sort key for front texts."""
    return _collator.sort_key(text or "")

def _sort(cards: List[Card], mode: SortMode) -> List[Card]:
    # sorted() is stable, also with reverse=True, so ties keep filter order.
    if mode == SortMode.NEWEST:
        return sorted(cards, key=lambda c: c.created_at or 0, reverse=True)
    if mode == SortMode.OLDEST:
        return sorted(cards, key=lambda c: c.created_at or 0)
    return sorted(cards, key=lambda c: collation_key(c.front))

def derive(cards: Sequence[Card], config: ViewConfig) -> List[Card]:
    """
    Builds the visible list: filter by known flag, then by query, then sort.
    Pure: the input sequence is never modified.
    """
    filtered = [
        c for c in cards
        if _passes_filter(c, config.filter) and matches_query(c, config.query)
    ]
    return _sort(filtered, config.sort)

# --- STATS ---

def compute_stats(cards: Sequence[Card]) -> DeckStats:
    """
    Counts over the whole deck; search, filter and sort do not apply.
    """
    total = len(cards)
    known = sum(1 for c in cards if c.known)
    return {"total": total, "known": known, "unknown": total - known}
