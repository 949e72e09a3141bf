# flashdeck/services/study_service.py
from typing import Optional, Sequence

from flashdeck.schemas import Card, StudyCursor, StudyView

RESET = StudyCursor(index=0, flipped=False)

def clamp(cursor: StudyCursor, visible_count: int) -> StudyCursor:
    """
    Keeps the cursor valid for a visible list of the given size.
    An out-of-range index goes back to the first card, face down.
    """
    if visible_count == 0 or cursor.index >= visible_count:
        return RESET
    return cursor

def flip(cursor: StudyCursor) -> StudyCursor:
    return cursor.model_copy(update={"flipped": not cursor.flipped})

def next_card(cursor: StudyCursor, visible_count: int) -> StudyCursor:
    if visible_count == 0:
        return cursor
    return StudyCursor(index=(cursor.index + 1) % visible_count, flipped=False)

def prev_card(cursor: StudyCursor, visible_count: int) -> StudyCursor:
    if visible_count == 0:
        return cursor
    return StudyCursor(index=(cursor.index - 1 + visible_count) % visible_count, flipped=False)

def current_card(visible: Sequence[Card], cursor: StudyCursor) -> Optional[Card]:
    if cursor.index < len(visible):
        return visible[cursor.index]
    return None

def current_text(visible: Sequence[Card], cursor: StudyCursor) -> str:
    card = current_card(visible, cursor)
    if not card:
        return ""
    return card.back if cursor.flipped else card.front

def study_view(visible: Sequence[Card], cursor: StudyCursor) -> StudyView:
    """Serializes the study panel for the page."""
    card = current_card(visible, cursor)
    if not card:
        return {"side": "", "text": "", "position": 0, "total": len(visible), "known": False}
    return {
        "side": "Back" if cursor.flipped else "Front",
        "text": current_text(visible, cursor),
        "position": cursor.index + 1,
        "total": len(visible),
        "known": card.known,
    }
