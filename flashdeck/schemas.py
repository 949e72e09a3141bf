# flashdeck/schemas.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError
from typing import List, Optional, TypedDict

from flashdeck.config import DEFAULT_DECK_NAME
from flashdeck.core.log_manager import logger
from flashdeck.models import FilterMode, SortMode

FRONT_MIN_LENGTH = 2
FRONT_MAX_LENGTH = 500
BACK_MIN_LENGTH = 2
BACK_MAX_LENGTH = 1500

class Card(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    front: str = ""
    back: str = ""
    known: bool = False
    # Epoch milliseconds. Older saves may lack it; those sort as 0.
    created_at: int = Field(default=0, alias="createdAt")

    @field_validator('front', 'back', mode='before')
    def null_text_as_empty(cls, v):
        return "" if v is None else v

    @field_validator('created_at', mode='before')
    def null_timestamp_as_zero(cls, v):
        return 0 if v is None else v

    @field_validator('known', mode='before')
    def null_known_as_false(cls, v):
        return False if v is None else v

class Deck(BaseModel):
    """
    The unit of persistence: a name and the ordered card list.
    The list order is the one the user shuffles, so it is stored as-is.
    """
    model_config = ConfigDict(frozen=True)

    name: str = DEFAULT_DECK_NAME
    cards: List[Card] = Field(default_factory=list)

    @field_validator('cards')
    def drop_duplicate_ids(cls, v):
        seen = set()
        unique = []
        for card in v:
            if card.id in seen:
                logger.warning(f"Dropping card with duplicate id '{card.id}'.")
                continue
            seen.add(card.id)
            unique.append(card)
        return unique

    def to_storage(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

class ViewConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    filter: FilterMode = FilterMode.ALL
    query: str = ""
    sort: SortMode = SortMode.NEWEST

class StudyCursor(BaseModel):
    """
    Position inside the *current* visible list plus the flip state.
    It has no identity of its own and is re-clamped whenever that list changes.
    """
    model_config = ConfigDict(frozen=True)

    index: int = Field(default=0, ge=0)
    flipped: bool = False

class AppState(BaseModel):
    """
    Snapshot of everything the study page shows.
    Reducers in session_service return a new snapshot instead of mutating this one.
    """
    model_config = ConfigDict(frozen=True)

    deck: Deck = Field(default_factory=Deck)
    config: ViewConfig = Field(default_factory=ViewConfig)
    cursor: StudyCursor = Field(default_factory=StudyCursor)
    editing_id: Optional[str] = None

class CardForm(BaseModel):
    """
    A proposed card as typed in the form.
    Validated values come out trimmed; the max-length check runs on the raw text.
    """
    front: str
    back: str

    @field_validator('front', 'back', mode='before')
    def none_as_empty(cls, v):
        return "" if v is None else v

    @field_validator('front')
    def check_front(cls, v: str) -> str:
        if len(v) > FRONT_MAX_LENGTH:
            raise PydanticCustomError("front_too_long", f"Front is too long (max {FRONT_MAX_LENGTH}).")
        if len(v.strip()) < FRONT_MIN_LENGTH:
            raise PydanticCustomError("front_too_short", f"Front must be at least {FRONT_MIN_LENGTH} characters.")
        return v.strip()

    @field_validator('back')
    def check_back(cls, v: str) -> str:
        if len(v) > BACK_MAX_LENGTH:
            raise PydanticCustomError("back_too_long", f"Back is too long (max {BACK_MAX_LENGTH}).")
        if len(v.strip()) < BACK_MIN_LENGTH:
            raise PydanticCustomError("back_too_short", f"Back must be at least {BACK_MIN_LENGTH} characters.")
        return v.strip()

class DeckStats(TypedDict):
    total: int
    known: int
    unknown: int

class StudyView(TypedDict):
    """What the study panel renders for the current card."""
    side: str  # 'Front' | 'Back' | '' when nothing is visible
    text: str
    position: int  # 1-based, 0 when nothing is visible
    total: int
    known: bool
