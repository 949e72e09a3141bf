from typing import Optional
from datetime import datetime, timezone
from enum import Enum
from sqlmodel import SQLModel, Field

class FilterMode(str, Enum):
    """
    Which cards the study list keeps, by their known flag.
    """
    ALL = "all"
    KNOWN = "known"
    UNKNOWN = "unknown"

class SortMode(str, Enum):
    """
    Display order of the study list.
    ALPHA sorts by the front text.
    """
    NEWEST = "newest"
    OLDEST = "oldest"
    ALPHA = "alpha"

# --- DURABLE STORAGE (The Save File) ---

class StorageSlot(SQLModel, table=True):
    """
    One key-value slot of the blob store.
    The whole deck lives serialized in a single row.
    """
    key: str = Field(primary_key=True)
    value: str
    updated_at: Optional[datetime] = Field(default_factory=lambda: datetime.now(timezone.utc))
