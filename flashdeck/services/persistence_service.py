# flashdeck/services/persistence_service.py
import json
from typing import MutableMapping, Optional, Protocol
from datetime import datetime, timezone
from pydantic import ValidationError
from sqlalchemy.engine import Engine
from sqlmodel import Session

from flashdeck.config import STORAGE_KEY, DEFAULT_DECK_NAME
from flashdeck.core.log_manager import logger
from flashdeck.models import StorageSlot
from flashdeck.schemas import Deck

class BlobStore(Protocol):
    """A durable key-value slot store holding serialized text."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

class SqlBlobStore:
    """
    Keeps each slot as one row of the StorageSlot table.
    """
    def __init__(self, engine: Engine):
        self.engine = engine

    def get(self, key: str) -> Optional[str]:
        with Session(self.engine) as session:
            slot = session.get(StorageSlot, key)
            return slot.value if slot else None

    def set(self, key: str, value: str) -> None:
        with Session(self.engine) as session:
            slot = session.get(StorageSlot, key)
            if slot:
                slot.value = value
                slot.updated_at = datetime.now(timezone.utc)
            else:
                slot = StorageSlot(key=key, value=value)
            session.add(slot)
            session.commit()

class MappingBlobStore:
    """
    Wraps a mutable mapping, e.g. NiceGUI's app.storage.user
    (persisted per browser) or a plain dict.
    """
    def __init__(self, mapping: MutableMapping):
        self.mapping = mapping

    def get(self, key: str) -> Optional[str]:
        value = self.mapping.get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        self.mapping[key] = value

class DeckGateway:
    """
    The only component that talks to durable storage.
    Loading never raises: every failure reads as "no deck saved".
    """
    def __init__(self, store: BlobStore, key: str = STORAGE_KEY):
        self.store = store
        self.key = key

    def load(self) -> Optional[Deck]:
        try:
            raw = self.store.get(self.key)
        except Exception as e:
            logger.error(f"Could not read storage slot '{self.key}': {e}")
            return None

        if not raw:
            logger.info(f"No saved deck under '{self.key}'.")
            return None

        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Saved deck is not valid JSON, ignoring it: {e}")
            return None

        if not isinstance(data, dict) or not isinstance(data.get('cards'), list):
            logger.warning("Saved deck has no card list, ignoring it.")
            return None

        # A blank name falls back to the default one.
        if not data.get('name'):
            data['name'] = DEFAULT_DECK_NAME

        try:
            deck = Deck.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Saved deck does not match the card schema, ignoring it: {e.error_count()} errors")
            return None

        logger.info(f"Loaded deck '{deck.name}' with {len(deck.cards)} cards.")
        return deck

    def save(self, deck: Deck) -> bool:
        """
        Overwrites the slot with the full deck.
        Returns False when storage is unavailable; the app keeps working unsaved.
        """
        payload = json.dumps(deck.to_storage(), ensure_ascii=False)
        try:
            self.store.set(self.key, payload)
        except Exception as e:
            logger.error(f"Could not save deck '{deck.name}': {e}")
            return False
        logger.debug(f"Saved deck '{deck.name}' ({len(deck.cards)} cards).")
        return True
