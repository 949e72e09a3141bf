import secrets
import dotenv
import os
dotenv.load_dotenv("secrets.env")

STORAGE_SECRET = os.getenv("STORAGE_SECRET")
if not STORAGE_SECRET:
    STORAGE_SECRET = secrets.token_hex(32)

# The schema version lives in the key itself; bump it instead of migrating.
STORAGE_KEY = os.getenv("FLASHDECK_STORAGE_KEY", "flashdeck-study.v1")

# 'sqlite' keeps the deck in the local database file,
# 'user' keeps it in NiceGUI's per-browser user storage.
STORAGE_BACKEND = os.getenv("FLASHDECK_STORAGE_BACKEND", "sqlite").strip().lower()

DB_FILE = os.getenv("FLASHDECK_DB_FILE", "db/flashdeck.db")

LOG_LEVEL = os.getenv("FLASHDECK_LOG_LEVEL", "INFO").upper()

PORT = int(os.getenv("FLASHDECK_PORT", "8080"))

DEFAULT_DECK_NAME = "My Deck"
