# flashdeck/database.py
import os
from sqlmodel import SQLModel, create_engine
from sqlalchemy.engine import Engine
from flashdeck.config import DB_FILE
from flashdeck.core.log_manager import logger

def make_engine(database_url: str, **kwargs) -> Engine:
    """
    Builds a SQLite engine.
    check_same_thread=False is needed for SQLite with NiceGUI/FastAPI concurrency
    """
    connect_args = kwargs.pop("connect_args", {})
    connect_args.setdefault("check_same_thread", False)
    return create_engine(database_url, echo=False, connect_args=connect_args, **kwargs)

DATABASE_URL = f"sqlite:///{DB_FILE}"

# Create the engine
engine = make_engine(DATABASE_URL)

def init_db(target: Engine = None):
    """
    Creates the storage table.
    Should be called on app startup.
    """
    from flashdeck.models import StorageSlot  # Import to register models
    target = target or engine
    if target is engine:
        db_dir = os.path.dirname(DB_FILE)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
    SQLModel.metadata.create_all(target)
    logger.info(f"Database initialized at {target.url}")
