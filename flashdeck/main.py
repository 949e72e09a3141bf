# main.py
import os
from nicegui import ui, app
from flashdeck.config import STORAGE_SECRET, PORT
from flashdeck.database import init_db

# --- CORE MODULE IMPORTS ---
from flashdeck.core.locale_manager import T
from flashdeck.core.log_manager import logger
import flashdeck.pages.deck_page

# --- PATH & STYLING SETUP ---
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(BASE_DIR)
ASSETS_DIR = os.path.join(PROJECT_ROOT, 'assets')

# Mount the 'assets' directory to be accessible at the '/assets/' URL path
if os.path.exists(ASSETS_DIR):
    app.add_static_files('/assets', ASSETS_DIR)
else:
    logger.warning(f"Assets directory not found at: {ASSETS_DIR}")

def main():
    init_db()
    ui.run(title=T("app_title", use_fallback=True), reload=False, port=PORT, storage_secret=STORAGE_SECRET)

# --- STARTUP ---
if __name__ in {"__main__", "__mp_main__"}:
    main()
