# core/locale_manager.py

import json
from typing import Dict, Any, List
import importlib.resources as pkg_resources
from nicegui import app
from flashdeck.core.log_manager import logger

# The directory where locale files (e.g., en.json) are stored.
I18N_PACKAGE_REF = pkg_resources.files('i18n')

FALLBACK_LOCALE = 'en'

# Key in app.storage.user holding the chosen UI language.
LOCALE_STORAGE_KEY = 'ui_language'

class LocaleManager:
    """
    Loads every locale file found in the i18n package and translates keys
    for the locale stored in the NiceGUI user session ('ui_language').
    """

    def __init__(self, package_ref=I18N_PACKAGE_REF):
        self._package_ref = package_ref
        self._all_translations: Dict[str, Dict[str, str]] = {}

        # 1. Fallback first, so every key has at least one translation
        self._fallback_translations = self._load_translations(FALLBACK_LOCALE)
        self._all_translations[FALLBACK_LOCALE] = self._fallback_translations

        # 2. Discover the remaining locales
        try:
            for path in self._package_ref.iterdir():
                if path.name.endswith('.json') and path.stem not in self._all_translations:
                    self._all_translations[path.stem] = self._load_translations(path.stem)
        except OSError as e:
            logger.error(f"Error during locale discovery: {e}")

        logger.info(f"LocaleManager initialized. Supported: {self.supported_locales}. Fallback: {FALLBACK_LOCALE}")

    def _load_translations(self, locale: str) -> Dict[str, str]:
        file_name = f'{locale}.json'
        try:
            with (self._package_ref / file_name).open('r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.warning(f"Translation resource not found for locale '{locale}' ({file_name}).")
            return {}
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON format in file for locale '{locale}': {e}")
            return {}

        if not isinstance(data, dict):
            logger.error(f"Translation file root for locale '{locale}' must be a dictionary.")
            return {}
        logger.info(f"Loaded translations for locale '{locale}'.")
        return data

    @property
    def supported_locales(self) -> List[str]:
        return list(self._all_translations.keys())

    def current_locale(self) -> str:
        """
        The locale of the current user session.
        Outside a page request (startup, tests) there is no session, so English is used.
        """
        try:
            return app.storage.user.get(LOCALE_STORAGE_KEY, FALLBACK_LOCALE)
        except (RuntimeError, AssertionError):
            return FALLBACK_LOCALE

    def T(self, key: str, use_fallback: bool = False, locale: str = None, **kwargs: Any) -> str:
        """
        Translates a key, interpolating kwargs with str.format.
        Missing keys fall back to English, then to '!! key !!'.
        """
        if use_fallback:
            current = FALLBACK_LOCALE
        else:
            current = locale or self.current_locale()

        translated = self._all_translations.get(current, {}).get(key)
        if translated is None:
            translated = self._fallback_translations.get(key)
            if translated is None:
                logger.warning(f"Missing translation key '{key}' in both '{current}' and fallback locales.")
                return f"!! {key} !!"
            logger.warning(f"Missing translation key '{key}' for locale '{current}'.")

        if kwargs:
            try:
                return translated.format(**kwargs)
            except (KeyError, IndexError, ValueError) as e:
                logger.error(f"Formatting failed for key '{key}' in locale '{current}': {e}")
        return translated

# Globally accessible singleton instance
global_locale_manager = LocaleManager()

# Short alias used by the pages
T = global_locale_manager.T

SUPPORTED_LOCALES = global_locale_manager.supported_locales
