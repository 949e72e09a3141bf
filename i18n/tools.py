import os
import json
from glob import glob
from typing import Dict, Set

def find_missing_keys(base_path: str = None) -> Dict[str, Set[str]]:
    """Returns, per locale file in base_path, the keys some other locale has and it lacks."""
    base_path = base_path or os.path.dirname(os.path.abspath(__file__))
    locale_key_map: Dict[str, Set[str]] = {}

    for file_path in sorted(glob(os.path.join(base_path, '*.json'))):
        locale_code = os.path.splitext(os.path.basename(file_path))[0]
        with open(file_path, 'r', encoding='utf-8') as f:
            locale_key_map[locale_code] = set(json.load(f).keys())

    all_keys = set().union(*locale_key_map.values()) if locale_key_map else set()
    return {locale: all_keys - keys for locale, keys in locale_key_map.items()}

def print_translation_summary():
    """Prints which keys are missing in each locale."""
    for locale, missing_keys in find_missing_keys().items():
        if missing_keys:
            print(f"Locale '{locale}' is missing {len(missing_keys)} keys:")
            for key in sorted(missing_keys):
                print(f"  - {key}")
        else:
            print(f"Locale '{locale}' has all keys.")

if __name__ == "__main__":
    print_translation_summary()
