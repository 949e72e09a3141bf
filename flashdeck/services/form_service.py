# flashdeck/services/form_service.py
from typing import Dict, List, Optional, Tuple
from pydantic import ValidationError

from flashdeck.schemas import (
    CardForm, FRONT_MIN_LENGTH, FRONT_MAX_LENGTH, BACK_MIN_LENGTH, BACK_MAX_LENGTH,
)

# Interpolation values for the translated error messages, per field.
LENGTH_LIMITS = {
    "front": {"min": FRONT_MIN_LENGTH, "max": FRONT_MAX_LENGTH},
    "back": {"min": BACK_MIN_LENGTH, "max": BACK_MAX_LENGTH},
}

def _errors(front: Optional[str], back: Optional[str]) -> List[dict]:
    try:
        CardForm(front=front, back=back)
    except ValidationError as e:
        return e.errors()
    return []

def validate_card(front: Optional[str], back: Optional[str]) -> Dict[str, str]:
    """
    Checks a proposed card.
    Returns: {field: message}; empty when the card may be stored.
    """
    errors = {}
    for err in _errors(front, back):
        field = str(err['loc'][0]) if err['loc'] else "form"
        errors.setdefault(field, err['msg'])
    return errors

def validate_card_codes(front: Optional[str], back: Optional[str]) -> Dict[str, str]:
    """
    Same check as validate_card, but returns error codes
    (e.g. 'front_too_short'), which double as translation keys.
    """
    errors = {}
    for err in _errors(front, back):
        field = str(err['loc'][0]) if err['loc'] else "form"
        errors.setdefault(field, err['type'])
    return errors

def clean_card(front: str, back: str) -> Tuple[str, str]:
    """
    Returns the trimmed values that get stored.
    Raises ValidationError for an invalid card, so call validate_card first.
    """
    form = CardForm(front=front, back=back)
    return form.front, form.back
