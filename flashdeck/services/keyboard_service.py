# flashdeck/services/keyboard_service.py
from enum import Enum
from typing import Optional

class Command(str, Enum):
    FLIP = "flip"
    NEXT = "next"
    PREV = "prev"
    TOGGLE_KNOWN = "toggle_known"

# Key names as NiceGUI reports them (e.key.name); Space arrives as ' '.
KEY_BINDINGS = {
    " ": Command.FLIP,
    "ArrowRight": Command.NEXT,
    "ArrowLeft": Command.PREV,
    "k": Command.TOGGLE_KNOWN,
    "K": Command.TOGGLE_KNOWN,
}

# Tags where typing must not trigger shortcuts. Passed to ui.keyboard(ignore=...).
TEXT_ENTRY_TAGS = ['input', 'textarea', 'select']

# A clicked button keeps focus, and Space would then also "press" it.
# Drop focus after clicks and cancel Space activation on buttons,
# so Space only ever flips the card.
RELEASE_BUTTON_FOCUS_JS = """
document.addEventListener('click', (e) => {
    const button = e.target.closest && e.target.closest('button');
    if (button) button.blur();
});
document.addEventListener('keyup', (e) => {
    if (e.key === ' ' && e.target.closest && e.target.closest('button')) e.preventDefault();
}, true);
"""

def command_for_key(key: str) -> Optional[Command]:
    """
    Maps a physical key to a study command.
    Keys typed into text fields never reach this: ui.keyboard ignores TEXT_ENTRY_TAGS.
    """
    return KEY_BINDINGS.get(key)
