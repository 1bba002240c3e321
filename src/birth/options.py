"""Birth options screen, opened with '=' from any birth menu."""

from typing import Dict, Tuple

from .keys import KeyKind, KeySource
from .menu import SELECTION_LETTERS
from .models import CharacterDraft
from .screen import Screen

# (name, description, default)
BIRTH_OPTIONS: Tuple[Tuple[str, str, bool], ...] = (
    ("birth_force_descend", "Force player descent (never make up stairs)", False),
    ("birth_no_recall", "Word of Recall has no effect", False),
    ("birth_no_artifacts", "Lose artifacts when leaving level", False),
    ("birth_feelings", "Show level feelings", True),
    ("birth_no_selling", "Increase gold drops but disable selling", True),
    ("birth_start_kit", "Start with a kit of useful gear", True),
)


def effective_options(draft: CharacterDraft) -> Dict[str, bool]:
    """Birth options of the draft, with defaults for those never touched."""
    options = {name: default for name, _, default in BIRTH_OPTIONS}
    options.update(draft.birth_options)
    return options


class BirthOptionsScreen:
    """Lists the birth options; a letter toggles one, escape or Enter leaves."""

    def __init__(self, keys: KeySource, screen: Screen):
        self.keys = keys
        self.screen = screen

    def _draw(self, options: Dict[str, bool]) -> None:
        screen = self.screen
        screen.clear()
        screen.put_str(1, 0, "Birth options", "light blue")
        for i, (name, description, _) in enumerate(BIRTH_OPTIONS):
            value = "yes" if options[name] else "no "
            screen.put_str(3 + i, 2, f"{SELECTION_LETTERS[i]}) {description:<45} {value} ({name})")
        screen.put_str(23, 1, "[Press a letter to toggle an option, 'ESC' to return]")
        screen.refresh()

    def run(self, draft: CharacterDraft) -> None:
        options = effective_options(draft)
        while True:
            self._draw(options)
            event = self.keys.next_event()
            if event.kind in (KeyKind.ESCAPE, KeyKind.ENTER, KeyKind.QUIT):
                break
            if event.kind is not KeyKind.CHAR:
                continue
            idx = SELECTION_LETTERS.find(event.char)
            if 0 <= idx < len(BIRTH_OPTIONS):
                name = BIRTH_OPTIONS[idx][0]
                options[name] = not options[name]
        draft.birth_options = options
