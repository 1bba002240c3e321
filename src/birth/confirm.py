"""Final confirmation of the character, and the quick-start offer."""

from enum import Enum

from .catalog import GameCatalog
from .keys import KeyKind, KeySource
from .models import CharacterDraft, RollerMethod, Stage, Stat
from .screen import Screen
from .stats import format_stat

CONFIRM_PROMPT = "['ESC' to step back, 'S' to start over, or any other key to continue]"
QUICK_PROMPT = "Quick-start character based on previous one (y/n)? "
QUICK_CONFIRM_PROMPT = "['Ctrl-X' to quit, 'ESC' to start over, or any other key to continue]"


class FinalConfirm:
    """Shows the finished draft and asks for the final word on it."""

    def __init__(self, keys: KeySource, screen: Screen, catalog: GameCatalog):
        self.keys = keys
        self.screen = screen
        self.catalog = catalog

    def _draw_summary(self, draft: CharacterDraft) -> None:
        screen = self.screen
        screen.clear()
        rows = [
            ("Name", draft.name),
            ("Sex", self.catalog.sex(draft.sex).title if draft.sex is not None else ""),
            ("Race", draft.race.name if draft.race else ""),
            ("Class", draft.player_class.name if draft.player_class else ""),
            ("Stats", draft.method_tag.label if draft.method_tag is not None else ""),
        ]
        for i, (label, value) in enumerate(rows):
            screen.put_str(2 + i, 1, f"{label:<12}:")
            screen.put_str(2 + i, 15, value, "light blue")

        if draft.method_tag is RollerMethod.STANDARD:
            screen.put_str(8, 1, "Stat order  :")
            for slot, idx in enumerate(draft.stats):
                screen.put_str(8 + slot, 15, Stat(idx).title, "light blue")
        else:
            for i, stat in enumerate(Stat):
                screen.put_str(8 + i, 5, f"{stat.name}: ")
                screen.put_str(8 + i, 10, format_stat(draft.stats[i]), "light green")

    def confirm(self, draft: CharacterDraft) -> Stage:
        """
        Returns COMPLETE on any unrecognized key, RESET on 's'/'S', BACK on
        escape and QUIT on Ctrl-X.
        """
        self._draw_summary(draft)
        self.screen.put_str(23, 1, CONFIRM_PROMPT)
        self.screen.refresh()

        event = self.keys.next_event()
        if event.is_char("sS"):
            return Stage.RESET
        if event.kind is KeyKind.QUIT:
            return Stage.QUIT
        if event.kind is KeyKind.ESCAPE:
            return Stage.BACK
        return Stage.COMPLETE


class QuickStartAnswer(Enum):
    ACCEPTED = "accepted"
    DECLINED = "declined"
    QUIT = "quit"


class QuickStartPrompt:
    """Offers to recreate the previous character without going through the menus."""

    def __init__(self, keys: KeySource, screen: Screen):
        self.keys = keys
        self.screen = screen

    def ask(self) -> QuickStartAnswer:
        self.screen.clear()
        self.screen.put_str(2, 2, QUICK_PROMPT)
        self.screen.refresh()

        while True:
            event = self.keys.next_event()
            if event.kind is KeyKind.QUIT:
                return QuickStartAnswer.QUIT
            if event.kind in (KeyKind.ESCAPE, KeyKind.ENTER) or event.is_char("YyNn"):
                break

        if not event.is_char("Yy"):
            return QuickStartAnswer.DECLINED

        self.screen.prt(23, 5, QUICK_CONFIRM_PROMPT)
        self.screen.refresh()

        event = self.keys.next_event()
        if event.kind is KeyKind.QUIT:
            return QuickStartAnswer.QUIT
        if event.kind is KeyKind.ESCAPE:
            return QuickStartAnswer.DECLINED
        return QuickStartAnswer.ACCEPTED
