"""Birth menus: choice sets and the driver that asks one menu question."""

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Protocol

from .keys import KeyKind, KeySource
from .models import Stage
from .screen import Screen

# Locations of the menus on the screen
QUESTION_ROW = 7
TABLE_ROW = 9
MENU_HEIGHT = 15

SELECTION_LETTERS = "abcdefghijklmnopqrstuvwxyz"


class HelpPanel(Protocol):
    """Renders auxiliary text about the choice under the cursor."""

    def render(self, screen: Screen, value: Any) -> None:
        ...


@dataclass
class MenuChoice:
    """A labeled entry of a menu and the draft value it stands for."""

    label: str
    value: Any


@dataclass
class MenuChoiceSet:
    """
    One birth menu: ordered choices, cursor and presentation details.

    Built fresh each time a cascade stage is entered and released when the
    stage is left.
    """

    stage: Stage
    hint: str
    choices: List[MenuChoice]
    cursor: int = 0
    allow_random: bool = True
    column: int = 2
    width: int = 12
    help: Optional[HelpPanel] = None
    top: int = field(default=0, init=False)

    def __post_init__(self):
        if not self.choices:
            raise ValueError(f"Menu for {self.stage.name} has no choices")
        if not 0 <= self.cursor < len(self.choices):
            self.cursor = 0

    @property
    def count(self) -> int:
        return len(self.choices)

    @property
    def current(self) -> MenuChoice:
        return self.choices[self.cursor]

    def move(self, delta: int) -> None:
        self.cursor = (self.cursor + delta) % self.count

    def index_of_letter(self, char: str) -> Optional[int]:
        idx = SELECTION_LETTERS.find(char)
        if 0 <= idx < self.count:
            return idx
        return None

    def release(self) -> None:
        """Drop the choices and help strategy held by this menu."""
        self.choices = []
        self.help = None

    def draw(self, screen: Screen, active: bool = True) -> None:
        """Draw the visible window of the menu, scrolled to keep the cursor shown."""
        if self.cursor < self.top:
            self.top = self.cursor
        elif self.cursor >= self.top + MENU_HEIGHT:
            self.top = self.cursor - MENU_HEIGHT + 1

        for row in range(MENU_HEIGHT):
            screen.erase(TABLE_ROW + row, self.column, self.width)
            idx = self.top + row
            if idx >= self.count:
                continue
            colour = "light blue" if idx == self.cursor else "white"
            tag = SELECTION_LETTERS[idx] if idx < len(SELECTION_LETTERS) else " "
            text = f"{tag}) {self.choices[idx].label}"[:self.width]
            screen.put_str(TABLE_ROW + row, self.column, text, colour)

        if active and self.help is not None:
            self.help.render(screen, self.current.value)


class MenuOutcome(Enum):
    """Result classes of one menu question."""

    SELECTED = "selected"
    RANDOM = "random"
    BACK = "back"
    QUIT = "quit"
    OPTIONS = "options"


@dataclass(frozen=True)
class MenuAnswer:
    """What the user did with a menu; ``index`` is set for commits."""

    outcome: MenuOutcome
    index: Optional[int] = None

    @property
    def committed(self) -> bool:
        return self.outcome in (MenuOutcome.SELECTED, MenuOutcome.RANDOM)


class MenuQuestionDriver:
    """
    Asks a single menu question and reports the user's answer.

    Enter, right arrow or a second tap of the item's letter commit the
    cursor; escape or left arrow step back; ``*`` commits a uniformly random
    item when the menu allows it; ``=`` asks for the birth options; Ctrl-X
    quits.
    """

    def __init__(self, keys: KeySource, screen: Screen, rng: Optional[random.Random] = None):
        self.keys = keys
        self.screen = screen
        self.rng = rng or random.Random()

    def _show_question(self, hint: str) -> None:
        for row in range(QUESTION_ROW, TABLE_ROW):
            self.screen.erase(row, 0, self.screen.width)
        self.screen.put_str(QUESTION_ROW, 2, hint, "yellow")

    def select_one(self, choice_set: MenuChoiceSet) -> MenuAnswer:
        self._show_question(choice_set.hint)

        while True:
            choice_set.draw(self.screen)
            self.screen.refresh()

            event = self.keys.next_event()

            if event.kind in (KeyKind.ESCAPE, KeyKind.LEFT):
                return MenuAnswer(MenuOutcome.BACK)

            if event.kind is KeyKind.QUIT:
                return MenuAnswer(MenuOutcome.QUIT)

            if event.kind in (KeyKind.ENTER, KeyKind.RIGHT):
                return MenuAnswer(MenuOutcome.SELECTED, choice_set.cursor)

            if event.kind is KeyKind.UP:
                choice_set.move(-1)
            elif event.kind is KeyKind.DOWN:
                choice_set.move(1)
            elif event.is_char("*"):
                if not choice_set.allow_random:
                    continue
                choice_set.cursor = self.rng.randrange(choice_set.count)
                choice_set.draw(self.screen)
                return MenuAnswer(MenuOutcome.RANDOM, choice_set.cursor)
            elif event.is_char("="):
                return MenuAnswer(MenuOutcome.OPTIONS)
            elif event.kind is KeyKind.CHAR:
                idx = choice_set.index_of_letter(event.char)
                if idx is None:
                    continue
                # Double tap: the letter of the item under the cursor selects it
                if idx == choice_set.cursor:
                    return MenuAnswer(MenuOutcome.SELECTED, idx)
                choice_set.cursor = idx
