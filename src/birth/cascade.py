"""
The menu cascade of the birth process: sex, race, class and roller method.

Each visit to one of the four choice stages rebuilds every menu up to and
including the current one from the draft, draws the earlier ones as context,
asks the current one and writes the answer back into the draft.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional

from ..core.error_handling import BirthStateError
from .catalog import GameCatalog
from .help_panels import ClassHelp, RaceHelp
from .menu import MenuAnswer, MenuChoice, MenuChoiceSet, MenuOutcome, MenuQuestionDriver
from .models import SELECTABLE_ROLLERS, CharacterDraft, RollerMethod, Stage
from .screen import Screen

logger = logging.getLogger(__name__)

SEX_COL = 2
RACE_COL = 14
CLASS_COL = 29
ROLLER_COL = 45

INSTRUCTIONS = (
    (1, "{light blue}Please select your character traits from the menus below:{/}"),
    (3, "Use the {light green}movement keys{/} to scroll the menu, {light green}Enter{/} to select the current menu"),
    (4, "item, '{light green}*{/}' for a random menu item, '{light green}ESC{/}' to step back through the birth"),
    (5, "process, '{light green}={/}' for the birth options, or '{light green}Ctrl-X{/}' to quit."),
)


def _sex_menu(draft: CharacterDraft, catalog: GameCatalog) -> MenuChoiceSet:
    choices = [MenuChoice(s.title, s.sidx) for s in catalog.sexes]
    cursor = next((i for i, c in enumerate(choices) if c.value == draft.sex), 0)
    return MenuChoiceSet(
        stage=Stage.SEX_CHOICE,
        hint="Sex does not have any significant gameplay effects.",
        choices=choices,
        cursor=cursor,
        column=SEX_COL,
        width=12,
    )


def _race_menu(draft: CharacterDraft, catalog: GameCatalog) -> MenuChoiceSet:
    choices = [MenuChoice(r.name, r) for r in catalog.races]
    cursor = next((i for i, c in enumerate(choices) if c.value == draft.race), 0)
    return MenuChoiceSet(
        stage=Stage.RACE_CHOICE,
        hint="Race affects stats and skills, and may confer resistances and abilities.",
        choices=choices,
        cursor=cursor,
        column=RACE_COL,
        width=15,
        help=RaceHelp(),
    )


def _class_menu(draft: CharacterDraft, catalog: GameCatalog) -> MenuChoiceSet:
    if draft.race is None:
        raise BirthStateError("Class menu needs a race", stage=Stage.CLASS_CHOICE.name)
    choices = [MenuChoice(c.name, c) for c in catalog.selectable_classes(draft.race)]
    cursor = next((i for i, c in enumerate(choices) if c.value == draft.player_class), 0)
    return MenuChoiceSet(
        stage=Stage.CLASS_CHOICE,
        hint="Class affects stats, skills, and other character traits.",
        choices=choices,
        cursor=cursor,
        column=CLASS_COL,
        width=16,
        help=ClassHelp(draft.race),
    )


def _roller_menu(draft: CharacterDraft, catalog: GameCatalog) -> MenuChoiceSet:
    choices = [MenuChoice(m.label, m) for m in SELECTABLE_ROLLERS]
    cursor = next((i for i, c in enumerate(choices) if c.value == draft.roller_method), 0)
    return MenuChoiceSet(
        stage=Stage.ROLLER_CHOICE,
        hint="Choose how to generate your intrinsic stats. Point-based is recommended.",
        choices=choices,
        cursor=cursor,
        allow_random=False,
        column=ROLLER_COL,
        width=30,
    )


def _commit_sex(draft: CharacterDraft, value: Any) -> None:
    draft.sex = value


def _commit_race(draft: CharacterDraft, value: Any) -> None:
    draft.race = value


def _commit_class(draft: CharacterDraft, value: Any) -> None:
    draft.player_class = value


def _commit_roller(draft: CharacterDraft, value: Any) -> None:
    draft.roller_method = RollerMethod(value)


@dataclass(frozen=True)
class CascadeStep:
    """One menu of the cascade: the stage it answers, how to build it, where the answer goes."""

    stage: Stage
    build: Callable[[CharacterDraft, GameCatalog], MenuChoiceSet]
    commit: Callable[[CharacterDraft, Any], None]


CASCADE = (
    CascadeStep(Stage.SEX_CHOICE, _sex_menu, _commit_sex),
    CascadeStep(Stage.RACE_CHOICE, _race_menu, _commit_race),
    CascadeStep(Stage.CLASS_CHOICE, _class_menu, _commit_class),
    CascadeStep(Stage.ROLLER_CHOICE, _roller_menu, _commit_roller),
)


def active_steps(stage: Stage) -> List[CascadeStep]:
    """
    Menus shown while answering ``stage``, in screen order; the last is asked.

    Raises:
        BirthStateError: If ``stage`` is not one of the four menu stages
    """
    if not Stage.SEX_CHOICE <= stage <= Stage.ROLLER_CHOICE:
        raise BirthStateError(f"{stage.name} is not a menu stage", stage=stage.name)
    return [step for step in CASCADE if step.stage <= stage]


class RollerCascadeBuilder:
    """Runs one menu stage of the cascade against the draft."""

    def __init__(
        self,
        catalog: GameCatalog,
        driver: MenuQuestionDriver,
        screen: Screen,
        options: Optional[Any] = None,
    ):
        self.catalog = catalog
        self.driver = driver
        self.screen = screen
        self.options = options

    @contextmanager
    def _menus(self, steps: List[CascadeStep], draft: CharacterDraft) -> Iterator[List[MenuChoiceSet]]:
        menus: List[MenuChoiceSet] = []
        try:
            for step in steps:
                menus.append(step.build(draft, self.catalog))
            yield menus
        finally:
            for menu in menus:
                menu.release()

    def _print_instructions(self) -> None:
        self.screen.clear()
        for row, text in INSTRUCTIONS:
            self.screen.put_markup(row, 0, text)

    def run(self, stage: Stage, draft: CharacterDraft) -> Stage:
        """
        Ask the menu for ``stage`` and return the stage to go to next.

        Returns the following stage on a commit, the previous one on escape
        (``Stage.BACK`` from the sex menu), ``Stage.QUIT`` on Ctrl-X, and
        ``stage`` itself after a visit to the birth options.
        """
        steps = active_steps(stage)
        self._print_instructions()

        with self._menus(steps, draft) as menus:
            for menu in menus[:-1]:
                menu.draw(self.screen, active=False)

            current = menus[-1]
            answer: MenuAnswer = self.driver.select_one(current)

            if answer.committed:
                choice = current.choices[answer.index]
                steps[-1].commit(draft, choice.value)
                logger.debug(
                    f"{stage.name}: selected {choice.label!r} (index {answer.index}, "
                    f"random={answer.outcome is MenuOutcome.RANDOM})"
                )
                return stage.next()

            if answer.outcome is MenuOutcome.BACK:
                return stage.previous()

            if answer.outcome is MenuOutcome.QUIT:
                return Stage.QUIT

        # Birth options, then ask the same question again
        if self.options is not None:
            self.options.run(draft)
        return stage
