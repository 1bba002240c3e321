"""Top-level state machine of the character birth process."""

import random
from typing import Callable, Dict, Optional

from config.logging_config import get_logger

from ..core.error_handling import BirthStateError, ValidationError
from .cascade import RollerCascadeBuilder
from .catalog import GameCatalog
from .confirm import FinalConfirm, QuickStartAnswer, QuickStartPrompt
from .keys import KeySource
from .menu import MenuQuestionDriver
from .models import (
    STAT_COUNT,
    BirthOutcome,
    BirthResult,
    CharacterDraft,
    PriorCharacter,
    Stage,
)
from .options import BirthOptionsScreen
from .roller import POINT_POOL, StatRollEngine
from .screen import Screen

logger = get_logger(__name__)


def _missing_prerequisite(stage: Stage, draft: CharacterDraft) -> Optional[str]:
    """Name of the first draft field ``stage`` depends on that is still unset."""
    requirements = (
        (Stage.RACE_CHOICE, "sex", draft.sex),
        (Stage.CLASS_CHOICE, "race", draft.race),
        (Stage.ROLLER_CHOICE, "player_class", draft.player_class),
        (Stage.ROLLER, "roller_method", draft.roller_method),
        (Stage.FINAL_CONFIRM, "method_tag", draft.method_tag),
    )
    for needed_from, name, value in requirements:
        if stage >= needed_from and value is None:
            return name
    return None


class BirthStageMachine:
    """
    Sequences the birth stages until the character is complete or the user quits.

    Each handler runs one stage and returns the stage to run next. Escape
    always steps back one stage; escaping the sex menu abandons birth.
    """

    def __init__(
        self,
        catalog: GameCatalog,
        keys: KeySource,
        screen: Screen,
        rng: Optional[random.Random] = None,
        pool: int = POINT_POOL,
        allow_quick_start: bool = True,
    ):
        self.catalog = catalog
        self.screen = screen
        self.allow_quick_start = allow_quick_start
        self.rng = rng or random.Random()

        self.driver = MenuQuestionDriver(keys, screen, self.rng)
        self.options = BirthOptionsScreen(keys, screen)
        self.cascade = RollerCascadeBuilder(catalog, self.driver, screen, self.options)
        self.engine = StatRollEngine(keys, screen, catalog, pool)
        self.confirmation = FinalConfirm(keys, screen, catalog)
        self.quick_start = QuickStartPrompt(keys, screen)

        self.stage = Stage.RESET
        self._handlers: Dict[Stage, Callable[[Stage, CharacterDraft], Stage]] = {
            Stage.RESET: self._reset,
            Stage.SEX_CHOICE: self._menu,
            Stage.RACE_CHOICE: self._menu,
            Stage.CLASS_CHOICE: self._menu,
            Stage.ROLLER_CHOICE: self._menu,
            Stage.ROLLER: self._roll,
            Stage.FINAL_CONFIRM: self._confirm,
        }

    def run(self, draft: CharacterDraft, prior: Optional[PriorCharacter] = None) -> BirthResult:
        """
        Run the whole birth process on ``draft``.

        Args:
            draft: Draft to fill in; fields already set become menu defaults
            prior: Previous character of the account, offered for quick-start

        Returns:
            COMPLETED with a fully specified draft, ABANDONED when the user
            escapes the first menu, or QUIT when the client must exit
        """
        if len(draft.stats) != STAT_COUNT:
            raise ValidationError(
                f"Draft needs {STAT_COUNT} stats, got {len(draft.stats)}", field="stats"
            )

        draft.quick_start = prior.method if (prior is not None and self.allow_quick_start) else None

        if draft.quick_start is not None:
            outcome = self._offer_quick_start(draft, prior)
            if outcome is not None:
                return self._finish(outcome, draft)

        self.stage = Stage.RESET
        while True:
            if self.stage is Stage.COMPLETE:
                return self._finish(BirthOutcome.COMPLETED, draft)
            if self.stage is Stage.QUIT:
                return self._finish(BirthOutcome.QUIT, draft)
            if self.stage is Stage.BACK:
                return self._finish(BirthOutcome.ABANDONED, draft)

            handler = self._handlers.get(self.stage)
            if handler is None:
                raise BirthStateError(f"No handler for stage {self.stage!r}")

            missing = _missing_prerequisite(self.stage, draft)
            if missing is not None:
                raise BirthStateError(
                    f"Cannot enter {self.stage.name} without {missing}",
                    stage=self.stage.name,
                    context={"missing": missing},
                )

            next_stage = handler(self.stage, draft)
            logger.debug("Stage transition", from_stage=self.stage.name, to_stage=next_stage.name)
            self.stage = next_stage

    def _offer_quick_start(self, draft: CharacterDraft, prior: PriorCharacter) -> Optional[BirthOutcome]:
        """Returns an outcome when the offer ends birth, None to go through the menus."""
        sex, race, player_class = self._resolve_prior(prior)

        answer = self.quick_start.ask()
        if answer is QuickStartAnswer.QUIT:
            return BirthOutcome.QUIT
        if answer is QuickStartAnswer.DECLINED:
            draft.quick_start = None
            return None

        draft.sex = sex
        draft.race = race
        draft.player_class = player_class
        draft.roller_method = None
        draft.stats = list(prior.stats)
        draft.method_tag = prior.method
        if not draft.name:
            draft.name = prior.name
        return BirthOutcome.COMPLETED

    def _resolve_prior(self, prior: PriorCharacter):
        try:
            sex = self.catalog.sex(prior.sex).sidx
            race = self.catalog.race(prior.race_id)
            player_class = self.catalog.player_class(prior.class_id)
        except KeyError as e:
            raise ValidationError(f"Prior character refers to unknown game data: {e}") from e
        if player_class not in self.catalog.selectable_classes(race):
            raise ValidationError(
                f"Prior character class {player_class.name} is not available to {race.name}",
                field="class_id",
            )
        return sex, race, player_class

    def _reset(self, stage: Stage, draft: CharacterDraft) -> Stage:
        return Stage.SEX_CHOICE

    def _menu(self, stage: Stage, draft: CharacterDraft) -> Stage:
        return self.cascade.run(stage, draft)

    def _roll(self, stage: Stage, draft: CharacterDraft) -> Stage:
        answer = self.engine.run(draft.roller_method, draft)
        if answer.result is not None:
            draft.apply_roll(answer.result)
        if answer.next_stage is Stage.BACK:
            return Stage.ROLLER_CHOICE
        return answer.next_stage

    def _confirm(self, stage: Stage, draft: CharacterDraft) -> Stage:
        next_stage = self.confirmation.confirm(draft)
        if next_stage is Stage.BACK:
            return Stage.ROLLER
        if next_stage is Stage.RESET:
            draft.reset()
        return next_stage

    def _finish(self, outcome: BirthOutcome, draft: CharacterDraft) -> BirthResult:
        logger.info(
            "Birth finished",
            outcome=outcome.value,
            sex=draft.sex,
            race=draft.race.name if draft.race else None,
            player_class=draft.player_class.name if draft.player_class else None,
            method=draft.method_tag.name if draft.method_tag is not None else None,
        )
        return BirthResult(outcome, draft)
