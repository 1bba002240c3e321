"""
Intrinsic stat generation: the point-based and the standard roller.

The point-based roller lets the player buy each of the six stats between 10
and 18 from a fixed pool of points. The standard roller only records the
order in which the stats matter; the dice themselves are rolled by the
server, which rerolls until the first three stats in that order reach 17, 16
and 15.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set

from ..core.error_handling import BirthStateError
from .catalog import GameCatalog
from .keys import KeyKind, KeySource, direction_of
from .models import (
    STAT_COUNT,
    STAT_MAX,
    STAT_MIN,
    CharacterDraft,
    RollerMethod,
    RollerResult,
    Stage,
    Stat,
)
from .screen import Screen
from .stats import format_stat, modify_stat_value

logger = logging.getLogger(__name__)

# Cost of each stat value from 10 to 18
STAT_COSTS = (0, 1, 2, 3, 4, 5, 6, 8, 12)

# Pool of available points; unused points are lost
POINT_POOL = 20

# Minimums the server's dice roller enforces on the first three ordered stats
STANDARD_MINIMUMS = (17, 16, 15)

RESTART_HINT = "[Press 'ESC' at any time to restart this step, or 'Ctrl-X' to quit]"


def stat_cost(value: int) -> int:
    """Point cost of a single stat value."""
    if not STAT_MIN <= value <= STAT_MAX:
        raise ValueError(f"Stat value {value} outside [{STAT_MIN}, {STAT_MAX}]")
    return STAT_COSTS[value - STAT_MIN]


def total_cost(stats: Sequence[int]) -> int:
    return sum(stat_cost(v) for v in stats)


class PointBuyState:
    """
    Six stats bought from a point pool, with a cursor on one of them.

    Every change goes through ``adjust``, which pulls the changed stat back
    one step at a time until the total cost fits the pool again, so an
    over-budget state is never observable.
    """

    def __init__(self, pool: int = POINT_POOL):
        self.pool = pool
        self.stats: List[int] = [STAT_MIN] * STAT_COUNT
        self.cursor = 0

    @property
    def cost(self) -> int:
        return total_cost(self.stats)

    @property
    def remaining(self) -> int:
        return self.pool - self.cost

    def reset(self) -> None:
        self.stats = [STAT_MIN] * STAT_COUNT
        self.cursor = 0

    def move(self, delta: int) -> None:
        self.cursor = (self.cursor + delta) % STAT_COUNT

    def adjust(self, delta: int) -> bool:
        """
        Raise or lower the selected stat by ``delta`` within [10, 18].

        Returns:
            True if the stat changed
        """
        stat = self.cursor
        before = self.stats[stat]
        self.stats[stat] = max(STAT_MIN, min(STAT_MAX, before + delta))

        while self.cost > self.pool and self.stats[stat] > STAT_MIN:
            self.stats[stat] -= 1
        while self.cost < 0 and self.stats[stat] < STAT_MAX:
            self.stats[stat] += 1

        return self.stats[stat] != before

    def result(self) -> RollerResult:
        return RollerResult(tuple(self.stats), RollerMethod.POINT_BASED)


class StatOrdering:
    """Partial ordering of the six stats built one slot at a time."""

    def __init__(self):
        self.order: List[Stat] = []

    @property
    def available(self) -> List[Stat]:
        placed: Set[Stat] = set(self.order)
        return [s for s in Stat if s not in placed]

    @property
    def is_complete(self) -> bool:
        return len(self.order) == STAT_COUNT

    def place(self, stat: Stat) -> bool:
        """Put ``stat`` in the next slot; False if it is already placed."""
        if stat in self.order or self.is_complete:
            return False
        self.order.append(stat)
        return True

    def result(self) -> RollerResult:
        if not self.is_complete:
            raise ValueError(f"Only {len(self.order)} of {STAT_COUNT} stats ordered")
        return RollerResult(tuple(int(s) for s in self.order), RollerMethod.STANDARD)


@dataclass(frozen=True)
class RollAnswer:
    """Where the roller sends the birth process next, and the roll if any."""

    next_stage: Stage
    result: Optional[RollerResult] = None


class StatRollEngine:
    """Runs the stat roller chosen in the roller menu."""

    def __init__(self, keys: KeySource, screen: Screen, catalog: GameCatalog, pool: int = POINT_POOL):
        self.keys = keys
        self.screen = screen
        self.catalog = catalog
        self.pool = pool

    def run(self, method: RollerMethod, draft: CharacterDraft) -> RollAnswer:
        if method is RollerMethod.POINT_BASED:
            return self.run_point_based(draft)
        if method is RollerMethod.STANDARD:
            return self.run_standard(draft)
        raise BirthStateError(f"{method.name} is not an interactive roller", stage=Stage.ROLLER.name)

    def _title(self, draft: CharacterDraft) -> None:
        if draft.sex is None or draft.race is None or draft.player_class is None:
            raise BirthStateError("Roller needs sex, race and class", stage=Stage.ROLLER.name)
        screen = self.screen
        screen.clear()
        screen.put_str(2, 1, "Name        :")
        screen.put_str(2, 15, draft.name, "light blue")
        screen.put_str(4, 1, "Sex         :")
        screen.put_str(4, 15, self.catalog.sex(draft.sex).title, "light blue")
        screen.put_str(5, 1, "Race        :")
        screen.put_str(5, 15, draft.race.name, "light blue")
        screen.put_str(6, 1, "Class       :")
        screen.put_str(6, 15, draft.player_class.name, "light blue")
        screen.put_str(23, 1, RESTART_HINT)

    def _draw_point_buy(self, state: PointBuyState, draft: CharacterDraft) -> None:
        screen = self.screen
        screen.put_str(15, 10, "  Self    Best")
        screen.put_str(15, 26, "Cost")
        for i, stat in enumerate(Stat):
            value = state.stats[i]
            bonus = draft.race.stat_adj[i] + draft.player_class.stat_adj[i]
            screen.put_str(16 + i, 5, f"{stat.name}: ")
            screen.put_str(16 + i, 10, format_stat(value), "light green")
            screen.put_str(16 + i, 18, format_stat(modify_stat_value(value, bonus)), "light green")
            screen.put_str(16 + i, 26, f"{stat_cost(value):4d}")
        screen.prt(
            13, 1,
            f"Total Cost {state.cost:2d}/{state.pool}.  Use up/down to move, "
            "left/right to modify, 'Enter' to accept.",
        )
        screen.set_cursor(True, 16 + state.cursor, 29)
        screen.refresh()

    def run_point_based(self, draft: CharacterDraft) -> RollAnswer:
        """
        Buy the six stats from the point pool.

        Escape on the very first key steps back to the roller menu; escape
        after any other key starts this roller over. Enter accepts.
        """
        self._title(draft)
        self.screen.put_str(8, 5, "The point-based roller allows players to increase or decrease")
        self.screen.put_str(9, 5, "each stat, each increase costing a certain amount of points,")
        self.screen.put_str(10, 5, "each decrease giving back some points.")
        self.screen.put_str(11, 5, f"The starting pool consists of {self.pool} available points.")

        state = PointBuyState(self.pool)
        first_time = True

        while True:
            self._draw_point_buy(state, draft)
            event = self.keys.next_event()

            if event.kind is KeyKind.QUIT:
                self.screen.set_cursor(False)
                return RollAnswer(Stage.QUIT)

            if event.kind is KeyKind.ESCAPE:
                self.screen.set_cursor(False)
                if first_time:
                    return RollAnswer(Stage.BACK)
                return RollAnswer(Stage.ROLLER)

            first_time = False

            if event.kind is KeyKind.ENTER:
                break

            direction = direction_of(event)
            if direction == 8:
                state.move(-1)
            elif direction == 2:
                state.move(1)
            elif direction == 4:
                state.adjust(-1)
            elif direction == 6:
                state.adjust(1)

        self.screen.clear_from(23)
        self.screen.set_cursor(False)
        result = state.result()
        logger.info(f"Point-based stats accepted: {list(result.values)} (cost {state.cost}/{state.pool})")
        return RollAnswer(Stage.FINAL_CONFIRM, result)

    def _draw_available(self, ordering: StatOrdering) -> None:
        self.screen.prt(21, 0, "")
        for stat in ordering.available:
            self.screen.put_str(21, int(stat) * 9, f"{stat.key}) {stat.title}")
        self.screen.refresh()

    def run_standard(self, draft: CharacterDraft) -> RollAnswer:
        """
        Choose the order in which the six stats are rolled.

        Escape before the first placement steps back to the roller menu;
        escape afterwards starts this roller over.
        """
        self._title(draft)
        self.screen.put_str(8, 1, "Stat roll   :")
        first, second, third = STANDARD_MINIMUMS
        self.screen.put_str(15, 5, "The standard roller will automatically ignore characters which do")
        self.screen.put_str(16, 5, f"not meet the minimum values of {first} for the first stat, {second} for the")
        self.screen.put_str(17, 5, f"second stat and {third} for the third stat specified below.")
        self.screen.put_str(18, 5, "Stats will be rolled randomly according to the specified order.")
        self.screen.put_str(20, 2, "Choose your stat order: ")

        ordering = StatOrdering()

        while not ordering.is_complete:
            self._draw_available(ordering)
            event = self.keys.next_event()

            if event.kind is KeyKind.QUIT:
                return RollAnswer(Stage.QUIT)

            if event.kind is KeyKind.ESCAPE:
                if not ordering.order:
                    return RollAnswer(Stage.BACK)
                return RollAnswer(Stage.ROLLER)

            if event.kind is not KeyKind.CHAR or not event.char.islower():
                continue
            idx = ord(event.char) - ord("a")
            if not 0 <= idx < STAT_COUNT:
                continue
            slot = len(ordering.order)
            if ordering.place(Stat(idx)):
                self.screen.put_str(8 + slot, 15, Stat(idx).title, "light blue")

        self.screen.clear_from(20)
        result = ordering.result()
        logger.info(f"Standard stat order accepted: {[s.name for s in result.stat_order]}")
        return RollAnswer(Stage.FINAL_CONFIRM, result)
