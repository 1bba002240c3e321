"""Data models for the character birth process."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from ..core.error_handling import ValidationError

if TYPE_CHECKING:
    from .catalog import PlayerClass, PlayerRace


# Intrinsic stats always start at, and are bounded by, these values
STAT_MIN = 10
STAT_MAX = 18
STAT_COUNT = 6


class Stage(IntEnum):
    """
    Birth stages, in the order they are visited.

    BACK, RESET, COMPLETE and QUIT are control pseudo-stages; the others are
    steps of the process and are strictly ordered by value.
    """

    BACK = -1
    RESET = 0
    SEX_CHOICE = 1
    RACE_CHOICE = 2
    CLASS_CHOICE = 3
    ROLLER_CHOICE = 4
    ROLLER = 5
    FINAL_CONFIRM = 6
    COMPLETE = 7
    QUIT = 8

    @property
    def is_control(self) -> bool:
        return self in (Stage.BACK, Stage.RESET, Stage.COMPLETE, Stage.QUIT)

    def previous(self) -> "Stage":
        """The stage one step back; stepping back from the first choice leaves birth."""
        if self is Stage.SEX_CHOICE:
            return Stage.BACK
        return Stage(self - 1)

    def next(self) -> "Stage":
        return Stage(self + 1)


class Stat(IntEnum):
    """The six intrinsic stats, in display order."""

    STR = 0
    INT = 1
    WIS = 2
    DEX = 3
    CON = 4
    CHR = 5

    @property
    def title(self) -> str:
        return self.name.capitalize()

    @property
    def key(self) -> str:
        """Selection letter used by the standard roller."""
        return chr(ord("a") + self.value)


class RollerMethod(IntEnum):
    """How the intrinsic stats were produced."""

    POINT_BASED = 0
    STANDARD = 1
    QUICK = 2
    QUICK_DYNAMIC = 3

    @property
    def label(self) -> str:
        return {
            RollerMethod.POINT_BASED: "Point-based",
            RollerMethod.STANDARD: "Standard roller",
            RollerMethod.QUICK: "Quick-start",
            RollerMethod.QUICK_DYNAMIC: "Quick-start (new incarnation)",
        }[self]

    @property
    def is_quick(self) -> bool:
        return self in (RollerMethod.QUICK, RollerMethod.QUICK_DYNAMIC)


# The two methods offered by the roller menu, in menu order
SELECTABLE_ROLLERS = (RollerMethod.POINT_BASED, RollerMethod.STANDARD)


class BirthOutcome(Enum):
    """How a birth run ended."""

    COMPLETED = "completed"
    ABANDONED = "abandoned"
    QUIT = "quit"


@dataclass(frozen=True)
class RollerResult:
    """
    Terminal output of a stat roller.

    For the point-based method ``values`` are the six stat values. For the
    standard method they are the stat indices in the order the dice roller
    must satisfy its minimums (a permutation of 0..5).
    """

    values: Tuple[int, ...]
    method: RollerMethod

    @property
    def stat_order(self) -> Tuple[Stat, ...]:
        if self.method is not RollerMethod.STANDARD:
            raise ValueError("Only standard rolls carry a stat order")
        return tuple(Stat(v) for v in self.values)


@dataclass
class CharacterDraft:
    """Character being assembled by the birth process."""

    name: str = ""
    sex: Optional[int] = None
    race: Optional["PlayerRace"] = None
    player_class: Optional["PlayerClass"] = None
    roller_method: Optional[RollerMethod] = None
    stats: List[int] = field(default_factory=lambda: [STAT_MIN] * STAT_COUNT)
    method_tag: Optional[RollerMethod] = None
    birth_options: Dict[str, bool] = field(default_factory=dict)

    # Pending quick-start tag for this birth run (None when unavailable)
    quick_start: Optional[RollerMethod] = None

    def reset(self) -> None:
        """Forget every birth choice; the name and quick-start tag survive."""
        self.sex = None
        self.race = None
        self.player_class = None
        self.roller_method = None
        self.stats = [STAT_MIN] * STAT_COUNT
        self.method_tag = None
        self.birth_options = {}

    def apply_roll(self, result: RollerResult) -> None:
        self.stats = list(result.values)
        self.method_tag = result.method

    @property
    def is_complete(self) -> bool:
        return (
            self.sex is not None
            and self.race is not None
            and self.player_class is not None
            and self.method_tag is not None
            and len(self.stats) == STAT_COUNT
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert draft to dictionary."""
        return {
            "name": self.name,
            "sex": self.sex,
            "race_id": self.race.ridx if self.race else None,
            "race": self.race.name if self.race else None,
            "class_id": self.player_class.cidx if self.player_class else None,
            "class": self.player_class.name if self.player_class else None,
            "roller_method": self.roller_method.name if self.roller_method is not None else None,
            "stats": list(self.stats),
            "method": self.method_tag.name if self.method_tag is not None else None,
            "birth_options": dict(self.birth_options),
        }


@dataclass
class PriorCharacter:
    """The previous character of an account, used for quick-start."""

    name: str
    sex: int
    race_id: int
    class_id: int
    stats: List[int]
    method: RollerMethod = RollerMethod.QUICK

    def __post_init__(self):
        if len(self.stats) != STAT_COUNT:
            raise ValidationError(
                f"Prior character needs {STAT_COUNT} stats, got {len(self.stats)}",
                field="stats",
            )
        if not self.method.is_quick:
            raise ValidationError(
                f"Prior character method must be a quick-start tag, got {self.method.name}",
                field="method",
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PriorCharacter":
        """Create a prior-character record from dictionary."""
        try:
            method = data.get("method", RollerMethod.QUICK.name)
            return cls(
                name=str(data["name"]),
                sex=int(data["sex"]),
                race_id=int(data["race_id"]),
                class_id=int(data["class_id"]),
                stats=[int(v) for v in data["stats"]],
                method=RollerMethod[method.upper()] if isinstance(method, str) else RollerMethod(method),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Malformed prior character record: {e}") from e


@dataclass
class BirthResult:
    """Outcome of one birth run together with the draft it produced."""

    outcome: BirthOutcome
    draft: CharacterDraft

    @property
    def completed(self) -> bool:
        return self.outcome is BirthOutcome.COMPLETED
