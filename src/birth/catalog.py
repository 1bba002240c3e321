"""Read-only game data used by the birth screens: sexes, races and classes."""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import yaml

from ..core.error_handling import ConfigurationError
from .models import STAT_COUNT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkillSet:
    """Skill modifiers granted by a race or class."""

    disarm: int = 0
    device: int = 0
    save: int = 0
    stealth: int = 0
    search: int = 0
    search_frequency: int = 0
    to_hit_melee: int = 0
    to_hit_bow: int = 0
    to_hit_throw: int = 0
    digging: int = 0

    def __add__(self, other: "SkillSet") -> "SkillSet":
        return SkillSet(**{f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)})

    @classmethod
    def from_data(cls, data: Union[Sequence[int], Dict[str, int], None]) -> "SkillSet":
        """Build from a mapping, or from a list in field order."""
        if not data:
            return cls()
        if isinstance(data, dict):
            return cls(**{k: int(v) for k, v in data.items()})
        names = [f.name for f in fields(cls)]
        if len(data) > len(names):
            raise ValueError(f"Too many skill values: {len(data)}")
        return cls(**{name: int(v) for name, v in zip(names, data)})


@dataclass(frozen=True)
class SexInfo:
    """One entry of the sex catalog."""

    sidx: int
    title: str


@dataclass(frozen=True)
class PlayerRace:
    """A playable race."""

    ridx: int
    name: str
    stat_adj: Tuple[int, ...] = (0,) * STAT_COUNT
    skills: SkillSet = field(default_factory=SkillSet)
    hit_die: int = 10
    exp: int = 100
    infravision: int = 0
    flags: Tuple[str, ...] = ()
    resists: Tuple[str, ...] = ()
    pflags: Tuple[str, ...] = ()

    @property
    def restricted(self) -> bool:
        """Restricted races (dragons) cannot take every class."""
        return "DRAGON" in self.pflags


@dataclass(frozen=True)
class PlayerClass:
    """A playable class."""

    cidx: int
    name: str
    stat_adj: Tuple[int, ...] = (0,) * STAT_COUNT
    skills: SkillSet = field(default_factory=SkillSet)
    hit_die: int = 0
    exp: int = 0
    spell_realm: Optional[str] = None
    pflags: Tuple[str, ...] = ()
    placeholder: bool = False
    unavailable_to_restricted: bool = False


class GameCatalog:
    """Read-only catalogs keyed by small integer ids."""

    def __init__(
        self,
        sexes: Sequence[SexInfo],
        races: Sequence[PlayerRace],
        classes: Sequence[PlayerClass],
    ):
        self.sexes: Tuple[SexInfo, ...] = tuple(sexes)
        self.races: Tuple[PlayerRace, ...] = tuple(races)
        self.classes: Tuple[PlayerClass, ...] = tuple(classes)
        self._validate()
        self._races_by_id = {r.ridx: r for r in self.races}
        self._classes_by_id = {c.cidx: c for c in self.classes}

    def _validate(self) -> None:
        if not self.sexes:
            raise ConfigurationError("Sex catalog is empty", config_key="sexes")
        if not self.races:
            raise ConfigurationError("Race catalog is empty", config_key="races")
        if not any(not c.placeholder for c in self.classes):
            raise ConfigurationError("Class catalog has no selectable class", config_key="classes")

        for key, ids in (
            ("sexes", [s.sidx for s in self.sexes]),
            ("races", [r.ridx for r in self.races]),
            ("classes", [c.cidx for c in self.classes]),
        ):
            if len(set(ids)) != len(ids):
                raise ConfigurationError(f"Duplicate ids in {key} catalog", config_key=key)

        for entry in list(self.races) + list(self.classes):
            if len(entry.stat_adj) != STAT_COUNT:
                raise ConfigurationError(
                    f"{entry.name} has {len(entry.stat_adj)} stat adjustments, expected {STAT_COUNT}",
                    config_key="stat_adj",
                )

    def sex(self, sidx: int) -> SexInfo:
        for s in self.sexes:
            if s.sidx == sidx:
                return s
        raise KeyError(f"Unknown sex id: {sidx}")

    def race(self, ridx: int) -> PlayerRace:
        try:
            return self._races_by_id[ridx]
        except KeyError:
            raise KeyError(f"Unknown race id: {ridx}") from None

    def player_class(self, cidx: int) -> PlayerClass:
        try:
            return self._classes_by_id[cidx]
        except KeyError:
            raise KeyError(f"Unknown class id: {cidx}") from None

    def selectable_classes(self, race: PlayerRace) -> List[PlayerClass]:
        """
        Classes offered to a race, in catalog order.

        The placeholder class is never offered, and restricted races also
        lose the classes reserved against them.

        Raises:
            ConfigurationError: If the race is left with no class at all
        """
        choices = [
            c for c in self.classes
            if not c.placeholder and not (race.restricted and c.unavailable_to_restricted)
        ]
        if not choices:
            raise ConfigurationError(
                f"No class is available to race {race.name}", config_key="classes"
            )
        return choices

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameCatalog":
        """
        Create a catalog from its dictionary form.

        Raises:
            ConfigurationError: If an entry is malformed
        """
        try:
            sexes = [SexInfo(sidx=i, title=str(title)) for i, title in enumerate(data.get("sexes", []))]
            races = [
                PlayerRace(
                    ridx=i,
                    name=str(r["name"]),
                    stat_adj=tuple(int(v) for v in r.get("stat_adj", (0,) * STAT_COUNT)),
                    skills=SkillSet.from_data(r.get("skills")),
                    hit_die=int(r.get("hit_die", 10)),
                    exp=int(r.get("exp", 100)),
                    infravision=int(r.get("infravision", 0)),
                    flags=tuple(r.get("flags", ())),
                    resists=tuple(r.get("resists", ())),
                    pflags=tuple(r.get("pflags", ())),
                )
                for i, r in enumerate(data.get("races", []))
            ]
            classes = [
                PlayerClass(
                    cidx=i,
                    name=str(c["name"]),
                    stat_adj=tuple(int(v) for v in c.get("stat_adj", (0,) * STAT_COUNT)),
                    skills=SkillSet.from_data(c.get("skills")),
                    hit_die=int(c.get("hit_die", 0)),
                    exp=int(c.get("exp", 0)),
                    spell_realm=c.get("spell_realm"),
                    pflags=tuple(c.get("pflags", ())),
                    placeholder=bool(c.get("placeholder", False)),
                    unavailable_to_restricted=bool(c.get("unavailable_to_restricted", False)),
                )
                for i, c in enumerate(data.get("classes", []))
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Malformed catalog entry: {e}", config_key="catalog") from e

        return cls(sexes, races, classes)


def load_catalog(path: Optional[Path] = None) -> GameCatalog:
    """
    Load the game catalog from a YAML file, or the built-in data.

    Args:
        path: YAML file with ``sexes``, ``races`` and ``classes`` lists

    Returns:
        Loaded catalog
    """
    if path is None:
        return GameCatalog.from_dict(DEFAULT_CATALOG_DATA)

    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to read catalog {path}: {e}")
        raise ConfigurationError(f"Cannot read catalog {path}: {e}", config_key="catalog_path") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Catalog {path} must be a mapping", config_key="catalog_path")

    catalog = GameCatalog.from_dict(data)
    logger.info(
        f"Loaded catalog from {path}: {len(catalog.races)} races, {len(catalog.classes)} classes"
    )
    return catalog


# Skill lists are in SkillSet field order:
# disarm, device, save, stealth, search, search_frequency,
# to_hit_melee, to_hit_bow, to_hit_throw, digging
DEFAULT_CATALOG_DATA: Dict[str, Any] = {
    "sexes": ["Female", "Male", "Neuter"],
    "races": [
        {"name": "Human", "stat_adj": [0, 0, 0, 0, 0, 0],
         "skills": [0, 0, 0, 0, 0, 10, 0, 0, 0, 0],
         "hit_die": 10, "exp": 100, "infravision": 0},
        {"name": "Half-Elf", "stat_adj": [0, 1, -1, 1, -1, 1],
         "skills": [2, 3, 3, 1, 6, 11, -1, 5, 5, 0],
         "hit_die": 10, "exp": 110, "infravision": 2},
        {"name": "Elf", "stat_adj": [-1, 2, -1, 1, -1, 2],
         "skills": [5, 6, 6, 2, 8, 12, -5, 15, 15, 0],
         "hit_die": 9, "exp": 120, "infravision": 3,
         "flags": ["SEE_INVIS"], "resists": ["LIGHT"]},
        {"name": "Hobbit", "stat_adj": [-2, 2, 1, 3, 2, 1],
         "skills": [15, 18, 18, 4, 6, 15, -10, 20, 20, 0],
         "hit_die": 7, "exp": 110, "infravision": 4,
         "flags": ["HOLD_LIFE"], "pflags": ["KNOW_MUSHROOM"]},
        {"name": "Gnome", "stat_adj": [-1, 2, 0, 2, 1, -2],
         "skills": [10, 22, 12, 3, 4, 12, -8, 12, 12, 0],
         "hit_die": 8, "exp": 125, "infravision": 4,
         "flags": ["FREE_ACT"], "pflags": ["KNOW_ZAPPER"]},
        {"name": "Dwarf", "stat_adj": [2, -3, 2, -2, 2, -3],
         "skills": [2, 9, 9, -1, 2, 7, 15, 0, 0, 40],
         "hit_die": 11, "exp": 120, "infravision": 5,
         "flags": ["PROT_BLIND"], "pflags": ["SEE_ORE"]},
        {"name": "Half-Orc", "stat_adj": [2, -1, 0, 0, 1, -4],
         "skills": [-3, -3, -3, -1, 0, 7, 12, -5, -5, 0],
         "hit_die": 10, "exp": 110, "infravision": 3,
         "resists": ["DARK"], "pflags": ["ORC"]},
        {"name": "Half-Troll", "stat_adj": [4, -4, -2, -4, 3, -6],
         "skills": [-5, -8, -8, -2, -1, 5, 20, -10, -10, 0],
         "hit_die": 12, "exp": 120, "infravision": 3,
         "flags": ["SUST_STR", "REGEN"], "pflags": ["TROLL"]},
        {"name": "Dunadan", "stat_adj": [1, 2, 2, 2, 3, 2],
         "skills": [4, 5, 5, 1, 3, 13, 15, 10, 10, 0],
         "hit_die": 10, "exp": 180, "infravision": 0,
         "flags": ["SUST_CON"]},
        {"name": "High-Elf", "stat_adj": [1, 3, -1, 3, 1, 5],
         "skills": [4, 20, 20, 3, 10, 25, 10, 25, 25, 0],
         "hit_die": 10, "exp": 145, "infravision": 4,
         "flags": ["SEE_INVIS"], "resists": ["LIGHT"]},
        {"name": "Kobold", "stat_adj": [-1, -1, 0, 2, 2, -2],
         "skills": [10, 5, 0, 3, 6, 15, -5, 10, 10, 0],
         "hit_die": 8, "exp": 115, "infravision": 5,
         "resists": ["POIS"]},
        {"name": "Dragon", "stat_adj": [2, 0, 0, -2, 2, -1],
         "skills": [-10, 0, 5, -2, 5, 10, 10, -10, -5, 10],
         "hit_die": 12, "exp": 250, "infravision": 5,
         "flags": ["FEATHER"], "resists": ["NEXUS"], "pflags": ["DRAGON"]},
    ],
    "classes": [
        {"name": "Warrior", "stat_adj": [3, -2, -2, 2, 2, -1],
         "skills": [25, 18, 18, 1, 14, 2, 70, 55, 55, 0],
         "hit_die": 9, "exp": 0, "pflags": ["BRAVERY_30", "SHIELD_BASH"]},
        {"name": "Mage", "stat_adj": [-3, 3, 0, 1, -2, 1],
         "skills": [30, 36, 30, 2, 16, 20, 34, 20, 20, 0],
         "hit_die": 0, "exp": 30, "spell_realm": "arcane",
         "pflags": ["CHOOSE_SPELLS", "ZERO_FAIL", "BEAM"]},
        {"name": "Druid", "stat_adj": [-2, 0, 3, -2, 0, 1],
         "skills": [30, 30, 30, 3, 20, 20, 20, 20, 20, 0],
         "hit_die": 2, "exp": 30, "spell_realm": "nature",
         "pflags": ["ZERO_FAIL"]},
        {"name": "Priest", "stat_adj": [-1, -3, 3, -1, 0, 2],
         "skills": [25, 30, 32, 2, 16, 8, 35, 20, 20, 0],
         "hit_die": 2, "exp": 20, "spell_realm": "divine",
         "pflags": ["ZERO_FAIL", "BLESS_WEAPON"]},
        {"name": "Necromancer", "stat_adj": [-3, 3, 0, 1, -2, -2],
         "skills": [30, 36, 30, 2, 16, 20, 34, 20, 20, 0],
         "hit_die": 2, "exp": 30, "spell_realm": "necromantic",
         "pflags": ["CHOOSE_SPELLS", "ZERO_FAIL", "UNLIGHT"]},
        {"name": "Paladin", "stat_adj": [1, -3, 1, 0, 2, 2],
         "skills": [20, 24, 25, 1, 12, 2, 68, 40, 40, 0],
         "hit_die": 6, "exp": 35, "spell_realm": "divine",
         "pflags": ["BLESS_WEAPON", "BRAVERY_30"]},
        {"name": "Rogue", "stat_adj": [0, 1, -3, 3, -1, -1],
         "skills": [45, 32, 28, 5, 32, 24, 60, 66, 66, 0],
         "hit_die": 6, "exp": 25, "spell_realm": "arcane",
         "pflags": ["STEAL", "CHOOSE_SPELLS"]},
        {"name": "Ranger", "stat_adj": [0, 2, -2, 1, -1, 1],
         "skills": [30, 32, 28, 3, 24, 16, 56, 72, 72, 0],
         "hit_die": 4, "exp": 30, "spell_realm": "nature",
         "pflags": ["FAST_SHOT"]},
        {"name": "Blackguard", "stat_adj": [2, 0, -2, 0, 2, -2],
         "skills": [20, 24, 20, 0, 8, 5, 65, 25, 25, 0],
         "hit_die": 8, "exp": 20, "spell_realm": "necromantic",
         "pflags": ["COMBAT_REGEN", "BRAVERY_30"]},
        {"name": "Sorceror", "stat_adj": [-3, 4, -1, 1, -3, 0],
         "skills": [30, 40, 32, 2, 16, 20, 20, 15, 15, 0],
         "hit_die": 0, "exp": 40, "spell_realm": "arcane",
         "pflags": ["CHOOSE_SPELLS", "ZERO_FAIL", "BEAM"]},
        {"name": "Archer", "stat_adj": [0, 0, 0, 2, 0, 0],
         "skills": [30, 24, 25, 3, 20, 20, 30, 80, 40, 0],
         "hit_die": 5, "exp": 30, "pflags": ["FAST_SHOT"],
         "unavailable_to_restricted": True},
        {"name": "Monk", "stat_adj": [0, -1, 2, 3, 0, 0],
         "skills": [40, 30, 35, 4, 20, 20, 70, 20, 20, 0],
         "hit_die": 5, "exp": 30, "spell_realm": "divine",
         "pflags": ["UNARMED_COMBAT", "MARTIAL_ARTS"],
         "unavailable_to_restricted": True},
        {"name": "Ghost", "placeholder": True},
    ],
}
