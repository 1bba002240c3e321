"""Character birth process: menus, stat rollers and final confirmation."""

from .catalog import GameCatalog, PlayerClass, PlayerRace, SexInfo, SkillSet, load_catalog
from .keys import ConsoleKeySource, InputExhaustedError, KeyEvent, KeyKind, KeySource, ScriptedKeySource
from .machine import BirthStageMachine
from .models import (
    BirthOutcome,
    BirthResult,
    CharacterDraft,
    PriorCharacter,
    RollerMethod,
    RollerResult,
    Stage,
    Stat,
)
from .names import NameEntry, NameGenerator
from .screen import RichScreen, Screen

__all__ = [
    "BirthStageMachine",
    "BirthOutcome",
    "BirthResult",
    "CharacterDraft",
    "PriorCharacter",
    "RollerMethod",
    "RollerResult",
    "Stage",
    "Stat",
    "GameCatalog",
    "PlayerRace",
    "PlayerClass",
    "SexInfo",
    "SkillSet",
    "load_catalog",
    "KeyEvent",
    "KeyKind",
    "KeySource",
    "ScriptedKeySource",
    "ConsoleKeySource",
    "InputExhaustedError",
    "NameEntry",
    "NameGenerator",
    "Screen",
    "RichScreen",
]
