"""Side panels describing the race or class under the menu cursor."""

from typing import List

from .catalog import PlayerClass, PlayerRace, SkillSet
from .menu import TABLE_ROW
from .models import Stat
from .screen import Screen

RACE_AUX_COL = 29
CLASS_AUX_COL = 45
PANEL_WIDTH = 30

FLAG_DESCRIPTIONS = {
    "SUST_STR": "Sustains strength",
    "SUST_DEX": "Sustains dexterity",
    "SUST_CON": "Sustains constitution",
    "PROT_BLIND": "Resists blindness",
    "HOLD_LIFE": "Sustains experience",
    "FREE_ACT": "Resists paralysis",
    "REGEN": "Regenerates quickly",
    "SEE_INVIS": "Sees invisible creatures",
    "FEATHER": "Falls like a feather",
    "SLOW_DIGEST": "Digests food slowly",
}

RESIST_DESCRIPTIONS = {
    "POIS": "Resists poison",
    "LIGHT": "Resists light damage",
    "DARK": "Resists darkness damage",
    "NEXUS": "Resists nexus",
}

PFLAG_DESCRIPTIONS = {
    "BRAVERY_30": "Gains immunity to fear",
    "BLESS_WEAPON": "Gets bonuses with blunt weapons",
    "ZERO_FAIL": "Advanced spellcasting",
    "BEAM": "Frequent spell beams",
    "CHOOSE_SPELLS": "Chooses which spells to learn",
    "KNOW_MUSHROOM": "Identifies mushrooms",
    "KNOW_ZAPPER": "Identifies magic devices",
    "SEE_ORE": "Senses ore and minerals",
    "SHIELD_BASH": "Bashes with shields",
    "FAST_SHOT": "Fires missiles rapidly",
    "STEAL": "Steals from monsters",
    "COMBAT_REGEN": "Draws strength from combat",
    "UNLIGHT": "Thrives in darkness",
    "UNARMED_COMBAT": "Fights well unarmed",
    "MARTIAL_ARTS": "Masters the martial arts",
    "DRAGON": "Grows with experience",
}

# Player flags that describe the race itself rather than an ability
_SILENT_PFLAGS = ("ORC", "TROLL")


def flag_description(flag: str) -> str:
    return FLAG_DESCRIPTIONS.get(flag, "Undocumented flag")


def resist_description(element: str) -> str:
    return RESIST_DESCRIPTIONS.get(element, "Undocumented element")


def pflag_description(flag: str) -> str:
    if flag in _SILENT_PFLAGS:
        return ""
    return PFLAG_DESCRIPTIONS.get(flag, "Undocumented pflag")


class _Panel:
    """Writes help lines in a fixed column starting at the menu table row."""

    column = 0

    def __init__(self):
        self.row = 0

    def line(self, screen: Screen, text: str) -> None:
        screen.erase(TABLE_ROW + self.row, self.column, PANEL_WIDTH + 2)
        screen.put_str(TABLE_ROW + self.row, self.column, text)
        self.row += 1

    def blank(self, screen: Screen) -> None:
        screen.erase(TABLE_ROW + self.row, self.column, PANEL_WIDTH + 2)
        self.row += 1

    def stat_lines(self, screen: Screen, adjustments: List[int]) -> None:
        """Stat adjustments in two columns: STR/DEX, INT/CON, WIS/CHR."""
        stats = list(Stat)
        half = (len(stats) + 1) // 2
        for j in range(half):
            text = f"{stats[j].title}{adjustments[j]:+3d}"
            if j + half < len(stats):
                text += f"  {stats[j + half].title}{adjustments[j + half]:+3d}"
            self.line(screen, text)

    def skill_lines(self, screen: Screen, skills: SkillSet, hit_die: int, exp: int, infra: int) -> None:
        self.line(screen, f"Hit/Shoot/Throw: {skills.to_hit_melee:+3d}/{skills.to_hit_bow:+4d}/{skills.to_hit_throw:+4d}")
        self.line(screen, f"Hit die: {hit_die:2d}       XP mod: {exp:3d}%")
        self.line(screen, f"Disarm: {skills.disarm:+3d}       Devices: {skills.device:+3d}")
        self.line(screen, f"Save:   {skills.save:+3d}       Stealth: {skills.stealth:+3d}")
        if infra >= 0:
            self.line(screen, f"Infravision:             {infra * 10:2d} ft")
        self.line(screen, f"Digging:                   {skills.digging:+3d}")
        self.line(screen, f"Search:                 {skills.search:+3d}/{skills.search_frequency:2d}")
        if infra < 0:
            self.blank(screen)

    def flag_lines(self, screen: Screen, descriptions: List[str], space: int) -> None:
        shown = [d for d in descriptions if d][:space]
        for text in shown:
            self.line(screen, f"{text:<{PANEL_WIDTH}}")
        for _ in range(space - len(shown)):
            self.blank(screen)


class RaceHelp(_Panel):
    """Race panel: adjustments, skills and up to three granted abilities."""

    column = RACE_AUX_COL
    flag_space = 3

    def render(self, screen: Screen, value: PlayerRace) -> None:
        self.row = 0
        self.stat_lines(screen, list(value.stat_adj))
        self.skill_lines(screen, value.skills, value.hit_die, value.exp, value.infravision)
        descriptions = (
            [flag_description(f) for f in value.flags]
            + [resist_description(e) for e in value.resists]
            + [pflag_description(p) for p in value.pflags]
        )
        self.flag_lines(screen, descriptions, self.flag_space)


class ClassHelp(_Panel):
    """Class panel: combined race and class figures for the chosen race."""

    column = CLASS_AUX_COL
    flag_space = 5

    def __init__(self, race: PlayerRace):
        super().__init__()
        self.race = race

    def render(self, screen: Screen, value: PlayerClass) -> None:
        race = self.race
        self.row = 0
        self.stat_lines(screen, [r + c for r, c in zip(race.stat_adj, value.stat_adj)])
        self.skill_lines(
            screen,
            race.skills + value.skills,
            race.hit_die + value.hit_die,
            race.exp + value.exp,
            -1,
        )
        if value.spell_realm:
            self.line(screen, f"Learns {value.spell_realm:<23}")
        self.flag_lines(screen, [pflag_description(p) for p in value.pflags], self.flag_space)
