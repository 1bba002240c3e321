"""End-to-end tests for the birth stage machine."""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.birth.catalog import load_catalog
from src.birth.keys import InputExhaustedError, ScriptedKeySource
from src.birth.machine import BirthStageMachine
from src.birth.models import (
    BirthOutcome,
    CharacterDraft,
    PriorCharacter,
    RollerMethod,
    Stage,
)
from src.birth.screen import Screen
from src.core.error_handling import BirthStateError, ValidationError

# Enter on each of the four menus, accepting the first item
ALL_DEFAULTS = ("enter", "enter", "enter", "enter")


class FixedRandom:
    """Random source whose index picks are fixed."""

    def __init__(self, index):
        self.index = index

    def randrange(self, *args, **kwargs):
        return self.index


@pytest.fixture
def catalog():
    """Built-in game catalog."""
    return load_catalog()


@pytest.fixture
def prior():
    """A previous Dunadan Ranger."""
    return PriorCharacter(
        name="Aragorn",
        sex=1,
        race_id=8,
        class_id=7,
        stats=[17, 15, 14, 16, 16, 12],
    )


def run_birth(catalog, *tokens, draft=None, prior=None, **kwargs):
    keys = ScriptedKeySource.from_tokens(*tokens)
    screen = Screen()
    machine = BirthStageMachine(catalog, keys, screen, **kwargs)
    result = machine.run(draft or CharacterDraft(name="Tester"), prior)
    return result, keys, machine


class TestBirthFlows:
    """Test complete passes through the birth process."""

    def test_point_based_defaults(self, catalog):
        """Test accepting every default produces a complete character."""
        result, keys, machine = run_birth(catalog, *ALL_DEFAULTS, "enter", "y")

        assert result.outcome is BirthOutcome.COMPLETED
        assert result.completed
        draft = result.draft
        assert draft.sex == 0
        assert draft.race.name == "Human"
        assert draft.player_class.name == "Warrior"
        assert draft.roller_method is RollerMethod.POINT_BASED
        assert draft.method_tag is RollerMethod.POINT_BASED
        assert draft.stats == [10] * 6
        assert draft.is_complete
        assert keys.remaining == 0
        assert machine.stage is Stage.COMPLETE

    def test_point_based_purchase(self, catalog):
        """Test bought stats reach the draft."""
        result, _, _ = run_birth(
            catalog, *ALL_DEFAULTS, "right", "right", "down", "right", "enter", "y"
        )
        assert result.draft.stats == [12, 11, 10, 10, 10, 10]

    def test_standard_roller(self, catalog):
        """Test the standard roller records the stat order."""
        result, _, _ = run_birth(
            catalog, "enter", "enter", "enter", "down", "enter",
            "e", "a", "d", "b", "c", "f", "y",
        )
        assert result.outcome is BirthOutcome.COMPLETED
        assert result.draft.method_tag is RollerMethod.STANDARD
        assert result.draft.stats == [4, 0, 3, 1, 2, 5]

    def test_menu_choices(self, catalog):
        """Test letter and arrow choices land in the draft."""
        result, _, _ = run_birth(
            catalog, "b", "b", "up", "enter", "h", "enter", "enter", "enter", "y"
        )
        draft = result.draft
        assert draft.sex == 1
        assert draft.race.name == "Dragon"
        assert draft.player_class.name == "Ranger"

    def test_random_choices(self, catalog):
        """Test '*' picks through the random source."""
        result, _, _ = run_birth(
            catalog, "*", "*", "*", "enter", "enter", "y", rng=FixedRandom(2)
        )
        draft = result.draft
        assert draft.sex == 2
        assert draft.race.name == "Elf"
        assert draft.player_class.name == "Druid"


class TestBackAndReset:
    """Test stepping back, restarting and leaving."""

    def test_escape_from_sex_menu_abandons(self, catalog):
        """Test escape on the first menu abandons birth."""
        result, _, machine = run_birth(catalog, "esc")
        assert result.outcome is BirthOutcome.ABANDONED
        assert not result.completed
        assert machine.stage is Stage.BACK

    def test_escape_walks_back_to_start(self, catalog):
        """Test escape retraces the cascade one menu at a time."""
        result, keys, _ = run_birth(
            catalog, "enter", "enter", "enter", "esc", "esc", "esc", "esc"
        )
        assert result.outcome is BirthOutcome.ABANDONED
        assert keys.remaining == 0

    def test_back_keeps_previous_answer(self, catalog):
        """Test a menu revisited after escape starts on the earlier answer."""
        result, _, _ = run_birth(
            catalog, "c", "enter", "esc", "enter", *ALL_DEFAULTS[1:], "enter", "y"
        )
        assert result.draft.sex == 2

    def test_roller_escape_returns_to_roller_menu(self, catalog):
        """Test escape as first roller key goes back to the roller menu."""
        result, _, _ = run_birth(
            catalog, *ALL_DEFAULTS, "esc", "down", "enter", "a", "b", "c", "d", "e", "f", "y"
        )
        assert result.draft.method_tag is RollerMethod.STANDARD

    def test_roller_restart(self, catalog):
        """Test escape after an interaction restarts the roller from scratch."""
        result, _, _ = run_birth(
            catalog, *ALL_DEFAULTS, "right", "right", "esc", "right", "enter", "y"
        )
        assert result.draft.stats == [11, 10, 10, 10, 10, 10]

    def test_confirm_escape_reruns_roller(self, catalog):
        """Test escape on the summary goes back to the roller."""
        result, _, _ = run_birth(
            catalog, *ALL_DEFAULTS, "enter", "esc", "right", "enter", "y"
        )
        assert result.draft.stats == [11, 10, 10, 10, 10, 10]

    def test_start_over(self, catalog):
        """Test 'S' on the summary clears the draft and restarts the menus."""
        result, keys, _ = run_birth(
            catalog, "c", "c", *ALL_DEFAULTS[1:], "right", "enter", "S",
            *ALL_DEFAULTS, "enter", "y",
        )
        assert result.outcome is BirthOutcome.COMPLETED
        assert result.draft.sex == 0
        assert result.draft.stats == [10] * 6
        assert result.draft.name == "Tester"
        assert keys.remaining == 0

    def test_start_over_clears_options(self, catalog):
        """Test starting over also forgets birth option changes."""
        result, _, _ = run_birth(
            catalog, "=", "a", "esc", *ALL_DEFAULTS, "enter", "s", *ALL_DEFAULTS, "enter", "y"
        )
        assert result.draft.birth_options == {}


class TestQuit:
    """Test Ctrl-X from every stage."""

    @pytest.mark.parametrize("tokens", [
        ("^x",),
        ("enter", "^x"),
        ("enter", "enter", "^x"),
        ("enter", "enter", "enter", "^x"),
        ("enter", "enter", "enter", "enter", "^x"),
        ("enter", "enter", "enter", "enter", "enter", "^x"),
    ])
    def test_quit_everywhere(self, catalog, tokens):
        """Test Ctrl-X ends birth with the quit outcome."""
        result, keys, machine = run_birth(catalog, *tokens)
        assert result.outcome is BirthOutcome.QUIT
        assert machine.stage is Stage.QUIT
        assert keys.remaining == 0


class TestBirthOptions:
    """Test the birth options detour from the menus."""

    def test_options_toggle(self, catalog):
        """Test '=' toggles options and returns to the same menu."""
        result, _, _ = run_birth(
            catalog, "enter", "=", "a", "f", "esc", "enter", "enter", "enter", "enter", "y"
        )
        options = result.draft.birth_options
        assert options["birth_force_descend"] is True
        assert options["birth_start_kit"] is False
        assert result.draft.race.name == "Human"


class TestQuickStart:
    """Test the quick-start offer."""

    def test_accept(self, catalog, prior):
        """Test accepting recreates the previous character."""
        result, keys, _ = run_birth(catalog, "y", "enter", draft=CharacterDraft(), prior=prior)
        assert result.outcome is BirthOutcome.COMPLETED
        draft = result.draft
        assert draft.name == "Aragorn"
        assert draft.sex == 1
        assert draft.race.name == "Dunadan"
        assert draft.player_class.name == "Ranger"
        assert draft.stats == [17, 15, 14, 16, 16, 12]
        assert draft.method_tag is RollerMethod.QUICK
        assert draft.quick_start is RollerMethod.QUICK
        assert keys.remaining == 0

    def test_accept_keeps_entered_name(self, catalog, prior):
        """Test a name typed before the offer is kept."""
        result, _, _ = run_birth(catalog, "Y", "x", prior=prior)
        assert result.draft.name == "Tester"

    def test_accept_new_incarnation(self, catalog, prior):
        """Test the dynamic quick-start tag is carried through."""
        prior.method = RollerMethod.QUICK_DYNAMIC
        result, _, _ = run_birth(catalog, "y", "y", prior=prior)
        assert result.draft.method_tag is RollerMethod.QUICK_DYNAMIC

    @pytest.mark.parametrize("answer", ["n", "N", "esc", "enter"])
    def test_decline(self, catalog, prior, answer):
        """Test declining runs the normal menus."""
        result, _, _ = run_birth(catalog, answer, *ALL_DEFAULTS, "enter", "y", prior=prior)
        assert result.outcome is BirthOutcome.COMPLETED
        assert result.draft.race.name == "Human"
        assert result.draft.method_tag is RollerMethod.POINT_BASED
        assert result.draft.quick_start is None

    def test_unrelated_keys_ignored(self, catalog, prior):
        """Test the offer waits for a recognised answer."""
        result, _, _ = run_birth(catalog, "q", "7", "y", "enter", prior=prior)
        assert result.draft.method_tag is RollerMethod.QUICK

    def test_escape_on_second_prompt_declines(self, catalog, prior):
        """Test escape after 'y' goes to the menus instead."""
        result, _, _ = run_birth(catalog, "y", "esc", *ALL_DEFAULTS, "enter", "y", prior=prior)
        assert result.draft.method_tag is RollerMethod.POINT_BASED

    @pytest.mark.parametrize("tokens", [("^x",), ("y", "^x")])
    def test_quit(self, catalog, prior, tokens):
        """Test Ctrl-X during the offer quits."""
        result, _, _ = run_birth(catalog, *tokens, prior=prior)
        assert result.outcome is BirthOutcome.QUIT

    def test_disabled(self, catalog, prior):
        """Test no offer is made when quick-start is turned off."""
        result, _, _ = run_birth(
            catalog, *ALL_DEFAULTS, "enter", "y", prior=prior, allow_quick_start=False
        )
        assert result.draft.method_tag is RollerMethod.POINT_BASED
        assert result.draft.quick_start is None

    def test_unknown_race_rejected(self, catalog):
        """Test a prior record with unknown ids fails before any prompt."""
        prior = PriorCharacter(name="Lost", sex=0, race_id=99, class_id=0, stats=[10] * 6)
        with pytest.raises(ValidationError):
            run_birth(catalog, prior=prior)

    def test_unavailable_class_rejected(self, catalog):
        """Test a prior record pairing a dragon with a reserved class fails."""
        prior = PriorCharacter(name="Smaug", sex=0, race_id=11, class_id=10, stats=[10] * 6)
        with pytest.raises(ValidationError):
            run_birth(catalog, prior=prior)


class TestMachineErrors:
    """Test state machine misuse."""

    def test_exhausted_input(self, catalog):
        """Test running out of scripted keys surfaces as an error."""
        with pytest.raises(InputExhaustedError):
            run_birth(catalog, "enter")

    def test_missing_prerequisite(self, catalog):
        """Test entering a stage without its prerequisites fails fast."""
        keys = ScriptedKeySource.from_tokens("enter")
        machine = BirthStageMachine(catalog, keys, Screen())
        machine._handlers[Stage.RESET] = lambda stage, draft: Stage.ROLLER
        with pytest.raises(BirthStateError) as exc_info:
            machine.run(CharacterDraft())
        assert exc_info.value.context["missing"] == "sex"
        assert keys.remaining == 1

    def test_invalid_draft(self, catalog):
        """Test a draft without six stats is rejected before any prompt."""
        keys = ScriptedKeySource.from_tokens("enter")
        machine = BirthStageMachine(catalog, keys, Screen())
        with pytest.raises(ValidationError):
            machine.run(CharacterDraft(stats=[10, 10]))
        assert keys.remaining == 1
