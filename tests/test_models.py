"""Tests for birth data models."""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.birth.catalog import load_catalog
from src.birth.models import (
    BirthOutcome,
    BirthResult,
    CharacterDraft,
    PriorCharacter,
    RollerMethod,
    RollerResult,
    Stage,
    Stat,
)
from src.core.error_handling import ValidationError


class TestStage:
    """Test stage ordering and stepping."""

    def test_previous(self):
        """Test stepping back one stage, and out of birth from the first menu."""
        assert Stage.SEX_CHOICE.previous() is Stage.BACK
        assert Stage.RACE_CHOICE.previous() is Stage.SEX_CHOICE
        assert Stage.FINAL_CONFIRM.previous() is Stage.ROLLER

    def test_next(self):
        """Test stepping forward."""
        assert Stage.RESET.next() is Stage.SEX_CHOICE
        assert Stage.FINAL_CONFIRM.next() is Stage.COMPLETE

    def test_control_stages(self):
        """Test the pseudo-stages are flagged."""
        assert {s for s in Stage if s.is_control} == {Stage.BACK, Stage.RESET, Stage.COMPLETE, Stage.QUIT}

    def test_stat_keys(self):
        """Test stat titles and selection letters."""
        assert Stat.STR.title == "Str"
        assert Stat.CHR.key == "f"


class TestRollerResult:
    """Test roller results."""

    def test_stat_order(self):
        """Test standard results expose the stat order."""
        result = RollerResult((5, 4, 3, 2, 1, 0), RollerMethod.STANDARD)
        assert result.stat_order[0] is Stat.CHR

    def test_point_based_has_no_order(self):
        """Test point-based results carry values, not an order."""
        with pytest.raises(ValueError):
            RollerResult((10,) * 6, RollerMethod.POINT_BASED).stat_order


class TestCharacterDraft:
    """Test the character draft."""

    @pytest.fixture
    def catalog(self):
        """Built-in game catalog."""
        return load_catalog()

    def test_reset_keeps_name_and_quick_start(self, catalog):
        """Test reset clears choices but keeps the name and quick-start tag."""
        draft = CharacterDraft(
            name="Merry",
            sex=1,
            race=catalog.race(3),
            player_class=catalog.player_class(6),
            roller_method=RollerMethod.POINT_BASED,
            stats=[12] * 6,
            method_tag=RollerMethod.POINT_BASED,
            birth_options={"birth_feelings": False},
            quick_start=RollerMethod.QUICK,
        )
        draft.reset()
        assert draft.name == "Merry"
        assert draft.quick_start is RollerMethod.QUICK
        assert draft.sex is None and draft.race is None and draft.player_class is None
        assert draft.stats == [10] * 6
        assert draft.method_tag is None
        assert draft.birth_options == {}
        assert not draft.is_complete

    def test_to_dict(self, catalog):
        """Test the draft serializes ids and names."""
        draft = CharacterDraft(name="Pippin", sex=1, race=catalog.race(3), player_class=catalog.player_class(6))
        draft.apply_roll(RollerResult((14, 12, 10, 16, 13, 10), RollerMethod.POINT_BASED))
        data = draft.to_dict()
        assert data["race_id"] == 3
        assert data["race"] == "Hobbit"
        assert data["class"] == "Rogue"
        assert data["stats"] == [14, 12, 10, 16, 13, 10]
        assert data["method"] == "POINT_BASED"
        assert draft.is_complete

    def test_result_completed(self):
        """Test only completed results report completion."""
        assert BirthResult(BirthOutcome.COMPLETED, CharacterDraft()).completed
        assert not BirthResult(BirthOutcome.QUIT, CharacterDraft()).completed


class TestPriorCharacter:
    """Test previous character records."""

    def test_from_dict(self):
        """Test parsing a record with a method name."""
        prior = PriorCharacter.from_dict({
            "name": "Sam", "sex": 1, "race_id": 3, "class_id": 0,
            "stats": [15, 10, 12, 14, 17, 11], "method": "quick_dynamic",
        })
        assert prior.method is RollerMethod.QUICK_DYNAMIC
        assert prior.stats[4] == 17

    def test_default_method(self):
        """Test the quick-start tag defaults to QUICK."""
        prior = PriorCharacter.from_dict({"name": "Sam", "sex": 1, "race_id": 3, "class_id": 0, "stats": [10] * 6})
        assert prior.method is RollerMethod.QUICK

    @pytest.mark.parametrize("data", [
        {"name": "Sam", "sex": 1, "race_id": 3, "class_id": 0},
        {"name": "Sam", "sex": 1, "race_id": 3, "class_id": 0, "stats": [10] * 5},
        {"name": "Sam", "sex": "x", "race_id": 3, "class_id": 0, "stats": [10] * 6},
        {"name": "Sam", "sex": 1, "race_id": 3, "class_id": 0, "stats": [10] * 6, "method": "standard"},
        {"name": "Sam", "sex": 1, "race_id": 3, "class_id": 0, "stats": [10] * 6, "method": "bogus"},
    ])
    def test_malformed(self, data):
        """Test malformed records are rejected."""
        with pytest.raises(ValidationError):
            PriorCharacter.from_dict(data)
