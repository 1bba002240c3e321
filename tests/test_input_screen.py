"""Tests for key events, key sources and the text screen."""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from rich.console import Console

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.birth.keys import (
    ConsoleKeySource,
    InputExhaustedError,
    KeyEvent,
    KeyKind,
    ScriptedKeySource,
    direction_of,
    parse_key,
)
from src.birth.screen import RichScreen, Screen
from src.core.error_handling import ErrorCategory


class TestParseKey:
    """Test key token parsing."""

    @pytest.mark.parametrize("token,kind", [
        ("up", KeyKind.UP),
        ("DOWN", KeyKind.DOWN),
        ("left", KeyKind.LEFT),
        ("right", KeyKind.RIGHT),
        ("enter", KeyKind.ENTER),
        ("\r", KeyKind.ENTER),
        ("esc", KeyKind.ESCAPE),
        ("\x1b", KeyKind.ESCAPE),
        ("^x", KeyKind.QUIT),
        ("Ctrl-X", KeyKind.QUIT),
        ("\x18", KeyKind.QUIT),
        ("^m", KeyKind.OVERRIDE),
    ])
    def test_named_keys(self, token, kind):
        """Test named key spellings."""
        assert parse_key(token).kind is kind

    def test_character(self):
        """Test single characters are character keys."""
        event = parse_key("x")
        assert event == KeyEvent(KeyKind.CHAR, "x")
        assert event.is_char("xyz")
        assert not event.is_char("abc")

    def test_unknown_token(self):
        """Test unknown multi-character tokens are rejected."""
        with pytest.raises(ValueError):
            parse_key("shift")

    def test_directions(self):
        """Test arrows and keypad digits map to directions."""
        assert direction_of(parse_key("up")) == 8
        assert direction_of(parse_key("2")) == 2
        assert direction_of(parse_key("left")) == 4
        assert direction_of(parse_key("6")) == 6
        assert direction_of(parse_key("5")) is None
        assert direction_of(parse_key("enter")) is None


class TestScriptedKeySource:
    """Test the scripted key source."""

    def test_replay_and_exhaustion(self):
        """Test events are replayed in order, then the source runs dry."""
        keys = ScriptedKeySource.from_tokens("a", "enter")
        assert keys.next_event().char == "a"
        keys.push("esc")
        assert keys.remaining == 2
        assert keys.next_event().kind is KeyKind.ENTER
        assert keys.next_event().kind is KeyKind.ESCAPE
        with pytest.raises(InputExhaustedError) as exc_info:
            keys.next_event()
        assert exc_info.value.category is ErrorCategory.RESOURCE
        assert len(keys.consumed) == 3

    def test_read_text(self):
        """Test text lines, defaults and escape."""
        keys = ScriptedKeySource(lines=["Frodo", "", None])
        assert keys.read_text("Name: ") == "Frodo"
        assert keys.read_text("Name: ", default="Sam") == "Sam"
        assert keys.read_text("Name: ") is None
        with pytest.raises(InputExhaustedError):
            keys.read_text("Name: ")


class TestConsoleKeySource:
    """Test the line-buffered console key source."""

    @pytest.fixture
    def console(self):
        """Console whose input is mocked."""
        return MagicMock(spec=Console)

    def test_tokens_from_line(self, console):
        """Test a line is split into key events."""
        console.input.side_effect = ["down down enter"]
        keys = ConsoleKeySource(console)
        assert [keys.next_event().kind for _ in range(3)] == [KeyKind.DOWN, KeyKind.DOWN, KeyKind.ENTER]

    def test_words_typed_by_character(self, console):
        """Test an unknown word is typed one character at a time."""
        console.input.side_effect = ["cab"]
        keys = ConsoleKeySource(console)
        assert [keys.next_event().char for _ in range(3)] == ["c", "a", "b"]

    def test_empty_line_is_enter(self, console):
        """Test an empty line is Enter."""
        console.input.side_effect = [""]
        assert ConsoleKeySource(console).next_event().kind is KeyKind.ENTER

    def test_eof_is_quit(self, console):
        """Test end of input quits."""
        console.input.side_effect = EOFError()
        assert ConsoleKeySource(console).next_event().kind is KeyKind.QUIT

    def test_read_text(self, console):
        """Test text entry with default and escape."""
        console.input.side_effect = ["  Bilbo ", "", "esc", EOFError()]
        keys = ConsoleKeySource(console)
        assert keys.read_text("Name: ") == "Bilbo"
        assert keys.read_text("Name: ", default="Frodo") == "Frodo"
        assert keys.read_text("Name: ") is None
        assert keys.read_text("Name: ") is None


class TestScreen:
    """Test the in-memory screen."""

    @pytest.fixture
    def screen(self):
        """Empty screen."""
        return Screen()

    def test_put_str_and_colour(self, screen):
        """Test text placement with colour."""
        screen.put_str(2, 5, "Hello", "yellow")
        assert screen.line(2) == "     Hello"
        assert screen.colour_at(2, 5) == "yellow"
        assert screen.find("Hello") == (2, 5)

    def test_clipping(self, screen):
        """Test text is clipped at the edges."""
        screen.put_str(0, 78, "abcd")
        screen.put_str(30, 0, "off screen")
        assert screen.line(0).endswith("ab")
        assert not screen.contains("off screen")

    def test_prt_erases_rest_of_line(self, screen):
        """Test prt replaces the remainder of the row."""
        screen.put_str(1, 0, "a long line of text")
        screen.prt(1, 2, "xy")
        assert screen.line(1) == "a xy"

    def test_markup(self, screen):
        """Test colour markup spans."""
        screen.put_markup(0, 0, "Press {light green}Enter{/} now")
        assert screen.line(0) == "Press Enter now"
        assert screen.colour_at(0, 6) == "light green"
        assert screen.colour_at(0, 12) == "white"

    def test_clear_from(self, screen):
        """Test clearing the bottom of the screen."""
        screen.put_str(3, 0, "keep")
        screen.put_str(20, 0, "drop")
        screen.clear_from(10)
        assert screen.contains("keep")
        assert not screen.contains("drop")

    def test_cursor(self, screen):
        """Test cursor visibility and position."""
        screen.set_cursor(True, 4, 7)
        assert screen.cursor_visible
        assert screen.cursor_pos == (4, 7)
        screen.set_cursor(False)
        assert not screen.cursor_visible
        assert screen.cursor_pos == (4, 7)

    def test_rich_screen_refresh(self):
        """Test the rich screen prints its rows."""
        console = Console(record=True, width=80, force_terminal=False)
        screen = RichScreen(console=console)
        screen.put_str(0, 0, "Birth", "light blue")
        screen.refresh()
        assert "Birth" in console.export_text()
