"""Keyboard input events and the sources that produce them."""

import logging
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Iterable, List, Optional

from rich.console import Console

from ..core.error_handling import ResourceError

logger = logging.getLogger(__name__)


class KeyKind(Enum):
    """Classes of input event the birth screens distinguish."""

    CHAR = "char"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    ENTER = "enter"
    ESCAPE = "escape"
    QUIT = "quit"  # Ctrl-X, global abort
    OVERRIDE = "override"  # Ctrl-M, manual override


@dataclass(frozen=True)
class KeyEvent:
    """A single key press."""

    kind: KeyKind
    char: str = ""

    def is_char(self, chars: str) -> bool:
        """True for a character key that is one of ``chars``."""
        return self.kind is KeyKind.CHAR and self.char != "" and self.char in chars

    def __str__(self) -> str:
        return self.char if self.kind is KeyKind.CHAR else self.kind.value


ENTER = KeyEvent(KeyKind.ENTER)
ESCAPE = KeyEvent(KeyKind.ESCAPE)
QUIT = KeyEvent(KeyKind.QUIT)

# Token spellings accepted by parse_key
_NAMED_KEYS = {
    "up": KeyKind.UP,
    "down": KeyKind.DOWN,
    "left": KeyKind.LEFT,
    "right": KeyKind.RIGHT,
    "enter": KeyKind.ENTER,
    "return": KeyKind.ENTER,
    "\r": KeyKind.ENTER,
    "\n": KeyKind.ENTER,
    "esc": KeyKind.ESCAPE,
    "escape": KeyKind.ESCAPE,
    "\x1b": KeyKind.ESCAPE,
    "^x": KeyKind.QUIT,
    "ctrl-x": KeyKind.QUIT,
    "\x18": KeyKind.QUIT,
    "^m": KeyKind.OVERRIDE,
    "ctrl-m": KeyKind.OVERRIDE,
}

# Numeric keypad directions, as used by the point-based roller
_DIRECTIONS = {
    KeyKind.UP: 8,
    KeyKind.DOWN: 2,
    KeyKind.LEFT: 4,
    KeyKind.RIGHT: 6,
}


def parse_key(token: str) -> KeyEvent:
    """
    Turn a textual key token into an event.

    Named keys (``up``, ``esc``, ``^x``...) are case-insensitive; any other
    single character is a character key.

    Raises:
        ValueError: If the token is neither a named key nor one character
    """
    kind = _NAMED_KEYS.get(token.lower()) if len(token) > 1 else _NAMED_KEYS.get(token)
    if kind is not None:
        return KeyEvent(kind)
    if len(token) == 1:
        return KeyEvent(KeyKind.CHAR, token)
    raise ValueError(f"Unknown key token: {token!r}")


def direction_of(event: KeyEvent) -> Optional[int]:
    """Keypad direction (8 up, 2 down, 4 left, 6 right) of an event, if any."""
    if event.kind in _DIRECTIONS:
        return _DIRECTIONS[event.kind]
    if event.is_char("8246"):
        return int(event.char)
    return None


class InputExhaustedError(ResourceError):
    """A scripted key source has no more events."""

    def __init__(self, message: str = "No more scripted key events", **kwargs):
        super().__init__(message, resource_type="keyboard", recoverable=False, **kwargs)


class KeySource(ABC):
    """Blocking source of key events."""

    @abstractmethod
    def next_event(self) -> KeyEvent:
        """Block until the next key event and return it."""

    @abstractmethod
    def read_text(self, prompt: str, default: str = "") -> Optional[str]:
        """Read a line of text; None when the user escapes."""


class ScriptedKeySource(KeySource):
    """Key source replaying a fixed sequence of events and text lines."""

    def __init__(self, events: Iterable[KeyEvent] = (), lines: Iterable[Optional[str]] = ()):
        self._events: Deque[KeyEvent] = deque(events)
        self._lines: Deque[Optional[str]] = deque(lines)
        self.consumed: List[KeyEvent] = []

    @classmethod
    def from_tokens(cls, *tokens: str, lines: Iterable[Optional[str]] = ()) -> "ScriptedKeySource":
        return cls((parse_key(t) for t in tokens), lines)

    def push(self, *tokens: str) -> None:
        self._events.extend(parse_key(t) for t in tokens)

    @property
    def remaining(self) -> int:
        return len(self._events)

    def next_event(self) -> KeyEvent:
        if not self._events:
            raise InputExhaustedError()
        event = self._events.popleft()
        self.consumed.append(event)
        return event

    def read_text(self, prompt: str, default: str = "") -> Optional[str]:
        if not self._lines:
            raise InputExhaustedError("No more scripted text lines")
        line = self._lines.popleft()
        if line is None:
            return None
        return line or default


class ConsoleKeySource(KeySource):
    """
    Line-buffered key source on a rich console.

    Each input line is split on whitespace into key tokens (``up``,
    ``down``, ``esc``, ``^x``, single characters...). A word that is not a
    named key is typed one character at a time, and an empty line is Enter.
    """

    def __init__(self, console: Optional[Console] = None, prompt: str = "> "):
        self.console = console or Console()
        self.prompt = prompt
        self._pending: Deque[KeyEvent] = deque()

    def _tokenize(self, line: str) -> List[KeyEvent]:
        words = line.split()
        if not words:
            return [ENTER]
        events = []
        for word in words:
            try:
                events.append(parse_key(word))
            except ValueError:
                events.extend(KeyEvent(KeyKind.CHAR, ch) for ch in word)
        return events

    def next_event(self) -> KeyEvent:
        while not self._pending:
            try:
                line = self.console.input(self.prompt)
            except EOFError:
                logger.info("Input closed, treating as quit")
                return QUIT
            self._pending.extend(self._tokenize(line))
        return self._pending.popleft()

    def read_text(self, prompt: str, default: str = "") -> Optional[str]:
        try:
            line = self.console.input(prompt)
        except EOFError:
            return None
        if line.strip().lower() in ("esc", "escape", "\x1b"):
            return None
        return line.strip() or default
