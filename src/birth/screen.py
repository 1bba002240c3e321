"""Text screen used by the birth process."""

import re
from typing import Dict, List, Optional, Tuple

from rich.console import Console
from rich.text import Text

SCREEN_WIDTH = 80
SCREEN_HEIGHT = 24

# Colour names used by the birth screens, mapped to rich styles
COLOURS = {
    "white": "white",
    "yellow": "yellow",
    "red": "red",
    "light blue": "bright_blue",
    "light green": "bright_green",
    "light dark": "grey50",
    "cursor": "bold reverse",
}

_MARKUP = re.compile(r"\{([a-z ]+)\}(.*?)\{/\}")


class Screen:
    """
    In-memory character grid with per-cell colours.

    Rows and columns are zero-based; text running past the right edge is
    clipped. Subclasses decide how (and whether) the grid reaches a real
    terminal in ``refresh``.
    """

    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT):
        self.width = width
        self.height = height
        self.cursor_visible = False
        self.cursor_pos: Tuple[int, int] = (0, 0)
        self._cells: List[List[str]] = []
        self._colours: Dict[Tuple[int, int], str] = {}
        self.clear()

    def clear(self) -> None:
        self._cells = [[" "] * self.width for _ in range(self.height)]
        self._colours = {}

    def put_str(self, row: int, col: int, text: str, colour: str = "white") -> None:
        if not 0 <= row < self.height:
            return
        for offset, ch in enumerate(text):
            x = col + offset
            if x >= self.width:
                break
            if x < 0:
                continue
            self._cells[row][x] = ch
            self._colours[(row, x)] = colour

    def prt(self, row: int, col: int, text: str, colour: str = "white") -> None:
        """Erase the rest of the line, then print."""
        self.erase(row, col, self.width)
        self.put_str(row, col, text, colour)

    def put_markup(self, row: int, col: int, text: str) -> None:
        """Print text containing ``{colour}...{/}`` spans."""
        x = col
        pos = 0
        for match in _MARKUP.finditer(text):
            plain = text[pos:match.start()]
            self.put_str(row, x, plain)
            x += len(plain)
            self.put_str(row, x, match.group(2), match.group(1))
            x += len(match.group(2))
            pos = match.end()
        self.put_str(row, x, text[pos:])

    def erase(self, row: int, col: int, width: int) -> None:
        if not 0 <= row < self.height:
            return
        for x in range(max(col, 0), min(col + width, self.width)):
            self._cells[row][x] = " "
            self._colours.pop((row, x), None)

    def clear_from(self, row: int) -> None:
        for y in range(row, self.height):
            self.erase(y, 0, self.width)

    def set_cursor(self, visible: bool, row: Optional[int] = None, col: Optional[int] = None) -> None:
        self.cursor_visible = visible
        if row is not None and col is not None:
            self.cursor_pos = (row, col)

    def line(self, row: int) -> str:
        """Text of a row with trailing blanks removed."""
        return "".join(self._cells[row]).rstrip()

    def colour_at(self, row: int, col: int) -> Optional[str]:
        return self._colours.get((row, col))

    def dump(self) -> str:
        return "\n".join(self.line(y) for y in range(self.height)).rstrip("\n")

    def contains(self, text: str) -> bool:
        return any(text in self.line(y) for y in range(self.height))

    def find(self, text: str) -> Optional[Tuple[int, int]]:
        for y in range(self.height):
            x = self.line(y).find(text)
            if x >= 0:
                return y, x
        return None

    def refresh(self) -> None:
        """Push the grid to the display; the base screen has none."""


class RichScreen(Screen):
    """Screen that redraws itself on a rich console at every refresh."""

    def __init__(self, console: Optional[Console] = None, **kwargs):
        super().__init__(**kwargs)
        self.console = console or Console()

    def _render_row(self, row: int) -> Text:
        text = Text()
        for x, ch in enumerate(self._cells[row]):
            style = COLOURS.get(self._colours.get((row, x), "white"), "white")
            if self.cursor_visible and (row, x) == self.cursor_pos:
                style = COLOURS["cursor"]
            text.append(ch, style=style)
        text.rstrip()
        return text

    def refresh(self) -> None:
        self.console.clear()
        for y in range(self.height):
            self.console.print(self._render_row(y), soft_wrap=True)
