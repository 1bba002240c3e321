"""Character name entry with random fantasy names."""

import logging
import random
from typing import Dict, List, Optional

from .keys import KeySource
from .screen import Screen

logger = logging.getLogger(__name__)

MAX_NAME_LEN = 20


class NameGenerator:
    """Generate Tolkien-flavoured names from syllable pools."""

    SYLLABLES: Dict[str, List[str]] = {
        "start": ["Ar", "Bel", "Cel", "Dor", "El", "Fin", "Gal", "Hal", "Is", "Leg",
                  "Mor", "Nar", "Or", "Rad", "Tur", "Thr", "Ul", "Vor", "Gil", "Ear"],
        "middle": ["a", "e", "i", "o", "u", "an", "en", "or", "ar", "il", "ad", "ol"],
        "end": ["dil", "las", "ion", "wen", "dor", "mir", "gorn", "ril", "thas",
                "mac", "rin", "bor", "nor", "iel", "ur"],
    }

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def generate(self, min_len: int = 4, max_len: int = 8) -> str:
        """
        Generate a capitalized name whose length is within [min_len, max_len].

        Args:
            min_len: Shortest acceptable name
            max_len: Longest acceptable name

        Returns:
            Generated name
        """
        if min_len > max_len:
            raise ValueError(f"min_len {min_len} exceeds max_len {max_len}")

        while True:
            parts = [self.rng.choice(self.SYLLABLES["start"])]
            if self.rng.random() < 0.5:
                parts.append(self.rng.choice(self.SYLLABLES["middle"]))
            parts.append(self.rng.choice(self.SYLLABLES["end"]))
            name = "".join(parts).capitalize()
            if min_len <= len(name) <= max_len:
                return name


class NameEntry:
    """Asks for the character name; '*' proposes a random one."""

    PROMPT = "Enter your player's name above (* for a random name, or hit ESCAPE)."

    def __init__(self, keys: KeySource, screen: Screen, generator: Optional[NameGenerator] = None):
        self.keys = keys
        self.screen = screen
        self.generator = generator or NameGenerator()

    def ask(self, current: str = "") -> str:
        """Return the chosen name; escape keeps ``current``."""
        self.screen.put_str(2, 1, "Name        :")
        self.screen.prt(21, 2, self.PROMPT)
        name = current

        while True:
            self.screen.prt(2, 15, f"{name:<15.15}", "light blue")
            self.screen.refresh()
            answer = self.keys.read_text("Name: ", default=name)
            if answer is None:
                break
            if answer == "*":
                name = self.generator.generate(4, 8)
                logger.debug(f"Random name proposed: {name}")
                continue
            name = answer[:MAX_NAME_LEN]
            break

        name = name[:1].upper() + name[1:]
        self.screen.prt(2, 15, f"{name:<15.15}", "light blue")
        self.screen.clear_from(20)
        return name
