"""Main entry point for the roguelike birth client."""

import argparse
import json
import random
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from config.logging_config import get_logger, setup_logging
from config.settings import settings
from src.birth import (
    BirthOutcome,
    BirthStageMachine,
    CharacterDraft,
    ConsoleKeySource,
    NameEntry,
    NameGenerator,
    PriorCharacter,
    RichScreen,
    load_catalog,
)
from src.core.error_handling import BaseError, ValidationError

logger = get_logger(__name__)

EXIT_CODES = {
    BirthOutcome.COMPLETED: 0,
    BirthOutcome.QUIT: 0,
    BirthOutcome.ABANDONED: 1,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roguelike-birth",
        description="Create a roguelike character through the birth menus.",
    )
    parser.add_argument("--name", default="", help="Character name; skips the name prompt")
    parser.add_argument(
        "--previous",
        type=Path,
        default=None,
        help="JSON file describing the previous character, enables quick-start",
    )
    parser.add_argument("--catalog", type=Path, default=None, help="YAML file with sexes, races and classes")
    parser.add_argument("--seed", type=int, default=None, help="Seed for random menu choices and names")
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    return parser


def load_prior(path: Path) -> PriorCharacter:
    """Read the previous character record from a JSON file."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ValidationError(f"Cannot read previous character {path}: {e}", field="previous") from e
    if not isinstance(data, dict):
        raise ValidationError(f"Previous character {path} must be a JSON object", field="previous")
    return PriorCharacter.from_dict(data)


def main(argv: Optional[List[str]] = None) -> int:
    """Run one birth and print the resulting character as JSON."""
    args = build_parser().parse_args(argv)

    setup_logging(level=(args.log_level or settings.log_level).upper(), log_file=settings.log_file)

    seed = args.seed if args.seed is not None else settings.random_seed
    rng = random.Random(seed)

    try:
        catalog = load_catalog(args.catalog or settings.catalog_path)
        prior = load_prior(args.previous) if args.previous else None
    except BaseError as e:
        logger.error("Startup failed", error=e.message, category=e.category.name, **e.context)
        return 2

    console = Console()
    screen = RichScreen(console=console)
    keys = ConsoleKeySource(console)

    draft = CharacterDraft(name=args.name)
    if not draft.name:
        draft.name = NameEntry(keys, screen, NameGenerator(rng)).ask()

    machine = BirthStageMachine(
        catalog,
        keys,
        screen,
        rng=rng,
        pool=settings.point_pool,
        allow_quick_start=settings.allow_quick_start,
    )

    try:
        result = machine.run(draft, prior)
    except BaseError as e:
        logger.error("Birth failed", error=e.message, error_code=e.error_code, **e.context)
        return 2

    payload = {"outcome": result.outcome.value, "character": result.draft.to_dict()}
    console.print_json(json.dumps(payload))
    return EXIT_CODES[result.outcome]


if __name__ == "__main__":
    sys.exit(main())
