"""
Set catalog.

Loads the list of lookup-able sets from sets.json:
    [{"code": "blb", "name": "Bloomburrow", "released": "2024-08-02"}, ...]
Newest first; the first set is the default selection.
"""

import json
import logging
from datetime import date
from functools import lru_cache
from pathlib import Path

from pullvalue.config import settings
from pullvalue.models.card_set import CardSet

logger = logging.getLogger(__name__)


def load_sets(path: Path | None = None) -> list[CardSet]:
    """
    Load the set list.

    Entries missing a code, name or valid release date are skipped.

    Raises:
        FileNotFoundError: If the set list doesn't exist
        ValueError: If the file is not valid JSON or not a list
    """
    if path is None:
        path = settings.sets_path

    if not path.exists():
        raise FileNotFoundError(f"Set list not found at {path}.")

    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Set list at {path} is corrupted: {e}") from e

    if not isinstance(raw, list):
        raise ValueError(f"Set list at {path} must be a JSON array")

    sets: list[CardSet] = []
    for entry in raw:
        try:
            sets.append(
                CardSet(
                    code=str(entry["code"]).lower(),
                    name=str(entry["name"]),
                    released=date.fromisoformat(str(entry["released"])[:10]),
                )
            )
        except (KeyError, TypeError, ValueError):
            logger.warning("Skipping malformed set entry: %r", entry)

    return sets


@lru_cache(maxsize=1)
def get_sets() -> tuple[CardSet, ...]:
    """Cached set list from the configured path."""
    return tuple(load_sets())


def find_set(sets: tuple[CardSet, ...] | list[CardSet], code: str) -> CardSet | None:
    code = code.strip().lower()
    return next((s for s in sets if s.code == code), None)
