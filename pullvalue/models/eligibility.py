"""
Eligibility rules: per-set overrides plus global exclusivity tags.

Loaded once at startup and passed explicitly to the classifier.
Nothing here is mutated after construction.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

_LEADING_DIGITS = re.compile(r"^\s*(\d+)")

# Used when the shared exclusivity list cannot be fetched
FALLBACK_EXCLUSIVE_PROMOS = (
    "fracturefoil",
    "texturedfoil",
    "ripplefoil",
    "halofoil",
    "confettifoil",
    "galaxyfoil",
    "surgefoil",
    "raisedfoil",
    "headliner",
)
FALLBACK_EXCLUSIVE_FRAMES = ("inverted", "extendedart")


def collector_number_value(collector_number: str) -> int | None:
    """
    Numeric part of a collector number.

    Uses the leading digits only, so "12a" is 12. Returns None when the
    number does not start with a digit (e.g. "★12").
    """
    match = _LEADING_DIGITS.match(collector_number)
    return int(match.group(1)) if match else None


@dataclass(frozen=True, slots=True)
class CollectorNumberRange:
    """Inclusive collector-number range."""

    start: int
    end: int

    @classmethod
    def parse(cls, text: str) -> "CollectorNumberRange":
        """
        Parse "N" or "N-M".

        Raises:
            ValueError: If text is not a number or a number range
        """
        parts = text.strip().split("-")
        if len(parts) == 1:
            value = int(parts[0])
            return cls(value, value)
        if len(parts) == 2:
            start, end = int(parts[0]), int(parts[1])
            if start > end:
                raise ValueError(f"Range start exceeds end: {text!r}")
            return cls(start, end)
        raise ValueError(f"Invalid collector number range: {text!r}")

    def contains(self, collector_number: str) -> bool:
        value = collector_number_value(collector_number)
        return value is not None and self.start <= value <= self.end


def any_range_contains(ranges: tuple[CollectorNumberRange, ...], collector_number: str) -> bool:
    return any(r.contains(collector_number) for r in ranges)


@dataclass(frozen=True, slots=True)
class SetEligibility:
    """
    Curated overrides for one set.

    An empty tuple means "no override of this kind", which is distinct from
    an override that happens to match nothing.
    """

    play_includes: tuple[CollectorNumberRange, ...] = ()
    collector_exclusive: tuple[CollectorNumberRange, ...] = ()


@dataclass(frozen=True, slots=True)
class ExclusivityTags:
    """Tags that signal a collector-exclusive printing absent a set override."""

    promos: frozenset[str] = frozenset(FALLBACK_EXCLUSIVE_PROMOS)
    frames: frozenset[str] = frozenset(FALLBACK_EXCLUSIVE_FRAMES)


@dataclass(frozen=True)
class EligibilityRules:
    """Everything the classifier needs: set overrides and global tags."""

    sets: Mapping[str, SetEligibility] = field(default_factory=dict)
    tags: ExclusivityTags = field(default_factory=ExclusivityTags)

    def __post_init__(self) -> None:
        # Read-only view so a shared instance cannot be edited in place
        object.__setattr__(self, "sets", MappingProxyType(dict(self.sets)))

    def for_set(self, set_code: str) -> SetEligibility | None:
        return self.sets.get(set_code.lower())

    def has_play_override(self, set_code: str) -> bool:
        config = self.for_set(set_code)
        return config is not None and bool(config.play_includes)
