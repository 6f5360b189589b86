"""
Parsers for the shared eligibility documents.

set-configs.json, keyed by lowercase set code:
    {
      "_comment": "...",
      "mkm": {
        "playBooster": {"includeCollectorNumbers": ["1-286", "342"]},
        "collectorExclusive": {"collectorNumbers": ["287-341"]}
      }
    }

collector-exclusives.json:
    {"promos": ["surgefoil", ...], "frames": ["extendedart", ...]}
"""

import logging
from typing import Any

from pullvalue.models.eligibility import (
    CollectorNumberRange,
    ExclusivityTags,
    SetEligibility,
)

logger = logging.getLogger(__name__)


def _parse_ranges(values: Any, set_code: str) -> tuple[CollectorNumberRange, ...]:
    if not isinstance(values, list):
        return ()

    ranges: list[CollectorNumberRange] = []
    for value in values:
        try:
            ranges.append(CollectorNumberRange.parse(str(value)))
        except ValueError:
            logger.warning("Ignoring bad collector number range %r for %s", value, set_code)
    return tuple(ranges)


def _nested_list(entry: dict[str, Any], section: str, key: str) -> Any:
    block = entry.get(section)
    if not isinstance(block, dict):
        return None
    return block.get(key)


def parse_set_configs(data: Any) -> dict[str, SetEligibility]:
    """
    Parse the per-set override document.

    Keys starting with "_" are comments. Sets without any usable range are
    omitted so that they fall through to the generic heuristic.
    """
    if not isinstance(data, dict):
        return {}

    configs: dict[str, SetEligibility] = {}
    for set_code, entry in data.items():
        if set_code.startswith("_") or not isinstance(entry, dict):
            continue

        play = _parse_ranges(
            _nested_list(entry, "playBooster", "includeCollectorNumbers"), set_code
        )
        exclusive = _parse_ranges(
            _nested_list(entry, "collectorExclusive", "collectorNumbers"), set_code
        )
        if play or exclusive:
            configs[set_code.lower()] = SetEligibility(
                play_includes=play,
                collector_exclusive=exclusive,
            )

    return configs


def parse_exclusivity_tags(data: Any) -> ExclusivityTags:
    """
    Parse the global exclusivity tag document.

    Raises:
        ValueError: If either list is missing
    """
    if not isinstance(data, dict):
        raise ValueError("Collector exclusives document must be an object")

    promos = data.get("promos")
    frames = data.get("frames")
    if not isinstance(promos, list) or not isinstance(frames, list):
        raise ValueError("Collector exclusives document needs 'promos' and 'frames' lists")

    return ExclusivityTags(
        promos=frozenset(str(p) for p in promos),
        frames=frozenset(str(f) for f in frames),
    )
