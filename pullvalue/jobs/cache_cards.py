"""
Refresh the static card cache.

For every set in sets.json, fetch the play and collector pools from
Scryfall, keep the eligible printings, and write data/cache/<set>.json.
Supplementary source sets (Special Guests, bonus sheets) are cached last so
lookups can slice them by host set. Run periodically to keep prices fresh.

Usage:
    python -m pullvalue.jobs.cache_cards
    python -m pullvalue.jobs.cache_cards --sets mkm otj blb
"""

import argparse
import asyncio
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pullvalue.config import settings
from pullvalue.models.card import BoosterType, CardPrinting
from pullvalue.models.card_set import CardSet
from pullvalue.models.eligibility import EligibilityRules
from pullvalue.parsers.card_records import normalize_records, to_cache_record
from pullvalue.services.card_sources import LiveCardSource, StaticCardCache
from pullvalue.services.eligibility import filter_eligible
from pullvalue.services.rules_loader import load_eligibility_rules
from pullvalue.services.scryfall_client import ScryfallClient, ScryfallError
from pullvalue.services.set_catalog import load_sets
from pullvalue.services.supplementary import source_sets

logger = logging.getLogger(__name__)


@dataclass
class CacheRunResult:
    """Outcome of one cache refresh run."""

    cached: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)


async def fetch_booster_pool(
    live: LiveCardSource,
    set_code: str,
    booster_type: BoosterType,
    delay: float = 0.0,
) -> list[CardPrinting]:
    """Eligible printings for one booster type."""
    if delay:
        await asyncio.sleep(delay)
    records = await live.fetch_set(set_code, booster_type)
    return filter_eligible(normalize_records(records), booster_type, live.rules)


def build_cache_lists(
    play: list[CardPrinting],
    collector: list[CardPrinting],
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """
    Compact play and collector lists.

    The collector list is the play list followed by collector-only
    printings; no id appears twice.
    """
    seen_ids: set[str] = set()
    play_records: list[dict[str, Any]] = []
    collector_only: list[dict[str, Any]] = []

    for printing in play:
        if printing.id not in seen_ids:
            seen_ids.add(printing.id)
            play_records.append(to_cache_record(printing))

    for printing in collector:
        if printing.id not in seen_ids:
            seen_ids.add(printing.id)
            collector_only.append(to_cache_record(printing))

    return play_records, play_records + collector_only


async def cache_set(
    live: LiveCardSource,
    cache: StaticCardCache,
    set_code: str,
    name: str,
) -> Path:
    """
    Fetch and write one set.

    The two booster types are fetched concurrently; the collector fetch is
    staggered by one request delay.

    Raises:
        ScryfallError: If either fetch fails after retries
    """
    logger.info("Caching %s (%s)...", set_code, name)

    play, collector = await asyncio.gather(
        fetch_booster_pool(live, set_code, BoosterType.PLAY),
        fetch_booster_pool(
            live, set_code, BoosterType.COLLECTOR, delay=live.client.request_delay
        ),
    )
    play_records, collector_records = build_cache_lists(play, collector)

    logger.info(
        "  Play: %d cards, Collector: %d cards",
        len(play_records),
        len(collector_records),
    )
    return cache.write(set_code, name, play_records, collector_records)


def write_manifest(cache_dir: Path, result: CacheRunResult) -> Path:
    cache_dir.mkdir(parents=True, exist_ok=True)
    path = cache_dir / "manifest.json"
    manifest = {
        "updated": datetime.now(timezone.utc).isoformat(),
        "sets": len(result.cached),
        "errors": len(result.errors),
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(manifest, f, indent=2)
    return path


async def run_cache_refresh(
    sets: list[CardSet],
    live: LiveCardSource,
    cache: StaticCardCache,
    batch_size: int = settings.batch_size,
    batch_pause: float = settings.batch_pause,
) -> CacheRunResult:
    """
    Cache every set, then the supplementary source sets, then the manifest.

    A failing set is logged and recorded; it does not stop the run.
    """
    result = CacheRunResult()

    for start in range(0, len(sets), batch_size):
        batch = sets[start : start + batch_size]

        for card_set in batch:
            try:
                await cache_set(live, cache, card_set.code, card_set.name)
                result.cached.append(card_set.code)
            except ScryfallError as e:
                logger.error("  Error caching %s: %s", card_set.code, e)
                result.errors[card_set.code] = str(e)

        if start + batch_size < len(sets):
            logger.info(
                "Pausing between batches... (%d/%d done)", len(result.cached), len(sets)
            )
            await asyncio.sleep(batch_pause)

    logger.info("Caching supplementary pools...")
    for code, name in source_sets().items():
        try:
            await cache_set(live, cache, code, name)
        except ScryfallError as e:
            logger.error("  Error caching %s: %s", code, e)

    write_manifest(cache.cache_dir, result)

    logger.info("Done! Cached %d sets.", len(result.cached))
    if result.errors:
        logger.warning("Errors: %d", len(result.errors))
        for code, error in result.errors.items():
            logger.warning("  - %s: %s", code, error)

    return result


async def run(set_codes: list[str] | None = None) -> CacheRunResult:
    """Load rules and sets, then refresh the cache."""
    rules: EligibilityRules = await load_eligibility_rules()
    sets = load_sets()
    if set_codes:
        wanted = {code.lower() for code in set_codes}
        sets = [s for s in sets if s.code in wanted]
    logger.info("Found %d sets to cache", len(sets))

    async with ScryfallClient() as client:
        live = LiveCardSource(client, rules)
        return await run_cache_refresh(sets, live, StaticCardCache(settings.cache_dir))


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Refresh the static card price cache")
    parser.add_argument("--sets", nargs="+", help="Only cache these set codes")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run(args.sets))


if __name__ == "__main__":
    main()
