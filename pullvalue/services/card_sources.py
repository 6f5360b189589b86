"""
Source Resolution Orchestrator.

Resolves the card pool for a CardQuery through an explicit state machine:

    CACHE_LOOKUP --hit--> AUGMENT --> DONE
         |                  ^
        miss                |
         v                  |
    LIVE_FETCH -------------+

- CACHE_LOOKUP: read the pre-fetched static file for the set. A missing
  file, a parse error or an empty list are all misses.
- LIVE_FETCH: query Scryfall with the same filtering the cache was built
  with. "No results" is an empty pool; exhausted retries raise
  CardFetchError.
- AUGMENT: append every supplementary pool configured for the set, each
  through the same cache-then-live fallback, stamped with its provenance.

Complete results are memoised per CardQuery for the life of the resolver
and never invalidated. Concurrent resolutions of the same query share one
run.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from pullvalue.config import settings
from pullvalue.models.card import BoosterType, CardPrinting
from pullvalue.models.card_set import JUMPSTART_SETS
from pullvalue.models.eligibility import EligibilityRules
from pullvalue.models.failure import CardFetchError
from pullvalue.models.query import CardQuery
from pullvalue.models.supplementary import SupplementaryPool
from pullvalue.parsers.card_records import normalize_records
from pullvalue.services.scryfall_client import (
    ScryfallClient,
    ScryfallError,
    build_pool_query,
    build_set_query,
)
from pullvalue.services.supplementary import SUPPLEMENTARY_POOLS, pools_for

logger = logging.getLogger(__name__)


class CacheMissError(Exception):
    """The static cache has no usable data for a set."""


# =============================================================================
# SOURCES
# =============================================================================


class StaticCardCache:
    """
    Per-set JSON files written by the cache refresh job.

    File layout (data/cache/<set>.json):
        {"set": "mkm", "name": "...", "updated": "<iso>",
         "play": [<compact record>, ...],
         "collector": [<compact record>, ...]}
    """

    def __init__(self, cache_dir: Path | None = None):
        self.cache_dir = cache_dir if cache_dir is not None else settings.cache_dir

    def path_for(self, set_code: str) -> Path:
        return self.cache_dir / f"{set_code.lower()}.json"

    def load(self, set_code: str, booster_type: BoosterType) -> list[dict[str, Any]]:
        """
        Raw records for one booster type.

        Raises:
            CacheMissError: If the file is missing, unreadable or has no records
        """
        path = self.path_for(set_code)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise CacheMissError(f"No cache file for {set_code}") from e
        except (OSError, ValueError) as e:
            raise CacheMissError(f"Unreadable cache file {path}: {e}") from e

        records = data.get(booster_type.value) if isinstance(data, dict) else None
        if not isinstance(records, list) or not records:
            raise CacheMissError(f"No {booster_type.value} records cached for {set_code}")
        return records

    def write(
        self,
        set_code: str,
        name: str,
        play: list[dict[str, Any]],
        collector: list[dict[str, Any]],
    ) -> Path:
        """Write one set's cache file and return its path."""
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(set_code)
        document = {
            "set": set_code.lower(),
            "name": name,
            "updated": datetime.now(timezone.utc).isoformat(),
            "play": play,
            "collector": collector,
        }
        with open(path, "w", encoding="utf-8") as f:
            json.dump(document, f)
        return path


class LiveCardSource:
    """Scryfall searches equivalent to what the static cache holds."""

    def __init__(
        self,
        client: ScryfallClient,
        rules: EligibilityRules,
        min_price: float = settings.min_cached_price,
    ):
        self.client = client
        self.rules = rules
        self.min_price = min_price

    def set_query(self, set_code: str, booster_type: BoosterType) -> str:
        booster_filter = (
            set_code not in JUMPSTART_SETS and not self.rules.has_play_override(set_code)
        )
        return build_set_query(
            set_code,
            booster_type,
            min_price=self.min_price,
            booster_filter=booster_filter,
            exclusive_promos=self.rules.tags.promos,
        )

    async def fetch_set(self, set_code: str, booster_type: BoosterType) -> list[dict[str, Any]]:
        """
        Raises:
            ScryfallError: If the search fails after retries
        """
        return await self.client.search(self.set_query(set_code, booster_type))

    async def fetch_pool(self, pool: SupplementaryPool, host_set: str) -> list[dict[str, Any]]:
        """
        Raises:
            ScryfallError: If the search fails after retries
        """
        query = build_pool_query(
            pool.source_set,
            pool.ranges_for(host_set),
            min_price=self.min_price,
        )
        return await self.client.search(query)


# =============================================================================
# STATE MACHINE
# =============================================================================


class ResolutionState(str, Enum):
    CACHE_LOOKUP = "cache_lookup"
    LIVE_FETCH = "live_fetch"
    AUGMENT = "augment"
    DONE = "done"


class PoolSource(str, Enum):
    """Where the primary printings of a resolution came from."""

    CACHE = "cache"
    LIVE = "live"


@dataclass(frozen=True)
class Resolution:
    """
    Progress of one query through the state machine.

    Attributes:
        query: The query being resolved
        state: Next state to run
        printings: Printings gathered so far
        source: Origin of the primary printings, once known
        pools: Names of supplementary pools appended
        complete: False if a supplementary pool could not be fetched;
            incomplete results are returned but not memoised
    """

    query: CardQuery
    state: ResolutionState = ResolutionState.CACHE_LOOKUP
    printings: tuple[CardPrinting, ...] = ()
    source: PoolSource | None = None
    pools: tuple[str, ...] = ()
    complete: bool = True


@dataclass
class CardSourceResolver:
    """
    Resolves card pools, cache first, then live, then supplementary pools.

    Sources are injected so each state can be exercised on its own.
    """

    cache: StaticCardCache
    live: LiveCardSource
    pools: tuple[SupplementaryPool, ...] = SUPPLEMENTARY_POOLS
    _memo: dict[CardQuery, tuple[CardPrinting, ...]] = field(default_factory=dict, repr=False)
    _locks: dict[CardQuery, asyncio.Lock] = field(default_factory=dict, repr=False)

    async def resolve(self, query: CardQuery) -> list[CardPrinting]:
        """
        Combined printings for a query (not yet eligibility-filtered).

        Raises:
            CardFetchError: If neither the cache nor Scryfall could provide
                the set's printings
        """
        if query in self._memo:
            return list(self._memo[query])

        lock = self._locks.setdefault(query, asyncio.Lock())
        async with lock:
            if query in self._memo:
                return list(self._memo[query])

            resolution = await self.run(query)
            if resolution.complete:
                self._memo[query] = resolution.printings
            return list(resolution.printings)

    def is_memoised(self, query: CardQuery) -> bool:
        return query in self._memo

    async def run(self, query: CardQuery) -> Resolution:
        """Drive the state machine to DONE."""
        resolution = Resolution(query=query)
        while resolution.state is not ResolutionState.DONE:
            resolution = await self.step(resolution)
        logger.info(
            "Resolved %s/%s from %s: %d printings (pools: %s)",
            query.set_code,
            query.booster_type.value,
            resolution.source.value if resolution.source else "nowhere",
            len(resolution.printings),
            ", ".join(resolution.pools) or "none",
        )
        return resolution

    async def step(self, resolution: Resolution) -> Resolution:
        """Run the transition for the resolution's current state."""
        if resolution.state is ResolutionState.CACHE_LOOKUP:
            return self.cache_lookup(resolution)
        if resolution.state is ResolutionState.LIVE_FETCH:
            return await self.live_fetch(resolution)
        if resolution.state is ResolutionState.AUGMENT:
            return await self.augment(resolution)
        return resolution

    def cache_lookup(self, resolution: Resolution) -> Resolution:
        query = resolution.query
        try:
            records = self.cache.load(query.set_code, query.booster_type)
        except CacheMissError as e:
            logger.debug("Cache miss for %s: %s", query.set_code, e)
            return replace(resolution, state=ResolutionState.LIVE_FETCH)

        printings = normalize_records(records)
        if not printings:
            logger.debug("Cache for %s had no usable records", query.set_code)
            return replace(resolution, state=ResolutionState.LIVE_FETCH)

        return replace(
            resolution,
            state=ResolutionState.AUGMENT,
            printings=tuple(printings),
            source=PoolSource.CACHE,
        )

    async def live_fetch(self, resolution: Resolution) -> Resolution:
        query = resolution.query
        try:
            records = await self.live.fetch_set(query.set_code, query.booster_type)
        except ScryfallError as e:
            logger.error("Live fetch failed for %s: %s", query.set_code, e)
            raise CardFetchError(query.set_code, detail=str(e)) from e

        return replace(
            resolution,
            state=ResolutionState.AUGMENT,
            printings=tuple(normalize_records(records)),
            source=PoolSource.LIVE,
        )

    async def augment(self, resolution: Resolution) -> Resolution:
        query = resolution.query
        printings = list(resolution.printings)
        seen_ids = {p.id for p in printings}
        pool_names: list[str] = []
        complete = resolution.complete

        for pool in pools_for(query.set_code, query.include_supplementary, self.pools):
            try:
                records = await self._load_pool(pool, query.set_code)
            except ScryfallError as e:
                logger.warning("Skipping %s for %s: %s", pool.name, query.set_code, e)
                complete = False
                continue

            for printing in normalize_records(records, provenance=pool.provenance):
                if printing.id in seen_ids:
                    continue
                seen_ids.add(printing.id)
                printings.append(printing)
            pool_names.append(pool.name)

        return replace(
            resolution,
            state=ResolutionState.DONE,
            printings=tuple(printings),
            pools=tuple(pool_names),
            complete=complete,
        )

    async def _load_pool(self, pool: SupplementaryPool, host_set: str) -> list[dict[str, Any]]:
        """Pool records from the cache, falling back to Scryfall."""
        ranges = pool.ranges_for(host_set)
        try:
            records = self.cache.load(pool.source_set, BoosterType.COLLECTOR)
        except CacheMissError:
            return await self.live.fetch_pool(pool, host_set)

        if not ranges:
            return records

        in_range = [
            record
            for record in records
            if isinstance(record, dict)
            and any(r.contains(str(record.get("collector_number", ""))) for r in ranges)
        ]
        if not in_range:
            return await self.live.fetch_pool(pool, host_set)
        return in_range
