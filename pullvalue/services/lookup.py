"""
Card lookup pipeline.

    resolve pool -> eligibility -> expand finishes -> {group for display,
                                                       estimate pack value}

The pack value always sees the full eligible pool; display filters only
shape the groups.
"""

import itertools
import logging
from collections.abc import Iterable
from dataclasses import dataclass

from pullvalue.models.card import BoosterType, CardPrinting
from pullvalue.models.eligibility import EligibilityRules
from pullvalue.models.entry import DisplayGroup
from pullvalue.models.query import CardQuery, ViewFilters
from pullvalue.services.card_sources import CardSourceResolver
from pullvalue.services.eligibility import filter_eligible
from pullvalue.services.finishes import expand_finishes
from pullvalue.services.grouping import filter_and_group
from pullvalue.services.pack_value import PackValue, estimate_pack_value

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LookupResult:
    """Display groups plus the pack value for one lookup."""

    query: CardQuery
    filters: ViewFilters
    groups: tuple[DisplayGroup, ...]
    pack_value: PackValue
    eligible_printings: int
    request_id: int = 0


def evaluate_pool(
    printings: Iterable[CardPrinting],
    booster_type: BoosterType,
    rules: EligibilityRules,
    filters: ViewFilters,
) -> tuple[list[DisplayGroup], PackValue, int]:
    """
    Run the pure part of the pipeline on an already-resolved pool.

    Returns:
        (display groups, pack value, number of eligible printings)
    """
    eligible = filter_eligible(printings, booster_type, rules)
    entries = expand_finishes(eligible)
    pack_value = estimate_pack_value(entries)
    groups = filter_and_group(entries, filters)
    return groups, pack_value, len(eligible)


class CardLookup:
    """Resolves and evaluates lookups against a shared resolver."""

    def __init__(self, resolver: CardSourceResolver, rules: EligibilityRules):
        self.resolver = resolver
        self.rules = rules

    async def lookup(
        self,
        query: CardQuery,
        filters: ViewFilters,
        request_id: int = 0,
    ) -> LookupResult:
        """
        Raises:
            CardFetchError: If no source could provide the set's printings
        """
        printings = await self.resolver.resolve(query)
        groups, pack_value, eligible = evaluate_pool(
            printings, query.booster_type, self.rules, filters
        )
        logger.debug(
            "Lookup %s/%s: %d eligible, %d shown, EV %.2f",
            query.set_code,
            query.booster_type.value,
            eligible,
            len(groups),
            pack_value.expected_value,
        )
        return LookupResult(
            query=query,
            filters=filters,
            groups=tuple(groups),
            pack_value=pack_value,
            eligible_printings=eligible,
            request_id=request_id,
        )


class LatestLookup:
    """
    Lookups for one viewer where only the newest request may be shown.

    A lookup started before a newer one finishes is not cancelled, but its
    result is discarded (None) so it can never overwrite the newer result.
    """

    def __init__(self, lookup: CardLookup):
        self._lookup = lookup
        self._ids = itertools.count(1)
        self._latest = 0

    @property
    def latest_request(self) -> int:
        return self._latest

    def is_current(self, request_id: int) -> bool:
        return request_id == self._latest

    async def lookup(self, query: CardQuery, filters: ViewFilters) -> LookupResult | None:
        request_id = next(self._ids)
        self._latest = request_id

        result = await self._lookup.lookup(query, filters, request_id=request_id)

        if not self.is_current(request_id):
            logger.debug("Discarding superseded lookup %d", request_id)
            return None
        return result
