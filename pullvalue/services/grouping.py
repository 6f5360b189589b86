"""
Filter & Group Engine.

Applies the user's display filters to expanded entries, merges the
surviving finishes of each printing into one DisplayGroup and orders the
result by price.

INVARIANTS:
- Filtering only removes entries, never adds
- Finishes within a group and groups themselves are ordered by price,
  descending; ties keep input order (stable sort)
- Re-applying the engine to its own (ungrouped) output with the same
  filters yields the same groups
"""

import logging
from collections.abc import Iterable

from pullvalue.models.card import Rarity
from pullvalue.models.entry import DisplayGroup, ExpandedEntry, FinishPrice
from pullvalue.models.query import ViewFilters

logger = logging.getLogger(__name__)

RARE_RARITIES = frozenset({Rarity.RARE, Rarity.MYTHIC})


def filter_entries(entries: Iterable[ExpandedEntry], filters: ViewFilters) -> list[ExpandedEntry]:
    """
    Drop entries hidden by the display filters.

    - price below filters.min_price
    - rare and mythic entries when exclude_rares
    - foil entries when exclude_foils (etched is not foil)
    """
    kept: list[ExpandedEntry] = []
    for entry in entries:
        if entry.price < filters.min_price:
            continue
        if filters.exclude_rares and entry.rarity in RARE_RARITIES:
            continue
        if filters.exclude_foils and entry.is_foil:
            continue
        kept.append(entry)
    return kept


def group_entries(entries: Iterable[ExpandedEntry]) -> list[DisplayGroup]:
    """
    Merge entries of the same printing into display groups.

    The group's treatment and foil flag come from its most expensive entry.
    """
    by_card: dict[str, list[ExpandedEntry]] = {}
    for entry in entries:
        by_card.setdefault(entry.card_id, []).append(entry)

    groups: list[DisplayGroup] = []
    for card_entries in by_card.values():
        ordered = sorted(card_entries, key=lambda e: e.price, reverse=True)
        top = ordered[0]
        groups.append(
            DisplayGroup(
                printing=top.printing,
                finishes=tuple(
                    FinishPrice(finish=e.finish, price=e.price, treatment=e.treatment)
                    for e in ordered
                ),
                treatment=top.treatment,
                is_foil=top.is_foil,
            )
        )

    groups.sort(key=lambda g: g.max_price, reverse=True)
    return groups


def filter_and_group(entries: Iterable[ExpandedEntry], filters: ViewFilters) -> list[DisplayGroup]:
    """Filter, group and order entries for display."""
    kept = filter_entries(entries, filters)
    groups = group_entries(kept)
    logger.debug("Grouped %d entries into %d display groups", len(kept), len(groups))
    return groups


def ungroup(groups: Iterable[DisplayGroup]) -> list[ExpandedEntry]:
    """Flatten display groups back into entries, in display order."""
    return [
        ExpandedEntry(
            printing=group.printing,
            finish=finish.finish,
            price=finish.price,
            treatment=finish.treatment,
        )
        for group in groups
        for finish in group.finishes
    ]

