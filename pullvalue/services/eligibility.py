"""
Eligibility Classifier: which printings belong to which booster product.

Upstream "in a booster" flags lag behind new products, so the decision is
layered. Rules are evaluated in order; the first that applies decides:

1. Collector product: always included (it is a superset of play).
2. Supplementary pool printings: always included.
3. Set override lists the collector number as in play boosters: included.
4. Set override lists it as collector-exclusive: excluded.
5. Generic heuristic: excluded if any promo type or frame effect is on the
   global collector-exclusive lists, otherwise the upstream booster flag.

A set without an override uses rule 5 alone.
"""

from collections.abc import Iterable
from enum import Enum

from pullvalue.models.card import BoosterType, CardPrinting
from pullvalue.models.eligibility import (
    EligibilityRules,
    ExclusivityTags,
    any_range_contains,
)


class EligibilityReason(str, Enum):
    """Which rule decided a printing's eligibility."""

    COLLECTOR_PRODUCT = "collector_product"
    SUPPLEMENTARY_POOL = "supplementary_pool"
    PLAY_OVERRIDE = "play_override"
    COLLECTOR_EXCLUSIVE_OVERRIDE = "collector_exclusive_override"
    EXCLUSIVE_TAGS = "exclusive_tags"
    BOOSTER_FLAG = "booster_flag"


def has_exclusive_tags(printing: CardPrinting, tags: ExclusivityTags) -> bool:
    """True if the printing carries a globally collector-exclusive tag."""
    return bool(printing.promo_types & tags.promos) or bool(printing.frame_effects & tags.frames)


def classify(
    printing: CardPrinting,
    booster_type: BoosterType,
    rules: EligibilityRules,
) -> tuple[bool, EligibilityReason]:
    """
    Decide whether a printing is in a booster product.

    Returns:
        (included, reason) where reason names the deciding rule
    """
    if booster_type is BoosterType.COLLECTOR:
        return True, EligibilityReason.COLLECTOR_PRODUCT

    if printing.provenance is not None:
        return True, EligibilityReason.SUPPLEMENTARY_POOL

    config = rules.for_set(printing.set_code)
    if config is not None:
        if config.play_includes and any_range_contains(
            config.play_includes, printing.collector_number
        ):
            return True, EligibilityReason.PLAY_OVERRIDE
        if config.collector_exclusive and any_range_contains(
            config.collector_exclusive, printing.collector_number
        ):
            return False, EligibilityReason.COLLECTOR_EXCLUSIVE_OVERRIDE

    if has_exclusive_tags(printing, rules.tags):
        return False, EligibilityReason.EXCLUSIVE_TAGS

    return printing.booster, EligibilityReason.BOOSTER_FLAG


def is_eligible(
    printing: CardPrinting,
    booster_type: BoosterType,
    rules: EligibilityRules,
) -> bool:
    """Whether a printing is in the given booster product."""
    included, _ = classify(printing, booster_type, rules)
    return included


def filter_eligible(
    printings: Iterable[CardPrinting],
    booster_type: BoosterType,
    rules: EligibilityRules,
) -> list[CardPrinting]:
    """Keep only printings that belong to the booster product, in order."""
    return [p for p in printings if is_eligible(p, booster_type, rules)]
