"""
Pack Value Estimator: approximate expected value of opening one pack.

Model:
- One rare/mythic slot per pack, always filled: rare 87.5%, mythic 12.5%
- Independently, a foil rare in ~10% of packs and a foil mythic in ~2%
- Within a bucket every distinct card is equally likely

Commons, uncommons, wildcard-slot treatments and set-specific slot
deviations are ignored, so the number is always presented as approximate.

The input is the full eligible pool, BEFORE display filters. Display
preferences must never change the estimate.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from pullvalue.models.card import FinishKind, Rarity
from pullvalue.models.entry import ExpandedEntry

RARE_SLOT_RARE_RATE = 0.875
RARE_SLOT_MYTHIC_RATE = 0.125
FOIL_RARE_RATE = 0.10
FOIL_MYTHIC_RATE = 0.02


class ValueBucket(str, Enum):
    RARE = "rare"
    MYTHIC = "mythic"
    FOIL_RARE = "foil_rare"
    FOIL_MYTHIC = "foil_mythic"


@dataclass(frozen=True, slots=True)
class SlotModel:
    """Per-pack probability of pulling from each bucket."""

    rare: float = RARE_SLOT_RARE_RATE
    mythic: float = RARE_SLOT_MYTHIC_RATE
    foil_rare: float = FOIL_RARE_RATE
    foil_mythic: float = FOIL_MYTHIC_RATE

    def rate(self, bucket: ValueBucket) -> float:
        return {
            ValueBucket.RARE: self.rare,
            ValueBucket.MYTHIC: self.mythic,
            ValueBucket.FOIL_RARE: self.foil_rare,
            ValueBucket.FOIL_MYTHIC: self.foil_mythic,
        }[bucket]


DEFAULT_SLOT_MODEL = SlotModel()


@dataclass(frozen=True, slots=True)
class BucketValue:
    """Contribution of one bucket to the pack value."""

    bucket: ValueBucket
    pool_size: int
    total_price: float
    expected_value: float


@dataclass(frozen=True, slots=True)
class PackValue:
    """Expected value of one pack, with its per-bucket breakdown."""

    expected_value: float
    buckets: tuple[BucketValue, ...] = field(default_factory=tuple)
    approximate: bool = True


def _bucket_for(entry: ExpandedEntry) -> ValueBucket | None:
    if entry.finish is FinishKind.ETCHED:
        return None
    foil = entry.finish is FinishKind.FOIL
    if entry.rarity is Rarity.RARE:
        return ValueBucket.FOIL_RARE if foil else ValueBucket.RARE
    if entry.rarity is Rarity.MYTHIC:
        return ValueBucket.FOIL_MYTHIC if foil else ValueBucket.MYTHIC
    return None


def estimate_pack_value(
    entries: Iterable[ExpandedEntry],
    model: SlotModel = DEFAULT_SLOT_MODEL,
) -> PackValue:
    """
    Expected value of one pack.

    For each bucket: sum(price) * rate / N, where N is the number of
    distinct cards in the bucket (treated as 1 when empty).

    Args:
        entries: Unfiltered expanded entries for the set and booster type
        model: Slot probabilities

    Returns:
        PackValue with the total and one BucketValue per bucket
    """
    totals: dict[ValueBucket, float] = {bucket: 0.0 for bucket in ValueBucket}
    card_ids: dict[ValueBucket, set[str]] = {bucket: set() for bucket in ValueBucket}

    for entry in entries:
        bucket = _bucket_for(entry)
        if bucket is None:
            continue
        totals[bucket] += entry.price
        card_ids[bucket].add(entry.card_id)

    breakdown: list[BucketValue] = []
    for bucket in ValueBucket:
        pool_size = len(card_ids[bucket])
        divisor = pool_size or 1
        breakdown.append(
            BucketValue(
                bucket=bucket,
                pool_size=pool_size,
                total_price=totals[bucket],
                expected_value=totals[bucket] * model.rate(bucket) / divisor,
            )
        )

    return PackValue(
        expected_value=sum(b.expected_value for b in breakdown),
        buckets=tuple(breakdown),
    )
