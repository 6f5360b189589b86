"""
Supplementary pools: printings filed under another set that still show up
in a set's packs.

- Special Guests (spg): a slice of collector numbers per host set, shown
  only when the user opts into supplementary cards.
- The Big Score (big) and Breaking News (otp): bonus sheets that are part
  of every Outlaws of Thunder Junction pack.
"""

from pullvalue.models.card import Provenance
from pullvalue.models.eligibility import CollectorNumberRange
from pullvalue.models.supplementary import SupplementaryPool

SPECIAL_GUESTS = SupplementaryPool(
    name="Special Guests",
    source_set="spg",
    provenance=Provenance.SPECIAL_GUEST,
    host_ranges={
        "lci": (CollectorNumberRange(1, 18),),
        "mkm": (CollectorNumberRange(19, 28),),
        "otj": (CollectorNumberRange(29, 38),),
        "mh3": (CollectorNumberRange(39, 53),),
        "blb": (CollectorNumberRange(54, 63),),
        "dsk": (CollectorNumberRange(64, 73),),
    },
    toggleable=True,
)

THE_BIG_SCORE = SupplementaryPool(
    name="The Big Score",
    source_set="big",
    provenance=Provenance.BONUS_SHEET,
    host_ranges={"otj": ()},
    toggleable=False,
)

BREAKING_NEWS = SupplementaryPool(
    name="Breaking News",
    source_set="otp",
    provenance=Provenance.BONUS_SHEET,
    host_ranges={"otj": ()},
    toggleable=False,
)

SUPPLEMENTARY_POOLS: tuple[SupplementaryPool, ...] = (
    SPECIAL_GUESTS,
    THE_BIG_SCORE,
    BREAKING_NEWS,
)


def pools_for(
    set_code: str,
    include_toggleable: bool,
    pools: tuple[SupplementaryPool, ...] = SUPPLEMENTARY_POOLS,
) -> list[SupplementaryPool]:
    """Pools that augment a set for the given toggle state."""
    return [
        pool
        for pool in pools
        if pool.augments(set_code) and (include_toggleable or not pool.toggleable)
    ]


def source_sets(pools: tuple[SupplementaryPool, ...] = SUPPLEMENTARY_POOLS) -> dict[str, str]:
    """Source set code -> pool name, for the cache refresh job."""
    return {pool.source_set: pool.name for pool in pools}
