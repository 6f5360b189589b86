"""
PullValue services.

Card eligibility, finish expansion, grouping, pack valuation and the
source resolution that feeds them.
"""

from pullvalue.services.card_sources import (
    CacheMissError,
    CardSourceResolver,
    LiveCardSource,
    Resolution,
    ResolutionState,
    StaticCardCache,
)
from pullvalue.services.eligibility import (
    EligibilityReason,
    classify,
    filter_eligible,
    is_eligible,
)
from pullvalue.services.finishes import expand_finishes, expand_printing, treatment_label
from pullvalue.services.grouping import filter_and_group, filter_entries, group_entries, ungroup
from pullvalue.services.lookup import CardLookup, LatestLookup, LookupResult, evaluate_pool
from pullvalue.services.pack_value import (
    PackValue,
    SlotModel,
    estimate_pack_value,
)
from pullvalue.services.scryfall_client import NoResultsError, ScryfallClient, ScryfallError

__all__ = [
    # Source resolution
    "CacheMissError",
    "CardSourceResolver",
    "LiveCardSource",
    "Resolution",
    "ResolutionState",
    "StaticCardCache",
    "NoResultsError",
    "ScryfallClient",
    "ScryfallError",
    # Eligibility
    "EligibilityReason",
    "classify",
    "filter_eligible",
    "is_eligible",
    # Finishes and display
    "expand_finishes",
    "expand_printing",
    "treatment_label",
    "filter_and_group",
    "filter_entries",
    "group_entries",
    "ungroup",
    # Pack value
    "PackValue",
    "SlotModel",
    "estimate_pack_value",
    # Pipeline
    "CardLookup",
    "LatestLookup",
    "LookupResult",
    "evaluate_pool",
]
