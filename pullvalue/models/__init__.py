from pullvalue.models.card import (
    BoosterType,
    CardPrinting,
    FinishKind,
    Provenance,
    Rarity,
)
from pullvalue.models.card_set import BoosterEra, CardSet, booster_era
from pullvalue.models.eligibility import (
    CollectorNumberRange,
    EligibilityRules,
    ExclusivityTags,
    SetEligibility,
)
from pullvalue.models.entry import DisplayGroup, ExpandedEntry, FinishPrice
from pullvalue.models.failure import (
    ApiResponse,
    CardFetchError,
    FailureDetail,
    FailureKind,
    KnownError,
    OutcomeType,
    UnknownSetError,
    create_success,
    create_unknown_failure,
    finalize_response,
)
from pullvalue.models.query import CardQuery, ViewFilters
from pullvalue.models.supplementary import SupplementaryPool

__all__ = [
    "ApiResponse",
    "BoosterEra",
    "BoosterType",
    "CardFetchError",
    "CardPrinting",
    "CardQuery",
    "CardSet",
    "CollectorNumberRange",
    "DisplayGroup",
    "EligibilityRules",
    "ExclusivityTags",
    "ExpandedEntry",
    "FailureDetail",
    "FailureKind",
    "FinishKind",
    "FinishPrice",
    "KnownError",
    "OutcomeType",
    "Provenance",
    "Rarity",
    "SetEligibility",
    "SupplementaryPool",
    "UnknownSetError",
    "ViewFilters",
    "booster_era",
    "create_success",
    "create_unknown_failure",
    "finalize_response",
]
