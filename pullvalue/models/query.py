"""
Lookup parameters.

CardQuery identifies a resolved card pool (and is the memo key).
ViewFilters only shape what is displayed; they never reach the pool
resolution or the pack value estimate.
"""

from dataclasses import dataclass

from pullvalue.models.card import BoosterType


@dataclass(frozen=True, slots=True)
class CardQuery:
    """Which pool to resolve."""

    set_code: str
    booster_type: BoosterType = BoosterType.PLAY
    include_supplementary: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "set_code", self.set_code.strip().lower())


@dataclass(frozen=True, slots=True)
class ViewFilters:
    """Display filters applied after the pool is resolved."""

    min_price: float = 0.0
    exclude_rares: bool = False
    exclude_foils: bool = False
