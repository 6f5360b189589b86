"""
Card printing model.

A CardPrinting is one specific print of one card in one set, already
normalized from whichever upstream shape it arrived in. Built only by
the record normalizer; everything downstream treats it as read-only.
"""

from dataclasses import dataclass, field
from enum import Enum


class Rarity(str, Enum):
    """Printed rarity of a card."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    MYTHIC = "mythic"
    SPECIAL = "special"
    BONUS = "bonus"


class FinishKind(str, Enum):
    """Physical finish of a printing. Declaration order is display order."""

    NONFOIL = "nonfoil"
    FOIL = "foil"
    ETCHED = "etched"


class BoosterType(str, Enum):
    """Booster product a lookup is scoped to."""

    PLAY = "play"
    COLLECTOR = "collector"


class Provenance(str, Enum):
    """Supplementary pool a printing was pulled in from."""

    THE_LIST = "the_list"
    SPECIAL_GUEST = "special_guest"
    BONUS_SHEET = "bonus_sheet"


@dataclass(frozen=True, slots=True)
class CardPrinting:
    """
    One printing of one card.

    Attributes:
        id: Scryfall card id (stable across price refreshes)
        name: Card name
        set_code: Lowercase set code
        collector_number: Collector number as printed (may be non-numeric)
        rarity: Printed rarity
        prices: Price per available finish; None when unpriced
        promo_types: Scryfall promo type tags (e.g. "surgefoil")
        frame_effects: Scryfall frame effect tags (e.g. "extendedart")
        border_color: Border color ("black", "borderless", ...)
        full_art: Full-art printing
        promo: Promo printing
        booster: Upstream "appears in boosters" flag
        image_url: Card image
        detail_url: External detail page
        provenance: Supplementary pool this printing came from, if any
    """

    id: str
    name: str
    set_code: str
    collector_number: str
    rarity: Rarity
    prices: dict[FinishKind, float | None] = field(default_factory=dict)
    promo_types: frozenset[str] = frozenset()
    frame_effects: frozenset[str] = frozenset()
    border_color: str = "black"
    full_art: bool = False
    promo: bool = False
    booster: bool = False
    image_url: str = ""
    detail_url: str = ""
    provenance: Provenance | None = None

    @property
    def finishes(self) -> tuple[FinishKind, ...]:
        """Available finishes in display order."""
        return tuple(kind for kind in FinishKind if kind in self.prices)

    def price_for(self, finish: FinishKind) -> float | None:
        """Price for a finish, or None if unavailable or unpriced."""
        return self.prices.get(finish)

    def has_priced_finish(self) -> bool:
        """True if at least one finish carries a positive price."""
        return any(price is not None and price > 0 for price in self.prices.values())

    def with_provenance(self, provenance: Provenance) -> "CardPrinting":
        """Copy of this printing tagged as coming from a supplementary pool."""
        return CardPrinting(
            id=self.id,
            name=self.name,
            set_code=self.set_code,
            collector_number=self.collector_number,
            rarity=self.rarity,
            prices=dict(self.prices),
            promo_types=self.promo_types,
            frame_effects=self.frame_effects,
            border_color=self.border_color,
            full_art=self.full_art,
            promo=self.promo,
            booster=self.booster,
            image_url=self.image_url,
            detail_url=self.detail_url,
            provenance=provenance,
        )
