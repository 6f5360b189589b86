"""
Priced entries and display groups.

ExpandedEntry is one (printing, finish) pair with a resolved price.
DisplayGroup collapses the surviving entries of one printing back into a
single user-facing record.

INVARIANTS:
- ExpandedEntry.price > 0
- DisplayGroup.finishes is non-empty and sorted by price, descending
- DisplayGroup.max_price == DisplayGroup.finishes[0].price
"""

from dataclasses import dataclass

from pullvalue.models.card import CardPrinting, FinishKind, Rarity


@dataclass(frozen=True, slots=True)
class ExpandedEntry:
    """One priced finish of one printing."""

    printing: CardPrinting
    finish: FinishKind
    price: float
    treatment: str

    def __post_init__(self) -> None:
        if self.price <= 0:
            raise ValueError(f"Entry price must be positive, got {self.price}")

    @property
    def card_id(self) -> str:
        return self.printing.id

    @property
    def rarity(self) -> Rarity:
        return self.printing.rarity

    @property
    def is_foil(self) -> bool:
        """Etched is its own finish, never counted as foil."""
        return self.finish is FinishKind.FOIL


@dataclass(frozen=True, slots=True)
class FinishPrice:
    """A finish and its price within a display group."""

    finish: FinishKind
    price: float
    treatment: str


@dataclass(frozen=True, slots=True)
class DisplayGroup:
    """
    A printing collapsed across all of its qualifying finishes.

    Attributes:
        printing: Representative printing fields
        finishes: (finish, price) pairs, most expensive first
        treatment: Treatment label of the most expensive finish
        is_foil: Foil flag of the most expensive finish
    """

    printing: CardPrinting
    finishes: tuple[FinishPrice, ...]
    treatment: str
    is_foil: bool

    def __post_init__(self) -> None:
        if not self.finishes:
            raise ValueError("DisplayGroup requires at least one finish")
        prices = [f.price for f in self.finishes]
        if prices != sorted(prices, reverse=True):
            raise ValueError("DisplayGroup finishes must be sorted by price, descending")

    @property
    def max_price(self) -> float:
        return self.finishes[0].price

    @property
    def card_id(self) -> str:
        return self.printing.id
