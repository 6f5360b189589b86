from collections.abc import Callable
from typing import Any

import pytest

from pullvalue.models.card import CardPrinting, FinishKind, Provenance, Rarity
from pullvalue.models.eligibility import EligibilityRules

PrintingFactory = Callable[..., CardPrinting]


@pytest.fixture
def make_printing() -> PrintingFactory:
    """Factory for CardPrinting with sensible defaults."""

    def _make(
        card_id: str = "card-1",
        *,
        name: str = "Test Card",
        set_code: str = "mkm",
        collector_number: str = "1",
        rarity: Rarity = Rarity.RARE,
        nonfoil: float | None = None,
        foil: float | None = None,
        etched: float | None = None,
        provenance: Provenance | None = None,
        **kwargs: Any,
    ) -> CardPrinting:
        prices: dict[FinishKind, float | None] = {}
        if nonfoil is not None:
            prices[FinishKind.NONFOIL] = nonfoil
        if foil is not None:
            prices[FinishKind.FOIL] = foil
        if etched is not None:
            prices[FinishKind.ETCHED] = etched
        kwargs.setdefault("booster", True)
        return CardPrinting(
            id=card_id,
            name=name,
            set_code=set_code,
            collector_number=collector_number,
            rarity=rarity,
            prices=prices,
            provenance=provenance,
            **kwargs,
        )

    return _make


@pytest.fixture
def default_rules() -> EligibilityRules:
    """Rules with no set overrides and the fallback exclusivity tags."""
    return EligibilityRules()


def _scryfall_card(
    card_id: str,
    *,
    name: str = "Test Card",
    set_code: str = "mkm",
    collector_number: str = "1",
    rarity: str = "rare",
    usd: str | None = None,
    usd_foil: str | None = None,
    usd_etched: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """A minimal Scryfall card object."""
    finishes = []
    if usd is not None:
        finishes.append("nonfoil")
    if usd_foil is not None:
        finishes.append("foil")
    if usd_etched is not None:
        finishes.append("etched")
    card: dict[str, Any] = {
        "id": card_id,
        "name": name,
        "set": set_code,
        "collector_number": collector_number,
        "rarity": rarity,
        "booster": True,
        "finishes": finishes,
        "prices": {"usd": usd, "usd_foil": usd_foil, "usd_etched": usd_etched},
        "image_uris": {"normal": f"https://img.example/{card_id}.jpg"},
        "scryfall_uri": f"https://scryfall.com/card/{set_code}/{collector_number}",
    }
    card.update(extra)
    return card


@pytest.fixture
def scryfall_card() -> Callable[..., dict[str, Any]]:
    """Factory for minimal Scryfall card objects."""
    return _scryfall_card
