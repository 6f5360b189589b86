"""
Finish Expander.

Explodes each printing into one ExpandedEntry per priced finish, in the
fixed order nonfoil, foil, etched. Unpriced and non-positive finishes
never produce an entry.
"""

from collections.abc import Iterable

from pullvalue.models.card import CardPrinting, FinishKind, Provenance
from pullvalue.models.entry import ExpandedEntry

REGULAR = "Regular"
ETCHED = "Etched"

PROVENANCE_SUFFIXES: dict[Provenance, str] = {
    Provenance.THE_LIST: "The List",
    Provenance.SPECIAL_GUEST: "Special Guest",
}


def treatment_label(printing: CardPrinting, is_foil: bool) -> str:
    """
    Cosmetic treatment label, e.g. "Showcase, Foil".

    Parts are listed in a fixed order; a printing with no treatment is
    "Regular".
    """
    parts: list[str] = []

    if "showcase" in printing.frame_effects:
        parts.append("Showcase")
    if "extendedart" in printing.frame_effects:
        parts.append("Extended Art")
    if printing.border_color == "borderless":
        parts.append("Borderless")
    if printing.promo:
        parts.append("Promo")
    if printing.full_art:
        parts.append("Full Art")
    if "etched" in printing.frame_effects:
        parts.append("Etched")
    if is_foil:
        parts.append("Foil")
    if printing.provenance in PROVENANCE_SUFFIXES:
        parts.append(PROVENANCE_SUFFIXES[printing.provenance])

    return ", ".join(parts) if parts else REGULAR


def expand_printing(printing: CardPrinting) -> list[ExpandedEntry]:
    """Entries for each priced finish of one printing."""
    entries: list[ExpandedEntry] = []
    labels: dict[bool, str] = {}

    for finish in FinishKind:
        price = printing.price_for(finish)
        if price is None or price <= 0:
            continue

        is_foil = finish is FinishKind.FOIL
        if is_foil not in labels:
            labels[is_foil] = treatment_label(printing, is_foil)
        treatment = labels[is_foil]

        # Etched is a named treatment of its own, not a modifier of Regular
        if finish is FinishKind.ETCHED and treatment == REGULAR:
            treatment = ETCHED

        entries.append(
            ExpandedEntry(
                printing=printing,
                finish=finish,
                price=price,
                treatment=treatment,
            )
        )

    return entries


def expand_finishes(printings: Iterable[CardPrinting]) -> list[ExpandedEntry]:
    """Expand every printing, preserving input order."""
    entries: list[ExpandedEntry] = []
    for printing in printings:
        entries.extend(expand_printing(printing))
    return entries
