"""
Card record normalizer.

Turns raw card records into CardPrinting. Two upstream shapes are accepted:

- Compact cache records, as written by the cache refresh job:
    {"id", "name", "set", "collector_number", "rarity", "booster",
     "image", "uri", "finishes": [{"type": "foil", "price": 4.2}, ...],
     "showcase", "extendedart", "inverted", "borderless", "fullart",
     "etched", "promo", "promo_types": [...],
     "frame_effects": [...], "border_color"}
  Older files carry only the boolean flags. "frame_effects" is merged with
  them and "border_color" wins over "borderless" when present.

- Live Scryfall card objects:
    {"id", "name", "set", "collector_number", "rarity", "booster",
     "finishes": ["nonfoil", "foil"], "prices": {"usd", "usd_foil",
     "usd_etched"}, "frame_effects", "promo_types", "border_color",
     "full_art", "promo", "image_uris" | "card_faces", "scryfall_uri"}

Upstream schemas drift. A field that cannot be read falls back to its
default; a record that cannot be read at all, or has no positive price on
any finish, is dropped (None) rather than raised.

Scryfall card objects: https://scryfall.com/docs/api/cards
"""

import logging
from collections.abc import Iterable
from typing import Any

from pullvalue.models.card import CardPrinting, FinishKind, Provenance, Rarity

logger = logging.getLogger(__name__)

# Scryfall price key per finish
PRICE_KEYS: dict[FinishKind, str] = {
    FinishKind.NONFOIL: "usd",
    FinishKind.FOIL: "usd_foil",
    FinishKind.ETCHED: "usd_etched",
}

# Compact boolean flag -> Scryfall frame effect
_COMPACT_FRAME_FLAGS = ("showcase", "extendedart", "inverted", "etched")


def _parse_price(value: Any) -> float | None:
    """Parse a price that may arrive as a string, number, or null."""
    if value is None or isinstance(value, bool):
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    return price if price == price else None  # NaN


def _parse_rarity(value: Any) -> Rarity:
    try:
        return Rarity(str(value).lower())
    except ValueError:
        return Rarity.COMMON


def _string_set(value: Any) -> frozenset[str]:
    if not isinstance(value, list | tuple):
        return frozenset()
    return frozenset(str(v) for v in value if isinstance(v, str))


def _image_from_scryfall(raw: dict[str, Any]) -> str:
    image_uris = raw.get("image_uris")
    if isinstance(image_uris, dict) and image_uris.get("normal"):
        return str(image_uris["normal"])

    # Double-faced cards carry images per face
    faces = raw.get("card_faces")
    if isinstance(faces, list) and faces and isinstance(faces[0], dict):
        face_uris = faces[0].get("image_uris")
        if isinstance(face_uris, dict) and face_uris.get("normal"):
            return str(face_uris["normal"])
    return ""


def _is_compact(raw: dict[str, Any]) -> bool:
    finishes = raw.get("finishes")
    return isinstance(finishes, list) and any(isinstance(f, dict) for f in finishes)


def _compact_prices(raw: dict[str, Any]) -> dict[FinishKind, float | None]:
    prices: dict[FinishKind, float | None] = {}
    for finish in raw.get("finishes", []):
        if not isinstance(finish, dict):
            continue
        try:
            kind = FinishKind(finish.get("type"))
        except ValueError:
            continue
        prices[kind] = _parse_price(finish.get("price"))
    return prices


def _scryfall_prices(raw: dict[str, Any]) -> dict[FinishKind, float | None]:
    finishes = raw.get("finishes")
    price_map = raw.get("prices")
    if not isinstance(finishes, list):
        finishes = []
    if not isinstance(price_map, dict):
        price_map = {}

    prices: dict[FinishKind, float | None] = {}
    for kind in FinishKind:
        if kind.value in finishes:
            prices[kind] = _parse_price(price_map.get(PRICE_KEYS[kind]))
    return prices


def normalize_record(raw: Any, provenance: Provenance | None = None) -> CardPrinting | None:
    """
    Normalize one raw record.

    Args:
        raw: Compact cache record or Scryfall card object
        provenance: Supplementary pool tag to stamp on the printing

    Returns:
        CardPrinting, or None if the record is unusable
    """
    if not isinstance(raw, dict):
        logger.debug("Dropping non-object card record: %r", type(raw).__name__)
        return None

    card_id = raw.get("id")
    name = raw.get("name")
    if not card_id or not name:
        logger.debug("Dropping card record without id/name")
        return None

    if _is_compact(raw):
        prices = _compact_prices(raw)
        frame_effects = _string_set(raw.get("frame_effects")) | frozenset(
            flag for flag in _COMPACT_FRAME_FLAGS if raw.get(flag) is True
        )
        border_color = str(raw.get("border_color") or "")
        if not border_color:
            border_color = "borderless" if raw.get("borderless") is True else "black"
        full_art = raw.get("fullart") is True
        image_url = str(raw.get("image") or "")
        detail_url = str(raw.get("uri") or "")
    else:
        prices = _scryfall_prices(raw)
        frame_effects = _string_set(raw.get("frame_effects"))
        border_color = str(raw.get("border_color") or "black")
        full_art = raw.get("full_art") is True
        image_url = _image_from_scryfall(raw)
        detail_url = str(raw.get("scryfall_uri") or "")

    printing = CardPrinting(
        id=str(card_id),
        name=str(name),
        set_code=str(raw.get("set") or "").lower(),
        collector_number=str(raw.get("collector_number") or ""),
        rarity=_parse_rarity(raw.get("rarity")),
        prices=prices,
        promo_types=_string_set(raw.get("promo_types")),
        frame_effects=frame_effects,
        border_color=border_color,
        full_art=full_art,
        promo=raw.get("promo") is True,
        booster=raw.get("booster") is True,
        image_url=image_url,
        detail_url=detail_url,
        provenance=provenance,
    )

    if not printing.has_priced_finish():
        logger.debug("Dropping %s (%s): no priced finish", printing.name, printing.id)
        return None

    return printing


def normalize_records(
    records: Iterable[Any],
    provenance: Provenance | None = None,
) -> list[CardPrinting]:
    """Normalize many records, dropping unusable ones and duplicate ids."""
    printings: list[CardPrinting] = []
    seen_ids: set[str] = set()

    for raw in records:
        printing = normalize_record(raw, provenance)
        if printing is None or printing.id in seen_ids:
            continue
        seen_ids.add(printing.id)
        printings.append(printing)

    return printings


def to_cache_record(printing: CardPrinting) -> dict[str, Any]:
    """
    Compact cache record for a printing.

    Only finishes with a price are written; normalize_record reads the
    result back into an equivalent printing.
    """
    return {
        "id": printing.id,
        "name": printing.name,
        "set": printing.set_code,
        "collector_number": printing.collector_number,
        "rarity": printing.rarity.value,
        "booster": printing.booster,
        "image": printing.image_url,
        "uri": printing.detail_url,
        "finishes": [
            {"type": kind.value, "price": price}
            for kind in printing.finishes
            if (price := printing.price_for(kind)) is not None
        ],
        "showcase": "showcase" in printing.frame_effects,
        "extendedart": "extendedart" in printing.frame_effects,
        "inverted": "inverted" in printing.frame_effects,
        "borderless": printing.border_color == "borderless",
        "fullart": printing.full_art,
        "etched": "etched" in printing.frame_effects,
        "promo": printing.promo,
        "promo_types": sorted(printing.promo_types),
        "frame_effects": sorted(printing.frame_effects),
        "border_color": printing.border_color,
    }
