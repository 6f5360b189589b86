"""Tests for the card record normalizer."""

from pullvalue.models.card import FinishKind, Provenance, Rarity
from pullvalue.parsers.card_records import (
    normalize_record,
    normalize_records,
    to_cache_record,
)


class TestScryfallShape:
    def test_reads_prices_per_finish(self, scryfall_card) -> None:
        """String prices are parsed for each listed finish."""
        printing = normalize_record(scryfall_card("a", usd="1.50", usd_foil="4.25"))

        assert printing is not None
        assert printing.prices == {FinishKind.NONFOIL: 1.5, FinishKind.FOIL: 4.25}
        assert printing.finishes == (FinishKind.NONFOIL, FinishKind.FOIL)

    def test_unpriced_finish_is_kept_as_none(self, scryfall_card) -> None:
        """A listed finish without a price stays present but unpriced."""
        printing = normalize_record(scryfall_card("a", usd="2.00", usd_foil=None))
        assert printing is not None

        raw = scryfall_card("b", usd="2.00")
        raw["finishes"].append("foil")
        printing = normalize_record(raw)

        assert printing is not None
        assert printing.price_for(FinishKind.FOIL) is None
        assert printing.price_for(FinishKind.NONFOIL) == 2.0

    def test_drops_record_without_any_price(self, scryfall_card) -> None:
        """Records with no positive price on any finish are dropped."""
        raw = scryfall_card("a", usd="0")
        assert normalize_record(raw) is None

    def test_drops_non_object_and_missing_id(self) -> None:
        """Unreadable records are dropped, not raised."""
        assert normalize_record("not a card") is None
        assert normalize_record({"name": "No Id", "finishes": []}) is None

    def test_unknown_rarity_becomes_common(self, scryfall_card) -> None:
        """Rarities outside the known set default to common."""
        printing = normalize_record(scryfall_card("a", usd="1", rarity="timeshifted"))
        assert printing is not None
        assert printing.rarity is Rarity.COMMON

    def test_reads_treatment_fields(self, scryfall_card) -> None:
        """Frame effects, border and promo tags are carried over."""
        raw = scryfall_card(
            "a",
            usd="5",
            frame_effects=["showcase", "legendary"],
            promo_types=["surgefoil"],
            border_color="borderless",
            full_art=True,
            promo=True,
        )
        printing = normalize_record(raw)

        assert printing is not None
        assert printing.frame_effects == frozenset({"showcase", "legendary"})
        assert printing.promo_types == frozenset({"surgefoil"})
        assert printing.border_color == "borderless"
        assert printing.full_art is True
        assert printing.promo is True

    def test_double_faced_image_uses_front_face(self, scryfall_card) -> None:
        """Cards without top-level images use the first face."""
        raw = scryfall_card("a", usd="1")
        del raw["image_uris"]
        raw["card_faces"] = [
            {"image_uris": {"normal": "https://img.example/front.jpg"}},
            {"image_uris": {"normal": "https://img.example/back.jpg"}},
        ]
        printing = normalize_record(raw)

        assert printing is not None
        assert printing.image_url == "https://img.example/front.jpg"

    def test_set_code_is_lowercased(self, scryfall_card) -> None:
        printing = normalize_record(scryfall_card("a", usd="1", set_code="MKM"))
        assert printing is not None
        assert printing.set_code == "mkm"


class TestCompactShape:
    def test_reads_compact_record(self) -> None:
        """Compact cache records map flags onto treatment fields."""
        raw = {
            "id": "c1",
            "name": "Compact Card",
            "set": "otj",
            "collector_number": "300",
            "rarity": "mythic",
            "booster": False,
            "image": "https://img.example/c1.jpg",
            "uri": "https://scryfall.com/card/otj/300",
            "finishes": [{"type": "nonfoil", "price": 12.0}, {"type": "foil", "price": 20}],
            "showcase": True,
            "extendedart": False,
            "borderless": True,
            "fullart": False,
            "etched": False,
            "promo": False,
            "promo_types": [],
        }
        printing = normalize_record(raw)

        assert printing is not None
        assert printing.rarity is Rarity.MYTHIC
        assert printing.prices == {FinishKind.NONFOIL: 12.0, FinishKind.FOIL: 20.0}
        assert printing.frame_effects == frozenset({"showcase"})
        assert printing.border_color == "borderless"
        assert printing.image_url == "https://img.example/c1.jpg"

    def test_unknown_finish_type_ignored(self) -> None:
        raw = {
            "id": "c1",
            "name": "Compact Card",
            "finishes": [{"type": "glossy", "price": 3}, {"type": "foil", "price": 2}],
        }
        printing = normalize_record(raw)

        assert printing is not None
        assert printing.finishes == (FinishKind.FOIL,)

    def test_cache_record_reads_back_equivalent(self, make_printing) -> None:
        """Writing then reading a cache record preserves the printing."""
        original = make_printing(
            "x",
            nonfoil=3.0,
            etched=9.5,
            frame_effects=frozenset({"extendedart"}),
            border_color="borderless",
            promo_types=frozenset({"surgefoil"}),
            image_url="https://img.example/x.jpg",
            detail_url="https://scryfall.com/card/mkm/1",
        )

        restored = normalize_record(to_cache_record(original))

        assert restored == original

    def test_cached_printing_matches_live(self, scryfall_card) -> None:
        """Frame effects and borders outside the boolean flags survive the cache."""
        live = normalize_record(
            scryfall_card(
                "a",
                usd="3",
                usd_foil="7",
                frame_effects=["shatteredglass", "showcase"],
                border_color="white",
                promo_types=["neonink"],
            )
        )
        assert live is not None

        record = to_cache_record(live)
        cached = normalize_record(record)

        assert record["frame_effects"] == ["shatteredglass", "showcase"]
        assert record["border_color"] == "white"
        assert cached == live

    def test_reads_flag_only_record(self) -> None:
        """Compact records without frame_effects fall back to the flags."""
        raw = {
            "id": "old",
            "name": "Old Cache Card",
            "finishes": [{"type": "nonfoil", "price": 2}],
            "extendedart": True,
            "borderless": True,
        }
        printing = normalize_record(raw)

        assert printing is not None
        assert printing.frame_effects == frozenset({"extendedart"})
        assert printing.border_color == "borderless"


class TestNormalizeRecords:
    def test_dedupes_by_id(self, scryfall_card) -> None:
        """The first occurrence of an id wins."""
        records = [
            scryfall_card("a", usd="1", name="First"),
            scryfall_card("a", usd="2", name="Second"),
            scryfall_card("b", usd="3"),
        ]
        printings = normalize_records(records)

        assert [p.id for p in printings] == ["a", "b"]
        assert printings[0].name == "First"

    def test_stamps_provenance(self, scryfall_card) -> None:
        printings = normalize_records(
            [scryfall_card("a", usd="1")], provenance=Provenance.SPECIAL_GUEST
        )
        assert printings[0].provenance is Provenance.SPECIAL_GUEST

    def test_skips_unusable_records(self, scryfall_card) -> None:
        printings = normalize_records([None, 42, scryfall_card("a", usd="1")])
        assert [p.id for p in printings] == ["a"]
