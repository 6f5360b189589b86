"""Tests for the booster eligibility classifier."""

import pytest

from pullvalue.models.card import BoosterType, Provenance
from pullvalue.models.eligibility import (
    CollectorNumberRange,
    EligibilityRules,
    ExclusivityTags,
    SetEligibility,
    collector_number_value,
)
from pullvalue.services.eligibility import (
    EligibilityReason,
    classify,
    filter_eligible,
    is_eligible,
)


@pytest.fixture
def override_rules() -> EligibilityRules:
    """MKM with a curated play list and a collector-exclusive range."""
    return EligibilityRules(
        sets={
            "mkm": SetEligibility(
                play_includes=(CollectorNumberRange(1, 99), CollectorNumberRange(342, 342)),
                collector_exclusive=(CollectorNumberRange(100, 120),),
            )
        }
    )


class TestCollectorNumbers:
    def test_leading_digits(self) -> None:
        """Only the leading digits count."""
        assert collector_number_value("12a") == 12
        assert collector_number_value("0350") == 350

    def test_non_numeric(self) -> None:
        assert collector_number_value("★12") is None
        assert collector_number_value("") is None

    def test_parse_single_and_range(self) -> None:
        assert CollectorNumberRange.parse("342") == CollectorNumberRange(342, 342)
        assert CollectorNumberRange.parse(" 1-286 ") == CollectorNumberRange(1, 286)

    def test_parse_rejects_garbage(self) -> None:
        with pytest.raises(ValueError):
            CollectorNumberRange.parse("abc")
        with pytest.raises(ValueError):
            CollectorNumberRange.parse("20-10")
        with pytest.raises(ValueError):
            CollectorNumberRange.parse("1-2-3")

    def test_contains_is_inclusive(self) -> None:
        r = CollectorNumberRange(100, 120)
        assert r.contains("100")
        assert r.contains("120")
        assert r.contains("110b")
        assert not r.contains("121")
        assert not r.contains("★110")


class TestCollectorBooster:
    def test_everything_is_eligible(self, make_printing, override_rules) -> None:
        """Collector boosters contain every printing of the set."""
        printing = make_printing(
            collector_number="110",
            booster=False,
            promo_types=frozenset({"surgefoil"}),
        )

        included, reason = classify(printing, BoosterType.COLLECTOR, override_rules)

        assert included is True
        assert reason is EligibilityReason.COLLECTOR_PRODUCT


class TestPlayBooster:
    def test_collector_exclusive_range_excluded(self, make_printing, override_rules) -> None:
        """A number inside the collector-exclusive range is excluded from play."""
        printing = make_printing(collector_number="110", nonfoil=30.0)

        included, reason = classify(printing, BoosterType.PLAY, override_rules)

        assert included is False
        assert reason is EligibilityReason.COLLECTOR_EXCLUSIVE_OVERRIDE

    def test_play_override_wins_over_tags(self, make_printing, override_rules) -> None:
        """A curated play listing beats the generic exclusive-tag heuristic."""
        printing = make_printing(
            collector_number="342",
            booster=False,
            frame_effects=frozenset({"extendedart"}),
        )

        included, reason = classify(printing, BoosterType.PLAY, override_rules)

        assert included is True
        assert reason is EligibilityReason.PLAY_OVERRIDE

    def test_play_override_wins_over_exclusive_range(self, make_printing) -> None:
        """When both ranges match, the play listing decides."""
        rules = EligibilityRules(
            sets={
                "mkm": SetEligibility(
                    play_includes=(CollectorNumberRange(100, 105),),
                    collector_exclusive=(CollectorNumberRange(100, 120),),
                )
            }
        )
        assert is_eligible(make_printing(collector_number="103"), BoosterType.PLAY, rules)
        assert not is_eligible(make_printing(collector_number="110"), BoosterType.PLAY, rules)

    def test_supplementary_always_included(self, make_printing, override_rules) -> None:
        """Supplementary pool printings bypass every other rule."""
        printing = make_printing(
            set_code="spg",
            collector_number="30",
            booster=False,
            promo_types=frozenset({"surgefoil"}),
            provenance=Provenance.SPECIAL_GUEST,
        )

        included, reason = classify(printing, BoosterType.PLAY, override_rules)

        assert included is True
        assert reason is EligibilityReason.SUPPLEMENTARY_POOL

    def test_exclusive_frame_excluded_without_override(self, make_printing, default_rules) -> None:
        """Extended art is collector-exclusive even when flagged as in boosters."""
        printing = make_printing(
            set_code="woe",
            booster=True,
            frame_effects=frozenset({"extendedart"}),
        )

        included, reason = classify(printing, BoosterType.PLAY, default_rules)

        assert included is False
        assert reason is EligibilityReason.EXCLUSIVE_TAGS

    def test_exclusive_promo_excluded(self, make_printing, default_rules) -> None:
        printing = make_printing(promo_types=frozenset({"galaxyfoil"}))
        assert not is_eligible(printing, BoosterType.PLAY, default_rules)

    def test_falls_back_to_booster_flag(self, make_printing, default_rules) -> None:
        """Without overrides or exclusive tags the upstream flag decides."""
        in_boosters = make_printing("a", booster=True)
        not_in_boosters = make_printing("b", booster=False)

        assert classify(in_boosters, BoosterType.PLAY, default_rules) == (
            True,
            EligibilityReason.BOOSTER_FLAG,
        )
        assert classify(not_in_boosters, BoosterType.PLAY, default_rules) == (
            False,
            EligibilityReason.BOOSTER_FLAG,
        )

    def test_number_outside_override_uses_heuristic(self, make_printing, override_rules) -> None:
        """Numbers matched by neither override list fall through to rule 5."""
        printing = make_printing(collector_number="200", booster=True)

        included, reason = classify(printing, BoosterType.PLAY, override_rules)

        assert included is True
        assert reason is EligibilityReason.BOOSTER_FLAG

    def test_custom_tags(self, make_printing) -> None:
        """Loaded tags replace the fallback lists."""
        rules = EligibilityRules(tags=ExclusivityTags(promos=frozenset({"neonink"}), frames=frozenset()))

        assert not is_eligible(
            make_printing(promo_types=frozenset({"neonink"})), BoosterType.PLAY, rules
        )
        assert is_eligible(
            make_printing(frame_effects=frozenset({"extendedart"})), BoosterType.PLAY, rules
        )


class TestFilterEligible:
    def test_keeps_order(self, make_printing, default_rules) -> None:
        printings = [
            make_printing("a"),
            make_printing("b", booster=False),
            make_printing("c"),
        ]

        kept = filter_eligible(printings, BoosterType.PLAY, default_rules)

        assert [p.id for p in kept] == ["a", "c"]

    def test_collector_keeps_all(self, make_printing, default_rules) -> None:
        printings = [make_printing("a"), make_printing("b", booster=False)]
        assert len(filter_eligible(printings, BoosterType.COLLECTOR, default_rules)) == 2


class TestEligibilityRules:
    def test_lookup_is_case_insensitive(self, override_rules) -> None:
        assert override_rules.for_set("MKM") is not None
        assert override_rules.for_set("otj") is None

    def test_has_play_override(self) -> None:
        rules = EligibilityRules(
            sets={
                "mkm": SetEligibility(play_includes=(CollectorNumberRange(1, 10),)),
                "otj": SetEligibility(collector_exclusive=(CollectorNumberRange(1, 10),)),
            }
        )
        assert rules.has_play_override("mkm")
        assert not rules.has_play_override("otj")
        assert not rules.has_play_override("blb")

    def test_sets_are_read_only(self, override_rules) -> None:
        with pytest.raises(TypeError):
            override_rules.sets["blb"] = SetEligibility()  # type: ignore[index]
