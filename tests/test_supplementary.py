"""Tests for supplementary pool selection."""

from pullvalue.models.card import Provenance
from pullvalue.models.eligibility import CollectorNumberRange
from pullvalue.services.supplementary import (
    BREAKING_NEWS,
    SPECIAL_GUESTS,
    THE_BIG_SCORE,
    pools_for,
    source_sets,
)


class TestPoolsFor:
    def test_special_guests_need_toggle(self) -> None:
        assert pools_for("mkm", include_toggleable=False) == []
        assert pools_for("mkm", include_toggleable=True) == [SPECIAL_GUESTS]

    def test_bonus_sheets_always_apply(self) -> None:
        assert pools_for("otj", include_toggleable=False) == [THE_BIG_SCORE, BREAKING_NEWS]
        assert pools_for("OTJ", include_toggleable=True) == [
            SPECIAL_GUESTS,
            THE_BIG_SCORE,
            BREAKING_NEWS,
        ]

    def test_set_without_pools(self) -> None:
        assert pools_for("woe", include_toggleable=True) == []


class TestPoolRanges:
    def test_host_slice(self) -> None:
        assert SPECIAL_GUESTS.ranges_for("otj") == (CollectorNumberRange(29, 38),)
        assert SPECIAL_GUESTS.ranges_for("woe") == ()

    def test_whole_set_pool(self) -> None:
        assert THE_BIG_SCORE.augments("otj")
        assert THE_BIG_SCORE.ranges_for("otj") == ()
        assert THE_BIG_SCORE.provenance is Provenance.BONUS_SHEET

    def test_source_sets(self) -> None:
        assert source_sets() == {
            "spg": "Special Guests",
            "big": "The Big Score",
            "otp": "Breaking News",
        }
