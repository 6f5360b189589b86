"""
Card sets and booster eras.

Which booster products exist for a set depends on when it was released:
- draft era: draft boosters only
- set era: draft/set boosters plus collector boosters
- play era: play boosters plus collector boosters
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from pullvalue.models.card import BoosterType

COLLECTOR_BOOSTER_START = date(2019, 10, 4)  # Throne of Eldraine
PLAY_BOOSTER_START = date(2024, 2, 9)  # Murders at Karlov Manor

# Jumpstart packs have no play/collector distinction
JUMPSTART_SETS = frozenset({"jmp", "j22", "j25"})


class BoosterEra(str, Enum):
    DRAFT = "draft"
    SET = "set"
    PLAY = "play"


_BOOSTER_LABELS: dict[BoosterEra, dict[BoosterType, str]] = {
    BoosterEra.DRAFT: {BoosterType.PLAY: "Draft Booster"},
    BoosterEra.SET: {
        BoosterType.PLAY: "Draft / Set Booster",
        BoosterType.COLLECTOR: "Collector Booster",
    },
    BoosterEra.PLAY: {
        BoosterType.PLAY: "Play Booster",
        BoosterType.COLLECTOR: "Collector Booster",
    },
}


def booster_era(released: date) -> BoosterEra:
    """Booster era for a release date."""
    if released >= PLAY_BOOSTER_START:
        return BoosterEra.PLAY
    if released >= COLLECTOR_BOOSTER_START:
        return BoosterEra.SET
    return BoosterEra.DRAFT


@dataclass(frozen=True, slots=True)
class CardSet:
    """A set as listed in sets.json."""

    code: str
    name: str
    released: date

    @property
    def era(self) -> BoosterEra:
        return booster_era(self.released)

    @property
    def booster_labels(self) -> dict[BoosterType, str]:
        """Available booster products and their display labels."""
        return dict(_BOOSTER_LABELS[self.era])

    def offers(self, booster_type: BoosterType) -> bool:
        return booster_type in _BOOSTER_LABELS[self.era]
