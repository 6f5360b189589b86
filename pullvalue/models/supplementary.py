from dataclasses import dataclass, field

from pullvalue.models.card import Provenance
from pullvalue.models.eligibility import CollectorNumberRange


@dataclass(frozen=True, slots=True)
class SupplementaryPool:
    """
    A side-list of printings that appear in another set's packs.

    Attributes:
        name: Display name ("Special Guests")
        source_set: Set code the printings are actually filed under
        provenance: Tag applied to every printing pulled from this pool
        host_ranges: Host set code -> collector-number ranges within
            source_set. An empty tuple means the whole source set.
        toggleable: Governed by the user's supplementary-inclusion toggle.
            Pools that are part of every pack are not.
    """

    name: str
    source_set: str
    provenance: Provenance
    host_ranges: dict[str, tuple[CollectorNumberRange, ...]] = field(default_factory=dict)
    toggleable: bool = True

    def augments(self, set_code: str) -> bool:
        return set_code.lower() in self.host_ranges

    def ranges_for(self, set_code: str) -> tuple[CollectorNumberRange, ...]:
        return self.host_ranges.get(set_code.lower(), ())
