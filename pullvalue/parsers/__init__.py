from pullvalue.parsers.card_records import (
    normalize_record,
    normalize_records,
    to_cache_record,
)
from pullvalue.parsers.eligibility_config import (
    parse_exclusivity_tags,
    parse_set_configs,
)

__all__ = [
    "normalize_record",
    "normalize_records",
    "parse_exclusivity_tags",
    "parse_set_configs",
    "to_cache_record",
]
