"""Filter state and note matching."""

from .engine import FilterEngine, FilterResult, filter_notes, match_term, narrow
from .filters import (
    FilterState,
    IncrementalFilter,
    RegexFilter,
    filter_from_text,
    switch_mode,
)

__all__ = [
    "FilterEngine",
    "FilterResult",
    "filter_notes",
    "match_term",
    "narrow",
    "FilterState",
    "IncrementalFilter",
    "RegexFilter",
    "filter_from_text",
    "switch_mode",
]
