"""Extractor modules for pasted netkeiba text."""

from keiba_paste.extractors.base import BaseExtractor, LineCursor, split_lines
from keiba_paste.extractors.odds import OddsExtractor, approximate_place_odds, extract_odds
from keiba_paste.extractors.race_info import RaceInfoExtractor, extract_race_info
from keiba_paste.extractors.roster import (
    Fragment,
    FragmentOutcome,
    RosterExtractor,
    extract_roster,
    resolve_display_name,
    segment_fragments,
)

__all__ = [
    "BaseExtractor",
    "Fragment",
    "FragmentOutcome",
    "LineCursor",
    "OddsExtractor",
    "RaceInfoExtractor",
    "RosterExtractor",
    "approximate_place_odds",
    "extract_odds",
    "extract_race_info",
    "extract_roster",
    "resolve_display_name",
    "segment_fragments",
    "split_lines",
]
