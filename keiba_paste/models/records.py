"""Parsed record DTOs.

This module provides immutable data transfer objects for the race header,
the horse roster and the odds table extracted from pasted netkeiba text.
"""

from dataclasses import dataclass
from datetime import date as RaceDate

from keiba_paste.models.types import Gender, RaceClass, Surface, TrackCondition


@dataclass(frozen=True)
class RaceInfo:
    """Represents the header of one race.

    Attributes:
        venue: The racecourse name (e.g., "東京").
        race_number: The race number within the meeting (1-12).
        title: The race name.
        distance_meters: The race distance in meters.
        surface: The track surface.
        condition: The track condition.
        race_class: The race grade or class tier.
        date: The race date, or None when the paste carried no date.
    """

    venue: str
    race_number: int
    title: str
    distance_meters: int
    surface: Surface
    condition: TrackCondition
    race_class: RaceClass
    date: RaceDate | None = None


@dataclass(frozen=True)
class HorseRecord:
    """Represents a single horse entry.

    Attributes:
        number: The horse number (umaban).
        name: The racing name of the horse.
        age: The horse's age.
        gender: The horse's sex.
        weight_kg: The weight carried (kinryo), or None if not found.
        jockey_name: The jockey's name.
        trainer_name: The trainer's name ("" when not found).
        coat_color: The coat token (e.g., "鹿"), if present.
    """

    number: int
    name: str
    age: int
    gender: Gender
    weight_kg: float | None
    jockey_name: str
    trainer_name: str
    coat_color: str | None = None


@dataclass(frozen=True)
class OddsRecord:
    """Represents the win/place odds of a single horse.

    Attributes:
        horse_number: The horse number.
        win_odds: The win (tansho) odds.
        place_odds_min: The lower bound of the place (fukusho) odds.
        place_odds_max: The upper bound of the place (fukusho) odds.
        approximated: True if one side was estimated from the other.
    """

    horse_number: int
    win_odds: float
    place_odds_min: float
    place_odds_max: float
    approximated: bool = False
