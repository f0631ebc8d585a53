"""抽出後の項目間バリデーション

抽出済みのレコードに対して不変条件を検査し、VALIDATION 種別の
診断を返す。重複馬番・複勝オッズ範囲の逆転はエラー、値域外は警告。
"""

from collections import Counter

from keiba_paste.constants import (
    HORSE_AGE_RANGE,
    HORSE_NUMBER_RANGE,
    HORSE_WEIGHT_RANGE,
    RACE_DISTANCE_RANGE,
    RACE_NUMBER_RANGE,
)
from keiba_paste.models import Diagnostic, HorseRecord, OddsRecord, RaceInfo


def _out_of_range(value: float, bounds: tuple[float, float]) -> bool:
    low, high = bounds
    return not (low <= value <= high)


def check_duplicate_horse_numbers(horses: list[HorseRecord]) -> list[Diagnostic]:
    """重複した馬番ごとに1件のエラーを返す"""
    counts = Counter(horse.number for horse in horses)
    return [
        Diagnostic.error(
            "VALIDATION",
            "number",
            f"Horse number {number} appears {count} times",
        )
        for number, count in counts.items()
        if count > 1
    ]


def validate_race_info(race: RaceInfo) -> list[Diagnostic]:
    """レース情報の値域チェック"""
    diagnostics = []

    if not race.venue.strip():
        diagnostics.append(Diagnostic.warning("VALIDATION", "venue", "Venue name is empty"))

    if _out_of_range(race.distance_meters, RACE_DISTANCE_RANGE):
        low, high = RACE_DISTANCE_RANGE
        diagnostics.append(
            Diagnostic.warning(
                "VALIDATION",
                "distance",
                f"Distance {race.distance_meters}m is outside {low}m-{high}m",
            )
        )

    if _out_of_range(race.race_number, RACE_NUMBER_RANGE):
        low, high = RACE_NUMBER_RANGE
        diagnostics.append(
            Diagnostic.warning(
                "VALIDATION",
                "raceNumber",
                f"Race number {race.race_number} is outside {low}-{high}",
            )
        )

    return diagnostics


def validate_horses(horses: list[HorseRecord]) -> list[Diagnostic]:
    """出走馬リストの重複・値域チェック"""
    diagnostics = check_duplicate_horse_numbers(horses)

    for horse in horses:
        if _out_of_range(horse.number, HORSE_NUMBER_RANGE):
            diagnostics.append(
                Diagnostic.warning(
                    "VALIDATION", "number", f"Horse number {horse.number} is out of range"
                )
            )
        if _out_of_range(horse.age, HORSE_AGE_RANGE):
            diagnostics.append(
                Diagnostic.warning(
                    "VALIDATION", "age", f"Horse #{horse.number}: age {horse.age} is out of range"
                )
            )
        if horse.weight_kg is not None and _out_of_range(horse.weight_kg, HORSE_WEIGHT_RANGE):
            diagnostics.append(
                Diagnostic.warning(
                    "VALIDATION",
                    "weight",
                    f"Horse #{horse.number}: weight {horse.weight_kg}kg is out of range",
                )
            )

    return diagnostics


def validate_odds(odds: list[OddsRecord]) -> list[Diagnostic]:
    """オッズの不変条件チェック

    概算で埋めた値（approximated=True）は 1.0 未満を許容する。
    """
    diagnostics = []

    counts = Counter(record.horse_number for record in odds)
    for number, count in counts.items():
        if count > 1:
            diagnostics.append(
                Diagnostic.error(
                    "VALIDATION", "horseNumber", f"Odds for horse {number} appear {count} times"
                )
            )

    for record in odds:
        if record.horse_number <= 0:
            diagnostics.append(
                Diagnostic.error(
                    "VALIDATION", "horseNumber", f"Invalid horse number {record.horse_number}"
                )
            )
        if record.place_odds_max < record.place_odds_min:
            diagnostics.append(
                Diagnostic.error(
                    "VALIDATION",
                    "placeOdds",
                    f"Horse #{record.horse_number}: place odds range "
                    f"{record.place_odds_min}-{record.place_odds_max} is inverted",
                )
            )
        if record.approximated:
            continue
        if record.win_odds < 1.0:
            diagnostics.append(
                Diagnostic.error(
                    "VALIDATION", "winOdds", f"Horse #{record.horse_number}: win odds below 1.0"
                )
            )
        if record.place_odds_min < 1.0:
            diagnostics.append(
                Diagnostic.error(
                    "VALIDATION", "placeOdds", f"Horse #{record.horse_number}: place odds below 1.0"
                )
            )

    return diagnostics


def validate_odds_against_roster(
    odds: list[OddsRecord], horses: list[HorseRecord]
) -> list[Diagnostic]:
    """オッズ表と出走馬リストの馬番の突き合わせ"""
    roster_numbers = {horse.number for horse in horses}
    odds_numbers = {record.horse_number for record in odds}
    diagnostics = []

    for number in sorted(odds_numbers - roster_numbers):
        diagnostics.append(
            Diagnostic.warning(
                "VALIDATION", "horseNumber", f"Odds listed for horse {number} which is not in the roster"
            )
        )
    for number in sorted(roster_numbers - odds_numbers):
        diagnostics.append(
            Diagnostic.warning("VALIDATION", "horseNumber", f"No odds found for horse {number}")
        )

    return diagnostics
