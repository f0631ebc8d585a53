"""keiba_paste.validation のテスト"""

from keiba_paste.models import HorseRecord, OddsRecord, RaceInfo
from keiba_paste.validation import (
    check_duplicate_horse_numbers,
    validate_horses,
    validate_odds,
    validate_odds_against_roster,
    validate_race_info,
)


def _race(**overrides) -> RaceInfo:
    values = dict(
        venue="東京",
        race_number=11,
        title="日本ダービー(G1)",
        distance_meters=2400,
        surface="turf",
        condition="firm",
        race_class="G1",
    )
    values.update(overrides)
    return RaceInfo(**values)


def _horse(number: int, **overrides) -> HorseRecord:
    values = dict(
        number=number,
        name=f"テストホース{number}",
        age=3,
        gender="male",
        weight_kg=57.0,
        jockey_name="武豊",
        trainer_name="友道",
    )
    values.update(overrides)
    return HorseRecord(**values)


class TestValidateRaceInfo:
    def test_正常なレース(self):
        assert validate_race_info(_race()) == []

    def test_距離の範囲外は警告(self):
        diagnostics = validate_race_info(_race(distance_meters=900))

        assert [d.field for d in diagnostics] == ["distance"]
        assert diagnostics[0].severity == "warning"
        assert diagnostics[0].kind == "VALIDATION"

    def test_レース番号の範囲外は警告(self):
        diagnostics = validate_race_info(_race(race_number=13))
        assert [d.field for d in diagnostics] == ["raceNumber"]


class TestValidateHorses:
    def test_重複した馬番ごとに1件のエラー(self):
        horses = [_horse(1), _horse(1), _horse(1), _horse(2)]
        diagnostics = check_duplicate_horse_numbers(horses)

        assert len(diagnostics) == 1
        assert diagnostics[0].is_error
        assert "3 times" in diagnostics[0].message

    def test_値域外は警告(self):
        diagnostics = validate_horses([_horse(19, age=1, weight_kg=70.0)])

        assert {d.field for d in diagnostics} == {"number", "age", "weight"}
        assert all(not d.is_error for d in diagnostics)

    def test_斤量なしは検査しない(self):
        assert validate_horses([_horse(1, weight_kg=None)]) == []


class TestValidateOdds:
    def test_正常なオッズ(self):
        assert validate_odds([OddsRecord(1, 2.2, 1.1, 1.3)]) == []

    def test_範囲の逆転はエラー(self):
        diagnostics = validate_odds([OddsRecord(1, 2.2, 1.3, 1.1)])

        assert [d.field for d in diagnostics] == ["placeOdds"]
        assert diagnostics[0].is_error

    def test_概算値は1未満を許容する(self):
        assert validate_odds([OddsRecord(1, 1.5, 0.5, 0.75, approximated=True)]) == []

    def test_実測値の1未満はエラー(self):
        diagnostics = validate_odds([OddsRecord(1, 0.9, 1.1, 1.3)])
        assert [d.field for d in diagnostics] == ["winOdds"]

    def test_馬番の重複はエラー(self):
        diagnostics = validate_odds([OddsRecord(1, 2.2, 1.1, 1.3), OddsRecord(1, 3.0, 1.2, 1.5)])
        assert [d.field for d in diagnostics] == ["horseNumber"]


class TestValidateOddsAgainstRoster:
    def test_馬番の突き合わせ(self):
        odds = [OddsRecord(1, 2.2, 1.1, 1.3), OddsRecord(9, 30.0, 5.0, 8.0)]
        diagnostics = validate_odds_against_roster(odds, [_horse(1), _horse(2)])

        messages = [d.message for d in diagnostics]
        assert messages == [
            "Odds listed for horse 9 which is not in the roster",
            "No odds found for horse 2",
        ]
        assert all(d.severity == "warning" for d in diagnostics)
