"""RosterExtractor のテスト"""

from pathlib import Path

import pytest

from keiba_paste.extractors import (
    Fragment,
    FragmentOutcome,
    RosterExtractor,
    extract_roster,
    resolve_display_name,
    segment_fragments,
)
from keiba_paste.models import HorseRecord, ParserConfig

FIXTURES = Path(__file__).parent.parent / "fixtures"


@pytest.fixture
def roster_text():
    """8頭の出馬表"""
    return (FIXTURES / "roster_page.txt").read_text(encoding="utf-8")


@pytest.fixture
def malformed_roster_text():
    """5頭中1頭の性齢が欠けた出馬表"""
    return (FIXTURES / "roster_page_malformed.txt").read_text(encoding="utf-8")


FRAGMENT = """1 1
ロードカナロア
マインドユアビスケッツ
ビスケットラン
(Tiznow)
美浦・牧
中9週
牡5鹿
古川吉
55.0
逃げ
"""


class TestResolveDisplayName:
    """resolve_display_name関数のテスト"""

    def test_候補が複数なら2番目(self):
        assert resolve_display_name(["ロードカナロア", "マインドユアビスケッツ", "ビスケットラン"]) == "マインドユアビスケッツ"

    def test_候補が1つならそれを使う(self):
        assert resolve_display_name(["マインドユアビスケッツ"]) == "マインドユアビスケッツ"

    def test_候補がなければValueError(self):
        with pytest.raises(ValueError):
            resolve_display_name([])


class TestSegmentFragments:
    """segment_fragments関数のテスト"""

    def test_枠番馬番の行で分割する(self, roster_text):
        fragments = segment_fragments(roster_text)

        assert len(fragments) == 8
        assert [f.horse_number for f in fragments] == list(range(1, 9))
        assert all(isinstance(f, Fragment) for f in fragments)

    def test_最初の枠番行より前は無視する(self, roster_text):
        first = segment_fragments(roster_text)[0]
        assert first.start_line == 2
        assert first.lines[0] == "キズナ"

    def test_枠番行がなければ空(self):
        assert segment_fragments("馬名\n騎手") == []

    def test_フラグメント内の行番号(self):
        fragment = segment_fragments("\n" + FRAGMENT)[0]
        assert fragment.start_line == 2
        assert fragment.line_number_of(0) == 3


class TestExtractFragment:
    """1頭分のフラグメントの抽出"""

    def test_馬柱から各項目を抽出する(self):
        fragment = segment_fragments(FRAGMENT)[0]
        horse, diagnostics = RosterExtractor().extract_fragment(fragment)

        assert diagnostics == []
        assert horse.number == 1
        assert horse.name == "マインドユアビスケッツ"
        assert horse.age == 5
        assert horse.gender == "male"
        assert horse.coat_color == "鹿"
        assert horse.jockey_name == "古川吉"
        assert horse.weight_kg == 55.0
        assert horse.trainer_name == "牧"

    def test_斤量がなければ警告(self):
        fragment = segment_fragments(FRAGMENT.replace("55.0\n", ""))[0]
        horse, diagnostics = RosterExtractor().extract_fragment(fragment)

        assert horse.weight_kg is None
        assert [(d.field, d.severity) for d in diagnostics] == [("weight", "warning")]

    def test_騎手がなければエラー(self):
        fragment = segment_fragments("1 1\nロードカナロア\nマインドユアビスケッツ\n美浦・牧\n牡5鹿\n55.0\n")[0]
        horse, diagnostics = RosterExtractor().extract_fragment(fragment)

        assert horse is None
        assert [d.field for d in diagnostics if d.is_error] == ["jockey"]

    def test_調教師がなければ警告(self):
        fragment = segment_fragments(FRAGMENT.replace("美浦・牧\n", ""))[0]
        horse, diagnostics = RosterExtractor().extract_fragment(fragment)

        assert horse.trainer_name == ""
        assert [d.field for d in diagnostics] == ["trainer"]


class TestFragmentOutcome:
    """FragmentOutcomeのテスト"""

    def test_馬番があれば馬番で表示する(self):
        outcome = FragmentOutcome(None, (), line_number=25, raw="", horse_number=3)

        assert outcome.failed
        assert outcome.label == "horse #3"

    def test_馬番がなければ行番号で表示する(self):
        horse = HorseRecord(1, "ドウデュース", 3, "male", 57.0, "武豊", "友道康夫")
        outcome = FragmentOutcome(horse, (), line_number=4, raw="1 ドウデュース")

        assert not outcome.failed
        assert outcome.label == "line 4"


class TestRosterExtractor:
    """出馬表全体の抽出"""

    def test_8頭を出現順に抽出する(self, roster_text):
        result = RosterExtractor().extract(roster_text)

        assert result.success
        assert result.errors == []
        assert len(result.data) == 8
        assert [h.number for h in result.data] == list(range(1, 9))
        assert [h.name for h in result.data][:4] == [
            "ジャスティンミラノ",
            "シンエンペラー",
            "ダノンデサイル",
            "レガレイラ",
        ]

    def test_騎手と斤量(self, roster_text):
        horses = RosterExtractor().extract(roster_text).data

        regaleira = horses[3]
        assert regaleira.gender == "female"
        assert regaleira.coat_color == "黒鹿"
        assert regaleira.jockey_name == "C.ルメール"
        assert regaleira.weight_kg == 55.0
        assert regaleira.trainer_name == "木村"
        assert horses[4].jockey_name == "M.デムーロ"

    def test_不正な馬はスキップして警告1件(self, malformed_roster_text):
        result = RosterExtractor().extract(malformed_roster_text)

        assert result.success
        assert len(result.data) == 4
        assert [h.number for h in result.data] == [1, 2, 4, 5]
        horse_warnings = [d for d in result.warnings if d.kind == "HORSE_DATA"]
        assert len(horse_warnings) == 1
        assert "#3" in horse_warnings[0].message

    def test_スキップ警告はフラグメントの位置と本文を持つ(self, malformed_roster_text):
        result = RosterExtractor().extract(malformed_roster_text)

        skipped = [d for d in result.warnings if d.message.startswith("Skipped")]
        assert len(skipped) == 1
        assert skipped[0].line_number == 25
        assert "ダノンデサイル" in skipped[0].raw_snippet
        assert skipped[0].field == "genderAge"

    def test_スキップしない設定ではエラーになる(self, malformed_roster_text):
        config = ParserConfig(skip_invalid_horses=False)
        result = RosterExtractor(config).extract(malformed_roster_text)

        assert not result.success
        assert len(result.data) == 4
        assert [d.field for d in result.errors] == ["genderAge"]

    def test_馬が1頭もなければエラー(self):
        result = RosterExtractor().extract("出馬表\nデータなし")

        assert not result.success
        assert result.data == []
        assert result.errors[0].field == "general"

    def test_最大頭数を超えると警告(self, roster_text):
        config = ParserConfig(max_horses=6)
        result = RosterExtractor(config).extract(roster_text)

        assert result.success
        assert len(result.data) == 8
        assert "horseCount" in [d.field for d in result.warnings]

    def test_馬番の重複はエラー(self):
        text = FRAGMENT + "\n" + FRAGMENT
        result = RosterExtractor().extract(text)

        assert not result.success
        assert len(result.data) == 2
        duplicates = [d for d in result.errors if d.kind == "VALIDATION"]
        assert len(duplicates) == 1
        assert duplicates[0].field == "number"

    def test_同じ入力には同じ結果(self, roster_text):
        assert extract_roster(roster_text) == extract_roster(roster_text)


class TestCompactRoster:
    """1行形式の出馬表"""

    TEXT = "1 ドウデュース 牡3 57.0 武豊 友道康夫\n2 イクイノックス 牡3 57.0 ルメール 木村哲也\n"

    def test_1行1頭(self):
        result = RosterExtractor(ParserConfig(layout="compact")).extract(self.TEXT)

        assert result.success
        assert [h.name for h in result.data] == ["ドウデュース", "イクイノックス"]
        assert result.data[0].trainer_name == "友道康夫"
        assert result.data[1].weight_kg == 57.0

    def test_形式に合わない行はスキップ(self):
        text = self.TEXT + "3 ドゥラエレーデ 57.0 ムルザバエフ\n"
        result = RosterExtractor(ParserConfig(layout="compact")).extract(text)

        assert result.success
        assert len(result.data) == 2
        assert result.warnings[0].line_number == 3


class TestExtractForForm:
    """extract_for_formのテスト"""

    def test_フォーム用の辞書(self, roster_text):
        rows = RosterExtractor().extract_for_form(roster_text)

        assert len(rows) == 8
        assert rows[0] == {
            "number": 1,
            "name": "ジャスティンミラノ",
            "age": 3,
            "gender": "male",
            "weight": 57.0,
            "jockeyName": "戸崎圭",
            "trainerName": "友道",
            "ownerName": "",
        }

    def test_失敗時はValueError(self):
        with pytest.raises(ValueError, match="No valid horse data found"):
            RosterExtractor().extract_for_form("データなし")
