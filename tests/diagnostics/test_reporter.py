"""ParseErrorReporterのテスト"""

import json
from datetime import datetime

import pytest

from keiba_paste.diagnostics import (
    SUCCESS_SUMMARY,
    ParseErrorReporter,
    build_suggestions,
    format_report_as_json,
    format_report_as_text,
    generate_report,
)
from keiba_paste.diagnostics.suggestions import GENERAL_SUGGESTIONS
from keiba_paste.models import Diagnostic, ExtractionResult

GENERATED_AT = datetime(2024, 5, 26, 15, 40, 0)


class TestParseErrorReporter:
    """ParseErrorReporterのテスト"""

    @pytest.fixture
    def reporter(self) -> ParseErrorReporter:
        return ParseErrorReporter()

    @pytest.fixture
    def sample_results(self) -> list[ExtractionResult]:
        """テスト用の抽出結果"""
        return [
            ExtractionResult(
                None,
                (
                    Diagnostic.error("RACE_INFO", "venue", "Venue name not found", raw="第5R 3歳未勝利"),
                    Diagnostic.warning("RACE_INFO", "date", "Race date not found"),
                ),
            ),
            ExtractionResult(
                [],
                (Diagnostic.warning("ODDS_DATA", "winOdds", "Horse 3: win odds not found", line_number=7),),
            ),
            ExtractionResult(
                [],
                (Diagnostic.warning("HORSE_DATA", "genderAge", "Skipped horse #3"),),
            ),
        ]

    def test_診断がなければ成功メッセージ(self, reporter):
        report = reporter.generate_report([ExtractionResult("ok")])

        assert report.summary == SUCCESS_SUMMARY
        assert report.summary == "parsing completed successfully"
        assert report.total_errors == 0
        assert report.total_warnings == 0
        assert report.by_kind == {}
        assert report.suggestions == []

    def test_件数の集計(self, reporter, sample_results):
        report = reporter.generate_report(sample_results, GENERATED_AT)

        assert report.total_errors == 1
        assert report.total_warnings == 3
        assert report.summary == "1 error(s) occurred, 3 warning(s) reported"
        assert report.generated_at == GENERATED_AT

    def test_警告だけの要約(self, reporter):
        report = reporter.build_report([Diagnostic.warning("RACE_INFO", "date", "Race date not found")])
        assert report.summary == "1 warning(s) reported"

    def test_種別ごとのグループは固定順(self, reporter, sample_results):
        report = reporter.generate_report(sample_results)

        assert list(report.by_kind) == ["RACE_INFO", "HORSE_DATA", "ODDS_DATA"]
        assert len(report.by_kind["RACE_INFO"]) == 2

    def test_エラーがあれば一般的な提案を追加(self, reporter, sample_results):
        report = reporter.generate_report(sample_results)

        assert report.suggestions[0].startswith("Check the venue name")
        assert report.suggestions[-len(GENERAL_SUGGESTIONS):] == list(GENERAL_SUGGESTIONS)

    def test_同じ入力には同じレポート(self, reporter, sample_results):
        first = reporter.generate_report(sample_results, GENERATED_AT)
        second = reporter.generate_report(sample_results, GENERATED_AT)
        assert first == second


class TestFormatReport:
    """テキスト・JSON出力"""

    def test_テキスト形式(self):
        diagnostics = [
            Diagnostic.error("RACE_INFO", "distance", "Distance and surface not found", raw="東京 第11R"),
            Diagnostic.warning("ODDS_DATA", "winOdds", "Horse 3: win odds not found", line_number=7),
        ]
        report = ParseErrorReporter().build_report(diagnostics, GENERATED_AT)
        text = format_report_as_text(report)

        assert "=== Parse Report ===" in text
        assert "Generated at: 2024-05-26 15:40:00" in text
        assert "Errors: 1" in text
        assert "Warnings: 1" in text
        assert "[RACE_INFO] 1" in text
        assert "  1. (error) Distance and surface not found" in text
        assert "     raw: 東京 第11R" in text
        assert "     line: 7" in text
        assert "=== Suggestions ===" in text

    def test_生データは50文字で切り詰める(self):
        raw = "あ" * 60
        report = generate_report(
            [ExtractionResult(None, (Diagnostic.error("RACE_INFO", "venue", "Venue name not found", raw=raw),))]
        )
        text = format_report_as_text(report)

        assert f"raw: {'あ' * 50}..." in text
        assert "あ" * 51 not in text

    def test_成功時のテキストに詳細はない(self):
        text = format_report_as_text(generate_report([], GENERATED_AT))

        assert "Summary: parsing completed successfully" in text
        assert "=== Details ===" not in text
        assert "=== Suggestions ===" not in text

    def test_JSON形式(self):
        diagnostics = [Diagnostic.error("RACE_INFO", "venue", "Venue name not found", raw="第5R")]
        report = ParseErrorReporter().build_report(diagnostics, GENERATED_AT)
        data = json.loads(format_report_as_json(report))

        assert data["total_errors"] == 1
        assert data["generated_at"] == "2024-05-26T15:40:00"
        assert data["by_kind"]["RACE_INFO"][0]["field"] == "venue"
        assert data["by_kind"]["RACE_INFO"][0]["raw_snippet"] == "第5R"

    def test_JSONは日本語をエスケープしない(self):
        diagnostics = [Diagnostic.warning("HORSE_DATA", "trainer", "調教師が見つかりません")]
        output = format_report_as_json(ParseErrorReporter().build_report(diagnostics))
        assert "調教師が見つかりません" in output


class TestBuildSuggestions:
    """build_suggestions関数のテスト"""

    def test_警告だけなら一般的な提案はない(self):
        suggestions = build_suggestions([Diagnostic.warning("RACE_INFO", "date", "Race date not found")])

        assert suggestions == ["Check that the date is written like 2024年5月26日"]

    def test_項目に応じた提案(self):
        suggestions = build_suggestions(
            [Diagnostic.warning("HORSE_DATA", "trainer", "trainer not found")]
        )
        assert any("美浦・牧" in s for s in suggestions)

    def test_提案は重複しない(self):
        diagnostics = [
            Diagnostic.error("RACE_INFO", "venue", "Venue name not found"),
            Diagnostic.error("RACE_INFO", "venue", "Venue name not found"),
        ]
        suggestions = build_suggestions(diagnostics)
        assert len(suggestions) == len(set(suggestions))

    def test_診断がなければ空(self):
        assert build_suggestions([]) == []
