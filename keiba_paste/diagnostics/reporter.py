"""パース診断レポーターモジュール

抽出結果の診断を集計し、テキストまたは JSON 形式で出力する。
Report は診断のリストだけから導かれ、何度でも作り直せる。
"""

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime

from keiba_paste.constants import REPORT_SNIPPET_LIMIT
from keiba_paste.diagnostics.suggestions import build_suggestions
from keiba_paste.models import DIAGNOSTIC_KINDS, Diagnostic, ExtractionResult

SUCCESS_SUMMARY = "parsing completed successfully"


@dataclass(frozen=True)
class Report:
    """集計済みの診断レポート

    Attributes:
        summary: 1行の要約
        total_errors: エラー件数
        total_warnings: 警告件数
        by_kind: 種別ごとの診断（出現順）
        suggestions: 改善提案
        generated_at: 生成日時
    """

    summary: str
    total_errors: int
    total_warnings: int
    by_kind: dict[str, list[Diagnostic]] = field(default_factory=dict)
    suggestions: list[str] = field(default_factory=list)
    generated_at: datetime = field(default_factory=datetime.now)


def _summarize(errors: int, warnings: int) -> str:
    if errors == 0 and warnings == 0:
        return SUCCESS_SUMMARY
    parts = []
    if errors:
        parts.append(f"{errors} error(s) occurred")
    if warnings:
        parts.append(f"{warnings} warning(s) reported")
    return ", ".join(parts)


def _truncate(text: str, limit: int = REPORT_SNIPPET_LIMIT) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


class ParseErrorReporter:
    """パース診断のレポート出力"""

    def build_report(
        self, diagnostics: list[Diagnostic], generated_at: datetime | None = None
    ) -> Report:
        """診断リストからレポートを作る

        Args:
            diagnostics: 全診断
            generated_at: 生成日時（省略時は現在時刻）

        Returns:
            Report
        """
        by_kind: dict[str, list[Diagnostic]] = {}
        for kind in DIAGNOSTIC_KINDS:
            grouped = [d for d in diagnostics if d.kind == kind]
            if grouped:
                by_kind[kind] = grouped

        errors = sum(1 for d in diagnostics if d.is_error)
        warnings = len(diagnostics) - errors

        return Report(
            summary=_summarize(errors, warnings),
            total_errors=errors,
            total_warnings=warnings,
            by_kind=by_kind,
            suggestions=build_suggestions(diagnostics),
            generated_at=generated_at or datetime.now(),
        )

    def generate_report(
        self, results: list[ExtractionResult], generated_at: datetime | None = None
    ) -> Report:
        """複数の抽出結果の診断をまとめてレポートにする"""
        diagnostics = [d for result in results for d in result.diagnostics]
        return self.build_report(diagnostics, generated_at)

    def format_report_as_text(self, report: Report) -> str:
        """レポートをテキスト形式で返す

        Args:
            report: generate_report() の結果

        Returns:
            フォーマットされたレポート文字列
        """
        lines = [
            "=== Parse Report ===",
            f"Generated at: {report.generated_at:%Y-%m-%d %H:%M:%S}",
            f"Summary: {report.summary}",
            f"Errors: {report.total_errors}",
            f"Warnings: {report.total_warnings}",
        ]

        if report.by_kind:
            lines.append("")
            lines.append("=== Details ===")
            for kind, diagnostics in report.by_kind.items():
                lines.append(f"[{kind}] {len(diagnostics)}")
                for index, diagnostic in enumerate(diagnostics, start=1):
                    lines.append(f"  {index}. ({diagnostic.severity}) {diagnostic.message}")
                    if diagnostic.field:
                        lines.append(f"     field: {diagnostic.field}")
                    if diagnostic.line_number is not None:
                        lines.append(f"     line: {diagnostic.line_number}")
                    if diagnostic.raw_snippet:
                        lines.append(f"     raw: {_truncate(diagnostic.raw_snippet)}")

        if report.suggestions:
            lines.append("")
            lines.append("=== Suggestions ===")
            for index, suggestion in enumerate(report.suggestions, start=1):
                lines.append(f"{index}. {suggestion}")

        return "\n".join(lines)

    def format_report_as_json(self, report: Report) -> str:
        """レポートを JSON 形式で返す"""
        return json.dumps(asdict(report), ensure_ascii=False, indent=2, default=_json_default)


def _json_default(value):
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


_reporter = ParseErrorReporter()


def generate_report(
    results: list[ExtractionResult], generated_at: datetime | None = None
) -> Report:
    """See ParseErrorReporter.generate_report."""
    return _reporter.generate_report(results, generated_at)


def format_report_as_text(report: Report) -> str:
    return _reporter.format_report_as_text(report)


def format_report_as_json(report: Report) -> str:
    return _reporter.format_report_as_json(report)
