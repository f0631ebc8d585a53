"""診断レポートモジュール"""

from keiba_paste.diagnostics.reporter import (
    SUCCESS_SUMMARY,
    ParseErrorReporter,
    Report,
    format_report_as_json,
    format_report_as_text,
    generate_report,
)
from keiba_paste.diagnostics.suggestions import build_suggestions

__all__ = [
    "SUCCESS_SUMMARY",
    "ParseErrorReporter",
    "Report",
    "build_suggestions",
    "format_report_as_json",
    "format_report_as_text",
    "generate_report",
]
