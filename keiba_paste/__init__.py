"""netkeiba 貼り付けテキスト解析パッケージ

netkeiba のページからコピーしたレース情報・出馬表・オッズ表のテキストを
構造化レコードに変換し、診断レポートを作成する。
"""

from keiba_paste.diagnostics import (
    ParseErrorReporter,
    Report,
    format_report_as_json,
    format_report_as_text,
    generate_report,
)
from keiba_paste.extractors import (
    OddsExtractor,
    RaceInfoExtractor,
    RosterExtractor,
    extract_odds,
    extract_race_info,
    extract_roster,
    resolve_display_name,
)
from keiba_paste.models import (
    Diagnostic,
    ExtractionResult,
    HorseRecord,
    OddsRecord,
    ParserConfig,
    RaceInfo,
)
from keiba_paste.pipeline import PasteParseOutcome, RawPaste, parse_paste

__version__ = "0.1.0"

__all__ = [
    "Diagnostic",
    "ExtractionResult",
    "HorseRecord",
    "OddsExtractor",
    "OddsRecord",
    "ParseErrorReporter",
    "ParserConfig",
    "PasteParseOutcome",
    "RaceInfo",
    "RaceInfoExtractor",
    "RawPaste",
    "Report",
    "RosterExtractor",
    "extract_odds",
    "extract_race_info",
    "extract_roster",
    "format_report_as_json",
    "format_report_as_text",
    "generate_report",
    "parse_paste",
    "resolve_display_name",
]
