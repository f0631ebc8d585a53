"""貼り付け全体の解析

レース情報・出馬表・オッズの3ブロックをまとめて解析し、項目間の
検証とレポート作成までを行う。各抽出器は独立しているので、空の
ブロックは単に読み飛ばす。
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from keiba_paste.diagnostics import ParseErrorReporter, Report
from keiba_paste.extractors import OddsExtractor, RaceInfoExtractor, RosterExtractor
from keiba_paste.models import (
    Diagnostic,
    ExtractionResult,
    HorseRecord,
    OddsRecord,
    ParserConfig,
    RaceInfo,
)
from keiba_paste.validation import (
    validate_horses,
    validate_odds,
    validate_odds_against_roster,
    validate_race_info,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawPaste:
    """netkeiba からコピーした生テキスト一式

    Attributes:
        race_info: レース情報ブロック
        roster: 出馬表ブロック
        odds: オッズ表ブロック
    """

    race_info: str = ""
    roster: str = ""
    odds: str = ""


@dataclass(frozen=True)
class PasteParseOutcome:
    """貼り付け全体の解析結果

    Attributes:
        race: レース情報の抽出結果（ブロックが空なら None）
        roster: 出馬表の抽出結果（ブロックが空なら None）
        odds: オッズの抽出結果（ブロックが空なら None）
        cross_checks: 抽出後の検証結果
        report: 全診断のレポート
    """

    race: ExtractionResult[RaceInfo] | None
    roster: ExtractionResult[list[HorseRecord]] | None
    odds: ExtractionResult[list[OddsRecord]] | None
    cross_checks: ExtractionResult[None] = field(default_factory=lambda: ExtractionResult(None))
    report: Report | None = None

    @property
    def results(self) -> list[ExtractionResult]:
        found = [r for r in (self.race, self.roster, self.odds) if r is not None]
        return found + [self.cross_checks]

    @property
    def success(self) -> bool:
        return all(r.success for r in self.results)


def cross_check(
    race: RaceInfo | None,
    horses: list[HorseRecord] | None,
    odds: list[OddsRecord] | None,
) -> list[Diagnostic]:
    """抽出済みデータの値域と馬番の整合性を検証する

    馬番の重複は出馬表の抽出時に報告済みなので、ここでは値域のみ見る。
    """
    diagnostics: list[Diagnostic] = []
    if race is not None:
        diagnostics.extend(validate_race_info(race))
    if horses:
        diagnostics.extend(d for d in validate_horses(horses) if not d.is_error)
    if odds:
        diagnostics.extend(validate_odds(odds))
    if horses and odds:
        diagnostics.extend(validate_odds_against_roster(odds, horses))
    return diagnostics


def parse_paste(
    raw: RawPaste,
    config: ParserConfig | None = None,
    generated_at: datetime | None = None,
) -> PasteParseOutcome:
    """3ブロックをまとめて解析する

    Args:
        raw: 貼り付けテキスト一式
        config: パーサー設定
        generated_at: レポートの生成日時（省略時は現在時刻）

    Returns:
        PasteParseOutcome
    """
    config = config or ParserConfig()

    race = RaceInfoExtractor(config).extract(raw.race_info) if raw.race_info.strip() else None
    roster = RosterExtractor(config).extract(raw.roster) if raw.roster.strip() else None
    odds = OddsExtractor(config).extract(raw.odds) if raw.odds.strip() else None

    checks = ExtractionResult(
        None,
        tuple(
            cross_check(
                race.data if race else None,
                roster.data if roster else None,
                odds.data if odds else None,
            )
        ),
    )

    outcome = PasteParseOutcome(race=race, roster=roster, odds=odds, cross_checks=checks)
    report = ParseErrorReporter().generate_report(outcome.results, generated_at)
    logger.debug("paste parsed: %s", report.summary)

    return PasteParseOutcome(
        race=race, roster=roster, odds=odds, cross_checks=checks, report=report
    )
