"""Odds table extractor.

Page layout (the netkeiba odds page copy):

    単勝
    枠  馬番  印  選択  馬名  オッズ
    1   1
    マインドユアビスケッツ  176.3
    ...
    複勝
    枠  馬番  印  選択  馬名  オッズ
    1   1
    マインドユアビスケッツ  27.4 - 38.0

Each marker line ("frame horse_number") is followed by a data line holding
the display name and either the win odds or the "min - max" place odds.

Compact layout: "1 3.2 1.1-1.3" or "1 8.5" per line.

Odds extraction is best effort: malformed pairs become warnings and the call
is always successful, even when no odds are found.
"""

import logging

from keiba_paste.constants import (
    ODDS_TABLE_LABELS,
    PLACE_MAX_DIVISOR,
    PLACE_MIN_DIVISOR,
    PLACE_SECTION_HEADERS,
    WIN_SECTION_HEADERS,
)
from keiba_paste.extractors.base import BaseExtractor, LineCursor, split_lines
from keiba_paste.models import Diagnostic, ExtractionResult, OddsRecord, ParserConfig
from keiba_paste.patterns import (
    COMPACT_ODDS_RE,
    COMPACT_WIN_ONLY_RE,
    match_marker_line,
    match_place_range,
    match_trailing_number,
    normalize_width,
)

logger = logging.getLogger(__name__)


def detect_section(line: str) -> str | None:
    """見出し行なら "win" / "place" を返す"""
    tokens = normalize_width(line).split()
    if not tokens:
        return None
    if tokens[0] in WIN_SECTION_HEADERS:
        return "win"
    if tokens[0] in PLACE_SECTION_HEADERS:
        return "place"
    return None


def is_table_label(line: str) -> bool:
    """「枠 馬番 印 選択 馬名 オッズ」のような列見出し行か"""
    tokens = normalize_width(line).split()
    return sum(token in ODDS_TABLE_LABELS for token in tokens) >= 2


def approximate_place_odds(win_odds: float) -> tuple[float, float]:
    """単勝オッズから複勝オッズの範囲を概算する（単勝/3 〜 単勝/2）"""
    return win_odds / PLACE_MIN_DIVISOR, win_odds / PLACE_MAX_DIVISOR


class OddsExtractor(BaseExtractor):
    """Extractor for the win/place odds table."""

    def extract(self, text: str) -> ExtractionResult[list[OddsRecord]]:
        """Extract odds records sorted by horse number.

        Args:
            text: The pasted odds block.

        Returns:
            ExtractionResult that is always successful; unparsable pairs are
            reported as ODDS_DATA warnings.
        """
        self.check_text(text)
        win: dict[int, float] = {}
        place: dict[int, tuple[float, float]] = {}
        diagnostics: list[Diagnostic] = []

        if self.config.layout == "compact":
            self._scan_compact(text, win, place, diagnostics)
        else:
            self._scan_sections(text, win, place, diagnostics)

        records = self._merge(win, place, diagnostics)
        logger.debug(
            "odds: %d win, %d place, %d records", len(win), len(place), len(records)
        )
        return ExtractionResult(records, tuple(diagnostics))

    def _scan_sections(
        self,
        text: str,
        win: dict[int, float],
        place: dict[int, tuple[float, float]],
        diagnostics: list[Diagnostic],
    ) -> None:
        cursor = LineCursor.from_text(text)
        section: str | None = None

        while not cursor.at_end:
            marker_line_number = cursor.line_number
            line = cursor.take()
            if not line.strip():
                continue

            header = detect_section(line)
            if header:
                section = header
                continue
            if is_table_label(line):
                continue

            marker = match_marker_line(line)
            if not marker:
                continue
            horse_number = marker[1]

            cursor.skip_blank()
            data_line = cursor.current
            if (
                data_line is None
                or match_marker_line(data_line)
                or detect_section(data_line)
            ):
                diagnostics.append(
                    Diagnostic.warning(
                        "ODDS_DATA",
                        "oddsLine",
                        f"Horse {horse_number}: data line missing after marker",
                        raw=line,
                        line_number=marker_line_number,
                    )
                )
                continue
            data_line_number = cursor.line_number
            cursor.advance()

            if section is None:
                diagnostics.append(
                    Diagnostic.warning(
                        "ODDS_DATA",
                        "section",
                        f"Horse {horse_number}: odds found outside a win/place section",
                        raw=data_line,
                        line_number=data_line_number,
                    )
                )
                continue

            if section == "win":
                self._read_win(horse_number, data_line, data_line_number, win, diagnostics)
            else:
                self._read_place(horse_number, data_line, data_line_number, place, diagnostics)

    def _read_win(self, horse_number, data_line, line_number, win, diagnostics) -> None:
        value = match_trailing_number(data_line)
        problem = None
        if horse_number <= 0:
            problem = f"invalid horse number {horse_number}"
        elif value is None:
            problem = "win odds not found"
        elif value < 1.0:
            problem = f"win odds {value} below 1.0"
        elif horse_number in win:
            problem = "duplicate win odds"

        if problem:
            diagnostics.append(
                Diagnostic.warning(
                    "ODDS_DATA",
                    "winOdds",
                    f"Horse {horse_number}: {problem}",
                    raw=data_line,
                    line_number=line_number,
                )
            )
            return
        win[horse_number] = value

    def _read_place(self, horse_number, data_line, line_number, place, diagnostics) -> None:
        pair = match_place_range(data_line)
        problem = None
        if horse_number <= 0:
            problem = f"invalid horse number {horse_number}"
        elif pair is None:
            problem = "place odds 'min - max' not found"
        elif pair[1] < pair[0]:
            problem = f"place odds range {pair[0]}-{pair[1]} is inverted"
        elif pair[0] < 1.0:
            problem = f"place odds {pair[0]} below 1.0"
        elif horse_number in place:
            problem = "duplicate place odds"

        if problem:
            diagnostics.append(
                Diagnostic.warning(
                    "ODDS_DATA",
                    "placeOdds",
                    f"Horse {horse_number}: {problem}",
                    raw=data_line,
                    line_number=line_number,
                )
            )
            return
        place[horse_number] = pair

    def _scan_compact(self, text, win, place, diagnostics) -> None:
        for i, raw in enumerate(split_lines(text)):
            line = normalize_width(raw).strip()
            if not line:
                continue
            line_number = i + 1

            m = COMPACT_ODDS_RE.match(line)
            if m:
                horse_number = int(m.group(1))
                self._read_win(horse_number, m.group(2), line_number, win, diagnostics)
                self._read_place(
                    horse_number, f"{m.group(3)} - {m.group(4)}", line_number, place, diagnostics
                )
                continue

            m = COMPACT_WIN_ONLY_RE.match(line)
            if m:
                self._read_win(int(m.group(1)), m.group(2), line_number, win, diagnostics)
                continue

            diagnostics.append(
                Diagnostic.warning(
                    "ODDS_DATA",
                    "oddsLine",
                    f"Line {line_number}: odds data does not match 'number win min-max'",
                    raw=line,
                    line_number=line_number,
                )
            )

    def _merge(
        self,
        win: dict[int, float],
        place: dict[int, tuple[float, float]],
        diagnostics: list[Diagnostic],
    ) -> list[OddsRecord]:
        """単勝・複勝の馬番の和集合をとり、欠けている側を補う"""
        records = []
        for number in sorted(set(win) | set(place)):
            if number in win and number in place:
                low, high = place[number]
                records.append(OddsRecord(number, win[number], low, high))
            elif number in win:
                low, high = approximate_place_odds(win[number])
                records.append(OddsRecord(number, win[number], low, high, approximated=True))
            else:
                low, high = place[number]
                diagnostics.append(
                    Diagnostic.warning(
                        "ODDS_DATA",
                        "winOdds",
                        f"Horse {number}: win odds missing; using default {self.config.default_odds}",
                    )
                )
                records.append(
                    OddsRecord(number, self.config.default_odds, low, high, approximated=True)
                )
        return records


def extract_odds(
    text: str, config: ParserConfig | None = None
) -> ExtractionResult[list[OddsRecord]]:
    """Extract odds with the given config (see OddsExtractor)."""
    return OddsExtractor(config).extract(text)
