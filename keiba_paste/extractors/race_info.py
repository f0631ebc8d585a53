"""Race header extractor.

This module turns the race header block copied from netkeiba into a single
RaceInfo record. Two layouts are supported and selected through
``ParserConfig.layout``:

- "page": the multi-line race page copy. Fields are found anywhere in the
  block, the title comes from the first line, and a missing race number falls
  back to DEFAULT_RACE_NUMBER with a warning.
- "compact": a one-line header such as
  "東京競馬場 第11R 日本ダービー(G1) 芝2400m 良 2024年5月26日". The race
  number and the title are keyed on the "R" marker and are required.
"""

import logging
import re

from keiba_paste.constants import DEFAULT_RACE_NUMBER
from keiba_paste.extractors.base import BaseExtractor, split_lines
from keiba_paste.models import Diagnostic, ExtractionResult, ParserConfig, RaceInfo
from keiba_paste.patterns import (
    match_compact_title,
    match_date,
    match_distance_and_surface,
    match_race_class,
    match_race_number,
    match_track_condition,
    match_venue,
)

logger = logging.getLogger(__name__)

# 欠けると常に抽出を中止する項目
CRITICAL_FIELDS: dict[str, frozenset[str]] = {
    "page": frozenset({"venue", "distance"}),
    "compact": frozenset({"venue", "raceNumber", "distance"}),
}

DEFAULT_CONDITION = "firm"
DEFAULT_RACE_CLASS = "Open"

# タイトル抽出時に取り除く項目
_TITLE_NOISE_MATCHERS = (
    match_venue,
    match_race_number,
    match_distance_and_surface,
    match_track_condition,
    match_date,
)


def _strip_fields(line: str) -> str:
    """行から会場・レース番号・距離・馬場・日付のトークンを取り除く"""
    remainder = line
    for matcher in _TITLE_NOISE_MATCHERS:
        found = matcher(remainder)
        if found:
            remainder = found.remainder
    return re.sub(r"\s+", " ", remainder).strip(" /|")


def extract_page_title(text: str) -> str:
    """先頭行からレース名を取り出す

    先頭行から既知の項目トークンを除いた残りをレース名とする。
    残りが空の行（「11R」だけの行など）は読み飛ばして次の行を見る。
    """
    for line in split_lines(text):
        if not line.strip():
            continue
        title = _strip_fields(line)
        if title:
            return title
    return ""


class RaceInfoExtractor(BaseExtractor):
    """Extractor for the race header block.

    Example:
        >>> extractor = RaceInfoExtractor()
        >>> result = extractor.extract("東京 第11R 日本ダービー(G1) 芝2400m 良 2024年5月26日")
        >>> result.data.venue, result.data.distance_meters
        ('東京', 2400)
    """

    def extract(self, text: str) -> ExtractionResult[RaceInfo]:
        """Extract a RaceInfo from one race header block.

        Args:
            text: The pasted header block.

        Returns:
            ExtractionResult with the RaceInfo, or with data=None when a
            blocking error was found.
        """
        self.check_text(text)
        layout = self.config.layout
        diagnostics: list[Diagnostic] = []

        venue = match_venue(text)
        distance = match_distance_and_surface(text)
        condition = match_track_condition(text)
        race_class = match_race_class(text)
        race_date = match_date(text)
        race_number = match_race_number(text)

        if not venue:
            diagnostics.append(
                Diagnostic.error("RACE_INFO", "venue", "Venue name not found", raw=text)
            )

        if not race_number:
            if layout == "compact":
                diagnostics.append(
                    Diagnostic.error("RACE_INFO", "raceNumber", "Race number marker not found", raw=text)
                )
            else:
                diagnostics.append(
                    Diagnostic.warning(
                        "RACE_INFO",
                        "raceNumber",
                        f"Race number marker not found; defaulting to {DEFAULT_RACE_NUMBER}",
                        raw=text,
                    )
                )

        if layout == "compact":
            title = match_compact_title(text)
            if title is None:
                diagnostics.append(self._soft_error("title", "Race title not found", text))
        else:
            title = extract_page_title(text)

        if not distance:
            diagnostics.append(
                Diagnostic.error("RACE_INFO", "distance", "Distance and surface not found", raw=text)
            )

        if not condition:
            diagnostics.append(
                Diagnostic.warning(
                    "RACE_INFO", "condition", "Track condition not found; defaulting to firm", raw=text
                )
            )

        if not race_class:
            diagnostics.append(
                Diagnostic.warning(
                    "RACE_INFO", "raceClass", "Race class not found; defaulting to Open", raw=text
                )
            )

        if not race_date:
            if layout == "compact":
                diagnostics.append(self._soft_error("date", "Race date not found", text))
            else:
                diagnostics.append(
                    Diagnostic.warning("RACE_INFO", "date", "Race date not found; leaving it empty", raw=text)
                )

        logger.debug(
            "race info (%s layout): %d diagnostics", layout, len(diagnostics)
        )

        if self._should_abort(diagnostics):
            return ExtractionResult(None, tuple(diagnostics))

        race_info = RaceInfo(
            venue=venue.value,
            race_number=race_number.value if race_number else DEFAULT_RACE_NUMBER,
            title=title or "",
            distance_meters=distance.value.distance_meters,
            surface=distance.value.surface,
            condition=condition.value if condition else DEFAULT_CONDITION,
            race_class=race_class.value if race_class else DEFAULT_RACE_CLASS,
            date=race_date.value if race_date else None,
        )
        return ExtractionResult(race_info, tuple(diagnostics))

    def _soft_error(self, field: str, message: str, text: str) -> Diagnostic:
        """非重要項目の欠落: 厳密モードではエラー、それ以外は警告"""
        if self.config.strict:
            return Diagnostic.error("RACE_INFO", field, message, raw=text)
        return Diagnostic.warning("RACE_INFO", field, message, raw=text)

    def _should_abort(self, diagnostics: list[Diagnostic]) -> bool:
        errors = [d for d in diagnostics if d.is_error]
        if not errors:
            return False
        if self.config.strict:
            return True
        critical = CRITICAL_FIELDS[self.config.layout]
        return any(d.field in critical for d in errors)


def extract_race_info(
    text: str, config: ParserConfig | None = None
) -> ExtractionResult[RaceInfo]:
    """Extract race info with the given config (see RaceInfoExtractor)."""
    return RaceInfoExtractor(config).extract(text)
