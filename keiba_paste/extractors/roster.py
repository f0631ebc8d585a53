"""Horse roster extractor.

This module extracts HorseRecord entries from the shutuba (race entry) block
copied from netkeiba.

Page layout: entries follow each other with no delimiter other than a marker
line holding the frame number and the horse number ("1 1"). Everything up to
the next marker line belongs to that horse (a fragment). A typical fragment:

    1 1
    ロードカナロア           <- sire
    マインドユアビスケッツ   <- racing name
    ビスケットラン           <- dam
    (Tiznow)                 <- dam sire
    美浦・牧                 <- stable location + trainer
    中9週
    牡5鹿                    <- gender / age / coat
    古川吉                   <- jockey
    55.0                     <- weight carried
    逃げ

Compact layout: one horse per line, "1 ドウデュース 牡3 57.0 武豊 友道康夫".
"""

import logging
from dataclasses import dataclass

from keiba_paste.extractors.base import BaseExtractor, LineCursor, split_lines
from keiba_paste.models import (
    Diagnostic,
    ExtractionResult,
    HorseRecord,
    ParserConfig,
)
from keiba_paste.patterns import (
    COMPACT_HORSE_RE,
    gender_from_token,
    match_gender_age_coat,
    match_jockey_name,
    match_leading_weight,
    match_marker_line,
    match_noise,
    match_trainer,
    normalize_width,
)
from keiba_paste.validation import check_duplicate_horse_numbers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Fragment:
    """One horse's share of the roster block.

    Attributes:
        frame_number: Frame (waku) number from the marker line.
        horse_number: Horse (umaban) number from the marker line.
        lines: Lines after the marker line, up to the next marker.
        start_line: 1-based line number of the marker line.
    """

    frame_number: int
    horse_number: int
    lines: tuple[str, ...]
    start_line: int

    @property
    def text(self) -> str:
        return "\n".join(line for line in self.lines if line.strip())

    def line_number_of(self, index: int) -> int:
        """fragment 内の添字からブロック全体の行番号を返す"""
        return self.start_line + 1 + index


@dataclass(frozen=True)
class FragmentOutcome:
    """Result of extracting one fragment (or one compact line).

    Attributes:
        horse: The extracted horse, or None when extraction failed.
        diagnostics: Diagnostics raised while extracting this fragment.
        line_number: 1-based line number where the fragment starts.
        raw: Fragment text, used as the diagnostic snippet.
        horse_number: Number from the marker line; None in the compact layout.
    """

    horse: HorseRecord | None
    diagnostics: tuple[Diagnostic, ...]
    line_number: int
    raw: str
    horse_number: int | None = None

    @property
    def failed(self) -> bool:
        return self.horse is None

    @property
    def label(self) -> str:
        if self.horse_number is not None:
            return f"horse #{self.horse_number}"
        return f"line {self.line_number}"


def segment_fragments(text: str) -> list[Fragment]:
    """Split a roster block into fragments at marker lines.

    Two states are tracked: outside any fragment (before the first marker)
    and inside a fragment. A marker line closes the open fragment and opens
    a new one; the end of input closes the last one. Lines before the first
    marker are ignored.
    """
    cursor = LineCursor.from_text(text)
    fragments: list[Fragment] = []
    inside = False
    marker: tuple[int, int] = (0, 0)
    start_line = 0
    body: list[str] = []

    while not cursor.at_end:
        line_number = cursor.line_number
        line = cursor.take()
        found = match_marker_line(line)
        if found:
            if inside:
                fragments.append(Fragment(marker[0], marker[1], tuple(body), start_line))
            inside = True
            marker = found
            start_line = line_number
            body = []
            continue
        if inside:
            body.append(line)

    if inside:
        fragments.append(Fragment(marker[0], marker[1], tuple(body), start_line))

    return fragments


def resolve_display_name(candidates: list[str]) -> str:
    """名前候補から馬名を決める

    出馬表の馬柱は 父 / 馬名 / 母 / (母父) の順に並ぶため、候補が
    2つ以上あれば2番目を馬名とする。1つだけならそれを使う。

    Args:
        candidates: ノイズ行を除いた名前候補（出現順）

    Returns:
        馬名

    Raises:
        ValueError: 候補が1つもない場合
    """
    if not candidates:
        raise ValueError("No horse name candidate found")
    if len(candidates) >= 2:
        return candidates[1]
    return candidates[0]


def name_candidates(lines: tuple[str, ...]) -> list[str]:
    """ノイズ行（斤量単位・人気・所属・脚質・性齢・休養など）を除いた候補"""
    candidates = []
    for line in lines:
        stripped = normalize_width(line).strip()
        if not stripped or match_noise(stripped):
            continue
        candidates.append(stripped)
    return candidates


class RosterExtractor(BaseExtractor):
    """Extractor for the horse roster block.

    A fragment that fails never aborts the roster: with
    ``skip_invalid_horses`` its errors are folded into one warning and the
    horse is omitted, otherwise the errors are kept and the roster result is
    unsuccessful.
    """

    def extract(self, text: str) -> ExtractionResult[list[HorseRecord]]:
        """Extract horse records from a roster block.

        Args:
            text: The pasted roster block.

        Returns:
            ExtractionResult with the horses in order of appearance.
        """
        self.check_text(text)
        if self.config.layout == "compact":
            outcomes = self._extract_compact_lines(text)
        else:
            fragments = segment_fragments(text)
            logger.debug("roster: %d fragments", len(fragments))
            outcomes = [self._extract_outcome(f) for f in fragments]

        horses: list[HorseRecord] = []
        diagnostics: list[Diagnostic] = []
        for outcome in outcomes:
            if outcome.failed:
                diagnostics.extend(self._apply_failure_policy(outcome))
                continue
            horses.append(outcome.horse)
            diagnostics.extend(outcome.diagnostics)

        if not horses:
            diagnostics.append(
                Diagnostic.error("HORSE_DATA", "general", "No valid horse data found", raw=text)
            )

        if len(horses) > self.config.max_horses:
            diagnostics.append(
                Diagnostic.warning(
                    "HORSE_DATA",
                    "horseCount",
                    f"{len(horses)} horses exceed the maximum of {self.config.max_horses}",
                )
            )

        diagnostics.extend(check_duplicate_horse_numbers(horses))
        return ExtractionResult(horses, tuple(diagnostics))

    def extract_for_form(self, text: str) -> list[dict]:
        """入力フォーム用の辞書リストに変換する

        Raises:
            ValueError: 抽出に失敗した場合（最初のエラーメッセージ）
        """
        result = self.extract(text)
        if not result.success or not result.data:
            errors = result.errors
            raise ValueError(errors[0].message if errors else "Failed to parse horse data")
        return [
            {
                "number": horse.number,
                "name": horse.name,
                "age": horse.age,
                "gender": horse.gender,
                "weight": horse.weight_kg,
                "jockeyName": horse.jockey_name,
                "trainerName": horse.trainer_name,
                "ownerName": "",
            }
            for horse in result.data
        ]

    def extract_fragment(
        self, fragment: Fragment
    ) -> tuple[HorseRecord | None, list[Diagnostic]]:
        """Extract one horse from one fragment.

        Returns:
            (HorseRecord or None, diagnostics). The record is None when a
            required field (name, gender/age/coat, jockey) is missing.
        """
        diagnostics: list[Diagnostic] = []
        raw = fragment.text
        lines = fragment.lines

        gender_index = None
        gender_age = None
        for i, line in enumerate(lines):
            found = match_gender_age_coat(line)
            if found:
                gender_index = i
                gender_age = found.value
                break

        name_lines = lines[:gender_index] if gender_index is not None else lines
        name = None
        try:
            name = resolve_display_name(name_candidates(name_lines))
        except ValueError as e:
            diagnostics.append(
                Diagnostic.error(
                    "HORSE_DATA",
                    "name",
                    f"Horse #{fragment.horse_number}: {e}",
                    raw=raw,
                    line_number=fragment.start_line,
                )
            )

        jockey = None
        weight = None
        if gender_age is None:
            diagnostics.append(
                Diagnostic.error(
                    "HORSE_DATA",
                    "genderAge",
                    f"Horse #{fragment.horse_number}: gender/age not found",
                    raw=raw,
                    line_number=fragment.start_line,
                )
            )
        else:
            jockey, weight, weight_line = self._scan_jockey(lines, gender_index + 1)
            if jockey is None:
                diagnostics.append(
                    Diagnostic.error(
                        "HORSE_DATA",
                        "jockey",
                        f"Horse #{fragment.horse_number}: jockey name not found",
                        raw=raw,
                        line_number=fragment.line_number_of(gender_index),
                    )
                )
            elif weight is None:
                diagnostics.append(
                    Diagnostic.warning(
                        "HORSE_DATA",
                        "weight",
                        f"Horse #{fragment.horse_number}: weight carried not found",
                        raw=raw,
                        line_number=fragment.line_number_of(weight_line),
                    )
                )

        trainer = None
        for line in lines:
            trainer = match_trainer(line)
            if trainer:
                break
        if trainer is None:
            diagnostics.append(
                Diagnostic.warning(
                    "HORSE_DATA",
                    "trainer",
                    f"Horse #{fragment.horse_number}: trainer not found",
                    raw=raw,
                    line_number=fragment.start_line,
                )
            )

        if name is None or gender_age is None or jockey is None:
            return None, diagnostics

        horse = HorseRecord(
            number=fragment.horse_number,
            name=name,
            age=gender_age.age,
            gender=gender_age.gender,
            weight_kg=weight,
            jockey_name=jockey,
            trainer_name=trainer or "",
            coat_color=gender_age.coat,
        )
        return horse, diagnostics

    def _extract_outcome(self, fragment: Fragment) -> FragmentOutcome:
        horse, diagnostics = self.extract_fragment(fragment)
        return FragmentOutcome(
            horse=horse,
            diagnostics=tuple(diagnostics),
            line_number=fragment.start_line,
            raw=fragment.text,
            horse_number=fragment.horse_number,
        )

    def _scan_jockey(
        self, lines: tuple[str, ...], start: int
    ) -> tuple[str | None, float | None, int]:
        """性齢行の後ろから騎手名と斤量を探す

        Returns:
            (騎手名, 斤量, 斤量を探した行の添字)
        """
        cursor = LineCursor(lines, start)
        while not cursor.at_end:
            cursor.skip_blank()
            if cursor.at_end:
                break
            line = normalize_width(cursor.take()).strip()
            if match_noise(line):
                continue
            jockey = match_jockey_name(line)
            if jockey is None:
                continue
            cursor.skip_blank()
            weight_index = cursor.index
            next_line = cursor.current
            weight = match_leading_weight(next_line) if next_line is not None else None
            return jockey, weight, min(weight_index, len(lines) - 1)
        return None, None, start

    def _extract_compact_lines(self, text: str) -> list[FragmentOutcome]:
        outcomes: list[FragmentOutcome] = []
        for i, line in enumerate(split_lines(text)):
            stripped = normalize_width(line).strip()
            if not stripped:
                continue
            line_number = i + 1
            m = COMPACT_HORSE_RE.match(stripped)
            if not m:
                error = Diagnostic.error(
                    "HORSE_DATA",
                    "horseLine",
                    f"Line {line_number}: horse data does not match "
                    "'number name gender-age weight jockey trainer'",
                    raw=stripped,
                    line_number=line_number,
                )
                outcomes.append(FragmentOutcome(None, (error,), line_number, stripped))
                continue
            horse = HorseRecord(
                number=int(m.group(1)),
                name=m.group(2),
                age=int(m.group(4)),
                gender=gender_from_token(m.group(3)),
                weight_kg=float(m.group(5)),
                jockey_name=m.group(6),
                trainer_name=m.group(7),
            )
            outcomes.append(FragmentOutcome(horse, (), line_number, stripped))
        return outcomes

    def _apply_failure_policy(self, outcome: FragmentOutcome) -> list[Diagnostic]:
        """失敗したフラグメントの診断を設定に従って処理する"""
        if not self.config.skip_invalid_horses:
            return list(outcome.diagnostics)

        errors = [d for d in outcome.diagnostics if d.is_error]
        reasons = "; ".join(d.message for d in errors)
        return [
            Diagnostic.warning(
                "HORSE_DATA",
                errors[0].field if errors else "horse",
                f"Skipped {outcome.label}: {reasons}",
                raw=outcome.raw,
                line_number=outcome.line_number,
            )
        ]


def extract_roster(
    text: str, config: ParserConfig | None = None
) -> ExtractionResult[list[HorseRecord]]:
    """Extract the roster with the given config (see RosterExtractor)."""
    return RosterExtractor(config).extract(text)
