"""貼り付けテキストから項目を取り出すパターンライブラリ

各マッチャーは優先度付きの FieldPattern のタプルを先頭から順に試し、
最初に変換まで成功したものを FieldMatch として返す。見つからない場合は
None を返し、例外は投げない。

照合順（優先度の低い数値が先）はテストで固定された仕様の一部:

- 会場: 「東京競馬場」 > 「1回東京8日」 > 単独の会場名
- 距離: 「芝2400m」「ダ1200m(右)」「芝右 外1600m」 > 「芝:2400」
- 馬場: 「馬場:良」 > 「芝:良」 > 区切られた単独トークン
  （トークン内では 不良 を 良 より、稍重 を 重 より先に見る）
- クラス: G1 > G2 > G3 > リステッド > オープン > 3勝 > 2勝 > 1勝 > 未勝利/新馬
- 日付: 「2024年5月26日」 > 「2024/5/26」 > 「2024-05-26」
- レース番号: 「第11R」 > 「11R」 > 「11レース」
- 性齢毛色: 「牡5鹿」 > 「牡5」
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Generic, TypeVar

from keiba_paste.constants import (
    JRA_VENUES,
    REPLAY_MARKER,
    REST_MARKERS,
    RUNNING_STYLES,
    STABLE_LOCATIONS,
)

T = TypeVar("T")

# 全角英数記号 -> 半角（文字数を変えないので span はそのまま使える）
_WIDTH_TABLE = str.maketrans(
    {**{chr(0xFF01 + i): chr(0x21 + i) for i in range(94)}, "　": " "}
)


def normalize_width(text: str) -> str:
    """全角英数記号を半角に変換する（長さは保存される）"""
    return text.translate(_WIDTH_TABLE)


@dataclass(frozen=True)
class FieldPattern:
    """優先度付きの1パターン

    Attributes:
        priority: 小さいほど先に試す
        name: パターン名（テストと診断で使う）
        regex: コンパイル済み正規表現
        convert: マッチから値を作る関数。None を返すと不一致扱い
    """

    priority: int
    name: str
    regex: re.Pattern
    convert: Callable[[re.Match], Any]


@dataclass(frozen=True)
class FieldMatch(Generic[T]):
    """マッチ結果

    Attributes:
        value: 変換後の値
        pattern_name: 一致したパターン名
        span: 正規化後テキスト内の一致位置
        remainder: 一致部分を空白に置き換えた残りのテキスト
    """

    value: T
    pattern_name: str
    span: tuple[int, int]
    remainder: str


@dataclass(frozen=True)
class DistanceSurface:
    distance_meters: int
    surface: str


@dataclass(frozen=True)
class GenderAgeCoat:
    gender: str
    age: int
    coat: str | None


def _table(*patterns: FieldPattern) -> tuple[FieldPattern, ...]:
    return tuple(sorted(patterns, key=lambda p: p.priority))


def match_first(text: str, patterns: tuple[FieldPattern, ...]) -> FieldMatch | None:
    """パターン表を優先度順に試し、最初の一致を返す

    Args:
        text: 対象テキスト
        patterns: 優先度順の FieldPattern

    Returns:
        FieldMatch、見つからなければ None
    """
    if not text:
        return None
    normalized = normalize_width(text)
    for pattern in patterns:
        for m in pattern.regex.finditer(normalized):
            value = pattern.convert(m)
            if value is None:
                continue
            start, end = m.span()
            remainder = normalized[:start] + " " + normalized[end:]
            return FieldMatch(value, pattern.name, (start, end), remainder)
    return None


# --- 会場 -------------------------------------------------------------------

_VENUE_ALT = "|".join(JRA_VENUES)

VENUE_PATTERNS = _table(
    FieldPattern(10, "venue_with_suffix", re.compile(rf"({_VENUE_ALT})競馬場"), lambda m: m.group(1)),
    FieldPattern(20, "meeting_header", re.compile(rf"\d+回({_VENUE_ALT})\d+日目?"), lambda m: m.group(1)),
    # 「中山記念」「東京優駿」のようなレース名の一部は除外する
    FieldPattern(
        30,
        "bare_venue",
        re.compile(rf"({_VENUE_ALT})(?![^\s\d/()・:])"),
        lambda m: m.group(1),
    ),
)


def match_venue(text: str) -> FieldMatch[str] | None:
    return match_first(text, VENUE_PATTERNS)


# --- 距離・コース -----------------------------------------------------------

_SURFACES = {"芝": "turf", "ダート": "dirt", "ダ": "dirt"}


def _distance(m: re.Match) -> DistanceSurface | None:
    meters = int(m.group(2))
    if meters <= 0:
        return None
    return DistanceSurface(distance_meters=meters, surface=_SURFACES[m.group(1)])


DISTANCE_PATTERNS = _table(
    FieldPattern(
        10,
        "surface_distance_unit",
        re.compile(r"(芝|ダート|ダ)[右左直外内\s]*(\d{3,4})\s*(?:m|メートル)"),
        _distance,
    ),
    FieldPattern(20, "surface_colon_distance", re.compile(r"(芝|ダート|ダ)\s*:\s*(\d{3,4})(?!\d)"), _distance),
)


def match_distance_and_surface(text: str) -> FieldMatch[DistanceSurface] | None:
    return match_first(text, DISTANCE_PATTERNS)


# --- 馬場状態 ---------------------------------------------------------------

_CONDITIONS = {"良": "firm", "稍重": "good", "重": "yielding", "不良": "soft"}
_CONDITION_ALT = "不良|稍重|重|良"

CONDITION_PATTERNS = _table(
    FieldPattern(10, "labeled_condition", re.compile(rf"馬場\s*:\s*({_CONDITION_ALT})"), lambda m: _CONDITIONS[m.group(1)]),
    FieldPattern(
        20,
        "surface_labeled_condition",
        re.compile(rf"(?:芝|ダート|ダ)\s*:\s*({_CONDITION_ALT})"),
        lambda m: _CONDITIONS[m.group(1)],
    ),
    FieldPattern(
        30,
        "standalone_condition",
        re.compile(rf"(?<![^\s/])({_CONDITION_ALT})(?![^\s/])"),
        lambda m: _CONDITIONS[m.group(1)],
    ),
)


def match_track_condition(text: str) -> FieldMatch[str] | None:
    return match_first(text, CONDITION_PATTERNS)


# --- クラス -----------------------------------------------------------------


def _const(value: str) -> Callable[[re.Match], str]:
    return lambda m: value


RACE_CLASS_PATTERNS = _table(
    FieldPattern(10, "g1", re.compile(r"\((?:J・)?(?:G1|GI)\)|(?<![A-Za-z])G1(?!\d)", re.IGNORECASE), _const("G1")),
    FieldPattern(20, "g2", re.compile(r"\((?:J・)?(?:G2|GII)\)|(?<![A-Za-z])G2(?!\d)", re.IGNORECASE), _const("G2")),
    FieldPattern(30, "g3", re.compile(r"\((?:J・)?(?:G3|GIII)\)|(?<![A-Za-z])G3(?!\d)", re.IGNORECASE), _const("G3")),
    FieldPattern(
        40,
        "listed",
        re.compile(r"\((?:L|Listed)\)|リステッド|(?<![A-Za-z])Listed(?![A-Za-z])", re.IGNORECASE),
        _const("Listed"),
    ),
    FieldPattern(50, "open", re.compile(r"\(OP\)|オープン|(?<![A-Za-z])OP(?![A-Za-z])"), _const("Open")),
    FieldPattern(60, "class_3", re.compile(r"3勝クラス|1600万下"), _const("3勝クラス")),
    FieldPattern(70, "class_2", re.compile(r"2勝クラス|1000万下"), _const("2勝クラス")),
    FieldPattern(80, "class_1", re.compile(r"1勝クラス|(?<!\d)500万下"), _const("1勝クラス")),
    FieldPattern(90, "maiden", re.compile(r"未勝利|新馬"), _const("未勝利")),
)


def match_race_class(text: str) -> FieldMatch[str] | None:
    return match_first(text, RACE_CLASS_PATTERNS)


# --- 日付 -------------------------------------------------------------------


def _date(m: re.Match) -> date | None:
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None


DATE_PATTERNS = _table(
    FieldPattern(10, "kanji_date", re.compile(r"(\d{4})年\s*(\d{1,2})月\s*(\d{1,2})日"), _date),
    FieldPattern(20, "slash_date", re.compile(r"(?<!\d)(\d{4})/(\d{1,2})/(\d{1,2})(?!\d)"), _date),
    FieldPattern(30, "iso_date", re.compile(r"(?<!\d)(\d{4})-(\d{1,2})-(\d{1,2})(?!\d)"), _date),
)


def match_date(text: str) -> FieldMatch[date] | None:
    return match_first(text, DATE_PATTERNS)


# --- レース番号 -------------------------------------------------------------


def _race_number(m: re.Match) -> int | None:
    number = int(m.group(1))
    return number if number > 0 else None


RACE_NUMBER_PATTERNS = _table(
    FieldPattern(10, "ordinal_race", re.compile(r"第\s*(\d{1,2})\s*R(?![A-Za-z])"), _race_number),
    FieldPattern(20, "suffix_race", re.compile(r"(?<![\d.A-Za-z])(\d{1,2})\s*R(?![A-Za-z])"), _race_number),
    FieldPattern(30, "kanji_race", re.compile(r"第?\s*(\d{1,2})\s*レース"), _race_number),
)


def match_race_number(text: str) -> FieldMatch[int] | None:
    return match_first(text, RACE_NUMBER_PATTERNS)


# 1行形式のレース名: 「11R 日本ダービー(G1)」の R の直後のトークン
COMPACT_TITLE_RE = re.compile(r"\d+R\s+(\S+)")


def match_compact_title(text: str) -> str | None:
    m = COMPACT_TITLE_RE.search(normalize_width(text or ""))
    return m.group(1) if m else None


# --- 性齢・毛色 -------------------------------------------------------------

_GENDERS = {"牡": "male", "牝": "female", "セ": "gelding", "騸": "gelding"}
_GENDER_ALT = "牡|牝|セ|騸"
_COAT_ALT = "黒鹿毛|青鹿毛|栃栗毛|鹿毛|栗毛|芦毛|青毛|白毛|黒鹿|青鹿|栃栗|鹿|栗|芦|青|白"


def _gender_age(m: re.Match) -> GenderAgeCoat | None:
    age = int(m.group(2))
    if age <= 0:
        return None
    coat = m.group(3) if m.re.groups >= 3 else None
    return GenderAgeCoat(gender=_GENDERS[m.group(1)], age=age, coat=coat)


GENDER_AGE_PATTERNS = _table(
    FieldPattern(10, "gender_age_coat", re.compile(rf"({_GENDER_ALT})\s*(\d{{1,2}})\s*({_COAT_ALT})"), _gender_age),
    FieldPattern(20, "gender_age", re.compile(rf"({_GENDER_ALT})\s*(\d{{1,2}})(?!\d)"), _gender_age),
)


def match_gender_age_coat(text: str) -> FieldMatch[GenderAgeCoat] | None:
    return match_first(text, GENDER_AGE_PATTERNS)


# --- 行の分類（出馬表・オッズ表） -------------------------------------------

# 枠番 馬番 だけの行（フラグメント開始行）
MARKER_LINE_RE = re.compile(r"^\s*(\d+)\s+(\d+)\s*$")


def match_marker_line(line: str) -> tuple[int, int] | None:
    """枠番・馬番の行なら (枠番, 馬番) を返す"""
    m = MARKER_LINE_RE.match(normalize_width(line))
    if not m:
        return None
    return int(m.group(1)), int(m.group(2))


_STABLE_ALT = "|".join(STABLE_LOCATIONS)
_RUNNING_ALT = "|".join(RUNNING_STYLES)
_REST_ALT = "|".join(REST_MARKERS)

# 馬名・騎手名の候補から除外する行
NOISE_PATTERNS = _table(
    FieldPattern(10, "weight_unit", re.compile(r"\d+(?:\.\d+)?\s*kg", re.IGNORECASE), _const("weight_unit")),
    FieldPattern(20, "popularity", re.compile(r"\d+\s*人気"), _const("popularity")),
    FieldPattern(30, "stable_location", re.compile(rf"^\s*(?:{_STABLE_ALT})(?:\s*[・･.]|\s*$)"), _const("stable_location")),
    FieldPattern(40, "running_style", re.compile(rf"^\s*(?:{_RUNNING_ALT})\s*$"), _const("running_style")),
    FieldPattern(50, "gender_age", re.compile(rf"(?:{_GENDER_ALT})\s*\d{{1,2}}(?!\d)"), _const("gender_age")),
    FieldPattern(60, "rest_period", re.compile(rf"中\s*\d+\s*週|{_REST_ALT}|\d+\s*ヶ?月"), _const("rest_period")),
    FieldPattern(70, "replay", re.compile(re.escape(REPLAY_MARKER)), _const("replay")),
    FieldPattern(80, "year", re.compile(r"(?<!\d)\d{4}(?!\d)"), _const("year")),
    FieldPattern(90, "numeric", re.compile(r"^[\d.,:/()+\-\s]+$"), _const("numeric")),
)


def match_noise(line: str) -> str | None:
    """馬名でも騎手名でもない定型行なら、その種類名を返す"""
    found = match_first(line, NOISE_PATTERNS)
    return found.value if found else None


# 所属 + 区切り + 調教師名（例: 「美浦・牧」「栗東・友道」）
TRAINER_RE = re.compile(rf"(?:{_STABLE_ALT})\s*[・･.]\s*([^\s\d]+)")


def match_trainer(line: str) -> str | None:
    m = TRAINER_RE.search(normalize_width(line))
    return m.group(1) if m else None


# 騎手名らしい短いトークン（減量記号は名前に含めない）
JOCKEY_NAME_RE = re.compile(
    r"^[▲△☆◇★]?\s*([A-Za-z.\u3005\u3040-\u30ff\u4e00-\u9fff]{1,10})$"
)


def match_jockey_name(line: str) -> str | None:
    m = JOCKEY_NAME_RE.match(normalize_width(line).strip())
    return m.group(1) if m else None


# 行頭の斤量（例: 「55.0」「57」）。馬体重の「486kg」は対象外
LEADING_WEIGHT_RE = re.compile(r"^\s*(\d{2}(?:\.\d+)?)(?![\d.]|\s*kg)", re.IGNORECASE)


def match_leading_weight(line: str) -> float | None:
    m = LEADING_WEIGHT_RE.match(normalize_width(line))
    return float(m.group(1)) if m else None


# --- オッズ -----------------------------------------------------------------

_NUMBER = r"(\d+(?:\.\d+)?)"

PLACE_RANGE_RE = re.compile(rf"{_NUMBER}\s*[-~〜]\s*{_NUMBER}\s*$")
TRAILING_NUMBER_RE = re.compile(rf"(?<![\d.\-~〜])\s*{_NUMBER}\s*$")


def match_place_range(line: str) -> tuple[float, float] | None:
    """行末の「min - max」を返す"""
    m = PLACE_RANGE_RE.search(normalize_width(line))
    if not m:
        return None
    return float(m.group(1)), float(m.group(2))


def match_trailing_number(line: str) -> float | None:
    """行末の数値を返す（範囲表記の一部は対象外）"""
    normalized = normalize_width(line)
    if PLACE_RANGE_RE.search(normalized):
        return None
    m = TRAILING_NUMBER_RE.search(normalized)
    return float(m.group(1)) if m else None


# --- 1行形式（compact レイアウト） ------------------------------------------

# 例: 「1 ドウデュース 牡3 57.0 武豊 友道康夫」
COMPACT_HORSE_RE = re.compile(
    rf"^(\d+)\s+(\S+)\s+({_GENDER_ALT})(\d+)\s+(\d+(?:\.\d+)?)\s+(\S+)\s+(\S+)"
)

# 例: 「1 3.2 1.1-1.3」「1 8.5」
COMPACT_ODDS_RE = re.compile(rf"^(\d+)\s+{_NUMBER}\s+{_NUMBER}\s*-\s*{_NUMBER}")
COMPACT_WIN_ONLY_RE = re.compile(rf"^(\d+)\s+{_NUMBER}(?:\s|$)")


def gender_from_token(token: str) -> str | None:
    return _GENDERS.get(token)
