"""診断から改善提案を導く固定ルール"""

from keiba_paste.constants import JRA_VENUES
from keiba_paste.models import Diagnostic

# (種別, 項目) -> 提案。項目が None のものは種別が現れただけで追加する
SUGGESTION_RULES: tuple[tuple[str, str | None, str], ...] = (
    (
        "RACE_INFO",
        "venue",
        "Check the venue name against the JRA venue list ("
        + ", ".join(JRA_VENUES)
        + ")",
    ),
    ("RACE_INFO", "distance", "Check that the distance is written like 芝1600m or ダート1800m"),
    ("RACE_INFO", "raceNumber", "Check that the race number is written like 第11R or 11R"),
    ("RACE_INFO", "title", "Check that the race title follows the race number, like 11R 日本ダービー(G1)"),
    ("RACE_INFO", "date", "Check that the date is written like 2024年5月26日"),
    ("RACE_INFO", "condition", "Check that the track condition (良, 稍重, 重, 不良) is included"),
    ("RACE_INFO", "raceClass", "Check that the race class (G1, オープン, 3勝クラス, 未勝利, ...) is included"),
    (
        "HORSE_DATA",
        None,
        "Check that each horse starts with a 'frame horse-number' line and keeps the "
        "netkeiba field order (names, gender/age, jockey, weight)",
    ),
    ("HORSE_DATA", None, "Check that the gender is written as 牡, 牝 or セ followed by the age"),
    ("HORSE_DATA", "trainer", "Check that the trainer is written with the stable, like 美浦・牧"),
    ("HORSE_DATA", "horseLine", "Check that each line reads 'number name gender-age weight jockey trainer'"),
    ("ODDS_DATA", None, "Check that the odds table has 単勝 and 複勝 sections"),
    ("ODDS_DATA", None, "Check that place odds use the 'min - max' separator, like 1.1 - 1.3"),
    ("VALIDATION", None, "Check that every value is within its valid range"),
    ("VALIDATION", "number", "Check that no horse number appears twice in the roster"),
)

GENERAL_SUGGESTIONS: tuple[str, ...] = (
    "Copy the data again from the current netkeiba page",
    "Remove stray blank lines or special characters from the pasted text",
)


def build_suggestions(diagnostics: list[Diagnostic]) -> list[str]:
    """診断の種別と項目から提案リストを作る

    Args:
        diagnostics: 全診断

    Returns:
        重複のない提案リスト（ルール順、一般的な提案は最後）
    """
    kinds = {d.kind for d in diagnostics}
    fields = {(d.kind, d.field) for d in diagnostics}

    suggestions: list[str] = []
    for kind, field, text in SUGGESTION_RULES:
        if kind not in kinds:
            continue
        if field is not None and (kind, field) not in fields:
            continue
        if text not in suggestions:
            suggestions.append(text)

    if any(d.is_error for d in diagnostics):
        suggestions.extend(GENERAL_SUGGESTIONS)

    return suggestions
