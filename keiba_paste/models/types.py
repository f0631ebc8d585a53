"""パース結果で使う列挙型（Literal）定義"""

from typing import Literal

Surface = Literal["turf", "dirt"]
TrackCondition = Literal["firm", "good", "yielding", "soft"]
RaceClass = Literal[
    "G1",
    "G2",
    "G3",
    "Listed",
    "Open",
    "3勝クラス",
    "2勝クラス",
    "1勝クラス",
    "未勝利",
]
Gender = Literal["male", "female", "gelding"]

DiagnosticKind = Literal["RACE_INFO", "HORSE_DATA", "ODDS_DATA", "VALIDATION"]
Severity = Literal["error", "warning"]

# page: netkeiba のページをそのままコピーした複数行レイアウト
# compact: 1レコード1行に整形済みのレイアウト
PasteLayout = Literal["page", "compact"]

# レポートでのグループ順
DIAGNOSTIC_KINDS: tuple[DiagnosticKind, ...] = (
    "RACE_INFO",
    "HORSE_DATA",
    "ODDS_DATA",
    "VALIDATION",
)
PASTE_LAYOUTS: tuple[PasteLayout, ...] = ("page", "compact")
