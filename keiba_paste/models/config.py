"""パーサー設定"""

from dataclasses import dataclass

from keiba_paste.constants import DEFAULT_MAX_HORSES, DEFAULT_ODDS
from keiba_paste.models.types import PASTE_LAYOUTS, PasteLayout


@dataclass(frozen=True)
class ParserConfig:
    """抽出処理の設定

    各抽出呼び出しに値として渡す。グローバルな状態は持たない。

    Attributes:
        strict: 厳密モード（エラーが1件でもあれば抽出を中止する）
        skip_invalid_horses: 不正な馬データを警告に格下げしてスキップする
        default_odds: 単勝オッズが見つからない場合の代替値
        max_horses: 最大出走頭数（超過時は警告のみ）
        layout: 貼り付けテキストのレイアウト（"page" または "compact"）
    """

    strict: bool = False
    skip_invalid_horses: bool = True
    default_odds: float = DEFAULT_ODDS
    max_horses: int = DEFAULT_MAX_HORSES
    layout: PasteLayout = "page"

    def __post_init__(self) -> None:
        if self.default_odds < 1.0:
            raise ValueError(f"default_odds must be >= 1.0: {self.default_odds}")
        if self.max_horses < 1:
            raise ValueError(f"max_horses must be >= 1: {self.max_horses}")
        if self.layout not in PASTE_LAYOUTS:
            raise ValueError(f"Unknown layout: {self.layout}")
