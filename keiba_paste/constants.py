"""Constants for the netkeiba paste parser."""

# JRA（中央競馬）競馬場名
# 優先順は照合順でもある（2文字の会場名同士は重ならない）
JRA_VENUES: tuple[str, ...] = (
    "札幌",
    "函館",
    "福島",
    "新潟",
    "東京",
    "中山",
    "中京",
    "京都",
    "阪神",
    "小倉",
)

# レース番号が見つからない場合の既定値（メインレースは11Rが最多）
DEFAULT_RACE_NUMBER = 11

# ParserConfig の既定値
DEFAULT_ODDS = 99.9
DEFAULT_MAX_HORSES = 18

# 診断メッセージに残す生データの最大長
SNIPPET_LIMIT = 200

# テキストレポートでの生データ表示長
REPORT_SNIPPET_LIMIT = 50

# 複勝オッズ概算の除数（単勝 / 3 〜 単勝 / 2）
PLACE_MIN_DIVISOR = 3.0
PLACE_MAX_DIVISOR = 2.0

# 所属（美浦・栗東など）
STABLE_LOCATIONS: tuple[str, ...] = ("美浦", "栗東", "地方", "海外")

# 脚質
RUNNING_STYLES: tuple[str, ...] = ("逃げ", "先行", "差し", "追込", "自在")

# 出馬表の馬柱に現れる、馬名・騎手名ではない定型トークン
REPLAY_MARKER = "レース映像"
REST_MARKERS: tuple[str, ...] = ("休養", "連闘", "放牧", "外厩")

# オッズ表のセクション見出し
WIN_SECTION_HEADERS: tuple[str, ...] = ("単勝", "単勝オッズ")
PLACE_SECTION_HEADERS: tuple[str, ...] = ("複勝", "複勝オッズ")

# オッズ表の列見出しに含まれるラベル
ODDS_TABLE_LABELS: tuple[str, ...] = ("枠", "馬番", "印", "選択", "馬名", "オッズ", "人気")

# 範囲チェック（検証用）
HORSE_NUMBER_RANGE = (1, 18)
HORSE_AGE_RANGE = (2, 10)
HORSE_WEIGHT_RANGE = (45.0, 65.0)
RACE_DISTANCE_RANGE = (1000, 4000)
RACE_NUMBER_RANGE = (1, 12)
