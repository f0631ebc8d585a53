"""解析結果リポジトリ"""

import logging

from keiba_paste.models import HorseRecord, OddsRecord, RaceInfo
from keiba_paste.storage.models import ParsedHorse, ParsedOdds, ParsedRace, utcnow

logger = logging.getLogger(__name__)


def _check_unique_numbers(numbers: list[int], label: str) -> None:
    seen: set[int] = set()
    for number in numbers:
        if number in seen:
            raise ValueError(f"Duplicate horse number in {label}: {number}")
        seen.add(number)


class ParsedRaceRepository:
    """SQLAlchemyを使用した解析結果リポジトリ

    レースは (開催日, 競馬場, レース番号) で一意。同じキーで保存すると
    出走馬とオッズを含めて置き換える。
    """

    def __init__(self, session):
        """初期化

        Args:
            session: SQLAlchemyセッション
        """
        self.session = session

    def find(self, race: RaceInfo) -> ParsedRace | None:
        """同じキーの保存済みレースを探す"""
        return (
            self.session.query(ParsedRace)
            .filter_by(date=race.date, venue=race.venue, race_number=race.race_number)
            .first()
        )

    def save(
        self,
        race: RaceInfo,
        horses: list[HorseRecord] | None = None,
        odds: list[OddsRecord] | None = None,
    ) -> ParsedRace:
        """解析結果を保存する

        Args:
            race: レース情報
            horses: 出走馬（None なら保存済みの出走馬を残す）
            odds: オッズ（None なら保存済みのオッズを残す）

        Returns:
            保存したParsedRace

        Raises:
            ValueError: 馬番が重複している場合
        """
        if horses is not None:
            _check_unique_numbers([h.number for h in horses], "roster")
        if odds is not None:
            _check_unique_numbers([o.horse_number for o in odds], "odds")

        row = self.find(race)
        if row is None:
            row = ParsedRace(date=race.date, venue=race.venue, race_number=race.race_number)
            self.session.add(row)
            logger.debug("new race: %s %sR", race.venue, race.race_number)
        else:
            logger.debug("replacing race: %s %sR (id=%s)", race.venue, race.race_number, row.id)
            row.updated_at = utcnow()

        row.title = race.title
        row.distance = race.distance_meters
        row.surface = race.surface
        row.condition = race.condition
        row.race_class = race.race_class

        if horses is not None:
            row.horses.clear()
            # 同じ馬番の行を入れ替えるため、先に削除を反映する
            self.session.flush()
            row.horses.extend(
                ParsedHorse(
                    horse_number=h.number,
                    name=h.name,
                    age=h.age,
                    gender=h.gender,
                    weight_kg=h.weight_kg,
                    jockey_name=h.jockey_name,
                    trainer_name=h.trainer_name,
                    coat_color=h.coat_color,
                )
                for h in horses
            )

        if odds is not None:
            row.odds.clear()
            self.session.flush()
            row.odds.extend(
                ParsedOdds(
                    horse_number=o.horse_number,
                    win_odds=o.win_odds,
                    place_odds_min=o.place_odds_min,
                    place_odds_max=o.place_odds_max,
                    approximated=o.approximated,
                )
                for o in odds
            )

        self.session.flush()
        return row

    def get(self, race_id: int) -> ParsedRace | None:
        """IDでレースを取得する"""
        return self.session.get(ParsedRace, race_id)

    def list_recent(self, limit: int = 20) -> list[ParsedRace]:
        """更新日時の新しい順にレースを返す

        Args:
            limit: 最大取得件数

        Returns:
            ParsedRaceのリスト
        """
        return (
            self.session.query(ParsedRace)
            .order_by(ParsedRace.updated_at.desc(), ParsedRace.id.desc())
            .limit(limit)
            .all()
        )

    def to_records(
        self, row: ParsedRace
    ) -> tuple[RaceInfo, list[HorseRecord], list[OddsRecord]]:
        """保存済みの行をレコードに戻す"""
        race = RaceInfo(
            venue=row.venue,
            race_number=row.race_number,
            title=row.title,
            distance_meters=row.distance,
            surface=row.surface,
            condition=row.condition,
            race_class=row.race_class,
            date=row.date,
        )
        horses = [
            HorseRecord(
                number=h.horse_number,
                name=h.name,
                age=h.age,
                gender=h.gender,
                weight_kg=h.weight_kg,
                jockey_name=h.jockey_name,
                trainer_name=h.trainer_name,
                coat_color=h.coat_color,
            )
            for h in row.horses
        ]
        odds = [
            OddsRecord(
                horse_number=o.horse_number,
                win_odds=o.win_odds,
                place_odds_min=o.place_odds_min,
                place_odds_max=o.place_odds_max,
                approximated=o.approximated,
            )
            for o in row.odds
        ]
        return race, horses, odds
