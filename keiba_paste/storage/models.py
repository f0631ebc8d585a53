"""解析結果の保存モデル定義"""

from datetime import date as RaceDate
from datetime import datetime, timezone

from sqlalchemy import Date, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """すべてのモデルの基底クラス

    SQLAlchemy 2.0スタイルのDeclarativeBaseを使用。
    """

    pass


class ParsedRace(Base):
    """解析済みレースモデル

    Attributes:
        id: 主キー（自動採番）
        venue: 競馬場
        race_number: レース番号
        title: レース名
        distance: 距離（メートル）
        surface: turf / dirt
        condition: 馬場状態
        race_class: クラス
        date: 開催日（不明なら None）
        created_at: 作成日時
        updated_at: 更新日時
    """

    __tablename__ = "parsed_races"
    __table_args__ = (UniqueConstraint("date", "venue", "race_number", name="uq_race_key"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    venue: Mapped[str] = mapped_column(String, nullable=False)
    race_number: Mapped[int] = mapped_column(nullable=False)
    title: Mapped[str] = mapped_column(String, nullable=False, default="")
    distance: Mapped[int] = mapped_column(nullable=False)
    surface: Mapped[str] = mapped_column(String, nullable=False)
    condition: Mapped[str] = mapped_column(String, nullable=False)
    race_class: Mapped[str] = mapped_column(String, nullable=False)
    date: Mapped[RaceDate | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)

    horses: Mapped[list["ParsedHorse"]] = relationship(
        back_populates="race",
        cascade="all, delete-orphan",
        order_by="ParsedHorse.horse_number",
    )
    odds: Mapped[list["ParsedOdds"]] = relationship(
        back_populates="race",
        cascade="all, delete-orphan",
        order_by="ParsedOdds.horse_number",
    )

    def __repr__(self) -> str:
        return f"<ParsedRace(id={self.id!r}, venue={self.venue!r}, race_number={self.race_number!r})>"


class ParsedHorse(Base):
    """解析済み出走馬モデル"""

    __tablename__ = "parsed_horses"
    __table_args__ = (UniqueConstraint("race_id", "horse_number", name="uq_race_horse"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    race_id: Mapped[int] = mapped_column(ForeignKey("parsed_races.id"), nullable=False)
    horse_number: Mapped[int] = mapped_column(nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    age: Mapped[int] = mapped_column(nullable=False)
    gender: Mapped[str] = mapped_column(String, nullable=False)
    weight_kg: Mapped[float | None] = mapped_column(nullable=True)
    jockey_name: Mapped[str] = mapped_column(String, nullable=False)
    trainer_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    coat_color: Mapped[str | None] = mapped_column(String, nullable=True)

    race: Mapped[ParsedRace] = relationship(back_populates="horses")

    def __repr__(self) -> str:
        return f"<ParsedHorse(race_id={self.race_id!r}, horse_number={self.horse_number!r}, name={self.name!r})>"


class ParsedOdds(Base):
    """解析済みオッズモデル"""

    __tablename__ = "parsed_odds"
    __table_args__ = (UniqueConstraint("race_id", "horse_number", name="uq_race_odds"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    race_id: Mapped[int] = mapped_column(ForeignKey("parsed_races.id"), nullable=False)
    horse_number: Mapped[int] = mapped_column(nullable=False)
    win_odds: Mapped[float] = mapped_column(nullable=False)
    place_odds_min: Mapped[float] = mapped_column(nullable=False)
    place_odds_max: Mapped[float] = mapped_column(nullable=False)
    approximated: Mapped[bool] = mapped_column(default=False)

    race: Mapped[ParsedRace] = relationship(back_populates="odds")

    def __repr__(self) -> str:
        return f"<ParsedOdds(race_id={self.race_id!r}, horse_number={self.horse_number!r})>"
