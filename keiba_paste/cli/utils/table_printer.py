"""抽出結果のテーブル表示ユーティリティ"""

import json
from dataclasses import asdict
from datetime import date, datetime

import click

from keiba_paste.diagnostics import Report
from keiba_paste.models import HorseRecord, OddsRecord, RaceInfo

SURFACE_LABELS = {"turf": "芝", "dirt": "ダート"}
CONDITION_LABELS = {"firm": "良", "good": "稍重", "yielding": "重", "soft": "不良"}
GENDER_LABELS = {"male": "牡", "female": "牝", "gelding": "セ"}


def print_race_info(race: RaceInfo) -> None:
    """レース情報を表示する"""
    click.echo(f"開催日: {race.date.isoformat() if race.date else '-'}")
    click.echo(f"会場: {race.venue} {race.race_number}R")
    click.echo(f"レース名: {race.title or '-'}")
    click.echo(f"コース: {SURFACE_LABELS[race.surface]}{race.distance_meters}m")
    click.echo(f"馬場: {CONDITION_LABELS[race.condition]}")
    click.echo(f"クラス: {race.race_class}")


def print_roster_table(horses: list[HorseRecord]) -> None:
    """出走馬テーブルを表示する

    Args:
        horses: 出走馬リスト
    """
    click.echo(
        f"{'馬番':^4} | {'馬名':^12} | {'性齢':^4} | {'斤量':^5} | {'騎手':^6} | {'調教師':^6}"
    )
    click.echo("-" * 60)
    for horse in horses:
        name = horse.name[:12]
        gender_age = f"{GENDER_LABELS[horse.gender]}{horse.age}"
        weight = f"{horse.weight_kg:.1f}" if horse.weight_kg is not None else "-"
        click.echo(
            f"{horse.number:^4} | {name:^12} | {gender_age:^4} | {weight:^5} | "
            f"{horse.jockey_name:^6} | {horse.trainer_name or '-':^6}"
        )


def print_odds_table(odds: list[OddsRecord]) -> None:
    """オッズテーブルを表示する（概算値には * を付ける）"""
    click.echo(f"{'馬番':^4} | {'単勝':^7} | {'複勝':^13}")
    click.echo("-" * 32)
    for record in odds:
        mark = "*" if record.approximated else " "
        place = f"{record.place_odds_min:.1f}-{record.place_odds_max:.1f}"
        click.echo(f"{record.horse_number:^4} | {record.win_odds:^7.1f} | {place:^13}{mark}")


def _json_default(value):
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(data, report: Report) -> str:
    """抽出データとレポートをまとめたJSON文字列を返す"""
    if isinstance(data, list):
        payload = [asdict(item) for item in data]
    elif data is not None:
        payload = asdict(data)
    else:
        payload = None
    return json.dumps(
        {"data": payload, "report": asdict(report)},
        ensure_ascii=False,
        indent=2,
        default=_json_default,
    )
