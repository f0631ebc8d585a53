"""保存済みの解析結果を一覧表示するコマンド"""

import click

from keiba_paste.db import get_engine, get_session, init_db
from keiba_paste.storage import ParsedRaceRepository


@click.command()
@click.option("--db", required=True, type=click.Path(), help="DBファイルパス")
@click.option("--limit", default=20, type=int, help="表示件数（デフォルト: 20）")
def history(db: str, limit: int):
    """保存済みのレースを新しい順に表示"""
    engine = get_engine(db)
    init_db(engine)

    with get_session(engine) as session:
        rows = ParsedRaceRepository(session).list_recent(limit)
        if not rows:
            click.echo("保存済みのレースはありません")
            return

        for row in rows:
            race_date = row.date.isoformat() if row.date else "----------"
            click.echo(
                f"{row.id:>4} | {race_date} | {row.venue} {row.race_number:>2}R | "
                f"{row.title} | {len(row.horses)}頭 | オッズ{len(row.odds)}件"
            )
