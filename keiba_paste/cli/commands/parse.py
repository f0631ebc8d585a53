"""解析コマンド

netkeiba からコピーしたテキストファイルを解析し、結果と診断レポートを
表示するCLIコマンドを提供する。エラーがあれば終了コード1で終わる。
"""

import functools
import logging
from pathlib import Path

import click

from keiba_paste.cli.utils.table_printer import (
    print_odds_table,
    print_race_info,
    print_roster_table,
    to_json,
)
from keiba_paste.db import get_engine, get_session, init_db
from keiba_paste.diagnostics import ParseErrorReporter
from keiba_paste.extractors import OddsExtractor, RaceInfoExtractor, RosterExtractor
from keiba_paste.models import ParserConfig
from keiba_paste.models.types import PASTE_LAYOUTS
from keiba_paste.pipeline import RawPaste, parse_paste
from keiba_paste.storage import ParsedRaceRepository


def parser_options(func):
    """抽出設定の共通オプション"""

    @click.option("--strict", is_flag=True, default=False, help="厳密モード（エラーが1件でもあれば中止）")
    @click.option(
        "--keep-invalid",
        is_flag=True,
        default=False,
        help="不正な馬データをスキップせずエラーとして扱う",
    )
    @click.option(
        "--layout",
        type=click.Choice(PASTE_LAYOUTS),
        default="page",
        show_default=True,
        help="貼り付けテキストのレイアウト",
    )
    @click.option("--json", "as_json", is_flag=True, default=False, help="JSON形式で出力")
    @click.option("--verbose", "-v", is_flag=True, default=False, help="詳細ログを出力")
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if kwargs.get("verbose"):
            logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
        return func(*args, **kwargs)

    return wrapper


def _build_config(strict: bool, keep_invalid: bool, layout: str) -> ParserConfig:
    return ParserConfig(strict=strict, skip_invalid_horses=not keep_invalid, layout=layout)


def _read(path: Path | None) -> str:
    if path is None:
        return ""
    return path.read_text(encoding="utf-8")


_file_argument = click.argument(
    "file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)


def _run_single(extractor, text: str, printer, as_json: bool) -> None:
    reporter = ParseErrorReporter()
    result = extractor.extract(text)
    report = reporter.generate_report([result])

    if as_json:
        click.echo(to_json(result.data, report))
    else:
        if result.data:
            printer(result.data)
            click.echo("")
        click.echo(reporter.format_report_as_text(report))

    if not result.success:
        raise SystemExit(1)


@click.command()
@_file_argument
@parser_options
def race(file: Path, strict: bool, keep_invalid: bool, layout: str, as_json: bool, verbose: bool):
    """レース情報ブロックを解析"""
    config = _build_config(strict, keep_invalid, layout)
    _run_single(RaceInfoExtractor(config), _read(file), print_race_info, as_json)


@click.command()
@_file_argument
@parser_options
def roster(file: Path, strict: bool, keep_invalid: bool, layout: str, as_json: bool, verbose: bool):
    """出馬表ブロックを解析"""
    config = _build_config(strict, keep_invalid, layout)
    _run_single(RosterExtractor(config), _read(file), print_roster_table, as_json)


@click.command()
@_file_argument
@parser_options
def odds(file: Path, strict: bool, keep_invalid: bool, layout: str, as_json: bool, verbose: bool):
    """オッズ表ブロックを解析"""
    config = _build_config(strict, keep_invalid, layout)
    _run_single(OddsExtractor(config), _read(file), print_odds_table, as_json)


_optional_file = click.Path(exists=True, dir_okay=False, path_type=Path)


@click.command()
@click.option("--race", "race_file", type=_optional_file, default=None, help="レース情報ファイル")
@click.option("--roster", "roster_file", type=_optional_file, default=None, help="出馬表ファイル")
@click.option("--odds", "odds_file", type=_optional_file, default=None, help="オッズ表ファイル")
@click.option("--db", type=click.Path(), default=None, help="保存先DBファイルパス")
@parser_options
def parse(
    race_file: Path | None,
    roster_file: Path | None,
    odds_file: Path | None,
    db: str | None,
    strict: bool,
    keep_invalid: bool,
    layout: str,
    as_json: bool,
    verbose: bool,
):
    """レース情報・出馬表・オッズ表をまとめて解析"""
    if race_file is None and roster_file is None and odds_file is None:
        click.echo("--race / --roster / --odds のいずれかを指定してください")
        raise SystemExit(1)

    config = _build_config(strict, keep_invalid, layout)
    raw = RawPaste(
        race_info=_read(race_file),
        roster=_read(roster_file),
        odds=_read(odds_file),
    )
    outcome = parse_paste(raw, config)
    reporter = ParseErrorReporter()

    if as_json:
        click.echo(reporter.format_report_as_json(outcome.report))
    else:
        if outcome.race and outcome.race.data:
            print_race_info(outcome.race.data)
            click.echo("")
        if outcome.roster and outcome.roster.data:
            print_roster_table(outcome.roster.data)
            click.echo("")
        if outcome.odds and outcome.odds.data:
            print_odds_table(outcome.odds.data)
            click.echo("")
        click.echo(reporter.format_report_as_text(outcome.report))

    if not outcome.success:
        raise SystemExit(1)

    if db is None:
        return

    if outcome.race is None or outcome.race.data is None:
        click.echo("レース情報がないため保存をスキップしました")
        return

    engine = get_engine(db)
    init_db(engine)
    with get_session(engine) as session:
        repository = ParsedRaceRepository(session)
        row = repository.save(
            outcome.race.data,
            horses=outcome.roster.data if outcome.roster else None,
            odds=outcome.odds.data if outcome.odds else None,
        )
        click.echo(f"保存: id={row.id} {row.venue} {row.race_number}R {row.title}")
