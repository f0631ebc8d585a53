"""解析コマンドのテスト"""

import json
import shutil
from pathlib import Path

import pytest
from click.testing import CliRunner

from keiba_paste.cli import main

FIXTURES = Path(__file__).parent.parent / "fixtures"


@pytest.fixture
def runner():
    """CLIテスト用のClickランナー"""
    return CliRunner()


@pytest.fixture
def paste_dir(tmp_path):
    """フィクスチャをコピーした作業ディレクトリ"""
    for name in ("race_page.txt", "roster_page.txt", "roster_page_malformed.txt", "odds_page.txt"):
        shutil.copy(FIXTURES / name, tmp_path / name)
    return tmp_path


class TestMainGroup:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        for command in ("race", "roster", "odds", "parse", "history"):
            assert command in result.output


class TestRaceCommand:
    """raceコマンドのテスト"""

    def test_レース情報を表示する(self, runner, paste_dir):
        result = runner.invoke(main, ["race", str(paste_dir / "race_page.txt")])

        assert result.exit_code == 0
        assert "会場: 東京 11R" in result.output
        assert "コース: 芝2400m" in result.output
        assert "Summary: parsing completed successfully" in result.output

    def test_エラーがあれば終了コード1(self, runner, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_text("第5R 3歳未勝利\n", encoding="utf-8")

        result = runner.invoke(main, ["race", str(path)])

        assert result.exit_code == 1
        assert "Errors: 2" in result.output

    def test_JSON出力(self, runner, paste_dir):
        result = runner.invoke(main, ["race", str(paste_dir / "race_page.txt"), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["data"]["venue"] == "東京"
        assert data["data"]["date"] == "2024-05-26"
        assert data["report"]["total_errors"] == 0

    def test_compactレイアウト(self, runner, tmp_path):
        path = tmp_path / "race.txt"
        path.write_text("東京 第11R 日本ダービー(G1) 芝2400m 良\n", encoding="utf-8")

        assert runner.invoke(main, ["race", str(path), "--layout", "compact"]).exit_code == 0
        assert runner.invoke(main, ["race", str(path), "--layout", "compact", "--strict"]).exit_code == 1

    def test_存在しないファイル(self, runner, tmp_path):
        result = runner.invoke(main, ["race", str(tmp_path / "missing.txt")])
        assert result.exit_code != 0


class TestRosterCommand:
    """rosterコマンドのテスト"""

    def test_出走馬テーブル(self, runner, paste_dir):
        result = runner.invoke(main, ["roster", str(paste_dir / "roster_page.txt")])

        assert result.exit_code == 0
        assert "ジャスティンミラノ" in result.output
        assert "メイショウタバル" in result.output

    def test_不正な馬はスキップ(self, runner, paste_dir):
        result = runner.invoke(main, ["roster", str(paste_dir / "roster_page_malformed.txt")])

        assert result.exit_code == 0
        assert "Warnings: 1" in result.output

    def test_keep_invalidでは失敗(self, runner, paste_dir):
        result = runner.invoke(
            main, ["roster", str(paste_dir / "roster_page_malformed.txt"), "--keep-invalid"]
        )
        assert result.exit_code == 1


class TestOddsCommand:
    def test_概算値に印を付ける(self, runner, paste_dir):
        result = runner.invoke(main, ["odds", str(paste_dir / "odds_page.txt")])

        assert result.exit_code == 0
        assert "*" in result.output


class TestParseCommand:
    """parseコマンドのテスト"""

    def test_ファイル指定なしはエラー(self, runner):
        result = runner.invoke(main, ["parse"])
        assert result.exit_code == 1

    def test_まとめて解析してDBに保存(self, runner, paste_dir):
        db_path = str(paste_dir / "paste.db")
        result = runner.invoke(
            main,
            [
                "parse",
                "--race", str(paste_dir / "race_page.txt"),
                "--roster", str(paste_dir / "roster_page.txt"),
                "--odds", str(paste_dir / "odds_page.txt"),
                "--db", db_path,
            ],
        )

        assert result.exit_code == 0
        assert "保存: id=1 東京 11R 日本ダービー(G1)" in result.output

        history = runner.invoke(main, ["history", "--db", db_path])
        assert history.exit_code == 0
        assert "2024-05-26" in history.output
        assert "8頭" in history.output
        assert "オッズ8件" in history.output

    def test_レース情報がなければ保存しない(self, runner, paste_dir):
        db_path = str(paste_dir / "paste.db")
        result = runner.invoke(
            main, ["parse", "--roster", str(paste_dir / "roster_page.txt"), "--db", db_path]
        )

        assert result.exit_code == 0
        assert "保存をスキップしました" in result.output

    def test_JSONレポート(self, runner, paste_dir):
        result = runner.invoke(
            main, ["parse", "--race", str(paste_dir / "race_page.txt"), "--json"]
        )

        assert result.exit_code == 0
        assert json.loads(result.output)["summary"] == "parsing completed successfully"


class TestHistoryCommand:
    def test_空のDB(self, runner, tmp_path):
        result = runner.invoke(main, ["history", "--db", str(tmp_path / "empty.db")])

        assert result.exit_code == 0
        assert "保存済みのレースはありません" in result.output
