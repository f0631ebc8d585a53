"""Click CLIメインモジュール"""

import click


@click.group()
def main():
    """netkeiba 貼り付けテキスト解析CLI"""
    pass


# コマンドの登録
from keiba_paste.cli.commands.parse import odds, parse, race, roster
from keiba_paste.cli.commands.history import history

main.add_command(race)
main.add_command(roster)
main.add_command(odds)
main.add_command(parse)
main.add_command(history)


__all__ = ["main"]
