"""解析結果DBへの接続

保存先は SQLite ファイル（または ":memory:"）。接続ごとに外部キー制約を
有効にし、出走馬・オッズが親レースなしで残らないようにする。
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import Engine, create_engine, event, inspect
from sqlalchemy.orm import Session, sessionmaker

from keiba_paste.storage.models import Base

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite は接続ごとに既定で外部キー制約が無効
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def get_engine(db_path: str | Path, echo: bool = False) -> Engine:
    """解析結果DBのエンジンを作成する

    Args:
        db_path: DBファイルのパス。":memory:" ならインメモリDB
        echo: 発行するSQLをログに出すか

    Returns:
        外部キー制約を有効にしたEngine
    """
    db_path = str(db_path)
    if db_path != MEMORY_DB:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(f"sqlite:///{db_path}", echo=echo)
    event.listen(engine, "connect", _enable_foreign_keys)
    logger.debug("engine created: %s", engine.url)
    return engine


@contextmanager
def get_session(engine: Engine) -> Generator[Session, None, None]:
    """正常終了でコミット、例外でロールバックするセッション"""
    session = sessionmaker(bind=engine)()

    try:
        yield session
        session.commit()
    except Exception:
        logger.debug("rolling back session on %s", engine.url)
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine) -> list[str]:
    """足りないテーブルを作成する

    既存のテーブルには触れないので、何度呼んでもよい。

    Returns:
        今回新しく作成したテーブル名
    """
    existing = set(inspect(engine).get_table_names())
    Base.metadata.create_all(engine)
    created = [name for name in Base.metadata.tables if name not in existing]
    if created:
        logger.info("created tables: %s", ", ".join(created))
    return created
