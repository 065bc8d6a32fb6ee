from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"


def _as_config(db_config: dict) -> DBConfig:
    return DBConfig.from_dict(
        {
            "host": db_config.get("host", "localhost"),
            "port": db_config.get("port", 3306),
            "user": db_config.get("user", "root"),
            "password": db_config.get("password", ""),
            "database": db_config.get("database", "attendance_db"),
            "connect_timeout": db_config.get("connect_timeout", 10),
        }
    )


@contextmanager
def _admin_connection(config: DBConfig, *, select_database: bool = True):
    """Plain-driver connection for DDL; commits on success, always closes."""

    kwargs = dict(
        host=config.host,
        port=config.port,
        user=config.user,
        password=config.password,
        connection_timeout=config.connect_timeout,
        use_pure=True,
    )
    if select_database:
        kwargs["database"] = config.database
    conn = mysql.connector.connect(**kwargs)
    try:
        cur = conn.cursor()
        yield cur
        conn.commit()
    finally:
        conn.close()


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def schema_statements(sql: str) -> list[str]:
    return list(iter_sql_statements(_strip_create_db_and_use(_strip_comments(sql))))


def ensure_database_exists(db_config: dict) -> None:
    config = _as_config(db_config)
    with _admin_connection(config, select_database=False) as cur:
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    config = _as_config(db_config)
    ensure_database_exists(db_config)

    statements = schema_statements(Path(schema_path).read_text(encoding="utf-8"))
    with _admin_connection(config) as cur:
        for stmt in statements:
            cur.execute(stmt)
    logger.info("Schema applied to %s@%s/%s (%d statements)", config.user, config.host, config.database, len(statements))


def list_tables(db_config: dict) -> list[str]:
    with _admin_connection(_as_config(db_config)) as cur:
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
