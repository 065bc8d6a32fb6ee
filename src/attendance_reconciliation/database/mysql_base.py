from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from mysql.connector import errorcode
from mysql.connector import errors as mysql_errors

from ..core.exceptions import RelationNotFoundError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


@contextmanager
def optional_relation(relation: str) -> Iterator[None]:
    """Translate MySQL "table doesn't exist" (1146) into RelationNotFoundError.

    Any other database error propagates unchanged.
    """

    try:
        yield
    except mysql_errors.ProgrammingError as e:
        if getattr(e, "errno", None) == errorcode.ER_NO_SUCH_TABLE:
            raise RelationNotFoundError(relation) from e
        raise


def load_json_column(value: Any, default: Any) -> Any:
    """JSON columns come back as str/bytes from mysql-connector."""

    if value is None:
        return default
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        value = value.strip()
        return json.loads(value) if value else default
    return value
