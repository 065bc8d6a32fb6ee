from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository


def _to_user(r: dict) -> User:
    manager_id = r.get("reporting_manager_id")
    return User(
        user_id=int(r["user_id"]),
        name=r["name"],
        role=str(r["role"]),
        reporting_manager_id=int(manager_id) if manager_id is not None else None,
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_users(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, name, role, reporting_manager_id, is_active
                FROM users
                WHERE is_active=1
                ORDER BY name, user_id
                """
            )
            return [_to_user(r) for r in fetchall(cur)]

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, name, role, reporting_manager_id, is_active
                FROM users
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_user(r) if r else None

    def find_first_by_role(self, role: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, name, role, reporting_manager_id, is_active
                FROM users
                WHERE role=%s AND is_active=1
                ORDER BY user_id
                LIMIT 1
                """,
                (role,),
            )
            r = fetchone(cur)
            return _to_user(r) if r else None
