from __future__ import annotations

from typing import Any, Dict, Optional

import mysql.connector

from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import Profile
from .repository import ProfileRepository


def _to_profile(row: Dict[str, Any]) -> Profile:
    return Profile(
        profile_id=int(row["profile_id"]),
        email=row["email"],
        full_name=row.get("full_name"),
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        created_at=row.get("created_at"),
    )


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT profile_id, email, full_name, password_hash, role, created_at
                FROM profiles
                WHERE profile_id=%s
                """,
                (int(profile_id),),
            )
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def get_by_email(self, email: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT profile_id, email, full_name, password_hash, role, created_at
                FROM profiles
                WHERE email=%s
                """,
                (email,),
            )
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def create_profile(self, *, email: str, full_name: Optional[str], password_hash: str, role: Role) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO profiles(email, full_name, password_hash, role)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (email, full_name, password_hash, role.value),
                )
            except mysql.connector.IntegrityError as e:
                if is_duplicate_key(e):
                    raise ValidationError("Email is already registered", details={"email": "taken"}) from e
                raise
            return int(cur.lastrowid)
