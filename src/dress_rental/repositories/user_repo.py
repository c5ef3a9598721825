"""Repository for operator accounts."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import List, Optional

from dress_rental.db.connection import transaction
from dress_rental.domain.models import User, UserRole
from dress_rental.logging_config import get_logger
from dress_rental.repositories.mappers import user_from_row


def _now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


class UserRepo:
    """Data access for users."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._connection.row_factory = sqlite3.Row
        self._logger = get_logger(self.__class__.__name__)

    def create(
        self,
        username: str,
        password_hash: str,
        role: UserRole,
        full_name: Optional[str],
        email: Optional[str],
        phone: Optional[str],
    ) -> User:
        created_at = _now_iso()
        try:
            with transaction(self._connection):
                cursor = self._connection.execute(
                    """
                    INSERT INTO users (
                        username,
                        password_hash,
                        role,
                        full_name,
                        email,
                        phone,
                        is_active,
                        created_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, 1, ?)
                    """,
                    (
                        username,
                        password_hash,
                        role.value,
                        full_name,
                        email,
                        phone,
                        created_at,
                    ),
                )
        except Exception:
            self._logger.exception("Failed to create user username=%s", username)
            raise
        return User(
            id=cursor.lastrowid,
            username=username,
            password_hash=password_hash,
            role=role,
            full_name=full_name,
            email=email,
            phone=phone,
            is_active=True,
            created_at=created_at,
        )

    def get_by_id(self, user_id: int) -> Optional[User]:
        try:
            row = self._connection.execute(
                "SELECT * FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        except Exception:
            self._logger.exception("Failed to get user id=%s", user_id)
            raise
        return user_from_row(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        try:
            row = self._connection.execute(
                "SELECT * FROM users WHERE username = ?",
                (username,),
            ).fetchone()
        except Exception:
            self._logger.exception("Failed to get user username=%s", username)
            raise
        return user_from_row(row) if row else None

    def list_all(self) -> List[User]:
        try:
            rows = self._connection.execute(
                "SELECT * FROM users ORDER BY username"
            ).fetchall()
        except Exception:
            self._logger.exception("Failed to list users")
            raise
        return [user_from_row(row) for row in rows]

    def count(self) -> int:
        try:
            row = self._connection.execute(
                "SELECT COUNT(*) AS user_count FROM users"
            ).fetchone()
        except Exception:
            self._logger.exception("Failed to count users")
            raise
        return int(row["user_count"]) if row else 0

    def update_password(self, user_id: int, password_hash: str) -> bool:
        try:
            with transaction(self._connection):
                cursor = self._connection.execute(
                    "UPDATE users SET password_hash = ? WHERE id = ?",
                    (password_hash, user_id),
                )
        except Exception:
            self._logger.exception("Failed to update password user_id=%s", user_id)
            raise
        return cursor.rowcount > 0

    def set_active(self, user_id: int, is_active: bool) -> bool:
        try:
            with transaction(self._connection):
                cursor = self._connection.execute(
                    "UPDATE users SET is_active = ? WHERE id = ?",
                    (int(is_active), user_id),
                )
        except Exception:
            self._logger.exception("Failed to update user status id=%s", user_id)
            raise
        return cursor.rowcount > 0

    def touch_last_login(self, user_id: int) -> str:
        last_login = _now_iso()
        try:
            with transaction(self._connection):
                self._connection.execute(
                    "UPDATE users SET last_login = ? WHERE id = ?",
                    (last_login, user_id),
                )
        except Exception:
            self._logger.exception("Failed to update last login user_id=%s", user_id)
            raise
        return last_login
