"""Repository for the operator activity log."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Optional

from dress_rental.db.connection import transaction
from dress_rental.domain.models import ActivityEntry
from dress_rental.logging_config import get_logger
from dress_rental.repositories.mappers import activity_from_row


class ActivityRepo:
    """Append-only access to ``activity_log``."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._connection.row_factory = sqlite3.Row
        self._logger = get_logger(self.__class__.__name__)

    def add(
        self,
        user_id: Optional[int],
        action: str,
        table_name: Optional[str] = None,
        record_id: Optional[int] = None,
        details: Optional[str] = None,
    ) -> ActivityEntry:
        created_at = datetime.now().isoformat(timespec="seconds")
        with transaction(self._connection):
            cursor = self._connection.execute(
                """
                INSERT INTO activity_log (
                    user_id,
                    action,
                    table_name,
                    record_id,
                    details,
                    created_at
                )
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (user_id, action, table_name, record_id, details, created_at),
            )
        return ActivityEntry(
            id=cursor.lastrowid,
            user_id=user_id,
            action=action,
            table_name=table_name,
            record_id=record_id,
            details=details,
            created_at=created_at,
        )

    def list_recent(self, limit: int = 50) -> list[ActivityEntry]:
        try:
            rows = self._connection.execute(
                """
                SELECT *
                FROM activity_log
                ORDER BY created_at DESC, id DESC
                LIMIT ?
                """,
                (limit,),
            ).fetchall()
        except Exception:
            self._logger.exception("Failed to list activity log")
            raise
        return [activity_from_row(row) for row in rows]
