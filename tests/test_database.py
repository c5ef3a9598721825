"""Schema migrations and the transaction helper."""

import sqlite3

import pytest

from dress_rental.db.connection import get_connection, transaction
from dress_rental.db import migrations
from dress_rental.db.migrations import MIGRATIONS, Migration, apply_migrations


class TestMigrations:
    def test_fresh_database_reaches_latest_version(self, tmp_path):
        conn = get_connection(tmp_path / "app.db")
        try:
            assert apply_migrations(conn) == MIGRATIONS[-1].version
            tables = {
                row["name"]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            }
            assert {"users", "customers", "dresses", "rentals", "rental_items", "payments", "activity_log"} <= tables
        finally:
            conn.close()

    def test_rerun_is_a_no_op(self, connection):
        assert apply_migrations(connection) == MIGRATIONS[-1].version

    def test_foreign_keys_enforced(self, connection):
        with pytest.raises(sqlite3.IntegrityError):
            connection.execute(
                "INSERT INTO rental_items (rental_id, dress_id, rental_price) VALUES (99, 99, 10)"
            )

    def test_failed_migration_rolls_back(self, connection, monkeypatch):
        latest = MIGRATIONS[-1].version
        broken = Migration(
            version=latest + 1,
            script="CREATE TABLE extra (id INTEGER); INSERT INTO missing VALUES (1);",
        )
        monkeypatch.setattr(migrations, "MIGRATIONS", [*MIGRATIONS, broken])

        with pytest.raises(sqlite3.OperationalError):
            apply_migrations(connection)

        version = connection.execute("SELECT schema_version FROM app_meta").fetchone()[0]
        assert version == latest
        tables = {
            row["name"]
            for row in connection.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        }
        assert "extra" not in tables
        assert connection.execute("PRAGMA foreign_keys").fetchone()[0] == 1


class TestTransaction:
    def _count(self, conn):
        return conn.execute("SELECT COUNT(*) FROM app_meta").fetchone()[0]

    def test_commit(self, connection):
        before = self._count(connection)
        with transaction(connection):
            connection.execute("INSERT INTO app_meta (schema_version) VALUES (0)")
        assert self._count(connection) == before + 1

    def test_rollback_on_error(self, connection):
        before = self._count(connection)
        with pytest.raises(RuntimeError):
            with transaction(connection):
                connection.execute("INSERT INTO app_meta (schema_version) VALUES (0)")
                raise RuntimeError("boom")
        assert self._count(connection) == before

    def test_inner_scope_joins_outer(self, connection):
        before = self._count(connection)
        with pytest.raises(RuntimeError):
            with transaction(connection):
                with transaction(connection):
                    connection.execute("INSERT INTO app_meta (schema_version) VALUES (0)")
                assert connection.in_transaction
                raise RuntimeError("boom")
        assert self._count(connection) == before
