"""Database migrations for SQLite schema versioning."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass

from dress_rental.db.connection import transaction
from dress_rental.logging_config import get_logger


@dataclass(frozen=True)
class Migration:
    version: int
    script: str


MIGRATIONS: list[Migration] = [
    Migration(
        version=1,
        script="""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT NOT NULL UNIQUE,
            password_hash TEXT NOT NULL,
            role TEXT NOT NULL CHECK (role IN ('Administrator', 'Staff')),
            full_name TEXT,
            email TEXT,
            phone TEXT,
            is_active INTEGER NOT NULL DEFAULT 1,
            last_login TEXT,
            created_at TEXT
        );

        CREATE TABLE IF NOT EXISTS customers (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            ic_number TEXT NOT NULL UNIQUE,
            phone TEXT,
            email TEXT,
            address TEXT,
            date_of_birth TEXT NOT NULL,
            created_at TEXT,
            updated_at TEXT
        );

        CREATE TABLE IF NOT EXISTS dresses (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            category TEXT,
            size TEXT,
            color TEXT,
            rental_price REAL NOT NULL CHECK (rental_price > 0),
            condition_status TEXT NOT NULL DEFAULT 'Good',
            availability_status TEXT NOT NULL DEFAULT 'Available'
                CHECK (availability_status IN ('Available', 'Rented', 'Maintenance')),
            created_at TEXT,
            updated_at TEXT
        );

        CREATE TABLE IF NOT EXISTS rentals (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            customer_id INTEGER NOT NULL,
            rental_date TEXT NOT NULL,
            due_date TEXT NOT NULL,
            return_date TEXT,
            total_amount REAL NOT NULL DEFAULT 0,
            late_fee REAL NOT NULL DEFAULT 0,
            status TEXT NOT NULL DEFAULT 'Active'
                CHECK (status IN ('Active', 'Returned')),
            created_at TEXT,
            updated_at TEXT,
            FOREIGN KEY (customer_id) REFERENCES customers(id)
        );

        CREATE TABLE IF NOT EXISTS rental_items (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            rental_id INTEGER NOT NULL,
            dress_id INTEGER NOT NULL,
            rental_price REAL NOT NULL,
            FOREIGN KEY (rental_id) REFERENCES rentals(id) ON DELETE CASCADE,
            FOREIGN KEY (dress_id) REFERENCES dresses(id)
        );

        CREATE TABLE IF NOT EXISTS payments (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            rental_id INTEGER NOT NULL,
            amount REAL NOT NULL CHECK (amount > 0),
            payment_method TEXT NOT NULL,
            payment_date TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'Completed',
            transaction_reference TEXT,
            created_at TEXT,
            FOREIGN KEY (rental_id) REFERENCES rentals(id)
        );

        CREATE INDEX IF NOT EXISTS idx_customers_ic_number
            ON customers(ic_number);
        CREATE INDEX IF NOT EXISTS idx_rentals_customer_status
            ON rentals(customer_id, status);
        CREATE INDEX IF NOT EXISTS idx_rentals_due_date
            ON rentals(due_date);
        CREATE INDEX IF NOT EXISTS idx_rental_items_rental_id
            ON rental_items(rental_id);
        CREATE INDEX IF NOT EXISTS idx_rental_items_dress_id
            ON rental_items(dress_id);
        CREATE INDEX IF NOT EXISTS idx_payments_rental_id
            ON payments(rental_id);
        """,
    ),
    Migration(
        version=2,
        script="""
        ALTER TABLE dresses
            ADD COLUMN cleaning_status TEXT NOT NULL DEFAULT 'Clean';

        CREATE TABLE IF NOT EXISTS activity_log (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER,
            action TEXT NOT NULL,
            table_name TEXT,
            record_id INTEGER,
            details TEXT,
            created_at TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_activity_log_created_at
            ON activity_log(created_at);
        """,
    ),
]


def _fetch_schema_version(connection: sqlite3.Connection) -> int:
    connection.execute(
        """
        CREATE TABLE IF NOT EXISTS app_meta (
            schema_version INTEGER NOT NULL
        );
        """
    )
    row = connection.execute(
        "SELECT schema_version FROM app_meta LIMIT 1"
    ).fetchone()
    if row is None:
        connection.execute("INSERT INTO app_meta (schema_version) VALUES (0)")
        return 0
    return int(row[0])


def _run_migration(connection: sqlite3.Connection, migration: Migration) -> None:
    # executescript() commits any open transaction first, so the script
    # carries its own BEGIN/COMMIT to stay atomic.
    script = (
        "BEGIN;\n"
        f"{migration.script}\n"
        f"UPDATE app_meta SET schema_version = {int(migration.version)};\n"
        "COMMIT;"
    )
    try:
        connection.executescript(script)
    except sqlite3.Error:
        if connection.in_transaction:
            connection.rollback()
        raise


def apply_migrations(connection: sqlite3.Connection) -> int:
    """Apply pending database migrations and return the schema version."""
    logger = get_logger(__name__)
    with transaction(connection):
        current_version = _fetch_schema_version(connection)

    for migration in MIGRATIONS:
        if migration.version <= current_version:
            continue

        try:
            _run_migration(connection, migration)
        except sqlite3.Error:
            logger.exception("Failed to apply migration version=%s", migration.version)
            raise

        logger.info("Applied migration version=%s", migration.version)
        current_version = migration.version
    return current_version
