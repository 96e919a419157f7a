"""Versioned schema migrations for SQLite databases.

Migrations run once, in order, at startup. The applied version is kept in
SQLite's ``PRAGMA user_version`` so a database is never re-inspected for
migrations it has already received. Each step is idempotent on its own, so a
fresh database built by ``create_all`` (which already has the final shape)
passes through every step unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)

Migration = tuple[int, str, Callable[[Connection], None]]


def _sqlite_column_names(connection: Connection, table_name: str) -> set[str]:
    """Return column names for a SQLite table using PRAGMA table_info."""
    rows = connection.execute(text(f"PRAGMA table_info({table_name});")).mappings().all()
    return {str(row["name"]) for row in rows}


def _sqlite_table_names(connection: Connection) -> set[str]:
    rows = connection.execute(text("SELECT name FROM sqlite_master WHERE type='table';")).all()
    return {str(row[0]) for row in rows}


def get_schema_version(connection: Connection) -> int:
    return int(connection.execute(text("PRAGMA user_version")).scalar_one())


def _set_schema_version(connection: Connection, version: int) -> None:
    # PRAGMA does not accept bound parameters.
    connection.execute(text(f"PRAGMA user_version = {int(version)}"))


def _add_policy_sms_extra_text(connection: Connection) -> None:
    if "policy" not in _sqlite_table_names(connection):
        return
    if "sms_extra_text" not in _sqlite_column_names(connection, "policy"):
        connection.execute(text("ALTER TABLE policy ADD COLUMN sms_extra_text TEXT"))


def _add_orders_updated_at(connection: Connection) -> None:
    if "orders" not in _sqlite_table_names(connection):
        return
    if "updated_at" not in _sqlite_column_names(connection, "orders"):
        connection.execute(text("ALTER TABLE orders ADD COLUMN updated_at DATETIME"))


def _enforce_unique_order_selection(connection: Connection) -> None:
    if "orders" not in _sqlite_table_names(connection):
        return
    removed = connection.execute(
        text(
            """
            DELETE FROM orders
            WHERE id NOT IN (
                SELECT MIN(id)
                FROM orders
                GROUP BY student_id, date, slot
            )
            """
        )
    ).rowcount
    if removed:
        logger.warning("[MIGRATION] Removed %s duplicate order rows before adding unique index.", removed)
    connection.execute(
        text(
            "CREATE UNIQUE INDEX IF NOT EXISTS uq_orders_student_date_slot "
            "ON orders(student_id, date, slot)"
        )
    )


def _create_order_lookup_indexes(connection: Connection) -> None:
    if "orders" not in _sqlite_table_names(connection):
        return
    connection.execute(text("CREATE INDEX IF NOT EXISTS idx_orders_date_slot ON orders(date, slot, status)"))
    connection.execute(text("CREATE INDEX IF NOT EXISTS idx_orders_student_date ON orders(student_id, date)"))


_BLANK_TO_NULL_COLUMNS: dict[str, tuple[str, ...]] = {
    "policy": ("start_date", "end_date"),
    "students": ("start_date", "end_date", "price_override"),
}
_UTC_SUFFIX_COLUMNS: dict[str, str] = {"orders": "created_at", "menu_images": "uploaded_at"}


def _normalize_legacy_values(connection: Connection) -> None:
    # Older databases stored '' for cleared dates and prices, and "...Z" UTC stamps.
    tables = _sqlite_table_names(connection)
    for table_name, columns in _BLANK_TO_NULL_COLUMNS.items():
        if table_name not in tables:
            continue
        present = _sqlite_column_names(connection, table_name)
        for column in columns:
            if column in present:
                connection.execute(
                    text(f"UPDATE {table_name} SET {column} = NULL WHERE TRIM(CAST({column} AS TEXT)) = ''")
                )
    for table_name, column in _UTC_SUFFIX_COLUMNS.items():
        if table_name in tables and column in _sqlite_column_names(connection, table_name):
            connection.execute(
                text(
                    f"UPDATE {table_name} SET {column} = SUBSTR({column}, 1, LENGTH({column}) - 1) || '+00:00' "
                    f"WHERE {column} LIKE '%Z'"
                )
            )


MIGRATIONS: list[Migration] = [
    (1, "policy_sms_extra_text", _add_policy_sms_extra_text),
    (2, "orders_updated_at", _add_orders_updated_at),
    (3, "orders_unique_selection", _enforce_unique_order_selection),
    (4, "orders_lookup_indexes", _create_order_lookup_indexes),
    (5, "legacy_blank_values", _normalize_legacy_values),
]

LATEST_SCHEMA_VERSION: int = MIGRATIONS[-1][0]


def apply_migrations(engine: Engine, migrations: list[Migration] | None = None) -> int:
    """Apply pending migrations and return the resulting schema version."""
    if engine.dialect.name != "sqlite":
        return 0

    steps = sorted(migrations if migrations is not None else MIGRATIONS, key=lambda step: step[0])
    with engine.begin() as connection:
        current = get_schema_version(connection)
        for version, name, migrate in steps:
            if version <= current:
                continue
            logger.info("[MIGRATION] Applying %s (%s)", version, name)
            migrate(connection)
            _set_schema_version(connection, version)
            current = version
    return current
