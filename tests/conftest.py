"""Pytest configuration: fake connections and opt-in database fixtures.

Unit tests run against FakeConnection, which implements the connection
protocol with the package's own quoting helpers over SQLAlchemy dialects
and records every executed statement. Integration tests use a throwaway
SQLite file; PostgreSQL tests run only when BULK_INSERT_TEST_DATABASE_URL
points at a test database.
"""

from __future__ import annotations

import os
import re
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

import pytest
from sqlalchemy import create_engine
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.engine.default import DefaultDialect
from sqlalchemy.engine.url import make_url

from bulk_insert.infrastructure.sql.core.identifier import (
    qualify_table,
    quote_identifier_if_needed,
)
from bulk_insert.infrastructure.sql.core.literals import quote_literal
from bulk_insert.io.loader.models import ColumnDescriptor, ResultSet

FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, 123456)
FIXED_NOW_SQL = "'2024-01-02 03:04:05.123456'"

POSTGRES_URL_ENV = "BULK_INSERT_TEST_DATABASE_URL"


class FakeConnection:
    """In-memory stand-in for a database connection."""

    def __init__(
        self,
        adapter_name: str,
        columns: Sequence[ColumnDescriptor],
        results: Optional[Iterable[ResultSet]] = None,
        fail_with: Optional[Exception] = None,
    ):
        self.adapter_name = adapter_name
        self._columns = list(columns)
        self._results = list(results or [])
        self.fail_with = fail_with
        self.executed: List[str] = []
        self.quoted: List[Any] = []

    @property
    def _dialect(self) -> str:
        return self.adapter_name.lower()

    @property
    def sql_dialect(self):
        name = self._dialect
        if name in ("postgresql", "postgis"):
            return postgresql.dialect()
        if name in ("mysql", "mariadb"):
            return mysql.dialect()
        if name == "sqlite":
            return sqlite.dialect()
        return DefaultDialect()

    def columns(self, table_name: str) -> List[ColumnDescriptor]:
        return list(self._columns)

    def quote_table_name(self, name: str) -> str:
        return qualify_table(name, dialect=self._dialect)

    def quote_column_name(self, name: str) -> str:
        return quote_identifier_if_needed(name, dialect=self._dialect)

    def type_cast(self, column: ColumnDescriptor, value: Any) -> Any:
        return value

    def quote(self, value: Any) -> str:
        self.quoted.append(value)
        return quote_literal(value, self.sql_dialect)

    def exec_query(self, sql: str) -> ResultSet:
        if self.fail_with is not None:
            raise self.fail_with
        self.executed.append(sql)
        if self._results:
            return self._results.pop(0)
        return ResultSet()


USERS_COLUMNS = [
    ColumnDescriptor("id", nullable=False, sql_type="INTEGER"),
    ColumnDescriptor("name", sql_type="VARCHAR"),
    ColumnDescriptor("email", sql_type="VARCHAR"),
    ColumnDescriptor("status", default="active", sql_type="VARCHAR"),
    ColumnDescriptor("created_at", sql_type="TIMESTAMP"),
    ColumnDescriptor("updated_at", sql_type="TIMESTAMP"),
]


@pytest.fixture
def users_columns() -> List[ColumnDescriptor]:
    return list(USERS_COLUMNS)


@pytest.fixture
def make_connection() -> Callable[..., FakeConnection]:
    """Factory for FakeConnection bound to the users table columns."""

    def _make(
        adapter_name: str = "postgresql",
        columns: Optional[Sequence[ColumnDescriptor]] = None,
        **kwargs: Any,
    ) -> FakeConnection:
        return FakeConnection(adapter_name, columns or USERS_COLUMNS, **kwargs)

    return _make


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def sqlite_engine(tmp_path):
    """SQLite engine with a users table, disposed after the test."""
    engine = create_engine(f"sqlite:///{tmp_path / 'bulk_insert_test.db'}")
    with engine.begin() as conn:
        conn.exec_driver_sql(
            """
            CREATE TABLE users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name VARCHAR(100) NOT NULL,
                email VARCHAR(100) NOT NULL UNIQUE,
                status VARCHAR(20) DEFAULT 'active',
                age INTEGER,
                created_at TIMESTAMP,
                updated_at TIMESTAMP
            )
            """
        )
    yield engine
    engine.dispose()


def _validate_test_database(dsn: str) -> bool:
    """Refuse to run destructive tests against a non-test database.

    Examples:
        >>> _validate_test_database("postgresql://localhost/bulk_insert_test")
        True
    """
    db_name = make_url(dsn).database
    if not db_name or not re.search(r"(test|tmp|dev|local|sandbox)", db_name, re.IGNORECASE):
        raise RuntimeError(
            f"Refusing to run tests against non-test database: {db_name!r}. "
            "Test databases must contain one of: test, tmp, dev, local, sandbox."
        )
    return True


@pytest.fixture
def postgres_engine():
    """PostgreSQL engine with a scratch users table; skipped unless configured."""
    dsn = os.getenv(POSTGRES_URL_ENV)
    if not dsn:
        pytest.skip(f"{POSTGRES_URL_ENV} not set")
    _validate_test_database(dsn)

    engine = create_engine(dsn)
    with engine.begin() as conn:
        conn.exec_driver_sql("DROP TABLE IF EXISTS bulk_insert_users")
        conn.exec_driver_sql(
            """
            CREATE TABLE bulk_insert_users (
                id SERIAL PRIMARY KEY,
                name VARCHAR(100) NOT NULL,
                email VARCHAR(100) NOT NULL UNIQUE,
                status VARCHAR(20) DEFAULT 'active',
                "nickName" VARCHAR(100),
                last_seen TIMESTAMPTZ,
                created_at TIMESTAMP,
                updated_at TIMESTAMP
            )
            """
        )
    yield engine
    with engine.begin() as conn:
        conn.exec_driver_sql("DROP TABLE IF EXISTS bulk_insert_users")
    engine.dispose()


def rows_as_dicts(engine, sql: str) -> List[Dict[str, Any]]:
    with engine.connect() as conn:
        result = conn.exec_driver_sql(sql)
        return [dict(row._mapping) for row in result]
