"""Dialect strategies keyed by DialectMode."""

from typing import Dict

from .base import Dialect, DialectMode, GenericDialect, detect_dialect
from .mysql import MySQLDialect
from .postgresql import PostgreSQLDialect
from .sqlite import SQLiteDialect

DIALECTS: Dict[DialectMode, Dialect] = {
    DialectMode.MYSQL: MySQLDialect(),
    DialectMode.SQLITE: SQLiteDialect(),
    DialectMode.POSTGRESQL: PostgreSQLDialect(),
    DialectMode.GENERIC: GenericDialect(),
}

_missing = set(DialectMode) - set(DIALECTS)
if _missing:
    raise RuntimeError(f"No dialect strategy registered for: {sorted(_missing)}")


def get_dialect(mode: DialectMode) -> Dialect:
    """Return the clause strategy for a dialect mode."""
    return DIALECTS[mode]


__all__ = [
    "DIALECTS",
    "Dialect",
    "DialectMode",
    "GenericDialect",
    "MySQLDialect",
    "PostgreSQLDialect",
    "SQLiteDialect",
    "detect_dialect",
    "get_dialect",
]
