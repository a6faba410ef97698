"""
Dialect strategy protocol and the generic fallback.

Each supported dialect contributes the three clauses that differ between
vendors: the ignore keyword after ``INSERT``, the conflict-resolution
suffix, and the generated-key return suffix.
"""

import re
from enum import Enum
from typing import Protocol, Sequence

from bulk_insert.io.loader.models import ColumnDescriptor, InsertOptions


class DialectMode(str, Enum):
    """Closed set of dialect families the composer distinguishes."""

    MYSQL = "mysql"
    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    GENERIC = "generic"


_ADAPTER_PATTERNS = (
    (re.compile(r"^(mysql|mariadb)", re.IGNORECASE), DialectMode.MYSQL),
    (re.compile(r"^sqlite", re.IGNORECASE), DialectMode.SQLITE),
    (re.compile(r"^post(gresql|gis)", re.IGNORECASE), DialectMode.POSTGRESQL),
)


def detect_dialect(adapter_name: str) -> DialectMode:
    """
    Map a connection adapter name onto a DialectMode.

    Examples:
        >>> detect_dialect("PostgreSQL")
        <DialectMode.POSTGRESQL: 'postgresql'>
        >>> detect_dialect("mysql2")
        <DialectMode.MYSQL: 'mysql'>
        >>> detect_dialect("oracle")
        <DialectMode.GENERIC: 'generic'>
    """
    for pattern, mode in _ADAPTER_PATTERNS:
        if pattern.match(adapter_name or ""):
            return mode
    return DialectMode.GENERIC


class Dialect(Protocol):
    """Protocol for dialect clause strategies."""

    mode: DialectMode

    def ignore_clause(self, options: InsertOptions) -> str: ...
    def conflict_clause(
        self, options: InsertOptions, columns: Sequence[ColumnDescriptor]
    ) -> str: ...
    def returning_clause(self, options: InsertOptions, primary_key: str) -> str: ...


class GenericDialect:
    """Dialect without native ignore, upsert or returning support.

    Requested options degrade to a plain INSERT rather than raising.
    """

    mode = DialectMode.GENERIC

    def ignore_clause(self, options: InsertOptions) -> str:
        return ""

    def conflict_clause(
        self, options: InsertOptions, columns: Sequence[ColumnDescriptor]
    ) -> str:
        return ""

    def returning_clause(self, options: InsertOptions, primary_key: str) -> str:
        return ""
