"""
SQLite-specific clauses for multi-row INSERT statements.

Only ``INSERT OR IGNORE`` is emitted; update-duplicates and key return
degrade to a plain insert.
"""

from bulk_insert.io.loader.models import InsertOptions

from .base import DialectMode, GenericDialect


class SQLiteDialect(GenericDialect):
    """SQLite SQL dialect implementation."""

    mode = DialectMode.SQLITE

    def ignore_clause(self, options: InsertOptions) -> str:
        return "OR IGNORE" if options.ignore else ""
