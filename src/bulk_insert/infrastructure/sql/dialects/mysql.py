"""
MySQL-specific clauses for multi-row INSERT statements (MariaDB included).
"""

from typing import Sequence

from bulk_insert.io.loader.models import ColumnDescriptor, InsertOptions

from .base import DialectMode, GenericDialect


class MySQLDialect(GenericDialect):
    """MySQL SQL dialect implementation."""

    mode = DialectMode.MYSQL

    def ignore_clause(self, options: InsertOptions) -> str:
        return "IGNORE" if options.ignore else ""

    def conflict_clause(
        self, options: InsertOptions, columns: Sequence[ColumnDescriptor]
    ) -> str:
        # MySQL cannot target specific keys; every inserted column is updated
        if not options.update_duplicates:
            return ""
        update_values = ", ".join(
            f"`{column.name}`=VALUES(`{column.name}`)" for column in columns
        )
        return f" ON DUPLICATE KEY UPDATE {update_values}"
