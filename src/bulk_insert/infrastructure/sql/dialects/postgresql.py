"""
PostgreSQL-specific clauses for multi-row INSERT statements.

Also covers PostGIS, which reports its own adapter name but shares the
PostgreSQL syntax.
"""

from typing import Sequence

from bulk_insert.infrastructure.sql.core.identifier import quote_identifier_if_needed
from bulk_insert.io.loader.models import ColumnDescriptor, InsertOptions

from .base import DialectMode, GenericDialect


class PostgreSQLDialect(GenericDialect):
    """PostgreSQL SQL dialect implementation."""

    mode = DialectMode.POSTGRESQL

    def conflict_clause(
        self, options: InsertOptions, columns: Sequence[ColumnDescriptor]
    ) -> str:
        """
        Build the ``ON CONFLICT`` suffix.

        Ignore mode wins over update-duplicates. On update, every inserted
        column except ``created_at`` is overwritten from ``EXCLUDED``. Names
        are quoted the same way as the statement's column list.

        Examples:
            >>> cols = [ColumnDescriptor("name"), ColumnDescriptor("created_at")]
            >>> PostgreSQLDialect().conflict_clause(
            ...     InsertOptions(update_duplicates=True, conflict_keys=("name",)), cols
            ... )
            ' ON CONFLICT(name) DO UPDATE SET name=EXCLUDED.name'
        """
        if options.ignore:
            return " ON CONFLICT DO NOTHING"
        if options.update_duplicates and options.conflict_keys:
            update_values = ", ".join(
                f"{name}=EXCLUDED.{name}"
                for name in (
                    quote_identifier_if_needed(column.name)
                    for column in columns
                    if column.name != "created_at"
                )
            )
            conflict_keys = ", ".join(
                quote_identifier_if_needed(key) for key in options.conflict_keys
            )
            return f" ON CONFLICT({conflict_keys}) DO UPDATE SET {update_values}"
        return ""

    def returning_clause(self, options: InsertOptions, primary_key: str) -> str:
        if options.return_primary_keys:
            return f" RETURNING {quote_identifier_if_needed(primary_key)}"
        return ""
