"""
Multi-row INSERT statement composer.

Renders one literal INSERT statement for a batch of resolved rows, adding
the dialect's ignore keyword, conflict-resolution suffix and key return
suffix.
"""

from datetime import datetime
from typing import Any, List, Optional, Protocol, Sequence

from bulk_insert.infrastructure.sql.dialects import Dialect
from bulk_insert.io.loader.models import (
    TIMESTAMP_PLACEHOLDER,
    ColumnDescriptor,
    InsertOptions,
    PendingRow,
    TargetSpec,
)


class LiteralQuoter(Protocol):
    """The part of the connection contract the composer needs."""

    def type_cast(self, column: ColumnDescriptor, value: Any) -> Any: ...
    def quote(self, value: Any) -> str: ...


class InsertComposer:
    """
    Builder for batched INSERT statements.

    Example:
        >>> composer = InsertComposer(target, PostgreSQLDialect(), InsertOptions(), "id", conn)
        >>> print(composer.compose([("A", "a@x.com")], now))
        INSERT  INTO "users" (name,email) VALUES ('A','a@x.com')
    """

    def __init__(
        self,
        target: TargetSpec,
        dialect: Dialect,
        options: InsertOptions,
        primary_key: str,
        quoter: LiteralQuoter,
    ):
        self.target = target
        self.dialect = dialect
        self.options = options
        self.primary_key = primary_key
        self.quoter = quoter

    def insert_statement(self) -> str:
        """Statement head up to and including ``VALUES``."""
        return (
            f"INSERT {self.dialect.ignore_clause(self.options)} "
            f"INTO {self.target.table_name} ({self.target.column_names}) VALUES "
        )

    def render_row(self, row: PendingRow, now: datetime) -> str:
        values: List[str] = []
        for column, value in zip(self.target.columns, row):
            if value is TIMESTAMP_PLACEHOLDER:
                value = now
            value = self.quoter.type_cast(column, value)
            values.append(self.quoter.quote(value))
        return f"({','.join(values)})"

    def compose(self, rows: Sequence[PendingRow], now: datetime) -> Optional[str]:
        """
        Compose the INSERT statement for a batch.

        Args:
            rows: Resolved rows, one value per target column
            now: Shared timestamp substituted for every timestamp placeholder

        Returns:
            The statement text, or None when there are no rows
        """
        if not rows:
            return None

        sql = self.insert_statement()
        sql += ",".join(self.render_row(row, now) for row in rows)
        sql += self.dialect.conflict_clause(self.options, self.target.columns)
        sql += self.dialect.returning_clause(self.options, self.primary_key)
        return sql
