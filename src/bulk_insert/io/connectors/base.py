"""
Connection protocol for the bulk insert worker.

The worker never talks to a driver directly. Anything that can name its
dialect, describe a table, quote identifiers and literals, and execute raw
SQL text can be used as the connection.
"""

from typing import Any, List, Protocol, runtime_checkable

from bulk_insert.io.loader.models import ColumnDescriptor, ResultSet


@runtime_checkable
class DatabaseConnection(Protocol):
    """
    Protocol for database connections used by BulkInsertWorker.

    Attributes:
        adapter_name: Dialect identity, e.g. "postgresql", "mysql", "sqlite"
    """

    adapter_name: str

    def columns(self, table_name: str) -> List[ColumnDescriptor]:
        """Return column metadata for a table in declaration order."""
        ...

    def quote_table_name(self, name: str) -> str: ...

    def quote_column_name(self, name: str) -> str: ...

    def type_cast(self, column: ColumnDescriptor, value: Any) -> Any:
        """Coerce a value to the column's declared type before quoting."""
        ...

    def quote(self, value: Any) -> str:
        """Render a value as a SQL literal."""
        ...

    def exec_query(self, sql: str) -> ResultSet:
        """Execute raw SQL text and return any rows it produced."""
        ...
