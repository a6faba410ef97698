"""
Convenience entry points around BulkInsertWorker.
"""

from typing import Iterable, Optional, Sequence, Union

from bulk_insert.io.connectors.base import DatabaseConnection
from bulk_insert.io.loader.value_resolver import Row
from bulk_insert.io.loader.worker import BulkInsertWorker


def default_columns(
    connection: DatabaseConnection, table_name: str, primary_key: str = "id"
) -> list:
    """All column names of the table except the primary key."""
    return [
        column.name
        for column in connection.columns(table_name)
        if column.name != primary_key
    ]


def bulk_insert(
    connection: DatabaseConnection,
    table_name: str,
    columns: Optional[Sequence[str]] = None,
    values: Optional[Iterable[Row]] = None,
    *,
    primary_key: str = "id",
    set_size: Optional[int] = None,
    ignore: bool = False,
    update_duplicates: Union[bool, Sequence[str], None] = False,
    return_primary_keys: bool = False,
) -> BulkInsertWorker:
    """
    Create a worker for ``table_name``, optionally loading ``values`` at once.

    Args:
        connection: Connection implementing DatabaseConnection
        table_name: Target table
        columns: Columns to insert; every column but the primary key if omitted
        values: Rows to insert and save immediately
        primary_key: Primary key column name
        set_size: Rows per INSERT statement
        ignore: Skip constraint-violating rows
        update_duplicates: False, or the conflict-key columns for upserts
        return_primary_keys: Collect generated keys (PostgreSQL)

    Returns:
        The worker. When ``values`` was given everything has been saved;
        otherwise use it as a context manager so the remainder is flushed:

        >>> with bulk_insert(conn, "users", ["name", "email"]) as worker:
        ...     worker.add({"name": "A", "email": "a@x.com"})
    """
    if not columns:
        columns = default_columns(connection, table_name, primary_key)

    worker = BulkInsertWorker(
        connection,
        table_name,
        primary_key,
        columns,
        set_size=set_size,
        ignore=ignore,
        update_duplicates=update_duplicates,
        return_primary_keys=return_primary_keys,
    )

    if values is not None:
        worker.add_all(values)
        worker.save()

    return worker
