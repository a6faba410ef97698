"""
Batching INSERT worker.

Buffers rows and writes them with one multi-row INSERT per batch instead of
one statement per row. The worker is synchronous and not thread-safe: use
one worker (and one connection) per thread.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional, Sequence, Union

from bulk_insert.config import get_settings
from bulk_insert.infrastructure.sql.dialects import DialectMode, detect_dialect, get_dialect
from bulk_insert.infrastructure.sql.operations.insert import InsertComposer
from bulk_insert.io.connectors.base import DatabaseConnection
from bulk_insert.io.loader.models import (
    ConfigurationError,
    InsertOptions,
    PendingRow,
    ResultSet,
    SchemaMismatchError,
    TargetSpec,
)
from bulk_insert.io.loader.value_resolver import Row, resolve_row
from bulk_insert.utils.logging import get_logger

logger = get_logger(__name__)

BeforeSaveCallback = Callable[[List[PendingRow]], Any]
AfterSaveCallback = Callable[[], Any]


def utc_now() -> datetime:
    """Naive UTC timestamp used for created_at/updated_at placeholders."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _normalize_update_duplicates(update_duplicates: Union[bool, Sequence[str], None]):
    if not update_duplicates:
        return False, ()
    if update_duplicates is True:
        return True, ()
    if isinstance(update_duplicates, str):
        return True, (update_duplicates,)
    return True, tuple(update_duplicates)


class BulkInsertWorker:
    """
    Accumulates rows and flushes them as batched INSERT statements.

    Example:
        >>> worker = BulkInsertWorker(conn, "users", "id", ["name", "email"], set_size=2)
        >>> worker.add({"name": "A", "email": "a@x.com"}).add(["B", "b@x.com"])
        >>> worker.save()
    """

    def __init__(
        self,
        connection: DatabaseConnection,
        table_name: str,
        primary_key: str,
        column_names: Sequence[str],
        set_size: Optional[int] = None,
        ignore: bool = False,
        update_duplicates: Union[bool, Sequence[str], None] = False,
        return_primary_keys: bool = False,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Bind the worker to a table.

        Args:
            connection: Connection implementing DatabaseConnection
            table_name: Target table, optionally schema-qualified
            primary_key: Primary key column returned when capturing keys
            column_names: Columns to insert, in positional row order
            set_size: Rows per INSERT; defaults to BULK_INSERT_SET_SIZE
            ignore: Skip rows that violate constraints instead of failing
            update_duplicates: False, or the conflict-key columns to upsert on
                (True is enough for MySQL, which has no conflict target)
            return_primary_keys: Collect generated keys per flush (PostgreSQL)
            clock: Returns the timestamp shared by one flush

        Raises:
            SchemaMismatchError: If the table or a requested column is missing
            ConfigurationError: If the options cannot work for the dialect
            ValueError: If set_size is not a positive integer
        """
        if set_size is None:
            set_size = get_settings().BULK_INSERT_SET_SIZE
        if isinstance(set_size, bool) or not isinstance(set_size, int) or set_size < 1:
            raise ValueError(f"set_size must be a positive integer, got {set_size!r}")
        if not column_names:
            raise ValueError("Column list cannot be empty")

        self.connection = connection
        self.set_size = set_size
        self.primary_key = primary_key
        self.adapter_name = connection.adapter_name
        self.dialect_mode = detect_dialect(self.adapter_name)
        self._clock = clock

        update, conflict_keys = _normalize_update_duplicates(update_duplicates)
        if update and not conflict_keys and self.dialect_mode is DialectMode.POSTGRESQL:
            raise ConfigurationError(
                "PostgreSQL upserts need the conflict-key columns, "
                "pass update_duplicates as a list of column names"
            )
        self.options = InsertOptions(
            ignore=bool(ignore),
            update_duplicates=update,
            conflict_keys=conflict_keys,
            return_primary_keys=bool(return_primary_keys),
        )

        column_map = {column.name: column for column in connection.columns(table_name)}
        missing = [name for name in column_names if name not in column_map]
        if missing:
            raise SchemaMismatchError(table_name, missing)

        self.target = TargetSpec(
            table_name=connection.quote_table_name(table_name),
            columns=tuple(column_map[name] for name in column_names),
            column_names=",".join(
                connection.quote_column_name(name) for name in column_names
            ),
        )
        self.composer = InsertComposer(
            self.target,
            get_dialect(self.dialect_mode),
            self.options,
            primary_key,
            connection,
        )

        self.before_save_callback: Optional[BeforeSaveCallback] = None
        self.after_save_callback: Optional[AfterSaveCallback] = None

        self._result_sets: List[ResultSet] = []
        self._set: List[PendingRow] = []
        self.flush_count = 0

        self._logger = logger.bind(table=table_name, dialect=self.dialect_mode.value)
        self._logger.debug(
            "bulk_insert.worker.initialized",
            columns=list(column_names),
            set_size=set_size,
            ignore=self.options.ignore,
            update_duplicates=list(conflict_keys) if conflict_keys else update,
            return_primary_keys=self.options.return_primary_keys,
        )

    @property
    def ignore(self) -> bool:
        return self.options.ignore

    @property
    def update_duplicates(self) -> Union[bool, List[str]]:
        if self.options.conflict_keys:
            return list(self.options.conflict_keys)
        return self.options.update_duplicates

    @property
    def result_sets(self) -> List[ResultSet]:
        """Result sets returned by each flush, oldest first."""
        return list(self._result_sets)

    @property
    def pending(self) -> bool:
        return bool(self._set)

    @property
    def pending_count(self) -> int:
        return len(self._set)

    @property
    def pending_rows(self) -> List[PendingRow]:
        return list(self._set)

    def add(self, values: Row) -> "BulkInsertWorker":
        """
        Buffer one row, flushing first when the buffer is full.

        Args:
            values: Mapping of column name to value, or a list/tuple in the
                worker's column order. Omitted columns get their default,
                the flush timestamp (created_at/updated_at), or NULL.
        """
        if len(self._set) >= self.set_size:
            self.save()

        self._set.append(resolve_row(self.target.columns, values))
        return self

    def add_all(self, rows: Iterable[Row]) -> "BulkInsertWorker":
        for row in rows:
            self.add(row)
        return self

    def before_save(self, callback: Optional[BeforeSaveCallback]) -> Optional[BeforeSaveCallback]:
        """Register a callable receiving the pending rows before each flush.

        Returns the callable, so this also works as a decorator.
        """
        self.before_save_callback = callback
        return callback

    def after_save(self, callback: Optional[AfterSaveCallback]) -> Optional[AfterSaveCallback]:
        """Register a callable invoked with no arguments after each flush."""
        self.after_save_callback = callback
        return callback

    def save(self) -> "BulkInsertWorker":
        """
        Write all pending rows with one INSERT statement.

        Does nothing when no rows are pending. If the before-save callback or
        the statement raises, the pending rows are kept. Once the statement
        has run, the rows are cleared even if the after-save callback raises.
        """
        if not self._set:
            return self

        if self.before_save_callback is not None:
            self.before_save_callback(list(self._set))

        self.execute_query()
        try:
            if self.after_save_callback is not None:
                self.after_save_callback()
        finally:
            self._set.clear()

        return self

    flush = save

    def clear(self) -> "BulkInsertWorker":
        """Discard pending rows without writing them."""
        self._set.clear()
        return self

    def compose_insert_query(self, now: Optional[datetime] = None) -> Optional[str]:
        """
        Build the INSERT statement for the pending rows.

        Args:
            now: Timestamp for placeholders; a fresh one is taken when omitted

        Returns:
            Statement text, or None when nothing is pending
        """
        if now is None:
            now = self._clock()
        return self.composer.compose(self._set, now)

    def execute_query(self) -> Optional[ResultSet]:
        query = self.compose_insert_query()
        if query is None:
            return None

        row_count = len(self._set)
        result_set = self.connection.exec_query(query)
        self.flush_count += 1
        if self.options.return_primary_keys:
            self._result_sets.append(result_set)

        self._logger.debug(
            "bulk_insert.flush.completed", rows=row_count, flush_count=self.flush_count
        )
        return result_set

    def __enter__(self) -> "BulkInsertWorker":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        # Flush the remainder only when the block finished cleanly
        if exc_type is None:
            self.save()
