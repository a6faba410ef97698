"""
Row value resolution.

Maps a caller-supplied row onto the worker's column list. A row is either
keyed (a mapping of column name to value) or positional (a list or tuple in
column order); both become one PendingRow tuple.

Resolution order per column:
1. explicit value from a keyed row
2. explicit value from a positional row, when the index is in range
3. the column's declared default, when it is not blank
4. the shared-timestamp placeholder for ``created_at`` / ``updated_at``
5. NULL
"""

from collections.abc import Mapping
from typing import Any, Sequence, Union

from bulk_insert.io.loader.models import (
    TIMESTAMP_COLUMNS,
    TIMESTAMP_PLACEHOLDER,
    ColumnDescriptor,
    PendingRow,
)

Row = Union[Mapping, Sequence[Any]]

_MISSING = object()


def has_default(column: ColumnDescriptor) -> bool:
    """True when the column declares a non-blank default value."""
    default = column.default
    if default is None:
        return False
    if isinstance(default, str) and not default.strip():
        return False
    return True


def fallback_value(column: ColumnDescriptor) -> Any:
    """Value used when the row does not supply one for ``column``."""
    if has_default(column):
        return column.default
    if column.name in TIMESTAMP_COLUMNS:
        return TIMESTAMP_PLACEHOLDER
    return None


def resolve_row(columns: Sequence[ColumnDescriptor], row: Row) -> PendingRow:
    """
    Resolve one row into a tuple with exactly one value per column.

    Args:
        columns: Target columns in insert order
        row: Mapping keyed by column name, or a list/tuple in column order

    Returns:
        Resolved values in column order

    Raises:
        TypeError: If the row is neither a mapping nor a list/tuple

    Example:
        >>> cols = [ColumnDescriptor("name"), ColumnDescriptor("created_at")]
        >>> resolve_row(cols, {"name": "A"})
        ('A', <__timestamp_placeholder>)
    """
    if isinstance(row, Mapping):
        values = [row.get(column.name, _MISSING) for column in columns]
    elif isinstance(row, (list, tuple)):
        values = [
            row[index] if index < len(row) else _MISSING
            for index in range(len(columns))
        ]
    else:
        raise TypeError(
            f"Row must be a mapping or a list/tuple, got {type(row).__name__}"
        )

    return tuple(
        fallback_value(column) if value is _MISSING else value
        for column, value in zip(columns, values)
    )
