from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple


class BulkInsertError(Exception):
    """Base class for errors raised by the bulk insert worker."""


class SchemaMismatchError(BulkInsertError):
    """Raised when the target table or a requested column does not exist."""

    def __init__(self, table_name: str, missing_columns: Optional[List[str]] = None):
        self.table_name = table_name
        self.missing_columns = list(missing_columns or [])
        if self.missing_columns:
            message = (
                f"Table '{table_name}' has no column(s): "
                f"{', '.join(self.missing_columns)}"
            )
        else:
            message = f"Table '{table_name}' does not exist"
        super().__init__(message)


class ConfigurationError(BulkInsertError):
    """Raised when the worker or connection is configured inconsistently."""


class Placeholder(Enum):
    """Markers stored in pending rows and resolved at composition time."""

    TIMESTAMP = "__timestamp_placeholder"

    def __repr__(self) -> str:  # pragma: no cover - trivial repr
        return f"<{self.value}>"


TIMESTAMP_PLACEHOLDER = Placeholder.TIMESTAMP

TIMESTAMP_COLUMNS = frozenset({"created_at", "updated_at"})

PendingRow = Tuple[Any, ...]


@dataclass(frozen=True)
class ColumnDescriptor:
    """Column metadata introspected from the target table."""

    name: str
    default: Any = None
    nullable: bool = True
    sql_type: Optional[str] = None
    # SQLAlchemy TypeEngine reflected for the column, used to render literals
    type_engine: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class TargetSpec:
    """Quoted table identifier plus the ordered columns being inserted."""

    table_name: str
    columns: Tuple[ColumnDescriptor, ...]
    column_names: str


@dataclass(frozen=True)
class InsertOptions:
    """Conflict handling and key capture policy for one worker."""

    ignore: bool = False
    update_duplicates: bool = False
    conflict_keys: Tuple[str, ...] = ()
    return_primary_keys: bool = False


@dataclass
class ResultSet:
    """Tabular result returned by the connection's raw execute primitive."""

    columns: List[str] = field(default_factory=list)
    rows: List[Tuple[Any, ...]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)
