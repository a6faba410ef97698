"""
bulk_insert: batch rows into multi-row INSERT statements.

Rows are buffered and written with one INSERT per batch, with
dialect-specific ignore, upsert and key-return clauses for PostgreSQL,
MySQL/MariaDB and SQLite.
"""

from bulk_insert.io.connectors import DatabaseConnection, SQLAlchemyConnection
from bulk_insert.io.loader.models import (
    TIMESTAMP_PLACEHOLDER,
    BulkInsertError,
    ColumnDescriptor,
    ConfigurationError,
    InsertOptions,
    ResultSet,
    SchemaMismatchError,
    TargetSpec,
)
from bulk_insert.io.loader.operations import bulk_insert
from bulk_insert.io.loader.worker import BulkInsertWorker

__version__ = "0.1.0"

__all__ = [
    "BulkInsertError",
    "BulkInsertWorker",
    "ColumnDescriptor",
    "ConfigurationError",
    "DatabaseConnection",
    "InsertOptions",
    "ResultSet",
    "SQLAlchemyConnection",
    "SchemaMismatchError",
    "TIMESTAMP_PLACEHOLDER",
    "TargetSpec",
    "bulk_insert",
]
