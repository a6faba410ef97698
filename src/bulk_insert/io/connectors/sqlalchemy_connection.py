"""
SQLAlchemy-backed connection for the bulk insert worker.

Wraps an Engine to provide table introspection, identifier and literal
quoting, and raw statement execution for PostgreSQL, MySQL/MariaDB and
SQLite (any other SQLAlchemy dialect works as a generic target).
"""

import re
from decimal import Decimal
from typing import Any, List, Optional

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import CompileError, NoSuchTableError

from bulk_insert.config import get_settings
from bulk_insert.infrastructure.sql.core.identifier import (
    qualify_table,
    quote_identifier_if_needed,
)
from bulk_insert.infrastructure.sql.core.literals import quote_literal, to_literal, type_cast
from bulk_insert.io.loader.models import (
    ColumnDescriptor,
    ConfigurationError,
    ResultSet,
    SchemaMismatchError,
)
from bulk_insert.utils.logging import get_logger

logger = get_logger(__name__)

# 'text' optionally followed by one or more ::casts
_QUOTED_DEFAULT = re.compile(r"^'((?:[^']|'')*)'(?:::[\w .\"\[\]]+)*$")
_NUMERIC_DEFAULT = re.compile(r"^(-?\d+(?:\.\d+)?)(?:::[\w .\"\[\]]+)*$")


def parse_server_default(default: Optional[str]) -> Any:
    """
    Convert a reflected server default into the value it would insert.

    Literal defaults become Python values. Expression defaults such as
    ``nextval('users_id_seq'::regclass)`` or ``CURRENT_TIMESTAMP`` are
    evaluated by the database, so they count as no default.

    Examples:
        >>> parse_server_default("'active'::character varying")
        'active'
        >>> parse_server_default("0")
        0
        >>> parse_server_default("now()") is None
        True
    """
    if default is None:
        return None

    text = default.strip()
    while text.startswith("(") and text.endswith(")"):
        text = text[1:-1].strip()

    quoted = _QUOTED_DEFAULT.match(text)
    if quoted:
        return quoted.group(1).replace("''", "'")

    numeric = _NUMERIC_DEFAULT.match(text)
    if numeric:
        number = numeric.group(1)
        return Decimal(number) if "." in number else int(number)

    lowered = text.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    return None


class SQLAlchemyConnection:
    """Connection adapter around a SQLAlchemy Engine."""

    def __init__(self, engine: Engine, owns_engine: bool = False):
        """
        Initialize the connection adapter.

        Args:
            engine: SQLAlchemy engine to execute against
            owns_engine: Dispose of the engine on close()
        """
        self.engine = engine
        self.adapter_name = engine.dialect.name
        self._owns_engine = owns_engine

    @classmethod
    def from_url(cls, url: Optional[str] = None, **engine_kwargs: Any) -> "SQLAlchemyConnection":
        """
        Create a connection from a database URL.

        Falls back to the configured DATABASE_URL when no URL is given.

        Raises:
            ConfigurationError: If no URL is given or configured
        """
        url = url or get_settings().DATABASE_URL
        if not url:
            raise ConfigurationError(
                "No database URL given and DATABASE_URL is not configured"
            )
        engine = create_engine(url, **engine_kwargs)
        logger.info("bulk_insert.connection.created", adapter=engine.dialect.name)
        return cls(engine, owns_engine=True)

    def close(self) -> None:
        """Dispose of the engine if this adapter created it."""
        if self._owns_engine:
            self.engine.dispose()
            logger.info("bulk_insert.connection.closed", adapter=self.adapter_name)

    def _split_table_name(self, table_name: str):
        if "." in table_name:
            schema, name = table_name.split(".", 1)
            return schema, name
        return None, table_name

    def _type_name(self, column_type: Any) -> Optional[str]:
        try:
            return column_type.compile(dialect=self.engine.dialect)
        except CompileError:
            # Untyped SQLite columns reflect as NullType
            return None

    def columns(self, table_name: str) -> List[ColumnDescriptor]:
        """
        Introspect the table's columns.

        Raises:
            SchemaMismatchError: If the table does not exist
        """
        schema, name = self._split_table_name(table_name)
        try:
            reflected = inspect(self.engine).get_columns(name, schema=schema)
        except NoSuchTableError as e:
            raise SchemaMismatchError(table_name) from e
        if not reflected:
            raise SchemaMismatchError(table_name)

        return [
            ColumnDescriptor(
                name=column["name"],
                default=parse_server_default(column.get("default")),
                nullable=column.get("nullable", True),
                sql_type=self._type_name(column["type"]),
                type_engine=column["type"],
            )
            for column in reflected
        ]

    def quote_table_name(self, name: str) -> str:
        return qualify_table(name, dialect=self.adapter_name)

    def quote_column_name(self, name: str) -> str:
        return quote_identifier_if_needed(name, dialect=self.adapter_name)

    def type_cast(self, column: ColumnDescriptor, value: Any) -> Any:
        """Bind a value with the column's reflected type, parsing string input."""
        if value is None:
            return None
        return to_literal(type_cast(column.type_engine, value), column.type_engine)

    def quote(self, value: Any) -> str:
        return quote_literal(value, self.engine.dialect)

    def exec_query(self, sql: str) -> ResultSet:
        """
        Execute raw SQL text in its own transaction.

        The text is passed through the driver's normal execution path, so
        ``%`` in literals must already be doubled for pyformat drivers, as
        quote() does.
        """
        with self.engine.begin() as conn:
            result = conn.exec_driver_sql(sql)
            if not result.returns_rows:
                return ResultSet()
            return ResultSet(
                columns=list(result.keys()),
                rows=[tuple(row) for row in result.fetchall()],
            )
