"""
SQL identifier handling utilities.

Provides functions for quoting table and column names for the supported
dialects. MySQL uses backticks; PostgreSQL, SQLite and anything else use
ANSI double quotes.
"""

import re
from typing import Optional

_PLAIN_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")


def quote_identifier(name: str, dialect: str = "postgresql") -> str:
    """
    Quote a SQL identifier (table or column name).

    Args:
        name: The identifier to quote
        dialect: Database dialect ("postgresql", "mysql", "sqlite", ...)

    Returns:
        Properly quoted identifier

    Examples:
        >>> quote_identifier("users")
        '"users"'
        >>> quote_identifier("table", dialect="mysql")
        '`table`'
    """
    if not name or not isinstance(name, str):
        raise ValueError("Identifier name must be non-empty string")

    if dialect in ("mysql", "mariadb"):
        escaped = name.replace("`", "``")
        return f"`{escaped}`"
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


def quote_identifier_if_needed(name: str, dialect: str = "postgresql") -> str:
    """
    Quote an identifier only when it is not a plain lower-case name.

    Examples:
        >>> quote_identifier_if_needed("created_at")
        'created_at'
        >>> quote_identifier_if_needed("Email Address")
        '"Email Address"'
    """
    if _PLAIN_IDENTIFIER.match(name or ""):
        return name
    return quote_identifier(name, dialect)


def qualify_table(
    table: str, schema: Optional[str] = None, dialect: str = "postgresql"
) -> str:
    """
    Create a fully quoted table name with optional schema prefix.

    A dotted ``schema.table`` name is split when no schema is given.

    Examples:
        >>> qualify_table("users")
        '"users"'
        >>> qualify_table("users", schema="public")
        '"public"."users"'
        >>> qualify_table("public.users")
        '"public"."users"'
    """
    if not table or not isinstance(table, str):
        raise ValueError("Table name must be non-empty string")

    if schema is None and "." in table:
        head, tail = table.split(".", 1)
        if head.strip() and tail.strip():
            schema, table = head.strip(), tail.strip()

    quoted_table = quote_identifier(table, dialect)
    if schema:
        return f"{quote_identifier(schema, dialect)}.{quoted_table}"
    return quoted_table
