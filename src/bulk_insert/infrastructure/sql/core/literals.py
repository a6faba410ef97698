"""
SQL literal rendering and column type casting.

Values are embedded directly into the generated INSERT text. Each value is
bound with the column's SQLAlchemy type (or one inferred from the value) and
compiled with ``literal_binds`` against the target dialect, so quoting,
escaping and date/time formats are the dialect's own.
"""

import math
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from sqlalchemy import JSON, String, literal
from sqlalchemy.engine import Dialect
from sqlalchemy.sql.expression import BindParameter
from sqlalchemy.types import NullType, TypeEngine

_TRUE_STRINGS = frozenset({"true", "t", "1", "yes", "y", "on"})
_FALSE_STRINGS = frozenset({"false", "f", "0", "no", "n", "off"})

# Python types that string input is parsed into before binding
_PARSED_TYPES = (bool, int, float, Decimal)


def python_type_of(column_type: Optional[TypeEngine]) -> Optional[type]:
    """Python type a column type binds, or None when it is unknown."""
    if column_type is None or isinstance(column_type, NullType):
        return None
    try:
        return column_type.python_type
    except NotImplementedError:
        return None


def type_cast(column_type: Optional[TypeEngine], value: Any) -> Any:
    """
    Parse string input into the Python type of a column type.

    Only strings bound for boolean and numeric columns are converted. Other
    values, and strings that do not parse, pass through unchanged; they are
    rendered as quoted text for the database to cast or reject.

    Examples:
        >>> from sqlalchemy import Boolean, Integer, String
        >>> type_cast(Integer(), "42")
        42
        >>> type_cast(Boolean(), "yes")
        True
        >>> type_cast(String(20), "42")
        '42'
    """
    if not isinstance(value, str):
        return value
    python_type = python_type_of(column_type)
    if python_type not in _PARSED_TYPES:
        return value

    stripped = value.strip()
    if python_type is bool:
        lowered = stripped.lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        return value
    try:
        return python_type(stripped)
    except (ValueError, ArithmeticError):
        return value


def _bind_type(column_type: Optional[TypeEngine], value: Any) -> Optional[TypeEngine]:
    python_type = python_type_of(column_type)
    if python_type is not None and isinstance(value, python_type):
        if not isinstance(value, bool) or python_type is bool:
            return column_type
    if isinstance(value, (dict, list)):
        return JSON()
    if isinstance(value, str):
        return String()
    return None


def to_literal(value: Any, column_type: Optional[TypeEngine] = None) -> BindParameter:
    """
    Bind a value for literal rendering.

    The column type is used when the value is of the type it binds;
    otherwise the type is inferred from the value. Enum members bind their
    value. Non-finite floats bind as the text PostgreSQL and MySQL parse
    (``'NaN'``, ``'Infinity'``).
    """
    if isinstance(value, BindParameter):
        return value
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return literal("NaN", String())
        return literal("Infinity" if value > 0 else "-Infinity", String())
    return literal(value, _bind_type(column_type, value))


def quote_literal(
    value: Any, dialect: Dialect, column_type: Optional[TypeEngine] = None
) -> str:
    """
    Render a value as a SQL literal for a dialect.

    Args:
        value: Plain value, or a parameter already bound by to_literal()
        dialect: SQLAlchemy dialect of the target engine
        column_type: Type of the column the value is written to

    Returns:
        Literal SQL text

    Examples:
        >>> from sqlalchemy.dialects import postgresql
        >>> quote_literal("O'Brien", postgresql.dialect())
        "'O''Brien'"
        >>> quote_literal(None, postgresql.dialect())
        'NULL'
    """
    if value is None:
        return "NULL"
    bound = to_literal(value, column_type)
    return str(bound.compile(dialect=dialect, compile_kwargs={"literal_binds": True}))
