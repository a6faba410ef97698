"""
SQL module for INSERT statement generation.

This module provides identifier quoting, literal rendering, and the
dialect-specific clauses used to build batched INSERT statements.
"""

from .core.identifier import qualify_table, quote_identifier, quote_identifier_if_needed
from .core.literals import quote_literal, to_literal, type_cast
from .dialects import DialectMode, detect_dialect, get_dialect
from .operations.insert import InsertComposer

__all__ = [
    "quote_identifier",
    "quote_identifier_if_needed",
    "qualify_table",
    "quote_literal",
    "to_literal",
    "type_cast",
    "DialectMode",
    "detect_dialect",
    "get_dialect",
    "InsertComposer",
]
