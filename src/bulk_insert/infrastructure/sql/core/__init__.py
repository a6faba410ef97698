"""Core SQL utilities package."""

from .identifier import qualify_table, quote_identifier, quote_identifier_if_needed
from .literals import python_type_of, quote_literal, to_literal, type_cast

__all__ = [
    "quote_identifier",
    "quote_identifier_if_needed",
    "qualify_table",
    "python_type_of",
    "quote_literal",
    "to_literal",
    "type_cast",
]
