"""Database connection adapters for the bulk insert worker."""

from .base import DatabaseConnection
from .sqlalchemy_connection import SQLAlchemyConnection, parse_server_default

__all__ = [
    "DatabaseConnection",
    "SQLAlchemyConnection",
    "parse_server_default",
]
