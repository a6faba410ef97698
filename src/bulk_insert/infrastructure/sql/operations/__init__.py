"""SQL statement builders."""

from .insert import InsertComposer

__all__ = ["InsertComposer"]
