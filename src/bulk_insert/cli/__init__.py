"""Command-line interface for bulk_insert."""
