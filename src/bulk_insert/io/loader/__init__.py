"""
Batched INSERT loading for bulk_insert.

The public entry points (BulkInsertWorker, bulk_insert) are re-exported from
the top-level package.
"""
