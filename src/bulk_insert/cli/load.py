"""
CLI for loading a CSV file into a table with batched INSERT statements.

Usage:
    # Plain load (DATABASE_URL taken from the environment or .env)
    python -m bulk_insert.cli load --table users --file users.csv

    # Upsert on email, 1000 rows per statement
    python -m bulk_insert.cli load --table users --file users.csv \
        --set-size 1000 --update-duplicates email

    # Skip duplicates and print generated ids (PostgreSQL)
    python -m bulk_insert.cli load --table users --file users.csv \
        --ignore --return-primary-keys --database-url postgresql://localhost/app
"""

from __future__ import annotations

import argparse
import csv
import sys
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from bulk_insert.io.connectors.sqlalchemy_connection import SQLAlchemyConnection
from bulk_insert.io.loader.models import BulkInsertError
from bulk_insert.io.loader.worker import BulkInsertWorker
from bulk_insert.utils.logging import get_logger

logger = get_logger(__name__)


def _split_names(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [name.strip() for name in value.split(",") if name.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bulk_insert.cli load",
        description="Load CSV rows into a table using batched INSERT statements",
    )
    parser.add_argument("--table", required=True, help="Target table (schema.table allowed)")
    parser.add_argument("--file", required=True, type=Path, help="CSV file with a header row")
    parser.add_argument(
        "--columns",
        help="Comma-separated columns to insert (default: the CSV header)",
    )
    parser.add_argument("--primary-key", default="id", help="Primary key column")
    parser.add_argument("--set-size", type=int, default=None, help="Rows per INSERT")
    parser.add_argument(
        "--ignore", action="store_true", help="Skip rows violating constraints"
    )
    parser.add_argument(
        "--update-duplicates",
        default=None,
        help="Comma-separated conflict keys; update existing rows on conflict",
    )
    parser.add_argument(
        "--return-primary-keys",
        action="store_true",
        help="Print generated primary keys (PostgreSQL only)",
    )
    parser.add_argument(
        "--keep-empty",
        action="store_true",
        help="Insert empty CSV cells as empty strings instead of omitting them",
    )
    parser.add_argument("--database-url", default=None, help="SQLAlchemy database URL")
    return parser


def read_rows(path: Path, keep_empty: bool = False) -> Iterator[Dict[str, str]]:
    """Yield CSV rows keyed by header; empty cells are omitted unless kept."""
    with path.open(newline="", encoding="utf-8") as handle:
        for record in csv.DictReader(handle):
            if keep_empty:
                yield dict(record)
            else:
                yield {key: value for key, value in record.items() if value != ""}


def _read_header(path: Path) -> List[str]:
    with path.open(newline="", encoding="utf-8") as handle:
        return next(csv.reader(handle), [])


def run_load(args: argparse.Namespace, connection: SQLAlchemyConnection) -> BulkInsertWorker:
    columns = _split_names(args.columns) or _read_header(args.file)
    update_duplicates = _split_names(args.update_duplicates) or False

    worker = BulkInsertWorker(
        connection,
        args.table,
        args.primary_key,
        columns,
        set_size=args.set_size,
        ignore=args.ignore,
        update_duplicates=update_duplicates,
        return_primary_keys=args.return_primary_keys,
    )
    rows = 0
    with worker:
        for row in read_rows(args.file, keep_empty=args.keep_empty):
            worker.add(row)
            rows += 1

    print(f"Inserted {rows} rows into {args.table} using {worker.flush_count} statements")
    if args.return_primary_keys:
        for result_set in worker.result_sets:
            for key_row in result_set:
                print(key_row[0])
    return worker


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.file.exists():
        print(f"File not found: {args.file}", file=sys.stderr)
        return 1

    connection = None
    try:
        connection = SQLAlchemyConnection.from_url(args.database_url)
        run_load(args, connection)
    except (BulkInsertError, SQLAlchemyError, ValueError) as e:
        logger.error("bulk_insert.cli.load_failed", table=args.table, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        if connection is not None:
            connection.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
