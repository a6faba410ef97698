"""
PostgreSQL tests for upserts and RETURNING.

Skipped unless BULK_INSERT_TEST_DATABASE_URL points at a test database.
"""

from datetime import datetime, timedelta, timezone

import pytest

from bulk_insert import BulkInsertWorker, SQLAlchemyConnection
from tests.conftest import rows_as_dicts


@pytest.fixture
def connection(postgres_engine):
    return SQLAlchemyConnection(postgres_engine)


@pytest.mark.integration
class TestPostgresBulkInsert:
    def test_returning_collects_ids_per_flush(self, connection):
        worker = BulkInsertWorker(
            connection,
            "bulk_insert_users",
            "id",
            ["name", "email"],
            set_size=2,
            return_primary_keys=True,
        )
        worker.add_all([["A", "a@x.com"], ["B", "b@x.com"], ["C", "c@x.com"]]).save()

        ids = [row[0] for result_set in worker.result_sets for row in result_set]
        assert len(worker.result_sets) == 2
        assert ids == sorted(ids)
        assert len(ids) == 3

    def test_upsert_updates_existing_row(self, connection, postgres_engine):
        columns = ["name", "email", "created_at", "updated_at"]
        BulkInsertWorker(connection, "bulk_insert_users", "id", columns).add(
            ["A", "a@x.com"]
        ).save()
        before = rows_as_dicts(postgres_engine, "SELECT created_at FROM bulk_insert_users")

        worker = BulkInsertWorker(
            connection, "bulk_insert_users", "id", columns, update_duplicates=["email"]
        )
        worker.add(["A2", "a@x.com"]).save()

        rows = rows_as_dicts(
            postgres_engine, "SELECT name, status, created_at FROM bulk_insert_users"
        )
        assert len(rows) == 1
        assert rows[0]["name"] == "A2"
        assert rows[0]["status"] == "active"
        assert rows[0]["created_at"] == before[0]["created_at"]

    def test_ignore_uses_on_conflict_do_nothing(self, connection, postgres_engine):
        worker = BulkInsertWorker(
            connection, "bulk_insert_users", "id", ["name", "email"], ignore=True
        )
        worker.add_all([["A", "a@x.com"], ["A2", "a@x.com"]]).save()

        rows = rows_as_dicts(postgres_engine, "SELECT name FROM bulk_insert_users")
        assert rows == [{"name": "A"}]

    def test_upsert_on_mixed_case_column(self, connection, postgres_engine):
        columns = ["nickName", "name", "email"]
        BulkInsertWorker(connection, "bulk_insert_users", "id", columns).add(
            ["ann", "A", "a@x.com"]
        ).save()

        worker = BulkInsertWorker(
            connection, "bulk_insert_users", "id", columns, update_duplicates=["email"]
        )
        worker.add(["annie", "A", "a@x.com"]).save()

        rows = rows_as_dicts(postgres_engine, 'SELECT "nickName" FROM bulk_insert_users')
        assert rows == [{"nickName": "annie"}]

    def test_aware_timestamp_and_percent_round_trip(self, connection, postgres_engine):
        seen = datetime(2024, 1, 1, 12, tzinfo=timezone(timedelta(hours=2)))
        worker = BulkInsertWorker(
            connection, "bulk_insert_users", "id", ["name", "email", "last_seen"]
        )
        worker.add(["100% O'Brien", "o@x.com", seen]).save()

        rows = rows_as_dicts(postgres_engine, "SELECT name, last_seen FROM bulk_insert_users")
        assert rows[0]["name"] == "100% O'Brien"
        assert rows[0]["last_seen"] == seen
