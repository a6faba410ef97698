"""Unit tests for the CSV load CLI."""

from pathlib import Path

import pytest

from bulk_insert.cli.__main__ import main as cli_main
from bulk_insert.cli.load import build_parser, main, read_rows
from tests.conftest import rows_as_dicts


@pytest.fixture
def users_csv(tmp_path) -> Path:
    path = tmp_path / "users.csv"
    path.write_text(
        "name,email,age\nA,a@x.com,31\nB,b@x.com,\nC,c@x.com,40\n", encoding="utf-8"
    )
    return path


@pytest.mark.unit
class TestLoadCliParsing:
    def test_defaults(self):
        args = build_parser().parse_args(["--table", "users", "--file", "rows.csv"])
        assert args.table == "users"
        assert args.file == Path("rows.csv")
        assert args.primary_key == "id"
        assert args.set_size is None
        assert args.ignore is False
        assert args.update_duplicates is None

    def test_options(self):
        args = build_parser().parse_args(
            [
                "--table", "users",
                "--file", "rows.csv",
                "--set-size", "100",
                "--ignore",
                "--update-duplicates", "email,name",
                "--return-primary-keys",
            ]
        )
        assert args.set_size == 100
        assert args.ignore is True
        assert args.update_duplicates == "email,name"
        assert args.return_primary_keys is True

    def test_table_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--file", "rows.csv"])


@pytest.mark.unit
def test_read_rows_omits_empty_cells(users_csv):
    rows = list(read_rows(users_csv))
    assert rows[1] == {"name": "B", "email": "b@x.com"}
    assert list(read_rows(users_csv, keep_empty=True))[1]["age"] == ""


@pytest.mark.integration
class TestLoadCommand:
    def test_loads_csv_into_sqlite(self, users_csv, sqlite_engine, capsys):
        url = str(sqlite_engine.url)

        exit_code = cli_main(
            ["load", "--table", "users", "--file", str(users_csv), "--set-size", "2", "--database-url", url]
        )

        assert exit_code == 0
        assert "Inserted 3 rows into users using 2 statements" in capsys.readouterr().out
        rows = rows_as_dicts(sqlite_engine, "SELECT name, age, status FROM users ORDER BY id")
        assert rows == [
            {"name": "A", "age": 31, "status": "active"},
            {"name": "B", "age": None, "status": "active"},
            {"name": "C", "age": 40, "status": "active"},
        ]

    def test_missing_file(self, tmp_path, capsys):
        assert main(["--table", "users", "--file", str(tmp_path / "missing.csv")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_unknown_column_reports_error(self, users_csv, sqlite_engine, capsys):
        exit_code = main(
            [
                "--table", "users",
                "--file", str(users_csv),
                "--columns", "name,nickname",
                "--database-url", str(sqlite_engine.url),
            ]
        )
        assert exit_code == 1
        assert "nickname" in capsys.readouterr().err
