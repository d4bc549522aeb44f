"""
Tests for the fast-sql command-line interface.
"""
import sqlite3
from unittest.mock import patch

import pytest
from click.testing import CliRunner

import fast_sql
from fast_sql.cli import cli

INSERT = "INSERT INTO t (a, b) VALUES (?, ?)"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "rows.csv"
    path.write_text("a,b\n1,x\n2,y\n3,NULL\n")
    return str(path)


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert fast_sql.__version__ in result.output


@pytest.mark.core
def test_split(runner):
    result = runner.invoke(cli, ["split", "INSERT INTO t (a,b) VALUES (?,?)", "--rows", "3"])
    assert result.exit_code == 0
    assert "(?,?)," in result.output
    assert "INSERT INTO t (a,b) VALUES (?,?),(?,?),(?,?)" in result.output


@pytest.mark.core
def test_split_invalid_template(runner):
    result = runner.invoke(cli, ["split", "DELETE FROM t"])
    assert result.exit_code == 1
    assert "Error" in result.output


@pytest.mark.core
def test_drivers(runner):
    result = runner.invoke(cli, ["drivers"])
    assert result.exit_code == 0
    assert "sqlite" in result.output
    assert "mysql" in result.output


@pytest.mark.db
def test_load(runner, csv_file, sqlite_path, row_counter):
    result = runner.invoke(cli, [
        "load", csv_file,
        "--driver", "sqlite",
        "--address", sqlite_path,
        "--template", INSERT,
        "--threshold", "2",
    ])

    assert result.exit_code == 0, result.output
    assert "Loaded 3 rows in 2 batches" in result.output
    assert row_counter(sqlite_path) == 3


@pytest.mark.db
def test_load_null_values(runner, csv_file, sqlite_path):
    result = runner.invoke(cli, [
        "load", csv_file,
        "-D", "sqlite",
        "-a", sqlite_path,
        "-t", INSERT,
        "--null", "NULL",
    ])
    assert result.exit_code == 0, result.output

    conn = sqlite3.connect(sqlite_path)
    try:
        rows = conn.execute("SELECT a, b FROM t ORDER BY a").fetchall()
    finally:
        conn.close()
    assert rows == [(1, "x"), (2, "y"), (3, None)]


@pytest.mark.db
def test_load_dry_run(runner, csv_file, sqlite_path, row_counter):
    result = runner.invoke(cli, [
        "load", csv_file,
        "--driver", "sqlite",
        "--address", sqlite_path,
        "--template", INSERT,
        "--threshold", "2",
        "--dry-run",
    ])

    assert result.exit_code == 0, result.output
    assert "Would load 3 rows in 2 batches" in result.output
    assert row_counter(sqlite_path) == 0


@pytest.mark.db
def test_load_execution_error(runner, csv_file, sqlite_path):
    result = runner.invoke(cli, [
        "load", csv_file,
        "--driver", "sqlite",
        "--address", sqlite_path,
        "--template", "INSERT INTO missing (a, b) VALUES (?, ?)",
    ])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_load_invalid_template(runner, csv_file):
    result = runner.invoke(cli, [
        "load", csv_file,
        "--driver", "sqlite",
        "--address", ":memory:",
        "--template", "UPDATE t SET a = ?",
    ])
    assert result.exit_code == 1
    assert "Error" in result.output


@pytest.mark.db
def test_load_without_header_in_slices(runner, tmp_path, sqlite_path):
    path = tmp_path / "rows.psv"
    path.write_text("1;x\n2;\n3;z\n4;w\n5;v\n")

    with patch("fast_sql.cli.CSV_READ_BATCH_SIZE", 2):
        result = runner.invoke(cli, [
            "load", str(path),
            "--driver", "sqlite",
            "--address", sqlite_path,
            "--template", INSERT,
            "--delimiter", ";",
            "--no-skip-header",
            "--threshold", "3",
        ])

    assert result.exit_code == 0, result.output
    assert "Loaded 5 rows in 2 batches" in result.output

    conn = sqlite3.connect(sqlite_path)
    try:
        rows = conn.execute("SELECT a, b FROM t ORDER BY a").fetchall()
    finally:
        conn.close()
    assert rows == [(1, "x"), (2, ""), (3, "z"), (4, "w"), (5, "v")]


@pytest.mark.db
def test_load_empty_file(runner, tmp_path, sqlite_path):
    path = tmp_path / "empty.csv"
    path.write_text("")

    result = runner.invoke(cli, [
        "load", str(path),
        "--driver", "sqlite",
        "--address", sqlite_path,
        "--template", INSERT,
    ])
    assert result.exit_code == 1
    assert "Error" in result.output
