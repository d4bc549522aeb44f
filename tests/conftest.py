"""
Pytest configuration and fixtures for fast-sql tests.
"""
import sqlite3

import pytest
from unittest.mock import MagicMock


# Define test markers
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "core: tests that don't require database connections"
    )
    config.addinivalue_line(
        "markers", "db: tests that run against a real SQLite database"
    )


# Generic database connection fixture
@pytest.fixture
def mock_db_connection():
    """Mock DB-API connection for generic adapter tests."""
    conn = MagicMock()
    cursor = MagicMock()
    conn.cursor.return_value = cursor

    # Mock cursor.execute to return result sets for SELECT statements
    def side_effect(sql, *args, **kwargs):
        if sql.strip().upper().startswith("SELECT"):
            cursor.description = [("id",), ("name",)]
            cursor.rowcount = 1
            cursor.fetchall.return_value = [(1, "Test")]
        else:
            cursor.description = None
            cursor.rowcount = 1
        return cursor

    cursor.execute.side_effect = side_effect

    # Configure transaction methods
    conn.commit = MagicMock()
    conn.rollback = MagicMock()
    conn.close = MagicMock()

    return conn


@pytest.fixture
def sqlite_path(tmp_path):
    """Path of a SQLite database holding an empty ``t (a, b)`` table."""
    path = tmp_path / "fast_sql.db"
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE t (a INTEGER PRIMARY KEY, b TEXT)")
    conn.commit()
    conn.close()
    return str(path)


def count_rows(path, table="t"):
    conn = sqlite3.connect(path)
    try:
        return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
    finally:
        conn.close()


@pytest.fixture
def row_counter():
    """Function counting the rows of a table in a SQLite database file."""
    return count_rows
