"""
fast-sql - Automatic multi-row INSERT batching for Python database drivers

This package wraps a DB-API connection and rewrites repeated single-row
INSERT calls into multi-row INSERT statements, caches the prepared statements
it creates and flushes a batch once a configurable row threshold is reached.
Everything else is passed through to the underlying connection.
"""

from fast_sql.db import FastDB, open
from fast_sql.exceptions import (
    DatabaseConnectionError,
    ExecError,
    FastSQLError,
    PrepareError,
    QuerySplitError,
    UnsupportedDriverError,
)
from fast_sql.query_collector import QueryCollector
from fast_sql.query_splitter import SplitQuery, split_query

__version__ = "0.1.0"
__all__ = [
    "DatabaseConnectionError",
    "ExecError",
    "FastDB",
    "FastSQLError",
    "PrepareError",
    "QueryCollector",
    "QuerySplitError",
    "SplitQuery",
    "UnsupportedDriverError",
    "open",
    "split_query",
]
