"""
Exceptions raised by fast-sql.

Every error raised by this package derives from FastSQLError, which is a
RuntimeError so callers that already guard database work with
``except RuntimeError`` keep working.
"""
from typing import Optional


class FastSQLError(RuntimeError):
    """Base class for all fast-sql errors."""


class DatabaseConnectionError(FastSQLError):
    """The underlying connection could not be opened or is not reachable."""

    def __init__(self, message: str, driver: Optional[str] = None):
        super().__init__(message)
        self.driver = driver


class PrepareError(FastSQLError):
    """A statement could not be prepared against the underlying connection."""

    def __init__(self, message: str, sql: str):
        super().__init__(message)
        self.sql = sql


class ExecError(FastSQLError):
    """
    A prepared batch statement failed during execution.

    Attributes:
        sql: The materialized SQL that failed
        row_count: Number of rows that were in the failing batch
    """

    def __init__(self, message: str, sql: str, row_count: int = 0):
        super().__init__(message)
        self.sql = sql
        self.row_count = row_count


class QuerySplitError(FastSQLError, ValueError):
    """The template is not a single-row INSERT ... VALUES (...) statement."""


class UnsupportedDriverError(FastSQLError, ValueError):
    """No adapter is registered for the requested driver name."""
