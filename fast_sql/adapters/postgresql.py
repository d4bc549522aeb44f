"""
PostgreSQL adapter for fast-sql.

This module provides an adapter for PostgreSQL databases built on psycopg2.
psycopg2 uses ``%s`` placeholders, so INSERT templates for this adapter are
written with ``%s`` instead of ``?``. Templates may not use the MySQL
``ON DUPLICATE KEY UPDATE`` clause; ``ON CONFLICT`` is left in the row
fragment and therefore not supported for batching.
"""
import logging
from typing import Any, Optional

from fast_sql.adapters.generic import GenericAdapter
from fast_sql.config import DEFAULT_APPLICATION_NAME

# Optional imports to avoid hard dependency
try:
    import psycopg2
    import psycopg2.extensions
    _has_psycopg2 = True
except ImportError:
    _has_psycopg2 = False


logger = logging.getLogger(__name__)


class PostgreSQLAdapter(GenericAdapter):
    """
    Adapter for PostgreSQL databases.

    Attributes:
        dsn: libpq connection string or ``postgresql://`` URL
        isolation_level: Transaction isolation level applied on connect
    """

    driver_name = "postgresql"

    def __init__(
        self,
        address: str,
        auto_commit: bool = True,
        isolation_level: str = "read_committed",
        application_name: Optional[str] = DEFAULT_APPLICATION_NAME,
        connection: Optional[Any] = None,
        **connect_kwargs: Any,
    ):
        """
        Initialize the PostgreSQL adapter.

        Args:
            address: libpq connection string or ``postgresql://`` URL
            auto_commit: Whether to commit after each write outside a transaction
            isolation_level: Transaction isolation level
                (read_committed, repeatable_read, serializable)
            application_name: Application name to set in PostgreSQL (for monitoring)
            connection: Existing psycopg2 connection to use (optional)
            **connect_kwargs: Extra keyword arguments for psycopg2.connect

        Raises:
            ImportError: If psycopg2 is not installed
            ValueError: If the isolation level is unknown
        """
        if not _has_psycopg2:
            raise ImportError(
                "psycopg2 is not installed. "
                "Install it with 'pip install psycopg2-binary'"
            )

        isolation_levels = {
            "read_committed": psycopg2.extensions.ISOLATION_LEVEL_READ_COMMITTED,
            "repeatable_read": psycopg2.extensions.ISOLATION_LEVEL_REPEATABLE_READ,
            "serializable": psycopg2.extensions.ISOLATION_LEVEL_SERIALIZABLE,
        }
        if isolation_level not in isolation_levels:
            raise ValueError(
                f"Invalid isolation level: {isolation_level}. "
                f"Valid values are: {', '.join(isolation_levels.keys())}"
            )

        super().__init__(connection=connection, auto_commit=auto_commit)
        self.dsn = address
        self.isolation_level = isolation_levels[isolation_level]
        if application_name and "application_name" not in connect_kwargs:
            connect_kwargs["application_name"] = application_name
        self.connect_kwargs = connect_kwargs

    @classmethod
    def is_available(cls) -> bool:
        return _has_psycopg2

    def _open_connection(self) -> Any:
        conn = psycopg2.connect(self.dsn, **self.connect_kwargs)
        conn.set_isolation_level(self.isolation_level)
        return conn
