"""
SQLite adapter for fast-sql.

SQLite uses ``?`` placeholders and caches compiled statements per connection,
so re-executing the same multi-row INSERT text through one cursor skips
re-compilation.
"""
import logging
import sqlite3
from typing import Any

from fast_sql.adapters.generic import GenericAdapter

logger = logging.getLogger(__name__)


class SQLiteAdapter(GenericAdapter):
    """
    Adapter for SQLite databases using the standard library driver.

    Attributes:
        database: Database file path, or ``:memory:``
    """

    driver_name = "sqlite"

    def __init__(self, address: str = ":memory:", auto_commit: bool = True, **connect_kwargs: Any):
        """
        Initialize the SQLite adapter.

        Args:
            address: Database file path, or ``:memory:``
            auto_commit: Whether to commit after each write outside a transaction
            **connect_kwargs: Extra keyword arguments for sqlite3.connect
        """
        super().__init__(auto_commit=auto_commit)
        self.database = address
        # Statements are released from a worker thread on close
        connect_kwargs.setdefault("check_same_thread", False)
        self.connect_kwargs = connect_kwargs

    def _open_connection(self) -> Any:
        return sqlite3.connect(self.database, **self.connect_kwargs)

    def begin_transaction(self) -> None:
        """Begin a database transaction."""
        if not self.connection.in_transaction:
            self.connection.execute("BEGIN")
        self._in_transaction = True
