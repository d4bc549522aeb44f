"""
Base adapter interface for fast-sql.

This module defines the abstract base classes that every driver adapter must
implement. An adapter owns one native database connection and hands out
prepared statements that FastDB caches and re-executes.
"""
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence, Tuple


class PreparedStatement(ABC):
    """
    A statement compiled once and executed many times.

    Attributes:
        sql: The SQL text this statement was prepared from
    """

    def __init__(self, sql: str):
        self.sql = sql

    @abstractmethod
    def execute(self, params: Sequence[Any] = ()) -> int:
        """
        Execute the statement.

        Args:
            params: Positional values for the statement's placeholders

        Returns:
            Number of affected rows as reported by the driver
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the statement."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.sql!r})"


class ConnectionAdapter(ABC):
    """
    Abstract base class for fast-sql driver adapters.

    Adapters provide a consistent interface over the different Python database
    drivers: connecting, checking reachability, preparing statements and
    passing everything else through to the native connection.
    """

    #: Name used to look the adapter up in the driver registry
    driver_name = "generic"

    @property
    @abstractmethod
    def connection(self) -> Any:
        """The native DB-API connection."""
        pass

    @abstractmethod
    def connect(self) -> None:
        """Open the native connection."""
        pass

    @abstractmethod
    def ping(self) -> None:
        """
        Verify the connection is reachable.

        Raises:
            Exception: Any driver error if the server cannot be reached
        """
        pass

    @abstractmethod
    def prepare(self, sql: str) -> PreparedStatement:
        """
        Prepare a statement for repeated execution.

        Args:
            sql: SQL text with positional placeholders

        Returns:
            A reusable prepared statement
        """
        pass

    @abstractmethod
    def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> List[Tuple]:
        """
        Execute a one-off SQL statement.

        Args:
            sql: SQL statement to execute
            params: Optional positional parameters

        Returns:
            List of result rows (empty for statements without a result set)
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the native connection."""
        pass

    def begin_transaction(self) -> None:
        """
        Begin a transaction.

        Implementations may override this method if they support transactions.
        By default, this method does nothing.
        """
        pass

    def commit_transaction(self) -> None:
        """
        Commit the current transaction.

        Implementations may override this method if they support transactions.
        By default, this method does nothing.
        """
        pass

    def rollback_transaction(self) -> None:
        """
        Rollback the current transaction.

        Implementations may override this method if they support transactions.
        By default, this method does nothing.
        """
        pass
