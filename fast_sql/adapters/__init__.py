"""
fast-sql adapters for specific database drivers.

This package provides adapters that connect FastDB to various database
drivers. Driver libraries are imported lazily by each adapter module so that
only the drivers actually used need to be installed.
"""
from typing import Dict, Type

from fast_sql.adapters.base import ConnectionAdapter, PreparedStatement
from fast_sql.adapters.generic import CursorStatement, GenericAdapter
from fast_sql.adapters.mysql import MySQLAdapter
from fast_sql.adapters.postgresql import PostgreSQLAdapter
from fast_sql.adapters.sqlite import SQLiteAdapter
from fast_sql.adapters.trino import TrinoAdapter
from fast_sql.exceptions import UnsupportedDriverError

ADAPTERS: Dict[str, Type[GenericAdapter]] = {
    "sqlite": SQLiteAdapter,
    "sqlite3": SQLiteAdapter,
    "mysql": MySQLAdapter,
    "postgresql": PostgreSQLAdapter,
    "postgres": PostgreSQLAdapter,
    "trino": TrinoAdapter,
}


def get_adapter_class(driver: str) -> Type[GenericAdapter]:
    """
    Look up the adapter class registered for a driver name.

    Args:
        driver: Driver name, case-insensitive (e.g. "mysql", "sqlite")

    Returns:
        The adapter class

    Raises:
        UnsupportedDriverError: If no adapter is registered under that name
    """
    try:
        return ADAPTERS[driver.lower()]
    except KeyError:
        raise UnsupportedDriverError(
            f"Unsupported driver: {driver}. "
            f"Valid values are: {', '.join(sorted(ADAPTERS))}"
        ) from None


def available_drivers() -> Dict[str, bool]:
    """Map each registered driver name to whether its library is installed."""
    return {name: adapter.is_available() for name, adapter in sorted(ADAPTERS.items())}


__all__ = [
    "ADAPTERS",
    "ConnectionAdapter",
    "CursorStatement",
    "GenericAdapter",
    "MySQLAdapter",
    "PostgreSQLAdapter",
    "PreparedStatement",
    "SQLiteAdapter",
    "TrinoAdapter",
    "available_drivers",
    "get_adapter_class",
]
