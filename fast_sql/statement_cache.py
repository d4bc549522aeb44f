"""
Prepared statement cache.

Every distinct materialized batch SQL text (one per template, conflict clause
and row count) gets one prepared statement for the life of the connection.
Batch sizes are dominated by the flush threshold, so in steady state the cache
holds one or two entries per template. There is no eviction.
"""
import logging
from typing import Dict, Iterator

from fast_sql.adapters.base import ConnectionAdapter, PreparedStatement
from fast_sql.exceptions import PrepareError

logger = logging.getLogger(__name__)


class StatementCache:
    """Memoizing store of prepared statements keyed by their SQL text."""

    def __init__(self, adapter: ConnectionAdapter):
        self.adapter = adapter
        self._statements: Dict[str, PreparedStatement] = {}

    def get_or_prepare(self, sql: str) -> PreparedStatement:
        """
        Return the cached statement for ``sql``, preparing it on a miss.

        Raises:
            PrepareError: If the adapter fails to prepare the statement
        """
        stmt = self._statements.get(sql)
        if stmt is not None:
            return stmt

        try:
            stmt = self.adapter.prepare(sql)
        except Exception as e:
            logger.error(f"Failed to prepare statement: {str(e)}", exc_info=True)
            raise PrepareError(f"Failed to prepare statement: {str(e)}", sql=sql) from e

        self._statements[sql] = stmt
        logger.debug(f"Cached prepared statement #{len(self._statements)}: {sql}")
        return stmt

    def close_all(self) -> int:
        """
        Close every cached statement.

        Failures are logged and do not stop the remaining statements from
        being closed.

        Returns:
            Number of statements closed without error
        """
        return close_statements(self._statements.values())

    def __contains__(self, sql: object) -> bool:
        return sql in self._statements

    def __iter__(self) -> Iterator[str]:
        return iter(self._statements)

    def __len__(self) -> int:
        return len(self._statements)


def close_statements(statements) -> int:
    closed = 0
    for stmt in list(statements):
        try:
            stmt.close()
            closed += 1
        except Exception as e:
            logger.warning(f"Could not close prepared statement {stmt!r}: {str(e)}")
    return closed
