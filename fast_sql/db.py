"""
Batch-inserting database handle.

This module contains FastDB, the main entry point of fast-sql. FastDB wraps a
driver adapter, turns repeated single-row INSERT calls into multi-row INSERT
statements, re-uses the prepared statements it creates and passes every other
operation through to the underlying connection.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence, Tuple

from fast_sql.adapters import get_adapter_class
from fast_sql.adapters.base import ConnectionAdapter, PreparedStatement
from fast_sql.batch import BatchState
from fast_sql.config import DEFAULT_FLUSH_THRESHOLD
from fast_sql.exceptions import (
    DatabaseConnectionError,
    ExecError,
    FastSQLError,
    PrepareError,
)
from fast_sql.query_collector import QueryCollector
from fast_sql.statement_cache import StatementCache, close_statements

logger = logging.getLogger(__name__)


def _connect(adapter: ConnectionAdapter) -> None:
    """Open the adapter's connection and verify it is reachable."""
    try:
        adapter.connect()
        adapter.ping()
    except DatabaseConnectionError:
        raise
    except Exception as e:
        logger.error(f"Could not connect to {adapter.driver_name}: {str(e)}")
        raise DatabaseConnectionError(
            f"Failed to connect to {adapter.driver_name}: {str(e)}",
            driver=adapter.driver_name,
        ) from e


class FastDB:
    """
    Database handle with automatic batch inserts and statement caching.

    Rows passed to :meth:`batch_insert` are buffered per INSERT template and
    written as one multi-row INSERT once ``flush_threshold`` rows are pending,
    when :meth:`flush_all` is called, or on :meth:`close`.

    FastDB does no locking. Inserting into the same template from several
    threads requires external synchronization.

    Attributes:
        adapter: Driver adapter owning the native connection
        flush_threshold: Pending row count that triggers an automatic flush
        prepared_statements: Caller-managed prepared statements, closed with
            the connection
        query_collector: Optional collector notified after every flush
        dry_run: Build and record batches without executing them
    """

    def __init__(
        self,
        adapter: ConnectionAdapter,
        flush_threshold: Optional[int] = None,
        query_collector: Optional[QueryCollector] = None,
        dry_run: bool = False,
    ):
        """
        Initialize a FastDB around an already connected adapter.

        Args:
            adapter: Connected driver adapter
            flush_threshold: Rows per batch (default: FASTSQL_FLUSH_THRESHOLD).
                0 or 1 flushes every row immediately.
            query_collector: Optional collector notified after every flush
            dry_run: If True, batches are built and recorded but never executed

        Raises:
            ValueError: If flush_threshold is negative
        """
        if flush_threshold is None:
            flush_threshold = DEFAULT_FLUSH_THRESHOLD
        if flush_threshold < 0:
            raise ValueError(f"flush_threshold must be >= 0, got {flush_threshold}")

        self.adapter = adapter
        self.flush_threshold = flush_threshold
        self.query_collector = query_collector
        self.dry_run = dry_run
        self.prepared_statements: Dict[str, PreparedStatement] = {}
        self._statements = StatementCache(adapter)
        self._batches: Dict[str, BatchState] = {}
        self._closed = False

        logger.debug(f"Initialized FastDB with flush_threshold={flush_threshold}, dry_run={dry_run}")

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def statement_cache(self) -> StatementCache:
        return self._statements

    def set_connection(self, adapter: ConnectionAdapter) -> None:
        """
        Replace the underlying connection.

        The new adapter is connected and pinged first; on failure the current
        connection stays in place. Statements cached for the old connection are
        closed, pending batches are kept.

        Raises:
            DatabaseConnectionError: If the new connection is not reachable
        """
        _connect(adapter)
        self._statements.close_all()
        self.adapter = adapter
        self._statements = StatementCache(adapter)
        logger.info(f"Switched FastDB to a new {adapter.driver_name} connection")

    def get_batch(self, template: str) -> Optional[BatchState]:
        return self._batches.get(template)

    def pending_rows(self, template: Optional[str] = None) -> int:
        """Pending row count for one template, or for all templates."""
        if template is not None:
            state = self._batches.get(template)
            return state.row_count if state is not None else 0
        return sum(state.row_count for state in self._batches.values())

    def batch_insert(self, template: str, *params: Any) -> None:
        """
        Buffer one row for a multi-row INSERT.

        The template is a single-row INSERT such as
        ``INSERT INTO t (a, b) VALUES (?, ?)``, optionally followed by an
        ``ON DUPLICATE KEY UPDATE`` clause. When the template's batch reaches
        the flush threshold it is flushed before this call returns, and any
        flush error is raised from here even though the batch also holds rows
        from earlier calls.

        Args:
            template: Single-row INSERT template, used as the batch key
            *params: Values for the row's placeholders

        Raises:
            QuerySplitError: If the template is not a supported INSERT
            PrepareError: If an automatic flush cannot prepare its statement
            ExecError: If an automatic flush fails to execute
        """
        if self._closed:
            raise FastSQLError("Cannot batch insert on a closed connection")

        state = self._batches.get(template)
        if state is None:
            state = BatchState(template)
            self._batches[template] = state

        if state.append(params) >= self.flush_threshold:
            self._flush_batch(state)

    def flush(self, template: str) -> int:
        """
        Flush the pending rows of one template.

        On failure the pending rows stay buffered so the flush can be retried.

        Returns:
            Number of rows written
        """
        state = self._batches.get(template)
        if state is None:
            return 0
        return self._flush_batch(state)

    def flush_all(self) -> int:
        """
        Flush the pending rows of every template.

        If any batch fails, flushing stops, every template's pending rows are
        discarded (including batches not yet attempted) and the error is
        raised.

        Returns:
            Total number of rows written
        """
        total = 0
        for state in list(self._batches.values()):
            try:
                total += self._flush_batch(state)
            except Exception:
                dropped = self.pending_rows()
                logger.error(
                    f"Flush of {state.split.table_name} failed, discarding "
                    f"{dropped} pending rows across {len(self._batches)} templates"
                )
                self._batches = {}
                raise
        return total

    def _flush_batch(self, state: BatchState) -> int:
        rows = state.row_count
        if rows == 0:
            return 0

        sql = state.materialize()

        if self.dry_run:
            logger.info(f"[DRY RUN] Batch of {rows} rows for {state.split.table_name}")
            logger.debug(f"[DRY RUN] Batch SQL: {sql}")
        else:
            stmt = self._statements.get_or_prepare(sql)
            try:
                stmt.execute(state.params)
            except Exception as e:
                logger.error(
                    f"Error executing batch of {rows} rows for {state.split.table_name}: {str(e)}",
                    exc_info=True,
                )
                raise ExecError(f"Failed to execute batch insert: {str(e)}", sql=sql, row_count=rows) from e
            logger.debug(f"Flushed {rows} rows into {state.split.table_name}")

        if self.query_collector is not None:
            self.query_collector.add_query(
                sql,
                "UPSERT" if state.split.has_conflict_clause else "INSERT",
                rows,
                state.split.table_name,
            )

        state.reset()
        return rows

    def prepare(self, name: str, sql: str) -> PreparedStatement:
        """
        Prepare a caller-managed statement and store it under ``name``.

        The statement is closed together with the connection. A statement
        already stored under the same name is closed and replaced.

        Raises:
            PrepareError: If the statement cannot be prepared
        """
        try:
            stmt = self.adapter.prepare(sql)
        except Exception as e:
            raise PrepareError(f"Failed to prepare statement {name!r}: {str(e)}", sql=sql) from e

        previous = self.prepared_statements.get(name)
        if previous is not None:
            close_statements([previous])
        self.prepared_statements[name] = stmt
        return stmt

    def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> List[Tuple]:
        """Execute a one-off statement on the underlying connection."""
        return self.adapter.execute(sql, params)

    def begin_transaction(self) -> None:
        self.adapter.begin_transaction()

    def commit_transaction(self) -> None:
        self.adapter.commit_transaction()

    def rollback_transaction(self) -> None:
        self.adapter.rollback_transaction()

    def stats(self) -> Dict[str, int]:
        return {
            "templates": len(self._batches),
            "pending_rows": self.pending_rows(),
            "cached_statements": len(self._statements),
            "prepared_statements": len(self.prepared_statements),
        }

    def close(self) -> None:
        """
        Flush all pending batches and close the connection.

        If the final flush fails the error is raised and nothing is released.
        Otherwise the cached statements and the caller-managed statements are
        closed concurrently, and the underlying connection is closed once both
        groups are done.
        """
        if self._closed:
            return

        self.flush_all()

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="fast_sql-close") as executor:
            cached = executor.submit(self._statements.close_all)
            manual = executor.submit(close_statements, self.prepared_statements.values())
            released = cached.result() + manual.result()

        self.adapter.close()
        self._closed = True
        logger.info(f"Closed {self.adapter.driver_name} connection after releasing {released} statements")

    def __enter__(self) -> "FastDB":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __getattr__(self, name: str) -> Any:
        # Only called for attributes FastDB does not define itself
        if name.startswith("_") or name == "adapter":
            raise AttributeError(name)
        return getattr(self.adapter.connection, name)


def open(
    driver: str,
    address: str,
    flush_threshold: Optional[int] = None,
    query_collector: Optional[QueryCollector] = None,
    dry_run: bool = False,
    **options: Any,
) -> FastDB:
    """
    Open a connection and wrap it in a FastDB.

    Args:
        driver: Registered driver name (sqlite, mysql, postgresql, trino)
        address: Driver specific address, e.g. a file path or connection URL
        flush_threshold: Rows per batch (default: FASTSQL_FLUSH_THRESHOLD)
        query_collector: Optional collector notified after every flush
        dry_run: If True, batches are built and recorded but never executed
        **options: Extra keyword arguments for the adapter

    Returns:
        A connected FastDB

    Raises:
        UnsupportedDriverError: If the driver name is unknown
        DatabaseConnectionError: If the database cannot be reached
    """
    adapter_class = get_adapter_class(driver)
    adapter = adapter_class(address, **options)
    _connect(adapter)
    logger.info(f"Opened {adapter.driver_name} connection")
    return FastDB(
        adapter,
        flush_threshold=flush_threshold,
        query_collector=query_collector,
        dry_run=dry_run,
    )
