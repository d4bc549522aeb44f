"""
Query collector for fast-sql to record flushed batches.

This module provides a QueryCollector class that FastDB notifies after every
flush. It is used for dry runs and for summarizing a load.
"""
from typing import Any, Dict, List
import logging

logger = logging.getLogger(__name__)


class QueryCollector:
    """
    Collects the batch statements produced by FastDB.

    Example:
        >>> import fast_sql
        >>> from fast_sql import QueryCollector
        >>>
        >>> collector = QueryCollector()
        >>> db = fast_sql.open("sqlite", ":memory:", 2, query_collector=collector, dry_run=True)
        >>> for i in range(4):
        ...     db.batch_insert("INSERT INTO users (id) VALUES (?)", i)
        >>> print(f"Collected {len(collector.queries)} batches")
        Collected 2 batches
        >>> print(f"Total rows: {collector.total_row_count}")
        Total rows: 4
    """

    def __init__(self):
        """Initialize a new query collector."""
        self.queries: List[Dict[str, Any]] = []
        self.total_row_count = 0

    def add_query(self, query: str, query_type: str = "INSERT",
                  row_count: int = 1, table_name: str = "unknown") -> None:
        """
        Add a flushed batch to the collector.

        Args:
            query: Materialized SQL of the batch
            query_type: INSERT, or UPSERT for templates with a conflict clause
            row_count: Number of rows in the batch
            table_name: Target table name
        """
        self.queries.append({
            "query": query,
            "type": query_type,
            "row_count": row_count,
            "table_name": table_name
        })
        self.total_row_count += row_count
        logger.debug(f"Added query to collector: {query_type} on {table_name} ({row_count} rows)")

    def clear(self) -> None:
        """Clear all collected queries."""
        self.queries = []
        self.total_row_count = 0

    def get_queries_by_table(self, table_name: str) -> List[Dict[str, Any]]:
        """
        Get all batches for a specific table.

        Args:
            table_name: Table name to filter by

        Returns:
            List of query dictionaries for the specified table
        """
        return [q for q in self.queries if q["table_name"] == table_name]

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the collected batches.

        Returns:
            Dictionary with batch and row counts, overall and per table
        """
        tables: Dict[str, Dict[str, int]] = {}
        for q in self.queries:
            table = tables.setdefault(q["table_name"], {"batches": 0, "rows": 0})
            table["batches"] += 1
            table["rows"] += q["row_count"]

        return {
            "total_queries": len(self.queries),
            "total_row_count": self.total_row_count,
            "distinct_statements": len({q["query"] for q in self.queries}),
            "tables": tables,
        }
