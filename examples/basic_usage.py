#!/usr/bin/env python
"""
Basic usage example for fast-sql

This example loads rows into an in-memory SQLite database through a
single-row INSERT template and shows the batches FastDB produced.
"""
import logging

import fast_sql
from fast_sql import QueryCollector


# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main():
    """Run the basic fast-sql example."""
    collector = QueryCollector()

    # Flush every 3 rows for demonstration
    with fast_sql.open("sqlite", ":memory:", 3, query_collector=collector) as db:
        db.execute("CREATE TABLE example_table (id INTEGER PRIMARY KEY, label TEXT, day TEXT)")

        rows = [
            (1, "First value", "2023-01-01"),
            (2, "Second value", "2023-01-02"),
            (3, "Third value with longer text", "2023-01-03"),
            (4, "Fourth value", "2023-01-04"),
            (5, "Fifth value", "2023-01-05"),
        ]

        logger.info("Inserting rows with threshold-based batching...")
        for row in rows:
            db.batch_insert("INSERT INTO example_table (id, label, day) VALUES (?, ?, ?)", *row)

        logger.info(f"{db.pending_rows()} rows still pending before close")

    for query in collector.queries:
        logger.info(f"Executed {query['row_count']} rows: {query['query']}")


if __name__ == "__main__":
    main()
