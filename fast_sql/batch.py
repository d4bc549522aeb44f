"""
Batch accumulation for a single INSERT template.
"""
import logging
from typing import Any, List, Sequence

from fast_sql.query_splitter import SplitQuery, split_query

logger = logging.getLogger(__name__)


class BatchState:
    """
    Pending rows for one INSERT template.

    A BatchState is created the first time a template is used and is drained
    by every flush, never removed. It is not thread-safe: callers that insert
    into the same template from several threads must synchronize externally.

    Attributes:
        template: The INSERT template this batch belongs to
        split: The template's prefix, row fragment and suffix
        params: Bound values of all pending rows, row-major
        row_count: Number of pending rows
    """

    def __init__(self, template: str):
        self.template = template
        self.split: SplitQuery = split_query(template)
        self.reset()

    def reset(self) -> None:
        """Drop all pending rows."""
        self.params: List[Any] = []
        self.row_count = 0

    def append(self, params: Sequence[Any]) -> int:
        """
        Add one row to the batch.

        Args:
            params: Values for the row's placeholders, in placeholder order

        Returns:
            The number of pending rows after the append
        """
        self.params.extend(params)
        self.row_count += 1
        return self.row_count

    @property
    def accumulated_text(self) -> str:
        """Row fragment repeated once per pending row."""
        return self.split.row_fragment * self.row_count

    def materialize(self) -> str:
        """Build the multi-row INSERT for the pending rows."""
        return self.split.materialize(self.accumulated_text)

    def __len__(self) -> int:
        return self.row_count

    def __repr__(self) -> str:
        return f"BatchState(table={self.split.table_name!r}, rows={self.row_count})"
