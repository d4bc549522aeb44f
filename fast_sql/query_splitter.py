"""
Query splitting for batch inserts.

This module decomposes a single-row INSERT template such as::

    INSERT INTO t (a, b) VALUES (?, ?) ON DUPLICATE KEY UPDATE b = VALUES(b)

into a prefix (``INSERT INTO t (a, b)``), a row fragment (``(?, ?),``) and an
optional conflict clause suffix. Repeating the row fragment N times and
re-assembling the three parts gives the N-row version of the same statement.

The template is tokenized with a small scanner instead of a regular expression
search so that keywords inside string literals, quoted identifiers and
comments are never mistaken for the VALUES anchor or the conflict clause.
"""
import functools
import logging
from typing import List, NamedTuple, Optional

from fast_sql.exceptions import QuerySplitError

logger = logging.getLogger(__name__)

SEPARATOR = ","
VALUES_KEYWORD = "VALUES"
CONFLICT_KEYWORDS = ("ON", "DUPLICATE", "KEY", "UPDATE")
INSERT_KEYWORDS = ("INSERT", "REPLACE")

_QUOTE_CHARS = ("'", '"', "`")


class _Token(NamedTuple):
    """A bare word found outside literals and comments."""
    word: str
    start: int
    end: int
    depth: int


class SplitQuery(NamedTuple):
    """The reusable parts of an INSERT template."""
    prefix: str
    row_fragment: str
    suffix: str = ""
    table_name: str = "unknown"

    @property
    def has_conflict_clause(self) -> bool:
        return bool(self.suffix)

    def materialize(self, accumulated_text: str) -> str:
        """
        Build the final SQL for a batch.

        Args:
            accumulated_text: The row fragment repeated once per pending row,
                including the trailing separator of the last row

        Returns:
            The complete multi-row INSERT statement
        """
        if accumulated_text.endswith(SEPARATOR):
            accumulated_text = accumulated_text[:-len(SEPARATOR)]
        sql = f"{self.prefix} {VALUES_KEYWORD} {accumulated_text}"
        if self.suffix:
            sql = f"{sql} {self.suffix}"
        return sql


def _skip_quoted(sql: str, start: int) -> int:
    """Return the index just past the literal that opens at ``start``."""
    quote = sql[start]
    i = start + 1
    n = len(sql)
    while i < n:
        ch = sql[i]
        if ch == "\\" and quote != "`":
            i += 2
            continue
        if ch == quote:
            # A doubled quote is an escaped quote
            if i + 1 < n and sql[i + 1] == quote:
                i += 2
                continue
            return i + 1
        i += 1
    raise QuerySplitError(f"Unterminated {quote} literal starting at offset {start}")


def _scan(sql: str):
    """
    Tokenize a template.

    Returns:
        Tuple of (bare word tokens, offsets of closing parentheses that bring
        the nesting depth back to zero)
    """
    tokens: List[_Token] = []
    closes: List[int] = []
    depth = 0
    i = 0
    n = len(sql)

    while i < n:
        ch = sql[i]
        if ch in _QUOTE_CHARS:
            i = _skip_quoted(sql, i)
        elif sql.startswith("--", i) or ch == "#":
            newline = sql.find("\n", i)
            i = n if newline == -1 else newline + 1
        elif sql.startswith("/*", i):
            end = sql.find("*/", i + 2)
            i = n if end == -1 else end + 2
        elif ch == "(":
            depth += 1
            i += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                raise QuerySplitError(f"Unbalanced ')' at offset {i}")
            if depth == 0:
                closes.append(i)
            i += 1
        elif ch.isalnum() or ch in "_$":
            start = i
            while i < n and (sql[i].isalnum() or sql[i] in "_$"):
                i += 1
            # Numeric literals are not keywords
            if not ch.isdigit():
                tokens.append(_Token(sql[start:i].upper(), start, i, depth))
        else:
            i += 1

    if depth != 0:
        raise QuerySplitError("Unbalanced parentheses in INSERT template")
    return tokens, closes


def _find_conflict_clause(tokens: List[_Token], after: int) -> Optional[_Token]:
    """Return the ON token of the last top-level ON DUPLICATE KEY UPDATE phrase."""
    width = len(CONFLICT_KEYWORDS)
    found = None
    for idx in range(len(tokens) - width + 1):
        window = tokens[idx:idx + width]
        if window[0].start < after or window[0].depth != 0:
            continue
        if tuple(token.word for token in window) == CONFLICT_KEYWORDS:
            found = window[0]
    return found


def _table_name(sql: str, tokens: List[_Token], values: _Token) -> str:
    for token in tokens:
        if token.start >= values.start:
            break
        if token.word == "INTO":
            name = sql[token.end:values.start].split("(", 1)[0].strip()
            return name or "unknown"
    return "unknown"


@functools.lru_cache(maxsize=None)
def split_query(template: str) -> SplitQuery:
    """
    Split a single-row INSERT template into prefix, row fragment and suffix.

    Results are memoized by the literal template text, so a template is only
    ever scanned once per process.

    Args:
        template: ``INSERT ... VALUES (<row>) [ON DUPLICATE KEY UPDATE ...]``

    Returns:
        The SplitQuery for the template

    Raises:
        QuerySplitError: If the template does not have the supported shape
    """
    tokens, closes = _scan(template)

    if not tokens or tokens[0].word not in INSERT_KEYWORDS:
        raise QuerySplitError(f"Not an INSERT statement: {template!r}")

    values = next(
        (t for t in tokens if t.word == VALUES_KEYWORD and t.depth == 0), None
    )
    if values is None:
        raise QuerySplitError(f"INSERT template has no VALUES clause: {template!r}")

    conflict = _find_conflict_clause(tokens, values.end)
    if conflict is not None:
        row = template[values.end:conflict.start].strip()
        suffix = template[conflict.start:].strip()
    else:
        row_closes = [c for c in closes if c > values.end]
        if not row_closes:
            raise QuerySplitError(f"INSERT template has no value tuple: {template!r}")
        row = template[values.end:row_closes[-1] + 1].strip()
        suffix = ""

    if not (row.startswith("(") and row.endswith(")")):
        raise QuerySplitError(f"INSERT template has no value tuple: {template!r}")

    split = SplitQuery(
        prefix=template[:values.start].strip(),
        row_fragment=row + SEPARATOR,
        suffix=suffix,
        table_name=_table_name(template, tokens, values),
    )
    logger.debug(f"Split INSERT template for {split.table_name}: {split}")
    return split
