"""
Unit tests for INSERT template splitting.
"""
import unittest

import pytest

from fast_sql.exceptions import QuerySplitError
from fast_sql.query_splitter import SplitQuery, split_query

pytestmark = pytest.mark.core


class TestSplitQuery(unittest.TestCase):
    """Test cases for split_query."""

    def test_simple_insert(self):
        """Test splitting a template without a conflict clause."""
        split = split_query("INSERT INTO t (a,b) VALUES (?,?)")
        self.assertEqual(split.prefix, "INSERT INTO t (a,b)")
        self.assertEqual(split.row_fragment, "(?,?),")
        self.assertEqual(split.suffix, "")
        self.assertEqual(split.table_name, "t")
        self.assertFalse(split.has_conflict_clause)

    def test_conflict_clause(self):
        """Test that the ON DUPLICATE KEY UPDATE clause becomes the suffix."""
        split = split_query("INSERT INTO t (a) VALUES (?) ON DUPLICATE KEY UPDATE a=?")
        self.assertEqual(split.prefix, "INSERT INTO t (a)")
        self.assertEqual(split.row_fragment, "(?),")
        self.assertEqual(split.suffix, "ON DUPLICATE KEY UPDATE a=?")
        self.assertTrue(split.has_conflict_clause)

    def test_keywords_are_case_insensitive(self):
        split = split_query("insert into t (a) values (?) on duplicate key update a = values(a)")
        self.assertEqual(split.prefix, "insert into t (a)")
        self.assertEqual(split.row_fragment, "(?),")
        self.assertEqual(split.suffix, "on duplicate key update a = values(a)")

    def test_conflict_clause_spanning_lines(self):
        template = "INSERT INTO t (a, b)\nVALUES (?, ?)\nON  DUPLICATE\n  KEY UPDATE b = VALUES(b)"
        split = split_query(template)
        self.assertEqual(split.prefix, "INSERT INTO t (a, b)")
        self.assertEqual(split.row_fragment, "(?, ?),")
        self.assertEqual(split.suffix, "ON  DUPLICATE\n  KEY UPDATE b = VALUES(b)")

    def test_keywords_inside_string_literals_are_ignored(self):
        """Test that quoted text never anchors VALUES or the conflict clause."""
        split = split_query(
            "INSERT INTO t (a, b) VALUES ('values', ?) "
            "ON DUPLICATE KEY UPDATE b = 'on duplicate key update'"
        )
        self.assertEqual(split.row_fragment, "('values', ?),")
        self.assertEqual(split.suffix, "ON DUPLICATE KEY UPDATE b = 'on duplicate key update'")

    def test_conflict_phrase_only_in_literal(self):
        split = split_query("INSERT INTO t (a, b) VALUES (?, 'ON DUPLICATE KEY UPDATE')")
        self.assertEqual(split.row_fragment, "(?, 'ON DUPLICATE KEY UPDATE'),")
        self.assertEqual(split.suffix, "")

    def test_escaped_quotes(self):
        split = split_query("INSERT INTO t (a, b) VALUES ('it''s', 'a \\' VALUES')")
        self.assertEqual(split.row_fragment, "('it''s', 'a \\' VALUES'),")

    def test_quoted_identifiers(self):
        split = split_query("INSERT INTO `values` (`values`) VALUES (?)")
        self.assertEqual(split.prefix, "INSERT INTO `values` (`values`)")
        self.assertEqual(split.row_fragment, "(?),")
        self.assertEqual(split.table_name, "`values`")

    def test_comments_are_ignored(self):
        split = split_query("INSERT INTO t (a) /* VALUES (1) */ VALUES (?) -- trailing )")
        self.assertEqual(split.prefix, "INSERT INTO t (a) /* VALUES (1) */")
        self.assertEqual(split.row_fragment, "(?),")

    def test_nested_parentheses_in_row(self):
        split = split_query("INSERT INTO t (a, b, c) VALUES (?, NOW(), COALESCE(?, 0))")
        self.assertEqual(split.row_fragment, "(?, NOW(), COALESCE(?, 0)),")

    def test_trailing_semicolon_is_dropped(self):
        split = split_query("INSERT INTO t (a) VALUES (?);")
        self.assertEqual(split.row_fragment, "(?),")
        self.assertEqual(split.suffix, "")

    def test_replace_and_schema_qualified_table(self):
        split = split_query("REPLACE INTO shop.stock (sku) VALUES (%s)")
        self.assertEqual(split.prefix, "REPLACE INTO shop.stock (sku)")
        self.assertEqual(split.row_fragment, "(%s),")
        self.assertEqual(split.table_name, "shop.stock")

    def test_split_is_memoized(self):
        """Test that identical template strings share one split result."""
        template = "INSERT INTO memo (a) VALUES (?)"
        self.assertIs(split_query(template), split_query(template))

    def test_invalid_templates(self):
        """Test that unsupported templates raise QuerySplitError."""
        invalid = [
            "SELECT 1",
            "",
            "INSERT INTO t SELECT * FROM u",
            "INSERT INTO t (a) VALUES ?",
            "INSERT INTO t (a) VALUES (?",
            "INSERT INTO t (a) VALUES (?))",
            "INSERT INTO t (a) VALUES ('unterminated)",
        ]
        for template in invalid:
            with self.subTest(template=template):
                with self.assertRaises(QuerySplitError):
                    split_query(template)

    def test_split_error_is_value_error(self):
        with self.assertRaises(ValueError):
            split_query("UPDATE t SET a = 1")


class TestMaterialize(unittest.TestCase):
    """Test cases for building the multi-row statement."""

    def test_materialize_rows(self):
        split = SplitQuery(prefix="INSERT INTO t (a,b)", row_fragment="(?,?),")
        self.assertEqual(
            split.materialize("(?,?),(?,?),(?,?),"),
            "INSERT INTO t (a,b) VALUES (?,?),(?,?),(?,?)",
        )

    def test_materialize_keeps_single_conflict_clause(self):
        split = split_query("INSERT INTO t (a) VALUES (?) ON DUPLICATE KEY UPDATE a=?")
        sql = split.materialize(split.row_fragment * 2)
        self.assertEqual(sql, "INSERT INTO t (a) VALUES (?),(?) ON DUPLICATE KEY UPDATE a=?")
        self.assertEqual(sql.upper().count("ON DUPLICATE KEY UPDATE"), 1)

    def test_materialize_single_row_matches_template(self):
        template = "INSERT INTO t (a, b) VALUES (?, ?)"
        split = split_query(template)
        self.assertEqual(split.materialize(split.row_fragment), template)


if __name__ == "__main__":
    unittest.main()
