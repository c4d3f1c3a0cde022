"""Tests for the immutable search-engine query builder."""

import json
import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from AnnoQ.core.errors import InvalidArgumentError
from AnnoQ.core.query import (
    ExistsFilter,
    Query,
    add_filter,
    exists_filter,
    new_query,
    range_filter,
    term_filter,
    to_wire_dict,
    to_wire_format,
    with_keyword,
    with_source,
)


class TestFilterClauses(unittest.TestCase):
    def test_term_value_is_lower_cased(self) -> None:
        upper = to_wire_format(add_filter(new_query(), term_filter("chr", "ABC")))
        lower = to_wire_format(add_filter(new_query(), term_filter("chr", "abc")))
        self.assertEqual(upper, lower)
        self.assertIn('{"term":{"chr":"abc"}}', upper)

    def test_term_keeps_non_string_values(self) -> None:
        self.assertEqual(term_filter("pos", 12345).to_dict(), {"term": {"pos": 12345}})

    def test_range_lower_bound_only(self) -> None:
        clause = range_filter("pos", gt=5)
        self.assertEqual(clause.to_dict(), {"range": {"pos": {"gt": 5}}})

    def test_range_upper_bound_only(self) -> None:
        clause = range_filter("pos", lt=100)
        self.assertEqual(clause.to_dict(), {"range": {"pos": {"lt": 100}}})

    def test_range_both_bounds(self) -> None:
        clause = range_filter("pos", gt=5, lt=100)
        self.assertEqual(clause.to_dict(), {"range": {"pos": {"gt": 5, "lt": 100}}})

    def test_range_zero_is_a_bound(self) -> None:
        clause = range_filter("score", lt=0)
        self.assertEqual(clause.to_dict(), {"range": {"score": {"lt": 0}}})

    def test_range_without_bounds_is_rejected(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            range_filter("pos")
        with self.assertRaises(ValueError):
            range_filter("pos", None, None)

    def test_blank_field_is_rejected(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            exists_filter("  ")


class TestQueryBuilder(unittest.TestCase):
    def test_new_query_is_empty(self) -> None:
        query = new_query()
        self.assertEqual(query, Query())
        self.assertEqual(query.filters, ())
        self.assertIsNone(query.source_fields)
        self.assertIsNone(query.free_text)

    def test_exists_filter_end_to_end(self) -> None:
        query = add_filter(new_query(), exists_filter("ANNOVAR_ensembl_Effect"))
        self.assertEqual(
            to_wire_format(query),
            '{"query":{"bool":{"filter":[{"exists":{"field":"ANNOVAR_ensembl_Effect"}}]}}}',
        )

    def test_add_filter_preserves_order(self) -> None:
        first = exists_filter("chr")
        second = range_filter("pos", gt=10)
        query = add_filter(add_filter(new_query(), first), second)
        self.assertEqual(query.filters, (first, second))
        wire = to_wire_dict(query)
        self.assertEqual(wire["query"]["bool"]["filter"], [first.to_dict(), second.to_dict()])

    def test_add_filter_does_not_mutate_original(self) -> None:
        base = add_filter(new_query(), exists_filter("chr"))
        extended = add_filter(base, exists_filter("pos"))
        self.assertEqual(base.filters, (ExistsFilter("chr"),))
        self.assertEqual(len(extended.filters), 2)

    def test_with_source_replaces_previous_value(self) -> None:
        query = with_source(new_query(), ["chr", "pos"])
        query = with_source(query, ["ref", "alt"])
        self.assertEqual(query.source_fields, ("ref", "alt"))
        self.assertEqual(json.loads(to_wire_format(query))["_source"], ["ref", "alt"])

    def test_with_source_none_restores_defaults(self) -> None:
        query = with_source(with_source(new_query(), ["chr"]), None)
        self.assertNotIn("_source", to_wire_dict(query))

    def test_with_source_does_not_limit_count(self) -> None:
        names = [f"field_{idx}" for idx in range(30)]
        self.assertEqual(len(with_source(new_query(), names).source_fields), 30)

    def test_serialization_is_deterministic(self) -> None:
        def build() -> Query:
            query = add_filter(new_query(), term_filter("chr", "X"))
            query = add_filter(query, range_filter("pos", gt=1, lt=9))
            return with_source(query, ["chr", "pos"])

        self.assertEqual(to_wire_format(build()), to_wire_format(build()))
        self.assertEqual(
            to_wire_format(build()),
            '{"query":{"bool":{"filter":[{"term":{"chr":"x"}},{"range":{"pos":{"gt":1,"lt":9}}}]}},'
            '"_source":["chr","pos"]}',
        )

    def test_keyword_query(self) -> None:
        query = with_keyword(new_query(), "  BRCA1 ")
        self.assertEqual(to_wire_dict(query), {"query": {"query_string": {"query": "BRCA1"}}})

    def test_keyword_and_filters_are_exclusive(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            with_keyword(add_filter(new_query(), exists_filter("chr")), "BRCA1")
        with self.assertRaises(InvalidArgumentError):
            add_filter(with_keyword(new_query(), "BRCA1"), exists_filter("chr"))

    def test_blank_keyword_is_rejected(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            with_keyword(new_query(), "   ")


if __name__ == "__main__":
    unittest.main()
