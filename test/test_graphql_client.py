"""Tests for the GraphQL query compiler and client."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from http_fakes import FakeResponse, FakeSession

from AnnoQ.core.errors import InvalidArgumentError, ProtocolError, RemoteError
from AnnoQ.sources.graphql.client import GraphqlApiClient
from AnnoQ.sources.graphql.query import (
    annotations_selection,
    compile_region_query,
    compile_rsid_query,
    compile_rsids_query,
)

GRAPHQL_URL = "https://annoq.test/graphql"


class TestGraphqlCompiler(unittest.TestCase):
    def test_annotations_joined_by_newline(self) -> None:
        self.assertEqual(annotations_selection(["chr", "pos", " ref "]), "chr\npos\nref")

    def test_empty_annotations_rejected(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            annotations_selection([])

    def test_region_query_text(self) -> None:
        text = compile_region_query("18", 1, 50000, ["chr", "pos"])
        self.assertIn(
            'get_SNPs_by_chromosome(chr: "18", start: 1, end: 50000, '
            "query_type_option: SNPS, page_args: {size: 10000})",
            text,
        )
        self.assertIn("snps {\n      chr\npos\n    }", text)

    def test_rsid_query_filters_on_dbsnp(self) -> None:
        text = compile_rsid_query("rs559687999", ["chr"])
        self.assertIn('get_SNPs_by_RsID(rsID: "rs559687999"', text)
        self.assertIn('filter_args: {exists: ["rs_dbSNP151"]}', text)

    def test_rsids_query_lists_ids(self) -> None:
        text = compile_rsids_query(["rs115366554", "rs189126619"], ["chr"])
        self.assertIn('rsIDs: ["rs115366554", "rs189126619"]', text)
        self.assertIn("page_args: {size: 10000}", text)

    def test_string_arguments_are_escaped(self) -> None:
        text = compile_rsid_query('rs1" ) { evil', ["chr"])
        self.assertIn('rsID: "rs1\\" ) { evil"', text)

    def test_page_size_bounds(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            compile_region_query("1", 1, 10, ["chr"], page_size=10_001)
        with self.assertRaises(InvalidArgumentError):
            compile_region_query("1", 1, 10, ["chr"], page_size=0)


class TestGraphqlClient(unittest.TestCase):
    def test_region_query_posts_query_body(self) -> None:
        payload = {"data": {"get_SNPs_by_chromosome": {"snps": [{"chr": "18", "pos": 10}]}}}
        session = FakeSession(FakeResponse(payload=payload))
        client = GraphqlApiClient(GRAPHQL_URL, session=session)

        records = client.region_query("18", 1, 50000, ["chr", "pos"])

        self.assertEqual(records, [{"chr": "18", "pos": 10}])
        call = session.calls[0]
        self.assertEqual(call["method"], "POST")
        self.assertEqual(call["url"], GRAPHQL_URL)
        self.assertEqual(list(call["json"].keys()), ["query"])
        self.assertIn("get_SNPs_by_chromosome", call["json"]["query"])

    def test_rsids_query(self) -> None:
        payload = {"data": {"get_SNPs_by_RsIDs": {"snps": [{"rs_dbSNP151": "rs1"}, {"rs_dbSNP151": "rs2"}]}}}
        session = FakeSession(FakeResponse(payload=payload))
        client = GraphqlApiClient(GRAPHQL_URL, session=session)
        self.assertEqual(len(client.rsids_query(["rs1", "rs2"], ["rs_dbSNP151"])), 2)

    def test_null_snps_is_empty_result(self) -> None:
        payload = {"data": {"get_SNPs_by_RsID": {"snps": None}}}
        client = GraphqlApiClient(GRAPHQL_URL, session=FakeSession(FakeResponse(payload=payload)))
        self.assertEqual(client.rsid_query("rs1", ["chr"]), [])

    def test_missing_data_path_raises_protocol_error(self) -> None:
        payload = {"data": None, "errors": [{"message": "Cannot query field 'bogus'"}]}
        client = GraphqlApiClient(GRAPHQL_URL, session=FakeSession(FakeResponse(payload=payload)))
        with self.assertRaisesRegex(ProtocolError, "Cannot query field"):
            client.rsid_query("rs1", ["bogus"])

    def test_http_error_raises_remote_error(self) -> None:
        client = GraphqlApiClient(GRAPHQL_URL, session=FakeSession(FakeResponse(400, text="bad query")))
        with self.assertRaises(RemoteError) as ctx:
            client.region_query("1", 1, 10, ["chr"])
        self.assertEqual(ctx.exception.status_code, 400)

    def test_empty_annotations_never_reach_network(self) -> None:
        session = FakeSession()
        client = GraphqlApiClient(GRAPHQL_URL, session=session)
        with self.assertRaises(InvalidArgumentError):
            client.region_query("1", 1, 10, [])
        self.assertEqual(session.calls, [])


if __name__ == "__main__":
    unittest.main()
