"""Tests for field-selection normalization."""

import sys
import tempfile
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from AnnoQ.core.errors import FieldSpecNotFoundError, InvalidArgumentError
from AnnoQ.core.fields import (
    FieldSpec,
    FileFields,
    InlineFields,
    JsonFields,
    check_rest_field_limit,
    normalize_fields,
    parse_field_input,
)


class TestParseFieldInput(unittest.TestCase):
    def test_none_passes_through(self) -> None:
        self.assertIsNone(parse_field_input(None))
        self.assertIsNone(normalize_fields(None))

    def test_list_is_inline(self) -> None:
        self.assertEqual(parse_field_input(["chr", "pos"]), InlineFields(("chr", "pos")))

    def test_braced_string_is_json(self) -> None:
        parsed = parse_field_input('  {"_source": ["chr"]}  ')
        self.assertEqual(parsed, JsonFields('{"_source": ["chr"]}'))

    def test_other_string_is_path(self) -> None:
        self.assertEqual(parse_field_input("fields.json"), FileFields(Path("fields.json")))

    def test_mapping_is_rejected(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            parse_field_input({"chr": "1"})

    def test_unsupported_type_is_rejected(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            parse_field_input(42)


class TestNormalizeFields(unittest.TestCase):
    def test_three_forms_normalize_identically(self) -> None:
        json_text = '{"_source":["chr","pos"]}'
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "fields.json"
            path.write_text(json_text, encoding="utf-8")

            inline = normalize_fields(["chr", "pos"])
            from_text = normalize_fields(json_text)
            from_file = normalize_fields(str(path))
            from_path_obj = normalize_fields(path)

        self.assertEqual(inline, FieldSpec(("chr", "pos")))
        self.assertEqual(inline, from_text)
        self.assertEqual(inline, from_file)
        self.assertEqual(inline, from_path_obj)
        self.assertEqual(inline.to_json(), json_text)
        self.assertEqual(inline.to_payload(), {"_source": ["chr", "pos"]})

    def test_missing_file_raises_file_not_found(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = str(Path(tmp) / "nope.json")
            with self.assertRaises(FieldSpecNotFoundError):
                normalize_fields(missing)
            with self.assertRaises(FileNotFoundError):
                normalize_fields(missing)

    def test_plain_names_string_is_treated_as_missing_file(self) -> None:
        with self.assertRaises(FieldSpecNotFoundError):
            normalize_fields("chr,pos,definitely-not-a-file")

    def test_json_without_source_key_is_rejected(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            normalize_fields('{"fields": ["chr"]}')

    def test_malformed_inline_json_is_reported_as_not_found(self) -> None:
        for text in ('{"_source": [chr]}', "{not json}"):
            with self.subTest(text=text):
                with self.assertRaises(FieldSpecNotFoundError):
                    normalize_fields(text)
                with self.assertRaises(FileNotFoundError):
                    normalize_fields(text)

    def test_malformed_json_file_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "fields.json"
            path.write_text('{"_source": [chr]}', encoding="utf-8")
            with self.assertRaises(InvalidArgumentError):
                normalize_fields(path)

    def test_source_must_be_a_list_of_strings(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            normalize_fields('{"_source": "chr"}')
        with self.assertRaises(InvalidArgumentError):
            normalize_fields('{"_source": ["chr", 1]}')

    def test_duplicates_are_dropped_in_order(self) -> None:
        spec = normalize_fields(["pos", "chr", "pos"])
        self.assertEqual(spec.names, ("pos", "chr"))

    def test_empty_selection_is_rejected(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            normalize_fields([])

    def test_tagged_input_is_accepted(self) -> None:
        self.assertEqual(normalize_fields(InlineFields(("chr",))), FieldSpec(("chr",)))


class TestRestFieldLimit(unittest.TestCase):
    def test_twenty_fields_are_allowed(self) -> None:
        check_rest_field_limit(FieldSpec(tuple(f"f{idx}" for idx in range(20))))

    def test_more_than_twenty_fields_are_rejected(self) -> None:
        with self.assertRaisesRegex(InvalidArgumentError, "20"):
            check_rest_field_limit(FieldSpec(tuple(f"f{idx}" for idx in range(21))))

    def test_none_is_allowed(self) -> None:
        check_rest_field_limit(None)


if __name__ == "__main__":
    unittest.main()
