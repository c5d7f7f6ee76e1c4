import unittest

import orjson

from gravifon.db import view_query_results as results
from gravifon.db.exceptions import DecodeException
from gravifon.db.model.scrobble import ScrobbleDocument

SCROBBLE_DOC = {
    "_id": "s1",
    "_rev": "1-abc",
    "user_id": "u1",
    "scrobble_start_datetime": [2013, 5, 1, 10, 0, 0, 0],
    "track_id": "t1",
}


class ViewQueryResultsTestCase(unittest.TestCase):

    def setUp(self):
        self.body = orjson.dumps({
            "total_rows": 3,
            "offset": 0,
            "rows": [
                {"id": "s1", "key": ["u1", [2013, 5, 1, 10, 0, 0, 0]], "value": 1, "doc": SCROBBLE_DOC},
                {"id": "s2", "key": ["u1", [2013, 5, 2, 10, 0, 0, 0]], "value": 2,
                 "doc": {**SCROBBLE_DOC, "_id": "s2", "scrobble_start_datetime": [2013, 5, 2, 10, 0, 0, 0]}},
            ]
        })

    def test_extract_rows(self):
        rows = results.extract_rows(results.load_results(self.body))
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[0].id, "s1")
        self.assertEqual(rows[1].key, ["u1", [2013, 5, 2, 10, 0, 0, 0]])
        self.assertEqual(rows[1].value, 2)

    def test_extract_properties(self):
        rows = results.extract_rows(results.load_results(self.body))
        self.assertEqual(results.extract_ids(rows), ["s1", "s2"])
        self.assertEqual(results.extract_values(rows, int), [1, 2])
        self.assertEqual(results.extract_keys(rows, list), [
            ["u1", [2013, 5, 1, 10, 0, 0, 0]],
            ["u1", [2013, 5, 2, 10, 0, 0, 0]],
        ])

        documents = results.extract_documents(rows, ScrobbleDocument)
        self.assertEqual([doc.id for doc in documents], ["s1", "s2"])
        self.assertEqual(documents[0].revision, "1-abc")
        self.assertEqual(documents[1].scrobble_start_datetime, [2013, 5, 2, 10, 0, 0, 0])

    def test_extract_size(self):
        self.assertEqual(results.extract_size(results.load_results(self.body)), 3)

    def test_extract_size_without_rows(self):
        envelope = results.load_results(b'{"total_rows": 42, "offset": 42, "rows": []}')
        self.assertEqual(results.extract_size(envelope), 42)
        self.assertEqual(results.extract_rows(envelope), [])

    def test_extract_size_missing(self):
        with self.assertRaises(DecodeException) as context:
            results.extract_size({"rows": []})
        self.assertEqual(context.exception.property_name, "total_rows")

    def test_empty_rows(self):
        rows = results.extract_rows(results.load_results(b'{"total_rows": 0, "rows": []}'))
        self.assertEqual(results.extract_documents(rows, ScrobbleDocument), [])

    def test_invalid_json(self):
        with self.assertRaises(DecodeException):
            results.load_results(b"<html>not json</html>")

    def test_missing_rows(self):
        with self.assertRaises(DecodeException) as context:
            results.extract_rows({"error": "not_found"})
        self.assertEqual(context.exception.property_name, "rows")

    def test_bad_row_fails_whole_page(self):
        rows = results.extract_rows({"rows": [
            {"id": "a", "key": "a", "value": 1},
            {"id": "b", "key": "b", "value": "not a number"},
            {"id": "c", "key": "c", "value": 3},
        ]})
        with self.assertRaises(DecodeException) as context:
            results.extract_values(rows, int)
        self.assertEqual(context.exception.row_index, 1)
        self.assertEqual(context.exception.property_name, "value")

    def test_documents_without_include_docs(self):
        rows = results.extract_rows({"rows": [
            {"id": "s1", "key": ["u1", [2013, 5, 1, 10, 0, 0, 0]], "value": None},
        ]})
        with self.assertRaises(DecodeException) as context:
            results.extract_documents(rows, ScrobbleDocument)
        self.assertEqual(context.exception.row_index, 0)
        self.assertEqual(context.exception.property_name, "doc")

    def test_unknown_property(self):
        rows = results.extract_rows({"rows": [{"id": "a", "key": "a", "value": 1}]})
        with self.assertRaises(ValueError):
            results.extract_property(rows[0], "offset", int)
