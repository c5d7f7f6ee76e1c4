import unittest
from urllib.parse import parse_qs, urlsplit

import orjson
import requests_mock

from gravifon import config
from gravifon.db import couchdb


def collation_key(value):
    """ Sort key reproducing couchdb's view collation for JSON values.

    null < false < true < numbers < strings < arrays < objects, arrays compare element
    by element and a prefix sorts first. Strings are compared by code point which is
    enough for test data.
    """
    if value is None:
        return (0,)
    if value is False:
        return (1,)
    if value is True:
        return (2,)
    if isinstance(value, (int, float)):
        return (3, value)
    if isinstance(value, str):
        return (4, value)
    if isinstance(value, list):
        return (5, tuple(collation_key(item) for item in value))
    if isinstance(value, dict):
        return (6, tuple((k, collation_key(v)) for k, v in value.items()))
    raise TypeError(f"Not a JSON value: {value!r}")


class FakeView:
    """ An in-memory couchdb view served through requests_mock.

    Supports the arguments sent by ViewQueryArguments and records the query string of
    every request in ``queries``.
    """

    def __init__(self):
        self.rows = []
        self.queries = []

    def add(self, key, value=None, doc=None, doc_id=None):
        if doc is not None:
            doc_id = doc_id or doc.get("_id")
        self.rows.append({"id": doc_id, "key": key, "value": value, "doc": doc})
        return self

    def register(self, mock_requests, url):
        mock_requests.get(url, json=self.respond)
        return self

    def respond(self, request, context):
        params = {name: values[0] for name, values in parse_qs(urlsplit(request.url).query).items()}
        self.queries.append(params)

        descending = params.get("descending") == "true"
        inclusive_end = params.get("inclusive_end", "true") == "true"
        include_docs = params.get("include_docs") == "true"

        rows = sorted(self.rows, key=lambda row: (collation_key(row["key"]), row["id"] or ""), reverse=descending)

        if "key" in params:
            key = collation_key(orjson.loads(params["key"]))
            rows = [row for row in rows if collation_key(row["key"]) == key]

        start = collation_key(orjson.loads(params["startkey"])) if "startkey" in params else None
        end = collation_key(orjson.loads(params["endkey"])) if "endkey" in params else None
        if start is not None and end is not None and ((start > end) if not descending else (start < end)):
            context.status_code = 400
            context.reason = "Bad Request"
            return {
                "error": "query_parse_error",
                "reason": "No rows can match your key range, reverse your start_key and end_key or set descending=true"
            }

        def in_range(row):
            current = collation_key(row["key"])
            if descending:
                after_start = start is None or current <= start
                before_end = end is None or (current >= end if inclusive_end else current > end)
            else:
                after_start = start is None or current >= start
                before_end = end is None or (current <= end if inclusive_end else current < end)
            return after_start and before_end

        rows = [row for row in rows if in_range(row)]
        if "limit" in params:
            rows = rows[:int(params["limit"])]

        result_rows = []
        for row in rows:
            result = {"id": row["id"], "key": row["key"], "value": row["value"]}
            if include_docs:
                result["doc"] = row["doc"]
            result_rows.append(result)

        return {"total_rows": len(self.rows), "offset": 0, "rows": result_rows}


class CouchDBTestCase(unittest.TestCase):
    """ Base class for tests of code talking to couchdb, all HTTP requests are answered by requests_mock. """

    def setUp(self):
        couchdb.init(config.COUCHDB_USER, config.COUCHDB_ADMIN_KEY, config.COUCHDB_HOST, config.COUCHDB_PORT)
        self.mock_requests = requests_mock.Mocker()
        self.mock_requests.start()
        self.addCleanup(self.mock_requests.stop)

    @staticmethod
    def view_results(rows, total_rows=None):
        return {
            "total_rows": len(rows) if total_rows is None else total_rows,
            "offset": 0,
            "rows": rows,
        }

    def last_query(self) -> dict:
        """ Query string arguments of the last request, values decoded. """
        request = self.mock_requests.last_request
        return {name: values[0] for name, values in parse_qs(urlsplit(request.url).query).items()}
