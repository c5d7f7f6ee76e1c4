import orjson

KEY = "key"
START_KEY = "startkey"
END_KEY = "endkey"
INCLUDE_DOCS = "include_docs"
LIMIT = "limit"
DESCENDING = "descending"
INCLUSIVE_END = "inclusive_end"


def _encode_json(value) -> str:
    return orjson.dumps(value).decode("utf-8")


def _encode_bool(value: bool) -> str:
    return "true" if value else "false"


class ViewQueryArguments:
    """ Query string arguments of a couchdb view query.

    Keys are sent JSON encoded so that the store parses them as structured keys. An
    argument that was never added is not sent at all. Every add method returns the
    instance so that calls can be chained:

        args = ViewQueryArguments().add_key(["u1", [2013, 5, 1, 10, 0, 0, 0]]).add_include_docs(True)
    """

    def __init__(self):
        self.arguments: dict[str, str] = {}

    def add_key(self, value):
        self.arguments[KEY] = _encode_json(value)
        return self

    def add_start_key(self, value):
        self.arguments[START_KEY] = _encode_json(value)
        return self

    def add_end_key(self, value):
        self.arguments[END_KEY] = _encode_json(value)
        return self

    def add_include_docs(self, value: bool):
        self.arguments[INCLUDE_DOCS] = _encode_bool(value)
        return self

    def add_limit(self, value: int):
        if value < 0:
            raise ValueError("limit must not be negative")
        self.arguments[LIMIT] = str(int(value))
        return self

    def add_descending(self, value: bool = True):
        self.arguments[DESCENDING] = _encode_bool(value)
        return self

    def add_inclusive_end(self, value: bool):
        self.arguments[INCLUSIVE_END] = _encode_bool(value)
        return self

    def __repr__(self):
        return f"ViewQueryArguments({self.arguments!r})"
