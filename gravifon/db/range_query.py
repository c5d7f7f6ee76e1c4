""" Planning and execution of paginated range queries over composite view keys.

Views paged by this module have keys of the form ``[scope_id, sub_key]`` where the
scope is fixed for one request (e.g. a user id) and the sub-key is a calendar array.
The store sorts keys component by component, so one page is a single contiguous
``startkey``..``endkey`` scan; both bounds are inclusive.

Pages are resumed with a cursor: the sub-key and document id of the first item that
did not fit on the previous page, handed to clients as an opaque token. Rows sharing
a key are ordered by document id, so the id tells where to resume among them.
"""
import base64
import binascii
import logging
from datetime import datetime
from typing import Any, Generic, List, Optional, Type, TypeVar

import orjson
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from gravifon import config
from gravifon.db import view_query_executor
from gravifon.db.exceptions import BadCursorException, DecodeException
from gravifon.db.model.validators import DatetimeArray, check_datetime_has_tzinfo
from gravifon.db.view_query_arguments import ViewQueryArguments
from gravifon.db.view_query_results import DOCUMENT_PROPERTY, ID_PROPERTY, KEY_PROPERTY, extract_properties
from gravifon.utils import datetime_to_array, DATETIME_ARRAY_LENGTH

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PageCursor(BaseModel):
    """ Resume point of a page: the key and document id of its first item. """
    model_config = ConfigDict(frozen=True)

    sub_key: DatetimeArray
    doc_id: str


class PageRequest(BaseModel):
    """ One page of items of a scope, optionally restricted to a time range.

    Args:
        scope_id: the fixed first component of every key, e.g. a user id
        cursor: where to resume, as decoded by :func:`parse_cursor`
        range_start: earliest sub-key to include
        range_end: latest sub-key to include
        ascending: traversal direction
        limit: page size, replaced by MAX_PAGE_SIZE if missing or out of bounds
    """
    model_config = ConfigDict(frozen=True)

    scope_id: str
    cursor: Optional[PageCursor] = None
    range_start: Optional[datetime] = None
    range_end: Optional[datetime] = None
    ascending: bool = False
    limit: Optional[int] = None

    @field_validator("range_start", "range_end")
    @classmethod
    def check_range_has_tzinfo(cls, value):
        return check_datetime_has_tzinfo(value)

    @model_validator(mode="after")
    def check_range_start_not_after_range_end(self):
        if self.range_start and self.range_end and self.range_start > self.range_end:
            raise ValueError("range_start should not be after range_end")
        return self

    @property
    def page_size(self) -> int:
        if self.limit is None or self.limit < 1 or self.limit > config.MAX_PAGE_SIZE:
            return config.MAX_PAGE_SIZE
        return self.limit

    @property
    def exhausted(self) -> bool:
        """ Whether the cursor already lies beyond the far end of the range.

        That happens when a ``next`` token is reused with a narrower range, no item
        of the range is left to return.
        """
        if self.cursor is None:
            return False
        # calendar arrays of equal length compare like the store collates them
        if self.ascending:
            return self.range_end is not None and self.cursor.sub_key > datetime_to_array(self.range_end)
        return self.range_start is not None and self.cursor.sub_key < datetime_to_array(self.range_start)


class RangeQueryPlan(BaseModel):
    """ The concrete view query answering a PageRequest. """
    model_config = ConfigDict(frozen=True)

    start_key: list
    end_key: list
    descending: bool
    page_size: int

    @property
    def limit(self) -> int:
        # one extra row tells whether there is a next page and where it starts
        return self.page_size + 1

    def to_arguments(self, include_docs: bool = True, skipped_rows: int = 0) -> ViewQueryArguments:
        args = ViewQueryArguments() \
            .add_start_key(self.start_key) \
            .add_end_key(self.end_key) \
            .add_include_docs(include_docs) \
            .add_limit(self.limit + skipped_rows)
        if self.descending:
            args.add_descending()
        return args


class Page(BaseModel, Generic[T]):
    items: List[T]
    next: Optional[str] = None


def composite_key(scope_id: Any, sub_key: Optional[list] = None) -> list:
    """ Build a view key, a missing sub-key gives the prefix of all keys of the scope. """
    if sub_key is None:
        return [scope_id]
    return [scope_id, sub_key]


def decode_composite_key(key) -> tuple[Any, list[int]]:
    """ Split a ``[scope_id, sub_key]`` view key into its components. """
    if not isinstance(key, list) or len(key) != 2:
        raise DecodeException(f"Expected a [scope, sub-key] view key, got {key!r}", property_name=KEY_PROPERTY)

    scope_id, sub_key = key
    if not _is_calendar_array(sub_key):
        raise DecodeException(f"Expected a calendar array sub-key, got {sub_key!r}", property_name=KEY_PROPERTY)
    return scope_id, sub_key


def _is_calendar_array(value) -> bool:
    return isinstance(value, list) \
        and len(value) == DATETIME_ARRAY_LENGTH \
        and all(isinstance(field, int) and not isinstance(field, bool) for field in value)


def encode_cursor(cursor: PageCursor) -> str:
    """ Turn the resume point of the next page into an opaque token. """
    return base64.urlsafe_b64encode(orjson.dumps([cursor.sub_key, cursor.doc_id])).decode("ascii")


def parse_cursor(token: Optional[str]) -> Optional[PageCursor]:
    """ Parse a cursor token back into a resume point.

    An empty token means no cursor at all.

    Raises:
        BadCursorException: if the token was not produced by :func:`encode_cursor`
    """
    if not token:
        return None

    try:
        decoded = orjson.loads(base64.urlsafe_b64decode(token.encode("ascii")))
    except (binascii.Error, UnicodeEncodeError, ValueError):
        raise BadCursorException(f"Invalid cursor: {token}")

    if not isinstance(decoded, list) or len(decoded) != 2:
        raise BadCursorException(f"Invalid cursor: {token}")
    sub_key, doc_id = decoded
    if not _is_calendar_array(sub_key) or not isinstance(doc_id, str):
        raise BadCursorException(f"Invalid cursor: {token}")
    return PageCursor(sub_key=sub_key, doc_id=doc_id)


def plan(request: PageRequest) -> RangeQueryPlan:
    """ Decide the start key, end key and direction of the view query for a page.

    A cursor replaces the bound on the side the traversal moves away from: the lower
    bound when ascending, the upper bound when descending. The other bound always
    comes from the explicit range. A side with neither is left open at the edge of the
    scope. Descending queries get their keys swapped since the store walks from
    startkey to endkey.

    Raises:
        ValueError: if the request is exhausted, its keys would be reversed
    """
    if request.exhausted:
        raise ValueError("Cannot plan a page request whose cursor lies beyond its range")

    if request.cursor is not None and request.ascending:
        lower = request.cursor.sub_key
    else:
        lower = datetime_to_array(request.range_start)

    if request.cursor is not None and not request.ascending:
        upper = request.cursor.sub_key
    else:
        upper = datetime_to_array(request.range_end)

    low_key = composite_key(request.scope_id, lower)
    # an object sorts after every array in the store's collation, so [scope, {}] is
    # above all keys of the scope while [scope] is below all of them
    high_key = composite_key(request.scope_id, upper if upper is not None else {})

    if request.ascending:
        start_key, end_key = low_key, high_key
    else:
        start_key, end_key = high_key, low_key

    return RangeQueryPlan(
        start_key=start_key,
        end_key=end_key,
        descending=not request.ascending,
        page_size=request.page_size,
    )


def _count_rows_before_cursor(rows: list, request: PageRequest) -> int:
    """ Count the leading rows that share the cursor's key but precede its document. """
    if request.cursor is None:
        return 0

    cursor_key = composite_key(request.scope_id, request.cursor.sub_key)
    count = 0
    for row in rows:
        if row.key != cursor_key or row.id is None:
            break
        if (row.id >= request.cursor.doc_id) if request.ascending else (row.id <= request.cursor.doc_id):
            break
        count += 1
    return count


def retrieve_page(target: str, request: PageRequest, document_type: Type[T]) -> Page[T]:
    """ Retrieve one page of documents from a view with composite keys.

    Args:
        target: url of the design document view
        request: the page to retrieve
        document_type: the type of the documents in the view

    Returns:
        the documents of the page in traversal order and, if more items follow,
        the cursor of the next page
    """
    if request.exhausted:
        logger.debug("Cursor of page request lies beyond its range: %s", request)
        return Page[document_type](items=[], next=None)

    query = plan(request)
    logger.debug("Retrieving page of '%s': %s", target, query)

    # rows already returned by the previous page may share the cursor's key, fetch
    # again with a larger limit until enough rows follow them
    skipped = 0
    while True:
        rows = view_query_executor.query_rows(target, query.to_arguments(include_docs=True, skipped_rows=skipped))
        before_cursor = _count_rows_before_cursor(rows, request)
        if before_cursor <= skipped or len(rows) < query.limit + skipped:
            break
        skipped = before_cursor
    rows = rows[before_cursor:]

    next_cursor = None
    if len(rows) > query.page_size:
        extra = rows[query.page_size]
        _, sub_key = decode_composite_key(extra.key)
        if extra.id is None:
            raise DecodeException(f"Row {query.page_size} has no document id", row_index=query.page_size,
                                  property_name=ID_PROPERTY)
        next_cursor = encode_cursor(PageCursor(sub_key=sub_key, doc_id=extra.id))
        rows = rows[:query.page_size]

    items = extract_properties(rows, DOCUMENT_PROPERTY, document_type)
    return Page[document_type](items=items, next=next_cursor)
