import logging
from contextlib import contextmanager
from typing import Iterator, Type, TypeVar

import requests
from sentry_sdk import start_span

from gravifon.db import couchdb
from gravifon.db.exceptions import StoreQueryException
from gravifon.db.view_query_arguments import ViewQueryArguments
from gravifon.db import view_query_results as results

logger = logging.getLogger(__name__)

T = TypeVar("T")


@contextmanager
def execute(target: str, args: ViewQueryArguments) -> Iterator[requests.Response]:
    """ Execute a view query and yield the successful response.

    The response is streamed and is released when the block exits, whether the body
    was read completely, decoding failed or the status was not 2xx. Failed queries are
    never retried.

    Args:
        target: url of the design document view
        args: view query arguments

    Raises:
        StoreQueryException: if the store did not answer with a 2xx status
    """
    with start_span(op="http", name="execute couchdb view query"):
        response = couchdb.get_session().get(target, params=args.arguments, stream=True)

    with response:
        if not couchdb.is_successful(response):
            logger.error("Failed to execute '%s' view query: [%s] %s", target, response.status_code, response.reason)
            raise StoreQueryException("Failed to execute view query.", target,
                                      status_code=response.status_code, reason=response.reason)
        yield response


def _query_results(target: str, args: ViewQueryArguments) -> dict:
    with execute(target, args) as response:
        with start_span(op="deserializing", name="parse couchdb view query results"):
            return results.load_results(response.content)


def query_rows(target: str, args: ViewQueryArguments) -> list[results.ViewRow]:
    """ Execute a view query and return all rows of the result. """
    return results.extract_rows(_query_results(target, args))


def query_size(target: str) -> int:
    """ Retrieve the total number of rows in a view without fetching any of them. """
    args = ViewQueryArguments().add_limit(0)
    return results.extract_size(_query_results(target, args))


def query_ids(target: str, args: ViewQueryArguments) -> list[str]:
    return results.extract_ids(query_rows(target, args))


def query_keys(target: str, args: ViewQueryArguments, key_type: Type[T]) -> list[T]:
    return results.extract_keys(query_rows(target, args), key_type)


def query_values(target: str, args: ViewQueryArguments, value_type: Type[T]) -> list[T]:
    """ Execute a view query and decode the value of every row.

    Returns:
        the values in view order, an empty list if no rows matched
    """
    return results.extract_values(query_rows(target, args), value_type)


def query_documents(target: str, args: ViewQueryArguments, document_type: Type[T]) -> list[T]:
    """ Execute a view query and decode the document of every row.

    The arguments must have include_docs set, otherwise rows carry no documents
    and decoding fails.

    Returns:
        the documents in view order, an empty list if no rows matched
    """
    return results.extract_documents(query_rows(target, args), document_type)
