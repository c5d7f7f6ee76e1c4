from typing import Any, Optional, Type, TypeVar

import orjson
from pydantic import BaseModel, NonNegativeInt, TypeAdapter, ValidationError

from gravifon.db.exceptions import DecodeException

ID_PROPERTY = "id"
KEY_PROPERTY = "key"
VALUE_PROPERTY = "value"
DOCUMENT_PROPERTY = "doc"
ROW_PROPERTIES = (ID_PROPERTY, KEY_PROPERTY, VALUE_PROPERTY, DOCUMENT_PROPERTY)

ROWS_PROPERTY = "rows"
TOTAL_ROWS_PROPERTY = "total_rows"

T = TypeVar("T")


class ViewRow(BaseModel):
    """ One row of a view query result.

    Rows of reduced views carry no id, doc is only present if the query
    asked for include_docs=true.
    """
    id: Optional[str] = None
    key: Any = None
    value: Any = None
    doc: Optional[dict] = None


def load_results(body: bytes) -> dict:
    """ Parse the raw body of a view query response into the result envelope. """
    try:
        results = orjson.loads(body)
    except orjson.JSONDecodeError as e:
        raise DecodeException(f"View query results are not valid JSON: {e}") from e

    if not isinstance(results, dict):
        raise DecodeException("View query results must be a JSON object.")
    return results


def extract_rows(results: dict) -> list[ViewRow]:
    """ Extract all rows from view query results. """
    rows = results.get(ROWS_PROPERTY)
    if not isinstance(rows, list):
        raise DecodeException(f"View query results have no '{ROWS_PROPERTY}' array.", property_name=ROWS_PROPERTY)

    extracted = []
    for index, row in enumerate(rows):
        try:
            extracted.append(ViewRow.model_validate(row))
        except ValidationError as e:
            raise DecodeException(f"Row {index} of view query results is malformed: {e}", row_index=index) from e
    return extracted


def extract_size(results: dict) -> int:
    """ Extract the total number of rows in the view.

    The count is a property of the envelope, it is present even if no rows were requested.
    """
    try:
        return TypeAdapter(NonNegativeInt).validate_python(results.get(TOTAL_ROWS_PROPERTY))
    except ValidationError as e:
        raise DecodeException(f"View query results have no valid '{TOTAL_ROWS_PROPERTY}': {e}",
                              property_name=TOTAL_ROWS_PROPERTY) from e


def extract_property(row: ViewRow, property_name: str, property_type: Type[T], row_index: int = 0,
                     adapter: TypeAdapter = None) -> T:
    """ Extract one property of a row decoded as ``property_type``.

    Args:
        row: the view row
        property_name: one of id, key, value or doc
        property_type: the type to decode the property as, anything pydantic can validate
        row_index: the position of the row in the results, used in error messages
        adapter: a prepared TypeAdapter for ``property_type`` to reuse across rows

    Raises:
        DecodeException: if the property is missing or does not match the type
    """
    if property_name not in ROW_PROPERTIES:
        raise ValueError(f"Unknown view row property: {property_name}")

    value = getattr(row, property_name)
    if value is None and property_name == DOCUMENT_PROPERTY:
        raise DecodeException(f"Row {row_index} has no '{DOCUMENT_PROPERTY}', was include_docs set?",
                              row_index=row_index, property_name=property_name)

    if adapter is None:
        adapter = TypeAdapter(property_type)
    try:
        return adapter.validate_python(value)
    except ValidationError as e:
        raise DecodeException(f"Cannot decode '{property_name}' of row {row_index}: {e}",
                              row_index=row_index, property_name=property_name) from e


def extract_properties(rows: list[ViewRow], property_name: str, property_type: Type[T]) -> list[T]:
    """ Extract one property from every row, in row order.

    A single undecodable row fails the whole list.
    """
    adapter = TypeAdapter(property_type)
    return [
        extract_property(row, property_name, property_type, index, adapter)
        for index, row in enumerate(rows)
    ]


def extract_ids(rows: list[ViewRow]) -> list[str]:
    return extract_properties(rows, ID_PROPERTY, str)


def extract_keys(rows: list[ViewRow], key_type: Type[T]) -> list[T]:
    return extract_properties(rows, KEY_PROPERTY, key_type)


def extract_values(rows: list[ViewRow], value_type: Type[T]) -> list[T]:
    return extract_properties(rows, VALUE_PROPERTY, value_type)


def extract_documents(rows: list[ViewRow], document_type: Type[T]) -> list[T]:
    return extract_properties(rows, DOCUMENT_PROPERTY, document_type)
