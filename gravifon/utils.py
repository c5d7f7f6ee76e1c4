import uuid
from datetime import date, datetime, timezone
from typing import Optional

DATETIME_ARRAY_LENGTH = 7
DATE_ARRAY_LENGTH = 3


def generate_unique_identifier() -> str:
    """ Generate a new random document identifier. """
    return uuid.uuid4().hex


def datetime_to_array(value: Optional[datetime]) -> Optional[list[int]]:
    """ Convert a datetime to the calendar array used in view keys and documents.

    The array is ``[year, month, day, hour, minute, second, millisecond]`` in UTC.
    Arrays compare field by field in the store's collation, which is the same as
    chronological order.

    Args:
        value: a timezone aware datetime

    Returns:
        the calendar array or None if no datetime was given
    """
    if value is None:
        return None
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        raise ValueError("Datetime must contain tzinfo to be converted to a calendar array.")

    value = value.astimezone(timezone.utc)
    return [
        value.year,
        value.month,
        value.day,
        value.hour,
        value.minute,
        value.second,
        value.microsecond // 1000,
    ]


def array_to_datetime(value: Optional[list[int]]) -> Optional[datetime]:
    """ Convert a calendar array back to a UTC datetime.

    Only complete arrays are accepted, a partial array is never interpreted as a range.
    """
    if not value:
        return None
    if len(value) != DATETIME_ARRAY_LENGTH:
        raise ValueError(f"Calendar array must have {DATETIME_ARRAY_LENGTH} fields, got {len(value)}.")

    year, month, day, hour, minute, second, millisecond = value
    return datetime(year, month, day, hour, minute, second, millisecond * 1000, tzinfo=timezone.utc)


def date_to_array(value: Optional[date]) -> Optional[list[int]]:
    if value is None:
        return None
    return [value.year, value.month, value.day]


def array_to_date(value: Optional[list[int]]) -> Optional[date]:
    if not value:
        return None
    if len(value) != DATE_ARRAY_LENGTH:
        raise ValueError(f"Date array must have {DATE_ARRAY_LENGTH} fields, got {len(value)}.")
    return date(*value)


def lower_case(value: Optional[str]) -> Optional[str]:
    """ Normalise a name for lookups in case-insensitive views. """
    if value is None:
        return None
    return value.lower()
