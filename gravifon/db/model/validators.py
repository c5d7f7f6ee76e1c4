from datetime import datetime

from pydantic import conlist

from gravifon.utils import DATETIME_ARRAY_LENGTH, DATE_ARRAY_LENGTH

#: [year, month, day, hour, minute, second, millisecond] in UTC
DatetimeArray = conlist(int, min_length=DATETIME_ARRAY_LENGTH, max_length=DATETIME_ARRAY_LENGTH)

#: [year, month, day]
DateArray = conlist(int, min_length=DATE_ARRAY_LENGTH, max_length=DATE_ARRAY_LENGTH)


def check_datetime_has_tzinfo(date_time: datetime):
    """Validates that the provided datetime object contains tzinfo. Otherwise, raises a ValueError.

    Args:
        date_time: the datetime object to validate.

    Returns:
        The provided datetime object containing tzinfo if it was valid.
    """
    if date_time is None:
        return None
    try:  # validate that datetime contains tzinfo
        if date_time.tzinfo is None or date_time.tzinfo.utcoffset(date_time) is None:
            raise ValueError
        return date_time
    except (AttributeError, ValueError):  # timestamp.tzinfo throws AttributeError if invalid datetime
        raise ValueError("Datetime provided must be a valid datetime and contain tzinfo.")
