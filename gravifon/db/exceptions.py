from enum import Enum


class GravifonError(Enum):
    """ Error kinds understood by the resource layer, as (error code, http status code). """
    UNEXPECTED = (999, 500)
    INTERNAL = (1000, 500)
    DATABASE_OPERATION = (1001, 500)
    JSON_PROCESSING_OPERATION = (1002, 500)
    CONFLICT = (1003, 409)
    NOT_AUTHORIZED = (2000, 401)
    NOT_ALLOWED = (2001, 403)
    USER_NOT_FOUND = (3000, 404)
    USER_EXISTS = (3001, 409)
    REQUIRED = (10000, 400)
    INVALID = (10001, 400)
    UNKNOWN = (10002, 400)

    def __init__(self, error_code, http_status_code):
        self.error_code = error_code
        self.http_status_code = http_status_code


class GravifonException(Exception):
    """Base exception for this package."""
    error = GravifonError.INTERNAL

    def __init__(self, message, error=None):
        super(GravifonException, self).__init__(message)
        self.message = message
        if error is not None:
            self.error = error

    @property
    def http_status_code(self):
        return self.error.http_status_code

    def to_dict(self):
        return {"code": self.error.error_code, "error": self.message}

    def __str__(self):
        return self.message


class DatabaseException(GravifonException):
    """Should be used when the document store answers a request with a non-2xx status."""
    error = GravifonError.DATABASE_OPERATION

    def __init__(self, message, operation=None, entity=None, status_code=None, reason=None):
        super(DatabaseException, self).__init__(message)
        self.operation = operation
        self.entity = entity
        self.status_code = status_code
        self.reason = reason

    def __str__(self):
        if self.status_code is None:
            return self.message
        return f"{self.message} [{self.status_code}] {self.reason}"


class StoreQueryException(DatabaseException):
    """Should be used when a view query fails."""

    def __init__(self, message, target, status_code=None, reason=None):
        super(StoreQueryException, self).__init__(message, operation="query", status_code=status_code, reason=reason)
        self.target = target


class ConflictException(DatabaseException):
    """Should be used when a write is rejected because the given revision is stale."""
    error = GravifonError.CONFLICT


class DecodeException(GravifonException):
    """Should be used when a store response does not have the expected shape."""
    error = GravifonError.JSON_PROCESSING_OPERATION

    def __init__(self, message, row_index=None, property_name=None):
        super(DecodeException, self).__init__(message)
        self.row_index = row_index
        self.property_name = property_name


class BadCursorException(GravifonException):
    """Should be used when a client supplied page cursor cannot be parsed."""
    error = GravifonError.INVALID
