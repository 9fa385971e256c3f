import enum


class ErrorKind(enum.Enum):
    USAGE = "usage"
    DECODE = "decode"
    DRIVER = "driver"
    CONNECTION = "connection"
    EXECUTION = "execution"
    SERIALIZATION = "serialization"
    TIMEOUT = "timeout"


class QueryError(Exception):
    kind = None

    def __init__(self, message):
        super(QueryError, self).__init__(message)
        self.message = message


class UsageError(QueryError):
    kind = ErrorKind.USAGE


class DecodeError(QueryError):
    kind = ErrorKind.DECODE


class DriverError(QueryError):
    kind = ErrorKind.DRIVER


class ConnectError(QueryError):
    kind = ErrorKind.CONNECTION


class ExecutionError(QueryError):
    kind = ErrorKind.EXECUTION


class SerializationError(QueryError):
    kind = ErrorKind.SERIALIZATION


class QueryTimeoutError(QueryError):
    kind = ErrorKind.TIMEOUT


_errors_by_kind = dict(
    (error_class.kind, error_class)
    for error_class in [
        UsageError,
        DecodeError,
        DriverError,
        ConnectError,
        ExecutionError,
        SerializationError,
        QueryTimeoutError,
    ]
)


def error_for_kind(kind, message):
    return _errors_by_kind[ErrorKind(kind)](message)
