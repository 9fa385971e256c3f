import base64
import binascii
import contextlib
import logging
import sys

from .config import ConnectionParameters
from .errors import DecodeError
from .formatting import tab_separated, comma_separated
from .runner import QueryRunner
from .sybase import SybaseDialect


_BASE64_USAGE = "Usage: sybase-query <host> <port> <database> <username> <password> <query>"
_STDIN_USAGE = "Usage: sybase-query-stdin <host> <port> <database> <username> <password> < query.sql"


def main_base64(argv=None, dialect=None, stdin=None, stdout=None, stderr=None):
    return _main(
        argv,
        arg_count=6,
        usage=_BASE64_USAGE,
        read_query=lambda args, stdin: decode_query(args[5]),
        create_writer=tab_separated,
        log_level=logging.DEBUG,
        dialect=dialect,
        stdin=stdin,
        stdout=stdout,
        stderr=stderr,
    )


def main_stdin(argv=None, dialect=None, stdin=None, stdout=None, stderr=None):
    return _main(
        argv,
        arg_count=5,
        usage=_STDIN_USAGE,
        read_query=lambda args, stdin: read_query_lines(stdin),
        create_writer=comma_separated,
        log_level=logging.WARNING,
        dialect=dialect,
        stdin=stdin,
        stdout=stdout,
        stderr=stderr,
    )


def decode_query(encoded_query):
    try:
        query_bytes = base64.b64decode(encoded_query, validate=True)
    except (binascii.Error, ValueError) as error:
        raise DecodeError("Query is not valid base64: {0}".format(error))

    try:
        return query_bytes.decode("utf-8")
    except UnicodeDecodeError as error:
        raise DecodeError("Query is not valid UTF-8: {0}".format(error))


def read_query_lines(stdin):
    # Lines are joined as-is, without a separator.
    return "".join(_strip_line_terminator(line) for line in stdin)


def _strip_line_terminator(line):
    if line.endswith("\r\n"):
        return line[:-2]
    elif line.endswith("\n") or line.endswith("\r"):
        return line[:-1]
    else:
        return line


def _main(argv, arg_count, usage, read_query, create_writer, log_level, dialect, stdin, stdout, stderr):
    if argv is None:
        argv = sys.argv[1:]
    if stdin is None:
        stdin = sys.stdin
    if stdout is None:
        stdout = sys.stdout
    if stderr is None:
        stderr = sys.stderr
    if dialect is None:
        dialect = SybaseDialect()

    if len(argv) < arg_count:
        print(usage, file=stderr)
        return 1

    with _stderr_logging(stderr, log_level):
        try:
            params = ConnectionParameters.from_args(argv)
            query = read_query(argv, stdin)
            QueryRunner(dialect).run(params, query, create_writer(stdout))
        except Exception as error:
            print("Error: {0}".format(error), file=stderr)
            return 1

    return 0


@contextlib.contextmanager
def _stderr_logging(stderr, level):
    logger = logging.getLogger("sybasequery")
    handler = logging.StreamHandler(stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    original_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(level)
    try:
        yield
    finally:
        logger.removeHandler(handler)
        logger.setLevel(original_level)
