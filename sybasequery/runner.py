import contextlib
import logging

from .errors import ConnectError, ExecutionError
from .results import ResultTable, Result


_log = logging.getLogger(__name__)


class QueryRunner(object):
    """
    Runs a single query through a dialect: load the driver, connect,
    execute, then hand the rows over one at a time.

    The cursor and the connection are closed in that order when the rows
    have been consumed, or as soon as anything fails.
    """

    def __init__(self, dialect):
        self._dialect = dialect

    def run(self, params, query, writer):
        with self._open_cursor(params, query) as (driver, cursor):
            if not self._skip_to_result_set(driver, cursor):
                _log_no_result_set(cursor)
                return

            writer.write_header(_column_names(cursor))
            row_count = 0
            for row in self._fetch(driver, cursor):
                writer.write_row(row)
                row_count += 1
            writer.flush()

        _log.debug("Printed %s row(s)", row_count)

    def execute(self, params, query):
        with self._open_cursor(params, query) as (driver, cursor):
            if not self._skip_to_result_set(driver, cursor):
                _log_no_result_set(cursor)
                return Result(query=query, error=None, table=None, rowcount=cursor.rowcount)

            column_names = _column_names(cursor)
            rows = [list(row) for row in self._fetch(driver, cursor)]

        return Result(
            query=query,
            error=None,
            table=ResultTable(column_names, rows),
            rowcount=len(rows),
        )

    @contextlib.contextmanager
    def _open_cursor(self, params, query):
        if not query:
            raise ExecutionError("Query is empty")

        _log.debug("Loading database driver...")
        driver = self._dialect.load_driver()

        _log.debug("Driver loaded. Connecting to %s...", self._dialect.url(params))
        try:
            connection = self._dialect.connect(driver, params)
        except driver.Error as error:
            raise ConnectError(self._dialect.error_message(error))

        with contextlib.closing(connection):
            _log.debug("Connected. Executing query...")
            with contextlib.closing(connection.cursor()) as cursor:
                try:
                    cursor.execute(query)
                except driver.Error as error:
                    raise ExecutionError(self._dialect.error_message(error))

                _log.debug("Query executed. Processing results...")
                yield driver, cursor

    def _skip_to_result_set(self, driver, cursor):
        # Batches and procedures can report row counts before the rows.
        while cursor.description is None:
            try:
                has_next = self._dialect.next_result_set(cursor)
            except driver.Error as error:
                raise ExecutionError(self._dialect.error_message(error))
            if not has_next:
                return False
        return True

    def _fetch(self, driver, cursor):
        while True:
            try:
                row = cursor.fetchone()
            except driver.Error as error:
                raise ExecutionError(self._dialect.error_message(error))
            if row is None:
                return
            yield row


def _column_names(cursor):
    return [
        column[0]
        for column in cursor.description
    ]


def _log_no_result_set(cursor):
    _log.info("Statement returned no result set (%s row(s) affected)", cursor.rowcount)
