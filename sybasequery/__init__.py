__all__ = ["executor", "subprocess_executor", "get_dialect", "ConnectionParameters"]


import logging
import os
import signal
import sqlite3
import subprocess
import sys
import threading

import msgpack

from .config import ConnectionParameters
from .errors import QueryError, QueryTimeoutError, error_for_kind
from .results import ResultTable, Result
from .runner import QueryRunner
from .sybase import SybaseDialect


_log = logging.getLogger(__name__)


def executor(name, params):
    return QueryExecutor(get_dialect(name), params)


def subprocess_executor(name, params, timeout=None):
    """
    Like :func:`executor`, but each query runs in a child process that is
    killed when it takes longer than ``timeout`` seconds.

    Row values come back as text (see :func:`sybasequery.formatting.to_text`)
    rather than as the driver's native values.
    """
    return RestartingSubprocessQueryExecutor(name, params, timeout=timeout)


def get_dialect(name):
    try:
        dialect_class = _dialects[name]
    except KeyError:
        raise ValueError("Unknown dialect: {0}".format(name))
    return dialect_class()


class QueryExecutor(object):
    def __init__(self, dialect, params):
        self._runner = QueryRunner(dialect)
        self._params = params

    def execute(self, query):
        try:
            return self._runner.execute(self._params, query)
        except QueryError as error:
            return Result(query=query, error=error, table=None)

    def close(self):
        pass


class RestartingSubprocessQueryExecutor(object):
    def __init__(self, dialect_name, params, timeout=None):
        self._dialect_name = dialect_name
        self._params = params
        self._timeout = timeout
        self._executor = None

    def execute(self, query):
        self._start_executor()
        try:
            return self._executor.execute(query)
        except QueryTimeoutError as error:
            _log.warning("Query did not finish within %s seconds, restarting executor", self._timeout)
            self._executor.close()
            self._executor = None
            return Result(query=query, error=error, table=None)

    def close(self):
        if self._executor is not None:
            self._executor.close()
            self._executor = None

    def _start_executor(self):
        if self._executor is not None:
            return

        process = subprocess.Popen(
            [
                sys.executable,
                "-m",
                "sybasequery.process",
                self._dialect_name,
            ],

            stdout=subprocess.PIPE,
            stdin=subprocess.PIPE,

            # Create a new process group
            preexec_fn=os.setpgrp,
        )
        executor = SubprocessQueryExecutor(process, timeout=self._timeout)
        try:
            executor.connect(self._params)
            self._executor = executor
        except Exception:
            executor.close()
            raise


class SubprocessQueryExecutor(object):
    def __init__(self, process, timeout=None):
        self._process = process
        self._timeout = timeout
        self._receiver = None

    def connect(self, params):
        self._send_command("connect", *params)
        line = self._process.stdout.readline()
        if line != b"Ready\n":
            raise Exception("Could not start executor: {0!r}".format(line))
        self._receiver = msgpack.Unpacker(self._process.stdout, read_size=1, raw=False)

    def execute(self, query):
        self._send_command("execute", query)
        reply = self._receive()
        if reply is None:
            raise Exception("Executor exited without replying")
        (error_kind, error_message, column_names, rows, rowcount) = reply

        if error_kind is None:
            error = None
        else:
            error = error_for_kind(error_kind, error_message)

        if column_names is None:
            table = None
        else:
            table = ResultTable(column_names, rows)

        return Result(
            query=query,
            error=error,
            table=table,
            rowcount=rowcount,
        )

    def close(self):
        try:
            os.killpg(self._process.pid, signal.SIGTERM)
        except OSError:
            # Probably already dead
            pass

        try:
            self._process.wait(timeout=10)
        except subprocess.TimeoutExpired:
            os.killpg(self._process.pid, signal.SIGKILL)
            self._process.wait()
        finally:
            self._process.stdin.close()
            self._process.stdout.close()

    def _send_command(self, *args):
        msgpack.pack(args, self._process.stdin)
        self._process.stdin.flush()

    def _receive(self):
        result = [None]

        def run():
            try:
                result[0] = next(self._receiver)
            except StopIteration:
                result[0] = None

        thread = threading.Thread(target=run)
        thread.daemon = True
        thread.start()
        thread.join(self._timeout)
        if thread.is_alive():
            raise QueryTimeoutError("The query took too long to finish")
        else:
            return result[0]


class Sqlite3Dialect(object):
    name = "sqlite3"

    def load_driver(self):
        return sqlite3

    def url(self, params):
        return "sqlite3:///{0}".format(params.database)

    def connect(self, driver, params):
        return driver.connect(params.database, isolation_level=None)

    def next_result_set(self, cursor):
        return False

    def error_message(self, error):
        return str(error)


_dialects = {
    "sybase": SybaseDialect,
    "sqlite3": Sqlite3Dialect,
}
