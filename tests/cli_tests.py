import base64
import io

import sybasequery
from sybasequery import cli


def _encode(query):
    return base64.b64encode(query.encode("utf-8")).decode("ascii")


def _args(database, *extra):
    return ["localhost", "5000", database, "reader", "secret"] + list(extra)


class Run(object):
    def __init__(self, exit_code, stdout, stderr):
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr


def _run_base64(argv):
    stdout = io.StringIO()
    stderr = io.StringIO()
    exit_code = cli.main_base64(
        argv,
        dialect=sybasequery.Sqlite3Dialect(),
        stdout=stdout,
        stderr=stderr,
    )
    return Run(exit_code, stdout.getvalue(), stderr.getvalue())


def _run_stdin(argv, query):
    stdout = io.StringIO()
    stderr = io.StringIO()
    exit_code = cli.main_stdin(
        argv,
        dialect=sybasequery.Sqlite3Dialect(),
        stdin=io.StringIO(query),
        stdout=stdout,
        stderr=stderr,
    )
    return Run(exit_code, stdout.getvalue(), stderr.getvalue())


def test_base64_query_prints_tab_separated_header_and_rows():
    run = _run_base64(_args(":memory:", _encode("SELECT 1 AS a, 2 AS b")))
    assert run.exit_code == 0
    assert run.stdout == "a\tb\n1\t2\n"


def test_base64_query_logs_each_stage_to_stderr():
    run = _run_base64(_args(":memory:", _encode("SELECT 1 AS a")))
    assert "DEBUG: Loading database driver..." in run.stderr
    assert "DEBUG: Driver loaded. Connecting to sqlite3:///:memory:..." in run.stderr
    assert "DEBUG: Connected. Executing query..." in run.stderr
    assert "DEBUG: Query executed. Processing results..." in run.stderr


def test_null_values_are_printed_as_empty_fields():
    run = _run_base64(_args(":memory:", _encode("SELECT NULL AS a, 'x' AS b")))
    assert run.stdout == "a\tb\n\tx\n"


def test_empty_result_set_prints_only_header():
    run = _run_base64(_args(":memory:", _encode("SELECT 1 AS a, 2 AS b WHERE 1 = 0")))
    assert run.exit_code == 0
    assert run.stdout == "a\tb\n"


def test_too_few_arguments_prints_usage_and_exits_with_1():
    run = _run_base64(["localhost", "5000", "sales", "reader", "secret"])
    assert run.exit_code == 1
    assert run.stdout == ""
    assert run.stderr.startswith("Usage: sybase-query ")


def test_malformed_base64_query_is_an_error():
    run = _run_base64(_args(":memory:", "not base64!"))
    assert run.exit_code == 1
    assert run.stdout == ""
    assert run.stderr.startswith("Error: Query is not valid base64")


def test_connection_failure_is_an_error_with_no_output(tmp_path):
    database = str(tmp_path / "missing" / "sales.sqlite3")
    run = _run_base64(_args(database, _encode("SELECT 1 AS a")))
    assert run.exit_code == 1
    assert run.stdout == ""
    assert "Error: unable to open database file\n" in run.stderr


def test_query_failure_is_an_error():
    run = _run_base64(_args(":memory:", _encode("SELECT * FROM books")))
    assert run.exit_code == 1
    assert run.stdout == ""
    assert run.stderr.endswith("Error: no such table: books\n")


def test_fields_containing_the_delimiter_are_quoted():
    run = _run_base64(_args(":memory:", _encode("SELECT 'a' || char(9) || 'b' AS x, 2 AS y")))
    assert run.stdout == 'x\ty\n"a\tb"\t2\n'


def test_stdin_query_prints_comma_separated_rows_without_header():
    run = _run_stdin(_args(":memory:"), "SELECT 1 AS a, 2 AS b\n")
    assert run.exit_code == 0
    assert run.stdout == "1,2\n"
    assert run.stderr == ""


def test_stdin_lines_are_joined_without_separator():
    run = _run_stdin(_args(":memory:"), "SELECT 'ab\r\n' || 'cd' AS x\n")
    assert run.stdout == "abcd\n"


def test_stdin_empty_result_set_prints_nothing():
    run = _run_stdin(_args(":memory:"), "SELECT 1 AS a WHERE 1 = 0")
    assert run.exit_code == 0
    assert run.stdout == ""


def test_stdin_variant_requires_five_arguments():
    run = _run_stdin(["localhost", "5000", "sales", "reader"], "SELECT 1")
    assert run.exit_code == 1
    assert run.stderr.startswith("Usage: sybase-query-stdin ")


def test_stdin_variant_prints_errors_without_debug_lines():
    run = _run_stdin(_args(":memory:"), "SELECTEROO")
    assert run.exit_code == 1
    assert run.stderr == 'Error: near "SELECTEROO": syntax error\n'


def test_statement_without_result_set_succeeds_with_no_output():
    run = _run_stdin(_args(":memory:"), "CREATE TABLE books (title)")
    assert run.exit_code == 0
    assert run.stdout == ""


def test_read_query_lines_strips_each_kind_of_line_terminator():
    assert cli.read_query_lines(["SELECT a\n", "FROM t\r\n", "WHERE\r", "x"]) == "SELECT aFROM tWHEREx"


def test_base64_query_that_is_not_utf8_is_an_error():
    run = _run_base64(_args(":memory:", base64.b64encode(b"\xff\xfe").decode("ascii")))
    assert run.exit_code == 1
    assert run.stdout == ""
    assert run.stderr.startswith("Error: Query is not valid UTF-8")


def test_single_null_column_prints_empty_line():
    run = _run_base64(_args(":memory:", _encode("SELECT NULL AS a")))
    assert run.stdout == "a\n\n"


def test_unnamed_column_prints_empty_header():
    run = _run_base64(_args(":memory:", _encode('SELECT 1 AS ""')))
    assert run.stdout == "\n1\n"


def test_values_containing_quotes_are_printed_as_is():
    run = _run_base64(_args(":memory:", _encode("SELECT '5\" pipe' AS a, 2 AS b")))
    assert run.stdout == 'a\tb\n5" pipe\t2\n'
