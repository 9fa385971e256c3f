"""
Canned queries against the Sybase system tables, plus the guards that keep
caller-supplied names and statements from turning into arbitrary SQL.

Every function takes an executor (anything with ``execute(query)``
returning a :class:`~sybasequery.results.Result`) and returns a list of
records, one dict per row.
"""

import re

from .errors import UsageError


_TABLE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
_PROCEDURE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+(\.[A-Za-z0-9_]*)*$")
_NUMBER_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

_FORBIDDEN_KEYWORDS = ["insert", "update", "delete", "drop", "alter"]


_LIST_TABLES_SQL = """
    SELECT
        u.name AS owner,
        o.name AS table_name
    FROM sysobjects o
    JOIN sysusers u ON o.uid = u.uid
    WHERE o.type = 'U'
    ORDER BY owner, table_name"""

_TABLE_DEFINITION_SQL = """
    SELECT
        c.name AS column_name,
        t.name AS data_type,
        c.length
    FROM syscolumns c
    JOIN systypes t ON c.usertype = t.usertype
    JOIN sysobjects o ON c.id = o.id
    WHERE o.name = '{0}' AND o.type = 'U'"""

# U: user tables, V: views, P: stored procedures
_DATABASE_SCHEMA_SQL = """
    SELECT
        o.name AS object_name,
        o.type AS object_type,
        u.name AS owner_name,
        c.name AS column_name,
        t.name AS data_type,
        c.length AS column_length,
        c.prec AS precision,
        c.scale AS scale,
        c.status AS column_status
    FROM sysobjects o
    JOIN sysusers u ON o.uid = u.uid
    LEFT JOIN syscolumns c ON o.id = c.id
    LEFT JOIN systypes t ON c.usertype = t.usertype
    WHERE o.type IN ('U', 'V', 'P')
    ORDER BY object_type, object_name, column_name"""


def list_tables(executor):
    return _records(executor.execute(_LIST_TABLES_SQL))


def table_definition(executor, table_name):
    if not _TABLE_NAME_PATTERN.match(table_name):
        raise UsageError("Table name contains invalid characters: {0!r}".format(table_name))
    return _records(executor.execute(_TABLE_DEFINITION_SQL.format(table_name)))


def database_schema(executor):
    return _records(executor.execute(_DATABASE_SCHEMA_SQL))


def execute_select(executor, sql):
    check_select(sql)
    return _records(executor.execute(sql))


def check_select(sql):
    """
    Reject anything but a single SELECT. Forbidden keywords only match as
    whole words, so a column such as ``updated_at`` is allowed.
    """
    normalised = sql.strip().lower()
    if not normalised.startswith("select"):
        raise UsageError("Only SELECT queries are allowed")
    for keyword in _FORBIDDEN_KEYWORDS:
        if re.search(r"\b{0}\b".format(keyword), normalised):
            raise UsageError("Query contains a forbidden keyword: {0}".format(keyword))
    if ";" in normalised:
        raise UsageError("Query contains a forbidden keyword: ;")


def execute_stored_procedure(executor, procedure_name, params=()):
    return _records(executor.execute(stored_procedure_call(procedure_name, params)))


def stored_procedure_call(procedure_name, params=()):
    if not _PROCEDURE_NAME_PATTERN.match(procedure_name):
        raise UsageError("Procedure name contains invalid characters: {0!r}".format(procedure_name))

    statement = "EXEC {0}".format(procedure_name)
    if params:
        statement += " " + ", ".join(_sql_literal(param) for param in params)
    return statement


def _sql_literal(value):
    text = str(value).strip()
    if _NUMBER_PATTERN.match(text):
        return text
    return "'{0}'".format(str(value).replace("'", "''"))


def _records(result):
    if result.error is not None:
        raise result.error
    if result.table is None:
        return []
    return result.table.records()
