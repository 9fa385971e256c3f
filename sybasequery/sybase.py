import importlib
import logging

from .errors import DriverError


_log = logging.getLogger(__name__)


class SybaseDialect(object):
    name = "sybase"

    def __init__(self, odbc_driver="FreeTDS", tds_version="5.0", driver_module="pyodbc"):
        self._odbc_driver = odbc_driver
        self._tds_version = tds_version
        self._driver_module = driver_module

    def load_driver(self):
        try:
            return importlib.import_module(self._driver_module)
        except ImportError as error:
            raise DriverError("Could not load database driver {0}: {1}".format(self._driver_module, error))

    def url(self, params):
        return "sybase://{0}:{1}/{2}".format(params.host, params.port, params.database)

    def connection_string(self, params):
        parts = [
            ("DRIVER", "{" + self._odbc_driver + "}"),
            ("SERVER", params.host),
            ("PORT", params.port),
            ("DATABASE", params.database),
            ("UID", params.username),
            ("PWD", _quote_value(params.password)),
        ]
        if self._tds_version is not None:
            parts.append(("TDS_Version", self._tds_version))
        return "".join("{0}={1};".format(key, value) for key, value in parts)

    def connect(self, driver, params):
        _log.debug("Using ODBC driver %s", self._odbc_driver)
        return driver.connect(self.connection_string(params), autocommit=True)

    def next_result_set(self, cursor):
        return bool(cursor.nextset())

    def error_message(self, error):
        # pyodbc errors carry (sqlstate, message)
        if len(error.args) > 1:
            return error.args[1]
        return str(error)


def _quote_value(value):
    if any(character in value for character in ";{}"):
        return "{" + value.replace("}", "}}") + "}"
    return value
