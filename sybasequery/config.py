import collections
import os

from dotenv import load_dotenv

from .errors import UsageError


_ENV_PREFIX = "SYBASE_"


class ConnectionParameters(collections.namedtuple(
        "ConnectionParameters", ["host", "port", "database", "username", "password"])):

    @classmethod
    def from_args(cls, args):
        host, port, database, username, password = args[:5]
        return cls(
            host=host,
            port=port,
            database=database,
            username=username,
            password=password,
        )

    @classmethod
    def from_env(cls, environ=None, dotenv_path=None):
        """
        Read the parameters from ``SYBASE_HOST``, ``SYBASE_PORT``,
        ``SYBASE_DATABASE``, ``SYBASE_USERNAME`` and ``SYBASE_PASSWORD``.

        When ``environ`` is not given, a ``.env`` file is loaded into the
        process environment first (existing variables win).
        """
        if environ is None:
            load_dotenv(dotenv_path=dotenv_path)
            environ = os.environ

        values = {}
        for field in cls._fields:
            name = _ENV_PREFIX + field.upper()
            value = environ.get(name)
            if not value:
                raise UsageError("Environment variable {0} is not defined".format(name))
            values[field] = value
        return cls(**values)

    def __repr__(self):
        return "ConnectionParameters(host={0!r}, port={1!r}, database={2!r}, username={3!r}, password='***')".format(
            self.host, self.port, self.database, self.username)
