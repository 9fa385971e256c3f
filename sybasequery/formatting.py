import binascii
import datetime

from .errors import SerializationError


def to_text(value):
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return binascii.hexlify(bytes(value)).decode("ascii").upper()
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, datetime.datetime):
        return value.isoformat(" ")
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    try:
        return str(value)
    except Exception as error:
        raise SerializationError(
            "Could not convert value of type {0} to text: {1}".format(type(value).__name__, error))


class DelimitedWriter(object):
    def __init__(self, output, delimiter, include_header):
        self._output = output
        self._delimiter = delimiter
        self._include_header = include_header

    def write_header(self, column_names):
        if self._include_header:
            self._write(column_names)

    def write_row(self, row):
        self._write([to_text(value) for value in row])

    def flush(self):
        self._output.flush()

    def _write(self, fields):
        line = self._delimiter.join(self._quote(field) for field in fields)
        try:
            self._output.write(line + "\n")
        except IOError as error:
            raise SerializationError(str(error))

    def _quote(self, field):
        # Quote only fields that would split the line
        if self._delimiter in field or "\r" in field or "\n" in field:
            return '"' + field.replace('"', '""') + '"'
        return field


def tab_separated(output):
    return DelimitedWriter(output, delimiter="\t", include_header=True)


def comma_separated(output):
    return DelimitedWriter(output, delimiter=",", include_header=False)
