import sys

import msgpack

import sybasequery
from sybasequery.errors import SerializationError
from sybasequery.formatting import to_text


def main():
    dialect_name, = sys.argv[1:]

    stdin = sys.stdin.buffer
    stdout = sys.stdout.buffer
    receiver = msgpack.Unpacker(stdin, read_size=1, raw=False)

    message = next(receiver)
    if message[0] != "connect":
        return
    params = sybasequery.ConnectionParameters.from_args(message[1:])

    executor = sybasequery.executor(dialect_name, params)
    try:
        stdout.write(b"Ready\n")
        stdout.flush()

        for message in receiver:
            command = message[0]
            args = message[1:]

            if command == "execute":
                (query, ) = args
                result = executor.execute(query)
                msgpack.pack(_encode_result(result), stdout)
                stdout.flush()
            else:
                return

    finally:
        executor.close()


def _encode_result(result):
    if result.error is None:
        error_kind = None
        error_message = None
    else:
        error_kind = result.error.kind.value
        error_message = result.error.message

    if result.table is None:
        column_names = None
        rows = None
    else:
        column_names = result.table.column_names
        try:
            rows = [
                [to_text(value) for value in row]
                for row in result.table.rows
            ]
        except SerializationError as error:
            return (error.kind.value, error.message, None, None, None)

    return (error_kind, error_message, column_names, rows, result.rowcount)


if __name__ == "__main__":
    main()
