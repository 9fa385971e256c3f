class ResultTable(object):
    def __init__(self, column_names, rows):
        self.column_names = column_names
        self.rows = rows

    def records(self):
        return [
            dict(zip(self.column_names, row))
            for row in self.rows
        ]


class Result(object):
    def __init__(self, query, error, table, rowcount=None):
        self.query = query
        self.error = error
        self.table = table
        self.rowcount = rowcount

    def __repr__(self):
        return "Result(query={0!r}, error={1!r}, table={2!r}, rowcount={3!r})".format(
            self.query, self.error, self.table, self.rowcount)
