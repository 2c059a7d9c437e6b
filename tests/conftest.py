from __future__ import annotations

import pytest


class ScriptedCursor:
    def __init__(self, conn):
        self._conn = conn
        self._rows = []
        self.rowcount = 0
        self.lastrowid = None

    def execute(self, sql, params=()):
        statement = " ".join(sql.split())
        self._conn.executed.append((statement, tuple(params)))
        rows = []
        for prefix, result in self._conn.script:
            if statement.startswith(prefix):
                if isinstance(result, Exception):
                    raise result
                rows = result(params) if callable(result) else result
                break
        self._rows = list(rows)
        self.rowcount = 1
        self.lastrowid = 99

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return list(self._rows)

    def close(self):
        pass


class ScriptedConnection:
    """Stands in for both the pool and a pooled connection.

    ``script`` is a list of (sql prefix, rows | callable(params) | exception);
    the first prefix matching the whitespace-normalized statement answers it.
    """

    def __init__(self, script=()):
        self.script = list(script)
        self.executed = []
        self.committed = False
        self.rolled_back = False

    def connect(self):
        return self

    def start_transaction(self):
        pass

    def cursor(self, dictionary=True):
        return ScriptedCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass

    def statements(self, prefix):
        return [(sql, params) for sql, params in self.executed if sql.startswith(prefix)]


@pytest.fixture
def scripted_db():
    return ScriptedConnection
