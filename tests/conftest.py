"""Shared fixtures.

Ecofi databases are Access files read through pyodbc, which needs an
ODBC driver. The fixtures here stand in a sqlite3-backed object with the
parts of the pyodbc connection and cursor API the reader uses; SQLite
accepts the same ``[table]`` quoting and ``?`` parameters as Access.
"""

import sqlite3
from datetime import datetime
from types import SimpleNamespace

import pyodbc
import pytest

from ecofi_ace.db import access_reader

sqlite3.register_converter("DATETIME", lambda raw: datetime.fromisoformat(raw.decode()))

WS_SCHEMA = """
CREATE TABLE ws (
    wscode INTEGER,
    wsname TEXT,
    wslat REAL,
    wslong REAL,
    wsalt REAL,
    countrycode TEXT,
    x_wgs84 REAL,
    y_wgs84 REAL,
    wstype TEXT,
    comments TEXT
);
"""

WDATADAY_SCHEMA = """
CREATE TABLE wdataday (
    id INTEGER PRIMARY KEY,
    wscode INTEGER,
    weatherdate DATETIME,
    tmin REAL,
    tmax REAL,
    tmoy REAL,
    rhmin REAL,
    rhmax REAL,
    rainfall REAL,
    windtot REAL,
    radiation REAL,
    sunshine REAL,
    eto REAL,
    rhmoy REAL,
    windmax REAL,
    grad REAL
);
"""

WDATADAY_INDEX = "CREATE INDEX idx_wdataday_wscode ON wdataday (wscode);"


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self._cur = conn.sqlite.cursor()

    @property
    def description(self):
        return self._cur.description

    def tables(self, tableType=None):
        if self._conn.fail_tables:
            raise pyodbc.Error("HY000", "Cannot enumerate tables")
        rows = self._cur.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY rowid"
        ).fetchall()
        return [SimpleNamespace(table_name=name) for (name,) in rows]

    def columns(self, table=None):
        rows = self._cur.execute(f'PRAGMA table_info("{table}")').fetchall()
        return [SimpleNamespace(column_name=row[1], type_name=row[2]) for row in rows]

    def statistics(self, table):
        if not self._conn.statistics_supported:
            raise pyodbc.Error("IM001", "Driver does not support this function")
        stats = []
        for index in self._cur.execute(f'PRAGMA index_list("{table}")').fetchall():
            index_name = index[1]
            for info in self.sqlite_index_info(index_name):
                stats.append(
                    SimpleNamespace(
                        table_name=table,
                        index_name=index_name,
                        ordinal_position=info[0] + 1,
                        column_name=info[2],
                    )
                )
        return stats

    def sqlite_index_info(self, index_name):
        return self._conn.sqlite.execute(f'PRAGMA index_info("{index_name}")').fetchall()

    def execute(self, sql, *params):
        if params and params[0] in self._conn.fail_lookup_codes:
            raise pyodbc.Error("HY000", "Disk I/O error")
        if params and params[0] in self._conn.undecodable_codes:
            raise UnicodeDecodeError("utf-8", b"Mus\xe9e", 3, 4, "invalid continuation byte")
        self._conn.executed.append((sql, params))
        self._cur.execute(sql, params)
        return self

    def fetchall(self):
        return self._cur.fetchall()

    def fetchone(self):
        return self._cur.fetchone()

    def __iter__(self):
        return iter(self._cur)

    def close(self):
        self._conn.closed_cursors += 1
        self._cur.close()


class FakeAccessConnection:
    """The pyodbc.Connection surface used by ``access_reader``."""

    def __init__(self, sqlite):
        self.sqlite = sqlite
        self.closed = False
        self.executed = []
        self.fail_tables = False
        self.fail_close = False
        self.fail_lookup_codes = set()
        self.undecodable_codes = set()
        self.closed_cursors = 0
        self.statistics_supported = True

    def cursor(self):
        return FakeCursor(self)

    def close(self):
        self.closed = True
        self.sqlite.close()
        if self.fail_close:
            raise pyodbc.Error("HY000", "Close failed")


def _insert(sqlite, table, rows):
    for row in rows:
        cols = ", ".join(f"[{c}]" for c in row)
        marks = ", ".join("?" for _ in row)
        sqlite.execute(f"INSERT INTO [{table}] ({cols}) VALUES ({marks})", tuple(row.values()))


@pytest.fixture
def make_fake_db():
    """Build a FakeAccessConnection holding the given Ecofi rows."""

    def build(stations=(), daily=(), ws_schema=WS_SCHEMA, daily_schema=WDATADAY_SCHEMA, index=True):
        sqlite = sqlite3.connect(":memory:", detect_types=sqlite3.PARSE_DECLTYPES)
        for script in (ws_schema, daily_schema):
            if script:
                sqlite.executescript(script)
        if index and daily_schema:
            sqlite.execute(WDATADAY_INDEX)
        if ws_schema:
            _insert(sqlite, "ws", stations)
        if daily_schema:
            _insert(sqlite, "wdataday", daily)
        sqlite.commit()
        return FakeAccessConnection(sqlite)

    return build


@pytest.fixture
def ecofi_db(tmp_path, monkeypatch, make_fake_db):
    """Create an Ecofi database file whose connections go to a fake.

    Returns a builder taking the same arguments as ``make_fake_db`` and
    returning ``(path, connection)``.
    """

    def build(**kwargs):
        conn = make_fake_db(**kwargs)
        path = tmp_path / "ecofi.accdb"
        path.write_bytes(b"")
        monkeypatch.setattr(access_reader, "connect", lambda db_path, driver=None: conn)
        return path, conn

    return build
