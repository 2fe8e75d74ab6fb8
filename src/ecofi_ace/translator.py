"""Translate Ecofi weather databases into ACE datasets.

Ecofi stores stations in ``ws`` and daily observations in ``wdataday``.
There is no declared relationship between the two, so daily rows are
fetched per station with an equality lookup on ``wscode``. Column names
are renamed to ACE variables, dates are written as ``YYYYMMDD`` and wind
run is converted from m/s to km/day.

:func:`read` never raises for bad input: unreadable files, missing
tables and read errors are logged and whatever was translated up to
that point is returned.
"""

from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pyodbc

from ecofi_ace.ace.models import AceDataset, AceRecord, AceRecordCollection, AceWeather
from ecofi_ace.db import access_reader
from ecofi_ace.db.schemas import (
    DAILY_COLUMNS,
    DAILY_TABLE,
    DATE_COLUMN,
    JOIN_COLUMN,
    REQUIRED_TABLES,
    STATION_COLUMNS,
    STATION_TABLE,
    WIND_COLUMN,
    WIND_FACTOR,
)
from ecofi_ace.errors import CellTypeError, RelationshipError
from ecofi_ace.logging_config import get_logger

logger = get_logger(__name__)

STATION_ID_FIELD = "wst_id"

# Flags for every AceComponent.update call made here
UPDATE_FLAGS = {"overwrite": True, "trim": True, "coerce_numeric": False}


# ---------------------------------------------------------------------------
# Typed cell reads
# ---------------------------------------------------------------------------

def station_code(value: object) -> int | None:
    """Read ``wscode`` as a nullable integer."""
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, (float, Decimal)):
        try:
            if value == int(value):
                return int(value)
        except (ValueError, OverflowError):
            pass
    elif isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
    raise CellTypeError(JOIN_COLUMN, value, "an integer")


def as_date(column: str, value: object) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            pass
    raise CellTypeError(column, value, "a date")


def as_double(column: str, value: object) -> float:
    if isinstance(value, bool):
        raise CellTypeError(column, value, "a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise CellTypeError(column, value, "a number") from None


def iso_basic_date(value: date) -> str:
    """Format a date as ``YYYYMMDD``."""
    return f"{value.year:04d}{value.month:02d}{value.day:02d}"


def cell_text(value: object) -> str:
    """Text of a pass-through cell; Yes/No cells become ``true``/``false``."""
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def daily_value(column: str, value: object) -> str:
    """Convert one ``wdataday`` cell to its ACE string."""
    if column == DATE_COLUMN:
        return iso_basic_date(as_date(column, value))
    if column == WIND_COLUMN:
        return str(as_double(column, value) * WIND_FACTOR)
    return cell_text(value)


# ---------------------------------------------------------------------------
# Opening and probing
# ---------------------------------------------------------------------------

def open_database(db_path: str | Path, driver: str | None = None) -> pyodbc.Connection | None:
    """Open ``db_path`` read-only, or log the failure and return None."""
    try:
        conn = access_reader.connect(db_path, driver)
    except (OSError, ValueError, pyodbc.Error) as ex:
        logger.error("Unable to open file: %s, Reason: %s", db_path, ex)
        return None
    logger.info("Translating ecofi file: %s", db_path)
    return conn


def has_weather_tables(conn: pyodbc.Connection | None) -> bool:
    """Check that both ``ws`` and ``wdataday`` exist (exact, case-sensitive)."""
    if conn is None:
        return False
    try:
        tables = set(access_reader.list_tables(conn))
    except pyodbc.Error as ex:
        logger.error("IO Error listing tables: %s", ex)
        return False
    return all(name in tables for name in REQUIRED_TABLES)


def _close(conn: pyodbc.Connection) -> None:
    try:
        conn.close()
    except pyodbc.Error as ex:
        logger.error("IO Error closing database: %s", ex)


# ---------------------------------------------------------------------------
# Translation
# ---------------------------------------------------------------------------

def translate_daily(row: dict) -> AceRecord:
    """Build one daily record from a ``wdataday`` row.

    Null cells are left out. A cell that cannot be read as the type its
    transform needs is skipped with a warning; the record is kept.
    """
    record = AceRecord()
    for column, ace_field in DAILY_COLUMNS.items():
        value = row.get(column)
        if value is None:
            continue
        try:
            text = daily_value(column, value)
        except CellTypeError as ex:
            logger.warning("Skipping %s: %s", ace_field, ex)
            continue
        record.update(ace_field, text, **UPDATE_FLAGS)
    return record


class DailyJoiner:
    """Fetch the daily records of a station by its ``wscode``.

    The lookup is an equality query per station. Without an index on
    ``wdataday.wscode`` each lookup scans the whole table. The join
    column is checked on the first lookup, so a database without
    stations never touches ``wdataday``.
    """

    def __init__(self, conn: pyodbc.Connection, table: str = DAILY_TABLE, column: str = JOIN_COLUMN):
        self._conn = conn
        self.table = table
        self.column = column
        self.indexed: bool | None = None

    def _check_relationship(self) -> None:
        columns = {col["name"] for col in access_reader.list_columns(self._conn, self.table)}
        if self.column not in columns:
            raise RelationshipError(f"Table {self.table!r} has no {self.column!r} column")
        self.indexed = access_reader.has_index(self._conn, self.table, self.column)
        if not self.indexed:
            logger.info("No index on %s.%s, each station lookup scans the table", self.table, self.column)

    def records(self, code: int) -> AceRecordCollection:
        if self.indexed is None:
            self._check_relationship()
        daily = AceRecordCollection()
        for row in access_reader.lookup_rows(self._conn, self.table, self.column, code):
            logger.debug("Daily row: %s", row)
            daily.add(translate_daily(row))
        return daily


def translate_station(row: dict, joiner: DailyJoiner) -> AceWeather | None:
    """Build a station and its daily weather from a ``ws`` row.

    Returns None when the row has no ``wscode``.
    """
    code = station_code(row.get(JOIN_COLUMN))
    if code is None:
        return None
    station = AceWeather()
    station.update(STATION_ID_FIELD, str(code), **UPDATE_FLAGS)
    for column, ace_field in STATION_COLUMNS.items():
        value = row.get(column)
        if value is not None:
            station.update(ace_field, cell_text(value), **UPDATE_FLAGS)
    station.daily_weather = joiner.records(code)
    return station


def translate_weather_tables(conn: pyodbc.Connection, dataset: AceDataset) -> AceDataset:
    """Append every station of ``ws`` with its daily weather to ``dataset``.

    A read error or a broken join stops the translation; stations added
    before that stay in the dataset, the one in progress is dropped.
    """
    try:
        joiner = DailyJoiner(conn)
        for row in access_reader.read_table(conn, STATION_TABLE):
            logger.debug("Row data: %s", row)
            try:
                station = translate_station(row, joiner)
            except CellTypeError as ex:
                logger.warning("Skipping station row: %s", ex)
                continue
            if station is None:
                continue
            weather = dataset.add_weather(station.rebuild_component())
            logger.debug("Ending wid: %s", weather.get_id())
    except RelationshipError:
        logger.error("Unable to process data. Unable to find relationship between weather tables")
    except (pyodbc.Error, ValueError) as ex:
        # ValueError covers text the driver cannot decode (UnicodeDecodeError)
        logger.error("Error reading tables: %s", ex)
    return dataset


def read(db_path: str | Path, driver: str | None = None) -> AceDataset:
    """Translate the weather tables of an Ecofi database.

    Parameters
    ----------
    db_path : str | Path
        Path to the .accdb or .mdb file.
    driver : str | None
        ODBC driver name, see :func:`ecofi_ace.db.access_reader.connect`.

    Returns
    -------
    AceDataset
        One station per ``ws`` row with a station code, in table order.
        Empty when the file cannot be opened or lacks the weather tables.
    """
    dataset = AceDataset()
    db_path = Path(db_path).absolute()
    conn = open_database(db_path, driver)
    if conn is None:
        return dataset
    try:
        if has_weather_tables(conn):
            logger.debug("Found the weather tables")
            translate_weather_tables(conn, dataset)
        else:
            logger.error(
                "Unable to process data. Unable to find %s and %s tables", STATION_TABLE, DAILY_TABLE
            )
    finally:
        _close(conn)
    return dataset
