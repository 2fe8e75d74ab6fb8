"""Read Ecofi data from Microsoft Access (.mdb/.accdb) databases.

Uses pyodbc with an Access ODBC driver: the Microsoft Access driver on
Windows, MDBTools elsewhere. Connections are always opened read-only.
"""

import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pyodbc

MS_ACCESS_DRIVER = "Microsoft Access Driver (*.mdb, *.accdb)"
MDBTOOLS_DRIVER = "MDBTools"

SUPPORTED_SUFFIXES = (".accdb", ".mdb")


def default_driver() -> str:
    """Return the ODBC driver name for the current platform."""
    if sys.platform.startswith("win"):
        return MS_ACCESS_DRIVER
    return MDBTOOLS_DRIVER


def _connection_string(db_path: Path, driver: str | None = None) -> str:
    """Build an ODBC connection string for an Access database."""
    suffix = db_path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported file extension: {suffix}")
    return f"DRIVER={{{driver or default_driver()}}};DBQ={db_path};"


def connect(db_path: str | Path, driver: str | None = None) -> pyodbc.Connection:
    """Open a read-only connection to an Ecofi Access database.

    Parameters
    ----------
    db_path : str | Path
        Path to the .mdb or .accdb file.
    driver : str | None
        ODBC driver name. Defaults to the platform driver.

    Returns
    -------
    pyodbc.Connection
        An open, read-only ODBC connection.

    Raises
    ------
    FileNotFoundError
        If the database file does not exist.
    PermissionError
        If the database file cannot be read.
    ValueError
        If the file is not an .mdb or .accdb file.
    pyodbc.Error
        If the ODBC connection fails.
    """
    db_path = Path(db_path).resolve()
    if not db_path.is_file():
        raise FileNotFoundError(f"Database not found: {db_path}")
    if not os.access(db_path, os.R_OK):
        raise PermissionError(f"Database not readable: {db_path}")
    conn_str = _connection_string(db_path, driver)
    return pyodbc.connect(conn_str, readonly=True, autocommit=True)


def list_tables(conn: pyodbc.Connection) -> list[str]:
    """List all user tables in the database.

    Parameters
    ----------
    conn : pyodbc.Connection
        An open database connection.

    Returns
    -------
    list[str]
        Table names, excluding system tables.
    """
    cursor = conn.cursor()
    tables = []
    for row in cursor.tables(tableType="TABLE"):
        name = row.table_name
        if not name.startswith("MSys"):
            tables.append(name)
    return sorted(tables)


def list_columns(conn: pyodbc.Connection, table_name: str) -> list[dict[str, str]]:
    """List columns and their types for a given table.

    Returns
    -------
    list[dict[str, str]]
        List of dicts with 'name' and 'type_name' keys.
    """
    cursor = conn.cursor()
    return [
        {"name": row.column_name, "type_name": row.type_name}
        for row in cursor.columns(table=table_name)
    ]


def has_index(conn: pyodbc.Connection, table_name: str, column: str) -> bool:
    """Check whether an index on ``table_name`` starts with ``column``.

    Drivers that cannot report index statistics are treated as having
    no index.
    """
    cursor = conn.cursor()
    try:
        stats = list(cursor.statistics(table_name))
    except pyodbc.Error:
        return False
    for row in stats:
        if row.index_name and row.ordinal_position == 1 and row.column_name == column:
            return True
    return False


def read_table(conn: pyodbc.Connection, table_name: str) -> list[dict]:
    """Read all rows from a table as a list of dicts.

    Parameters
    ----------
    conn : pyodbc.Connection
        An open database connection.
    table_name : str
        Name of the table to read.

    Returns
    -------
    list[dict]
        Each row as a dictionary keyed by column name, in table order.
    """
    cursor = conn.cursor()
    cursor.execute(f"SELECT * FROM [{table_name}]")  # noqa: S608
    col_names = [desc[0] for desc in cursor.description]
    return [dict(zip(col_names, row, strict=True)) for row in cursor.fetchall()]


def lookup_rows(
    conn: pyodbc.Connection, table_name: str, column: str, value: object
) -> Iterator[dict]:
    """Yield the rows of ``table_name`` whose ``column`` equals ``value``.

    The lookup is a parameterised equality query, so the driver may use
    an index on ``column`` when one exists and scans the table otherwise.
    Rows are streamed in the order the driver returns them.
    """
    cursor = conn.cursor()
    try:
        cursor.execute(f"SELECT * FROM [{table_name}] WHERE [{column}] = ?", value)  # noqa: S608
        col_names = [desc[0] for desc in cursor.description]
        for row in cursor:
            yield dict(zip(col_names, row, strict=True))
    finally:
        cursor.close()
