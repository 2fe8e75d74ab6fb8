"""Generate an Excel field dictionary for the Ecofi to ACE translation.

One sheet per Ecofi weather table lists each translated column, the ACE
variable it becomes, units, description and any conversion applied.
When a database is supplied, the column types it reports are included.
"""

from pathlib import Path

import pyodbc
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from ecofi_ace.db import access_reader
from ecofi_ace.db.models import FieldMapping
from ecofi_ace.db.schemas import DAILY_FIELDS, DAILY_TABLE, JOIN_COLUMN, STATION_FIELDS, STATION_TABLE
from ecofi_ace.logging_config import get_logger

logger = get_logger(__name__)

HEADERS = ["Ecofi Column", "DB Type", "ACE Field", "Units", "Description", "Transform"]
COL_WIDTHS = [16, 12, 16, 14, 40, 24]

HEADER_FONT = Font(name="Calibri", bold=True, size=11, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="2F5496", end_color="2F5496", fill_type="solid")
HEADER_ALIGN = Alignment(horizontal="center", vertical="center", wrap_text=True)
CELL_ALIGN = Alignment(vertical="top", wrap_text=True)

TABLE_FIELDS = {
    STATION_TABLE: (
        FieldMapping(source=JOIN_COLUMN, ace="wst_id", description="Station code", transform="integer as text"),
        *STATION_FIELDS,
    ),
    DAILY_TABLE: DAILY_FIELDS,
}


def write_table_sheet(ws, fields: tuple[FieldMapping, ...], db_types: dict[str, str]) -> None:
    """Write one table's field mappings to a worksheet."""
    for col_idx, header in enumerate(HEADERS, 1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = HEADER_ALIGN

    for row_idx, field in enumerate(fields, 2):
        values = [
            field.source,
            db_types.get(field.source),
            field.ace,
            field.units,
            field.description,
            field.transform,
        ]
        for col_idx, value in enumerate(values, 1):
            ws.cell(row=row_idx, column=col_idx, value=value or None).alignment = CELL_ALIGN

    for i, width in enumerate(COL_WIDTHS, 1):
        ws.column_dimensions[get_column_letter(i)].width = width

    ws.freeze_panes = "A2"


def build_workbook(columns: dict[str, list[dict[str, str]]] | None = None) -> Workbook:
    """Build the field dictionary workbook.

    Parameters
    ----------
    columns : dict | None
        Column metadata per table, as returned by
        :func:`ecofi_ace.db.access_reader.list_columns`.
    """
    columns = columns or {}
    wb = Workbook()
    wb.remove(wb.active)
    for table_name, fields in TABLE_FIELDS.items():
        db_types = {col["name"]: col["type_name"] for col in columns.get(table_name, [])}
        write_table_sheet(wb.create_sheet(title=table_name), fields, db_types)
    return wb


def read_columns(db_path: str | Path, driver: str | None = None) -> dict[str, list[dict[str, str]]]:
    """Read column metadata of the weather tables present in ``db_path``."""
    conn = access_reader.connect(db_path, driver)
    try:
        present = set(access_reader.list_tables(conn))
        return {
            table: access_reader.list_columns(conn, table)
            for table in TABLE_FIELDS
            if table in present
        }
    finally:
        conn.close()


def write_dictionary(
    output: str | Path, db_path: str | Path | None = None, driver: str | None = None
) -> Path:
    """Save the field dictionary to ``output``.

    Column types are left blank when no database is given or it cannot
    be read.
    """
    columns = None
    if db_path is not None:
        try:
            columns = read_columns(db_path, driver)
        except (OSError, ValueError, pyodbc.Error) as ex:
            logger.error("Unable to read column types from %s: %s", db_path, ex)

    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)
    build_workbook(columns).save(output)
    logger.info("Saved field dictionary: %s", output)
    return output
