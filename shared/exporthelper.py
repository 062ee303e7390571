from datetime import date, datetime
from io import BytesIO
from typing import Any, Dict, List, Optional, Set

import pandas as pd
from fastapi.responses import StreamingResponse
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from shared.core.schemas import SheetData
from shared.helpers.date_helper import parse_date

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# header cell is B2, leaving an empty first row and column
HEADER_ROW = 2
FIRST_COL = 2

DATE_FORMAT = "dd/mm/yyyy"
INTEGER_FORMAT = '#,##0;-#,##0;"-"'
DECIMAL_FORMAT = '#,##0.00;-#,##0.00;"-"'

MAX_COLUMN_WIDTH = 50


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _clean_cell(value: Any) -> Any:
    # NaN sneaks in when pandas aligns rows with missing labels
    if value is None or (isinstance(value, float) and value != value):
        return None
    if isinstance(value, str):
        # control characters are rejected by the xlsx format
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def _format_data_cells(
    ws: Worksheet,
    columns: List[str],
    row_count: int,
    number_formats: Dict[str, Optional[str]],
    date_columns: Set[str],
):
    for col_offset, column in enumerate(columns):
        col_idx = FIRST_COL + col_offset
        number_format = number_formats.get(column)
        is_date_column = column in date_columns

        for row_idx in range(HEADER_ROW + 1, HEADER_ROW + row_count + 1):
            cell = ws.cell(row=row_idx, column=col_idx)
            value = cell.value
            if value == "":
                # na_rep leaves an empty string behind, keep the cell truly blank
                cell.value = None
                continue
            if isinstance(value, str) and cell.data_type == "f":
                # ERP text starting with "=" is data, not a formula
                cell.data_type = "s"

            if is_date_column:
                if isinstance(value, (datetime, date)):
                    cell.number_format = DATE_FORMAT
                elif isinstance(value, str):
                    parsed = parse_date(value)
                    if parsed is not None:
                        cell.value = parsed
                        cell.number_format = DATE_FORMAT
            elif number_format and _is_number(value):
                cell.number_format = number_format


def _autosize_columns(ws: Worksheet, columns: List[str], rows: List[Dict[str, Any]]):
    for col_offset, column in enumerate(columns):
        width = len(column)
        for row in rows:
            value = row.get(column)
            if value is not None:
                width = max(width, len(str(value)))
        letter = get_column_letter(FIRST_COL + col_offset)
        ws.column_dimensions[letter].width = min(width + 2, MAX_COLUMN_WIDTH)


def write_sheet(writer: pd.ExcelWriter, sheet: SheetData) -> Worksheet:
    """
    Write one sheet at B2 and decorate it.

    Values keep their native type (numbers, dates, text) and None stays blank.
    Number formats are only set on numeric cells of the mapped columns; date
    columns get dd/mm/yyyy, parsing date-like strings on the way.
    """
    rows = [
        {column: _clean_cell(row.get(column)) for column in sheet.columns}
        for row in sheet.rows
    ]
    df = pd.DataFrame(rows, columns=sheet.columns, dtype=object)
    df.to_excel(
        writer,
        sheet_name=sheet.name,
        index=False,
        startrow=HEADER_ROW - 1,
        startcol=FIRST_COL - 1,
        na_rep="",
    )

    ws = writer.sheets[sheet.name]

    for col_offset in range(len(sheet.columns)):
        ws.cell(row=HEADER_ROW, column=FIRST_COL + col_offset).font = Font(bold=True)

    _format_data_cells(ws, sheet.columns, len(rows),
                       sheet.number_formats, sheet.date_columns)
    _autosize_columns(ws, sheet.columns, rows)

    if sheet.columns:
        first = f"{get_column_letter(FIRST_COL)}{HEADER_ROW}"
        last = f"{get_column_letter(FIRST_COL + len(sheet.columns) - 1)}{HEADER_ROW + len(rows)}"
        ws.auto_filter.ref = f"{first}:{last}"

    return ws


def build_workbook(sheets: List[SheetData]) -> BytesIO:
    output = BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        for sheet in sheets:
            write_sheet(writer, sheet)
    output.seek(0)
    return output


def export_to_excel(sheets: List[SheetData], filename: str = "export.xlsx") -> StreamingResponse:
    """Render the sheets into one workbook and stream it as an attachment."""
    output = build_workbook(sheets)

    headers = {
        "Content-Disposition": f'attachment; filename="{filename}"',
        "Cache-Control": "no-store",
    }

    return StreamingResponse(
        output,
        media_type=XLSX_MEDIA_TYPE,
        headers=headers
    )
