from __future__ import annotations

import logging
import unicodedata
from io import BytesIO

import pandas as pd
from openpyxl.cell.cell import Cell
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from ..models.table import Table

"""Table -> xlsx export.

The workbook has a single ``Data`` sheet: a bold, grey-filled header row
followed by the data rows written as plain text (no type inference, every
value keeps its string form). Each row gets exactly its own cells; short rows
are not padded. Header columns are auto-fitted and clamped to
[MIN_COLUMN_WIDTH, MAX_COLUMN_WIDTH] character widths.
"""

__all__ = [
    "EXPORT_FILE_NAME",
    "EXPORT_MEDIA_TYPE",
    "MAX_COLUMN_WIDTH",
    "MIN_COLUMN_WIDTH",
    "SHEET_NAME",
    "export_table",
]

EXPORT_FILE_NAME = "merged_excel_data.xlsx"
EXPORT_MEDIA_TYPE = "application/octet-stream"
SHEET_NAME = "Data"

MIN_COLUMN_WIDTH = 15
MAX_COLUMN_WIDTH = 50

HEADER_FONT = Font(bold=True)
HEADER_FILL = PatternFill("solid", fgColor="C0C0C0")  # grey 25%

logger = logging.getLogger(__name__)


def _display_width(text: str) -> int:
    # 全角文字 (ハングル・漢字等) は 2 文字分
    return sum(2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1 for ch in text)


def _keep_as_text(cell: Cell) -> None:
    # "=" で始まる値も数式ではなく文字列として保存する
    if cell.data_type == "f":
        cell.data_type = "s"


def _column_width(table: Table, col: int) -> int:
    values = [table.headers[col]] + [r[col] for r in table.rows if col < len(r)]
    fitted = max(_display_width(v) for v in values) + 2
    return max(MIN_COLUMN_WIDTH, min(fitted, MAX_COLUMN_WIDTH))


def export_table(table: Table) -> bytes:
    """Serialize a Table into xlsx bytes.

    Args:
        table: headers and rows to write

    Returns:
        bytes of a single-sheet xlsx workbook
    """
    header = pd.DataFrame([list(table.headers)], dtype=object)
    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        header.to_excel(writer, sheet_name=SHEET_NAME, index=False, header=False)
        worksheet = writer.sheets[SHEET_NAME]
        for idx in range(1, len(table.headers) + 1):
            cell = worksheet.cell(row=1, column=idx)
            cell.font = HEADER_FONT
            cell.fill = HEADER_FILL
            _keep_as_text(cell)
        # データ行は各行の長さのまま書く (短い行を埋めない)
        for r_idx, record in enumerate(table.rows, start=2):
            for c_idx, value in enumerate(record, start=1):
                _keep_as_text(worksheet.cell(row=r_idx, column=c_idx, value=value))
        for idx in range(len(table.headers)):
            worksheet.column_dimensions[get_column_letter(idx + 1)].width = _column_width(table, idx)

    payload = buffer.getvalue()
    logger.info(
        "exported source=%s columns=%d rows=%d bytes=%d",
        table.source_name,
        len(table.headers),
        table.row_count,
        len(payload),
    )
    return payload
