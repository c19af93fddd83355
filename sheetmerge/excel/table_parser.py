from __future__ import annotations

import logging

from ..models.table import Table
from .coercion import coerce
from .reader import Row, Sheet

"""Generic sheet -> Table parsing.

Row 0 is the header row; every following row is a data row. Each row is the
coerced values of its present cells in column order; absent cells in between
are not represented. Rows whose values are all blank after strip() are skipped
wherever they appear.
"""

__all__ = [
    "parse_table",
    "is_blank_record",
]

logger = logging.getLogger(__name__)


def is_blank_record(values: list[str]) -> bool:
    return all(not v.strip() for v in values)


def _coerce_row(row: Row | None) -> list[str]:
    if row is None:
        return []
    return [coerce(cell) for cell in row.present_cells()]


def parse_table(sheet: Sheet, source_name: str) -> Table:
    """Parse a worksheet into a Table.

    Args:
        sheet: worksheet to read (see ``open_sheet``)
        source_name: uploaded file name recorded on the Table

    Returns:
        Table with the header row and all non-blank data rows. An empty sheet
        yields an empty header and no rows.
    """
    if sheet.row_count == 0:
        return Table(source_name=source_name)

    headers = _coerce_row(sheet.row(0))
    rows: list[list[str]] = []
    skipped = 0
    for r_idx in range(1, sheet.row_count):
        record = _coerce_row(sheet.row(r_idx))
        if is_blank_record(record):
            skipped += 1
            continue
        rows.append(record)

    logger.debug(
        "parsed file=%s columns=%d rows=%d skipped_blank=%d",
        source_name,
        len(headers),
        len(rows),
        skipped,
    )
    return Table(headers=headers, rows=rows, source_name=source_name)
