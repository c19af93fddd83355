from __future__ import annotations

import logging

from ..models.table import Table
from ..models.template_config import TemplateConfig
from .coercion import coerce
from .reader import Sheet
from .table_parser import is_blank_record

"""Template sheet flattening (pivot cells + two side-by-side sub-tables).

A template sheet carries a company name and a code in fixed pivot cells, plus
two fixed-width sub-tables sharing a header row. Each data row pairs the left
and right blocks; the flattened row is

    [code, company, *left_block, *right_block]

The walk stops at the first row whose left block is entirely blank. Rows that
are absent from the sheet are skipped, not treated as the end of data.
"""

__all__ = [
    "CODE_LABEL",
    "COMPANY_LABEL",
    "flatten_template",
]

CODE_LABEL = "코드"
COMPANY_LABEL = "회사"

logger = logging.getLogger(__name__)


def _read_block(sheet: Sheet, row_idx: int, start_col: int, col_count: int) -> list[str]:
    """Read ``col_count`` coerced values from ``start_col``; absent row -> empty strings."""
    row = sheet.row(row_idx)
    if row is None:
        return [""] * col_count
    return [coerce(row.cell(start_col + i)) for i in range(col_count)]


def flatten_template(sheet: Sheet, config: TemplateConfig, source_name: str) -> Table:
    """Flatten one template sheet into a wide Table.

    Args:
        sheet: worksheet to read
        config: geometry of the pivot cells and sub-tables
        source_name: uploaded file name recorded on the Table

    Returns:
        Table whose header is [CODE_LABEL, COMPANY_LABEL] + left headers +
        right headers, with one row per non-blank left block
    """
    code = coerce(sheet.cell(config.code_row, config.code_col))
    company = coerce(sheet.cell(config.company_row, config.company_col))
    logger.info("pivot values file=%s company=%s code=%s", source_name, company, code)

    headers = [CODE_LABEL, COMPANY_LABEL]
    headers += _read_block(sheet, config.data_start_row, config.left_table_start_col, config.col_count)
    headers += _read_block(sheet, config.data_start_row, config.right_table_start_col, config.col_count)
    logger.info("template header file=%s header=%s", source_name, headers)

    rows: list[list[str]] = []
    last_row = sheet.last_row_index
    current = config.data_start_row + 1
    while current <= last_row:
        if sheet.row(current) is None:
            current += 1
            continue
        left = _read_block(sheet, current, config.left_table_start_col, config.col_count)
        if is_blank_record(left):
            # 左テーブルが空になったら以降は対象外
            break
        right = _read_block(sheet, current, config.right_table_start_col, config.col_count)
        record = [code, company, *left, *right]
        rows.append(record)
        logger.debug("row %d: %s", current, record)
        current += 1

    logger.info("template rows file=%s rows=%d", source_name, len(rows))
    return Table(headers=headers, rows=rows, source_name=source_name)
