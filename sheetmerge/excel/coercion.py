from __future__ import annotations

import math
from datetime import timedelta

from ..models.cell import BlankCell, BooleanCell, FormulaCell, NumberCell, SheetCell, TextCell

"""Cell value -> canonical string conversion.

Every value in a Table is a string. ``coerce`` is total over the SheetCell
variants and never raises.
"""

__all__ = [
    "coerce",
    "format_number",
]


def format_number(value: float) -> str:
    """Render a number: integral values without a decimal point, others via repr."""
    if isinstance(value, int):
        return str(value)
    if math.isfinite(value) and value == math.floor(value):
        return str(int(value))
    return str(value)


def coerce(cell: SheetCell | None) -> str:
    """Convert a single cell into its table string.

    - None / BlankCell -> ""
    - TextCell -> text as-is (no strip)
    - BooleanCell -> "true" / "false"
    - NumberCell with a date format -> ISO-8601 timestamp
    - NumberCell -> see ``format_number``
    - FormulaCell -> cached number, else cached text, else ""
    """
    if cell is None or isinstance(cell, BlankCell):
        return ""
    if isinstance(cell, TextCell):
        return cell.text
    if isinstance(cell, BooleanCell):
        return "true" if cell.value else "false"
    if isinstance(cell, NumberCell):
        if cell.moment is None:
            return format_number(cell.value)
        if isinstance(cell.moment, timedelta):
            return str(cell.moment)
        return cell.moment.isoformat()
    if isinstance(cell, FormulaCell):
        # 数値 -> 文字列 -> 空 の順にフォールバック
        if isinstance(cell.cached, (int, float)):
            return format_number(cell.cached)
        if isinstance(cell.cached, str):
            return cell.cached
        return ""
    return ""
