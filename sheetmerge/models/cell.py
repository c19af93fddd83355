from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Union

"""SheetCell variants read from a worksheet.

A cell is one of a closed set of frozen value types. Readers build them from the
underlying spreadsheet library; coercion matches on them exhaustively.

- TextCell: a string cell
- NumberCell: a numeric cell; ``moment`` is set when the number carries a
  date/time format
- BooleanCell: TRUE/FALSE
- BlankCell: a cell that exists but holds nothing
- FormulaCell: a formula, carrying only its last cached result
"""

__all__ = [
    "BlankCell",
    "BooleanCell",
    "FormulaCell",
    "NumberCell",
    "SheetCell",
    "TextCell",
]


@dataclass(frozen=True)
class TextCell:
    text: str


@dataclass(frozen=True)
class NumberCell:
    value: float
    moment: datetime | date | time | timedelta | None = None  # 日付書式の場合のみ

    @property
    def is_date(self) -> bool:
        return self.moment is not None


@dataclass(frozen=True)
class BooleanCell:
    value: bool


@dataclass(frozen=True)
class BlankCell:
    pass


@dataclass(frozen=True)
class FormulaCell:
    """Formula cell. Only the cached result is kept, formulas are never evaluated."""
    cached: float | str | None = None


SheetCell = Union[TextCell, NumberCell, BooleanCell, BlankCell, FormulaCell]
