from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime, time, timedelta
from io import BytesIO
from pathlib import Path
from typing import IO, Any, Union

from openpyxl import load_workbook
from openpyxl.cell.read_only import EmptyCell
from openpyxl.utils.datetime import to_excel

from ..models.cell import BlankCell, BooleanCell, FormulaCell, NumberCell, SheetCell, TextCell

"""Worksheet reader built on openpyxl.

Only the first worksheet of a workbook is read. The workbook is opened in
read-only mode so that rows missing from the XML stay absent (``Sheet.row``
returns None for them) instead of being materialized as empty rows.

Formula cells need two passes: one with ``data_only=False`` to see which cells
hold formulas, and one with ``data_only=True`` for their cached results. The
second pass only happens when the first sheet actually contains a formula.
"""

__all__ = [
    "Row",
    "Sheet",
    "SheetReadError",
    "SheetSource",
    "cell_from_value",
    "open_sheet",
]

SheetSource = Union[bytes, bytearray, str, Path, IO[bytes]]


class SheetReadError(IOError):
    """Raised when a workbook cannot be opened or decoded."""


class Row:
    """Present cells of one worksheet row, keyed by 0-based column index."""

    def __init__(self, cells: Mapping[int, SheetCell] | None = None) -> None:
        self._cells: dict[int, SheetCell] = dict(cells or {})

    def cell(self, index: int) -> SheetCell | None:
        return self._cells.get(index)

    def present_cells(self) -> list[SheetCell]:
        """Cells that exist in the row, in ascending column order. Gaps are dropped."""
        return [self._cells[i] for i in sorted(self._cells)]

    def __repr__(self) -> str:  # pragma: no cover (debug helper)
        return f"Row({self._cells!r})"


class Sheet:
    """Read accessor over one worksheet, 0-based coordinates throughout."""

    def __init__(self, rows: Mapping[int, Row] | None = None, title: str = "Sheet1") -> None:
        self._rows: dict[int, Row] = dict(rows or {})
        self.title = title

    @classmethod
    def from_values(cls, values: Iterable[Iterable[Any] | None], title: str = "Sheet1") -> Sheet:
        """Build a sheet from plain Python values.

        A None entry is an absent row; a None value inside a row is an absent cell.
        Every other value goes through ``cell_from_value``.
        """
        rows: dict[int, Row] = {}
        for r_idx, raw in enumerate(values):
            if raw is None:
                continue
            rows[r_idx] = Row(
                {c_idx: cell_from_value(v) for c_idx, v in enumerate(raw) if v is not None}
            )
        return cls(rows, title=title)

    @property
    def last_row_index(self) -> int:
        return max(self._rows) if self._rows else -1

    @property
    def row_count(self) -> int:
        return self.last_row_index + 1

    def row(self, index: int) -> Row | None:
        return self._rows.get(index)

    def cell(self, row: int, col: int) -> SheetCell | None:
        found = self._rows.get(row)
        return found.cell(col) if found is not None else None


def cell_from_value(value: Any, *, is_formula: bool = False, cached: Any = None) -> SheetCell:
    """Map a Python value (as openpyxl hands it out) onto a SheetCell variant."""
    if is_formula:
        return FormulaCell(cached=_cached_result(cached))
    if value is None:
        return BlankCell()
    # bool は int のサブクラスなので先に判定
    if isinstance(value, bool):
        return BooleanCell(value)
    if isinstance(value, (datetime, date, time, timedelta)):
        return NumberCell(value=float(to_excel(value)), moment=value)
    if isinstance(value, (int, float)):
        return NumberCell(value=value)
    if isinstance(value, str):
        return TextCell(value)
    # rich text and other openpyxl wrappers
    return TextCell(str(value))


def _cached_result(cached: Any) -> float | str | None:
    if cached is None or isinstance(cached, bool):
        return None
    if isinstance(cached, (datetime, date, time, timedelta)):
        return float(to_excel(cached))
    if isinstance(cached, (int, float, str)):
        return cached
    return str(cached)


def _read_payload(source: SheetSource) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, (str, Path)):
        try:
            return Path(source).read_bytes()
        except OSError as e:
            raise SheetReadError(f"cannot read workbook {source}: {e}") from e
    return source.read()


def _load_first_sheet(payload: bytes, data_only: bool) -> tuple[str, dict[int, dict[int, Any]]]:
    """Return (title, {row: {col: openpyxl cell}}) for the first worksheet."""
    try:
        wb = load_workbook(BytesIO(payload), read_only=True, data_only=data_only)
    except Exception as e:  # openpyxl raises zipfile / KeyError / ValueError variants
        raise SheetReadError(f"cannot open workbook: {e}") from e
    try:
        if not wb.worksheets:
            return "", {}
        ws = wb.worksheets[0]
        grid: dict[int, dict[int, Any]] = {}
        for r_idx, cells in enumerate(ws.iter_rows()):
            present = {c.column - 1: c for c in cells if not isinstance(c, EmptyCell)}
            if present:
                grid[r_idx] = present
        return ws.title, grid
    except Exception as e:
        raise SheetReadError(f"cannot read first worksheet: {e}") from e
    finally:
        wb.close()


def open_sheet(source: SheetSource) -> Sheet:
    """Open the first worksheet of an xlsx workbook.

    Args:
        source: raw bytes, a path, or a binary stream

    Returns:
        Sheet exposing the worksheet's present rows and cells

    Raises:
        SheetReadError: the payload is not a readable workbook
    """
    payload = _read_payload(source)
    title, grid = _load_first_sheet(payload, data_only=False)

    has_formula = any(c.data_type == "f" for cells in grid.values() for c in cells.values())
    cached_grid: dict[int, dict[int, Any]] = {}
    if has_formula:
        _, cached_grid = _load_first_sheet(payload, data_only=True)

    rows: dict[int, Row] = {}
    for r_idx, cells in grid.items():
        converted: dict[int, SheetCell] = {}
        for c_idx, c in cells.items():
            if c.data_type == "f":
                cached_cell = cached_grid.get(r_idx, {}).get(c_idx)
                cached = None
                # キャッシュ値がエラー (#DIV/0! 等) の場合もエラーセル同様に空扱い
                if cached_cell is not None and cached_cell.data_type != "e":
                    cached = cached_cell.value
                converted[c_idx] = cell_from_value(None, is_formula=True, cached=cached)
            elif c.data_type == "e":
                # エラー値 (#DIV/0! 等) は空扱い
                converted[c_idx] = BlankCell()
            else:
                converted[c_idx] = cell_from_value(c.value)
        rows[r_idx] = Row(converted)
    return Sheet(rows, title=title)
