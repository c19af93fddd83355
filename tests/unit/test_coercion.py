from __future__ import annotations

from datetime import date, datetime, time

import pytest

from sheetmerge.excel.coercion import coerce, format_number
from sheetmerge.models.cell import BlankCell, BooleanCell, FormulaCell, NumberCell, TextCell

"""Unit tests for cell -> string coercion."""


def test_missing_and_blank_cells_are_empty():
    assert coerce(None) == ""
    assert coerce(BlankCell()) == ""


def test_text_is_returned_verbatim():
    assert coerce(TextCell("  padded  ")) == "  padded  "
    assert coerce(TextCell("")) == ""


def test_boolean_cells_render_lowercase():
    assert coerce(BooleanCell(True)) == "true"
    assert coerce(BooleanCell(False)) == "false"


@pytest.mark.parametrize(
    "value,expected",
    [
        (5.0, "5"),
        (-3.0, "-3"),
        (0.0, "0"),
        (12345678901.0, "12345678901"),
        (7, "7"),
    ],
)
def test_integral_numbers_have_no_decimal_point(value, expected):
    assert coerce(NumberCell(value)) == expected
    assert "." not in coerce(NumberCell(value))


@pytest.mark.parametrize("value,expected", [(2.5, "2.5"), (-0.125, "-0.125"), (0.1, "0.1")])
def test_fractional_numbers_keep_decimal_form(value, expected):
    assert coerce(NumberCell(value)) == expected


def test_non_finite_numbers_do_not_raise():
    assert format_number(float("inf")) == "inf"
    assert format_number(float("nan")) == "nan"


def test_date_formatted_number_renders_timestamp():
    moment = datetime(2024, 1, 15, 9, 30)
    out = coerce(NumberCell(45306.395833, moment=moment))
    assert out == "2024-01-15T09:30:00"
    assert out != "45306.395833"


def test_date_and_time_moments_use_isoformat():
    assert coerce(NumberCell(45306.0, moment=date(2024, 1, 15))) == "2024-01-15"
    assert coerce(NumberCell(0.5, moment=time(12, 0))) == "12:00:00"


def test_formula_prefers_cached_number():
    assert coerce(FormulaCell(cached=10.0)) == "10"
    assert coerce(FormulaCell(cached=1.25)) == "1.25"


def test_formula_falls_back_to_cached_text_then_empty():
    assert coerce(FormulaCell(cached="total")) == "total"
    assert coerce(FormulaCell(cached=None)) == ""


def test_unknown_objects_coerce_to_empty():
    assert coerce(object()) == ""  # type: ignore[arg-type]
