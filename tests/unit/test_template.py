from __future__ import annotations

import logging

from sheetmerge.excel.reader import Sheet, open_sheet
from sheetmerge.excel.template import CODE_LABEL, COMPANY_LABEL, flatten_template
from sheetmerge.models.template_config import TemplateConfig


def test_header_synthesis_with_default_geometry(template_rows):
    table = flatten_template(Sheet.from_values(template_rows), TemplateConfig.default(), "t.xlsx")
    assert list(table.headers) == ["코드", "회사", "Name", "Dept", "Title", "Name2", "Dept2", "Title2"]
    assert table.headers[:2] == (CODE_LABEL, COMPANY_LABEL)


def test_rows_stop_at_first_blank_left_block(template_rows):
    table = flatten_template(Sheet.from_values(template_rows), TemplateConfig.default(), "t.xlsx")
    assert table.row_count == 2
    assert table.rows == (
        ("C1", "Acme", "Kim", "Sales", "Manager", "Lee", "HR", "Staff"),
        ("C1", "Acme", "Park", "Dev", "Lead", "Choi", "Ops", "Intern"),
    )
    assert table.source_name == "t.xlsx"


def test_absent_rows_are_skipped_not_terminal():
    rows = [
        ["회사", "Acme"],
        ["코드", "C1"],
        None,
        ["Name", "Dept", "Title", None, "Name2", "Dept2", "Title2"],
        ["Kim", "Sales", "Manager"],
        None,                       # 存在しない行はスキップ
        ["Park", "Dev", "Lead"],
    ]
    table = flatten_template(Sheet.from_values(rows), TemplateConfig.default(), "t.xlsx")
    assert [r[2] for r in table.rows] == ["Kim", "Park"]


def test_right_block_is_included_even_when_blank():
    rows = [
        ["회사", "Acme"],
        ["코드", "C1"],
        None,
        ["Name", "Dept", "Title", None, "Name2", "Dept2", "Title2"],
        ["Kim", "Sales", "Manager"],
    ]
    table = flatten_template(Sheet.from_values(rows), TemplateConfig.default(), "t.xlsx")
    assert table.rows == (("C1", "Acme", "Kim", "Sales", "Manager", "", "", ""),)


def test_absent_header_row_yields_empty_segments():
    rows = [["회사", "Acme"], ["코드", "C1"], None, None, ["Kim", "Sales", "Manager"]]
    table = flatten_template(Sheet.from_values(rows), TemplateConfig.default(), "t.xlsx")
    assert list(table.headers) == ["코드", "회사", "", "", "", "", "", ""]
    assert table.row_count == 1


def test_missing_pivot_cells_become_empty_strings():
    rows = [None, None, None, ["h1"], ["v1"]]
    config = TemplateConfig(right_table_start_col=2, col_count=1)
    table = flatten_template(Sheet.from_values(rows), config, "t.xlsx")
    assert table.rows == (("", "", "v1", ""),)


def test_custom_geometry():
    rows = [
        [None, None, None],
        [None, "code:", "X-9", None, "company:", "Beta"],
        ["a", "b", None, "c", "d"],
        [1, 2, None, 3, 4],
        [5, 6, None, 7, 8],
        [None, None, None, 9, 9],
    ]
    config = TemplateConfig(
        company_row=1,
        company_col=5,
        code_row=1,
        code_col=2,
        data_start_row=2,
        left_table_start_col=0,
        right_table_start_col=3,
        col_count=2,
    )
    table = flatten_template(Sheet.from_values(rows), config, "custom.xlsx")
    assert list(table.headers) == ["코드", "회사", "a", "b", "c", "d"]
    assert table.rows == (
        ("X-9", "Beta", "1", "2", "3", "4"),
        ("X-9", "Beta", "5", "6", "7", "8"),
    )


def test_sheet_without_data_rows():
    rows = [["회사", "Acme"], ["코드", "C1"], None, ["Name", "Dept", "Title"]]
    table = flatten_template(Sheet.from_values(rows), TemplateConfig.default(), "t.xlsx")
    assert table.row_count == 0
    assert len(table.headers) == 8


def test_flatten_real_workbook(xlsx_bytes, template_rows):
    table = flatten_template(open_sheet(xlsx_bytes(template_rows)), TemplateConfig.default(), "t.xlsx")
    assert table.row_count == 2
    assert table.rows[1][2] == "Park"


def test_pivot_values_are_logged(template_rows, caplog):
    logger = logging.getLogger("sheetmerge")
    prev = logger.propagate
    logger.propagate = True
    try:
        with caplog.at_level(logging.INFO, logger="sheetmerge.excel.template"):
            flatten_template(Sheet.from_values(template_rows), TemplateConfig.default(), "t.xlsx")
    finally:
        logger.propagate = prev
    assert any("company=Acme" in r.getMessage() and "code=C1" in r.getMessage() for r in caplog.records)
