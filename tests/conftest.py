# Shared pytest fixtures
from __future__ import annotations

import tempfile
from io import BytesIO
from pathlib import Path
from typing import Any

import pytest
from openpyxl import Workbook

from sheetmerge.models.uploaded_file import UploadedFile
from sheetmerge.services.session_store import InMemorySessionStore


def build_xlsx(rows: list[list[Any] | None], title: str = "Sheet1") -> bytes:
    """Write rows to an in-memory xlsx; a None entry leaves that row absent."""
    wb = Workbook()
    ws = wb.active
    ws.title = title
    for r_idx, values in enumerate(rows, start=1):
        if values is None:
            continue
        for c_idx, value in enumerate(values, start=1):
            if value is not None:
                ws.cell(row=r_idx, column=c_idx, value=value)
    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


def make_upload(name: str, rows: list[list[Any] | None]) -> UploadedFile:
    return UploadedFile(name=name, content=build_xlsx(rows))


# 既定ジオメトリのテンプレートシート (会社 B1 / コード B2 / 4行目ヘッダ)
TEMPLATE_ROWS: list[list[Any] | None] = [
    ["회사", "Acme"],
    ["코드", "C1"],
    None,
    ["Name", "Dept", "Title", None, "Name2", "Dept2", "Title2"],
    ["Kim", "Sales", "Manager", None, "Lee", "HR", "Staff"],
    ["Park", "Dev", "Lead", None, "Choi", "Ops", "Intern"],
    [None, None, None, None, "orphan", None, None],
    ["Late", "Row", "Ignored", None, "x", "y", "z"],
]


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture()
def template_rows() -> list[list[Any] | None]:
    return [list(r) if r is not None else None for r in TEMPLATE_ROWS]


@pytest.fixture()
def sample_template_yaml() -> str:
    return """company_row: 0
company_col: 1
code_row: 1
code_col: 1
data_start_row: 3
left_table_start_col: 0
right_table_start_col: 4
col_count: 3
"""


@pytest.fixture()
def write_template_config(temp_workdir: Path, sample_template_yaml: str) -> Path:
    cfg = temp_workdir / "template.yml"
    cfg.write_text(sample_template_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def xlsx_bytes():
    return build_xlsx


@pytest.fixture()
def upload_factory():
    return make_upload
