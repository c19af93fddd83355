from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any

"""TemplateConfig: sheet geometry for template (pivot + dual table) parsing.

All coordinates are 0-based. The default geometry matches the stock template:

    row 0: company label | company value (B1)
    row 1: code label    | code value    (B2)
    row 3: left sub-table header (A..C) | gap (D) | right sub-table header (E..G)
    row 4..: data rows, until the left sub-table runs blank
"""

__all__ = [
    "TemplateConfig",
    "TemplateConfigError",
]


class TemplateConfigError(ValueError):
    """Raised when a template geometry is invalid."""


@dataclass(frozen=True)
class TemplateConfig:
    """Geometry of a template sheet.

    The left and right sub-tables must not overlap; that is not checked here.
    """
    company_row: int = 0          # 会社名 行
    company_col: int = 1          # 会社名 列 (B)
    code_row: int = 1             # コード 行
    code_col: int = 1             # コード 列 (B)
    data_start_row: int = 3       # サブテーブルのヘッダ行 (4行目)
    left_table_start_col: int = 0
    right_table_start_col: int = 4
    col_count: int = 3            # 各サブテーブルの列数

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TemplateConfigError(f"{f.name} must be an integer, got {value!r}")
            if value < 0:
                raise TemplateConfigError(f"{f.name} must be non-negative, got {value}")
        if self.col_count < 1:
            raise TemplateConfigError(f"col_count must be >= 1, got {self.col_count}")

    @classmethod
    def default(cls) -> TemplateConfig:
        return cls()

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> TemplateConfig:
        """Build from a dict; missing keys fall back to the default geometry."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise TemplateConfigError(f"unknown template config keys: {sorted(unknown)}")
        return cls(**data)

    def to_mapping(self) -> dict[str, int]:
        return asdict(self)
