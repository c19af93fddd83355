from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .table import Table

"""Batch upload results.

A batch processes every submitted file in order. Each file ends as SUCCESS or
FAILED (with a reason tag); the BatchResult aggregates the counts, the failed
file labels shown to the user, and the merged table after the batch.
"""

__all__ = [
    "BatchResult",
    "FileStat",
    "FileStatus",
    "UploadMode",
]


class FileStatus(Enum):
    """Per-file outcome inside a batch."""
    SUCCESS = "success"
    FAILED = "failed"


class UploadMode(Enum):
    GENERIC = "generic"    # 同一レイアウトのシートをそのまま結合
    TEMPLATE = "template"  # ピボット + 左右サブテーブルを平坦化して結合


@dataclass(frozen=True)
class FileStat:
    """Outcome of one file in a batch."""
    file_name: str
    status: FileStatus
    rows: int = 0               # このファイルから取り込んだ行数
    reason: str | None = None   # 失敗理由タグ (header mismatch / processing error)

    @property
    def label(self) -> str:
        """``name (reason)`` as listed to the user for failed files."""
        return f"{self.file_name} ({self.reason})" if self.reason else self.file_name


@dataclass(frozen=True)
class BatchResult:
    """Aggregated result of one upload batch.

    ``table`` is the session table after the batch. When every file failed it
    is the table that was stored before the batch (possibly empty).
    """
    mode: UploadMode
    table: Table
    start_time: datetime
    end_time: datetime
    file_stats: list[FileStat] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for s in self.file_stats if s.status is FileStatus.SUCCESS)

    @property
    def failure_count(self) -> int:
        return sum(1 for s in self.file_stats if s.status is FileStatus.FAILED)

    @property
    def failed_files(self) -> list[str]:
        return [s.label for s in self.file_stats if s.status is FileStatus.FAILED]

    @property
    def row_count(self) -> int:
        return self.table.row_count

    @property
    def elapsed_seconds(self) -> float:
        return (self.end_time - self.start_time).total_seconds()

    @property
    def message(self) -> str:
        """User-facing summary of the batch."""
        verb = "merged" if self.mode is UploadMode.GENERIC else "parsed"
        text = f"{self.success_count} files {verb} ({self.row_count} rows total)"
        if self.failure_count:
            text += f"\n{self.failure_count} files failed"
        return text
