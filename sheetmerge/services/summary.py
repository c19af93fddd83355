from __future__ import annotations

from ..models.processing_result import BatchResult

"""SUMMARY line rendering for a finished batch.

Format:
    SUMMARY mode=<generic|template> files=<n> success=<s> failed=<f> rows=<r> elapsed_sec=<e>
"""

__all__ = [
    "format_seconds",
    "render_summary_line",
]


def format_seconds(seconds: float) -> str:
    """Integral values without a decimal point; tiny values without scientific notation."""
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return str(seconds)


def render_summary_line(result: BatchResult) -> str:
    """Render the SUMMARY line for a batch.

    Examples:
        >>> from datetime import datetime, timezone
        >>> from sheetmerge.models.processing_result import UploadMode
        >>> from sheetmerge.models.table import Table
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = BatchResult(UploadMode.GENERIC, Table(headers=["a"], rows=[["1"]]), start, end)
        >>> render_summary_line(result)
        'SUMMARY mode=generic files=0 success=0 failed=0 rows=1 elapsed_sec=2'
    """
    total_files = result.success_count + result.failure_count
    return (
        f"SUMMARY mode={result.mode.value} "
        f"files={total_files} "
        f"success={result.success_count} "
        f"failed={result.failure_count} "
        f"rows={result.row_count} "
        f"elapsed_sec={format_seconds(result.elapsed_seconds)}"
    )
