from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import UTC, datetime

from ..excel.exporter import export_table
from ..excel.reader import Sheet, open_sheet
from ..excel.table_parser import parse_table
from ..excel.template import flatten_template
from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import FILE_LEVEL_SHEET, ErrorRecord
from ..models.processing_result import BatchResult, FileStat, FileStatus, UploadMode
from ..models.table import Table
from ..models.template_config import TemplateConfig
from ..models.uploaded_file import UploadedFile
from .merger import merge, validate_headers
from .progress import BatchProgress
from .session_store import CONFIG_KEY, TABLE_KEY, SessionStore

"""Session orchestration: upload, merge, edit, clear, export.

Every operation receives the session store and the session id explicitly; the
module keeps no state of its own. Each session holds at most one Table (under
TABLE_KEY) and one TemplateConfig (under CONFIG_KEY).

Batch policy (generic and template uploads):
- files are processed strictly in submission order
- the first parsed file becomes the base when the session has no table yet
- later files are merged onto the running base; generic mode checks the
  header first, template mode does not (the header is fixed by the config)
- a failing file is recorded with a reason tag and skipped; the batch goes on
- the merged table is stored only when it has a header, so a batch where
  every file fails leaves the session untouched
"""

__all__ = [
    "EDITED_SOURCE_NAME",
    "NothingToExportError",
    "ProcessingError",
    "REASON_HEADER_MISMATCH",
    "REASON_PROCESSING_ERROR",
    "clear_table",
    "current_table",
    "current_template_config",
    "export_session",
    "reset_template_config",
    "save_template_config",
    "update_table",
    "upload_file",
    "upload_files",
    "upload_template_files",
]

REASON_HEADER_MISMATCH = "header mismatch"
REASON_PROCESSING_ERROR = "processing error"

EDITED_SOURCE_NAME = "merged_data"

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Request-level failure (nothing to process, nothing to export)."""


class NothingToExportError(ProcessingError):
    """Raised when export is requested but the session table has no rows."""


def current_table(store: SessionStore, session_id: str) -> Table:
    """Stored table for the session, or an empty Table."""
    table = store.get(session_id, TABLE_KEY)
    return table if table is not None else Table.empty()


def current_template_config(store: SessionStore, session_id: str) -> TemplateConfig:
    """Stored template config for the session, or the default geometry."""
    config = store.get(session_id, CONFIG_KEY)
    return config if config is not None else TemplateConfig.default()


def save_template_config(store: SessionStore, session_id: str, config: TemplateConfig) -> TemplateConfig:
    store.put(session_id, CONFIG_KEY, config)
    logger.info("template config saved session=%s config=%s", session_id, config.to_mapping())
    return config


def reset_template_config(store: SessionStore, session_id: str) -> TemplateConfig:
    return save_template_config(store, session_id, TemplateConfig.default())


def update_table(
    store: SessionStore,
    session_id: str,
    headers: Sequence[str],
    rows: Iterable[Sequence[str]],
) -> Table:
    """Replace the session table wholesale with an edited header + rows payload.

    No parsing or merging happens; the previous table is simply discarded.
    """
    table = Table(headers=tuple(headers), rows=tuple(tuple(r) for r in rows), source_name=EDITED_SOURCE_NAME)
    store.put(session_id, TABLE_KEY, table)
    logger.info("table replaced session=%s columns=%d rows=%d", session_id, len(table.headers), table.row_count)
    return table


def clear_table(store: SessionStore, session_id: str) -> None:
    """Drop the session table. The template config is kept."""
    store.remove(session_id, TABLE_KEY)
    logger.info("table cleared session=%s", session_id)


def export_session(store: SessionStore, session_id: str) -> bytes:
    """Export the session table as xlsx bytes.

    Raises:
        NothingToExportError: no table stored, or the table has no rows
    """
    table = store.get(session_id, TABLE_KEY)
    if table is None or not table.rows:
        raise NothingToExportError("no data to export")
    return export_table(table)


def _usable_files(files: Sequence[UploadedFile] | None) -> list[UploadedFile]:
    if not files:
        raise ProcessingError("no files selected")
    usable = [f for f in files if not f.is_empty]
    if not usable:
        raise ProcessingError("no valid files")
    return usable


def _run_batch(
    store: SessionStore,
    session_id: str,
    files: list[UploadedFile],
    mode: UploadMode,
    parse: Callable[[Sheet, str], Table],
    error_log: ErrorLogBuffer | None,
) -> BatchResult:
    start_time = datetime.now(UTC)
    merged: Table | None = store.get(session_id, TABLE_KEY)
    stats: list[FileStat] = []

    def fail(upload: UploadedFile, reason: str, error_type: str, sheet: str, detail: str) -> None:
        stats.append(FileStat(file_name=upload.name, status=FileStatus.FAILED, reason=reason))
        if error_log is not None:
            error_log.append(ErrorRecord.create(upload.name, sheet, -1, error_type, detail))

    initial_rows = merged.row_count if merged is not None else 0
    with BatchProgress(len(files), description=f"Uploading ({mode.value})", merged_rows=initial_rows) as progress:
        for upload in files:
            progress.start_file(upload.name)
            try:
                sheet = open_sheet(upload.content)
                parsed = parse(sheet, upload.name)
            except OSError as e:
                logger.error("file processing failed file=%s: %s", upload.name, e)
                fail(upload, REASON_PROCESSING_ERROR, "READ_ERROR", FILE_LEVEL_SHEET, str(e))
                progress.file_failed()
                continue

            if merged is None or merged.is_empty:
                # 最初のファイルを基準データとする
                merged = parsed
            elif mode is UploadMode.TEMPLATE or validate_headers(merged.headers, parsed.headers):
                merged = merge(merged, parsed)
            else:
                logger.warning(
                    "header mismatch file=%s expected=%s got=%s",
                    upload.name,
                    list(merged.headers),
                    list(parsed.headers),
                )
                fail(
                    upload,
                    REASON_HEADER_MISMATCH,
                    "HEADER_MISMATCH",
                    sheet.title,
                    f"expected {list(merged.headers)}, got {list(parsed.headers)}",
                )
                progress.file_failed()
                continue

            stats.append(FileStat(file_name=upload.name, status=FileStatus.SUCCESS, rows=parsed.row_count))
            progress.file_merged(merged.row_count)

    if merged is not None and not merged.is_empty:
        store.put(session_id, TABLE_KEY, merged)

    result = BatchResult(
        mode=mode,
        table=merged if merged is not None else Table.empty(),
        start_time=start_time,
        end_time=datetime.now(UTC),
        file_stats=stats,
    )
    logger.info(
        "batch done session=%s mode=%s success=%d failed=%d rows=%d",
        session_id,
        mode.value,
        result.success_count,
        result.failure_count,
        result.row_count,
    )
    return result


def upload_files(
    store: SessionStore,
    session_id: str,
    files: Sequence[UploadedFile],
    *,
    error_log: ErrorLogBuffer | None = None,
) -> BatchResult:
    """Parse generic spreadsheets and merge them into the session table.

    Raises:
        ProcessingError: no files given, or every file is empty
    """
    return _run_batch(store, session_id, _usable_files(files), UploadMode.GENERIC, parse_table, error_log)


def upload_file(
    store: SessionStore,
    session_id: str,
    file: UploadedFile,
    *,
    error_log: ErrorLogBuffer | None = None,
) -> BatchResult:
    """Single-file variant of ``upload_files``."""
    if file.is_empty:
        raise ProcessingError("no files selected")
    return _run_batch(store, session_id, [file], UploadMode.GENERIC, parse_table, error_log)


def upload_template_files(
    store: SessionStore,
    session_id: str,
    files: Sequence[UploadedFile],
    *,
    error_log: ErrorLogBuffer | None = None,
) -> BatchResult:
    """Flatten template spreadsheets with the session's config and merge them.

    No header validation is done between files.

    Raises:
        ProcessingError: no files given, or every file is empty
    """
    usable = _usable_files(files)
    config = current_template_config(store, session_id)

    def flatten(sheet: Sheet, source_name: str) -> Table:
        return flatten_template(sheet, config, source_name)

    return _run_batch(store, session_id, usable, UploadMode.TEMPLATE, flatten, error_log)
