from __future__ import annotations

import argparse
import logging
import os
import sys
import uuid
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from sheetmerge.config.loader import ConfigError, load_template_config
from sheetmerge.excel.exporter import EXPORT_FILE_NAME
from sheetmerge.logging.error_log import ErrorLogBuffer
from sheetmerge.logging.init import enable_debug, log_summary, setup_logging
from sheetmerge.models.error_record import FILE_LEVEL_SHEET, ErrorRecord
from sheetmerge.models.processing_result import FileStat, FileStatus
from sheetmerge.models.uploaded_file import UploadedFile
from sheetmerge.services.orchestrator import (
    REASON_PROCESSING_ERROR,
    ProcessingError,
    current_table,
    export_session,
    save_template_config,
    upload_files,
    upload_template_files,
)
from sheetmerge.services.session_store import InMemorySessionStore
from sheetmerge.services.summary import render_summary_line

"""CLI entrypoint.

Runs one upload batch against a fresh in-memory session, then writes the
merged table as xlsx:

    python -m sheetmerge.cli a.xlsx b.xlsx -o merged.xlsx
    python -m sheetmerge.cli --template --config template.yml t1.xlsx t2.xlsx

Exit codes: 0 all files merged, 2 at least one file failed, 1 fatal.
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

CONFIG_ENV = "SHEETMERGE_TEMPLATE_CONFIG"


def _load_env_file(path: Path) -> None:
    """Load .env via python-dotenv (existing environment wins)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Merge spreadsheets sharing one column layout")
    p.add_argument("files", nargs="*", type=Path, help="xlsx files, merged in the given order")
    p.add_argument("-o", "--output", type=Path, default=Path(EXPORT_FILE_NAME), help="output xlsx path")
    p.add_argument("--template", action="store_true", help="flatten pivot + dual-table template sheets")
    p.add_argument("--config", type=Path, default=None, help=f"template geometry YAML (or ${CONFIG_ENV})")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print merged headers & first rows then exit")
    return p.parse_args(argv)


def _read_files(
    paths: list[Path], error_log: ErrorLogBuffer, logger: logging.Logger
) -> tuple[list[UploadedFile], list[FileStat]]:
    """Read input paths. Unreadable paths become failed FileStats, not uploads."""
    uploads: list[UploadedFile] = []
    unreadable: list[FileStat] = []
    for path in paths:
        try:
            uploads.append(UploadedFile.from_path(path))
        except OSError as e:
            logger.error(f"cannot read {path}: {e}")
            unreadable.append(
                FileStat(file_name=path.name, status=FileStatus.FAILED, reason=REASON_PROCESSING_ERROR)
            )
            error_log.append(ErrorRecord.create(path.name, FILE_LEVEL_SHEET, -1, "READ_ERROR", str(e)))
    return uploads, unreadable


def _inspect_data(store: InMemorySessionStore, session_id: str) -> int:
    table = current_table(store, session_id)
    print(f"SOURCE: {table.source_name} rows={table.row_count}")
    print(f"  cols={list(table.headers)}")
    frame = table.to_frame()
    print(frame.head(3).fillna("").to_string(index=False))
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # 空リスト [] が渡された場合に sys.argv が混入しないよう None の時だけ読む
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        enable_debug()
        logger.debug("debug mode enabled")

    store = InMemorySessionStore()
    session_id = uuid.uuid4().hex

    if args.template:
        config_path = args.config or (Path(os.environ[CONFIG_ENV]) if os.getenv(CONFIG_ENV) else None)
        if config_path is not None:
            try:
                save_template_config(store, session_id, load_template_config(config_path))
            except ConfigError as e:
                logger.error(f"config: {e}")
                return EXIT_FATAL

    error_log = ErrorLogBuffer()
    uploads, unreadable = _read_files(args.files, error_log, logger)
    try:
        if args.template:
            result = upload_template_files(store, session_id, uploads, error_log=error_log)
        else:
            result = upload_files(store, session_id, uploads, error_log=error_log)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL
    finally:
        log_path = error_log.flush()
        if log_path is not None:
            logger.info(f"error log written: {log_path}")

    if unreadable:
        # 読めなかったファイルも失敗として集計する
        result = replace(result, file_stats=[*result.file_stats, *unreadable])

    for label in result.failed_files:
        logger.warning(f"failed: {label}")

    if args.inspect_data:
        return _inspect_data(store, session_id)

    try:
        payload = export_session(store, session_id)
    except ProcessingError as e:
        logger.error(f"export: {e}")
        log_summary(render_summary_line(result)[len("SUMMARY "):])
        return EXIT_FATAL
    args.output.write_bytes(payload)
    logger.info(f"written: {args.output} ({result.row_count} rows)")

    # log_summary が "SUMMARY " を付与するので除いて渡す
    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.failure_count > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
