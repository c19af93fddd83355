from __future__ import annotations

import json
import pathlib

import jsonschema
import pytest
from jsonschema.exceptions import ValidationError

from sheetmerge.logging.error_log import ErrorLogBuffer
from sheetmerge.models.uploaded_file import UploadedFile
from sheetmerge.services.orchestrator import upload_files

"""Error log JSON Lines contract test."""

SCHEMA_PATH = pathlib.Path(__file__).with_name("error_log_schema.json")


@pytest.fixture()
def schema():
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_records_from_a_failing_batch_match_schema(schema, store, upload_factory, temp_workdir):
    error_log = ErrorLogBuffer()
    upload_files(
        store,
        "s",
        [
            upload_factory("a.xlsx", [["id"], [1]]),
            upload_factory("b.xlsx", [["other"], [1]]),
            UploadedFile("c.xlsx", b"junk"),
        ],
        error_log=error_log,
    )
    path = error_log.flush()
    lines = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert [rec["error_type"] for rec in lines] == ["HEADER_MISMATCH", "READ_ERROR"]
    assert lines[0]["sheet"] == "Sheet1"
    assert lines[1]["sheet"] == "<FILE_LEVEL>"
    for rec in lines:
        jsonschema.validate(rec, schema)
        assert rec["row"] == -1


def test_schema_rejects_extra_key(schema):
    record = {
        "timestamp": "2025-09-26T10:12:33Z",
        "file": "a.xlsx",
        "sheet": "Sheet1",
        "row": -1,
        "error_type": "READ_ERROR",
        "message": "cannot open workbook",
        "extra": "nope",
    }
    with pytest.raises(ValidationError):
        jsonschema.validate(record, schema)
