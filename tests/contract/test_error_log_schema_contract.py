from __future__ import annotations

import json
from pathlib import Path

import jsonschema
import pytest

from report_ingest.logging.error_log import ErrorLogBuffer
from report_ingest.models.error_record import ErrorRecord

"""Error log JSON Lines record contract."""

ERROR_RECORD_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["timestamp", "file", "family", "sheet", "error_type", "message"],
    "additionalProperties": False,
    "properties": {
        "timestamp": {"type": "string", "pattern": r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$"},
        "file": {"type": "string"},
        "family": {
            "enum": [
                "scanning", "capsule", "pricing", "filling", "iz",
                "sales_jewelry", "sales", "jewelry", "shipment",
            ],
        },
        "sheet": {"type": "string"},
        "error_type": {"type": "string", "pattern": "^[A-Z][A-Z0-9_]*$"},
        "message": {"type": "string"},
    },
}


def test_written_records_match_schema(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path)
    buf.append(ErrorRecord.from_exception("Отчет.xlsx", "shipment", ValueError("bad header")))
    buf.append(ErrorRecord.create("ИЗ.xlsx", "iz", "WORKBOOK_READ_ERROR", "cannot open workbook", sheet="День"))

    path = buf.flush()

    for line in path.read_text(encoding="utf-8").splitlines():
        jsonschema.validate(json.loads(line), ERROR_RECORD_SCHEMA)


def test_schema_rejects_extra_key():
    record = json.loads(ErrorRecord.create("a.xlsx", "sales", "VALUE_ERROR", "x").to_json_line())
    record["extra"] = "not allowed"
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(record, ERROR_RECORD_SCHEMA)
