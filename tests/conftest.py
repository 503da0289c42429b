# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from report_ingest.excel.reader import RawSheet, Workbook
from report_ingest.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
extensions: [".xlsx", ".xls"]
keep_na_strings: ["NA", "N/A", "null"]
error_log_dir: logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "ingest.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def clean_logging():
    # Handlers bind sys.stdout when created; a fresh one sees capsys' stream
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def build_workbook() -> Callable[..., Workbook]:
    """In-memory Workbook from ``{sheet name: rows}`` (no Excel round trip)."""
    def _build(sheets: dict[str, list[list[object]]]) -> Workbook:
        return Workbook(
            sheet_names=list(sheets),
            sheets={name: RawSheet(name=name, rows=[list(r) for r in rows]) for name, rows in sheets.items()},
        )
    return _build


@pytest.fixture()
def make_excel() -> Callable[..., Path]:
    """Write a real .xlsx with ``{sheet name: rows}``; rows are written without header/index."""
    def _make(directory: Path, name: str, sheets: dict[str, list[list[object]]]) -> Path:
        path = directory / name
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet_name, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
        return path
    return _make


@pytest.fixture()
def shipment_sheets() -> dict[str, list[list[object]]]:
    """Minimal weekly shipment report: two stores and one region total row."""
    header = ["Регион", "Подразделение", "Магазин", "Отгружено шт", "Всего к вывозу шт", "Отгружено товара %"]
    return {
        "Отчет": [
            ["Отчет ДР", None, None, None, None, None],
            ["01.03.2024 - 07.03.2024", None, None, None, None, None],
            header,
            ["СПБ", "СПБ-1", "Магазин 101", 40, 50, 0.8],
            ["СПБ", "СПБ-1", "Магазин 102", 30, 50, 0.6],
            ["СПБ", "СПБ ИТОГО", None, 70, 100, 0.7],
        ],
        "Детализация": [
            ["Регион", "Подразделение", "Магазин", "Дата создания"],
            ["СПБ", "СПБ-1", "Магазин 101", 45366],
        ],
    }
