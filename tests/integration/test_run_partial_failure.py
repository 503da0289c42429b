from __future__ import annotations

import json
from pathlib import Path

from report_ingest.cli.__main__ import EXIT_PARTIAL_FAILURE, main as cli_main


def _pricing_sheets():
    header = ["Регион", "Подразделение", "Магазин", "c0", "c1", "c2", "c3", "c4", "c5"]
    return {
        "Магазины": [header, ["БЕЛ", "БЕЛ-1", "301", 0.1, 0.2, 0.3, 0.4, 0.5, 0.6]],
    }


def test_corrupt_file_does_not_stop_the_batch(
    temp_workdir: Path, write_config: Path, make_excel, shipment_sheets, clean_logging, capsys
):
    data = temp_workdir / "data"
    make_excel(data, "Отчет ДР Неделя.xlsx", shipment_sheets)
    make_excel(data, "Рейтинг переоценки БЕЛ.xlsx", _pricing_sheets())
    (data / "Продажи СПБ день.xlsx").write_bytes(b"corrupt")

    code = cli_main([])

    out = capsys.readouterr().out
    assert code == EXIT_PARTIAL_FAILURE
    assert "ERROR Failed to parse Продажи СПБ день.xlsx as sales" in out
    assert "WARN No sales file could be parsed (1 given); keeping previous data" in out
    assert "SUMMARY files=3 success=2 skipped=0 failed=1" in out
    assert "families=pricing:1/1,sales:0/1!,shipment:1/1" in out

    (log,) = (temp_workdir / "logs").glob("errors-*.log")
    records = [json.loads(line) for line in log.read_text(encoding="utf-8").splitlines()]
    assert [(r["file"], r["family"], r["sheet"]) for r in records] == [
        ("Продажи СПБ день.xlsx", "sales", "<FILE_LEVEL>"),
    ]


def test_file_with_unknown_layout_is_skipped(temp_workdir: Path, write_config: Path, make_excel, clean_logging, capsys):
    make_excel(temp_workdir / "data", "Отчет капсулы.xlsx", {"Лист1": [["нет листа Итоги"]]})

    code = cli_main([])

    out = capsys.readouterr().out
    assert code == 0
    assert "INFO Skipped Отчет капсулы.xlsx: no capsule sheets found" in out
    assert "SUMMARY files=1 success=0 skipped=1 failed=0" in out
