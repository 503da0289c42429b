from __future__ import annotations

from report_ingest.parsers import scanning
from report_ingest.parsers.common import REGION_BEL, REGION_SPB

WIDTH = 44


def _row(**cells):
    row = [None] * WIDTH
    for col, value in cells.items():
        row[int(col[1:])] = value
    return row


def _sheet_rows(*data_rows):
    rows = [_row() for _ in range(8)]
    rows[2] = _row(c0="Период отчета: 01.03.2024 - 07.03.2024", c10="Весна/ 2024", c11="-", c42="Лето 2024")
    rows[3] = _row(c10="Обувь", c11="Кидс", c42="Обувь")
    rows[4] = _row(c42="Сандалии")
    rows[7] = _row(c0="Регион", c1="Подразделение", c2="Магазин")
    return rows + list(data_rows)


def test_parse_sheet_fixed_layout(build_workbook):
    wb = build_workbook({
        "Магазины": _sheet_rows(
            _row(c0="СПБ", c1="СПБ-1", c2="101", c3="ТЦ Галерея", c4=0.95, c5=120, c6=300, c7="80%", c8=12,
                 c10=0.5, c11=0.7, c42=0.25),
            _row(),
            _row(c0="СПБ", c1="СПБ-1", c2="102", c4=1, c10=None),
        ),
    })

    result = scanning.parse(wb, "Нет сканирования СПБ.xlsx")

    assert result.period == "01.03.2024 - 07.03.2024"
    assert result.regions == []
    assert len(result.stores) == 2
    store = result.stores[0]
    assert store.mall == "ТЦ Галерея"
    assert store.scan_pct == 95.0
    assert store.scan_articles == 120
    assert store.bind_pct == 80.0
    # column 11 has a "-" season header and is ignored
    assert [(s.season, s.direction, s.value) for s in store.seasons] == [("Весна 2024", "Обувь", 50.0)]
    assert [(c.category, c.value) for c in store.categories] == [("Сандалии", 25.0)]
    assert result.stores[1].seasons == ()
    assert result.stores[1].sheet == "Магазины"


def test_region_prefers_subdivisions_sheet(build_workbook):
    wb = build_workbook({
        "Подразделения": _sheet_rows(_row(c0="БЕЛ", c1="БЕЛ-1")),
        "Магазины": _sheet_rows(_row(c0="СПБ", c1="СПБ-1", c2="101")),
    })
    assert scanning.parse(wb, "scan.xlsx").region == REGION_BEL


def test_region_falls_back_to_stores(build_workbook):
    wb = build_workbook({"Магазины": _sheet_rows(_row(c0="СПБ", c1="СПБ-1", c2="101"))})
    assert scanning.parse(wb, "scan.xlsx").region == REGION_SPB


def test_missing_sheets_returns_none(build_workbook):
    assert scanning.parse(build_workbook({"Sheet1": [["x"]]}), "scan.xlsx") is None


def test_numeric_percentages_always_scale(build_workbook):
    wb = build_workbook({
        "Магазины": _sheet_rows(_row(c0="СПБ", c1="СПБ-1", c2="101", c4=2.0, c10=2.0, c42=1.6)),
    })

    store = scanning.parse(wb, "scan.xlsx").stores[0]

    assert [s.value for s in store.seasons] == [200.0]
    assert [c.value for c in store.categories] == [160.0]
    assert store.scan_pct == 200.0
