from __future__ import annotations

from report_ingest.parsers import iz
from report_ingest.parsers.common import REGION_ALL


def _iz_sheet(period, *stores):
    rows = [[period]] + [[None] for _ in range(19)]
    rows.append(["Регион", "Подразделение", "Магазин", "ТЦ", "Рейтинг", "Готово", "Доля скан.", "Клики"])
    return rows + list(stores)


def test_parse_day_and_month_sheets(build_workbook):
    wb = build_workbook({
        "День": _iz_sheet(
            "15.03.2024",
            ["СПБ", "СПБ-1", 101.0, "ТЦ", 1, 12, 0.95, 40],
            ["СПБ", "СПБ-1", None, None, None, None, None, None],
            ["СПБ", "СПБ-1", "102", "ТЦ", None, "", 1.2, None],
        ),
        "Месяц": _iz_sheet("март 2024", ["БЕЛ", "БЕЛ-1", "301", "ТЦ", 3, 100, 0.5, 400]),
    })

    result = iz.parse(wb, "ИЗ_все.xlsx")

    assert list(result.sheets) == ["День", "Месяц"]
    day = result.sheets["День"]
    assert day.period == "15.03.2024"
    assert [s.store for s in day.stores] == ["101", "102"]
    assert day.stores[0].scan_share == 95.0
    assert day.stores[0].clicks == 40
    # scan share is always a fraction, so 1.2 is 120%
    assert day.stores[1].scan_share == 120.0
    assert day.stores[1].rating is None
    assert day.stores[1].ready_orders is None
    assert result.region == REGION_ALL


def test_chart_area_above_store_table_is_ignored(build_workbook):
    rows = _iz_sheet("неделя")
    rows[5] = ["СПБ", "СПБ-1", "График", None]
    result = iz.parse(build_workbook({"Неделя": rows}), "ИЗ.xlsx")
    assert result.sheets["Неделя"].stores == []


def test_no_iz_sheets_returns_none(build_workbook):
    assert iz.parse(build_workbook({"Лист1": [["x"]]}), "ИЗ.xlsx") is None
