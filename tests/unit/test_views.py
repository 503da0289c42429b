from __future__ import annotations

from report_ingest.models.shipment import ShipmentRow
from report_ingest.models.sales import SalesFile
from report_ingest.services.views import (
    PRODUCT_GROUP,
    average_percentage,
    files_for_region,
    filter_tracked_regions,
    get_field,
    get_number,
    group_shipments,
    region_breakdown,
    shipment_kpis,
    unique_values,
)


def _row(region, subdivision, store, shipped, to_ship, pct=None, writeoff=None, group="Обувь"):
    values = {
        "Регион": region,
        "Подразделение": subdivision,
        "Магазин": store,
        "Отгружено шт": shipped,
        "Всего к вывозу шт": to_ship,
    }
    if pct is not None:
        values["Отгружено товара %"] = pct
    if writeoff is not None:
        values["Вычерк по сборке %"] = writeoff
    return ShipmentRow(values=values, product_group=group, report_type="Неделя", source_file="f.xlsx")


def test_get_field_tolerates_header_spelling():
    row = {"Отгружено,шт": 5, "Всего к вывозу.  шт": 7, "Пусто": None}
    assert get_field(row, "Отгружено, шт") == 5
    assert get_field(row, "Всего к вывозу шт") == 7
    assert get_field(row, "Пусто") is None
    assert get_field(row, "Нет такого") is None


def test_get_number_defaults_to_zero():
    assert get_number({"a": "1 200"}, "a") == 1200.0
    assert get_number({}, "a") == 0.0


def test_unique_values_sorted_without_blanks():
    rows = [{"Регион": "СПБ"}, {"Регион": ""}, {"Регион": "БЕЛ"}, {"Регион": "СПБ"}, {}]
    assert unique_values(rows, "Регион") == ["БЕЛ", "СПБ"]


def test_filter_tracked_regions():
    rows = [_row("СПБ", "", "1", 0, 0), _row("Москва", "", "2", 0, 0), _row("БЕЛ", "", "3", 0, 0)]
    assert [r.store for r in filter_tracked_regions(rows)] == ["1", "3"]


def test_group_shipments_sorted_by_shipped():
    rows = [
        _row("СПБ", "СПБ-1", "101", 10, 20),
        _row("СПБ", "СПБ-2", "201", 50, 60),
        _row("СПБ", "СПБ-1", "102", 5, 10),
        _row("СПБ", "", "103", 1, 1),
    ]
    groups = group_shipments(rows, "Подразделение")
    assert [g.name for g in groups] == ["СПБ-2", "СПБ-1", "Неизвестно"]
    spb1 = groups[1]
    assert (spb1.shipped, spb1.to_ship, spb1.store_count) == (15, 30, 2)
    assert spb1.pct == 50.0


def test_group_by_product_group():
    rows = [_row("СПБ", "", "1", 1, 2, group="Кидс"), _row("СПБ", "", "2", 3, 4)]
    assert [g.name for g in group_shipments(rows, PRODUCT_GROUP)] == ["Обувь", "Кидс"]


def test_region_breakdown_prefers_total_rows():
    summary = [_row("СПБ", "СПБ-1", "101", 10, 20), _row("СПБ", "СПБ-1", "102", 10, 20)]
    totals = [_row("СПБ", "СПБ ИТОГО", "", 25, 50)]

    (spb,) = region_breakdown(summary, totals)
    assert spb.shipped == 25
    assert spb.store_count == 2

    (from_stores,) = region_breakdown(summary, [])
    assert from_stores.shipped == 20


def test_shipment_kpis():
    summary = [
        _row("СПБ", "СПБ-1", "101", 40, 50, pct=80.0, writeoff=2.0),
        _row("СПБ", "СПБ-1", "102", 30, 50, pct=60.0),
        _row("СПБ", "СПБ-2", "103", 0, 10, pct=0.0, writeoff=20.0),
        _row("Москва", "М-1", "900", 1, 100, pct=1.0),
    ]
    kpis = shipment_kpis(summary, [])

    assert kpis["total_shipped"] == 71
    assert kpis["total_to_ship"] == 210
    assert round(kpis["avg_pct"], 2) == 33.81
    # 102 is below 80%, 103 writes off more than 15%; 900 is outside the tracked regions
    assert kpis["problem_stores"] == 2
    assert kpis["stores_count"] == 3
    assert [g.name for g in kpis["by_subdivision"]] == ["СПБ-1", "СПБ-2"]
    assert kpis["total_received"] == 0


def test_shipment_kpis_empty():
    kpis = shipment_kpis([], [])
    assert kpis["avg_pct"] == 0.0
    assert kpis["by_region"] == []


def test_files_for_region_falls_back_to_all():
    spb = SalesFile(file_name="spb.xlsx", region="СПБ", period_type="ДЕНЬ")
    combined = SalesFile(file_name="all.xlsx", region="ALL", period_type="ДЕНЬ")
    assert files_for_region([spb, combined], "СПБ") == [spb]
    assert files_for_region([spb, combined], "БЕЛ") == [combined]
    assert files_for_region([spb], "БЕЛ") == []


def test_average_percentage():
    assert average_percentage([10.0, None, 20.0, 25.0]) == 18.33
    assert average_percentage([None]) is None
