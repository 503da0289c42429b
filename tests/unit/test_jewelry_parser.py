from __future__ import annotations

import pytest

from report_ingest.models.jewelry import JewelryItogiFile, UnexposedFile
from report_ingest.parsers import jewelry
from report_ingest.parsers.common import REGION_SPB


@pytest.mark.parametrize(
    "name, kind",
    [
        ("Итоги ЮИ СПБ.xlsx", jewelry.KIND_ITOGI),
        ("Ювелирка.xlsx", jewelry.KIND_ITOGI),
        ("Невыставленные ЮИ.xlsx", jewelry.KIND_UNEXPOSED),
        ("невыставленный товар.xlsx", jewelry.KIND_UNEXPOSED),
        ("Итоги невыставленные ювелирка.xlsx", jewelry.KIND_UNEXPOSED),
        ("Прочее.xlsx", None),
    ],
)
def test_detect_kind(name, kind):
    assert jewelry.detect_kind(name) == kind


def test_itogi_current_layout_aggregates_subdivisions(build_workbook):
    wb = build_workbook({
        "OUT": [
            ["Период отчета: 01.03.2024 - 07.03.2024", None, None, None, None, None],
            ["Регион", "Подразделение", "Магазин", "Кол-во арт.", "% невыставленного", "Дата"],
            ["СПБ", "СПБ-1", "101", 10, 0.1, 45366],
            ["СПБ", "СПБ-1", "102", 20, 0.3, 45367],
            [None, None, None, None, None, None],
            ["СПБ", "СПБ-2", "201", 5, None, None],
        ],
    })

    result = jewelry.parse(wb, "Итоги ЮИ.xlsx")

    assert isinstance(result, JewelryItogiFile)
    assert result.legacy_layout is False
    assert result.period == "01.03.2024 - 07.03.2024"
    assert result.region == REGION_SPB
    assert [s.store for s in result.stores] == ["101", "102", "201"]
    assert result.stores[0].last_scan == "15.03.2024"

    first, second = result.subdivisions
    assert (first.subdivision, first.article_count, first.unexposed_pct) == ("СПБ-1", 30, 20.0)
    assert first.last_scan == "15.03.2024"
    assert second.unexposed_pct is None


def test_itogi_legacy_layout(build_workbook):
    wb = build_workbook({
        "OUT": [
            ["Период отчета: март", None, None, None, None, None],
            ["Регион", "Подразделение", "Кол-во арт.", "%", "Дата", None],
            ["СПБ", "СПБ-1", 30, 0.2, 45366, None],
            ["СПБ", "СПБ-2", 5, 0.0, None, None],
            [None, None, None, None, None, None],
            ["Регион", "Подразделение", "Магазин", "Кол-во арт.", "%", "Дата"],
            ["СПБ", "СПБ-1", "101", 10, 0.1, 45366],
        ],
    })

    result = jewelry.parse(wb, "Итоги ЮИ.xlsx")

    assert result.legacy_layout is True
    assert [s.subdivision for s in result.subdivisions] == ["СПБ-1", "СПБ-2"]
    assert result.subdivisions[0].unexposed_pct == 20.0
    assert [s.store for s in result.stores] == ["101"]


def test_unexposed_report(build_workbook):
    wb = build_workbook({
        "Итог по магазину": [
            ["Регион", "Подразделение", "Магазин", "ТЦ", "Запасы", "Клики", "Невыставлено"],
            ["СПБ", "СПБ-1", "101", "ТЦ", 100, 40, 7],
            [None, None, None, None, None, None, None],
        ],
        "OUT": [
            ["Период отчета: 15.03.2024", None, None, None, None, None, None, None, None],
            ["Регион", "Подразделение", "Магазин", "ТЦ", "Группа", "Артикул", "Наименование", "Ячейка", "Фото"],
            ["СПБ", "СПБ-1", "101", "ТЦ", "Золото 585", 123456.0, "Кольцо", "A1", "http://x/1.jpg"],
            ["СПБ", "СПБ-1", "101", "ТЦ", "Серебро", "A-7", "Серьги", None, None],
        ],
    })

    result = jewelry.parse(wb, "Невыставленные ЮИ СПБ.xlsx")

    assert isinstance(result, UnexposedFile)
    assert result.period == "15.03.2024"
    assert len(result.summary) == 1
    assert result.summary[0].unexposed_qty == 7
    assert [d.is_gold for d in result.detail] == [True, False]
    assert result.detail[0].article == "123456"
    assert result.detail[1].cell == ""


def test_unexposed_needs_both_sheets(build_workbook):
    wb = build_workbook({"OUT": [["x"]]})
    assert jewelry.parse(wb, "Невыставленные ЮИ.xlsx") is None


def test_itogi_without_out_sheet(build_workbook):
    assert jewelry.parse(build_workbook({"Лист1": [["x"]]}), "Итоги ЮИ.xlsx") is None
