from __future__ import annotations

from report_ingest.parsers import shipment
from report_ingest.parsers.common import REGION_ALL, REGION_SPB

HEADER = ["Регион", "Подразделение", "Магазин", "Отгружено, шт", "Всего к вывозу шт", "Отгружено товара %"]


def _summary_rows():
    return [
        ["Отчет ДР", None, None, None, None, None],
        ["01.03.2024 - 07.03.2024", None, None, None, None, None],
        HEADER,
        ["СПБ", "СПБ-1", "Магазин 101", 40, 50, 0.8],
        [None, None, None, None, None, None],
        ["СПБ", "СПБ ИТОГО", None, 40, 50, 0.8],
        HEADER,
        ["СПБ", "СПБ-2", "Магазин 201", 10, 20, "50%"],
        ["ИТОГО", None, None, 50, 70, 0.71],
        ["Kari", None, "Kari", 50, 70, 0.71],
    ]


def test_detect_tags_from_file_name():
    assert shipment.detect_product_group("Отчет ДР Кидс Неделя.xlsx") == "Кидс"
    assert shipment.detect_product_group("Отчет ДР Неделя.xlsx") == "Обувь"
    assert shipment.detect_report_type("Отчет ДР Кидс Неделя.xlsx") == "Неделя"
    assert shipment.detect_report_type("Отчет ДР Март.xlsx") == "Месяц"


def test_is_pct_column():
    assert shipment.is_pct_column("Отгружено товара %")
    assert shipment.is_pct_column("Вычерк по сборке, %")
    assert not shipment.is_pct_column("Отгружено шт")


def test_parse_summary_stores_totals_and_meta(build_workbook):
    wb = build_workbook({"Отчет": _summary_rows()})

    result = shipment.parse(wb, "Отчет ДР Неделя.xlsx")

    assert result.title == "Отчет ДР"
    assert result.period == "01.03.2024 - 07.03.2024"
    assert result.product_group == "Обувь"
    assert result.report_type == "Неделя"
    assert result.region == REGION_SPB

    assert [r.store for r in result.summary] == ["Магазин 101", "Магазин 201"]
    first = result.summary[0]
    assert first.get("Отгружено, шт") == 40
    assert first.get("Отгружено товара %") == 80.0
    assert result.summary[1].get("Отгружено товара %") == 50.0
    assert first.source_file == "Отчет ДР Неделя.xlsx"

    assert len(result.region_totals) == 1
    assert result.region_totals[0].region == "СПБ"
    assert result.region_totals[0].get("Всего к вывозу шт") == 50


def test_parse_detail_formats_dates(build_workbook):
    wb = build_workbook({
        "Детализация": [
            ["Регион", "Подразделение", "Магазин", "Дата создания"],
            ["СПБ", "СПБ-1", "Магазин 101", 45366],
            [None, None, None, None],
            ["Регион", "Подразделение", "Магазин", "Дата создания"],
            ["СПБ", "СПБ-1", "Магазин 102", "-"],
        ],
    })

    result = shipment.parse(wb, "Отчет ДР Месяц.xlsx")

    assert result.summary == []
    assert [r.get("Дата создания") for r in result.detail] == ["15.03.2024", "—"]
    assert result.region == REGION_ALL


def test_variant_sheets_tagged_with_group(build_workbook):
    wb = build_workbook({
        "Отчет": [["t"], ["p"], HEADER, ["СПБ", "СПБ-1", "Магазин 101", 1, 2, 0.5]],
        "Одежда для детей Отчет": [["t"], ["p"], HEADER, ["СПБ", "СПБ-1", "Магазин 101", 3, 4, 0.75]],
        "Одежда для детей Детализация": [HEADER[:3], ["СПБ", "СПБ-1", "Магазин 101"]],
    })

    result = shipment.parse(wb, "Отчет ДР Неделя.xlsx")

    assert [r.product_group for r in result.summary] == ["Обувь", "Одежда для детей"]
    assert [r.product_group for r in result.detail] == ["Одежда для детей"]
    # title/period come from the base sheet
    assert result.title == "t"


def test_parse_without_report_sheets_returns_none(build_workbook):
    assert shipment.parse(build_workbook({"Лист1": [["x"]]}), "Отчет ДР.xlsx") is None
