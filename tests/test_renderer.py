import re
from datetime import datetime
from decimal import Decimal

import pytest

from modulos.relatorios.layouts import REPORTS
from modulos.relatorios.renderer import (
    FIRST_PAGE_CAPACITY,
    PAGE_CAPACITY,
    Column,
    ReportRenderer,
    SummaryField,
    fit_text,
    paginate_rows,
)

COLUMNS = [
    Column("descricao", "Descrição", 45, 300),
    Column("valor", "Valor (R$)", 445, 100, "right", color_key="_cor"),
]
SUMMARY = [SummaryField("Total:", "R$ 0,00"), SummaryField("Itens:", "0")]

PAGE_PATTERN = re.compile(rb"/Type /Page\b")


def _render(rows, summary=SUMMARY):
    renderer = ReportRenderer(compress=False)
    return renderer.render("RELATÓRIO", summary, rows, COLUMNS, "ITENS", "Nenhum item encontrado.").getvalue()


def test_empty_report_renders_placeholder():
    pdf = _render([])
    assert pdf.startswith(b"%PDF")
    assert b"Nenhum item encontrado." in pdf
    assert len(PAGE_PATTERN.findall(pdf)) == 1


def test_rows_beyond_first_page_flow_to_next_pages():
    rows = [{"descricao": f"Item {i}", "valor": "1,00", "_cor": "success"} for i in range(FIRST_PAGE_CAPACITY + 1)]
    pdf = _render(rows)
    assert len(PAGE_PATTERN.findall(pdf)) == 2
    assert b"Item 0" in pdf
    assert f"Item {FIRST_PAGE_CAPACITY}".encode() in pdf


def test_single_page_when_rows_fit():
    rows = [{"descricao": "Item", "valor": "1,00"} for _ in range(FIRST_PAGE_CAPACITY)]
    assert len(PAGE_PATTERN.findall(_render(rows))) == 1


def test_summary_must_have_two_to_four_fields():
    with pytest.raises(ValueError):
        _render([], summary=[SummaryField("Total:", "1")])
    with pytest.raises(ValueError):
        _render([], summary=[SummaryField(str(i), "1") for i in range(5)])


def test_column_outside_page_is_rejected():
    renderer = ReportRenderer(compress=False)
    with pytest.raises(ValueError):
        renderer.render("T", SUMMARY, [], [Column("a", "A", 500, 100)], "T", "vazio")


def test_missing_logo_is_skipped():
    renderer = ReportRenderer(logo_path="/caminho/inexistente/logo.png", compress=False)
    pdf = renderer.render("T", SUMMARY, [], COLUMNS, "T", "vazio").getvalue()
    assert pdf.startswith(b"%PDF")


def test_paginate_rows():
    assert paginate_rows([], 3, 5) == []
    assert paginate_rows(range(3), 3, 5) == [[0, 1, 2]]
    assert paginate_rows(range(10), 3, 5) == [[0, 1, 2], [3, 4, 5, 6, 7], [8, 9]]
    with pytest.raises(ValueError):
        paginate_rows([1], 0, 5)


def test_page_capacities_follow_geometry():
    assert FIRST_PAGE_CAPACITY == 29
    assert PAGE_CAPACITY == 37


def test_fit_text_truncates_with_ellipsis():
    assert fit_text("curto", 100) == "curto"
    truncated = fit_text("x" * 200, 50)
    assert truncated.endswith("...")
    assert len(truncated) < 200


def test_inventory_layout_groups_lots_by_product():
    records = [
        {"produto": "Caneta", "quantidade": 5, "valor_total": "12.50"},
        {"produto": "Papel", "quantidade": 2, "valor_total": "20.00"},
        {"produto": "Caneta", "quantidade": 3, "valor_total": "7.50"},
    ]
    fields, rows = REPORTS["estoque"].build(records, "America/Sao_Paulo")
    assert [row["produto"] for row in rows] == ["Caneta", "Papel"]
    assert rows[0]["quantidade"] == "8"
    assert rows[0]["valor_total"] == "20,00"
    assert [field.value for field in fields] == ["10", "2", "40,00"]


def test_ledger_layout_colors_by_kind():
    records = [
        {"tipo": "entrada", "valor": Decimal("100.00"), "descricao": "Venda", "data": datetime(2024, 1, 5, 15, 0)},
        {"tipo": "saida", "valor": Decimal("140.00"), "descricao": "Aluguel", "data": datetime(2024, 1, 6, 15, 0)},
    ]
    fields, rows = REPORTS["financeiro"].build(records, "America/Sao_Paulo")
    assert [row["_cor"] for row in rows] == ["success", "danger"]
    assert rows[0]["data"] == "05/01/2024 - 12:00"
    assert fields[2].value == "R$ -40,00"
    assert fields[2].color == "danger"
