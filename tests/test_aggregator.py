from decimal import Decimal

from modulos.financeiro.aggregator import aggregate_ledger, sum_amounts


def test_empty_ledger_is_all_zero():
    summary = aggregate_ledger([])
    assert summary.total_credit == Decimal("0")
    assert summary.total_debit == Decimal("0")
    assert summary.balance == Decimal("0")


def test_credit_and_debit_scenario():
    summary = aggregate_ledger([
        {"tipo": "entrada", "valor": Decimal("100.00")},
        {"tipo": "saida", "valor": Decimal("40.00")},
    ])
    assert summary.to_dict() == {"totalEntradas": 100.0, "totalSaidas": 40.0, "saldo": 60.0}


def test_balance_may_be_negative():
    summary = aggregate_ledger([
        {"tipo": "entrada", "valor": "10.00"},
        {"tipo": "saida", "valor": "25.50"},
    ])
    assert summary.balance == Decimal("-15.50")


def test_unknown_kind_counts_as_debit():
    summary = aggregate_ledger([{"tipo": "estorno", "valor": 5}])
    assert summary.total_debit == Decimal("5.00")
    assert summary.total_credit == Decimal("0.00")


def test_many_small_amounts_do_not_drift():
    entries = [{"tipo": "entrada", "valor": 0.1} for _ in range(1000)]
    assert aggregate_ledger(entries).total_credit == Decimal("100.00")


def test_totals_are_non_negative_and_balance_matches():
    entries = [
        {"tipo": "entrada", "valor": "12.34"},
        {"tipo": "saida", "valor": "-3.21"},
        {"tipo": "entrada", "valor": 7},
        {"tipo": "saida", "valor": "0.99"},
    ]
    summary = aggregate_ledger(entries)
    assert summary.total_credit >= 0
    assert summary.total_debit >= 0
    assert summary.balance == summary.total_credit - summary.total_debit


def test_unparsable_amount_is_ignored():
    summary = aggregate_ledger([
        {"tipo": "entrada", "valor": None},
        {"tipo": "entrada", "valor": "abc"},
        {"tipo": "entrada", "valor": "1,50"},
    ])
    assert summary.total_credit == Decimal("1.50")


def test_sum_amounts_uses_field():
    records = [{"valor_total": Decimal("12.50")}, {"valor_total": Decimal("0.25")}]
    assert sum_amounts(records, "valor_total") == Decimal("12.75")
