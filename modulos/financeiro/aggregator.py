"""
Agregação do fluxo de caixa.

Soma os lançamentos da tesouraria por tipo (``entrada`` = crédito, qualquer
outro = débito) em ``Decimal``, para não acumular erro de ponto flutuante
ao longo de muitos lançamentos. Não filtra por data: quem chama entrega os
lançamentos já selecionados.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, Mapping

from formatting import json_value, quantize_money, to_decimal

logger = logging.getLogger(__name__)

CREDIT_KIND = "entrada"
DEBIT_KIND = "saida"
LEDGER_KINDS = (CREDIT_KIND, DEBIT_KIND)


@dataclass(frozen=True)
class LedgerSummary:
    total_credit: Decimal
    total_debit: Decimal
    balance: Decimal

    def to_dict(self) -> dict:
        return {
            "totalEntradas": json_value(self.total_credit),
            "totalSaidas": json_value(self.total_debit),
            "saldo": json_value(self.balance),
        }


def _amount(record: Mapping, field: str) -> Decimal:
    try:
        value = to_decimal(record.get(field))
    except (InvalidOperation, ValueError):
        logger.warning("Valor ignorado no somatório (registro %s): %r", record.get("id"), record.get(field))
        return Decimal("0")
    return value if value.is_finite() else Decimal("0")


def sum_amounts(records: Iterable[Mapping], field: str = "valor") -> Decimal:
    """Soma decimal de um campo monetário, arredondada a 2 casas."""
    total = sum((_amount(record, field) for record in records), Decimal("0"))
    return quantize_money(total)


def aggregate_ledger(entries: Iterable[Mapping]) -> LedgerSummary:
    total_credit = Decimal("0")
    total_debit = Decimal("0")

    for entry in entries:
        # O sentido vem do tipo; o valor entra sempre em módulo
        amount = abs(_amount(entry, "valor"))
        if entry.get("tipo") == CREDIT_KIND:
            total_credit += amount
        else:
            total_debit += amount

    total_credit = quantize_money(total_credit)
    total_debit = quantize_money(total_debit)
    return LedgerSummary(
        total_credit=total_credit,
        total_debit=total_debit,
        balance=total_credit - total_debit,
    )
