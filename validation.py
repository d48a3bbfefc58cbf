"""Leitura e validação dos payloads JSON recebidos pela API."""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from flask import request

from errors import ValidationError
from formatting import quantize_money, to_decimal

# Limites das colunas Numeric(15, 2) e Integer dos modelos
MAX_AMOUNT = Decimal("9999999999999.99")
MAX_QUANTITY = 2**31 - 1


def get_json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Corpo da requisição deve ser um objeto JSON.")
    return data


def optional_text(data: dict, field: str) -> str | None:
    value = data.get(field)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def require_text(data: dict, field: str, message: str | None = None) -> str:
    value = optional_text(data, field)
    if not value:
        raise ValidationError(message or f"Campo obrigatório: {field}")
    return value


def parse_money(value, field: str, *, allow_zero: bool = False) -> Decimal:
    """Valor monetário com 2 casas; positivo (ou >= 0 com allow_zero)."""
    try:
        amount = to_decimal(value)
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Valor inválido para {field}")
    if not amount.is_finite():
        raise ValidationError(f"Valor inválido para {field}")
    if amount < 0 or (amount == 0 and not allow_zero):
        raise ValidationError(f"{field} deve ser maior que zero" if not allow_zero else f"{field} não pode ser negativo")
    if amount > MAX_AMOUNT:
        raise ValidationError(f"Valor muito alto para {field}")
    return quantize_money(amount)


def parse_non_negative_int(value, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Valor inválido para {field}")
    try:
        number = to_decimal(value)
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Valor inválido para {field}")
    if not number.is_finite() or number != number.to_integral_value():
        raise ValidationError(f"{field} deve ser um número inteiro")
    if number < 0:
        raise ValidationError(f"{field} não pode ser negativo")
    if number > MAX_QUANTITY:
        raise ValidationError(f"Valor muito alto para {field}")
    return int(number)


def parse_date(value, field: str) -> date:
    """Aceita 'YYYY-MM-DD' ou um datetime ISO; devolve a data."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        raise ValidationError(f"Campo obrigatório: {field}")
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        raise ValidationError(f"Data inválida para {field} (use AAAA-MM-DD)")


def check_amount(amount: Decimal, field: str) -> Decimal:
    """Valor derivado (ex.: quantidade x unitário) dentro do limite da coluna."""
    if amount > MAX_AMOUNT:
        raise ValidationError(f"Valor muito alto para {field}")
    return amount
