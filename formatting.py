"""Formatação de valores para JSON e relatórios (moeda pt-BR, datas locais)."""

from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from zoneinfo import ZoneInfo

CENTS = Decimal("0.01")

DEFAULT_TIMEZONE = "America/Sao_Paulo"


def to_decimal(value) -> Decimal:
    """Converte int/float/str/Decimal para Decimal sem passar por float binário."""
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        raise InvalidOperation(f"valor numérico inválido: {value!r}")
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
    return Decimal(str(value))


def quantize_money(value) -> Decimal:
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_currency(value) -> str:
    """1234.5 -> '1.234,50'"""
    amount = quantize_money(value)
    text = f"{abs(amount):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"-{text}" if amount < 0 else text


def format_brl(value) -> str:
    return f"R$ {format_currency(value)}"


def to_local(value: datetime, tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    # Datas gravadas sem fuso são UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(ZoneInfo(tz_name))


def format_date(value, tz_name: str = DEFAULT_TIMEZONE) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        value = to_local(value, tz_name)
    return value.strftime("%d/%m/%Y")


def format_datetime(value: datetime, tz_name: str = DEFAULT_TIMEZONE) -> str:
    if value is None:
        return ""
    return to_local(value, tz_name).strftime("%d/%m/%Y - %H:%M")


def local_today(tz_name: str = DEFAULT_TIMEZONE, now: datetime | None = None) -> date:
    now = now or datetime.now(timezone.utc)
    return to_local(now, tz_name).date()


def local_day_bounds(tz_name: str = DEFAULT_TIMEZONE, now: datetime | None = None) -> tuple[datetime, datetime]:
    """Meia-noite local de hoje e de amanhã, convertidas para UTC sem fuso."""
    tz = ZoneInfo(tz_name)
    today = local_today(tz_name, now)
    start = datetime.combine(today, time.min, tzinfo=tz)
    end = datetime.combine(today + timedelta(days=1), time.min, tzinfo=tz)
    return (
        start.astimezone(timezone.utc).replace(tzinfo=None),
        end.astimezone(timezone.utc).replace(tzinfo=None),
    )


def json_value(value):
    if isinstance(value, Decimal):
        return float(value.quantize(CENTS, rounding=ROUND_HALF_UP))
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def json_document(doc: dict, hidden: tuple = ("password_hash",)) -> dict:
    """Documento da store pronto para jsonify (Decimal -> número, datas ISO)."""
    return {key: json_value(value) for key, value in doc.items() if key not in hidden}
