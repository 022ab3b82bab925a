"""pt-BR display formatters for the dashboard payloads.

Every formatter returns "-" for missing values.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

_MONTHS = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)


def format_currency(value: Decimal | float | int | None) -> str:
    """Format as Brazilian real: 1234.5 -> "R$ 1.234,50"."""
    if value is None:
        return "-"
    d = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if d < 0 else ""
    formatted = f"{abs(d):,.2f}"
    # US: 1,234.50 -> BR: 1.234,50
    formatted = formatted.replace(",", "X").replace(".", ",").replace("X", ".")
    return f"{sign}R$ {formatted}"


def format_date(value: date | datetime | None) -> str:
    """Format as DD/MM/YYYY."""
    if value is None:
        return "-"
    return value.strftime("%d/%m/%Y")


def format_datetime(value: datetime | None) -> str:
    """Format as DD/MM/YYYY HH:MM."""
    if value is None:
        return "-"
    return value.strftime("%d/%m/%Y %H:%M")


def format_month(value: date | None) -> str:
    """Calendar header label: 2024-03-01 -> "Março 2024"."""
    if value is None:
        return "-"
    return f"{_MONTHS[value.month - 1].capitalize()} {value.year}"


def format_duration(minutes: int | None) -> str:
    """Format minutes as "45min", "1h" or "1h 30min"."""
    if minutes is None:
        return "-"
    if minutes < 60:
        return f"{minutes}min"
    hours, rest = divmod(minutes, 60)
    if rest == 0:
        return f"{hours}h"
    return f"{hours}h {rest}min"


def format_phone(value: str | None) -> str:
    """Format Brazilian phone numbers: 11987654321 -> "(11) 98765-4321"."""
    if not value:
        return "-"
    digits = re.sub(r"\D", "", value)
    if len(digits) == 11:
        return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"
    if len(digits) == 10:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"
    return value


def format_cpf(value: str | None) -> str:
    """12345678901 -> "123.456.789-01"."""
    if not value:
        return "-"
    digits = re.sub(r"\D", "", value)
    if len(digits) != 11:
        return value
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


def format_cnpj(value: str | None) -> str:
    """12345678000190 -> "12.345.678/0001-90"."""
    if not value:
        return "-"
    digits = re.sub(r"\D", "", value)
    if len(digits) != 14:
        return value
    return f"{digits[:2]}.{digits[2:5]}.{digits[5:8]}/{digits[8:12]}-{digits[12:]}"


def format_percentage(value: Decimal | float | None) -> str:
    """Format a 0-100 percentage: 12.5 -> "12,5%"."""
    if value is None:
        return "-"
    formatted = f"{float(value):.1f}".replace(".", ",")
    return f"{formatted}%"
