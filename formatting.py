"""Currency and date formatting for the es-CO locale (Colombian pesos)."""

from __future__ import annotations

from datetime import date, datetime

import pandas as pd

MONTH_NAMES = [
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
]
MONTH_ABBR = ["ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic"]


def _group_thousands(text: str) -> str:
    # "1,234,567.89" -> "1.234.567,89"
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_currency(value: float, decimals: int = 0) -> str:
    """Format an amount as COP, e.g. ``1388888.89`` -> ``"$ 1.388.889"``."""
    value = float(value)
    sign = "-" if round(value, decimals) < 0 else ""
    return f"{sign}$ {_group_thousands(f'{abs(value):,.{decimals}f}')}"


def _as_date(value: date | datetime | pd.Timestamp) -> date:
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    return value


def format_long_date(value: date | datetime | pd.Timestamp) -> str:
    d = _as_date(value)
    return f"{d.day} de {MONTH_NAMES[d.month - 1]} de {d.year}"


def format_short_date(value: date | datetime | pd.Timestamp) -> str:
    return _as_date(value).strftime("%d/%m/%Y")


def format_day_label(value: date | datetime | pd.Timestamp) -> str:
    d = _as_date(value)
    return f"{d.day} {MONTH_ABBR[d.month - 1]}"


def format_month_label(period: pd.Period) -> str:
    return f"{MONTH_ABBR[period.month - 1]} {period.year}"
