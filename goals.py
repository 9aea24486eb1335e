"""Savings-goal estimator that reads a free-text request.

The text is scanned with regular expressions for a target amount ("50
millones", "1.500.000") and a term ("18 meses", "3 años"). The required
monthly saving is a straight division; the target date uses a fixed
30-day month, which is close enough for a planning estimate.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from formatting import format_long_date

DEFAULT_TERM_MONTHS = 12
DAYS_PER_MONTH = 30

_MILLIONS = re.compile(r"(\d+(?:[.,]\d+)?)\s*(?:millones|mill[oó]n|millions?|m)\b", re.IGNORECASE)
_THOUSANDS = re.compile(r"(\d{1,3}(?:[.,]\d{3})+)")
_TERM = re.compile(r"(\d+)\s*(meses|mes|months?|años|año|anos|ano|years?)\b", re.IGNORECASE)
_YEAR_UNITS = {"años", "año", "anos", "ano", "year", "years"}

EXAMPLE_QUERIES = [
    "Quiero ahorrar 50 millones para comprar una casa en 3 años",
    "Necesito 20 millones para un carro en 18 meses",
    "Quiero ahorrar 5 millones para vacaciones en 8 meses",
    "Meta: 100 millones para inversión en 5 años",
]

TIER_RECOMMENDATIONS = {
    "high": [
        "Considera reducir gastos en entretenimiento y restaurantes",
        "Busca ingresos adicionales o un trabajo de medio tiempo",
        "Revisa suscripciones y servicios que no uses frecuentemente",
    ],
    "medium": [
        "Reduce gastos en compras no esenciales",
        "Utiliza cupones y ofertas para las compras necesarias",
        "Considera cocinar más en casa en lugar de comer fuera",
    ],
    "low": [
        "Establece un presupuesto mensual y síguelo estrictamente",
        "Automatiza tu ahorro para que sea más fácil cumplir la meta",
        "Busca formas de aumentar tus ingresos gradualmente",
    ],
}

# First matching goal type wins.
GOAL_TYPE_RECOMMENDATIONS = [
    (
        ("casa", "vivienda", "apartamento", "house", "home"),
        [
            "Investiga opciones de crédito hipotecario para complementar tu ahorro",
            "Considera ahorrar primero para la cuota inicial (30% del valor)",
        ],
    ),
    (
        ("carro", "vehículo", "vehiculo", "moto", "vehicle"),
        [
            "Evalúa opciones de crédito vehicular con tasas preferenciales",
            "Considera vehículos usados en buen estado para reducir el costo",
        ],
    ),
    (
        ("viaje", "vacaciones", "travel", "trip", "vacation"),
        [
            "Busca ofertas y promociones de temporada baja",
            "Considera destinos locales para reducir costos de transporte",
        ],
    ),
]


@dataclass
class GoalEstimate:
    monthly_savings: float
    target_date: datetime
    target_date_label: str
    goal_amount: float
    term_months: int
    recommendations: List[str] = field(default_factory=list)


def _to_float(number: str) -> float:
    return float(number.replace(",", "."))


def extract_amount(text: str) -> float:
    """Target amount in pesos, or 0 when none is found."""
    match = _MILLIONS.search(text)
    if match:
        return _to_float(match.group(1)) * 1_000_000

    match = _THOUSANDS.search(text)
    if match:
        return float(re.sub(r"[.,]", "", match.group(1)))
    return 0.0


def extract_term_months(text: str) -> int:
    """Term in months; years are converted, default is twelve months."""
    match = _TERM.search(text)
    if not match:
        return DEFAULT_TERM_MONTHS
    number = int(match.group(1))
    if match.group(2).lower() in _YEAR_UNITS:
        number *= 12
    # A zero term would make the monthly figure meaningless.
    return max(number, 1)


def recommendations_for(monthly_savings: float, text: str) -> List[str]:
    if monthly_savings > 1_000_000:
        tips = list(TIER_RECOMMENDATIONS["high"])
    elif monthly_savings > 500_000:
        tips = list(TIER_RECOMMENDATIONS["medium"])
    else:
        tips = list(TIER_RECOMMENDATIONS["low"])

    lowered = text.lower()
    for keywords, extra in GOAL_TYPE_RECOMMENDATIONS:
        if any(k in lowered for k in keywords):
            tips.extend(extra)
            break
    return tips


def estimate_goal(text: str, now: Optional[datetime] = None) -> Optional[GoalEstimate]:
    """Build a savings plan from ``text``; ``None`` when no amount is recognised."""
    goal_amount = extract_amount(text)
    if goal_amount <= 0:
        return None

    term_months = extract_term_months(text)
    monthly_savings = goal_amount / term_months
    target_date = (now or datetime.now()) + timedelta(days=term_months * DAYS_PER_MONTH)

    return GoalEstimate(
        monthly_savings=monthly_savings,
        target_date=target_date,
        target_date_label=format_long_date(target_date),
        goal_amount=goal_amount,
        term_months=term_months,
        recommendations=recommendations_for(monthly_savings, text),
    )
