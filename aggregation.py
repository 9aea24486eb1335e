# aggregation.py — report projections derived from one transaction snapshot

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

import pandas as pd

from formatting import format_day_label, format_month_label

CATEGORY_COLORS = {
    "Alimentación": "#E76161",
    "Transporte": "#1A5F7A",
    "Entretenimiento": "#159947",
    "Servicios": "#F39C12",
    "Otros": "#9B59B6",
}
DEFAULT_COLOR = "#9CA3AF"

CATEGORY_COLUMNS = ["Category", "Amount", "Color"]
MONTHLY_COLUMNS = ["Month", "Label", "Income", "Expense"]
BALANCE_COLUMNS = ["Date", "Label", "Balance"]
ACCOUNT_COLUMNS = ["Account", "Income", "Expense", "Balance"]


def _prep(df: pd.DataFrame) -> pd.DataFrame:
    """
    Adds the helper columns every projection needs.
    """
    df = df.copy()
    df["Date"] = pd.to_datetime(df["Date"])
    df["Amount"] = df["Amount"].astype(float)

    is_income = df["Kind"] == "income"
    df["Income"] = df["Amount"].where(is_income, 0.0)
    df["Expense"] = df["Amount"].where(df["Kind"] == "expense", 0.0)
    df["Signed"] = df["Amount"].where(is_income, -df["Amount"])
    return df


def category_totals(df: pd.DataFrame) -> pd.DataFrame:
    """
    Expense amount per category, in order of first appearance, with a display color.
    """
    if df.empty:
        return pd.DataFrame(columns=CATEGORY_COLUMNS)

    expenses = df[df["Kind"] == "expense"]
    if expenses.empty:
        return pd.DataFrame(columns=CATEGORY_COLUMNS)

    by_cat = expenses.groupby("Category", sort=False)["Amount"].sum().astype(float).reset_index()
    by_cat["Color"] = by_cat["Category"].map(lambda c: CATEGORY_COLORS.get(c, DEFAULT_COLOR))
    return by_cat[CATEGORY_COLUMNS]


def monthly_totals(df: pd.DataFrame) -> pd.DataFrame:
    """
    Income and expense sums per calendar month, oldest month first.

    Buckets are (year, month) periods so the same month of different years
    never merges.
    """
    if df.empty:
        return pd.DataFrame(columns=MONTHLY_COLUMNS)

    df = _prep(df)
    df["Month"] = df["Date"].dt.to_period("M")
    monthly = df.groupby("Month", sort=True)[["Income", "Expense"]].sum().reset_index()
    monthly["Label"] = monthly["Month"].map(format_month_label)
    return monthly[MONTHLY_COLUMNS]


def balance_series(df: pd.DataFrame) -> pd.DataFrame:
    """
    Running balance from zero, one point per transaction in date order.

    Transactions on the same date keep their incoming relative order.
    """
    if df.empty:
        return pd.DataFrame(columns=BALANCE_COLUMNS)

    df = _prep(df).sort_values("Date", kind="mergesort")
    series = pd.DataFrame({
        "Date": df["Date"],
        "Label": df["Date"].map(format_day_label),
        "Balance": df["Signed"].cumsum(),
    })
    return series.reset_index(drop=True)


def account_summaries(df: pd.DataFrame) -> pd.DataFrame:
    """
    Income, expense and net balance per account, in order of first appearance.
    """
    if df.empty:
        return pd.DataFrame(columns=ACCOUNT_COLUMNS)

    df = _prep(df)
    summary = df.groupby("Account", sort=False).agg(
        Income=("Income", "sum"),
        Expense=("Expense", "sum"),
        Balance=("Signed", "sum"),
    ).reset_index()
    return summary[ACCOUNT_COLUMNS]


def grand_totals(summaries: pd.DataFrame) -> Dict[str, float]:
    """Sum the account summaries into overall income, expense and balance."""
    if summaries.empty:
        return {"income": 0.0, "expense": 0.0, "balance": 0.0}
    return {
        "income": float(summaries["Income"].sum()),
        "expense": float(summaries["Expense"].sum()),
        "balance": float(summaries["Balance"].sum()),
    }


@dataclass(frozen=True)
class DashboardReport:
    category_totals: pd.DataFrame
    monthly_totals: pd.DataFrame
    balance_series: pd.DataFrame
    account_summaries: pd.DataFrame
    totals: Dict[str, float] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.account_summaries.empty


def build_report(df: pd.DataFrame) -> DashboardReport:
    """Derive every dashboard projection from the same snapshot."""
    accounts = account_summaries(df)
    return DashboardReport(
        category_totals=category_totals(df),
        monthly_totals=monthly_totals(df),
        balance_series=balance_series(df),
        account_summaries=accounts,
        totals=grand_totals(accounts),
    )
