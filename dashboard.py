# dashboard.py — KPI cards, charts and account table for the Dashboard section

import streamlit as st
import plotly.express as px
import plotly.graph_objects as go
import pandas as pd

from aggregation import DashboardReport
from formatting import format_currency

INCOME_COLOR = "#159947"
EXPENSE_COLOR = "#E76161"
BALANCE_COLOR = "#1A5F7A"


def _kpis(report: DashboardReport):
    """
    Displays total balance, income and expenses as metric cards.
    """
    totals = report.totals
    col1, col2, col3 = st.columns(3)
    col1.metric("💰 Saldo Total", format_currency(totals.get("balance", 0.0)))
    col2.metric("📈 Ingresos", format_currency(totals.get("income", 0.0)))
    col3.metric("📉 Gastos", format_currency(totals.get("expense", 0.0)))


def cat_spend(report: DashboardReport):
    """
    Donut chart of spending by category, one fixed color per category.
    """
    by_cat = report.category_totals
    fig = go.Figure(go.Pie(
        labels=by_cat["Category"],
        values=by_cat["Amount"],
        hole=0.4,
        marker=dict(colors=by_cat["Color"]),
        sort=False,
    ))
    fig.update_layout(title="Gastos por Categoría")
    fig.update_traces(
        textposition="inside",
        textinfo="percent+label",
        customdata=[format_currency(v) for v in by_cat["Amount"]],
        hovertemplate="%{label}: %{customdata}<extra></extra>",
    )
    return fig


def income_vs_expense_monthly(report: DashboardReport):
    """
    Bar chart of Income vs Expenses per month.
    """
    monthly = report.monthly_totals

    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=monthly["Label"], y=monthly["Income"], name="Ingresos", marker_color=INCOME_COLOR,
        customdata=[format_currency(v) for v in monthly["Income"]],
        hovertemplate="Ingresos: %{customdata}<extra></extra>",
    ))
    fig.add_trace(go.Bar(
        x=monthly["Label"], y=monthly["Expense"], name="Gastos", marker_color=EXPENSE_COLOR,
        customdata=[format_currency(v) for v in monthly["Expense"]],
        hovertemplate="Gastos: %{customdata}<extra></extra>",
    ))

    fig.update_layout(barmode="group", title="Ingresos vs Gastos Mensuales", height=400)
    fig.update_yaxes(tickprefix="$", tickformat="~s")
    return fig


def balance_trend(report: DashboardReport):
    """
    Line chart of the running balance, one point per transaction.
    """
    series = report.balance_series
    fig = px.line(series, x="Date", y="Balance", markers=True, title="Evolución del Saldo")
    fig.update_traces(
        line=dict(color=BALANCE_COLOR, width=3),
        customdata=list(zip(series["Label"], [format_currency(v) for v in series["Balance"]])),
        hovertemplate="%{customdata[0]}: %{customdata[1]}<extra></extra>",
    )
    fig.update_layout(height=350)
    fig.update_yaxes(tickprefix="$", tickformat="~s")
    return fig


def account_table(report: DashboardReport) -> pd.DataFrame:
    """
    Per-account breakdown with amounts already formatted for display.
    """
    summaries = report.account_summaries
    return pd.DataFrame({
        "Cuenta": summaries["Account"],
        "Ingresos": summaries["Income"].map(format_currency),
        "Gastos": summaries["Expense"].map(format_currency),
        "Saldo": summaries["Balance"].map(format_currency),
    })


def render_dashboard(report: DashboardReport):
    """
    Renders the whole Dashboard section from one report.
    """
    if report.is_empty:
        st.info("Aún no hay transacciones registradas.")
        return

    _kpis(report)

    col1, col2 = st.columns(2)
    with col1:
        if report.category_totals.empty:
            st.info("No hay gastos para mostrar por categoría.")
        else:
            st.plotly_chart(cat_spend(report), use_container_width=True)
    with col2:
        st.plotly_chart(income_vs_expense_monthly(report), use_container_width=True)

    st.plotly_chart(balance_trend(report), use_container_width=True)

    st.subheader("Desglose por Cuenta")
    st.dataframe(account_table(report), use_container_width=True, hide_index=True)
