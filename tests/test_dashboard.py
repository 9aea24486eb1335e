from aggregation import build_report
from dashboard import account_table, balance_trend, cat_spend, income_vs_expense_monthly


def test_account_table_formats_amounts(sample_frame):
    table = account_table(build_report(sample_frame))

    assert list(table.columns) == ["Cuenta", "Ingresos", "Gastos", "Saldo"]
    first = table.iloc[0]
    assert (first["Cuenta"], first["Ingresos"], first["Gastos"], first["Saldo"]) == (
        "Cuenta Corriente",
        "$ 3.500.000",
        "$ 250.000",
        "$ 3.250.000",
    )
    assert table.iloc[1]["Saldo"] == "-$ 1.200.000"


def test_charts_follow_report_data(sample_frame):
    report = build_report(sample_frame)

    pie = cat_spend(report)
    assert list(pie.data[0].labels) == ["Alimentación", "Transporte", "Mascotas"]
    assert list(pie.data[0].marker.colors) == ["#E76161", "#1A5F7A", "#9CA3AF"]

    bars = income_vs_expense_monthly(report)
    assert [trace.name for trace in bars.data] == ["Ingresos", "Gastos"]
    assert list(bars.data[0].x) == ["abr 2026", "may 2026", "jun 2026"]

    line = balance_trend(report)
    assert list(line.data[0].y) == report.balance_series["Balance"].tolist()
