"""Shared fixtures: an in-memory database and a sample transaction frame."""

from __future__ import annotations

from datetime import date

import pandas as pd
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base
from transactions import COLUMNS


@pytest.fixture
def db_session():
    """A fresh SQLite database per test, never the configured DATABASE_URL."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


def make_frame(rows: list[tuple]) -> pd.DataFrame:
    """Build an in-memory transaction frame from (kind, category, account, date, amount) tuples."""
    data = [
        {
            "ID": i + 1,
            "Kind": kind,
            "Description": f"{kind} {i + 1}",
            "Category": category,
            "Account": account,
            "Date": pd.Timestamp(when),
            "Amount": float(amount),
            "PaymentMethod": "Efectivo",
            "Notes": None,
            "Receipt": None,
        }
        for i, (kind, category, account, when, amount) in enumerate(rows)
    ]
    return pd.DataFrame(data, columns=COLUMNS)


@pytest.fixture
def sample_frame() -> pd.DataFrame:
    return make_frame([
        ("income", "Salario", "Cuenta Corriente", date(2026, 5, 1), 3_500_000),
        ("expense", "Alimentación", "Tarjeta de Crédito", date(2026, 5, 8), 800_000),
        ("expense", "Transporte", "Tarjeta de Crédito", date(2026, 4, 12), 400_000),
        ("expense", "Mascotas", "Efectivo", date(2026, 6, 3), 150_000),
        ("income", "Intereses", "Cuenta de Ahorros", date(2026, 6, 2), 200_000),
        ("expense", "Alimentación", "Cuenta Corriente", date(2026, 6, 9), 250_000),
    ])
