"""End-to-end runs of the Streamlit script against an in-memory database."""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from streamlit.testing.v1 import AppTest

import database
import goal_webhook
from database import Base, Transaction
from goal_webhook import RemoteGoalPlan
from seed_db import seed_transactions

APP_PATH = str(Path(__file__).resolve().parent.parent / "app.py")


@pytest.fixture
def app_session(monkeypatch: pytest.MonkeyPatch):
    """Point the app at a private in-memory database and the local goal parser."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    monkeypatch.setattr(database, "SessionLocal", factory)
    monkeypatch.setattr(database, "init_db", lambda bind=None: None)
    monkeypatch.setattr(goal_webhook, "webhook_url", lambda: None)
    yield factory
    engine.dispose()


def _app() -> AppTest:
    return AppTest.from_file(APP_PATH, default_timeout=30)


def _open(at: AppTest, section: str) -> AppTest:
    at.run()
    at.sidebar.radio[0].set_value(section).run()
    return at


def _click(at: AppTest, label: str) -> AppTest:
    next(b for b in at.button if b.label == label).click().run()
    return at


def test_dashboard_on_empty_database_shows_info(app_session):
    at = _app().run()

    assert not at.exception
    assert [i.value for i in at.info] == ["Aún no hay transacciones registradas."]
    assert len(at.metric) == 0


def test_dashboard_shows_totals_for_seeded_data(app_session):
    db = app_session()
    seed_transactions(db)
    db.close()

    at = _app().run()

    assert not at.exception
    assert [m.value for m in at.metric] == ["$ 9.000.000", "$ 22.200.000", "$ 13.200.000"]


def test_submit_with_missing_fields_shows_error_and_stores_nothing(app_session):
    at = _open(_app(), "📝 Actividad")
    _click(at, "Registrar Transacción")

    assert not at.exception
    assert "Por favor completa todos los campos obligatorios." in [e.value for e in at.error]
    db = app_session()
    assert db.query(Transaction).count() == 0
    db.close()


def test_remote_goal_failure_shows_error_without_result(app_session, monkeypatch):
    monkeypatch.setattr(goal_webhook, "webhook_url", lambda: "https://hooks.example.test/goal")
    monkeypatch.setattr(goal_webhook, "fetch_goal_plan", lambda query: None)

    at = _open(_app(), "🎯 Metas")
    at.text_area(key="goal_query").input("Quiero ahorrar 50 millones en 3 años").run()
    _click(at, "Calcular Plan de Ahorro")

    assert not at.exception
    assert any("No se pudo procesar tu consulta" in e.value for e in at.error)
    assert len(at.metric) == 0


def test_remote_goal_plan_is_rendered(app_session, monkeypatch):
    plan = RemoteGoalPlan(
        monthly_amount=1388888.89,
        projected_date="18 de octubre de 2029",
        recommendations={"Vivienda": "Ahorra la cuota inicial"},
    )
    monkeypatch.setattr(goal_webhook, "webhook_url", lambda: "https://hooks.example.test/goal")
    monkeypatch.setattr(goal_webhook, "fetch_goal_plan", lambda query: plan)

    at = _open(_app(), "🎯 Metas")
    at.text_area(key="goal_query").input("Quiero ahorrar 50 millones en 3 años").run()
    _click(at, "Calcular Plan de Ahorro")

    assert not at.exception
    assert [m.value for m in at.metric] == ["$ 1.388.889", "18 de octubre de 2029"]
    assert any("Vivienda: Ahorra la cuota inicial" in md.value for md in at.markdown)


def test_local_goal_without_amount_shows_error(app_session):
    at = _open(_app(), "🎯 Metas")
    at.text_area(key="goal_query").input("Quiero ahorrar para un viaje").run()
    _click(at, "Calcular Plan de Ahorro")

    assert not at.exception
    assert any("No se pudo procesar tu consulta" in e.value for e in at.error)
