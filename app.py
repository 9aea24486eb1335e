import streamlit as st
import pandas as pd
from pathlib import Path
import sys
from datetime import date

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

# Add current directory to path
sys.path.append(str(Path(__file__).parent))

from database import SessionLocal, init_db
from logging_setup import configure_logging, get_logger
from transactions import (
    COLUMNS,
    DEFAULT_ACCOUNTS,
    DEFAULT_CATEGORIES,
    KIND_LABELS,
    PAYMENT_METHODS,
    TransactionIn,
    add_transaction,
    fetch_recent_transactions,
    fetch_transactions,
    import_transactions,
    parse_statement_csv,
)
from aggregation import build_report
from dashboard import render_dashboard
from goals import EXAMPLE_QUERIES, GoalEstimate, estimate_goal
from goal_webhook import RemoteGoalPlan, fetch_goal_plan, recommendation_lines, webhook_url
from storage import load_file, original_name, save_file, unique_name
from formatting import format_currency, format_short_date

# --- Configuration ---
st.set_page_config(page_title="Dashboard Financiero", layout="wide", page_icon="💰")
configure_logging()
_logger = get_logger("finance_dashboard.app")

# --- Database Session ---
init_db()

if "db" not in st.session_state:
    st.session_state.db = SessionLocal()

def get_db():
    return st.session_state.db

FORM_KEYS = ["txn_kind", "txn_description", "txn_category", "txn_new_category", "txn_account",
             "txn_date", "txn_amount", "txn_payment", "txn_notes", "txn_receipt"]

def flash(message: str, icon: str = "✅"):
    """Queue a notification that survives the next rerun."""
    st.session_state["flash"] = (message, icon)

def show_flash():
    pending = st.session_state.pop("flash", None)
    if pending:
        st.toast(pending[0], icon=pending[1])

def notify_error(message: str):
    st.toast(message, icon="❌")
    st.error(message)

# --- Data Loading ---
def load_data(fetch=fetch_transactions) -> pd.DataFrame:
    db = get_db()
    try:
        return fetch(db)
    except SQLAlchemyError:
        _logger.exception("Could not load transactions")
        db.rollback()
        st.toast("No se pudieron cargar las transacciones.", icon="⚠️")
        return pd.DataFrame(columns=COLUMNS)

# --- Sections ---
def dashboard_section():
    st.title("📊 Dashboard Financiero")
    # One snapshot feeds every chart on the page.
    df = load_data()
    render_dashboard(build_report(df))


def _reset_form():
    for key in FORM_KEYS:
        st.session_state.pop(key, None)


def _store_receipt(upload):
    if upload is None:
        return None
    stored = unique_name(upload.name)
    if save_file(stored, upload.getvalue()):
        return stored
    st.toast("No se pudo guardar el recibo; la transacción se registrará sin él.", icon="⚠️")
    return None


def _submit_transaction(new_category_mode: bool):
    state = st.session_state
    category = state.get("txn_new_category") if new_category_mode else state.get("txn_category")
    try:
        txn = TransactionIn(
            kind=state.get("txn_kind"),
            description=state.get("txn_description") or "",
            category=category or "",
            account=state.get("txn_account") or "",
            date=state.get("txn_date") or date.today(),
            amount=state.get("txn_amount") or 0,
            payment_method=state.get("txn_payment") or "",
            notes=state.get("txn_notes") or None,
        )
    except ValidationError:
        notify_error("Por favor completa todos los campos obligatorios.")
        return

    txn = txn.model_copy(update={"receipt": _store_receipt(state.get("txn_receipt"))})
    try:
        add_transaction(get_db(), txn)
    except SQLAlchemyError:
        _logger.exception("Could not store transaction")
        notify_error("No se pudo guardar la transacción. Intenta de nuevo.")
        return

    flash(f"{KIND_LABELS[txn.kind]} de {format_currency(txn.amount)} registrado exitosamente.")
    _reset_form()
    st.rerun()


def _csv_import():
    uploaded = st.file_uploader("Importar CSV", type=["csv"], help="Exporta el extracto de tu banco en CSV")
    if uploaded is not None and st.button("Importar transacciones"):
        try:
            rows = parse_statement_csv(uploaded)
        except (ValueError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            _logger.warning("CSV import rejected: %s", e)
            notify_error(f"No se pudo leer el archivo: {e}")
            return
        if not rows:
            st.toast("El archivo no contiene transacciones válidas.", icon="⚠️")
            return
        try:
            count = import_transactions(get_db(), rows)
        except SQLAlchemyError:
            _logger.exception("CSV import failed")
            notify_error("No se pudieron importar las transacciones.")
            return
        flash(f"Se importaron {count} transacciones nuevas.")
        st.rerun()


def _recent_list():
    recent = load_data(fetch_recent_transactions)
    if recent.empty:
        return
    st.subheader("Transacciones Recientes")
    for _, t in recent.iterrows():
        is_income = t["Kind"] == "income"
        color = "green" if is_income else "red"
        sign = "+" if is_income else "-"
        col_a, col_b = st.columns([4, 1])
        col_a.markdown(
            f":{color}[**{KIND_LABELS.get(t['Kind'], t['Kind'])}**] **{t['Description']}**  \n"
            f"{t['Category']} • {t['Account']} • {format_short_date(t['Date'])}"
        )
        col_b.markdown(f":{color}[**{sign}{format_currency(t['Amount'])}**]")
        if t["Receipt"]:
            data = load_file(t["Receipt"])
            if data is not None:
                col_a.download_button("Ver recibo", data=data, file_name=original_name(t["Receipt"]), key=f"receipt_{t['ID']}")


def activity_section():
    st.title("📝 Seguimiento de Actividad")

    with st.expander("📄 Importar CSV"):
        _csv_import()

    st.subheader("Registrar Nueva Transacción")
    new_category_mode = st.checkbox("➕ Crear una categoría nueva", key="txn_new_category_mode")

    with st.form("add_transaction"):
        col1, col2 = st.columns(2)
        col1.selectbox("Tipo de Transacción *", ["expense", "income"],
                       format_func=lambda k: KIND_LABELS[k], key="txn_kind")
        col2.text_input("Descripción *", placeholder="Ej: Compra en supermercado", key="txn_description")

        col3, col4 = st.columns(2)
        if new_category_mode:
            col3.text_input("Categoría *", placeholder="Nueva categoría", key="txn_new_category")
        else:
            col3.selectbox("Categoría *", DEFAULT_CATEGORIES, index=None,
                           placeholder="Selecciona una categoría", key="txn_category")
        col4.selectbox("Cuenta *", DEFAULT_ACCOUNTS, index=None,
                       placeholder="Selecciona una cuenta", key="txn_account")

        col5, col6 = st.columns(2)
        col5.date_input("Fecha *", value=date.today(), format="DD/MM/YYYY", key="txn_date")
        col6.number_input("Monto (COP) *", min_value=0.0, step=1000.0, format="%.0f", key="txn_amount")

        st.selectbox("Método de Pago *", PAYMENT_METHODS, index=None,
                     placeholder="Selecciona método de pago", key="txn_payment")
        st.text_area("Notas (Opcional)", placeholder="Notas adicionales sobre la transacción...", key="txn_notes")
        st.file_uploader("Recibo (Opcional)", type=["png", "jpg", "jpeg", "pdf"], key="txn_receipt")

        if st.form_submit_button("Registrar Transacción"):
            _submit_transaction(new_category_mode)

    _recent_list()


def _use_example(text: str):
    st.session_state["goal_query"] = text


def _render_local_goal(result: GoalEstimate):
    col1, col2, col3 = st.columns(3)
    col1.metric("🎯 Ahorro Mensual Requerido", format_currency(result.monthly_savings))
    col1.caption(f"Para alcanzar tu meta de {format_currency(result.goal_amount)}")
    col2.metric("📅 Fecha Proyectada", result.target_date_label)
    col2.caption(f"En {result.term_months} meses alcanzarás tu meta")
    col3.metric("🏁 Meta Total", format_currency(result.goal_amount))
    col3.caption("Objetivo de ahorro establecido")

    st.subheader("Recomendaciones para Reducir Gastos")
    for i, tip in enumerate(result.recommendations, start=1):
        st.markdown(f"**{i}.** {tip}")
    st.info(
        "💡 Considera automatizar tu ahorro configurando una transferencia automática mensual "
        f"de {format_currency(result.monthly_savings)} a una cuenta de ahorros separada."
    )


def _render_remote_goal(plan: RemoteGoalPlan):
    monthly = plan.monthly_amount
    col1, col2 = st.columns(2)
    col1.metric("🎯 Ahorro Mensual Requerido",
                format_currency(monthly) if isinstance(monthly, (int, float)) else str(monthly))
    col2.metric("📅 Fecha Proyectada", plan.projected_date)

    st.subheader("Recomendaciones")
    for i, tip in enumerate(recommendation_lines(plan.recommendations), start=1):
        st.markdown(f"**{i}.** {tip}")


def goals_section():
    st.title("🎯 Calculadora de Metas de Ahorro")
    remote = webhook_url() is not None

    st.text_area("Describe tu meta de ahorro (incluye monto y plazo)",
                 placeholder=EXAMPLE_QUERIES[0], height=120, key="goal_query")

    st.caption("Ejemplos de consultas:")
    cols = st.columns(2)
    for i, example in enumerate(EXAMPLE_QUERIES):
        cols[i % 2].button(example, key=f"example_{i}", on_click=_use_example, args=(example,))

    if st.button("Calcular Plan de Ahorro", type="primary"):
        query = (st.session_state.get("goal_query") or "").strip()
        st.session_state.pop("goal_result", None)
        if not query:
            notify_error("Por favor ingresa tu consulta de ahorro.")
        else:
            with st.spinner("Calculando..."):
                result = fetch_goal_plan(query) if remote else estimate_goal(query)
            if result is None:
                notify_error("No se pudo procesar tu consulta. Asegúrate de incluir el monto y plazo deseado.")
            else:
                st.session_state["goal_result"] = result
                st.toast("Se ha generado tu plan de ahorro personalizado.", icon="✅")

    result = st.session_state.get("goal_result")
    if isinstance(result, GoalEstimate):
        _render_local_goal(result)
    elif isinstance(result, RemoteGoalPlan):
        _render_remote_goal(result)


# --- Main App ---
SECTIONS = {
    "📊 Dashboard": dashboard_section,
    "📝 Actividad": activity_section,
    "🎯 Metas": goals_section,
}

with st.sidebar:
    st.header("Dashboard Financiero")
    st.caption("Gestión financiera personal")
    choice = st.radio("Sección", list(SECTIONS), label_visibility="collapsed")

show_flash()
SECTIONS[choice]()
