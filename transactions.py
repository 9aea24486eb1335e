"""
transactions.py
---------------
Read and write access to the ``transactions`` table, plus the CSV statement
import used by the Activity view.

Rows leave this module as a pandas DataFrame with the in-memory column
names (``ID, Kind, Description, Category, Account, Date, Amount,
PaymentMethod, Notes, Receipt``); the storage layer uses snake_case
(``payment_method``).
"""

from __future__ import annotations

import datetime as dt
import numbers
import re
from typing import IO, Iterable, List, Literal, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import Transaction
from logging_setup import get_logger

_logger = get_logger("finance_dashboard.transactions")

COLUMNS = ["ID", "Kind", "Description", "Category", "Account", "Date", "Amount", "PaymentMethod", "Notes", "Receipt"]
RECENT_LIMIT = 5

DEFAULT_CATEGORIES = [
    "Alimentación",
    "Transporte",
    "Entretenimiento",
    "Servicios",
    "Salud",
    "Educación",
    "Compras",
    "Otros",
]

DEFAULT_ACCOUNTS = [
    "Cuenta Corriente",
    "Cuenta de Ahorros",
    "Tarjeta de Crédito",
    "Efectivo",
]

PAYMENT_METHODS = [
    "Efectivo",
    "Tarjeta de Débito",
    "Tarjeta de Crédito",
    "Transferencia",
    "PSE",
    "Nequi",
    "Daviplata",
]

KIND_LABELS = {"income": "Ingreso", "expense": "Gasto"}


class TransactionIn(BaseModel):
    """A new transaction as submitted by the entry form or a CSV import."""

    model_config = ConfigDict(str_strip_whitespace=True)

    kind: Literal["income", "expense"]
    description: str = Field(min_length=1)
    category: str = Field(min_length=1)
    account: str = Field(min_length=1)
    date: dt.date
    amount: float = Field(gt=0)
    payment_method: str = Field(min_length=1)
    notes: Optional[str] = None
    receipt: Optional[str] = None

    @field_validator("notes", "receipt")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None


# --- Store access ---

def fetch_transactions(db: Session, limit: Optional[int] = None) -> pd.DataFrame:
    """All transactions, newest first. ``limit`` caps the row count."""
    query = db.query(Transaction).order_by(Transaction.date.desc(), Transaction.id.desc())
    if limit:
        query = query.limit(limit)
    rows = query.all()

    if not rows:
        return pd.DataFrame(columns=COLUMNS)

    data = [{
        "ID": t.id,
        "Kind": t.kind,
        "Description": t.description,
        "Category": t.category,
        "Account": t.account,
        "Date": t.date,
        "Amount": t.amount,
        "PaymentMethod": t.payment_method,
        "Notes": t.notes,
        "Receipt": t.receipt,
    } for t in rows]

    df = pd.DataFrame(data, columns=COLUMNS)
    df["Date"] = pd.to_datetime(df["Date"])
    return df


def fetch_recent_transactions(db: Session) -> pd.DataFrame:
    return fetch_transactions(db, limit=RECENT_LIMIT)


def add_transaction(db: Session, txn: TransactionIn) -> int:
    """Insert one transaction and return its id."""
    row = Transaction(**txn.model_dump())
    db.add(row)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    _logger.info("Stored %s of %.2f in %s", txn.kind, txn.amount, txn.account)
    return row.id


# --- CSV import ---

# Patterns used to identify columns (Spanish exports first).
DATE_PATTERNS = ["fecha", "date", "posted"]
DESCRIPTION_PATTERNS = ["descripci", "description", "concepto", "detalle", "details", "memo", "merchant"]
AMOUNT_PATTERNS = ["monto", "amount", "valor", "importe", "amt"]
KIND_PATTERNS = ["tipo", "kind", "type"]
CATEGORY_PATTERNS = ["categor"]
ACCOUNT_PATTERNS = ["cuenta", "account"]
PAYMENT_PATTERNS = ["método", "metodo", "payment", "medio de pago"]

INCOME_WORDS = {"ingreso", "income", "credit", "crédito", "credito", "abono"}
EXPENSE_WORDS = {"gasto", "expense", "debit", "débito", "debito", "cargo"}

_DOTTED_THOUSANDS = re.compile(r"^-?\d{1,3}(?:\.\d{3})+$")
_DECIMAL_COMMA = re.compile(r",\d{1,2}$")


def infer_column(df: pd.DataFrame, patterns: list[str]) -> Optional[str]:
    for pattern in patterns:
        for col in df.columns:
            if pattern in str(col).lower():
                return col
    return None


def _parse_amount(value) -> Optional[float]:
    if isinstance(value, numbers.Number):
        return None if pd.isna(value) else float(value)
    text = str(value).strip().replace("$", "").replace(" ", "")
    text = re.sub(r"^\((.*)\)$", r"-\1", text)
    if _DECIMAL_COMMA.search(text):
        # es-CO: "1.500,50"
        text = text.replace(".", "").replace(",", ".")
    elif _DOTTED_THOUSANDS.match(text):
        text = text.replace(".", "")
    else:
        text = text.replace(",", "")
    try:
        return float(text)
    except ValueError:
        return None


def _parse_kind(value, amount: float) -> str:
    word = str(value).strip().lower() if value is not None and not pd.isna(value) else ""
    if word in INCOME_WORDS:
        return "income"
    if word in EXPENSE_WORDS:
        return "expense"
    return "income" if amount > 0 else "expense"


def parse_statement_csv(
    source: str | IO,
    default_account: str = DEFAULT_ACCOUNTS[0],
    default_category: str = "Otros",
    default_payment_method: str = "Transferencia",
) -> List[TransactionIn]:
    """Turn an exported statement into validated transactions.

    Negative amounts (or a ``tipo``/``type`` column) mark expenses; amounts
    are stored as absolute values. Rows without a usable date, description
    or non-zero amount are skipped.
    """
    df = pd.read_csv(source)
    if df.empty:
        return []

    date_col = infer_column(df, DATE_PATTERNS)
    desc_col = infer_column(df, DESCRIPTION_PATTERNS)
    amount_col = infer_column(df, AMOUNT_PATTERNS)
    if not date_col or not desc_col or not amount_col:
        raise ValueError("CSV must contain date, description and amount columns")

    kind_col = infer_column(df, KIND_PATTERNS)
    cat_col = infer_column(df, CATEGORY_PATTERNS)
    acct_col = infer_column(df, ACCOUNT_PATTERNS)
    pay_col = infer_column(df, PAYMENT_PATTERNS)

    dates = _parse_dates(df[date_col])

    parsed: List[TransactionIn] = []
    for idx, row in df.iterrows():
        amount = _parse_amount(row[amount_col])
        when = dates.loc[idx]
        if amount is None or amount == 0 or pd.isna(when):
            continue
        try:
            parsed.append(TransactionIn(
                kind=_parse_kind(row[kind_col] if kind_col else None, amount),
                description=str(row[desc_col]) if not pd.isna(row[desc_col]) else "",
                category=_text_or(row, cat_col, default_category),
                account=_text_or(row, acct_col, default_account),
                date=when.date(),
                amount=abs(amount),
                payment_method=_text_or(row, pay_col, default_payment_method),
            ))
        except ValidationError as exc:
            _logger.warning("Skipping CSV row %s: %s", idx, exc.errors()[0]["msg"])
    return parsed


def _parse_dates(values: pd.Series) -> pd.Series:
    # ISO dates or day-first local exports (19/10/2026, 19-10-2026).
    text = values.astype(str).str.strip()
    parsed = pd.to_datetime(text.str.slice(0, 10), errors="coerce", format="%Y-%m-%d")
    for fmt in ("%d/%m/%Y", "%d-%m-%Y"):
        parsed = parsed.fillna(pd.to_datetime(text, errors="coerce", format=fmt))
    return parsed


def _text_or(row: pd.Series, col: Optional[str], default: str) -> str:
    if col is None:
        return default
    value = row[col]
    if pd.isna(value) or not str(value).strip():
        return default
    return str(value).strip()


def import_transactions(db: Session, rows: Iterable[TransactionIn]) -> int:
    """Insert rows not already stored (same date, description, amount and kind)."""
    count = 0
    seen = set()
    for txn in rows:
        key = (txn.date, txn.description, txn.amount, txn.kind)
        if key in seen:
            continue
        seen.add(key)
        exists = db.query(Transaction).filter(
            Transaction.date == txn.date,
            Transaction.description == txn.description,
            Transaction.amount == txn.amount,
            Transaction.kind == txn.kind,
        ).first()

        if not exists:
            db.add(Transaction(**txn.model_dump()))
            count += 1
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    _logger.info("Imported %d transactions", count)
    return count
