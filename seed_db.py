from datetime import date

from database import init_db, SessionLocal, Transaction
from logging_setup import configure_logging, get_logger

_logger = get_logger("finance_dashboard.seed_db")

# (kind, description, category, account, day, amount, payment method)
MONTHLY_TEMPLATE = [
    ("income", "Salario", "Salario", "Cuenta Corriente", 1, 3_500_000, "Transferencia"),
    ("income", "Intereses", "Inversiones", "Cuenta de Ahorros", 2, 200_000, "Transferencia"),
    ("expense", "Arriendo y servicios", "Servicios", "Cuenta Corriente", 5, 500_000, "PSE"),
    ("expense", "Mercado del mes", "Alimentación", "Tarjeta de Crédito", 8, 800_000, "Tarjeta de Crédito"),
    ("expense", "Transporte público y gasolina", "Transporte", "Tarjeta de Crédito", 12, 400_000, "Tarjeta de Crédito"),
    ("expense", "Cine y salidas", "Entretenimiento", "Efectivo", 18, 300_000, "Efectivo"),
    ("expense", "Gastos varios", "Otros", "Cuenta de Ahorros", 25, 200_000, "Nequi"),
]

SEED_MONTHS = [(2026, m) for m in range(1, 7)]


def sample_transactions():
    rows = []
    for year, month in SEED_MONTHS:
        for kind, desc, category, account, day, amount, method in MONTHLY_TEMPLATE:
            rows.append(Transaction(
                kind=kind,
                description=desc,
                category=category,
                account=account,
                date=date(year, month, day),
                amount=float(amount),
                payment_method=method,
            ))
    return rows


def seed_transactions(db=None) -> int:
    own_session = db is None
    db = db or SessionLocal()
    try:
        # Check if transactions exist
        if db.query(Transaction).first():
            _logger.info("Transactions already exist. Skipping seed.")
            return 0

        rows = sample_transactions()
        db.add_all(rows)
        db.commit()
        _logger.info("Database initialized with %d sample transactions.", len(rows))
        return len(rows)
    finally:
        if own_session:
            db.close()

if __name__ == "__main__":
    configure_logging()
    init_db()
    seed_transactions()
