from seed_db import MONTHLY_TEMPLATE, SEED_MONTHS, seed_transactions
from transactions import fetch_transactions
from aggregation import build_report


def test_seed_is_idempotent_and_feeds_the_dashboard(db_session):
    expected = len(MONTHLY_TEMPLATE) * len(SEED_MONTHS)

    assert seed_transactions(db_session) == expected
    assert seed_transactions(db_session) == 0

    report = build_report(fetch_transactions(db_session))
    assert len(report.monthly_totals) == len(SEED_MONTHS)
    assert report.totals["income"] == 3_700_000 * len(SEED_MONTHS)
    assert report.totals["expense"] == 2_200_000 * len(SEED_MONTHS)
