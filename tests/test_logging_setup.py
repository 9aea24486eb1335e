import logging

import pytest

from logging_setup import resolve_level


@pytest.mark.parametrize(
    "level, env, expected",
    [
        ("debug", None, logging.DEBUG),
        (logging.ERROR, "DEBUG", logging.ERROR),
        (None, "warning", logging.WARNING),
        (None, "15", 15),
        ("nonsense", "nonsense", logging.INFO),
        (None, None, logging.INFO),
    ],
)
def test_resolve_level(monkeypatch, level, env, expected):
    if env is None:
        monkeypatch.delenv("FINANCE_DASHBOARD_LOG_LEVEL", raising=False)
    else:
        monkeypatch.setenv("FINANCE_DASHBOARD_LOG_LEVEL", env)
    assert resolve_level(level) == expected
