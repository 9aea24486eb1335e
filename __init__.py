"""Personal finance dashboard.

Streamlit app for logging income and expenses, charting them and
estimating savings goals. See ``app.py`` for the entry point and
``seed_db.py`` to load sample data.
"""
