import os
from sqlalchemy import create_engine, Column, Integer, String, Float, Date, Text
from sqlalchemy.orm import sessionmaker, declarative_base
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Database Setup
# Default to local SQLite, but allow override for a hosted Postgres
DB_URL = os.getenv("DATABASE_URL", "sqlite:///finance_dashboard.db")

engine = create_engine(DB_URL, connect_args={"check_same_thread": False} if "sqlite" in DB_URL else {})
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

# --- Models ---

class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    kind = Column(String, nullable=False)          # 'income' or 'expense'
    description = Column(String, nullable=False)
    category = Column(String, nullable=False)
    account = Column(String, nullable=False)
    date = Column(Date, nullable=False, index=True)
    amount = Column(Float, nullable=False)         # always positive; kind carries the sign
    payment_method = Column(String, nullable=False)

    # Optional extras from the entry form
    notes = Column(Text, nullable=True)
    receipt = Column(String, nullable=True)        # stored file name, see storage.py

# --- Init DB ---
def init_db(bind=None):
    Base.metadata.create_all(bind=bind or engine)
