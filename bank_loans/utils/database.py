import os
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

# importing config loads .env (project root, or next to the frozen exe)
from bank_loans.core import config  # noqa: F401

# ---------------------
# Read environment vars
# ---------------------
DB_HOST = os.getenv("DB_HOST", "127.0.0.1")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME", "bank_loans")
DB_USER = os.getenv("DB_USER", "postgres")
DB_PASS = os.getenv("DB_PASS", "postgres")

# 🛡️ Fix the None / empty / "None" port issue permanently
if not DB_PORT or str(DB_PORT).lower() == "none":
    DB_PORT = "5432"

# ---------------------
# SQLAlchemy URL
# ---------------------
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+psycopg2://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)

# ---------------------
# SQLAlchemy engine / session / Base
# ---------------------
engine_options = {
    "echo": False,
    "pool_pre_ping": True,  # drops dead connections automatically
    "future": True,
}
if DATABASE_URL.startswith("sqlite"):
    engine_options["connect_args"] = {"check_same_thread": False}
else:
    engine_options.update(pool_size=5, max_overflow=10)

engine = create_engine(DATABASE_URL, **engine_options)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session):
    """Run a ledger write as one unit: commit on success, roll back on any error."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
