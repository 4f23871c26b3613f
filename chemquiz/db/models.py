from datetime import datetime, timezone
from pathlib import Path
from sqlalchemy import create_engine, Column, Integer, String, BigInteger, DateTime
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from chemquiz.config import DATABASE_URL

Base = declarative_base()

engine = create_engine(DATABASE_URL, echo=False)
SessionLocal = sessionmaker(bind=engine)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PracticeResult(Base):
    """One finished practice session."""

    __tablename__ = "practice_results"

    id = Column(Integer, primary_key=True, autoincrement=True)
    telegram_id = Column(BigInteger, nullable=False, index=True)
    chat_id = Column(BigInteger, nullable=False)
    answered = Column(Integer, nullable=False, default=0)
    correct = Column(Integer, nullable=False, default=0)  # Also the final streak
    duration_ms = Column(Integer, nullable=False, default=0)
    outcome = Column(String(20), nullable=False)  # wrong_answer, manual_exit, timeout
    finished_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


def bind_engine(url: str) -> Engine:
    """Point the session factory at another database (tests, migrations)."""
    global engine
    engine = create_engine(url, echo=False)
    SessionLocal.configure(bind=engine)
    return engine


def init_db() -> None:
    """Initialize the database and create tables."""
    if engine.url.get_backend_name() == "sqlite" and engine.url.database:
        Path(engine.url.database).parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(engine)


def get_session() -> Session:
    """Get a database session."""
    return SessionLocal()
