"""Generate database sessions"""

from sqlalchemy import Engine, StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.schema import Base


def create_db_engine(database_url: str) -> Engine:
    """SQLite connections get shared across FastAPI's worker threads, and an in-memory database only lives as long as its connection."""
    if not database_url.startswith("sqlite"):
        return create_engine(database_url)
    if ":memory:" in database_url:
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, connect_args={"check_same_thread": False})


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    engine = create_db_engine(database_url)
    # Ensure all tables are created
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autoflush=False, bind=engine)
