import os
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base

# Database configuration
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./devicewatch.db")


def _connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"check_same_thread": False}  # Required for SQLite with FastAPI
    return {}


engine = create_engine(DATABASE_URL, connect_args=_connect_args(DATABASE_URL))


def enable_sqlite_foreign_keys(target_engine) -> None:
    """Turn on foreign key enforcement for SQLite so ON DELETE CASCADE applies."""
    if target_engine.dialect.name != "sqlite":
        return

    @event.listens_for(target_engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


enable_sqlite_foreign_keys(engine)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()

# Largest value an INTEGER column holds on every supported backend
MAX_INTEGER = 2**31 - 1


def get_db():
    """Dependency for getting database sessions in FastAPI routes."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db():
    """Initialize the database and create all tables."""
    # Import models here to ensure they're registered with Base
    from models import (  # noqa: F401
        Call,
        Command,
        Device,
        Location,
        Message,
        Photo,
        Recording,
        User,
        UserSettings,
    )

    Base.metadata.create_all(bind=engine)
