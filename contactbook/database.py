"""SQLAlchemy wiring for the contact book.

One engine per process, one session per request. SQLite connections are
opened with ``check_same_thread=False`` because FastAPI runs sync routes
in a thread pool.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .core import get_settings


settings = get_settings()

engine = create_engine(
    settings.DATABASE_URL,
    connect_args=(
        {"check_same_thread": False}
        if settings.DATABASE_URL.startswith("sqlite")
        else {}
    ),
    future=True,
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

#: Base class of the ``users``, ``contacts`` and ``addresses`` tables.
Base = declarative_base()


def get_db():
    """Yield a session for one request and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
