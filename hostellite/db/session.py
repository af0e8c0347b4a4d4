from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from hostellite.core.config import settings


def make_engine(url: str):
    # SQLite needs check_same_thread=False when the Celery worker shares the file
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args, pool_pre_ping=True)


engine = make_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()


def init_db(bind=None):
    # Import models so they register with Base before creating tables
    import hostellite.models.credential  # noqa: F401
    import hostellite.models.escalation  # noqa: F401
    import hostellite.models.audit_log  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
