from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from datagrid.config import settings


class Base(DeclarativeBase):
    pass


def get_engine():
    return create_engine(settings.database_url, pool_pre_ping=True)


SessionLocal = sessionmaker(bind=get_engine(), autoflush=False, autocommit=False)


def get_db():
    """Centralized database session dependency for FastAPI.

    Yields a database session and ensures it is closed after the request.
    Data table factories receive this session to build their query.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
