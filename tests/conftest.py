from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from datagrid.db import Base
from tests.models import Article


@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture()
def db_session(engine):
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(bind=connection, autoflush=False, autocommit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture()
def articles(db_session):
    rows = [
        Article(id=1, title="<b>Intro</b>", author="Ada", created_at=datetime(2024, 1, 5, 9, 30)),
        Article(id=2, title="Queries", author="Grace", created_at=datetime(2024, 2, 1, 12, 0)),
        Article(id=3, title="Sorting", author="Alan", created_at=datetime(2024, 3, 9, 18, 45)),
    ]
    db_session.add_all(rows)
    db_session.flush()
    return rows


@pytest.fixture()
def people():
    return [
        {"id": 1, "name": "Charlie", "city": "Oslo"},
        {"id": 2, "name": "alice", "city": "Bergen"},
        {"id": 3, "name": "Bob", "city": "Oslo"},
        {"id": 4, "name": "Alina", "city": "Tromso"},
    ]
