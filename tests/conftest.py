"""Shared test fixtures."""
import os

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401  registers every table
from models.database import Base, get_db
from models import ContainerClass, Tariff, TariffTier

TODAY = date(2024, 1, 12)


def make_tiers(*rows):
    """Build tiers from (start, end, rate) tuples."""
    return tuple(TariffTier(start=start, end=end, rate=rate) for start, end, rate in rows)


def make_tariff(rows, container_class=ContainerClass.DRY, carrier=None):
    """Build a tariff from (start, end, rate) tuples."""
    return Tariff(container_class=container_class, tiers=make_tiers(*rows), carrier=carrier)


@pytest.fixture
def db_engine():
    """In-memory database shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Database session bound to the in-memory engine."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_engine):
    """API client using the in-memory database and a fixed evaluation date."""
    from api.main import app
    from api.dependencies import get_today

    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY

    yield TestClient(app)

    app.dependency_overrides.clear()
