# tests/conftest.py
import logging
import os

# Must be set before the application modules read their settings.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_TIMES", "1000")
os.environ.pop("REDIS_URL", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from contactbook.database import Base, get_db
from contactbook.services import AddressService, ContactService, UserService
from main import app


# DB (SQLite in-memory for tests)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def prepare_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


# Client fixture: override DB dependency per test.
# Entering the TestClient runs the lifespan, which initializes the limiter.
@pytest.fixture()
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def user_service(db_session):
    return UserService(db_session, logging.getLogger("tests.users"))


@pytest.fixture()
def contact_service(db_session):
    return ContactService(db_session, logging.getLogger("tests.contacts"))


@pytest.fixture()
def address_service(db_session, contact_service):
    return AddressService(
        db_session, logging.getLogger("tests.addresses"), contact_service
    )
