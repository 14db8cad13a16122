"""Shared fixtures for Patient Dashboard tests."""

import os

# Keep the application's default engine in memory; set before importing the app.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from patient_dashboard.database import build_engine, get_db, init_db
from patient_dashboard.main import app
from patient_dashboard.models.patient import PatientRecord
from patient_dashboard.services.record_store import RecordStore


@pytest.fixture
def db_engine():
    """Fresh in-memory database per test."""
    engine = build_engine("sqlite://")
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db_session):
    return RecordStore(db_session)


@pytest.fixture
def override_db(session_factory):
    """Route the app's sessions to the per-test database."""
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client(override_db):
    with TestClient(app) as test_client:
        yield test_client


def make_patient(first, last, status="Active", dob="1980-01-01", middle=None,
                 city="Austin", state="TX", zip_code="73301", address="1 Main Street", patient_id=None):
    """Build a PatientRecord with sensible defaults."""
    return PatientRecord(
        id=patient_id,
        first_name=first,
        middle_name=middle,
        last_name=last,
        date_of_birth=dob,
        status=status,
        address=address,
        city=city,
        state=state,
        zip_code=zip_code,
    )


def patient_payload(first="Amy", last="Lee", status="Inquiry", dob="1990-05-05", **extra):
    """Request body for create/update."""
    payload = {
        "firstName": first,
        "middleName": "",
        "lastName": last,
        "dob": dob,
        "status": status,
        "address": "12 Elm Street",
        "city": "Denver",
        "state": "CO",
        "zipCode": "80202",
    }
    payload.update(extra)
    return payload
