"""
Shared pytest fixtures.

Each test gets its own file-backed SQLite database so that tests using
several sessions (the concurrent booking race) see real commits.
"""

import os
from datetime import date

# Must be set before clinic_backend.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_TOKEN"] = "admin-secret"
os.environ["REQUIRE_FUTURE_APPOINTMENTS"] = "true"

import pytest
from fastapi.testclient import TestClient

from clinic_backend import models
from clinic_backend.database import build_engine, build_sessionmaker, init_db
from clinic_backend.routers.deps import Services, get_db

DAY = date(2030, 1, 15)
TEMPLATES = ["09:00-10:00", "10:00-11:00", "14:00-15:00"]


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture
def engine(tmp_path):
    eng = build_engine(f"sqlite:///{tmp_path / 'clinic_test.db'}")
    init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def services(db):
    return Services(db)


# ============================================================================
# TEST DATA
# ============================================================================


@pytest.fixture
def doctor(db):
    doc = models.Doctor(
        name="Dra. Elena Ruiz",
        specialty="Cardiology",
        email="elena@clinic.test",
        phone="5512345678",
        available_times=list(TEMPLATES),
    )
    db.add(doc)
    db.commit()
    db.refresh(doc)
    return doc


@pytest.fixture
def other_doctor(db):
    doc = models.Doctor(
        name="Dr. Mario Soto",
        specialty="Dermatology",
        email="mario@clinic.test",
        phone="5587654321",
        available_times=["16:00-17:00", "17:00-18:00"],
    )
    db.add(doc)
    db.commit()
    db.refresh(doc)
    return doc


def _patient(db, name, email, phone):
    p = models.Patient(name=name, email=email, phone=phone, address="Av. Reforma 1")
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


@pytest.fixture
def alice(db):
    return _patient(db, "Alice Johnson", "alice@mail.test", "5500000001")


@pytest.fixture
def bob(db):
    return _patient(db, "Bob Smith", "bob@mail.test", "5500000002")


# ============================================================================
# API CLIENT
# ============================================================================


@pytest.fixture
def client(session_factory):
    from clinic_backend.main import app

    def _override_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_db
    yield TestClient(app)
    app.dependency_overrides.clear()
