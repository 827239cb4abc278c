# tests/conftest.py

"""
Pytest fixtures: an application on TestConfig (in-memory SQLite, static
integrations), a test client and a client logged in as an analyst.
"""

import pytest

from config import TestConfig
from esg_portal import create_app, db
from esg_portal.models import User

ANALYST = {
    "username": "analyst1",
    "email": "analyst1@example.com",
    "password": "secret123",
    "fullName": "Test Analyst",
}


@pytest.fixture
def app():
    """Fresh schema per test. Requests push their own app context, so tests
    touching the database directly wrap that in app.app_context()."""
    app = create_app(TestConfig)
    with app.app_context():
        db.drop_all()
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    """Client with a registered and logged-in analyst session."""
    response = client.post("/api/auth/register", json=ANALYST)
    assert response.status_code == 201
    return client


@pytest.fixture
def admin_client(app):
    """Separate client logged in as an admin user."""
    with app.app_context():
        admin = User(username="root", email="root@example.com", role="admin", full_name="Site Admin")
        admin.set_password("rootpass123")
        db.session.add(admin)
        db.session.commit()

    client = app.test_client()
    response = client.post("/api/auth/login", json={"username": "root", "password": "rootpass123"})
    assert response.status_code == 200
    return client


@pytest.fixture
def company(auth_client):
    response = auth_client.post(
        "/api/companies", json={"name": "Acme Corp", "sector": "technology", "region": "EU"}
    )
    assert response.status_code == 201
    return response.get_json()


@pytest.fixture
def sample_submission():
    return {
        "companyName": "Acme Corp",
        "sector": "technology",
        "region": "EU",
        "reportingYear": 2024,
        "environmental": {"renewableEnergyPercentage": 80, "scope1Emissions": 5000},
        "social": {"femaleEmployeesPercentage": 40, "trainingHoursPerEmployee": 20},
        "governance": {"independentDirectorsPercentage": 75, "boardSize": 9},
    }
