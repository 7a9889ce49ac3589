"""Shared fixtures: an in-process MongoDB and a client wired to it."""

import mongomock
import pytest
from fastapi.testclient import TestClient

from database import DataStore, get_store
from main import app


@pytest.fixture
def store():
    """DataStore over a fresh mongomock database."""
    return DataStore(mongomock.MongoClient()["dukaan_test"])


@pytest.fixture
def client(store):
    """Test client whose routes use the mongomock store."""
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin(client):
    """A shop in Pune, created through signup and login."""
    client.post("/signup", json={
        "userType": "admin",
        "adminName": "Asha",
        "shopName": "Asha Kirana",
        "city": "Pune",
        "email": "asha@example.com",
        "password": "pw1",
        "mobile": "9000000001",
    })
    res = client.post("/login", json={"userType": "admin", "email": "asha@example.com", "password": "pw1"})
    return res.json()["userId"]


@pytest.fixture
def customer(client):
    """A customer, created through signup and login."""
    client.post("/signup", json={
        "userType": "customer",
        "name": "Ravi",
        "city": "Pune",
        "email": "ravi@example.com",
        "password": "pw2",
        "mobile": "9000000002",
    })
    res = client.post("/login", json={"userType": "customer", "email": "ravi@example.com", "password": "pw2"})
    return res.json()["userId"]
