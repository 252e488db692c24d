import os
import tempfile

# Keep import-time app construction from creating public/uploads in the checkout
os.environ.setdefault("UPLOAD_DIR", os.path.join(tempfile.mkdtemp(), "uploads"))
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

import config
import database
import main


@pytest.fixture
def mongo(monkeypatch):
    db = AsyncMongoMockClient()["employee_management_test"]
    monkeypatch.setattr(database, "db", db)
    return db


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(config, "UPLOAD_DIR", str(path))
    return path


@pytest.fixture
def client(mongo, upload_dir):
    with TestClient(main.create_app()) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    credentials = {"username": "admin", "password": "s3cret-pass"}
    client.post("/auth/register", json=credentials)
    token = client.post("/auth/login", json=credentials).json()["token"]
    return {"Authorization": f"Bearer {token}"}


_counter = {"n": 0}


def employee_form(**overrides):
    """Valid create payload with a fresh email and mobile on every call."""
    _counter["n"] += 1
    n = _counter["n"]
    form = {
        "name": f"Employee {n}",
        "email": f"employee{n}@example.com",
        "mobile": f"98765{n:05d}",
        "designation": "Developer",
        "gender": "Female",
        "course": ["BCA"],
    }
    form.update(overrides)
    return form


@pytest.fixture
def create_employee(client, auth_headers):
    def _create(files=None, **overrides):
        response = client.post(
            "/employees", data=employee_form(**overrides), files=files, headers=auth_headers
        )
        assert response.status_code == 201, response.text
        return response.json()["employee"]

    return _create
