"""
Shared fixtures. The app runs against the in-memory mock Firestore and a
temporary uploads directory; settings are read from the environment at
import time, so the environment is prepared before anything from app/ loads.
"""

import os
import tempfile

os.environ["USE_MOCK_DB"] = "true"
os.environ["MOCK_DB_PATH"] = ""
os.environ["STORAGE_BACKEND"] = "local"
os.environ["UPLOADS_DIR"] = tempfile.mkdtemp(prefix="civictrack-uploads-")
os.environ["JWT_SECRET"] = "test-secret"
os.environ["JWT_EXPIRE"] = "1h"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["STRICT_STATUS_WORKFLOW"] = "false"

import pytest
from fastapi.testclient import TestClient

from app.config.firebase import get_db
from app.main import app
from app.services import moderation_service
from app.services.admin_service import AdminService

ADMIN_ID = "admin"
ADMIN_PASSWORD = "admin-pass"


@pytest.fixture(autouse=True)
def db(monkeypatch):
    database = get_db()
    database.clear()
    # Rebuilt per test so settings/storage patches are picked up
    monkeypatch.setattr(moderation_service, "_moderation_service", None)
    yield database
    database.clear()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_token(client):
    AdminService().provision_admin(ADMIN_ID, ADMIN_PASSWORD)
    response = client.post("/api/admins/login", json={"adminId": ADMIN_ID, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


def submit_issue(client, photo=("pothole.jpg", b"\xff\xd8\xff fake jpeg", "image/jpeg"), **overrides):
    fields = {
        "location": "Main St",
        "emailid": "a@x.com",
        "category": "Pothole",
        "issue": "road damage",
        "description": "Deep pothole near the bus stop",
    }
    fields.update(overrides)
    files = {"photo": photo} if photo is not None else None
    return client.post("/api/issues", data=fields, files=files)


def signup(client, email="a@x.com", name="Asha", password="pw-123"):
    return client.post("/api/users/signup", json={"email": email, "name": name, "password": password})


def issue_count(database, **filters):
    query = database.collection("issues")
    for field, value in filters.items():
        query = query.where(field, "==", value)
    return len(list(query.stream()))
