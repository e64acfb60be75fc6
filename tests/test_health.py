from app.routes import health
from conftest import submit_issue


def test_root(client):
    body = client.get("/").json()

    assert body["service"] == "CivicTrack"
    assert body["status"] == "running"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.headers["cache-control"] == "no-store"


def test_database_health(client):
    response = client.get("/health/db")

    assert response.status_code == 200
    assert response.json()["connected"] is True
    assert response.json()["has_issues"] is False


def test_database_health_sees_issues(client):
    submit_issue(client)

    assert client.get("/health/db").json()["has_issues"] is True


def test_database_health_unreachable(client, monkeypatch):
    class Unreachable:
        def collection(self, name):
            raise ConnectionError("deadline exceeded")

    monkeypatch.setattr(health, "get_db", lambda: Unreachable())

    response = client.get("/health/db")

    assert response.status_code == 503
    assert response.json() == {"detail": "Database connection failed"}
