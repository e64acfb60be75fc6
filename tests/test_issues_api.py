import os

import pytest

from app.core.errors import UploadError
from app.core.settings import settings
from app.services.issue_service import IssueService
from app.services.storage import EvidenceStorage
from app.services.storage import resolver
from conftest import issue_count, signup, submit_issue


def test_submission_creates_pending_issue(client, db):
    response = submit_issue(client)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Issue submitted successfully!"
    issue = body["issue"]
    assert issue["status"] == "pending"
    assert issue["location"] == "Main St"
    assert issue["emailid"] == "a@x.com"
    assert issue["photo"].startswith("/uploads/pothole-")
    assert issue["photo"].endswith(".jpg")
    assert issue["date"]
    assert issue_count(db) == 1


@pytest.mark.parametrize("requested", ["accepted", "rejected", "pending", "bogus"])
def test_submission_ignores_client_status(client, requested):
    response = submit_issue(client, status=requested)

    assert response.status_code == 201
    assert response.json()["issue"]["status"] == "pending"


def test_submission_without_file_is_rejected(client, db):
    submit_issue(client)
    before = issue_count(db)

    response = submit_issue(client, photo=None)

    assert response.status_code == 400
    assert response.json()["detail"] == "no file uploaded"
    assert issue_count(db) == before


def test_uploaded_photo_is_served(client):
    photo_url = submit_issue(client).json()["issue"]["photo"]

    response = client.get(photo_url)

    assert response.status_code == 200
    assert response.content == b"\xff\xd8\xff fake jpeg"


class RejectingStorage(EvidenceStorage):
    name = "rejecting"

    def store(self, data, original_name):
        raise UploadError()

    def discard(self, url):
        pass


def test_failed_upload_creates_no_issue(client, db, monkeypatch):
    monkeypatch.setattr(resolver, "_storage_instance", RejectingStorage())

    response = submit_issue(client)

    assert response.status_code == 500
    assert response.json()["detail"] == "File upload failed"
    assert issue_count(db) == 0


def test_pending_listing_resolves_username(client):
    signup(client, email="a@x.com", name="Asha")
    submit_issue(client)

    response = client.get("/api/issues/status/pending")

    assert response.status_code == 200
    issues = response.json()
    assert len(issues) == 1
    assert issues[0]["category"] == "Pothole"
    assert issues[0]["issue"] == "road damage"
    assert issues[0]["username"] == "Asha"


def test_dangling_email_resolves_to_anonymous(client, admin_headers):
    submit_issue(client, emailid="ghost@x.com")

    for url, headers in [
        ("/api/issues/status/pending", None),
        ("/api/issues/user/ghost@x.com", None),
        ("/api/issues", admin_headers),
    ]:
        issues = client.get(url, headers=headers).json()
        assert [i["username"] for i in issues] == ["Anonymous User"]


def test_listings_are_most_recent_first(client, admin_headers):
    created = [submit_issue(client, location=f"Street {n}").json()["issue"]["id"] for n in range(4)]

    issues = client.get("/api/issues", headers=admin_headers).json()
    ids = [issue["id"] for issue in issues]

    assert ids == list(reversed(created))
    assert all(a > b for a, b in zip(ids, ids[1:]))


def test_user_listing_filters_by_email_and_status(client, admin_headers):
    first = submit_issue(client, emailid="a@x.com").json()["issue"]["id"]
    submit_issue(client, emailid="a@x.com")
    submit_issue(client, emailid="b@x.com")
    client.patch(f"/api/issues/{first}/status", json={"status": "accepted"}, headers=admin_headers)

    mine = client.get("/api/issues/user/a@x.com").json()
    accepted = client.get("/api/issues/user/a@x.com", params={"status": "accepted"}).json()

    assert len(mine) == 2
    assert {i["emailid"] for i in mine} == {"a@x.com"}
    assert [i["id"] for i in accepted] == [first]


def test_accepted_listing(client, admin_headers):
    accepted_id = submit_issue(client).json()["issue"]["id"]
    submit_issue(client)
    client.patch(f"/api/issues/{accepted_id}/status", json={"status": "accepted"}, headers=admin_headers)

    issues = client.get("/api/issues/accepted").json()

    assert [i["id"] for i in issues] == [accepted_id]
    assert issues[0]["status"] == "accepted"


def test_admin_listing_requires_token(client):
    submit_issue(client)

    assert client.get("/api/issues").status_code == 401
    assert client.get("/api/issues", headers={"Authorization": "Bearer not-a-token"}).status_code == 403


@pytest.mark.parametrize("target", ["accepted", "rejected", "pending"])
def test_status_change_passes_value_through(client, admin_headers, target):
    issue_id = submit_issue(client).json()["issue"]["id"]

    response = client.patch(f"/api/issues/{issue_id}/status", json={"status": target}, headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == f"Issue {target}"
    assert body["Issue"]["status"] == target
    assert body["Issue"]["id"] == issue_id


def test_permissive_mode_allows_reopening(client, admin_headers):
    issue_id = submit_issue(client).json()["issue"]["id"]
    url = f"/api/issues/{issue_id}/status"

    client.patch(url, json={"status": "accepted"}, headers=admin_headers)
    response = client.patch(url, json={"status": "pending"}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["Issue"]["status"] == "pending"


def test_strict_mode_rejects_leaving_terminal_state(client, admin_headers, monkeypatch):
    monkeypatch.setattr(settings, "STRICT_STATUS_WORKFLOW", True)
    issue_id = submit_issue(client).json()["issue"]["id"]
    url = f"/api/issues/{issue_id}/status"

    assert client.patch(url, json={"status": "rejected"}, headers=admin_headers).status_code == 200
    response = client.patch(url, json={"status": "accepted"}, headers=admin_headers)

    assert response.status_code == 400
    assert "Invalid status transition" in response.json()["detail"]
    assert client.get("/api/issues/status/rejected").json()[0]["id"] == issue_id


def test_unknown_status_value_is_rejected(client, admin_headers):
    issue_id = submit_issue(client).json()["issue"]["id"]

    response = client.patch(f"/api/issues/{issue_id}/status", json={"status": "resolved"}, headers=admin_headers)

    assert response.status_code == 400
    assert client.get("/api/issues/status/pending").json()[0]["id"] == issue_id


def test_status_change_on_unknown_issue(client, admin_headers):
    response = client.patch("/api/issues/does-not-exist/status", json={"status": "accepted"}, headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "Issue not found"


def test_status_change_requires_token(client):
    issue_id = submit_issue(client).json()["issue"]["id"]

    response = client.patch(f"/api/issues/{issue_id}/status", json={"status": "accepted"})

    assert response.status_code == 401
    assert client.get("/api/issues/status/pending").json()[0]["status"] == "pending"


def test_failed_issue_write_returns_generic_error_and_discards_photo(client, db, monkeypatch):
    class UnavailableRef:
        def set(self, data):
            raise RuntimeError("firestore deadline exceeded on projects/civictrack")

    class UnavailableCollection:
        def document(self, doc_id=None):
            return UnavailableRef()

    monkeypatch.setattr(IssueService, "issues_ref", property(lambda self: UnavailableCollection()))
    before = set(os.listdir(settings.UPLOADS_DIR))

    response = submit_issue(client)

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to submit issue"}
    assert "firestore" not in response.text
    assert set(os.listdir(settings.UPLOADS_DIR)) == before
    assert issue_count(db) == 0
