import os

import pytest

from app.core.errors import UploadError
from app.services.storage import FirebaseEvidenceStorage, LocalEvidenceStorage, build_object_name


def test_object_name_keeps_extension_and_is_unique():
    names = {build_object_name("My Photo.JPG") for _ in range(50)}

    assert len(names) == 50
    for name in names:
        assert name.startswith("My-Photo-")
        assert name.endswith(".jpg")


@pytest.mark.parametrize("original", ["", None, "../../etc/passwd", ".hidden"])
def test_object_name_is_safe(original):
    name = build_object_name(original)

    assert "/" not in name
    assert ".." not in name
    assert name


def test_local_storage_writes_file(tmp_path):
    storage = LocalEvidenceStorage(str(tmp_path / "uploads"), url_prefix="/uploads/")

    url = storage.store(b"image-bytes", "pothole.png")

    assert url.startswith("/uploads/pothole-")
    assert url.endswith(".png")
    stored = tmp_path / "uploads" / url.rsplit("/", 1)[1]
    assert stored.read_bytes() == b"image-bytes"


def test_local_storage_never_overwrites(tmp_path):
    storage = LocalEvidenceStorage(str(tmp_path))

    urls = {storage.store(b"x", "same.jpg") for _ in range(20)}

    assert len(urls) == 20
    assert len(os.listdir(tmp_path)) == 20


def test_local_storage_rejects_empty_file(tmp_path):
    storage = LocalEvidenceStorage(str(tmp_path))

    with pytest.raises(UploadError):
        storage.store(b"", "empty.jpg")
    assert os.listdir(tmp_path) == []


def test_local_storage_write_failure(tmp_path, monkeypatch):
    storage = LocalEvidenceStorage(str(tmp_path))
    monkeypatch.setattr(storage, "upload_dir", str(tmp_path / "missing" / "dir"))

    with pytest.raises(UploadError):
        storage.store(b"data", "photo.jpg")


class FakeBlob:
    def __init__(self, name, fail=False):
        self.name = name
        self.fail = fail
        self.data = None
        self.content_type = None
        self.public = False
        self.deleted = False

    def upload_from_string(self, data, content_type=None):
        if self.fail:
            raise ConnectionError("bucket unavailable")
        self.data = data
        self.content_type = content_type

    def make_public(self):
        self.public = True

    def delete(self):
        self.deleted = True

    @property
    def public_url(self):
        return f"https://storage.googleapis.com/test-bucket/{self.name}"


class FakeBucket:
    def __init__(self, fail=False):
        self.fail = fail
        self.blobs = []

    def blob(self, name):
        blob = FakeBlob(name, fail=self.fail)
        self.blobs.append(blob)
        return blob


def test_firebase_storage_uploads_public_blob():
    bucket = FakeBucket()
    storage = FirebaseEvidenceStorage(folder="CivicTrack_uploads", bucket_factory=lambda: bucket)

    url = storage.store(b"jpeg", "pothole.jpg")

    blob = bucket.blobs[0]
    assert blob.name.startswith("CivicTrack_uploads/pothole-")
    assert blob.data == b"jpeg"
    assert blob.content_type == "image/jpeg"
    assert blob.public
    assert url == blob.public_url


def test_firebase_storage_failure_raises_upload_error():
    storage = FirebaseEvidenceStorage(bucket_factory=lambda: FakeBucket(fail=True))

    with pytest.raises(UploadError):
        storage.store(b"jpeg", "pothole.jpg")


def test_firebase_storage_rejects_empty_file():
    bucket = FakeBucket()
    storage = FirebaseEvidenceStorage(bucket_factory=lambda: bucket)

    with pytest.raises(UploadError):
        storage.store(b"", "pothole.jpg")
    assert bucket.blobs == []


def test_local_storage_discard_removes_file(tmp_path):
    storage = LocalEvidenceStorage(str(tmp_path))
    url = storage.store(b"x", "photo.jpg")

    storage.discard(url)
    storage.discard("/elsewhere/photo.jpg")

    assert os.listdir(tmp_path) == []


def test_firebase_storage_discard_deletes_blob():
    bucket = FakeBucket()
    storage = FirebaseEvidenceStorage(folder="CivicTrack_uploads", bucket_factory=lambda: bucket)
    url = storage.store(b"jpeg", "pothole.jpg")

    storage.discard(url)

    removed = bucket.blobs[-1]
    assert removed.name == bucket.blobs[0].name
    assert removed.deleted
