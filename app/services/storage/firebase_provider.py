import logging
import mimetypes
from typing import Callable, Optional

from app.core.errors import UploadError
from .base import EvidenceStorage, build_object_name

logger = logging.getLogger(__name__)


class FirebaseEvidenceStorage(EvidenceStorage):
    """
    Stores evidence in a Firebase (Google Cloud Storage) bucket.

    - Objects go under a fixed logical folder inside the bucket.
    - Each blob is made public and its public URL is returned.
    - The bucket is resolved lazily so the app can start without network access.
    """

    name = "firebase"

    def __init__(self, folder: str = "CivicTrack_uploads", bucket_factory: Optional[Callable] = None):
        self.folder = folder.strip("/")
        if bucket_factory is None:
            from app.config.firebase import get_bucket
            bucket_factory = get_bucket
        self._bucket_factory = bucket_factory
        self._bucket = None

    @property
    def bucket(self):
        if self._bucket is None:
            self._bucket = self._bucket_factory()
        return self._bucket

    def store(self, data: bytes, original_name: str) -> str:
        if not data:
            raise UploadError("No file data to store")

        object_name = f"{self.folder}/{build_object_name(original_name)}"
        content_type = mimetypes.guess_type(original_name or "")[0] or "application/octet-stream"
        try:
            blob = self.bucket.blob(object_name)
            blob.upload_from_string(data, content_type=content_type)
            blob.make_public()
        except Exception as e:
            logger.error(f"Bucket upload failed for {object_name}: {e}", exc_info=True)
            raise UploadError() from e

        if not blob.public_url:
            raise UploadError("Bucket upload returned no URL")

        logger.info(f"Stored evidence in bucket: {object_name} ({len(data)} bytes)")
        return blob.public_url

    def discard(self, url: str) -> None:
        marker = f"/{self.folder}/"
        if marker not in url:
            return
        object_name = self.folder + "/" + url.split(marker, 1)[1]
        self.bucket.blob(object_name).delete()
        logger.info(f"Discarded bucket evidence: {object_name}")
