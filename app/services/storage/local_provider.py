import os
import logging

from app.core.errors import UploadError
from .base import EvidenceStorage, build_object_name

logger = logging.getLogger(__name__)


class LocalEvidenceStorage(EvidenceStorage):
    """
    Stores evidence under a local uploads directory.

    - The directory is created on first use if absent.
    - Returns a root-relative URL under `url_prefix`; the app serves that
      prefix from the same directory.
    """

    name = "local"

    def __init__(self, upload_dir: str, url_prefix: str = "/uploads"):
        self.upload_dir = os.path.abspath(upload_dir)
        self.url_prefix = "/" + url_prefix.strip("/")
        os.makedirs(self.upload_dir, exist_ok=True)

    def store(self, data: bytes, original_name: str) -> str:
        if not data:
            raise UploadError("No file data to store")

        object_name = build_object_name(original_name)
        path = os.path.join(self.upload_dir, object_name)
        try:
            # "xb" refuses to replace an existing file
            with open(path, "xb") as f:
                f.write(data)
        except OSError as e:
            logger.error(f"Local upload failed for {original_name!r}: {e}")
            raise UploadError() from e

        logger.info(f"Stored evidence locally: {object_name} ({len(data)} bytes)")
        return f"{self.url_prefix}/{object_name}"

    def discard(self, url: str) -> None:
        if not url.startswith(self.url_prefix + "/"):
            return
        object_name = os.path.basename(url[len(self.url_prefix) + 1:])
        path = os.path.join(self.upload_dir, object_name)
        if os.path.isfile(path):
            os.remove(path)
            logger.info(f"Discarded local evidence: {object_name}")
