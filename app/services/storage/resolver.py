import logging
from typing import Optional

from app.core.settings import settings
from .base import EvidenceStorage
from .local_provider import LocalEvidenceStorage
from .firebase_provider import FirebaseEvidenceStorage

logger = logging.getLogger(__name__)

_storage_instance: Optional[EvidenceStorage] = None


def get_evidence_storage() -> EvidenceStorage:
    """
    Resolve the active evidence storage backend based on settings.

    Rules:
    - STORAGE_BACKEND='firebase' uploads to FIREBASE_STORAGE_BUCKET.
    - Anything else (default 'local') writes under UPLOADS_DIR.
    """
    global _storage_instance
    if _storage_instance is not None:
        return _storage_instance

    backend = (settings.STORAGE_BACKEND or "local").lower()

    if backend == "firebase":
        if not settings.FIREBASE_STORAGE_BUCKET:
            raise RuntimeError("STORAGE_BACKEND=firebase requires FIREBASE_STORAGE_BUCKET")
        _storage_instance = FirebaseEvidenceStorage(folder=settings.REMOTE_UPLOAD_FOLDER)
    else:
        if backend != "local":
            logger.warning(f"Unknown STORAGE_BACKEND {backend!r}, using local storage")
        _storage_instance = LocalEvidenceStorage(settings.UPLOADS_DIR, settings.UPLOADS_URL_PREFIX)

    logger.info(f"Evidence storage initialized: {_storage_instance.name}")
    return _storage_instance
