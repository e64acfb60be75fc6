"""
Evidence storage - turns an uploaded photo into a public URL.

One contract, two backends (local disk, Firebase Storage bucket), chosen once
from settings by the resolver. Callers never branch on the backend.
"""

from app.services.storage.base import EvidenceStorage, build_object_name
from app.services.storage.local_provider import LocalEvidenceStorage
from app.services.storage.firebase_provider import FirebaseEvidenceStorage
from app.services.storage.resolver import get_evidence_storage

__all__ = [
    "EvidenceStorage",
    "build_object_name",
    "LocalEvidenceStorage",
    "FirebaseEvidenceStorage",
    "get_evidence_storage",
]
