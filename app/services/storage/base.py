from abc import ABC, abstractmethod
import os
import re
import secrets
import time
import logging

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


class EvidenceStorage(ABC):
    """
    Abstract evidence storage backend.

    Contract:
    - Input: raw file bytes and the client's original file name
    - Output: URL usable directly as an issue's `photo` field
    - Raises UploadError when no bytes are given or the backend rejects the write.
    - Every call writes a new object; uploads never overwrite each other.
    """

    name: str = "base"

    @abstractmethod
    def store(self, data: bytes, original_name: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def discard(self, url: str) -> None:
        """Remove an object previously returned by store(). Unknown URLs are ignored."""
        raise NotImplementedError


def build_object_name(original_name: str) -> str:
    """
    Collision-resistant object name keeping the original extension.

    "My Photo.JPG" -> "My-Photo-1760700000000-9f2c4e1a.jpg"
    """
    base = os.path.basename(original_name or "")
    stem, ext = os.path.splitext(base)
    stem = _UNSAFE_CHARS.sub("-", stem).strip("-")[:50] or "photo"
    ext = ext.lower() if re.fullmatch(r"\.[A-Za-z0-9]{1,10}", ext or "") else ""
    return f"{stem}-{int(time.time() * 1000)}-{secrets.token_hex(4)}{ext}"
