"""
Storage abstraction for generated images: Firebase Storage and in-memory testing.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass, field
from typing import Protocol

from firebase_admin import storage

_DATA_URI = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.+)$", re.S)

_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
}


def decode_data_uri(data_uri: str) -> tuple[str, bytes]:
    """Splits a base64 data URI into (mime type, bytes)."""
    match = _DATA_URI.match(data_uri or "")
    if not match:
        raise ValueError("Not a base64 data URI")
    try:
        payload = base64.b64decode(match.group("data"), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}")
    return match.group("mime"), payload


def _with_extension(path: str, mime_type: str) -> str:
    extension = _EXTENSIONS.get(mime_type)
    if extension and not path.endswith(f".{extension}"):
        return f"{path}.{extension}"
    return path


class ImageStore(Protocol):
    """Defines the operations the advisor needs from object storage."""

    def upload_data_uri(self, path: str, data_uri: str) -> str:
        ...


@dataclass
class InMemoryImageStore:
    """Test double for storage interactions."""

    base_url: str = "https://example.test/storage"
    stored_objects: dict = field(default_factory=dict)

    def upload_data_uri(self, path: str, data_uri: str) -> str:
        mime_type, payload = decode_data_uri(data_uri)
        path = _with_extension(path, mime_type)
        self.stored_objects[path] = (mime_type, payload)
        return f"{self.base_url}/{path}"


@dataclass
class FirebaseImageStore:
    """
    Firebase Storage bucket; uploaded images are made publicly readable.
    """

    bucket_name: str | None = None

    def __post_init__(self):
        self._bucket = storage.bucket(self.bucket_name)

    def upload_data_uri(self, path: str, data_uri: str) -> str:
        mime_type, payload = decode_data_uri(data_uri)
        blob = self._bucket.blob(_with_extension(path, mime_type))
        blob.cache_control = "public, max-age=31536000"
        blob.upload_from_string(payload, content_type=mime_type)
        blob.make_public()
        return blob.public_url
