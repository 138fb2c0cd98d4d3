"""
Byte-level key/value storage backends.

Backends share the `Storage` protocol (read/write/delete by key) and differ
only in the medium: local files, process memory, or S3.
"""

from __future__ import annotations

import os

from .base import Storage, StorageError, normalize_key
from .local import FileStorage
from .memory import MemoryStorage


ENV_BACKEND = "USER_STORE_BACKEND"
BACKENDS = ("file", "memory", "s3")


def from_env() -> Storage:
    """Build the backend named by `USER_STORE_BACKEND` (default "file")."""
    name = (os.environ.get(ENV_BACKEND) or "file").strip().lower()
    if name == "file":
        return FileStorage.from_env()
    if name == "memory":
        return MemoryStorage()
    if name == "s3":
        # boto3 is only needed for this backend
        from .s3 import S3Storage

        return S3Storage.from_env()
    raise RuntimeError(f"Unknown {ENV_BACKEND} {name!r}; expected one of: {', '.join(BACKENDS)}")


__all__ = [
    "FileStorage",
    "MemoryStorage",
    "Storage",
    "StorageError",
    "from_env",
    "normalize_key",
]
