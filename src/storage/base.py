from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


class StorageError(RuntimeError):
    """Raised when the backing medium fails to read, write or delete a key."""

    def __init__(self, message: str, *, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key


@runtime_checkable
class Storage(Protocol):
    """
    Byte-oriented, key-addressed persistence.

    - `read(key)` returns the stored bytes, or None if nothing is stored at `key`.
    - `write(key, data)` replaces whatever is stored at `key`.
    - `delete(key)` removes `key`; removing a missing key is a no-op.

    Backend failures surface as `StorageError`.
    """

    def read(self, key: str) -> Optional[bytes]: ...

    def write(self, key: str, data: bytes) -> None: ...

    def delete(self, key: str) -> None: ...


def normalize_key(key: str) -> str:
    """Validate a storage key and return it in canonical `a/b/c` form.

    Keys are relative, `/`-separated names. Empty keys, absolute keys and
    `..` segments are rejected with ValueError.
    """
    if not isinstance(key, str) or not key.strip():
        raise ValueError("storage key must be a non-empty string")
    if key.startswith("/") or key.startswith("\\"):
        raise ValueError(f"storage key must be relative: {key!r}")
    parts = [p for p in key.replace("\\", "/").split("/") if p not in ("", ".")]
    if not parts:
        raise ValueError(f"storage key has no name component: {key!r}")
    if any(p == ".." for p in parts):
        raise ValueError(f"storage key must not contain '..': {key!r}")
    return "/".join(parts)
