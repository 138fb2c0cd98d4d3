from __future__ import annotations

import json
import os
from typing import Optional

from pydantic import ValidationError

import storage as storage_backends
from storage import Storage

from .models import User


USER_FILE = "user.json"

# Environment variable names for convenience configuration
ENV_KEY = "USER_STORE_KEY"


class UserStoreError(Exception):
    """Base error for user record persistence."""


class UserDecodeError(UserStoreError, ValueError):
    """Stored bytes are not a valid user record."""


class UserEncodeError(UserStoreError, RuntimeError):
    """The user record could not be serialized."""


def _dump_user_json(user: User) -> bytes:
    # Deterministic JSON: stable key order, no extra whitespace
    try:
        return json.dumps(
            user.model_dump(mode="json", exclude_unset=True),
            separators=(",", ":"),
            sort_keys=True,
            ensure_ascii=False,
        ).encode("utf-8")
    except (TypeError, ValueError) as ex:
        raise UserEncodeError("Failed to serialize user record") from ex


def _load_user_json(data: bytes) -> User:
    try:
        raw = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as ex:
        raise UserDecodeError("Stored user record is not valid JSON") from ex
    if not isinstance(raw, dict):
        raise UserDecodeError(f"Stored user record must be a JSON object, got {type(raw).__name__}")
    try:
        return User.model_validate(raw)
    except (ValidationError, RecursionError) as ex:
        raise UserDecodeError("Stored user record does not match the User schema") from ex


class UserStorage:
    """
    Persistence for the single current `User`, on top of any `Storage` backend.

    - `get()` returns the stored user, or None when nothing has been stored.
    - `set(user)` overwrites the stored user.
    - `delete()` removes the stored user; a no-op when there is none.

    Raises `UserDecodeError` for unreadable stored bytes and `UserEncodeError`
    when a user cannot be serialized. `StorageError` from the backend passes
    through unchanged.
    """

    def __init__(self, storage: Storage, *, key: str = USER_FILE) -> None:
        self._storage = storage
        self._key = key

    @classmethod
    def from_env(cls) -> "UserStorage":
        return cls(storage_backends.from_env(), key=os.environ.get(ENV_KEY) or USER_FILE)

    def get(self) -> Optional[User]:
        data = self._storage.read(self._key)
        if data is None:
            return None
        return _load_user_json(data)

    def set(self, user: User) -> None:
        self._storage.write(self._key, _dump_user_json(user))

    def delete(self) -> None:
        self._storage.delete(self._key)
