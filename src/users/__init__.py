"""
Current-user persistence.

`UserStorage` keeps one `User` record as canonical JSON under a fixed key
("user.json") of a pluggable byte storage backend.
"""

from .models import User
from .storage import (
    USER_FILE,
    UserDecodeError,
    UserEncodeError,
    UserStorage,
    UserStoreError,
)

__all__ = [
    "USER_FILE",
    "User",
    "UserDecodeError",
    "UserEncodeError",
    "UserStorage",
    "UserStoreError",
]
