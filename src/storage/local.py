from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from .base import StorageError, normalize_key


log = logging.getLogger(__name__)

# Environment variable names for convenience configuration
ENV_DIR = "USER_STORE_DIR"


class FileStorage:
    """
    Local-filesystem storage rooted at a single directory.

    Notes
    - Each key maps to one file under `root` (e.g. "user.json" -> `<root>/user.json`).
    - Writes go to a temp file in the destination directory and are moved into
      place with `os.replace`, so a reader sees either the old or the new bytes.
    - Missing files read as None; deleting a missing file is a no-op.
    """

    def __init__(self, root: os.PathLike[str] | str) -> None:
        self._root = Path(root)

    @classmethod
    def from_env(cls) -> "FileStorage":
        root = os.environ.get(ENV_DIR)
        if not root:
            raise RuntimeError(f"Missing required environment variables for file storage: {ENV_DIR}")
        return cls(root)

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, key: str) -> Path:
        return self._root.joinpath(*normalize_key(key).split("/"))

    # -------- Core operations --------
    def read(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as ex:
            raise StorageError(f"Failed to read {path}", key=key) from ex

    def write(self, key: str, data: bytes) -> None:
        path = self.path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp, path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as ex:
            raise StorageError(f"Failed to write {path}", key=key) from ex
        log.debug("wrote %s (%d bytes)", path, len(data))

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as ex:
            raise StorageError(f"Failed to delete {path}", key=key) from ex
        log.debug("deleted %s", path)
