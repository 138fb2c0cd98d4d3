from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .base import StorageError, normalize_key


log = logging.getLogger(__name__)

# Environment variable names for convenience configuration
ENV_BUCKET = "USER_STORE_BUCKET"
ENV_PREFIX = "USER_STORE_PREFIX"
ENV_REGION = "AWS_REGION"

_MISSING_CODES = ("NoSuchKey", "404", "NotFound")


@dataclass
class S3ObjectRef:
    bucket: str
    key: str


class S3Storage:
    """
    S3-backed storage: one object per key under an optional prefix.

    Usage
    - Provide a bucket (and optionally a key prefix such as "users/alice/").
    - `read()` returns None when the object does not exist.
    - `write()` is a plain PutObject; S3 replaces whole objects atomically.
    - `delete()` is idempotent (S3 DeleteObject succeeds on missing keys).

    Environment variables (optional)
    - `USER_STORE_BUCKET`: S3 bucket holding the objects
    - `USER_STORE_PREFIX`: key prefix prepended to every storage key
    - `AWS_REGION`:        region passed to the boto3 client
    """

    def __init__(
        self,
        *,
        s3: Optional[object] = None,
        bucket: str,
        prefix: str = "",
        region_name: Optional[str] = None,
    ) -> None:
        if not bucket:
            raise ValueError("bucket is required")
        self._s3 = s3 or boto3.client("s3", region_name=region_name)
        self._bucket = bucket
        self._prefix = prefix.strip("/")

    # -------- Construction helpers --------
    @classmethod
    def from_env(cls) -> "S3Storage":
        bucket = os.environ.get(ENV_BUCKET)
        if not bucket:
            raise RuntimeError(f"Missing required environment variables for S3 storage: {ENV_BUCKET}")
        return cls(
            bucket=bucket,
            prefix=os.environ.get(ENV_PREFIX, ""),
            region_name=os.environ.get(ENV_REGION) or None,
        )

    def ref(self, key: str) -> S3ObjectRef:
        k = normalize_key(key)
        return S3ObjectRef(bucket=self._bucket, key=f"{self._prefix}/{k}" if self._prefix else k)

    # -------- Core operations --------
    def read(self, key: str) -> Optional[bytes]:
        obj = self.ref(key)
        try:
            resp = self._s3.get_object(Bucket=obj.bucket, Key=obj.key)
            return resp["Body"].read()
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in _MISSING_CODES:
                return None
            raise StorageError(f"Failed to read s3://{obj.bucket}/{obj.key}: {code}", key=key) from e
        except BotoCoreError as e:
            raise StorageError(f"Failed to read s3://{obj.bucket}/{obj.key}", key=key) from e

    def write(self, key: str, data: bytes) -> None:
        obj = self.ref(key)
        try:
            self._s3.put_object(
                Bucket=obj.bucket,
                Key=obj.key,
                Body=data,
                ContentType="application/json",
            )
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            raise StorageError(f"Failed to write s3://{obj.bucket}/{obj.key}: {code}", key=key) from e
        except BotoCoreError as e:
            raise StorageError(f"Failed to write s3://{obj.bucket}/{obj.key}", key=key) from e
        log.debug("put s3://%s/%s (%d bytes)", obj.bucket, obj.key, len(data))

    def delete(self, key: str) -> None:
        obj = self.ref(key)
        try:
            self._s3.delete_object(Bucket=obj.bucket, Key=obj.key)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in _MISSING_CODES:
                return
            raise StorageError(f"Failed to delete s3://{obj.bucket}/{obj.key}: {code}", key=key) from e
        except BotoCoreError as e:
            raise StorageError(f"Failed to delete s3://{obj.bucket}/{obj.key}", key=key) from e
