from __future__ import annotations

import pytest
from botocore.exceptions import ClientError

from storage import StorageError
from storage.s3 import S3Storage
from users import User, UserDecodeError, UserStorage


class _FakeBody:
    def __init__(self, data: bytes) -> None:
        self._data = data

    def read(self) -> bytes:
        return self._data


class _FakeS3:
    def __init__(self) -> None:
        self._store = {}  # (bucket, key) -> bytes
        self.fail_with = None  # error code to raise from every call

    def _maybe_fail(self, op: str) -> None:
        if self.fail_with:
            raise ClientError({"Error": {"Code": self.fail_with}}, op)

    def put_object(self, *, Bucket: str, Key: str, Body: bytes, ContentType: str):
        self._maybe_fail("PutObject")
        self._store[(Bucket, Key)] = Body
        return {"ETag": f'"fake-{len(Body)}"'}

    def get_object(self, *, Bucket: str, Key: str):
        self._maybe_fail("GetObject")
        body = self._store.get((Bucket, Key))
        if body is None:
            raise ClientError({"Error": {"Code": "NoSuchKey"}}, "GetObject")
        return {"Body": _FakeBody(body)}

    def delete_object(self, *, Bucket: str, Key: str):
        self._maybe_fail("DeleteObject")
        self._store.pop((Bucket, Key), None)
        return {}


def test_read_missing_returns_none():
    store = S3Storage(s3=_FakeS3(), bucket="b")
    assert store.read("user.json") is None


def test_write_and_read_roundtrip_with_prefix():
    s3 = _FakeS3()
    store = S3Storage(s3=s3, bucket="b", prefix="/users/alice/")
    store.write("user.json", b'{"name":"alice"}')

    assert s3._store == {("b", "users/alice/user.json"): b'{"name":"alice"}'}
    assert store.read("user.json") == b'{"name":"alice"}'


def test_delete_is_idempotent():
    s3 = _FakeS3()
    store = S3Storage(s3=s3, bucket="b")
    store.write("user.json", b"x")
    store.delete("user.json")
    store.delete("user.json")
    assert store.read("user.json") is None


@pytest.mark.parametrize("op", ["read", "write", "delete"])
def test_client_errors_become_storage_errors(op):
    s3 = _FakeS3()
    s3.fail_with = "AccessDenied"
    store = S3Storage(s3=s3, bucket="b")

    args = ("user.json", b"x") if op == "write" else ("user.json",)
    with pytest.raises(StorageError) as exc:
        getattr(store, op)(*args)
    assert exc.value.key == "user.json"
    assert isinstance(exc.value.__cause__, ClientError)


def test_bucket_required():
    with pytest.raises(ValueError):
        S3Storage(s3=_FakeS3(), bucket="")


def test_user_storage_over_s3():
    s3 = _FakeS3()
    store = UserStorage(S3Storage(s3=s3, bucket="b"))
    assert store.get() is None

    store.set(User(name="alice"))
    assert store.get() == User(name="alice")

    s3._store[("b", "user.json")] = b"garbage"
    with pytest.raises(UserDecodeError):
        store.get()

    store.delete()
    assert store.get() is None
