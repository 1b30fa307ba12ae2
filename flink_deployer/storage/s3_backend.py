"""Object-store storage backend for `s3://` URIs backed by `boto3`."""

from __future__ import annotations

from fnmatch import fnmatchcase
from typing import Any, Final, Iterator

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .interfaces import StorageBackendPort, StorageEntry
from .storage_errors import StorageBackendError, StorageListingError

S3_STORAGE_SCHEME_PREFIX: Final[str] = "s3://"


class S3StorageBackend(StorageBackendPort):
    """Storage backend listing objects below one bucket prefix."""

    def __init__(self, bucket: str, prefix: str, client: Any):
        """Initialize S3 backend.

        Args:
            bucket: Bucket name.
            prefix: Key prefix acting as the root directory, without surrounding `/`.
            client: `boto3` S3 client or compatible stub.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when bucket is blank.
        """

        if not bucket.strip():
            raise ValueError("bucket must not be blank")
        self._bucket = bucket
        self._prefix = prefix.strip("/")
        self._client = client

    def storage_glob(self, pattern: str) -> Iterator[StorageEntry]:
        """Iterate objects whose key relative to the prefix matches `pattern`.

        Args:
            pattern: Shell-style relative pattern; segments are matched one by one.

        Returns:
            Iterator[StorageEntry]: Matching objects with last-modified times.

        Raises:
            ConnectionError: Raised when listing the bucket fails.
        """

        key_prefix = f"{self._prefix}/" if self._prefix else ""
        paginator = self._client.get_paginator("list_objects_v2")
        try:
            for page in paginator.paginate(Bucket=self._bucket, Prefix=key_prefix):
                for listed_object in page.get("Contents", []):
                    relative_key = str(listed_object["Key"])[len(key_prefix):]
                    if not _s3_key_matches_pattern(relative_key=relative_key, pattern=pattern):
                        continue
                    yield StorageEntry(name=relative_key, modified_at=listed_object["LastModified"])
        except (BotoCoreError, ClientError) as error:
            raise StorageListingError(
                f"listing s3://{self._bucket}/{self._prefix} failed: {error}",
                uri=f"{S3_STORAGE_SCHEME_PREFIX}{self._bucket}/{self._prefix}",
            ) from error


def _s3_key_matches_pattern(relative_key: str, pattern: str) -> bool:
    """Match a relative object key against a pattern segment by segment."""

    key_segments = relative_key.split("/")
    pattern_segments = pattern.split("/")
    if len(key_segments) != len(pattern_segments):
        return False
    return all(
        fnmatchcase(key_segment, pattern_segment)
        for key_segment, pattern_segment in zip(key_segments, pattern_segments)
    )


def s3_backend_connect(uri: str) -> S3StorageBackend:
    """Connect an S3 backend for `s3://bucket/prefix` using default AWS credentials.

    Args:
        uri: `s3://` URI.

    Returns:
        S3StorageBackend: Backend rooted at the bucket prefix.

    Raises:
        ValueError: Raised when the URI has no bucket.
        StorageBackendError: Raised when the S3 client cannot be created.
    """

    if not uri.startswith(S3_STORAGE_SCHEME_PREFIX):
        raise ValueError(f"s3 storage backend requires an {S3_STORAGE_SCHEME_PREFIX} URI")
    bucket, _, prefix = uri[len(S3_STORAGE_SCHEME_PREFIX):].partition("/")
    if not bucket:
        raise ValueError(f"s3 URI {uri} does not name a bucket")
    try:
        client = boto3.client("s3")
    except BotoCoreError as error:
        raise StorageBackendError(f"creating s3 client failed: {error}", uri=uri) from error
    return S3StorageBackend(bucket=bucket, prefix=prefix, client=client)
