"""Publication of packaged outputs to object storage."""

from __future__ import annotations

from relcut.publish.errors import BucketNotFound, PublishError, SourceNotFound, UploadFailure
from relcut.publish.keys import build_key_prefix, object_key
from relcut.publish.s3 import ArtifactPublisher, ObjectStorageClient, S3Settings, make_s3_client

__all__ = [
    "ArtifactPublisher",
    "BucketNotFound",
    "ObjectStorageClient",
    "PublishError",
    "S3Settings",
    "SourceNotFound",
    "UploadFailure",
    "build_key_prefix",
    "make_s3_client",
    "object_key",
]
