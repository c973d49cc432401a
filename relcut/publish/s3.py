"""Upload a directory of packaged outputs to an S3-compatible bucket.

Credentials are resolved via boto3's standard credential chain. Any
S3-compatible service (AWS, Backblaze B2, MinIO) works through
``endpoint_url``.

Usage:
    client = make_s3_client(S3Settings(region="eu-central-1"))
    publisher = ArtifactPublisher(client=client, console=RichConsole())
    match publisher.publish(Path("build/dist"), "my-bucket", "app/1.2.3/linux-x64"):
        case Ok(count):
            print(f"uploaded {count} objects")
        case Err(error):
            print(error)
"""

from __future__ import annotations

import mimetypes
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

from relcut.core.result import Err, Ok, Result
from relcut.output.console import ConsoleProtocol, Style
from relcut.publish.errors import BucketNotFound, PublishError, SourceNotFound, UploadFailure
from relcut.publish.keys import object_key

DEFAULT_CONTENT_TYPE = "application/octet-stream"

_MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}
_DENIED_CODES = {"403", "AccessDenied", "Forbidden"}


class ObjectStorageClient(Protocol):
    """The subset of the boto3 S3 client the publisher calls."""

    def head_bucket(self, *, Bucket: str) -> Any: ...

    def upload_file(
        self,
        Filename: str,
        Bucket: str,
        Key: str,
        ExtraArgs: dict[str, Any] | None = None,
    ) -> None: ...


@dataclass(frozen=True, slots=True)
class S3Settings:
    region: str | None = None
    endpoint_url: str | None = None


def make_s3_client(settings: S3Settings) -> ObjectStorageClient:
    import boto3

    session_kwargs: dict[str, str] = {}
    if settings.region:
        session_kwargs["region_name"] = settings.region
    session = boto3.session.Session(**session_kwargs)
    if settings.endpoint_url:
        return session.client("s3", endpoint_url=settings.endpoint_url)
    return session.client("s3")


def guess_content_type(path: Path) -> str:
    ct, _ = mimetypes.guess_type(path.name)
    return ct or DEFAULT_CONTENT_TYPE


def iter_files(root: Path) -> list[Path]:
    """Regular files under root, sorted for a stable upload order."""
    return sorted(p for p in root.rglob("*") if p.is_file())


@dataclass(frozen=True, slots=True)
class _Upload:
    path: Path
    key: str


class ArtifactPublisher:
    """Uploads every regular file under a directory, one object per file.

    Uploads run on a thread pool of ``jobs`` workers. The first failure
    cancels the uploads that have not started yet and is returned as
    :class:`UploadFailure`; objects already written stay in place, and
    re-running with the same inputs overwrites them under the same keys.
    """

    def __init__(
        self,
        *,
        client: ObjectStorageClient,
        console: ConsoleProtocol,
        jobs: int = 4,
        dry_run: bool = False,
    ) -> None:
        self.client = client
        self.console = console
        self.jobs = max(1, jobs)
        self.dry_run = dry_run

    def publish(self, local_root: Path, bucket: str, key_prefix: str) -> Result[int, PublishError]:
        """Upload ``local_root`` to ``bucket`` under ``key_prefix``.

        Returns:
            Ok(number of objects uploaded), or the first error met
        """
        if not local_root.is_dir():
            return Err(SourceNotFound(path=local_root))

        uploads = [
            _Upload(path=p, key=object_key(key_prefix, p.relative_to(local_root)))
            for p in iter_files(local_root)
        ]

        if self.dry_run:
            for item in uploads:
                self.console.print(f"upload {item.path} -> s3://{bucket}/{item.key}", Style.DIM)
            return Ok(len(uploads))

        found = self._check_bucket(bucket)
        if isinstance(found, Err):
            return found

        if not uploads:
            self.console.warning(f"nothing to upload under {local_root}")
            return Ok(0)

        failure = self._upload_all(bucket, uploads)
        if failure is not None:
            return Err(failure)
        return Ok(len(uploads))

    def _check_bucket(self, bucket: str) -> Result[None, BucketNotFound]:
        try:
            self.client.head_bucket(Bucket=bucket)
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in _MISSING_BUCKET_CODES:
                reason = "bucket does not exist"
            elif code in _DENIED_CODES:
                reason = "access denied"
            else:
                reason = str(e)
            return Err(BucketNotFound(bucket=bucket, reason=reason))
        except BotoCoreError as e:
            return Err(BucketNotFound(bucket=bucket, reason=str(e)))
        return Ok(None)

    def _upload_all(self, bucket: str, uploads: list[_Upload]) -> UploadFailure | None:
        abort = threading.Event()
        with ThreadPoolExecutor(max_workers=self.jobs, thread_name_prefix="relcut-upload") as pool:
            futures: list[Future[UploadFailure | None]] = [
                pool.submit(self._upload_one, bucket, item, abort) for item in uploads
            ]
            for future in as_completed(futures):
                failure = future.result()
                if failure is not None:
                    pool.shutdown(wait=True, cancel_futures=True)
                    return failure
        return None

    def _upload_one(
        self, bucket: str, item: _Upload, abort: threading.Event
    ) -> UploadFailure | None:
        # Queued uploads that start after a failure are skipped.
        if abort.is_set():
            return None
        self.console.print(f"upload {item.path} -> s3://{bucket}/{item.key}", Style.DIM)
        try:
            self.client.upload_file(
                str(item.path),
                bucket,
                item.key,
                ExtraArgs={"ContentType": guess_content_type(item.path)},
            )
        except (ClientError, BotoCoreError, S3UploadFailedError, OSError) as e:
            abort.set()
            return UploadFailure(bucket=bucket, key=item.key, path=item.path, reason=str(e))
        return None
