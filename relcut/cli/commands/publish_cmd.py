from __future__ import annotations

import os
from pathlib import Path

import typer

from relcut.cli.commands._helpers import unwrap_or_exit
from relcut.cli.context import CLIContext, build_context
from relcut.core.errors import ErrorCode
from relcut.platform.detection import platform_classifier
from relcut.publish.keys import build_key_prefix
from relcut.publish.s3 import ArtifactPublisher, S3Settings, make_s3_client
from relcut.release.store import VersionStore

BUCKET_ENV = "RELCUT_PUBLISH_BUCKET"
PREFIX_ENV = "RELCUT_PUBLISH_PREFIX"
ENDPOINT_ENV = "RELCUT_S3_ENDPOINT_URL"


def _first(*values: str | None) -> str | None:
    for value in values:
        if value and value.strip():
            return value.strip()
    return None


def _settings(ctx: CLIContext) -> S3Settings:
    cfg = ctx.config.publish
    return S3Settings(
        region=_first(
            cfg.region,
            os.environ.get("AWS_REGION"),
            os.environ.get("AWS_DEFAULT_REGION"),
        ),
        endpoint_url=_first(cfg.endpoint_url, os.environ.get(ENDPOINT_ENV)),
    )


def publish(
    directory: Path = typer.Argument(..., help="Directory of packaged outputs to upload."),
    bucket: str | None = typer.Option(None, "--bucket", help=f"Target bucket (or {BUCKET_ENV})."),
    prefix: str | None = typer.Option(None, "--prefix", help=f"Key prefix (or {PREFIX_ENV})."),
    build_version: str | None = typer.Option(
        None,
        "--build-version",
        help="Per-build version segment (defaults to the version file).",
    ),
    classifier: str | None = typer.Option(
        None,
        "--classifier",
        help="Platform segment (defaults to the host, e.g. linux-x64).",
    ),
    jobs: int | None = typer.Option(None, "--jobs", "-j", min=1, help="Parallel uploads."),
    dry_run: bool = typer.Option(False, "--dry-run", help="List uploads without sending them."),
) -> None:
    """Upload packaged outputs to object storage."""
    ctx = build_context()
    cfg = ctx.config.publish

    target = _first(bucket, cfg.bucket, os.environ.get(BUCKET_ENV))
    if target is None:
        ctx.console.error(f"no bucket configured; pass --bucket or set {BUCKET_ENV}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    version = _first(build_version)
    if version is None:
        version = str(unwrap_or_exit(VersionStore(ctx.version_path).read(), ctx))

    key_prefix = build_key_prefix(
        _first(prefix, cfg.prefix, os.environ.get(PREFIX_ENV)) or "",
        version,
        _first(classifier) or platform_classifier(),
    )

    publisher = ArtifactPublisher(
        client=make_s3_client(_settings(ctx)),
        console=ctx.console,
        jobs=jobs or cfg.jobs,
        dry_run=dry_run,
    )
    ctx.console.header(f"Publish {directory} -> s3://{target}/{key_prefix}")
    count = unwrap_or_exit(publisher.publish(directory, target, key_prefix), ctx)
    ctx.console.success(f"uploaded {count} object(s)")
