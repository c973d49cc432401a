"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import typer

from relcut.core.result import Err, Result
from relcut.git.repository import Repository
from relcut.output.errors import AnyError, error_exit_code, print_error
from relcut.release.orchestrator import ReleaseOrchestrator
from relcut.release.store import VersionStore

if TYPE_CHECKING:
    from relcut.cli.context import CLIContext


T = TypeVar("T")


def unwrap_or_exit[T](result: Result[T, AnyError], ctx: CLIContext) -> T:
    """Return the Ok value, or print the error and exit with its code."""
    if isinstance(result, Err):
        print_error(result.error, ctx.console)
        raise typer.Exit(code=error_exit_code(result.error))
    return result.value


def make_orchestrator(ctx: CLIContext, *, dry_run: bool) -> ReleaseOrchestrator:
    return ReleaseOrchestrator(
        store=VersionStore(ctx.version_path),
        git=Repository(ctx.root),
        console=ctx.console,
        remote=ctx.config.git.remote,
        branch=ctx.config.git.branch,
        dry_run=dry_run,
    )
