from __future__ import annotations

import typer

from relcut.cli.commands._helpers import make_orchestrator, unwrap_or_exit
from relcut.cli.context import CLIContext, build_context
from relcut.core.errors import ErrorCode
from relcut.release.binary import command_publish_step
from relcut.release.orchestrator import BinaryPublishStep


release_app = typer.Typer(add_completion=False, no_args_is_help=True)

_DRY_RUN = typer.Option(False, "--dry-run", help="Print the steps without changing anything.")


def _binary_step(ctx: CLIContext) -> BinaryPublishStep | None:
    command = ctx.config.release.publish_command
    if not command:
        return None
    return command_publish_step(
        command=command,
        cwd=ctx.root,
        maven=ctx.config.maven,
        console=ctx.console,
    )


@release_app.command("cut")
def cut(dry_run: bool = _DRY_RUN) -> None:
    """Switch the snapshot version to a release, commit it and tag it."""
    ctx = build_context()
    result = unwrap_or_exit(make_orchestrator(ctx, dry_run=dry_run).cut_release(), ctx)
    if result.resumed:
        ctx.console.info(f"resumed interrupted release: tagged {result.tag}")


@release_app.command("advance")
def advance(dry_run: bool = _DRY_RUN) -> None:
    """Switch the release version to the next snapshot and commit it."""
    ctx = build_context()
    unwrap_or_exit(make_orchestrator(ctx, dry_run=dry_run).advance_snapshot(), ctx)


@release_app.command("push")
def push(dry_run: bool = _DRY_RUN) -> None:
    """Push the release branch and its release tags."""
    ctx = build_context()
    branch = unwrap_or_exit(make_orchestrator(ctx, dry_run=dry_run).push(), ctx)
    ctx.console.success(f"pushed {branch} to {ctx.config.git.remote}")


@release_app.command("publish-binaries")
def publish_binaries(dry_run: bool = _DRY_RUN) -> None:
    """Run [release].publish_command for the released version."""
    ctx = build_context()
    step = _binary_step(ctx)
    if step is None:
        ctx.console.error("no [release].publish_command configured in relcut.toml")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    orchestrator = make_orchestrator(ctx, dry_run=dry_run)
    version = unwrap_or_exit(orchestrator.publish_binaries(step), ctx)
    ctx.console.success(f"published binaries for {version}")


@release_app.command("run")
def run(
    no_push: bool = typer.Option(False, "--no-push", help="Stop before pushing."),
    skip_binary_publish: bool = typer.Option(
        False,
        "--skip-binary-publish",
        help="Do not run [release].publish_command between the two commits.",
    ),
    dry_run: bool = _DRY_RUN,
) -> None:
    """Cut a release, publish binaries, advance to the next snapshot, push."""
    ctx = build_context()
    step = None if skip_binary_publish else _binary_step(ctx)
    orchestrator = make_orchestrator(ctx, dry_run=dry_run)
    outcome = unwrap_or_exit(orchestrator.run_release(publish_binaries=step, push=not no_push), ctx)

    ctx.console.newline()
    ctx.console.success(
        f"released {outcome.released.version} ({outcome.released.tag}), "
        f"now at {outcome.next_snapshot.version}"
    )
    if outcome.pushed_branch is None:
        ctx.console.info("not pushed; run: relcut release push")
