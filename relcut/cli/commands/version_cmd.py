from __future__ import annotations

import typer

from relcut.cli.commands._helpers import unwrap_or_exit
from relcut.cli.context import build_context
from relcut.output.console import Style
from relcut.release.store import VersionStore
from relcut.release.version import repository_key


def version(
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Print only the version string."),
) -> None:
    """Show the project version and its release state."""
    ctx = build_context()
    current = unwrap_or_exit(VersionStore(ctx.version_path).read(), ctx)

    if quiet:
        typer.echo(str(current))
        return

    state = "snapshot" if current.is_snapshot else "released"
    ctx.console.print(f"version: {current}", Style.BOLD)
    ctx.console.print(f"state: {state}")
    ctx.console.print(f"tag: {current.tag_name()}")
    ctx.console.print(f"repository: {repository_key(current, ctx.config.maven)}")
