from __future__ import annotations

import os
from pathlib import Path

import typer

from relcut import __version__
from relcut.cli.commands.publish_cmd import publish
from relcut.cli.commands.release_cmd import release_app
from relcut.cli.commands.version_cmd import version
from relcut.cli.context import ROOT_ENV
from relcut.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(version)
app.command()(publish)

# Sub-apps
app.add_typer(
    release_app,
    name="release",
    help="Version lifecycle: cut, publish-binaries, advance, push, run.",
)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    show_version: bool = typer.Option(False, "--version", help="Show relcut version and exit."),
    root: Path | None = typer.Option(
        None,
        "--root",
        help="Repository root (defaults to the current directory).",
    ),
) -> None:
    if show_version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if root is not None:
        try:
            resolved = root.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --root: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not resolved.is_dir():
            typer.echo(f"error: --root '{resolved}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        os.environ[ROOT_ENV] = str(resolved)


def main() -> None:
    app()
