from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from relcut.core.config import CONFIG_FILE_NAME, Config, load_config_or_default
from relcut.core.errors import ErrorCode
from relcut.core.result import Err
from relcut.output.console import ConsoleProtocol, RichConsole

ROOT_ENV = "RELCUT_ROOT"


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    config: Config
    console: ConsoleProtocol

    @property
    def version_path(self) -> Path:
        return self.root / self.config.version.file


def resolve_root() -> Path:
    env = os.environ.get(ROOT_ENV)
    if env:
        return Path(env).expanduser().resolve()
    return Path.cwd().resolve()


def build_context(console: ConsoleProtocol | None = None) -> CLIContext:
    root = resolve_root()
    config_result = load_config_or_default(root / CONFIG_FILE_NAME)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(
        root=root,
        config=config_result.value,
        console=console if console is not None else RichConsole(),
    )
