"""Binary-repository publication hook for full release runs.

The Maven-style publication itself belongs to the build tool; relcut only
runs the configured command at the right point of the run and tells it
which version and repository key it is publishing.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from pathlib import Path

from relcut.core.config import MavenConfig
from relcut.core.result import Err, Ok, Result
from relcut.output.console import ConsoleProtocol, Style
from relcut.platform.process import run as run_process
from relcut.release.errors import BinaryPublishFailed
from relcut.release.orchestrator import BinaryPublishStep
from relcut.release.version import Version, repository_key


def publish_env(
    version: Version, maven: MavenConfig, base: Mapping[str, str] | None = None
) -> dict[str, str]:
    env = dict(os.environ if base is None else base)
    env["RELCUT_VERSION"] = str(version)
    env["RELCUT_REPOSITORY_KEY"] = repository_key(version, maven)
    return env


def command_publish_step(
    *,
    command: Sequence[str],
    cwd: Path,
    maven: MavenConfig,
    console: ConsoleProtocol,
) -> BinaryPublishStep:
    """Build a step running ``command`` for the released version."""

    def step(version: Version) -> Result[None, BinaryPublishFailed]:
        console.print(f"{' '.join(command)} ({repository_key(version, maven)})", Style.DIM)
        result = run_process(list(command), cwd=cwd, env=publish_env(version, maven))
        if isinstance(result, Err):
            return Err(BinaryPublishFailed(version=version, error=result.error))
        return Ok(None)

    return step
