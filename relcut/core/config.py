"""Typed configuration loading and access.

relcut reads an optional ``relcut.toml`` at the repository root. Every
section has defaults matching a conventional Gradle/Maven project with a
plain ``version.txt``, so a missing file is not an error.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_int, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILE_NAME",
    "Config",
    "ConfigError",
    "GitConfig",
    "MavenConfig",
    "PublishConfig",
    "ReleaseConfig",
    "VersionConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "relcut.toml"

DEFAULT_VERSION_FILE = "version.txt"
DEFAULT_REMOTE = "origin"
DEFAULT_SNAPSHOT_REPOSITORY = "libs-snapshot-local"
DEFAULT_RELEASE_REPOSITORY = "libs-release-local"
DEFAULT_UPLOAD_JOBS = 4


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class VersionConfig:
    """Location of the version file, relative to the repository root."""

    file: str = DEFAULT_VERSION_FILE


@dataclass(frozen=True, slots=True)
class GitConfig:
    """Remote and branch the release commits are pushed to.

    No branch means "whatever HEAD points at".
    """

    remote: str = DEFAULT_REMOTE
    branch: str | None = None


@dataclass(frozen=True, slots=True)
class MavenConfig:
    """Binary repository keys, selected by the version's snapshot state."""

    snapshot_repository: str = DEFAULT_SNAPSHOT_REPOSITORY
    release_repository: str = DEFAULT_RELEASE_REPOSITORY


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Full release run settings.

    publish_command runs between the release commit and the next snapshot
    commit, with RELCUT_VERSION and RELCUT_REPOSITORY_KEY in its environment.
    """

    publish_command: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PublishConfig:
    """Object storage settings for packaged outputs."""

    bucket: str | None = None
    prefix: str | None = None
    region: str | None = None
    endpoint_url: str | None = None
    jobs: int = DEFAULT_UPLOAD_JOBS


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    version: VersionConfig = field(default_factory=VersionConfig)
    git: GitConfig = field(default_factory=GitConfig)
    maven: MavenConfig = field(default_factory=MavenConfig)
    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    publish: PublishConfig = field(default_factory=PublishConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        version: StrDict = get_table(data, "version") or {}
        git: StrDict = get_table(data, "git") or {}
        maven: StrDict = get_table(data, "maven") or {}
        release: StrDict = get_table(data, "release") or {}
        publish: StrDict = get_table(data, "publish") or {}

        jobs = get_int(publish, "jobs")
        if jobs is not None and jobs < 1:
            raise ValueError(f"publish.jobs must be >= 1, got {jobs}")

        return cls(
            version=VersionConfig(file=get_str(version, "file") or DEFAULT_VERSION_FILE),
            git=GitConfig(
                remote=get_str(git, "remote") or DEFAULT_REMOTE,
                branch=get_str(git, "branch"),
            ),
            maven=MavenConfig(
                snapshot_repository=get_str(maven, "snapshot_repository")
                or DEFAULT_SNAPSHOT_REPOSITORY,
                release_repository=get_str(maven, "release_repository")
                or DEFAULT_RELEASE_REPOSITORY,
            ),
            release=ReleaseConfig(publish_command=get_str_list(release, "publish_command") or ()),
            publish=PublishConfig(
                bucket=get_str(publish, "bucket"),
                prefix=get_str(publish, "prefix"),
                region=get_str(publish, "region"),
                endpoint_url=get_str(publish, "endpoint_url"),
                jobs=jobs or DEFAULT_UPLOAD_JOBS,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to relcut.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config if the file exists, defaults otherwise.

    A file that exists but does not parse is still an error: silently
    falling back would release with the wrong remote or version file.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
