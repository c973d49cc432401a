from __future__ import annotations

import os
import tempfile
from pathlib import Path

from relcut.core.result import Err, Ok, Result
from relcut.release.errors import MalformedVersion, MissingVersionFile, ReadFailure, WriteFailure
from relcut.release.version import Version, parse_version

__all__ = ["VersionStore"]

_ReadError = MissingVersionFile | MalformedVersion | ReadFailure


class VersionStore:
    """Single-line version file, the only source of the project version.

    The store never talks to git: committing the file is the orchestrator's
    job, after :meth:`write` has returned.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def read(self) -> Result[Version, _ReadError]:
        text = self._read_text()
        if isinstance(text, Err):
            return text
        version = parse_version(text.value)
        if version is None:
            return Err(MalformedVersion(path=self.path, text=text.value.strip()))
        return Ok(version)

    def read_raw(self) -> Result[str, _ReadError]:
        """Exact file content, used to restore the file after a failed commit."""
        return self._read_text()

    def write(self, version: Version) -> Result[None, WriteFailure]:
        # Keep the line ending the file already had, if any.
        ending = ""
        existing = self._read_text()
        if isinstance(existing, Ok):
            text = existing.value
            ending = text[len(text.rstrip("\r\n")) :]
        return self.write_raw(f"{version}{ending}")

    def write_raw(self, content: str) -> Result[None, WriteFailure]:
        try:
            _atomic_write_text(self.path, content)
        except OSError as e:
            return Err(WriteFailure(path=self.path, reason=str(e)))
        return Ok(None)

    def _read_text(self) -> Result[str, _ReadError]:
        try:
            with self.path.open(encoding="utf-8", newline="") as handle:
                return Ok(handle.read())
        except (FileNotFoundError, IsADirectoryError):
            return Err(MissingVersionFile(path=self.path))
        except UnicodeDecodeError as e:
            text = bytes(e.object).decode("utf-8", errors="replace")
            return Err(MalformedVersion(path=self.path, text=text.strip()))
        except OSError as e:
            return Err(ReadFailure(path=self.path, reason=str(e)))


def _atomic_write_text(path: Path, content: str) -> None:
    """Write via temp file + replace so readers never see a half-written file."""
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)
