"""Exit codes for relcut commands.

CI pipelines branch on these values (a partial release is resumable, a VCS
failure needs a human), so the numbers must stay stable.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success
    - 1: User error (bad input, invalid arguments, malformed version file)
    - 2: State error (wrong lifecycle state for the requested transition)
    - 3: VCS error (git command failed, tag conflict)
    - 4: Network error (bucket missing, upload failed)
    - 5: I/O error (file not found, permission denied)
    - 6: Partial release (resume with `relcut release advance`)
    """

    OK = 0
    USER_ERROR = 1
    STATE_ERROR = 2
    VCS_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5
    PARTIAL_RELEASE = 6

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")
