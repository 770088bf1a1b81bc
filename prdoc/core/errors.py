"""Error codes for CLI exit status.

These values are process exit codes used by every command and should remain
stable:
- 0: Success
- 1: User error (invalid records, bad arguments)
- 2: Config error (unreadable or invalid .prdoc.toml)
- 3: I/O error (output could not be written)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    IO_ERROR = 3

