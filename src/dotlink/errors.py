"""Exception hierarchy for dotlink."""

from __future__ import annotations

from git import GitCommandError


class DotlinkError(RuntimeError):
    """Raised when dotlink encounters an unrecoverable state."""


class ConfigError(DotlinkError):
    """Raised when settings or the subtree manifest cannot be parsed or validated."""


class ValidationError(DotlinkError):
    """Raised when a command receives a missing or malformed argument."""


class PreconditionError(DotlinkError):
    """Raised when the filesystem is not in the state an operation requires."""


class SourceNotFoundError(DotlinkError):
    """Raised when the source directory inside the repository does not exist."""


class ExternalToolError(DotlinkError):
    """Raised when an invoked ``git`` command exits with a non-zero status."""

    def __init__(self, command: str, status: int | None, stderr: str = "") -> None:
        self.command = command
        self.status = status
        self.stderr = stderr
        super().__init__(f"'{command}' failed with exit status {status}")

    @classmethod
    def from_git(cls, exc: GitCommandError) -> "ExternalToolError":
        command = exc.command if isinstance(exc.command, str) else " ".join(str(part) for part in exc.command)
        status = exc.status if isinstance(exc.status, int) else None
        stderr = exc.stderr or ""
        # GitPython wraps captured output as "\n  stderr: '...'"
        stderr = stderr.strip()
        if stderr.startswith("stderr:"):
            stderr = stderr[len("stderr:") :].strip()
            if len(stderr) >= 2 and stderr.startswith("'") and stderr.endswith("'"):
                stderr = stderr[1:-1]
        return cls(command, status, stderr)
