"""Git access for the managed repository."""

from __future__ import annotations

import logging
from pathlib import Path

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from .errors import ExternalToolError, PreconditionError
from .models import CommandResult

logger = logging.getLogger(__name__)


class Repository:
    """Thin wrapper around a GitPython ``Repo`` that reports failures as ``ExternalToolError``.

    Every command runs synchronously and returns a ``CommandResult`` holding the
    exit status and captured output; formatting is left to the caller.
    """

    def __init__(self, repo: Repo) -> None:
        self._repo = repo

    def __repr__(self) -> str:
        return f"Repository({self.path})"

    @property
    def path(self) -> Path:
        return Path(self._repo.working_tree_dir or self._repo.git_dir)

    @classmethod
    def open(cls, path: Path) -> "Repository":
        try:
            return cls(Repo(str(path)))
        except (InvalidGitRepositoryError, NoSuchPathError):
            raise PreconditionError(
                f"Managed repository '{path}' is not a git working tree. Run 'dotlink clone <url>' first."
            ) from None

    @classmethod
    def clone(cls, url: str, path: Path) -> "Repository":
        logger.debug("Cloning %s into %s", url, path)
        try:
            return cls(Repo.clone_from(url, str(path)))
        except GitCommandError as exc:
            raise ExternalToolError.from_git(exc) from exc

    def pull_rebase(self, remote: str) -> CommandResult:
        """Fetch ``remote`` and rebase local commits on top of it."""

        return self._run("pull", "--rebase", remote)

    def subtree_pull(self, prefix: Path, url: str, branch: str) -> CommandResult:
        """Squash-merge ``branch`` of ``url`` into ``prefix``."""

        return self._run("subtree", "pull", f"--prefix={prefix.as_posix()}", url, branch, "--squash")

    def subtree_add(self, prefix: Path, url: str, branch: str) -> CommandResult:
        """Import ``branch`` of ``url`` as a new squashed subtree at ``prefix``."""

        return self._run("subtree", "add", f"--prefix={prefix.as_posix()}", url, branch, "--squash")

    def has_path(self, relative: Path) -> bool:
        return (self.path / relative).exists()

    def _run(self, command: str, *args: str) -> CommandResult:
        display = " ".join(("git", command, *args))
        logger.debug("Running %s in %s", display, self.path)
        try:
            status, stdout, stderr = self._repo.git.execute(
                ["git", command, *args],
                with_extended_output=True,
            )
        except GitCommandError as exc:
            raise ExternalToolError.from_git(exc) from exc
        return CommandResult(command=display, status=status, stdout=stdout, stderr=stderr)
