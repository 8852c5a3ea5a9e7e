"""High level orchestration for dotlink operations."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Iterator

from .config import Settings
from .errors import DotlinkError, PreconditionError, ValidationError
from .filesystem import (
    create_symlink,
    describe,
    home_entry,
    iter_entries,
    link_state,
    move_entry,
    remove_symlink,
    replace_with_symlink,
)
from .models import (
    CommandResult,
    ImportResult,
    LinkAction,
    LinkResult,
    LinkState,
    StatusEntry,
    SubtreeAction,
    SubtreeResult,
    UnlinkAction,
    UnlinkResult,
)
from .repository import Repository
from .subtrees import SubtreeManifest

logger = logging.getLogger(__name__)


class DotlinkManager:
    """Coordinates link, unlink, import and repository sync for one ``Settings``."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def link(self, *, force: bool = False, pretend: bool = False) -> list[LinkResult]:
        results: list[LinkResult] = []

        for source in iter_entries(self.settings.source_dir):
            target = home_entry(source, self.settings.home_dir)
            state = link_state(source, target)

            if force and state is not LinkState.ABSENT:
                action = LinkAction.FORCED
            elif state is LinkState.ABSENT:
                action = LinkAction.LINKED
            else:
                action = LinkAction.EXISTS

            details: str | None = None
            if not pretend:
                try:
                    if action is LinkAction.LINKED:
                        create_symlink(target, source)
                        logger.debug("Linked %s -> %s", target, source)
                    elif action is LinkAction.FORCED:
                        replace_with_symlink(target, source)
                        logger.debug("Replaced %s with link to %s", target, source)
                except OSError as exc:
                    logger.error("Could not link %s: %s", target, exc)
                    action = LinkAction.FAILED
                    details = str(exc)

            results.append(
                LinkResult(name=source.name, source=source, target=target, state=state, action=action, details=details)
            )

        return results

    def unlink(self, *, pretend: bool = False) -> list[UnlinkResult]:
        results: list[UnlinkResult] = []

        for source in iter_entries(self.settings.source_dir):
            target = home_entry(source, self.settings.home_dir)
            state = link_state(source, target)

            details: str | None = None
            if state is LinkState.LINKED:
                action = UnlinkAction.REMOVED
                if not pretend:
                    try:
                        remove_symlink(target)
                        logger.debug("Removed %s", target)
                    except OSError as exc:
                        logger.error("Could not remove %s: %s", target, exc)
                        action = UnlinkAction.FAILED
                        details = str(exc)
            else:
                action = UnlinkAction.SKIPPED

            results.append(
                UnlinkResult(name=source.name, source=source, target=target, state=state, action=action, details=details)
            )

        return results

    def status(self) -> list[StatusEntry]:
        entries: list[StatusEntry] = []

        for source in iter_entries(self.settings.source_dir):
            target = home_entry(source, self.settings.home_dir)
            state = link_state(source, target)
            details = describe(target) if state is LinkState.OCCUPIED else None
            entries.append(StatusEntry(name=source.name, source=source, target=target, state=state, details=details))

        return entries

    def import_entry(self, name: str) -> ImportResult:
        """Move ``~/name`` into the source directory and link it back.

        The move and the link are two separate steps; if linking fails the file
        stays in the source directory and the error names its new location.
        """

        if not name or not name.strip():
            raise ValidationError("A file name to import is required")
        relative = Path(name)
        if relative.is_absolute() or len(relative.parts) != 1 or name in (".", ".."):
            raise ValidationError(f"'{name}' must name an entry directly inside the home directory")

        target = self.settings.home_dir / relative
        if not target.is_file():
            raise PreconditionError(f"'{target}' does not exist or is not a regular file")
        if target.is_symlink():
            raise PreconditionError(f"'{target}' is already a symlink")

        source = self.settings.source_dir / relative
        if source.exists() or source.is_symlink():
            raise PreconditionError(f"'{source}' already exists in the repository")

        move_entry(target, source)
        logger.debug("Moved %s to %s", target, source)
        try:
            create_symlink(target, source)
        except OSError as exc:
            raise DotlinkError(f"Moved '{target}' to '{source}' but could not link it back: {exc}") from exc

        return ImportResult(name=relative.name, source=source, target=target)

    def clone(self, url: str) -> Path:
        if not url or not url.strip():
            raise ValidationError("A repository URL is required")

        repo_dir = self.settings.repo_dir
        if repo_dir.exists() or repo_dir.is_symlink():
            raise PreconditionError(f"Managed repository '{repo_dir}' already exists")

        repo_dir.parent.mkdir(parents=True, exist_ok=True)
        Repository.clone(url.strip(), repo_dir)
        return repo_dir

    def load_subtrees(self) -> SubtreeManifest:
        return SubtreeManifest.load(self.settings.subtree_manifest)

    def update(self) -> CommandResult:
        """Fetch the configured remote and rebase local commits on top."""

        repository = Repository.open(self.settings.repo_dir)
        return repository.pull_rebase(self.settings.remote)

    def sync_subtrees(self, manifest: SubtreeManifest) -> Iterator[SubtreeResult]:
        """Squash-merge every enabled subtree, yielding a result per manifest entry.

        The first failing git command raises ``ExternalToolError`` and stops the sync.
        """

        repository = Repository.open(self.settings.repo_dir)
        first = True

        for entry in manifest:
            if not entry.url:
                logger.debug("Subtree %s has no URL, skipping", entry.prefix)
                yield SubtreeResult(entry=entry, action=SubtreeAction.SKIPPED)
                continue

            if not first and self.settings.subtree_delay:
                time.sleep(self.settings.subtree_delay)
            first = False

            if repository.has_path(entry.prefix):
                command = repository.subtree_pull(entry.prefix, entry.url, self.settings.subtree_branch)
                action = SubtreeAction.PULLED
            else:
                command = repository.subtree_add(entry.prefix, entry.url, self.settings.subtree_branch)
                action = SubtreeAction.ADDED

            yield SubtreeResult(entry=entry, action=action, command=command)
