"""Shared models and enums for dotlink."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class LinkState(str, Enum):
    """Relationship between a home entry and its source entry."""

    ABSENT = "absent"
    LINKED = "linked"
    OCCUPIED = "occupied"


class LinkAction(str, Enum):
    """Outcome of ``dotlink link`` for an entry."""

    LINKED = "linked"
    EXISTS = "exists"
    FORCED = "forced"
    FAILED = "failed"


class UnlinkAction(str, Enum):
    """Outcome of ``dotlink unlink`` for an entry."""

    REMOVED = "removed"
    SKIPPED = "skipped"
    FAILED = "failed"


class SubtreeAction(str, Enum):
    """Outcome of syncing one subtree manifest entry."""

    PULLED = "pulled"
    ADDED = "added"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class LinkResult:
    """Result emitted when linking an entry."""

    name: str
    source: Path
    target: Path
    state: LinkState
    action: LinkAction
    details: str | None = None


@dataclass(frozen=True, slots=True)
class UnlinkResult:
    """Result emitted when unlinking an entry."""

    name: str
    source: Path
    target: Path
    state: LinkState
    action: UnlinkAction
    details: str | None = None


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """State of a single home entry as reported by ``dotlink status``."""

    name: str
    source: Path
    target: Path
    state: LinkState
    details: str | None = None


@dataclass(frozen=True, slots=True)
class ImportResult:
    """Where an imported file now lives and the symlink left in its place."""

    name: str
    source: Path
    target: Path


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured outcome of an external command."""

    command: str
    status: int
    stdout: str
    stderr: str = ""

    @property
    def output(self) -> str:
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


@dataclass(frozen=True, slots=True)
class SubtreeEntry:
    """One line of the subtree manifest."""

    prefix: Path
    url: str | None
    line: int


@dataclass(frozen=True, slots=True)
class SubtreeResult:
    """Result emitted when syncing a subtree."""

    entry: SubtreeEntry
    action: SubtreeAction
    command: CommandResult | None = None
