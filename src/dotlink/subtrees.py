"""Subtree manifest parsing for dotlink."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from .errors import ConfigError
from .models import SubtreeEntry


class SubtreeManifest:
    """Ordered list of subtree prefixes and the remotes they are pulled from.

    Each non-blank line holds ``<directory> [<remote-url>]``. A line without a
    URL marks a disabled subtree. Lines starting with ``#`` are comments.
    """

    def __init__(self, path: Path, entries: list[SubtreeEntry] | None = None) -> None:
        self.path = path
        self._entries: list[SubtreeEntry] = entries or []

    @classmethod
    def load(cls, path: Path) -> "SubtreeManifest":
        if not path.is_file():
            raise ConfigError(f"Subtree manifest '{path}' does not exist")
        return cls.parse(path.read_text(), path=path)

    @classmethod
    def parse(cls, text: str, *, path: Path) -> "SubtreeManifest":
        entries: list[SubtreeEntry] = []
        for number, line in enumerate(text.splitlines(), start=1):
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue

            fields = stripped.split()
            if len(fields) > 2:
                raise ConfigError(f"{path}:{number}: expected '<directory> [<url>]', got {len(fields)} fields")

            prefix = Path(fields[0])
            if prefix.is_absolute():
                raise ConfigError(f"{path}:{number}: subtree directory '{prefix}' must be relative to the repository")
            if ".." in prefix.parts:
                raise ConfigError(f"{path}:{number}: subtree directory '{prefix}' must not escape the repository")

            url = fields[1] if len(fields) == 2 else None
            entries.append(SubtreeEntry(prefix=prefix, url=url, line=number))

        return cls(path, entries)

    def entries(self) -> list[SubtreeEntry]:
        return list(self._entries)

    def __iter__(self) -> Iterator[SubtreeEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
