"""Filesystem helpers for dotlink."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

from .errors import SourceNotFoundError
from .models import LinkState


def ensure_parent(path: Path) -> None:
    """Ensure the parent directory exists."""

    path.parent.mkdir(parents=True, exist_ok=True)


def iter_entries(source_dir: Path) -> list[Path]:
    """Return the immediate entries of ``source_dir``, hidden ones included."""

    if not source_dir.is_dir():
        raise SourceNotFoundError(f"Source directory '{source_dir}' does not exist")
    return sorted(source_dir.iterdir(), key=lambda child: child.name)


def home_entry(source: Path, home_root: Path) -> Path:
    """Return the home directory path that mirrors ``source``."""

    return home_root / source.name


def link_state(source: Path, target: Path) -> LinkState:
    """Classify ``target`` relative to ``source``.

    A dangling symlink counts as occupied. ``LINKED`` requires the symlink's
    immediate target to equal ``source`` as a string.
    """

    if target.is_symlink():
        if os.readlink(target) == str(source):
            return LinkState.LINKED
        return LinkState.OCCUPIED
    if target.exists():
        return LinkState.OCCUPIED
    return LinkState.ABSENT


def describe(path: Path) -> str | None:
    """Return a short description of what occupies ``path``."""

    if path.is_symlink():
        return f"symlink to {os.readlink(path)}"
    if path.is_dir():
        return "directory"
    if path.exists():
        return "file"
    return None


def create_symlink(target: Path, source: Path) -> None:
    """Create ``target`` as a symlink pointing at ``source``."""

    ensure_parent(target)
    target.symlink_to(source)


def replace_with_symlink(target: Path, source: Path) -> None:
    """Replace whatever exists at ``target`` with a symlink to ``source``."""

    if target.is_dir() and not target.is_symlink():
        shutil.rmtree(target)
        create_symlink(target, source)
        return

    ensure_parent(target)
    fd, temp_name = tempfile.mkstemp(prefix=f".{target.name}.dotlink-tmp-", dir=target.parent)
    os.close(fd)
    temp_path = Path(temp_name)
    temp_path.unlink()
    try:
        temp_path.symlink_to(source)
        os.replace(temp_path, target)
    except Exception:
        if temp_path.is_symlink():
            temp_path.unlink(missing_ok=True)
        raise


def remove_symlink(target: Path) -> None:
    """Delete the symlink at ``target``, never what it points to."""

    if not target.is_symlink():
        raise ValueError(f"'{target}' is not a symlink")
    target.unlink()


def move_entry(source: Path, destination: Path) -> None:
    """Move ``source`` to ``destination``, across filesystems if needed."""

    ensure_parent(destination)
    shutil.move(os.fspath(source), os.fspath(destination))
