from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from git import Actor, Repo

from dotlink.config import Settings, load_settings

AUTHOR = Actor("Dotlink Tests", "tests@example.com")


@pytest.fixture
def fake_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for variable in (
        "DOTLINK_REPO",
        "DOTLINK_SOURCE",
        "DOTLINK_SUBTREES",
        "DOTLINK_REMOTE",
        "DOTLINK_SUBTREE_BRANCH",
        "DOTLINK_SUBTREE_DELAY",
    ):
        monkeypatch.delenv(variable, raising=False)
    return home


@pytest.fixture
def settings(fake_home: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    monkeypatch.setenv("DOTLINK_SUBTREE_DELAY", "0")
    loaded = load_settings()
    loaded.source_dir.mkdir(parents=True)
    return loaded


def commit_file(repo: Repo, relative: str, content: str, message: str) -> None:
    path = Path(repo.working_tree_dir) / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    repo.index.add([relative])
    repo.index.commit(message, author=AUTHOR, committer=AUTHOR)


@pytest.fixture
def upstream(tmp_path: Path) -> Repo:
    """A throw-away repository with a ``home/.bashrc`` to clone from."""

    repo = Repo.init(tmp_path / "upstream")
    commit_file(repo, "home/.bashrc", "export EDITOR=vim\n", "Add bashrc")
    return repo


@pytest.fixture
def commit() -> Callable[[Repo, str, str, str], None]:
    return commit_file
