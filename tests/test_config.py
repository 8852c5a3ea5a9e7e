from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from dotlink.config import DEFAULT_CONFIG_FILENAME, default_config_path, load_settings
from dotlink.errors import ConfigError


def _write_config(directory: Path, body: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    config_path = directory / DEFAULT_CONFIG_FILENAME
    config_path.write_text(dedent(body))
    return config_path


def test_defaults_follow_home(fake_home: Path) -> None:
    settings = load_settings()

    assert settings.home_dir == fake_home
    assert settings.repo_dir == fake_home / ".dotfiles"
    assert settings.source_dir == settings.repo_dir / "home"
    assert settings.subtree_manifest == settings.repo_dir / "subtrees"
    assert settings.remote == "origin"
    assert settings.subtree_branch == "master"
    assert settings.subtree_delay == 1.0


def test_environment_overrides(fake_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOTLINK_REPO", "~/src/dots")
    monkeypatch.setenv("DOTLINK_SOURCE", "files")
    monkeypatch.setenv("DOTLINK_SUBTREE_DELAY", "0.25")
    monkeypatch.setenv("DOTLINK_REMOTE", "upstream")

    settings = load_settings()

    assert settings.repo_dir == fake_home / "src" / "dots"
    assert settings.source_dir == settings.repo_dir / "files"
    assert settings.subtree_delay == 0.25
    assert settings.remote == "upstream"


def test_symlinked_repository_keeps_its_path(tmp_path: Path, fake_home: Path) -> None:
    real_repo = tmp_path / "storage" / "dotfiles"
    (real_repo / "home").mkdir(parents=True)
    (fake_home / ".dotfiles").symlink_to(real_repo)

    settings = load_settings()

    assert settings.repo_dir == fake_home / ".dotfiles"
    assert settings.source_dir == fake_home / ".dotfiles" / "home"
    assert settings.source_dir.is_dir()


def test_relative_segments_are_normalised(fake_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOTLINK_REPO", "~/src/../dots")

    assert load_settings().repo_dir == fake_home / "dots"


def test_explicit_config_file(tmp_path: Path, fake_home: Path) -> None:
    config_path = _write_config(
        tmp_path / "conf",
        """
        [settings]
        repo = "dotfiles"
        subtrees = "etc/subtrees.txt"
        subtree_branch = "main"
        """,
    )

    settings = load_settings(config_path)

    assert settings.repo_dir == fake_home / "dotfiles"
    assert settings.subtree_manifest == settings.repo_dir / "etc" / "subtrees.txt"
    assert settings.subtree_branch == "main"


def test_environment_wins_over_file(tmp_path: Path, fake_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = _write_config(tmp_path, '[settings]\nremote = "fork"\n')
    monkeypatch.setenv("DOTLINK_REMOTE", "origin")

    assert load_settings(config_path).remote == "origin"


def test_default_config_location_is_optional(tmp_path: Path, fake_home: Path) -> None:
    assert default_config_path() == tmp_path / "xdg" / "dotlink" / DEFAULT_CONFIG_FILENAME
    assert load_settings().repo_dir.name == ".dotfiles"

    _write_config(default_config_path().parent, '[settings]\nrepo = "~/other"\n')
    assert load_settings().repo_dir == fake_home / "other"


def test_directory_argument_resolves_default_file(tmp_path: Path, fake_home: Path) -> None:
    config_dir = tmp_path / "config"
    _write_config(config_dir, '[settings]\nremote = "mirror"\n')

    assert load_settings(config_dir).remote == "mirror"


def test_missing_explicit_config_raises(tmp_path: Path, fake_home: Path) -> None:
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "nope.toml")


def test_invalid_toml_raises(tmp_path: Path, fake_home: Path) -> None:
    config_path = tmp_path / DEFAULT_CONFIG_FILENAME
    config_path.write_text("[settings\n")

    with pytest.raises(ConfigError):
        load_settings(config_path)


def test_negative_delay_rejected(fake_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOTLINK_SUBTREE_DELAY", "-1")

    with pytest.raises(ConfigError, match="subtree_delay"):
        load_settings()
