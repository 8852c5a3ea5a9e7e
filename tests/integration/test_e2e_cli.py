from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

from git import Repo
from typer.testing import CliRunner

from dotlink.cli import app

runner = CliRunner()


def test_cli_full_cycle(fake_home: Path, upstream: Repo, commit: Callable[[Repo, str, str, str], None]) -> None:
    repo_dir = fake_home / ".dotfiles"

    clone_result = runner.invoke(app, ["clone", str(upstream.working_tree_dir)])
    assert clone_result.exit_code == 0
    assert (repo_dir / "home" / ".bashrc").is_file()

    second_clone = runner.invoke(app, ["clone", str(upstream.working_tree_dir)])
    assert second_clone.exit_code == 1

    link_result = runner.invoke(app, ["link"])
    assert link_result.exit_code == 0
    bashrc = fake_home / ".bashrc"
    assert os.readlink(bashrc) == str(repo_dir / "home" / ".bashrc")

    (fake_home / ".vimrc").write_text("set number\n")
    import_result = runner.invoke(app, ["import", ".vimrc"])
    assert import_result.exit_code == 0
    assert (fake_home / ".vimrc").read_text() == "set number\n"
    assert (fake_home / ".vimrc").is_symlink()

    commit(upstream, "home/.inputrc", "set editing-mode vi\n", "Add inputrc")
    update_result = runner.invoke(app, ["update"])
    assert update_result.exit_code == 0
    assert (repo_dir / "home" / ".inputrc").is_file()

    status_result = runner.invoke(app, ["status"])
    assert status_result.exit_code == 0
    assert "absent" in status_result.stdout

    runner.invoke(app, ["link"])
    assert (fake_home / ".inputrc").read_text() == "set editing-mode vi\n"

    unlink_result = runner.invoke(app, ["unlink"])
    assert unlink_result.exit_code == 0
    assert not bashrc.exists()
    assert not (fake_home / ".inputrc").exists()
    assert not (fake_home / ".vimrc").exists()
    assert (repo_dir / "home" / ".vimrc").read_text() == "set number\n"


def test_cli_update_subtrees_missing_manifest(
    fake_home: Path,
    upstream: Repo,
) -> None:
    runner.invoke(app, ["clone", str(upstream.working_tree_dir)])

    result = runner.invoke(app, ["update", "--subtrees"])

    assert result.exit_code == 1
    assert "Subtree manifest" in result.output


def test_cli_config_file_relocates_repository(tmp_path: Path, fake_home: Path, upstream: Repo) -> None:
    config_path = tmp_path / "dotlink.toml"
    config_path.write_text('[settings]\nrepo = "~/src/dotfiles"\nsource = "files"\n')

    clone_result = runner.invoke(app, ["--config", str(config_path), "clone", str(upstream.working_tree_dir)])
    assert clone_result.exit_code == 0
    assert (fake_home / "src" / "dotfiles" / ".git").is_dir()

    (fake_home / "src" / "dotfiles" / "files").mkdir()
    (fake_home / "src" / "dotfiles" / "files" / ".tmux.conf").write_text("set -g mouse on\n")

    link_result = runner.invoke(app, ["-c", str(config_path), "link"])
    assert link_result.exit_code == 0
    assert (fake_home / ".tmux.conf").is_symlink()
    assert not (fake_home / ".bashrc").exists()
