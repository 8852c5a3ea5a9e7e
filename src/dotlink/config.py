"""Settings loading for dotlink."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .errors import ConfigError

DEFAULT_CONFIG_FILENAME = "dotlink.toml"
DEFAULT_REPO = "~/.dotfiles"
DEFAULT_SOURCE = "home"
DEFAULT_SUBTREES = "subtrees"

ENV_OVERRIDES = {
    "DOTLINK_REPO": "repo",
    "DOTLINK_SOURCE": "source",
    "DOTLINK_SUBTREES": "subtrees",
    "DOTLINK_REMOTE": "remote",
    "DOTLINK_SUBTREE_BRANCH": "subtree_branch",
    "DOTLINK_SUBTREE_DELAY": "subtree_delay",
}


def _expand_path(raw: str | os.PathLike[str] | Path, *, base_dir: Path, environ: Mapping[str, str]) -> Path:
    """Return an absolute ``Path`` by expanding env vars and user segments."""

    text = str(raw)
    home = environ.get("HOME")
    if home and (text == "~" or text.startswith("~/")):
        text = home + text[1:]
    expanded = Path(os.path.expandvars(text)).expanduser()
    if not expanded.is_absolute():
        expanded = base_dir / expanded
    # normalised but unresolved: a symlinked repository keeps its own path
    return Path(os.path.abspath(expanded))


class Settings(BaseModel):
    """Locations and git parameters shared by every dotlink operation."""

    model_config = ConfigDict(frozen=True)

    home_dir: Path
    repo_dir: Path
    source_dir: Path
    subtree_manifest: Path
    remote: str = Field(default="origin", min_length=1)
    subtree_branch: str = Field(default="master", min_length=1)
    subtree_delay: float = Field(default=1.0, ge=0)

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], *, home_dir: Path, environ: Mapping[str, str]) -> "Settings":
        repo = _expand_path(raw.get("repo", DEFAULT_REPO), base_dir=home_dir, environ=environ)
        source = _expand_path(raw.get("source", DEFAULT_SOURCE), base_dir=repo, environ=environ)
        subtrees = _expand_path(raw.get("subtrees", DEFAULT_SUBTREES), base_dir=repo, environ=environ)

        extra: dict[str, Any] = {
            key: raw[key] for key in ("remote", "subtree_branch", "subtree_delay") if key in raw
        }
        try:
            return cls(
                home_dir=home_dir,
                repo_dir=repo,
                source_dir=source,
                subtree_manifest=subtrees,
                **extra,
            )
        except PydanticValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
            )
            raise ConfigError(f"Invalid settings: {problems}") from None


def default_config_path(environ: Mapping[str, str] | None = None) -> Path:
    """Return the location of the optional user settings file."""

    env = os.environ if environ is None else environ
    xdg = env.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "dotlink" / DEFAULT_CONFIG_FILENAME
    return _home_dir(env) / ".config" / "dotlink" / DEFAULT_CONFIG_FILENAME


def load_settings(path: Path | None = None, environ: Mapping[str, str] | None = None) -> Settings:
    """Build ``Settings`` from defaults, an optional TOML file and the environment.

    Args:
        path: Optional path to a TOML file (or a directory containing ``dotlink.toml``).
            When omitted the user config location is consulted and may be absent.
        environ: Mapping used instead of ``os.environ``; tests pass their own.
    """

    env = os.environ if environ is None else environ
    home_dir = _home_dir(env)

    raw: dict[str, Any] = {}
    config_path = _resolve_config_path(path, env)
    if config_path is not None:
        raw.update(_read_settings_table(config_path))

    for variable, key in ENV_OVERRIDES.items():
        value = env.get(variable)
        if value:
            raw[key] = value

    return Settings.from_raw(raw, home_dir=home_dir, environ=env)


def _home_dir(environ: Mapping[str, str]) -> Path:
    home = environ.get("HOME")
    if home:
        return Path(os.path.abspath(home))
    return Path.home().absolute()


def _read_settings_table(config_path: Path) -> dict[str, Any]:
    try:
        with config_path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Configuration file '{config_path}' is not valid TOML: {exc}") from exc

    settings = data.get("settings", {})
    if not isinstance(settings, dict):
        raise ConfigError(f"Configuration file '{config_path}' must define [settings] as a table")
    return settings


def _resolve_config_path(path: Path | None, environ: Mapping[str, str]) -> Path | None:
    if path is None:
        candidate = default_config_path(environ)
        return candidate if candidate.is_file() else None

    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Configuration file '{path}' does not exist")
    if path.is_dir():
        candidate = path / DEFAULT_CONFIG_FILENAME
        if not candidate.exists():
            raise ConfigError(f"Expected to find '{DEFAULT_CONFIG_FILENAME}' inside '{path}', but none was located")
        path = candidate

    return path.resolve(strict=False)
