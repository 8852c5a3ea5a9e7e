"""Core package for the dotlink project."""

from .__about__ import __version__
from .cli import app, run
from .config import Settings, load_settings
from .errors import (
    ConfigError,
    DotlinkError,
    ExternalToolError,
    PreconditionError,
    SourceNotFoundError,
    ValidationError,
)
from .manager import DotlinkManager
from .models import (
    CommandResult,
    ImportResult,
    LinkAction,
    LinkResult,
    LinkState,
    StatusEntry,
    SubtreeAction,
    SubtreeEntry,
    SubtreeResult,
    UnlinkAction,
    UnlinkResult,
)
from .repository import Repository
from .subtrees import SubtreeManifest

__all__ = [
    "__version__",
    "Settings",
    "load_settings",
    "ConfigError",
    "DotlinkError",
    "ExternalToolError",
    "PreconditionError",
    "SourceNotFoundError",
    "ValidationError",
    "DotlinkManager",
    "CommandResult",
    "ImportResult",
    "LinkAction",
    "LinkResult",
    "LinkState",
    "StatusEntry",
    "SubtreeAction",
    "SubtreeEntry",
    "SubtreeResult",
    "UnlinkAction",
    "UnlinkResult",
    "Repository",
    "SubtreeManifest",
    "app",
    "run",
]
