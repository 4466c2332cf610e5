"""
relaykit: wire Relay into an existing React project.

Idempotent structural edits of bundler/framework configuration and the
application entry file, plus generation of the Relay environment module.
"""

from relaykit.exceptions import (
    AnchorNotFound,
    ConfigError,
    FileAccessError,
    ParseError,
    RelayKitError,
    UnsupportedShape,
)
from relaykit.facade import RelaySetupFacade, setup_relay
from relaykit.filesystem import FileAccess, LocalFileSystem
from relaykit.schemas import ProjectContext, ResolvedPath, Toolchain
from relaykit.tasks import RunResult, TaskOutcome, TaskRunner, TaskStatus, build_tasks, run_all

__version__ = "0.1.0"

__all__ = [
    "RelaySetupFacade",
    "setup_relay",
    "ProjectContext",
    "ResolvedPath",
    "Toolchain",
    "FileAccess",
    "LocalFileSystem",
    "TaskRunner",
    "TaskOutcome",
    "TaskStatus",
    "RunResult",
    "build_tasks",
    "run_all",
    "RelayKitError",
    "ParseError",
    "AnchorNotFound",
    "UnsupportedShape",
    "FileAccessError",
    "ConfigError",
]
