"""
Tasks package: the Relay setup pipeline.

build_tasks() assembles the fixed, ordered task list for a project;
TaskRunner executes it.
"""

from typing import List

from relaykit.filesystem import FileAccess
from relaykit.schemas import ProjectContext

from .base import CallableTask, ProjectTask, Task, TaskOutcome, TaskStatus
from .runner import RunResult, TaskRecord, TaskRunner, run_all
from .observers import ConsoleObserver, LoggingObserver, TaskObserver
from .plugin_configuration import AddRelayPluginConfigurationTask
from .artifact_directory import GenerateArtifactDirectoryTask
from .relay_environment import GenerateRelayEnvironmentTask
from .schema_file import GenerateGraphQlSchemaFileTask
from .environment_provider import AddRelayEnvironmentProviderTask


def build_tasks(context: ProjectContext, fs: FileAccess) -> List[Task]:
    """Ordered task list for wiring Relay into the project."""
    return [
        AddRelayPluginConfigurationTask(context, fs),
        GenerateArtifactDirectoryTask(context, fs),
        GenerateRelayEnvironmentTask(context, fs),
        GenerateGraphQlSchemaFileTask(context, fs),
        AddRelayEnvironmentProviderTask(context, fs),
    ]


__all__ = [
    "build_tasks",

    # Abstractions
    "Task",
    "CallableTask",
    "ProjectTask",
    "TaskOutcome",
    "TaskStatus",

    # Runner
    "TaskRunner",
    "RunResult",
    "TaskRecord",
    "run_all",

    # Observers
    "TaskObserver",
    "LoggingObserver",
    "ConsoleObserver",

    # Tasks
    "AddRelayPluginConfigurationTask",
    "GenerateArtifactDirectoryTask",
    "GenerateRelayEnvironmentTask",
    "GenerateGraphQlSchemaFileTask",
    "AddRelayEnvironmentProviderTask",
]
