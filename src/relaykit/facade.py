"""
RelaySetupFacade: run the Relay setup pipeline against one project.
"""

from typing import Iterable, List, Optional

from relaykit.config import get_settings
from relaykit.filesystem import FileAccess, LocalFileSystem
from relaykit.logging_config import logger
from relaykit.schemas import ProjectContext
from relaykit.tasks import LoggingObserver, RunResult, Task, TaskObserver, TaskRunner, build_tasks


class RelaySetupFacade:
    """
    Main entry point.

    Wires a ProjectContext, a file-access collaborator and observers into
    the task list and runs it.
    """

    def __init__(
        self,
        context: ProjectContext,
        fs: Optional[FileAccess] = None,
        observers: Optional[Iterable[TaskObserver]] = None,
    ):
        self.context = context
        self.fs = fs or LocalFileSystem()
        self.observers = list(observers) if observers is not None else [LoggingObserver()]

    def tasks(self) -> List[Task]:
        return build_tasks(self.context, self.fs)

    def run(self) -> RunResult:
        logger.info(
            f"Setting up Relay in {self.context.project_root} "
            f"(toolchain={self.context.toolchain.value}, typescript={self.context.typescript})"
        )
        logger.debug(f"Settings: {get_settings().to_dict()}")
        return TaskRunner(self.tasks(), self.observers).run_all()


def setup_relay(
    context: ProjectContext,
    fs: Optional[FileAccess] = None,
    observers: Optional[Iterable[TaskObserver]] = None,
) -> RunResult:
    return RelaySetupFacade(context, fs, observers).run()
