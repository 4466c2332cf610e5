"""
Observers subscribed to task-runner events.

Reporting lives here so task logic stays free of console and log output.
"""

from typing import TYPE_CHECKING, Optional, Protocol

from rich.console import Console
from rich.markup import escape

from relaykit.logging_config import logger

if TYPE_CHECKING:
    from relaykit.tasks.base import Task, TaskOutcome
    from relaykit.tasks.runner import RunResult


class TaskObserver(Protocol):
    def on_task_started(self, task: "Task") -> None: ...

    def on_task_finished(self, task: "Task", outcome: "TaskOutcome") -> None: ...

    def on_run_finished(self, result: "RunResult") -> None: ...


class LoggingObserver:
    """Writes task outcomes to the loguru logger."""

    def on_task_started(self, task: "Task") -> None:
        logger.debug(f"Running task: {task.label}")

    def on_task_finished(self, task: "Task", outcome: "TaskOutcome") -> None:
        from relaykit.tasks.base import TaskStatus

        if outcome.status == TaskStatus.SUCCEEDED:
            logger.info(f"Task succeeded: {task.label}")
        elif outcome.status == TaskStatus.SKIPPED:
            logger.info(f"Task skipped: {task.label} ({outcome.reason})")
        else:
            logger.error(f"Task failed: {task.label}: {outcome.reason}")

    def on_run_finished(self, result: "RunResult") -> None:
        if result.overall_succeeded:
            logger.info(f"All {len(result.records)} tasks completed")
        else:
            logger.error(f"{len(result.failed)} of {len(result.records)} tasks failed")


class ConsoleObserver:
    """Human-readable progress on a rich console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def on_task_started(self, task: "Task") -> None:
        pass

    def on_task_finished(self, task: "Task", outcome: "TaskOutcome") -> None:
        from relaykit.tasks.base import TaskStatus

        label = escape(task.label)
        if outcome.status == TaskStatus.SUCCEEDED:
            self.console.print(f"[green]✔[/green] {label}")
        elif outcome.status == TaskStatus.SKIPPED:
            self.console.print(f"[dim]-[/dim] {label} [dim]({escape(outcome.reason)})[/dim]")
        else:
            self.console.print(f"[red]✖[/red] {label}")
            self.console.print(f"  [red]{escape(outcome.reason)}[/red]")

    def on_run_finished(self, result: "RunResult") -> None:
        if not result.overall_succeeded:
            self.console.print()
            self.console.print("[red]✖[/red] Some of the tasks failed unexpectedly.")
