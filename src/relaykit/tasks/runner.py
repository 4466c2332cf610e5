"""
Task Runner: execute tasks strictly in order and aggregate their outcomes.

Per task: PENDING -> RUNNING -> SUCCEEDED | SKIPPED | FAILED. A disabled
task goes straight to SKIPPED. A failing task does not stop the run;
the run reports failure if any task failed. Work already written by
earlier tasks is never rolled back.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from relaykit.exceptions import RelayKitError
from relaykit.logging_config import logger
from relaykit.tasks.base import Task, TaskOutcome, TaskStatus
from relaykit.tasks.observers import TaskObserver


@dataclass
class TaskRecord:
    label: str
    status: TaskStatus = TaskStatus.PENDING
    outcome: Optional[TaskOutcome] = None


@dataclass
class RunResult:
    records: List[TaskRecord] = field(default_factory=list)

    @property
    def overall_succeeded(self) -> bool:
        return not self.failed

    @property
    def failed(self) -> List[TaskRecord]:
        return [r for r in self.records if r.status == TaskStatus.FAILED]

    @property
    def skipped(self) -> List[TaskRecord]:
        return [r for r in self.records if r.status == TaskStatus.SKIPPED]

    @property
    def outcomes(self) -> List[TaskOutcome]:
        return [r.outcome for r in self.records if r.outcome is not None]


class TaskRunner:
    """
    Run a fixed list of tasks one after another.

    Each task completes, including its file writes, before the next one
    starts. Observers receive start/finish events; the runner itself
    does no reporting.
    """

    def __init__(self, tasks: Sequence[Task], observers: Optional[Iterable[TaskObserver]] = None):
        self.tasks = list(tasks)
        self.observers = list(observers or [])

    def run_all(self) -> RunResult:
        result = RunResult(records=[TaskRecord(label=t.label) for t in self.tasks])

        for task, record in zip(self.tasks, result.records):
            outcome = self._run_task(task, record)
            record.label = task.label
            record.status = outcome.status
            record.outcome = outcome
            for observer in self.observers:
                observer.on_task_finished(task, outcome)

        for observer in self.observers:
            observer.on_run_finished(result)
        return result

    def _run_task(self, task: Task, record: TaskRecord) -> TaskOutcome:
        try:
            if not task.is_enabled():
                return TaskOutcome.skipped("Not enabled for this project")
        except Exception as e:
            logger.exception(f"Evaluating whether '{task.label}' is enabled failed")
            return TaskOutcome.failed(e)

        record.status = TaskStatus.RUNNING
        for observer in self.observers:
            observer.on_task_started(task)

        try:
            outcome = task.run()
        except RelayKitError as e:
            return TaskOutcome.failed(e)
        except Exception as e:
            logger.exception(f"Task '{task.label}' failed unexpectedly")
            return TaskOutcome.failed(e)

        if outcome is None:
            return TaskOutcome.succeeded()
        return outcome


def run_all(tasks: Sequence[Task], observers: Optional[Iterable[TaskObserver]] = None) -> RunResult:
    """Run tasks in order and return the aggregated result."""
    return TaskRunner(tasks, observers).run_all()
