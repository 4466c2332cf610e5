"""
Task abstraction.

A task is one independently fallible unit of the pipeline: a label plus
an operation that returns a TaskOutcome. Expected non-changes come back
as TaskOutcome.skipped(); errors are raised and turned into a failed
outcome by the runner.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from relaykit.exceptions import FileAccessError
from relaykit.filesystem import FileAccess
from relaykit.schemas import ProjectContext, ResolvedPath
from relaykit.syntax.adapter import SyntaxTree, parse_file_content, print_tree


class TaskStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class TaskOutcome:
    status: TaskStatus
    reason: str = ""
    error: Optional[BaseException] = None

    @classmethod
    def succeeded(cls) -> "TaskOutcome":
        return cls(TaskStatus.SUCCEEDED)

    @classmethod
    def skipped(cls, reason: str) -> "TaskOutcome":
        return cls(TaskStatus.SKIPPED, reason=reason)

    @classmethod
    def failed(cls, error: BaseException) -> "TaskOutcome":
        return cls(TaskStatus.FAILED, reason=str(error), error=error)


class Task(ABC):
    """Base class for pipeline tasks."""

    label: str = ""

    def is_enabled(self) -> bool:
        return True

    def update_label(self, label: str) -> None:
        """Amend the label once the concrete target is known."""
        self.label = label

    @abstractmethod
    def run(self) -> TaskOutcome:
        ...


class CallableTask(Task):
    """A task built from a plain {label, operation} pair."""

    def __init__(
        self,
        label: str,
        operation: Callable[[], Optional[TaskOutcome]],
        is_enabled: Optional[Callable[[], bool]] = None,
    ):
        self.label = label
        self._operation = operation
        self._is_enabled = is_enabled

    def is_enabled(self) -> bool:
        return self._is_enabled() if self._is_enabled is not None else True

    def run(self) -> TaskOutcome:
        return self._operation() or TaskOutcome.succeeded()


class ProjectTask(Task):
    """Task operating on a target project through the file-access collaborator."""

    def __init__(self, context: ProjectContext, fs: FileAccess):
        self.context = context
        self.fs = fs

    def locate(self, target: ResolvedPath) -> Path:
        """
        Find target on disk by listing its directory.

        Raises:
            FileAccessError: If the file does not exist.
        """
        found = self.fs.find_file_matching_name(target.parent_directory, target.name)
        if found is None:
            raise FileAccessError(target.rel, "File not found")
        return found

    def display_path(self, path: Path) -> str:
        """path relative to the project root, for messages."""
        try:
            return Path(path).relative_to(self.context.project_root).as_posix()
        except ValueError:
            return str(path)

    def read_tree(self, path: Path) -> SyntaxTree:
        code = self.fs.read(path)
        return parse_file_content(code, self.display_path(path))

    def write_tree(self, path: Path, tree: SyntaxTree) -> None:
        self.fs.write(path, print_tree(tree))
