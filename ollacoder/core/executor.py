# ollacoder/core/executor.py
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence

from chatjson import Operation, ResponseKind, SingleTask, TaskRecord

from .code_cleaner import clean_code
from .file_store import WorkspaceFileStore
from .paths import ExtensionPolicy, has_extension
from .prompts import PromptRenderer
from .structured import StructuredClient
from ..utils.console import error, info, success, task_line, warning

logger = logging.getLogger(__name__)


class TaskAttemptError(Exception):
    """An attempt produced nothing usable (bad path, no code)."""


@dataclass
class TaskReport:
    """Outcome of one task."""
    task_name: str
    target_file: str
    succeeded: bool
    attempts: int
    operation: Optional[Operation] = None
    error: Optional[str] = None
    explanation: Optional[str] = None

    @property
    def retries(self) -> int:
        return max(0, self.attempts - 1)


def normalize_relative_path(path: str) -> str:
    """Trim quotes and whitespace, use forward slashes, drop a leading ./ or /."""
    cleaned = (path or "").strip().strip("\"'").strip().replace("\\", "/")
    while cleaned.startswith("./"):
        cleaned = cleaned[2:]
    return cleaned.lstrip("/")


class TaskExecutor:
    """
    Runs planned tasks one by one: asks the generator for the file content of
    each task and applies it through the file store.

    A task gets ``max_attempts`` attempts with a linear backoff between them.
    A failed task is reported and the next task still runs.
    """

    def __init__(
        self,
        client: StructuredClient,
        file_store: WorkspaceFileStore,
        renderer: Optional[PromptRenderer] = None,
        extension_policy: Optional[ExtensionPolicy] = None,
        max_attempts: int = 2,
        base_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.file_store = file_store
        self.renderer = renderer or client.renderer
        self.extension_policy = extension_policy or ExtensionPolicy()
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self._sleep = sleep

    async def execute_all(self, tasks: Sequence[TaskRecord], context: str) -> List[TaskReport]:
        """Execute ``tasks`` strictly in list order."""
        reports = []
        for i, task in enumerate(tasks, start=1):
            reports.append(await self.execute(task, context, i, len(tasks)))
        return reports

    async def execute(self, task: TaskRecord, context: str, task_number: int = 1, total_tasks: int = 1) -> TaskReport:
        task_line(task_number, total_tasks, task.target_file, task.task_name)

        if not task.target_file or not task.target_file.strip():
            message = "No target file specified"
            error(f"✗ Task {task_number} Failed: {message}")
            return TaskReport(task.task_name, "", succeeded=False, attempts=0, error=message)

        planned_target = self.extension_policy.ensure_extension(normalize_relative_path(task.target_file))
        last_error = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self._attempt(task, planned_target, context, attempt, task_number)
            except Exception as e:
                last_error = str(e) or type(e).__name__
                logger.debug("Task %d attempt %d failed", task_number, attempt, exc_info=True)
                if attempt < self.max_attempts:
                    warning(f"Task {task_number} attempt {attempt} failed: {last_error}. Retrying...")
                    await self._sleep(attempt * self.base_delay)

        error(f"✗ Task {task_number} Failed: {last_error}")
        return TaskReport(
            task.task_name, planned_target, succeeded=False, attempts=self.max_attempts, error=last_error
        )

    def build_prompt(self, task: TaskRecord, target_file: str, context: str, attempt: int) -> str:
        return self.renderer.render(
            'task',
            task=task,
            target_file=target_file,
            operation=task.operation.value,
            context=context or "(no additional context)",
            attempt=attempt,
        )

    async def _attempt(
        self, task: TaskRecord, planned_target: str, context: str, attempt: int, task_number: int
    ) -> TaskReport:
        prompt = self.build_prompt(task, planned_target, context, attempt)
        response: SingleTask = await self.client.request_value(prompt, ResponseKind.SINGLE_TASK)

        target_file = normalize_relative_path(response.file_path) or planned_target
        if not has_extension(target_file):
            raise TaskAttemptError(f"Invalid file path '{target_file}'.")

        operation = response.operation
        if operation is Operation.DELETE:
            self.file_store.delete(target_file)
            success(f"✓ Task {task_number} Complete - Deleted {target_file}")
        else:
            if not response.code or not response.code.strip():
                raise TaskAttemptError("No code generated")
            self.file_store.write(target_file, clean_code(response.code))
            success(f"✓ Task {task_number} Complete - {operation.value}d {target_file}")

        if response.explanation:
            info(f"  → {response.explanation}")

        return TaskReport(
            task.task_name,
            target_file,
            succeeded=True,
            attempts=attempt,
            operation=operation,
            explanation=response.explanation,
        )
