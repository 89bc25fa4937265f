"""Task factory - creates tasks and dispatches them to their definitions."""

import asyncio
import inspect
from collections.abc import Callable, Iterable, Mapping
from typing import Any

import structlog

from .config import get_registry_settings
from .tasks.models import SerializedTask, Task, TaskGroup, ValidateFunc
from .tasks.registry import TaskRegistry

logger = structlog.get_logger("taskfactory.factory")


class TaskFactory:
    """
    Creates, (de)serializes and dispatches tasks for one registry.

    Calling the factory is the same as calling create():

        Task = create_task_factory([...])
        task = Task("email", {"to": "ops@example.com"})
        await Task.execute(context, [task])
    """

    def __init__(self, registry: TaskRegistry):
        self.registry = registry

    def __call__(self, task_type: str, data: Any = None) -> Task:
        return self.create(task_type, data)

    def __repr__(self) -> str:
        return f"TaskFactory(types={list(self.registry.types)!r})"

    def _build(self, task_type: str, detail: Any, validate: ValidateFunc | None) -> Task:
        task = Task(type=task_type, detail=detail)
        if validate is not None:
            validate(task)
        return task

    def create(self, task_type: str, data: Any = None) -> Task:
        """
        Create a new task from raw data.

        The type's format hook (if any) turns data into the task detail, then
        its validate hook (if any) checks the finished task. Errors from
        either hook propagate unchanged.
        """
        definition = self.registry.get_definition(task_type)
        detail = definition.format(data) if definition.format is not None else data
        return self._build(task_type, detail, definition.validate)

    def from_serialized(self, record: Mapping[str, Any] | SerializedTask | Task) -> Task:
        """Rebuild a task from its serialized record. Format is not re-applied."""
        if isinstance(record, (SerializedTask, Task)):
            task_type, detail = record.type, record.detail
        else:
            task_type, detail = record.get("type"), record.get("detail")

        definition = self.registry.get_definition(task_type)
        return self._build(task_type, detail, definition.validate)

    def serialize(self, task: Task) -> dict[str, Any]:
        """Get the {type, detail} record for a task."""
        return {"type": task.type, "detail": task.detail}

    def dumps(self, task: Task) -> str:
        """Serialize a task to JSON text."""
        return SerializedTask(**self.serialize(task)).model_dump_json()

    def loads(self, raw: str | bytes) -> Task:
        """Parse JSON text produced by dumps() back into a task."""
        return self.from_serialized(SerializedTask.model_validate_json(raw))

    async def execute(self, context: Any, tasks: Task | Iterable[Task]) -> None:
        """
        Run the execute hook of every type present in tasks.

        Each hook is called once with all tasks of its type and a reference to
        this factory. Groups run concurrently; the first failure is raised as
        is and the remaining groups are left to finish on their own.
        """
        await self._dispatch(
            "execute",
            tasks,
            lambda group: group.definition.execute(context, group.tasks, self),
        )

    async def schedule(self, context: Any, tasks: Task | Iterable[Task]) -> None:
        """Run the schedule hook of every type present in tasks."""
        await self._dispatch(
            "schedule",
            tasks,
            lambda group: group.definition.schedule(context, group.tasks),
        )

    async def _dispatch(
        self,
        hook: str,
        tasks: Task | Iterable[Task],
        call: Callable[[TaskGroup], Any],
    ) -> None:
        groups = self.registry.group_by_type(tasks)

        logger.debug(
            "tasks_dispatched",
            hook=hook,
            groups=[group.type for group in groups],
            tasks=sum(len(group.tasks) for group in groups),
        )

        loop = asyncio.get_running_loop()
        pending: list[asyncio.Future] = []

        for group in groups:
            result = call(group)

            if inspect.isawaitable(result):
                future = asyncio.ensure_future(result)
                # Mark the outcome retrieved even if a later hook raises before gather
                future.add_done_callback(_consume_outcome)
                pending.append(future)
            else:
                # Plain return value: the group is already done
                done = loop.create_future()
                done.set_result(result)
                pending.append(done)

        await asyncio.gather(*pending)


def _consume_outcome(future: asyncio.Future) -> None:
    if not future.cancelled():
        future.exception()


def create_task_factory(
    definitions: Iterable[Any] = (),
    *,
    allow_duplicates: bool | None = None,
) -> TaskFactory:
    """
    Build a task factory for a set of task definitions.

    Args:
        definitions: TaskDefinition objects, mappings or objects with
            type/execute/schedule and optional format/validate members
        allow_duplicates: Let a later definition replace an earlier one of
            the same type. Defaults to the allow_duplicate_types setting.

    Returns:
        TaskFactory bound to a new registry

    Raises:
        ConfigurationError: a definition is invalid
    """
    if allow_duplicates is None:
        allow_duplicates = get_registry_settings().allow_duplicate_types

    return TaskFactory(TaskRegistry(definitions, allow_duplicates=allow_duplicates))
