"""Task registry mapping task types to their definitions."""

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

import structlog

from ..errors import ConfigurationError, NotDefinedError
from .models import Task, TaskDefinition, TaskGroup

logger = structlog.get_logger("taskfactory.registry")

_HOOKS = ("type", "execute", "schedule", "format", "validate")


def _read_hooks(definition: Any) -> dict[str, Any]:
    """Pull definition members from a mapping or from attributes."""
    if isinstance(definition, Mapping):
        return {name: definition.get(name) for name in _HOOKS}
    return {name: getattr(definition, name, None) for name in _HOOKS}


def build_definition(definition: Any) -> TaskDefinition:
    """
    Check a caller-supplied definition and freeze it.

    Accepts a TaskDefinition, a mapping, or any object exposing the hooks
    as attributes.

    Raises:
        ConfigurationError: a required member is missing or a hook is not callable
    """
    hooks = _read_hooks(definition)
    task_type = hooks["type"]

    if not task_type:
        raise ConfigurationError("Task must have type")
    if not isinstance(task_type, str):
        raise ConfigurationError(f"Task type '{task_type}' must be a string")
    if not callable(hooks["execute"]):
        raise ConfigurationError(f"Task type '{task_type}' missing execute()")
    if not callable(hooks["schedule"]):
        raise ConfigurationError(f"Task type '{task_type}' missing schedule()")
    if hooks["validate"] and not callable(hooks["validate"]):
        raise ConfigurationError(f"Task type '{task_type}' validate must be a function")
    if hooks["format"] and not callable(hooks["format"]):
        raise ConfigurationError(f"Task type '{task_type}' format must be a function")

    if isinstance(definition, TaskDefinition):
        return definition

    return TaskDefinition(
        type=task_type,
        execute=hooks["execute"],
        schedule=hooks["schedule"],
        format=hooks["format"] or None,
        validate=hooks["validate"] or None,
    )


def _as_task_list(tasks: Any) -> list[Any]:
    """A single task and a list of tasks are dispatched the same way."""
    if isinstance(tasks, (Task, str, bytes, Mapping)) or not isinstance(tasks, Iterable):
        return [tasks]
    return list(tasks)


class TaskRegistry(Mapping[str, TaskDefinition]):
    """
    Read-only mapping from task type to definition.

    Built once from an ordered sequence of definitions; every definition is
    checked up front and the first invalid one aborts construction. A later
    definition for an already registered type replaces the earlier one
    unless allow_duplicates is False.
    """

    def __init__(
        self,
        definitions: Iterable[Any] = (),
        *,
        allow_duplicates: bool = True,
    ):
        definitions_by_type: dict[str, TaskDefinition] = {}

        for raw in definitions:
            definition = build_definition(raw)

            if definition.type in definitions_by_type:
                if not allow_duplicates:
                    raise ConfigurationError(
                        f"Task type '{definition.type}' defined more than once"
                    )
                logger.warning("task_type_overridden", type=definition.type)

            definitions_by_type[definition.type] = definition

        self._definitions = definitions_by_type
        logger.debug("task_registry_built", types=list(definitions_by_type))

    def __getitem__(self, task_type: str) -> TaskDefinition:
        return self._definitions[task_type]

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __repr__(self) -> str:
        return f"TaskRegistry(types={list(self._definitions)!r})"

    @property
    def types(self) -> tuple[str, ...]:
        """Registered types in registration order."""
        return tuple(self._definitions)

    def get_definition(self, task_type: Any) -> TaskDefinition:
        """Get the definition for a task type or raise NotDefinedError."""
        try:
            return self._definitions[task_type]
        except (KeyError, TypeError):
            raise NotDefinedError(task_type) from None

    def group_by_type(self, tasks: Any) -> list[TaskGroup]:
        """
        Partition tasks into one group per type.

        Groups follow the order in which each type is first seen; tasks keep
        their relative order inside a group.

        Args:
            tasks: A single task or an iterable of tasks

        Returns:
            One TaskGroup per distinct type

        Raises:
            NotDefinedError: a task carries a type with no definition
        """
        groups: dict[Any, TaskGroup] = {}

        for task in _as_task_list(tasks):
            task_type = getattr(task, "type", None)
            group = groups.get(task_type)

            if group is None:
                group = TaskGroup(definition=self.get_definition(task_type))
                groups[task_type] = group

            group.tasks.append(task)

        return list(groups.values())
