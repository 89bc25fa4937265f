"""Task models - definitions, instances and dispatch groups."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from ..factory import TaskFactory


# Hook types. execute/schedule normally return a coroutine; a plain value
# is accepted and treated as an already-finished call.
ExecuteFunc = Callable[[Any, list["Task"], "TaskFactory"], Any]
ScheduleFunc = Callable[[Any, list["Task"]], Any]
FormatFunc = Callable[[Any], Any]
ValidateFunc = Callable[["Task"], None]


class Task(BaseModel):
    """A unit of work: a type tag plus an opaque detail payload."""

    model_config = ConfigDict(frozen=True)

    type: str
    detail: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Project the task onto its serialized record."""
        return {"type": self.type, "detail": self.detail}


class SerializedTask(BaseModel):
    """Wire shape of a task: {"type": ..., "detail": ...}."""

    type: str
    detail: Any = None


@dataclass(frozen=True)
class TaskDefinition:
    """Behavior bundle registered for one task type."""

    type: str
    execute: ExecuteFunc
    schedule: ScheduleFunc
    format: FormatFunc | None = None
    validate: ValidateFunc | None = None


@dataclass(frozen=True)
class TaskGroup:
    """Tasks sharing one type, paired with that type's definition."""

    definition: TaskDefinition
    tasks: list[Task] = field(default_factory=list)

    @property
    def type(self) -> str:
        return self.definition.type
