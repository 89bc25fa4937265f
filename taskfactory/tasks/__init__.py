"""Task definitions, instances and the registry."""

from .models import SerializedTask, Task, TaskDefinition, TaskGroup
from .registry import TaskRegistry, build_definition

__all__ = [
    "SerializedTask",
    "Task",
    "TaskDefinition",
    "TaskGroup",
    "TaskRegistry",
    "build_definition",
]
