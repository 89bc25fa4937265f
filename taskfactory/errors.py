"""Errors raised by the task factory."""


class TaskFactoryError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(TaskFactoryError, ValueError):
    """A task definition is structurally invalid."""


class NotDefinedError(TaskFactoryError, LookupError):
    """No definition is registered for a task type."""

    def __init__(self, task_type: object):
        self.task_type = task_type
        super().__init__(f"Task type '{task_type}' not defined")
