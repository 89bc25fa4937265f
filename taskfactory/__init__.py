"""Task factory - typed task registry with grouped, concurrent dispatch."""

from .config import RegistrySettings, Settings, get_registry_settings, get_settings
from .errors import ConfigurationError, NotDefinedError, TaskFactoryError
from .factory import TaskFactory, create_task_factory
from .log import configure_logging
from .tasks import SerializedTask, Task, TaskDefinition, TaskGroup, TaskRegistry

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "NotDefinedError",
    "RegistrySettings",
    "SerializedTask",
    "Settings",
    "Task",
    "TaskDefinition",
    "TaskFactory",
    "TaskFactoryError",
    "TaskGroup",
    "TaskRegistry",
    "configure_logging",
    "create_task_factory",
    "get_registry_settings",
    "get_settings",
]
