# tests/test_registry.py

from __future__ import annotations

from enum import Enum
from types import SimpleNamespace

import pytest

from taskfactory import (
    ConfigurationError,
    NotDefinedError,
    Task,
    TaskDefinition,
    TaskRegistry,
    create_task_factory,
)
from taskfactory.tasks.registry import build_definition

from .fakes import RecordingHook, definition


async def _noop(*args):
    return None


@pytest.mark.parametrize(
    ("raw", "message"),
    [
        ({"execute": _noop, "schedule": _noop}, "Task must have type"),
        ({"type": "", "execute": _noop, "schedule": _noop}, "Task must have type"),
        ({"type": 5, "execute": _noop, "schedule": _noop}, "Task type '5' must be a string"),
        ({"type": "foo"}, "Task type 'foo' missing execute()"),
        ({"type": "foo", "execute": _noop}, "Task type 'foo' missing schedule()"),
        ({"type": "foo", "execute": 1, "schedule": _noop}, "Task type 'foo' missing execute()"),
        (
            {"type": "foo", "execute": _noop, "schedule": _noop, "validate": 42},
            "Task type 'foo' validate must be a function",
        ),
        (
            {"type": "foo", "execute": _noop, "schedule": _noop, "format": 42},
            "Task type 'foo' format must be a function",
        ),
    ],
)
def test_invalid_definitions_are_rejected(raw, message) -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        TaskRegistry([raw])
    assert str(exc_info.value) == message


def test_first_invalid_definition_aborts_construction() -> None:
    with pytest.raises(ConfigurationError, match="Task type 'bar' missing schedule"):
        TaskRegistry([definition("foo"), {"type": "bar", "execute": _noop}, definition("baz")])


def test_falsy_optional_hooks_are_ignored() -> None:
    registry = TaskRegistry([definition("foo", format=None, validate=0)])
    assert registry["foo"].format is None
    assert registry["foo"].validate is None


def test_definitions_from_attributes_and_dataclass() -> None:
    as_object = SimpleNamespace(type="obj", execute=_noop, schedule=_noop)
    as_dataclass = TaskDefinition(type="dc", execute=_noop, schedule=_noop)

    registry = TaskRegistry([as_object, as_dataclass])

    assert registry.types == ("obj", "dc")
    assert isinstance(registry["obj"], TaskDefinition)
    assert registry["obj"].execute is _noop
    assert registry["dc"] is as_dataclass
    assert build_definition(as_dataclass) is as_dataclass


def test_registry_is_a_read_only_mapping() -> None:
    registry = TaskRegistry([definition("foo"), definition("bar")])

    assert len(registry) == 2
    assert list(registry) == ["foo", "bar"]
    assert "foo" in registry
    assert "nope" not in registry
    with pytest.raises(TypeError):
        registry["baz"] = registry["foo"]  # type: ignore[index]


def test_empty_registry() -> None:
    registry = TaskRegistry()
    assert len(registry) == 0
    with pytest.raises(NotDefinedError):
        registry.get_definition("foo")


def test_duplicate_type_last_definition_wins() -> None:
    first = definition("foo")
    second = definition("foo")

    registry = TaskRegistry([first, second])

    assert registry.types == ("foo",)
    assert registry["foo"].execute is second["execute"]


def test_duplicate_type_rejected_when_disallowed() -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        TaskRegistry([definition("foo"), definition("foo")], allow_duplicates=False)
    assert str(exc_info.value) == "Task type 'foo' defined more than once"


def test_get_definition_unknown_type() -> None:
    registry = TaskRegistry([definition("foo")])

    with pytest.raises(NotDefinedError) as exc_info:
        registry.get_definition("bar")

    assert str(exc_info.value) == "Task type 'bar' not defined"
    assert exc_info.value.task_type == "bar"
    assert isinstance(exc_info.value, LookupError)


def test_group_by_type_keeps_first_seen_and_insertion_order() -> None:
    registry = TaskRegistry([definition("a"), definition("b")])
    a1, a2, b1, a3 = (
        Task(type="a", detail=1),
        Task(type="a", detail=2),
        Task(type="b", detail=3),
        Task(type="a", detail=4),
    )

    groups = registry.group_by_type([a1, a2, b1, a3])

    assert [g.type for g in groups] == ["a", "b"]
    assert [g.definition for g in groups] == [registry["a"], registry["b"]]
    assert groups[0].tasks == [a1, a2, a3]
    assert all(x is y for x, y in zip(groups[0].tasks, [a1, a2, a3]))
    assert groups[1].tasks == [b1]


def test_group_by_type_accepts_single_task_and_generators() -> None:
    registry = TaskRegistry([definition("a")])
    task = Task(type="a", detail={"k": "v"})

    single = registry.group_by_type(task)
    generated = registry.group_by_type(t for t in [task, task])

    assert len(single) == 1 and single[0].tasks == [task]
    assert len(generated) == 1 and len(generated[0].tasks) == 2


def test_group_by_type_unknown_type() -> None:
    registry = TaskRegistry([definition("a")])

    with pytest.raises(NotDefinedError, match="Task type 'b' not defined"):
        registry.group_by_type([Task(type="a"), Task(type="b")])


def test_group_by_type_object_without_type() -> None:
    registry = TaskRegistry([definition("a")])

    with pytest.raises(NotDefinedError, match="Task type 'None' not defined"):
        registry.group_by_type(object())


def test_registry_does_not_call_hooks() -> None:
    execute = RecordingHook()
    schedule = RecordingHook()

    TaskRegistry([definition("foo", execute=execute, schedule=schedule)])

    assert execute.call_count == 0
    assert schedule.call_count == 0


class Kind(str, Enum):
    EMAIL = "email"


def test_string_enum_types_register_and_create() -> None:
    registry = TaskRegistry([definition(Kind.EMAIL)])
    factory = create_task_factory([definition(Kind.EMAIL)])

    assert "email" in registry
    assert factory.create(Kind.EMAIL, {"to": "ops"}).type == "email"


def test_non_string_type_never_reaches_task_creation() -> None:
    with pytest.raises(ConfigurationError, match="must be a string"):
        create_task_factory([definition(5)])
