"""Decoded test runner events.

Each line the runner writes is a JSON object with a ``type`` field naming
one of eight event kinds.  ``decode_event`` turns such an object into an
immutable event value, filling in fixed defaults for any optional field
that is missing or is not a JSON primitive.  Only the ``type`` field is
strictly required.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union

# Defaults for optional fields
NO_NAME = "<no name>"
NO_ERROR_MESSAGE = "<no error message>"
NO_STACK_TRACE = "<no stack trace>"
NO_FAIL_MESSAGE = "<no fail message>"
NO_SKIP_REASON = "<no skip reason>"
NO_MESSAGE = "<no message>"


class DecodeError(ValueError):
    """A well-formed JSON line whose ``type`` is missing or unknown."""


@dataclass(frozen=True)
class StartEvent:
    name: str
    time_millis: int = 0


@dataclass(frozen=True)
class ErrorEvent:
    name: str
    error_message: str
    stack_trace: str
    time_millis: int = 0


@dataclass(frozen=True)
class PassEvent:
    name: str
    time_millis: int = 0


@dataclass(frozen=True)
class FailEvent:
    """An assertion failure.

    ``stack_trace`` stays ``None`` unless the runner sent one.
    """

    name: str
    fail_message: str
    stack_trace: str | None = None
    time_millis: int = 0


@dataclass(frozen=True)
class SkipEvent:
    name: str
    reason: str


@dataclass(frozen=True)
class PrintEvent:
    name: str
    message: str


@dataclass(frozen=True)
class EnterEvent:
    pass


@dataclass(frozen=True)
class ExitEvent:
    pass


Event = Union[
    StartEvent,
    ErrorEvent,
    PassEvent,
    FailEvent,
    SkipEvent,
    PrintEvent,
    EnterEvent,
    ExitEvent,
]

# Wire discriminator -> event class
EVENT_TYPES: dict[str, type] = {
    "start": StartEvent,
    "error": ErrorEvent,
    "pass": PassEvent,
    "fail": FailEvent,
    "skip": SkipEvent,
    "print": PrintEvent,
    "enter": EnterEvent,
    "exit": ExitEvent,
}


def _is_primitive(value: Any) -> bool:
    return isinstance(value, (str, bool, int, float))


def string_field(obj: dict[str, Any], key: str, default: str) -> str:
    """Read *key* as text, or return *default*.

    Strings are returned as-is.  Other JSON primitives (numbers, booleans)
    are returned in their JSON spelling, so ``true`` rather than ``True``.
    Absent keys, ``null``, objects and arrays all yield *default*.
    """
    value = obj.get(key)
    if value is None or not _is_primitive(value):
        return default
    if isinstance(value, str):
        return value
    return json.dumps(value)


def millis_field(obj: dict[str, Any], key: str = "time") -> int:
    """Read *key* as integer milliseconds, or ``0``.

    Accepts numbers and numeric strings.  Anything else, booleans
    included, counts as absent.
    """
    value = obj.get(key)
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
    if isinstance(value, (float, str)):
        try:
            return int(float(value))
        except (ValueError, OverflowError):
            return 0
    return 0


def _optional_string_field(obj: dict[str, Any], key: str) -> str | None:
    value = obj.get(key)
    if value is None or not _is_primitive(value):
        return None
    return string_field(obj, key, "")


def decode_event(obj: dict[str, Any]) -> Event:
    """Build the event described by a decoded JSON object.

    Raises:
        DecodeError: If ``type`` is missing or not a recognized kind.
    """
    event_type = obj.get("type")
    if not isinstance(event_type, str) or event_type not in EVENT_TYPES:
        shown = event_type if isinstance(event_type, str) else json.dumps(event_type)
        raise DecodeError(f"unexpected type: {shown}")

    name = string_field(obj, "name", NO_NAME)

    if event_type == "start":
        return StartEvent(name=name, time_millis=millis_field(obj))
    if event_type == "error":
        return ErrorEvent(
            name=name,
            error_message=string_field(obj, "errorMessage", NO_ERROR_MESSAGE),
            stack_trace=string_field(obj, "stackTrace", NO_STACK_TRACE),
            time_millis=millis_field(obj),
        )
    if event_type == "pass":
        return PassEvent(name=name, time_millis=millis_field(obj))
    if event_type == "fail":
        return FailEvent(
            name=name,
            fail_message=string_field(obj, "failMessage", NO_FAIL_MESSAGE),
            stack_trace=_optional_string_field(obj, "stackTrace"),
            time_millis=millis_field(obj),
        )
    if event_type == "skip":
        return SkipEvent(
            name=name,
            reason=string_field(obj, "reason", NO_SKIP_REASON),
        )
    if event_type == "print":
        return PrintEvent(
            name=name,
            message=string_field(obj, "message", NO_MESSAGE),
        )
    if event_type == "enter":
        return EnterEvent()
    return ExitEvent()
