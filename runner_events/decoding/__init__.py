"""Runner output decoding: JSON events, failure details, and the line reader."""

from runner_events.decoding.events import (
    EVENT_TYPES,
    DecodeError,
    EnterEvent,
    ErrorEvent,
    Event,
    ExitEvent,
    FailEvent,
    PassEvent,
    PrintEvent,
    SkipEvent,
    StartEvent,
    decode_event,
)
from runner_events.decoding.failure_detail import FailureDetail, extract_failure_detail
from runner_events.decoding.reader import OBSERVATORY_SENTINEL, EventReader

__all__ = [
    "DecodeError",
    "EVENT_TYPES",
    "EnterEvent",
    "ErrorEvent",
    "Event",
    "EventReader",
    "ExitEvent",
    "FailEvent",
    "FailureDetail",
    "OBSERVATORY_SENTINEL",
    "PassEvent",
    "PrintEvent",
    "SkipEvent",
    "StartEvent",
    "decode_event",
    "extract_failure_detail",
]
