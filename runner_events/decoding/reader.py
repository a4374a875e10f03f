"""Line-at-a-time reader for the test runner's JSON event stream.

Each line is parsed as JSON, decoded into an event, and translated into
one call on a ``TestSignaller``.  The reader keeps two pieces of session
state: the id of the most recently started test and the timestamp at
which it started.  Durations for pass/fail/error events are measured
from that single timestamp, so events for interleaved tests get
durations relative to whichever test started last.

Create one reader per runner session.
"""

from __future__ import annotations

import json
from typing import Any, Callable

from runner_events.decoding.events import (
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
from runner_events.decoding.failure_detail import extract_failure_detail
from runner_events.reporting.signaller import TestSignaller

# Prefix of the non-JSON line the runner prints once its diagnostic
# service is listening
OBSERVATORY_SENTINEL = "Observatory listening on"


class EventReader:
    """Translates runner output lines into ``TestSignaller`` calls."""

    def __init__(
        self,
        signaller: TestSignaller,
        sentinel: str = OBSERVATORY_SENTINEL,
    ) -> None:
        self.signaller = signaller
        self.sentinel = sentinel
        self.test_id = 0
        self.start_millis = 0
        self._handlers: dict[type, Callable[[Any], None]] = {
            StartEvent: self._on_start,
            ErrorEvent: self._on_error,
            PassEvent: self._on_pass,
            FailEvent: self._on_fail,
            SkipEvent: self._on_skip,
            PrintEvent: self._on_print,
            EnterEvent: self._on_enter,
            ExitEvent: self._on_exit,
        }

    def process(self, line: str) -> bool:
        """Handle one line of runner output.

        Args:
            line: Raw text of the line, trailing newline included if the
                caller has it.

        Returns:
            True if the line was a JSON object and was dispatched, False
            if it was valid JSON of some other shape.

        Raises:
            json.JSONDecodeError: If the line is not valid JSON, or nests
                too deeply to decode.  The sentinel line still signals
                ``framework_attached`` first.
            DecodeError: If the object's ``type`` is missing or unknown.
        """
        try:
            entry = json.loads(line)
        except (json.JSONDecodeError, RecursionError) as e:
            if line.startswith(self.sentinel) and line.endswith("\n"):
                self.signaller.framework_attached()
            if isinstance(e, RecursionError):
                raise json.JSONDecodeError(
                    "JSON nested too deeply", line, 0,
                ) from e
            raise

        if not isinstance(entry, dict):
            return False

        self.dispatch(decode_event(entry))
        return True

    def dispatch(self, event: Event) -> None:
        """Deliver an already decoded event to the signaller."""
        self._handlers[type(event)](event)

    def _duration(self, time_millis: int) -> int:
        return time_millis - self.start_millis

    def _on_start(self, event: StartEvent) -> None:
        self.test_id += 1
        self.signaller.test_started(
            event.name, self.test_id, 0, None, None, None, True,
        )
        self.start_millis = event.time_millis

    def _on_error(self, event: ErrorEvent) -> None:
        self.signaller.test_failed(
            event.name,
            self.test_id,
            event.error_message,
            event.stack_trace,
            True,
            None,
            None,
            None,
            self._duration(event.time_millis),
        )

    def _on_pass(self, event: PassEvent) -> None:
        self.signaller.test_finished(
            event.name, self.test_id, self._duration(event.time_millis),
        )

    def _on_fail(self, event: FailEvent) -> None:
        detail = extract_failure_detail(event.fail_message)
        self.signaller.test_failed(
            event.name,
            self.test_id,
            detail.message,
            event.stack_trace,
            False,
            detail.actual,
            detail.expected,
            None,
            self._duration(event.time_millis),
        )

    def _on_skip(self, event: SkipEvent) -> None:
        self.signaller.test_skipped(event.name, event.reason, None)

    def _on_print(self, event: PrintEvent) -> None:
        self.signaller.test_message(event.name, self.test_id, event.message)

    def _on_enter(self, event: EnterEvent) -> None:
        self.signaller.framework_attached()

    def _on_exit(self, event: ExitEvent) -> None:
        # End of the run; nothing to release.
        pass
