"""Notification sink interface for decoded test lifecycle events.

An ``EventReader`` turns each runner line into exactly one call on a
``TestSignaller``.  Implementations render, aggregate, or forward the
notifications; the reader never looks at what they do with them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class TestSignaller(ABC):
    """Receiver of test lifecycle notifications.

    Durations are integer milliseconds and may be negative when the
    runner's timestamps are out of order.
    """

    __test__ = False  # not a pytest test class

    @abstractmethod
    def test_started(
        self,
        name: str,
        test_id: int,
        duration: int = 0,
        location_hint: str | None = None,
        metadata: dict[str, Any] | None = None,
        parent_id: int | None = None,
        running: bool = True,
    ) -> None:
        """A test began running."""

    @abstractmethod
    def test_failed(
        self,
        name: str,
        test_id: int,
        message: str,
        stack_trace: str | None,
        is_error: bool,
        actual: str | None = None,
        expected: str | None = None,
        file_path: str | None = None,
        duration: int = 0,
    ) -> None:
        """A test failed.

        Args:
            name: Test name.
            test_id: Id handed out when the test started.
            message: Failure description.
            stack_trace: Stack trace text, if any.
            is_error: True for an uncaught error, False for an assertion
                failure.
            actual: Actual value text split out of the message.
            expected: Expected value text split out of the message.
            file_path: Source file of the failure, if known.
            duration: Milliseconds since the test started.
        """

    @abstractmethod
    def test_finished(self, name: str, test_id: int, duration: int) -> None:
        """A test completed successfully."""

    @abstractmethod
    def test_skipped(
        self, name: str, reason: str, message: str | None = None,
    ) -> None:
        """A test was skipped."""

    @abstractmethod
    def test_message(self, name: str, test_id: int, text: str) -> None:
        """A test printed output."""

    @abstractmethod
    def framework_attached(self) -> None:
        """The runner's test framework is up.  May be signalled repeatedly."""
