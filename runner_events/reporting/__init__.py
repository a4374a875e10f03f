"""Test lifecycle notifications: the signaller interface and the collecting reporter."""

from runner_events.reporting.reporter import Reporter, TestResult
from runner_events.reporting.signaller import TestSignaller

__all__ = [
    "Reporter",
    "TestResult",
    "TestSignaller",
]
