"""Translate a test runner's JSON event stream into test lifecycle notifications."""

from runner_events.decoding import DecodeError, EventReader
from runner_events.reporting import Reporter, TestSignaller

__all__ = ["DecodeError", "EventReader", "Reporter", "TestSignaller"]
