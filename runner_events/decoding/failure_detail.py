"""Expected/actual extraction from assertion failure messages.

Matcher-style assertion libraries append a block like::

    Expected: <1, 2>
      Actual: <1, 3>
       ^
     Differ at index 1

to the failure text.  When that block is present it is split off so the
expected and actual values can be shown side by side.  Messages without
it, or with a partial block, are passed through whole.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

EXPECTED = "Expected: "

EXPECTED_ACTUAL_RE = re.compile(
    r"\nExpected: (.*)\n  Actual: (.*)\n *\^\n *Differ.*\n"
)


@dataclass(frozen=True)
class FailureDetail:
    """A failure description plus the optional expected/actual pair."""

    message: str
    expected: str | None = None
    actual: str | None = None

    @property
    def has_comparison(self) -> bool:
        return self.expected is not None and self.actual is not None


def extract_failure_detail(text: str) -> FailureDetail:
    """Split *text* into description and expected/actual values.

    The block must begin on its own line at the first ``Expected: ``
    occurrence; the description is everything before that line.
    """
    first = text.find(EXPECTED)
    if first <= 0:
        return FailureDetail(message=text)

    match = EXPECTED_ACTUAL_RE.match(text, first - 1)
    if match is None:
        return FailureDetail(message=text)

    return FailureDetail(
        message=text[:match.start()],
        expected=match.group(1),
        actual=match.group(2),
    )
