"""Reader configuration file management.

Reads and writes the .runner_events_config JSON file that controls how
the command-line reader reacts to bad lines and where it writes reports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from runner_events.decoding.reader import OBSERVATORY_SENTINEL

DEFAULT_CONFIG_NAME = ".runner_events_config"

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "strict": False,
    "report_format": "json",
    "sentinel": OBSERVATORY_SENTINEL,
    "echo_output": False,
}

REPORT_FORMATS = ("json", "yaml")

_TRUE_WORDS = frozenset({"true", "yes", "on", "1"})
_FALSE_WORDS = frozenset({"false", "no", "off", "0", ""})


def _as_bool(value: Any, default: bool) -> bool:
    """Interpret a config value as a flag.

    Accepts JSON booleans, numbers, and the usual true/false words; any
    other value gives *default*.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return default


def read_config_file(path: Path) -> dict[str, Any]:
    """Return the settings stored in *path*.

    A missing, unreadable, or non-object file holds no settings.
    """
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError, UnicodeDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


class ReaderConfig:
    """Settings from the .runner_events_config file, over the defaults."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        stored = read_config_file(path) if path is not None else {}
        self._data: dict[str, Any] = {**DEFAULT_CONFIG, **stored}

    def save(self) -> None:
        """Write the current settings to the config file."""
        if self.path is None:
            raise ValueError("ReaderConfig has no file to save to")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, indent=2) + "\n")

    @property
    def config(self) -> dict[str, Any]:
        """A copy of every setting, defaults included."""
        return dict(self._data)

    @property
    def strict(self) -> bool:
        """Stop on the first malformed line or unknown event type."""
        return _as_bool(self._data.get("strict"), DEFAULT_CONFIG["strict"])

    @property
    def report_format(self) -> str:
        """Report file format, ``json`` or ``yaml``."""
        fmt = self._data.get("report_format")
        if isinstance(fmt, str) and fmt.lower() in REPORT_FORMATS:
            return fmt.lower()
        return DEFAULT_CONFIG["report_format"]

    @property
    def sentinel(self) -> str:
        """Prefix of the line announcing the framework is attached."""
        val = self._data.get("sentinel")
        if isinstance(val, str) and val:
            return val
        return DEFAULT_CONFIG["sentinel"]

    @property
    def echo_output(self) -> bool:
        """Echo test output to stdout as it arrives."""
        return _as_bool(
            self._data.get("echo_output"), DEFAULT_CONFIG["echo_output"],
        )

    def set_config(
        self,
        strict: bool | None = None,
        report_format: str | None = None,
        echo_output: bool | None = None,
    ) -> None:
        """Override individual settings; ``None`` leaves a setting alone."""
        if report_format is not None and report_format not in REPORT_FORMATS:
            raise ValueError(f"Unknown report format: {report_format}")
        updates = {
            "strict": strict,
            "report_format": report_format,
            "echo_output": echo_output,
        }
        self._data.update({k: v for k, v in updates.items() if v is not None})
