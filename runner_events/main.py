"""Entry point for reading a test runner's JSON event stream.

Reads runner output line by line from a file or stdin, feeds it through
an ``EventReader`` wired to a ``Reporter``, prints a result summary, and
optionally writes a JSON or YAML report.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import IO, Iterable

from runner_events.config import DEFAULT_CONFIG_NAME, REPORT_FORMATS, ReaderConfig
from runner_events.decoding.events import DecodeError
from runner_events.decoding.reader import EventReader
from runner_events.reporting.reporter import Reporter

# Exit statuses
EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ABORTED = 2


class EchoingReporter(Reporter):
    """Reporter that also prints test output as it arrives."""

    def __init__(self, stream: IO[str] | None = None) -> None:
        super().__init__()
        self.stream = stream

    def test_message(self, name: str, test_id: int, text: str) -> None:
        super().test_message(name, test_id, text)
        print(f"  [{name}] {text}", file=self.stream or sys.stdout)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Translate a test runner's JSON event stream into test results"
    )
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="Path to the runner output (default: stdin)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Path to write the report file",
    )
    parser.add_argument(
        "--format",
        choices=list(REPORT_FORMATS),
        default=None,
        help="Report format (default: from config, else json)",
    )
    parser.add_argument(
        "--config-file",
        type=Path,
        default=Path(DEFAULT_CONFIG_NAME),
        help=f"Path to the JSON config file (default: {DEFAULT_CONFIG_NAME})",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=False,
        help="Stop on the first malformed line or unknown event type",
    )
    parser.add_argument(
        "--echo-output",
        action="store_true",
        default=False,
        help="Print test output as it arrives",
    )
    return parser.parse_args(argv)


def read_stream(
    lines: Iterable[str], reader: EventReader, strict: bool = False,
) -> tuple[int, bool]:
    """Feed *lines* through *reader*.

    Malformed lines are skipped with a warning unless *strict*; unknown
    event types are always reported.

    Returns:
        Tuple of (number of decode errors, whether the read was aborted).
    """
    decode_errors = 0
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            reader.process(line)
        except json.JSONDecodeError as e:
            if line.startswith(reader.sentinel):
                continue
            if strict:
                print(f"Error: line {lineno}: invalid JSON: {e}", file=sys.stderr)
                return decode_errors, True
            print(f"Warning: line {lineno}: skipping non-JSON output", file=sys.stderr)
        except DecodeError as e:
            decode_errors += 1
            print(f"Error: line {lineno}: {e}", file=sys.stderr)
            if strict:
                return decode_errors, True
    return decode_errors, False


def _print_results(reporter: Reporter) -> None:
    """Print test results summary."""
    status_icon = {
        "passed": "PASS",
        "failed": "FAIL",
        "error": "ERROR",
        "skipped": "SKIP",
        "running": "INCOMPLETE",
    }
    print(f"Tests reported: {len(reporter.results)}")
    print()

    for r in reporter.results:
        icon = status_icon.get(r.status, r.status.upper())
        print(f"  [{icon}] {r.name} ({r.duration_ms}ms)")
        if r.status in ("failed", "error") and r.message:
            for line in r.message.strip().splitlines():
                print(f"         {line}")
            if r.expected is not None:
                print(f"         expected: {r.expected}")
                print(f"         actual:   {r.actual}")
        elif r.status == "skipped" and r.skip_reason:
            print(f"         {r.skip_reason}")

    summary = reporter.generate_report()["report"]["summary"]
    print()
    print(
        f"Results: {summary['passed']} passed, {summary['failed']} failed, "
        f"{summary['error']} errors, {summary['skipped']} skipped, "
        f"{summary['running']} incomplete"
    )


def _write_report(reporter: Reporter, path: Path, fmt: str) -> None:
    if fmt == "yaml":
        reporter.write_yaml(path)
    else:
        reporter.write_report(path)
    print(f"Report written to: {path}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    config = ReaderConfig(args.config_file)
    strict = args.strict or config.strict
    fmt = args.format or config.report_format
    echo = args.echo_output or config.echo_output

    reporter = EchoingReporter() if echo else Reporter()
    reader = EventReader(reporter, sentinel=config.sentinel)

    try:
        if args.input is None:
            if hasattr(sys.stdin, "reconfigure"):
                sys.stdin.reconfigure(errors="replace")
            decode_errors, aborted = read_stream(sys.stdin, reader, strict)
        else:
            # Undecodable bytes become U+FFFD and the line is skipped as non-JSON
            with open(args.input, encoding="utf-8", errors="replace") as f:
                decode_errors, aborted = read_stream(f, reader, strict)
    except FileNotFoundError:
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return EXIT_FAILED
    except OSError as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return EXIT_FAILED

    _print_results(reporter)

    if args.output:
        try:
            _write_report(reporter, args.output, fmt)
        except OSError as e:
            print(f"Error writing report: {e}", file=sys.stderr)
            return EXIT_FAILED

    if aborted:
        return EXIT_ABORTED
    if decode_errors or reporter.has_failures or reporter.has_incomplete:
        return EXIT_FAILED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
