"""Tests for the runner_events command-line entry point."""

from __future__ import annotations

import io
import json
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from runner_events.decoding.reader import EventReader
from runner_events.main import (
    EXIT_ABORTED,
    EXIT_FAILED,
    EXIT_OK,
    EchoingReporter,
    main,
    parse_args,
    read_stream,
)
from runner_events.reporting.reporter import Reporter

PASSING_RUN = [
    "Observatory listening on http://127.0.0.1:8181/\n",
    '{"type":"enter"}\n',
    '{"type":"start","name":"adds","time":100}\n',
    '{"type":"print","name":"adds","message":"computing"}\n',
    '{"type":"pass","name":"adds","time":350}\n',
    '{"type":"skip","name":"later","reason":"not yet"}\n',
    '{"type":"exit"}\n',
]

FAILING_RUN = [
    '{"type":"start","name":"compares","time":0}\n',
    '{"type":"fail","name":"compares","time":7,'
    '"failMessage":"Assertion failed\\nExpected: 1\\n  Actual: 2\\n  ^\\n Differ at offset 0\\n"}\n',
    '{"type":"exit"}\n',
]


def _write_input(tmpdir: str, lines: list[str]) -> Path:
    path = Path(tmpdir) / "runner.out"
    path.write_text("".join(lines))
    return path


def _base_args(tmpdir: str) -> list[str]:
    return ["--config-file", str(Path(tmpdir) / "no_config")]


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = parse_args([])
        assert args.input is None
        assert args.output is None
        assert args.format is None
        assert args.strict is False
        assert args.echo_output is False
        assert args.config_file == Path(".runner_events_config")

    def test_all_flags(self):
        args = parse_args([
            "--input", "out.txt",
            "--output", "report.yaml",
            "--format", "yaml",
            "--strict",
            "--echo-output",
        ])
        assert args.input == Path("out.txt")
        assert args.output == Path("report.yaml")
        assert args.format == "yaml"
        assert args.strict is True
        assert args.echo_output is True

    def test_invalid_format_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(["--format", "html"])


class TestReadStream:
    """Tests for feeding lines through a reader."""

    def test_skips_blank_and_sentinel_lines(self):
        reporter = Reporter()
        errors, aborted = read_stream(
            ["\n", *PASSING_RUN], EventReader(reporter),
        )
        assert (errors, aborted) == (0, False)
        assert reporter.attach_count == 2

    def test_plain_text_warns_and_continues(self, capsys):
        reporter = Reporter()
        errors, aborted = read_stream(
            ["compiling...\n", '{"type":"start","name":"t1"}\n'],
            EventReader(reporter),
        )
        assert (errors, aborted) == (0, False)
        assert len(reporter.results) == 1
        assert "line 1" in capsys.readouterr().err

    def test_plain_text_aborts_when_strict(self, capsys):
        reporter = Reporter()
        errors, aborted = read_stream(
            ["compiling...\n", '{"type":"start","name":"t1"}\n'],
            EventReader(reporter),
            strict=True,
        )
        assert aborted is True
        assert reporter.results == []
        assert "invalid JSON" in capsys.readouterr().err

    def test_unknown_type_counted(self, capsys):
        reporter = Reporter()
        errors, aborted = read_stream(
            ['{"type":"bogus"}\n', '{"type":"start","name":"t1"}\n'],
            EventReader(reporter),
        )
        assert (errors, aborted) == (1, False)
        assert len(reporter.results) == 1
        assert "unexpected type: bogus" in capsys.readouterr().err

    def test_unknown_type_aborts_when_strict(self):
        reporter = Reporter()
        errors, aborted = read_stream(
            ['{"type":"bogus"}\n', '{"type":"start","name":"t1"}\n'],
            EventReader(reporter),
            strict=True,
        )
        assert (errors, aborted) == (1, True)
        assert reporter.results == []


class TestMain:
    """Tests for the main entry point."""

    def test_passing_run(self, capsys):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_input(tmpdir, PASSING_RUN)
            rc = main(_base_args(tmpdir) + ["--input", str(path)])
        assert rc == EXIT_OK
        out = capsys.readouterr().out
        assert "[PASS] adds (250ms)" in out
        assert "[SKIP] later" in out
        assert "Results: 1 passed, 0 failed, 0 errors, 1 skipped" in out

    def test_failing_run(self, capsys):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_input(tmpdir, FAILING_RUN)
            rc = main(_base_args(tmpdir) + ["--input", str(path)])
        assert rc == EXIT_FAILED
        out = capsys.readouterr().out
        assert "[FAIL] compares (7ms)" in out
        assert "expected: 1" in out
        assert "actual:   2" in out

    def test_reads_stdin(self, capsys):
        with tempfile.TemporaryDirectory() as tmpdir:
            with patch("sys.stdin", io.StringIO("".join(PASSING_RUN))):
                rc = main(_base_args(tmpdir))
        assert rc == EXIT_OK
        assert "Tests reported: 2" in capsys.readouterr().out

    def test_missing_input(self, capsys):
        with tempfile.TemporaryDirectory() as tmpdir:
            rc = main(_base_args(tmpdir) + ["--input", str(Path(tmpdir) / "nope")])
        assert rc == EXIT_FAILED
        assert "Input file not found" in capsys.readouterr().err

    def test_invalid_utf8_line_skipped(self, capsys):
        """Undecodable bytes are treated as a non-JSON line, not a crash."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "runner.out"
            path.write_bytes(
                b'{"type":"start","name":"t1","time":1}\n'
                b"\xff\xfe garbage\n"
                b'{"type":"pass","name":"t1","time":4}\n'
            )
            output = Path(tmpdir) / "report.json"
            rc = main(_base_args(tmpdir) + [
                "--input", str(path), "--output", str(output),
            ])
            assert output.exists()
        assert rc == EXIT_OK
        captured = capsys.readouterr()
        assert "line 2" in captured.err
        assert "[PASS] t1 (3ms)" in captured.out

    def test_invalid_utf8_line_aborts_when_strict(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "runner.out"
            path.write_bytes(b"\xff\xfe garbage\n")
            rc = main(_base_args(tmpdir) + ["--input", str(path), "--strict"])
        assert rc == EXIT_ABORTED

    def test_unfinished_test_fails_run(self, capsys):
        """A test that starts but never finishes is incomplete."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_input(tmpdir, ['{"type":"start","name":"t1","time":1}\n'])
            rc = main(_base_args(tmpdir) + ["--input", str(path)])
        assert rc == EXIT_FAILED
        out = capsys.readouterr().out
        assert "[INCOMPLETE] t1" in out
        assert "0 skipped, 1 incomplete" in out

    def test_decode_error_fails_run(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_input(tmpdir, ['{"type":"suite"}\n', *PASSING_RUN])
            rc = main(_base_args(tmpdir) + ["--input", str(path)])
        assert rc == EXIT_FAILED

    def test_strict_abort(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_input(tmpdir, ["garbage\n", *PASSING_RUN])
            rc = main(_base_args(tmpdir) + ["--input", str(path), "--strict"])
        assert rc == EXIT_ABORTED

    def test_strict_from_config_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "cfg.json"
            config_path.write_text(json.dumps({"strict": True}))
            path = _write_input(tmpdir, ["garbage\n", *PASSING_RUN])
            rc = main([
                "--config-file", str(config_path), "--input", str(path),
            ])
        assert rc == EXIT_ABORTED

    def test_writes_json_report(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_input(tmpdir, PASSING_RUN)
            output = Path(tmpdir) / "out" / "report.json"
            rc = main(_base_args(tmpdir) + [
                "--input", str(path), "--output", str(output),
            ])
            assert rc == EXIT_OK
            report = json.loads(output.read_text())["report"]
        assert report["summary"]["passed"] == 1
        assert report["framework_attached"] is True

    def test_writes_yaml_report(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_input(tmpdir, FAILING_RUN)
            output = Path(tmpdir) / "report.yaml"
            rc = main(_base_args(tmpdir) + [
                "--input", str(path), "--output", str(output), "--format", "yaml",
            ])
            assert rc == EXIT_FAILED
            report = yaml.safe_load(output.read_text())["report"]
        assert report["tests"][0]["expected"] == "1"
        assert report["tests"][0]["message"] == "Assertion failed"

    def test_echo_output(self, capsys):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write_input(tmpdir, PASSING_RUN)
            main(_base_args(tmpdir) + ["--input", str(path), "--echo-output"])
        assert "  [adds] computing" in capsys.readouterr().out


class TestEchoingReporter:
    """Tests for the echoing reporter."""

    def test_echoes_and_records(self):
        stream = io.StringIO()
        reporter = EchoingReporter(stream)
        reporter.test_started("t1", 1)
        reporter.test_message("t1", 1, "hi")
        assert stream.getvalue() == "  [t1] hi\n"
        assert reporter.results[0].output == ["hi"]
