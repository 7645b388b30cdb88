"""
Console sink level routing.
"""

from __future__ import annotations

import io
import json

from ringlog import ConsoleSink, JSONFormatter, LogLevel, PlatformInfo, TextFormatter


class TestConsoleSink:
    def test_info_to_stdout(self, capsys, make_entry) -> None:
        ConsoleSink(TextFormatter()).emit(make_entry())
        captured = capsys.readouterr()
        assert captured.out == "[INFO] Test message\n"
        assert captured.err == ""

    def test_debug_to_stdout(self, capsys, make_entry) -> None:
        ConsoleSink().emit(make_entry(level=LogLevel.DEBUG))
        assert capsys.readouterr().out == "[DEBUG] Test message\n"

    def test_warn_and_error_to_stderr(self, capsys, make_entry) -> None:
        sink = ConsoleSink()
        sink.emit(make_entry(level=LogLevel.WARN))
        sink.emit(make_entry(level=LogLevel.ERROR))
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "[WARN] Test message\n[ERROR] Test message\n"

    def test_injected_streams(self, make_entry) -> None:
        stdout, warning, stderr = io.StringIO(), io.StringIO(), io.StringIO()
        sink = ConsoleSink(stdout=stdout, warning=warning, stderr=stderr)

        sink.emit(make_entry(level=LogLevel.INFO))
        sink.emit(make_entry(level=LogLevel.WARN))
        sink.emit(make_entry(level=LogLevel.ERROR))

        assert stdout.getvalue() == "[INFO] Test message\n"
        assert warning.getvalue() == "[WARN] Test message\n"
        assert stderr.getvalue() == "[ERROR] Test message\n"

    def test_json_formatter(self, capsys, make_entry) -> None:
        ConsoleSink(JSONFormatter()).emit(make_entry())
        assert json.loads(capsys.readouterr().out)["level"] == "info"

    def test_platform_info(self, capsys, make_entry) -> None:
        ConsoleSink(TextFormatter(), PlatformInfo("node", "v18.0.0")).emit(make_entry())
        assert "[node/v18.0.0]" in capsys.readouterr().out

    def test_flush_and_close_are_noops(self) -> None:
        sink = ConsoleSink()
        assert sink.flush() is None
        assert sink.close() is None
