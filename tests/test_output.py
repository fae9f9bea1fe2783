"""Tests for the CLI output system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline and quiet mode
- JSON and plain rendering of response bodies
- Global instance management
"""

from __future__ import annotations

import json

import pytest

from lambda_utils import output as output_module
from lambda_utils.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("lambda_utils.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("lambda_utils.output._is_tty", lambda: True)


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager().format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager().format == OutputFormat.RICH

    def test_auto_resolves_to_plain_when_no_color(self, tty):
        assert OutputManager(no_color=True).format == OutputFormat.PLAIN

    def test_explicit_format_wins(self, tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_default_allows_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


class TestStreams:
    def test_info_goes_to_stderr(self, capsys):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).info("status")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "status" in captured.err

    def test_quiet_suppresses_info_not_errors(self, capsys):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("status")
        mgr.warning("careful")
        mgr.error("broken")
        err = capsys.readouterr().err
        assert "status" not in err
        assert "Warning: careful" in err
        assert "Error: broken" in err

    def test_error_with_brackets_in_rich_mode(self, capsys, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        OutputManager(format=OutputFormat.PLAIN).error("[errno 2] missing")
        assert "[errno 2] missing" in capsys.readouterr().err


class TestFormatResponse:
    def test_plain_writes_body_verbatim(self, capsys):
        OutputManager(format=OutputFormat.PLAIN).format_response('{"a":1}')
        assert capsys.readouterr().out == '{"a":1}\n'

    def test_json_reindents_json_body(self, capsys):
        OutputManager(format=OutputFormat.JSON).format_response('{"a":1}')
        out = capsys.readouterr().out
        assert json.loads(out) == {"a": 1}
        assert "\n  " in out

    def test_json_passes_non_json_through(self, capsys):
        OutputManager(format=OutputFormat.JSON).format_response("not json")
        assert capsys.readouterr().out == "not json\n"

    def test_plain_dumps_dicts(self, capsys):
        OutputManager(format=OutputFormat.PLAIN).format_response({"a": 1})
        assert json.loads(capsys.readouterr().out) == {"a": 1}


class TestGlobalInstance:
    def test_get_output_creates_default(self):
        reset_output()
        assert isinstance(get_output(), OutputManager)

    def test_set_output_installs_instance(self):
        mgr = OutputManager(format=OutputFormat.PLAIN)
        set_output(mgr)
        assert get_output() is mgr

    def test_convenience_functions_delegate(self, capsys):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        output_module.format_response("body")
        output_module.error("oops")
        captured = capsys.readouterr()
        assert captured.out == "body\n"
        assert "Error: oops" in captured.err
