"""Tests for progress feedback helpers."""

import logging

import pytest

from rdv.core import progress
from rdv.core.progress import (
    ConsoleSuppressingFilter,
    is_console_suppressed,
    spinner,
    suppress_console_logs,
)


def _record() -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)


class TestConsoleSuppression:
    """Suppression flag and filter tests."""

    def test_given_no_block_when_checked_then_not_suppressed(self) -> None:
        assert is_console_suppressed() is False

    def test_given_suppress_block_when_inside_then_filter_blocks(self) -> None:
        # Given
        log_filter = ConsoleSuppressingFilter()

        # When / Then
        with suppress_console_logs():
            assert is_console_suppressed() is True
            assert log_filter.filter(_record()) is False
        assert log_filter.filter(_record()) is True

    def test_given_exception_in_block_when_raised_then_suppression_reset(self) -> None:
        with pytest.raises(RuntimeError), suppress_console_logs():
            raise RuntimeError("boom")

        assert is_console_suppressed() is False


class TestSpinner:
    """Spinner degradation tests."""

    def test_given_non_tty_when_spinner_then_body_runs_without_output(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        # Given
        monkeypatch.setattr(progress, "_is_tty", lambda: False)
        ran = []

        # When
        with spinner("Rendering manifests"):
            ran.append(True)

        # Then
        assert ran == [True]
        captured = capsys.readouterr()
        assert "Rendering manifests" not in captured.out
        assert "Rendering manifests" not in captured.err

    def test_given_tty_when_spinner_then_console_logs_suppressed_inside(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(progress, "_is_tty", lambda: True)
        seen = []

        with spinner("Rendering manifests"):
            seen.append(is_console_suppressed())

        assert seen == [True]
        assert is_console_suppressed() is False
