"""Tests for diff presentation."""

from __future__ import annotations

from collections.abc import Callable
from io import StringIO

import pytest
from rich.console import Console
from rich.text import Text

from rdv.config.constants import NO_DIFFERENCES_MESSAGE
from rdv.core.errors import InternalError
from rdv.diff import semantic_diff, unified_diff
from rdv.report import Reporter


def _styled_lines(text: Text) -> dict[str, str]:
    """Map each styled line of ``text`` to its style."""
    return {text.plain[span.start : span.end]: str(span.style) for span in text.spans}


class TestUnifiedReport:
    """Colorized unified diff output."""

    def test_no_differences_prints_message_only(self, deployment: Callable[[int], str]) -> None:
        report = Reporter().render(unified_diff(deployment(2), deployment(2), "t", "l"), "Title")

        assert report.has_differences is False
        assert report.plain_text == NO_DIFFERENCES_MESSAGE

    def test_lines_styled_by_role(self, deployment: Callable[[int], str]) -> None:
        # Given
        diff = unified_diff(deployment(2), deployment(3), "main/app", "local/app")

        # When
        report = Reporter().render(diff, title="--- Diff (main vs. local) ---")

        # Then
        styles = _styled_lines(report.text)
        assert styles == {
            "--- Diff (main vs. local) ---": "bold",
            "@@ -3,4 +3,4 @@": "cyan",
            "-  replicas: 2": "red",
            "+  replicas: 3": "green",
        }
        assert report.plain_text.splitlines()[1:3] == ["--- main/app", "+++ local/app"]

    def test_plain_mode_has_no_styles(self, deployment: Callable[[int], str]) -> None:
        diff = unified_diff(deployment(2), deployment(3), "main/app", "local/app")

        report = Reporter(plain=True).render(diff, title="Title")

        assert report.text.spans == []
        assert report.plain_text == "Title\n" + diff.text.rstrip("\n")

    def test_without_title_starts_with_headers(self, deployment: Callable[[int], str]) -> None:
        report = Reporter().render(unified_diff(deployment(2), deployment(3), "t", "l"))

        assert report.plain_text.startswith("--- t\n+++ l\n@@")


class TestSemanticReport:
    """Document-by-document output."""

    def test_modified_document_lists_field_changes(
        self, deployment: Callable[[int], str]
    ) -> None:
        diff = semantic_diff(deployment(2), deployment(3), "main/app", "local/app")

        report = Reporter(plain=True).render(diff)

        assert report.plain_text.splitlines() == [
            "--- main/app",
            "+++ local/app",
            "apps/v1/Deployment/web (modified, 1 change)",
            "  spec.replicas",
            "    - 2",
            "    + 3",
        ]

    def test_added_document_shown_whole(self) -> None:
        local = "apiVersion: v1\nkind: ConfigMap\nmetadata:\n  name: cfg\n"

        report = Reporter(plain=True).render(semantic_diff("", local, "main/new", "local/new"))

        assert report.plain_text.splitlines()[2:] == [
            "v1/ConfigMap/cfg (added)",
            "  + apiVersion: v1",
            "  + kind: ConfigMap",
            "  + metadata:",
            "  +   name: cfg",
        ]

    def test_removed_document_styled_red(self) -> None:
        target = "apiVersion: v1\nkind: ConfigMap\nmetadata:\n  name: cfg\n"

        report = Reporter().render(semantic_diff(target, "", "t", "l"))

        styles = _styled_lines(report.text)
        assert styles["v1/ConfigMap/cfg (removed)"] == "bold"
        assert styles["  - kind: ConfigMap"] == "red"

    def test_added_field_has_only_new_value(self) -> None:
        old = "apiVersion: v1\nkind: ConfigMap\nmetadata:\n  name: cfg\n"
        new = old + "data:\n  key: value\n"

        report = Reporter(plain=True).render(semantic_diff(old, new, "t", "l"))

        assert report.plain_text.splitlines()[2:] == [
            "v1/ConfigMap/cfg (modified, 1 change)",
            "  data",
            "    + key: value",
        ]


class TestEmit:
    def test_emit_writes_report_to_console(self, deployment: Callable[[int], str]) -> None:
        # Given
        buffer = StringIO()
        console = Console(file=buffer, no_color=True, width=40)
        report = Reporter().render(unified_diff(deployment(2), deployment(3), "main/a", "local/a"))

        # When
        Reporter().emit(report, console)

        # Then
        output = buffer.getvalue()
        assert "+  replicas: 3" in output
        assert "\x1b[" not in output

    def test_emit_no_differences_message(self, deployment: Callable[[int], str]) -> None:
        buffer = StringIO()
        report = Reporter().render(unified_diff(deployment(1), deployment(1), "t", "l"))

        Reporter().emit(report, Console(file=buffer))

        assert buffer.getvalue() == NO_DIFFERENCES_MESSAGE + "\n"


class TestUnsupportedResult:
    def test_unknown_result_type_is_internal_error(self) -> None:
        class Stub:
            has_differences = True

        with pytest.raises(InternalError, match="unsupported diff result"):
            Reporter().render(Stub())  # type: ignore[arg-type]
