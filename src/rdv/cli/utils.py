"""CLI utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from rdv.git.ops import GitOps


class GroupedCommand(click.Command):
    """Command whose --help lists options under titled sections.

    Options not named in any group end up under "Other Options".
    """

    def __init__(
        self, *args: Any, option_groups: list[tuple[str, list[str]]] | None = None, **kwargs: Any
    ) -> None:
        super().__init__(*args, **kwargs)
        self.option_groups = option_groups or []

    def format_options(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        records: dict[str, tuple[str, str]] = {}
        for param in self.get_params(ctx):
            record = param.get_help_record(ctx)
            if record is not None and param.name is not None:
                records[param.name] = record

        for title, names in self.option_groups:
            rows = [records.pop(name) for name in names if name in records]
            if rows:
                with formatter.section(title):
                    formatter.write_dl(rows)

        if records:
            with formatter.section("Other Options"):
                formatter.write_dl(list(records.values()))


def find_repo_root(start_path: Path | None = None) -> Path:
    """Find the git repository root from the given path.

    If start_path is None, uses the current working directory.

    Raises:
        NotARepositoryError: If not inside a git repository
    """
    if start_path is None:
        start_path = Path.cwd()
    return GitOps.discover(start_path).path
