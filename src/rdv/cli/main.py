"""rdv CLI - render Helm charts or kustomizations and diff them against a git ref."""

from __future__ import annotations

from typing import Any

import click
from rich.console import Console

from rdv.cli.utils import GroupedCommand, find_repo_root
from rdv.config.loader import load_config
from rdv.core.errors import RdvError
from rdv.core.logging import clear_run_id, configure_logging, get_logger, set_run_id
from rdv.diff.models import DiffStrategy
from rdv.pipeline.models import PipelineOptions
from rdv.pipeline.ops import run_pipeline

log = get_logger("cli")

EXIT_INTERRUPTED = 130

_OPTION_GROUPS = [
    ("Core Options", ["path", "ref", "validate"]),
    ("Helm Options", ["values", "update"]),
    ("Output Options", ["semantic", "plain", "debug"]),
]


def _overrides(update: bool, semantic: bool) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if update:
        overrides["render"] = {"update_dependencies": True}
    if semantic:
        overrides["diff"] = {"semantic": True}
    return overrides


@click.command(
    cls=GroupedCommand,
    option_groups=_OPTION_GROUPS,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(package_name="rdv", prog_name="rdv")
@click.option(
    "-p",
    "--path",
    default=".",
    show_default=True,
    help="Relative path to the chart or kustomization directory",
)
@click.option(
    "-r",
    "--ref",
    default=None,
    help="Target git ref to compare against [default: main]. "
    "Will try to find its remote-tracking branch (e.g., origin/main)",
)
@click.option(
    "-v", "--validate", is_flag=True, help="Validate rendered manifests with kubeconform"
)
@click.option(
    "-f",
    "--values",
    "values",
    multiple=True,
    help="Path to an additional values file, relative to the path (can be specified "
    "multiple times)",
)
@click.option(
    "-u",
    "--update",
    is_flag=True,
    help="Update Helm chart dependencies. Required if lockfile does not match dependencies",
)
@click.option(
    "-s",
    "--semantic",
    is_flag=True,
    help="Compare documents field by field instead of line by line",
)
@click.option("--plain", is_flag=True, help="Output without any highlighting")
@click.option("--debug", is_flag=True, help="Enable verbose logging for debugging")
@click.pass_context
def cli(
    ctx: click.Context,
    path: str,
    ref: str | None,
    validate: bool,
    values: tuple[str, ...],
    update: bool,
    semantic: bool,
    plain: bool,
    debug: bool,
) -> None:
    """Render a Helm chart or kustomization locally and at a git ref, then diff them.

    Exits 0 whether or not differences were found, 1 on any failure and 130
    when interrupted.
    """
    level = "DEBUG" if debug else "INFO"
    configure_logging(level=level)
    run_id = set_run_id()
    log.debug("cli_started", run_id=run_id, path=path, ref=ref)

    try:
        config = load_config(find_repo_root(), **_overrides(update, semantic))
        logging_config = config.logging
        if debug:
            logging_config = logging_config.model_copy(update={"level": "DEBUG"})
        configure_logging(config=logging_config)

        options = PipelineOptions(
            path=path,
            ref=ref or config.diff.default_ref,
            value_files=values,
            validate=validate,
            strategy=DiffStrategy.SEMANTIC if config.diff.semantic else DiffStrategy.UNIFIED,
            plain=plain,
        )
        console = Console(no_color=plain, highlight=False, soft_wrap=True)
        run_pipeline(options, config, console=console)
    except RdvError as e:
        log.debug("pipeline_failed", **e.to_dict())
        raise click.ClickException(f"{e.stage} failed: {e.message}") from e
    except KeyboardInterrupt:
        log.warning("interrupted")
        click.echo("Interrupted", err=True)
        ctx.exit(EXIT_INTERRUPTED)
    finally:
        clear_run_id()


if __name__ == "__main__":
    cli()
