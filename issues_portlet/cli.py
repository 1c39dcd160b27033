"""CLI entry point: command definitions using Click.

Commands:
    init     Generate a template config file
    table    Issues per tool and job, as a JSON table
"""

import functools
import json
import sys
from typing import Any

import click

from issues_portlet import __version__


# ---------------------------------------------------------------------------
# Helpers shared by all data commands
# ---------------------------------------------------------------------------

def _load_config(ctx: click.Context):
    """Load and return the configuration. Exits on error."""
    from issues_portlet.config import ConfigError, load

    obj = ctx.obj
    try:
        config = load(obj["config_path"])
    except ConfigError as exc:
        click.echo(f"Configuration error: {exc}", err=True)
        sys.exit(1)

    if obj["verbose"]:
        click.echo(f"[verbose] Loaded configuration from {obj['config_path']} "
                   f"({len(config.tools)} tools registered)", err=True)

    return config


def _emit_json(data: Any, ctx: click.Context) -> None:
    """Write JSON to stdout or to the file specified by --output."""
    obj = ctx.obj
    indent = 2 if obj["pretty"] else None
    text = json.dumps(data, indent=indent, ensure_ascii=False)

    output_path: str | None = obj["output_path"]
    if output_path:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(text)
        click.echo(f"Report written to '{output_path}'", err=True)
    else:
        click.echo(text)


def _handle_errors(func):
    """Decorator that catches input errors and exits cleanly."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        from issues_portlet.jobs import JobsFileError
        from issues_portlet.reports.table import InvalidInputError

        try:
            return func(*args, **kwargs)
        except JobsFileError as exc:
            click.echo(f"Jobs file error: {exc}", err=True)
            sys.exit(1)
        except InvalidInputError as exc:
            click.echo(f"Input error: {exc}", err=True)
            sys.exit(1)

    return wrapper


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--config", "config_path", default="portlet-config.yaml", show_default=True,
              help="Path to the configuration file.")
@click.option("--output", "output_path", default=None,
              help="Write JSON output to a file instead of stdout.")
@click.option("--pretty", is_flag=True, default=False,
              help="Pretty-print the JSON output.")
@click.option("--verbose", is_flag=True, default=False,
              help="Enable verbose logging.")
@click.version_option(__version__, prog_name="issues-portlet")
@click.pass_context
def cli(ctx: click.Context, config_path: str, output_path: str | None,
        pretty: bool, verbose: bool) -> None:
    """Issues table portlet: static-analysis issues per tool and job, as JSON."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["output_path"] = output_path
    ctx.obj["pretty"] = pretty
    ctx.obj["verbose"] = verbose


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

@cli.command("init")
@click.option("--output", "output_path", default="portlet-config.yaml", show_default=True,
              help="Path where the template config file will be written.")
def init_command(output_path: str) -> None:
    """Generate a template portlet-config.yaml file."""
    from issues_portlet.config import ConfigError, generate_template
    try:
        generate_template(output_path)
        click.echo(f"Template written to '{output_path}'.")
        click.echo("Edit it with your tool names, icons and table options.")
    except ConfigError as exc:
        click.echo(f"Configuration error: {exc}", err=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# table
# ---------------------------------------------------------------------------

@cli.command("table")
@click.argument("jobs_file")
@click.option("--show-icons/--no-show-icons", default=None,
              help="Show tool icons in the column headers (overrides config).")
@click.option("--hide-clean-jobs/--show-clean-jobs", default=None,
              help="Hide jobs without issues (overrides config).")
@click.pass_context
@_handle_errors
def table_command(ctx: click.Context, jobs_file: str,
                  show_icons: bool | None, hide_clean_jobs: bool | None) -> None:
    """Issues of every job in JOBS_FILE, one column per static-analysis tool."""
    from issues_portlet.jobs import load_jobs
    from issues_portlet.labels import ImagePaths, ToolRegistry
    from issues_portlet.reports.table import get_table_report

    config = _load_config(ctx)
    if show_icons is None:
        show_icons = config.show_icons
    if hide_clean_jobs is None:
        hide_clean_jobs = config.hide_clean_jobs

    jobs = load_jobs(jobs_file)
    registry = ToolRegistry.from_config(config)

    if ctx.obj["verbose"]:
        click.echo(f"[verbose] Loaded {len(jobs)} jobs from {jobs_file}", err=True)
        unregistered = sorted({
            run.tool_id for job in jobs for run in job.tool_runs() if run.tool_id not in registry
        })
        for tool_id in unregistered:
            click.echo(f"[verbose] Tool '{tool_id}' is not configured, using its reported name",
                       err=True)

    report = get_table_report(
        jobs, registry,
        show_icons=show_icons,
        hide_clean_jobs=hide_clean_jobs,
        images=ImagePaths(config.resources_url),
    )
    _emit_json(report, ctx)
