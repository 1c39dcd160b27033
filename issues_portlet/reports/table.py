"""Issues table: static-analysis results per tool and job.

Functions:
    build_table(jobs, labels, *, show_icons, hide_clean_jobs, images)       -> ReportTable
    get_table_report(jobs, labels, *, show_icons, hide_clean_jobs, images)  -> dict

Columns are the tools that reported against any of the jobs, sorted by their
display name. Rows follow the order of the given jobs; each row holds one cell
per column, empty when the job has no result for that tool.
"""

import html
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Sequence

from issues_portlet.labels import ImagePaths, ImageResolver, LabelFactory, ToolLabel, ToolRegistry
from issues_portlet.models import Cell, Job, ReportTable, Row, ToolRun
from issues_portlet.sanitizer import plain_text, sanitize

_ICON_HEADER = '<img alt="{text}" title="{text}" src="{src}">'


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class InvalidInputError(Exception):
    """Raised when the jobs to tabulate are missing."""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_table(
    jobs: Sequence[Job],
    labels: LabelFactory | None = None,
    *,
    show_icons: bool = False,
    hide_clean_jobs: bool = False,
    images: ImageResolver | None = None,
) -> ReportTable:
    """Correlate *jobs* against the tools that reported issues for them.

    Args:
        jobs:            Jobs to show, one row each, in this order.
        labels:          Tool metadata lookup; defaults to the names the
                         tools reported themselves.
        show_icons:      Wrap every header in an ``<img>`` of the tool icon.
        hide_clean_jobs: Drop rows without a single reported issue.
        images:          Resolves tool icons to image paths.

    Raises:
        InvalidInputError: if *jobs* or one of its elements is None.
    """
    if jobs is None:
        raise InvalidInputError("No jobs given.")
    jobs = list(jobs)
    for position, job in enumerate(jobs):
        if job is None:
            raise InvalidInputError(f"Job at position {position} is missing.")

    labels = labels if labels is not None else ToolRegistry()
    images = images if images is not None else ImagePaths()

    latest_runs = [_latest_runs(job.tool_runs()) for job in jobs]
    columns = _build_columns(latest_runs, labels)

    rows = []
    for job, runs in zip(jobs, latest_runs):
        cells = []
        for column in columns:
            run = runs.get(column.tool_id)
            if run is None:
                cells.append(Cell(tool_id=column.tool_id))
            else:
                cells.append(Cell(tool_id=column.tool_id, total=run.total, url=run.url))
        rows.append(Row(job=job, cells=cells))

    if hide_clean_jobs:
        rows = [row for row in rows if row.has_issues]

    return ReportTable(
        tool_ids=[column.tool_id for column in columns],
        tool_names=[_header(column, show_icons, images) for column in columns],
        rows=rows,
    )


def get_table_report(
    jobs: Sequence[Job],
    labels: LabelFactory | None = None,
    *,
    show_icons: bool = False,
    hide_clean_jobs: bool = False,
    images: ImageResolver | None = None,
) -> dict:
    """Return the issues table of *jobs* as a JSON-ready report."""
    table = build_table(
        jobs, labels,
        show_icons=show_icons,
        hide_clean_jobs=hide_clean_jobs,
        images=images,
    )
    return {
        "report_type":     "issues_table",
        "generated_at":    datetime.now(timezone.utc).isoformat(),
        "show_icons":      show_icons,
        "hide_clean_jobs": hide_clean_jobs,
        "summary": {
            "jobs":         len(table.rows),
            "tools":        len(table.tool_ids),
            "total_issues": table.total_issues,
        },
        **table.to_dict(),
    }


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _Column:
    tool_id: str
    name: str
    icon: str


def _latest_runs(runs: Iterable[ToolRun]) -> dict[str, ToolRun]:
    """Index *runs* by tool id; a later run replaces an earlier one."""
    latest: dict[str, ToolRun] = {}
    for run in runs:
        latest[run.tool_id] = run
    return latest


def _resolve_label(labels: LabelFactory, tool_id: str, name: str) -> ToolLabel:
    try:
        return labels.create(tool_id, name)
    except LookupError:
        return ToolLabel(tool_id=tool_id, name=tool_id, link_name=tool_id)


def _build_columns(latest_runs: list[dict[str, ToolRun]], labels: LabelFactory) -> list[_Column]:
    reported_names: dict[str, str] = {}
    for runs in latest_runs:
        for tool_id, run in runs.items():
            reported_names.setdefault(tool_id, run.tool_name)

    columns = []
    for tool_id, reported_name in reported_names.items():
        label = _resolve_label(labels, tool_id, reported_name)
        name = sanitize(label.name) or html.escape(tool_id, quote=False)
        columns.append(_Column(tool_id=tool_id, name=name, icon=label.small_icon_url))

    return sorted(_distinct_names(columns), key=lambda column: (column.name, column.tool_id))


def _distinct_names(columns: list[_Column]) -> list[_Column]:
    """Suffix shared display names with the tool id until every name is unique."""
    shared = Counter(column.name for column in columns)
    while any(count > 1 for count in shared.values()):
        columns = [
            _Column(
                tool_id=column.tool_id,
                name=f"{column.name} ({html.escape(column.tool_id, quote=False)})",
                icon=column.icon,
            )
            if shared[column.name] > 1 else column
            for column in columns
        ]
        shared = Counter(column.name for column in columns)
    return columns


def _header(column: _Column, show_icons: bool, images: ImageResolver) -> str:
    if not show_icons or not column.icon:
        return column.name
    src = images.get_image_path(column.icon)
    if not src:
        return column.name
    text = plain_text(column.name)
    return _ICON_HEADER.format(text=text, src=html.escape(src, quote=True))
