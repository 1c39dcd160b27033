"""File-backed job source.

A jobs file lists the jobs to show and the results of every tool recorded for
them, in order (later results of the same tool supersede earlier ones):

    jobs:
      - name: core
        url: job/core/
        results:
          - {id: checkstyle, name: CheckStyle, total: 4, url: job/core/12/checkstyle}

Usage:
    jobs = load_jobs("jobs.yaml")      # raises JobsFileError on bad input
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from issues_portlet.models import ToolRun


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class JobsFileError(Exception):
    """Raised when a jobs file is missing or malformed."""


# ---------------------------------------------------------------------------
# Job
# ---------------------------------------------------------------------------

@dataclass
class StoredJob:
    name: str
    url: str = ""
    runs: list[ToolRun] = field(default_factory=list)

    def tool_runs(self) -> list[ToolRun]:
        return list(self.runs)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def load_jobs(jobs_path: str) -> list[StoredJob]:
    """Read the jobs of a YAML (or JSON) jobs file, keeping their order.

    Raises:
        JobsFileError: if the file is missing, cannot be parsed, or an entry
                       has missing or invalid fields.
    """
    path = Path(jobs_path)

    if not path.is_file():
        raise JobsFileError(f"Jobs file not found: '{jobs_path}'")

    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise JobsFileError(f"Failed to parse '{jobs_path}': {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise JobsFileError(f"Failed to read '{jobs_path}': {exc}") from exc

    if not isinstance(raw, dict) or not isinstance(raw.get("jobs", []), list):
        raise JobsFileError(f"'{jobs_path}' must be a mapping with a 'jobs' list.")

    return [_parse_job(entry, index) for index, entry in enumerate(raw.get("jobs") or [])]


def _parse_job(entry: Any, index: int) -> StoredJob:
    where = f"jobs[{index}]"
    if not isinstance(entry, dict):
        raise JobsFileError(f"{where} must be a mapping.")

    name = entry.get("name")
    if not isinstance(name, str) or not name:
        raise JobsFileError(f"{where}.name is missing.")

    results = entry.get("results") or []
    if not isinstance(results, list):
        raise JobsFileError(f"{where}.results of job '{name}' must be a list.")

    return StoredJob(
        name=name,
        url=str(entry.get("url") or ""),
        runs=[_parse_run(result, f"{where}.results[{i}]") for i, result in enumerate(results)],
    )


def _parse_run(result: Any, where: str) -> ToolRun:
    if not isinstance(result, dict):
        raise JobsFileError(f"{where} must be a mapping.")

    tool_id = result.get("id")
    if not isinstance(tool_id, str) or not tool_id:
        raise JobsFileError(f"{where}.id is missing.")

    total = result.get("total", 0)
    # bool is an int subclass
    if isinstance(total, bool) or not isinstance(total, int) or total < 0:
        raise JobsFileError(
            f"{where}.total of tool '{tool_id}' must be a non-negative integer, got {total!r}"
        )

    return ToolRun(
        tool_id=tool_id,
        tool_name=str(result.get("name") or ""),
        total=total,
        url=str(result.get("url") or ""),
    )
