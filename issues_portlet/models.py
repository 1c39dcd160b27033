"""Data models for the issues table.

Contains the value types the table is assembled from and serialized to:
    - ToolRun      one tool's latest result recorded against a job
    - Job          capability every job source implements
    - Cell         one job x tool intersection
    - Row          one job with a cell per column
    - ReportTable  columns (tool headers) and rows
"""

from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ToolRun:
    tool_id: str
    tool_name: str
    total: int
    url: str = ""

    def __post_init__(self) -> None:
        if self.total < 0:
            raise ValueError(
                f"Issue count of tool '{self.tool_id}' must not be negative, got {self.total}"
            )


class Job(Protocol):
    """A build job that static-analysis tools report against."""

    name: str

    def tool_runs(self) -> Sequence[ToolRun]:
        """Return the recorded tool runs in the order they were observed."""
        ...


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Cell:
    tool_id: str
    total: int | None = None
    url: str = ""

    @property
    def is_empty(self) -> bool:
        return self.total is None

    def to_dict(self) -> dict[str, Any]:
        return {"tool_id": self.tool_id, "total": self.total, "url": self.url}


@dataclass
class Row:
    job: Job
    cells: list[Cell] = field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        """True when at least one tool reported a positive number of issues."""
        return any(cell.total for cell in self.cells)

    def to_dict(self) -> dict[str, Any]:
        return {
            "job":   self.job.name,
            "cells": [cell.to_dict() for cell in self.cells],
        }


@dataclass
class ReportTable:
    tool_ids: list[str] = field(default_factory=list)
    tool_names: list[str] = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)

    @property
    def total_issues(self) -> int:
        return sum(cell.total or 0 for row in self.rows for cell in row.cells)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tool_ids":   list(self.tool_ids),
            "tool_names": list(self.tool_names),
            "rows":       [row.to_dict() for row in self.rows],
        }
