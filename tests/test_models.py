"""Tests for issues_portlet/models.py"""

import pytest

from issues_portlet.jobs import StoredJob
from issues_portlet.models import Cell, ReportTable, Row, ToolRun


def test_negative_total_rejected():
    with pytest.raises(ValueError, match="negative"):
        ToolRun("checkstyle", "CheckStyle", -1)


def test_empty_cell():
    cell = Cell("checkstyle")
    assert cell.is_empty
    assert cell.url == ""


def test_zero_total_is_not_empty():
    assert not Cell("checkstyle", 0, "job/build/checkstyle").is_empty


@pytest.mark.parametrize("totals, expected", [
    ([None, None], False),
    ([0, None],    False),
    ([0, 0],       False),
    ([0, 2],       True),
    ([1, None],    True),
])
def test_row_has_issues(totals, expected):
    row = Row(job=StoredJob("core"), cells=[Cell(f"t{i}", total) for i, total in enumerate(totals)])
    assert row.has_issues is expected


def test_table_to_dict():
    table = ReportTable(
        tool_ids=["checkstyle"],
        tool_names=["CheckStyle"],
        rows=[
            Row(job=StoredJob("core"), cells=[Cell("checkstyle", 4, "job/core/checkstyle")]),
            Row(job=StoredJob("web"), cells=[Cell("checkstyle")]),
        ],
    )

    assert table.total_issues == 4
    assert table.to_dict() == {
        "tool_ids":   ["checkstyle"],
        "tool_names": ["CheckStyle"],
        "rows": [
            {"job": "core", "cells": [{"tool_id": "checkstyle", "total": 4, "url": "job/core/checkstyle"}]},
            {"job": "web",  "cells": [{"tool_id": "checkstyle", "total": None, "url": ""}]},
        ],
    }
