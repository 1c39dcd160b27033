"""Tests for issues_portlet/jobs.py"""

import textwrap
from pathlib import Path

import pytest

from issues_portlet.jobs import JobsFileError, StoredJob, load_jobs
from issues_portlet.models import ToolRun


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def write_jobs(tmp_path: Path, content: str) -> str:
    p = tmp_path / "jobs.yaml"
    p.write_text(textwrap.dedent(content), encoding="utf-8")
    return str(p)


VALID_YAML = """\
    jobs:
      - name: core
        url: job/core/
        results:
          - {id: spotbugs, name: SpotBugs, total: 3, url: job/core/12/spotbugs}
          - {id: checkstyle, name: CheckStyle, total: 4, url: job/core/12/checkstyle}
      - name: web
    """


# ---------------------------------------------------------------------------
# load_jobs(): happy path
# ---------------------------------------------------------------------------

def test_load_jobs_in_order(tmp_path):
    jobs = load_jobs(write_jobs(tmp_path, VALID_YAML))

    assert [job.name for job in jobs] == ["core", "web"]
    assert jobs[0].url == "job/core/"
    assert jobs[0].tool_runs() == [
        ToolRun("spotbugs", "SpotBugs", 3, "job/core/12/spotbugs"),
        ToolRun("checkstyle", "CheckStyle", 4, "job/core/12/checkstyle"),
    ]


def test_job_without_results(tmp_path):
    jobs = load_jobs(write_jobs(tmp_path, VALID_YAML))
    assert jobs[1] == StoredJob(name="web")
    assert jobs[1].tool_runs() == []


def test_load_json(tmp_path):
    p = tmp_path / "jobs.json"
    p.write_text('{"jobs": [{"name": "core", "results": [{"id": "pmd", "total": 0}]}]}')

    jobs = load_jobs(str(p))

    assert jobs[0].tool_runs() == [ToolRun("pmd", "", 0, "")]


def test_empty_jobs_list(tmp_path):
    assert load_jobs(write_jobs(tmp_path, "jobs: []\n")) == []


# ---------------------------------------------------------------------------
# load_jobs(): errors
# ---------------------------------------------------------------------------

def test_missing_file(tmp_path):
    with pytest.raises(JobsFileError, match="not found"):
        load_jobs(str(tmp_path / "no-such-file.yaml"))


def test_directory_instead_of_file(tmp_path):
    with pytest.raises(JobsFileError, match="not found"):
        load_jobs(str(tmp_path))


def test_invalid_utf8(tmp_path):
    p = tmp_path / "jobs.yaml"
    p.write_bytes(b"jobs:\n  - name: \xff\xfe\n")
    with pytest.raises(JobsFileError, match="Failed to read"):
        load_jobs(str(p))


def test_unparseable_file(tmp_path):
    with pytest.raises(JobsFileError, match="Failed to parse"):
        load_jobs(write_jobs(tmp_path, "jobs: [unclosed\n"))


def test_top_level_must_be_mapping(tmp_path):
    with pytest.raises(JobsFileError, match="'jobs' list"):
        load_jobs(write_jobs(tmp_path, "- name: core\n"))


def test_job_without_name(tmp_path):
    with pytest.raises(JobsFileError, match=r"jobs\[0\]\.name"):
        load_jobs(write_jobs(tmp_path, """\
            jobs:
              - url: job/core/
            """))


def test_result_without_id(tmp_path):
    with pytest.raises(JobsFileError, match=r"jobs\[0\]\.results\[1\]\.id"):
        load_jobs(write_jobs(tmp_path, """\
            jobs:
              - name: core
                results:
                  - {id: pmd, total: 1}
                  - {name: SpotBugs, total: 1}
            """))


@pytest.mark.parametrize("total", ["-1", "'many'", "1.5", "true"])
def test_invalid_total(tmp_path, total):
    with pytest.raises(JobsFileError, match="non-negative integer"):
        load_jobs(write_jobs(tmp_path, f"""\
            jobs:
              - name: core
                results:
                  - {{id: pmd, total: {total}}}
            """))
