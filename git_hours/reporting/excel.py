"""Excel export of an hour report.

The workbook mirrors the JSON report and adds the commit list it was
computed from, so estimates can be checked by hand.
"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Iterable, Mapping, Optional, Union

import pandas as pd

from git_hours.estimation.authors import canonical_email
from git_hours.history.commits import Commit
from git_hours.reporting.report import TOTAL_KEY, Report


DEFAULT_REPORTS_DIRNAME = "data_reports"
DEFAULT_WORKBOOK_NAME = "git_hours.xlsx"


def default_workbook_path(
    base_dir: Union[str, Path] = DEFAULT_REPORTS_DIRNAME,
    *,
    now: Optional[datetime] = None,
) -> Path:
    """Return an absolute path `<base_dir>/<YYYYMMDD_HHMMSS>/git_hours.xlsx`.

    The timestamped directory is created.
    """
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    out_dir = Path(base_dir).expanduser() / stamp
    out_dir.mkdir(parents=True, exist_ok=True)
    return out_dir.resolve() / DEFAULT_WORKBOOK_NAME


def author_summary_frame(report: Report) -> pd.DataFrame:
    summary = report.to_dataframe()
    total = pd.DataFrame([{
        "email": TOTAL_KEY,
        "name": "",
        "hours": report.total.hours,
        "commits": report.total.commits,
    }])
    return pd.concat([summary, total], ignore_index=True)


def commits_frame(commits: Iterable[Commit], aliases: Optional[Mapping[str, str]] = None) -> pd.DataFrame:
    rows = [
        {
            "sha": c.sha,
            # Excel cannot store timezone-aware datetimes
            "date": c.date.isoformat(),
            "canonical_email": canonical_email(c.author.email, aliases),
            "author_name": c.author.name,
            "author_email": c.author.email,
            "message": c.message,
        }
        for c in commits
    ]
    columns = ["sha", "date", "canonical_email", "author_name", "author_email", "message"]
    return pd.DataFrame(rows, columns=columns)


def write_report_xlsx(
    report: Report,
    commits: Iterable[Commit],
    output_file: Union[str, Path],
    aliases: Optional[Mapping[str, str]] = None,
) -> Path:
    output_path = Path(output_file)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        author_summary_frame(report).to_excel(writer, sheet_name="Author Summary", index=False)
        commits_frame(commits, aliases).to_excel(writer, sheet_name="Commits", index=False)

    print(f"Workbook saved to: {output_path}", file=sys.stderr)
    return output_path
