"""
Per-author hour report.

Turns commits grouped by canonical email into hour estimates, orders authors
by hours and appends the grand total.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Tuple

import pandas as pd

from git_hours.config import DEFAULT_FIRST_COMMIT_ADDITION_MINUTES, DEFAULT_MAX_COMMIT_DIFF_MINUTES
from git_hours.estimation.authors import display_name
from git_hours.estimation.sessions import estimate_hours
from git_hours.history.commits import Commit


TOTAL_KEY = 'total'


@dataclass(frozen=True)
class AuthorWork:
    name: str
    hours: int
    commits: int


@dataclass(frozen=True)
class TotalWork:
    hours: int
    commits: int


@dataclass
class Report:
    # (canonical email, work) pairs, ascending by hours
    authors: List[Tuple[str, AuthorWork]] = field(default_factory=list)
    total: TotalWork = field(default_factory=lambda: TotalWork(hours=0, commits=0))

    def to_dataframe(self) -> pd.DataFrame:
        rows = [
            {'email': email, 'name': work.name, 'hours': work.hours, 'commits': work.commits}
            for email, work in self.authors
        ]
        return pd.DataFrame(rows, columns=['email', 'name', 'hours', 'commits'])


def build_report(
    commits_by_email: Mapping[str, List[Commit]],
    total_commits: int,
    max_commit_diff_minutes: float = DEFAULT_MAX_COMMIT_DIFF_MINUTES,
    first_commit_addition_minutes: float = DEFAULT_FIRST_COMMIT_ADDITION_MINUTES,
) -> Report:
    """
    Estimate hours for every author and assemble the report.

    Args:
        commits_by_email: Commits grouped by canonical email, in first-seen order
        total_commits: Number of normalized commits across all authors
        max_commit_diff_minutes: Largest gap still counted as one session
        first_commit_addition_minutes: Estimate for a session's first commit

    Returns:
        Report with authors sorted ascending by hours. Authors with equal
        hours keep their first-seen order.
    """
    rows = []
    for email, commits in commits_by_email.items():
        rows.append({
            'email': email,
            'name': display_name(commits),
            'hours': estimate_hours(
                [c.date for c in commits],
                max_commit_diff_minutes,
                first_commit_addition_minutes,
            ),
            'commits': len(commits),
        })

    authors: List[Tuple[str, AuthorWork]] = []
    if rows:
        df = pd.DataFrame(rows)
        df = df.sort_values('hours', ascending=True, kind='stable')
        for row in df.itertuples(index=False):
            authors.append((
                str(row.email),
                AuthorWork(name=str(row.name), hours=int(row.hours), commits=int(row.commits)),
            ))

    total_hours = sum(work.hours for _, work in authors)
    return Report(authors=authors, total=TotalWork(hours=total_hours, commits=int(total_commits)))


def report_to_dict(report: Report) -> Dict[str, Dict]:
    """Render the report as a mapping in report order, `total` last."""
    out: Dict[str, Dict] = {}
    for email, work in report.authors:
        out[email] = {'name': work.name, 'hours': work.hours, 'commits': work.commits}
    out[TOTAL_KEY] = {'hours': report.total.hours, 'commits': report.total.commits}
    return out


def format_report_json(report: Report) -> str:
    return json.dumps(report_to_dict(report), indent=2, ensure_ascii=False)
