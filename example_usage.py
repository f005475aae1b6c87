#!/usr/bin/env python3
"""
Example usage of git-hours as a library.

This script demonstrates different ways to use the git_hours modules.
"""

import sys
from datetime import date

from git_hours.config import HoursConfig
from git_hours.estimation.authors import group_by_author
from git_hours.history.commits import get_commits
from git_hours.reporting.excel import write_report_xlsx
from git_hours.reporting.report import build_report, format_report_json


def example_basic_analysis(repo_path):
    """Example: Hours for the whole history of a repository."""
    print("\n" + "="*60)
    print("Example 1: Basic Analysis")
    print("="*60)

    config = HoursConfig(git_path=repo_path)
    commits = get_commits(config)
    report = build_report(group_by_author(commits), len(commits))
    print(format_report_json(report))


def example_date_range_analysis(repo_path):
    """Example: Hours for one year, merge commits excluded."""
    print("\n" + "="*60)
    print("Example 2: Date Range Analysis")
    print("="*60)

    config = HoursConfig(
        git_path=repo_path,
        since=date(2024, 1, 1),
        until=date(2024, 12, 31),
        merge_requests=False,
    )
    commits = get_commits(config)
    report = build_report(group_by_author(commits), len(commits))
    print(f"Total hours in 2024: {report.total.hours} ({report.total.commits} commits)")


def example_aliases_and_workbook(repo_path):
    """Example: Slow committers, merged identities and an Excel workbook."""
    print("\n" + "="*60)
    print("Example 3: Aliases and Workbook")
    print("="*60)

    config = HoursConfig(
        git_path=repo_path,
        max_commit_diff_minutes=240,
        first_commit_addition_minutes=60,
        email_aliases={'jane@laptop.local': 'jane@example.com'},
    )
    commits = get_commits(config)
    report = build_report(
        group_by_author(commits, config.email_aliases),
        len(commits),
        config.max_commit_diff_minutes,
        config.first_commit_addition_minutes,
    )
    for email, work in report.authors:
        print(f"{email:40} {work.hours:5}h {work.commits:5} commits")
    write_report_xlsx(report, commits, 'git_hours_example.xlsx', config.email_aliases)


if __name__ == '__main__':
    path = sys.argv[1] if len(sys.argv) > 1 else '.'
    example_basic_analysis(path)
    example_date_range_analysis(path)
    example_aliases_and_workbook(path)
