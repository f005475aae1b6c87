#!/usr/bin/env python3
"""
git-hours command line tool.

Estimates the hours spent on a git repository from its commit timestamps and
prints a JSON report per author email, sorted by hours, plus a total.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from dotenv import load_dotenv

from git_hours import __version__
from git_hours.config import (
    DEFAULT_FIRST_COMMIT_ADDITION_MINUTES,
    DEFAULT_GIT_PATH,
    DEFAULT_MAX_COMMIT_DIFF_MINUTES,
    HoursConfig,
    parse_bool_flag,
)
from git_hours.dates import DateParseError
from git_hours.estimation.authors import group_by_author
from git_hours.history.commits import get_commits
from git_hours.history.git_cli import GitError, ShallowRepositoryError, ensure_not_shallow, verbose_enabled
from git_hours.reporting.excel import default_workbook_path, write_report_xlsx
from git_hours.reporting.report import build_report, format_report_json


EXIT_SHALLOW_REPOSITORY = 1
EXIT_GIT_ERROR = 3

EXAMPLES = """\
Examples:
  Estimate hours of project
      $ git-hours
  Estimate hours in repository where developers commit more seldom: they might have 4h (240min) pause between commits
      $ git-hours --max-commit-diff 240
  Estimate hours in repository where developer works 5 hours before first commit in day
      $ git-hours --first-commit-add 300
  Estimate hours work in repository since yesterday
      $ git-hours --since yesterday
  Estimate hours work in repository since 2015-01-31
      $ git-hours --since 2015-01-31
  Estimate hours work in repository on the "master" branch
      $ git-hours --branch master
  Count two email addresses as one person
      $ git-hours --email old@example.com=new@example.com --email laptop@example.com=new@example.com
"""


def minutes_arg(value: str) -> int:
    try:
        minutes = int(value, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number of minutes: {value!r}") from None
    if minutes < 0:
        raise argparse.ArgumentTypeError(f"minutes must not be negative: {value!r}")
    return minutes


def bool_arg(value: str) -> bool:
    try:
        return parse_bool_flag(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='git-hours',
        description='Estimate time spent on a git repository from its commit history.',
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument(
        '-d', '--max-commit-diff',
        type=minutes_arg,
        default=None,
        help=f'Maximum difference in minutes between commits counted to one session (default: {DEFAULT_MAX_COMMIT_DIFF_MINUTES})',
    )
    parser.add_argument(
        '-a', '--first-commit-add',
        type=minutes_arg,
        default=None,
        help=f'How many minutes the first commit of a session adds to the total (default: {DEFAULT_FIRST_COMMIT_ADDITION_MINUTES})',
    )
    parser.add_argument(
        '-s', '--since',
        default=None,
        help='Analyze data since certain date [always|yesterday|today|lastweek|thisweek|yyyy-mm-dd] (default: always)',
    )
    parser.add_argument(
        '-u', '--until',
        default=None,
        help='Analyze data until certain date [always|yesterday|today|lastweek|thisweek|yyyy-mm-dd] (default: always)',
    )
    parser.add_argument(
        '-e', '--email',
        action='append',
        default=None,
        metavar='OTHER=MAIN',
        help='Group person by email address; repeat for more aliases (default: none)',
    )
    parser.add_argument(
        '-m', '--merge-request',
        type=bool_arg,
        default=None,
        metavar='{true,false}',
        help='Include merge requests into calculation (default: true)',
    )
    parser.add_argument(
        '-p', '--path',
        default=None,
        help=f'Git repository to analyze (default: {DEFAULT_GIT_PATH})',
    )
    parser.add_argument(
        '-b', '--branch',
        default=None,
        help='Analyze only data on the specified branch (default: all reachable from HEAD)',
    )
    parser.add_argument(
        '--xlsx',
        nargs='?',
        const='',
        default=None,
        metavar='PATH',
        help='Also write an Excel workbook (default path: data_reports/<timestamp>/git_hours.xlsx)',
    )
    parser.add_argument('--verbose', action='store_true', help='Print git commands and progress to stderr')
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for git-hours."""
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        ensure_not_shallow(args.path or DEFAULT_GIT_PATH)
    except ShallowRepositoryError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(EXIT_SHALLOW_REPOSITORY)

    try:
        config = HoursConfig.from_args(args)
    except DateParseError as e:
        parser.error(str(e))

    verbose = config.verbose or verbose_enabled()

    try:
        commits = get_commits(config)
    except GitError as e:
        print(f"Error: git failed with {e}", file=sys.stderr)
        raise SystemExit(EXIT_GIT_ERROR)

    commits_by_email = group_by_author(commits, config.email_aliases)
    if verbose:
        print(f"[git-hours] {len(commits)} commits from {len(commits_by_email)} authors", file=sys.stderr)

    report = build_report(
        commits_by_email,
        len(commits),
        config.max_commit_diff_minutes,
        config.first_commit_addition_minutes,
    )
    print(format_report_json(report))

    if args.xlsx is not None:
        output_file = args.xlsx or default_workbook_path()
        write_report_xlsx(report, commits, output_file, config.email_aliases)


if __name__ == '__main__':
    main()
