"""
Commit retrieval and normalization.

Reads commit history through `git log`, parses it into Commit records, drops
commits repeated across branches and, optionally, merge commits.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List

from git_hours.config import HoursConfig
from git_hours.dates import ALWAYS, format_git_date
from git_hours.history.git_cli import GitError, run_git


FIELD_SEPARATOR = '\x1f'
# Format: sha, author date, subject, author name, author email
LOG_FORMAT = '%H%x1f%ad%x1f%s%x1f%an%x1f%ae'
MERGE_PREFIX = 'Merge '


class GitLogParseError(GitError):
    pass


@dataclass(frozen=True)
class Author:
    name: str
    email: str


@dataclass(frozen=True)
class Commit:
    sha: str
    date: datetime
    message: str
    author: Author


def build_log_args(config: HoursConfig) -> List[str]:
    """
    Build the `git log` arguments for a run.

    Args:
        config: Run configuration

    Returns:
        Argument list, without the leading `git`
    """
    args = ['--no-pager', 'log']
    if config.merge_requests:
        # Expand merge commits once per parent
        args.append('-m')
    if config.branch:
        args.append(config.branch)
    args.extend(['--date=iso-strict-local', '--reverse'])
    if config.since != ALWAYS:
        args.append(f'--since={format_git_date(config.since)}')
    if config.until != ALWAYS:
        args.append(f'--until={format_git_date(config.until)}')
    args.append(f'--pretty=format:{LOG_FORMAT}')
    return args


def parse_git_log(log_output: str) -> List[Commit]:
    """
    Parse `git log` output produced with LOG_FORMAT.

    Args:
        log_output: Raw git log output

    Returns:
        Commits in output order

    Raises:
        GitLogParseError: A non-empty line is not a valid record
    """
    commits = []
    for line_no, line in enumerate(log_output.split('\n'), 1):
        line = line.rstrip('\r')
        if not line.strip():
            continue

        parts = line.split(FIELD_SEPARATOR)
        if len(parts) != 5:
            raise GitLogParseError(f"Unexpected git log record on line {line_no}: {line!r}")
        sha, date_str, subject, author_name, author_email = parts

        try:
            commit_date = datetime.fromisoformat(date_str.strip())
        except ValueError as e:
            raise GitLogParseError(f"Invalid commit date on line {line_no}: {date_str!r}") from e

        commits.append(Commit(
            sha=sha.strip(),
            date=commit_date,
            message=subject,
            author=Author(name=author_name, email=author_email.strip()),
        ))
    return commits


def fetch_commits(config: HoursConfig) -> List[Commit]:
    """Run `git log` in the configured repository and parse every record."""
    output = run_git(build_log_args(config), cwd=config.git_path, verbose=config.verbose)
    return parse_git_log(output)


def normalize_commits(commits: Iterable[Commit], merge_requests: bool) -> List[Commit]:
    # Multiple branches might share commits, so keep one per sha.
    # The last occurrence wins but keeps the slot of the first one.
    unique: Dict[str, Commit] = {}
    for commit in commits:
        unique[commit.sha] = commit

    if merge_requests:
        return list(unique.values())
    return [c for c in unique.values() if not c.message.startswith(MERGE_PREFIX)]


def get_commits(config: HoursConfig) -> List[Commit]:
    return normalize_commits(fetch_commits(config), config.merge_requests)
