from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional

from git_hours.history.commits import Commit


UNKNOWN_EMAIL = 'unknown'


def canonical_email(email: Optional[str], aliases: Optional[Mapping[str, str]] = None) -> str:
    email = email or UNKNOWN_EMAIL
    if aliases and email in aliases:
        return aliases[email]
    return email


def group_by_author(
    commits: Iterable[Commit],
    aliases: Optional[Mapping[str, str]] = None,
) -> Dict[str, List[Commit]]:
    """Group commits by canonical author email.

    Groups keep first-seen order, and commits keep their input order inside a
    group, so the first commit of a group carries the author's display name.
    """
    grouped: Dict[str, List[Commit]] = {}
    for commit in commits:
        email = canonical_email(commit.author.email, aliases)
        grouped.setdefault(email, []).append(commit)
    return grouped


def display_name(commits: List[Commit]) -> str:
    return commits[0].author.name if commits else ''
