"""Run configuration for git-hours.

`HoursConfig` is built once from the parsed command line and handed to every
stage of the pipeline; nothing reads configuration from module globals.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

from git_hours.dates import ALWAYS, parse_input_date


# Maximum minutes between two subsequent commits that still count as one
# coding session
DEFAULT_MAX_COMMIT_DIFF_MINUTES = 2 * 60
# Minutes credited for the first commit of a coding session
DEFAULT_FIRST_COMMIT_ADDITION_MINUTES = 2 * 60
DEFAULT_GIT_PATH = '.'

TRUE_VALUES = {'1', 'true', 'yes', 'on'}
FALSE_VALUES = {'0', 'false', 'no', 'off'}


class InvalidAliasSyntaxError(ValueError):
    pass


def parse_bool_flag(value: str) -> bool:
    normalized = (value or '').strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise ValueError(f"Expected true or false, got {value!r}")


def parse_email_alias(value: str) -> Tuple[str, str]:
    """Split an `other@example.com=main@example.com` alias into its two emails."""
    separator = (value or '').find('=')
    if separator <= 0:
        raise InvalidAliasSyntaxError(f"Invalid alias: {value}")
    email = value[:separator].strip()
    alias = value[separator + 1:].strip()
    if not email or not alias:
        raise InvalidAliasSyntaxError(f"Invalid alias: {value}")
    return email, alias


def collect_email_aliases(values: Optional[Iterable[str]]) -> Dict[str, str]:
    """Build the alias map, reporting and skipping malformed entries."""
    aliases: Dict[str, str] = {}
    for value in values or []:
        try:
            email, alias = parse_email_alias(value)
        except InvalidAliasSyntaxError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            continue
        aliases[email] = alias
    return aliases


@dataclass(frozen=True)
class HoursConfig:
    max_commit_diff_minutes: int = DEFAULT_MAX_COMMIT_DIFF_MINUTES
    first_commit_addition_minutes: int = DEFAULT_FIRST_COMMIT_ADDITION_MINUTES
    since: Union[date, str] = ALWAYS
    until: Union[date, str] = ALWAYS
    merge_requests: bool = True
    git_path: str = DEFAULT_GIT_PATH
    # Read-only view; excluded from the hash because mappings are unhashable
    email_aliases: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}), hash=False)
    branch: Optional[str] = None
    verbose: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'email_aliases', MappingProxyType(dict(self.email_aliases or {})))

    @classmethod
    def from_args(cls, args, today: Optional[date] = None) -> 'HoursConfig':
        """Merge parsed CLI arguments over the defaults.

        Raises DateParseError for a malformed --since/--until literal.
        """
        def pick(value, default):
            return default if value is None else value

        return cls(
            max_commit_diff_minutes=pick(args.max_commit_diff, DEFAULT_MAX_COMMIT_DIFF_MINUTES),
            first_commit_addition_minutes=pick(args.first_commit_add, DEFAULT_FIRST_COMMIT_ADDITION_MINUTES),
            since=parse_input_date(args.since, today),
            until=parse_input_date(args.until, today),
            merge_requests=pick(args.merge_request, True),
            git_path=args.path or DEFAULT_GIT_PATH,
            email_aliases=collect_email_aliases(args.email),
            branch=args.branch or None,
            verbose=bool(getattr(args, 'verbose', False)),
        )
