#!/usr/bin/env python3
"""
Unit tests for configuration, date keywords and command line handling.
"""

import io
import json
import unittest
from contextlib import redirect_stderr, redirect_stdout
from datetime import date, datetime, timezone
from unittest.mock import patch

from git_hours import cli
from git_hours.config import (
    DEFAULT_FIRST_COMMIT_ADDITION_MINUTES,
    DEFAULT_MAX_COMMIT_DIFF_MINUTES,
    HoursConfig,
    InvalidAliasSyntaxError,
    collect_email_aliases,
    parse_bool_flag,
    parse_email_alias,
)
from git_hours.dates import ALWAYS, DateParseError, format_git_date, parse_input_date
from git_hours.history.commits import Author, Commit
from git_hours.history.git_cli import GitError


# A Wednesday
TODAY = date(2024, 5, 15)


class TestParseInputDate(unittest.TestCase):

    def test_always(self):
        self.assertEqual(parse_input_date('always', TODAY), ALWAYS)
        self.assertEqual(parse_input_date(None, TODAY), ALWAYS)
        self.assertEqual(parse_input_date('', TODAY), ALWAYS)

    def test_today_and_yesterday(self):
        self.assertEqual(parse_input_date('today', TODAY), date(2024, 5, 15))
        self.assertEqual(parse_input_date('yesterday', TODAY), date(2024, 5, 14))

    def test_thisweek_starts_on_sunday(self):
        self.assertEqual(parse_input_date('thisweek', TODAY), date(2024, 5, 12))
        self.assertEqual(parse_input_date('thisweek', date(2024, 5, 12)), date(2024, 5, 12))

    def test_lastweek_starts_on_monday(self):
        self.assertEqual(parse_input_date('lastweek', TODAY), date(2024, 5, 6))
        self.assertEqual(parse_input_date('lastweek', date(2024, 5, 13)), date(2024, 5, 6))

    def test_literal_date(self):
        self.assertEqual(parse_input_date('2015-01-31', TODAY), date(2015, 1, 31))

    def test_invalid_literal(self):
        for value in ('31/01/2015', 'tomorrow', '2015-13-01', '2015-02-30'):
            with self.assertRaises(DateParseError):
                parse_input_date(value, TODAY)

    def test_defaults_to_current_date(self):
        self.assertEqual(parse_input_date('today'), date.today())

    def test_format_git_date(self):
        self.assertEqual(format_git_date(date(2015, 1, 5)), '2015-01-05')
        self.assertEqual(format_git_date(datetime(2015, 1, 5, 23, 59)), '2015-01-05')


class TestEmailAliases(unittest.TestCase):

    def test_parse_alias(self):
        self.assertEqual(
            parse_email_alias(' old@example.com = new@example.com '),
            ('old@example.com', 'new@example.com'),
        )

    def test_alias_keeps_text_after_first_separator(self):
        self.assertEqual(parse_email_alias('a=b=c'), ('a', 'b=c'))

    def test_invalid_alias(self):
        for value in ('no-separator', '=new@example.com', ''):
            with self.assertRaises(InvalidAliasSyntaxError):
                parse_email_alias(value)

    def test_collect_skips_invalid(self):
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            aliases = collect_email_aliases(['a@x.com=b@x.com', 'broken', 'c@x.com=b@x.com'])

        self.assertEqual(aliases, {'a@x.com': 'b@x.com', 'c@x.com': 'b@x.com'})
        self.assertIn('ERROR: Invalid alias: broken', stderr.getvalue())

    def test_empty_side_is_invalid(self):
        for value in ('old@x.com=', 'old@x.com=   ', '  =new@x.com', ' = '):
            with self.assertRaises(InvalidAliasSyntaxError):
                parse_email_alias(value)

    def test_collect_skips_empty_side(self):
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            aliases = collect_email_aliases(['old@x.com=', 'a@x.com=b@x.com'])

        self.assertEqual(aliases, {'a@x.com': 'b@x.com'})
        self.assertNotIn('', aliases.values())
        self.assertIn('ERROR: Invalid alias: old@x.com=', stderr.getvalue())

    def test_collect_none(self):
        self.assertEqual(collect_email_aliases(None), {})

    def test_later_alias_overrides(self):
        aliases = collect_email_aliases(['a@x.com=b@x.com', 'a@x.com=c@x.com'])
        self.assertEqual(aliases, {'a@x.com': 'c@x.com'})


class TestParseBoolFlag(unittest.TestCase):

    def test_values(self):
        self.assertTrue(parse_bool_flag('true'))
        self.assertTrue(parse_bool_flag('TRUE'))
        self.assertTrue(parse_bool_flag('1'))
        self.assertFalse(parse_bool_flag('false'))
        self.assertFalse(parse_bool_flag('no'))

    def test_invalid(self):
        with self.assertRaises(ValueError):
            parse_bool_flag('maybe')


class TestHoursConfigFromArgs(unittest.TestCase):

    def parse(self, argv):
        return HoursConfig.from_args(cli.build_parser().parse_args(argv), today=TODAY)

    def test_defaults(self):
        config = self.parse([])
        self.assertEqual(config, HoursConfig())
        self.assertEqual(config.max_commit_diff_minutes, DEFAULT_MAX_COMMIT_DIFF_MINUTES)
        self.assertEqual(config.first_commit_addition_minutes, DEFAULT_FIRST_COMMIT_ADDITION_MINUTES)
        self.assertEqual(config.since, ALWAYS)
        self.assertTrue(config.merge_requests)
        self.assertEqual(config.git_path, '.')
        self.assertIsNone(config.branch)

    def test_all_flags(self):
        config = self.parse([
            '-d', '240',
            '-a', '300',
            '-s', 'yesterday',
            '-u', '2024-05-15',
            '-e', 'old@x.com=new@x.com',
            '--email', 'home@x.com=new@x.com',
            '--email=laptop@x.com=new@x.com',
            '-m', 'false',
            '-p', '/srv/repo',
            '-b', 'main',
            '--verbose',
        ])
        self.assertEqual(config.max_commit_diff_minutes, 240)
        self.assertEqual(config.first_commit_addition_minutes, 300)
        self.assertEqual(config.since, date(2024, 5, 14))
        self.assertEqual(config.until, date(2024, 5, 15))
        self.assertEqual(config.email_aliases, {
            'old@x.com': 'new@x.com',
            'home@x.com': 'new@x.com',
            'laptop@x.com': 'new@x.com',
        })
        self.assertFalse(config.merge_requests)
        self.assertEqual(config.git_path, '/srv/repo')
        self.assertEqual(config.branch, 'main')
        self.assertTrue(config.verbose)

    def test_zero_minutes_is_kept(self):
        self.assertEqual(self.parse(['-d', '0']).max_commit_diff_minutes, 0)

    def test_invalid_date(self):
        with self.assertRaises(DateParseError):
            self.parse(['--since', 'last-tuesday'])

    def test_config_is_frozen(self):
        config = self.parse([])
        with self.assertRaises(AttributeError):
            config.branch = 'other'

    def test_aliases_are_read_only(self):
        config = self.parse(['-e', 'old@x.com=new@x.com'])
        with self.assertRaises(TypeError):
            config.email_aliases['old@x.com'] = 'other@x.com'
        self.assertEqual(config.email_aliases['old@x.com'], 'new@x.com')

    def test_config_is_hashable(self):
        config = self.parse(['-e', 'old@x.com=new@x.com'])
        self.assertEqual(hash(config), hash(self.parse(['-e', 'old@x.com=new@x.com'])))
        self.assertEqual(len({config, self.parse([])}), 2)

    def test_plain_dict_is_copied(self):
        aliases = {'old@x.com': 'new@x.com'}
        config = HoursConfig(email_aliases=aliases)
        aliases['old@x.com'] = 'other@x.com'

        self.assertEqual(config.email_aliases, {'old@x.com': 'new@x.com'})
        with self.assertRaises(TypeError):
            config.email_aliases['home@x.com'] = 'new@x.com'


class TestParser(unittest.TestCase):

    def assert_usage_error(self, argv):
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                cli.build_parser().parse_args(argv)
        self.assertEqual(ctx.exception.code, 2)

    def test_rejects_negative_minutes(self):
        self.assert_usage_error(['--max-commit-diff', '-5'])

    def test_rejects_non_numeric_minutes(self):
        self.assert_usage_error(['--first-commit-add', 'lots'])

    def test_rejects_invalid_merge_request(self):
        self.assert_usage_error(['--merge-request', 'maybe'])

    def test_xlsx_flag(self):
        parser = cli.build_parser()
        self.assertIsNone(parser.parse_args([]).xlsx)
        self.assertEqual(parser.parse_args(['--xlsx']).xlsx, '')
        self.assertEqual(parser.parse_args(['--xlsx', 'out.xlsx']).xlsx, 'out.xlsx')


def make_commit(sha, email, minute):
    return Commit(
        sha=sha,
        date=datetime(2024, 3, 4, 9, minute, tzinfo=timezone.utc),
        message='work',
        author=Author(name=email.split('@')[0].title(), email=email),
    )


class TestMain(unittest.TestCase):
    """Test the entry point with git patched out."""

    def setUp(self):
        # The working directory may itself be a shallow CI checkout
        shallow_check = patch.object(cli, 'ensure_not_shallow')
        shallow_check.start()
        self.addCleanup(shallow_check.stop)

    def run_main(self, argv):
        stdout = io.StringIO()
        stderr = io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            cli.main(argv)
        return stdout.getvalue(), stderr.getvalue()

    def test_prints_report(self):
        commits = [
            make_commit('1', 'alice@example.com', 0),
            make_commit('2', 'bob@example.com', 5),
            make_commit('3', 'alice@example.com', 40),
            make_commit('4', 'alias@example.com', 50),
        ]
        with patch.object(cli, 'get_commits', return_value=commits) as get_commits:
            stdout, _ = self.run_main(['-e', 'alias@example.com=alice@example.com'])

        config = get_commits.call_args[0][0]
        self.assertEqual(config.email_aliases, {'alias@example.com': 'alice@example.com'})

        data = json.loads(stdout)
        self.assertEqual(list(data), ['bob@example.com', 'alice@example.com', 'total'])
        self.assertEqual(data['alice@example.com'], {'name': 'Alice', 'hours': 1, 'commits': 3})
        self.assertEqual(data['bob@example.com'], {'name': 'Bob', 'hours': 0, 'commits': 1})
        self.assertEqual(data['total'], {'hours': 1, 'commits': 4})

    def test_invalid_alias_is_reported_and_skipped(self):
        with patch.object(cli, 'get_commits', return_value=[]):
            stdout, stderr = self.run_main(['-e', 'nonsense'])
        self.assertIn('ERROR: Invalid alias: nonsense', stderr)
        self.assertEqual(json.loads(stdout), {'total': {'hours': 0, 'commits': 0}})

    def test_invalid_date_fails_before_git(self):
        with patch.object(cli, 'get_commits') as get_commits:
            with self.assertRaises(SystemExit) as ctx:
                self.run_main(['--since', '01.02.2015'])
        self.assertEqual(ctx.exception.code, 2)
        get_commits.assert_not_called()

    def test_git_error_exit_code(self):
        with patch.object(cli, 'get_commits', side_effect=GitError('fatal: bad revision')):
            stderr = io.StringIO()
            with redirect_stderr(stderr), redirect_stdout(io.StringIO()) as stdout:
                with self.assertRaises(SystemExit) as ctx:
                    cli.main(['--branch', 'nope'])
        self.assertEqual(ctx.exception.code, cli.EXIT_GIT_ERROR)
        self.assertIn('fatal: bad revision', stderr.getvalue())
        self.assertEqual(stdout.getvalue(), '')

    def test_verbose_summary_on_stderr(self):
        commits = [make_commit('1', 'alice@example.com', 0)]
        with patch.object(cli, 'get_commits', return_value=commits):
            stdout, stderr = self.run_main(['--verbose'])
        self.assertIn('1 commits from 1 authors', stderr)
        json.loads(stdout)


if __name__ == '__main__':
    unittest.main()
