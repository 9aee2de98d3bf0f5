"""
Shared fixtures: configuration, fake HTTP responses and GitHub payload builders.
"""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from backport_reminder.config import AppConfig, GitHubConfig, ReminderConfig


NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def _iso(value: datetime) -> str:
    return value.strftime('%Y-%m-%dT%H:%M:%SZ')


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def reminder_config():
    return ReminderConfig()


@pytest.fixture
def app_config(reminder_config):
    return AppConfig(
        github=GitHubConfig(token="ghp_test_token_123456789", repository="octo-org/octo-repo"),
        reminder=reminder_config,
    )


@pytest.fixture
def make_response():
    """Factory for mocked requests.Response objects."""
    def _make(status_code=200, json_data=None, headers=None, text=None):
        response = Mock()
        response.status_code = status_code
        response.ok = 200 <= status_code < 400
        response.json.return_value = json_data
        response.headers = headers or {}
        if text is None:
            text = json.dumps(json_data) if json_data is not None else ""
        response.text = text
        return response
    return _make


@pytest.fixture
def issue_payload():
    def _make(number=42, login="alice", user_type="User", pull_request=True):
        data = {
            'number': number,
            'title': f'Change #{number}',
            'user': {'login': login, 'type': user_type},
        }
        if pull_request:
            data['pull_request'] = {'url': f'https://api.github.com/repos/octo-org/octo-repo/pulls/{number}'}
        return data
    return _make


@pytest.fixture
def pr_payload():
    def _make(number=42, base_ref="master", owner="octo-org", reviewers=(), teams=()):
        return {
            'number': number,
            'base': {'ref': base_ref, 'repo': {'owner': {'login': owner, 'type': 'Organization'}}},
            'requested_reviewers': [{'login': login, 'type': 'User'} for login in reviewers],
            'requested_teams': [{'slug': slug, 'name': slug} for slug in teams],
        }
    return _make


@pytest.fixture
def event_payload():
    def _make(created_at, event="labeled", label="backport-pending"):
        data = {'event': event, 'created_at': _iso(created_at)}
        if label is not None:
            data['label'] = {'name': label, 'color': 'ededed'}
        return data
    return _make


@pytest.fixture
def comment_payload():
    def _make(created_at, body="[backport-pending-reminder]\n@alice", login="github-actions[bot]", user_type="Bot"):
        return {
            'user': {'login': login, 'type': user_type},
            'body': body,
            'created_at': _iso(created_at),
        }
    return _make


@pytest.fixture
def days_ago(now):
    def _ago(days, seconds=0):
        return now - timedelta(days=days, seconds=seconds)
    return _ago
