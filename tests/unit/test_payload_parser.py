"""
Unit tests for GitHub payload parsing and author classification.
"""

import pytest
from datetime import datetime, timezone

from backport_reminder.github.parser import GitHubPayloadParser, PayloadError
from backport_reminder.models.issue import AuthorKind
from backport_reminder.models.payloads import UserPayload


@pytest.fixture
def parser():
    return GitHubPayloadParser()


class TestAuthorResolution:

    @pytest.mark.parametrize("login,user_type,expected", [
        ("alice", "User", AuthorKind.HUMAN),
        ("renovate[bot]", "Bot", AuthorKind.AUTOMATED),
        ("github-actions", "User", AuthorKind.AUTOMATED),
        ("github-actions[bot]", "Bot", AuthorKind.AUTOMATED),
        ("ci-helper", "Bot", AuthorKind.AUTOMATED),
        ("release[bot]", None, AuthorKind.AUTOMATED),
    ])
    def test_author_kind(self, parser, login, user_type, expected):
        author = parser.resolve_author(UserPayload(login=login, type=user_type))
        assert author.kind is expected
        assert author.login == login

    def test_missing_user(self, parser):
        assert parser.resolve_author(None) is None
        assert parser.resolve_author(UserPayload()) is None

    def test_custom_markers(self):
        parser = GitHubPayloadParser(automation_login_markers=("-automation",))
        author = parser.resolve_author(UserPayload(login="release-automation", type="User"))
        assert author.is_automated
        assert not parser.resolve_author(UserPayload(login="github-actions", type="User")).is_automated


class TestCandidates:

    def test_pull_request_candidate(self, parser, issue_payload):
        candidate = parser.parse_candidate(issue_payload(number=42, login="alice"))

        assert candidate.number == 42
        assert candidate.is_pull_request is True
        assert candidate.author.login == "alice"
        assert candidate.author.kind is AuthorKind.HUMAN

    def test_plain_issue_candidate(self, parser, issue_payload):
        candidate = parser.parse_candidate(issue_payload(number=7, pull_request=False))
        assert candidate.is_pull_request is False

    def test_candidate_list(self, parser, issue_payload):
        candidates = parser.parse_candidates([issue_payload(number=n) for n in (1, 2, 3)])
        assert [c.number for c in candidates] == [1, 2, 3]

    @pytest.mark.parametrize("data", [{}, {'number': 'abc'}, {'number': 0}])
    def test_invalid_issue_payload(self, parser, data):
        with pytest.raises(PayloadError):
            parser.parse_candidate(data)


class TestPullRequests:

    def test_pull_request_detail(self, parser, pr_payload):
        pull = parser.parse_pull_request(
            pr_payload(number=42, base_ref="release-1.x", owner="octo-org",
                       reviewers=["bob", "carol"], teams=["core"])
        )

        assert pull.number == 42
        assert pull.base_ref == "release-1.x"
        assert pull.owner_login == "octo-org"
        assert pull.requested_reviewers == ["bob", "carol"]
        assert pull.requested_teams == ["core"]

    def test_missing_optional_sections(self, parser):
        pull = parser.parse_pull_request({'number': 5})

        assert pull.base_ref is None
        assert pull.owner_login is None
        assert pull.requested_reviewers == []
        assert pull.requested_teams == []


class TestEventsAndComments:

    def test_label_events(self, parser, event_payload, days_ago):
        events = parser.parse_label_events([
            event_payload(days_ago(3)),
            event_payload(days_ago(2), event="unlabeled"),
            event_payload(days_ago(1), event="review_requested", label=None),
        ])

        assert [e.event for e in events] == ["labeled", "unlabeled", "review_requested"]
        assert events[0].label_name == "backport-pending"
        assert events[2].label_name is None
        assert events[0].created_at == days_ago(3)
        assert events[0].created_at.tzinfo is not None

    def test_naive_timestamps_treated_as_utc(self, parser):
        events = parser.parse_label_events([
            {'event': 'labeled', 'label': {'name': 'x'}, 'created_at': '2026-01-02T03:04:05'}
        ])
        assert events[0].created_at == datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    def test_comments(self, parser, comment_payload, days_ago):
        comments = parser.parse_comments([
            comment_payload(days_ago(1)),
            comment_payload(days_ago(2), body="LGTM", login="bob", user_type="User"),
        ])

        assert comments[0].author.is_automated
        assert not comments[1].author.is_automated
        assert comments[1].body == "LGTM"

    def test_comment_with_null_body(self, parser, comment_payload, days_ago):
        data = comment_payload(days_ago(1))
        data['body'] = None
        assert parser.parse_comments([data])[0].body == ""

    def test_event_without_timestamp(self, parser):
        with pytest.raises(PayloadError):
            parser.parse_label_events([{'event': 'labeled'}])
