"""
Unit tests for the reminder comment formatter.
"""

import pytest

from backport_reminder.config import ReminderConfig
from backport_reminder.formatting.reminder import ReminderFormatter
from backport_reminder.models.issue import Author, Candidate, PullRequestDetail


@pytest.fixture
def formatter(reminder_config):
    return ReminderFormatter(reminder_config, default_owner="octo-org")


@pytest.fixture
def candidate():
    return Candidate(number=42, author=Author("alice"), is_pull_request=True)


class TestMentions:

    def test_author_reviewers_and_teams(self, formatter, candidate):
        pull = PullRequestDetail(
            number=42, base_ref="master", owner_login="octo-org",
            requested_reviewers=["bob", "carol"], requested_teams=["core", "release"],
        )

        assert formatter.build_mentions(candidate, pull) == [
            "@alice", "@bob", "@carol", "@octo-org/core", "@octo-org/release",
        ]

    def test_duplicates_removed_in_order(self, formatter, candidate):
        pull = PullRequestDetail(
            number=42, base_ref="master", owner_login="octo-org",
            requested_reviewers=["bob", "alice", "bob"], requested_teams=["core", "core"],
        )

        assert formatter.build_mentions(candidate, pull) == ["@alice", "@bob", "@octo-org/core"]

    def test_missing_author(self, formatter):
        candidate = Candidate(number=42, author=None, is_pull_request=True)
        pull = PullRequestDetail(number=42, base_ref="master", owner_login="octo-org",
                                 requested_reviewers=["bob"])

        assert formatter.build_mentions(candidate, pull) == ["@bob"]

    def test_team_owner_falls_back_to_repository_owner(self, formatter, candidate):
        pull = PullRequestDetail(number=42, base_ref="master", owner_login=None, requested_teams=["core"])

        assert "@octo-org/core" in formatter.build_mentions(candidate, pull)

    def test_teams_dropped_without_any_owner(self, reminder_config, candidate):
        formatter = ReminderFormatter(reminder_config)
        pull = PullRequestDetail(number=42, base_ref="master", owner_login=None, requested_teams=["core"])

        assert formatter.build_mentions(candidate, pull) == ["@alice"]


class TestBody:

    def test_body_layout(self, formatter, candidate):
        pull = PullRequestDetail(number=42, base_ref="master", owner_login="octo-org",
                                 requested_reviewers=["bob"])

        body = formatter.format_body(candidate, pull, 10)

        assert body == (
            "[backport-pending-reminder]\n"
            "@alice @bob\n"
            "\n"
            "This pull request targets `master` and has the `backport-pending` label for **10 days**.\n"
            "Please review next steps for backporting (or remove the label if no longer needed).\n"
            "\n"
            "- Threshold: `7d`\n"
            "- Re-reminder interval: `7d`\n"
        )

    def test_body_uses_configuration(self, candidate):
        config = ReminderConfig(label_name="needs-backport", target_branch="main",
                                remind_after=3, remind_every=2, marker="<!-- nudge -->")
        formatter = ReminderFormatter(config)
        pull = PullRequestDetail(number=42, base_ref="main", owner_login="octo-org")

        body = formatter.format_body(candidate, pull, 4)

        assert body.startswith("<!-- nudge -->\n@alice\n")
        assert "`main`" in body
        assert "`needs-backport`" in body
        assert "**4 days**" in body
        assert "- Threshold: `3d`" in body
        assert "- Re-reminder interval: `2d`" in body
