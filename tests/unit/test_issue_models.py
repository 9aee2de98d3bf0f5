"""
Unit tests for domain data models.
"""

import pytest
from datetime import datetime, timezone

from backport_reminder.models import (
    Author, AuthorKind, Candidate, Comment, LabelEvent, ReminderDecision, SkipReason,
)


WHEN = datetime(2026, 1, 1, tzinfo=timezone.utc)


class TestIssueModels:

    def test_candidate_number_must_be_positive(self):
        with pytest.raises(ValueError):
            Candidate(number=0, author=None, is_pull_request=True)

    def test_author_mention(self):
        assert Author("alice").mention == "@alice"
        assert Author("alice").is_automated is False
        assert Author("ci[bot]", AuthorKind.AUTOMATED).is_automated is True

    def test_label_applied_requires_event_and_name(self):
        assert LabelEvent("labeled", "backport-pending", WHEN).is_label_applied("backport-pending")
        assert not LabelEvent("unlabeled", "backport-pending", WHEN).is_label_applied("backport-pending")
        assert not LabelEvent("labeled", "bug", WHEN).is_label_applied("backport-pending")
        assert not LabelEvent("labeled", None, WHEN).is_label_applied("backport-pending")

    def test_reminder_comment_detection(self):
        marker = "[backport-pending-reminder]"
        bot = Author("github-actions[bot]", AuthorKind.AUTOMATED)
        human = Author("alice")

        assert Comment(bot, f"{marker}\n@alice", WHEN).is_reminder(marker)
        assert not Comment(bot, "Build passed", WHEN).is_reminder(marker)
        assert not Comment(human, f"quoting {marker}", WHEN).is_reminder(marker)
        assert not Comment(None, marker, WHEN).is_reminder(marker)


class TestReminderDecision:

    def test_skip_decision(self):
        decision = ReminderDecision.skip(3, SkipReason.BASE_MISMATCH, "base is dev, skipping (want master).")

        assert decision.due is False
        assert decision.reason is SkipReason.BASE_MISMATCH
        assert decision.describe() == "#3: base is dev, skipping (want master)."

    def test_due_decision(self):
        decision = ReminderDecision.remind(42, age_units=10)

        assert decision.due is True
        assert decision.reason is None
        assert decision.age_units == 10

    def test_inconsistent_decisions_rejected(self):
        with pytest.raises(ValueError):
            ReminderDecision(number=1, due=True, reason=SkipReason.NO_LABEL_EVENT)
        with pytest.raises(ValueError):
            ReminderDecision(number=1, due=False)
