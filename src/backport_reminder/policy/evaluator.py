"""
Reminder Policy Evaluator

Pure decision logic: given a candidate and its pull request detail,
label events and comments, decide whether a reminder is due. Every
check short-circuits with a skip decision.
"""

from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Optional, Tuple

from ..config import ReminderConfig
from ..models.issue import Candidate, Comment, LabelEvent, PullRequestDetail
from ..models.decision import ReminderDecision, SkipReason


def units_between(later: datetime, earlier: datetime, unit: timedelta) -> int:
    """Whole time units elapsed from ``earlier`` to ``later`` (floored)."""
    return (later - earlier) // unit


class PolicyEvaluator:
    """
    Decides per candidate whether a reminder is due.

    The checks run in a fixed order: pull request, base branch, label
    age, reminder cooldown. ``decide`` owns that order and calls the
    given loaders only when a stage needs their data; ``evaluate`` is
    the same on data fetched up front.
    """

    def __init__(self, config: ReminderConfig):
        self.config = config

    def check_candidate(self, candidate: Candidate) -> Optional[ReminderDecision]:
        if not candidate.is_pull_request:
            return ReminderDecision.skip(
                candidate.number, SkipReason.NOT_PULL_REQUEST, "not a pull request, skipping."
            )
        return None

    def check_base_branch(self, candidate: Candidate, pull: PullRequestDetail) -> Optional[ReminderDecision]:
        if pull.base_ref != self.config.target_branch:
            return ReminderDecision.skip(
                candidate.number,
                SkipReason.BASE_MISMATCH,
                f"base is {pull.base_ref}, skipping (want {self.config.target_branch}).",
            )
        return None

    def latest_label_event(self, events: Iterable[LabelEvent]) -> Optional[LabelEvent]:
        """Most recent application of the configured label."""
        labeled = [e for e in events if e.is_label_applied(self.config.label_name)]
        if not labeled:
            return None
        # max() keeps the first of equal timestamps
        return max(labeled, key=lambda e: e.created_at)

    def latest_reminder(self, comments: Iterable[Comment]) -> Optional[Comment]:
        """Most recent marker-bearing comment from an automated author."""
        reminders = [c for c in comments if c.is_reminder(self.config.marker)]
        if not reminders:
            return None
        return max(reminders, key=lambda c: c.created_at)

    def label_age(self, events: Iterable[LabelEvent], now: datetime) -> Optional[int]:
        latest = self.latest_label_event(events)
        if latest is None:
            return None
        return units_between(now, latest.created_at, self.config.time_unit)

    def check_label_age(self, candidate: Candidate, age_units: Optional[int]) -> Optional[ReminderDecision]:
        if age_units is None:
            return ReminderDecision.skip(
                candidate.number,
                SkipReason.NO_LABEL_EVENT,
                "no labeled event found (label may be pre-existing), skipping.",
            )
        if age_units < self.config.remind_after:
            return ReminderDecision.skip(
                candidate.number,
                SkipReason.LABEL_TOO_RECENT,
                f"label age {age_units}d < {self.config.remind_after}d, skipping.",
                age_units=age_units,
            )
        return None

    def units_since_reminder(self, comments: Iterable[Comment], now: datetime) -> Optional[int]:
        latest = self.latest_reminder(comments)
        if latest is None:
            return None
        return units_between(now, latest.created_at, self.config.time_unit)

    def check_cooldown(self, candidate: Candidate, age_units: int,
                       since_units: Optional[int]) -> ReminderDecision:
        if since_units is not None and since_units < self.config.remind_every:
            return ReminderDecision.skip(
                candidate.number,
                SkipReason.RECENTLY_REMINDED,
                f"reminded {since_units}d ago (< {self.config.remind_every}d), skipping.",
                age_units=age_units,
                units_since_reminder=since_units,
            )
        return ReminderDecision.remind(candidate.number, age_units, since_units)

    def decide(
        self,
        candidate: Candidate,
        now: datetime,
        load_pull: Callable[[], Optional[PullRequestDetail]],
        load_events: Callable[[], List[LabelEvent]],
        load_comments: Callable[[], List[Comment]],
    ) -> Tuple[ReminderDecision, Optional[PullRequestDetail]]:
        """
        Run the checks in order, loading each input only when reached.

        Args:
            candidate: The labeled issue or pull request
            now: Evaluation time (timezone aware)
            load_pull: Returns the pull request detail
            load_events: Returns the issue events
            load_comments: Returns the issue comments

        Returns:
            The decision and the pull request detail, if it was loaded
        """
        skip = self.check_candidate(candidate)
        if skip:
            return skip, None

        pull = load_pull()
        if pull is None:
            raise ValueError(f"Pull request detail is required for #{candidate.number}")

        skip = self.check_base_branch(candidate, pull)
        if skip:
            return skip, pull

        age_units = self.label_age(load_events(), now)
        skip = self.check_label_age(candidate, age_units)
        if skip:
            return skip, pull

        since_units = self.units_since_reminder(load_comments(), now)
        return self.check_cooldown(candidate, age_units, since_units), pull

    def evaluate(
        self,
        candidate: Candidate,
        pull: Optional[PullRequestDetail],
        events: List[LabelEvent],
        comments: List[Comment],
        now: datetime,
    ) -> ReminderDecision:
        """Run every check on data fetched up front."""
        decision, _ = self.decide(
            candidate, now, lambda: pull, lambda: events, lambda: comments
        )
        return decision
