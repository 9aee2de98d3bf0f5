"""
Backport Reminder Runner

Drives one reminder pass over the repository: fetches the labeled
candidates once, evaluates each in turn, and posts the reminders
that are due.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional

from .config import AppConfig
from .github.client import GitHubClient
from .github.parser import GitHubPayloadParser
from .policy.evaluator import PolicyEvaluator
from .formatting.reminder import ReminderFormatter
from .models.issue import Candidate
from .models.decision import ReminderDecision


logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Result of one reminder pass."""
    repository: str
    started_at: datetime
    candidates: int = 0
    decisions: List[ReminderDecision] = field(default_factory=list)
    posted: List[int] = field(default_factory=list)
    dry_run: bool = False

    @property
    def reminded_count(self) -> int:
        return sum(1 for d in self.decisions if d.due)

    @property
    def skipped_count(self) -> int:
        return sum(1 for d in self.decisions if not d.due)


class BackportReminder:
    """
    Backport reminder orchestrator.

    Candidates are processed strictly one after another; nothing is
    shared between them except the API client. Any API or payload
    error aborts the remaining run.
    """

    def __init__(
        self,
        config: AppConfig,
        client: Optional[GitHubClient] = None,
        parser: Optional[GitHubPayloadParser] = None,
        clock: Optional[Callable[[], datetime]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the runner.

        Args:
            config: Validated configuration
            client: API client, built from config when omitted
            parser: Payload parser, built from config when omitted
            clock: Returns the current aware datetime
            sleep: Used for the pause between posted reminders
        """
        self.config = config
        self.client = client or GitHubClient.from_config(config.github)
        self.parser = parser or GitHubPayloadParser(config.reminder.automation_login_markers)
        self.evaluator = PolicyEvaluator(config.reminder)
        self.formatter = ReminderFormatter(config.reminder, default_owner=config.github.owner)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._sleep = sleep

    def run(self) -> RunSummary:
        """
        Run one reminder pass.

        Returns:
            RunSummary with every decision taken

        Raises:
            GitHubAPIError: On any failed request
            PayloadError: On an unexpected API payload
        """
        reminder = self.config.reminder
        now = self._clock()
        summary = RunSummary(
            repository=self.config.github.repository,
            started_at=now,
            dry_run=reminder.dry_run,
        )

        logger.info(f"Repo: {self.config.github.repository}")
        logger.info(f"Label: {reminder.label_name} | Target branch: {reminder.target_branch}")
        logger.info(f"Threshold: {reminder.remind_after}d | Re-reminder: {reminder.remind_every}d")
        if reminder.dry_run:
            logger.info("Dry run: no comments will be posted")

        issues = self.client.list_open_issues_with_label(reminder.label_name)
        candidates = self.parser.parse_candidates(issues)
        summary.candidates = len(candidates)

        for candidate in candidates:
            decision = self._process(candidate, now, summary)
            summary.decisions.append(decision)

        logger.info(
            f"Done. {summary.candidates} candidates, "
            f"{summary.reminded_count} due, {summary.skipped_count} skipped."
        )
        return summary

    def _process(self, candidate: Candidate, now: datetime, summary: RunSummary) -> ReminderDecision:
        """Evaluate one candidate, fetching only what the next check needs."""
        number = candidate.number
        decision, pull = self.evaluator.decide(
            candidate,
            now,
            load_pull=lambda: self.parser.parse_pull_request(self.client.get_pull_request(number)),
            load_events=lambda: self.parser.parse_label_events(self.client.list_issue_events(number)),
            load_comments=lambda: self.parser.parse_comments(self.client.list_issue_comments(number)),
        )
        if not decision.due:
            logger.info(decision.describe())
            return decision

        body = self.formatter.format_body(candidate, pull, decision.age_units)
        if self.config.reminder.dry_run:
            logger.info(f"#{number}: would post reminder (age {decision.age_units}d):\n{body}")
            return decision

        self.client.post_comment(number, body)
        summary.posted.append(number)
        logger.info(f"#{number}: posted reminder (age {decision.age_units}d).")
        self._sleep(self.config.reminder.post_delay_seconds)
        return decision
