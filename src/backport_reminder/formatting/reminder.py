"""
Reminder Comment Formatter

Builds the reminder comment body: marker tag, mentions, and the
elapsed-time statement with the configured thresholds.
"""

import logging
from typing import List, Optional

from ..config import ReminderConfig
from ..models.issue import Candidate, PullRequestDetail


logger = logging.getLogger(__name__)


class ReminderFormatter:
    """
    Formats backport reminder comments.

    Mentions the pull request author and every currently requested
    reviewer. Team mentions are qualified by the repository owner.
    """

    def __init__(self, config: ReminderConfig, default_owner: Optional[str] = None):
        """
        Initialize reminder formatter.

        Args:
            config: Reminder settings (marker, label, branch, thresholds)
            default_owner: Owner used for team mentions when the pull
                request payload does not carry one
        """
        self.config = config
        self.default_owner = default_owner

    def build_mentions(self, candidate: Candidate, pull: PullRequestDetail) -> List[str]:
        """Author, requested users, then requested teams; duplicates dropped."""
        mentions = []
        if candidate.author is not None:
            mentions.append(candidate.author.mention)

        mentions.extend(f"@{login}" for login in pull.requested_reviewers)

        owner = pull.owner_login or self.default_owner
        if owner:
            mentions.extend(f"@{owner}/{slug}" for slug in pull.requested_teams)
        elif pull.requested_teams:
            logger.warning(f"#{pull.number}: no repository owner known, team mentions dropped")

        # dict keeps first-seen order
        return list(dict.fromkeys(m for m in mentions if m != "@"))

    def format_body(self, candidate: Candidate, pull: PullRequestDetail, age_units: int) -> str:
        mentions = " ".join(self.build_mentions(candidate, pull))
        return (
            f"{self.config.marker}\n"
            f"{mentions}\n"
            f"\n"
            f"This pull request targets `{self.config.target_branch}` and has the "
            f"`{self.config.label_name}` label for **{age_units} days**.\n"
            f"Please review next steps for backporting (or remove the label if no longer needed).\n"
            f"\n"
            f"- Threshold: `{self.config.remind_after}d`\n"
            f"- Re-reminder interval: `{self.config.remind_every}d`\n"
        )
