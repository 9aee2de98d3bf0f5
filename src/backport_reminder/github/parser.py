"""
GitHub Payload Parser

Validates raw GitHub REST payloads and converts them into the
domain models used by the policy evaluator. Author kind is resolved
here, once per payload.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..models.issue import Author, AuthorKind, Candidate, Comment, LabelEvent, PullRequestDetail
from ..models.payloads import (
    CommentPayload,
    IssueEventPayload,
    IssuePayload,
    PullRequestPayload,
    UserPayload,
)


logger = logging.getLogger(__name__)

P = TypeVar('P', bound=BaseModel)


class PayloadError(ValueError):
    """A GitHub payload did not have the expected shape."""


class GitHubPayloadParser:
    """
    Parser for GitHub issue, pull request, event and comment payloads.
    """

    def __init__(self, automation_login_markers: Tuple[str, ...] = ("github-actions", "[bot]")):
        """
        Initialize payload parser.

        Args:
            automation_login_markers: Login substrings identifying automation accounts
        """
        self.automation_login_markers = automation_login_markers

    def resolve_author(self, user: Optional[UserPayload]) -> Optional[Author]:
        """Classify a user as human or automated."""
        if user is None or not user.login:
            return None

        automated = user.type == "Bot" or any(
            marker in user.login for marker in self.automation_login_markers
        )
        kind = AuthorKind.AUTOMATED if automated else AuthorKind.HUMAN
        return Author(login=user.login, kind=kind)

    def parse_candidate(self, issue_data: Dict) -> Candidate:
        payload = self._validate(IssuePayload, issue_data)
        return Candidate(
            number=payload.number,
            author=self.resolve_author(payload.user),
            is_pull_request=payload.pull_request is not None,
        )

    def parse_candidates(self, issues_data: Iterable[Dict]) -> List[Candidate]:
        candidates = [self.parse_candidate(issue) for issue in issues_data]
        logger.info(f"Parsed {len(candidates)} candidates")
        return candidates

    def parse_pull_request(self, pr_data: Dict) -> PullRequestDetail:
        payload = self._validate(PullRequestPayload, pr_data)
        base = payload.base
        owner = base.repo.owner if base and base.repo else None

        return PullRequestDetail(
            number=payload.number,
            base_ref=base.ref if base else None,
            owner_login=owner.login if owner else None,
            requested_reviewers=[
                user.login for user in (payload.requested_reviewers or []) if user.login
            ],
            requested_teams=[team.slug for team in (payload.requested_teams or [])],
        )

    def parse_label_events(self, events_data: Iterable[Dict]) -> List[LabelEvent]:
        events = []
        for event_data in events_data:
            payload = self._validate(IssueEventPayload, event_data)
            events.append(LabelEvent(
                event=payload.event,
                label_name=payload.label.name if payload.label else None,
                created_at=_as_utc(payload.created_at),
            ))
        return events

    def parse_comments(self, comments_data: Iterable[Dict]) -> List[Comment]:
        comments = []
        for comment_data in comments_data:
            payload = self._validate(CommentPayload, comment_data)
            comments.append(Comment(
                author=self.resolve_author(payload.user),
                body=payload.body or "",
                created_at=_as_utc(payload.created_at),
            ))
        return comments

    @staticmethod
    def _validate(model: Type[P], data: Dict) -> P:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise PayloadError(f"Unexpected {model.__name__} payload: {e}") from e


def _as_utc(value: datetime) -> datetime:
    """GitHub timestamps are UTC; naive values are treated as such."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
