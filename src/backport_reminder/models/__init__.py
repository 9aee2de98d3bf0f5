"""
Data Models

백포트 리마인더의 핵심 데이터 모델들
"""

from .issue import Author, AuthorKind, Candidate, PullRequestDetail, LabelEvent, Comment
from .decision import ReminderDecision, SkipReason

__all__ = [
    "Author",
    "AuthorKind",
    "Candidate",
    "PullRequestDetail",
    "LabelEvent",
    "Comment",
    "ReminderDecision",
    "SkipReason",
]
