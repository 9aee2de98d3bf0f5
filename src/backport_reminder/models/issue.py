"""
Issue Data Models

라벨이 붙은 이슈/PR 및 관련 이벤트, 코멘트 데이터 모델들
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class AuthorKind(Enum):
    """작성자 종류"""
    HUMAN = "human"
    AUTOMATED = "automated"


@dataclass(frozen=True)
class Author:
    """코멘트/이슈 작성자"""
    login: str
    kind: AuthorKind = AuthorKind.HUMAN

    @property
    def is_automated(self) -> bool:
        return self.kind is AuthorKind.AUTOMATED

    @property
    def mention(self) -> str:
        return f"@{self.login}"


@dataclass(frozen=True)
class Candidate:
    """라벨 조회로 얻은 열린 이슈 또는 PR"""
    number: int
    author: Optional[Author]
    is_pull_request: bool

    def __post_init__(self):
        """데이터 검증"""
        if self.number <= 0:
            raise ValueError("Issue number must be positive")


@dataclass(frozen=True)
class PullRequestDetail:
    """PR 상세 정보"""
    number: int
    base_ref: Optional[str]
    owner_login: Optional[str]
    requested_reviewers: List[str] = field(default_factory=list)
    requested_teams: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class LabelEvent:
    """이슈 이벤트"""
    event: str
    label_name: Optional[str]
    created_at: datetime

    def is_label_applied(self, label_name: str) -> bool:
        """지정한 라벨이 붙은 이벤트인지 확인"""
        return self.event == "labeled" and self.label_name == label_name


@dataclass(frozen=True)
class Comment:
    """이슈 코멘트"""
    author: Optional[Author]
    body: str
    created_at: datetime

    def is_reminder(self, marker: str) -> bool:
        """자동화 계정이 남긴 리마인더 코멘트인지 확인"""
        return (
            self.author is not None and
            self.author.is_automated and
            marker in self.body
        )
