"""
REST Payload Models

GitHub REST API 응답 검증용 pydantic 모델들
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, field_validator


class UserPayload(BaseModel):
    """API 응답의 user 객체"""
    login: Optional[str] = None
    type: Optional[str] = None


class LabelPayload(BaseModel):
    """API 응답의 label 객체"""
    name: Optional[str] = None


class TeamPayload(BaseModel):
    """API 응답의 team 객체"""
    slug: str


class OwnerRepoPayload(BaseModel):
    owner: Optional[UserPayload] = None


class BaseRefPayload(BaseModel):
    ref: Optional[str] = None
    repo: Optional[OwnerRepoPayload] = None


class IssuePayload(BaseModel):
    """GET /repos/{owner}/{repo}/issues 항목"""
    number: int
    user: Optional[UserPayload] = None
    pull_request: Optional[Dict[str, Any]] = None

    @field_validator('number')
    @classmethod
    def validate_number(cls, v):
        if v <= 0:
            raise ValueError('Issue number must be positive')
        return v


class PullRequestPayload(BaseModel):
    """GET /repos/{owner}/{repo}/pulls/{number} 응답"""
    number: int
    base: Optional[BaseRefPayload] = None
    requested_reviewers: Optional[List[UserPayload]] = None
    requested_teams: Optional[List[TeamPayload]] = None

    @field_validator('number')
    @classmethod
    def validate_number(cls, v):
        if v <= 0:
            raise ValueError('PR number must be positive')
        return v


class IssueEventPayload(BaseModel):
    """GET /repos/{owner}/{repo}/issues/{number}/events 항목"""
    event: str
    label: Optional[LabelPayload] = None
    created_at: datetime


class CommentPayload(BaseModel):
    """GET /repos/{owner}/{repo}/issues/{number}/comments 항목"""
    user: Optional[UserPayload] = None
    body: Optional[str] = None
    created_at: datetime
