"""
GitHub Integration Layer

This module provides GitHub REST API access and payload parsing
for the reminder run.
"""

from .client import GitHubClient, GitHubAPIError, RateLimitExceeded
from .parser import GitHubPayloadParser, PayloadError

__all__ = ['GitHubClient', 'GitHubAPIError', 'RateLimitExceeded', 'GitHubPayloadParser', 'PayloadError']
