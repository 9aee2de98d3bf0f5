"""
GitHub API Client

Handles GitHub API authentication, pagination, and rate limit backoff.
Provides the repository-scoped calls the reminder run needs.
"""

import time
import logging
from typing import Any, Callable, Dict, List, Optional
from datetime import datetime, timezone
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


logger = logging.getLogger(__name__)

PER_PAGE = 100


class GitHubAPIError(Exception):
    """GitHub API related errors"""
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Any] = None,
        path: Optional[str] = None,
        method: Optional[str] = None,
        body: str = "",
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data
        self.path = path
        self.method = method
        self.body = body


class RateLimitExceeded(GitHubAPIError):
    """GitHub API rate limit retry budget exhausted"""
    def __init__(
        self,
        reset_time: datetime,
        path: Optional[str] = None,
        attempts: int = 0,
        status_code: int = 403,
    ):
        super().__init__(
            f"Rate limit exceeded on {path} after {attempts} retries. Resets at {reset_time}",
            status_code=status_code,
            path=path,
            method="GET",
        )
        self.reset_time = reset_time
        self.attempts = attempts


class GitHubClient:
    """
    GitHub API client bound to a single repository.

    Provides:
    - transparent pagination of list endpoints (100 items per page)
    - sleep-and-retry on rate limit responses
    - single-object fetch and comment creation
    """

    def __init__(
        self,
        token: str,
        repository: str,
        base_url: str = "https://api.github.com",
        timeout: float = 30,
        user_agent: str = "backport-pending-reminder-script",
        rate_limit_margin: float = 1.0,
        max_rate_limit_retries: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize GitHub client.

        Args:
            token: GitHub token sent as a bearer credential
            repository: Target repository as "owner/name"
            base_url: GitHub API base URL (default: https://api.github.com)
            timeout: Per-request timeout in seconds
            user_agent: Fixed client identification header
            rate_limit_margin: Seconds added on top of the rate limit reset wait
            max_rate_limit_retries: Retry budget per request, None for unbounded
            sleep: Sleep function, replaced in tests
            clock: Epoch seconds source, replaced in tests
        """
        if not token:
            raise ValueError("GitHub token is required")
        owner, _, name = repository.partition('/')
        if not owner or not name:
            raise ValueError("Repository must be in format 'owner/repo'")

        self.token = token
        self.owner = owner
        self.repo = name
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.user_agent = user_agent
        self.rate_limit_margin = rate_limit_margin
        self.max_rate_limit_retries = max_rate_limit_retries
        self._sleep = sleep
        self._clock = clock
        self.session = self._create_session()
        self.rate_limit_remaining: Optional[int] = None
        self.rate_limit_reset: Optional[datetime] = None

    @classmethod
    def from_config(cls, config, **kwargs) -> "GitHubClient":
        """Build a client from a GitHubConfig."""
        return cls(
            token=config.token,
            repository=config.repository,
            base_url=config.api_base_url,
            timeout=config.timeout_seconds,
            user_agent=config.user_agent,
            rate_limit_margin=config.rate_limit_margin_seconds,
            max_rate_limit_retries=config.max_rate_limit_retries,
            **kwargs,
        )

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self.session.headers)

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    def _create_session(self) -> requests.Session:
        """Create requests session with connection retries and authentication."""
        session = requests.Session()

        # Only connection establishment is retried at the transport level
        retry_strategy = Retry(
            total=3,
            connect=3,
            read=0,
            status=0,
            backoff_factor=1,
            allowed_methods=frozenset(['GET']),
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({
            'Authorization': f'Bearer {self.token}',
            'Accept': 'application/vnd.github+json',
            'User-Agent': self.user_agent,
        })

        return session

    def _update_rate_limit(self, response: requests.Response) -> None:
        """Update rate limit information from response headers."""
        if 'X-RateLimit-Remaining' in response.headers:
            self.rate_limit_remaining = int(response.headers['X-RateLimit-Remaining'])

        if 'X-RateLimit-Reset' in response.headers:
            reset_timestamp = int(response.headers['X-RateLimit-Reset'])
            self.rate_limit_reset = datetime.fromtimestamp(reset_timestamp, tz=timezone.utc)

    @staticmethod
    def _is_rate_limited(response: requests.Response) -> bool:
        return (
            response.status_code in (403, 429) and
            response.headers.get('X-RateLimit-Remaining') == '0'
        )

    def _rate_limit_wait(self, response: requests.Response) -> float:
        """Seconds to wait before the rate limit window resets, plus margin."""
        reset = float(response.headers.get('X-RateLimit-Reset') or 0)
        return max(0.0, reset - self._clock()) + self.rate_limit_margin

    def _send(self, method: str, path: str, **kwargs) -> requests.Response:
        """
        Send one authenticated request.

        Raises:
            GitHubAPIError: When the transport fails
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed: {method} {path}: {e}")
            raise GitHubAPIError(f"{method} {path} failed: {e}", path=path, method=method) from e

        self._update_rate_limit(response)
        return response

    def _with_rate_limit_retry(self, send: Callable[[], requests.Response], path: str) -> requests.Response:
        """
        Repeat a request until it is not rate limited.

        The same request is re-sent after each wait, so a page is never
        skipped or fetched twice.

        Raises:
            RateLimitExceeded: When a retry budget is set and used up
        """
        attempts = 0
        while True:
            response = send()
            if not self._is_rate_limited(response):
                return response

            attempts += 1
            if self.max_rate_limit_retries is not None and attempts > self.max_rate_limit_retries:
                reset = float(response.headers.get('X-RateLimit-Reset') or 0)
                raise RateLimitExceeded(
                    datetime.fromtimestamp(reset, tz=timezone.utc),
                    path=path,
                    attempts=attempts - 1,
                    status_code=response.status_code,
                )

            wait_seconds = self._rate_limit_wait(response)
            logger.warning(f"Rate-limited. Sleeping {wait_seconds:.1f}s...")
            self._sleep(wait_seconds)

    @staticmethod
    def _raise_for_status(method: str, path: str, response: requests.Response) -> None:
        if response.ok:
            return

        text = response.text or ""
        try:
            error_data = response.json() if text else None
        except ValueError:
            error_data = None

        raise GitHubAPIError(
            f"{method} {path} failed: {response.status_code} {text}",
            status_code=response.status_code,
            response_data=error_data,
            path=path,
            method=method,
            body=text,
        )

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        response = self._with_rate_limit_retry(
            lambda: self._send('GET', path, params=params), path
        )
        self._raise_for_status('GET', path, response)
        return response

    def fetch_page(self, path: str, page: int, query: Optional[Dict[str, Any]] = None) -> List[Dict]:
        """
        Fetch a single page of a list endpoint.

        Args:
            path: API path
            page: 1-based page number
            query: Extra query parameters

        Returns:
            Items on the page; empty when the body is not a list
        """
        params = {'per_page': PER_PAGE, **(query or {}), 'page': page}
        data = self._get(path, params=params).json()
        if not isinstance(data, list):
            logger.warning(f"GET {path} page {page} returned a non-list body, stopping")
            return []
        return data

    def paginate(self, path: str, query: Optional[Dict[str, Any]] = None) -> List[Dict]:
        """
        Fetch every page of a list endpoint.

        Args:
            path: API path
            query: Extra query parameters

        Returns:
            All items in page order
        """
        results: List[Dict] = []
        page = 1

        while True:
            page_items = self.fetch_page(path, page, query)
            if not page_items:
                break

            results.extend(page_items)

            if len(page_items) < PER_PAGE:
                break

            page += 1

        logger.debug(f"GET {path}: {len(results)} items over {page} page(s)")
        return results

    def get_resource(self, path: str) -> Dict:
        """
        Fetch a single object.

        Raises:
            GitHubAPIError: For any non-success response
        """
        return self._get(path).json()

    def post_comment(self, number: int, body: str) -> Dict:
        """
        Create an issue comment. Never retried.

        Args:
            number: Issue or pull request number
            body: Comment markdown

        Returns:
            Created comment data
        """
        path = f"{self.repo_path}/issues/{number}/comments"
        response = self._send('POST', path, json={'body': body})
        self._raise_for_status('POST', path, response)
        return response.json()

    def list_open_issues_with_label(self, label: str) -> List[Dict]:
        """Open issues and pull requests carrying a label."""
        logger.info(f"Fetching open issues labeled '{label}' in {self.owner}/{self.repo}")
        return self.paginate(f"{self.repo_path}/issues", {'state': 'open', 'labels': label})

    def get_pull_request(self, number: int) -> Dict:
        return self.get_resource(f"{self.repo_path}/pulls/{number}")

    def list_issue_events(self, number: int) -> List[Dict]:
        return self.paginate(f"{self.repo_path}/issues/{number}/events")

    def list_issue_comments(self, number: int) -> List[Dict]:
        return self.paginate(f"{self.repo_path}/issues/{number}/comments")
