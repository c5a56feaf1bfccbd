"""
GitHub repository client: one method per repository resource.
Each call normalizes the owner/repo pair, makes exactly one request (first page only, no retries) and raises a
classified ingest.errors.RepoDataError on failure.
"""
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from ingest.classify import classify_failure
from ingest.config import ClientConfig
from ingest.errors import UnknownError
from ingest.identifiers import normalize_identifiers
from ingest.transport import Transport, TransportFailure, RateLimitStatus
from normalize.models import Contributor, Issue, PullRequest, RepositoryStats
from normalize.util import (
    normalize_contributors,
    normalize_issues,
    normalize_pull_requests,
    normalize_repository_stats,
)

logger = logging.getLogger(__name__)

CONTRIBUTORS_PER_PAGE = 100
ISSUES_PER_PAGE = 100
# kept low to stay well under the unauthenticated rate budget
PULL_REQUESTS_PER_PAGE = 30


class GitHubClient:
    """Simple GitHub client to fetch repository stats, contributors, issues and pull requests."""

    def __init__(self, config: Optional[ClientConfig] = None, transport: Optional[Transport] = None):
        self.config = config or (transport.config if transport else ClientConfig())
        self.transport = transport or Transport(self.config)

    @property
    def last_rate_limit(self) -> Optional[RateLimitStatus]:
        """Rate budget reported by the most recent response, if any."""
        return self.transport.last_rate_limit

    def close(self):
        self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _repo_path(self, owner: str, repo: str, suffix: str = '') -> str:
        clean_owner, clean_repo = normalize_identifiers(owner, repo)
        return f"/repos/{quote(clean_owner, safe='')}/{quote(clean_repo, safe='')}{suffix}"

    def _fetch(self, action: str, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            return self.transport.get(path, params=params)
        except TransportFailure as ex:
            err = classify_failure(ex)
            logger.error("Error fetching %s (%s): %s", action, path, err.message)
            raise err from ex

    def _fetch_list(self, action: str, path: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        data = self._fetch(action, path, params)
        if data is None:
            # 204 No Content, e.g. contributors of an empty repository
            return []
        if not isinstance(data, list):
            err = UnknownError(f"Unexpected {action} payload from {path}")
            logger.error("Error fetching %s (%s): %s", action, path, err.message)
            raise err
        return data

    def get_repo_stats(self, owner: str, repo: str) -> RepositoryStats:
        path = self._repo_path(owner, repo)
        data = self._fetch('repository stats', path)
        if not isinstance(data, dict):
            raise UnknownError(f"Unexpected repository payload from {path}")
        return normalize_repository_stats(data)

    def get_contributors(self, owner: str, repo: str, per_page: int = CONTRIBUTORS_PER_PAGE) -> List[Contributor]:
        """Return the first page of contributors as GitHub ordered them."""
        path = self._repo_path(owner, repo, '/contributors')
        return normalize_contributors(self._fetch_list('contributors', path, {'per_page': per_page}))

    def get_issues(self, owner: str, repo: str, per_page: int = ISSUES_PER_PAGE) -> List[Issue]:
        path = self._repo_path(owner, repo, '/issues')
        return normalize_issues(self._fetch_list('issues', path, {'state': 'all', 'per_page': per_page}))

    def get_pull_requests(self, owner: str, repo: str, per_page: int = PULL_REQUESTS_PER_PAGE) -> List[PullRequest]:
        """Return the first page of pull requests from the list endpoint.

        The list endpoint does not report additions/deletions/changed_files, so those counters are 0.
        """
        path = self._repo_path(owner, repo, '/pulls')
        return normalize_pull_requests(self._fetch_list('pull requests', path, {'state': 'all', 'per_page': per_page}))
