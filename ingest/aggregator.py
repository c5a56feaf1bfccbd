"""
Repository data aggregation.

Fetches the four repository resources strictly one after another, in a fixed order:
stats, contributors, issues, pull requests. The requests share one rate budget and GitHub also limits
concurrent requests per client, so do not turn these into parallel calls without revisiting that.

Stats and contributors are mandatory: a failure aborts the aggregation and the classified error propagates.
Issues and pull requests are optional: a failure is logged and recorded as Unavailable in the bundle.
"""
import logging
from typing import Callable, Optional, Sequence

from ingest.errors import RepoDataError
from ingest.github import GitHubClient
from ingest.identifiers import normalize_identifiers
from normalize.models import Available, Contributor, RepoDataBundle, ResourceResult, Unavailable

logger = logging.getLogger(__name__)


def sort_contributors(contributors: Sequence[Contributor]) -> tuple:
    """Order by descending contribution count; ties keep their original order."""
    return tuple(sorted(contributors, key=lambda c: c.contributions, reverse=True))


def _fetch_optional(label: str, fetch: Callable[[], Sequence]) -> ResourceResult:
    try:
        return Available(tuple(fetch()))
    except RepoDataError as err:
        logger.warning("Failed to fetch %s, continuing with partial data: %s", label, err.message)
        return Unavailable(err)


class RepoDataAggregator:
    """Builds a RepoDataBundle for one repository per call. Holds no per-call state.

    A client created here (none passed in) is owned by the aggregator and released by close().
    """

    def __init__(self, client: Optional[GitHubClient] = None):
        self._owns_client = client is None
        self.client = client or GitHubClient()

    def close(self):
        if self._owns_client:
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def get_repo_data(self, owner: str, repo: str) -> RepoDataBundle:
        """Fetch and assemble all data for owner/repo.

        Raises InvalidIdentifierError before any request when owner or repo is empty after normalization,
        and the classified RepoDataError when stats or contributors cannot be fetched.
        """
        clean_owner, clean_repo = normalize_identifiers(owner, repo)

        stats = self.client.get_repo_stats(clean_owner, clean_repo)
        contributors = self.client.get_contributors(clean_owner, clean_repo)

        issues = _fetch_optional('issues', lambda: self.client.get_issues(clean_owner, clean_repo))
        pull_requests = _fetch_optional('pull requests', lambda: self.client.get_pull_requests(clean_owner, clean_repo))

        return RepoDataBundle(
            owner=clean_owner,
            repo=clean_repo,
            stats=stats,
            contributors=sort_contributors(contributors),
            issues_result=issues,
            pull_requests_result=pull_requests,
        )


def get_repo_data(owner: str, repo: str, client: Optional[GitHubClient] = None) -> RepoDataBundle:
    """Convenience wrapper around RepoDataAggregator for one-off calls."""
    with RepoDataAggregator(client) as aggregator:
        return aggregator.get_repo_data(owner, repo)
