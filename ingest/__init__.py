"""
Ingest package: GitHub repository client and the repository data aggregator.
"""

from .aggregator import RepoDataAggregator, get_repo_data
from .config import ClientConfig, load_config
from .github import GitHubClient
from .identifiers import normalize_identifiers, parse_repository_reference

__all__ = [
    "RepoDataAggregator",
    "get_repo_data",
    "ClientConfig",
    "load_config",
    "GitHubClient",
    "normalize_identifiers",
    "parse_repository_reference",
]
