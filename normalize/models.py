"""
Normalized records for repository data returned by the GitHub REST API.
All records are immutable; sequences are stored as tuples.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union


class ItemState(str, Enum):
    OPEN = 'open'
    CLOSED = 'closed'


@dataclass(frozen=True)
class RepositoryOwner:
    login: str
    avatar_url: str = ''
    html_url: str = ''


@dataclass(frozen=True)
class RepositoryStats:
    name: str
    full_name: str
    description: str
    created_at: str
    updated_at: str
    pushed_at: str
    stargazers_count: int
    watchers_count: int
    forks_count: int
    open_issues_count: int
    language: Optional[str]
    owner: RepositoryOwner


@dataclass(frozen=True)
class Contributor:
    login: str
    id: int
    avatar_url: str
    html_url: str
    contributions: int


@dataclass(frozen=True)
class UserRef:
    login: str
    avatar_url: str = ''


@dataclass(frozen=True)
class Issue:
    id: int
    number: int
    title: str
    state: ItemState
    created_at: str
    closed_at: Optional[str]
    body: str
    user: UserRef
    comments: int
    # the issues endpoint also lists pull requests
    is_pull_request: bool = False


@dataclass(frozen=True)
class PullRequest:
    id: int
    number: int
    title: str
    state: ItemState
    created_at: str
    closed_at: Optional[str]
    merged_at: Optional[str]
    body: str
    user: UserRef
    comments: int = 0
    additions: int = 0
    deletions: int = 0
    changed_files: int = 0

    @property
    def merged(self) -> bool:
        return self.merged_at is not None


@dataclass(frozen=True)
class Available:
    """An optional resource that was fetched successfully."""
    items: Tuple = ()

    available = True
    reason = None


@dataclass(frozen=True)
class Unavailable:
    """An optional resource whose fetch failed; reason is the classified error."""
    reason: Exception

    available = False
    items: Tuple = field(default=(), init=False)


ResourceResult = Union[Available, Unavailable]


@dataclass(frozen=True)
class RepoDataBundle:
    """Everything fetched for one repository.

    Contributors are ordered by descending contribution count. Issues and pull requests keep the order GitHub
    returned them in; use issues_result / pull_requests_result to tell "none exist" apart from "fetch failed".
    """
    owner: str
    repo: str
    stats: RepositoryStats
    contributors: Tuple[Contributor, ...]
    issues_result: ResourceResult
    pull_requests_result: ResourceResult

    @property
    def issues(self) -> Tuple[Issue, ...]:
        return self.issues_result.items

    @property
    def pull_requests(self) -> Tuple[PullRequest, ...]:
        return self.pull_requests_result.items

    @property
    def degraded(self) -> bool:
        return not (self.issues_result.available and self.pull_requests_result.available)
