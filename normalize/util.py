"""
Normalization utility helpers.
Small helpers to turn raw GitHub REST payloads into normalize.models records.
Missing or null fields are filled with empty strings, zeros or None rather than raising.
"""
from typing import Dict, Any, List, Optional

from normalize.models import (
    Contributor,
    Issue,
    ItemState,
    PullRequest,
    RepositoryOwner,
    RepositoryStats,
    UserRef,
)


def _int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _str(value: Any) -> str:
    return '' if value is None else str(value)


def _opt_str(value: Any) -> Optional[str]:
    return str(value) if value else None


def _state(raw: Dict[str, Any]) -> ItemState:
    """Map a GitHub state string onto the two-valued ItemState; anything not 'open' counts as closed."""
    return ItemState.OPEN if (raw.get('state') or '').lower() == 'open' else ItemState.CLOSED


def _user_ref(raw: Any) -> UserRef:
    raw = raw if isinstance(raw, dict) else {}
    return UserRef(login=_str(raw.get('login')), avatar_url=_str(raw.get('avatar_url')))


def normalize_repository_stats(raw: Dict[str, Any]) -> RepositoryStats:
    owner = raw.get('owner') if isinstance(raw.get('owner'), dict) else {}
    return RepositoryStats(
        name=_str(raw.get('name')),
        full_name=_str(raw.get('full_name')),
        description=_str(raw.get('description')),
        created_at=_str(raw.get('created_at')),
        updated_at=_str(raw.get('updated_at')),
        pushed_at=_str(raw.get('pushed_at')),
        stargazers_count=_int(raw.get('stargazers_count')),
        watchers_count=_int(raw.get('watchers_count')),
        forks_count=_int(raw.get('forks_count')),
        open_issues_count=_int(raw.get('open_issues_count')),
        language=_opt_str(raw.get('language')),
        owner=RepositoryOwner(
            login=_str(owner.get('login')),
            avatar_url=_str(owner.get('avatar_url')),
            html_url=_str(owner.get('html_url')),
        ),
    )


def normalize_contributor(raw: Dict[str, Any]) -> Contributor:
    return Contributor(
        login=_str(raw.get('login')),
        id=_int(raw.get('id')),
        avatar_url=_str(raw.get('avatar_url')),
        html_url=_str(raw.get('html_url')),
        contributions=_int(raw.get('contributions')),
    )


def normalize_issue(raw: Dict[str, Any]) -> Issue:
    return Issue(
        id=_int(raw.get('id')),
        number=_int(raw.get('number')),
        title=_str(raw.get('title')),
        state=_state(raw),
        created_at=_str(raw.get('created_at')),
        closed_at=_opt_str(raw.get('closed_at')),
        body=_str(raw.get('body')),
        user=_user_ref(raw.get('user')),
        comments=_int(raw.get('comments')),
        is_pull_request='pull_request' in raw,
    )


def normalize_pull_request(raw: Dict[str, Any]) -> PullRequest:
    """The list endpoint omits additions/deletions/changed_files; those default to 0."""
    return PullRequest(
        id=_int(raw.get('id')),
        number=_int(raw.get('number')),
        title=_str(raw.get('title')),
        state=_state(raw),
        created_at=_str(raw.get('created_at')),
        closed_at=_opt_str(raw.get('closed_at')),
        merged_at=_opt_str(raw.get('merged_at')),
        body=_str(raw.get('body')),
        user=_user_ref(raw.get('user')),
        comments=_int(raw.get('comments')),
        additions=_int(raw.get('additions')),
        deletions=_int(raw.get('deletions')),
        changed_files=_int(raw.get('changed_files')),
    )


def _normalize_list(raw: Any, fn) -> List:
    if not isinstance(raw, list):
        return []
    return [fn(item) for item in raw if isinstance(item, dict)]


def normalize_contributors(raw: Any) -> List[Contributor]:
    return _normalize_list(raw, normalize_contributor)


def normalize_issues(raw: Any) -> List[Issue]:
    return _normalize_list(raw, normalize_issue)


def normalize_pull_requests(raw: Any) -> List[PullRequest]:
    return _normalize_list(raw, normalize_pull_request)
