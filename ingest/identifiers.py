"""
Owner/repo identifier normalization.
Raw input may be a full URL, end in .git or carry a trailing slash; requests are only ever built from the cleaned pair.
"""

import re
from typing import Tuple

from ingest.errors import InvalidIdentifierError

GIT_SUFFIX = ".git"

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
_SSH_RE = re.compile(r"^[\w.-]+@([\w.-]+):")


def _strip_trailing(text: str, strip_git: bool) -> str:
    """Remove trailing slashes (and optionally a .git suffix) until the value stops changing."""
    while True:
        stripped = text.strip().rstrip("/")
        if strip_git and stripped.lower().endswith(GIT_SUFFIX):
            stripped = stripped[: -len(GIT_SUFFIX)]
        if stripped == text:
            return stripped
        text = stripped


def _last_segment(text: str) -> str:
    if "/" not in text:
        return text
    return text.rsplit("/", 1)[-1].strip()


def normalize_owner(owner: str) -> str:
    return _last_segment(_strip_trailing(owner or "", strip_git=False))


def normalize_repo(repo: str) -> str:
    # the last path segment may itself end in .git ("https://host/owner/repo.git/")
    return _strip_trailing(_last_segment(_strip_trailing(repo or "", strip_git=True)), strip_git=True)


def normalize_identifiers(owner: str, repo: str) -> Tuple[str, str]:
    """Return a clean (owner, repo) pair suitable for a /repos/{owner}/{repo} path.

    Raises InvalidIdentifierError when either component is empty after cleaning.
    """
    clean_owner = normalize_owner(owner)
    clean_repo = normalize_repo(repo)
    if not clean_owner or not clean_repo:
        raise InvalidIdentifierError()
    return clean_owner, clean_repo


def parse_repository_reference(text: str) -> Tuple[str, str]:
    """Split an "owner/repo" reference or repository URL into a normalized (owner, repo) pair.

    Accepts forms such as "octocat/Hello-World", "github.com/octocat/Hello-World",
    "https://github.com/octocat/Hello-World.git/" and "git@github.com:octocat/Hello-World.git".
    Anything after the repository segment (e.g. "/tree/main") is ignored.
    """
    value = (text or "").strip()
    value = _SCHEME_RE.sub("", value)
    value = _SSH_RE.sub(r"\1/", value)
    value = _strip_trailing(value, strip_git=True)
    segments = [s for s in value.split("/") if s.strip()]
    # drop a leading host segment ("github.com", "localhost:8080"); owner names never contain "." or ":"
    if segments and ("." in segments[0] or ":" in segments[0]):
        segments = segments[1:]
    if len(segments) < 2:
        raise InvalidIdentifierError(f"Not a repository reference: {text!r}")
    return normalize_identifiers(segments[0], segments[1])


__all__ = ["normalize_identifiers", "normalize_owner", "normalize_repo", "parse_repository_reference"]
