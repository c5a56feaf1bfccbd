"""
Error taxonomy for the repository data client.
Every failure that leaves the fetcher layer is one of these classes, each carrying a fixed user-facing message.
"""

from typing import Optional

GENERIC_FALLBACK_MESSAGE = "An unexpected error occurred."


class RepoDataError(Exception):
    """Base class for classified repository data errors."""

    kind = "unknown"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(RepoDataError):
    kind = "not_found"

    def __init__(self):
        super().__init__("Repository not found. Please check the owner and repo name.")


class RateLimitedError(RepoDataError):
    kind = "rate_limited"

    def __init__(self, reset_at: Optional[float] = None):
        super().__init__("GitHub API rate limit exceeded. Please try again later.")
        self.reset_at = reset_at


class ForbiddenError(RepoDataError):
    kind = "forbidden"

    def __init__(self):
        super().__init__("Access forbidden. This repository may be private.")


class UnauthorizedError(RepoDataError):
    kind = "unauthorized"

    def __init__(self):
        super().__init__("Authentication failed. Please check your GitHub token.")


class UpstreamMessageError(RepoDataError):
    """Any other HTTP failure where GitHub supplied a message in the body."""

    kind = "upstream_message"

    def __init__(self, status: int, text: str):
        super().__init__(f"GitHub API error: {text}")
        self.status = status
        self.text = text


class UpstreamStatusError(RepoDataError):
    kind = "upstream_status"

    def __init__(self, status: int):
        super().__init__(f"GitHub API error ({status})")
        self.status = status


class NoResponseError(RepoDataError):
    kind = "no_response"

    def __init__(self):
        super().__init__("No response received from GitHub. Please check your internet connection.")


class UnknownError(RepoDataError):
    kind = "unknown"

    def __init__(self, text: Optional[str] = None):
        super().__init__(text or GENERIC_FALLBACK_MESSAGE)
        self.text = text


class InvalidIdentifierError(RepoDataError, ValueError):
    kind = "invalid_identifier"

    def __init__(self, message: str = "Repository owner or name is missing"):
        super().__init__(message)


class ConfigError(Exception):
    """Raised when client configuration cannot be loaded."""


__all__ = [
    "RepoDataError",
    "NotFoundError",
    "RateLimitedError",
    "ForbiddenError",
    "UnauthorizedError",
    "UpstreamMessageError",
    "UpstreamStatusError",
    "NoResponseError",
    "UnknownError",
    "InvalidIdentifierError",
    "ConfigError",
    "GENERIC_FALLBACK_MESSAGE",
]
