"""
Map transport failures onto the closed set of user-facing repository data errors.
"""

from typing import Any, Optional

from ingest.errors import (
    RepoDataError,
    NotFoundError,
    RateLimitedError,
    ForbiddenError,
    UnauthorizedError,
    UpstreamMessageError,
    UpstreamStatusError,
    NoResponseError,
    UnknownError,
)
from ingest.transport import (
    HttpFailure,
    NetworkFailure,
    UnknownFailure,
    parse_rate_headers,
)


def _body_message(body: Any) -> Optional[str]:
    if isinstance(body, dict):
        message = body.get('message')
        if message:
            return str(message)
    return None


def _classify_http(failure: HttpFailure) -> RepoDataError:
    status = failure.status
    if status == 404:
        return NotFoundError()
    if status == 403:
        # rate-limit exhaustion must be recognised before the generic 403
        rate = parse_rate_headers(failure.headers)
        if rate.remaining == 0:
            return RateLimitedError(reset_at=rate.reset)
        return ForbiddenError()
    if status == 401:
        return UnauthorizedError()
    message = _body_message(failure.body)
    if message:
        return UpstreamMessageError(status, message)
    return UpstreamStatusError(status)


def classify_failure(failure: BaseException) -> RepoDataError:
    """Return the classified error for a failed outbound call.

    Already-classified errors are returned unchanged.
    """
    if isinstance(failure, RepoDataError):
        return failure
    if isinstance(failure, HttpFailure):
        return _classify_http(failure)
    if isinstance(failure, NetworkFailure):
        return NoResponseError()
    if isinstance(failure, UnknownFailure):
        return UnknownError(failure.text or None)
    return UnknownError(str(failure) or None)


__all__ = ["classify_failure"]
