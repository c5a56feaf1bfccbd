"""
HTTP transport for the GitHub REST API.
Performs exactly one GET per call (no retries) and reports failures as one of three tagged variants:
HttpFailure (a response arrived with a non-2xx status), NetworkFailure (no response), UnknownFailure (anything else).
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import requests

from ingest.config import ClientConfig

logger = logging.getLogger(__name__)

RATE_LIMIT_LIMIT_HEADER = 'X-RateLimit-Limit'
RATE_LIMIT_REMAINING_HEADER = 'X-RateLimit-Remaining'
RATE_LIMIT_RESET_HEADER = 'X-RateLimit-Reset'

NO_CONTENT = 204


class TransportFailure(Exception):
    """Base class for failures raised by Transport.get."""


class HttpFailure(TransportFailure):
    def __init__(self, status: int, headers: Optional[Mapping[str, Any]] = None, body: Any = None):
        super().__init__(f"HTTP {status}")
        self.status = status
        self.headers = headers or {}
        self.body = body


class NetworkFailure(TransportFailure):
    def __init__(self, text: str = ''):
        super().__init__(text or 'network error')
        self.text = text


class UnknownFailure(TransportFailure):
    def __init__(self, text: str = ''):
        super().__init__(text or 'unknown error')
        self.text = text


@dataclass(frozen=True)
class RateLimitStatus:
    limit: Optional[int] = None
    remaining: Optional[int] = None
    reset: Optional[float] = None

    @property
    def exhausted(self) -> bool:
        return self.remaining is not None and self.remaining <= 0


def header_value(headers: Optional[Mapping[str, Any]], key: str) -> Optional[Any]:
    """Case-insensitive header lookup that works for plain dicts as well as requests' header mapping."""
    if not headers:
        return None
    if key in headers:
        return headers[key]
    lowered = key.lower()
    for k, v in headers.items():
        if str(k).lower() == lowered:
            return v
    return None


def _safe_int_from_headers(headers: Optional[Mapping[str, Any]], key: str) -> Optional[int]:
    val = header_value(headers, key)
    try:
        return int(val) if val is not None else None
    except (TypeError, ValueError):
        return None


def _safe_float_from_headers(headers: Optional[Mapping[str, Any]], key: str) -> Optional[float]:
    val = header_value(headers, key)
    try:
        return float(val) if val is not None else None
    except (TypeError, ValueError):
        return None


def parse_rate_headers(headers: Optional[Mapping[str, Any]]) -> RateLimitStatus:
    return RateLimitStatus(
        limit=_safe_int_from_headers(headers, RATE_LIMIT_LIMIT_HEADER),
        remaining=_safe_int_from_headers(headers, RATE_LIMIT_REMAINING_HEADER),
        reset=_safe_float_from_headers(headers, RATE_LIMIT_RESET_HEADER),
    )


def _parse_failure_body(resp) -> Any:
    try:
        return resp.json()
    except ValueError:
        return getattr(resp, 'text', None)


class Transport:
    """Thin wrapper around a requests.Session bound to one ClientConfig."""

    def __init__(self, config: Optional[ClientConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or ClientConfig()
        self.session = session or requests.Session()
        self.headers: Dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "User-Agent": self.config.user_agent,
        }
        if self.config.token:
            self.headers["Authorization"] = f"Bearer {self.config.token}"
        self.last_rate_limit: Optional[RateLimitStatus] = None

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def url_for(self, path: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET path relative to the configured base URL and return the decoded JSON body.

        Raises HttpFailure, NetworkFailure or UnknownFailure.
        """
        url = self.url_for(path)
        logger.debug("GET %s params=%s", url, params)
        try:
            resp = self.session.get(url, headers=self.headers, params=params or {}, timeout=self.config.timeout)
        except (requests.ConnectionError, requests.Timeout) as ex:
            raise NetworkFailure(str(ex)) from ex
        except requests.RequestException as ex:
            raise UnknownFailure(str(ex)) from ex

        status = getattr(resp, 'status_code', 0)
        headers = getattr(resp, 'headers', None) or {}
        self.last_rate_limit = parse_rate_headers(headers)

        if not 200 <= status < 300:
            raise HttpFailure(status, headers, _parse_failure_body(resp))
        if status == NO_CONTENT:
            # e.g. contributors of an empty repository
            return None
        try:
            return resp.json()
        except ValueError as ex:
            raise UnknownFailure(f"Invalid JSON in response from {url}: {ex}") from ex


__all__ = [
    "Transport",
    "TransportFailure",
    "HttpFailure",
    "NetworkFailure",
    "UnknownFailure",
    "RateLimitStatus",
    "parse_rate_headers",
    "header_value",
]
