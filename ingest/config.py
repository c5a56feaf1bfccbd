"""
Client configuration.
Values come from (in increasing priority) built-in defaults, environment variables, an optional YAML file,
and explicit arguments. The resulting ClientConfig is handed to the client constructor and never read globally.
"""

import os
from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional

import yaml

from ingest.errors import ConfigError

DEFAULT_BASE_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "repo-story"

# checked in order; the first non-empty value wins
TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GITHUB_PERSONAL_ACCESS_TOKEN")
BASE_URL_ENV_VAR = "REPO_STORY_BASE_URL"
TIMEOUT_ENV_VAR = "REPO_STORY_TIMEOUT"

CONFIG_KEYS = ("token", "base_url", "timeout", "user_agent")


@dataclass(frozen=True)
class ClientConfig:
    token: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """Build a config from environment variables, falling back to defaults."""
        return cls(**_values_from_env(os.environ if environ is None else environ))

    def with_overrides(self, **overrides: Any) -> "ClientConfig":
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        if 'timeout' in values:
            values['timeout'] = _coerce_timeout(values['timeout'], 'override')
        if 'base_url' in values:
            values['base_url'] = str(values['base_url']).rstrip('/')
        return replace(self, **values)


def _coerce_timeout(raw: Any, source: str) -> float:
    try:
        timeout = float(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid timeout {raw!r} from {source}") from None
    if timeout <= 0:
        raise ConfigError(f"Timeout must be positive, got {timeout} from {source}")
    return timeout


def _values_from_env(environ: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for var in TOKEN_ENV_VARS:
        if environ.get(var):
            values['token'] = environ[var]
            break
    if environ.get(BASE_URL_ENV_VAR):
        values['base_url'] = environ[BASE_URL_ENV_VAR].rstrip('/')
    if environ.get(TIMEOUT_ENV_VAR):
        values['timeout'] = _coerce_timeout(environ[TIMEOUT_ENV_VAR], TIMEOUT_ENV_VAR)
    return values


def _read_yaml(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        raise ConfigError(f"Config file not found: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_config(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> ClientConfig:
    """Load a ClientConfig from an optional YAML file layered over the environment.

    Unknown keys in the file are ignored. Keys the file leaves unset fall back to the environment, then defaults.
    """
    config = ClientConfig.from_env(environ)
    if not path:
        return config
    data = _read_yaml(path)
    file_values = {k: data.get(k) for k in CONFIG_KEYS if data.get(k) not in (None, '')}
    if 'timeout' in file_values:
        file_values['timeout'] = _coerce_timeout(file_values['timeout'], path)
    if 'token' in file_values:
        file_values['token'] = str(file_values['token'])
    return config.with_overrides(**file_values)


__all__ = ["ClientConfig", "load_config", "DEFAULT_BASE_URL", "DEFAULT_TIMEOUT"]
