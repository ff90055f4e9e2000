"""Parse GitHub Actions inputs into a Config."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from ref_lock.backend import DEFAULT_API_URL, lock_ref

ACTIONS = ("acquire", "release", "status")

DEFAULT_TIMEOUT = 300
DEFAULT_POLL_INTERVAL = 10
DEFAULT_STALE_THRESHOLD = 600

_TRUE = {"1", "t", "true", "yes", "y", "on"}
_FALSE = {"0", "f", "false", "no", "n", "off"}


class ConfigError(ValueError):
    """Required input missing or invalid."""


@dataclass
class Config:
    action: str
    lock_name: str
    token: str
    repository: str
    sha: str
    timeout: int = DEFAULT_TIMEOUT
    poll_interval: int = DEFAULT_POLL_INTERVAL
    stale_threshold: int = DEFAULT_STALE_THRESHOLD
    fail_on_timeout: bool = True
    api_url: str = DEFAULT_API_URL

    @property
    def lock_ref(self) -> str:
        return lock_ref(self.lock_name)


def _int_env(env: Mapping[str, str], key: str, default: int) -> int:
    """Integer input; unset or unparseable values fall back to *default*."""
    value = env.get(key, "").strip()
    if not value:
        return default
    try:
        number = int(value)
    except ValueError:
        return default
    if number < 0:
        raise ConfigError(f"{key} must not be negative, got {number}")
    return number


def _bool_env(env: Mapping[str, str], key: str, default: bool) -> bool:
    value = env.get(key, "").strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    return default


def _required(env: Mapping[str, str], key: str, message: str) -> str:
    value = env.get(key, "").strip()
    if not value:
        raise ConfigError(message)
    return value


def parse(environ: Mapping[str, str] | None = None, **overrides: str | None) -> Config:
    """Build a Config from environment variables.

    *overrides* map variable names (e.g. ``INPUT_LOCK_NAME``) to values that
    replace the environment; None values are ignored.
    Raises ConfigError before anything touches the network.
    """
    env = dict(os.environ if environ is None else environ)
    env.update({k: v for k, v in overrides.items() if v is not None})

    action = env.get("INPUT_ACTION", "").strip()
    if action not in ACTIONS:
        raise ConfigError(f"invalid action {action!r}: must be one of {', '.join(ACTIONS)}")

    return Config(
        action=action,
        lock_name=_required(env, "INPUT_LOCK_NAME", "lock_name is required"),
        token=_required(env, "INPUT_TOKEN", "token is required"),
        repository=_required(env, "GITHUB_REPOSITORY", "GITHUB_REPOSITORY not set"),
        sha=_required(env, "GITHUB_SHA", "GITHUB_SHA not set"),
        timeout=_int_env(env, "INPUT_TIMEOUT", DEFAULT_TIMEOUT),
        poll_interval=_int_env(env, "INPUT_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
        stale_threshold=_int_env(env, "INPUT_STALE_THRESHOLD", DEFAULT_STALE_THRESHOLD),
        fail_on_timeout=_bool_env(env, "INPUT_FAIL_ON_TIMEOUT", True),
        api_url=env.get("GITHUB_API_URL", "").strip() or DEFAULT_API_URL,
    )
