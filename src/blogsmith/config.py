"""Runtime settings resolved from the process environment.

Settings are resolved on every request rather than once at import time so a
rotated credential (or a patched environment in tests) is picked up without a
restart.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .errors import ConfigurationError

DEFAULT_API_URL = "https://api.deepseek.com/v1/chat/completions"
DEFAULT_MODEL = "deepseek-chat"
DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:8501",
)
DEFAULT_RELAY_URL = "http://127.0.0.1:8000"

# Fixed sampling parameters for every upstream call.
TEMPERATURE = 0.7
MAX_TOKENS = 2000


def _optional_float(env: Mapping[str, str], key: str) -> Optional[float]:
    raw = (env.get(key) or "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{key} must be positive, got {raw!r}")
    return value


def _split_csv(raw: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str]
    api_url: str = DEFAULT_API_URL
    model: str = DEFAULT_MODEL
    connect_timeout: Optional[float] = None
    read_timeout: Optional[float] = None
    cors_origins: Tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        api_key = (env.get("DEEPSEEK_API_KEY") or "").strip() or None
        origins = _split_csv(env.get("BLOGSMITH_CORS_ORIGINS") or "")
        return cls(
            api_key=api_key,
            api_url=(env.get("DEEPSEEK_API_URL") or "").strip() or DEFAULT_API_URL,
            model=(env.get("DEEPSEEK_MODEL") or "").strip() or DEFAULT_MODEL,
            connect_timeout=_optional_float(env, "BLOGSMITH_UPSTREAM_CONNECT_TIMEOUT"),
            read_timeout=_optional_float(env, "BLOGSMITH_UPSTREAM_READ_TIMEOUT"),
            cors_origins=origins or DEFAULT_CORS_ORIGINS,
            log_level=(env.get("BLOGSMITH_LOG_LEVEL") or "INFO").strip().upper(),
        )

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @property
    def timeout(self) -> Optional[Tuple[Optional[float], Optional[float]]]:
        """``requests`` timeout tuple, or ``None`` to keep transport defaults."""
        if self.connect_timeout is None and self.read_timeout is None:
            return None
        return (self.connect_timeout, self.read_timeout)

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError("Deepseek API key is not configured")
        return self.api_key


def get_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    return Settings.from_env(env)


def relay_url(env: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if env is None else env
    return ((env.get("BLOGSMITH_API_URL") or "").strip() or DEFAULT_RELAY_URL).rstrip("/")
