from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_BASE_URL = "https://api.telegram.org"
# Bot ID: 8-10 digits, secret: 30-45 of [A-Za-z0-9_-]
DEFAULT_TOKEN_PATTERN = r"[0-9]{8,10}:[A-Za-z0-9_-]{30,45}"


@dataclass(frozen=True)
class TelegramConfig:
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 30.0           # per-request timeout, no retries
    token_pattern: str = DEFAULT_TOKEN_PATTERN  # full-match policy for bot tokens
    session_headers: dict[str, str] = field(default_factory=dict)  # optional static headers

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "TelegramConfig":
        """
        Build a config from environment variables, falling back to defaults.

        Recognised variables:
          TELEGRAM_API_BASE_URL     -> base_url
          TELEGRAM_TIMEOUT_SECONDS  -> timeout_seconds
          TELEGRAM_TOKEN_PATTERN    -> token_pattern
        """
        env = os.environ if environ is None else environ
        timeout = env.get("TELEGRAM_TIMEOUT_SECONDS")
        try:
            timeout_seconds = float(timeout) if timeout else 30.0
        except ValueError as e:
            raise ValueError(f"TELEGRAM_TIMEOUT_SECONDS must be a number, got {timeout!r}") from e
        return cls(
            base_url=(env.get("TELEGRAM_API_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
            timeout_seconds=timeout_seconds,
            token_pattern=env.get("TELEGRAM_TOKEN_PATTERN") or DEFAULT_TOKEN_PATTERN,
        )
