"""
telegramClient.py

Single-shot HTTP transport for the Telegram Bot API.

Every call embeds the bot token in the URL path
(``https://api.telegram.org/bot<token>/<endpoint>``), sends the body as JSON
and waits at most ``TelegramConfig.timeout_seconds``. There are no retries:
a failed call is final and surfaces as one of the errors in telegramErrors.

Basic usage:
  from telegram_multi import TelegramClient
  with TelegramClient() as client:
      client.call("POST", "sendMessage", {"chat_id": "@news", "text": "Hi"}, token)
"""

from __future__ import annotations

import typing as t
from dataclasses import dataclass, field

import requests
from loguru import logger

from telegram_multi.telegramConfig import TelegramConfig
from telegram_multi.telegramErrors import (
    ApiError,
    ConnectionRefused,
    InvalidTokenFormat,
    MissingToken,
    RequestFailed,
    Timeout,
)
from telegram_multi.telegramValidators import is_valid_token


@dataclass(frozen=True)
class OperationRequest:
    """Everything needed to issue one Bot API call."""

    method: str
    endpoint: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: dict[str, t.Any] = field(default_factory=dict)


class TelegramClient:
    """
    Stateless-per-call Telegram transport.

    - Validates the token shape before anything goes on the wire.
    - Translates timeouts, refused connections and other transport failures
      into user-facing errors.
    - Raises ApiError when Telegram answers with ``ok: false``.
    """

    def __init__(
        self,
        config: TelegramConfig | None = None,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self._cfg = config or TelegramConfig()
        self._session = session or requests.Session()

    @property
    def config(self) -> TelegramConfig:
        return self._cfg

    # ----------------------------- Public API -----------------------------

    def build_request(
        self,
        method: str,
        endpoint: str,
        body: dict[str, t.Any] | None,
        token: str | None,
    ) -> OperationRequest:
        """
        Validate the token and compose the call descriptor.

        Raises:
            MissingToken: token is empty
            InvalidTokenFormat: token does not match the configured pattern
        """
        if not token:
            raise MissingToken()
        if not is_valid_token(token, self._cfg.token_pattern):
            raise InvalidTokenFormat()

        endpoint = endpoint.lstrip("/")
        headers = {"Content-Type": "application/json", **self._cfg.session_headers}
        return OperationRequest(
            method=method.upper(),
            endpoint=endpoint,
            url=f"{self._cfg.base_url.rstrip('/')}/bot{token}/{endpoint}",
            headers=headers,
            body=dict(body or {}),
        )

    def call(
        self,
        method: str,
        endpoint: str,
        body: dict[str, t.Any] | None,
        token: str | None,
    ) -> dict[str, t.Any]:
        """
        Send one request and return the whole response envelope
        (``{"ok": true, "result": ...}``).

        Raises:
            MissingToken, InvalidTokenFormat: before any network I/O
            ApiError: Telegram answered ``ok: false``
            Timeout: no answer within the configured timeout
            ConnectionRefused: the API host refused the connection
            RequestFailed: any other transport failure or a non-JSON answer
        """
        request = self.build_request(method, endpoint, body, token)
        logger.debug(f"Making {request.method} request to {request.endpoint}")
        try:
            resp = self._session.request(
                request.method,
                request.url,
                json=request.body,
                headers=request.headers,
                timeout=self._cfg.timeout_seconds,
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"Request to {request.endpoint} timed out after {self._cfg.timeout_seconds}s")
            raise Timeout() from e
        except requests.exceptions.ConnectionError as e:
            if _is_connection_refused(e):
                logger.error(f"Connection refused while calling {request.endpoint}")
                raise ConnectionRefused() from e
            raise RequestFailed(_redact(str(e), token)) from e
        except requests.exceptions.RequestException as e:
            raise RequestFailed(_redact(str(e), token)) from e

        return self._handle_response(resp, request, token)

    def get_me(self, token: str | None) -> dict[str, t.Any]:
        """Check a token against Telegram (``getMe``)."""
        return self.call("GET", "getMe", None, token)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "TelegramClient":
        """Context manager support."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close session on exit."""
        self.close()

    # --------------------------- Internal helpers -------------------------

    def _handle_response(
        self,
        resp: requests.Response,
        request: OperationRequest,
        token: str,
    ) -> dict[str, t.Any]:
        """
        Parse the Telegram envelope. Raises ApiError on ``ok: false``.
        """
        try:
            data = resp.json()
        except ValueError as e:
            raise RequestFailed(
                _redact(f"Non-JSON response: {resp.status_code} {resp.text[:200]}", token)
            ) from e

        if not isinstance(data, dict):
            raise RequestFailed(f"Unexpected response shape: {type(data).__name__}")

        if data.get("ok"):
            result = data.get("result")
            message_id = result.get("message_id", "N/A") if isinstance(result, dict) else "N/A"
            logger.debug(f"Request to {request.endpoint} successful: {message_id}")
            return data

        error_code = data.get("error_code", resp.status_code)
        description = data.get("description") or "Unknown Telegram API error"
        logger.error(f"Telegram API error {error_code} on {request.endpoint}: {description}")
        raise ApiError(description, error_code=error_code, response=data)


def _is_connection_refused(exc: BaseException) -> bool:
    """Walk the causes requests/urllib3 wrap around a socket error."""
    seen: set[int] = set()
    stack: list[t.Any] = [exc]
    while stack:
        current = stack.pop()
        if not isinstance(current, BaseException) or id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, ConnectionRefusedError):
            return True
        stack.extend(current.args)
        stack.append(getattr(current, "reason", None))
        stack.append(current.__cause__)
        stack.append(current.__context__)
    return False


def _redact(message: str, token: str) -> str:
    return message.replace(token, "<redacted>") if token else message
