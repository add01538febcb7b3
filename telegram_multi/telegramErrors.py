from __future__ import annotations

import typing as t


class TelegramError(Exception):
    """Base class for every error raised by telegram_multi."""


# ----------------------------- Validation ------------------------------

class TelegramValidationError(TelegramError):
    """Input rejected before any request was sent."""


class MissingToken(TelegramValidationError):
    def __init__(self, message: str = "Bot token is required") -> None:
        super().__init__(message)


class InvalidTokenFormat(TelegramValidationError):
    def __init__(
        self,
        message: str = "Invalid bot token format. Expected format: 123456789:ABCdefGHIjklMNOpqrSTUvwxyz",
    ) -> None:
        super().__init__(message)


class InvalidChatId(TelegramValidationError):
    def __init__(self, chat_id: t.Any) -> None:
        super().__init__(f"Invalid chat ID: {chat_id}. Use numeric ID or @username format.")
        self.chat_id = chat_id


class EmptyText(TelegramValidationError):
    def __init__(self, message: str = "Message text cannot be empty") -> None:
        super().__init__(message)


class TextTooLong(TelegramValidationError):
    def __init__(self, length: int, limit: int) -> None:
        super().__init__(
            f"Message text is too long ({length} characters). Maximum is {limit} characters."
        )
        self.length = length
        self.limit = limit


class InvalidMessageId(TelegramValidationError):
    def __init__(self, message: str = "Valid message ID is required") -> None:
        super().__init__(message)


class MissingMedia(TelegramValidationError):
    def __init__(self, kind: str) -> None:
        super().__init__(f"{kind.capitalize()} URL or file_id is required")
        self.kind = kind


class CaptionTooLong(TelegramValidationError):
    def __init__(self, kind: str, length: int, limit: int) -> None:
        super().__init__(
            f"{kind.capitalize()} caption is too long ({length} characters). "
            f"Maximum is {limit} characters."
        )
        self.kind = kind
        self.length = length
        self.limit = limit


class UnknownAuthMethod(TelegramValidationError):
    def __init__(self, auth_method: t.Any) -> None:
        super().__init__(f"Invalid authentication method: {auth_method}")
        self.auth_method = auth_method


class UnknownOperation(TelegramValidationError):
    def __init__(self, resource: t.Any, operation: t.Any) -> None:
        super().__init__(f"Unsupported operation '{operation}' for resource '{resource}'")
        self.resource = resource
        self.operation = operation


# ------------------------------ Remote API -------------------------------

class ApiError(TelegramError):
    """Telegram answered with ``ok: false``."""

    def __init__(
        self,
        description: str,
        *,
        error_code: int | None = None,
        response: dict[str, t.Any] | None = None,
    ) -> None:
        super().__init__(f"Telegram API Error: {description}")
        self.description = description
        self.error_code = error_code
        self.response = response or {}


# ------------------------------ Transport --------------------------------

class TelegramTransportError(TelegramError):
    """The request never produced a usable Telegram response."""


class ConnectionRefused(TelegramTransportError):
    def __init__(
        self,
        message: str = "Could not connect to Telegram API. Please check your internet connection.",
    ) -> None:
        super().__init__(message)


class Timeout(TelegramTransportError):
    def __init__(self, message: str = "Request to Telegram API timed out. Please try again.") -> None:
        super().__init__(message)


class RequestFailed(TelegramTransportError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Telegram API request failed: {reason}")
        self.reason = reason
