"""
Telegram Multi - Telegram Bot API operations for workflow engines.

Validates each input record, builds exactly one Bot API call for it and
returns one output record per input:
- Send, edit and delete messages
- Send photos and documents by URL or file_id
- Get chat information and chat administrators
- Tokens from stored credentials, environment variables or direct input
- Optional continue-on-fail batches

Basic usage:
    from telegram_multi import TelegramMultiNode

    node = TelegramMultiNode(environ={"BOT_TOKEN": "123456789:ABC..."})
    node.execute([{"auth_method": "environment", "chat_id": "@news", "text": "Hello"}])
"""

__version__ = "0.1.0"

from .telegramConfig import TelegramConfig
from .telegramClient import OperationRequest, TelegramClient
from .telegramErrors import (
    ApiError,
    CaptionTooLong,
    ConnectionRefused,
    EmptyText,
    InvalidChatId,
    InvalidMessageId,
    InvalidTokenFormat,
    MissingMedia,
    MissingToken,
    RequestFailed,
    TelegramError,
    TelegramTransportError,
    TelegramValidationError,
    TextTooLong,
    Timeout,
    UnknownAuthMethod,
    UnknownOperation,
)
from .telegramNode import ExecutionItem, TelegramMultiNode
from .telegramOperations import (
    OperationContext,
    delete_message,
    edit_message,
    get_chat,
    get_chat_administrators,
    send_document,
    send_message,
    send_photo,
)
from .telegramValidators import is_valid_chat_id, is_valid_token, sanitize_text

__all__ = [
    "TelegramConfig",
    "TelegramClient",
    "OperationRequest",
    "TelegramMultiNode",
    "ExecutionItem",
    "OperationContext",
    "send_message",
    "edit_message",
    "delete_message",
    "send_photo",
    "send_document",
    "get_chat",
    "get_chat_administrators",
    "is_valid_token",
    "is_valid_chat_id",
    "sanitize_text",
    "TelegramError",
    "TelegramValidationError",
    "TelegramTransportError",
    "ApiError",
    "MissingToken",
    "InvalidTokenFormat",
    "InvalidChatId",
    "EmptyText",
    "TextTooLong",
    "InvalidMessageId",
    "MissingMedia",
    "CaptionTooLong",
    "UnknownAuthMethod",
    "UnknownOperation",
    "ConnectionRefused",
    "Timeout",
    "RequestFailed",
    "__version__",
]
