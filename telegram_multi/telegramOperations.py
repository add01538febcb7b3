"""
One function per supported Telegram action.

Each function validates its own inputs (chat id first, then the
operation-specific fields) and only then hands a body to the client, so a
rejected input never causes network I/O.
"""

from __future__ import annotations

import re
import typing as t
from dataclasses import dataclass

from loguru import logger

from telegram_multi.telegramClient import TelegramClient
from telegram_multi.telegramErrors import (
    CaptionTooLong,
    EmptyText,
    InvalidChatId,
    InvalidMessageId,
    MissingMedia,
    TextTooLong,
)
from telegram_multi.telegramValidators import is_valid_chat_id, sanitize_text

MAX_TEXT_LENGTH = 4096
MAX_CAPTION_LENGTH = 1024

# Fields computed by the operations themselves; never taken from additional_fields.
RESERVED_FIELDS = frozenset({"chat_id", "text", "message_id", "photo", "document"})

_DIGITS = re.compile(r"[0-9]+")

ChatId = t.Union[int, str]


@dataclass(frozen=True)
class OperationContext:
    """Per-record execution context: the transport and the resolved token."""

    client: TelegramClient
    token: str

    def post(self, endpoint: str, body: dict[str, t.Any]) -> dict[str, t.Any]:
        return self.client.call("POST", endpoint, body, self.token)


# ----------------------------- Operations -----------------------------

def send_message(
    ctx: OperationContext,
    chat_id: ChatId,
    text: str,
    additional_fields: t.Mapping[str, t.Any] | None = None,
) -> dict[str, t.Any]:
    body = {"chat_id": _chat_id(chat_id), "text": _message_text(text)}
    return ctx.post("sendMessage", merge_additional_fields(body, additional_fields))


def edit_message(
    ctx: OperationContext,
    chat_id: ChatId,
    message_id: t.Any,
    text: str,
    additional_fields: t.Mapping[str, t.Any] | None = None,
) -> dict[str, t.Any]:
    body = {
        "chat_id": _chat_id(chat_id),
        "message_id": _message_id(message_id),
        "text": _message_text(text),
    }
    return ctx.post("editMessageText", merge_additional_fields(body, additional_fields))


def delete_message(ctx: OperationContext, chat_id: ChatId, message_id: t.Any) -> dict[str, t.Any]:
    return ctx.post("deleteMessage", {"chat_id": _chat_id(chat_id), "message_id": _message_id(message_id)})


def send_photo(
    ctx: OperationContext,
    chat_id: ChatId,
    photo: str,
    additional_fields: t.Mapping[str, t.Any] | None = None,
) -> dict[str, t.Any]:
    """Send a photo by URL or Telegram ``file_id``."""
    return ctx.post("sendPhoto", _media_body("photo", chat_id, photo, additional_fields))


def send_document(
    ctx: OperationContext,
    chat_id: ChatId,
    document: str,
    additional_fields: t.Mapping[str, t.Any] | None = None,
) -> dict[str, t.Any]:
    """Send a document by URL or Telegram ``file_id``."""
    return ctx.post("sendDocument", _media_body("document", chat_id, document, additional_fields))


def get_chat(ctx: OperationContext, chat_id: ChatId) -> dict[str, t.Any]:
    return ctx.post("getChat", {"chat_id": _chat_id(chat_id)})


def get_chat_administrators(ctx: OperationContext, chat_id: ChatId) -> dict[str, t.Any]:
    return ctx.post("getChatAdministrators", {"chat_id": _chat_id(chat_id)})


# ---------------------------- Field merging ----------------------------

def merge_additional_fields(
    body: dict[str, t.Any],
    additional_fields: t.Mapping[str, t.Any] | None,
) -> dict[str, t.Any]:
    """
    Layer optional request modifiers onto a core body.

    Known modifiers are coerced to the type Telegram expects; unset values
    (``None``, an empty parse mode, reply-to id ``0``) are dropped. Keys in
    RESERVED_FIELDS are ignored so callers cannot replace the validated
    chat id, text, message id or media reference.
    """
    merged = dict(body)
    for key, value in (additional_fields or {}).items():
        if key in RESERVED_FIELDS:
            logger.warning(f"Ignoring additional field '{key}': it is set by the operation")
            continue
        value = _coerce_field(key, value)
        if value is None:
            continue
        merged[key] = value
    return merged


def _coerce_field(key: str, value: t.Any) -> t.Any:
    if value is None:
        return None
    if key == "parse_mode":
        return str(value) or None
    if key in ("disable_web_page_preview", "disable_notification", "protect_content"):
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)
    if key == "reply_to_message_id":
        # 0 is the workflow UI's "unset"
        if not isinstance(value, bool) and value in (0, "0", ""):
            return None
        return _message_id(value, field=key)
    if key == "caption":
        return str(value)
    return value


# ----------------------------- Validation ------------------------------

def _chat_id(chat_id: t.Any) -> ChatId:
    """Validate a chat id and return it in wire form (integral floats become int)."""
    if not is_valid_chat_id(chat_id):
        raise InvalidChatId(chat_id)
    if isinstance(chat_id, float):
        return int(chat_id)
    return chat_id


def _message_text(text: t.Any) -> str:
    sanitized = sanitize_text(text)
    if not sanitized:
        raise EmptyText()
    if len(sanitized) > MAX_TEXT_LENGTH:
        raise TextTooLong(len(sanitized), MAX_TEXT_LENGTH)
    return sanitized


def _message_id(message_id: t.Any, field: str = "message_id") -> int:
    error = InvalidMessageId() if field == "message_id" else InvalidMessageId(f"Invalid {field}: {message_id!r}")
    # bool is an int subclass but never a message id
    if isinstance(message_id, bool):
        raise error
    if isinstance(message_id, float) and message_id.is_integer():
        message_id = int(message_id)
    elif isinstance(message_id, str) and _DIGITS.fullmatch(message_id.strip()):
        message_id = int(message_id.strip())
    if not isinstance(message_id, int) or message_id <= 0:
        raise error
    return message_id


def _media_body(
    kind: str,
    chat_id: t.Any,
    media: t.Any,
    additional_fields: t.Mapping[str, t.Any] | None,
) -> dict[str, t.Any]:
    chat_id = _chat_id(chat_id)
    if not media or not isinstance(media, str) or not media.strip():
        raise MissingMedia(kind)

    body = merge_additional_fields({"chat_id": chat_id, kind: media.strip()}, additional_fields)
    if "caption" in body:
        caption = sanitize_text(body["caption"])
        if len(caption) > MAX_CAPTION_LENGTH:
            raise CaptionTooLong(kind, len(caption), MAX_CAPTION_LENGTH)
        if caption:
            body["caption"] = caption
        else:
            del body["caption"]
    return body
