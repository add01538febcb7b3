"""
Pure input checks shared by the client and the operations. Nothing here
touches the network.
"""

from __future__ import annotations

import html
import re
import typing as t

from telegram_multi.telegramConfig import DEFAULT_TOKEN_PATTERN

_NUMERIC_CHAT_ID = re.compile(r"-?[0-9]+")
_USERNAME_CHAT_ID = re.compile(r"@[A-Za-z][A-Za-z0-9_]{4,31}")


def is_valid_token(token: t.Any, pattern: str = DEFAULT_TOKEN_PATTERN) -> bool:
    """Check the shape of a bot token (``123456789:ABCdef...``)."""
    if not token or not isinstance(token, str):
        return False
    return re.fullmatch(pattern, token) is not None


def is_valid_chat_id(chat_id: t.Any) -> bool:
    """
    Accept a numeric chat id (int or integer string, possibly negative for
    groups) or a public ``@username``. Existence is not checked.
    """
    if isinstance(chat_id, bool):
        return False
    if isinstance(chat_id, int):
        return True
    if isinstance(chat_id, float):
        return chat_id.is_integer()
    if not isinstance(chat_id, str) or not chat_id:
        return False
    if _NUMERIC_CHAT_ID.fullmatch(chat_id):
        return True
    return _USERNAME_CHAT_ID.fullmatch(chat_id) is not None


def sanitize_text(text: t.Any) -> str:
    """
    Escape ``& < > " '`` as HTML entities and trim whitespace.

    Not idempotent: a second pass escapes the ``&`` of existing entities.
    Returns ``""`` for non-string input so length checks report empty text.
    """
    if not text or not isinstance(text, str):
        return ""
    return html.escape(text, quote=True).strip()
