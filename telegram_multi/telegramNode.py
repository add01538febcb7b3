"""
telegramNode.py

Workflow-engine entry point: turns a batch of input records into Telegram
calls, one record at a time.

Record keys:
  auth_method         -> "credentials" (default), "environment" or "direct"
  env_token           -> env reference: NAME, $NAME or {{$env.NAME}}
  direct_token        -> token typed in directly (development only)
  resource, operation -> message/send|edit|delete, photo/send,
                         document/send, chat/get|getAdministrators
  chat_id, text, message_id, photo, document, additional_fields

Basic usage:
  node = TelegramMultiNode(credentials=lambda name, index: {"access_token": token},
                           continue_on_fail=True)
  items = node.execute([{"resource": "message", "operation": "send",
                         "chat_id": "@news", "text": "Hello"}])
"""

from __future__ import annotations

import os
import re
import typing as t
from dataclasses import dataclass

from loguru import logger

from telegram_multi import telegramOperations as ops
from telegram_multi.telegramClient import TelegramClient
from telegram_multi.telegramErrors import (
    InvalidTokenFormat,
    MissingToken,
    UnknownAuthMethod,
    UnknownOperation,
)
from telegram_multi.telegramValidators import is_valid_token

CREDENTIAL_NAME = "telegramMultiApi"
DEFAULT_ENV_TOKEN = "{{$env.BOT_TOKEN}}"

# {{$env.NAME}}, ${NAME}, $NAME or NAME
_ENV_REFERENCE = re.compile(
    r"\{\{\s*\$env\.(?P<braces>\w+)\s*\}\}|\$\{(?P<shell>\w+)\}|\$(?P<dollar>\w+)|(?P<bare>\w+)"
)

CredentialsProvider = t.Callable[[str, int], t.Mapping[str, t.Any]]


@dataclass(frozen=True)
class ExecutionItem:
    """One output record, paired with the index of the input that produced it."""

    json: dict[str, t.Any]
    paired_item: int

    @property
    def is_error(self) -> bool:
        return set(self.json) == {"error"}


class TelegramMultiNode:
    """
    Sequential dispatcher over input records.

    Every record gets exactly one ExecutionItem at its own position. With
    ``continue_on_fail`` a failing record yields ``{"error": message}``;
    without it the first failure propagates and the rest of the batch is
    not processed.
    """

    def __init__(
        self,
        client: TelegramClient | None = None,
        *,
        credentials: CredentialsProvider | None = None,
        environ: t.Mapping[str, str] | None = None,
        continue_on_fail: bool = False,
    ) -> None:
        self._client = client or TelegramClient()
        self._credentials = credentials
        self._environ = os.environ if environ is None else environ
        self.continue_on_fail = continue_on_fail

    def execute(self, items: t.Iterable[t.Mapping[str, t.Any]]) -> list[ExecutionItem]:
        results: list[ExecutionItem] = []
        for index, item in enumerate(items):
            try:
                response = self.execute_item(item, index)
            except Exception as e:
                if not self.continue_on_fail:
                    raise
                logger.warning(f"Item {index} failed: {e}")
                results.append(ExecutionItem(json={"error": str(e) or type(e).__name__}, paired_item=index))
                continue
            results.append(ExecutionItem(json=response, paired_item=index))
        return results

    def execute_item(self, item: t.Mapping[str, t.Any], index: int = 0) -> dict[str, t.Any]:
        token = self.resolve_token(item, index)
        ctx = ops.OperationContext(client=self._client, token=token)

        resource = item.get("resource", "message")
        operation = item.get("operation", _DEFAULT_OPERATIONS.get(resource))
        handler = _ROUTES.get((resource, operation))
        if handler is None:
            raise UnknownOperation(resource, operation)

        logger.debug(f"Item {index}: {resource}.{operation}")
        return handler(ctx, item)

    # ------------------------- Authentication ----------------------------

    def resolve_token(self, item: t.Mapping[str, t.Any], index: int = 0) -> str:
        """
        Obtain the bot token for one record and check its shape.

        Raises:
            UnknownAuthMethod, MissingToken, InvalidTokenFormat
        """
        auth_method = item.get("auth_method", "credentials")
        if auth_method == "credentials":
            token = self._token_from_credentials(index)
        elif auth_method == "environment":
            token = self._token_from_environment(item.get("env_token") or DEFAULT_ENV_TOKEN)
        elif auth_method == "direct":
            token = item.get("direct_token")
        else:
            raise UnknownAuthMethod(auth_method)

        if not token:
            raise MissingToken()
        if not is_valid_token(token, self._client.config.token_pattern):
            raise InvalidTokenFormat("Invalid bot token format")
        return token

    def _token_from_credentials(self, index: int) -> str | None:
        if self._credentials is None:
            raise MissingToken("No credentials configured for authentication method 'credentials'")
        credentials = self._credentials(CREDENTIAL_NAME, index) or {}
        return credentials.get("access_token") or credentials.get("accessToken")

    def _token_from_environment(self, reference: t.Any) -> str | None:
        """
        Resolve an environment reference. A value that already has the shape
        of a token is the token itself (the host expanded the reference).
        """
        if not isinstance(reference, str):
            raise MissingToken("Invalid environment variable reference")
        reference = reference.strip()
        if is_valid_token(reference, self._client.config.token_pattern):
            return reference
        match = _ENV_REFERENCE.fullmatch(reference)
        if match is None:
            # the reference may hold a mistyped token, so it is never echoed
            raise MissingToken("Invalid environment variable reference")
        name = next(group for group in match.groups() if group)
        token = self._environ.get(name)
        if not token:
            raise MissingToken(f"Environment variable {name} is not set")
        return token


# ------------------------------ Routing ---------------------------------

def _send_message(ctx: ops.OperationContext, item: t.Mapping[str, t.Any]) -> dict[str, t.Any]:
    return ops.send_message(ctx, item.get("chat_id"), item.get("text"), item.get("additional_fields"))


def _edit_message(ctx: ops.OperationContext, item: t.Mapping[str, t.Any]) -> dict[str, t.Any]:
    return ops.edit_message(
        ctx,
        item.get("chat_id"),
        item.get("message_id"),
        item.get("text"),
        item.get("additional_fields"),
    )


def _delete_message(ctx: ops.OperationContext, item: t.Mapping[str, t.Any]) -> dict[str, t.Any]:
    return ops.delete_message(ctx, item.get("chat_id"), item.get("message_id"))


def _send_photo(ctx: ops.OperationContext, item: t.Mapping[str, t.Any]) -> dict[str, t.Any]:
    return ops.send_photo(ctx, item.get("chat_id"), item.get("photo"), item.get("additional_fields"))


def _send_document(ctx: ops.OperationContext, item: t.Mapping[str, t.Any]) -> dict[str, t.Any]:
    return ops.send_document(ctx, item.get("chat_id"), item.get("document"), item.get("additional_fields"))


def _get_chat(ctx: ops.OperationContext, item: t.Mapping[str, t.Any]) -> dict[str, t.Any]:
    return ops.get_chat(ctx, item.get("chat_id"))


def _get_chat_administrators(ctx: ops.OperationContext, item: t.Mapping[str, t.Any]) -> dict[str, t.Any]:
    return ops.get_chat_administrators(ctx, item.get("chat_id"))


_ROUTES: dict[tuple[str, str], t.Callable[[ops.OperationContext, t.Mapping[str, t.Any]], dict[str, t.Any]]] = {
    ("message", "send"): _send_message,
    ("message", "edit"): _edit_message,
    ("message", "delete"): _delete_message,
    ("photo", "send"): _send_photo,
    ("document", "send"): _send_document,
    ("chat", "get"): _get_chat,
    ("chat", "getAdministrators"): _get_chat_administrators,
    ("chat", "get_administrators"): _get_chat_administrators,
}

_DEFAULT_OPERATIONS = {"message": "send", "photo": "send", "document": "send", "chat": "get"}
