#!/usr/bin/env python3
"""
Command-line front-end for TelegramMultiNode.

Examples:
   export BOT_TOKEN="your_bot_token_here"
   telegram-multi --auth-method environment --chat-id @my_channel --text "Hello"
   telegram-multi --token $BOT_TOKEN --resource chat --operation get --chat-id -1001234567890
   telegram-multi --records batch.json --continue-on-fail
   telegram-multi --token $BOT_TOKEN --check-token
"""

from __future__ import annotations

import argparse
import json
import sys
import typing as t

from loguru import logger

from telegram_multi.telegramClient import TelegramClient
from telegram_multi.telegramConfig import TelegramConfig
from telegram_multi.telegramErrors import TelegramError
from telegram_multi.telegramNode import TelegramMultiNode


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="telegram-multi", description="Run Telegram Bot API operations")
    parser.add_argument("--records", help="JSON file holding a list of input records")
    parser.add_argument(
        "--auth-method",
        choices=["credentials", "environment", "direct"],
        help="How to obtain the bot token (default: direct with --token, else environment)",
    )
    parser.add_argument("--token", help="Bot token (direct input)")
    parser.add_argument("--env-token", help="Environment reference holding the token, e.g. BOT_TOKEN")
    parser.add_argument("--resource", default="message", choices=["message", "photo", "document", "chat"])
    parser.add_argument("--operation", help="Operation for the resource (default depends on resource)")
    parser.add_argument("--chat-id", help="Numeric chat ID or @username")
    parser.add_argument("--text", help="Message text")
    parser.add_argument("--message-id", type=int, help="Message ID to edit or delete")
    parser.add_argument("--photo", help="Photo URL or file_id")
    parser.add_argument("--document", help="Document URL or file_id")
    parser.add_argument("--parse-mode", choices=["HTML", "Markdown", "MarkdownV2"])
    parser.add_argument("--caption", help="Caption for photo or document")
    parser.add_argument("--silent", action="store_true", help="Send without notification")
    parser.add_argument("--continue-on-fail", action="store_true", help="Report failed records instead of aborting")
    parser.add_argument("--check-token", action="store_true", help="Only verify the token with getMe")
    return parser


def record_from_args(args: argparse.Namespace) -> dict[str, t.Any]:
    auth_method = args.auth_method or ("direct" if args.token else "environment")
    record: dict[str, t.Any] = {"auth_method": auth_method, "resource": args.resource}
    if args.operation:
        record["operation"] = args.operation

    optional = {
        "direct_token": args.token,
        "env_token": args.env_token,
        "chat_id": args.chat_id,
        "text": args.text,
        "message_id": args.message_id,
        "photo": args.photo,
        "document": args.document,
    }
    record.update({key: value for key, value in optional.items() if value is not None})

    additional_fields: dict[str, t.Any] = {}
    if args.parse_mode:
        additional_fields["parse_mode"] = args.parse_mode
    if args.caption:
        additional_fields["caption"] = args.caption
    if args.silent:
        additional_fields["disable_notification"] = True
    if additional_fields:
        record["additional_fields"] = additional_fields
    return record


def load_records(path: str) -> list[dict[str, t.Any]]:
    with open(path, encoding="utf-8") as f:
        records = json.load(f)
    if isinstance(records, dict):
        records = [records]
    if not isinstance(records, list):
        raise ValueError(f"{path} must contain a JSON object or a list of objects")
    return records


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    client = TelegramClient(TelegramConfig.from_env())

    with client:
        node = TelegramMultiNode(client, continue_on_fail=args.continue_on_fail)
        try:
            if args.check_token:
                token = node.resolve_token(record_from_args(args))
                response = client.get_me(token)
                logger.info(f"Token is valid for @{response['result'].get('username', '?')}")
                print(json.dumps(response, ensure_ascii=False, indent=2))
                return 0

            records = load_records(args.records) if args.records else [record_from_args(args)]
            logger.info(f"Processing {len(records)} record(s)")
            items = node.execute(records)
        except TelegramError as e:
            logger.error(f"{type(e).__name__}: {e}")
            return 1
        except (OSError, ValueError) as e:
            logger.error(f"Could not read records: {e}")
            return 1

    failed = sum(1 for item in items if item.is_error)
    if failed:
        logger.warning(f"{failed} of {len(items)} record(s) failed")
    print(json.dumps([item.json for item in items], ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
