"""Unit tests for the per-action operation functions."""

import pytest

from telegram_multi import telegramOperations as ops
from telegram_multi.telegramErrors import (
    ApiError,
    CaptionTooLong,
    EmptyText,
    InvalidChatId,
    InvalidMessageId,
    MissingMedia,
    TextTooLong,
)

from conftest import make_response, sent_body, sent_url


class TestSendMessage:

    def test_end_to_end(self, ctx, session):
        response = ops.send_message(ctx, "@validchannel", "Hello")

        assert response == {"ok": True, "result": {"message_id": 1}}
        assert session.request.call_args.args[0] == "POST"
        assert sent_url(session).endswith("/sendMessage")
        assert sent_body(session) == {"chat_id": "@validchannel", "text": "Hello"}

    def test_invalid_chat_never_hits_transport(self, ctx, session):
        with pytest.raises(InvalidChatId, match="not a chat"):
            ops.send_message(ctx, "not a chat", "Hello")
        session.request.assert_not_called()

    def test_api_error(self, ctx, session):
        session.request.return_value = make_response(
            {"ok": False, "error_code": 400, "description": "chat not found"}, status_code=400
        )

        with pytest.raises(ApiError, match="chat not found"):
            ops.send_message(ctx, -1001234567890, "Hello")

    def test_text_is_sanitized(self, ctx, session):
        ops.send_message(ctx, 42, "  <b>hi</b>  ")
        assert sent_body(session)["text"] == "&lt;b&gt;hi&lt;/b&gt;"

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_text(self, ctx, session, text):
        with pytest.raises(EmptyText):
            ops.send_message(ctx, 42, text)
        session.request.assert_not_called()

    def test_text_at_limit(self, ctx, session):
        ops.send_message(ctx, 42, "a" * 4096)
        assert len(sent_body(session)["text"]) == 4096

    def test_text_over_limit(self, ctx, session):
        with pytest.raises(TextTooLong) as exc_info:
            ops.send_message(ctx, 42, "a" * 4097)
        assert exc_info.value.length == 4097
        session.request.assert_not_called()

    def test_limit_applies_after_escaping(self, ctx, session):
        # 1000 "&" become 5000 characters of "&amp;"
        with pytest.raises(TextTooLong):
            ops.send_message(ctx, 42, "&" * 1000)

    def test_additional_fields_are_merged(self, ctx, session):
        ops.send_message(ctx, 42, "Hello", {
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
            "disable_notification": "true",
            "reply_to_message_id": "7",
        })

        assert sent_body(session) == {
            "chat_id": 42,
            "text": "Hello",
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
            "disable_notification": True,
            "reply_to_message_id": 7,
        }

    def test_unset_additional_fields_are_dropped(self, ctx, session):
        ops.send_message(ctx, 42, "Hello", {"parse_mode": "", "reply_to_message_id": 0, "caption": None})
        assert sent_body(session) == {"chat_id": 42, "text": "Hello"}

    def test_reserved_fields_cannot_be_overridden(self, ctx, session):
        ops.send_message(ctx, 42, "Hello", {"chat_id": "@elsewhere", "text": "spoofed", "parse_mode": "HTML"})
        assert sent_body(session) == {"chat_id": 42, "text": "Hello", "parse_mode": "HTML"}

    def test_unknown_fields_pass_verbatim(self, ctx, session):
        ops.send_message(ctx, 42, "Hello", {"message_thread_id": 5})
        assert sent_body(session)["message_thread_id"] == 5

    @pytest.mark.parametrize("reply_to", ["abc", 1.9, True, -3, "²"])
    def test_bad_reply_to_message_id(self, ctx, session, reply_to):
        with pytest.raises(InvalidMessageId, match="reply_to_message_id"):
            ops.send_message(ctx, 42, "Hello", {"reply_to_message_id": reply_to})
        session.request.assert_not_called()

    @pytest.mark.parametrize("reply_to", [0, "0", 0.0])
    def test_zero_reply_to_message_id_is_unset(self, ctx, session, reply_to):
        ops.send_message(ctx, 42, "Hello", {"reply_to_message_id": reply_to})
        assert "reply_to_message_id" not in sent_body(session)

    def test_integral_float_reply_to_message_id(self, ctx, session):
        ops.send_message(ctx, 42, "Hello", {"reply_to_message_id": 12.0})
        assert sent_body(session)["reply_to_message_id"] == 12
        assert type(sent_body(session)["reply_to_message_id"]) is int


class TestEditAndDeleteMessage:

    def test_edit_message(self, ctx, session):
        ops.edit_message(ctx, "@validchannel", 10, "Updated", {"parse_mode": "MarkdownV2"})

        assert sent_url(session).endswith("/editMessageText")
        assert sent_body(session) == {
            "chat_id": "@validchannel",
            "message_id": 10,
            "text": "Updated",
            "parse_mode": "MarkdownV2",
        }

    def test_edit_validates_text(self, ctx, session):
        with pytest.raises(EmptyText):
            ops.edit_message(ctx, 42, 10, "")
        session.request.assert_not_called()

    def test_delete_message(self, ctx, session):
        ops.delete_message(ctx, -100123, "10")

        assert sent_url(session).endswith("/deleteMessage")
        assert sent_body(session) == {"chat_id": -100123, "message_id": 10}

    @pytest.mark.parametrize("message_id", [None, 0, -1, "", "abc", True, 1.5, "²", "١٢"])
    def test_invalid_message_id(self, ctx, session, message_id):
        with pytest.raises(InvalidMessageId):
            ops.delete_message(ctx, 42, message_id)
        with pytest.raises(InvalidMessageId):
            ops.edit_message(ctx, 42, message_id, "Hello")
        session.request.assert_not_called()

    def test_chat_id_checked_before_message_id(self, ctx):
        with pytest.raises(InvalidChatId):
            ops.delete_message(ctx, "@ab", None)


class TestSendMedia:

    def test_send_photo(self, ctx, session):
        ops.send_photo(ctx, 42, "https://example.com/image.jpg", {"caption": "  A <cat>  "})

        assert sent_url(session).endswith("/sendPhoto")
        assert sent_body(session) == {
            "chat_id": 42,
            "photo": "https://example.com/image.jpg",
            "caption": "A &lt;cat&gt;",
        }

    def test_send_document(self, ctx, session):
        ops.send_document(ctx, "@validchannel", "BQACAgIAAxkBAAIB", {"disable_notification": True})

        assert sent_url(session).endswith("/sendDocument")
        assert sent_body(session) == {
            "chat_id": "@validchannel",
            "document": "BQACAgIAAxkBAAIB",
            "disable_notification": True,
        }

    @pytest.mark.parametrize("send, kind", [(ops.send_photo, "Photo"), (ops.send_document, "Document")])
    @pytest.mark.parametrize("media", [None, "", "   "])
    def test_missing_media(self, ctx, session, send, kind, media):
        with pytest.raises(MissingMedia, match=kind):
            send(ctx, 42, media)
        session.request.assert_not_called()

    @pytest.mark.parametrize("send", [ops.send_photo, ops.send_document])
    def test_caption_at_limit(self, ctx, session, send):
        send(ctx, 42, "file_id", {"caption": "c" * 1024})
        assert len(sent_body(session)["caption"]) == 1024

    @pytest.mark.parametrize("send", [ops.send_photo, ops.send_document])
    def test_caption_over_limit(self, ctx, session, send):
        with pytest.raises(CaptionTooLong) as exc_info:
            send(ctx, 42, "file_id", {"caption": "c" * 1025})
        assert exc_info.value.length == 1025
        session.request.assert_not_called()

    def test_blank_caption_is_dropped(self, ctx, session):
        ops.send_photo(ctx, 42, "file_id", {"caption": "   "})
        assert "caption" not in sent_body(session)

    def test_media_invalid_chat(self, ctx, session):
        with pytest.raises(InvalidChatId):
            ops.send_photo(ctx, "nope", "file_id")
        session.request.assert_not_called()


class TestChatOperations:

    def test_get_chat(self, ctx, session):
        session.request.return_value = make_response({"ok": True, "result": {"id": -100123, "type": "supergroup"}})

        response = ops.get_chat(ctx, "-100123")

        assert response["result"]["type"] == "supergroup"
        assert sent_url(session).endswith("/getChat")
        assert sent_body(session) == {"chat_id": "-100123"}

    def test_get_chat_administrators(self, ctx, session):
        session.request.return_value = make_response({"ok": True, "result": [{"status": "creator"}]})

        response = ops.get_chat_administrators(ctx, "@validchannel")

        assert response["result"] == [{"status": "creator"}]
        assert sent_url(session).endswith("/getChatAdministrators")
        assert sent_body(session) == {"chat_id": "@validchannel"}

    @pytest.mark.parametrize("call", [
        lambda ctx: ops.send_message(ctx, 42.0, "Hi"),
        lambda ctx: ops.edit_message(ctx, 42.0, 1, "Hi"),
        lambda ctx: ops.delete_message(ctx, 42.0, 1),
        lambda ctx: ops.send_photo(ctx, 42.0, "file_id"),
        lambda ctx: ops.send_document(ctx, 42.0, "file_id"),
        lambda ctx: ops.get_chat(ctx, 42.0),
        lambda ctx: ops.get_chat_administrators(ctx, 42.0),
    ])
    def test_integral_float_chat_id_sent_as_int(self, ctx, session, call):
        call(ctx)

        chat_id = sent_body(session)["chat_id"]
        assert chat_id == 42
        assert type(chat_id) is int

    @pytest.mark.parametrize("operation", [ops.get_chat, ops.get_chat_administrators])
    def test_invalid_chat(self, ctx, session, operation):
        with pytest.raises(InvalidChatId):
            operation(ctx, "@x")
        session.request.assert_not_called()
