"""Shared fixtures: a fake requests session and a client built on it."""

from unittest.mock import MagicMock

import pytest
import requests
from loguru import logger

from telegram_multi.telegramClient import TelegramClient
from telegram_multi.telegramOperations import OperationContext

VALID_TOKEN = "123456789:abcDEF012345678901234567890123"


def make_response(payload, status_code=200):
    """Create a mock requests.Response returning ``payload`` as JSON."""
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status_code
    resp.ok = status_code < 400
    resp.json.return_value = payload
    resp.text = str(payload)
    return resp


@pytest.fixture
def session():
    """Mock session answering every request with a successful sendMessage result."""
    mock_session = MagicMock(spec=requests.Session)
    mock_session.request.return_value = make_response({"ok": True, "result": {"message_id": 1}})
    return mock_session


@pytest.fixture
def log_messages():
    """Collect every loguru message emitted during the test."""
    messages = []
    handler_id = logger.add(lambda message: messages.append(str(message)), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def client(session):
    return TelegramClient(session=session)


@pytest.fixture
def ctx(client):
    return OperationContext(client=client, token=VALID_TOKEN)


def sent_body(session):
    """JSON body of the last request made on the mock session."""
    return session.request.call_args.kwargs["json"]


def sent_url(session):
    return session.request.call_args.args[1]
