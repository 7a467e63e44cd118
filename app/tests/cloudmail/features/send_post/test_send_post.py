"""メール送信エンドポイントのテスト。"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from cloudmail.app import create_app
from cloudmail.core.errors import AuthenticationError, ConnectivityError, ProviderError
from cloudmail.core.models import DeliveryReport

SMTP_CLIENT = "cloudmail.features.send_post.usecase_send_post.smtp_client"


def test_全宛先へ送信できたら成功を返す(settings) -> None:
    report = DeliveryReport(delivered=["a@b.com", "c@d.com"])
    mock = AsyncMock(return_value=report)
    with patch(f"{SMTP_CLIENT}.send_to_each", new=mock):
        client = TestClient(create_app(settings))

        res = client.post("/send", json={"recipients": "a@b.com, c@d.com", "emailBody": "Hi"})

    assert res.status_code == 200
    assert res.json() == {"success": True}
    args, kwargs = mock.await_args
    assert args[0].username == "sender@example.com"
    assert args[0].hostname == "smtp.example.com"
    assert kwargs == {"recipients": ("a@b.com", "c@d.com"), "body": "Hi"}


@pytest.mark.parametrize(
    "payload",
    [
        {"recipients": "x@y.com", "emailBody": ""},
        {"recipients": "x@y.com", "emailBody": "  \n "},
        {"recipients": "", "emailBody": "Hello"},
        {"emailBody": "Hello"},
        {"recipients": "x@y.com"},
        {},
    ],
)
def test_必須項目が欠けていたら400で送信しない(settings, payload: dict) -> None:
    mock = AsyncMock()
    with patch(f"{SMTP_CLIENT}.send_to_each", new=mock):
        client = TestClient(create_app(settings))

        res = client.post("/send", json=payload)

    assert res.status_code == 400
    assert res.json() == {"error": "Recipients and emailBody are required"}
    mock.assert_not_awaited()


def test_不正な宛先はSMTPセッションを張らずに400(settings) -> None:
    smtp_factory = MagicMock()
    with patch(f"{SMTP_CLIENT}.aiosmtplib.SMTP", new=smtp_factory):
        client = TestClient(create_app(settings))

        res = client.post(
            "/send", json={"recipients": "x@y.com, not-an-email", "emailBody": "Hello"}
        )

    assert res.status_code == 400
    assert res.json() == {"error": "Invalid email addresses: not-an-email"}
    smtp_factory.assert_not_called()


def test_lists_every_invalid_address(settings) -> None:
    client = TestClient(create_app(settings))

    res = client.post("/send", json={"recipients": "a@b.com, bad, c@d", "emailBody": "Hi"})

    assert res.status_code == 400
    assert res.json() == {"error": "Invalid email addresses: bad, c@d"}


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (
            AuthenticationError(
                "Email authentication failed. Please check EMAIL_USER and EMAIL_PASS."
            ),
            "Email authentication failed. Please check EMAIL_USER and EMAIL_PASS.",
        ),
        (
            ConnectivityError("Email service not found. Please check your internet connection."),
            "Email service not found. Please check your internet connection.",
        ),
        (
            ProviderError("Failed to send email", failed_recipients=["c@d.com"]),
            "Failed to send email",
        ),
    ],
)
def test_delivery_failures_map_to_error_envelope(
    settings, error: Exception, expected: str
) -> None:
    with patch(f"{SMTP_CLIENT}.send_to_each", new=AsyncMock(side_effect=error)):
        client = TestClient(create_app(settings))

        res = client.post("/send", json={"recipients": "a@b.com,c@d.com", "emailBody": "Hi"})

    assert res.status_code == 500
    assert res.json() == {"error": expected}
