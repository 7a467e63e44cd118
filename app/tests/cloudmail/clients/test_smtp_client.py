"""配信クライアントのテスト。aiosmtplib の SMTP / send を差し替える。"""

from __future__ import annotations

import asyncio
from email.message import EmailMessage
from typing import Any

import aiosmtplib
import pytest

from cloudmail.clients import smtp_client
from cloudmail.core.errors import AuthenticationError, ConnectivityError, ProviderError

ACCOUNT = smtp_client.SmtpAccount(
    hostname="smtp.example.com",
    port=465,
    username="sender@example.com",
    password="app-password",
    use_tls=True,
)


class FakeSMTP:
    """接続確認だけを模倣する SMTP。"""

    connect_error: BaseException | None = None
    login_error: BaseException | None = None
    instances: list["FakeSMTP"] = []

    def __init__(self, **kwargs: Any) -> None:
        self.kwargs = kwargs
        self.is_connected = False
        self.logged_in_as: tuple[str, str] | None = None
        FakeSMTP.instances.append(self)

    async def connect(self) -> None:
        if FakeSMTP.connect_error is not None:
            raise FakeSMTP.connect_error
        self.is_connected = True

    async def login(self, username: str, password: str) -> None:
        if FakeSMTP.login_error is not None:
            raise FakeSMTP.login_error
        self.logged_in_as = (username, password)

    def close(self) -> None:
        self.is_connected = False


class FakeSend:
    def __init__(self, failures: dict[str, BaseException] | None = None) -> None:
        self.failures = failures or {}
        self.messages: list[EmailMessage] = []
        self.kwargs: list[dict[str, Any]] = []
        self.events: list[str] = []

    async def __call__(self, message: EmailMessage, **kwargs: Any) -> tuple[dict, str]:
        recipient = message["To"]
        self.events.append(f"start:{recipient}")
        self.messages.append(message)
        self.kwargs.append(kwargs)
        await asyncio.sleep(0)
        self.events.append(f"end:{recipient}")
        if recipient in self.failures:
            raise self.failures[recipient]
        return {}, "250 OK"


@pytest.fixture(autouse=True)
def fake_smtp(monkeypatch: pytest.MonkeyPatch) -> type[FakeSMTP]:
    FakeSMTP.connect_error = None
    FakeSMTP.login_error = None
    FakeSMTP.instances = []
    monkeypatch.setattr(aiosmtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def _install_send(monkeypatch: pytest.MonkeyPatch, fake: FakeSend) -> FakeSend:
    monkeypatch.setattr(aiosmtplib, "send", fake)
    return fake


@pytest.mark.asyncio
async def test_全宛先へ同じ本文を送る(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = _install_send(monkeypatch, FakeSend())

    report = await smtp_client.send_to_each(
        ACCOUNT, recipients=["a@b.com", "c@d.com"], body="Hello\nWorld"
    )

    assert report.all_delivered
    assert sorted(report.delivered) == ["a@b.com", "c@d.com"]
    assert FakeSMTP.instances[0].logged_in_as == ("sender@example.com", "app-password")
    assert not FakeSMTP.instances[0].is_connected

    for message in fake.messages:
        assert message["From"] == "sender@example.com"
        assert message["Subject"] == "Generated Email"
        text_part = message.get_body(preferencelist=("plain",))
        html_part = message.get_body(preferencelist=("html",))
        assert text_part is not None and text_part.get_content().rstrip("\n") == "Hello\nWorld"
        assert html_part is not None and "Hello<br>World" in html_part.get_content()
    assert fake.kwargs[0]["hostname"] == "smtp.example.com"
    assert fake.kwargs[0]["username"] == "sender@example.com"
    assert fake.kwargs[0]["use_tls"] is True


@pytest.mark.asyncio
async def test_dispatches_run_concurrently(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = _install_send(monkeypatch, FakeSend())

    await smtp_client.send_to_each(ACCOUNT, recipients=["a@b.com", "c@d.com"], body="Hi")

    assert fake.events[:2] == ["start:a@b.com", "start:c@d.com"]


@pytest.mark.asyncio
async def test_一部失敗でも全体を失敗として扱う(monkeypatch: pytest.MonkeyPatch) -> None:
    failure = aiosmtplib.SMTPRecipientsRefused([])
    fake = _install_send(monkeypatch, FakeSend(failures={"c@d.com": failure}))

    with pytest.raises(ProviderError) as exc_info:
        await smtp_client.send_to_each(ACCOUNT, recipients=["a@b.com", "c@d.com"], body="Hi")

    assert exc_info.value.message == "Failed to send email"
    assert exc_info.value.failed_recipients == ("c@d.com",)
    # 失敗した宛先以外の送信も完了まで待っている
    assert "end:a@b.com" in fake.events


@pytest.mark.asyncio
async def test_認証失敗では送信を始めない(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = _install_send(monkeypatch, FakeSend())
    FakeSMTP.login_error = aiosmtplib.SMTPAuthenticationError(535, "Bad credentials")

    with pytest.raises(AuthenticationError) as exc_info:
        await smtp_client.send_to_each(ACCOUNT, recipients=["a@b.com"], body="Hi")

    assert exc_info.value.message == smtp_client.AUTH_FAILED_MESSAGE
    assert fake.messages == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        aiosmtplib.SMTPConnectError("Error connecting to smtp.example.com"),
        aiosmtplib.SMTPConnectTimeoutError("Timed out connecting"),
        aiosmtplib.SMTPServerDisconnected("Unexpected EOF"),
        OSError("Name or service not known"),
    ],
)
async def test_unreachable_server_is_connectivity_error(
    monkeypatch: pytest.MonkeyPatch, error: BaseException
) -> None:
    fake = _install_send(monkeypatch, FakeSend())
    FakeSMTP.connect_error = error

    with pytest.raises(ConnectivityError) as exc_info:
        await smtp_client.send_to_each(ACCOUNT, recipients=["a@b.com"], body="Hi")

    assert exc_info.value.message == smtp_client.UNREACHABLE_MESSAGE
    assert fake.messages == []


@pytest.mark.asyncio
async def test_dispatch_disconnect_maps_to_connectivity(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_send(
        monkeypatch,
        FakeSend(failures={"a@b.com": aiosmtplib.SMTPServerDisconnected("gone")}),
    )

    with pytest.raises(ConnectivityError) as exc_info:
        await smtp_client.send_to_each(ACCOUNT, recipients=["a@b.com"], body="Hi")

    assert exc_info.value.failed_recipients == ("a@b.com",)


def test_from_settings(settings) -> None:
    account = smtp_client.SmtpAccount.from_settings(settings)

    assert account.hostname == "smtp.example.com"
    assert account.port == 465
    assert account.use_tls is True
    assert account.username == "sender@example.com"
