"""aiosmtplib を使った配信クライアント。宛先ごとに 1 通ずつ並行送信する。"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Sequence

import aiosmtplib

from cloudmail.core.errors import (
    AuthenticationError,
    CloudMailError,
    ConnectivityError,
    ProviderError,
)
from cloudmail.core.logging import log_event
from cloudmail.core.models import DeliveryReport, OutgoingMail
from cloudmail.core.settings import Settings

DEFAULT_TIMEOUT_SECONDS = 30.0

AUTH_FAILED_MESSAGE = "Email authentication failed. Please check EMAIL_USER and EMAIL_PASS."
UNREACHABLE_MESSAGE = "Email service not found. Please check your internet connection."
SEND_FAILED_MESSAGE = "Failed to send email"


@dataclass(slots=True, frozen=True)
class SmtpAccount:
    """送信元アカウントと接続先。"""

    hostname: str
    port: int
    username: str
    password: str
    use_tls: bool
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpAccount":
        return cls(
            hostname=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.email_user,
            password=settings.email_pass,
            use_tls=settings.smtp_use_tls,
        )


def map_smtp_error(exc: BaseException) -> CloudMailError:
    """aiosmtplib / ソケット例外を共通の例外体系へ変換する。"""

    if isinstance(exc, CloudMailError):
        return exc
    if isinstance(exc, aiosmtplib.SMTPAuthenticationError):
        return AuthenticationError(AUTH_FAILED_MESSAGE)
    # SMTPConnectError / SMTPServerDisconnected / SMTPTimeoutError はいずれも OSError 系
    if isinstance(exc, (OSError, asyncio.TimeoutError)):
        return ConnectivityError(UNREACHABLE_MESSAGE)
    return ProviderError(SEND_FAILED_MESSAGE)


async def verify_account(account: SmtpAccount) -> None:
    """接続とログインだけを行い、送信前に資格情報と到達性を確認する。"""

    smtp = aiosmtplib.SMTP(
        hostname=account.hostname,
        port=account.port,
        use_tls=account.use_tls,
        timeout=account.timeout,
    )
    try:
        await smtp.connect()
        await smtp.login(account.username, account.password)
    except Exception as exc:
        raise map_smtp_error(exc) from exc
    finally:
        if smtp.is_connected:
            smtp.close()


async def send_one(account: SmtpAccount, mail: OutgoingMail) -> None:
    await aiosmtplib.send(
        mail.to_email_message(),
        hostname=account.hostname,
        port=account.port,
        username=account.username,
        password=account.password,
        use_tls=account.use_tls,
        timeout=account.timeout,
    )


async def send_to_each(
    account: SmtpAccount,
    *,
    recipients: Sequence[str],
    body: str,
) -> DeliveryReport:
    """
    接続確認のあと、全宛先へ同じ件名・本文を並行送信する。

    すべての送信が完了するまで待ってから結果を判定する。1 件でも失敗すれば
    操作全体を失敗として扱う（部分成功は報告しない）。

    Args:
        account: 送信元アカウント
        recipients: 検証済みの宛先（1 件以上）
        body: プレーンテキスト本文

    Returns:
        全宛先へ送信できた場合の DeliveryReport

    Raises:
        AuthenticationError: 資格情報が拒否された場合
        ConnectivityError: サーバーへ到達できない場合
        ProviderError: それ以外の送信失敗
    """

    await verify_account(account)

    mails = [
        OutgoingMail(sender=account.username, recipient=recipient, body_text=body)
        for recipient in recipients
    ]
    results = await asyncio.gather(
        *(send_one(account, mail) for mail in mails),
        return_exceptions=True,
    )

    report = DeliveryReport()
    for mail, result in zip(mails, results):
        if isinstance(result, BaseException):
            report.failed[mail.recipient] = result
        else:
            report.delivered.append(mail.recipient)

    if report.all_delivered:
        return report

    log_event(
        "delivery_failed",
        level=logging.WARNING,
        delivered=report.delivered,
        failed={recipient: repr(exc) for recipient, exc in report.failed.items()},
    )
    first_error = next(iter(report.failed.values()))
    mapped = map_smtp_error(first_error)
    mapped.failed_recipients = tuple(report.failed)
    raise mapped from first_error
