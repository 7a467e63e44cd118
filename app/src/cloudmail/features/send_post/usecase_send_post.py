"""複数宛先への送信ユースケース。"""

from __future__ import annotations

from cloudmail.clients import smtp_client
from cloudmail.core.errors import ValidationError
from cloudmail.core.models import DeliveryReport
from cloudmail.core.settings import Settings
from cloudmail.shared.recipients import parse_recipients

FIELDS_REQUIRED_MESSAGE = "Recipients and emailBody are required"


async def send_email(
    recipients: str | None,
    email_body: str | None,
    *,
    settings: Settings,
) -> DeliveryReport:
    """
    入力を検証してから配信クライアントへ委譲する。

    宛先の検証はクライアント側でも行われるが、サーバー側で必ず再検証する。
    検証に失敗した場合は SMTP セッションを張らない。

    Raises:
        ValidationError: 必須項目の欠落、または形式不正な宛先がある場合
    """

    if not recipients or not recipients.strip() or not email_body or not email_body.strip():
        raise ValidationError(FIELDS_REQUIRED_MESSAGE)

    recipient_list = parse_recipients(recipients)
    account = smtp_client.SmtpAccount.from_settings(settings)
    return await smtp_client.send_to_each(account, recipients=recipient_list, body=email_body)
