"""ユースケース間で共有するデータモデル。"""

from __future__ import annotations

from dataclasses import dataclass, field
from email.message import EmailMessage

DEFAULT_SUBJECT = "Generated Email"


@dataclass(slots=True, frozen=True)
class GenerationResult:
    """生成プロバイダから得た下書き。本文は加工せずそのまま保持する。"""

    draft_text: str


@dataclass(slots=True, frozen=True)
class OutgoingMail:
    """宛先 1 件分の送信メッセージ。"""

    sender: str
    recipient: str
    body_text: str
    subject: str = DEFAULT_SUBJECT

    @property
    def body_html(self) -> str:
        """改行を `<br>` に置き換えただけの HTML 版本文。"""

        return self.body_text.replace("\n", "<br>")

    def to_email_message(self) -> EmailMessage:
        """aiosmtplib がそのまま送れる multipart/alternative メッセージへ変換する。"""

        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = self.recipient
        message["Subject"] = self.subject
        message.set_content(self.body_text)
        message.add_alternative(self.body_html, subtype="html")
        return message


@dataclass(slots=True)
class DeliveryReport:
    """宛先ごとの送信結果の集計。"""

    delivered: list[str] = field(default_factory=list)
    failed: dict[str, BaseException] = field(default_factory=dict)

    @property
    def all_delivered(self) -> bool:
        return not self.failed
