"""作成画面のフォーム状態と、生成・送信の 2 レーンの状態遷移。

各レーンは `idle -> busy -> idle` を独立に遷移する。同じレーン内での再入は
ビジーフラグで無視する。レーン間も排他で、生成中の送信・送信中の生成は
どちらも何もしない。送信対象の下書きが生成結果で置き換わらないようにする。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from cloudmail.core.errors import ValidationError
from cloudmail.shared.recipients import (
    NO_RECIPIENTS_MESSAGE,
    join_recipients,
    parse_recipients,
)
from cloudmail.ui.notifications import NotificationQueue
from cloudmail.ui.service_client import ServiceFailure, ServiceResult

_LOGGER = logging.getLogger("cloudmail.ui")

PROMPT_REQUIRED_MESSAGE = "Please enter a prompt for email generation"
DRAFT_REQUIRED_MESSAGE = "Please generate or enter email content"
GENERATED_MESSAGE = "Email generated successfully!"


class ComposeService(Protocol):
    async def generate(self, prompt: str) -> ServiceResult[str]: ...

    async def send(self, recipients: str, email_body: str) -> ServiceResult[None]: ...


@dataclass(slots=True)
class FormState:
    """画面ローカルのフォーム状態。"""

    recipients: str = ""
    prompt: str = ""
    draft: str = ""
    generating: bool = False
    sending: bool = False
    editor_visible: bool = False

    @property
    def can_generate(self) -> bool:
        return not (self.generating or self.sending)

    @property
    def can_send(self) -> bool:
        return (
            not (self.generating or self.sending)
            and bool(self.recipients.strip())
            and bool(self.draft.strip())
        )

    @property
    def prompt_editable(self) -> bool:
        return not (self.generating or self.sending)

    @property
    def recipients_editable(self) -> bool:
        return not self.sending

    @property
    def draft_editable(self) -> bool:
        return not self.sending

    def reset_fields(self) -> None:
        """入力欄を空にしてエディタを閉じる。ビジーフラグには触れない。"""

        self.recipients = ""
        self.prompt = ""
        self.draft = ""
        self.editor_visible = False


def sent_message(count: int) -> str:
    return f"Email sent successfully to {count} recipient(s)!"


class InteractionController:
    """フォーム操作を受け、オーケストレータ呼び出しと通知発行を行う。"""

    def __init__(self, service: ComposeService, notifications: NotificationQueue) -> None:
        self._service = service
        self._notifications = notifications
        self.state = FormState()

    def set_prompt(self, value: str) -> bool:
        if not self.state.prompt_editable:
            return False
        self.state.prompt = value
        return True

    def set_recipients(self, value: str) -> bool:
        if not self.state.recipients_editable:
            return False
        self.state.recipients = value
        return True

    def set_draft(self, value: str) -> bool:
        if not self.state.draft_editable:
            return False
        self.state.draft = value
        return True

    async def generate(self) -> None:
        """プロンプトから下書きを生成する。ビジー中の呼び出しは何もしない。"""

        state = self.state
        if not state.can_generate:
            return
        if not state.prompt.strip():
            self._notifications.push(PROMPT_REQUIRED_MESSAGE, "error")
            return

        state.generating = True
        try:
            result = await self._service.generate(state.prompt)
        finally:
            state.generating = False

        if isinstance(result, ServiceFailure):
            _LOGGER.warning("email generation failed: %s", result.error)
            self._notifications.push(result.error, "error")
            return

        state.draft = result.value
        # 一度表示したエディタは送信成功まで閉じない
        state.editor_visible = True
        self._notifications.push(GENERATED_MESSAGE, "success")

    async def send(self) -> None:
        """下書きを全宛先へ送信する。ビジー中の呼び出しは何もしない。"""

        state = self.state
        if state.generating or state.sending:
            return
        if not state.recipients.strip():
            self._notifications.push(NO_RECIPIENTS_MESSAGE, "error")
            return
        if not state.draft.strip():
            self._notifications.push(DRAFT_REQUIRED_MESSAGE, "error")
            return
        try:
            recipient_list = parse_recipients(state.recipients)
        except ValidationError as exc:
            self._notifications.push(exc.message, "error")
            return

        state.sending = True
        try:
            result = await self._service.send(join_recipients(recipient_list), state.draft)
        finally:
            state.sending = False

        if isinstance(result, ServiceFailure):
            _LOGGER.warning("email send failed: %s", result.error)
            self._notifications.push(result.error, "error")
            return

        self._notifications.push(sent_message(len(recipient_list)), "success")
        state.reset_fields()
