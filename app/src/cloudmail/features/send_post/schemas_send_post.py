"""`/send` のリクエスト/レスポンススキーマ。"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SendRequest(BaseModel):
    """送信リクエスト。宛先はカンマ区切りの生文字列のまま受け取る。"""

    recipients: str | None = None
    email_body: str | None = Field(default=None, alias="emailBody")

    model_config = ConfigDict(populate_by_name=True)


class SendResponse(BaseModel):
    """送信レスポンス"""

    success: Literal[True] = True

    model_config = ConfigDict(extra="forbid")
