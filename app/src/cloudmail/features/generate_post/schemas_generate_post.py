"""`/generate` のリクエスト/レスポンススキーマ。"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GenerateRequest(BaseModel):
    """下書き生成リクエスト。空チェックはユースケース側で行う。"""

    prompt: str | None = Field(default=None, description="生成したいメールの説明")


class GenerateResponse(BaseModel):
    """下書き生成レスポンス"""

    email: str

    model_config = ConfigDict(extra="forbid")
