"""全エンドポイント共通のレスポンススキーマ。"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """失敗時の共通エンベロープ。内部詳細は含めない。"""

    error: str = Field(..., description="利用者に表示できるエラー内容")

    model_config = ConfigDict(extra="forbid")


class HealthResponse(BaseModel):
    """死活監視レスポンス。"""

    status: str
    timestamp: datetime
